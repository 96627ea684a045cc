"""Document assembler: registry + compiled routes + security -> OpenAPI 3.1 document."""

import copy

from simple_msf.errors import ConfigurationError
from simple_msf.models import DocumentDefinition, DocumentMetadata
from simple_msf.openapi.registry import RegisteredSchema, SchemaRegistry
from simple_msf.openapi.routes import CompiledRoute, compile_routes
from simple_msf.openapi.security import SecuritySchemeBinder, build_requirement

OPENAPI_VERSION = "3.1.0"


def query_parameters(registered: RegisteredSchema) -> list[dict]:
    """Expand an object schema into one ``in: query`` parameter per property."""
    schema, _ = registered.resolved_schema()
    required = set(schema.get("required", []))
    return [
        {
            "name": name,
            "in": "query",
            "required": name in required,
            "schema": prop,
        }
        for name, prop in schema.get("properties", {}).items()
    ]


def _operation(route: CompiledRoute) -> dict:
    operation: dict = {"summary": route.summary}
    if route.description:
        operation["description"] = route.description
    if route.tags:
        operation["tags"] = list(route.tags)
    if route.query is not None:
        parameters = query_parameters(route.query)
        if parameters:
            operation["parameters"] = parameters
    if route.body is not None:
        operation["requestBody"] = copy.deepcopy(route.body)
    operation["responses"] = copy.deepcopy(route.responses)
    if route.security is not None:
        operation["security"] = copy.deepcopy(route.security)
    return operation


def assemble_document(
    registry: SchemaRegistry,
    routes: list[CompiledRoute],
    binder: SecuritySchemeBinder,
    metadata: DocumentMetadata,
    security: list[dict[str, list[str]]] | None = None,
) -> dict:
    """Combine the compiled parts into one document. No I/O happens here."""
    document: dict = {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": metadata.title,
            "description": metadata.description,
            "version": metadata.version,
        },
    }
    if metadata.servers is not None:
        document["servers"] = [server.model_dump(exclude_none=True) for server in metadata.servers]

    paths: dict[str, dict] = {}
    for route in routes:
        paths.setdefault(route.path, {})[route.method] = _operation(route)
    document["paths"] = paths

    components: dict = {}
    schemas = registry.components()
    if schemas:
        components["schemas"] = schemas
    if len(binder):
        components["securitySchemes"] = binder.definitions()
    if components:
        document["components"] = components

    if security is not None:
        document["security"] = security
    return document


def compile_document(definition: DocumentDefinition, strict: bool = False) -> dict:
    """Build the OpenAPI document for *definition*.

    Compiling the same definition twice gives equal documents.
    """
    if definition.schemas is None:
        raise ConfigurationError('Missing "schemas" in document definition.')
    if definition.paths is None:
        raise ConfigurationError('Missing "paths" in document definition.')

    registry = SchemaRegistry.from_mapping(definition.schemas)

    binder = SecuritySchemeBinder()
    for scheme in definition.security_schemes or []:
        binder.register_scheme(scheme)

    routes = compile_routes(definition.paths, registry, definition.security_schemes, strict=strict)
    security = build_requirement(definition.security_schemes, definition.security)
    return assemble_document(registry, routes, binder, definition.metadata, security=security)
