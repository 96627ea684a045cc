"""Route compiler: resolves each endpoint declaration against the schema registry."""

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from simple_msf.errors import SchemaReferenceError
from simple_msf.log import get_logger
from simple_msf.models import EndpointDeclaration, SecurityScheme
from simple_msf.openapi.registry import RegisteredSchema, SchemaRegistry
from simple_msf.openapi.security import build_requirement

logger = get_logger(__name__)

JSON_CONTENT = "application/json"


@dataclass(frozen=True)
class CompiledRoute:
    """Resolved, serialization-ready form of one endpoint declaration."""

    path: str
    method: str
    summary: str
    description: str | None = None
    tags: tuple[str, ...] = ()
    query: RegisteredSchema | None = None
    body: dict | None = None
    responses: dict[str, dict] = field(default_factory=dict)
    security: list[dict[str, list[str]]] | None = None


def _resolve(
    registry: SchemaRegistry,
    reference_id: str,
    path: str,
    method: str,
    field_name: str,
    strict: bool,
) -> RegisteredSchema | None:
    registered = registry.lookup(reference_id)
    if registered is None:
        if strict:
            raise SchemaReferenceError(reference_id, path, method, field_name)
        logger.debug("Unresolved schema %r for %s of %s %s", reference_id, field_name, method.upper(), path)
    return registered


def compile_route(
    path: str,
    method: str,
    declaration: EndpointDeclaration,
    registry: SchemaRegistry,
    security_schemes: Sequence[SecurityScheme] | None = None,
    strict: bool = False,
) -> CompiledRoute:
    """Compile one declaration.

    In lenient mode (the default) an unresolved query or body reference is
    left out, and an unresolved response reference produces a response
    whose schema is None. In strict mode both raise ``SchemaReferenceError``.
    """
    query = None
    if declaration.query:
        query = _resolve(registry, declaration.query, path, method, "query", strict)

    body = None
    if declaration.body:
        registered = _resolve(registry, declaration.body, path, method, "body", strict)
        if registered is not None:
            body = {
                "description": declaration.summary,
                "content": {JSON_CONTENT: {"schema": registered.ref}},
            }

    responses: dict[str, dict] = {}
    for status, response in declaration.responses.items():
        registered = _resolve(registry, response.schema_ref, path, method, f"response {status}", strict)
        responses[str(status)] = {
            "description": response.description,
            "content": {JSON_CONTENT: {"schema": registered.ref if registered else None}},
        }

    return CompiledRoute(
        path=path,
        method=method,
        summary=declaration.summary,
        description=declaration.description,
        tags=tuple(declaration.tags),
        query=query,
        body=body,
        responses=responses,
        security=build_requirement(security_schemes, declaration.security),
    )


def compile_routes(
    paths: Mapping[str, Mapping[str, EndpointDeclaration]],
    registry: SchemaRegistry,
    security_schemes: Sequence[SecurityScheme] | None = None,
    strict: bool = False,
) -> list[CompiledRoute]:
    """Compile every (path, method) pair of the path table, in declaration order."""
    routes = []
    for path, endpoints in paths.items():
        for method, declaration in endpoints.items():
            routes.append(
                compile_route(path, method.lower(), declaration, registry, security_schemes, strict)
            )
    return routes
