"""Declaration models for endpoints, security schemes and document metadata.

A configuration module builds these models once. The OpenAPI compiler reads
them, and so do the request handlers.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

EndpointMethod = Literal["get", "post", "put", "patch", "delete"]

ReferenceId = str

METHODS = ("get", "post", "put", "patch", "delete")


class ResponseDeclaration(BaseModel):
    """A documented response: description plus the reference id of its body schema."""

    model_config = ConfigDict(populate_by_name=True)

    description: str
    schema_ref: ReferenceId = Field(alias="schema")


class EndpointDeclaration(BaseModel):
    """Contract of one (path, method): schemas used, summary, responses, security names."""

    summary: str
    description: str | None = None
    tags: list[str] = []
    query: ReferenceId | None = None
    body: ReferenceId | None = None
    responses: dict[int, ResponseDeclaration] = {}
    security: list[str] | None = None

    @field_validator("security")
    @classmethod
    def _dedupe_security(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return list(dict.fromkeys(value))


class Server(BaseModel):
    url: str
    description: str | None = None


class ApiKeyScheme(BaseModel):
    type: Literal["apiKey"] = "apiKey"
    scheme_name: str
    location: Literal["query", "header", "cookie"]
    name: str
    description: str | None = None


class HttpScheme(BaseModel):
    type: Literal["http"] = "http"
    scheme_name: str
    scheme: str  # basic / bearer / digest ...
    bearer_format: str | None = None
    description: str | None = None


class OpenIdConnectScheme(BaseModel):
    type: Literal["openIdConnect"] = "openIdConnect"
    scheme_name: str
    open_id_connect_url: str
    scopes: list[str] = []
    description: str | None = None


SecurityScheme = Annotated[
    Union[ApiKeyScheme, HttpScheme, OpenIdConnectScheme],
    Field(discriminator="type"),
]


class DocumentMetadata(BaseModel):
    """Top-level ``info`` and ``servers`` of the generated document."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""
    version: str
    servers: list[Server] | None = None


def _normalize_path_table(paths: dict[str, dict[str, Any]] | None) -> dict[str, dict[str, Any]] | None:
    if paths is None:
        return None
    table: dict[str, dict[str, Any]] = {}
    for path, endpoints in paths.items():
        methods: dict[str, Any] = {}
        for method, declaration in (endpoints or {}).items():
            key = method.lower()
            if key in methods:
                raise ValueError(f"duplicate method {method.upper()} declared for path {path}")
            methods[key] = declaration
        table[path] = methods
    return table


def _check_unique_schemes(schemes: list[Any] | None) -> None:
    if not schemes:
        return
    seen: set[str] = set()
    for scheme in schemes:
        if scheme.scheme_name in seen:
            raise ValueError(f"duplicate security scheme name: {scheme.scheme_name}")
        seen.add(scheme.scheme_name)


class DocumentDefinition(BaseModel):
    """Everything the compiler needs to build one OpenAPI document.

    ``schemas`` and ``paths`` are optional here so that a missing section can
    be reported by name as a configuration error rather than a generic
    validation failure.
    """

    title: str
    description: str = ""
    version: str
    servers: list[Server] | None = None
    schemas: dict[ReferenceId, Any] | None = None
    paths: dict[str, dict[EndpointMethod, EndpointDeclaration]] | None = None
    security_schemes: list[SecurityScheme] | None = None
    security: list[str] | None = None

    @field_validator("paths", mode="before")
    @classmethod
    def _lowercase_methods(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return _normalize_path_table(value)
        return value

    @model_validator(mode="after")
    def _unique_scheme_names(self) -> "DocumentDefinition":
        _check_unique_schemes(self.security_schemes)
        return self

    @property
    def metadata(self) -> DocumentMetadata:
        return DocumentMetadata(
            title=self.title,
            description=self.description,
            version=self.version,
            servers=self.servers,
        )


class OpenApiConfig(BaseModel):
    output_dir: str | None = None
    definition: DocumentDefinition | None = None


class EndpointConfig(BaseModel):
    """Per-endpoint settings of the list-based ``docs`` configuration."""

    request_body: ReferenceId | None = None
    query: ReferenceId | None = None
    responses: dict[int, ResponseDeclaration] = {}
    security: list[str] | None = None


class EndpointRegistration(BaseModel):
    method: EndpointMethod
    summary: str
    config: EndpointConfig

    @field_validator("method", mode="before")
    @classmethod
    def _lowercase(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    def to_declaration(self) -> EndpointDeclaration:
        return EndpointDeclaration(
            summary=self.summary,
            query=self.config.query,
            body=self.config.request_body,
            responses=self.config.responses,
            security=self.config.security,
        )


def register_endpoint(method: str, summary: str, **config: Any) -> EndpointRegistration:
    """Declare one endpoint for the ``docs`` configuration.

    Example::

        register_endpoint("post", "Create a user", request_body="CreateUserInput",
                          responses={201: {"description": "Created", "schema": "UserOutput"}})
    """
    return EndpointRegistration(method=method, summary=summary, config=EndpointConfig(**config))


class DocsConfig(BaseModel):
    """List-based configuration: each path maps to a list of registered endpoints."""

    directory_path: str | None = None
    title: str
    description: str = ""
    version: str
    servers: list[Server] | None = None
    schemas: dict[ReferenceId, Any] | None = None
    endpoints: dict[str, list[EndpointRegistration]] | None = None
    security_schemes: list[SecurityScheme] | None = None
    security: list[str] | None = None

    @model_validator(mode="after")
    def _check_uniqueness(self) -> "DocsConfig":
        _check_unique_schemes(self.security_schemes)
        for path, registrations in (self.endpoints or {}).items():
            seen: set[str] = set()
            for registration in registrations:
                if registration.method in seen:
                    raise ValueError(
                        f"duplicate method {registration.method.upper()} declared for path {path}"
                    )
                seen.add(registration.method)
        return self

    def to_definition(self) -> DocumentDefinition:
        """Convert to the path-table form used by the compiler."""
        paths = None
        if self.endpoints is not None:
            paths = {
                path: {r.method: r.to_declaration() for r in registrations}
                for path, registrations in self.endpoints.items()
            }
        return DocumentDefinition(
            title=self.title,
            description=self.description,
            version=self.version,
            servers=self.servers,
            schemas=self.schemas,
            paths=paths,
            security_schemes=self.security_schemes,
            security=self.security,
        )


class MsfConfig(BaseModel):
    """Root object exported as ``config`` by a configuration module."""

    openapi: OpenApiConfig | None = None
    docs: DocsConfig | None = None
