"""simple-msf: declare endpoints once, get an OpenAPI document and validated handlers."""

from simple_msf.models import (
    ApiKeyScheme,
    DocsConfig,
    DocumentDefinition,
    EndpointDeclaration,
    HttpScheme,
    MsfConfig,
    OpenApiConfig,
    OpenIdConnectScheme,
    ResponseDeclaration,
    Server,
    register_endpoint,
)
from simple_msf.openapi.document import compile_document
from simple_msf.runtime.dispatch import Request, handler
from simple_msf.runtime.errors import MsfError, RequestValidationError, is_msf_error
from simple_msf.runtime.responses import json_response

__version__ = "0.3.0"

__all__ = [
    "ApiKeyScheme",
    "DocsConfig",
    "DocumentDefinition",
    "EndpointDeclaration",
    "HttpScheme",
    "MsfConfig",
    "MsfError",
    "OpenApiConfig",
    "OpenIdConnectScheme",
    "Request",
    "RequestValidationError",
    "ResponseDeclaration",
    "Server",
    "compile_document",
    "handler",
    "is_msf_error",
    "json_response",
    "register_endpoint",
]
