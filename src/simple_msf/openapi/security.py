"""Security schemes and security requirements."""

from typing import Iterable, Sequence

from simple_msf.models import ApiKeyScheme, HttpScheme, OpenIdConnectScheme, SecurityScheme


def scheme_to_openapi(scheme: SecurityScheme) -> dict:
    """Translate a scheme into its ``components.securitySchemes`` entry."""
    if isinstance(scheme, ApiKeyScheme):
        data = {"type": "apiKey", "in": scheme.location, "name": scheme.name}
    elif isinstance(scheme, HttpScheme):
        data = {"type": "http", "scheme": scheme.scheme}
        if scheme.bearer_format:
            data["bearerFormat"] = scheme.bearer_format
    elif isinstance(scheme, OpenIdConnectScheme):
        data = {"type": "openIdConnect", "openIdConnectUrl": scheme.open_id_connect_url}
    else:
        raise TypeError(f"Unsupported security scheme: {type(scheme).__name__}")

    if scheme.description:
        data["description"] = scheme.description
    return data


def _scopes(scheme: SecurityScheme) -> list[str]:
    if isinstance(scheme, OpenIdConnectScheme) and scheme.scopes:
        return list(scheme.scopes)
    return []


def build_requirement(
    all_schemes: Sequence[SecurityScheme] | None,
    requested_names: Iterable[str] | None,
) -> list[dict[str, list[str]]] | None:
    """Build a security requirement list for *requested_names*.

    Returns None when either argument is None ("no security declared"),
    which is different from ``[]`` (explicitly public). Requested names
    without a matching scheme are dropped.
    """
    if all_schemes is None or requested_names is None:
        return None
    requested = set(requested_names)
    return [
        {scheme.scheme_name: _scopes(scheme)}
        for scheme in all_schemes
        if scheme.scheme_name in requested
    ]


class SecuritySchemeBinder:
    """Collects the document's security scheme definitions by name."""

    def __init__(self) -> None:
        self._definitions: dict[str, dict] = {}

    def register_scheme(self, scheme: SecurityScheme) -> dict:
        """Translate *scheme* and index it by name. Names are unique once the definition validates."""
        definition = scheme_to_openapi(scheme)
        self._definitions[scheme.scheme_name] = definition
        return definition

    def definitions(self) -> dict[str, dict]:
        return {name: dict(definition) for name, definition in self._definitions.items()}

    def __len__(self) -> int:
        return len(self._definitions)
