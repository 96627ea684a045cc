import pytest
from pydantic import ValidationError

from simple_msf.models import (
    ApiKeyScheme,
    DocsConfig,
    DocumentDefinition,
    EndpointDeclaration,
    HttpScheme,
    OpenIdConnectScheme,
    register_endpoint,
)


def _definition(**overrides) -> DocumentDefinition:
    data = {"title": "T", "version": "1", "schemas": {}, "paths": {}}
    data.update(overrides)
    return DocumentDefinition(**data)


class TestEndpointDeclaration:
    def test_create_minimal_declaration(self):
        ep = EndpointDeclaration(summary="List users")
        assert ep.query is None
        assert ep.body is None
        assert ep.responses == {}
        assert ep.security is None
        assert ep.tags == []

    def test_response_schema_alias(self):
        ep = EndpointDeclaration(
            summary="Create user",
            body="CreateUserInput",
            responses={"201": {"description": "Created", "schema": "UserOutput"}},
        )
        assert ep.responses[201].schema_ref == "UserOutput"
        assert ep.responses[201].description == "Created"

    def test_security_names_deduplicated_in_order(self):
        ep = EndpointDeclaration(summary="x", security=["b", "a", "b"])
        assert ep.security == ["b", "a"]

    def test_empty_security_is_kept(self):
        ep = EndpointDeclaration(summary="x", security=[])
        assert ep.security == []


class TestDocumentDefinition:
    def test_methods_normalized_to_lowercase(self):
        definition = _definition(paths={"/users": {"GET": {"summary": "List"}}})
        assert list(definition.paths["/users"]) == ["get"]

    def test_duplicate_method_after_normalization_rejected(self):
        with pytest.raises(ValidationError, match="duplicate method GET"):
            _definition(paths={"/users": {"GET": {"summary": "a"}, "get": {"summary": "b"}}})

    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError):
            _definition(paths={"/users": {"head": {"summary": "a"}}})

    def test_schemas_and_paths_optional(self):
        definition = DocumentDefinition(title="T", version="1")
        assert definition.schemas is None
        assert definition.paths is None

    def test_security_schemes_discriminated_by_type(self):
        definition = _definition(security_schemes=[
            {"type": "apiKey", "scheme_name": "key", "location": "header", "name": "X-API-Key"},
            {"type": "http", "scheme_name": "bearer", "scheme": "bearer"},
            {"type": "openIdConnect", "scheme_name": "oidc", "open_id_connect_url": "https://id"},
        ])
        kinds = [type(s) for s in definition.security_schemes]
        assert kinds == [ApiKeyScheme, HttpScheme, OpenIdConnectScheme]

    def test_duplicate_scheme_names_rejected(self):
        with pytest.raises(ValidationError, match="duplicate security scheme name: auth"):
            _definition(security_schemes=[
                HttpScheme(scheme_name="auth", scheme="basic"),
                ApiKeyScheme(scheme_name="auth", location="query", name="key"),
            ])

    def test_metadata_is_frozen(self):
        metadata = _definition(servers=[{"url": "https://api"}]).metadata
        assert metadata.servers[0].url == "https://api"
        with pytest.raises(ValidationError):
            metadata.title = "changed"


class TestDocsConfig:
    def test_register_endpoint(self):
        registration = register_endpoint(
            "POST", "Create", request_body="In",
            responses={201: {"description": "ok", "schema": "Out"}},
        )
        assert registration.method == "post"
        declaration = registration.to_declaration()
        assert declaration.body == "In"
        assert declaration.summary == "Create"
        assert declaration.responses[201].schema_ref == "Out"

    def test_to_definition_builds_path_table(self):
        docs = DocsConfig(
            title="Pets",
            version="1",
            schemas={},
            endpoints={"/pets": [register_endpoint("get", "List"), register_endpoint("post", "Create")]},
        )
        definition = docs.to_definition()
        assert set(definition.paths["/pets"]) == {"get", "post"}
        assert definition.paths["/pets"]["post"].summary == "Create"

    def test_duplicate_registration_rejected(self):
        with pytest.raises(ValidationError, match="duplicate method GET"):
            DocsConfig(
                title="Pets",
                version="1",
                endpoints={"/pets": [register_endpoint("get", "a"), register_endpoint("GET", "b")]},
            )
