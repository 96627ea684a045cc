from unittest.mock import patch

import pytest
from pydantic import BaseModel, TypeAdapter

from simple_msf.errors import ConfigurationError
from simple_msf.openapi.registry import SchemaRegistry, schema_ref


class Address(BaseModel):
    city: str


class Customer(BaseModel):
    name: str
    address: Address


class Opaque:
    pass


class Node(BaseModel):
    label: str
    children: list["Node"] = []


class User(BaseModel):
    id: int


class Order(BaseModel):
    owner: User


class Account(BaseModel):
    email: str


class TestSchemaRegistry:
    def test_register_and_lookup(self):
        registry = SchemaRegistry()
        registered = registry.register("Customer", Customer)
        assert registry.lookup("Customer") is registered
        assert registered.schema is Customer
        assert registered.ref == {"$ref": "#/components/schemas/Customer"}
        assert "Customer" in registry
        assert len(registry) == 1

    def test_lookup_missing_returns_none(self):
        assert SchemaRegistry().lookup("Nope") is None

    def test_duplicate_registration_last_write_wins(self):
        registry = SchemaRegistry()
        registry.register("Thing", Address)
        with patch("simple_msf.openapi.registry.logger") as mock_logger:
            registry.register("Thing", Customer)
        assert registry.lookup("Thing").schema is Customer
        assert len(registry) == 1
        mock_logger.warning.assert_called_once()

    def test_json_schema_of_model(self):
        registered = SchemaRegistry().register("Address", Address)
        schema = registered.json_schema()
        assert schema["type"] == "object"
        assert schema["required"] == ["city"]

    def test_json_schema_returns_copy(self):
        registered = SchemaRegistry().register("Address", Address)
        registered.json_schema()["type"] = "mutated"
        assert registered.json_schema()["type"] == "object"

    def test_undocumentable_schema_gets_permissive_default(self):
        registered = SchemaRegistry().register("Opaque", Opaque)
        assert registered.json_schema() == {}

    def test_type_adapter_accepted(self):
        registered = SchemaRegistry().register("Tags", TypeAdapter(list[str]))
        assert registered.json_schema() == {"type": "array", "items": {"type": "string"}}

    def test_components_hoist_nested_models(self):
        registry = SchemaRegistry.from_mapping({"Customer": Customer})
        components = registry.components()
        assert list(components) == ["Customer", "Address"]
        assert "$defs" not in components["Customer"]
        assert components["Customer"]["properties"]["address"] == schema_ref("Address")
        assert components["Address"]["properties"]["city"]["type"] == "string"

    def test_registered_schema_shared_as_nested_definition(self):
        registry = SchemaRegistry.from_mapping({"Customer": Customer, "Address": Address})
        components = registry.components()
        assert list(components) == ["Customer", "Address"]
        assert components["Address"]["title"] == "Address"

    def test_registered_id_clashing_with_nested_definition_rejected(self):
        registry = SchemaRegistry.from_mapping({"User": Account, "Order": Order})
        with pytest.raises(ConfigurationError, match='Nested schema "User" used by "Order"'):
            registry.components()

    def test_nested_definitions_with_same_name_rejected(self):
        class User(BaseModel):
            email: str

        class Invoice(BaseModel):
            payer: User

        registry = SchemaRegistry.from_mapping({"Order": Order, "Invoice": Invoice})
        with pytest.raises(ConfigurationError, match='differs between "Order" and "Invoice"'):
            registry.components()


class TestRecursiveSchemas:
    def test_resolved_schema_unwraps_self_reference(self):
        body, definitions = SchemaRegistry().register("Node", Node).resolved_schema()
        assert "$ref" not in body
        assert set(body["properties"]) == {"label", "children"}
        assert body["properties"]["children"]["items"] == schema_ref("Node")
        assert definitions == {}

    def test_component_holds_model_properties(self):
        components = SchemaRegistry.from_mapping({"Node": Node}).components()
        assert list(components) == ["Node"]
        assert components["Node"]["required"] == ["label"]
        assert components["Node"]["properties"]["children"]["items"] == schema_ref("Node")

    def test_registered_under_another_id_keeps_class_name_definition(self):
        components = SchemaRegistry.from_mapping({"Tree": Node}).components()
        assert list(components) == ["Tree", "Node"]
        assert components["Tree"] == components["Node"]
        assert "properties" in components["Tree"]
