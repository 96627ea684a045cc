"""Schema registry: named schemas addressable by reference id.

A schema is anything ``pydantic.TypeAdapter`` accepts (usually a ``BaseModel``
subclass) or a ready-made ``TypeAdapter``. Its documentation is the pydantic
JSON schema, with references pointing into ``components.schemas``.
"""

import copy
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Iterator, Mapping

from pydantic import TypeAdapter
from pydantic.errors import PydanticInvalidForJsonSchema, PydanticSchemaGenerationError

from simple_msf.errors import ConfigurationError
from simple_msf.log import get_logger

logger = get_logger(__name__)

REF_PREFIX = "#/components/schemas/"
REF_TEMPLATE = REF_PREFIX + "{model}"


def schema_ref(reference_id: str) -> dict[str, str]:
    return {"$ref": REF_TEMPLATE.format(model=reference_id)}


@dataclass
class RegisteredSchema:
    reference_id: str
    schema: Any

    @property
    def ref(self) -> dict[str, str]:
        return schema_ref(self.reference_id)

    @cached_property
    def adapter(self) -> TypeAdapter:
        if isinstance(self.schema, TypeAdapter):
            return self.schema
        return TypeAdapter(self.schema)

    @cached_property
    def _json_schema(self) -> dict:
        try:
            return self.adapter.json_schema(ref_template=REF_TEMPLATE)
        except (PydanticSchemaGenerationError, PydanticInvalidForJsonSchema) as e:
            # Undocumentable types are published as accept-anything.
            logger.debug("Schema %r has no JSON schema, documenting as {}: %s", self.reference_id, e)
            return {}

    def json_schema(self) -> dict:
        """Return a fresh copy of the schema's JSON schema (``{}`` if it cannot be documented)."""
        return copy.deepcopy(self._json_schema)

    def resolved_schema(self) -> tuple[dict, dict[str, dict]]:
        """Split the JSON schema into the component body and its nested definitions.

        A recursive model comes back from pydantic as a bare ``$ref`` to its own
        entry in ``$defs``; the body is then that entry.
        """
        schema = self.json_schema()
        definitions = schema.pop("$defs", {})
        target = _local_target(schema)
        if target is not None and target in definitions:
            schema = copy.deepcopy(definitions[target])
            if target == self.reference_id:
                del definitions[target]
        return schema, definitions


def _local_target(schema: dict) -> str | None:
    ref = schema.get("$ref")
    if len(schema) != 1 or not isinstance(ref, str) or not ref.startswith(REF_PREFIX):
        return None
    return ref[len(REF_PREFIX):]


class SchemaRegistry:
    """Holds the schemas of one compilation, keyed by reference id."""

    def __init__(self) -> None:
        self._schemas: dict[str, RegisteredSchema] = {}

    @classmethod
    def from_mapping(cls, schemas: Mapping[str, Any]) -> "SchemaRegistry":
        registry = cls()
        for reference_id, schema in schemas.items():
            registry.register(reference_id, schema)
        return registry

    def register(self, reference_id: str, schema: Any) -> RegisteredSchema:
        """Register *schema* under *reference_id*. A repeated id replaces the earlier entry."""
        if reference_id in self._schemas:
            logger.warning("Schema %r registered twice, keeping the last registration", reference_id)
        registered = RegisteredSchema(reference_id=reference_id, schema=schema)
        self._schemas[reference_id] = registered
        return registered

    def lookup(self, reference_id: str) -> RegisteredSchema | None:
        return self._schemas.get(reference_id)

    def __contains__(self, reference_id: object) -> bool:
        return reference_id in self._schemas

    def __iter__(self) -> Iterator[RegisteredSchema]:
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)

    def components(self) -> dict[str, dict]:
        """Build ``components.schemas``: every registered schema plus the nested models they use.

        Nested models are published under their class name. A nested definition
        that differs from a registered schema or another nested definition of
        the same name raises ``ConfigurationError``.
        """
        components: dict[str, dict] = {}
        nested: dict[str, dict] = {}
        owners: dict[str, str] = {}
        for registered in self:
            body, definitions = registered.resolved_schema()
            components[registered.reference_id] = body
            for name, definition in definitions.items():
                if name in nested and nested[name] != definition:
                    raise ConfigurationError(
                        f'Nested schema "{name}" differs between "{owners[name]}" and "{registered.reference_id}".'
                    )
                nested.setdefault(name, definition)
                owners.setdefault(name, registered.reference_id)
        for name, definition in nested.items():
            if name not in components:
                components[name] = definition
            elif components[name] != definition:
                raise ConfigurationError(
                    f'Nested schema "{name}" used by "{owners[name]}" conflicts with the schema registered as "{name}".'
                )
        return components
