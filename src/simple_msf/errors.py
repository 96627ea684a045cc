"""Compile-time errors raised while loading configuration and building documents."""


class MsfConfigError(Exception):
    """Base class for errors on the documentation path."""


class ConfigurationError(MsfConfigError):
    """A configuration section is missing or malformed."""


class SchemaReferenceError(MsfConfigError):
    """An endpoint references a schema id that is not registered."""

    def __init__(self, reference_id: str, path: str, method: str, field: str):
        self.reference_id = reference_id
        self.path = path
        self.method = method
        self.field = field
        super().__init__(
            f'Unknown schema "{reference_id}" referenced by {field} of {method.upper()} {path}.'
        )
