"""Settings and configuration-module loading.

Settings come from ``MSF_*`` environment variables (pydantic-settings).
The endpoint configuration itself is a Python module that defines a
module-level ``config`` object, either an ``MsfConfig`` or a plain dict.
"""

import importlib.machinery
import importlib.util
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from simple_msf.errors import ConfigurationError
from simple_msf.models import DocsConfig, DocumentDefinition, MsfConfig

CONFIG_VARIABLE = "config"


class MsfSettings(BaseSettings):
    """Process-wide defaults, overridable through ``MSF_`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="MSF_", extra="ignore")

    config_file: Path = Path("msf_config.py")
    output_file_name: str = "openapi"
    output_format: Literal["yaml", "json"] = "yaml"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> MsfSettings:
    return MsfSettings()


def load_config(path: Path) -> MsfConfig:
    """Execute the configuration module at *path* and return its validated ``config``."""
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f'Missing "{path.name}" file.')

    module_name = f"_msf_config_{path.stem.replace('.', '_')}"
    loader = importlib.machinery.SourceFileLoader(module_name, str(path))
    spec = importlib.util.spec_from_loader(module_name, loader)
    module = importlib.util.module_from_spec(spec)
    # Models and dataclasses declared in the module resolve annotations through sys.modules.
    sys.modules[module_name] = module
    try:
        loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ConfigurationError(f'Failed to load "{path.name}": {e}') from e

    raw = getattr(module, CONFIG_VARIABLE, None)
    if raw is None:
        raise ConfigurationError(f'Missing "{CONFIG_VARIABLE}" variable in "{path.name}" file.')
    return parse_config(raw, source=path.name)


def parse_config(raw: Any, source: str = "configuration") -> MsfConfig:
    """Validate *raw* into an ``MsfConfig``, naming every offending field on failure."""
    if isinstance(raw, MsfConfig):
        return raw
    try:
        return MsfConfig.model_validate(raw)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors(include_url=False)
        )
        raise ConfigurationError(f'Invalid "{source}" file: {problems}') from e


def _missing(field: str, source: str) -> ConfigurationError:
    return ConfigurationError(f'Missing "{field}" property in "{source}" file.')


def require_definition(config: MsfConfig, source: str = "configuration") -> tuple[DocumentDefinition, str | None]:
    """Return the ``openapi`` definition and its output directory, or raise naming the missing field."""
    if config.openapi is None:
        raise _missing("openapi", source)
    definition = config.openapi.definition
    if definition is None:
        raise _missing("openapi.definition", source)
    if definition.schemas is None:
        raise _missing("openapi.definition.schemas", source)
    if definition.paths is None:
        raise _missing("openapi.definition.paths", source)
    return definition, config.openapi.output_dir


def require_docs(config: MsfConfig, source: str = "configuration") -> tuple[DocumentDefinition, str | None]:
    """Same as ``require_definition`` for the list-based ``docs`` section."""
    docs: DocsConfig | None = config.docs
    if docs is None:
        raise _missing("docs", source)
    if docs.schemas is None:
        raise _missing("docs.schemas", source)
    if docs.endpoints is None:
        raise _missing("docs.endpoints", source)
    return docs.to_definition(), docs.directory_path
