"""Serialization of compiled documents to YAML or JSON files."""

import json
from pathlib import Path

import yaml

FORMATS = ("yaml", "json")


def dump_document(document: dict, fmt: str = "yaml") -> str:
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    if fmt == "json":
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    raise ValueError(f"Unsupported document format: {fmt}")


def write_document(
    document: dict,
    output_dir: Path | str | None = None,
    file_name: str = "openapi",
    fmt: str = "yaml",
) -> Path:
    """Write *document* to ``<output_dir>/<file_name>.<fmt>`` and return the path.

    A relative *output_dir* is resolved against the working directory.
    """
    directory = Path.cwd() / output_dir if output_dir else Path.cwd()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{file_name}.{fmt}"
    path.write_text(dump_document(document, fmt), encoding="utf-8")
    return path
