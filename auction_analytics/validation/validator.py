"""Schema validation helpers wired to the JSON Schema definitions in this package."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator, ValidationError


class ConfigurationError(ValueError):
    """Raised when the analytics options cannot be used to enable tracking."""


class SchemaRegistry:
    def __init__(self, schema_dir: Path) -> None:
        self._schema_dir = schema_dir
        self._validators: dict[str, Draft202012Validator] = {}
        self._load()

    def _load(self) -> None:
        for schema_path in sorted(self._schema_dir.glob("*.json")):
            data = json.loads(schema_path.read_text())
            Draft202012Validator.check_schema(data)
            self._validators[schema_path.stem] = Draft202012Validator(
                data,
                format_checker=Draft202012Validator.FORMAT_CHECKER,
            )

    @property
    def names(self) -> list[str]:
        return sorted(self._validators)

    def validate(self, schema_name: str, payload: Any) -> None:
        try:
            validator = self._validators[schema_name]
        except KeyError as exc:
            raise ValueError(f"unknown schema {schema_name}") from exc
        validator.validate(payload)


@lru_cache(maxsize=1)
def get_schema_registry() -> SchemaRegistry:
    schema_dir = Path(__file__).resolve().parent.parent / "schemas"
    return SchemaRegistry(schema_dir)


def validate_options(options: Any) -> dict[str, Any]:
    """Check the host supplied options, raising ConfigurationError on failure."""
    try:
        get_schema_registry().validate("analytics_options", options)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid analytics options: {exc.message}") from exc
    return dict(options)
