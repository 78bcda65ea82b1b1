from __future__ import annotations

from .validator import ConfigurationError, SchemaRegistry, get_schema_registry, validate_options

__all__ = ["ConfigurationError", "SchemaRegistry", "get_schema_registry", "validate_options"]
