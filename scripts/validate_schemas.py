"""Checks the packaged JSON schemas and the default analytics config."""

from pathlib import Path
import json

from jsonschema import Draft202012Validator
import yaml


PACKAGE_DIR = Path(__file__).resolve().parent.parent / "auction_analytics"
SCHEMA_DIR = PACKAGE_DIR / "schemas"
DEFAULT_CONFIG = PACKAGE_DIR / "config" / "analytics.yaml"


def validate() -> None:
    for schema in SCHEMA_DIR.glob("*.json"):
        data = json.loads(schema.read_text())
        Draft202012Validator.check_schema(data)
    options_schema = json.loads((SCHEMA_DIR / "analytics_options.json").read_text())
    config = yaml.safe_load(DEFAULT_CONFIG.read_text()) or {}
    Draft202012Validator(options_schema).validate(config.get("options") or {})


if __name__ == "__main__":
    validate()
