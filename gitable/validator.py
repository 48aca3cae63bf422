"""Schema validation for locator report payloads."""

from __future__ import annotations

import json
from importlib import resources

from jsonschema import Draft202012Validator

# --- Schema loaders ---------------------------------------------------------


def _load_schema(package: str, resource_name: str) -> dict:
    with resources.files(package).joinpath(resource_name).open("r", encoding="utf-8") as f:
        return json.load(f)


def _report_schema() -> dict:
    return _load_schema("gitable.schema", "locator.schema.json")


# --- Public validators ------------------------------------------------------


def validate_report(data: dict) -> None:
    """Raise `jsonschema.ValidationError` unless *data* is a well-formed report.

    Beyond field types, the schema ties the flags together: scp reports are
    ssh and carry no scheme or port.
    """
    Draft202012Validator(_report_schema()).validate(data)
