# installcheck/validator/schema.py
"""Declarative agent configuration schema.

Field requirements are described once as FieldSpec entries. A single routine,
``check_fields``, reports presence violations from the specs and type
violations through a JSON Schema built from the same specs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from jsonschema import Draft7Validator

KIND_DESCRIPTIONS = {
    "string": "a string",
    "array": "an array",
    "object": "an object",
}


@dataclass(frozen=True)
class FieldSpec:
    """One top-level field of an agent configuration."""

    name: str
    kind: str
    required: bool = True


AGENT_CONFIG_FIELDS: Sequence[FieldSpec] = (
    FieldSpec("name", "string"),
    FieldSpec("description", "string"),
    FieldSpec("prompt", "string"),
    FieldSpec("tools", "array"),
    FieldSpec("resources", "array"),
)


def build_json_schema(fields: Sequence[FieldSpec]) -> Dict[str, Any]:
    """Build the property-type JSON Schema for ``fields``."""
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "properties": {spec.name: {"type": spec.kind} for spec in fields},
    }


def missing_fields(config: Dict[str, Any], fields: Sequence[FieldSpec] = AGENT_CONFIG_FIELDS) -> List[str]:
    """Names of required fields absent from ``config``, in declaration order."""
    return [spec.name for spec in fields if spec.required and spec.name not in config]


def check_fields(config: Any, fields: Sequence[FieldSpec] = AGENT_CONFIG_FIELDS) -> List[str]:
    """Validate ``config`` against ``fields``.

    Returns one message per violation: a missing required field, or a present
    field whose value has the wrong kind. Messages follow declaration order.
    """
    if not isinstance(config, dict):
        return [f"Configuration root must be an object, got {type(config).__name__}"]

    by_field: Dict[str, str] = {}
    for name in missing_fields(config, fields):
        by_field[name] = f"Missing required field: {name}"

    validator = Draft7Validator(build_json_schema(fields))
    for error in validator.iter_errors(config):
        if error.validator != "type" or not error.path:
            continue
        field_name = str(error.path[0])
        expected = KIND_DESCRIPTIONS.get(str(error.validator_value), str(error.validator_value))
        by_field[field_name] = f"Field '{field_name}' must be {expected}"

    return [by_field[spec.name] for spec in fields if spec.name in by_field]
