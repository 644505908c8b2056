"""Schema loader — builds field bindings from plain data or JSON schema files.

Document shape:
    {
        "fields": [
            {
                "name": "email",
                "enabled": true,
                "rules": [
                    {"kind": "required"},
                    {"kind": "email_with_mx", "check_mx_record": true, "severity": "critical"}
                ]
            }
        ]
    }

Rules inherit the field's name unless they set ``field_name`` themselves.
"""

import json
from pathlib import Path
from typing import Any, Union

from fieldguard.validators.errors import ConfigurationError
from fieldguard.validators.rules import parse_rule
from fieldguard.validators.schema import FieldBinding


def _binding_from_entry(entry: Any, index: int) -> FieldBinding:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Field entry #{index + 1} must be an object", parameter=f"fields[{index}]")

    name = entry.get("name") or entry.get("field_name")
    if not name:
        raise ConfigurationError(f"Field entry #{index + 1} has no name", parameter=f"fields[{index}].name")

    raw_rules = entry.get("rules", [])
    if not isinstance(raw_rules, list):
        raise ConfigurationError(f"'rules' of field '{name}' must be a list", parameter=f"fields[{index}].rules")

    rules = []
    for raw in raw_rules:
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Rule of field '{name}' must be an object", parameter=f"fields[{index}].rules")
        rules.append(parse_rule({"field_name": name, **raw}))

    return FieldBinding(field_name=name, rules=tuple(rules), enabled=entry.get("enabled", True))


def schema_from_dict(document: Union[dict, list]) -> tuple[FieldBinding, ...]:
    """Build bindings from a parsed schema document (or its bare ``fields`` list)."""
    fields = document.get("fields") if isinstance(document, dict) else document
    if not isinstance(fields, list):
        raise ConfigurationError("Schema document needs a 'fields' list", parameter="fields")
    return tuple(_binding_from_entry(entry, i) for i, entry in enumerate(fields))


def load_schema(source: Union[str, Path, dict, list]) -> tuple[FieldBinding, ...]:
    """Load bindings from a JSON file path or an already-parsed document.

    Args:
        source: Path to a JSON schema file, or the parsed document itself

    Returns:
        Field bindings in document order
    """
    if isinstance(source, (dict, list)):
        return schema_from_dict(source)

    path = Path(source)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(f"Schema file not found: {path}", parameter="source") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Schema file {path.name} is not valid JSON: {e}", parameter="source") from e

    return schema_from_dict(document)
