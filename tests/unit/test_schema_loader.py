"""Unit tests for loading schemas from plain data and JSON files."""

import json

import pytest

from fieldguard.validators.errors import ConfigurationError
from fieldguard.validators.models import RuleKind, Severity
from fieldguard.validators.schema_loader import load_schema

DOCUMENT = {
    "fields": [
        {
            "name": "email",
            "rules": [
                {"kind": "required"},
                {"kind": "email_with_mx", "check_mx_record": True, "severity": "critical"},
            ],
        },
        {
            "name": "nickname",
            "enabled": False,
            "rules": [{"kind": "length_interval", "min_length": 2, "max_length": 5}],
        },
    ]
}


class TestLoadSchema:
    """Tests for load_schema."""

    def test_from_dict(self):
        schema = load_schema(DOCUMENT)

        assert [binding.field_name for binding in schema] == ["email", "nickname"]
        assert [rule.rule_kind for rule in schema[0].rules] == [RuleKind.REQUIRED, RuleKind.EMAIL_WITH_MX]
        assert schema[0].rules[1].severity == Severity.CRITICAL
        assert schema[0].rules[1].check_mx_record is True
        assert schema[1].enabled is False

    def test_rules_inherit_field_name(self):
        schema = load_schema(DOCUMENT)
        assert schema[1].rules[0].message == "nickname field length must be between 2 and 5 characters."

    def test_from_bare_field_list(self):
        schema = load_schema(DOCUMENT["fields"])
        assert len(schema) == 2

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "signup.json"
        path.write_text(json.dumps(DOCUMENT), encoding="utf-8")

        assert load_schema(path) == load_schema(DOCUMENT)
        assert load_schema(str(path)) == load_schema(DOCUMENT)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_schema(tmp_path / "missing.json")
        assert exc_info.value.parameter == "source"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_schema(path)

    def test_missing_fields_list(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_schema({"rules": []})
        assert exc_info.value.parameter == "fields"

    def test_field_without_name(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_schema({"fields": [{"rules": []}]})
        assert exc_info.value.parameter == "fields[0].name"

    def test_invalid_rule_parameters(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_schema({"fields": [{"name": "pin", "rules": [{"kind": "exact_length", "length": 0}]}]})
        assert exc_info.value.parameter == "length"

    def test_uncompilable_pattern(self):
        document = {"fields": [{"name": "code", "rules": [{"kind": "matches_pattern", "pattern": "("}]}]}
        with pytest.raises(ConfigurationError) as exc_info:
            load_schema(document)
        assert exc_info.value.parameter == "pattern"

    def test_rule_for_another_field(self):
        document = {"fields": [{"name": "pin", "rules": [{"kind": "required", "field_name": "other"}]}]}
        with pytest.raises(ConfigurationError):
            load_schema(document)
