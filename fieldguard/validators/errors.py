"""Configuration-time failures.

These are schema/programmer errors and are always raised. Data-dependent
findings are never raised; they are collected as ``ValidationError`` models.
"""

from typing import Optional


class ConfigurationError(Exception):
    """A rule, binding or schema is malformed, or a record does not fit its schema."""

    def __init__(self, message: str, parameter: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.parameter = parameter

    def __str__(self) -> str:
        if self.parameter:
            return f"{self.message} (parameter: {self.parameter})"
        return self.message


class FieldNotFoundError(ConfigurationError):
    """A bound field is absent from the record being validated."""

    def __init__(self, field_name: str):
        super().__init__(f"Field '{field_name}' is not present in the record", parameter=field_name)
        self.field_name = field_name


class RuleTypeError(ConfigurationError):
    """A string rule was bound to a field whose value is not a string."""

    def __init__(self, field_name: str, rule_kind: str, value_type: type):
        super().__init__(
            f"Rule '{rule_kind}' expects a string for field '{field_name}', got {value_type.__name__}",
            parameter=field_name,
        )
        self.field_name = field_name
        self.rule_kind = rule_kind
        self.value_type = value_type
