"""Field bindings and the explicit schema registration API.

Usage:
    schema = (
        SchemaBuilder()
        .field("username").required().length_between(3, 20).done()
        .field("email").required().email(check_mx_record=True).done()
        .build()
    )
"""

from typing import Any, Iterator, Optional

from pydantic import BaseModel, model_validator
from pydantic import ValidationError as PydanticValidationError

from fieldguard.validators.errors import ConfigurationError
from fieldguard.validators.models import Severity
from fieldguard.validators.rules import (
    BaseRule,
    EmailWithMxRule,
    ExactLengthRule,
    LengthIntervalRule,
    MatchesPatternRule,
    MaximumLengthRule,
    MinimumLengthRule,
    NotEmptyRule,
    RequiredRule,
    RuleDefinition,
    UrlWithSchemeRule,
    configuration_error_from,
)


class FieldBinding(BaseModel):
    """A record field paired with its ordered rule set.

    A disabled binding is skipped entirely, presence check included.
    """

    field_name: str
    rules: tuple[RuleDefinition, ...] = ()
    enabled: bool = True

    model_config = {"frozen": True}

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            raise configuration_error_from(exc, "field binding") from exc

    @model_validator(mode="after")
    def _rules_share_field(self):
        if not self.field_name or not self.field_name.strip():
            raise ConfigurationError("Field binding needs a field name.", parameter="field_name")
        for index, rule in enumerate(self.rules):
            if rule.field_name != self.field_name:
                raise ConfigurationError(
                    f"Rule '{rule.kind}' targets '{rule.field_name}' but is bound to '{self.field_name}'.",
                    parameter=f"rules[{index}].field_name",
                )
        return self

    @property
    def active_rules(self) -> Iterator[BaseRule]:
        """Enabled rules in declared order."""
        return (rule for rule in self.rules if rule.enabled)


class FieldRulesBuilder:
    """Collects rules for one field. Every method returns the builder for chaining."""

    def __init__(self, schema: "SchemaBuilder", field_name: str, enabled: bool = True):
        self._schema = schema
        self.field_name = field_name
        self.enabled = enabled
        self.rules: list[BaseRule] = []

    def _add(self, rule_cls: type[BaseRule], **params: Any) -> "FieldRulesBuilder":
        self.rules.append(rule_cls(field_name=self.field_name, **params))
        return self

    @staticmethod
    def _common(
        severity: Severity,
        message: Optional[str],
        suggested_value: Optional[str],
        enabled: bool,
    ) -> dict:
        return {
            "severity": severity,
            "message": message or "",
            "suggested_value": suggested_value,
            "enabled": enabled,
        }

    # ── Rule kinds ──

    def required(self, severity: Severity = Severity.ERROR, message: Optional[str] = None,
                 suggested_value: Optional[str] = None, enabled: bool = True) -> "FieldRulesBuilder":
        return self._add(RequiredRule, **self._common(severity, message, suggested_value, enabled))

    def not_empty(self, severity: Severity = Severity.ERROR, message: Optional[str] = None,
                  suggested_value: Optional[str] = None, enabled: bool = True) -> "FieldRulesBuilder":
        return self._add(NotEmptyRule, **self._common(severity, message, suggested_value, enabled))

    def exact_length(self, length: int, severity: Severity = Severity.ERROR, message: Optional[str] = None,
                     suggested_value: Optional[str] = None, enabled: bool = True) -> "FieldRulesBuilder":
        return self._add(
            ExactLengthRule, length=length, **self._common(severity, message, suggested_value, enabled)
        )

    def min_length(self, min_length: int, severity: Severity = Severity.ERROR, message: Optional[str] = None,
                   suggested_value: Optional[str] = None, enabled: bool = True) -> "FieldRulesBuilder":
        return self._add(
            MinimumLengthRule, min_length=min_length, **self._common(severity, message, suggested_value, enabled)
        )

    def max_length(self, max_length: int, severity: Severity = Severity.ERROR, message: Optional[str] = None,
                   suggested_value: Optional[str] = None, enabled: bool = True) -> "FieldRulesBuilder":
        return self._add(
            MaximumLengthRule, max_length=max_length, **self._common(severity, message, suggested_value, enabled)
        )

    def length_between(self, min_length: int, max_length: int, severity: Severity = Severity.ERROR,
                       message: Optional[str] = None, suggested_value: Optional[str] = None,
                       enabled: bool = True) -> "FieldRulesBuilder":
        return self._add(
            LengthIntervalRule,
            min_length=min_length,
            max_length=max_length,
            **self._common(severity, message, suggested_value, enabled),
        )

    def matches(self, pattern: str, severity: Severity = Severity.ERROR, message: Optional[str] = None,
                suggested_value: Optional[str] = None, enabled: bool = True) -> "FieldRulesBuilder":
        return self._add(
            MatchesPatternRule, pattern=pattern, **self._common(severity, message, suggested_value, enabled)
        )

    def email(self, check_mx_record: bool = False, severity: Severity = Severity.ERROR,
              message: Optional[str] = None, suggested_value: Optional[str] = None,
              enabled: bool = True) -> "FieldRulesBuilder":
        return self._add(
            EmailWithMxRule,
            check_mx_record=check_mx_record,
            **self._common(severity, message, suggested_value, enabled),
        )

    def url(self, require_http_scheme: bool = True, severity: Severity = Severity.ERROR,
            message: Optional[str] = None, suggested_value: Optional[str] = None,
            enabled: bool = True) -> "FieldRulesBuilder":
        return self._add(
            UrlWithSchemeRule,
            require_http_scheme=require_http_scheme,
            **self._common(severity, message, suggested_value, enabled),
        )

    def rule(self, rule: BaseRule) -> "FieldRulesBuilder":
        """Attach an already-built rule."""
        self.rules.append(rule)
        return self

    # ── Navigation ──

    def field(self, field_name: str, enabled: bool = True) -> "FieldRulesBuilder":
        """Start the next field."""
        return self._schema.field(field_name, enabled=enabled)

    def done(self) -> "SchemaBuilder":
        return self._schema

    def build(self) -> tuple[FieldBinding, ...]:
        return self._schema.build()

    def to_binding(self) -> FieldBinding:
        return FieldBinding(field_name=self.field_name, rules=tuple(self.rules), enabled=self.enabled)


class SchemaBuilder:
    """Registers fields and their rules, producing field bindings in registration order."""

    def __init__(self):
        self._fields: list[FieldRulesBuilder] = []

    def field(self, field_name: str, enabled: bool = True) -> FieldRulesBuilder:
        if not field_name or not field_name.strip():
            raise ConfigurationError("Field name cannot be null or empty.", parameter="field_name")
        builder = FieldRulesBuilder(self, field_name, enabled=enabled)
        self._fields.append(builder)
        return builder

    def build(self) -> tuple[FieldBinding, ...]:
        return tuple(builder.to_binding() for builder in self._fields)
