"""Rule definitions — one frozen model per rule kind, joined in a discriminated union.

Every definition is validated when it is built: a bad parameter raises
``ConfigurationError`` naming the parameter, never a half-built rule.
When no message is supplied a kind-specific default is synthesized from the
rule's parameters.
"""

import re
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, PrivateAttr, TypeAdapter, model_validator
from pydantic import ValidationError as PydanticValidationError

from fieldguard.validators.errors import ConfigurationError
from fieldguard.validators.models import RuleKind, Severity


def configuration_error_from(exc: PydanticValidationError, context: str) -> ConfigurationError:
    """Turn pydantic's type/shape errors into a ConfigurationError for the first bad parameter."""
    first = exc.errors()[0]
    parameter = ".".join(str(part) for part in first.get("loc", ())) or None
    return ConfigurationError(f"Invalid {context}: {first.get('msg', str(exc))}", parameter=parameter)


class BaseRule(BaseModel):
    """Fields shared by every rule kind."""

    kind: str
    field_name: str
    severity: Severity = Severity.ERROR
    message: str = ""
    suggested_value: Optional[str] = None
    enabled: bool = True

    model_config = {"frozen": True}

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            raise configuration_error_from(exc, "rule definition") from exc

    @property
    def rule_kind(self) -> RuleKind:
        return RuleKind(self.kind)

    @model_validator(mode="after")
    def _validate_definition(self):
        if not self.field_name or not self.field_name.strip():
            raise ConfigurationError("Name cannot be null or empty.", parameter="field_name")

        self._check_parameters()

        if not self.message or not self.message.strip():
            # Frozen model: the synthesized default is written once, during construction.
            object.__setattr__(self, "message", self.default_message())
        return self

    def _check_parameters(self) -> None:
        """Raise ConfigurationError for invalid kind-specific parameters."""

    def default_message(self) -> str:
        raise NotImplementedError


class RequiredRule(BaseRule):
    kind: Literal["required"] = "required"

    def default_message(self) -> str:
        return f"{self.field_name} is required and cannot be null or default value."


class NotEmptyRule(BaseRule):
    kind: Literal["not_empty"] = "not_empty"

    def default_message(self) -> str:
        return f"{self.field_name} must not be empty, or whitespace."


class ExactLengthRule(BaseRule):
    kind: Literal["exact_length"] = "exact_length"
    length: int

    def _check_parameters(self) -> None:
        if self.length <= 0:
            raise ConfigurationError(f"Length must be greater than zero, got {self.length}.", parameter="length")

    def default_message(self) -> str:
        return f"{self.field_name} field must be exactly {self.length} characters long."


class MinimumLengthRule(BaseRule):
    kind: Literal["minimum_length"] = "minimum_length"
    min_length: int

    def _check_parameters(self) -> None:
        if self.min_length <= 0:
            raise ConfigurationError(
                f"Minimum length must be greater than zero, got {self.min_length}.", parameter="min_length"
            )

    def default_message(self) -> str:
        return f"{self.field_name} field must be at least {self.min_length} characters long."


class MaximumLengthRule(BaseRule):
    kind: Literal["maximum_length"] = "maximum_length"
    max_length: int

    def _check_parameters(self) -> None:
        if self.max_length <= 0:
            raise ConfigurationError(
                f"Maximum length must be greater than zero, got {self.max_length}.", parameter="max_length"
            )

    def default_message(self) -> str:
        return f"{self.field_name} field must not exceed {self.max_length} characters."


class LengthIntervalRule(BaseRule):
    kind: Literal["length_interval"] = "length_interval"
    min_length: int
    max_length: int

    def _check_parameters(self) -> None:
        if self.min_length <= 0:
            raise ConfigurationError(
                f"Minimum length must be greater than zero, got {self.min_length}.", parameter="min_length"
            )
        if self.max_length < self.min_length:
            raise ConfigurationError(
                f"Maximum length must be greater than or equal to minimum length, "
                f"got {self.max_length} < {self.min_length}.",
                parameter="max_length",
            )

    def default_message(self) -> str:
        return (
            f"{self.field_name} field length must be between "
            f"{self.min_length} and {self.max_length} characters."
        )


class MatchesPatternRule(BaseRule):
    """Regex rule. The pattern is compiled once, when the rule is built."""

    kind: Literal["matches_pattern"] = "matches_pattern"
    pattern: str

    _compiled: Optional[re.Pattern] = PrivateAttr(default=None)

    def _check_parameters(self) -> None:
        if not self.pattern or not self.pattern.strip():
            raise ConfigurationError("Pattern cannot be null or empty.", parameter="pattern")

    def model_post_init(self, __context: Any) -> None:
        # Runs before the after-validators, so compile failures are reported here.
        try:
            self._compiled = re.compile(self.pattern)
        except re.error as exc:
            raise ConfigurationError(f"Pattern does not compile: {exc}", parameter="pattern") from exc

    @property
    def compiled(self) -> re.Pattern:
        return self._compiled

    def default_message(self) -> str:
        return f"{self.field_name} must match the pattern: {self.pattern}"


class EmailWithMxRule(BaseRule):
    kind: Literal["email_with_mx"] = "email_with_mx"
    check_mx_record: bool = False

    def default_message(self) -> str:
        return f"{self.field_name} must be a valid email address."


class UrlWithSchemeRule(BaseRule):
    kind: Literal["url_with_scheme"] = "url_with_scheme"
    require_http_scheme: bool = True

    def default_message(self) -> str:
        return f"{self.field_name} must be a valid URL."


RuleDefinition = Annotated[
    Union[
        RequiredRule,
        NotEmptyRule,
        ExactLengthRule,
        MinimumLengthRule,
        MaximumLengthRule,
        LengthIntervalRule,
        MatchesPatternRule,
        EmailWithMxRule,
        UrlWithSchemeRule,
    ],
    Field(discriminator="kind"),
]

_rule_adapter = TypeAdapter(RuleDefinition)


def parse_rule(data: Union[BaseRule, dict]) -> BaseRule:
    """Build a rule from a plain mapping, dispatching on its ``kind`` key."""
    if isinstance(data, BaseRule):
        return data
    try:
        return _rule_adapter.validate_python(data)
    except PydanticValidationError as exc:
        raise configuration_error_from(exc, "rule definition") from exc
