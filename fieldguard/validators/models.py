"""Validation models — severity levels, findings, degraded-check warnings and the result.

Findings and results are immutable value objects created fresh for every run.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from fieldguard.config import Settings, get_settings
from fieldguard.validators.errors import ConfigurationError


class Severity(str, Enum):
    """Finding severity levels, ordered from least to most severe."""

    INFO = "info"          # Informational only
    WARNING = "warning"    # Should be looked at, never fails a record by default
    ERROR = "error"        # Record is invalid
    CRITICAL = "critical"  # Record is invalid and likely unusable

    @property
    def rank(self) -> int:
        return list(Severity).index(self)

    def _rank_of(self, other) -> Optional[int]:
        if isinstance(other, Severity):
            return other.rank
        if isinstance(other, str):
            try:
                return Severity(other).rank
            except ValueError:
                return None
        return None

    def __lt__(self, other):
        rank = self._rank_of(other)
        return NotImplemented if rank is None else self.rank < rank

    def __le__(self, other):
        rank = self._rank_of(other)
        return NotImplemented if rank is None else self.rank <= rank

    def __gt__(self, other):
        rank = self._rank_of(other)
        return NotImplemented if rank is None else self.rank > rank

    def __ge__(self, other):
        rank = self._rank_of(other)
        return NotImplemented if rank is None else self.rank >= rank


class RuleKind(str, Enum):
    """The fixed set of rule kinds the engine knows how to evaluate."""

    REQUIRED = "required"
    NOT_EMPTY = "not_empty"
    EXACT_LENGTH = "exact_length"
    MINIMUM_LENGTH = "minimum_length"
    MAXIMUM_LENGTH = "maximum_length"
    LENGTH_INTERVAL = "length_interval"
    MATCHES_PATTERN = "matches_pattern"
    EMAIL_WITH_MX = "email_with_mx"
    URL_WITH_SCHEME = "url_with_scheme"


class DegradedReason(str, Enum):
    """Why an evaluator could not complete its check."""

    TIMEOUT = "timeout"
    TRANSIENT_FAILURE = "transient_failure"


class ValidationError(BaseModel):
    """A single rule violation."""

    field_name: str
    rule_kind: RuleKind
    severity: Severity
    message: str
    suggested_value: Optional[str] = None

    model_config = {"frozen": True}


class EvaluatorWarning(BaseModel):
    """A check that could not be completed and was treated as passing."""

    field_name: str
    rule_kind: RuleKind
    reason: DegradedReason
    message: str

    model_config = {"frozen": True}


class ValidateOptions(BaseModel):
    """Per-call knobs for a validation run."""

    failure_threshold: Severity = Severity.ERROR
    mx_timeout: Optional[float] = Field(default=None, gt=0, description="Seconds; None uses the configured default")
    check_mx: bool = Field(default=True, description="Global switch for MX lookups")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ValidateOptions":
        settings = settings or get_settings()
        try:
            threshold = Severity(settings.FAILURE_THRESHOLD.lower())
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown failure threshold '{settings.FAILURE_THRESHOLD}', "
                f"expected one of: {', '.join(s.value for s in Severity)}",
                parameter="FAILURE_THRESHOLD",
            ) from exc
        return cls(
            failure_threshold=threshold,
            mx_timeout=settings.MX_LOOKUP_TIMEOUT_SECONDS,
            check_mx=settings.MX_CHECK_ENABLED,
        )


class ValidationResult(BaseModel):
    """Outcome of one validation run.

    ``errors`` is ordered by field binding, then by rule order within the
    binding. ``is_valid`` is derived from ``errors`` on every access. Two
    results compare equal when their error sequences are equal.
    """

    errors: tuple[ValidationError, ...] = ()
    warnings: tuple[EvaluatorWarning, ...] = ()
    failure_threshold: Severity = Severity.ERROR

    model_config = {"frozen": True}

    @classmethod
    def build(
        cls,
        errors: list[ValidationError],
        warnings: Optional[list[EvaluatorWarning]] = None,
        failure_threshold: Severity = Severity.ERROR,
    ) -> "ValidationResult":
        return cls(
            errors=tuple(errors),
            warnings=tuple(warnings or ()),
            failure_threshold=failure_threshold,
        )

    @property
    def is_valid(self) -> bool:
        return not any(err.severity >= self.failure_threshold for err in self.errors)

    @property
    def degraded(self) -> bool:
        """True if at least one check could not be completed."""
        return bool(self.warnings)

    @property
    def summary(self) -> dict[str, int]:
        """Count of errors by severity."""
        summary = {severity.value: 0 for severity in Severity}
        for err in self.errors:
            summary[err.severity.value] += 1
        return summary

    def errors_for(self, field_name: str) -> list[ValidationError]:
        return [err for err in self.errors if err.field_name == field_name]

    def at_least(self, severity: Severity) -> list[ValidationError]:
        """Errors at or above the given severity, in result order."""
        return [err for err in self.errors if err.severity >= severity]

    def __eq__(self, other):
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return self.errors == other.errors

    def __hash__(self):
        return hash(self.errors)
