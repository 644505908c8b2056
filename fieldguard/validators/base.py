"""Base evaluator — abstract class implementing the Strategy Pattern.

Each evaluator handles one family of rule kinds and is independently testable.
New evaluators are registered on the engine without modifying it.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel, Field

from fieldguard.validators.errors import RuleTypeError
from fieldguard.validators.models import (
    DegradedReason,
    EvaluatorWarning,
    ValidateOptions,
    ValidationError,
)
from fieldguard.validators.rules import BaseRule


class EvaluationContext(BaseModel):
    """Per-rule-invocation state handed to an evaluator.

    Collects degraded-check warnings for the single rule being evaluated,
    so concurrent fields never share a sink.
    """

    options: ValidateOptions
    mx_timeout: float
    warnings: list[EvaluatorWarning] = Field(default_factory=list)

    def warn(self, rule: BaseRule, reason: DegradedReason, message: str) -> None:
        self.warnings.append(
            EvaluatorWarning(
                field_name=rule.field_name,
                rule_kind=rule.rule_kind,
                reason=reason,
                message=message,
            )
        )


class BaseRuleEvaluator(ABC):
    """Abstract base for all rule evaluators.

    Contract:
        - evaluate() returns at most one ValidationError (None = rule passed)
        - validation failures are returned, never raised
        - a value of the wrong type for the rule raises RuleTypeError
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging."""
        ...

    @property
    @abstractmethod
    def kinds(self) -> frozenset:
        """Rule kinds this evaluator handles."""
        ...

    @abstractmethod
    def evaluate(self, value: Any, rule: BaseRule, context: EvaluationContext) -> Optional[ValidationError]:
        """Check one value against one rule.

        Args:
            value: Current value of the bound field
            rule: The rule definition to apply
            context: Options and warning sink for this invocation

        Returns:
            A ValidationError if the rule is violated, otherwise None
        """
        ...

    async def evaluate_async(
        self, value: Any, rule: BaseRule, context: EvaluationContext
    ) -> Optional[ValidationError]:
        """Async entry point used by the engine. Pure evaluators just delegate."""
        return self.evaluate(value, rule, context)

    # ── Helper Methods ──

    def _error(self, rule: BaseRule, message: Optional[str] = None) -> ValidationError:
        """Convenience method to create a ValidationError from a rule."""
        return ValidationError(
            field_name=rule.field_name,
            rule_kind=rule.rule_kind,
            severity=rule.severity,
            message=message or rule.message,
            suggested_value=rule.suggested_value,
        )

    def _require_text(self, value: Any, rule: BaseRule) -> str:
        """Ensure a string rule is looking at a string."""
        if not isinstance(value, str):
            raise RuleTypeError(rule.field_name, rule.kind, type(value))
        return value
