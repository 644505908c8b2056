"""Length Evaluator — exact, minimum, maximum and interval length rules.

Length is the number of Unicode code points (``len(str)``). Bounds are
inclusive. ``None`` passes: absence is the Required rule's concern.
"""

from typing import Any, Optional

from fieldguard.validators.base import BaseRuleEvaluator, EvaluationContext
from fieldguard.validators.models import RuleKind, ValidationError
from fieldguard.validators.rules import BaseRule


class LengthEvaluator(BaseRuleEvaluator):
    """Checks string length against the bounds carried by the rule."""

    @property
    def name(self) -> str:
        return "LengthEvaluator"

    @property
    def kinds(self) -> frozenset:
        return frozenset({
            RuleKind.EXACT_LENGTH,
            RuleKind.MINIMUM_LENGTH,
            RuleKind.MAXIMUM_LENGTH,
            RuleKind.LENGTH_INTERVAL,
        })

    def evaluate(self, value: Any, rule: BaseRule, context: EvaluationContext) -> Optional[ValidationError]:
        if value is None:
            return None

        length = len(self._require_text(value, rule))
        low, high = self._bounds(rule)

        if (low is not None and length < low) or (high is not None and length > high):
            return self._error(rule)
        return None

    @staticmethod
    def _bounds(rule: BaseRule) -> tuple[Optional[int], Optional[int]]:
        """(min, max) for the rule; None means unbounded on that side."""
        kind = rule.rule_kind
        if kind == RuleKind.EXACT_LENGTH:
            return rule.length, rule.length
        if kind == RuleKind.MINIMUM_LENGTH:
            return rule.min_length, None
        if kind == RuleKind.MAXIMUM_LENGTH:
            return None, rule.max_length
        return rule.min_length, rule.max_length
