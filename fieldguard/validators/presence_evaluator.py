"""Presence Evaluator — Required and NotEmpty rules."""

import uuid
from decimal import Decimal
from fractions import Fraction
from typing import Any, Optional

from fieldguard.validators.base import BaseRuleEvaluator, EvaluationContext
from fieldguard.validators.models import RuleKind, ValidationError
from fieldguard.validators.rules import BaseRule

# Value types whose zero value counts as "not set"
ZERO_VALUE_TYPES = (bool, int, float, complex, Decimal, Fraction)

NIL_UUID = uuid.UUID(int=0)


def is_default_value(value: Any) -> bool:
    """True for None and for the zero value of numeric-like value types.

    Strings and containers are not value types: an empty string is present.
    """
    if value is None:
        return True
    if isinstance(value, ZERO_VALUE_TYPES):
        return value == type(value)()
    if isinstance(value, uuid.UUID):
        return value == NIL_UUID
    return False


class PresenceEvaluator(BaseRuleEvaluator):
    """Fails absent values (Required) and blank strings (NotEmpty)."""

    @property
    def name(self) -> str:
        return "PresenceEvaluator"

    @property
    def kinds(self) -> frozenset:
        return frozenset({RuleKind.REQUIRED, RuleKind.NOT_EMPTY})

    def evaluate(self, value: Any, rule: BaseRule, context: EvaluationContext) -> Optional[ValidationError]:
        if rule.rule_kind == RuleKind.REQUIRED:
            return self._error(rule) if is_default_value(value) else None

        # NotEmpty: None counts as empty, anything else must be text
        if value is None:
            return self._error(rule)
        text = self._require_text(value, rule)
        if not text or text.isspace():
            return self._error(rule)
        return None
