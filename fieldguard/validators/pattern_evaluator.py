"""Pattern Evaluator — regular expression rules.

Uses ``re.search``: the rule passes if the pattern matches anywhere in the
value. Anchor the pattern (``^...$``) to require a full match.
"""

from typing import Any, Optional

from fieldguard.validators.base import BaseRuleEvaluator, EvaluationContext
from fieldguard.validators.models import RuleKind, ValidationError
from fieldguard.validators.rules import BaseRule


class PatternEvaluator(BaseRuleEvaluator):
    """Applies the rule's precompiled pattern."""

    @property
    def name(self) -> str:
        return "PatternEvaluator"

    @property
    def kinds(self) -> frozenset:
        return frozenset({RuleKind.MATCHES_PATTERN})

    def evaluate(self, value: Any, rule: BaseRule, context: EvaluationContext) -> Optional[ValidationError]:
        if value is None:
            return None

        text = self._require_text(value, rule)
        if rule.compiled.search(text) is None:
            return self._error(rule)
        return None
