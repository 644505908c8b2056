"""URL Evaluator — absolute URL rules with an optional http(s) scheme requirement."""

from typing import Any, Optional

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from fieldguard.validators.base import BaseRuleEvaluator, EvaluationContext
from fieldguard.validators.models import RuleKind, ValidationError
from fieldguard.validators.rules import BaseRule

HTTP_SCHEMES = {"http", "https"}

_url_adapter = TypeAdapter(AnyUrl)


def parse_url(text: str) -> Optional[AnyUrl]:
    """Parse an absolute URL, or return None if it is not well formed."""
    try:
        return _url_adapter.validate_python(text)
    except PydanticValidationError:
        return None


class UrlEvaluator(BaseRuleEvaluator):
    """Fails values that are not absolute URLs, or not http(s) when required."""

    @property
    def name(self) -> str:
        return "UrlEvaluator"

    @property
    def kinds(self) -> frozenset:
        return frozenset({RuleKind.URL_WITH_SCHEME})

    def evaluate(self, value: Any, rule: BaseRule, context: EvaluationContext) -> Optional[ValidationError]:
        if value is None:
            return None

        text = self._require_text(value, rule).strip()
        if not text:
            return self._error(rule)

        url = parse_url(text)
        if url is None:
            return self._error(rule)
        if rule.require_http_scheme and url.scheme.lower() not in HTTP_SCHEMES:
            return self._error(rule)
        return None
