"""Email Evaluator — address syntax plus an optional MX record check.

Syntax is checked first; a malformed address never triggers a lookup.
A lookup that times out or hits a transient DNS failure does not fail the
rule: the address passes on syntax alone and a degraded-check warning is
recorded. Only a definite "no MX records" answer is a validation error.
"""

import asyncio
import re
from typing import Any, Optional

import structlog

from fieldguard.services.resolver import DnsMxResolver, MxLookupResult, MxLookupStatus, MxResolver
from fieldguard.validators.base import BaseRuleEvaluator, EvaluationContext
from fieldguard.validators.models import DegradedReason, RuleKind, ValidationError
from fieldguard.validators.rules import BaseRule

logger = structlog.get_logger()

# RFC 5322 dot-atom local part, hostname-style domain with at least one dot
EMAIL_PATTERN = re.compile(
    r"(?P<local>[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*)"
    r"@"
    r"(?P<domain>(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+"
    r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)"
)

MAX_LOCAL_LENGTH = 64
MAX_ADDRESS_LENGTH = 254


def email_domain(address: str) -> Optional[str]:
    """Return the lowercased domain of a syntactically valid address, else None."""
    if len(address) > MAX_ADDRESS_LENGTH:
        return None
    match = EMAIL_PATTERN.fullmatch(address)
    if match is None or len(match.group("local")) > MAX_LOCAL_LENGTH:
        return None
    return match.group("domain").lower()


class EmailEvaluator(BaseRuleEvaluator):
    """Validates email addresses, consulting DNS for MX records when asked to."""

    def __init__(self, resolver: Optional[MxResolver] = None):
        self.resolver = resolver or DnsMxResolver()

    @property
    def name(self) -> str:
        return "EmailEvaluator"

    @property
    def kinds(self) -> frozenset:
        return frozenset({RuleKind.EMAIL_WITH_MX})

    def evaluate(self, value: Any, rule: BaseRule, context: EvaluationContext) -> Optional[ValidationError]:
        """Syntax-only check. The engine calls evaluate_async, which adds the MX lookup."""
        if value is None:
            return None
        if email_domain(self._require_text(value, rule)) is None:
            return self._error(rule)
        return None

    async def evaluate_async(
        self, value: Any, rule: BaseRule, context: EvaluationContext
    ) -> Optional[ValidationError]:
        if value is None:
            return None

        domain = email_domain(self._require_text(value, rule))
        if domain is None:
            return self._error(rule)

        if not (rule.check_mx_record and context.options.check_mx):
            return None

        result = await self._lookup(domain, context.mx_timeout)

        if result.status == MxLookupStatus.FOUND and result.records:
            return None

        if result.status in (MxLookupStatus.NOT_FOUND, MxLookupStatus.FOUND):
            logger.debug("mx_records_missing", field=rule.field_name, domain=domain, detail=result.detail)
            return self._error(rule)

        reason = (
            DegradedReason.TIMEOUT
            if result.status == MxLookupStatus.TIMED_OUT
            else DegradedReason.TRANSIENT_FAILURE
        )
        logger.warning(
            "mx_lookup_degraded",
            field=rule.field_name,
            domain=domain,
            reason=reason.value,
            detail=result.detail,
        )
        context.warn(
            rule,
            reason,
            f"Could not check MX records for '{domain}' ({reason.value}); accepted on syntax alone.",
        )
        return None

    async def _lookup(self, domain: str, timeout: float) -> MxLookupResult:
        """Run the resolver under a hard deadline."""
        try:
            return await asyncio.wait_for(self.resolver.lookup_mx(domain, timeout), timeout=timeout)
        except asyncio.TimeoutError:
            return MxLookupResult.timed_out(detail=f"no answer within {timeout}s")
