"""MX resolvers — the DNS boundary used by the email rule.

``DnsMxResolver`` does real lookups through dnspython. ``StaticMxResolver``
answers from memory, for tests and offline environments.
"""

import asyncio
from enum import Enum
from typing import Optional, Protocol

import dns.asyncresolver
import dns.exception
import dns.resolver
import structlog
from pydantic import BaseModel
from tenacity import AsyncRetrying, RetryError, retry_if_exception_type, stop_after_attempt, wait_exponential

from fieldguard.config import get_settings

logger = structlog.get_logger()


class MxLookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    TIMED_OUT = "timed_out"
    TRANSIENT_ERROR = "transient_error"


class MxLookupResult(BaseModel):
    """Outcome of one MX lookup. ``records`` holds exchange hostnames, best preference first."""

    status: MxLookupStatus
    records: tuple[str, ...] = ()
    detail: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def found(cls, records: list[str]) -> "MxLookupResult":
        return cls(status=MxLookupStatus.FOUND, records=tuple(records))

    @classmethod
    def not_found(cls, detail: Optional[str] = None) -> "MxLookupResult":
        return cls(status=MxLookupStatus.NOT_FOUND, detail=detail)

    @classmethod
    def timed_out(cls, detail: Optional[str] = None) -> "MxLookupResult":
        return cls(status=MxLookupStatus.TIMED_OUT, detail=detail)

    @classmethod
    def transient_error(cls, detail: Optional[str] = None) -> "MxLookupResult":
        return cls(status=MxLookupStatus.TRANSIENT_ERROR, detail=detail)


class MxResolver(Protocol):
    """Anything that can look up MX records for a domain within a time budget."""

    async def lookup_mx(self, domain: str, timeout: float) -> MxLookupResult:
        ...


class DnsMxResolver:
    """MX lookups through dnspython's asyncio resolver.

    NXDOMAIN and empty answers are NOT_FOUND. Timeouts are TIMED_OUT.
    Server failures are retried, then reported as TRANSIENT_ERROR.
    """

    def __init__(self, nameservers: Optional[list[str]] = None, retries: Optional[int] = None):
        settings = get_settings()
        self.nameservers = nameservers if nameservers is not None else list(settings.DNS_NAMESERVERS)
        self.retries = retries if retries is not None else settings.MX_LOOKUP_RETRIES
        self._resolver: Optional[dns.asyncresolver.Resolver] = None

    @property
    def resolver(self) -> dns.asyncresolver.Resolver:
        """Lazy-initialize the dnspython resolver (reads system config on first use)."""
        if self._resolver is None:
            self._resolver = self._create_resolver()
        return self._resolver

    def _create_resolver(self) -> dns.asyncresolver.Resolver:
        if self.nameservers:
            resolver = dns.asyncresolver.Resolver(configure=False)
            resolver.nameservers = self.nameservers
            return resolver
        return dns.asyncresolver.Resolver()

    async def _resolve(self, domain: str, timeout: float) -> list[str]:
        answer = await self.resolver.resolve(domain, "MX", lifetime=timeout)
        ranked = sorted(answer, key=lambda record: record.preference)
        return [record.exchange.to_text(omit_final_dot=True) for record in ranked]

    async def lookup_mx(self, domain: str, timeout: float) -> MxLookupResult:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, self.retries)),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
            retry=retry_if_exception_type(dns.resolver.NoNameservers),
            before_sleep=lambda retry_state: logger.warning(
                "mx_lookup_retry",
                domain=domain,
                attempt=retry_state.attempt_number,
                wait=retry_state.next_action.sleep,
            ),
        )
        try:
            async for attempt in retrying:
                with attempt:
                    records = await self._resolve(domain, timeout)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer) as e:
            return MxLookupResult.not_found(detail=type(e).__name__)
        except dns.exception.Timeout as e:
            return MxLookupResult.timed_out(detail=str(e))
        except RetryError as e:
            return MxLookupResult.transient_error(detail=str(e.last_attempt.exception()))
        except dns.exception.DNSException as e:
            return MxLookupResult.transient_error(detail=f"{type(e).__name__}: {e}")
        except OSError as e:
            return MxLookupResult.transient_error(detail=f"{type(e).__name__}: {e}")

        if not records:
            return MxLookupResult.not_found(detail="empty answer")
        return MxLookupResult.found(records)


class StaticMxResolver:
    """In-memory resolver. Unknown domains are NOT_FOUND.

    ``delay`` makes every lookup sleep first, to exercise timeouts.
    """

    def __init__(self, answers: Optional[dict[str, MxLookupResult]] = None, delay: float = 0.0):
        self.answers = {domain.lower(): result for domain, result in (answers or {}).items()}
        self.delay = delay
        self.lookups: list[str] = []

    async def lookup_mx(self, domain: str, timeout: float) -> MxLookupResult:
        self.lookups.append(domain)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.answers.get(domain.lower(), MxLookupResult.not_found(detail="no static answer"))
