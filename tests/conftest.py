"""Shared test fixtures for the fieldguard test suite."""

import pytest

from fieldguard.config import Settings
from fieldguard.services.resolver import MxLookupResult, StaticMxResolver
from fieldguard.validators.base import EvaluationContext
from fieldguard.validators.engine import ValidationEngine
from fieldguard.validators.models import ValidateOptions
from fieldguard.validators.schema import SchemaBuilder


@pytest.fixture
def settings() -> Settings:
    return Settings(MX_LOOKUP_TIMEOUT_SECONDS=0.5, MX_LOOKUP_RETRIES=1)


@pytest.fixture
def static_resolver() -> StaticMxResolver:
    """Resolver with one deliverable and one undeliverable domain."""
    return StaticMxResolver(
        {
            "example.com": MxLookupResult.found(["mx1.example.com", "mx2.example.com"]),
            "example.invalid": MxLookupResult.not_found(detail="NXDOMAIN"),
            "flaky.example.org": MxLookupResult.transient_error(detail="SERVFAIL"),
            "slow.example.org": MxLookupResult.timed_out(detail="lifetime exceeded"),
        }
    )


@pytest.fixture
def engine(static_resolver: StaticMxResolver, settings: Settings) -> ValidationEngine:
    return ValidationEngine(resolver=static_resolver, settings=settings)


@pytest.fixture
def offline_options() -> ValidateOptions:
    """Options with MX lookups switched off globally."""
    return ValidateOptions(check_mx=False)


@pytest.fixture
def context() -> EvaluationContext:
    return EvaluationContext(options=ValidateOptions(), mx_timeout=0.5)


@pytest.fixture
def signup_schema():
    """A small realistic schema touching every rule kind."""
    return (
        SchemaBuilder()
        .field("username").required().not_empty().length_between(3, 12).matches(r"^[a-z0-9_]+$").done()
        .field("pin").exact_length(4).matches(r"^\d+$").done()
        .field("bio").max_length(20, severity="warning").done()
        .field("password").min_length(8, severity="critical").done()
        .field("email").required().email(check_mx_record=True, suggested_value="user@example.com").done()
        .field("homepage").url(require_http_scheme=True).done()
        .build()
    )


@pytest.fixture
def valid_signup() -> dict:
    return {
        "username": "jane_doe",
        "pin": "1234",
        "bio": "Hello there",
        "password": "correct-horse",
        "email": "jane@example.com",
        "homepage": "https://example.com/jane",
    }
