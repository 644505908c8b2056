"""Record validation — declarative field rules evaluated exhaustively against records.

Usage:
    from fieldguard.validators import SchemaBuilder, validation_engine

    schema = SchemaBuilder().field("email").required().email().done().build()
    result = validation_engine.validate(schema, {"email": "user@example.com"})
    if not result.is_valid:
        # Report result.errors
"""

from fieldguard.validators.engine import ValidationEngine, validation_engine
from fieldguard.validators.errors import ConfigurationError, FieldNotFoundError, RuleTypeError
from fieldguard.validators.models import (
    DegradedReason,
    EvaluatorWarning,
    RuleKind,
    Severity,
    ValidateOptions,
    ValidationError,
    ValidationResult,
)
from fieldguard.validators.rules import (
    EmailWithMxRule,
    ExactLengthRule,
    LengthIntervalRule,
    MatchesPatternRule,
    MaximumLengthRule,
    MinimumLengthRule,
    NotEmptyRule,
    RequiredRule,
    RuleDefinition,
    UrlWithSchemeRule,
    parse_rule,
)
from fieldguard.validators.schema import FieldBinding, SchemaBuilder
from fieldguard.validators.schema_loader import load_schema

__all__ = [
    "ValidationEngine",
    "validation_engine",
    "ConfigurationError",
    "FieldNotFoundError",
    "RuleTypeError",
    "DegradedReason",
    "EvaluatorWarning",
    "RuleKind",
    "Severity",
    "ValidateOptions",
    "ValidationError",
    "ValidationResult",
    "RuleDefinition",
    "RequiredRule",
    "NotEmptyRule",
    "ExactLengthRule",
    "MinimumLengthRule",
    "MaximumLengthRule",
    "LengthIntervalRule",
    "MatchesPatternRule",
    "EmailWithMxRule",
    "UrlWithSchemeRule",
    "parse_rule",
    "FieldBinding",
    "SchemaBuilder",
    "load_schema",
]
