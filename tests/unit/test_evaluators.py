"""Unit tests for the pure rule evaluators."""

import uuid
from decimal import Decimal

import pytest

from fieldguard.validators.errors import RuleTypeError
from fieldguard.validators.length_evaluator import LengthEvaluator
from fieldguard.validators.models import RuleKind, Severity
from fieldguard.validators.pattern_evaluator import PatternEvaluator
from fieldguard.validators.presence_evaluator import PresenceEvaluator, is_default_value
from fieldguard.validators.rules import (
    ExactLengthRule,
    LengthIntervalRule,
    MatchesPatternRule,
    MaximumLengthRule,
    MinimumLengthRule,
    NotEmptyRule,
    RequiredRule,
    UrlWithSchemeRule,
)
from fieldguard.validators.url_evaluator import UrlEvaluator


class TestRequired:
    """Tests for the Required rule."""

    @pytest.mark.parametrize("value", [None, 0, 0.0, False, Decimal("0"), 0j, uuid.UUID(int=0)])
    def test_absent_or_zero_values_fail(self, context, value):
        rule = RequiredRule(field_name="amount", severity=Severity.CRITICAL, suggested_value="1")
        error = PresenceEvaluator().evaluate(value, rule, context)

        assert error is not None
        assert error.field_name == "amount"
        assert error.rule_kind == RuleKind.REQUIRED
        assert error.severity == Severity.CRITICAL
        assert error.message == rule.message
        assert error.suggested_value == "1"

    @pytest.mark.parametrize("value", ["", "x", 1, -1, 0.5, True, [], uuid.uuid4()])
    def test_present_values_pass(self, context, value):
        rule = RequiredRule(field_name="amount")
        assert PresenceEvaluator().evaluate(value, rule, context) is None

    def test_empty_string_is_present(self):
        assert is_default_value("") is False


class TestNotEmpty:
    """Tests for the NotEmpty rule."""

    @pytest.mark.parametrize("value", [None, "", " ", "\t\n", " "])
    def test_blank_values_fail(self, context, value):
        rule = NotEmptyRule(field_name="name")
        assert PresenceEvaluator().evaluate(value, rule, context) is not None

    @pytest.mark.parametrize("value", ["a", "  a  ", "0"])
    def test_text_passes(self, context, value):
        rule = NotEmptyRule(field_name="name")
        assert PresenceEvaluator().evaluate(value, rule, context) is None

    def test_non_string_is_a_type_error(self, context):
        rule = NotEmptyRule(field_name="name")
        with pytest.raises(RuleTypeError) as exc_info:
            PresenceEvaluator().evaluate(42, rule, context)
        assert exc_info.value.field_name == "name"
        assert exc_info.value.value_type is int


class TestLengthRules:
    """Tests for exact, minimum, maximum and interval length rules."""

    @pytest.mark.parametrize("value,fails", [("hello", False), ("hell", True), ("helloo", True)])
    def test_exact_length(self, context, value, fails):
        rule = ExactLengthRule(field_name="word", length=5)
        assert (LengthEvaluator().evaluate(value, rule, context) is not None) == fails

    @pytest.mark.parametrize(
        "value,fails",
        [("", True), ("a", True), ("ab", False), ("abc", False), ("abcde", False), ("abcdef", True)],
    )
    def test_interval_bounds_are_inclusive(self, context, value, fails):
        rule = LengthIntervalRule(field_name="word", min_length=2, max_length=5)
        assert (LengthEvaluator().evaluate(value, rule, context) is not None) == fails

    def test_minimum_length(self, context):
        rule = MinimumLengthRule(field_name="password", min_length=8)
        assert LengthEvaluator().evaluate("1234567", rule, context) is not None
        assert LengthEvaluator().evaluate("12345678", rule, context) is None

    def test_maximum_length(self, context):
        rule = MaximumLengthRule(field_name="bio", max_length=3)
        assert LengthEvaluator().evaluate("abc", rule, context) is None
        assert LengthEvaluator().evaluate("abcd", rule, context) is not None

    def test_length_counts_code_points(self, context):
        rule = ExactLengthRule(field_name="word", length=4)
        assert LengthEvaluator().evaluate("café", rule, context) is None
        assert LengthEvaluator().evaluate("日本語!", rule, context) is None

    def test_none_is_left_to_required(self, context):
        rule = MinimumLengthRule(field_name="password", min_length=8)
        assert LengthEvaluator().evaluate(None, rule, context) is None

    def test_non_string_is_a_type_error(self, context):
        rule = MaximumLengthRule(field_name="bio", max_length=3)
        with pytest.raises(RuleTypeError):
            LengthEvaluator().evaluate(["a", "b"], rule, context)


class TestMatchesPattern:
    """MatchesPattern uses search semantics: a match anywhere in the value passes."""

    @pytest.mark.parametrize("value,fails", [("123", False), ("12a", True), ("a123b", True)])
    def test_anchored_pattern(self, context, value, fails):
        rule = MatchesPatternRule(field_name="digits", pattern=r"^\d+$")
        assert (PatternEvaluator().evaluate(value, rule, context) is not None) == fails

    def test_unanchored_pattern_searches_anywhere(self, context):
        rule = MatchesPatternRule(field_name="digits", pattern=r"\d+")
        assert PatternEvaluator().evaluate("a123b", rule, context) is None
        assert PatternEvaluator().evaluate("abc", rule, context) is not None

    def test_none_passes(self, context):
        rule = MatchesPatternRule(field_name="digits", pattern=r"\d+")
        assert PatternEvaluator().evaluate(None, rule, context) is None

    def test_non_string_is_a_type_error(self, context):
        rule = MatchesPatternRule(field_name="digits", pattern=r"\d+")
        with pytest.raises(RuleTypeError):
            PatternEvaluator().evaluate(123, rule, context)


class TestUrlWithScheme:
    """Tests for the UrlWithScheme rule."""

    @pytest.mark.parametrize(
        "value",
        ["https://example.com", "http://example.com/path?q=1#frag", "https://sub.example.co.uk:8443/x"],
    )
    def test_http_urls_pass(self, context, value):
        rule = UrlWithSchemeRule(field_name="homepage")
        assert UrlEvaluator().evaluate(value, rule, context) is None

    @pytest.mark.parametrize("value", ["", "   ", "not a url", "example.com", "http://"])
    def test_malformed_urls_fail(self, context, value):
        rule = UrlWithSchemeRule(field_name="homepage", require_http_scheme=False)
        assert UrlEvaluator().evaluate(value, rule, context) is not None

    def test_other_scheme_fails_when_http_required(self, context):
        rule = UrlWithSchemeRule(field_name="homepage", require_http_scheme=True)
        assert UrlEvaluator().evaluate("ftp://files.example.com/a.txt", rule, context) is not None

    def test_other_scheme_passes_when_not_required(self, context):
        rule = UrlWithSchemeRule(field_name="homepage", require_http_scheme=False)
        assert UrlEvaluator().evaluate("ftp://files.example.com/a.txt", rule, context) is None

    def test_none_passes(self, context):
        rule = UrlWithSchemeRule(field_name="homepage")
        assert UrlEvaluator().evaluate(None, rule, context) is None
