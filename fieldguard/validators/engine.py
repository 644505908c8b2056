"""Validation Engine — runs every bound rule against a record and collects all violations.

This is the main entry point for record validation. It dispatches each rule to
the evaluator registered for its kind and produces a ValidationResult.

Usage:
    engine = ValidationEngine()
    result = engine.validate(schema, {"email": "user@example.com"})
    if not result.is_valid:
        # Report result.errors back to the caller
"""

import asyncio
import time
from collections.abc import Mapping
from typing import Any, Iterable, Optional

import structlog

from fieldguard.config import Settings, get_settings
from fieldguard.services.resolver import MxResolver
from fieldguard.validators.base import BaseRuleEvaluator, EvaluationContext
from fieldguard.validators.errors import ConfigurationError, FieldNotFoundError
from fieldguard.validators.models import (
    EvaluatorWarning,
    RuleKind,
    ValidateOptions,
    ValidationError,
    ValidationResult,
)
from fieldguard.validators.schema import FieldBinding

# Import all evaluators
from fieldguard.validators.presence_evaluator import PresenceEvaluator
from fieldguard.validators.length_evaluator import LengthEvaluator
from fieldguard.validators.pattern_evaluator import PatternEvaluator
from fieldguard.validators.email_evaluator import EmailEvaluator
from fieldguard.validators.url_evaluator import UrlEvaluator

logger = structlog.get_logger()

_MISSING = object()


class ValidationEngine:
    """Evaluates field bindings against records.

    Design principles:
        - Exhaustive: one failing rule never stops the rules or fields after it
        - Deterministic: errors come back in binding order, then rule order
        - Schema problems raise ConfigurationError before any rule runs
        - Only the MX lookup suspends; fields are evaluated concurrently
    """

    def __init__(
        self,
        resolver: Optional[MxResolver] = None,
        evaluators: Optional[list[BaseRuleEvaluator]] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize with the default evaluators or a custom list.

        Args:
            resolver: MX resolver for the email rule. Defaults to DNS via dnspython.
            evaluators: Optional list of evaluators. If None, uses all defaults.
            settings: Optional settings. If None, uses the cached environment settings.
        """
        self.settings = settings or get_settings()
        self._evaluators: dict[RuleKind, BaseRuleEvaluator] = {}
        if evaluators is None:
            evaluators = self._default_evaluators(resolver)
        for evaluator in evaluators:
            self.register_evaluator(evaluator)

    @staticmethod
    def _default_evaluators(resolver: Optional[MxResolver]) -> list[BaseRuleEvaluator]:
        """Create one evaluator per rule family."""
        return [
            PresenceEvaluator(),         # Required, NotEmpty
            LengthEvaluator(),           # ExactLength, MinimumLength, MaximumLength, LengthInterval
            PatternEvaluator(),          # MatchesPattern
            EmailEvaluator(resolver),    # EmailWithMx (the only one that touches the network)
            UrlEvaluator(),              # UrlWithScheme
        ]

    def register_evaluator(self, evaluator: BaseRuleEvaluator) -> None:
        """Register an evaluator, replacing any existing one for the same kinds."""
        for kind in evaluator.kinds:
            self._evaluators[RuleKind(kind)] = evaluator

    def evaluator_for(self, kind: RuleKind) -> BaseRuleEvaluator:
        evaluator = self._evaluators.get(RuleKind(kind))
        if evaluator is None:
            raise ConfigurationError(f"No evaluator registered for rule kind '{kind}'", parameter="kind")
        return evaluator

    def validate(
        self,
        schema: Iterable[FieldBinding],
        record: Any,
        options: Optional[ValidateOptions] = None,
    ) -> ValidationResult:
        """Synchronous wrapper around validate_async for callers without a running event loop.

        Raises:
            RuntimeError: called from inside a running event loop
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.validate_async(schema, record, options))
        raise RuntimeError("validate() cannot run inside an event loop; await validate_async() instead")

    async def validate_async(
        self,
        schema: Iterable[FieldBinding],
        record: Any,
        options: Optional[ValidateOptions] = None,
    ) -> ValidationResult:
        """Run every enabled rule of every enabled binding against the record.

        Args:
            schema: Field bindings, in reporting order
            record: A mapping of field name to value, or any object with those attributes
            options: Per-call options. If None, built from settings.

        Returns:
            ValidationResult with every violation found

        Raises:
            ConfigurationError: a bound field is missing from the record, a value has
                the wrong type for a string rule, or a rule kind has no evaluator
        """
        options = options or ValidateOptions.from_settings(self.settings)
        mx_timeout = options.mx_timeout or self.settings.MX_LOOKUP_TIMEOUT_SECONDS
        start_time = time.perf_counter()

        # Resolve all values first, so a schema/record mismatch fails before any rule runs
        bindings = [binding for binding in schema if binding.enabled]
        values = []
        for binding in bindings:
            for rule in binding.active_rules:
                self.evaluator_for(rule.rule_kind)
            values.append(self._read_field(record, binding.field_name))

        tasks = [
            asyncio.ensure_future(self._evaluate_binding(binding, value, options, mx_timeout))
            for binding, value in zip(bindings, values)
        ]
        try:
            # gather returns outcomes in submission order, whatever order the fields finish in
            outcomes = await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        all_errors: list[ValidationError] = []
        all_warnings: list[EvaluatorWarning] = []
        for errors, warnings in outcomes:
            all_errors.extend(errors)
            all_warnings.extend(warnings)

        result = ValidationResult.build(all_errors, all_warnings, options.failure_threshold)

        total_duration = (time.perf_counter() - start_time) * 1000

        logger.info(
            "validation_complete",
            valid=result.is_valid,
            fields=len(bindings),
            total_errors=len(all_errors),
            degraded_checks=len(all_warnings),
            summary=result.summary,
            duration_ms=round(total_duration, 2),
        )

        return result

    async def _evaluate_binding(
        self,
        binding: FieldBinding,
        value: Any,
        options: ValidateOptions,
        mx_timeout: float,
    ) -> tuple[list[ValidationError], list[EvaluatorWarning]]:
        """Evaluate one binding's enabled rules in declared order."""
        errors: list[ValidationError] = []
        warnings: list[EvaluatorWarning] = []

        for rule in binding.active_rules:
            context = EvaluationContext(options=options, mx_timeout=mx_timeout)
            error = await self.evaluator_for(rule.rule_kind).evaluate_async(value, rule, context)
            if error is not None:
                errors.append(error)
            warnings.extend(context.warnings)

        return errors, warnings

    @staticmethod
    def _read_field(record: Any, field_name: str) -> Any:
        """Look a field up by key on mappings, by attribute on anything else."""
        if isinstance(record, Mapping):
            if field_name not in record:
                raise FieldNotFoundError(field_name)
            return record[field_name]

        value = getattr(record, field_name, _MISSING)
        if value is _MISSING:
            raise FieldNotFoundError(field_name)
        return value


# Module-level singleton
validation_engine = ValidationEngine()
