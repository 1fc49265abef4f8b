"""Recursive, rule-driven input sanitation.

Turns a raw command payload into a new sanitized mapping that mirrors the
input's structure:

    1. Host escaping (``\\'``, ``\\"``, ``\\\\``) is removed from every string,
       for hosts that add it (``unescape_host_input``; off by default).
    2. Every mapping key is normalized to ``[a-z0-9_-]``.
    3. Each field's rule is resolved: expected rules, then the default rule
       table, then plain text.
    4. The RAW value is checked against the rule (required, allowed values,
       max length, numeric range). The first violation fails the whole
       payload with a ``ValidationError`` whose field is the dotted path.
    5. Containers recurse; scalars go through the sanitizer registered for
       the rule's type.

The caller's payload is never mutated. Sanitation is idempotent unless host
unescaping is enabled (every pass removes one level of backslashes).

Usage:
    validator = InputValidator(error_logger=error_logger)
    match validator.sanitize(payload, {"font_size": FieldRule(field_type=FieldType.INTEGER)}):
        case Success(value=clean):
            ...
        case Failure(error=error):
            envelope.validation_error(error.as_field_errors())
"""

import json
from collections.abc import Mapping
from typing import Any

from command_gateway.application.services.error_logger import ErrorLogger
from command_gateway.core.errors import ErrorCode, ValidationError
from command_gateway.core.result import Failure, Result, Success
from command_gateway.domain.enums import FieldType
from command_gateway.domain.validators import (
    DEFAULT_FIELD_RULES,
    Sanitizer,
    SanitizerRegistry,
    build_default_registry,
    is_numeric,
    sanitize_key,
    unslash,
)
from command_gateway.domain.value_objects import TEXT_RULE, FieldRule, Identity, RequestInfo

type RuleMap = Mapping[str, FieldRule]


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (Mapping, list, tuple)):
        return len(value) == 0
    return False


def _as_rule(rule: FieldRule | Mapping[str, Any]) -> FieldRule:
    return rule if isinstance(rule, FieldRule) else FieldRule.from_mapping(rule)


def _strip_host_escaping(data: Any) -> Any:
    if isinstance(data, str):
        return unslash(data)
    if isinstance(data, Mapping):
        return {key: _strip_host_escaping(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [_strip_host_escaping(item) for item in data]
    return data


def _invalid(code: ErrorCode, field: str, message: str) -> Failure[ValidationError]:
    return Failure(error=ValidationError(code=code, field=field, message=message))


class InputValidator:
    """Sanitizes and validates payloads against declarative field rules.

    Dependencies (injected via constructor):
        - SanitizerRegistry: field type to sanitizer strategy table
        - ErrorLogger (optional): receives sanitation modification events
    """

    def __init__(
        self,
        *,
        registry: SanitizerRegistry | None = None,
        field_rules: Mapping[str, FieldRule | Mapping[str, Any]] | None = None,
        error_logger: ErrorLogger | None = None,
        unescape_host_input: bool = False,
    ) -> None:
        """Initialize the validator.

        Args:
            registry: Sanitizer table. Defaults to a fresh built-in registry.
            field_rules: Default rule table. Defaults to ``DEFAULT_FIELD_RULES``.
            error_logger: Receives input events for modified values.
            unescape_host_input: Remove host-added backslash escaping first.
        """
        self._registry = registry or build_default_registry()
        source = DEFAULT_FIELD_RULES if field_rules is None else field_rules
        self._field_rules: dict[str, FieldRule] = {
            name: _as_rule(rule) for name, rule in source.items()
        }
        self._error_logger = error_logger
        self._unescape_host_input = unescape_host_input

    # =========================================================================
    # Public API
    # =========================================================================

    def sanitize(
        self,
        raw: Mapping[str, Any],
        expected_rules: Mapping[str, FieldRule | Mapping[str, Any]] | None = None,
        *,
        action: str | None = None,
        identity: Identity | None = None,
        request: RequestInfo | None = None,
    ) -> Result[dict[str, Any], ValidationError]:
        """Sanitize a whole payload.

        Args:
            raw: Raw payload. Not modified.
            expected_rules: Rules taking precedence over the default table.
            action: Command action, reported with modification events.
            identity: Caller, reported with modification events.
            request: Request metadata, reported with modification events.

        Returns:
            Success(dict): New sanitized payload.
            Failure(ValidationError): First field that violated its rule.
        """
        rules = {name: _as_rule(rule) for name, rule in (expected_rules or {}).items()}
        unescaped = _strip_host_escaping(raw) if self._unescape_host_input else raw
        result = self._process_mapping(unescaped, rules, "")
        if isinstance(result, Success):
            self._report_modifications(
                unescaped, result.value, action=action, identity=identity, request=request
            )
        return result

    def validate_field(
        self,
        name: str,
        value: Any,
        rules: FieldRule | Mapping[str, Any] | None = None,
    ) -> Result[Any, ValidationError]:
        """Check and sanitize a single value.

        Args:
            name: Field name (used for rule lookup and error paths).
            value: Raw value.
            rules: Rule to apply instead of the table entry for ``name``.
        """
        rule = _as_rule(rules) if rules else self._field_rules.get(name, TEXT_RULE)
        return self._process_value(value, rule, name, {})

    def add_field_rule(self, name: str, rule: FieldRule | Mapping[str, Any]) -> None:
        """Add or replace the default rule for a field."""
        self._field_rules[sanitize_key(name)] = _as_rule(rule)

    def get_field_rule(self, name: str) -> FieldRule | None:
        """Default rule for a field, or None when undeclared."""
        return self._field_rules.get(name)

    def register_sanitizer(
        self, field_type: FieldType, sanitizer: Sanitizer, *, description: str = ""
    ) -> None:
        """Register (or replace) the sanitizer used for a field type."""
        self._registry.register(field_type, sanitizer, description=description)

    # =========================================================================
    # Recursion
    # =========================================================================

    def _resolve_rule(self, key: str, raw_key: Any, rules: RuleMap) -> FieldRule:
        for candidate in (key, str(raw_key)):
            if candidate in rules:
                return rules[candidate]
        return self._field_rules.get(key, TEXT_RULE)

    def _process_mapping(
        self, data: Mapping[Any, Any], rules: RuleMap, path: str
    ) -> Result[dict[str, Any], ValidationError]:
        processed: dict[str, Any] = {}
        for raw_key, value in data.items():
            key = sanitize_key(raw_key)
            field_path = f"{path}.{key}" if path else key
            rule = self._resolve_rule(key, raw_key, rules)
            result = self._process_value(value, rule, field_path, rules)
            if isinstance(result, Failure):
                return result
            # Keys colliding after normalization: last one wins
            processed[key] = result.value
        return Success(value=processed)

    def _process_value(
        self, value: Any, rule: FieldRule, path: str, rules: RuleMap
    ) -> Result[Any, ValidationError]:
        rejected = self._check_rule(value, rule, path)
        if rejected is not None:
            return rejected

        if rule.field_type == FieldType.JSON and isinstance(value, str):
            if not value.strip():
                return Success(value={})
            try:
                value = json.loads(value)
            except json.JSONDecodeError as e:
                return _invalid(
                    ErrorCode.JSON_DECODE_FAILED,
                    path,
                    f"Invalid JSON in field '{path}': {e.msg}",
                )
            except RecursionError:
                return _invalid(
                    ErrorCode.JSON_DECODE_FAILED,
                    path,
                    f"Invalid JSON in field '{path}': nesting too deep",
                )
            if not isinstance(value, (dict, list)):
                return Success(value={})

        if isinstance(value, Mapping):
            return self._process_mapping(value, rules, path)

        if isinstance(value, (list, tuple)):
            element_rule = rule.for_elements()
            items: list[Any] = []
            for index, item in enumerate(value):
                result = self._process_value(item, element_rule, f"{path}.{index}", rules)
                if isinstance(result, Failure):
                    return result
                items.append(result.value)
            return Success(value=items)

        return Success(value=self._registry.get(rule.field_type)(value))

    @staticmethod
    def _check_rule(value: Any, rule: FieldRule, path: str) -> Failure[ValidationError] | None:
        if rule.required and _is_empty(value):
            return _invalid(
                ErrorCode.FIELD_REQUIRED,
                path,
                f"Required field '{path}' is missing or empty",
            )

        is_container = isinstance(value, (Mapping, list, tuple))
        if rule.allowed_values and not is_container and not _is_empty(value):
            if str(value) not in rule.allowed_values:
                return _invalid(
                    ErrorCode.VALUE_NOT_ALLOWED,
                    path,
                    f"Invalid value for field '{path}'. "
                    f"Allowed: {', '.join(rule.allowed_values)}",
                )

        if rule.max_length is not None and isinstance(value, str):
            if len(value) > rule.max_length:
                return _invalid(
                    ErrorCode.FIELD_TOO_LONG,
                    path,
                    f"Field '{path}' exceeds maximum length of {rule.max_length} characters",
                )

        if is_numeric(value):
            number = float(value.strip() if isinstance(value, str) else value)
            if rule.min_value is not None and number < rule.min_value:
                return _invalid(
                    ErrorCode.VALUE_BELOW_MINIMUM,
                    path,
                    f"Field '{path}' is below minimum value of {rule.min_value}",
                )
            if rule.max_value is not None and number > rule.max_value:
                return _invalid(
                    ErrorCode.VALUE_ABOVE_MAXIMUM,
                    path,
                    f"Field '{path}' exceeds maximum value of {rule.max_value}",
                )
        return None

    def _report_modifications(
        self,
        original: Mapping[Any, Any],
        sanitized: Mapping[str, Any],
        *,
        action: str | None,
        identity: Identity | None,
        request: RequestInfo | None,
    ) -> None:
        if self._error_logger is None:
            return
        modifications: dict[str, Any] = {}
        for raw_key, value in original.items():
            cleaned = sanitized.get(sanitize_key(raw_key))
            if isinstance(value, str) and isinstance(cleaned, str) and value != cleaned:
                modifications[str(raw_key)] = {"original": value, "sanitized": cleaned}
        if modifications:
            self._error_logger.log_input_event(
                "Input sanitization modifications",
                modifications=modifications,
                action=action,
                identity=identity,
                request=request,
            )
