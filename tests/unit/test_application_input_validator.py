"""Unit tests for InputValidator (recursive, rule-driven sanitation).

Tests cover:
- Rule checks on raw values (required, allowed values, length, range)
- Dotted error paths for nested fields
- Key normalization and host escaping removal
- JSON fields (string decoding, round trip, decode failure)
- List element rules
- Idempotence and non-mutation of the caller's payload
- Modification events sent to the ErrorLogger
- Runtime rule and sanitizer registration
"""

import copy
import json
from unittest.mock import MagicMock

import pytest

from command_gateway.application.services import InputValidator
from command_gateway.core.errors import ErrorCode, ValidationError
from command_gateway.core.result import Failure, Success
from command_gateway.domain.enums import FieldType
from command_gateway.domain.value_objects import FieldRule


# Two backslashes followed by a quote
BACKSLASH_QUOTE = "C:\\\\'q"


@pytest.fixture
def validator():
    return InputValidator()


def _clean(result):
    assert isinstance(result, Success), result
    return result.value


def _error(result) -> ValidationError:
    assert isinstance(result, Failure), result
    return result.error


@pytest.mark.unit
class TestRuleChecks:
    """Test rule checks applied to raw values."""

    def test_required_empty_string_rejected(self, validator):
        error = _error(validator.sanitize({"option_id": ""}))

        assert error.field == "option_id"
        assert error.code == ErrorCode.FIELD_REQUIRED

    @pytest.mark.parametrize("empty", [None, "", [], {}])
    def test_required_rejects_every_empty_form(self, validator, empty):
        rules = {"title": FieldRule(required=True)}
        assert _error(validator.sanitize({"title": empty}, rules)).code == ErrorCode.FIELD_REQUIRED

    def test_allowed_values(self, validator):
        error = _error(validator.sanitize({"export_type": "everything"}))

        assert error.code == ErrorCode.VALUE_NOT_ALLOWED
        assert "settings, presets, all" in error.message

    def test_allowed_value_accepted(self, validator):
        assert _clean(validator.sanitize({"export_type": "presets"})) == {"export_type": "presets"}

    def test_max_length(self, validator):
        error = _error(validator.sanitize({"error_type": "x" * 51}))

        assert error.code == ErrorCode.FIELD_TOO_LONG
        assert error.field == "error_type"

    def test_numeric_range_checked_on_raw_string(self, validator):
        error = _error(validator.sanitize({"font_size": "100"}))

        assert error.code == ErrorCode.VALUE_ABOVE_MAXIMUM
        assert error.as_field_errors() == {"font_size": error.message}

    def test_numeric_below_minimum(self, validator):
        assert _error(validator.sanitize({"opacity": -0.5})).code == ErrorCode.VALUE_BELOW_MINIMUM

    def test_booleans_are_not_range_checked(self, validator):
        rules = {"flag": FieldRule(field_type=FieldType.BOOLEAN, min_value=5)}
        assert _clean(validator.sanitize({"flag": True}, rules)) == {"flag": True}

    def test_nested_field_error_uses_dotted_path(self, validator):
        error = _error(validator.sanitize({"settings": {"font_size": 4}}))

        assert error.field == "settings.font_size"
        assert error.code == ErrorCode.VALUE_BELOW_MINIMUM

    def test_expected_rules_take_precedence_over_defaults(self, validator):
        rules = {"font_size": FieldRule(field_type=FieldType.INTEGER, max_value=200)}
        assert _clean(validator.sanitize({"font_size": "100"}, rules)) == {"font_size": 100}

    def test_rules_accept_mapping_form(self, validator):
        rules = {"count": {"type": "int", "max": 3}}
        assert _error(validator.sanitize({"count": 4}, rules)).field == "count"


@pytest.mark.unit
class TestSanitation:
    """Test the sanitized output."""

    def test_boolean_fields(self, validator):
        payload = {"enabled": "YES", "active": "0", "visible": ""}

        assert _clean(validator.sanitize(payload)) == {
            "enabled": True,
            "active": False,
            "visible": False,
        }

    def test_undeclared_fields_are_plain_text(self, validator):
        result = _clean(validator.sanitize({"title": "<script>alert(1)</script>Hello <b>you</b>"}))
        assert result == {"title": "Hello you"}

    def test_keys_are_normalized(self, validator):
        assert _clean(validator.sanitize({"Bad Key!": "v"})) == {"badkey": "v"}

    def test_backslashes_kept_by_default(self, validator):
        assert _clean(validator.sanitize({"path": BACKSLASH_QUOTE})) == {"path": BACKSLASH_QUOTE}

    def test_host_escaping_removed_when_enabled(self):
        validator = InputValidator(unescape_host_input=True)

        assert _clean(validator.sanitize({"quote": "It\\'s"})) == {"quote": "It's"}

    def test_colors_and_dimensions(self, validator):
        payload = {"color": "#ff0000", "background_color": "blue", "width": "640"}

        assert _clean(validator.sanitize(payload)) == {
            "color": "#ff0000",
            "background_color": "",
            "width": 640.0,
        }

    def test_list_elements_reuse_scalar_rule(self, validator):
        rules = {"ids": FieldRule(field_type=FieldType.INTEGER, max_value=5)}

        assert _clean(validator.sanitize({"ids": ["1", "2x"]}, rules)) == {"ids": [1, 2]}
        assert _error(validator.sanitize({"ids": ["1", "9"]}, rules)).field == "ids.1"

    def test_list_elements_are_not_required(self, validator):
        rules = {"tags": FieldRule(required=True)}
        assert _clean(validator.sanitize({"tags": ["a", ""]}, rules)) == {"tags": ["a", ""]}

    def test_array_elements_default_to_text(self, validator):
        rules = {"items": FieldRule(field_type=FieldType.ARRAY)}
        assert _clean(validator.sanitize({"items": ["<b>a</b>", 2]}, rules)) == {"items": ["a", 2]}

    def test_caller_payload_is_not_mutated(self, validator):
        payload = {"Title": "<b>x</b>", "settings": {"font_size": "12", "tags": ["<i>y</i>"]}}
        snapshot = copy.deepcopy(payload)

        validator.sanitize(payload)

        assert payload == snapshot


@pytest.mark.unit
class TestJsonFields:
    """Test JSON-typed fields."""

    def test_json_string_is_decoded_and_sanitized(self, validator):
        raw = {"data": '{"a": "<b>1</b>", "b": [1, 2]}'}
        assert _clean(validator.sanitize(raw)) == {"data": {"a": "1", "b": [1, 2]}}

    def test_empty_json_string_becomes_empty_mapping(self, validator):
        assert _clean(validator.sanitize({"settings": "  "})) == {"settings": {}}

    def test_invalid_json_rejected(self, validator):
        error = _error(validator.sanitize({"data": "{bad"}))

        assert error.code == ErrorCode.JSON_DECODE_FAILED
        assert error.field == "data"

    def test_json_round_trip_is_stable(self, validator):
        first = _clean(
            validator.sanitize(
                {"settings": {"font_size": "14", "enabled": "on", "title": "<em>Hi</em>"}}
            )
        )
        serialized = json.dumps(first["settings"], sort_keys=True)

        second = _clean(validator.sanitize({"settings": serialized}))

        assert second == first


@pytest.mark.unit
class TestIdempotence:
    """sanitize(sanitize(x)) == sanitize(x)."""

    @pytest.mark.parametrize(
        ("field_type", "value"),
        [
            (FieldType.TEXT, "  <b>Title</b>  "),
            (FieldType.TEXT, BACKSLASH_QUOTE),
            (FieldType.TEXT, "Fish & chips < 5 %41"),
            (FieldType.TEXT, ""),
            (FieldType.TEXTAREA, "one\r\n<i>two</i> \\\\ three"),
            (FieldType.EMAIL, " Someone@Company.ORG "),
            (FieldType.EMAIL, "not an email"),
            (FieldType.URL, "example.com/a b"),
            (FieldType.URL, "/relative?q=a&b=c"),
            (FieldType.URL, "javascript:alert(1)"),
            (FieldType.HEX_COLOR, " #ABC "),
            (FieldType.NUMERIC, " 0.75 "),
            (FieldType.NUMERIC, "abc"),
            (FieldType.INTEGER, "12 apples"),
            (FieldType.INTEGER, "-7.9"),
            (FieldType.BOOLEAN, "on"),
            (FieldType.BOOLEAN, ""),
            (FieldType.HTML, '<p onclick="x()">Fish &amp; chips & <strong>more</strong></p>'),
            (FieldType.HTML, BACKSLASH_QUOTE),
            (FieldType.JSON, '{"Nested Key": "<b>v</b>", "list": ["a", "<i>b</i>", 3]}'),
            (FieldType.JSON, '{"path": "C:\\\\\\\\\'q"}'),
            (FieldType.JSON, '"just text"'),
            (FieldType.JSON, "5"),
            (FieldType.JSON, ""),
            (FieldType.ARRAY, ["<b>x</b>", BACKSLASH_QUOTE, "", 2]),
            (FieldType.SLUG, "Hello World!"),
            (FieldType.KEY, "Option Name"),
        ],
    )
    def test_sanitize_is_idempotent(self, validator, field_type, value):
        rules = {"value": FieldRule(field_type=field_type)}

        once = _clean(validator.sanitize({"value": value}, rules))
        twice = _clean(validator.sanitize(once, rules))

        assert twice == once

    def test_whole_payload_is_idempotent(self, validator):
        payload = {
            "title": "<em>Hi</em> \\'there\\'",
            "settings": {"font_size": "14", "enabled": "on", "path": BACKSLASH_QUOTE},
            "tags": ["a & b", "<i>c</i>"],
        }

        once = _clean(validator.sanitize(payload))

        assert _clean(validator.sanitize(once)) == once


@pytest.mark.unit
class TestModificationEvents:
    """Test input events reported to the ErrorLogger."""

    def test_modified_values_reported_once(self):
        error_logger = MagicMock()
        validator = InputValidator(error_logger=error_logger)

        validator.sanitize({"title": "<b>Hi</b>", "plain": "same"}, action="save_settings")

        error_logger.log_input_event.assert_called_once()
        kwargs = error_logger.log_input_event.call_args.kwargs
        assert kwargs["modifications"] == {"title": {"original": "<b>Hi</b>", "sanitized": "Hi"}}
        assert kwargs["action"] == "save_settings"

    def test_unchanged_payload_reports_nothing(self):
        error_logger = MagicMock()
        validator = InputValidator(error_logger=error_logger)

        validator.sanitize({"title": "clean"})

        error_logger.log_input_event.assert_not_called()

    def test_failed_payload_reports_nothing(self):
        error_logger = MagicMock()
        validator = InputValidator(error_logger=error_logger)

        validator.sanitize({"option_id": "", "title": "<b>x</b>"})

        error_logger.log_input_event.assert_not_called()


@pytest.mark.unit
class TestRuntimeRegistration:
    """Test field rule and sanitizer registration."""

    def test_validate_field_uses_default_table(self, validator):
        assert validator.validate_field("font_size", "12") == Success(value=12.0)

    def test_validate_field_with_explicit_rule(self, validator):
        result = validator.validate_field("code", "abc", FieldRule(max_length=2))
        assert _error(result).code == ErrorCode.FIELD_TOO_LONG

    def test_add_and_get_field_rule(self, validator):
        validator.add_field_rule("Custom Field", {"type": "integer", "max": 5})

        rule = validator.get_field_rule("customfield")
        assert rule == FieldRule(field_type=FieldType.INTEGER, max_value=5)
        assert _error(validator.sanitize({"customfield": 6})).field == "customfield"

    def test_unknown_rule_returns_none(self, validator):
        assert validator.get_field_rule("nothing_here") is None

    def test_register_sanitizer(self, validator):
        validator.register_sanitizer(FieldType.SLUG, lambda value: "fixed")
        rules = {"slug": FieldRule(field_type=FieldType.SLUG)}

        assert _clean(validator.sanitize({"slug": "anything"}, rules)) == {"slug": "fixed"}
