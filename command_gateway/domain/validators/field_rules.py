"""Default field rule table.

Rules for well-known payload fields, applied when neither the endpoint nor
the caller declares one. Endpoint rules take precedence; undeclared fields
are plain text.
"""

from types import MappingProxyType

from command_gateway.domain.enums import FieldType
from command_gateway.domain.value_objects import FieldRule

_KEY = FieldType.KEY
_TEXT = FieldType.TEXT
_JSON = FieldType.JSON
_COLOR = FieldType.HEX_COLOR
_NUMBER = FieldType.NUMERIC
_BOOL = FieldType.BOOLEAN

DEFAULT_FIELD_RULES: MappingProxyType[str, FieldRule] = MappingProxyType(
    {
        # Settings
        "option_id": FieldRule(field_type=_KEY, required=True, max_length=100),
        "option_value": FieldRule(field_type=_TEXT, max_length=1000),
        "settings": FieldRule(field_type=_JSON),
        "data": FieldRule(field_type=_JSON),
        # Live edit
        "live_setting_key": FieldRule(field_type=_KEY, required=True, max_length=100),
        "live_setting_value": FieldRule(field_type=_TEXT, max_length=500),
        # Colors
        "color": FieldRule(field_type=_COLOR),
        "background_color": FieldRule(field_type=_COLOR),
        "text_color": FieldRule(field_type=_COLOR),
        # Dimensions
        "width": FieldRule(field_type=_NUMBER, min_value=0, max_value=9999),
        "height": FieldRule(field_type=_NUMBER, min_value=0, max_value=9999),
        "font_size": FieldRule(field_type=_NUMBER, min_value=8, max_value=72),
        "opacity": FieldRule(field_type=_NUMBER, min_value=0, max_value=1),
        # Flags
        "enabled": FieldRule(field_type=_BOOL),
        "active": FieldRule(field_type=_BOOL),
        "visible": FieldRule(field_type=_BOOL),
        # Anti-forgery tokens (JWTs, kept verbatim apart from text cleaning)
        "nonce": FieldRule(field_type=_TEXT, required=True, max_length=2048),
        "_token": FieldRule(field_type=_TEXT, required=True, max_length=2048),
        # Client error reports
        "error_data": FieldRule(field_type=_JSON, required=True),
        "error_message": FieldRule(field_type=_TEXT, required=True, max_length=1000),
        "error_type": FieldRule(field_type=_TEXT, max_length=50),
        # Import/export
        "export_type": FieldRule(
            field_type=_KEY, allowed_values=("settings", "presets", "all")
        ),
        "import_type": FieldRule(
            field_type=_KEY, allowed_values=("settings", "presets", "functional")
        ),
        # Maintenance
        "cache_type": FieldRule(
            field_type=_KEY, allowed_values=("all", "settings", "css", "transients")
        ),
        "scan_type": FieldRule(
            field_type=_KEY, allowed_values=("basic", "comprehensive", "security")
        ),
        "test_type": FieldRule(
            field_type=_KEY, allowed_values=("database", "options", "cache", "memory")
        ),
    }
)
