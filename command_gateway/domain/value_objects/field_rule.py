"""Field rule value object.

Declarative constraints for one payload field. Rules are declared once (in
the default rule table, per endpoint, or at runtime through
``InputValidator.add_field_rule``) and never mutated.

Usage:
    from command_gateway.domain.value_objects import FieldRule
    from command_gateway.domain.enums import FieldType

    rule = FieldRule(field_type=FieldType.NUMERIC, min_value=8, max_value=72)
    rule = FieldRule.from_mapping({"type": "text", "required": True, "max_length": 100})
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from command_gateway.domain.enums import FieldType


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldRule:
    """Constraints checked against the raw value of a field.

    Attributes:
        field_type: Selects the sanitizer. Absent rules default to TEXT.
        required: Empty values (None, "", empty container) are rejected.
        min_value: Lower bound for numeric values (booleans excluded).
        max_value: Upper bound for numeric values (booleans excluded).
        max_length: Maximum length of string values.
        allowed_values: Closed set of accepted non-empty values.
    """

    field_type: FieldType = FieldType.TEXT
    required: bool = False
    min_value: float | None = None
    max_value: float | None = None
    max_length: int | None = None
    allowed_values: tuple[str, ...] | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FieldRule":
        """Build a rule from a plain mapping.

        Accepts the short keys used by rule tables (``type``, ``min``,
        ``max``) as well as the attribute names.

        Args:
            data: Rule declaration.

        Returns:
            FieldRule: Parsed rule.

        Raises:
            ValueError: If the type tag is unknown.
        """
        allowed = data.get("allowed_values")
        return cls(
            field_type=FieldType.parse(data.get("type", data.get("field_type", "text"))),
            required=bool(data.get("required", False)),
            min_value=data.get("min", data.get("min_value")),
            max_value=data.get("max", data.get("max_value")),
            max_length=data.get("max_length"),
            allowed_values=tuple(str(v) for v in allowed) if allowed else None,
        )

    def for_elements(self) -> "FieldRule":
        """Rule applied to the elements of a list held by this field.

        Scalar rules carry over to their elements; the elements of array
        and JSON fields are plain text. ``required`` stays on the field.
        """
        if self.field_type.is_container:
            return FieldRule()
        return replace(self, required=False)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the short-key mapping form."""
        return {
            "type": self.field_type.value,
            "required": self.required,
            "min": self.min_value,
            "max": self.max_value,
            "max_length": self.max_length,
            "allowed_values": list(self.allowed_values) if self.allowed_values else None,
        }


TEXT_RULE = FieldRule()
"""Rule applied to fields nobody declared."""
