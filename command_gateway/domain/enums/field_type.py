"""Field types understood by the input validator.

Each member selects one sanitizer in the sanitizer registry. Aliases from
older rule tables (``color``, ``number``, ``textarea``...) are accepted by
``FieldType.parse``.
"""

from enum import Enum


class FieldType(str, Enum):
    """Type tag of a field rule."""

    EMAIL = "email"
    URL = "url"
    HEX_COLOR = "hex_color"
    NUMERIC = "numeric"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    TEXT = "text"
    TEXTAREA = "textarea"
    HTML = "html"
    JSON = "json"
    ARRAY = "array"
    SLUG = "slug"
    KEY = "key"

    @property
    def is_container(self) -> bool:
        """True for types whose value is a nested structure."""
        return self in (FieldType.JSON, FieldType.ARRAY)

    @classmethod
    def parse(cls, value: "str | FieldType") -> "FieldType":
        """Resolve a type tag or one of its aliases.

        Args:
            value: Type tag such as ``"color"`` or ``FieldType.TEXT``.

        Returns:
            FieldType: Matching member.

        Raises:
            ValueError: If the tag is unknown.
        """
        if isinstance(value, FieldType):
            return value
        tag = value.strip().lower()
        return cls(_ALIASES.get(tag, tag))


_ALIASES: dict[str, str] = {
    "color": "hex_color",
    "number": "numeric",
    "int": "integer",
    "bool": "boolean",
    "text_field": "text",
    "textarea_field": "textarea",
    "post_content": "html",
    "rich_text": "html",
}
