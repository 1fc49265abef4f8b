"""Sanitizer registry.

Strategy table mapping each ``FieldType`` to its sanitizer with metadata.
The input validator dispatches through a registry instance instead of a
central switch; new types or replacement sanitizers are added with
``register``.

Pattern: Registry Pattern with metadata catalog and helper functions.

Usage:
    registry = build_default_registry()
    registry.register(FieldType.SLUG, my_slugify, description="Custom slugs")
    sanitizer = registry.get(FieldType.SLUG)
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from command_gateway.domain.enums import FieldType
from command_gateway.domain.validators.sanitizers import (
    empty_list,
    empty_mapping,
    sanitize_boolean,
    sanitize_email,
    sanitize_hex_color,
    sanitize_html,
    sanitize_integer,
    sanitize_key,
    sanitize_numeric,
    sanitize_slug,
    sanitize_text,
    sanitize_textarea,
    sanitize_url,
)

type Sanitizer = Callable[[Any], Any]


@dataclass(frozen=True, kw_only=True)
class SanitizerMetadata:
    """Metadata for a registered sanitizer.

    Attributes:
        field_type: Type the sanitizer handles.
        sanitizer: Pure, idempotent function of one scalar value.
        description: Human-readable description of the transformation.
    """

    field_type: FieldType
    sanitizer: Sanitizer
    description: str


DEFAULT_SANITIZERS: tuple[SanitizerMetadata, ...] = (
    SanitizerMetadata(
        field_type=FieldType.EMAIL,
        sanitizer=sanitize_email,
        description="Normalized email address, empty when invalid",
    ),
    SanitizerMetadata(
        field_type=FieldType.URL,
        sanitizer=sanitize_url,
        description="URL limited to http(s), ftp(s), mailto and tel schemes",
    ),
    SanitizerMetadata(
        field_type=FieldType.HEX_COLOR,
        sanitizer=sanitize_hex_color,
        description="#rgb or #rrggbb, empty otherwise",
    ),
    SanitizerMetadata(
        field_type=FieldType.NUMERIC,
        sanitizer=sanitize_numeric,
        description="Float of a numeric value, 0.0 otherwise",
    ),
    SanitizerMetadata(
        field_type=FieldType.INTEGER,
        sanitizer=sanitize_integer,
        description="Leading integer of the value",
    ),
    SanitizerMetadata(
        field_type=FieldType.BOOLEAN,
        sanitizer=sanitize_boolean,
        description="True for 1/true/yes/on strings, truthiness otherwise",
    ),
    SanitizerMetadata(
        field_type=FieldType.TEXT,
        sanitizer=sanitize_text,
        description="Single-line text without markup or encoded octets",
    ),
    SanitizerMetadata(
        field_type=FieldType.TEXTAREA,
        sanitizer=sanitize_textarea,
        description="Multi-line text without markup or encoded octets",
    ),
    SanitizerMetadata(
        field_type=FieldType.HTML,
        sanitizer=sanitize_html,
        description="Rich text restricted to a whitelist of tags and attributes",
    ),
    SanitizerMetadata(
        field_type=FieldType.JSON,
        sanitizer=empty_mapping,
        description="Scalar left in a JSON field (containers recurse)",
    ),
    SanitizerMetadata(
        field_type=FieldType.ARRAY,
        sanitizer=empty_list,
        description="Scalar left in an array field (containers recurse)",
    ),
    SanitizerMetadata(
        field_type=FieldType.SLUG,
        sanitizer=sanitize_slug,
        description="Lower-case ASCII words joined by dashes",
    ),
    SanitizerMetadata(
        field_type=FieldType.KEY,
        sanitizer=sanitize_key,
        description="Lower-case [a-z0-9_-] identifier",
    ),
)


class SanitizerRegistry:
    """Field type to sanitizer strategy table.

    Unregistered types fall back to the TEXT sanitizer.
    """

    def __init__(self, entries: tuple[SanitizerMetadata, ...] = ()) -> None:
        self._entries: dict[FieldType, SanitizerMetadata] = {}
        for entry in entries:
            self._entries[entry.field_type] = entry

    def register(
        self,
        field_type: FieldType,
        sanitizer: Sanitizer,
        *,
        description: str = "",
    ) -> None:
        """Register (or replace) the sanitizer for a field type.

        Args:
            field_type: Type tag to handle.
            sanitizer: Pure, idempotent function of one value.
            description: Human-readable description.
        """
        self._entries[field_type] = SanitizerMetadata(
            field_type=field_type, sanitizer=sanitizer, description=description
        )

    def get(self, field_type: FieldType) -> Sanitizer:
        """Sanitizer for ``field_type`` (TEXT sanitizer when unregistered)."""
        entry = self._entries.get(field_type) or self._entries.get(FieldType.TEXT)
        return entry.sanitizer if entry else sanitize_text

    def get_metadata(self, field_type: FieldType) -> SanitizerMetadata | None:
        return self._entries.get(field_type)

    def registered_types(self) -> list[FieldType]:
        return list(self._entries)

    def __contains__(self, field_type: object) -> bool:
        return field_type in self._entries


def build_default_registry() -> SanitizerRegistry:
    """Fresh registry holding one sanitizer per built-in field type.

    Returns:
        SanitizerRegistry: Independent instance; registering on it does not
        affect other validators.
    """
    return SanitizerRegistry(DEFAULT_SANITIZERS)
