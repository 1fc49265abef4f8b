"""Scalar sanitizer functions, one per field type.

Sanitizers are pure functions of one value. They never raise: a value that
cannot be coerced maps to the type's empty value ("" for strings, 0.0 for
numbers). Rule checks (required, max_length, ranges) happen in the input
validator BEFORE a sanitizer runs, on the raw value.

Every sanitizer is idempotent: ``f(f(x)) == f(x)``.

Catalogued with descriptions in ``command_gateway/domain/validators/registry.py``.
"""

import math
import re
import unicodedata
from typing import Any
from urllib.parse import urlsplit

import bleach
from email_validator import EmailNotValidError, validate_email

from command_gateway.core.constants import TRUTHY_STRINGS

_SCRIPT_STYLE = re.compile(r"<(script|style)[^>]*?>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^<>]*>")
_OCTET = re.compile(r"%[a-fA-F0-9]{2}")
_WHITESPACE = re.compile(r"\s+")
_HORIZONTAL_WHITESPACE = re.compile(r"[ \t\f\v]+")
_SLASHED = re.compile(r"\\(['\"\\])")
_HEX_COLOR = re.compile(r"^#(?:[A-Fa-f0-9]{3}){1,2}$")
_NUMERIC = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")
_KEY_CHARS = re.compile(r"[^a-z0-9_\-]")
_SLUG_CHARS = re.compile(r"[^a-z0-9]+")
_URL_CHARS = re.compile(r"[^A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]")

ALLOWED_URL_SCHEMES: frozenset[str] = frozenset(
    {"http", "https", "ftp", "ftps", "mailto", "tel"}
)

RICH_TEXT_TAGS: frozenset[str] = frozenset(
    {
        "a", "abbr", "b", "blockquote", "br", "code", "em", "h1", "h2", "h3",
        "h4", "h5", "h6", "hr", "i", "img", "li", "ol", "p", "pre", "span",
        "strong", "sub", "sup", "table", "tbody", "td", "th", "thead", "tr",
        "u", "ul",
    }
)
RICH_TEXT_ATTRIBUTES: dict[str, list[str]] = {
    "a": ["href", "title", "rel", "target"],
    "abbr": ["title"],
    "img": ["src", "alt", "title", "width", "height"],
    "td": ["colspan", "rowspan"],
    "th": ["colspan", "rowspan"],
}


def unslash(value: str) -> str:
    """Remove host-added escaping of quotes and backslashes.

    Example:
        >>> unslash("It\\\\'s")
        "It's"
    """
    return _SLASHED.sub(r"\1", value)


def _strip_tags(value: str) -> str:
    value = _SCRIPT_STYLE.sub("", value)
    while True:
        stripped = _TAG.sub("", value)
        if stripped == value:
            return stripped
        value = stripped


def _strip_octets(value: str) -> str:
    while True:
        stripped = _OCTET.sub("", value)
        if stripped == value:
            return stripped
        value = stripped


def _clean_text(value: str, *, keep_newlines: bool) -> str:
    value = _strip_tags(value).replace("<", "&lt;")
    value = _strip_octets(value)
    if keep_newlines:
        lines = value.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        return "\n".join(_HORIZONTAL_WHITESPACE.sub(" ", line).strip() for line in lines).strip()
    return _WHITESPACE.sub(" ", value).strip()


def sanitize_text(value: Any) -> Any:
    """Single-line plain text.

    Strips markup (script and style bodies included), escapes stray ``<``,
    removes percent-encoded octets and collapses whitespace. Numbers and
    booleans pass through; None becomes "".

    Example:
        >>> sanitize_text("  <b>Hello</b>\\n world %0A ")
        'Hello world'
    """
    if value is None:
        return ""
    if isinstance(value, (bool, int, float)):
        return value
    return _clean_text(str(value), keep_newlines=False)


def sanitize_textarea(value: Any) -> Any:
    """Multi-line plain text: like ``sanitize_text`` but line breaks survive."""
    if value is None:
        return ""
    if isinstance(value, (bool, int, float)):
        return value
    return _clean_text(str(value), keep_newlines=True)


def sanitize_email(value: Any) -> str:
    """Normalized email address, or "" when the address is invalid."""
    if not isinstance(value, str) or not value.strip():
        return ""
    try:
        return validate_email(value.strip(), check_deliverability=False).normalized
    except EmailNotValidError:
        return ""


def sanitize_url(value: Any) -> str:
    """URL restricted to safe schemes.

    Characters outside the RFC 3986 set are dropped. Relative references
    (``/``, ``#``, ``?``) are kept, scheme-less values get ``http://``, and
    any other scheme (``javascript:``, ``data:``) yields "".

    Example:
        >>> sanitize_url("example.com/a b")
        'http://example.com/ab'
    """
    if not isinstance(value, str):
        return ""
    url = _URL_CHARS.sub("", value.strip())
    if not url:
        return ""
    if url[0] in "/#?":
        return url
    scheme = urlsplit(url).scheme.lower()
    if not scheme:
        return f"http://{url}"
    return url if scheme in ALLOWED_URL_SCHEMES else ""


def sanitize_hex_color(value: Any) -> str:
    """``#rgb`` or ``#rrggbb``, otherwise ""."""
    if not isinstance(value, str):
        return ""
    value = value.strip()
    return value if _HEX_COLOR.match(value) else ""


def is_numeric(value: Any) -> bool:
    """True for finite ints/floats and numeric strings. Booleans are not numeric."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if isinstance(value, str):
        return bool(_NUMERIC.match(value.strip()))
    return False


def sanitize_numeric(value: Any) -> float:
    """Float value of a numeric input, otherwise 0.0."""
    return float(value.strip() if isinstance(value, str) else value) if is_numeric(value) else 0.0


def sanitize_integer(value: Any) -> int:
    """Integer value: floats truncate, strings parse their leading integer."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INTEGER.match(value)
        return int(match.group(1)) if match else 0
    return 0


def sanitize_boolean(value: Any) -> bool:
    """Coerce to bool.

    Booleans pass through; strings are True only for 1/true/yes/on
    (case-insensitive, trimmed); anything else by truthiness.

    Example:
        >>> sanitize_boolean(" Yes ")
        True
        >>> sanitize_boolean("false")
        False
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return bool(value)


def sanitize_html(value: Any) -> str:
    """Restricted rich text: whitelisted tags and attributes, others stripped."""
    if value is None or isinstance(value, (dict, list)):
        return ""
    return bleach.clean(
        str(value),
        tags=RICH_TEXT_TAGS,
        attributes=RICH_TEXT_ATTRIBUTES,
        protocols=ALLOWED_URL_SCHEMES,
        strip=True,
        strip_comments=True,
    )


def sanitize_slug(value: Any) -> str:
    """Lower-case ASCII words joined by single dashes.

    Example:
        >>> sanitize_slug("Héllo, World!")
        'hello-world'
    """
    if value is None:
        return ""
    text = _strip_tags(str(value))
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _SLUG_CHARS.sub("-", text.lower()).strip("-")


def sanitize_key(value: Any) -> str:
    """Opaque key: lower-case, only ``[a-z0-9_-]`` kept."""
    if value is None:
        return ""
    return _KEY_CHARS.sub("", str(value).lower())


def empty_mapping(value: Any) -> dict[str, Any]:
    """Non-container value of a JSON field."""
    return {}


def empty_list(value: Any) -> list[Any]:
    """Non-container value of an array field."""
    return []
