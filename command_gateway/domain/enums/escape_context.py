"""Output contexts supported by the output escaper."""

from enum import Enum


class EscapeContext(str, Enum):
    """Where previously sanitized data is being re-emitted."""

    MARKUP = "markup"
    ATTRIBUTE = "attribute"
    SCRIPT = "script"
    URL = "url"
    PLAIN_TEXT = "plain_text"
