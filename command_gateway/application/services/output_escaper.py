"""Context-aware output escaping.

Applied when previously sanitized data is re-emitted into markup,
attributes, inline scripts or URLs. Escaping is a presentation concern and
is never used to sanitize input.

Usage:
    escaper = OutputEscaper()
    escaper.escape({"title": '<b>"x"</b>'}, EscapeContext.ATTRIBUTE)
"""

import html
import json
from collections.abc import Mapping
from typing import Any

from command_gateway.domain.enums import EscapeContext
from command_gateway.domain.validators.sanitizers import sanitize_url


class OutputEscaper:
    """Escapes strings for one output context; containers recurse, other values pass."""

    def escape(self, data: Any, context: EscapeContext | str = EscapeContext.MARKUP) -> Any:
        """Escape ``data`` for ``context``.

        Args:
            data: String, container or any other value.
            context: Output context (``markup`` by default).

        Returns:
            Same structure with every string escaped.

        Raises:
            ValueError: If ``context`` is not a known context.
        """
        context = EscapeContext(context)
        if isinstance(data, Mapping):
            return {key: self.escape(value, context) for key, value in data.items()}
        if isinstance(data, (list, tuple)):
            return [self.escape(item, context) for item in data]
        if not isinstance(data, str):
            return data

        match context:
            case EscapeContext.MARKUP | EscapeContext.ATTRIBUTE:
                return html.escape(data, quote=True)
            case EscapeContext.PLAIN_TEXT:
                return html.escape(data, quote=False)
            case EscapeContext.SCRIPT:
                return self._escape_script(data)
            case EscapeContext.URL:
                return html.escape(sanitize_url(data), quote=True)

    @staticmethod
    def _escape_script(value: str) -> str:
        # JSON string literal without the surrounding quotes, markup-safe
        encoded = json.dumps(value)[1:-1]
        return (
            encoded.replace("<", "\\u003c")
            .replace(">", "\\u003e")
            .replace("&", "\\u0026")
            .replace("'", "\\u0027")
        )
