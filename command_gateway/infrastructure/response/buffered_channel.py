"""Response channel that keeps the emitted body until the host renders it.

The FastAPI route dispatches a command synchronously, then turns whatever
the envelope emitted into a ``JSONResponse``. Tests use the same channel to
inspect transmissions.
"""

from typing import Any


class BufferedResponseChannel:
    """ResponseChannelProtocol implementation recording every emit."""

    def __init__(self) -> None:
        self.emitted: list[tuple[Any, int]] = []

    def emit(self, body: Any, status: int) -> None:
        self.emitted.append((body, status))

    @property
    def body(self) -> Any:
        """Body of the first transmission (None before any)."""
        return self.emitted[0][0] if self.emitted else None

    @property
    def status(self) -> int | None:
        return self.emitted[0][1] if self.emitted else None
