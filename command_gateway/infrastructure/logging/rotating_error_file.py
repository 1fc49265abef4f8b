"""Rotating JSON-lines error file implementing ErrorSinkProtocol.

One JSON object per line. The file rotates once it reaches ``max_bytes``
(``command-errors.log`` -> ``command-errors.log.1`` ... ``.N``), keeping
``backup_count`` rotations; the oldest is deleted.

Unlike logging handlers, a failed write raises instead of printing to
stderr, so the error logger can route the failure to its fallback logger.
"""

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any


class _RaisingRotatingFileHandler(RotatingFileHandler):
    def handleError(self, record: logging.LogRecord) -> None:
        raise


class RotatingErrorFile:
    """Size-rotated JSON-lines error log.

    Args:
        path: Log file path. Parent directories are created.
        max_bytes: Rotation threshold in bytes.
        backup_count: Rotated files to keep.
    """

    def __init__(self, path: str | Path, *, max_bytes: int, backup_count: int) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handler = _RaisingRotatingFileHandler(
            self._path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
            delay=True,
        )
        self._handler.setFormatter(logging.Formatter("%(message)s"))

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: dict[str, Any]) -> None:
        """Append one entry as a JSON line.

        Raises:
            OSError: If the file could not be written or rotated.
        """
        line = json.dumps(entry, default=str, ensure_ascii=False)
        record = logging.LogRecord(
            name="command_gateway.error_file",
            level=logging.ERROR,
            pathname=__file__,
            lineno=0,
            msg=line,
            args=None,
            exc_info=None,
        )
        self._handler.handle(record)

    def close(self) -> None:
        self._handler.close()
