"""Logging adapters.

Exports:
    ConsoleAdapter: structlog host logger (LoggerProtocol)
    RotatingErrorFile: JSON-lines error file (ErrorSinkProtocol)
"""

from command_gateway.infrastructure.logging.console_adapter import ConsoleAdapter
from command_gateway.infrastructure.logging.rotating_error_file import RotatingErrorFile

__all__ = ["ConsoleAdapter", "RotatingErrorFile"]
