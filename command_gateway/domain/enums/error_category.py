"""Categories of error records."""

from enum import Enum


class ErrorCategory(str, Enum):
    """Which logging entry point produced an error record."""

    COMMAND = "command"
    VALIDATION = "validation"
    INPUT = "input"
    DATABASE = "database"
    SECURITY = "security"
    PERFORMANCE = "performance"
    CLIENT = "client"
    SYSTEM = "system"
