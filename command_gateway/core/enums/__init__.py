"""Core enums package.

Usage:
    from command_gateway.core.enums import Environment, ErrorCode, ResponseCode
"""

from command_gateway.core.enums.environment import Environment
from command_gateway.core.enums.error_code import ErrorCode
from command_gateway.core.enums.response_code import ResponseCode

__all__ = ["Environment", "ErrorCode", "ResponseCode"]
