"""Application services used by the command gateway."""

from command_gateway.application.services.error_logger import ErrorLogger
from command_gateway.application.services.input_validator import InputValidator
from command_gateway.application.services.output_escaper import OutputEscaper
from command_gateway.application.services.rate_limiter import RateLimiter
from command_gateway.application.services.security_gate import GateResult, SecurityGate
from command_gateway.application.services.threat_scanner import ThreatMatch, ThreatScanner

__all__ = [
    "ErrorLogger",
    "GateResult",
    "InputValidator",
    "OutputEscaper",
    "RateLimiter",
    "SecurityGate",
    "ThreatMatch",
    "ThreatScanner",
]
