"""Security and response gateway for privileged commands.

Every privileged command passes through the same pipeline: anti-forgery
token, capability, input sanitation, origin and rate-limit checks, then the
business handler, then exactly one response envelope. Errors and security
violations are classified, redacted and persisted along the way.
"""

__version__ = "0.1.0"
