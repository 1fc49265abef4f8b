"""Application layer - command processing use cases.

Structure:
- services/: security gate, rate limiter, input validator, error logger,
  threat scanner, output escaper
- response/: the single-transmission response envelope
- gateway/: endpoint registry and the outermost dispatcher
- errors/: exceptions handlers raise at the handler seam

The application layer orchestrates domain logic and talks to infrastructure
only through the protocols in ``command_gateway.domain.protocols``.
"""
