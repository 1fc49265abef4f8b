"""Presentation layer - FastAPI binding of the command gateway.

The gateway itself is transport-agnostic; this package only adapts HTTP
requests into ``InboundCommand`` values and renders the envelope.
"""
