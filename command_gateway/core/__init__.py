"""Core building blocks: configuration, constants, result and error types."""
