"""Domain layer: gateway types, ports and pure validation logic."""
