"""Per-endpoint configuration held by the command registry.

Usage:
    from command_gateway.domain.value_objects import EndpointConfig

    config = EndpointConfig(
        handler=save_settings,
        capability="manage_options",
        rate_limit=20,
        description="Persist settings",
    )
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from command_gateway.domain.enums import EndpointPriority
from command_gateway.domain.value_objects.field_rule import FieldRule


@dataclass(frozen=True, slots=True, kw_only=True)
class EndpointConfig:
    """Configuration of one registered command endpoint.

    Attributes:
        handler: Callable receiving the command context. None for endpoints
            that only exercise the gate.
        capability: Required capability. None means the configured default
            (``admin``).
        rate_limit: Commands allowed per window. None means the configured
            default (10).
        description: Free-text description.
        priority: Informational priority tag.
        version_added: Version the endpoint appeared in.
        field_rules: Rules for this endpoint's payload fields. They take
            precedence over the default rule table.
    """

    handler: Callable[[Any], Any] | None = None
    capability: str | None = None
    rate_limit: int | None = None
    description: str = ""
    priority: EndpointPriority = EndpointPriority.MEDIUM
    version_added: str = ""
    field_rules: Mapping[str, FieldRule] = field(default_factory=dict)
