"""Command registry: single source of truth for gateway endpoints.

Catalogs every command endpoint with its configuration (handler, required
capability, rate limit, field rules, priority) plus deprecated aliases that
forward to a current endpoint.

Adding an endpoint:
    registry = CommandRegistry()

    @registry.command("save_settings", capability="manage_options", rate_limit=20)
    def save_settings(context: CommandContext) -> dict[str, Any]:
        ...

    registry.alias("save_settings_v1", "save_settings")
"""

from collections import Counter
from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from typing import Any

from command_gateway.core.constants import DEFAULT_CAPABILITY, DEFAULT_RATE_LIMIT
from command_gateway.domain.enums import EndpointPriority
from command_gateway.domain.value_objects import EndpointConfig

DEPRECATION_MESSAGE = "This endpoint is deprecated and will be removed in a future version"


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolvedEndpoint:
    """Outcome of looking up a requested action.

    Attributes:
        action: Canonical endpoint name.
        config: Endpoint configuration.
        requested: Name the client used (differs from ``action`` for aliases).
    """

    action: str
    config: EndpointConfig
    requested: str

    @property
    def is_deprecated(self) -> bool:
        """True when the client called a deprecated alias."""
        return self.requested != self.action

    def deprecation_warning(self) -> dict[str, str]:
        """Metadata entry added to responses served through an alias."""
        return {
            "old_endpoint": self.requested,
            "new_endpoint": self.action,
            "message": DEPRECATION_MESSAGE,
        }


class CommandRegistry:
    """Endpoint configurations keyed by action name."""

    def __init__(
        self,
        *,
        default_capability: str = DEFAULT_CAPABILITY,
        default_rate_limit: int = DEFAULT_RATE_LIMIT,
    ) -> None:
        self._endpoints: dict[str, EndpointConfig] = {}
        self._aliases: dict[str, str] = {}
        self._default_capability = default_capability
        self._default_rate_limit = default_rate_limit

    def register(
        self, action: str, config: EndpointConfig | None = None, **fields: Any
    ) -> EndpointConfig:
        """Register (or replace) an endpoint.

        Args:
            action: Endpoint name.
            config: Complete configuration. When omitted, ``fields`` build one.
            **fields: ``EndpointConfig`` fields (override ``config`` values).

        Returns:
            EndpointConfig: The stored configuration.

        Raises:
            ValueError: If the name is empty, shadows an alias, or the handler
                is not callable.
        """
        if not action:
            raise ValueError("Endpoint action name must not be empty")
        if action in self._aliases:
            raise ValueError(f"Endpoint {action} is already registered as a deprecated alias")
        config = replace(config, **fields) if config else EndpointConfig(**fields)
        if config.handler is not None and not callable(config.handler):
            raise ValueError(f"Endpoint {action} handler is not callable")
        self._endpoints[action] = config
        return config

    def command(self, action: str, **fields: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering the decorated function as the endpoint handler."""

        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            self.register(action, handler=handler, **fields)
            return handler

        return decorator

    def alias(self, old_action: str, new_action: str) -> None:
        """Forward a deprecated action name to a registered endpoint.

        Raises:
            ValueError: If the target is not registered or the alias would
                shadow a registered endpoint.
        """
        if new_action not in self._endpoints:
            raise ValueError(f"Alias target {new_action} is not a registered endpoint")
        if old_action in self._endpoints:
            raise ValueError(f"Alias {old_action} would shadow a registered endpoint")
        self._aliases[old_action] = new_action

    def resolve(self, action: str) -> ResolvedEndpoint | None:
        """Look up an action, following one level of deprecated alias.

        Returns:
            ResolvedEndpoint, or None for unknown actions.
        """
        canonical = self._aliases.get(action, action)
        config = self._endpoints.get(canonical)
        if config is None:
            return None
        return ResolvedEndpoint(action=canonical, config=config, requested=action)

    def get(self, action: str) -> EndpointConfig | None:
        return self._endpoints.get(action)

    def actions(self) -> list[str]:
        """Registered endpoint names, sorted."""
        return sorted(self._endpoints)

    def aliases(self) -> dict[str, str]:
        """Deprecated alias to endpoint mapping."""
        return dict(self._aliases)

    def by_priority(self, priority: EndpointPriority) -> list[str]:
        return sorted(
            action for action, config in self._endpoints.items() if config.priority == priority
        )

    def stats(self) -> dict[str, Any]:
        """Endpoint statistics.

        Returns:
            dict: total_endpoints, deprecated_aliases, by_priority,
            by_capability, total_rate_limit, average_rate_limit. Capability
            and rate limit fall back to the defaults for endpoints that
            declare none.
        """
        by_priority = {priority.value: 0 for priority in EndpointPriority}
        by_capability: Counter[str] = Counter()
        total_rate_limit = 0
        for config in self._endpoints.values():
            by_priority[config.priority.value] += 1
            by_capability[config.capability or self._default_capability] += 1
            total_rate_limit += config.rate_limit or self._default_rate_limit
        count = len(self._endpoints)
        return {
            "total_endpoints": count,
            "deprecated_aliases": len(self._aliases),
            "by_priority": by_priority,
            "by_capability": dict(by_capability),
            "total_rate_limit": total_rate_limit,
            "average_rate_limit": round(total_rate_limit / count, 2) if count else 0,
        }

    def __contains__(self, action: object) -> bool:
        return action in self._endpoints or action in self._aliases

    def __iter__(self) -> Iterator[str]:
        return iter(self.actions())

    def __len__(self) -> int:
        return len(self._endpoints)
