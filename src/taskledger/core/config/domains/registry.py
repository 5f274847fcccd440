"""Domain-specific configuration for the task registry."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class RegistryConfig(BaseDomainConfig):
    """Provides access to ``registry.*`` settings."""

    def _config_section(self) -> str:
        return "registry"

    @cached_property
    def cascade_transitive(self) -> bool:
        """Whether cascade propagation continues past direct dependents."""
        cascade = self.section.get("cascade", {}) or {}
        return bool(cascade.get("transitive", False))

    @cached_property
    def persist_enabled(self) -> bool:
        """Whether status updates issued from the CLI are written back to the document."""
        persist = self.section.get("persist", {}) or {}
        return bool(persist.get("enabled", True))


__all__ = ["RegistryConfig"]
