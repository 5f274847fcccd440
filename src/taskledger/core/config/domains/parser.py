"""Domain-specific configuration for the checklist document parser."""
from __future__ import annotations

import re
from functools import cached_property
from typing import Pattern

from ..base import BaseDomainConfig

DEFAULT_ID_PATTERN = r"^\d+(\.\d+)*$"


class ParserConfig(BaseDomainConfig):
    """Provides access to ``parser.*`` settings."""

    def _config_section(self) -> str:
        return "parser"

    @cached_property
    def id_pattern(self) -> Pattern[str]:
        """Compiled pattern for conventional task ids (mismatch is only a warning)."""
        raw = self.section.get("idPattern") or DEFAULT_ID_PATTERN
        try:
            return re.compile(str(raw))
        except re.error as exc:
            raise ValueError(f"Invalid configuration: parser.idPattern ({exc})") from exc

    @cached_property
    def empty_requirements_as_blank_tag(self) -> bool:
        """When True, ``_Requirements: _`` parses to ``[""]`` instead of ``[]``."""
        return bool(self.section.get("emptyRequirementsAsBlankTag", False))


__all__ = ["ParserConfig", "DEFAULT_ID_PATTERN"]
