from __future__ import annotations

"""Timezone-aware time helpers.

Formatting choices are drawn from YAML config (``time.iso8601``).
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from taskledger.data import read_yaml as read_bundled_yaml


def _cfg(config: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Return time configuration.

    An injected ``config`` mapping is used instead of the cached project
    config; when it has no ``time`` section the bundled defaults apply.

    Raises:
        RuntimeError: If the time.iso8601 section is missing
    """
    if config is None:
        from ..config import get_cached_config

        full_config: Mapping[str, Any] = get_cached_config()
    elif "time" in config:
        full_config = config
    else:
        full_config = read_bundled_yaml("config", "defaults.yaml")
    section = (full_config.get("time") or {}).get("iso8601")
    if not isinstance(section, dict):
        raise RuntimeError(
            "time.iso8601 configuration section is missing. "
            "Add 'time.iso8601' section to your YAML config."
        )

    required_fields = ["timespec", "use_z_suffix", "strip_microseconds"]
    missing_fields = [f for f in required_fields if f not in section]
    if missing_fields:
        raise RuntimeError(
            f"time.iso8601 configuration missing required fields: {missing_fields}"
        )
    return section


def utc_now(config: Optional[Mapping[str, Any]] = None) -> datetime:
    """Return timezone-aware UTC datetime using config-driven precision."""
    cfg = _cfg(config)
    now = datetime.now(timezone.utc)
    if cfg["strip_microseconds"]:
        now = now.replace(microsecond=0)
    return now


def format_timestamp(dt: datetime, config: Optional[Mapping[str, Any]] = None) -> str:
    """Format ``dt`` as ISO 8601 UTC according to YAML configuration."""
    cfg = _cfg(config)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    ts = dt.isoformat(timespec=cfg["timespec"]) if cfg["timespec"] else dt.isoformat()
    if cfg["use_z_suffix"]:
        ts = ts.replace("+00:00", "Z")
    return ts


def utc_timestamp(config: Optional[Mapping[str, Any]] = None) -> str:
    """Return ISO 8601 UTC timestamp according to YAML configuration."""
    return format_timestamp(utc_now(config), config)


def parse_iso8601(timestamp_str: str) -> datetime:
    """Parse an ISO 8601 timestamp string into a UTC datetime.

    Accepts a trailing ``Z``; naive values are treated as UTC.
    """
    raw = str(timestamp_str).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def try_parse_iso8601(timestamp_str: Optional[str]) -> Optional[datetime]:
    """Like :func:`parse_iso8601` but returns None for empty or invalid input."""
    if not timestamp_str:
        return None
    try:
        return parse_iso8601(timestamp_str)
    except ValueError:
        return None


__all__ = [
    "utc_now",
    "utc_timestamp",
    "format_timestamp",
    "parse_iso8601",
    "try_parse_iso8601",
]
