"""
taskledger configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import jsonschema
import yaml

from taskledger.core.exceptions import ConfigError
from taskledger.core.utils.io import iter_yaml_files, read_yaml
from taskledger.core.utils.merge import deep_merge
from taskledger.core.utils.paths import (
    get_project_config_dir,
    get_user_config_dir,
    resolve_project_root,
)
from taskledger.data import get_data_path
from taskledger.data import read_yaml as read_bundled_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "TASKLEDGER_"
CONFIG_SCHEMA = "config/config.schema.yaml"


class ConfigManager:
    """Load, merge, and validate taskledger configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: TASKLEDGER_<section>__<key>[__<key>...]
    2. Project config: <repo_root>/.taskledger/config/*.yaml (alphabetical order)
    3. User config: ~/.taskledger/config/*.yaml (alphabetical order)
    4. Bundled defaults: taskledger.data/config/*.yaml (alphabetical order)

    Environment keys without a ``__`` separator (for example
    ``TASKLEDGER_PROJECT_ROOT``) are reserved and never treated as overrides.
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root else resolve_project_root()

        self.core_config_dir = get_data_path("config")
        self.user_config_dir = get_user_config_dir() / "config"
        self.project_config_dir = get_project_config_dir(self.repo_root) / "config"

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file {path} must contain a mapping, got {type(data).__name__}",
                context={"path": str(path)},
            )
        return data

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        """Merge every YAML file of ``directory`` into ``cfg`` (missing dirs are ignored)."""
        for path in iter_yaml_files(directory):
            cfg = deep_merge(cfg, self.load_yaml(path))
        return cfg

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str, *, strict: bool) -> List[str]:
        if "__" not in raw:
            return []
        segs = raw.split("__")
        if any(seg == "" for seg in segs):
            if strict:
                raise ConfigError(f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.")
            return []
        return segs

    def _iter_env_overrides(self, *, strict: bool) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            path = self._parse_env_key(key[len(ENV_PREFIX):], strict=strict)
            if not path:
                continue
            yield path, self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur: Dict[str, Any] = root
        for i, part in enumerate(path):
            # Case-insensitive match against existing keys (env vars are often upper-cased).
            candidates = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            key = candidates.get(part.lower(), part)
            if i == len(path) - 1:
                cur[key] = value
                return
            nxt = cur.get(key)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[key] = nxt
            cur = nxt

    def apply_env_overrides(self, cfg: Dict[str, Any], *, strict: bool) -> None:
        for path, typed_value in self._iter_env_overrides(strict=strict):
            self._set_nested(cfg, path, typed_value)

    # ========== Validation ==========

    def load_schema(self, schema_name: str = CONFIG_SCHEMA) -> Dict[str, Any]:
        schema = read_bundled_yaml("schemas", schema_name)
        if not isinstance(schema, dict):
            raise ConfigError(f"Schema must be a YAML mapping: {schema_name}")
        return schema

    def validate_schema(self, config: Dict[str, Any], schema_name: str = CONFIG_SCHEMA) -> None:
        schema = self.load_schema(schema_name)
        try:
            jsonschema.validate(instance=config, schema=schema)
        except jsonschema.ValidationError as exc:
            where = ".".join(str(p) for p in exc.absolute_path) or "<root>"
            raise ConfigError(
                f"Configuration failed validation at {where}: {exc.message}",
                context={"schema": schema_name, "path": where},
            ) from exc

    # ========== Loading ==========

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from all layers.

        Args:
            validate: If True, validate against the bundled JSON schema and
                reject malformed environment override keys.

        Returns:
            Merged configuration dictionary
        """
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.user_config_dir, cfg)
        cfg = self._load_directory(self.project_config_dir, cfg)
        self.apply_env_overrides(cfg, strict=validate)

        if validate:
            self.validate_schema(cfg)

        logger.debug("Loaded configuration for %s", self.repo_root)
        return cfg

    def get(self, dotted: str, default: Any = None, *, validate: bool = False) -> Any:
        """Return a value by dotted path (e.g. ``registry.cascade.transitive``)."""
        current: Union[Dict[str, Any], Any] = self.load_config(validate=validate)
        for part in dotted.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = ["ConfigManager", "ENV_PREFIX", "CONFIG_SCHEMA"]
