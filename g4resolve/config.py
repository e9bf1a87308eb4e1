"""Resolver configuration loaded from defaults, YAML files and the environment."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from g4resolve.errors import ConfigError

ENV_PREFIX = "G4RESOLVE_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ResolverConfig:
    """Configuration for import resolution."""

    # Feature toggles
    import_resolution_enabled: bool = True
    auto_discovery: bool = False

    # Security limits
    max_import_depth: int = 10
    allowed_base_paths: list[str] = field(default_factory=list)
    sanitize_paths: bool = True

    # Resolved-import cache
    cache_enabled: bool = True
    cache_max_size: int = 256
    cache_ttl_seconds: int = 3600

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            expected = _field_type(f.name)
            if expected is bool and not isinstance(value, bool):
                msg = f"'{f.name}' must be a boolean, got {value!r}"
                raise ConfigError(msg)
            if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
                msg = f"'{f.name}' must be an integer, got {value!r}"
                raise ConfigError(msg)

        if self.allowed_base_paths is None:
            self.allowed_base_paths = []
        elif isinstance(self.allowed_base_paths, str | Path):
            self.allowed_base_paths = [str(self.allowed_base_paths)]
        self.allowed_base_paths = [str(p) for p in self.allowed_base_paths]

        if self.max_import_depth < 0:
            msg = f"'max_import_depth' must be >= 0, got {self.max_import_depth}"
            raise ConfigError(msg)
        if self.cache_max_size <= 0:
            msg = f"'cache_max_size' must be > 0, got {self.cache_max_size}"
            raise ConfigError(msg)
        if self.cache_ttl_seconds < 0:
            msg = f"'cache_ttl_seconds' must be >= 0, got {self.cache_ttl_seconds}"
            raise ConfigError(msg)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ResolverConfig:
        """Create configuration from a mapping, rejecting unknown keys."""
        if not data:
            return cls()
        if not isinstance(data, dict):
            msg = f"Configuration must be a mapping, got {type(data).__name__}"
            raise ConfigError(msg)

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            msg = f"Unknown configuration keys: {', '.join(unknown)}"
            raise ConfigError(msg)
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> ResolverConfig:
        """Load configuration from a YAML file.

        The file may either hold the settings at top level or nest them
        under a ``g4resolve`` key.
        """
        try:
            with Path(path).open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            msg = f"Cannot read configuration file {path}: {e}"
            raise ConfigError(msg) from e
        except yaml.YAMLError as e:
            msg = f"Invalid YAML in configuration file {path}: {e}"
            raise ConfigError(msg) from e

        if isinstance(data, dict) and "g4resolve" in data:
            data = data["g4resolve"]
        return cls.from_dict(data)

    @classmethod
    def from_env(
        cls,
        base: ResolverConfig | None = None,
        environ: dict[str, str] | None = None,
    ) -> ResolverConfig:
        """Overlay ``G4RESOLVE_*`` environment variables onto a configuration."""
        env = os.environ if environ is None else environ
        values = asdict(base) if base is not None else asdict(cls())

        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            values[f.name] = _parse_env_value(f.name, raw)

        # Short aliases
        raw_paths = env.get(ENV_PREFIX + "ALLOWED_PATHS")
        if raw_paths is not None:
            values["allowed_base_paths"] = _parse_env_value("allowed_base_paths", raw_paths)
        raw_enabled = env.get(ENV_PREFIX + "IMPORTS_ENABLED")
        if raw_enabled is not None:
            values["import_resolution_enabled"] = _parse_env_value(
                "import_resolution_enabled",
                raw_enabled,
            )

        return cls(**values)

    @classmethod
    def load(cls, path: str | Path | None = None) -> ResolverConfig:
        """Load configuration from an optional YAML file, then the environment."""
        base = cls.from_yaml(path) if path else cls()
        return cls.from_env(base)

    def with_overrides(self, **overrides: Any) -> ResolverConfig:
        """Return a copy with the given non-None settings replaced."""
        values = asdict(self)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ResolverConfig.from_dict(values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


def _field_type(name: str) -> type:
    if name == "allowed_base_paths":
        return list
    return type(ResolverConfig.__dataclass_fields__[name].default)


def _parse_env_value(name: str, raw: str) -> Any:
    expected = _field_type(name)
    value = raw.strip()

    if expected is bool:
        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        msg = f"Environment value for '{name}' is not a boolean: {raw!r}"
        raise ConfigError(msg)

    if expected is int:
        try:
            return int(value)
        except ValueError:
            msg = f"Environment value for '{name}' is not an integer: {raw!r}"
            raise ConfigError(msg) from None

    return [p for p in value.split(os.pathsep) if p]
