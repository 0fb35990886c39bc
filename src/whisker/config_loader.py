"""Load WhiskerConfig from whisker.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from whisker._errors import ConfigError
from whisker.config import WhiskerConfig

_KNOWN_KEYS: frozenset[str] = frozenset({
    "host",
    "port",
    "cert",
    "key",
    "metrics",
    "profile_pool",
    "workers",
    "max_data_size",
    "health_code",
    "echo_log",
})


def load_config(root: Path, **overrides: object) -> WhiskerConfig:
    """Load WhiskerConfig from root, optionally merging whisker.yaml.

    Looks for whisker.yaml, whisker.yml, or whisker.toml in root.  If found,
    loads and merges with overrides.  Overrides that are ``None`` are
    treated as "not given" so argparse defaults never mask the file.

    Raises:
        ConfigError: If the file exists but cannot be parsed, or the merged
            values are invalid.

    """
    file_config = _read_whisker_config(root)
    given = {k: v for k, v in overrides.items() if v is not None}
    merged = {**file_config, **given}
    try:
        return WhiskerConfig(**merged)  # type: ignore[arg-type]
    except TypeError as exc:
        msg = f"Invalid whisker configuration: {exc}"
        raise ConfigError(msg) from exc


def _read_whisker_config(root: Path) -> dict[str, object]:
    """Read whisker config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("whisker.yaml", "whisker.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "whisker.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping at the top level"
        raise ConfigError(msg)
    return _flatten_whisker_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        msg = f"Failed to parse {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_whisker_section(data)


def _flatten_whisker_section(data: dict[str, object]) -> dict[str, object]:
    """Extract whisker.* keys into top-level config.

    Top-level keys win over nothing; keys inside a ``whisker`` section win
    over top-level keys of the same name.  Unknown keys are dropped.
    """
    result: dict[str, object] = {k: v for k, v in data.items() if k in _KNOWN_KEYS}
    section = data.get("whisker")
    if isinstance(section, dict):
        for k, v in section.items():
            if k in _KNOWN_KEYS:
                result[k] = v
    return result
