"""Load QuillConfig from quill.yaml / quill.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from quill._errors import ConfigError
from quill.config import QuillConfig

_KNOWN_KEYS = frozenset({
    "host", "port", "document", "style_source", "style_output",
    "output_style", "debounce_ms",
})


def load_config(root: Path, **overrides: object) -> QuillConfig:
    """Load QuillConfig from root, optionally merging a quill config file.

    Looks for quill.yaml, quill.yml, or quill.toml in root. If found, loads
    and merges with overrides. Overrides take precedence.

    Raises:
        ConfigError: If a config file exists but cannot be parsed.

    """
    file_config = _read_quill_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    return QuillConfig(root=root, **merged)


def _read_quill_config(root: Path) -> dict[str, object]:
    """Read quill config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("quill.yaml", "quill.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "quill.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return _flatten_quill_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_quill_section(data)


def _flatten_quill_section(data: dict[str, object]) -> dict[str, object]:
    """Extract quill.* keys and known top-level keys into one flat dict."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k in _KNOWN_KEYS:
            result[k] = v
    quill = data.get("quill")
    if isinstance(quill, dict):
        for k, v in quill.items():
            if k in _KNOWN_KEYS:
                result[k] = v
    return result
