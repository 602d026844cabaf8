"""Run configuration for the pricing apps.

An app's configuration is built from three layers, later layers winning:

1. the app's `DEFAULT_CONFIG`,
2. an optional YAML file given with `--config`,
3. values given on the command line.

Sections that are mappings (`option`, `levels`, `logging`) are merged key by
key, so a file may set `option.spot` alone and keep every other default.
"""

from __future__ import annotations

import os
from collections.abc import Collection, Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml


class ConfigError(ValueError):
    """A config file that parses but cannot configure the app."""


def add_config_arg(parser, *, default: str | None = None) -> None:
    parser.add_argument(
        "--config",
        type=str,
        default=default,
        metavar="PATH",
        help="YAML file with pricing inputs; command-line values take precedence.",
    )


def load_yaml_config(
    path: str | Path | None,
    *,
    sections: Collection[str] | None = None,
) -> dict[str, Any]:
    """Read one YAML config file.

    Args:
        path: File to read; `None` means no file and yields `{}`.
        sections: Allowed top-level keys. `None` accepts any key.

    Raises:
        FileNotFoundError: If `path` does not exist.
        ConfigError: If the top level is not a mapping, or it names a section
            outside `sections`.
    """
    if path is None:
        return {}

    p = resolve_path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Config file not found: {p}")

    data = yaml.safe_load(p.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(
            f"{p}: expected a YAML mapping at the top level, "
            f"got {type(data).__name__}"
        )

    if sections is not None:
        unknown = sorted(set(data) - set(sections))
        if unknown:
            raise ConfigError(
                f"{p}: unknown config section(s) {', '.join(unknown)}; "
                f"expected one of {', '.join(sorted(sections))}"
            )
    return dict(data)


def _copy(value: Any) -> Any:
    return deep_merge(value, {}) if isinstance(value, Mapping) else value


def deep_merge(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Return `base` with `updates` layered on top. Inputs are left untouched."""
    merged = {key: _copy(value) for key, value in base.items()}
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = _copy(value)
    return merged


def merge_layers(layers: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for layer in layers:
        merged = deep_merge(merged, layer)
    return merged


def build_config(
    defaults: Mapping[str, Any],
    yaml_path: str | Path | None,
    overrides: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge defaults, the YAML file at `yaml_path` and CLI `overrides`.

    The file may only use the top-level sections that `defaults` declares.
    """
    from_file = load_yaml_config(yaml_path, sections=defaults.keys())
    return merge_layers((defaults, from_file, overrides or {}))


def resolve_path(value: str | Path | None) -> Path | None:
    """Expand `~` and environment variables in a path given as text."""
    if value is None:
        return None
    if isinstance(value, Path):
        return value
    return Path(os.path.expandvars(os.path.expanduser(str(value))))
