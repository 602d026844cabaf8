"""Shared CLI helper utilities for app entrypoints."""

from __future__ import annotations

import argparse
import json
import math
from collections.abc import Mapping
from pathlib import Path
from typing import Any

# Order of the positional pricing inputs on the command line.
PARAMETER_ORDER: tuple[str, ...] = (
    "spot",
    "strike",
    "volatility",
    "time_to_maturity",
    "risk_free_rate",
    "levels",
)


def number(text: str) -> float:
    """argparse type for a finite real number."""
    try:
        value = float(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}") from e
    if not math.isfinite(value):
        raise argparse.ArgumentTypeError(f"number must be finite: {text!r}")
    return value


def level_count(text: str) -> int:
    """argparse type for a level count; accepts `5` as well as `5.0`."""
    value = number(text)
    if not value.is_integer():
        raise argparse.ArgumentTypeError(f"levels must be a whole number: {text!r}")
    return int(value)


def add_print_config_arg(parser) -> None:
    """Add a `--print-config` flag to a parser."""
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print merged config (JSON) and exit.",
    )


def collect_logging_overrides(args) -> dict[str, Any]:
    """Collect logging override values from parsed CLI args."""
    overrides: dict[str, Any] = {}
    if getattr(args, "log_level", None):
        overrides["level"] = args.log_level
    if getattr(args, "log_file", None):
        overrides["file"] = args.log_file
    if getattr(args, "log_format", None):
        overrides["format"] = args.log_format
    if getattr(args, "log_color", None) is not None:
        overrides["color"] = args.log_color
    return overrides


def collect_parameter_overrides(args, names: tuple[str, ...]) -> dict[str, Any]:
    """Collect the pricing inputs given on the command line."""
    return {
        name: getattr(args, name)
        for name in names
        if getattr(args, name, None) is not None
    }


def missing_parameters(params: Mapping[str, Any], names: tuple[str, ...]) -> list[str]:
    return [name for name in names if params.get(name) is None]


def _normalize(obj: Any) -> Any:
    """Convert paths/mappings/sequences to JSON-serializable structures."""
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, Mapping):
        return {str(k): _normalize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [_normalize(v) for v in obj]
    return obj


def print_config(config: Mapping[str, Any]) -> None:
    """Pretty-print merged config as deterministic JSON."""
    print(json.dumps(_normalize(config), indent=2, sort_keys=True))
