#!/usr/bin/env python
"""Tabulate CRR call prices over a range of level counts."""

from __future__ import annotations

import argparse
import logging
from typing import Any

import pandas as pd

from binomial_hedge.apps._cli import (
    add_print_config_arg,
    collect_logging_overrides,
    collect_parameter_overrides,
    missing_parameters,
    number,
    print_config,
)
from binomial_hedge.cli import (
    DEFAULT_LOGGING,
    add_config_arg,
    add_logging_args,
    build_config,
    setup_logging_from_config,
)
from binomial_hedge.options import chunk_means, convergence_table

MARKET_INPUTS: tuple[str, ...] = (
    "spot",
    "strike",
    "volatility",
    "time_to_maturity",
    "risk_free_rate",
)

DEFAULT_CONFIG: dict[str, Any] = {
    "logging": {**DEFAULT_LOGGING, "level": "INFO"},
    "option": {name: None for name in MARKET_INPUTS},
    "levels": {
        "start": 25,
        "end": 84,
        "chunk_size": 10,
    },
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Tabulate binomial call prices as the tree is refined."
    )
    for name in MARKET_INPUTS:
        parser.add_argument(name, nargs="?", type=number, default=None)

    add_config_arg(parser)
    add_logging_args(parser)
    add_print_config_arg(parser)
    parser.add_argument("--levels-start", type=int, default=None)
    parser.add_argument(
        "--levels-end",
        type=int,
        default=None,
        help="Last level count (inclusive).",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Consecutive level counts averaged per chunk.",
    )
    return parser


def _build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    levels: dict[str, Any] = {}

    option = collect_parameter_overrides(args, MARKET_INPUTS)
    if option:
        overrides["option"] = option

    if args.levels_start is not None:
        levels["start"] = args.levels_start
    if args.levels_end is not None:
        levels["end"] = args.levels_end
    if args.chunk_size is not None:
        levels["chunk_size"] = args.chunk_size
    if levels:
        overrides["levels"] = levels

    logging_overrides = collect_logging_overrides(args)
    if logging_overrides:
        overrides["logging"] = logging_overrides

    return overrides


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        config = build_config(DEFAULT_CONFIG, args.config, _build_overrides(args))
    except (OSError, ValueError) as e:
        parser.error(str(e))
    if args.print_config:
        print_config(config)
        return

    setup_logging_from_config(config.get("logging"))
    logger = logging.getLogger(__name__)

    option = config.get("option") or {}
    missing = missing_parameters(option, MARKET_INPUTS)
    if missing:
        parser.error(f"missing pricing inputs: {', '.join(missing)}")

    levels_cfg = config["levels"]
    start = int(levels_cfg["start"])
    end = int(levels_cfg["end"])
    chunk_size = int(levels_cfg["chunk_size"])
    if start < 1 or end < start:
        parser.error("levels must satisfy 1 <= start <= end")

    logger.info("Option:     %s", option)
    logger.info("Levels:     %d..%d (chunks of %d)", start, end, chunk_size)

    try:
        table = convergence_table(
            spot=float(option["spot"]),
            strike=float(option["strike"]),
            volatility=float(option["volatility"]),
            time_to_maturity=float(option["time_to_maturity"]),
            risk_free_rate=float(option["risk_free_rate"]),
            levels_range=range(start, end + 1),
        )
        means = chunk_means(table["price"], chunk_size=chunk_size)
    except (TypeError, ValueError) as e:
        parser.error(str(e))

    with pd.option_context("display.max_rows", None, "display.precision", 6):
        print(table.to_string())
        print()
        print(means.to_string())

    if len(means) > 1:
        logger.info("Chunk-mean band: %.6f", means.max() - means.min())


if __name__ == "__main__":
    main()
