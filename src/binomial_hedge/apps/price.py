#!/usr/bin/env python
"""Price a European call on a CRR binomial tree and print the value."""

from __future__ import annotations

import argparse
import logging
from typing import Any

from binomial_hedge.apps._cli import (
    PARAMETER_ORDER,
    add_print_config_arg,
    collect_logging_overrides,
    collect_parameter_overrides,
    level_count,
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
from binomial_hedge.options import (
    BinomialParameters,
    TreeMethod,
    price_european_call,
)

DEFAULT_CONFIG: dict[str, Any] = {
    "logging": DEFAULT_LOGGING,
    "method": TreeMethod.RECOMBINING.value,
    "option": {
        "spot": None,
        "strike": None,
        "volatility": None,
        "time_to_maturity": None,
        "risk_free_rate": None,
        "levels": None,
    },
}

_HELP = {
    "spot": "Present stock price.",
    "strike": "Exercise price.",
    "volatility": "Annualized volatility in decimals (0.3 = 30%%).",
    "time_to_maturity": "Time to maturity in years.",
    "risk_free_rate": "Continuously-compounded annual risk-free rate.",
    "levels": "Number of binomial time steps.",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Price a European call with a CRR binomial tree.",
        epilog="Example: %(prog)s 100 125 0.5 1.0 0.06 5",
    )
    for name in PARAMETER_ORDER:
        parser.add_argument(
            name,
            nargs="?",
            type=level_count if name == "levels" else number,
            default=None,
            help=_HELP[name],
        )

    add_config_arg(parser)
    add_logging_args(parser)
    add_print_config_arg(parser)
    parser.add_argument(
        "--method",
        choices=[m.value for m in TreeMethod],
        default=None,
        help="Tree construction (default: recombining).",
    )
    return parser


def _build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}

    option = collect_parameter_overrides(args, PARAMETER_ORDER)
    if option:
        overrides["option"] = option
    if args.method is not None:
        overrides["method"] = args.method

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
    missing = missing_parameters(option, PARAMETER_ORDER)
    if missing:
        parser.error(f"missing pricing inputs: {', '.join(missing)}")

    try:
        params = BinomialParameters.from_mapping(option)
        price = price_european_call(params, method=config["method"])
    except (TypeError, ValueError) as e:
        parser.error(str(e))

    logger.info("Inputs: %s", params.as_dict())
    logger.info("Method: %s", config["method"])
    print(price)


if __name__ == "__main__":
    main()
