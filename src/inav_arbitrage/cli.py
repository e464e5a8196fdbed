#!/usr/bin/env python3
"""
Fetch the ETF universe once and print quotes, errors and ranked iNAV signals
as JSON. Read-only: never places orders.
"""

import argparse
import asyncio
import json
import sys

from inav_arbitrage.config.state import ConfigState, get_config
from inav_arbitrage.infrastructure.observability import setup_logging
from inav_arbitrage.service import ArbitrageService


async def run(args: argparse.Namespace, state: ConfigState) -> dict:
    async with ArbitrageService.from_config(state) as service:
        batch = await service.fetch_all(args.symbols or None)
        report = {
            "quotes": [q.model_dump(mode="json") for q in batch.quotes],
            "errors": [{"symbol": e.symbol, "error": e.error} for e in batch.errors],
            "signals": [
                {**s.model_dump(mode="json"), "recommendation": s.recommendation}
                for s in service.calculator.derive(batch.quotes)
            ],
        }
        if args.indices:
            indices = await service.get_indices()
            report["indices"] = [i.model_dump(mode="json") for i in indices.indices]
            report["index_errors"] = [
                {"symbol": e.symbol, "error": e.error} for e in indices.errors
            ]
        report["health"] = (await service.health_snapshot()).model_dump(mode="json")
    return report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch ETF quotes and iNAV arbitrage signals")
    parser.add_argument(
        "--symbols", nargs="*", default=None, help="Symbols to fetch (default: whole universe)"
    )
    parser.add_argument("--indices", action="store_true", help="Also fetch market indices")
    parser.add_argument("--config-dir", default=None, help="Directory holding settings.yaml")
    parser.add_argument("--log-level", default=None, help="Override configured log level")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    state = get_config(args.config_dir)
    setup_logging(
        level=args.log_level or state.logging.level,
        json_logs=state.logging.json_logs,
        stream=sys.stderr,
    )

    report = asyncio.run(run(args, state))
    json.dump(report, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 1 if report["errors"] and not report["quotes"] else 0


if __name__ == "__main__":
    sys.exit(main())
