"""Holder report — print the ranked holder list for a token mint.

Usage:
    python scripts/holder_report.py <mint>
    python scripts/holder_report.py <mint> --json
"""

import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from datetime import UTC, datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger  # noqa: E402

from config.settings import settings  # noqa: E402
from src.parsers.helius.client import HeliusClient  # noqa: E402
from src.parsers.holder_classifier import HeuristicClassifier  # noqa: E402
from src.parsers.holder_exceptions import HolderReportError  # noqa: E402
from src.parsers.holder_report import compute_holder_report  # noqa: E402
from src.parsers.holder_types import HolderReport  # noqa: E402
from src.utils.logger import setup_logger  # noqa: E402


def _fmt_ts(ts: int) -> str:
    if ts <= 0:
        return "-"
    return datetime.fromtimestamp(ts, UTC).strftime("%Y-%m-%d %H:%M")


def print_report(report: HolderReport) -> None:
    print(f"\nHolders of {report.mint}")
    print(
        f"  qualifying: {report.holder_count}  shown: {len(report.holders)}  "
        f"reported supply: {report.total_supply:,.2f}  top10: {report.top10_pct:.2f}%"
    )
    if report.is_empty:
        print("  no holders found")
        return

    print(
        f"\n  {'#':>3}  {'address':<44}  {'pct':>7}  {'type':<14}  "
        f"{'txs':>4}  {'first seen':<16}  {'last seen':<16}"
    )
    for rank, h in enumerate(report.holders, 1):
        print(
            f"  {rank:>3}  {h.address:<44}  {h.percentage:>6.2f}%  {h.holder_type:<14}  "
            f"{h.transaction_count:>4}  {_fmt_ts(h.first_transaction):<16}  "
            f"{_fmt_ts(h.last_transaction):<16}"
        )

    if report.enrichment_failures:
        print(f"\n  history unavailable for {len(report.enrichment_failures)} holder(s)")


async def main() -> int:
    parser = argparse.ArgumentParser(description="Ranked holder report for a token mint")
    parser.add_argument("mint", help="Token mint address")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    args = parser.parse_args()

    setup_logger(level="WARNING", log_file="")

    if not settings.helius_configured:
        logger.error("HELIUS_API_KEY is not set")
        return 2

    helius = HeliusClient(
        settings.helius_api_key,
        rpc_url=settings.helius_rpc_url,
        max_rps=settings.helius_max_rps,
    )
    try:
        report = await compute_holder_report(
            helius,
            args.mint,
            classifier=HeuristicClassifier(
                pool_pct_threshold=settings.holders_pool_pct_threshold,
                whale_pct_threshold=settings.holders_whale_pct_threshold,
            ),
            history_timeout=settings.holders_history_timeout_sec,
            max_concurrent=settings.holders_enrich_concurrency,
        )
    except HolderReportError as e:
        logger.error(f"Holder report failed: {e}")
        return 1
    finally:
        await helius.close()

    if args.json:
        print(json.dumps(asdict(report), indent=2))
    else:
        print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
