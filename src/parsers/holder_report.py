"""Token holder report — aggregate, classify, rank and enrich holders of a mint.

Pipeline:
    token accounts (Helius getProgramAccounts)
      → aggregate_holders   total supply + per-owner percentage
      → classify_holders    pool / whale / holder
      → rank_holders        percentage desc, stable
      → enrich_holders      top 10 get signature history
      → report_slice        top 25 returned
"""

import httpx
from loguru import logger

from src.parsers.helius.exceptions import HeliusError
from src.parsers.helius.models import HeliusTokenAccount
from src.parsers.holder_classifier import HolderClassifier, classify_holders
from src.parsers.holder_enrichment import enrich_holders
from src.parsers.holder_exceptions import InvalidMintError, SourceUnavailableError
from src.parsers.holder_types import (
    ENRICH_TOP_N,
    REPORT_MAX_HOLDERS,
    HolderRecord,
    HolderReport,
    SignatureHistorySource,
    TokenAccountSource,
)

MIN_ADDRESS_LENGTH = 21  # shorter owners are malformed records


def aggregate_holders(
    accounts: list[HeliusTokenAccount], mint: str
) -> tuple[list[HolderRecord], float]:
    """Build holder records with their share of the reported supply.

    Supply is summed over every account before filtering, so percentages of
    the surviving holders need not add up to 100.
    """
    total_supply = sum(acc.balance or 0.0 for acc in accounts)

    holders: list[HolderRecord] = []
    for acc in accounts:
        owner = acc.owner
        balance = acc.balance or 0.0
        if not owner or owner == mint or len(owner) < MIN_ADDRESS_LENGTH or balance <= 0:
            continue

        percentage = balance / total_supply * 100 if total_supply > 0 else 0.0
        holders.append(HolderRecord(address=owner, balance=balance, percentage=percentage))

    return holders, total_supply


def rank_holders(holders: list[HolderRecord]) -> list[HolderRecord]:
    """Sort by percentage descending; ties keep their input order."""
    return sorted(holders, key=lambda h: h.percentage, reverse=True)


def top_for_enrichment(ranked: list[HolderRecord]) -> list[HolderRecord]:
    return ranked[:ENRICH_TOP_N]


def report_slice(ranked: list[HolderRecord]) -> list[HolderRecord]:
    return ranked[:REPORT_MAX_HOLDERS]


def validate_mint(mint_address: object) -> str:
    """Return the stripped mint address or raise InvalidMintError."""
    if not isinstance(mint_address, str) or not mint_address.strip():
        raise InvalidMintError("Mint address is required")
    return mint_address.strip()


async def compute_holder_report(
    source: TokenAccountSource,
    mint_address: str,
    *,
    history: SignatureHistorySource | None = None,
    classifier: HolderClassifier | None = None,
    history_timeout: float = 10.0,
    max_concurrent: int = 10,
) -> HolderReport:
    """Build the holder report for a mint.

    ``history`` defaults to ``source`` (HeliusClient serves both).

    Raises InvalidMintError before any I/O for a missing mint, and
    SourceUnavailableError when the account listing fails. History lookup
    failures only leave the affected holders unenriched.
    """
    mint = validate_mint(mint_address)
    history = history or source  # type: ignore[assignment]

    try:
        accounts = await source.get_token_accounts(mint)
    except HeliusError as e:
        logger.error(f"[HOLDERS] Token accounts unavailable for {mint[:12]}: {e}")
        raise SourceUnavailableError(
            str(e), status_code=getattr(e, "status_code", None)
        ) from e
    except httpx.HTTPError as e:
        logger.error(f"[HOLDERS] Token accounts unavailable for {mint[:12]}: {e}")
        raise SourceUnavailableError(f"{type(e).__name__}: {e}") from e

    holders, total_supply = aggregate_holders(accounts, mint)
    report = HolderReport(mint=mint, total_supply=total_supply, holder_count=len(holders))
    if not holders:
        logger.info(f"[HOLDERS] {mint[:12]}: no qualifying holders in {len(accounts)} accounts")
        return report

    ranked = rank_holders(classify_holders(holders, classifier))

    report.enrichment_failures = await enrich_holders(
        history,
        top_for_enrichment(ranked),
        timeout=history_timeout,
        max_concurrent=max_concurrent,
    )
    report.holders = report_slice(ranked)

    logger.info(
        f"[HOLDERS] {mint[:12]}: {len(holders)} holders from {len(accounts)} accounts, "
        f"top10={report.top10_pct:.1f}%, "
        f"enrichment failures={len(report.enrichment_failures)}"
    )
    return report
