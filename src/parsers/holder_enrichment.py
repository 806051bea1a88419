"""Holder enrichment — first/last seen and activity from signature history.

Each top holder gets one getSignaturesForAddress call (most recent 50).
Calls run concurrently, each under its own timeout; a failed, timed out or
empty lookup leaves that holder's fields at zero and never affects others.
"""

import asyncio

from loguru import logger

from src.parsers.helius.models import HeliusSignature
from src.parsers.holder_exceptions import EnrichmentFailedError
from src.parsers.holder_types import SIGNATURE_LIMIT, HolderRecord, SignatureHistorySource


async def enrich_holders(
    history: SignatureHistorySource,
    holders: list[HolderRecord],
    *,
    signature_limit: int = SIGNATURE_LIMIT,
    timeout: float = 10.0,
    max_concurrent: int = 10,
) -> list[str]:
    """Fold signature history into ``holders`` in place.

    Returns the addresses whose lookup failed or timed out.
    """
    if not holders:
        return []

    semaphore = asyncio.Semaphore(max(max_concurrent, 1))

    async def _enrich_one(holder: HolderRecord) -> EnrichmentFailedError | None:
        async with semaphore:
            try:
                sigs = await asyncio.wait_for(
                    history.get_signatures_for_address(
                        holder.address, limit=signature_limit
                    ),
                    timeout=timeout,
                )
            except asyncio.TimeoutError:
                return EnrichmentFailedError(holder.address, f"timed out after {timeout}s")
            except Exception as e:
                return EnrichmentFailedError(holder.address, f"{type(e).__name__}: {e}")

        apply_signatures(holder, sigs)
        return None

    # Each task writes only to its own record, so completion order is irrelevant.
    results = await asyncio.gather(*[_enrich_one(h) for h in holders])

    failed: list[str] = []
    for error in results:
        if error is None:
            continue
        logger.warning(f"[HOLDERS] {error.address[:12]} enrichment skipped: {error.reason}")
        failed.append(error.address)

    return failed


def apply_signatures(holder: HolderRecord, sigs: list[HeliusSignature]) -> None:
    """Set first/last timestamps and count. No-op for an empty list."""
    if not sigs:
        return

    ordered = sorted(sigs, key=lambda s: s.timestamp or 0)
    holder.first_transaction = ordered[0].timestamp or 0
    holder.last_transaction = ordered[-1].timestamp or 0
    holder.transaction_count = len(sigs)
