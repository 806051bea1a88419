"""Holder classification — liquidity pool / whale / plain holder.

Heuristic, not ground truth. Expect false positives (a large individual
wallet above the pool threshold is labelled a pool) and false negatives
(program-owned vaults below it with unremarkable addresses).
"""

from typing import Protocol

from src.parsers.holder_types import HolderRecord

POOL_PCT_THRESHOLD = 20.0
WHALE_PCT_THRESHOLD = 4.0
POOL_ADDRESS_HINTS = ("pool", "liquidity")


class HolderClassifier(Protocol):
    """Sets the classification flags of a record in place."""

    def classify(self, holder: HolderRecord) -> None: ...


class HeuristicClassifier:
    """First match wins: pool, then whale, then plain holder.

    Pool: address contains one of the hints (case-sensitive) or the share
    exceeds ``pool_pct_threshold``. Whale: share exceeds
    ``whale_pct_threshold``. ``is_creator`` is never set.
    """

    def __init__(
        self,
        *,
        pool_pct_threshold: float = POOL_PCT_THRESHOLD,
        whale_pct_threshold: float = WHALE_PCT_THRESHOLD,
        pool_hints: tuple[str, ...] = POOL_ADDRESS_HINTS,
    ) -> None:
        self.pool_pct_threshold = pool_pct_threshold
        self.whale_pct_threshold = whale_pct_threshold
        self.pool_hints = pool_hints

    def classify(self, holder: HolderRecord) -> None:
        holder.is_creator = False
        holder.is_liquidity_pool = self._looks_like_pool(holder)
        holder.is_whale = (
            not holder.is_liquidity_pool
            and holder.percentage > self.whale_pct_threshold
        )

    def _looks_like_pool(self, holder: HolderRecord) -> bool:
        if any(hint in holder.address for hint in self.pool_hints):
            return True
        return holder.percentage > self.pool_pct_threshold


def classify_holders(
    holders: list[HolderRecord], classifier: HolderClassifier | None = None
) -> list[HolderRecord]:
    """Classify every holder in place and return the same list."""
    classifier = classifier or HeuristicClassifier()
    for holder in holders:
        classifier.classify(holder)
    return holders
