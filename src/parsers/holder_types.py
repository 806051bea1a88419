"""Types for the token holder report.

A HolderRecord is built once per run from a raw token account, classified,
ranked, and for the top holders enriched in place with signature history.
Nothing is persisted between runs.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Protocol

from src.parsers.helius.models import HeliusSignature, HeliusTokenAccount

ENRICH_TOP_N = 10  # holders that get signature history
REPORT_MAX_HOLDERS = 25  # holders returned to the caller
SIGNATURE_LIMIT = 50  # most recent signatures per holder


@dataclass
class HolderRecord:
    """One distinct owner address holding the token."""

    address: str
    balance: float
    percentage: float = 0.0  # of reported supply, 0..100
    first_transaction: int = 0  # unix seconds, 0 = unresolved
    last_transaction: int = 0
    transaction_count: int = 0  # capped at SIGNATURE_LIMIT, a floor
    is_creator: bool = False  # not derivable from account data yet
    is_whale: bool = False
    is_liquidity_pool: bool = False

    @property
    def holder_type(self) -> str:
        if self.is_creator:
            return "creator"
        if self.is_liquidity_pool:
            return "liquidity_pool"
        if self.is_whale:
            return "whale"
        return "holder"

    @property
    def is_enriched(self) -> bool:
        return self.transaction_count > 0

    def holding_hours(self, now: float | None = None) -> float | None:
        """Hours since the earliest retrieved signature, None if unresolved."""
        if self.first_transaction <= 0:
            return None
        now = time.time() if now is None else now
        return round(max(now - self.first_transaction, 0) / 3600, 1)


@dataclass
class HolderReport:
    """Ranked, classified holder list for one mint."""

    mint: str
    holders: list[HolderRecord] = field(default_factory=list)
    total_supply: float = 0.0  # sum of all reported balances
    holder_count: int = 0  # qualifying holders before truncation
    enrichment_failures: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.holders

    @property
    def top10_pct(self) -> float:
        """Combined share of the enriched top holders."""
        return sum(h.percentage for h in self.holders[:ENRICH_TOP_N])


class TokenAccountSource(Protocol):
    async def get_token_accounts(self, mint: str) -> list[HeliusTokenAccount]: ...


class SignatureHistorySource(Protocol):
    async def get_signatures_for_address(
        self, address: str, *, limit: int = 50
    ) -> list[HeliusSignature]: ...
