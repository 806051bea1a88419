"""Token holder endpoints — ranked, classified holder report for a mint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config.settings import Settings
from src.api.dependencies import get_helius, get_settings
from src.parsers.helius.client import HeliusClient
from src.parsers.holder_classifier import HeuristicClassifier
from src.parsers.holder_exceptions import InvalidMintError, SourceUnavailableError
from src.parsers.holder_report import compute_holder_report, validate_mint
from src.parsers.holder_types import HolderRecord, HolderReport

router = APIRouter(prefix="/api/v1/tokens", tags=["holders"])


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HolderOut(_CamelModel):
    address: str
    balance: float
    percentage: float
    first_transaction: int
    last_transaction: int
    transaction_count: int
    is_creator: bool
    is_whale: bool
    is_liquidity_pool: bool
    holder_type: str
    holding_hours: float | None = None

    @classmethod
    def from_record(cls, holder: HolderRecord) -> HolderOut:
        return cls(
            address=holder.address,
            balance=holder.balance,
            percentage=holder.percentage,
            first_transaction=holder.first_transaction,
            last_transaction=holder.last_transaction,
            transaction_count=holder.transaction_count,
            is_creator=holder.is_creator,
            is_whale=holder.is_whale,
            is_liquidity_pool=holder.is_liquidity_pool,
            holder_type=holder.holder_type,
            holding_hours=holder.holding_hours(),
        )


class HolderReportResponse(_CamelModel):
    mint: str
    holders: list[HolderOut]
    total_supply: float = 0.0
    holder_count: int = 0
    enrichment_failures: list[str] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: HolderReport) -> HolderReportResponse:
        return cls(
            mint=report.mint,
            holders=[HolderOut.from_record(h) for h in report.holders],
            total_supply=report.total_supply,
            holder_count=report.holder_count,
            enrichment_failures=report.enrichment_failures,
        )


class HolderReportRequest(_CamelModel):
    mint_address: str | None = Field(None, max_length=64)


async def _build_report(
    mint: str | None, helius: HeliusClient | None, cfg: Settings
) -> HolderReportResponse:
    try:
        mint = validate_mint(mint)
    except InvalidMintError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_argument", "message": str(e)},
        ) from e

    if helius is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "not_configured", "message": "Helius API key not configured"},
        )

    classifier = HeuristicClassifier(
        pool_pct_threshold=cfg.holders_pool_pct_threshold,
        whale_pct_threshold=cfg.holders_whale_pct_threshold,
    )
    try:
        report = await compute_holder_report(
            helius,
            mint,
            classifier=classifier,
            history_timeout=cfg.holders_history_timeout_sec,
            max_concurrent=cfg.holders_enrich_concurrency,
        )
    except SourceUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error": "source_unavailable",
                "message": e.detail,
                "upstream_status": e.status_code,
            },
        ) from e

    return HolderReportResponse.from_report(report)


@router.get("/holders", response_model=HolderReportResponse)
async def get_holders(
    mint: str | None = Query(None, max_length=64, description="Token mint address"),
    helius: HeliusClient | None = Depends(get_helius),
    cfg: Settings = Depends(get_settings),
) -> HolderReportResponse:
    """Top 25 holders of a mint, ranked by share, top 10 enriched with activity."""
    return await _build_report(mint, helius, cfg)


@router.post("/holders", response_model=HolderReportResponse)
async def post_holders(
    body: HolderReportRequest,
    helius: HeliusClient | None = Depends(get_helius),
    cfg: Settings = Depends(get_settings),
) -> HolderReportResponse:
    """Same report as GET, mint passed as ``{"mintAddress": ...}``."""
    return await _build_report(body.mint_address, helius, cfg)
