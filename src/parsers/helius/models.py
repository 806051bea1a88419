"""Pydantic models for Helius RPC responses used by the holder report."""

from pydantic import BaseModel


class HeliusTokenAccount(BaseModel):
    """SPL token account reduced to its owner and ui balance."""

    owner: str = ""
    balance: float = 0.0  # tokenAmount.uiAmount, human units
    pubkey: str = ""  # token account address


class HeliusSignature(BaseModel):
    """Transaction signature metadata."""

    signature: str
    slot: int = 0
    timestamp: int = 0  # blockTime, 0 when the node did not report it
    err: dict | str | None = None  # non-None means failed
