"""Helius RPC client — token accounts and signature history for Solana."""

import asyncio
from typing import Any

import httpx
from loguru import logger

from src.parsers.helius.exceptions import HeliusApiError, HeliusRateLimitError
from src.parsers.helius.models import HeliusSignature, HeliusTokenAccount
from src.parsers.rate_limiter import RateLimiter

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_ACCOUNT_SIZE = 165

MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]


class HeliusClient:
    """Async JSON-RPC client for the Helius Solana endpoint.

    Owns its ``httpx.AsyncClient``; create once at startup and ``close()``
    on shutdown.
    """

    def __init__(self, api_key: str, rpc_url: str = "", max_rps: float = 10.0) -> None:
        self._rpc_url = rpc_url or f"https://mainnet.helius-rpc.com/?api-key={api_key}"
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(timeout=15.0)

    async def close(self) -> None:
        await self._client.aclose()

    async def get_token_accounts(self, mint: str) -> list[HeliusTokenAccount]:
        """Fetch every SPL token account bound to ``mint``.

        Uses getProgramAccounts on the Token program with a 165-byte size
        filter and a memcmp on the mint field. Raises HeliusApiError when
        the call fails; a response without a result list yields [].

        Cost: one heavy RPC call (getProgramAccounts).
        """
        params = [
            TOKEN_PROGRAM_ID,
            {
                "encoding": "jsonParsed",
                "filters": [
                    {"dataSize": TOKEN_ACCOUNT_SIZE},
                    {"memcmp": {"offset": 0, "bytes": mint}},
                ],
            },
        ]
        result = await self._rpc_call("getProgramAccounts", params)
        if not isinstance(result, list):
            logger.debug(f"[HELIUS] getProgramAccounts returned no list for {mint[:12]}")
            return []
        return [_parse_token_account(item) for item in result]

    async def get_signatures_for_address(
        self, address: str, *, limit: int = 50, before: str = ""
    ) -> list[HeliusSignature]:
        """Fetch the most recent transaction signatures for an address."""
        options: dict[str, Any] = {"limit": min(limit, 1000)}
        if before:
            options["before"] = before

        result = await self._rpc_call("getSignaturesForAddress", [address, options])
        return [
            HeliusSignature(
                signature=sig.get("signature", ""),
                slot=sig.get("slot") or 0,
                timestamp=sig.get("blockTime") or 0,
                err=sig.get("err"),
            )
            for sig in result or []
        ]

    async def _rpc_call(self, method: str, params: Any) -> Any:
        """POST a JSON-RPC request and return its ``result`` member.

        429s, timeouts and connection errors are retried with fixed delays.
        """
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        for attempt in range(MAX_RETRIES + 1):
            delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
            try:
                await self._rate_limiter.acquire()
                resp = await self._client.post(self._rpc_url, json=payload)
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt < MAX_RETRIES:
                    logger.debug(f"[HELIUS] {method} {type(e).__name__}, retry in {delay}s")
                    await asyncio.sleep(delay)
                    continue
                logger.warning(f"[HELIUS] {method} failed after retries: {e}")
                raise HeliusApiError(f"{method} failed: {type(e).__name__}: {e}") from e

            if resp.status_code == 429:
                if attempt < MAX_RETRIES:
                    logger.debug(f"[HELIUS] {method} rate limited, waiting {delay}s")
                    await asyncio.sleep(delay)
                    continue
                raise HeliusRateLimitError(f"{method} rate limited", status_code=429)

            if resp.status_code != 200:
                logger.debug(f"[HELIUS] {method} HTTP {resp.status_code}")
                raise HeliusApiError(
                    f"Helius RPC error: {resp.status_code} {resp.reason_phrase}",
                    status_code=resp.status_code,
                )

            try:
                data = resp.json()
            except ValueError as e:
                logger.debug(f"[HELIUS] {method} non-JSON body: {e}")
                raise HeliusApiError(
                    f"{method} invalid JSON body", status_code=resp.status_code
                ) from e
            if not isinstance(data, dict):
                raise HeliusApiError(
                    f"{method} unexpected body: {type(data).__name__}",
                    status_code=resp.status_code,
                )

            if "error" in data:
                error = data["error"]
                message = error.get("message", error) if isinstance(error, dict) else error
                logger.debug(f"[HELIUS] {method} RPC error: {error}")
                # HTTP was 200; the failure is in the RPC layer
                raise HeliusApiError(f"{method} RPC error: {message}")
            return data.get("result")

        raise HeliusApiError(f"{method} failed after {MAX_RETRIES + 1} attempts")


def _parse_token_account(item: Any) -> HeliusTokenAccount:
    """Reduce a jsonParsed token account to owner + ui balance.

    Anything unexpected yields an empty owner, which the aggregator drops.
    """
    if not isinstance(item, dict):
        return HeliusTokenAccount()

    data = _as_dict(_as_dict(item.get("account")).get("data"))
    info = _as_dict(_as_dict(data.get("parsed")).get("info"))
    token_amount = _as_dict(info.get("tokenAmount"))
    ui_amount = token_amount.get("uiAmount")

    return HeliusTokenAccount(
        owner=info.get("owner") if isinstance(info.get("owner"), str) else "",
        balance=ui_amount if isinstance(ui_amount, (int, float)) else 0.0,
        pubkey=item.get("pubkey") if isinstance(item.get("pubkey"), str) else "",
    )


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}
