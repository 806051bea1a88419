"""Tests for the Helius RPC client (token accounts + signatures)."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.parsers.helius.client import TOKEN_PROGRAM_ID, HeliusClient, _parse_token_account
from src.parsers.helius.exceptions import HeliusApiError, HeliusRateLimitError

MINT = "MintAddr1111111111111111111111111111111111"


def _resp(status_code: int = 200, payload: dict | None = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.reason_phrase = "Internal Server Error" if status_code >= 500 else "OK"
    resp.json.return_value = payload or {}
    return resp


def _client(*responses) -> HeliusClient:
    client = HeliusClient("test-key", max_rps=1000.0)
    client._client = AsyncMock()
    client._client.post = AsyncMock(side_effect=list(responses))
    return client


def _parsed_account(owner: str, ui_amount: float | None) -> dict:
    return {
        "pubkey": f"ata_{owner[:8]}",
        "account": {
            "data": {
                "parsed": {
                    "info": {
                        "mint": MINT,
                        "owner": owner,
                        "tokenAmount": {"amount": "0", "decimals": 6, "uiAmount": ui_amount},
                    },
                    "type": "account",
                },
                "program": "spl-token",
            }
        },
    }


class TestParseTokenAccount:
    def test_owner_and_balance(self) -> None:
        acc = _parse_token_account(_parsed_account("OwnerWallet1111111111111111", 12.5))
        assert acc.owner == "OwnerWallet1111111111111111"
        assert acc.balance == 12.5
        assert acc.pubkey == "ata_OwnerWal"

    def test_null_ui_amount_is_zero(self) -> None:
        acc = _parse_token_account(_parsed_account("OwnerWallet1111111111111111", None))
        assert acc.balance == 0.0

    def test_unparsed_data_yields_empty_owner(self) -> None:
        acc = _parse_token_account({"pubkey": "x", "account": {"data": ["AAAA", "base64"]}})
        assert acc.owner == ""
        assert acc.balance == 0.0

    def test_null_parsed_yields_empty_owner(self) -> None:
        acc = _parse_token_account({"pubkey": "x", "account": {"data": {"parsed": None}}})
        assert acc.owner == ""
        assert acc.balance == 0.0

    def test_non_dict_entry_yields_empty_account(self) -> None:
        acc = _parse_token_account("garbage")
        assert acc.owner == ""
        assert acc.pubkey == ""


class TestGetTokenAccounts:
    @pytest.mark.asyncio
    async def test_request_shape_and_parsing(self) -> None:
        client = _client(
            _resp(200, {"result": [
                _parsed_account("OwnerA1111111111111111111", 100.0),
                _parsed_account("OwnerB1111111111111111111", 5.0),
            ]})
        )

        accounts = await client.get_token_accounts(MINT)

        assert [a.owner for a in accounts] == [
            "OwnerA1111111111111111111",
            "OwnerB1111111111111111111",
        ]
        payload = client._client.post.call_args.kwargs["json"]
        assert payload["method"] == "getProgramAccounts"
        program_id, options = payload["params"]
        assert program_id == TOKEN_PROGRAM_ID
        assert options["encoding"] == "jsonParsed"
        assert {"dataSize": 165} in options["filters"]
        assert {"memcmp": {"offset": 0, "bytes": MINT}} in options["filters"]

    @pytest.mark.asyncio
    async def test_missing_result_is_empty(self) -> None:
        client = _client(_resp(200, {"jsonrpc": "2.0", "id": 1}))
        assert await client.get_token_accounts(MINT) == []

    @pytest.mark.asyncio
    async def test_http_error_raises_with_status(self) -> None:
        client = _client(_resp(503))
        with pytest.raises(HeliusApiError) as exc_info:
            await client.get_token_accounts(MINT)
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_rpc_error_raises(self) -> None:
        client = _client(_resp(200, {"error": {"code": -32600, "message": "Invalid param"}}))
        with pytest.raises(HeliusApiError, match="Invalid param") as exc_info:
            await client.get_token_accounts(MINT)
        # HTTP itself succeeded, so no upstream status is reported
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self) -> None:
        resp = _resp(200)
        resp.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)
        client = _client(resp)
        with pytest.raises(HeliusApiError, match="invalid JSON") as exc_info:
            await client.get_token_accounts(MINT)
        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_non_object_body_raises(self) -> None:
        resp = _resp(200)
        resp.json.return_value = ["not", "an", "object"]
        client = _client(resp)
        with pytest.raises(HeliusApiError, match="unexpected body"):
            await client.get_token_accounts(MINT)

    @pytest.mark.asyncio
    async def test_malformed_entries_get_empty_owner(self) -> None:
        client = _client(
            _resp(200, {"result": [
                {"pubkey": "p1", "account": {"data": {"parsed": None}}},
                "garbage",
                _parsed_account("OwnerA1111111111111111111", 3.0),
            ]})
        )
        accounts = await client.get_token_accounts(MINT)
        assert [a.owner for a in accounts] == ["", "", "OwnerA1111111111111111111"]
        assert accounts[2].balance == 3.0

    @pytest.mark.asyncio
    async def test_retries_connect_error_then_succeeds(self, no_retry_delay) -> None:
        client = _client(
            httpx.ConnectError("refused"),
            _resp(200, {"result": [_parsed_account("OwnerA1111111111111111111", 1.0)]}),
        )
        accounts = await client.get_token_accounts(MINT)
        assert len(accounts) == 1
        assert client._client.post.await_count == 2

    @pytest.mark.asyncio
    async def test_timeouts_exhaust_retries(self, no_retry_delay) -> None:
        client = _client(*[httpx.ReadTimeout("slow") for _ in range(3)])
        with pytest.raises(HeliusApiError, match="ReadTimeout"):
            await client.get_token_accounts(MINT)
        assert client._client.post.await_count == 3

    @pytest.mark.asyncio
    async def test_persistent_rate_limit_raises(self, no_retry_delay) -> None:
        client = _client(_resp(429), _resp(429), _resp(429))
        with pytest.raises(HeliusRateLimitError):
            await client.get_token_accounts(MINT)


class TestGetSignatures:
    @pytest.mark.asyncio
    async def test_parses_block_time(self) -> None:
        client = _client(
            _resp(200, {"result": [
                {"signature": "s2", "slot": 20, "blockTime": 1_700_000_200, "err": None},
                {"signature": "s1", "slot": 10, "blockTime": None, "err": None},
            ]})
        )

        sigs = await client.get_signatures_for_address("OwnerA1111111111111111111", limit=50)

        assert [s.signature for s in sigs] == ["s2", "s1"]
        assert sigs[0].timestamp == 1_700_000_200
        assert sigs[1].timestamp == 0
        params = client._client.post.call_args.kwargs["json"]["params"]
        assert params == ["OwnerA1111111111111111111", {"limit": 50}]

    @pytest.mark.asyncio
    async def test_limit_capped_at_1000(self) -> None:
        client = _client(_resp(200, {"result": []}))
        await client.get_signatures_for_address("OwnerA1111111111111111111", limit=5000)
        params = client._client.post.call_args.kwargs["json"]["params"]
        assert params[1]["limit"] == 1000

    @pytest.mark.asyncio
    async def test_http_error_raises(self) -> None:
        client = _client(_resp(500))
        with pytest.raises(HeliusApiError):
            await client.get_signatures_for_address("OwnerA1111111111111111111")
