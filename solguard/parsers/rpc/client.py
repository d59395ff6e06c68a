"""Solana JSON-RPC client — the ledger data gateway used by every analyzer.

Transport failures surface as typed errors (RateLimitedError, RpcTimeoutError,
RpcError). Retry and pacing live in FetchExecutor, not here, so every call
goes through the same policy.
"""

from typing import Any

import httpx
from loguru import logger

from solguard.parsers.rpc.exceptions import (
    RateLimitedError,
    RpcError,
    RpcTimeoutError,
    TooManyHoldersError,
)
from solguard.parsers.rpc.models import (
    AccountKey,
    MintState,
    ParsedInstruction,
    ParsedTransaction,
    SignatureInfo,
    TokenAccountBalance,
    TokenSupply,
)

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"
MAX_SIGNATURES_PER_PAGE = 1000

# Provider-specific JSON-RPC codes that mean "slow down"
_RATE_LIMIT_CODES = {-32005, -32429, 429}


class SolanaRpcClient:
    """Async JSON-RPC client for a single Solana RPC endpoint."""

    def __init__(
        self,
        rpc_url: str = "",
        *,
        helius_api_key: str = "",
        commitment: str = "confirmed",
        timeout: float = 15.0,
    ) -> None:
        if not rpc_url and helius_api_key:
            rpc_url = f"https://mainnet.helius-rpc.com/?api-key={helius_api_key}"
        self._rpc_url = rpc_url or DEFAULT_RPC_URL
        self._das_url = (
            f"https://mainnet.helius-rpc.com/?api-key={helius_api_key}"
            if helius_api_key
            else self._rpc_url
        )
        self._commitment = commitment
        self._client = httpx.AsyncClient(
            timeout=timeout, headers={"Cache-Control": "no-cache"}
        )
        self._request_id = 0

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    async def close(self) -> None:
        await self._client.aclose()

    async def _call(self, method: str, params: list | dict, *, url: str = "") -> Any:
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        try:
            resp = await self._client.post(url or self._rpc_url, json=payload)
        except httpx.TimeoutException as e:
            raise RpcTimeoutError(f"{method} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise RpcError(f"{method} transport error: {e}") from e

        if resp.status_code == 429:
            raise RateLimitedError(f"{method}: 429 Too Many Requests", code=429)
        if resp.status_code != 200:
            raise RpcError(f"{method}: HTTP {resp.status_code}", code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise RpcError(f"{method}: invalid JSON-RPC response") from e
        if not isinstance(data, dict):
            raise RpcError(f"{method}: invalid JSON-RPC response")

        error = data.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            if code in _RATE_LIMIT_CODES or "too many requests" in message.lower():
                raise RateLimitedError(f"{method}: {message}", code=code)
            raise RpcError(f"{method}: {message}", code=code)

        return data.get("result")

    async def get_account_info(
        self, address: str, *, encoding: str = "jsonParsed"
    ) -> dict | None:
        """Fetch raw account state. Returns None when the account does not exist."""
        result = await self._call(
            "getAccountInfo",
            [address, {"encoding": encoding, "commitment": self._commitment}],
        )
        if not result:
            return None
        return result.get("value")

    async def get_mint_state(self, mint: str) -> MintState | None:
        """Decode an SPL / Token-2022 mint. Returns None if the account is not a mint."""
        value = await self.get_account_info(mint)
        if not value:
            return None

        data = value.get("data")
        if not isinstance(data, dict):
            return None
        parsed = data.get("parsed")
        if not isinstance(parsed, dict) or parsed.get("type") != "mint":
            return None

        info = parsed.get("info", {})
        return MintState(
            address=mint,
            mint_authority=info.get("mintAuthority"),
            freeze_authority=info.get("freezeAuthority"),
            supply=int(info.get("supply", 0) or 0),
            decimals=int(info.get("decimals", 0) or 0),
            program=data.get("program", "spl-token"),
        )

    async def get_token_largest_accounts(self, mint: str) -> list[TokenAccountBalance]:
        """Largest token accounts for a mint (the node caps this at 20).

        Raises TooManyHoldersError when the node refuses the scan.
        """
        try:
            result = await self._call(
                "getTokenLargestAccounts", [mint, {"commitment": self._commitment}]
            )
        except (RateLimitedError, RpcTimeoutError):
            raise
        except RpcError as e:
            if "too many accounts" in str(e).lower():
                raise TooManyHoldersError(mint, str(e)) from e
            raise

        if not result:
            return []
        return [
            TokenAccountBalance(
                address=acc.get("address", ""),
                amount=int(acc.get("amount", 0) or 0),
                decimals=int(acc.get("decimals", 0) or 0),
            )
            for acc in result.get("value", [])
        ]

    async def get_signatures_for_address(
        self, address: str, *, limit: int = 50, before: str = ""
    ) -> list[SignatureInfo]:
        """Signatures touching `address`, newest first."""
        params: dict[str, Any] = {
            "limit": min(limit, MAX_SIGNATURES_PER_PAGE),
            "commitment": self._commitment,
        }
        if before:
            params["before"] = before

        result = await self._call("getSignaturesForAddress", [address, params])
        return [
            SignatureInfo(
                signature=sig.get("signature", ""),
                slot=sig.get("slot", 0) or 0,
                block_time=sig.get("blockTime") or 0,
                err=sig.get("err"),
            )
            for sig in result or []
        ]

    async def get_parsed_transaction(self, signature: str) -> ParsedTransaction | None:
        result = await self._call(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "jsonParsed",
                    "maxSupportedTransactionVersion": 0,
                    "commitment": self._commitment,
                },
            ],
        )
        if not result:
            return None
        try:
            return _parse_transaction(signature, result)
        except (ValueError, TypeError, AttributeError) as e:
            raise RpcError(f"getTransaction {signature[:16]}: malformed transaction: {e}") from e

    async def get_token_supply(self, mint: str) -> TokenSupply | None:
        result = await self._call(
            "getTokenSupply", [mint, {"commitment": self._commitment}]
        )
        if not result or not result.get("value"):
            return None
        value = result["value"]
        return TokenSupply(
            amount=int(value.get("amount", 0) or 0),
            decimals=int(value.get("decimals", 0) or 0),
        )

    async def get_asset(self, asset_id: str) -> dict[str, Any] | None:
        """Fetch asset metadata via the Helius DAS `getAsset` method.

        Returns None when DAS is unavailable on the endpoint or the asset is unknown.
        """
        try:
            return await self._call("getAsset", {"id": asset_id}, url=self._das_url)
        except (RateLimitedError, RpcTimeoutError):
            raise
        except RpcError as e:
            logger.debug(f"[RPC] getAsset unavailable for {asset_id[:12]}: {e}")
            return None


def _parse_transaction(signature: str, data: dict) -> ParsedTransaction:
    """Parse a jsonParsed getTransaction result."""
    meta = data.get("meta") or {}
    message = (data.get("transaction") or {}).get("message") or {}

    account_keys: list[AccountKey] = []
    for key in message.get("accountKeys", []):
        if isinstance(key, str):
            account_keys.append(AccountKey(pubkey=key))
        else:
            account_keys.append(
                AccountKey(
                    pubkey=key.get("pubkey", ""),
                    signer=bool(key.get("signer", False)),
                    writable=bool(key.get("writable", False)),
                )
            )

    instructions: list[ParsedInstruction] = []
    for ix in message.get("instructions", []):
        parsed = ix.get("parsed")
        instructions.append(
            ParsedInstruction(
                program_id=ix.get("programId", ""),
                program=ix.get("program", ""),
                parsed_type=parsed.get("type", "") if isinstance(parsed, dict) else "",
                info=parsed.get("info", {}) if isinstance(parsed, dict) else {},
                accounts=ix.get("accounts", []),
            )
        )

    return ParsedTransaction(
        signature=signature,
        slot=data.get("slot", 0) or 0,
        block_time=data.get("blockTime") or 0,
        account_keys=account_keys,
        pre_balances=meta.get("preBalances", []),
        post_balances=meta.get("postBalances", []),
        instructions=instructions,
        err=meta.get("err"),
    )
