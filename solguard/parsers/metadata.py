"""Token metadata — on-chain Metaplex account decode plus Helius DAS enrichment.

The on-chain Metadata account (PDA of ["metadata", program, mint]) gives
name, symbol, URI and the isMutable flag with a single getAccountInfo call.
DAS `getAsset` adds image/description when the endpoint supports it.

Reads are memoised in a MetadataCache that lives for one audit only.
"""

import asyncio
import base64
import struct
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from solguard.models.token import MetadataInfo, TokenInfo
from solguard.parsers.rate_limiter import FetchExecutor
from solguard.parsers.rpc.client import SolanaRpcClient
from solguard.parsers.rpc.exceptions import RpcError
from solguard.parsers.rpc.models import MintState

METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")

# key(1) + update_authority(32) + mint(32)
_HEADER_SIZE = 65
_CREATOR_SIZE = 34  # pubkey(32) + verified(1) + share(1)


@dataclass(frozen=True)
class OnchainMetadata:
    update_authority: str
    mint: str
    name: str
    symbol: str
    uri: str
    is_mutable: bool


class MetadataCache:
    """Per-audit memo: each key is loaded at most once, concurrent readers share the load."""

    def __init__(self) -> None:
        self._entries: dict[str, asyncio.Task] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        async with self._lock:
            task = self._entries.get(key)
            if task is None:
                task = asyncio.ensure_future(loader())
                self._entries[key] = task
        return await asyncio.shield(task)


def find_metadata_pda(mint: str) -> str:
    pda, _bump = Pubkey.find_program_address(
        [b"metadata", bytes(METADATA_PROGRAM_ID), bytes(Pubkey.from_string(mint))],
        METADATA_PROGRAM_ID,
    )
    return str(pda)


def decode_metadata_account(data: bytes) -> OnchainMetadata | None:
    """Decode a Metaplex Metadata v1 account. Returns None on short/garbled data."""
    if len(data) < _HEADER_SIZE + 12:
        return None
    try:
        update_authority = str(Pubkey.from_bytes(data[1:33]))
        mint = str(Pubkey.from_bytes(data[33:65]))
        offset = _HEADER_SIZE

        fields: list[str] = []
        for _ in range(3):  # name, symbol, uri
            (length,) = struct.unpack_from("<I", data, offset)
            offset += 4
            if offset + length > len(data):
                return None
            raw = data[offset:offset + length]
            fields.append(raw.decode("utf-8", errors="ignore").replace("\x00", "").strip())
            offset += length

        offset += 2  # seller_fee_basis_points
        has_creators = data[offset]
        offset += 1
        if has_creators:
            (count,) = struct.unpack_from("<I", data, offset)
            offset += 4 + count * _CREATOR_SIZE
        offset += 1  # primary_sale_happened
        is_mutable = bool(data[offset])
    except (struct.error, IndexError, ValueError):
        return None

    return OnchainMetadata(
        update_authority=update_authority,
        mint=mint,
        name=fields[0],
        symbol=fields[1],
        uri=fields[2],
        is_mutable=is_mutable,
    )


class MetadataResolver:
    """Resolves token display metadata through the per-audit cache."""

    def __init__(
        self,
        rpc: SolanaRpcClient,
        executor: FetchExecutor,
        cache: MetadataCache | None = None,
    ) -> None:
        self._rpc = rpc
        self._executor = executor
        self._cache = cache if cache is not None else MetadataCache()

    @property
    def cache(self) -> MetadataCache:
        return self._cache

    async def get_onchain(self, mint: str) -> OnchainMetadata | None:
        return await self._cache.get_or_load(mint, lambda: self._load_onchain(mint))

    async def _load_onchain(self, mint: str) -> OnchainMetadata | None:
        try:
            value = await self._executor.call(
                self._rpc.get_account_info, find_metadata_pda(mint), encoding="base64"
            )
        except RpcError as e:
            logger.debug(f"[METADATA] Fetch failed for {mint[:12]}: {e}")
            return None
        except ValueError:
            return None

        if not value:
            return None
        data = value.get("data")
        if not isinstance(data, list) or not data:
            return None
        try:
            raw = base64.b64decode(data[0])
        except (ValueError, TypeError):
            return None
        return decode_metadata_account(raw)

    async def get_names(self, mint: str) -> tuple[str | None, str | None]:
        """(name, symbol) or (None, None) when no metadata account exists."""
        meta = await self.get_onchain(mint)
        if meta is None:
            return None, None
        return meta.name or None, meta.symbol or None

    async def check_metadata(self, mint: str) -> MetadataInfo:
        meta = await self.get_onchain(mint)
        if meta is None:
            return MetadataInfo(is_mutable=False, found=False)
        return MetadataInfo(
            is_mutable=meta.is_mutable,
            update_authority=meta.update_authority,
            uri=meta.uri or None,
            found=True,
        )

    async def get_token_info(self, mint_state: MintState) -> TokenInfo:
        """Name/symbol from chain, image/description from DAS when available."""
        meta = await self.get_onchain(mint_state.address)
        info = TokenInfo(
            mint_address=mint_state.address,
            decimals=mint_state.decimals,
            supply=f"{mint_state.ui_supply:.{mint_state.decimals}f}",
        )
        if meta is not None:
            info.name = meta.name or info.name
            info.symbol = meta.symbol or info.symbol

        try:
            asset = await self._executor.call(self._rpc.get_asset, mint_state.address)
        except RpcError as e:
            logger.debug(f"[METADATA] DAS lookup failed for {mint_state.address[:12]}: {e}")
            asset = None

        if asset:
            content = asset.get("content") or {}
            das_meta = content.get("metadata") or {}
            links = content.get("links") or {}
            files = content.get("files") or []
            if info.name == "Unknown" and das_meta.get("name"):
                info.name = das_meta["name"]
            if info.symbol == "Unknown" and das_meta.get("symbol"):
                info.symbol = das_meta["symbol"]
            info.image = links.get("image") or (files[0].get("uri") if files else None)
            info.description = das_meta.get("description")

        return info
