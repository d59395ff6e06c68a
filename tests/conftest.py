"""Shared test fixtures."""

from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest

from solguard.parsers.rate_limiter import FetchExecutor
from solguard.parsers.rpc.models import AccountKey, ParsedInstruction, ParsedTransaction, SignatureInfo


@pytest.fixture
def executor() -> FetchExecutor:
    """Executor with pacing and backoff effectively disabled."""
    return FetchExecutor(max_concurrency=5, max_rps=10_000.0, backoff_base=0.0)


@pytest.fixture
def rpc() -> AsyncMock:
    """Gateway double: every SolanaRpcClient method is an AsyncMock."""
    return AsyncMock()


@pytest.fixture
def make_sigs() -> Callable[..., list[SignatureInfo]]:
    def _make(count: int, prefix: str = "sig", newest_time: int = 1_700_000_000) -> list[SignatureInfo]:
        # newest first, one minute apart
        return [
            SignatureInfo(signature=f"{prefix}{i}", slot=10_000 - i, block_time=newest_time - i * 60)
            for i in range(count)
        ]

    return _make


@pytest.fixture
def make_tx() -> Callable[..., ParsedTransaction]:
    def _make(
        signature: str = "tx1",
        keys: list[tuple[str, bool, bool]] | None = None,  # (pubkey, signer, writable)
        pre: list[int] | None = None,
        post: list[int] | None = None,
        instructions: list[ParsedInstruction] | None = None,
        block_time: int = 1_700_000_000,
        err: dict | None = None,
    ) -> ParsedTransaction:
        return ParsedTransaction(
            signature=signature,
            block_time=block_time,
            account_keys=[
                AccountKey(pubkey=p, signer=s, writable=w) for p, s, w in (keys or [])
            ],
            pre_balances=pre or [],
            post_balances=post or [],
            instructions=instructions or [],
            err=err,
        )

    return _make
