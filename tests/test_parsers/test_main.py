"""Tests for the command-line entry point."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from solguard.main import EXIT_FAILED, EXIT_INVALID_INPUT, EXIT_OK, build_parser, run
from solguard.parsers.rpc.exceptions import InvalidAddressError, MintNotFoundError


class TestParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args(["Mint111"])

        assert args.token == "Mint111"
        assert args.top_holders is None
        assert args.no_clusters is False
        assert args.no_developer is False
        assert args.json_logs is False

    def test_flags(self) -> None:
        args = build_parser().parse_args(
            ["Mint111", "--top-holders", "10", "--no-clusters", "--no-developer", "--json-logs"]
        )

        assert args.top_holders == 10
        assert args.no_clusters is True
        assert args.no_developer is True
        assert args.json_logs is True


def _patched_auditor(audit: AsyncMock) -> MagicMock:
    auditor = MagicMock()
    auditor.audit = audit
    auditor.close = AsyncMock()
    return auditor


class TestRun:
    @pytest.mark.asyncio
    async def test_invalid_address_exit_code(self) -> None:
        auditor = _patched_auditor(AsyncMock(side_effect=InvalidAddressError("bad")))

        with patch("solguard.main.TokenAuditor", return_value=auditor):
            code = await run(build_parser().parse_args(["bad"]))

        assert code == EXIT_INVALID_INPUT
        auditor.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_audit_failure_exit_code(self) -> None:
        auditor = _patched_auditor(AsyncMock(side_effect=MintNotFoundError("not a mint")))

        with patch("solguard.main.TokenAuditor", return_value=auditor):
            code = await run(build_parser().parse_args(["Mint111"]))

        assert code == EXIT_FAILED
        auditor.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_success_prints_report(self, capsys: pytest.CaptureFixture[str]) -> None:
        result = MagicMock()
        result.model_dump_json.return_value = json.dumps({"success": True})
        auditor = _patched_auditor(AsyncMock(return_value=result))

        with patch("solguard.main.TokenAuditor", return_value=auditor):
            code = await run(build_parser().parse_args(["Mint111", "--no-clusters"]))

        assert code == EXIT_OK
        assert json.loads(capsys.readouterr().out) == {"success": True}
        auditor.audit.assert_awaited_once_with(
            "Mint111", top_holders=None, include_developer=None, include_clusters=False
        )

    @pytest.mark.asyncio
    async def test_unexpected_error_exit_code(self) -> None:
        auditor = _patched_auditor(AsyncMock(side_effect=RuntimeError("boom")))

        with patch("solguard.main.TokenAuditor", return_value=auditor):
            code = await run(build_parser().parse_args(["Mint111"]))

        assert code == EXIT_FAILED
        auditor.close.assert_awaited_once()
