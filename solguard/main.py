"""Command-line entry point: audit one token and print the report as JSON.

    python -m solguard.main <token> [--top-holders N] [--no-clusters] [--no-developer] [--json-logs]

Exit codes: 0 success, 1 audit failed, 2 invalid token address.
"""

import argparse
import asyncio
import sys

from loguru import logger

from config.settings import settings
from solguard.auditor import TokenAuditor
from solguard.parsers.rpc.exceptions import InvalidAddressError, SolguardError
from solguard.utils.logger import setup_logger

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="solguard", description="Rug-pull risk audit for a Solana SPL token"
    )
    parser.add_argument("token", help="Token mint address (base58)")
    parser.add_argument(
        "--top-holders",
        type=int,
        default=None,
        help=f"Top holders to trace (default: {settings.cluster_top_holders})",
    )
    parser.add_argument(
        "--no-clusters", action="store_true", help="Skip holder funding-cluster analysis"
    )
    parser.add_argument(
        "--no-developer", action="store_true", help="Skip deployer history analysis"
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit logs as JSON lines on stderr"
    )
    return parser


async def run(args: argparse.Namespace) -> int:
    auditor = TokenAuditor(settings)
    try:
        result = await auditor.audit(
            args.token,
            top_holders=args.top_holders,
            include_developer=False if args.no_developer else None,
            include_clusters=False if args.no_clusters else None,
        )
    except InvalidAddressError as e:
        logger.error(f"[AUDIT] {e}")
        return EXIT_INVALID_INPUT
    except SolguardError as e:
        logger.error(f"[AUDIT] Audit failed: {e}")
        return EXIT_FAILED
    except Exception:
        logger.exception("[AUDIT] Audit crashed")
        return EXIT_FAILED
    finally:
        await auditor.close()

    print(result.model_dump_json(indent=2))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(
        json_logs=args.json_logs or settings.json_logs,
        level=settings.log_level,
        log_file=settings.log_file or None,
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
