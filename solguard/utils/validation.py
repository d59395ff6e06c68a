"""Input validation for ledger addresses."""

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from solguard.parsers.rpc.exceptions import InvalidAddressError


def is_valid_solana_address(address: str) -> bool:
    try:
        Pubkey.from_string(address)
    except (ValueError, TypeError):
        return False
    return True


def validate_token_address(address: str | None) -> str:
    """Return the stripped address or raise InvalidAddressError.

    Runs before any gateway call so bad input never costs an RPC request.
    """
    if address is None or not address.strip():
        raise InvalidAddressError("Token address is required")

    address = address.strip()
    if not is_valid_solana_address(address):
        raise InvalidAddressError(f"Invalid Solana address format: {address[:64]}")
    return address
