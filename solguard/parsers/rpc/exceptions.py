class SolguardError(Exception):
    pass


class InvalidAddressError(SolguardError):
    pass


class MintNotFoundError(SolguardError):
    pass


class DeployerUnresolvedError(SolguardError):
    pass


class TooManyHoldersError(SolguardError):
    """Largest-accounts lookup refused because the token has too many holders."""

    GUIDANCE = (
        "This token has too many holders for cluster analysis. "
        "Cluster analysis works best with smaller tokens (pump.fun launches, small caps). "
        "Tokens with millions of holder accounts (USDC, USDT, wrapped SOL) cannot be analyzed efficiently."
    )

    def __init__(self, mint: str, detail: str = "") -> None:
        self.mint = mint
        self.detail = detail
        super().__init__(f"{self.GUIDANCE} ({mint}: {detail})" if detail else self.GUIDANCE)


class RpcError(SolguardError):
    def __init__(self, message: str, code: int | None = None) -> None:
        self.code = code
        super().__init__(message)


class RateLimitedError(RpcError):
    pass


class RpcTimeoutError(RpcError):
    pass
