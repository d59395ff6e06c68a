"""Pydantic models for Solana JSON-RPC responses (jsonParsed encoding)."""

from pydantic import BaseModel


class SignatureInfo(BaseModel):
    """Transaction signature metadata."""

    signature: str
    slot: int = 0
    block_time: int = 0  # unix, 0 when the node did not report it
    err: dict | str | None = None  # non-None means failed


class MintState(BaseModel):
    """Decoded SPL mint account."""

    address: str
    mint_authority: str | None = None
    freeze_authority: str | None = None
    supply: int = 0  # raw units
    decimals: int = 0
    program: str = "spl-token"  # "spl-token" or "spl-token-2022"

    @property
    def ui_supply(self) -> float:
        return self.supply / (10 ** self.decimals) if self.decimals else float(self.supply)


class TokenAccountBalance(BaseModel):
    """Entry of getTokenLargestAccounts."""

    address: str
    amount: int = 0  # raw units
    decimals: int = 0


class TokenSupply(BaseModel):
    amount: int = 0
    decimals: int = 0


class AccountKey(BaseModel):
    pubkey: str
    signer: bool = False
    writable: bool = False


class ParsedInstruction(BaseModel):
    """Top-level instruction. `parsed_type`/`info` are set only for programs the node can parse."""

    program_id: str
    program: str = ""  # "system", "spl-token", ... ("" for raw instructions)
    parsed_type: str = ""
    info: dict = {}
    accounts: list[str] = []


class ParsedTransaction(BaseModel):
    """getTransaction result reduced to the fields the engine reads."""

    signature: str
    slot: int = 0
    block_time: int = 0
    account_keys: list[AccountKey] = []
    pre_balances: list[int] = []  # lamports, aligned with account_keys
    post_balances: list[int] = []
    instructions: list[ParsedInstruction] = []
    err: dict | str | None = None

    @property
    def fee_payer(self) -> str | None:
        return self.account_keys[0].pubkey if self.account_keys else None

    @property
    def signers(self) -> list[str]:
        return [k.pubkey for k in self.account_keys if k.signer]

    def balance_delta(self, index: int) -> int:
        """Lamport change of account at `index` (0 if balances are missing)."""
        if index >= len(self.pre_balances) or index >= len(self.post_balances):
            return 0
        return self.post_balances[index] - self.pre_balances[index]
