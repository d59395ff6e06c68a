"""Program ids and well-known accounts referenced by the analyzers."""

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"
TOKEN_PROGRAM_IDS = frozenset({TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID})

MINT_INIT_INSTRUCTIONS = frozenset({"initializeMint", "initializeMint2"})

# Pump.fun: shared-launch platform, several program versions exist
PUMPFUN_PROGRAM_IDS = frozenset({
    "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P",
    "FoaFt2Dtz58RA6DPjbRb9t9z8sLJRChiGFTv21EfaseZ",
})
# Mint authority shared by every Pump.fun bonding-curve token
PUMPFUN_MINT_AUTHORITY = "TSLvdd1pWpHVjahSpsvCXUbgwsL3JAcvokwaKt1eokM"

WSOL_MINT = "So11111111111111111111111111111111111111112"
LAMPORTS_PER_SOL = 1_000_000_000
