# Public, unfunded wallets used as sender/recipient in quote and route requests.
TEST_EVM_WALLET_ADDRESS: str = "0x29DaCdF7cCaDf4eE67c923b4C22255A4B2494eD7"
TEST_CUSTOM_EVM_WALLET_ADDRESS: str = "0x552008c0f6870c2f77e5cC1d2eb9bdff03e30Ea0"

# Single-token lookups on non-EVM chains: (chain key, token, expected symbol, decimals, name)
CORE_CHAIN_TOKENS = (
    ("SOL", "Sol", "SOL", 9, "SOL"),
    ("BTC", "BTC", "BTC", 8, "Bitcoin"),
    ("SUI", "SUI", "SUI", 9, "SUI"),
)
