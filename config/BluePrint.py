ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# ratios (basis points)
HUNDRED_PERCENT = 100_00


PARAMS = {
    "eth-mainnet": {
        # vault share token
        "VAULT_NAME": "ENF WBTC BORROW ETH LP",
        "VAULT_SYMBOL": "ENF_WBTC_BORROW_ETH",
        # wbtc borrow eth sub strategy
        "SS_MAX_LEVERAGE_RATIO": 67_50,
        "SS_RAISED_LEVERAGE_RATIO": 69_00,
        "SS_HARVEST_FEE": 10_00,
        "SS_DEPOSIT_SLIPPAGE": 1_00,
        "SS_WITHDRAW_SLIPPAGE": 1_00,
        "SS_SWAP_FEE_TIER": 500,
        # controller
        "SS_ALLOC_POINT": 100,
    },
    "local": {
        # vault share token
        "VAULT_NAME": "ENF WBTC BORROW ETH LP",
        "VAULT_SYMBOL": "ENF_WBTC_BORROW_ETH",
        # wbtc borrow eth sub strategy
        "SS_MAX_LEVERAGE_RATIO": 67_50,
        "SS_RAISED_LEVERAGE_RATIO": 69_00,
        "SS_HARVEST_FEE": 10_00,
        "SS_DEPOSIT_SLIPPAGE": 1_00,
        "SS_WITHDRAW_SLIPPAGE": 1_00,
        "SS_SWAP_FEE_TIER": 500,
        # controller
        "SS_ALLOC_POINT": 100,
    },
}


# `None` means the token has no canonical address on the chain and is
# deployed as a mock (see MOCK_TOKENS) at the start of the run
TOKENS = {
    "eth-mainnet": {
        "WBTC": "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599",
        "WETH": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
        "AWBTC": "0x5Ee5bf7ae06D1Be5997A1A72006FE6C607eC6DE8",
    },
    "local": {
        "WBTC": None,
        "WETH": None,
        "AWBTC": None,
    },
}


# name, symbol, decimals
MOCK_TOKENS = {
    "WBTC": ("Wrapped BTC", "WBTC", 8),
    "WETH": ("Wrapped Ether", "WETH", 18),
    "AWBTC": ("Aave Ethereum WBTC", "aEthWBTC", 8),
}


INTEGRATION_ADDYS = {
    "eth-mainnet": {
        "AAVE_POOL": "0x87870Bca3F3fD6335C3F4ce8392D69350B4fA4E2",
        "AAVE_ORACLE": "0x54586bE62E3c3580375aE3723C145253060Ca0C2",
        "UNISWAP_V3_ROUTER": "0xE592427A0AEce92De3Edee1F18E0157C05861564",
        "UNISWAP_V2_ROUTER": "0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D",
        # overridden by ETH_LEVERAGE_ADDRESS / TREASURY_ADDRESS in the environment
        "ETH_LEVERAGE": ZERO_ADDRESS,
        "TREASURY": ZERO_ADDRESS,
    },
    "local": {
        "AAVE_POOL": ZERO_ADDRESS,
        "AAVE_ORACLE": ZERO_ADDRESS,
        "UNISWAP_V3_ROUTER": ZERO_ADDRESS,
        "UNISWAP_V2_ROUTER": ZERO_ADDRESS,
        "ETH_LEVERAGE": ZERO_ADDRESS,
        "TREASURY": ZERO_ADDRESS,
    },
}


# logical artifact -> artifact file key
ARTIFACTS = {
    "eth-mainnet": {
        "ERC20": "IERC20",
        "DepositApprover": "DepositApprover",
        "EFVault": "EFVault",
        "Controller": "Controller",
        "WBTCBorrowETH": "WBTCBorrowETH",
        "Proxy": "ERC1967Proxy",
    },
    "local": {
        "ERC20": "MockErc20",
        "DepositApprover": "MockDepositApprover",
        "EFVault": "MockVault",
        "Controller": "MockController",
        "WBTCBorrowETH": "MockBorrowStrategy",
        "Proxy": "MockProxy",
    },
}
