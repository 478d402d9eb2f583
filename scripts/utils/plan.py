"""
Deployment plan for the ENF WBTC vault whose sub strategy borrows ETH
against WBTC collateral on Aave.

    DepositApprover(wbtc)
    EFVault*(wbtc, name, symbol)
    Controller*(vault, wbtc, treasury, weth)
    WBTCBorrowETH*(wbtc, awbtc, weth, mlr, aave, vault, controller,
                   aaveOracle, ethLeverage, treasury, harvestFee)

    * upgradeable: an implementation (`<name>Implementation`) behind a proxy
      that calls `initialize` with these arguments on creation

Tokens with no address on the selected chain are deployed first as mocks.
"""

from scripts.utils.descriptors import ConfigItem, ContractDescriptor, WiringStep, ref

DEPOSIT_APPROVER = "DepositApprover"
VAULT = "EFVault"
CONTROLLER = "Controller"
SUB_STRATEGY = "WBTCBorrowETH"


def token(blueprint, symbol):
    address = blueprint.TOKENS[symbol]
    return ref(symbol) if address is None else address


def mock_token_descriptors(blueprint):
    descriptors = []
    for symbol in blueprint.mock_tokens():
        name, token_symbol, decimals = blueprint.MOCK_TOKENS[symbol]
        descriptors.append(
            ContractDescriptor(symbol, blueprint.artifact("ERC20"), (name, token_symbol, decimals, 0))
        )
    return descriptors


def sub_strategy_descriptor(blueprint, treasury):
    params = blueprint.PARAMS
    addys = blueprint.INTEGRATION_ADDYS
    return ContractDescriptor(
        SUB_STRATEGY,
        blueprint.artifact(SUB_STRATEGY),
        (
            token(blueprint, "WBTC"),
            token(blueprint, "AWBTC"),
            token(blueprint, "WETH"),
            params["SS_MAX_LEVERAGE_RATIO"],
            addys["AAVE_POOL"],
            ref(VAULT),
            ref(CONTROLLER),
            addys["AAVE_ORACLE"],
            addys["ETH_LEVERAGE"],
            treasury,
            params["SS_HARVEST_FEE"],
        ),
        upgradeable=True,
        proxy=blueprint.artifact("Proxy"),
    )


def deployment_descriptors(blueprint, treasury):
    params = blueprint.PARAMS
    wbtc = token(blueprint, "WBTC")

    return mock_token_descriptors(blueprint) + [
        ContractDescriptor(DEPOSIT_APPROVER, blueprint.artifact("DepositApprover"), (wbtc,)),
        ContractDescriptor(
            VAULT,
            blueprint.artifact("EFVault"),
            (wbtc, params["VAULT_NAME"], params["VAULT_SYMBOL"]),
            upgradeable=True,
            proxy=blueprint.artifact("Proxy"),
        ),
        ContractDescriptor(
            CONTROLLER,
            blueprint.artifact("Controller"),
            (ref(VAULT), wbtc, treasury, token(blueprint, "WETH")),
            upgradeable=True,
            proxy=blueprint.artifact("Proxy"),
        ),
        sub_strategy_descriptor(blueprint, treasury),
    ]


def wiring_steps(blueprint, register_sub_strategy=True):
    steps = [
        WiringStep(DEPOSIT_APPROVER, "setVault", VAULT),
        WiringStep(VAULT, "setDepositApprover", DEPOSIT_APPROVER),
        # the vault must know its controller before strategies are attached
        WiringStep(VAULT, "setController", CONTROLLER),
        WiringStep(VAULT, "setSubStrategy", SUB_STRATEGY),
    ]
    if register_sub_strategy:
        steps.append(
            WiringStep(CONTROLLER, "registerSubStrategy", SUB_STRATEGY, (blueprint.PARAMS["SS_ALLOC_POINT"],))
        )
    return steps


def configuration_items(blueprint):
    params = blueprint.PARAMS
    return [
        ConfigItem(SUB_STRATEGY, "setDepositSlippage", (params["SS_DEPOSIT_SLIPPAGE"],)),
        ConfigItem(SUB_STRATEGY, "setWithdrawSlippage", (params["SS_WITHDRAW_SLIPPAGE"],)),
        ConfigItem(
            SUB_STRATEGY,
            "setSwapInfo",
            (blueprint.INTEGRATION_ADDYS["UNISWAP_V3_ROUTER"], params["SS_SWAP_FEE_TIER"]),
            requires=(CONTROLLER,),
        ),
    ]
