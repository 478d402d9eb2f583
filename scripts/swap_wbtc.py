import time

import click

from scripts.deploy import CLICK_OPTIONS
from scripts.deposit import WBTC_DECIMALS
from scripts.utils import log
from scripts.utils.artifacts import load_artifacts
from scripts.utils.chain_client import BoaChainClient, chain_env
from scripts.utils.deploy_args import BluePrint
from scripts.utils.deploy_helpers import get_account, rpc_url, to_units
from scripts.utils.errors import DeploymentError

ROUTER_ARTIFACT = "IUniswapV2Router"
DEADLINE_SECONDS = 20 * 60


def swap_eth_for_wbtc(client, blueprint, sender, amount):
    """
    Buys WBTC with `amount` wei through the Uniswap V2 router. Returns the
    WBTC received.
    """
    router_address = blueprint.INTEGRATION_ADDYS["UNISWAP_V2_ROUTER"]
    if router_address == blueprint.CONSTANTS.ZERO_ADDRESS:
        raise click.ClickException(f"No Uniswap V2 router configured for `{blueprint.blueprint}`")

    router = client.at(ROUTER_ARTIFACT, router_address, "UniswapV2Router")
    wbtc = client.at(blueprint.artifact("ERC20"), blueprint.TOKENS["WBTC"], "WBTC")
    path = [blueprint.TOKENS["WETH"], blueprint.TOKENS["WBTC"]]

    balance_before = client.read(wbtc, "balanceOf", [sender])
    log.h3(f"WBTC balance: {balance_before}")

    deadline = int(time.time()) + DEADLINE_SECONDS
    tx = client.call(router, "swapExactETHForTokens", [0, path, sender, deadline], sender=sender, value=amount)
    client.wait_for_finality(tx)

    received = client.read(wbtc, "balanceOf", [sender]) - balance_before
    log.h3(f"Received {received} WBTC units")
    return received


@click.command()
@click.option("--chain", "-f", default="eth-mainnet", type=click.Choice(["eth-mainnet"]), help="Chain to swap on. Defaults to `eth-mainnet`.")
@click.option("--rpc", **CLICK_OPTIONS["rpc"])
@click.option("--fork/--no-fork", default=True, help="Swap on a fork of `--rpc`. Defaults to a fork.")
@click.option("--account", "-a", **CLICK_OPTIONS["account"])
@click.option("--eth", "eth_amount", default="1", help="ETH amount to swap. Defaults to 1.")
def cli(chain, rpc, fork, account, eth_amount):
    """
    Funds the account with WBTC by swapping ETH on Uniswap V2.
    """
    sender = get_account(account)
    final_rpc = rpc_url(chain, rpc)
    blueprint = BluePrint(chain)

    log.h1("Swap ETH for WBTC")
    log.info(f"Connected to rpc `{final_rpc}`.")

    try:
        with chain_env(final_rpc, sender, fork):
            client = BoaChainClient(load_artifacts(), sender)
            received = swap_eth_for_wbtc(client, blueprint, sender.address, to_units(eth_amount, 18))
    except DeploymentError as exception:
        log.error(str(exception))
        raise click.ClickException(str(exception)) from exception

    log.info(f"Swapped {eth_amount} ETH for {received / 10**WBTC_DECIMALS} WBTC.")


if __name__ == "__main__":
    cli()
