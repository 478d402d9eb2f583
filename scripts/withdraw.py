import click

from scripts.deploy import CLICK_OPTIONS
from scripts.deposit import WBTC_DECIMALS
from scripts.utils import log
from scripts.utils.artifacts import load_artifacts
from scripts.utils.chain_client import BoaChainClient, chain_env
from scripts.utils.deploy_args import DeployArgs
from scripts.utils.deploy_helpers import get_account, load_registry, rpc_url, snapshot_filename, to_units, token_handle
from scripts.utils.errors import DeploymentError
from scripts.utils.plan import VAULT


def withdraw(client, blueprint, registry, sender, amount):
    """
    Withdraws `amount` WBTC from the vault to `sender`. Returns the WBTC
    received.
    """
    wbtc = token_handle(client, blueprint, registry, "WBTC")
    vault = registry.handle_of(VAULT)

    balance_before = client.read(wbtc, "balanceOf", [sender])

    log.h2(f"Withdrawing {amount} WBTC")
    client.wait_for_finality(client.call(vault, "withdraw", [amount, sender], sender=sender))

    received = client.read(wbtc, "balanceOf", [sender]) - balance_before
    log.h3(f"Received {received} WBTC")
    log.h3(f"Shares left: {client.read(vault, 'balanceOf', [sender])}")
    return received


@click.command()
@click.option("--chain", "-f", **CLICK_OPTIONS["chain"])
@click.option("--rpc", **CLICK_OPTIONS["rpc"])
@click.option("--fork", is_flag=True, default=False, help="Run against a fork of `--rpc`.")
@click.option("--account", "-a", **CLICK_OPTIONS["account"])
@click.option("--output-dir", **CLICK_OPTIONS["output_dir"])
@click.option("--amount", default="0.01", help="WBTC amount to withdraw. Defaults to 0.01.")
def cli(chain, rpc, fork, account, output_dir, amount):
    """
    Withdraws WBTC from the vault.
    """
    sender = get_account(account)
    final_rpc = rpc_url(chain, rpc)
    deploy_args = DeployArgs(sender, chain, final_rpc)
    filename = snapshot_filename(chain, output_dir)

    log.h1("Vault withdrawal")

    try:
        with chain_env(final_rpc, sender, fork):
            client = BoaChainClient(load_artifacts(), sender)
            registry = load_registry(client, deploy_args.blueprint, filename)
            withdraw(client, deploy_args.blueprint, registry, sender.address, to_units(amount, WBTC_DECIMALS))
    except (DeploymentError, FileNotFoundError) as exception:
        log.error(str(exception))
        raise click.ClickException(str(exception)) from exception

    log.info("Done.")


if __name__ == "__main__":
    cli()
