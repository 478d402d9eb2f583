import click

from scripts.deploy import CLICK_OPTIONS
from scripts.utils import log
from scripts.utils.artifacts import load_artifacts
from scripts.utils.chain_client import BoaChainClient, chain_env
from scripts.utils.deploy_args import DeployArgs
from scripts.utils.deploy_helpers import get_account, load_registry, rpc_url, snapshot_filename, to_units, token_handle
from scripts.utils.errors import DeploymentError
from scripts.utils.plan import DEPOSIT_APPROVER, VAULT

WBTC_DECIMALS = 8


def deposit(client, blueprint, registry, sender, amount):
    """
    Approves `amount` WBTC to the DepositApprover and deposits it into the
    vault. Returns (shares before, shares after) of `sender`.
    """
    wbtc = token_handle(client, blueprint, registry, "WBTC")
    approver = registry.handle_of(DEPOSIT_APPROVER)
    vault = registry.handle_of(VAULT)

    shares_before = client.read(vault, "balanceOf", [sender])

    log.h2(f"Approving {amount} WBTC to {DEPOSIT_APPROVER}")
    client.wait_for_finality(client.call(wbtc, "approve", [approver.address, amount], sender=sender))

    log.h2(f"Depositing {amount} WBTC")
    client.wait_for_finality(client.call(approver, "deposit", [amount], sender=sender))

    shares_after = client.read(vault, "balanceOf", [sender])
    log.h3(f"Shares: {shares_before} -> {shares_after}")
    log.h3(f"Vault total assets: {client.read(vault, 'totalAssets')}")
    return shares_before, shares_after


@click.command()
@click.option("--chain", "-f", **CLICK_OPTIONS["chain"])
@click.option("--rpc", **CLICK_OPTIONS["rpc"])
@click.option("--fork", is_flag=True, default=False, help="Run against a fork of `--rpc`.")
@click.option("--account", "-a", **CLICK_OPTIONS["account"])
@click.option("--output-dir", **CLICK_OPTIONS["output_dir"])
@click.option("--amount", default="0.01", help="WBTC amount to deposit. Defaults to 0.01.")
def cli(chain, rpc, fork, account, output_dir, amount):
    """
    Deposits WBTC into the vault through the DepositApprover.
    """
    sender = get_account(account)
    final_rpc = rpc_url(chain, rpc)
    deploy_args = DeployArgs(sender, chain, final_rpc)
    filename = snapshot_filename(chain, output_dir)

    log.h1("Vault deposit")

    try:
        with chain_env(final_rpc, sender, fork):
            client = BoaChainClient(load_artifacts(), sender)
            registry = load_registry(client, deploy_args.blueprint, filename)
            deposit(client, deploy_args.blueprint, registry, sender.address, to_units(amount, WBTC_DECIMALS))
    except (DeploymentError, FileNotFoundError) as exception:
        log.error(str(exception))
        raise click.ClickException(str(exception)) from exception

    log.info("Done.")


if __name__ == "__main__":
    cli()
