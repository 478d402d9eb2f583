import click

from scripts.deploy import CLICK_OPTIONS
from scripts.utils import log
from scripts.utils.artifacts import load_artifacts
from scripts.utils.chain_client import BoaChainClient, chain_env
from scripts.utils.deploy_args import DeployArgs
from scripts.utils.deploy_helpers import get_account, load_registry, rpc_url, snapshot_filename
from scripts.utils.descriptors import ContractDescriptor, implementation_name
from scripts.utils.errors import DeploymentError
from scripts.utils.orchestrator import DeploymentOrchestrator
from scripts.utils.plan import SUB_STRATEGY


def next_label(registry, base=implementation_name(SUB_STRATEGY)):
    """`<base>-2`, `<base>-3`... first label not in the registry."""
    index = 2
    while f"{base}-{index}" in registry:
        index += 1
    return f"{base}-{index}"


def deploy_sub_strategy(client, blueprint, registry, sender, label=None):
    """
    Deploys a new WBTCBorrowETH implementation. It is not initialized: it
    only becomes live once the sub strategy proxy is upgraded to it (see
    `scripts/upgrade.py`). Returns the label it was registered under.
    """
    label = label or next_label(registry)
    DeploymentOrchestrator(client, registry, sender=sender).run(
        [ContractDescriptor(label, blueprint.artifact(SUB_STRATEGY))]
    )
    return label


@click.command()
@click.option("--chain", "-f", **CLICK_OPTIONS["chain"])
@click.option("--rpc", **CLICK_OPTIONS["rpc"])
@click.option("--fork", is_flag=True, default=False, help="Run against a fork of `--rpc`.")
@click.option("--account", "-a", **CLICK_OPTIONS["account"])
@click.option("--output-dir", **CLICK_OPTIONS["output_dir"])
@click.option("--label", default=None, help="Label of the new implementation. Defaults to the next free `WBTCBorrowETHImplementation-<n>`.")
def cli(chain, rpc, fork, account, output_dir, label):
    """
    Deploys a new WBTCBorrowETH implementation for an upgrade of the sub
    strategy.

    The address is merged into the address snapshot of `--chain`, whose
    contracts must already be deployed on the connected chain.
    """
    sender = get_account(account)
    final_rpc = rpc_url(chain, rpc)
    deploy_args = DeployArgs(sender, chain, final_rpc)
    filename = snapshot_filename(chain, output_dir)

    log.h1("New WBTCBorrowETH implementation")
    log.info(f"Connected to rpc `{final_rpc}`.")
    log.info(f"Using addresses from {filename}")

    try:
        with chain_env(final_rpc, sender, fork):
            client = BoaChainClient(load_artifacts(), sender)
            registry = load_registry(client, deploy_args.blueprint, filename)
            label = deploy_sub_strategy(client, deploy_args.blueprint, registry, sender.address, label)
    except (DeploymentError, FileNotFoundError) as exception:
        log.error(str(exception))
        raise click.ClickException(str(exception)) from exception

    log.table([(label, registry.address_of(label))])
    registry.save(filename)
    log.info(f"Addresses saved to {filename}")
    log.info(f"Run `python -m scripts.upgrade --implementation {label}` to switch the sub strategy to it.")


if __name__ == "__main__":
    cli()
