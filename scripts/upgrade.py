import click

from scripts.deploy import CLICK_OPTIONS
from scripts.deploy_sub_strategy import next_label
from scripts.utils import log
from scripts.utils.artifacts import load_artifacts
from scripts.utils.chain_client import BoaChainClient, chain_env
from scripts.utils.deploy_args import DeployArgs
from scripts.utils.deploy_helpers import artifact_of, get_account, load_registry, rpc_url, snapshot_filename
from scripts.utils.descriptors import ContractDescriptor, implementation_name
from scripts.utils.errors import DeploymentError, MissingCodeError
from scripts.utils.orchestrator import DeploymentOrchestrator
from scripts.utils.plan import SUB_STRATEGY


def upgrade(client, blueprint, registry, sender, label=SUB_STRATEGY, implementation=None):
    """
    Points the proxy registered as `label` at another implementation.

    `implementation` is a registry label (see `deploy_sub_strategy`) or an
    address. A new implementation is deployed when it is None. The
    implementation is recorded as `<label>Implementation`; its address is
    returned.
    """
    proxy = client.at(blueprint.artifact("Proxy"), registry.address_of(label, "upgrade"), label)
    contract = artifact_of(blueprint, label)

    if implementation is None:
        implementation = next_label(registry, implementation_name(label))
        DeploymentOrchestrator(client, registry, sender=sender).run([ContractDescriptor(implementation, contract)])

    if implementation in registry or not implementation.startswith("0x"):
        address = registry.address_of(implementation, "upgrade")
    elif client.has_code(implementation):
        address = implementation
    else:
        raise MissingCodeError(implementation, implementation)

    log.h2(f"Upgrading {label} to {address}")
    client.wait_for_finality(client.call(proxy, "upgradeTo", [address], sender=sender))
    log.h3(f"{label} upgraded")

    registry.repoint(implementation_name(label), address, client.at(contract, address, implementation_name(label)))
    return address


@click.command()
@click.option("--chain", "-f", **CLICK_OPTIONS["chain"])
@click.option("--rpc", **CLICK_OPTIONS["rpc"])
@click.option("--fork", is_flag=True, default=False, help="Run against a fork of `--rpc`.")
@click.option("--account", "-a", **CLICK_OPTIONS["account"])
@click.option("--output-dir", **CLICK_OPTIONS["output_dir"])
@click.option("--target", default=SUB_STRATEGY, help="Label of the proxy to upgrade. Defaults to `WBTCBorrowETH`.")
@click.option("--implementation", default=None, help="Label or address of the new implementation. Deploys one when omitted.")
def cli(chain, rpc, fork, account, output_dir, target, implementation):
    """
    Upgrades a proxy of the vault system to a new implementation.

    The proxy is read from the address snapshot of `--chain`. The new
    implementation address is merged into it.
    """
    sender = get_account(account)
    final_rpc = rpc_url(chain, rpc)
    deploy_args = DeployArgs(sender, chain, final_rpc)
    filename = snapshot_filename(chain, output_dir)

    log.h1(f"Upgrade {target}")
    log.info(f"Connected to rpc `{final_rpc}`.")
    log.info(f"Using addresses from {filename}")

    try:
        with chain_env(final_rpc, sender, fork):
            client = BoaChainClient(load_artifacts(), sender)
            registry = load_registry(client, deploy_args.blueprint, filename)
            address = upgrade(client, deploy_args.blueprint, registry, sender.address, target, implementation)
    except (DeploymentError, FileNotFoundError) as exception:
        log.error(str(exception))
        raise click.ClickException(str(exception)) from exception

    log.table([(implementation_name(target), address)])
    registry.save(filename)
    log.info(f"Addresses saved to {filename}")


if __name__ == "__main__":
    cli()
