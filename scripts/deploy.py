import click

from scripts.utils import log
from scripts.utils.artifacts import load_artifacts
from scripts.utils.chain_client import BoaChainClient, chain_env
from scripts.utils.configuration import ConfigurationApplier
from scripts.utils.deploy_args import DeployArgs
from scripts.utils.deploy_helpers import get_account, rpc_url, snapshot_filename
from scripts.utils.errors import DeploymentError
from scripts.utils.orchestrator import DeploymentOrchestrator
from scripts.utils.plan import configuration_items, deployment_descriptors, wiring_steps
from scripts.utils.registry import Registry


CLICK_OPTIONS = {
    "chain": {
        "default": "local",
        "help": "Chain to deploy to (local, eth-mainnet). Defaults to `local`, an in-memory chain.",
        "type": click.Choice(["local", "eth-mainnet"], case_sensitive=False),
    },
    "rpc": {
        "default": "",
        "help": "RPC url of the chain. Defaults to the Alchemy endpoint of `--chain`, or `boa` for `local`.",
    },
    "account": {
        "default": "DEPLOYER",
        "help": "Account name; the key is read from `<ACCOUNT>_PRIVATE_KEY`. Defaults to `DEPLOYER`.",
    },
    "output_dir": {
        "default": None,
        "help": "Directory where address snapshots are stored. Defaults to `./deployments`.",
    },
}


def deploy_system(client, deploy_args, register_sub_strategy=True):
    """
    Deploys, wires and configures the vault system. Returns the registry of
    the run.
    """
    blueprint = deploy_args.blueprint
    sender = deploy_args.sender.address
    registry = Registry()

    log.h2("Deploying contracts")
    orchestrator = DeploymentOrchestrator(client, registry, sender=sender)
    orchestrator.run(
        deployment_descriptors(blueprint, deploy_args.treasury),
        wiring_steps(blueprint, register_sub_strategy),
    )

    log.h2("Applying configuration")
    ConfigurationApplier(client, sender=sender).apply_all(registry, configuration_items(blueprint))

    return registry


@click.command()
@click.option("--chain", "-f", **CLICK_OPTIONS["chain"])
@click.option("--rpc", **CLICK_OPTIONS["rpc"])
@click.option("--fork", is_flag=True, default=False, help="Run against a fork of `--rpc`.")
@click.option("--account", "-a", **CLICK_OPTIONS["account"])
@click.option("--output-dir", **CLICK_OPTIONS["output_dir"])
def cli(chain, rpc, fork, account, output_dir):
    """
    Deploys the ENF WBTC vault system.

    Contracts are deployed in dependency order (DepositApprover, EFVault,
    Controller, WBTCBorrowETH), wired to each other and configured. The
    addresses are written to `<output-dir>/<chain>/address.json`, merged
    with any addresses already stored there.

    A failed transaction stops the run. Transactions already sent are not
    undone.
    """
    sender = get_account(account)
    final_rpc = rpc_url(chain, rpc)
    deploy_args = DeployArgs(sender, chain, final_rpc)

    log.h1("ENF Vault Deployment")
    log.info(f"Connected to rpc `{final_rpc}`.")
    log.info(f"Deployer account `{sender.address}`.")
    log.info(f"Deployment arguments: {deploy_args}")
    log.info(f"Fork: {fork}.")
    if deploy_args.treasury == sender.address:
        log.warn("No treasury configured, fees go to the deployer account")

    try:
        with chain_env(final_rpc, sender, fork):
            client = BoaChainClient(load_artifacts(), sender)
            registry = deploy_system(client, deploy_args)
    except DeploymentError as exception:
        log.error(str(exception))
        raise click.ClickException(str(exception)) from exception

    log.h2("Deployed contracts")
    log.table(registry.snapshot().items())

    filename = registry.save(snapshot_filename(chain, output_dir))
    log.info(f"Addresses saved to {filename}")
    log.info("Done.")


if __name__ == "__main__":
    cli()
