import os
import time

import click

from scripts.deploy import CLICK_OPTIONS
from scripts.utils import log
from scripts.utils.artifacts import get_artifact, load_artifacts
from scripts.utils.deploy_args import DeployArgs
from scripts.utils.deploy_helpers import get_account, rpc_url, snapshot_filename
from scripts.utils.descriptors import implementation_name, resolve_args
from scripts.utils.errors import DeploymentError
from scripts.utils.plan import SUB_STRATEGY, deployment_descriptors
from scripts.utils.registry import Registry, load_snapshot
from scripts.utils.verify_etherscan import source_for, verify_contract


def verification_targets(artifacts, blueprint, registry, treasury):
    """
    (label, artifact, address, constructor args) of every snapshot entry the
    deployment plan describes, followed by the extra WBTCBorrowETH
    implementations. Constructor arguments are rebuilt from the plan with
    the snapshot addresses; a proxy is matched with its current
    `<name>Implementation`, so proxies are best verified before an upgrade.
    """
    targets = []

    def lookup(name):
        return registry.address_of(name, "verify")

    for descriptor in deployment_descriptors(blueprint, treasury):
        if descriptor.name not in registry:
            continue
        artifact = get_artifact(artifacts, descriptor.contract)
        args = resolve_args(descriptor.args, lookup)

        if descriptor.upgradeable:
            implementation = lookup(implementation_name(descriptor.name))
            proxy = get_artifact(artifacts, descriptor.proxy)
            init_data = artifact.encode_call(descriptor.initializer, args)
            targets.append((implementation_name(descriptor.name), artifact, implementation, b""))
            targets.append((descriptor.name, proxy, lookup(descriptor.name), proxy.encode_constructor_args([implementation, init_data])))
        else:
            targets.append((descriptor.name, artifact, lookup(descriptor.name), artifact.encode_constructor_args(args)))

    strategy = get_artifact(artifacts, blueprint.artifact(SUB_STRATEGY))
    for name in registry.names():
        if name.startswith(implementation_name(SUB_STRATEGY) + "-"):
            targets.append((name, strategy, lookup(name), b""))

    return targets


@click.command()
@click.option("--chain", "-f", default="eth-mainnet", type=click.Choice(["eth-mainnet"]), help="Chain the contracts live on. Defaults to `eth-mainnet`.")
@click.option("--account", "-a", **CLICK_OPTIONS["account"])
@click.option("--output-dir", **CLICK_OPTIONS["output_dir"])
@click.option("--label", "labels", multiple=True, help="Only verify these snapshot labels. Repeatable.")
def cli(chain, account, output_dir, labels):
    """
    Verifies the deployed contracts of the address snapshot on Etherscan.

    The account must be the deployer of the snapshot, since the treasury
    defaults to it in the constructor arguments.
    """
    filename = snapshot_filename(chain, output_dir)
    log.h1("Verify contracts")
    log.info(f"Verifying contracts from {filename}")

    api_key = os.getenv("ETHERSCAN_API_KEY")
    if not api_key:
        raise click.ClickException("ETHERSCAN_API_KEY environment variable not set")

    deploy_args = DeployArgs(get_account(account), chain, rpc_url(chain))

    try:
        registry = Registry()
        for label, address in load_snapshot(filename).items():
            registry.attach(label, address)
        targets = verification_targets(load_artifacts(), deploy_args.blueprint, registry, deploy_args.treasury)
    except (DeploymentError, FileNotFoundError) as exception:
        log.error(str(exception))
        raise click.ClickException(str(exception)) from exception

    failed = []
    for label, artifact, address, constructor_args in targets:
        if labels and label not in labels:
            continue
        log.h2(f"Verifying {label}...")
        if verify_contract(api_key, label, address, source_for(artifact), chain, constructor_args.hex()):
            log.h3(f"{label} verified")
        else:
            log.warn(f"{label} verification failed")
            failed.append(label)

        # stay under the explorer's rate limit
        time.sleep(1)

    if failed:
        raise click.ClickException(f"Verification failed for {', '.join(failed)}")
    log.info("Done.")


if __name__ == "__main__":
    cli()
