import os
from decimal import Decimal

import dotenv
from eth_account import Account

from scripts.utils import log
from scripts.utils.descriptors import implementation_name
from scripts.utils.errors import MissingCodeError
from scripts.utils.registry import Registry, load_snapshot

dotenv.load_dotenv()

DEPLOYMENTS_DIR = "./deployments"

TEST_PRIVATE_KEY = '0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80'


def get_account(accountName):
    log.h1(f'Connecting to deployer account {accountName}')

    accountKey = os.environ.get(f'{accountName}_PRIVATE_KEY')
    account = Account.from_key(
        accountKey if accountKey else TEST_PRIVATE_KEY)
    log.h2(f'Deployer account {accountName} connected')

    return account


def rpc_url(chain, rpc=""):
    if rpc:
        return rpc
    if chain == "local":
        return "boa"
    return f"https://{chain}.g.alchemy.com/v2/{os.environ.get('WEB3_ALCHEMY_API_KEY')}"


def snapshot_filename(chain, directory=None):
    return os.path.join(directory or DEPLOYMENTS_DIR, chain, "address.json")


def to_units(amount, decimals):
    # "0.01" with 8 decimals -> 1000000
    return int(Decimal(str(amount)) * 10**decimals)


def artifact_of(blueprint, label):
    """
    Logical artifact behind a snapshot label. `WBTCBorrowETH`,
    `WBTCBorrowETHImplementation` and `WBTCBorrowETHImplementation-2` all
    share the WBTCBorrowETH ABI.
    """
    base = label.split("-")[0]
    if base in blueprint.TOKENS:
        return blueprint.artifact("ERC20")
    for name in blueprint.ARTIFACTS:
        if base == implementation_name(name):
            return blueprint.artifact(name)
    return blueprint.artifact(base)


def token_handle(client, blueprint, registry, symbol):
    # mock tokens live in the registry, canonical ones in the blueprint
    address = blueprint.TOKENS[symbol]
    if address is None:
        return registry.handle_of(symbol)
    return client.at(blueprint.artifact("ERC20"), address, symbol)


def load_registry(client, blueprint, filename):
    """
    Rebuilds a registry from a saved address snapshot so that later scripts
    can resolve contracts by label. Every address must hold code on the
    connected chain.
    """
    registry = Registry()
    for label, address in load_snapshot(filename).items():
        if not client.has_code(address):
            raise MissingCodeError(label, address)
        registry.attach(label, address, client.at(artifact_of(blueprint, label), address, label))
    return registry
