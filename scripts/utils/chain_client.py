import contextlib
import json

import boa
from boa.contracts.base_evm_contract import BoaError
from boa.environment import Env
from boa.rpc import RPCError
from boa.util.abi import ABIError
from eth_abi import decode
from eth_abi.exceptions import DecodingError, EncodingError

from scripts.utils import log
from scripts.utils.artifacts import get_artifact
from scripts.utils.errors import RemoteCallError

# failures of a request, mapped to RemoteCallError
CALL_ERRORS = (BoaError, RPCError, ABIError, EncodingError, DecodingError)

ERROR_SELECTOR = bytes.fromhex("08c379a0")


def revert_reason(error):
    """
    Decoded `Error(string)` reason of a failed boa call, or the error text
    when the chain gave none. Frames of contracts called through an ABI
    (proxies among them) are plain strings and are skipped; the revert
    data of the outer call is decoded when no frame has a reason.
    """
    stack_trace = getattr(error, "stack_trace", None) or []
    for frame in reversed(stack_trace):
        reason = getattr(frame, "pretty_vm_reason", None)
        if reason is not None:
            return str(reason)

    output = getattr(getattr(error, "call_trace", None), "output", None) or b""
    if output[:4] == ERROR_SELECTOR:
        try:
            return decode(["string"], output[4:])[0]
        except DecodingError:
            pass
    return str(error)


def remote_error(contract, method, exception):
    if isinstance(exception, (BoaError, RPCError)):
        return RemoteCallError(contract, method, revert_reason(exception))
    # arguments that could not be encoded, or a result that could not be decoded
    return RemoteCallError(contract, method, message=f"{type(exception).__name__}: {exception}")


def _label(handle):
    return getattr(handle, "contract_name", None) or getattr(handle, "address", str(handle))


class BoaChainClient:
    """
    Facade over titanoboa for deployments and calls. Works the same against
    the in-memory EVM, a fork or a live network (`boa.set_network_env`).
    Calls are blocking: boa returns once the transaction is executed
    locally, or mined when running against a network.
    """

    def __init__(self, artifacts, sender=None):
        self.artifacts = artifacts
        self.sender = sender

    def _sender_address(self, sender):
        sender = sender if sender is not None else self.sender
        if sender is None:
            return None
        return str(getattr(sender, "address", sender))

    def artifact(self, contract):
        return get_artifact(self.artifacts, contract)

    def check_arguments(self, contract, function, args):
        self.artifact(contract).check_arguments(function, args)

    def encode_call(self, contract, function, args):
        return self.artifact(contract).encode_call(function, args)

    def has_code(self, address):
        return len(boa.env.get_code(address)) > 0

    def deploy(self, contract, args=(), label=None, sender=None):
        artifact = self.artifact(contract)
        artifact.check_arguments(None, args)
        sender = self._sender_address(sender)
        prank = boa.env.prank(sender) if sender else contextlib.nullcontext()

        try:
            with prank:
                if artifact.is_vyper:
                    handle = boa.load(artifact.path, *args, name=label or contract)
                else:
                    initcode = artifact.bytecode + artifact.encode_constructor_args(args)
                    address, _ = boa.env.deploy_code(bytecode=initcode)
                    factory = boa.loads_abi(json_abi(artifact.abi), name=label or contract)
                    handle = factory.at(address)
        except CALL_ERRORS as exception:
            raise remote_error(label or contract, "<deploy>", exception) from exception

        log.h3(f"Contract {label or contract} deployed at {handle.address}")
        return handle

    def call(self, handle, method, args=(), sender=None, value=0):
        sender = self._sender_address(sender)
        kwargs = {"sender": sender} if sender else {}
        if value:
            kwargs["value"] = value

        try:
            function = getattr(handle, method)
        except AttributeError:
            raise RemoteCallError(_label(handle), method, message=f"no method `{method}` in ABI") from None

        try:
            return function(*args, **kwargs)
        except CALL_ERRORS as exception:
            raise remote_error(_label(handle), method, exception) from exception

    def read(self, handle, method, args=()):
        return self.call(handle, method, args)

    def wait_for_finality(self, result):
        return result

    def at(self, contract, address, label=None):
        """
        Handle for an already deployed contract, built from the ABI of
        `contract` only. The code at `address` may be a proxy in front of it.
        """
        artifact = self.artifact(contract)
        return boa.loads_abi(json_abi(artifact.abi), name=label or contract).at(address)


def json_abi(abi):
    return json.dumps(abi)


@contextlib.contextmanager
def chain_env(rpc, sender=None, fork=False):
    """
    Selects the boa environment for a script run: `boa` for a throwaway
    in-memory chain, a fork of `rpc`, or the live network behind `rpc`.
    """
    if rpc == "boa":
        with boa.set_env(Env()) as env:
            if sender is not None:
                env.eoa = sender.address
            yield env

    elif fork:
        with boa.fork(rpc, allow_dirty=True) as env:
            if sender is not None:
                env.eoa = sender.address
                env.set_balance(sender.address, 10 * 10**18)
                log.h2("Deployer wallet funded with 10 ETH")
            yield env

    else:
        with boa.set_network_env(rpc) as env:
            if sender is not None:
                env.add_account(sender)
            yield env
