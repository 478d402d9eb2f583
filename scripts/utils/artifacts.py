import json
import os

from eth_abi.abi import encode
from vyper.compiler import compile_code
from vyper.utils import method_id

from scripts.utils.errors import ArgumentMismatchError, MissingArtifactError

# Define constants for directories
CONTRACTS_DIR = "./contracts"
INTERFACES_DIR = "./interfaces"
ARTIFACTS_DIR = "./artifacts"


class Artifact:
    """
    A deployable contract: either a Vyper source file, or a compiled JSON
    artifact (hardhat layout, with `abi` and `bytecode` keys) for contracts
    built outside this repository.
    """

    def __init__(self, name, path):
        self.name = name
        self.path = path
        self._abi = None
        self._json = None

    @property
    def is_vyper(self):
        return self.path.endswith(".vy")

    def _load_json(self):
        if self._json is None:
            with open(self.path) as file:
                self._json = json.load(file)
        return self._json

    @property
    def abi(self):
        if self._abi is None:
            if self.is_vyper:
                with open(self.path) as file:
                    self._abi = compile_code(file.read(), output_formats=["abi"])["abi"]
            else:
                self._abi = self._load_json()["abi"]
        return self._abi

    @property
    def bytecode(self):
        if self.is_vyper:
            raise ValueError(f"{self.name} is a Vyper source, load it with boa")
        code = self._load_json()["bytecode"]
        return bytes.fromhex(code[2:] if code.startswith("0x") else code)

    def inputs(self, function=None):
        """
        Input types of the constructor (`function=None`) or of the named
        function. Returns None when the ABI has no such entry.
        """
        for item in self.abi:
            if function is None and item.get("type") == "constructor":
                return [i["type"] for i in item.get("inputs", [])]
            if function is not None and item.get("type") == "function" and item.get("name") == function:
                return [i["type"] for i in item.get("inputs", [])]
        return None

    def check_arguments(self, function, args):
        # a contract without an explicit constructor takes no arguments
        expected = self.inputs(function)
        if expected is None:
            if function is not None:
                raise ArgumentMismatchError(self.name, function, 0, len(args))
            expected = []
        if len(expected) != len(args):
            raise ArgumentMismatchError(self.name, function or "constructor", len(expected), len(args))

    def encode_constructor_args(self, args):
        """
        Encode constructor arguments based on the contract's ABI.
        """
        types = self.inputs() or []
        if not types:
            return b""
        processed_args = [arg.address if hasattr(arg, "address") else arg for arg in args]
        return encode(types, processed_args)

    def encode_call(self, function, args):
        """
        Calldata for `function(*args)`: selector followed by the ABI encoded
        arguments. Used as the initializer data of a proxy.
        """
        self.check_arguments(function, args)
        types = self.inputs(function)
        selector = method_id(f"{function}({','.join(types)})")
        processed_args = [arg.address if hasattr(arg, "address") else arg for arg in args]
        return selector + encode(types, processed_args)

    def __repr__(self):
        return f"<Artifact {self.name} {self.path}>"


def load_artifacts(directories=(CONTRACTS_DIR, INTERFACES_DIR, ARTIFACTS_DIR)):
    """
    Load every Vyper source and JSON artifact from the given directories and
    their subdirectories, keyed by file name without extension. Paths are
    relative to the current directory.
    """
    artifacts = {}

    for directory in directories:
        if not os.path.exists(directory):
            continue

        for root, _, files in os.walk(directory):
            for file in sorted(files):
                stem, ext = os.path.splitext(file)
                if ext not in (".vy", ".json") or stem.endswith(".dbg"):
                    continue
                rel_path = os.path.relpath(os.path.join(root, file))
                artifacts[stem] = Artifact(stem, rel_path)

    return artifacts


def get_artifact(artifacts, name):
    try:
        return artifacts[name]
    except KeyError:
        raise MissingArtifactError(name) from None
