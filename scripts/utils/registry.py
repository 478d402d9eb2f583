from mergedeep import merge

from scripts.utils import json_file
from scripts.utils.errors import DuplicateNameError, UnresolvedReferenceError


class DeployedContract:
    __slots__ = ("_name", "_address", "_handle")

    def __init__(self, name, address, handle=None):
        self._name = name
        self._address = str(address)
        self._handle = handle

    @property
    def name(self):
        return self._name

    @property
    def address(self):
        return self._address

    @property
    def handle(self):
        return self._handle

    def __repr__(self):
        return f"<DeployedContract {self._name} at {self._address}>"


class Registry:
    """
    Logical name -> deployed contract for one run. Iteration follows
    registration (deployment) order.
    """

    def __init__(self):
        self._contracts = {}

    def register(self, name, deployed):
        if name in self._contracts:
            raise DuplicateNameError(name)
        self._contracts[name] = deployed
        return deployed

    def attach(self, name, address, handle=None):
        """Registers a contract that was deployed outside of this run."""
        return self.register(name, DeployedContract(name, address, handle))

    def repoint(self, name, address, handle=None):
        """
        Points an existing name at another deployment, as after an upgrade.
        The name keeps its place in the registry order.
        """
        self.resolve(name)
        self._contracts[name] = DeployedContract(name, address, handle)
        return self._contracts[name]

    def resolve(self, name, needed_by=None):
        try:
            return self._contracts[name]
        except KeyError:
            raise UnresolvedReferenceError(name, needed_by) from None

    def address_of(self, name, needed_by=None):
        return self.resolve(name, needed_by).address

    def handle_of(self, name, needed_by=None):
        return self.resolve(name, needed_by).handle

    def names(self):
        return list(self._contracts)

    def snapshot(self):
        return {name: deployed.address for name, deployed in self._contracts.items()}

    def save(self, filename, merge_existing=True):
        """
        Writes the snapshot as a flat label -> address JSON object. Entries
        already in the file are kept unless this run overrides them.
        """
        content = self.snapshot()
        if merge_existing:
            content = merge({}, json_file.load(filename, default={}), content)
        return json_file.save(filename, content)

    def __contains__(self, name):
        return name in self._contracts

    def __iter__(self):
        return iter(self._contracts.values())

    def __len__(self):
        return len(self._contracts)


def load_snapshot(filename):
    snapshot = json_file.load(filename)
    if not isinstance(snapshot, dict):
        raise ValueError(f"Address snapshot {filename} must be a JSON object")
    return snapshot
