"""
Static description of a deployment: the contracts to create, the calls that
wire them together and the configuration applied afterwards.

Argument lists may hold `ref("Name")` placeholders. They are substituted with
the address of the registered contract right before the call that uses them.
"""


class Ref:
    __slots__ = ("name",)

    def __init__(self, name):
        self.name = name

    def __eq__(self, other):
        return isinstance(other, Ref) and other.name == self.name

    def __hash__(self):
        return hash(("ref", self.name))

    def __repr__(self):
        return f"ref({self.name!r})"


def ref(name):
    return Ref(name)


def implementation_name(name):
    """Registry label of the implementation behind the proxy `name`."""
    return f"{name}Implementation"


def refs_in(args):
    """Names referenced by `args`, in order of appearance, including nested lists/tuples."""
    names = []
    for arg in args:
        if isinstance(arg, Ref):
            found = [arg.name]
        elif isinstance(arg, (list, tuple)):
            found = refs_in(arg)
        else:
            continue
        for name in found:
            if name not in names:
                names.append(name)
    return names


def resolve_args(args, lookup):
    # `lookup(name)` returns the address for a reference
    resolved = []
    for arg in args:
        if isinstance(arg, Ref):
            resolved.append(lookup(arg.name))
        elif isinstance(arg, list):
            resolved.append(resolve_args(arg, lookup))
        elif isinstance(arg, tuple):
            resolved.append(tuple(resolve_args(arg, lookup)))
        else:
            resolved.append(arg)
    return resolved


class ContractDescriptor:
    """
    One contract to deploy.

    `name` is the logical (registry) name, `contract` the artifact to deploy
    (defaults to `name`). Upgradeable contracts are deployed as an
    implementation without constructor arguments plus a `proxy` whose
    constructor delegates `initializer(*args)` to it. `name` then refers to
    the proxy.
    """

    def __init__(
        self,
        name,
        contract=None,
        args=(),
        upgradeable=False,
        depends_on=(),
        initializer="initialize",
        proxy="ERC1967Proxy",
    ):
        self._name = name
        self._contract = contract or name
        self._args = tuple(args)
        self._upgradeable = upgradeable
        self._depends_on = tuple(depends_on)
        self._initializer = initializer
        self._proxy = proxy

    @property
    def name(self):
        return self._name

    @property
    def contract(self):
        return self._contract

    @property
    def args(self):
        return self._args

    @property
    def upgradeable(self):
        return self._upgradeable

    @property
    def initializer(self):
        return self._initializer

    @property
    def proxy(self):
        return self._proxy

    @property
    def registered_names(self):
        """Labels this descriptor adds to the registry, in registration order."""
        if self._upgradeable:
            return [implementation_name(self._name), self._name]
        return [self._name]

    @property
    def dependencies(self):
        names = refs_in(self._args)
        for name in self._depends_on:
            if name not in names:
                names.append(name)
        return names

    def __repr__(self):
        kind = "upgradeable " if self._upgradeable else ""
        return f"<{kind}ContractDescriptor {self._name} ({self._contract})>"


class WiringStep:
    """
    `source.setter(address_of(target), *args)`, sent by `sender` (deployer
    when None).
    """

    def __init__(self, source, setter, target, args=(), sender=None):
        self.source = source
        self.setter = setter
        self.target = target
        self.args = tuple(args)
        self.sender = sender

    @property
    def call_args(self):
        return (Ref(self.target),) + self.args

    @property
    def dependencies(self):
        names = [self.source]
        for name in refs_in(self.call_args):
            if name not in names:
                names.append(name)
        return names

    def __repr__(self):
        return f"{self.source}.{self.setter}({self.target})"


class ConfigItem:
    """
    A parameter-setting call applied after wiring. `requires` names
    contracts that must be registered before the call is sent.
    """

    def __init__(self, target, method, args=(), requires=(), sender=None):
        self.target = target
        self.method = method
        self.args = tuple(args)
        self.requires = tuple(requires)
        self.sender = sender

    @property
    def dependencies(self):
        names = [self.target]
        for name in list(self.requires) + refs_in(self.args):
            if name not in names:
                names.append(name)
        return names

    def __repr__(self):
        return f"{self.target}.{self.method}{self.args!r}"
