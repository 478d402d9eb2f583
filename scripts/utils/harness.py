"""
Scripted scenarios against a deployed system.

A scenario is a list of `ScenarioStep`s run strictly in order against one
`World` (the registry plus named test identities). Each step sends one call
as an identity and either expects it to succeed, checking postconditions on
fresh reads taken after the transaction, or expects a revert with an exact
`RevertReason`. Steps are not idempotent: a step replayed against mutated
chain state can have a different outcome.
"""

from fractions import Fraction

from scripts.utils import log
from scripts.utils.descriptors import Ref
from scripts.utils.errors import RemoteCallError, ScenarioAssertionError, UnresolvedReferenceError
from scripts.utils.revert_reasons import RevertReason


class Identity:
    __slots__ = ("name",)

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return f"who({self.name!r})"


def who(name):
    return Identity(name)


class World:
    def __init__(self, registry, identities=None):
        self.registry = registry
        self.identities = dict(identities or {})

    def add_identity(self, name, address):
        self.identities[name] = str(getattr(address, "address", address))

    def identity(self, name):
        try:
            return self.identities[name]
        except KeyError:
            raise UnresolvedReferenceError(name, "scenario identities") from None

    def handle(self, target, needed_by=None):
        return self.registry.handle_of(target, needed_by)

    def resolve(self, arg):
        if isinstance(arg, Ref):
            return self.registry.address_of(arg.name)
        if isinstance(arg, Identity):
            return self.identity(arg.name)
        if isinstance(arg, list):
            return [self.resolve(a) for a in arg]
        if isinstance(arg, tuple):
            return tuple(self.resolve(a) for a in arg)
        return arg

    def resolve_args(self, args):
        return [self.resolve(arg) for arg in args]


#########
# Reads #
#########


class Read:
    """A view call evaluated on demand."""

    def __init__(self, target, method, *args):
        self.target = target
        self.method = method
        self.args = args

    def __call__(self, client, world):
        handle = world.handle(self.target, repr(self))
        return client.read(handle, self.method, world.resolve_args(self.args))

    def __repr__(self):
        args = ", ".join(repr(a) for a in self.args)
        return f"{self.target}.{self.method}({args})"


class Ratio:
    """numerator / denominator as an exact fraction; zero when the denominator is zero."""

    def __init__(self, numerator, denominator):
        self.numerator = numerator
        self.denominator = denominator

    def __call__(self, client, world):
        denominator = evaluate(self.denominator, client, world)
        if denominator == 0:
            return Fraction(0)
        return Fraction(evaluate(self.numerator, client, world), denominator)

    def __repr__(self):
        return f"{self.numerator!r} / {self.denominator!r}"


def evaluate(operand, client, world):
    if isinstance(operand, (Read, Ratio)):
        return operand(client, world)
    return operand


##################
# Postconditions #
##################


class Postcondition:
    """
    Compares a read taken before the call with the same read taken after
    it. `operand` is evaluated before the call.
    """

    def __init__(self, read, operand=None):
        self.read = read
        self.operand = operand

    def capture(self, client, world):
        return evaluate(self.read, client, world), evaluate(self.operand, client, world)

    def verify(self, captured, client, world):
        before, operand = captured
        after = evaluate(self.read, client, world)
        if self.holds(before, after, operand):
            return None
        return f"expected {self!r}, read {before} before and {after} after"

    def holds(self, before, after, operand):
        raise NotImplementedError

    def __repr__(self):
        suffix = "" if self.operand is None else f" {self.operand!r}"
        return f"{self.read!r} {type(self).__name__}{suffix}"


class Equals(Postcondition):
    def holds(self, before, after, operand):
        return after == operand


class IncreasedBy(Postcondition):
    def holds(self, before, after, operand):
        return after == before + operand


class DecreasedBy(Postcondition):
    def holds(self, before, after, operand):
        return after == before - operand


class Increased(Postcondition):
    def holds(self, before, after, operand):
        return after > before


class Decreased(Postcondition):
    def holds(self, before, after, operand):
        return after < before


class NotIncreased(Postcondition):
    def holds(self, before, after, operand):
        return after <= before


class Unchanged(Postcondition):
    def holds(self, before, after, operand):
        return after == before


class MovedToward(Postcondition):
    """
    The value moved strictly closer to `bound` without crossing it. A value
    already at the bound must stay there.
    """

    def holds(self, before, after, operand):
        if before == operand:
            return after == operand
        if before < operand:
            return before < after <= operand
        return operand <= after < before


class Satisfies(Postcondition):
    def __init__(self, read, predicate, description):
        super().__init__(read)
        self.predicate = predicate
        self.description = description

    def holds(self, before, after, operand):
        return self.predicate(before, after)

    def __repr__(self):
        return f"{self.read!r} {self.description}"


################
# Expectations #
################


class Succeeds:
    def __init__(self, *postconditions):
        self.postconditions = postconditions

    def __repr__(self):
        return "succeeds"


class Reverts:
    def __init__(self, reason, *postconditions):
        # only reasons of the closed set are accepted
        self.reason = RevertReason(reason)
        self.postconditions = postconditions

    def __repr__(self):
        return f"reverts with `{self.reason}`"


class ScenarioStep:
    def __init__(self, description, identity, target, operation, args=(), expect=None, value=0):
        self.description = description
        self.identity = identity
        self.target = target
        self.operation = operation
        self.args = tuple(args)
        self.expect = expect if expect is not None else Succeeds()
        self.value = value

    def __repr__(self):
        return f"<ScenarioStep {self.description}: {self.identity} -> {self.target}.{self.operation} {self.expect!r}>"


class ScenarioRunner:
    def __init__(self, client, world):
        self.client = client
        self.world = world
        self.results = []

    def run(self, steps):
        for index, step in enumerate(steps, start=1):
            self.execute(index, step)
        return self.results

    def execute(self, index, step):
        log.h2(f"Step {index} - {step.description}")
        expect = step.expect

        try:
            handle = self.world.handle(step.target, step.description)
            sender = self.world.identity(step.identity)
            args = self.world.resolve_args(step.args)
        except UnresolvedReferenceError as exception:
            raise ScenarioAssertionError(index, step, str(exception)) from exception

        captured = [(p, p.capture(self.client, self.world)) for p in expect.postconditions]

        try:
            result = self.client.call(handle, step.operation, args, sender=sender, value=step.value)
            self.client.wait_for_finality(result)
        except RemoteCallError as exception:
            if not isinstance(expect, Reverts):
                raise ScenarioAssertionError(index, step, f"unexpected failure: {exception}") from exception
            if RevertReason.parse(exception.reason) != expect.reason:
                raise ScenarioAssertionError(
                    index, step, f"expected revert `{expect.reason}`, got `{exception.reason}`"
                ) from exception
            log.h3(f"Reverted as expected: {expect.reason}")
            result = exception
        else:
            if isinstance(expect, Reverts):
                raise ScenarioAssertionError(index, step, f"expected revert `{expect.reason}`, call succeeded")
            log.h3("Succeeded")

        for postcondition, before in captured:
            failure = postcondition.verify(before, self.client, self.world)
            if failure:
                raise ScenarioAssertionError(index, step, failure)

        self.results.append(result)
        return result
