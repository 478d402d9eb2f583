class DeploymentError(Exception):
    """
    Base class for failures of a deployment, wiring or configuration run.
    """


class DuplicateNameError(DeploymentError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"Contract `{name}` is already registered")


class UnresolvedReferenceError(DeploymentError):
    """
    A logical contract name was used before a contract with that name was
    registered. `needed_by` names the descriptor, wiring step or scenario
    step that asked for it, when known.
    """

    def __init__(self, name, needed_by=None):
        self.name = name
        self.needed_by = needed_by
        message = f"Unresolved dependency `{name}`"
        if needed_by:
            message += f" (needed by {needed_by})"
        super().__init__(message)


class MissingArtifactError(DeploymentError):
    def __init__(self, contract):
        self.contract = contract
        super().__init__(f"No compiled artifact or source found for `{contract}`")


class ArgumentMismatchError(DeploymentError):
    def __init__(self, contract, function, expected, given):
        self.contract = contract
        self.function = function
        self.expected = expected
        self.given = given
        super().__init__(
            f"`{contract}.{function}` takes {expected} argument(s) according to its artifact, {given} given"
        )


class MissingCodeError(DeploymentError):
    """
    A snapshot entry points at an address with no code on the connected
    chain, usually because the snapshot was written on another chain.
    """

    def __init__(self, name, address):
        self.name = name
        self.address = address
        super().__init__(f"`{name}` has no code at {address} on the connected chain")


class RemoteCallError(DeploymentError):
    """
    The chain rejected a transaction, or the RPC endpoint failed to
    execute it. `reason` holds the decoded revert reason when available.
    """

    def __init__(self, contract, method, reason=None, message=None):
        self.contract = contract
        self.method = method
        self.reason = reason
        self.message = message or reason or "call failed"
        super().__init__(f"{contract}.{method} failed: {self.message}")


class OrchestrationError(DeploymentError):
    """
    Error raised when a deploy or wiring step fails. Carries the index of
    the failed step and the logical names involved. Steps before it have
    already been committed on chain and are not rolled back.
    """

    def __init__(self, step_index, names, cause):
        self.step_index = step_index
        self.names = tuple(names)
        self.cause = cause
        super().__init__(str(self))

    def __str__(self):
        return f"Step {self.step_index} ({', '.join(self.names)}) failed: {self.cause}"


class ConfigurationError(DeploymentError):
    def __init__(self, index, item, cause):
        self.index = index
        self.item = item
        self.cause = cause
        super().__init__(f"Configuration item {index} ({item}) failed: {cause}")


class ScenarioAssertionError(AssertionError):
    """
    Observed outcome of a scenario step did not match its expectation.
    """

    def __init__(self, step_index, step, message):
        self.step_index = step_index
        self.step = step
        super().__init__(f"Step {step_index} `{step.description}`: {message}")
