from scripts.utils import log
from scripts.utils.descriptors import implementation_name, resolve_args
from scripts.utils.errors import (
    ArgumentMismatchError,
    DuplicateNameError,
    OrchestrationError,
    RemoteCallError,
    UnresolvedReferenceError,
)
from scripts.utils.registry import DeployedContract


class DeploymentOrchestrator:
    """
    Deploys contract descriptors in declaration order, registers them, then
    runs the wiring steps that cross-register their addresses.

    The orchestrator does not sort descriptors. A reference to a name that
    is not registered yet is reported as an UnresolvedReferenceError by
    `validate`, before anything is sent to the chain. Every transaction is
    awaited before the next step starts. A failed transaction aborts the run
    with an OrchestrationError; nothing is rolled back.
    """

    def __init__(self, client, registry, sender=None):
        self.client = client
        self.registry = registry
        self.sender = sender
        self.step_count = 0

    def validate(self, descriptors, wiring=()):
        known = set(self.registry.names())

        for descriptor in descriptors:
            for name in descriptor.dependencies:
                if name not in known:
                    raise UnresolvedReferenceError(name, descriptor.name)
            for name in descriptor.registered_names:
                if name in known:
                    raise DuplicateNameError(name)
                known.add(name)

        for step in wiring:
            for name in step.dependencies:
                if name not in known:
                    raise UnresolvedReferenceError(name, repr(step))

    def run(self, descriptors, wiring=()):
        self.validate(descriptors, wiring)
        self.deploy(descriptors)
        self.wire(wiring)
        return self.registry

    def deploy(self, descriptors):
        for descriptor in descriptors:
            self.deploy_one(descriptor)
        return self.registry

    def deploy_one(self, descriptor):
        for name in descriptor.dependencies:
            self.registry.resolve(name, descriptor.name)
        for name in descriptor.registered_names:
            if name in self.registry:
                raise DuplicateNameError(name)

        self.step_count += 1
        step = self.step_count
        args = resolve_args(
            descriptor.args,
            lambda name: self.registry.address_of(name, descriptor.name),
        )

        log.h2(f"Transaction {step} - Deploying {descriptor.name}")

        try:
            if descriptor.upgradeable:
                handle = self.deploy_proxy(descriptor, args)
            else:
                handle = self.client.deploy(descriptor.contract, args, label=descriptor.name, sender=self.sender)
                self.client.wait_for_finality(handle)
        except (RemoteCallError, ArgumentMismatchError) as exception:
            raise OrchestrationError(step, [descriptor.name] + descriptor.dependencies, exception) from exception

        return self.registry.register(descriptor.name, DeployedContract(descriptor.name, handle.address, handle))

    def deploy_proxy(self, descriptor, args):
        # initializer calldata is encoded before anything is sent
        init_data = self.client.encode_call(descriptor.contract, descriptor.initializer, args)

        label = implementation_name(descriptor.name)
        implementation = self.client.deploy(descriptor.contract, (), label=label, sender=self.sender)
        self.client.wait_for_finality(implementation)
        self.registry.register(label, DeployedContract(label, implementation.address, implementation))

        proxy = self.client.deploy(
            descriptor.proxy,
            (implementation.address, init_data),
            label=descriptor.name,
            sender=self.sender,
        )
        self.client.wait_for_finality(proxy)
        log.h3(f"{descriptor.name} initialized behind its proxy")

        return self.client.at(descriptor.contract, proxy.address, descriptor.name)

    def wire(self, steps):
        for wiring_step in steps:
            self.wire_one(wiring_step)

    def wire_one(self, wiring_step):
        self.step_count += 1
        step = self.step_count
        needed_by = repr(wiring_step)

        handle = self.registry.handle_of(wiring_step.source, needed_by)
        args = resolve_args(
            wiring_step.call_args,
            lambda name: self.registry.address_of(name, needed_by),
        )

        log.h2(f"Transaction {step} - {needed_by}")

        try:
            tx = self.client.call(handle, wiring_step.setter, args, sender=wiring_step.sender or self.sender)
            self.client.wait_for_finality(tx)
        except RemoteCallError as exception:
            raise OrchestrationError(step, wiring_step.dependencies, exception) from exception

        log.h3("Transaction confirmed")
        return tx
