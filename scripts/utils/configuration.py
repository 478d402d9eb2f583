from scripts.utils import log
from scripts.utils.descriptors import resolve_args
from scripts.utils.errors import ConfigurationError, RemoteCallError, UnresolvedReferenceError


class ConfigurationApplier:
    """
    Sends the post-wiring parameter calls (slippage, swap route, fee tier,
    leverage bounds...). Items are independent of each other and run in
    list order; the first failure stops the batch. No retries.
    """

    def __init__(self, client, sender=None):
        self.client = client
        self.sender = sender

    def apply_all(self, registry, items):
        results = []
        for index, item in enumerate(items, start=1):
            results.append(self.apply(registry, index, item))
        return results

    def apply(self, registry, index, item):
        needed_by = repr(item)
        log.h2(f"Configuration {index} - {needed_by}")

        try:
            for name in item.requires:
                registry.resolve(name, needed_by)
            handle = registry.handle_of(item.target, needed_by)
            args = resolve_args(item.args, lambda name: registry.address_of(name, needed_by))
            tx = self.client.call(handle, item.method, args, sender=item.sender or self.sender)
            self.client.wait_for_finality(tx)
        except (RemoteCallError, UnresolvedReferenceError) as exception:
            raise ConfigurationError(index, item, exception) from exception

        log.h3("Configuration applied")
        return tx
