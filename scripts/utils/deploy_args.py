import os

from config.BluePrint import PARAMS, INTEGRATION_ADDYS, TOKENS, MOCK_TOKENS, ARTIFACTS, HUNDRED_PERCENT, ZERO_ADDRESS


class Constants:
    ZERO_ADDRESS = ZERO_ADDRESS
    HUNDRED_PERCENT = HUNDRED_PERCENT


class BluePrint:
    def __init__(self, blueprint):
        if blueprint not in PARAMS:
            raise ValueError(f"Unknown blueprint `{blueprint}`, expected one of {sorted(PARAMS)}")
        self.blueprint = blueprint
        self.PARAMS = dict(PARAMS[blueprint])
        self.INTEGRATION_ADDYS = dict(INTEGRATION_ADDYS[blueprint])
        self.TOKENS = dict(TOKENS[blueprint])
        self.MOCK_TOKENS = MOCK_TOKENS
        self.ARTIFACTS = dict(ARTIFACTS[blueprint])
        self.CONSTANTS = Constants

        # addresses that are not public config
        for key, env_name in (("TREASURY", "TREASURY_ADDRESS"), ("ETH_LEVERAGE", "ETH_LEVERAGE_ADDRESS")):
            if os.environ.get(env_name):
                self.INTEGRATION_ADDYS[key] = os.environ[env_name]

    def mock_tokens(self):
        """Tokens without an address on this chain, deployed as mocks."""
        return [symbol for symbol, address in self.TOKENS.items() if address is None]

    def artifact(self, logical_name):
        return self.ARTIFACTS.get(logical_name, logical_name)


class DeployArgs:
    def __init__(self, sender, chain, rpc, blueprint=None):
        self.sender = sender
        self.chain = chain
        self.rpc = rpc
        self.blueprint = BluePrint(blueprint or chain)

    @property
    def treasury(self):
        treasury = self.blueprint.INTEGRATION_ADDYS["TREASURY"]
        if treasury == ZERO_ADDRESS:
            return self.sender.address
        return treasury

    def __repr__(self):
        return f"DeployArgs(sender={self.sender.address}, chain={self.chain}, rpc={self.rpc}, blueprint={self.blueprint.blueprint})"
