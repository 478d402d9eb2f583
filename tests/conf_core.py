import pytest

from scripts.utils.artifacts import load_artifacts
from scripts.utils.chain_client import BoaChainClient
from scripts.utils.configuration import ConfigurationApplier
from scripts.utils.deploy_args import BluePrint
from scripts.utils.harness import ScenarioRunner, World
from scripts.utils.orchestrator import DeploymentOrchestrator
from scripts.utils.plan import configuration_items, deployment_descriptors, wiring_steps
from scripts.utils.registry import Registry


#############
# Artifacts #
#############


@pytest.fixture(scope="session")
def contract_artifacts():
    return load_artifacts()


@pytest.fixture(scope="session")
def chain_client(env, contract_artifacts, deploy3r):
    return BoaChainClient(contract_artifacts, deploy3r)


@pytest.fixture(scope="session")
def blueprint():
    return BluePrint("local")


##########
# System #
##########


@pytest.fixture
def deploy_system(chain_client, blueprint, deploy3r):
    def deploy_system(_register_sub_strategy=True, _configure=True):
        registry = Registry()
        DeploymentOrchestrator(chain_client, registry, sender=deploy3r).run(
            deployment_descriptors(blueprint, deploy3r),
            wiring_steps(blueprint, _register_sub_strategy),
        )
        if _configure:
            ConfigurationApplier(chain_client, sender=deploy3r).apply_all(registry, configuration_items(blueprint))
        return registry

    yield deploy_system


# registration is left to the scenarios
@pytest.fixture
def deployed(deploy_system):
    return deploy_system(_register_sub_strategy=False)


@pytest.fixture
def world(deployed, deploy3r, alice, bob):
    world = World(deployed)
    world.add_identity("deployer", deploy3r)
    world.add_identity("alice", alice)
    world.add_identity("bob", bob)
    return world


@pytest.fixture
def runner(chain_client, world):
    return ScenarioRunner(chain_client, world)
