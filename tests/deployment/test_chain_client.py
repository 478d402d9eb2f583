import pytest

from constants import ONE_WBTC
from scripts.utils.errors import ArgumentMismatchError, MissingArtifactError, RemoteCallError
from scripts.utils.revert_reasons import RevertReason


@pytest.fixture
def token(chain_client):
    return chain_client.deploy("MockErc20", ("Wrapped BTC", "WBTC", 8, 0), label="WBTC")


def test_deploy_and_call(chain_client, token, alice, deploy3r):
    assert token.minter() == deploy3r

    chain_client.call(token, "mint", [alice, ONE_WBTC])

    assert chain_client.read(token, "balanceOf", [alice]) == ONE_WBTC
    assert chain_client.wait_for_finality("tx") == "tx"


def test_call_as_other_sender(chain_client, token, alice, bob):
    chain_client.call(token, "mint", [alice, ONE_WBTC])
    chain_client.call(token, "transfer", [bob, ONE_WBTC // 4], sender=alice)

    assert token.balanceOf(bob) == ONE_WBTC // 4
    assert token.balanceOf(alice) == ONE_WBTC * 3 // 4


def test_revert_reason_is_decoded(chain_client, token, alice):
    with pytest.raises(RemoteCallError) as e:
        chain_client.call(token, "mint", [alice, ONE_WBTC], sender=alice)

    assert e.value.reason == "NO_PERMS"
    assert RevertReason.parse(e.value.reason) is RevertReason.NO_PERMS
    assert e.value.method == "mint"
    assert token.balanceOf(alice) == 0


def test_unknown_method(chain_client, token):
    with pytest.raises(RemoteCallError) as e:
        chain_client.call(token, "burn", [1])

    assert e.value.reason is None
    assert "no method `burn`" in str(e.value)


def test_constructor_arity_checked_before_deploy(chain_client):
    with pytest.raises(ArgumentMismatchError):
        chain_client.deploy("MockErc20", ("Wrapped BTC", "WBTC", 8))


def test_unknown_artifact(chain_client):
    with pytest.raises(MissingArtifactError):
        chain_client.deploy("WBTCBorrowETH", ())


def test_failed_constructor(chain_client, deploy3r):
    with pytest.raises(RemoteCallError) as e:
        chain_client.deploy("MockDepositApprover", ("0x0000000000000000000000000000000000000000",), label="DepositApprover")

    assert e.value.contract == "DepositApprover"
    assert "INVALID_ADDRESS" in str(e.value)


def test_at_existing_address(chain_client, token, alice):
    chain_client.call(token, "mint", [alice, 5])

    again = chain_client.at("MockErc20", token.address, "WBTC")
    assert again.balanceOf(alice) == 5

    as_erc20 = chain_client.at("IERC20", token.address, "WBTC")
    assert chain_client.read(as_erc20, "balanceOf", [alice]) == 5


def test_unencodable_argument(chain_client, token):
    as_erc20 = chain_client.at("IERC20", token.address, "WBTC")

    with pytest.raises(RemoteCallError) as e:
        chain_client.call(as_erc20, "balanceOf", ["not an address"])

    assert e.value.reason is None
    assert e.value.method == "balanceOf"
    assert "WBTC.balanceOf failed" in str(e.value)


def test_has_code(chain_client, token, alice):
    assert chain_client.has_code(token.address)
    assert not chain_client.has_code(alice)
