from fractions import Fraction

import boa
import pytest

from constants import CENT_WBTC, ONE_WBTC, ZERO_ADDRESS
from scripts.utils.descriptors import ref
from scripts.utils.harness import (
    DecreasedBy,
    Equals,
    IncreasedBy,
    MovedToward,
    NotIncreased,
    Ratio,
    Read,
    Reverts,
    ScenarioStep,
    Succeeds,
    Unchanged,
    who,
)
from scripts.utils.revert_reasons import RevertReason

SS = "WBTCBorrowETH"

total_alloc = Read("Controller", "totalAllocPoint")
ss_length = Read("Controller", "subStrategyLength")
total_assets = Read("EFVault", "totalAssets")
alice_shares = Read("EFVault", "balanceOf", who("alice"))
alice_wbtc = Read("WBTC", "balanceOf", who("alice"))
deployer_wbtc = Read("WBTC", "balanceOf", who("deployer"))
collateral = Read(SS, "getCollateral")
ltv = Ratio(Read(SS, "getDebt"), Read(SS, "getCollateral"))


def deposit_steps(identity, amount):
    shares = Read("EFVault", "balanceOf", who(identity))
    wbtc = Read("WBTC", "balanceOf", who(identity))
    return [
        ScenarioStep(f"{identity} approves {amount}", identity, "WBTC", "approve", (ref("DepositApprover"), amount)),
        ScenarioStep(
            f"{identity} deposits {amount}",
            identity,
            "DepositApprover",
            "deposit",
            (amount,),
            Succeeds(
                IncreasedBy(shares, Read("EFVault", "convertToShares", amount)),
                IncreasedBy(total_assets, amount),
                DecreasedBy(wbtc, amount),
            ),
        ),
    ]


##############
# Deployment #
##############


def test_vault_deployed(deployed, blueprint, deploy3r):
    vault = deployed.handle_of("EFVault")
    ss = deployed.handle_of(SS)

    assert vault.name() == blueprint.PARAMS["VAULT_NAME"]
    assert vault.symbol() == blueprint.PARAMS["VAULT_SYMBOL"]
    assert vault.asset() == deployed.address_of("WBTC")

    # wiring
    assert deployed.handle_of("DepositApprover").vault() == vault.address
    assert vault.depositApprover() == deployed.address_of("DepositApprover")
    assert vault.controller() == deployed.address_of("Controller")
    assert vault.subStrategy() == ss.address

    # configuration
    assert ss.depositSlippage() == blueprint.PARAMS["SS_DEPOSIT_SLIPPAGE"]
    assert ss.withdrawSlippage() == blueprint.PARAMS["SS_WITHDRAW_SLIPPAGE"]
    assert ss.swapFee() == blueprint.PARAMS["SS_SWAP_FEE_TIER"]
    assert ss.mlr() == blueprint.PARAMS["SS_MAX_LEVERAGE_RATIO"]
    assert ss.treasury() == deploy3r
    assert ss.router() == ZERO_ADDRESS


def test_full_deployment_registers_sub_strategy(deploy_system):
    registry = deploy_system()
    controller = registry.handle_of("Controller")

    assert controller.totalAllocPoint() == 100
    assert controller.subStrategyLength() == 1
    assert controller.isRegistered(registry.address_of(SS))


def test_wiring_and_initialize_are_guarded(deployed, alice, deploy3r):
    vault = deployed.handle_of("EFVault")

    with boa.reverts(RevertReason.NOT_OWNER.value):
        vault.setController(alice, sender=alice)

    with boa.reverts(RevertReason.ALREADY_INITIALIZED.value):
        vault.initialize(deployed.address_of("WBTC"), "x", "x", sender=deploy3r)

    with boa.reverts(RevertReason.VAULT_NOT_SET.value):
        boa.load("contracts/mock/MockDepositApprover.vy", deployed.address_of("WBTC")).deposit(1, sender=alice)

    assert vault.controller() == deployed.address_of("Controller")


################
# Registration #
################


def test_register_sub_strategy(runner):
    runner.run([
        ScenarioStep(
            "non-owner registers WBTCBorrowETH",
            "alice",
            "Controller",
            "registerSubStrategy",
            (ref(SS), 100),
            Reverts(RevertReason.NOT_OWNER, Unchanged(total_alloc), Unchanged(ss_length)),
        ),
        ScenarioStep(
            "register WBTCBorrowETH with 100 alloc points",
            "deployer",
            "Controller",
            "registerSubStrategy",
            (ref(SS), 100),
            Succeeds(Equals(total_alloc, 100), Equals(ss_length, 1)),
        ),
        ScenarioStep(
            "register WBTCBorrowETH again",
            "deployer",
            "Controller",
            "registerSubStrategy",
            (ref(SS), 100),
            Reverts(RevertReason.ALREADY_REGISTERED, Unchanged(total_alloc), Unchanged(ss_length)),
        ),
    ])


###########
# Deposit #
###########


def test_deposit_twice(runner, world, fundWbtc, alice):
    fundWbtc(alice, ONE_WBTC)

    runner.run(deposit_steps("alice", CENT_WBTC) + deposit_steps("alice", CENT_WBTC))

    vault = world.handle("EFVault")
    assert vault.totalAssets() == 2 * CENT_WBTC
    assert vault.balanceOf(alice) == 2 * CENT_WBTC
    assert world.handle(SS).getCollateral() == 2 * CENT_WBTC


def test_deposit_zero(runner, fundWbtc, alice):
    fundWbtc(alice, ONE_WBTC)

    runner.run([
        ScenarioStep(
            "alice deposits nothing",
            "alice",
            "DepositApprover",
            "deposit",
            (0,),
            Reverts(RevertReason.ZERO_AMOUNT, Unchanged(alice_shares), Unchanged(total_assets)),
        ),
    ])


def test_vault_deposit_only_through_approver(runner, fundWbtc, alice):
    fundWbtc(alice, ONE_WBTC)

    runner.run([
        ScenarioStep(
            "alice deposits into the vault directly",
            "alice",
            "EFVault",
            "deposit",
            (CENT_WBTC, who("alice")),
            Reverts(RevertReason.ONLY_DEPOSIT_APPROVER, Unchanged(alice_shares)),
        ),
    ])


############
# Withdraw #
############


def test_withdraw(runner, depositWbtc, alice):
    depositWbtc(alice, CENT_WBTC)

    runner.run([
        ScenarioStep(
            "alice withdraws 10 WBTC",
            "alice",
            "EFVault",
            "withdraw",
            (10 * ONE_WBTC, who("alice")),
            Reverts(
                RevertReason.EXCEED_TOTAL_DEPOSIT,
                Unchanged(alice_shares),
                Unchanged(alice_wbtc),
                Unchanged(total_assets),
            ),
        ),
        ScenarioStep(
            "alice withdraws 0.001 WBTC",
            "alice",
            "EFVault",
            "withdraw",
            (CENT_WBTC // 10, who("alice")),
            Succeeds(
                IncreasedBy(alice_wbtc, CENT_WBTC // 10),
                DecreasedBy(total_assets, CENT_WBTC // 10),
                DecreasedBy(alice_shares, CENT_WBTC // 10),
            ),
        ),
    ])


def test_withdraw_without_shares(runner, depositWbtc, alice):
    depositWbtc(alice, CENT_WBTC)

    runner.run([
        ScenarioStep(
            "bob withdraws alice's deposit",
            "bob",
            "EFVault",
            "withdraw",
            (CENT_WBTC, who("bob")),
            Reverts(RevertReason.INSUFFICIENT_SHARES, Unchanged(total_assets), Unchanged(alice_shares)),
        ),
    ])


############
# Leverage #
############


def test_raise_and_reduce_ltv(runner, depositWbtc, alice, blueprint):
    depositWbtc(alice, CENT_WBTC)
    raised = blueprint.PARAMS["SS_RAISED_LEVERAGE_RATIO"]
    lowered = blueprint.PARAMS["SS_MAX_LEVERAGE_RATIO"]
    hundred = blueprint.CONSTANTS.HUNDRED_PERCENT

    runner.run([
        ScenarioStep("alice raises ltv", "alice", SS, "raiseLTV", (), Reverts(RevertReason.NOT_OWNER, Unchanged(ltv))),
        ScenarioStep("set mlr to 69%", "deployer", SS, "setMLR", (raised,), Succeeds(Equals(Read(SS, "mlr"), raised))),
        ScenarioStep("raise ltv", "deployer", SS, "raiseLTV", (), Succeeds(MovedToward(ltv, Fraction(raised, hundred)))),
        ScenarioStep("set mlr to 67.5%", "deployer", SS, "setMLR", (lowered,)),
        ScenarioStep(
            "reduce ltv",
            "deployer",
            SS,
            "reduceLTV",
            (),
            Succeeds(MovedToward(ltv, Fraction(lowered, hundred)), NotIncreased(ltv), Unchanged(collateral)),
        ),
    ])


def test_invalid_mlr(runner):
    runner.run([
        ScenarioStep(
            "set mlr above 100%",
            "deployer",
            SS,
            "setMLR",
            (10001,),
            Reverts(RevertReason.INVALID_RATIO, Unchanged(Read(SS, "mlr"))),
        ),
    ])


##############
# Owner Only #
##############


def test_owner_deposit_harvest_emergency_withdraw(runner, fundWbtc, deploy3r):
    fundWbtc(deploy3r, ONE_WBTC)
    ss_wbtc = Read("WBTC", "balanceOf", ref(SS))

    runner.run([
        ScenarioStep(
            "alice owner-deposits",
            "alice",
            SS,
            "ownerDeposit",
            (CENT_WBTC,),
            Reverts(RevertReason.NOT_OWNER, Unchanged(collateral)),
        ),
        ScenarioStep("approve sub strategy", "deployer", "WBTC", "approve", (ref(SS), CENT_WBTC)),
        ScenarioStep(
            "owner deposits 0.01 WBTC",
            "deployer",
            SS,
            "ownerDeposit",
            (CENT_WBTC,),
            Succeeds(IncreasedBy(collateral, CENT_WBTC), DecreasedBy(deployer_wbtc, CENT_WBTC)),
        ),
        ScenarioStep("harvest", "deployer", SS, "harvest", (), Succeeds(IncreasedBy(Read(SS, "harvestCount"), 1))),
        ScenarioStep(
            "alice emergency-withdraws",
            "alice",
            SS,
            "emergencyWithdraw",
            (),
            Reverts(RevertReason.NOT_OWNER, Unchanged(collateral), Unchanged(ss_wbtc)),
        ),
        ScenarioStep(
            "owner emergency-withdraws",
            "deployer",
            SS,
            "emergencyWithdraw",
            (),
            Succeeds(Equals(collateral, 0), Equals(ss_wbtc, 0), IncreasedBy(deployer_wbtc, ss_wbtc)),
        ),
    ])


def test_scenario_steps_are_not_idempotent(runner):
    register = ScenarioStep(
        "register WBTCBorrowETH",
        "deployer",
        "Controller",
        "registerSubStrategy",
        (ref(SS), 100),
    )

    runner.execute(1, register)

    with pytest.raises(AssertionError, match="ALREADY_REGISTERED"):
        runner.execute(2, register)
