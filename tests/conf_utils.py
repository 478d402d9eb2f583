import pytest


##########
# Tokens #
##########


@pytest.fixture
def fundWbtc(deployed, deploy3r):
    def fundWbtc(_user, _amount):
        wbtc = deployed.handle_of("WBTC")
        wbtc.mint(_user, _amount, sender=deploy3r)
        return wbtc

    yield fundWbtc


@pytest.fixture
def depositWbtc(deployed, fundWbtc):
    def depositWbtc(_user, _amount):
        wbtc = fundWbtc(_user, _amount)
        approver = deployed.handle_of("DepositApprover")
        wbtc.approve(approver.address, _amount, sender=_user)
        return approver.deposit(_amount, sender=_user)

    yield depositWbtc
