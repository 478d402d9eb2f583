import pytest

from scripts.utils import json_file
from scripts.utils.errors import DuplicateNameError, UnresolvedReferenceError
from scripts.utils.registry import DeployedContract, Registry, load_snapshot


def test_register_and_resolve():
    registry = Registry()
    registry.register("EFVault", DeployedContract("EFVault", "0x01"))

    assert "EFVault" in registry
    assert registry.resolve("EFVault").address == "0x01"
    assert registry.address_of("EFVault") == "0x01"
    assert len(registry) == 1


def test_register_duplicate_name():
    registry = Registry()
    registry.register("Controller", DeployedContract("Controller", "0x01"))

    with pytest.raises(DuplicateNameError) as e:
        registry.register("Controller", DeployedContract("Controller", "0x02"))

    assert e.value.name == "Controller"
    # first registration is kept
    assert registry.address_of("Controller") == "0x01"


def test_resolve_missing_name():
    registry = Registry()

    with pytest.raises(UnresolvedReferenceError) as e:
        registry.resolve("Controller", needed_by="WBTCBorrowETH")

    assert e.value.name == "Controller"
    assert "needed by WBTCBorrowETH" in str(e.value)


def test_repoint_keeps_position():
    registry = Registry()
    registry.attach("EFVaultImplementation", "0x01")
    registry.attach("EFVault", "0x02")

    registry.repoint("EFVaultImplementation", "0x03")

    assert registry.names() == ["EFVaultImplementation", "EFVault"]
    assert registry.address_of("EFVaultImplementation") == "0x03"


def test_repoint_unknown_name():
    with pytest.raises(UnresolvedReferenceError):
        Registry().repoint("EFVaultImplementation", "0x03")


def test_snapshot_keeps_deployment_order():
    registry = Registry()
    for i, name in enumerate(["DepositApprover", "EFVault", "Controller", "WBTCBorrowETH"]):
        registry.attach(name, f"0x0{i}")

    snapshot = registry.snapshot()

    assert list(snapshot) == ["DepositApprover", "EFVault", "Controller", "WBTCBorrowETH"]
    assert snapshot["Controller"] == "0x02"
    assert [c.name for c in registry] == list(snapshot)


def test_save_merges_existing_snapshot(tmp_path):
    filename = str(tmp_path / "local" / "address.json")
    json_file.save(filename, {"WBTCBorrowETH-2": "0xaa", "EFVault": "0xold"})

    registry = Registry()
    registry.attach("EFVault", "0xnew")
    registry.save(filename)

    assert load_snapshot(filename) == {"WBTCBorrowETH-2": "0xaa", "EFVault": "0xnew"}


def test_save_without_merge_overwrites(tmp_path):
    filename = str(tmp_path / "address.json")
    json_file.save(filename, {"Old": "0xaa"})

    registry = Registry()
    registry.attach("EFVault", "0x01")
    registry.save(filename, merge_existing=False)

    assert load_snapshot(filename) == {"EFVault": "0x01"}


def test_load_snapshot_rejects_non_mapping(tmp_path):
    filename = str(tmp_path / "address.json")
    json_file.save(filename, ["0x01"])

    with pytest.raises(ValueError):
        load_snapshot(filename)
