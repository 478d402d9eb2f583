from enum import Enum


# Revert strings raised by the vault system contracts.
# Mocks under contracts/mock revert with exactly these values.
class RevertReason(str, Enum):
    NOT_OWNER = "Ownable: caller is not the owner"
    ALREADY_INITIALIZED = "Initializable: contract is already initialized"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    EXCEED_TOTAL_DEPOSIT = "EXCEED_TOTAL_DEPOSIT"
    INSUFFICIENT_SHARES = "INSUFFICIENT_SHARES"
    ZERO_AMOUNT = "ZERO_AMOUNT"
    TRANSFER_FAILED = "TRANSFER_FAILED"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    INSUFFICIENT_ALLOWANCE = "INSUFFICIENT_ALLOWANCE"
    NO_PERMS = "NO_PERMS"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    INVALID_RATIO = "INVALID_RATIO"
    VAULT_NOT_SET = "VAULT_NOT_SET"
    CONTROLLER_NOT_SET = "CONTROLLER_NOT_SET"
    ONLY_VAULT = "ONLY_VAULT"
    ONLY_DEPOSIT_APPROVER = "ONLY_DEPOSIT_APPROVER"
    INVALID_IMPLEMENTATION = "ERC1967: new implementation is not a contract"

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, reason):
        """
        Maps a raw revert string onto the enumeration. Unknown reasons are
        returned unchanged so callers can still report them.
        """
        try:
            return cls(reason)
        except ValueError:
            return reason
