"""Prediction of the withdrawals the next block must include.

Mirrors the capella withdrawal sweep: starting from the state's
next_withdrawal_validator_index, validators are visited in registry order,
wrapping around, and each eligible one yields a full or partial withdrawal.
"""

import logging
from typing import Sequence

from ..exceptions import InvalidValidatorIndexError

logger = logging.getLogger(__name__)


def has_eth1_withdrawal_credential(validator, prefix: int) -> bool:
    """Check if the validator's withdrawal credentials carry the given type prefix."""
    return bytes(validator.withdrawal_credentials)[0] == prefix


def eth1_withdrawal_address(validator) -> bytes:
    """Execution address encoded in the last 20 bytes of the credentials."""
    return bytes(validator.withdrawal_credentials)[12:]


def is_fully_withdrawable_validator(validator, balance: int, epoch: int, spec) -> bool:
    """Check if validator is fully withdrawable.

    A validator is fully withdrawable if they have ETH1 withdrawal credentials,
    have reached their withdrawable epoch, and have a positive balance.
    """
    return (
        has_eth1_withdrawal_credential(validator, spec.eth1_address_withdrawal_prefix)
        and int(validator.withdrawable_epoch) <= epoch
        and balance > 0
    )


def is_partially_withdrawable_validator(validator, balance: int, spec) -> bool:
    """Check if validator is partially withdrawable.

    A validator is partially withdrawable if they have ETH1 withdrawal credentials,
    have max effective balance, and have excess balance.
    """
    max_effective = spec.max_effective_balance
    has_max_effective_balance = int(validator.effective_balance) == max_effective
    has_excess_balance = balance > max_effective
    return (
        has_eth1_withdrawal_credential(validator, spec.eth1_address_withdrawal_prefix)
        and has_max_effective_balance
        and has_excess_balance
    )


def compute_next_withdrawals(
    validators: Sequence,
    balances: Sequence[int],
    withdrawal_index: int,
    validator_index: int,
    epoch: int,
    spec,
) -> list:
    """Run the withdrawal sweep over a validator registry.

    Args:
        validators: Validator registry, in sweep order
        balances: Balances parallel to the registry
        withdrawal_index: Index assigned to the first emitted withdrawal
        validator_index: Sweep cursor, the first validator visited
        epoch: Epoch of the block the withdrawals are for
        spec: Network Spec providing the sweep and payload limits

    Returns:
        List of Withdrawal, at most spec.max_withdrawals_per_payload long

    Raises:
        InvalidValidatorIndexError: if the cursor or a visited index is
            outside the registry or the balance list
    """
    from ..spec.types import Withdrawal

    validator_count = len(validators)
    balance_count = len(balances)
    if validator_count == 0:
        return []

    validators_limit = min(validator_count, spec.max_validators_per_withdrawals_sweep)
    withdrawals_limit = spec.max_withdrawals_per_payload

    withdrawal_index = int(withdrawal_index)
    validator_index = int(validator_index)
    processed_count = 0
    withdrawals: list = []

    while processed_count < validators_limit and len(withdrawals) < withdrawals_limit:
        if validator_index >= validator_count or validator_index >= balance_count:
            raise InvalidValidatorIndexError(validator_index, validator_count, balance_count)

        validator = validators[validator_index]
        balance = int(balances[validator_index])

        if is_fully_withdrawable_validator(validator, balance, epoch, spec):
            amount = balance
        elif is_partially_withdrawable_validator(validator, balance, spec):
            amount = balance - spec.max_effective_balance
        else:
            amount = None

        if amount is not None:
            withdrawals.append(
                Withdrawal(
                    index=withdrawal_index,
                    validator_index=validator_index,
                    address=eth1_withdrawal_address(validator),
                    amount=amount,
                )
            )
            withdrawal_index += 1

        validator_index = (validator_index + 1) % validator_count
        processed_count += 1

    logger.debug(
        f"Withdrawal sweep: epoch={epoch}, visited={processed_count}, "
        f"withdrawals={len(withdrawals)}, next_validator_index={validator_index}"
    )
    return withdrawals
