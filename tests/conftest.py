"""Pytest configuration and shared builders for the harness tests."""

import sys

import pytest

ETH1_CREDENTIALS_PREFIX = b"\x01" + b"\x00" * 11
BLS_CREDENTIALS_PREFIX = b"\x00"


def pytest_configure(config):
    """Set the minimal preset BEFORE any type module is imported.

    SSZ types use Vector[T, N()] where N() is evaluated at class definition
    time, so the preset has to be in place before collection imports them.
    """
    type_modules = [
        "eth_clients.spec.types",
        "eth_clients.spec.types.base",
        "eth_clients.spec.types.phase0",
        "eth_clients.spec.types.altair",
        "eth_clients.spec.types.bellatrix",
        "eth_clients.spec.types.capella",
        "eth_clients.spec.types.deneb",
    ]
    for mod in type_modules:
        if mod in sys.modules:
            del sys.modules[mod]

    from eth_clients.spec.constants import set_preset
    set_preset("minimal")


def address(n: int) -> bytes:
    """Deterministic 20-byte execution address."""
    return n.to_bytes(20, "big")


@pytest.fixture
def spec():
    """Minimal-preset network with every fork active from genesis."""
    from eth_clients.spec import Spec

    return Spec.minimal(
        altair_fork_epoch=0,
        bellatrix_fork_epoch=0,
        capella_fork_epoch=0,
        deneb_fork_epoch=0,
    )


@pytest.fixture
def make_validator():
    """Build a Validator with eth1 (0x01) credentials unless told otherwise."""
    from eth_clients.spec.constants import FAR_FUTURE_EPOCH, MAX_EFFECTIVE_BALANCE
    from eth_clients.spec.types import Validator

    def _make(
        index: int = 0,
        eth1: bool = True,
        effective_balance: int = MAX_EFFECTIVE_BALANCE,
        withdrawable_epoch: int = FAR_FUTURE_EPOCH,
    ):
        if eth1:
            credentials = ETH1_CREDENTIALS_PREFIX + address(index + 1)
        else:
            credentials = BLS_CREDENTIALS_PREFIX + bytes([index % 256]) * 31
        return Validator(
            pubkey=bytes([index % 256]) * 48,
            withdrawal_credentials=credentials,
            effective_balance=effective_balance,
            slashed=False,
            activation_eligibility_epoch=0,
            activation_epoch=0,
            exit_epoch=FAR_FUTURE_EPOCH,
            withdrawable_epoch=withdrawable_epoch,
        )

    return _make


@pytest.fixture
def make_state():
    """Build a VersionedBeaconState of the given fork."""
    from eth_clients.beacon.versioned import STATE_SCHEMAS, Fork, VersionedBeaconState

    def _make(version="capella", validators=(), balances=(), slot=0, **fields):
        fork = Fork.from_version(version)
        data = STATE_SCHEMAS[fork](
            slot=slot,
            validators=list(validators),
            balances=list(balances),
            **fields,
        )
        return VersionedBeaconState(fork, data)

    return _make


@pytest.fixture
def make_block():
    """Build a VersionedSignedBeaconBlock of the given fork.

    block_hash and commitments only apply to forks that carry them.
    """
    from eth_clients.beacon.versioned import BLOCK_SCHEMAS, Fork, VersionedSignedBeaconBlock

    def _make(
        fork="deneb",
        slot=1,
        parent_root=b"\x00" * 32,
        block_hash=None,
        commitments=(),
        withdrawals=(),
        graffiti=b"\x00" * 32,
    ):
        fork = Fork.from_version(fork)
        signed_cls = BLOCK_SCHEMAS[fork]
        block_cls = signed_cls.fields()["message"]
        body_cls = block_cls.fields()["body"]

        body_fields = {"graffiti": graffiti}
        if fork.at_least(Fork.BELLATRIX):
            payload_cls = body_cls.fields()["execution_payload"]
            payload_fields = {"block_number": slot}
            if block_hash is not None:
                payload_fields["block_hash"] = block_hash
            if fork.at_least(Fork.CAPELLA):
                payload_fields["withdrawals"] = list(withdrawals)
            body_fields["execution_payload"] = payload_cls(**payload_fields)
        if fork.at_least(Fork.DENEB):
            body_fields["blob_kzg_commitments"] = list(commitments)

        message = block_cls(
            slot=slot,
            proposer_index=slot % 8,
            parent_root=parent_root,
            body=body_cls(**body_fields),
        )
        return VersionedSignedBeaconBlock(fork, signed_cls(message=message))

    return _make
