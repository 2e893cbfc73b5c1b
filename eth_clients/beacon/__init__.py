"""Beacon node access for test drivers: fork-aware data, withdrawals, waits."""

from .types import (
    ExecutableData,
    BlockHeaderInfo,
    GenesisInfo,
    FinalityCheckpoints,
    ValidatorResponse,
    ValidatorBalanceResponse,
    ProposerDuty,
    NodeIdentity,
)
from .versioned import (
    Fork,
    VersionedBeaconState,
    VersionedSignedBeaconBlock,
    kzg_commitments_to_versioned_hashes,
)
from .withdrawals import (
    compute_next_withdrawals,
    eth1_withdrawal_address,
    has_eth1_withdrawal_credential,
    is_fully_withdrawable_validator,
    is_partially_withdrawable_validator,
)
from .polling import poll_until, resolve_all, retry_until_ready
from .api import BeaconAPI
from .client import BeaconClient, BeaconClientConfig, BeaconClients

__all__ = [
    "BeaconAPI",
    "BeaconClient",
    "BeaconClientConfig",
    "BeaconClients",
    "Fork",
    "VersionedBeaconState",
    "VersionedSignedBeaconBlock",
    "kzg_commitments_to_versioned_hashes",
    "compute_next_withdrawals",
    "eth1_withdrawal_address",
    "has_eth1_withdrawal_credential",
    "is_fully_withdrawable_validator",
    "is_partially_withdrawable_validator",
    "poll_until",
    "resolve_all",
    "retry_until_ready",
    "ExecutableData",
    "BlockHeaderInfo",
    "GenesisInfo",
    "FinalityCheckpoints",
    "ValidatorResponse",
    "ValidatorBalanceResponse",
    "ProposerDuty",
    "NodeIdentity",
]
