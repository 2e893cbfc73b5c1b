"""SSZ types for the consensus layer, phase0 through deneb.

Types are organized by the fork that introduced them:
- base.py: Basic types and primitives
- phase0.py: Phase 0 types
- altair.py: Altair types (sync committees)
- bellatrix.py: Bellatrix types (execution payload)
- capella.py: Capella types (withdrawals)
- deneb.py: Deneb types (blob commitments)

Container sizes depend on the active preset, so constants.set_preset() has
to run before this package is first imported.
"""

from .base import (
    uint8, uint64, uint256, boolean,
    Bytes4, Bytes20, Bytes32, Bytes48, Bytes96, ByteVector,
    Container, Vector, List,
    Bitvector, Bitlist,
    Slot, Epoch, ValidatorIndex, Gwei,
    Root, Hash32, Version, DomainType, Domain,
    BLSPubkey, BLSSignature, ExecutionAddress, WithdrawalIndex,
    ParticipationFlags, KZGCommitment, KZGProof,
    Transaction,
    Fork, ForkData, Checkpoint, SigningData,
)

from .phase0 import (
    Validator,
    AttestationData,
    Attestation,
    IndexedAttestation,
    AttesterSlashing,
    PendingAttestation,
    Eth1Data,
    BeaconBlockHeader,
    SignedBeaconBlockHeader,
    ProposerSlashing,
    DepositData,
    Deposit,
    VoluntaryExit,
    SignedVoluntaryExit,
    Phase0BeaconBlockBody,
    Phase0BeaconBlock,
    SignedPhase0BeaconBlock,
    Phase0BeaconState,
)

from .altair import (
    SyncCommittee,
    SyncAggregate,
    AltairBeaconBlockBody,
    AltairBeaconBlock,
    SignedAltairBeaconBlock,
    AltairBeaconState,
)

from .bellatrix import (
    ExecutionPayloadHeaderBellatrix,
    ExecutionPayloadBellatrix,
    BellatrixBeaconBlockBody,
    BellatrixBeaconBlock,
    SignedBellatrixBeaconBlock,
    BellatrixBeaconState,
)

from .capella import (
    Withdrawal,
    BLSToExecutionChange,
    SignedBLSToExecutionChange,
    HistoricalSummary,
    ExecutionPayloadHeaderCapella,
    ExecutionPayloadCapella,
    CapellaBeaconBlockBody,
    CapellaBeaconBlock,
    SignedCapellaBeaconBlock,
    CapellaBeaconState,
)

from .deneb import (
    Blob,
    BlobSidecar,
    ExecutionPayloadHeaderDeneb,
    ExecutionPayloadDeneb,
    DenebBeaconBlockBody,
    DenebBeaconBlock,
    SignedDenebBeaconBlock,
    DenebBeaconState,
)

__all__ = [
    # Base
    "uint8", "uint64", "uint256", "boolean",
    "Bytes4", "Bytes20", "Bytes32", "Bytes48", "Bytes96", "ByteVector",
    "Container", "Vector", "List", "Bitvector", "Bitlist",
    "Slot", "Epoch", "ValidatorIndex", "Gwei",
    "Root", "Hash32", "Version", "DomainType", "Domain",
    "BLSPubkey", "BLSSignature", "ExecutionAddress", "WithdrawalIndex",
    "ParticipationFlags", "KZGCommitment", "KZGProof", "Transaction",
    "Fork", "ForkData", "Checkpoint", "SigningData",
    # Phase 0
    "Validator", "AttestationData", "Attestation", "IndexedAttestation",
    "AttesterSlashing", "PendingAttestation", "Eth1Data",
    "BeaconBlockHeader", "SignedBeaconBlockHeader",
    "ProposerSlashing", "DepositData", "Deposit",
    "VoluntaryExit", "SignedVoluntaryExit",
    "Phase0BeaconBlockBody", "Phase0BeaconBlock", "SignedPhase0BeaconBlock",
    "Phase0BeaconState",
    # Altair
    "SyncCommittee", "SyncAggregate",
    "AltairBeaconBlockBody", "AltairBeaconBlock", "SignedAltairBeaconBlock",
    "AltairBeaconState",
    # Bellatrix
    "ExecutionPayloadHeaderBellatrix", "ExecutionPayloadBellatrix",
    "BellatrixBeaconBlockBody", "BellatrixBeaconBlock", "SignedBellatrixBeaconBlock",
    "BellatrixBeaconState",
    # Capella
    "Withdrawal", "BLSToExecutionChange", "SignedBLSToExecutionChange",
    "HistoricalSummary",
    "ExecutionPayloadHeaderCapella", "ExecutionPayloadCapella",
    "CapellaBeaconBlockBody", "CapellaBeaconBlock", "SignedCapellaBeaconBlock",
    "CapellaBeaconState",
    # Deneb
    "Blob", "BlobSidecar",
    "ExecutionPayloadHeaderDeneb", "ExecutionPayloadDeneb",
    "DenebBeaconBlockBody", "DenebBeaconBlock", "SignedDenebBeaconBlock",
    "DenebBeaconState",
]
