"""Fork-aware views over beacon states and signed blocks.

A beacon node tags every state and block it serves with the name of the fork
whose schema encodes it (the Eth-Consensus-Version header). The wrappers here
keep that tag next to the decoded SSZ object and answer field lookups for all
five supported forks, so callers never branch on the schema themselves.

Fields a fork does not have yet come back as None, with two exceptions: the
withdrawal cursors read as 0 before capella and the execution payload header
hash reads as the zero root before bellatrix.
"""

import logging
from enum import Enum
from typing import Optional

from ..crypto import ZERO_ROOT, hash_tree_root, kzg_commitment_to_versioned_hash
from ..exceptions import InvalidValidatorIndexError, UnknownSchemaError, UnsupportedVariantError
from ..spec.types import (
    Phase0BeaconState,
    AltairBeaconState,
    BellatrixBeaconState,
    CapellaBeaconState,
    DenebBeaconState,
    SignedPhase0BeaconBlock,
    SignedAltairBeaconBlock,
    SignedBellatrixBeaconBlock,
    SignedCapellaBeaconBlock,
    SignedDenebBeaconBlock,
)
from .types import ExecutableData
from .withdrawals import compute_next_withdrawals

logger = logging.getLogger(__name__)


class Fork(str, Enum):
    """Consensus forks, in activation order."""

    PHASE0 = "phase0"
    ALTAIR = "altair"
    BELLATRIX = "bellatrix"
    CAPELLA = "capella"
    DENEB = "deneb"

    @classmethod
    def from_version(cls, version) -> "Fork":
        if isinstance(version, cls):
            return version
        try:
            return cls(str(version).lower())
        except ValueError:
            raise UnknownSchemaError(str(version)) from None

    @property
    def order(self) -> int:
        return list(Fork).index(self)

    def at_least(self, other: "Fork") -> bool:
        return self.order >= other.order


STATE_SCHEMAS = {
    Fork.PHASE0: Phase0BeaconState,
    Fork.ALTAIR: AltairBeaconState,
    Fork.BELLATRIX: BellatrixBeaconState,
    Fork.CAPELLA: CapellaBeaconState,
    Fork.DENEB: DenebBeaconState,
}

BLOCK_SCHEMAS = {
    Fork.PHASE0: SignedPhase0BeaconBlock,
    Fork.ALTAIR: SignedAltairBeaconBlock,
    Fork.BELLATRIX: SignedBellatrixBeaconBlock,
    Fork.CAPELLA: SignedCapellaBeaconBlock,
    Fork.DENEB: SignedDenebBeaconBlock,
}


def _fork_of(value, schemas: dict) -> Fork:
    for fork, schema in schemas.items():
        if type(value) is schema:
            return fork
    raise UnknownSchemaError(type(value).__name__)


def kzg_commitments_to_versioned_hashes(commitments) -> list[bytes]:
    return [kzg_commitment_to_versioned_hash(bytes(c)) for c in commitments]


class _Versioned:
    schemas: dict = {}

    def __init__(self, version, data):
        self.version = Fork.from_version(version)
        schema = self.schemas[self.version]
        if type(data) is not schema:
            raise UnknownSchemaError(f"{self.version.value}/{type(data).__name__}")
        self.data = data

    @classmethod
    def from_value(cls, data):
        """Wrap an SSZ object, inferring the fork from its type."""
        return cls(_fork_of(data, cls.schemas), data)

    @classmethod
    def from_ssz_bytes(cls, version, data: bytes):
        fork = Fork.from_version(version)
        logger.debug(f"Decoding {fork.value} {cls.__name__} ({len(data)} bytes)")
        return cls(fork, cls.schemas[fork].decode_bytes(data))

    def encode_bytes(self) -> bytes:
        return self.data.encode_bytes()

    def _since(self, fork: Fork, obj, name: str):
        if not self.version.at_least(fork):
            return None
        return getattr(obj, name)

    def _require(self, fork: Fork, operation: str) -> None:
        if not self.version.at_least(fork):
            raise UnsupportedVariantError(self.version.value, operation)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.version.value}, slot={int(self.slot)})"


class VersionedBeaconState(_Versioned):
    """A beacon state of any supported fork."""

    schemas = STATE_SCHEMAS

    def root(self) -> bytes:
        return hash_tree_root(self.data)

    @property
    def genesis_time(self):
        return self.data.genesis_time

    @property
    def genesis_validators_root(self):
        return self.data.genesis_validators_root

    @property
    def fork(self):
        return self.data.fork

    @property
    def current_version(self):
        return self.data.fork.current_version

    @property
    def previous_version(self):
        return self.data.fork.previous_version

    @property
    def slot(self):
        return self.data.slot

    @property
    def latest_block_header(self):
        return self.data.latest_block_header

    @property
    def block_roots(self):
        return self.data.block_roots

    @property
    def state_roots(self):
        return self.data.state_roots

    @property
    def historical_roots(self):
        return self.data.historical_roots

    @property
    def eth1_data(self):
        return self.data.eth1_data

    @property
    def eth1_data_votes(self):
        return self.data.eth1_data_votes

    @property
    def eth1_deposit_index(self):
        return self.data.eth1_deposit_index

    @property
    def validators(self):
        return self.data.validators

    @property
    def balances(self):
        return self.data.balances

    def balance(self, index: int) -> int:
        balances = self.data.balances
        if index < 0 or index >= len(balances):
            raise InvalidValidatorIndexError(index, len(self.data.validators), len(balances))
        return int(balances[index])

    @property
    def randao_mixes(self):
        return self.data.randao_mixes

    @property
    def slashings(self):
        return self.data.slashings

    @property
    def justification_bits(self):
        return self.data.justification_bits

    @property
    def previous_justified_checkpoint(self):
        return self.data.previous_justified_checkpoint

    @property
    def current_justified_checkpoint(self):
        return self.data.current_justified_checkpoint

    @property
    def finalized_checkpoint(self):
        return self.data.finalized_checkpoint

    # phase0 only
    @property
    def previous_epoch_attestations(self):
        if self.version != Fork.PHASE0:
            return None
        return self.data.previous_epoch_attestations

    @property
    def current_epoch_attestations(self):
        if self.version != Fork.PHASE0:
            return None
        return self.data.current_epoch_attestations

    @property
    def previous_epoch_participation(self):
        return self._since(Fork.ALTAIR, self.data, "previous_epoch_participation")

    @property
    def current_epoch_participation(self):
        return self._since(Fork.ALTAIR, self.data, "current_epoch_participation")

    @property
    def inactivity_scores(self):
        return self._since(Fork.ALTAIR, self.data, "inactivity_scores")

    @property
    def current_sync_committee(self):
        return self._since(Fork.ALTAIR, self.data, "current_sync_committee")

    @property
    def next_sync_committee(self):
        return self._since(Fork.ALTAIR, self.data, "next_sync_committee")

    @property
    def latest_execution_payload_header(self):
        return self._since(Fork.BELLATRIX, self.data, "latest_execution_payload_header")

    @property
    def latest_execution_payload_header_hash(self) -> bytes:
        header = self.latest_execution_payload_header
        if header is None:
            return ZERO_ROOT
        return bytes(header.block_hash)

    @property
    def next_withdrawal_index(self) -> int:
        if not self.version.at_least(Fork.CAPELLA):
            return 0
        return int(self.data.next_withdrawal_index)

    @property
    def next_withdrawal_validator_index(self) -> int:
        if not self.version.at_least(Fork.CAPELLA):
            return 0
        return int(self.data.next_withdrawal_validator_index)

    @property
    def historical_summaries(self):
        return self._since(Fork.CAPELLA, self.data, "historical_summaries")

    def next_withdrawals(self, slot: int, spec) -> list:
        """Withdrawals the block at `slot` built on this state must carry."""
        self._require(Fork.BELLATRIX, "next_withdrawals")
        epoch = spec.slot_to_epoch(slot)
        return compute_next_withdrawals(
            self.data.validators,
            self.data.balances,
            self.next_withdrawal_index,
            self.next_withdrawal_validator_index,
            epoch,
            spec,
        )


class VersionedSignedBeaconBlock(_Versioned):
    """A signed beacon block of any supported fork."""

    schemas = BLOCK_SCHEMAS

    @property
    def message(self):
        return self.data.message

    def root(self) -> bytes:
        return hash_tree_root(self.data.message)

    @property
    def state_root(self):
        return self.data.message.state_root

    @property
    def parent_root(self):
        return self.data.message.parent_root

    @property
    def slot(self):
        return self.data.message.slot

    @property
    def proposer_index(self):
        return self.data.message.proposer_index

    @property
    def signature(self):
        return self.data.signature

    @property
    def body(self):
        return self.data.message.body

    @property
    def graffiti(self):
        return self.body.graffiti

    @property
    def voluntary_exits(self):
        return self.body.voluntary_exits

    @property
    def sync_aggregate(self):
        return self._since(Fork.ALTAIR, self.body, "sync_aggregate")

    def contains_execution_payload(self) -> bool:
        return self.version.at_least(Fork.BELLATRIX)

    def contains_kzg_commitments(self) -> bool:
        return self.version.at_least(Fork.DENEB)

    @property
    def execution_payload_block_hash(self) -> Optional[bytes]:
        if not self.contains_execution_payload():
            return None
        return bytes(self.body.execution_payload.block_hash)

    @property
    def kzg_commitments(self):
        return self._since(Fork.DENEB, self.body, "blob_kzg_commitments")

    def withdrawals(self):
        if not self.version.at_least(Fork.CAPELLA):
            return None
        return self.body.execution_payload.withdrawals

    @property
    def bls_to_execution_changes(self):
        return self._since(Fork.CAPELLA, self.body, "bls_to_execution_changes")

    def execution_payload(self) -> tuple[ExecutableData, Optional[list[bytes]], Optional[bytes]]:
        """Engine API view of the payload, its blob versioned hashes and the
        parent beacon block root.

        The last two are None before deneb.
        """
        self._require(Fork.BELLATRIX, "execution_payload")
        data = ExecutableData.from_payload(self.body.execution_payload)
        if not self.contains_kzg_commitments():
            return data, None, None
        hashes = kzg_commitments_to_versioned_hashes(self.body.blob_kzg_commitments)
        return data, hashes, bytes(self.parent_root)
