"""Beacon API response models and the Engine API executable payload."""

from dataclasses import dataclass, field
from typing import Optional

from ..utils import from_hex, to_hex


def _int(value) -> int:
    if isinstance(value, str):
        return int(value, 16) if value.startswith("0x") else int(value)
    return int(value)


@dataclass
class ExecutableData:
    """Execution payload as the Engine API sees it.

    Built from a block's SSZ execution payload. withdrawals is None before
    capella; the blob gas fields are None before deneb.
    """

    parent_hash: bytes
    fee_recipient: bytes
    state_root: bytes
    receipts_root: bytes
    logs_bloom: bytes
    prev_randao: bytes
    block_number: int
    gas_limit: int
    gas_used: int
    timestamp: int
    extra_data: bytes
    base_fee_per_gas: int
    block_hash: bytes
    transactions: list[bytes] = field(default_factory=list)
    withdrawals: Optional[list] = None
    blob_gas_used: Optional[int] = None
    excess_blob_gas: Optional[int] = None

    @classmethod
    def from_payload(cls, payload) -> "ExecutableData":
        data = cls(
            parent_hash=bytes(payload.parent_hash),
            fee_recipient=bytes(payload.fee_recipient),
            state_root=bytes(payload.state_root),
            receipts_root=bytes(payload.receipts_root),
            logs_bloom=bytes(payload.logs_bloom),
            prev_randao=bytes(payload.prev_randao),
            block_number=int(payload.block_number),
            gas_limit=int(payload.gas_limit),
            gas_used=int(payload.gas_used),
            timestamp=int(payload.timestamp),
            extra_data=bytes(payload.extra_data),
            base_fee_per_gas=int(payload.base_fee_per_gas),
            block_hash=bytes(payload.block_hash),
            transactions=[tx.encode_bytes() for tx in payload.transactions],
        )
        if hasattr(payload, "withdrawals"):
            data.withdrawals = list(payload.withdrawals)
        if hasattr(payload, "blob_gas_used"):
            data.blob_gas_used = int(payload.blob_gas_used)
        if hasattr(payload, "excess_blob_gas"):
            data.excess_blob_gas = int(payload.excess_blob_gas)
        return data

    def to_dict(self) -> dict:
        """Render in Engine API JSON format."""
        result = {
            "parentHash": to_hex(self.parent_hash),
            "feeRecipient": to_hex(self.fee_recipient),
            "stateRoot": to_hex(self.state_root),
            "receiptsRoot": to_hex(self.receipts_root),
            "logsBloom": to_hex(self.logs_bloom),
            "prevRandao": to_hex(self.prev_randao),
            "blockNumber": hex(self.block_number),
            "gasLimit": hex(self.gas_limit),
            "gasUsed": hex(self.gas_used),
            "timestamp": hex(self.timestamp),
            "extraData": to_hex(self.extra_data),
            "baseFeePerGas": hex(self.base_fee_per_gas),
            "blockHash": to_hex(self.block_hash),
            "transactions": [to_hex(tx) for tx in self.transactions],
        }
        if self.withdrawals is not None:
            result["withdrawals"] = [
                {
                    "index": hex(int(w.index)),
                    "validatorIndex": hex(int(w.validator_index)),
                    "address": to_hex(bytes(w.address)),
                    "amount": hex(int(w.amount)),
                }
                for w in self.withdrawals
            ]
        if self.blob_gas_used is not None:
            result["blobGasUsed"] = hex(self.blob_gas_used)
        if self.excess_blob_gas is not None:
            result["excessBlobGas"] = hex(self.excess_blob_gas)
        return result


@dataclass
class BlockHeaderInfo:
    """Response from /eth/v1/beacon/headers/{block_id}."""

    root: bytes
    canonical: bool
    header: object  # SignedBeaconBlockHeader
    execution_optimistic: bool = False
    finalized: bool = False

    @property
    def slot(self) -> int:
        return int(self.header.message.slot)

    @classmethod
    def from_dict(cls, response: dict) -> "BlockHeaderInfo":
        from ..spec.types import BeaconBlockHeader, SignedBeaconBlockHeader

        data = response["data"]
        message = data["header"]["message"]
        header = SignedBeaconBlockHeader(
            message=BeaconBlockHeader(
                slot=_int(message["slot"]),
                proposer_index=_int(message["proposer_index"]),
                parent_root=from_hex(message["parent_root"]),
                state_root=from_hex(message["state_root"]),
                body_root=from_hex(message["body_root"]),
            ),
            signature=from_hex(data["header"]["signature"]),
        )
        return cls(
            root=from_hex(data["root"]),
            canonical=bool(data.get("canonical", False)),
            header=header,
            execution_optimistic=bool(response.get("execution_optimistic", False)),
            finalized=bool(response.get("finalized", False)),
        )


@dataclass
class GenesisInfo:
    genesis_time: int
    genesis_validators_root: bytes
    genesis_fork_version: bytes

    @classmethod
    def from_dict(cls, data: dict) -> "GenesisInfo":
        return cls(
            genesis_time=_int(data["genesis_time"]),
            genesis_validators_root=from_hex(data["genesis_validators_root"]),
            genesis_fork_version=from_hex(data["genesis_fork_version"]),
        )


def _checkpoint(data: dict):
    from ..spec.types import Checkpoint

    return Checkpoint(epoch=_int(data["epoch"]), root=from_hex(data["root"]))


@dataclass
class FinalityCheckpoints:
    previous_justified: object  # Checkpoint
    current_justified: object
    finalized: object

    @classmethod
    def from_dict(cls, data: dict) -> "FinalityCheckpoints":
        return cls(
            previous_justified=_checkpoint(data["previous_justified"]),
            current_justified=_checkpoint(data["current_justified"]),
            finalized=_checkpoint(data["finalized"]),
        )


@dataclass
class ValidatorResponse:
    """One entry of the state validators endpoints."""

    index: int
    balance: int
    status: str
    validator: object  # Validator

    @classmethod
    def from_dict(cls, data: dict) -> "ValidatorResponse":
        from ..spec.types import Validator

        v = data["validator"]
        validator = Validator(
            pubkey=from_hex(v["pubkey"]),
            withdrawal_credentials=from_hex(v["withdrawal_credentials"]),
            effective_balance=_int(v["effective_balance"]),
            slashed=bool(v["slashed"]),
            activation_eligibility_epoch=_int(v["activation_eligibility_epoch"]),
            activation_epoch=_int(v["activation_epoch"]),
            exit_epoch=_int(v["exit_epoch"]),
            withdrawable_epoch=_int(v["withdrawable_epoch"]),
        )
        return cls(
            index=_int(data["index"]),
            balance=_int(data["balance"]),
            status=data["status"],
            validator=validator,
        )


@dataclass
class ValidatorBalanceResponse:
    index: int
    balance: int

    @classmethod
    def from_dict(cls, data: dict) -> "ValidatorBalanceResponse":
        return cls(index=_int(data["index"]), balance=_int(data["balance"]))


@dataclass
class ProposerDuty:
    pubkey: bytes
    validator_index: int
    slot: int

    @classmethod
    def from_dict(cls, data: dict) -> "ProposerDuty":
        return cls(
            pubkey=from_hex(data["pubkey"]),
            validator_index=_int(data["validator_index"]),
            slot=_int(data["slot"]),
        )


@dataclass
class NodeIdentity:
    """Subset of /eth/v1/node/identity the harness uses."""

    peer_id: str
    enr: str
    p2p_addresses: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "NodeIdentity":
        return cls(
            peer_id=data.get("peer_id", ""),
            enr=data.get("enr", ""),
            p2p_addresses=list(data.get("p2p_addresses", [])),
        )
