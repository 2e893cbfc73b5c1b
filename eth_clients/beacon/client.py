"""Test-driver view of beacon nodes.

A BeaconClient wraps the Beacon API of one running node together with the
network parameters it resolves from it at init(). Everything timing related
(slot-based polling, genesis-relative lookups) requires init() first.
"""

import logging
import time
from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import urlparse

from ..config import ClientConfig
from ..crypto import ZERO_ROOT, compute_domain as _compute_domain
from ..exceptions import ClientNotInitializedError, ConfigError, NotFoundError
from ..spec.constants import get_preset
from ..spec.network_config import Spec
from ..utils import shorten
from .api import BeaconAPI
from .polling import TRANSIENT_ERRORS, poll_until, resolve_all, retry_until_ready
from .types import BlockHeaderInfo, FinalityCheckpoints
from .versioned import VersionedBeaconState, VersionedSignedBeaconBlock

logger = logging.getLogger(__name__)

DEFAULT_P2P_PORT = 9000


@dataclass
class BeaconClientConfig:
    """Per-node settings; spec and genesis fields are filled in by init()."""

    client_index: int = 0
    subnet: str = ""
    spec: Optional[Spec] = None
    genesis_time: Optional[int] = None
    genesis_validators_root: Optional[bytes] = None
    p2p_port: int = DEFAULT_P2P_PORT


class BeaconClient:
    """One beacon node reachable over the Beacon API."""

    def __init__(
        self,
        api_url: str,
        config: Optional[BeaconClientConfig] = None,
        client_name: str = "beacon",
        settings: Optional[ClientConfig] = None,
    ):
        self.config = config or BeaconClientConfig()
        self.client_name = client_name
        self.settings = settings or ClientConfig()
        self.api = BeaconAPI(api_url, rpc_timeout=self.settings.rpc_timeout)

    @property
    def label(self) -> str:
        return f"beacon {self.config.client_index} ({self.client_name})"

    @property
    def spec(self) -> Spec:
        if self.config.spec is None:
            raise ClientNotInitializedError(f"{self.label}: spec not resolved, call init() first")
        return self.config.spec

    @property
    def genesis_time(self) -> int:
        if self.config.genesis_time is None:
            raise ClientNotInitializedError(f"{self.label}: genesis not resolved, call init() first")
        return self.config.genesis_time

    @property
    def genesis_validators_root(self) -> bytes:
        if self.config.genesis_validators_root is None:
            raise ClientNotInitializedError(f"{self.label}: genesis not resolved, call init() first")
        return self.config.genesis_validators_root

    def current_slot(self) -> int:
        """Wall-clock slot of the node's network."""
        return self.spec.time_to_slot(int(time.time()), self.genesis_time)

    # Initialization

    async def init(self, timeout: Optional[float] = None) -> None:
        """Resolve whichever of spec and genesis are not configured yet.

        Both are fetched concurrently, retrying every init_poll_interval
        seconds while the node is not serving them.

        Raises:
            ConfigError: if the node's config cannot be used
            PollTimeoutError: if `timeout` passes first
        """
        tasks = []
        if self.config.spec is None:
            tasks.append(self._resolve_spec())
        if self.config.genesis_time is None or self.config.genesis_validators_root is None:
            tasks.append(self._resolve_genesis())
        if not tasks:
            return
        await resolve_all(*tasks, timeout=timeout, what=f"{self.label} init")
        logger.info(
            f"{self.label}: initialized, config={self.config.spec.config_name}, "
            f"genesis_time={self.config.genesis_time}"
        )

    async def _resolve_spec(self) -> None:
        async def request():
            return await self.api.get_spec() or None

        data = await retry_until_ready(
            request, self.settings.init_poll_interval, what=f"{self.label} spec"
        )
        spec = Spec.from_config(data)
        if spec.preset_base != get_preset():
            raise ConfigError(
                f"{self.label} runs preset {spec.preset_base}, "
                f"but SSZ types were built for {get_preset()}"
            )
        self.config.spec = spec

    async def _resolve_genesis(self) -> None:
        genesis = await retry_until_ready(
            self.api.get_genesis, self.settings.init_poll_interval, what=f"{self.label} genesis"
        )
        self.config.genesis_time = genesis.genesis_time
        self.config.genesis_validators_root = genesis.genesis_validators_root

    # Waits

    async def wait_for_execution_payload(self, timeout: Optional[float] = None) -> bytes:
        """Wait until the canonical head carries a non-empty execution payload.

        Polls once per slot. Returns the payload's block hash.
        """
        spec = self.spec
        genesis_time = self.genesis_time
        logger.info(f"Waiting for execution payload on {self.label}")

        async def check() -> Optional[bytes]:
            real_time_slot = spec.time_to_slot(int(time.time()), genesis_time)
            head = await self.api.get_header("head")
            if not head.canonical:
                return None

            try:
                block = await self.api.get_block(head.root)
            except TRANSIENT_ERRORS as e:
                logger.debug(f"{self.label}: head block {shorten(head.root)} not available: {e}")
                return None
            execution = block.execution_payload_block_hash or ZERO_ROOT

            logger.info(
                f"WaitForExecutionPayload: {self.label}: slot={head.slot}, "
                f"realTimeSlot={real_time_slot}, head={shorten(head.root)}, "
                f"exec={shorten(execution)}"
            )
            if execution != ZERO_ROOT:
                return execution
            return None

        return await poll_until(
            check,
            spec.seconds_per_slot,
            timeout=timeout,
            what=f"execution payload on {self.label}",
        )

    async def wait_for_optimistic_state(
        self,
        block_id,
        optimistic: bool,
        timeout: Optional[float] = None,
    ) -> BlockHeaderInfo:
        """Wait until the block's execution_optimistic flag equals `optimistic`.

        Polls once per slot; an unknown block counts as not yet and a missing
        flag as False. Returns the block's header once the flag matches.
        """
        spec = self.spec
        logger.info(f"Waiting for optimistic sync on {self.label}")

        async def check() -> Optional[BlockHeaderInfo]:
            try:
                flag = await self.api.get_block_is_optimistic(block_id)
            except (*TRANSIENT_ERRORS, ValueError) as e:
                logger.debug(f"{self.label}: optimistic flag of {block_id} unavailable: {e}")
                return None
            # An omitted flag reads as not optimistic
            if bool(flag) != optimistic:
                return None
            return await self.api.get_header(block_id)

        return await poll_until(
            check,
            spec.seconds_per_slot,
            timeout=timeout,
            what=f"optimistic={optimistic} for block {block_id} on {self.label}",
        )

    # Blocks

    async def block(self, block_id) -> VersionedSignedBeaconBlock:
        return await self.api.get_block(block_id)

    async def block_root(self, block_id) -> bytes:
        return await self.api.get_block_root(block_id)

    async def block_header(self, block_id) -> BlockHeaderInfo:
        return await self.api.get_header(block_id)

    async def block_is_optimistic(self, block_id) -> Optional[bool]:
        return await self.api.get_block_is_optimistic(block_id)

    async def blob_sidecars(self, block_id) -> list:
        return await self.api.get_blob_sidecars(block_id)

    # States

    async def state(self, state_id) -> VersionedBeaconState:
        return await self.api.get_state(state_id)

    async def state_by_block(self, block_id) -> VersionedBeaconState:
        """State after the given block, looked up by the block's state root."""
        header = await self.api.get_header(block_id)
        return await self.api.get_state(bytes(header.header.message.state_root))

    async def state_validator(self, state_id, validator_id):
        return await self.api.get_state_validator(state_id, validator_id)

    async def state_validators(
        self,
        state_id,
        ids: Optional[Iterable] = None,
        statuses: Optional[Iterable[str]] = None,
    ) -> list:
        return await self.api.get_state_validators(state_id, ids, statuses)

    async def state_validator_balances(self, state_id, ids: Optional[Iterable] = None) -> list:
        return await self.api.get_state_validator_balances(state_id, ids)

    async def state_finality_checkpoints(self, state_id) -> FinalityCheckpoints:
        return await self.api.get_finality_checkpoints(state_id)

    async def block_finality_checkpoints(self, block_id) -> FinalityCheckpoints:
        """Finality checkpoints of the state after a block.

        Looks the state up by root first, then by slot for nodes that do not
        index states by root.
        """
        header = await self.api.get_header(block_id)
        message = header.header.message
        try:
            return await self.api.get_finality_checkpoints(bytes(message.state_root))
        except TRANSIENT_ERRORS as e:
            logger.debug(f"{self.label}: checkpoints by state root failed ({e}), retrying by slot")
            return await self.api.get_finality_checkpoints(int(message.slot))

    async def state_fork(self, state_id):
        return await self.api.get_fork(state_id)

    async def state_randao_mix(self, state_id, epoch: Optional[int] = None) -> bytes:
        return await self.api.get_randao(state_id, epoch)

    async def expected_withdrawals(self, state_id) -> list:
        return await self.api.get_expected_withdrawals(state_id)

    async def compute_next_withdrawals(self, state_id, slot: int) -> list:
        """Predict the withdrawals of the block at `slot` built on a state."""
        spec = self.spec
        state = await self.api.get_state(state_id)
        return state.next_withdrawals(slot, spec)

    async def proposer_index(self, slot: int) -> int:
        epoch = self.spec.slot_to_epoch(slot)
        for duty in await self.api.get_proposer_duties(epoch):
            if duty.slot == slot:
                return duty.validator_index
        raise NotFoundError(f"no proposer duty found for slot {slot}")

    async def compute_domain(self, domain_type: bytes, version: Optional[bytes] = None) -> bytes:
        """Signing domain on this node's network.

        Without an explicit fork version, the head state's current version
        is used.
        """
        genesis_validators_root = self.genesis_validators_root
        if version is None:
            state = await self.state_by_block("head")
            version = bytes(state.current_version)
        return _compute_domain(domain_type, version, genesis_validators_root)

    # Pool submissions

    async def submit_voluntary_exit(self, signed_exit) -> None:
        await self.api.submit_voluntary_exit(signed_exit)

    async def submit_pool_bls_to_execution_change(self, changes: list) -> None:
        await self.api.submit_bls_to_execution_changes(changes)

    # Networking

    async def enr(self) -> str:
        identity = await self.api.get_identity()
        return identity.enr

    async def p2p_addr(self) -> str:
        identity = await self.api.get_identity()
        host = urlparse(self.api.base_url).hostname
        return f"/ip4/{host}/tcp/{self.config.p2p_port}/p2p/{identity.peer_id}"

    # Chain walks

    async def get_latest_execution_beacon_block(self) -> Optional[VersionedSignedBeaconBlock]:
        """Most recent block, walking back from the head, with a non-empty payload."""
        head = await self.api.get_header("head")
        for slot in range(head.slot, 0, -1):
            try:
                block = await self.api.get_block(slot)
            except NotFoundError:
                continue
            block_hash = block.execution_payload_block_hash
            if block_hash is not None and block_hash != ZERO_ROOT:
                return block
        return None

    async def get_first_execution_beacon_block(self) -> Optional[VersionedSignedBeaconBlock]:
        """Earliest block, up to the current wall-clock slot, with a non-empty payload."""
        last_slot = self.current_slot()
        for slot in range(0, last_slot + 1):
            try:
                block = await self.api.get_block(slot)
            except TRANSIENT_ERRORS:
                continue
            block_hash = block.execution_payload_block_hash
            if block_hash is not None and block_hash != ZERO_ROOT:
                return block
        return None

    async def get_beacon_block_by_execution_hash(
        self, block_hash: bytes
    ) -> Optional[VersionedSignedBeaconBlock]:
        """Block whose execution payload has the given hash, searching back from head."""
        head = await self.api.get_header("head")
        block_hash = bytes(block_hash)
        for slot in range(head.slot, 0, -1):
            try:
                block = await self.api.get_block(slot)
            except TRANSIENT_ERRORS:
                continue
            if block.execution_payload_block_hash == block_hash:
                return block
        return None

    async def get_filled_slots_count_per_epoch(self) -> dict[int, int]:
        """Number of blocks per epoch on the canonical chain, head to genesis."""
        slots_per_epoch = self.spec.slots_per_epoch
        counts: dict[int, int] = {}
        header = await self.api.get_header("head")
        while True:
            message = header.header.message
            epoch = int(message.slot) // slots_per_epoch
            counts[epoch] = counts.get(epoch, 0) + 1
            parent_root = bytes(message.parent_root)
            if parent_root == ZERO_ROOT:
                break
            header = await self.api.get_header(parent_root)
        return counts

    async def status_line(self) -> str:
        """One-line summary of the node's head; unreachable parts stay blank."""
        slot = 0
        version = ""
        head = ""
        justified = ""
        finalized = ""
        execution = "0x0000..0000"

        try:
            header = await self.api.get_header("head")
            slot = header.slot
            head = shorten(header.root)
        except TRANSIENT_ERRORS as e:
            logger.debug(f"{self.label}: head header unavailable: {e}")
        try:
            checkpoints = await self.block_finality_checkpoints("head")
            justified = shorten(bytes(checkpoints.current_justified.root))
            finalized = shorten(bytes(checkpoints.finalized.root))
        except TRANSIENT_ERRORS as e:
            logger.debug(f"{self.label}: checkpoints unavailable: {e}")
        try:
            block = await self.api.get_block("head")
            version = block.version.value
            if block.execution_payload_block_hash is not None:
                execution = shorten(block.execution_payload_block_hash)
        except TRANSIENT_ERRORS as e:
            logger.debug(f"{self.label}: head block unavailable: {e}")

        return (
            f"fork={version}, slot={slot}, head={head}, exec_payload={execution}, "
            f"justified={justified}, finalized={finalized}"
        )

    async def close(self) -> None:
        await self.api.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return f"BeaconClient({self.label}, {self.api.base_url})"


class BeaconClients(list):
    """A group of beacon clients, e.g. all nodes of a test network."""

    def subnet(self, name: str) -> "BeaconClients":
        """Clients on the given subnet; all of them for an empty name."""
        if not name:
            return self
        return BeaconClients(bn for bn in self if bn.config.subnet == name)

    async def enrs(self) -> str:
        """Comma-separated ENRs of all clients."""
        return ",".join([await bn.enr() for bn in self])

    async def p2p_addrs(self) -> str:
        """Comma-separated libp2p multiaddresses of all clients."""
        return ",".join([await bn.p2p_addr() for bn in self])

    async def get_beacon_block_by_execution_hash(
        self, block_hash: bytes
    ) -> Optional[VersionedSignedBeaconBlock]:
        for bn in self:
            block = await bn.get_beacon_block_by_execution_hash(block_hash)
            if block is not None:
                return block
        return None

    async def submit_pool_bls_to_execution_change(self, changes: list) -> None:
        for bn in self:
            await bn.submit_pool_bls_to_execution_change(changes)

    async def print_status(self) -> None:
        for i, bn in enumerate(self):
            logger.info(f"beacon {i} ({bn.client_name}): {await bn.status_line()}")

    async def close(self) -> None:
        for bn in self:
            await bn.close()
