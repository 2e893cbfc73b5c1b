"""Beacon HTTP API client."""

import logging
from typing import Any, Iterable, Optional

import aiohttp

from ..exceptions import BeaconAPIError, NotFoundError, UnknownSchemaError
from .encoding import to_api_json
from .types import (
    BlockHeaderInfo,
    FinalityCheckpoints,
    GenesisInfo,
    NodeIdentity,
    ProposerDuty,
    ValidatorBalanceResponse,
    ValidatorResponse,
)
from .versioned import VersionedBeaconState, VersionedSignedBeaconBlock

logger = logging.getLogger(__name__)

SSZ_CONTENT_TYPE = "application/octet-stream"
VERSION_HEADER = "Eth-Consensus-Version"


def _id(value) -> str:
    """Render a block, state or validator id for a URL path."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


def _join_ids(ids: Optional[Iterable]) -> Optional[str]:
    if ids is None:
        return None
    return ",".join(_id(i) for i in ids)


class BeaconAPI:
    """Client for the standard Beacon API of a single node.

    Every request is bounded by `rpc_timeout` seconds.
    """

    def __init__(self, base_url: str, rpc_timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.rpc_timeout = rpc_timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.rpc_timeout)
            )
        return self._session

    @staticmethod
    async def _raise_for_status(response: aiohttp.ClientResponse, what: str) -> None:
        if response.status == 404:
            raise NotFoundError(f"{what} not found")
        if response.status < 200 or response.status >= 300:
            text = await response.text()
            raise BeaconAPIError(response.status, text)

    async def _get_json(self, path: str, params: Optional[dict] = None) -> dict:
        session = await self._ensure_session()
        url = f"{self.base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        async with session.get(
            url, params=params or None, headers={"Accept": "application/json"}
        ) as response:
            await self._raise_for_status(response, path)
            return await response.json()

    async def _get_ssz(self, path: str) -> tuple[Optional[str], bytes]:
        session = await self._ensure_session()
        url = f"{self.base_url}{path}"

        async with session.get(url, headers={"Accept": SSZ_CONTENT_TYPE}) as response:
            await self._raise_for_status(response, path)
            version = response.headers.get(VERSION_HEADER)
            body = await response.read()
            logger.debug(f"GET {path}: version={version}, size={len(body)}")
            return version, body

    async def _post_json(self, path: str, payload: Any) -> None:
        session = await self._ensure_session()
        url = f"{self.base_url}{path}"

        async with session.post(url, json=payload) as response:
            await self._raise_for_status(response, path)

    async def get_spec(self) -> dict:
        """GET /eth/v1/config/spec, the raw `data` mapping."""
        data = await self._get_json("/eth/v1/config/spec")
        return data.get("data", {})

    async def get_genesis(self) -> GenesisInfo:
        data = await self._get_json("/eth/v1/beacon/genesis")
        return GenesisInfo.from_dict(data["data"])

    async def get_block(self, block_id: str) -> VersionedSignedBeaconBlock:
        """Fetch a signed block as SSZ and decode it with its fork's schema."""
        path = f"/eth/v2/beacon/blocks/{_id(block_id)}"
        version, body = await self._get_ssz(path)
        if version is None:
            raise UnknownSchemaError(f"<missing {VERSION_HEADER} header on {path}>")
        return VersionedSignedBeaconBlock.from_ssz_bytes(version, body)

    async def get_block_is_optimistic(self, block_id: str) -> Optional[bool]:
        """The execution_optimistic flag of a block, None if the node omits it."""
        data = await self._get_json(f"/eth/v2/beacon/blocks/{_id(block_id)}")
        optimistic = data.get("execution_optimistic")
        if optimistic is None:
            return None
        return bool(optimistic)

    async def get_block_root(self, block_id: str) -> bytes:
        data = await self._get_json(f"/eth/v1/beacon/blocks/{_id(block_id)}/root")
        return bytes.fromhex(data["data"]["root"][2:])

    async def get_header(self, block_id: str) -> BlockHeaderInfo:
        data = await self._get_json(f"/eth/v1/beacon/headers/{_id(block_id)}")
        return BlockHeaderInfo.from_dict(data)

    async def get_blob_sidecars(self, block_id: str) -> list:
        """Fetch the blob sidecars of a block as SSZ."""
        from ..spec.constants import MAX_BLOB_COMMITMENTS_PER_BLOCK
        from ..spec.types import BlobSidecar, List

        _, body = await self._get_ssz(f"/eth/v1/beacon/blob_sidecars/{_id(block_id)}")
        sidecars = List[BlobSidecar, MAX_BLOB_COMMITMENTS_PER_BLOCK()].decode_bytes(body)
        return list(sidecars)

    async def get_state(self, state_id: str) -> VersionedBeaconState:
        """Fetch a full beacon state as SSZ."""
        path = f"/eth/v2/debug/beacon/states/{_id(state_id)}"
        version, body = await self._get_ssz(path)
        if version is None:
            raise UnknownSchemaError(f"<missing {VERSION_HEADER} header on {path}>")
        return VersionedBeaconState.from_ssz_bytes(version, body)

    async def get_state_validator(self, state_id: str, validator_id) -> ValidatorResponse:
        data = await self._get_json(
            f"/eth/v1/beacon/states/{_id(state_id)}/validators/{_id(validator_id)}"
        )
        return ValidatorResponse.from_dict(data["data"])

    async def get_state_validators(
        self,
        state_id: str,
        ids: Optional[Iterable] = None,
        statuses: Optional[Iterable[str]] = None,
    ) -> list[ValidatorResponse]:
        data = await self._get_json(
            f"/eth/v1/beacon/states/{_id(state_id)}/validators",
            params={"id": _join_ids(ids), "status": _join_ids(statuses)},
        )
        return [ValidatorResponse.from_dict(v) for v in data.get("data", [])]

    async def get_state_validator_balances(
        self, state_id: str, ids: Optional[Iterable] = None
    ) -> list[ValidatorBalanceResponse]:
        data = await self._get_json(
            f"/eth/v1/beacon/states/{_id(state_id)}/validator_balances",
            params={"id": _join_ids(ids)},
        )
        return [ValidatorBalanceResponse.from_dict(v) for v in data.get("data", [])]

    async def get_finality_checkpoints(self, state_id: str) -> FinalityCheckpoints:
        data = await self._get_json(f"/eth/v1/beacon/states/{_id(state_id)}/finality_checkpoints")
        return FinalityCheckpoints.from_dict(data["data"])

    async def get_fork(self, state_id: str):
        """Fork of a state, as an SSZ Fork container."""
        from ..spec.types import Fork

        data = (await self._get_json(f"/eth/v1/beacon/states/{_id(state_id)}/fork"))["data"]
        return Fork(
            previous_version=bytes.fromhex(data["previous_version"][2:]),
            current_version=bytes.fromhex(data["current_version"][2:]),
            epoch=int(data["epoch"]),
        )

    async def get_randao(self, state_id: str, epoch: Optional[int] = None) -> bytes:
        data = await self._get_json(
            f"/eth/v1/beacon/states/{_id(state_id)}/randao", params={"epoch": epoch}
        )
        return bytes.fromhex(data["data"]["randao"][2:])

    async def get_expected_withdrawals(self, state_id: str) -> list:
        """Withdrawals the node expects in the block built on a state."""
        from ..spec.types import Withdrawal

        data = await self._get_json(f"/eth/v1/builder/states/{_id(state_id)}/expected_withdrawals")
        return [
            Withdrawal(
                index=int(w["index"]),
                validator_index=int(w["validator_index"]),
                address=bytes.fromhex(w["address"][2:]),
                amount=int(w["amount"]),
            )
            for w in data.get("data", [])
        ]

    async def get_proposer_duties(self, epoch: int) -> list[ProposerDuty]:
        data = await self._get_json(f"/eth/v1/validator/duties/proposer/{epoch}")
        return [ProposerDuty.from_dict(d) for d in data.get("data", [])]

    async def get_identity(self) -> NodeIdentity:
        data = await self._get_json("/eth/v1/node/identity")
        return NodeIdentity.from_dict(data["data"])

    async def submit_voluntary_exit(self, signed_exit) -> None:
        await self._post_json("/eth/v1/beacon/pool/voluntary_exits", to_api_json(signed_exit))

    async def submit_bls_to_execution_changes(self, changes: list) -> None:
        await self._post_json(
            "/eth/v1/beacon/pool/bls_to_execution_changes",
            [to_api_json(c) for c in changes],
        )

    async def close(self) -> None:
        """Close the client session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
