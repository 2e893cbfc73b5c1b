"""Hashing and domain utilities.

Signing itself belongs to the key-management collaborator; this module only
computes the roots and domains the harness compares or hands over to it.
"""

import hashlib
import logging
from typing import Optional

from ..spec.constants import VERSIONED_HASH_VERSION_KZG

logger = logging.getLogger(__name__)

ZERO_ROOT = b"\x00" * 32


def sha256(data: bytes) -> bytes:
    """Compute SHA256 hash."""
    return hashlib.sha256(data).digest()


def hash_tree_root(obj) -> bytes:
    """Compute the hash tree root of an SSZ object or return bytes directly.

    Args:
        obj: SSZ object with hash_tree_root() method, or 32-byte root

    Returns:
        32-byte hash tree root
    """
    if isinstance(obj, bytes):
        if len(obj) == 32:
            return obj
        raise ValueError(f"Expected 32-byte root, got {len(obj)} bytes")

    if hasattr(obj, "hash_tree_root"):
        root = obj.hash_tree_root()
        if isinstance(root, bytes):
            return root
        return bytes(root)

    raise TypeError(f"Cannot compute hash_tree_root of {type(obj)}")


def kzg_commitment_to_versioned_hash(commitment: bytes) -> bytes:
    """Versioned hash of a KZG commitment: version byte || sha256(c)[1:]."""
    return bytes([VERSIONED_HASH_VERSION_KZG]) + sha256(bytes(commitment))[1:]


def compute_fork_data_root(current_version: bytes, genesis_validators_root: bytes) -> bytes:
    """Return the 32-byte fork data root for a version and genesis validators root."""
    from ..spec.types import ForkData, Root, Version

    fork_data = ForkData(
        current_version=Version(current_version),
        genesis_validators_root=Root(genesis_validators_root),
    )
    return hash_tree_root(fork_data)


def compute_domain(
    domain_type: bytes,
    fork_version: Optional[bytes] = None,
    genesis_validators_root: Optional[bytes] = None,
) -> bytes:
    """Return the 32-byte signing domain.

    Args:
        domain_type: 4-byte domain type
        fork_version: 4-byte fork version (defaults to zeros)
        genesis_validators_root: 32-byte genesis validators root (defaults to zeros)
    """
    if len(domain_type) != 4:
        raise ValueError(f"Expected 4-byte domain type, got {len(domain_type)} bytes")
    if fork_version is None:
        fork_version = b"\x00\x00\x00\x00"
    if genesis_validators_root is None:
        genesis_validators_root = ZERO_ROOT

    fork_data_root = compute_fork_data_root(fork_version, genesis_validators_root)
    return bytes(domain_type) + fork_data_root[:28]


def compute_signing_root(obj, domain: bytes) -> bytes:
    """Compute the signing root for a message and domain.

    Args:
        obj: SSZ object or 32-byte root
        domain: 32-byte domain
    """
    from ..spec.types import SigningData, Root, Domain

    signing_data = SigningData(
        object_root=Root(hash_tree_root(obj)),
        domain=Domain(domain),
    )
    return hash_tree_root(signing_data)


__all__ = [
    "ZERO_ROOT",
    "sha256",
    "hash_tree_root",
    "kzg_commitment_to_versioned_hash",
    "compute_fork_data_root",
    "compute_domain",
    "compute_signing_root",
]
