"""
Merkle Proofs Convenience Wrappers
Allocation-level wrappers around the core tree functions.

This module provides class-based interfaces:
- MerkleProver: Generate proofs for allocations
- MerkleVerifier: Verify proofs given raw allocation values

These are convenience wrappers around the functions in merkle_tree.py and
the leaf codec, so callers never hash leaves by hand.
"""
from __future__ import annotations

from typing import Sequence

from core.codec.leaf_codec import Allocation, encode_leaf, leaf_digest
from core.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_proof,
    build_merkle_root,
    verify_merkle_proof,
    verify_proof,
)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs over allocations.

    Example:
        >>> proof = MerkleProver.prove_allocation(allocations, index=1)
        >>> proof.leaf == allocations[1].digest
        True
    """

    @staticmethod
    def prove(leaves: Sequence[bytes], index: int) -> MerkleProof:
        """
        Generate a Merkle proof for the leaf at the given index.

        Raises:
            IndexError: If index is out of range
            ValueError: If leaves is empty
        """
        return build_merkle_proof(leaves, index)

    @staticmethod
    def prove_allocation(allocations: Sequence[Allocation], index: int) -> MerkleProof:
        """Generate a proof for allocations[index]; leaves are digested first."""
        leaves = [allocation.digest for allocation in allocations]
        return build_merkle_proof(leaves, index)

    @staticmethod
    def compute_root_from_allocations(allocations: Sequence[Allocation]) -> bytes:
        """Compute the Merkle root for a sequence of allocations."""
        return build_merkle_root([allocation.digest for allocation in allocations])


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> MerkleVerifier.verify_allocation(address, amount, proof, root)
        True
    """

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        """Verify a MerkleProof against its own root."""
        return verify_merkle_proof(proof)

    @staticmethod
    def verify_leaf_in_root(
        leaf: bytes,
        siblings: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """Verify a leaf digest is included in a Merkle root."""
        return verify_proof(leaf, siblings, root)

    @staticmethod
    def verify_allocation(
        address: str,
        amount: int,
        siblings: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """
        Verify an (address, amount) pair is committed in a Merkle root.

        The pair is encoded and double-hashed exactly as the tree builder does.

        Raises:
            ValidationException: If address or amount is malformed
        """
        leaf = leaf_digest(encode_leaf(address, amount))
        return verify_proof(leaf, siblings, root)


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
