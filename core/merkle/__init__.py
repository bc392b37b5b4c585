"""
Merkle Tree and Proofs
Deterministic Merkle tree construction + proof generation/verification.

This module provides:
- MerkleTree: immutable, addressable tree (levels, root, per-leaf proofs)
- next_level: the pairing + carry rule, one level at a time
- build_merkle_root / build_merkle_proof: one-shot helpers over leaf digests
- verify_proof: fold the sorted-pair hash over a proof and compare roots

Canonical Commitment Rules:
1. Leaf hashing: keccak256(keccak256(abi.encode(address, uint256)))
2. Parent hashing: keccak256(min(a, b) + max(a, b))
3. Odd count: carry the last node up unchanged (no duplication)
4. Empty tree: rejected
5. Single leaf: root = leaf

Usage:
    from core.merkle import MerkleTree, verify_proof

    tree = MerkleTree.from_leaves([a.digest for a in allocations])
    proof = tree.proof(2)
    assert verify_proof(allocations[2].digest, proof, tree.root)
"""
from .merkle_tree import (
    MerkleProof,
    MerkleTree,
    next_level,
    level_sizes,
    build_levels,
    build_merkle_root,
    proof_from_levels,
    build_merkle_proof,
    verify_proof,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "MerkleProof",
    "MerkleTree",
    # Core functions
    "next_level",
    "level_sizes",
    "build_levels",
    "build_merkle_root",
    "proof_from_levels",
    "build_merkle_proof",
    "verify_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
