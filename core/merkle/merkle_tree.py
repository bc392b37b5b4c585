"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = keccak256(keccak256(abi.encode(address, uint256)))
   - Implemented via core.codec.leaf_digest()
2. Parent hashing: parent = keccak256(min(a, b) + max(a, b))
   - Implemented via core.crypto.hashing.hash_pair()
3. Carry rule: an unpaired last node at any level moves up unchanged.
   It is never duplicated, so previously published roots stay reproducible.
4. Empty leaves: rejected (a tree without leaves has no root)
5. Single leaf: root = leaf, proof = []

Determinism Notes:
- No randomness or non-deterministic ordering
- Leaf ordering is the caller's input order and defines the tree index
- This module never sorts leaves, only the two members of each pair
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from core.crypto.hashing import HASH_LENGTH, hash_pair


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle inclusion proof for a single leaf.

    Attributes:
        leaf: The leaf digest being proven
        index: The 0-based tree index of the leaf
        siblings: Sibling digests from bottom to top (root excluded)
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: tuple[bytes, ...]
    root: bytes

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


def next_level(nodes: Sequence[bytes]) -> list[bytes]:
    """
    Compute the level above a list of nodes.

    Adjacent nodes are paired left to right with hash_pair. When the count
    is odd the last node is carried to the next level unchanged.

    Example: [a, b, c] -> [hash_pair(a, b), c]
    """
    parents: list[bytes] = []
    for i in range(0, len(nodes) - 1, 2):
        parents.append(hash_pair(nodes[i], nodes[i + 1]))
    if len(nodes) % 2 == 1:
        parents.append(nodes[-1])
    return parents


def level_sizes(num_leaves: int) -> list[int]:
    """
    Sizes of each level, leaves first, for a tree of num_leaves.

    Example: level_sizes(5) == [5, 3, 2, 1]
    """
    if num_leaves <= 0:
        raise ValueError("Cannot size a tree with no leaves")
    sizes = [num_leaves]
    while sizes[-1] > 1:
        sizes.append((sizes[-1] + 1) // 2)
    return sizes


def build_levels(leaves: Sequence[bytes]) -> list[list[bytes]]:
    """
    Build every level of the tree, leaves first, root last.

    Raises:
        ValueError: If leaves is empty
    """
    if len(leaves) == 0:
        raise ValueError("Cannot build tree from empty leaves")

    levels: list[list[bytes]] = [list(leaves)]
    while len(levels[-1]) > 1:
        levels.append(next_level(levels[-1]))
    return levels


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf digests.

    Carry Rule: an odd trailing node moves up unchanged.
    Example: [a, b, c] -> [ab, c] -> [hash_pair(ab, c)]

    Raises:
        ValueError: If leaves is empty
    """
    return build_levels(leaves)[-1][0]


def proof_from_levels(levels: Sequence[Sequence[bytes]], index: int) -> list[bytes]:
    """
    Collect sibling digests for the leaf at index from precomputed levels.

    A level where the node has no sibling (it was carried) adds nothing.

    Raises:
        IndexError: If index is out of range
    """
    if index < 0 or index >= len(levels[0]):
        raise IndexError(
            f"Leaf index {index} out of range for {len(levels[0])} leaves"
        )

    siblings: list[bytes] = []
    current_index = index
    for level in levels[:-1]:
        sibling_index = current_index ^ 1
        if sibling_index < len(level):
            siblings.append(level[sibling_index])
        current_index //= 2
    return siblings


def build_merkle_proof(leaves: Sequence[bytes], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Raises:
        IndexError: If index is out of range
        ValueError: If leaves is empty
    """
    levels = build_levels(leaves)
    siblings = proof_from_levels(levels, index)
    return MerkleProof(
        leaf=levels[0][index],
        index=index,
        siblings=tuple(siblings),
        root=levels[-1][0],
    )


def verify_proof(leaf: bytes, siblings: Sequence[bytes], root: bytes) -> bool:
    """
    Verify a leaf against a root by folding hash_pair over the siblings.

    Needs only O(depth) data, not the tree. Because pairs are sorted the
    leaf's position is not needed. Malformed inputs return False.

    Args:
        leaf: Leaf digest (32 bytes)
        siblings: Sibling digests, bottom-up
        root: Expected root (32 bytes)
    """
    if len(leaf) != HASH_LENGTH or len(root) != HASH_LENGTH:
        return False

    current_hash = leaf
    for sibling in siblings:
        if len(sibling) != HASH_LENGTH:
            return False
        current_hash = hash_pair(current_hash, sibling)
    return current_hash == root


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """Verify a MerkleProof against its own claimed root."""
    return verify_proof(proof.leaf, proof.siblings, proof.root)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of levels from leaves to root (inclusive).

    A single leaf has depth 1, two or three leaves have depth 2 or 3, etc.
    Returns 0 for an empty tree.
    """
    if num_leaves == 0:
        return 0
    return len(level_sizes(num_leaves))


class MerkleTree:
    """
    An immutable, addressable Merkle tree.

    Nodes at level k+1 position j are built from level k positions 2j and
    2j+1 (or carried from 2j alone when 2j+1 does not exist).

    Usage:
        tree = MerkleTree.from_leaves([a.digest for a in allocations])
        proof = tree.proof(2)
        assert verify_proof(tree.leaf(2), proof, tree.root)
    """

    def __init__(self, levels: Sequence[Sequence[bytes]]) -> None:
        if not levels or not levels[0]:
            raise ValueError("Cannot build tree from empty leaves")
        self._levels: tuple[tuple[bytes, ...], ...] = tuple(tuple(level) for level in levels)
        expected = level_sizes(len(self._levels[0]))
        if [len(level) for level in self._levels] != expected:
            raise ValueError(
                f"Level sizes {[len(level) for level in self._levels]} do not "
                f"match expected {expected}"
            )

    @classmethod
    def from_leaves(cls, leaves: Sequence[bytes]) -> "MerkleTree":
        """Build a tree by hashing every level above the given leaves."""
        return cls(build_levels(leaves))

    @classmethod
    def from_levels(cls, levels: Sequence[Sequence[bytes]]) -> "MerkleTree":
        """
        Rebuild a tree from precomputed levels without rehashing.

        Only the shape is checked; use verify_levels() to rehash.
        """
        return cls(levels)

    @property
    def root(self) -> bytes:
        return self._levels[-1][0]

    @property
    def levels(self) -> tuple[tuple[bytes, ...], ...]:
        return self._levels

    @property
    def leaves(self) -> tuple[bytes, ...]:
        return self._levels[0]

    @property
    def depth(self) -> int:
        return len(self._levels)

    def __len__(self) -> int:
        return len(self._levels[0])

    def leaf(self, index: int) -> bytes:
        if index < 0 or index >= len(self):
            raise IndexError(f"Leaf index {index} out of range for {len(self)} leaves")
        return self._levels[0][index]

    def proof(self, index: int) -> list[bytes]:
        """Ordered sibling digests from the leaf at index up to the root."""
        return proof_from_levels(self._levels, index)

    def merkle_proof(self, index: int) -> MerkleProof:
        return MerkleProof(
            leaf=self.leaf(index),
            index=index,
            siblings=tuple(self.proof(index)),
            root=self.root,
        )

    def nodes(self) -> list[bytes]:
        """All nodes, level by level from the leaves to the root."""
        return [node for level in self._levels for node in level]

    def verify_levels(self) -> list[int]:
        """
        Rehash every internal level and report the ones that disagree.

        Returns:
            Indices of levels (1..depth-1) whose stored nodes differ from
            the recomputed ones; empty when the tree is consistent.
        """
        bad_levels: list[int] = []
        for k in range(1, len(self._levels)):
            if list(self._levels[k]) != next_level(self._levels[k - 1]):
                bad_levels.append(k)
        return bad_levels

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MerkleTree):
            return NotImplemented
        return self._levels == other._levels

    def __hash__(self) -> int:
        return hash(self._levels)

    def __repr__(self) -> str:
        return f"MerkleTree(leaves={len(self)}, root=0x{self.root.hex()})"


__all__ = [
    "MerkleProof",
    "MerkleTree",
    "next_level",
    "level_sizes",
    "build_levels",
    "build_merkle_root",
    "proof_from_levels",
    "build_merkle_proof",
    "verify_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
