"""
Distribution Serializer
Versioned dump/parse of a built airdrop tree.

A Distribution pairs the ordered allocations with their MerkleTree. The
dump carries every node of the tree, so parse() rebuilds the tree and every
proof without hashing anything; validate() is the opt-in full rehash.

Dump layout ("standard-v1"):
    {
      "format": "standard-v1",
      "leafEncoding": ["address", "uint256"],
      "root": "0x...",
      "tree": [level 0 nodes..., level 1 nodes..., ..., root],
      "values": [{"value": [address, amount], "treeIndex": i, "proof": [...]}]
    }

Level sizes are a pure function of the leaf count (n, ceil(n/2), ..., 1), so
the flat node list is enough to split the tree back into levels.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from core.codec.leaf_codec import Allocation, parse_allocation, parse_allocations
from core.crypto.hashing import HASH_LENGTH, from_hex, parse_root, to_hex
from core.merkle.merkle_tree import (
    MerkleTree,
    build_merkle_root,
    level_sizes,
    verify_proof,
)
from core.schemas.errors import (
    AmbiguousAllocationException,
    NotFoundException,
    ValidationException,
)
from core.schemas.verification import CheckResult, VerificationResult
from core.schemas.versioning import (
    DUMP_FORMAT,
    LEAF_ENCODING,
    DumpFormat,
    assert_supported_format,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Dump Models
# =============================================================================

class DumpValue(BaseModel):
    """One allocation in the dump, with its tree index and proof."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    value: list[str] = Field(
        ...,
        min_length=2,
        max_length=2,
        description="[address, decimal amount]",
    )
    tree_index: int = Field(..., alias="treeIndex", ge=0)
    proof: list[str] = Field(default_factory=list)


class DistributionDump(BaseModel):
    """The durable, shareable artifact produced at generation time."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    format: DumpFormat = Field(default=DUMP_FORMAT)
    leaf_encoding: list[str] = Field(
        default_factory=lambda: list(LEAF_ENCODING),
        alias="leafEncoding",
    )
    root: str
    tree: list[str]
    values: list[DumpValue]


@dataclass(frozen=True)
class DistributionEntry:
    """An allocation located in a distribution, with everything to claim it."""
    allocation: Allocation
    tree_index: int
    leaf: bytes
    proof: tuple[bytes, ...]

    @property
    def address(self) -> str:
        return self.allocation.address

    @property
    def amount(self) -> int:
        return self.allocation.amount

    @property
    def proof_hex(self) -> list[str]:
        return [to_hex(node) for node in self.proof]


# =============================================================================
# Distribution
# =============================================================================

class Distribution:
    """
    Allocations plus their Merkle tree.

    Usage:
        dist = Distribution.build([{"address": "0x...", "amount": "100"}])
        data = dist.dump()
        same = Distribution.parse(data)
        assert same.root == dist.root
    """

    def __init__(self, allocations: Iterable[Allocation], tree: MerkleTree) -> None:
        self._allocations: tuple[Allocation, ...] = tuple(allocations)
        if len(self._allocations) != len(tree):
            raise ValueError(
                f"{len(self._allocations)} allocations for a tree of {len(tree)} leaves"
            )
        self._tree = tree

    @classmethod
    def build(cls, entries: Iterable[Any], *, unit: str = "wei") -> "Distribution":
        """
        Validate raw allocation entries and build the tree.

        Raises:
            ValidationException: If any entry is malformed or none are given
        """
        allocations = parse_allocations(entries, unit=unit)
        tree = MerkleTree.from_leaves([allocation.digest for allocation in allocations])
        logger.info(
            f"Built distribution with {len(allocations)} allocations, "
            f"root {to_hex(tree.root)}"
        )
        return cls(allocations, tree)

    @property
    def root(self) -> bytes:
        return self._tree.root

    @property
    def root_hex(self) -> str:
        return to_hex(self._tree.root)

    @property
    def tree(self) -> MerkleTree:
        return self._tree

    @property
    def allocations(self) -> tuple[Allocation, ...]:
        return self._allocations

    def __len__(self) -> int:
        return len(self._allocations)

    def proof(self, tree_index: int) -> list[bytes]:
        """Sibling digests for the allocation at tree_index."""
        return self._tree.proof(tree_index)

    def entry(self, tree_index: int) -> DistributionEntry:
        return DistributionEntry(
            allocation=self._allocations[tree_index],
            tree_index=tree_index,
            leaf=self._tree.leaf(tree_index),
            proof=tuple(self._tree.proof(tree_index)),
        )

    def entries_for(self, address: str) -> list[DistributionEntry]:
        """All entries for an address (case-insensitive); may be empty."""
        return [
            self.entry(i)
            for i, allocation in enumerate(self._allocations)
            if allocation.matches(address)
        ]

    def find(self, address: str) -> DistributionEntry:
        """
        Locate the single allocation for an address.

        Raises:
            NotFoundException: If the address is not in the tree
            AmbiguousAllocationException: If it appears more than once
        """
        entries = self.entries_for(address)
        if not entries:
            raise NotFoundException(address, root=self.root_hex)
        if len(entries) > 1:
            raise AmbiguousAllocationException(
                address, [entry.tree_index for entry in entries]
            )
        return entries[0]

    # -------------------------------------------------------------------------
    # Dump / Parse
    # -------------------------------------------------------------------------

    def to_model(self) -> DistributionDump:
        return DistributionDump(
            format=DUMP_FORMAT,
            leaf_encoding=list(LEAF_ENCODING),
            root=self.root_hex,
            tree=[to_hex(node) for node in self._tree.nodes()],
            values=[
                DumpValue(
                    value=allocation.to_value(),
                    tree_index=i,
                    proof=[to_hex(node) for node in self._tree.proof(i)],
                )
                for i, allocation in enumerate(self._allocations)
            ],
        )

    def dump(self) -> dict[str, Any]:
        """Serialize to the JSON-ready dump structure."""
        return self.to_model().model_dump(mode="json", by_alias=True)

    @classmethod
    def parse(cls, data: Any) -> "Distribution":
        """
        Rebuild a distribution from a dump without rehashing.

        The format tag is checked first. The tree shape, root, tree indices,
        allocation values and stored proofs are checked structurally.

        Raises:
            FormatVersionException: If the format tag is missing or unknown
            ValidationException: If the dump is structurally inconsistent
        """
        if not isinstance(data, Mapping):
            raise ValidationException(
                f"Dump must be a JSON object, got {type(data).__name__}"
            )
        assert_supported_format(data.get("format"))

        try:
            model = DistributionDump.model_validate(data)
        except PydanticValidationError as e:
            problems = [
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise ValidationException(
                f"Malformed dump: {'; '.join(problems)}",
                details={"errors": problems},
            ) from e

        if tuple(model.leaf_encoding) != LEAF_ENCODING:
            raise ValidationException(
                f"Unsupported leaf encoding: {model.leaf_encoding}",
                field_path="leafEncoding",
                value=str(model.leaf_encoding),
            )

        root = parse_root(model.root, field_path="root")
        nodes = [_decode_node(node, i) for i, node in enumerate(model.tree)]

        count = len(model.values)
        if count == 0:
            raise ValidationException("Dump has no values", field_path="values")
        sizes = level_sizes(count)
        if sum(sizes) != len(nodes):
            raise ValidationException(
                f"Tree has {len(nodes)} nodes, expected {sum(sizes)} for {count} values",
                field_path="tree",
            )

        levels: list[list[bytes]] = []
        offset = 0
        for size in sizes:
            levels.append(nodes[offset:offset + size])
            offset += size
        tree = MerkleTree.from_levels(levels)
        if tree.root != root:
            raise ValidationException(
                "Root does not match the top of the tree",
                field_path="root",
                value=model.root,
            )

        by_index = sorted(model.values, key=lambda v: v.tree_index)
        if [v.tree_index for v in by_index] != list(range(count)):
            raise ValidationException(
                f"Tree indices must cover 0..{count - 1} exactly once",
                field_path="values.treeIndex",
            )

        allocations: list[Allocation] = []
        for v in by_index:
            allocations.append(parse_allocation(v.value, index=v.tree_index))
            stored = [_decode_node(node, v.tree_index, field="proof") for node in v.proof]
            if stored != tree.proof(v.tree_index):
                raise ValidationException(
                    f"Stored proof for treeIndex {v.tree_index} does not match the tree",
                    field_path="values.proof",
                    index=v.tree_index,
                )

        logger.debug(f"Parsed distribution with {count} values, root {model.root}")
        return cls(allocations, tree)

    # -------------------------------------------------------------------------
    # Full verification (rehashes)
    # -------------------------------------------------------------------------

    def validate(self) -> VerificationResult:
        """
        Rehash everything and report per-check results.

        Checks:
        - leaf_digests: each stored leaf equals the digest of its value
        - tree_levels: each internal level equals next_level of the one below
        - root: recomputing from the values gives the stored root
        - proofs: every proof verifies against the root
        - unique_addresses: warning when an address appears more than once
        """
        result = VerificationResult.success()

        bad_leaves = [
            i for i, allocation in enumerate(self._allocations)
            if allocation.digest != self._tree.leaf(i)
        ]
        if bad_leaves:
            result.add_check(CheckResult.failed(
                "leaf_digests",
                f"{len(bad_leaves)} leaf digests do not match their values",
                {"tree_indices": bad_leaves},
            ))
        else:
            result.add_check(CheckResult.passed(
                "leaf_digests", f"All {len(self)} leaf digests match their values"
            ))

        bad_levels = self._tree.verify_levels()
        if bad_levels:
            result.add_check(CheckResult.failed(
                "tree_levels",
                f"Levels {bad_levels} do not match their children",
                {"levels": bad_levels},
            ))
        else:
            result.add_check(CheckResult.passed(
                "tree_levels", f"All {self._tree.depth} levels are consistent"
            ))

        recomputed = build_merkle_root([allocation.digest for allocation in self._allocations])
        if recomputed != self.root:
            result.add_check(CheckResult.failed(
                "root",
                "Recomputed root does not match stored root",
                {"expected": self.root_hex, "actual": to_hex(recomputed)},
            ))
        else:
            result.add_check(CheckResult.passed("root", f"Root {self.root_hex} recomputed"))

        bad_proofs = [
            i for i in range(len(self))
            if not verify_proof(self._tree.leaf(i), self._tree.proof(i), self.root)
        ]
        if bad_proofs:
            result.add_check(CheckResult.failed(
                "proofs",
                f"{len(bad_proofs)} proofs do not verify",
                {"tree_indices": bad_proofs},
            ))
        else:
            result.add_check(CheckResult.passed("proofs", f"All {len(self)} proofs verify"))

        counts = Counter(allocation.address.lower() for allocation in self._allocations)
        duplicates = sorted(address for address, n in counts.items() if n > 1)
        if duplicates:
            result.add_check(CheckResult.warning(
                "unique_addresses",
                f"{len(duplicates)} addresses have more than one allocation",
                {"addresses": duplicates},
            ))
        else:
            result.add_check(CheckResult.passed("unique_addresses", "Addresses are unique"))

        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Distribution):
            return NotImplemented
        return self._allocations == other._allocations and self._tree == other._tree

    def __hash__(self) -> int:
        return hash((self._allocations, self._tree))

    def __repr__(self) -> str:
        return f"Distribution(allocations={len(self)}, root={self.root_hex})"


def _decode_node(node: str, index: int, field: str = "tree") -> bytes:
    try:
        decoded = from_hex(node)
    except ValueError as e:
        raise ValidationException(
            f"Invalid hex node in {field}: {e}",
            field_path=field,
            value=node,
            index=index,
        ) from e
    if len(decoded) != HASH_LENGTH:
        raise ValidationException(
            f"Node in {field} must be {HASH_LENGTH} bytes, got {len(decoded)}",
            field_path=field,
            value=node,
            index=index,
        )
    return decoded


__all__ = [
    "DumpValue",
    "DistributionDump",
    "DistributionEntry",
    "Distribution",
]
