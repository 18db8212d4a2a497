"""Fixed-depth Merkle trees for the off-channel shot and hit history.

Only a tree's root is stored on-channel. A player proves a single leaf
update by sending a witness (sibling path): applied to the old leaf it
must reproduce the stored root, applied to the new leaf it yields the
root to store next.

Leaves hold raw field elements; an unused leaf is 0. Internal nodes are
hash_fields([left, right]).
"""

from dataclasses import dataclass
from typing import Iterable

from ..utils.constants import TREE_DEPTH
from ..utils.hashing import hash_fields, is_field_element


def _empty_subtree_roots(depth: int) -> list[int]:
    """Roots of all-zero subtrees, indexed by subtree height."""
    roots = [0]
    for _ in range(depth):
        roots.append(hash_fields([roots[-1], roots[-1]]))
    return roots


_EMPTY_ROOTS = _empty_subtree_roots(TREE_DEPTH)

EMPTY_TREE_ROOT = _EMPTY_ROOTS[TREE_DEPTH]


@dataclass(frozen=True)
class MerkleWitness:
    """Sibling path from a leaf to the root.

    Attributes:
        path: Sibling hashes, leaf level first
        is_left: For each level, True if the path node is the left child
    """

    path: tuple[int, ...]
    is_left: tuple[bool, ...]

    def __post_init__(self):
        """Validate witness shape."""
        if len(self.path) != len(self.is_left):
            raise ValueError(
                f"Invalid witness: {len(self.path)} siblings for {len(self.is_left)} directions"
            )
        for sibling in self.path:
            if not is_field_element(sibling):
                raise ValueError(f"Invalid witness sibling: {sibling!r}")

    @property
    def depth(self) -> int:
        return len(self.path)

    def calculate_root(self, leaf: int) -> int:
        """Fold the path over a leaf value to obtain the root."""
        node = leaf
        for sibling, is_left in zip(self.path, self.is_left):
            if is_left:
                node = hash_fields([node, sibling])
            else:
                node = hash_fields([sibling, node])
        return node

    def calculate_index(self) -> int:
        """Recover the leaf index the witness was taken at."""
        index = 0
        for level, is_left in enumerate(self.is_left):
            if not is_left:
                index |= 1 << level
        return index

    def to_dict(self) -> dict:
        return {
            "path": [str(sibling) for sibling in self.path],
            "isLeft": list(self.is_left),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MerkleWitness":
        return cls(
            path=tuple(int(sibling) for sibling in data["path"]),
            is_left=tuple(bool(flag) for flag in data["isLeft"]),
        )


class MerkleTree:
    """Sparse binary Merkle tree of fixed depth.

    Only non-empty nodes are stored; missing nodes fall back to the
    precomputed empty subtree root for their level.
    """

    def __init__(self, depth: int = TREE_DEPTH):
        """Create an empty tree.

        Args:
            depth: Number of levels above the leaves (2**depth leaves)
        """
        if depth < 1:
            raise ValueError(f"Invalid depth: {depth} (must be >= 1)")
        self.depth = depth
        self.leaf_count = 2**depth
        self._empty = (
            _EMPTY_ROOTS if depth == TREE_DEPTH else _empty_subtree_roots(depth)
        )
        # level -> {index: hash}; level 0 holds the leaves
        self._nodes: list[dict[int, int]] = [{} for _ in range(depth + 1)]

    def _get_node(self, level: int, index: int) -> int:
        return self._nodes[level].get(index, self._empty[level])

    def _check_index(self, index: int) -> None:
        if not (0 <= index < self.leaf_count):
            raise IndexError(f"Leaf index {index} out of range (0-{self.leaf_count - 1})")

    def get_root(self) -> int:
        return self._get_node(self.depth, 0)

    def get_leaf(self, index: int) -> int:
        self._check_index(index)
        return self._get_node(0, index)

    def set_leaf(self, index: int, value: int) -> None:
        """Write a leaf and rehash the path to the root."""
        self._check_index(index)
        node = value
        for level in range(self.depth + 1):
            if node == self._empty[level]:
                self._nodes[level].pop(index, None)
            else:
                self._nodes[level][index] = node
            if level == self.depth:
                break
            if index % 2 == 0:
                node = hash_fields([node, self._get_node(level, index + 1)])
            else:
                node = hash_fields([self._get_node(level, index - 1), node])
            index //= 2

    def get_witness(self, index: int) -> MerkleWitness:
        """Build the sibling path for a leaf."""
        self._check_index(index)
        path = []
        is_left = []
        for level in range(self.depth):
            left = index % 2 == 0
            sibling = index + 1 if left else index - 1
            path.append(self._get_node(level, sibling))
            is_left.append(left)
            index //= 2
        return MerkleWitness(path=tuple(path), is_left=tuple(is_left))

    def leaves(self) -> dict[int, int]:
        """Return the non-zero leaves by index."""
        return dict(sorted(self._nodes[0].items()))

    @classmethod
    def from_leaves(cls, leaves: dict[int, int], depth: int = TREE_DEPTH) -> "MerkleTree":
        tree = cls(depth)
        for index, value in leaves.items():
            tree.set_leaf(int(index), int(value))
        return tree


def replay_root(updates: Iterable[tuple[int, int]], depth: int = TREE_DEPTH) -> int:
    """Replay (index, value) leaf updates from the empty tree and return the root."""
    tree = MerkleTree(depth)
    for index, value in updates:
        tree.set_leaf(index, value)
    return tree.get_root()
