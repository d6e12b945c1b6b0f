"""
Tests for zkmixer.pool.merkle: 증분 Merkle 누산기.
"""

import pytest

from zkmixer.errors import MaxMerkleLen
from zkmixer.groth16.field import CURVE_ORDER
from zkmixer.pool.merkle import MerkleTree, sha256_hash_pair


def naive_root(leaves, depth, hash_pair=sha256_hash_pair):
    """전체 트리를 직접 계산한 root (빈 자리는 0)"""
    level = list(leaves) + [0] * ((1 << depth) - len(leaves))
    for _ in range(depth):
        level = [hash_pair(level[i], level[i + 1]) for i in range(0, len(level), 2)]
    return level[0]


class TestMerkleTree:

    def test_empty_root(self):
        tree = MerkleTree(3)
        assert tree.root() == naive_root([], 3)
        assert tree.is_known_root(tree.root())

    @pytest.mark.parametrize("count", [1, 2, 3, 5, 8])
    def test_root_matches_full_tree(self, count):
        leaves = [10 + i for i in range(count)]
        tree = MerkleTree.from_leaves(leaves, depth=3)
        assert tree.root() == naive_root(leaves, 3)

    def test_insert_returns_root_and_path(self):
        tree = MerkleTree(3)
        tree.insert(1)
        root, path = tree.insert(2)
        assert root == tree.root()
        assert len(path) == 3
        assert path[0] == (1, 1)
        assert tree.verify_path(2, path, root)
        assert not tree.verify_path(3, path, root)

    def test_history_of_roots(self):
        tree = MerkleTree(2)
        r1, _ = tree.insert(7)
        r2, _ = tree.insert(8)
        assert r1 != r2
        assert tree.is_known_root(r1)
        assert tree.is_known_root(r2)
        assert not tree.is_known_root(12345)

    def test_full_tree(self):
        tree = MerkleTree.from_leaves([1, 2, 3, 4], depth=2)
        assert tree.capacity == 4
        with pytest.raises(MaxMerkleLen):
            tree.insert(5)

    def test_custom_hash(self):
        add = lambda a, b: (a + b) % CURVE_ORDER  # noqa: E731
        tree = MerkleTree.from_leaves([1, 2, 3], depth=2, hash_pair=add)
        assert tree.root() == 6

    def test_hash_in_scalar_field(self):
        assert 0 <= sha256_hash_pair(1, 2) < CURVE_ORDER
        assert sha256_hash_pair(1, 2) != sha256_hash_pair(2, 1)

    def test_invalid_depth(self):
        with pytest.raises(ValueError):
            MerkleTree(0)
