"""
증분(incremental) Merkle 누산기
================================

입금된 커밋먼트를 리프로 쌓는 고정 깊이 이진 Merkle 트리.

원장은 이 누산기를 다음 계약으로만 사용한다:
  - insert(leaf) → (새 root, 경로)
  - is_known_root(root) → bool

해시 함수는 주입받는다. 기본값은 SHA-256 결과를 스칼라 필드 위수 r로
줄인 값이며, 출금 회로가 사용하는 해시(예: MiMC, Poseidon)와 호환되지
않는다. 실제 회로와 연동할 때는 같은 해시를 주입해야 한다.

트리 구조 (depth = 2)::

              root
            /      \\
         h(0,1)   h(2,3)
         /  \\     /  \\
        L0  L1   L2  L3

비어 있는 자리는 zeros[level] (리프 0에서 시작한 해시 체인)으로 채운다.
"""

import hashlib

from zkmixer.errors import MaxMerkleLen
from zkmixer.groth16.field import CURVE_ORDER


def sha256_hash_pair(left, right):
    h = hashlib.sha256(left.to_bytes(32, "big") + right.to_bytes(32, "big")).digest()
    return int.from_bytes(h, "big") % CURVE_ORDER


class MerkleTree:
    """고정 깊이 증분 Merkle 트리.

    속성:
        depth: 트리 깊이 (리프 최대 개수 2^depth)
        leaves: 삽입된 리프 목록
        roots: 지금까지 만들어진 root 목록 (삽입 순서)
    """

    def __init__(self, depth, hash_pair=sha256_hash_pair, zero_leaf=0):
        if depth < 1:
            raise ValueError(f"depth는 1 이상이어야 합니다: {depth}")
        self.depth = depth
        self.hash_pair = hash_pair
        self.leaves = []

        self.zeros = [zero_leaf]
        for _ in range(depth):
            self.zeros.append(hash_pair(self.zeros[-1], self.zeros[-1]))

        # filled[level]: 해당 레벨에서 가장 최근에 완성된 왼쪽 서브트리
        self.filled = list(self.zeros[:depth])
        self.roots = [self.zeros[depth]]

    @classmethod
    def from_leaves(cls, leaves, depth, hash_pair=sha256_hash_pair):
        tree = cls(depth, hash_pair)
        for leaf in leaves:
            tree.insert(leaf)
        return tree

    @property
    def capacity(self):
        return 1 << self.depth

    def root(self):
        return self.roots[-1]

    def insert(self, leaf):
        """리프를 추가하고 (새 root, 경로)를 반환한다.

        경로는 [(sibling, position), ...] (리프 레벨부터).
        position은 현재 노드가 왼쪽이면 0, 오른쪽이면 1.

        Raises:
            MaxMerkleLen: 트리가 가득 찼을 때
        """
        index = len(self.leaves)
        if index >= self.capacity:
            raise MaxMerkleLen(f"Merkle 트리가 가득 찼습니다: {self.capacity}")

        self.leaves.append(leaf)
        current = leaf
        path = []
        for level in range(self.depth):
            if index % 2 == 0:
                self.filled[level] = current
                sibling = self.zeros[level]
                path.append((sibling, 0))
                current = self.hash_pair(current, sibling)
            else:
                sibling = self.filled[level]
                path.append((sibling, 1))
                current = self.hash_pair(sibling, current)
            index //= 2

        self.roots.append(current)
        return current, path

    def is_known_root(self, root):
        return root in self.roots

    def verify_path(self, leaf, path, root):
        current = leaf
        for sibling, position in path:
            if position == 0:
                current = self.hash_pair(current, sibling)
            else:
                current = self.hash_pair(sibling, current)
        return current == root
