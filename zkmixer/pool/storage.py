"""
원장 저장소 (TinyDB)
=====================

원장 상태 전체를 하나의 TinyDB에 저장한다.

**테이블**:
  - roots, nullifier_hashes, commitments: 256비트 정수 → 존재 여부
  - blacklist: 계정 → 존재 여부
  - balances: 계정 → 잔액
  - events: 발생한 이벤트 목록
  - values: 스칼라 값 (공개 입력 버퍼, 검증키 버퍼, Merkle 리프 벡터)

TinyDB는 JSON으로 직렬화하므로 정수 키와 바이트열은 문자열로 저장한다.

**트랜잭션**:
  transaction() 블록 안에서 예외가 발생하면 블록 진입 시점의 스냅샷으로
  저장소 전체를 되돌린다. 한 호출의 상태 변경은 모두 반영되거나 하나도
  반영되지 않는다.
"""

import copy
from contextlib import contextmanager

from tinydb import TinyDB, Query
from tinydb.storages import MemoryStorage

DATA = Query()

ROOTS = "roots"
NULLIFIER_HASHES = "nullifier_hashes"
COMMITMENTS = "commitments"
BLACKLIST = "blacklist"
BALANCES = "balances"
EVENTS = "events"
VALUES = "values"


class LedgerStore:

    def __init__(self, db):
        self.db = db

    @classmethod
    def memory(cls):
        return cls(TinyDB(storage=MemoryStorage))

    @classmethod
    def open(cls, path):
        return cls(TinyDB(path))

    def table(self, name):
        return self.db.table(name, cache_size=0)

    # ─── 집합 (키 → 존재 여부) ───

    def contains(self, name, key):
        return self.table(name).contains(DATA.key == str(key))

    def insert(self, name, key):
        self.table(name).upsert({"key": str(key), "value": True}, DATA.key == str(key))

    def remove(self, name, key):
        self.table(name).remove(DATA.key == str(key))

    def keys(self, name):
        return [row["key"] for row in self.table(name).all()]

    # ─── 스칼라 값 ───

    def get_value(self, key, default=None):
        result = self.table(VALUES).search(DATA.type == key)
        if not result:
            return default
        return result[0].get("data")

    def set_value(self, key, data):
        self.table(VALUES).upsert({"type": key, "data": data}, DATA.type == key)

    # ─── 트랜잭션 ───

    @contextmanager
    def transaction(self):
        snapshot = copy.deepcopy(self.db.storage.read())
        try:
            yield self
        except BaseException:
            names = set(self.db.tables())
            self.db.storage.write(snapshot if snapshot is not None else {})
            for name in names | set(self.db.tables()):
                self.table(name).clear_cache()
            raise

    def close(self):
        self.db.close()
