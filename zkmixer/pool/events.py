"""
원장 이벤트
============

이벤트는 원장 저장소의 events 테이블에 순서대로 쌓인다.
실패한 호출의 이벤트는 트랜잭션 롤백과 함께 사라진다.
"""

from zkmixer.pool.storage import EVENTS

VERIFICATION_SETUP_COMPLETED = "VerificationSetupCompleted"
DEPOSITED = "Deposited"
WITHDRAWN = "Withdrawn"
BLACKLIST_ADDED = "BlacklistAdded"
BLACKLIST_REMOVED = "BlacklistRemoved"


class EventLog:

    def __init__(self, store):
        self.store = store

    def emit(self, name, **fields):
        self.store.table(EVENTS).insert({"event": name, **fields})

    def all(self):
        return self.store.table(EVENTS).all()

    def names(self):
        return [row["event"] for row in self.all()]
