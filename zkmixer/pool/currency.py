"""
잔액 이동 (입금 보관 / 출금 지급)
==================================

원장 저장소의 balances 테이블에 계정 잔액을 둔다.
원장과 같은 저장소를 쓰므로 호출이 실패하면 잔액 이동도 함께 롤백된다.
"""

from tinydb import Query

from zkmixer.errors import InsufficientBalance
from zkmixer.pool.storage import BALANCES

ACCOUNT = Query()


class Currency:

    def __init__(self, store):
        self.store = store

    @property
    def _table(self):
        return self.store.table(BALANCES)

    def balance(self, account):
        row = self._table.get(ACCOUNT.account == str(account))
        return row["free"] if row else 0

    def _set(self, account, amount):
        self._table.upsert(
            {"account": str(account), "free": amount},
            ACCOUNT.account == str(account),
        )

    def mint(self, account, amount):
        self._set(account, self.balance(account) + amount)

    def transfer(self, source, dest, amount):
        """source → dest 로 amount를 옮긴다.

        Raises:
            InsufficientBalance: source 잔액이 부족할 때
        """
        free = self.balance(source)
        if free < amount:
            raise InsufficientBalance(f"{source} 잔액 부족: {free} < {amount}")
        self._set(source, free - amount)
        self._set(dest, self.balance(dest) + amount)
