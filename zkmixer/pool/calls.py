"""
원장 호출 (dispatch)
=====================

원장에 들어오는 호출의 닫힌 집합과, 각 호출을 원장 메서드로 보내는 dispatch 함수.

    >>> dispatch(ledger, origin=1, call=Deposit(commitment=b"\\x01"))
"""

from dataclasses import dataclass

from zkmixer.errors import UnknownCall


@dataclass(frozen=True)
class SetupVerification:
    public_inputs: bytes
    verification_key: bytes


@dataclass(frozen=True)
class Deposit:
    commitment: bytes


@dataclass(frozen=True)
class Withdraw:
    proof: bytes
    root: bytes
    nullifier_hash: bytes
    receiver: object


@dataclass(frozen=True)
class AddBlacklist:
    account: object


@dataclass(frozen=True)
class RemoveBlacklist:
    account: object


def _setup(ledger, origin, call):
    return ledger.setup_verification(origin, call.public_inputs, call.verification_key)


def _deposit(ledger, origin, call):
    return ledger.deposit(origin, call.commitment)


def _withdraw(ledger, origin, call):
    return ledger.withdraw(origin, call.proof, call.root, call.nullifier_hash, call.receiver)


def _add_blacklist(ledger, origin, call):
    return ledger.add_black_list(origin, call.account)


def _remove_blacklist(ledger, origin, call):
    return ledger.remove_black_list(origin, call.account)


HANDLERS = {
    SetupVerification: _setup,
    Deposit: _deposit,
    Withdraw: _withdraw,
    AddBlacklist: _add_blacklist,
    RemoveBlacklist: _remove_blacklist,
}


def dispatch(ledger, origin, call):
    handler = HANDLERS.get(type(call))
    if handler is None:
        raise UnknownCall(f"알 수 없는 호출입니다: {type(call).__name__}")
    return handler(ledger, origin, call)
