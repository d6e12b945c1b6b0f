"""
Mixer 설정
===========

Flask의 app.config.from_object()로 읽을 수 있는 설정 클래스.
모든 값은 같은 이름의 환경 변수로 덮어쓸 수 있다.

    >>> app.config.from_object(Config)
    >>> ledger = Ledger(store, config=Config)
"""

import os


def _env_int(name, default):
    value = os.environ.get(name)
    return int(value) if value else default


def _env_balances(name, default):
    # "1:5000,2:5000" → {"1": 5000, "2": 5000}
    value = os.environ.get(name)
    if not value:
        return dict(default)
    balances = {}
    for item in value.split(","):
        account, amount = item.split(":")
        balances[account.strip()] = int(amount)
    return balances


class Config:
    # 입력 바이트열 최대 길이
    MAX_PUBLIC_INPUTS_LENGTH = _env_int("MAX_PUBLIC_INPUTS_LENGTH", 3000)
    MAX_PROOF_LENGTH = _env_int("MAX_PROOF_LENGTH", 5000)
    MAX_VERIFICATION_KEY_LENGTH = _env_int("MAX_VERIFICATION_KEY_LENGTH", 5000)

    # 입금/출금 한 번에 이동하는 고정 금액과 풀 계정
    MIXER_BALANCE = _env_int("MIXER_BALANCE", 1_000)
    MIXER_ACCOUNT = os.environ.get("MIXER_ACCOUNT", "py/mixer")

    MERKLE_DEPTH = _env_int("MERKLE_DEPTH", 8)

    DB_PATH = os.environ.get("DB_PATH", "db.json")
    SECRET_KEY = os.environ.get("SECRET_KEY", "key")
    TESTING = False

    GENESIS_BALANCES = _env_balances("GENESIS_BALANCES", {})


class TestingConfig(Config):
    TESTING = True
    GENESIS_BALANCES = {"1": 5_000, "2": 5_000, "3": 5_000}
