import logging

from flask import Flask

from zkmixer.pool.config import Config
from zkmixer.pool.ledger import Ledger
from zkmixer.pool.storage import BALANCES, LedgerStore

from mixer_routes import mixer_bp, init_mixer_bp


def open_store(config):
    if config.get("TESTING"):
        return LedgerStore.memory()               #Memory DB
    return LedgerStore.open(config["DB_PATH"])   #Storage DB


def mint_genesis(ledger, balances):
    # 잔액 테이블이 비어 있을 때만 초기 잔액을 만든다
    if ledger.store.table(BALANCES).all():
        return
    with ledger.store.transaction():
        for account, amount in balances.items():
            ledger.currency.mint(account, amount)


def create_app(config=Config):
    app = Flask(__name__)
    app.config.from_object(config)
    logging.basicConfig(level=logging.INFO)

    store = open_store(app.config)
    ledger = Ledger(store, config=config)
    mint_genesis(ledger, app.config["GENESIS_BALANCES"])

    init_mixer_bp(ledger)
    app.register_blueprint(mixer_bp)
    app.extensions["mixer.ledger"] = ledger

    return app
