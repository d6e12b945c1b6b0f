"""
Mixer Flask Blueprint — 원장 호출 엔드포인트
=============================================

바이트열 필드(commitment, root, nullifier_hash, public_inputs)는 hex 문자열,
검증키와 증명은 JSON 객체 또는 JSON 문자열로 받는다.

  POST /mixer/setup         검증키/공개 입력 설정
  POST /mixer/deposit       입금
  POST /mixer/withdraw      출금
  POST /mixer/blacklist     블랙리스트 추가/삭제
  POST /mixer/proof/parse   증명 역직렬화 결과 확인
  GET  /mixer/state         원장 상태
  GET  /mixer/verification-key
  GET  /mixer/events
  GET  /mixer/balance/<account>
"""

import json

from flask import Blueprint, current_app, jsonify, request

from mixer_serializers import serialize_ledger, serialize_proof, serialize_verification_key
from zkmixer.errors import MixerError
from zkmixer.groth16.deserialization import parse_proof, parse_verification_key
from zkmixer.pool.calls import (
    AddBlacklist, Deposit, RemoveBlacklist, SetupVerification, Withdraw, dispatch,
)

mixer_bp = Blueprint('mixer', __name__, url_prefix='/mixer')

# 원장은 app.py에서 주입
LEDGER = None


def init_mixer_bp(ledger):
    """app.py에서 원장을 주입받는다."""
    global LEDGER
    LEDGER = ledger


class BadRequest(Exception):
    pass


# ─── 요청 헬퍼 ───

def _payload():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("JSON 객체가 필요합니다")
    return data


def _hex(data, name):
    value = data.get(name)
    if not isinstance(value, str):
        raise BadRequest(f"{name}: hex 문자열이 필요합니다")
    if value.startswith("0x"):
        value = value[2:]
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise BadRequest(f"{name}: 잘못된 hex 문자열입니다")


def _json_bytes(data, name):
    """JSON 객체는 다시 직렬화하고, 문자열은 그대로 UTF-8 바이트열로 만든다."""
    value = data.get(name)
    if value is None:
        raise BadRequest(f"{name}: 값이 없습니다")
    if isinstance(value, str):
        return value.encode("utf-8")
    return json.dumps(value).encode("utf-8")


def _public_inputs(data):
    value = data.get("public_inputs")
    if isinstance(value, list):
        return json.dumps(value).encode("utf-8")
    return _hex(data, "public_inputs")


def _call(origin, call):
    result = dispatch(LEDGER, origin, call)
    current_app.logger.info("%s from %s ok", type(call).__name__, origin)
    return result


# ─── 에러 처리 ───

@mixer_bp.errorhandler(MixerError)
def handle_mixer_error(e):
    current_app.logger.warning("rejected: %s %s", e.code, e)
    return jsonify({"error": e.code, "message": str(e)}), 400


@mixer_bp.errorhandler(BadRequest)
def handle_bad_request(e):
    return jsonify({"error": "BadRequest", "message": str(e)}), 400


# ──────────────────────────────────────────────────────────────
# 호출
# ──────────────────────────────────────────────────────────────

@mixer_bp.route("/setup", methods=["POST"])
def setup():
    data = _payload()
    call = SetupVerification(
        public_inputs=_public_inputs(data),
        verification_key=_json_bytes(data, "verification_key"),
    )
    _call(data.get("origin"), call)
    return jsonify({"ok": True})


@mixer_bp.route("/deposit", methods=["POST"])
def deposit():
    data = _payload()
    root = _call(data.get("origin"), Deposit(commitment=_hex(data, "commitment")))
    return jsonify({"ok": True, "root": str(root)})


@mixer_bp.route("/withdraw", methods=["POST"])
def withdraw():
    data = _payload()
    call = Withdraw(
        proof=_json_bytes(data, "proof"),
        root=_hex(data, "root"),
        nullifier_hash=_hex(data, "nullifier_hash"),
        receiver=data.get("receiver"),
    )
    if call.receiver is None:
        raise BadRequest("receiver: 값이 없습니다")
    _call(data.get("origin"), call)
    return jsonify({"ok": True})


@mixer_bp.route("/blacklist", methods=["POST"])
def blacklist():
    data = _payload()
    account = data.get("account")
    if account is None:
        raise BadRequest("account: 값이 없습니다")
    if data.get("remove"):
        _call(data.get("origin"), RemoveBlacklist(account=account))
    else:
        _call(data.get("origin"), AddBlacklist(account=account))
    return jsonify({"ok": True})


@mixer_bp.route("/proof/parse", methods=["POST"])
def proof_parse():
    data = _payload()
    return jsonify(serialize_proof(parse_proof(_json_bytes(data, "proof"))))


# ──────────────────────────────────────────────────────────────
# 조회
# ──────────────────────────────────────────────────────────────

@mixer_bp.route("/state")
def state():
    return jsonify(serialize_ledger(LEDGER))


@mixer_bp.route("/verification-key")
def verification_key():
    raw = LEDGER.raw_verification_key()
    if not raw:
        return jsonify(None)
    return jsonify(serialize_verification_key(parse_verification_key(raw)))


@mixer_bp.route("/events")
def events():
    return jsonify(LEDGER.events.all())


@mixer_bp.route("/balance/<account>")
def balance(account):
    return jsonify({"account": account, "free": LEDGER.currency.balance(account)})
