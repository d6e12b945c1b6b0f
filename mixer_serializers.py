"""
Mixer 데이터 직렬화 헬퍼
=========================

곡선 점, 검증키, 원장 상태를 JSON 응답에 넣을 수 있는 형태로 변환한다.
큰 정수는 정밀도 손실을 피하기 위해 10진수 문자열로 내보낸다.
"""

from zkmixer.groth16.field import is_identity, normalize
from zkmixer.pool.storage import COMMITMENTS, NULLIFIER_HASHES, ROOTS


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None (무한원점)"""
    if is_identity(point):
        return None
    x, y = normalize(point)
    return [str(int(x)), str(int(y))]


# ─── G2 point ───

def serialize_g2(point):
    """G2 point → [[str,str],[str,str]] or None (무한원점)"""
    if is_identity(point):
        return None
    x, y = normalize(point)
    return [
        [str(int(x.coeffs[0])), str(int(x.coeffs[1]))],
        [str(int(y.coeffs[0])), str(int(y.coeffs[1]))],
    ]


# ─── Verification key / Proof ───

def serialize_verification_key(vk):
    return {
        "protocol": vk.protocol,
        "curve": vk.curve,
        "nPublic": vk.n_public,
        "alpha": serialize_g1(vk.alpha),
        "beta": serialize_g2(vk.beta),
        "gamma": serialize_g2(vk.gamma),
        "delta": serialize_g2(vk.delta),
        "IC": [serialize_g1(p) for p in vk.ic],
    }


def serialize_proof(proof):
    return {
        "protocol": proof.protocol,
        "curve": proof.curve,
        "a": serialize_g1(proof.a),
        "b": serialize_g2(proof.b),
        "c": serialize_g1(proof.c),
    }


# ─── Ledger ───

def serialize_ledger(ledger):
    """원장 상태 스냅샷"""
    store = ledger.store
    return {
        "commitments": sorted(store.keys(COMMITMENTS), key=int),
        "nullifier_hashes": sorted(store.keys(NULLIFIER_HASHES), key=int),
        "roots": sorted(store.keys(ROOTS), key=int),
        "merkle_vec": [str(c) for c in ledger.merkle_vec()],
        "verification_key_set": bool(ledger.raw_verification_key()),
        "public_inputs": [str(x) for x in ledger.public_inputs()]
        if ledger.raw_public_inputs() else [],
        "pool_balance": ledger.currency.balance(ledger.pool_account),
    }
