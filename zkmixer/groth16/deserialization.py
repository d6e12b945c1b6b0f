"""
검증키 / 증명 역직렬화
========================

snarkjs가 내보내는 JSON 형식의 검증키(verification_key.json)와
증명(proof.json) 바이트열을 곡선 점으로 변환한다.

**검증키 형식**::

    {
      "protocol": "groth16", "curve": "bls12381", "nPublic": 2,
      "vk_alpha_1": ["x", "y", "1"],
      "vk_beta_2":  [["x0", "x1"], ["y0", "y1"], ["1", "0"]],
      "vk_gamma_2": ..., "vk_delta_2": ...,
      "IC": [["x", "y", "1"], ...]          # nPublic + 1 개
    }

**증명 형식**::

    {"pi_a": [...], "pi_b": [[...], [...], [...]], "pi_c": [...],
     "protocol": "groth16", "curve": "bls12381"}

숫자 값은 정밀도 손실을 피하기 위해 모두 10진수 문자열이다.

**처리 순서**:
  1. UTF-8 JSON 파싱, 필드 구조 및 숫자 검사  → Malformed*
  2. curve / protocol 검사                     → NotSupportedCurve / NotSupportedProtocol
  3. 곡선 점 생성                              → *CreationError
"""

import json
from dataclasses import dataclass

from zkmixer.errors import (
    InvalidCurvePoint,
    MalformedNumber,
    MalformedProof,
    MalformedPublicInputs,
    MalformedVerificationKey,
    NotSupportedCurve,
    NotSupportedProtocol,
    ProofCreationError,
    VerificationKeyCreationError,
)
from zkmixer.groth16.codec import parse_field_element
from zkmixer.groth16.curve import build_g1, build_g2
from zkmixer.groth16.field import FIELD_MODULUS, CURVE_ORDER

SUPPORTED_PROTOCOL = "groth16"
SUPPORTED_CURVE = "bls12381"

U64_MAX = (1 << 64) - 1


@dataclass(frozen=True)
class VerificationKey:
    protocol: str
    curve: str
    n_public: int
    alpha: tuple
    beta: tuple
    gamma: tuple
    delta: tuple
    ic: tuple


@dataclass(frozen=True)
class Proof:
    a: tuple
    b: tuple
    c: tuple
    protocol: str
    curve: str


# ─── JSON 구조 헬퍼 ───

def _load_json_object(raw, error):
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    try:
        data = json.loads(bytes(raw).decode("utf-8"))
    except (UnicodeDecodeError, ValueError, TypeError) as e:
        raise error(f"JSON 파싱 실패: {e}")
    if not isinstance(data, dict):
        raise error("JSON 객체가 아닙니다")
    return data


def _field(data, name, error):
    if name not in data:
        raise error(f"필드가 없습니다: {name}")
    return data[name]


def _tag(data, name, error):
    value = _field(data, name, error)
    if not isinstance(value, str):
        raise error(f"{name} 필드는 문자열이어야 합니다")
    return value


def _coords(values, error):
    if not all(isinstance(v, str) for v in values):
        raise error("좌표는 10진수 문자열이어야 합니다")
    try:
        return [parse_field_element(v, FIELD_MODULUS) for v in values]
    except MalformedNumber as e:
        raise error(str(e))


def _raw_g1(value, error):
    """["x", "y"] 또는 ["x", "y", "z"] → (x, y, z)"""
    if not isinstance(value, list) or len(value) not in (2, 3):
        raise error("G1 점은 2개 또는 3개의 좌표여야 합니다")
    coords = _coords(value, error)
    if len(coords) == 2:
        coords.append(1)
    return tuple(coords)


def _raw_g2(value, error):
    """[[x0, x1], [y0, y1]] 또는 [[x0, x1], [y0, y1], [z0, z1]] → (x0, x1, y0, y1, (z0, z1))"""
    if not isinstance(value, list) or len(value) not in (2, 3):
        raise error("G2 점은 2개 또는 3개의 Fq2 좌표여야 합니다")
    pairs = []
    for pair in value:
        if not isinstance(pair, list) or len(pair) != 2:
            raise error("Fq2 좌표는 2개의 원소여야 합니다")
        pairs.append(_coords(pair, error))
    if len(pairs) == 2:
        pairs.append([1, 0])
    (x0, x1), (y0, y1), z = pairs
    return (x0, x1, y0, y1, tuple(z))


def _check_tags(curve, protocol):
    if curve != SUPPORTED_CURVE:
        raise NotSupportedCurve(f"지원하지 않는 곡선입니다: {curve}")
    if protocol != SUPPORTED_PROTOCOL:
        raise NotSupportedProtocol(f"지원하지 않는 프로토콜입니다: {protocol}")


# ─── 검증키 ───

def parse_verification_key(raw):
    """검증키 JSON 바이트열 → VerificationKey.

    Raises:
        MalformedVerificationKey: JSON/구조/숫자 오류, IC 길이 불일치
        NotSupportedCurve, NotSupportedProtocol: 지원 조합이 아닐 때
        VerificationKeyCreationError: 좌표가 유효한 곡선 점이 아닐 때
    """
    err = MalformedVerificationKey
    data = _load_json_object(raw, err)

    protocol = _tag(data, "protocol", err)
    curve = _tag(data, "curve", err)

    n_public = _field(data, "nPublic", err)
    try:
        n_public = parse_field_element(n_public, U64_MAX + 1)
    except MalformedNumber as e:
        raise err(f"nPublic: {e}")

    alpha = _raw_g1(_field(data, "vk_alpha_1", err), err)
    beta = _raw_g2(_field(data, "vk_beta_2", err), err)
    gamma = _raw_g2(_field(data, "vk_gamma_2", err), err)
    delta = _raw_g2(_field(data, "vk_delta_2", err), err)

    ic = _field(data, "IC", err)
    if not isinstance(ic, list):
        raise err("IC 필드는 배열이어야 합니다")
    ic = [_raw_g1(p, err) for p in ic]
    if len(ic) != n_public + 1:
        raise err(f"IC 길이 {len(ic)}가 nPublic + 1 = {n_public + 1}과 다릅니다")

    _check_tags(curve, protocol)

    try:
        return VerificationKey(
            protocol=protocol,
            curve=curve,
            n_public=n_public,
            alpha=build_g1(*alpha),
            beta=build_g2(*beta),
            gamma=build_g2(*gamma),
            delta=build_g2(*delta),
            ic=tuple(build_g1(*p) for p in ic),
        )
    except InvalidCurvePoint as e:
        raise VerificationKeyCreationError(str(e))


# ─── 증명 ───

def parse_proof(raw):
    """증명 JSON 바이트열 → Proof.

    Raises:
        MalformedProof: JSON/구조/숫자 오류
        NotSupportedCurve, NotSupportedProtocol: 지원 조합이 아닐 때
        ProofCreationError: 좌표가 유효한 곡선 점이 아닐 때
    """
    err = MalformedProof
    data = _load_json_object(raw, err)

    protocol = _tag(data, "protocol", err)
    curve = _tag(data, "curve", err)
    a = _raw_g1(_field(data, "pi_a", err), err)
    b = _raw_g2(_field(data, "pi_b", err), err)
    c = _raw_g1(_field(data, "pi_c", err), err)

    _check_tags(curve, protocol)

    try:
        return Proof(
            a=build_g1(*a),
            b=build_g2(*b),
            c=build_g1(*c),
            protocol=protocol,
            curve=curve,
        )
    except InvalidCurvePoint as e:
        raise ProofCreationError(str(e))


# ─── 공개 입력 ───

def _decode_compact(raw):
    """SCALE compact 정수 → (값, 소비한 바이트 수)"""
    if not raw:
        raise MalformedPublicInputs("빈 공개 입력입니다")
    mode = raw[0] & 0b11
    if mode == 0:
        return raw[0] >> 2, 1
    if mode == 1:
        if len(raw) < 2:
            raise MalformedPublicInputs("compact 길이가 잘렸습니다")
        return int.from_bytes(raw[:2], "little") >> 2, 2
    if mode == 2:
        if len(raw) < 4:
            raise MalformedPublicInputs("compact 길이가 잘렸습니다")
        return int.from_bytes(raw[:4], "little") >> 2, 4
    size = (raw[0] >> 2) + 4
    if len(raw) < size + 1:
        raise MalformedPublicInputs("compact 길이가 잘렸습니다")
    return int.from_bytes(raw[1:size + 1], "little"), size + 1


def _encode_compact(n):
    if n < 1 << 6:
        return bytes([n << 2])
    if n < 1 << 14:
        return ((n << 2) | 0b01).to_bytes(2, "little")
    if n < 1 << 30:
        return ((n << 2) | 0b10).to_bytes(4, "little")
    body = n.to_bytes((n.bit_length() + 7) // 8, "little")
    return bytes([((len(body) - 4) << 2) | 0b11]) + body


def encode_public_inputs_u64(values):
    """u64 리스트 → SCALE Vec<u64> 바이트열"""
    out = bytearray(_encode_compact(len(values)))
    for v in values:
        if not 0 <= v <= U64_MAX:
            raise MalformedPublicInputs(f"u64 범위를 벗어났습니다: {v}")
        out.extend(int(v).to_bytes(8, "little"))
    return bytes(out)


def _parse_public_inputs_json(raw):
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedPublicInputs(f"JSON 파싱 실패: {e}")
    if not isinstance(data, list):
        raise MalformedPublicInputs("공개 입력은 배열이어야 합니다")
    if not all(isinstance(v, str) for v in data):
        raise MalformedPublicInputs("공개 입력은 10진수 문자열이어야 합니다")
    try:
        return [parse_field_element(v, CURVE_ORDER) for v in data]
    except MalformedNumber as e:
        raise MalformedPublicInputs(str(e))


def parse_public_inputs(raw):
    """공개 입력 바이트열 → 스칼라 필드 원소 리스트.

    두 가지 인코딩을 받는다:
      - JSON 배열: ["123", "456"] (각 값 < r, 첫 바이트가 `[`)
      - SCALE Vec<u64>: compact 길이 + 8바이트 little-endian 워드
    """
    raw = bytes(raw)
    # compact 접두 0x5B는 2^30개 이상의 원소를 뜻하므로 유효한 Vec<u64>는 `[`로 시작하지 않는다
    if raw[:1] == b"[":
        return _parse_public_inputs_json(raw)

    length, offset = _decode_compact(raw)
    body = raw[offset:]
    if len(body) != length * 8:
        raise MalformedPublicInputs(
            f"Vec<u64> 길이 불일치: {length}개 선언, {len(body)} bytes"
        )
    return [int.from_bytes(body[i:i + 8], "little") for i in range(0, len(body), 8)]
