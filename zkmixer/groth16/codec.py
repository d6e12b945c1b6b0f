"""
숫자 코덱
==========

외부 입력(JSON 안의 10진수 문자열, 바이트열)을 고정 폭 정수로 변환한다.

**규칙**:
  - 10진수 문자열은 ASCII 숫자만 허용한다 (부호, 공백, 빈 문자열 불가).
  - 값이 modulus 이상이면 실패한다. 절삭(truncation)은 하지 않는다.
  - 256비트 워드(commitment, root, nullifier hash)는 big-endian 바이트열이다.
"""

from zkmixer.errors import MalformedNumber

U256_BYTES = 32
U256_MAX = (1 << 256) - 1


def parse_field_element(raw, modulus):
    """10진수 문자열(str/bytes) 또는 int를 modulus 미만의 정수로 변환한다.

    Raises:
        MalformedNumber: 숫자가 아닌 문자가 있거나 modulus 이상일 때
    """
    if isinstance(raw, bool):
        raise MalformedNumber(f"bool은 숫자가 아닙니다: {raw!r}")

    if isinstance(raw, int):
        value = raw
    else:
        if isinstance(raw, (bytes, bytearray)):
            try:
                raw = raw.decode("ascii")
            except UnicodeDecodeError:
                raise MalformedNumber("ASCII가 아닌 바이트가 포함되어 있습니다")
        if not isinstance(raw, str):
            raise MalformedNumber(f"10진수 문자열이 아닙니다: {raw!r}")
        # str.isdigit()은 유니코드 숫자도 허용하므로 ASCII 범위를 직접 확인한다
        if not raw or any(ch not in "0123456789" for ch in raw):
            raise MalformedNumber(f"10진수 문자열이 아닙니다: {raw!r}")
        value = int(raw)

    if value < 0 or value >= modulus:
        raise MalformedNumber(f"값이 필드 범위를 벗어났습니다: {value}")
    return value


def decode_u256(raw):
    """big-endian 바이트열 → 256비트 정수. 32바이트를 넘으면 실패한다."""
    raw = bytes(raw)
    if len(raw) > U256_BYTES:
        raise MalformedNumber(f"256비트를 초과합니다: {len(raw)} bytes")
    return int.from_bytes(raw, "big")


def encode_u256(value):
    """256비트 정수 → 32바이트 big-endian."""
    if value < 0 or value > U256_MAX:
        raise MalformedNumber(f"256비트 범위를 벗어났습니다: {value}")
    return int(value).to_bytes(U256_BYTES, "big")
