"""
Groth16 기반 모듈: BLS12-381 유한체 및 타원곡선 연산
======================================================

검증 파이프라인 전체에서 사용하는 대수적 도구를 한 곳에 모은다.

**유한체**:
  - FQ: 기저체(base field), 위수 p ≈ 2^381. 곡선 좌표가 속하는 체.
  - FQ2: FQ[u]/(u² + 1). G2 좌표가 속하는 2차 확장체.
  - FQ12: 페어링 결과가 속하는 12차 확장체 (GT).
  - 스칼라 필드 위수 r ≈ 2^255: 공개 입력이 속하는 체.

**타원곡선**:
  - G1: y² = x³ + 4        (FQ 위)
  - G2: y² = x³ + 4(u + 1) (FQ2 위, twist)
  py_ecc의 optimized 구현은 사영(projective) 좌표 (x, y, z)를 사용하며
  z = 0 인 점이 무한원점(항등원)이다.

사용 예시:
    >>> from zkmixer.groth16.field import G1, ec_mul, ec_add
    >>> P = ec_mul(G1, 5)
    >>> Q = ec_add(P, G1)    # 6·G1
"""

from py_ecc import optimized_bls12_381 as bls12_381
from py_ecc.fields import optimized_bls12_381_FQ as FQ
from py_ecc.fields import optimized_bls12_381_FQ2 as FQ2
from py_ecc.fields import optimized_bls12_381_FQ12 as FQ12


# ─────────────────────────────────────────────────────────────────────
# 상수
# ─────────────────────────────────────────────────────────────────────

# 기저체 위수 p
FIELD_MODULUS = FQ.field_modulus

# 곡선 위수 r (스칼라 필드 크기)
CURVE_ORDER = bls12_381.curve_order

# 곡선 방정식 상수항
B1 = bls12_381.b
B2 = bls12_381.b2

# 생성자
G1 = bls12_381.G1
G2 = bls12_381.G2

# 무한원점 (사영 좌표에서 z = 0)
Z1 = bls12_381.Z1
Z2 = bls12_381.Z2


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 연산
# ─────────────────────────────────────────────────────────────────────

def ec_mul(point, scalar):
    """스칼라 곱셈: scalar · point (G1, G2 모두 가능)."""
    return bls12_381.multiply(point, int(scalar) % CURVE_ORDER)


def ec_add(p1, p2):
    return bls12_381.add(p1, p2)


def ec_neg(point):
    return bls12_381.neg(point)


def ec_eq(p1, p2):
    """사영 좌표 점의 동치 비교. (x, y, z) 표현은 유일하지 않으므로 == 대신 사용한다."""
    return bls12_381.eq(p1, p2)


def is_identity(point):
    return bls12_381.is_inf(point)


def is_on_curve(point, b):
    return bls12_381.is_on_curve(point, b)


def in_subgroup(point):
    """r · point 가 무한원점이면 위수 r 부분군에 속한다."""
    return bls12_381.is_inf(bls12_381.multiply(point, CURVE_ORDER))


def normalize(point):
    """사영 좌표 → 아핀 좌표 (x, y)."""
    return bls12_381.normalize(point)


# ─────────────────────────────────────────────────────────────────────
# 페어링
# ─────────────────────────────────────────────────────────────────────

def ec_pairing(g2_point, g1_point):
    """완전한 페어링 e(P, Q) (final exponentiation 포함).

    주의:
        py_ecc pairing의 인자 순서는 (G2, G1)이다.
    """
    return bls12_381.pairing(g2_point, g1_point)


def miller_loop(g2_point, g1_point):
    """final exponentiation 없이 Miller loop 결과만 반환한다.

    여러 페어링의 곱을 검사할 때 Miller loop 결과를 먼저 곱한 뒤
    final_exponentiate를 한 번만 적용한다.
    """
    return bls12_381.pairing(g2_point, g1_point, final_exponentiate=False)


def final_exponentiate(value):
    return bls12_381.final_exponentiate(value)


GT_ONE = FQ12.one()
