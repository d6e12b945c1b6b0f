"""
곡선 점 생성기
===============

좌표 정수로부터 G1/G2 점을 만들고 유효성을 검사한다.

snarkjs는 점을 사영 좌표 [x, y, z] 형태로 내보낸다.
  - z = 1 (G2는 [1, 0]): 아핀 좌표의 유한 점
  - z = 0 (G2는 [0, 0]): 무한원점. 곡선 방정식 검사 없이 항등원으로 받아들인다.

유한 점은 다음을 모두 만족해야 한다:
  1. 모든 좌표가 기저체 위수 p 미만
  2. 곡선 방정식 만족
  3. 위수 r 부분군에 속함 (r · P = O)
"""

from zkmixer.errors import InvalidCurvePoint
from zkmixer.groth16.field import (
    FQ, FQ2, FIELD_MODULUS, B1, B2, Z1, Z2,
    is_on_curve, in_subgroup,
)


def _coordinate(value):
    value = int(value)
    if value < 0 or value >= FIELD_MODULUS:
        raise InvalidCurvePoint(f"좌표가 기저체 범위를 벗어났습니다: {value}")
    return value


def _is_unit(z):
    if isinstance(z, (tuple, list)):
        return len(z) == 2 and int(z[0]) == 1 and int(z[1]) == 0
    return int(z) == 1


def _is_zero(z):
    if isinstance(z, (tuple, list)):
        return len(z) == 2 and int(z[0]) == 0 and int(z[1]) == 0
    return int(z) == 0


def build_g1(x, y, z=1):
    """G1 점 (FQ(x), FQ(y), FQ(1))을 만든다.

    Raises:
        InvalidCurvePoint: 곡선 위에 없거나, 부분군 밖이거나, z가 0/1이 아닐 때
    """
    if _is_zero(z):
        return Z1
    if not _is_unit(z):
        raise InvalidCurvePoint(f"지원하지 않는 z 좌표입니다: {z}")

    point = (FQ(_coordinate(x)), FQ(_coordinate(y)), FQ.one())
    if not is_on_curve(point, B1):
        raise InvalidCurvePoint("G1 점이 곡선 위에 있지 않습니다")
    if not in_subgroup(point):
        raise InvalidCurvePoint("G1 점이 위수 r 부분군에 속하지 않습니다")
    return point


def build_g2(x0, x1, y0, y1, z=(1, 0)):
    """G2 점 (FQ2([x0, x1]), FQ2([y0, y1]), FQ2.one())을 만든다.

    x = x0 + x1·u, y = y0 + y1·u
    """
    if _is_zero(z):
        return Z2
    if not _is_unit(z):
        raise InvalidCurvePoint(f"지원하지 않는 z 좌표입니다: {z}")

    point = (
        FQ2([_coordinate(x0), _coordinate(x1)]),
        FQ2([_coordinate(y0), _coordinate(y1)]),
        FQ2.one(),
    )
    if not is_on_curve(point, B2):
        raise InvalidCurvePoint("G2 점이 곡선 위에 있지 않습니다")
    if not in_subgroup(point):
        raise InvalidCurvePoint("G2 점이 위수 r 부분군에 속하지 않습니다")
    return point
