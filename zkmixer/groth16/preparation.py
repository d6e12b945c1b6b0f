"""
검증키 / 공개 입력 전처리
==========================

**검증키 전처리**:
  e(α, β)는 증명과 무관한 값이므로 검증키를 받을 때 한 번만 계산한다.
  검증 시에는 증명마다 Miller loop 3회 + final exponentiation 1회만 수행한다.

**공개 입력 전처리**:
  vk_x = IC[0] + Σ inputs[i] · IC[i+1]
"""

from dataclasses import dataclass

from zkmixer.errors import VerificationKeyCreationError
from zkmixer.groth16.field import ec_add, ec_mul, ec_pairing, is_identity


@dataclass(frozen=True)
class PreparedVerificationKey:
    alpha_beta: object
    gamma: tuple
    delta: tuple
    ic: tuple


def prepare_verification_key(vk):
    """VerificationKey → PreparedVerificationKey.

    Raises:
        VerificationKeyCreationError: α, β, γ, δ 중 무한원점이 있을 때
    """
    for name in ("alpha", "beta", "gamma", "delta"):
        if is_identity(getattr(vk, name)):
            raise VerificationKeyCreationError(f"{name}가 무한원점입니다")

    return PreparedVerificationKey(
        alpha_beta=ec_pairing(vk.beta, vk.alpha),
        gamma=vk.gamma,
        delta=vk.delta,
        ic=tuple(vk.ic),
    )


def prepare_public_inputs(inputs, ic):
    """IC[0] + Σ inputs[i] · IC[i+1] (len(inputs) + 1 == len(ic) 가정)"""
    acc = ic[0]
    for x, point in zip(inputs, ic[1:]):
        acc = ec_add(acc, ec_mul(point, x))
    return acc
