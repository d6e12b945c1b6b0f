"""
Mixer 에러 계층
================

모든 호출 실패는 MixerError의 하위 클래스로 표현된다.
하나의 에러가 발생하면 해당 호출의 모든 상태 변경이 롤백된다.

**분류**:
  - 인코딩 에러: 잘못된 JSON, 숫자가 아닌 필드, 길이 제한 초과
  - 정책 에러: 지원하지 않는 프로토콜/곡선, 공개 입력 개수 불일치, 키 미설정
  - 재사용(replay) 에러: 이미 제출된 커밋먼트, 이미 사용된 nullifier, 알 수 없는 root
  - 암호 구성 에러: 좌표 쌍이 유효한 곡선 점이 아님

페어링 검사 실패는 에러가 아니라 verify()의 False 결과이며,
원장(ledger)에서 InvalidWithdrawProof로 호출을 거부한다.
"""


class MixerError(Exception):
    """모든 mixer 에러의 기본 클래스."""

    @property
    def code(self):
        return type(self).__name__


# ─── 인코딩 에러 ───

class EncodingError(MixerError):
    pass


class MalformedNumber(EncodingError):
    pass


class MalformedVerificationKey(EncodingError):
    pass


class MalformedProof(EncodingError):
    pass


class MalformedPublicInputs(EncodingError):
    pass


class TooLongPublicInputs(EncodingError):
    pass


class TooLongVerificationKey(EncodingError):
    pass


class TooLongProof(EncodingError):
    pass


class ProofIsEmpty(EncodingError):
    pass


# ─── 정책 에러 ───

class PolicyError(MixerError):
    pass


class NotSupportedProtocol(PolicyError):
    pass


class NotSupportedCurve(PolicyError):
    pass


class PublicInputsMismatch(PolicyError):
    pass


class VerificationKeyIsNotSet(PolicyError):
    pass


class BlacklistRejected(PolicyError):
    pass


class UnknownCall(PolicyError):
    pass


class BadOrigin(PolicyError):
    pass


class MaxMerkleLen(PolicyError):
    pass


# ─── 재사용 에러 ───

class ReplayError(MixerError):
    pass


class CommitmentHasBeenSubmitted(ReplayError):
    pass


class NoteHasBeenSpent(ReplayError):
    """nullifier가 이미 사용되었거나 root가 등록되지 않았다.

    두 조건은 같은 에러로 보고되어 호출자가 구분할 수 없다.
    """


# ─── 암호 구성 에러 ───

class ConstructionError(MixerError):
    pass


class InvalidCurvePoint(ConstructionError):
    pass


class ProofCreationError(ConstructionError):
    pass


class VerificationKeyCreationError(ConstructionError):
    pass


# ─── 검증 / 지급 ───

class InvalidWithdrawProof(MixerError):
    pass


class ProofVerificationError(MixerError):
    pass


class InsufficientBalance(MixerError):
    pass
