"""
Mixer 원장 상태 머신
=====================

커밋먼트 집합, nullifier hash 집합, root 집합, 하나의 활성 검증키/공개 입력 쌍을
관리하고 입금·출금을 처리한다.

**입금 (deposit)**::

    commitment ──► Commitments에 없음? ──► Commitments 등록
                                          ──► Merkle 리프 추가 → 새 root를 Roots에 기록
                                          ──► 입금자 → 풀 계정으로 고정 금액 이동

**출금 (withdraw)**::

    nullifier 미사용? root 등록됨? (둘 다 NoteHasBeenSpent)
          ──► proof 길이 검사 ──► 역직렬화 (곡선/프로토콜/점 검사)
          ──► 검증키 설정됨? ──► 페어링 검사
          ──► nullifier 사용 처리 ──► 풀 계정 → receiver 로 고정 금액 지급

모든 호출은 원장 잠금을 잡은 채 저장소 트랜잭션 안에서 하나씩 실행된다.
예외가 발생하면 그 호출이 쓴 모든 값(집합, 잔액, 이벤트)이 되돌려진다.
"""

import logging
import threading
from functools import partial, wraps

from zkmixer.errors import (
    BadOrigin,
    BlacklistRejected,
    CommitmentHasBeenSubmitted,
    InvalidWithdrawProof,
    MixerError,
    NoteHasBeenSpent,
    ProofIsEmpty,
    ProofVerificationError,
    PublicInputsMismatch,
    TooLongProof,
    TooLongPublicInputs,
    TooLongVerificationKey,
    VerificationKeyIsNotSet,
)
from zkmixer.groth16.codec import decode_u256
from zkmixer.groth16.deserialization import (
    parse_proof,
    parse_public_inputs,
    parse_verification_key,
)
from zkmixer.groth16.preparation import prepare_public_inputs, prepare_verification_key
from zkmixer.groth16.verifying import verify
from zkmixer.pool import events
from zkmixer.pool.config import Config
from zkmixer.pool.currency import Currency
from zkmixer.pool.events import EventLog
from zkmixer.pool.merkle import MerkleTree
from zkmixer.pool.storage import (
    BLACKLIST,
    COMMITMENTS,
    NULLIFIER_HASHES,
    ROOTS,
)

logger = logging.getLogger(__name__)

PUBLIC_INPUTS_KEY = "public_inputs"
VERIFICATION_KEY_KEY = "verification_key"
MERKLE_VEC_KEY = "merkle_vec"


def _serialized(method):
    """원장 호출을 하나씩 실행한다. 검사와 기록 사이에 다른 호출이 끼어들지 않는다."""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class Ledger:
    """Mixer 원장.

    Args:
        store: LedgerStore
        config: 길이 제한, 고정 금액, 풀 계정을 담은 설정 클래스
        accumulator_factory: 리프 목록 → Merkle 누산기.
            기본값은 config.MERKLE_DEPTH 깊이의 MerkleTree.
    """

    def __init__(self, store, config=Config, accumulator_factory=None):
        self.store = store
        self.config = config
        self.currency = Currency(store)
        self.events = EventLog(store)
        if accumulator_factory is None:
            accumulator_factory = partial(MerkleTree.from_leaves, depth=config.MERKLE_DEPTH)
        self.accumulator_factory = accumulator_factory
        # (검증키 버퍼, PreparedVerificationKey): e(α, β) 재계산을 피한다
        self._prepared = None
        self._lock = threading.RLock()

    # ─────────────────────────────────────────────────────────────
    # 조회
    # ─────────────────────────────────────────────────────────────

    @property
    def pool_account(self):
        return self.config.MIXER_ACCOUNT

    def has_commitment(self, commitment):
        return self.store.contains(COMMITMENTS, commitment)

    def is_spent(self, nullifier_hash):
        return self.store.contains(NULLIFIER_HASHES, nullifier_hash)

    def is_known_root(self, root):
        return self.store.contains(ROOTS, root)

    def is_blacklisted(self, account):
        return self.store.contains(BLACKLIST, account)

    def merkle_vec(self):
        return [int(c) for c in self.store.get_value(MERKLE_VEC_KEY, [])]

    def raw_verification_key(self):
        return bytes.fromhex(self.store.get_value(VERIFICATION_KEY_KEY, ""))

    def raw_public_inputs(self):
        return bytes.fromhex(self.store.get_value(PUBLIC_INPUTS_KEY, ""))

    def public_inputs(self):
        return parse_public_inputs(self.raw_public_inputs())

    def prepared_verification_key(self):
        raw = self.raw_verification_key()
        if not raw:
            raise VerificationKeyIsNotSet("검증키가 설정되지 않았습니다")
        if self._prepared is None or self._prepared[0] != raw:
            vk = parse_verification_key(raw)
            self._prepared = (raw, prepare_verification_key(vk))
        return self._prepared[1]

    # ─────────────────────────────────────────────────────────────
    # 호출
    # ─────────────────────────────────────────────────────────────

    @_serialized
    def setup_verification(self, origin, public_inputs, raw_vk):
        """공개 입력과 검증키를 저장한다. 이전 값은 덮어쓴다."""
        public_inputs = bytes(public_inputs)
        raw_vk = bytes(raw_vk)

        if len(public_inputs) > self.config.MAX_PUBLIC_INPUTS_LENGTH:
            raise TooLongPublicInputs(
                f"공개 입력 길이 {len(public_inputs)} > {self.config.MAX_PUBLIC_INPUTS_LENGTH}"
            )
        inputs = parse_public_inputs(public_inputs)

        if len(raw_vk) > self.config.MAX_VERIFICATION_KEY_LENGTH:
            raise TooLongVerificationKey(
                f"검증키 길이 {len(raw_vk)} > {self.config.MAX_VERIFICATION_KEY_LENGTH}"
            )
        vk = parse_verification_key(raw_vk)

        if vk.n_public != len(inputs):
            raise PublicInputsMismatch(
                f"nPublic {vk.n_public} != 공개 입력 {len(inputs)}개"
            )
        pvk = prepare_verification_key(vk)

        with self.store.transaction():
            self.store.set_value(PUBLIC_INPUTS_KEY, public_inputs.hex())
            self.store.set_value(VERIFICATION_KEY_KEY, raw_vk.hex())
            self.events.emit(events.VERIFICATION_SETUP_COMPLETED, who=_account(origin))

        self._prepared = (raw_vk, pvk)
        logger.info("verification setup completed: nPublic=%d", vk.n_public)

    @_serialized
    def deposit(self, origin, commitment):
        """커밋먼트를 등록하고 새 Merkle root를 기록한다."""
        who = self._ensure_signed(origin)
        c = decode_u256(commitment)

        if self.has_commitment(c):
            logger.warning("commitment already submitted: %d", c)
            raise CommitmentHasBeenSubmitted(f"이미 제출된 커밋먼트입니다: {c}")

        with self.store.transaction():
            self.store.insert(COMMITMENTS, c)

            leaves = self.merkle_vec()
            accumulator = self.accumulator_factory(leaves)
            root, _ = accumulator.insert(c)
            self.store.set_value(MERKLE_VEC_KEY, [str(x) for x in leaves + [c]])
            self.store.insert(ROOTS, root)

            self.currency.transfer(who, self.pool_account, self.config.MIXER_BALANCE)
            self.events.emit(
                events.DEPOSITED,
                who=who,
                commitment=str(c),
                leaf_index=len(leaves),
                root=str(root),
            )

        logger.info("deposit: leaf=%d root=%d", len(leaves), root)
        return root

    @_serialized
    def withdraw(self, origin, proof, root, nullifier_hash, receiver):
        """증명을 검증하고 nullifier를 사용 처리한 뒤 receiver에게 지급한다."""
        self._ensure_signed(origin)
        if receiver is None:
            raise BadOrigin("receiver 계정이 필요합니다")

        nullifier_hash = decode_u256(nullifier_hash)
        root = decode_u256(root)
        # 두 조건은 같은 에러로 보고한다
        if self.is_spent(nullifier_hash) or not self.is_known_root(root):
            logger.warning("withdraw rejected: spent note or unknown root")
            raise NoteHasBeenSpent("이미 사용된 노트입니다")

        proof = bytes(proof)
        if not proof:
            raise ProofIsEmpty("빈 증명입니다")
        if len(proof) > self.config.MAX_PROOF_LENGTH:
            raise TooLongProof(f"증명 길이 {len(proof)} > {self.config.MAX_PROOF_LENGTH}")
        parsed = parse_proof(proof)

        pvk = self.prepared_verification_key()
        inputs = self.public_inputs()
        if len(inputs) + 1 != len(pvk.ic):
            raise PublicInputsMismatch(
                f"공개 입력 {len(inputs)}개, IC {len(pvk.ic)}개"
            )

        try:
            ok = verify(pvk, parsed, prepare_public_inputs(inputs, pvk.ic))
        except MixerError:
            raise
        except Exception as e:
            raise ProofVerificationError(f"증명 검증 중 오류: {e}") from e

        if not ok:
            logger.warning("withdraw rejected: invalid proof")
            raise InvalidWithdrawProof("증명 검증에 실패했습니다")

        with self.store.transaction():
            self.store.insert(NULLIFIER_HASHES, nullifier_hash)
            self.currency.transfer(self.pool_account, receiver, self.config.MIXER_BALANCE)
            self.events.emit(
                events.WITHDRAWN,
                nullifier_hash=str(nullifier_hash),
                to=_account(receiver),
            )

        logger.info("withdraw: nullifier=%d receiver=%s", nullifier_hash, receiver)

    @_serialized
    def add_black_list(self, origin, account):
        self._ensure_origin(origin)
        with self.store.transaction():
            self.store.insert(BLACKLIST, account)
            self.events.emit(events.BLACKLIST_ADDED, account=_account(account))

    @_serialized
    def remove_black_list(self, origin, account):
        self._ensure_origin(origin)
        with self.store.transaction():
            self.store.remove(BLACKLIST, account)
            self.events.emit(events.BLACKLIST_REMOVED, account=_account(account))

    # ─────────────────────────────────────────────────────────────

    def _ensure_origin(self, origin):
        if origin is None:
            raise BadOrigin("서명된 호출자가 필요합니다")

    def _ensure_signed(self, origin):
        self._ensure_origin(origin)
        if self.is_blacklisted(origin):
            logger.warning("blacklisted origin rejected: %s", origin)
            raise BlacklistRejected(f"블랙리스트 계정입니다: {origin}")
        return _account(origin)


def _account(account):
    return None if account is None else str(account)
