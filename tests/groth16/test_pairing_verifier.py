"""
Tests for zkmixer.groth16.verifying: Groth16 페어링 검사.

합성 인스턴스는 trapdoor를 알고 만든 유효한 증명이고,
알려진 벡터는 출금 회로([root, nullifierHash])의 snarkjs 증명이다.
"""

import dataclasses

import pytest

from conftest import KNOWN_NULLIFIER, KNOWN_ROOT
from zkmixer.errors import PublicInputsMismatch
from zkmixer.groth16.field import G1, ec_add, ec_neg
from zkmixer.groth16.preparation import prepare_public_inputs
from zkmixer.groth16.verifying import verify, verify_proof


class TestSyntheticVerify:

    def test_valid_proof(self, synthetic, synthetic_parsed):
        pvk = synthetic_parsed["pvk"]
        vk_x = prepare_public_inputs(synthetic["inputs"], pvk.ic)
        assert verify(pvk, synthetic_parsed["proof"], vk_x) is True

    def test_verify_proof_from_unprepared_key(self, synthetic, synthetic_parsed):
        assert verify_proof(synthetic_parsed["vk"], synthetic_parsed["proof"], synthetic["inputs"])

    def test_different_inputs_rejected(self, synthetic_parsed):
        assert not verify_proof(synthetic_parsed["vk"], synthetic_parsed["proof"], [7, 5])

    def test_tampered_c_rejected(self, synthetic, synthetic_parsed):
        proof = synthetic_parsed["proof"]
        tampered = dataclasses.replace(proof, c=ec_add(proof.c, G1))
        pvk = synthetic_parsed["pvk"]
        assert not verify(pvk, tampered, prepare_public_inputs(synthetic["inputs"], pvk.ic))

    def test_negated_a_rejected(self, synthetic, synthetic_parsed):
        proof = synthetic_parsed["proof"]
        tampered = dataclasses.replace(proof, a=ec_neg(proof.a))
        pvk = synthetic_parsed["pvk"]
        assert not verify(pvk, tampered, prepare_public_inputs(synthetic["inputs"], pvk.ic))

    @pytest.mark.parametrize("inputs", [[5], [5, 7, 9]])
    def test_input_count_mismatch(self, synthetic_parsed, inputs):
        with pytest.raises(PublicInputsMismatch):
            verify_proof(synthetic_parsed["vk"], synthetic_parsed["proof"], inputs)


class TestKnownVector:

    def test_valid_withdraw_proof(self, known_parsed):
        pvk = known_parsed["pvk"]
        vk_x = prepare_public_inputs([KNOWN_ROOT, KNOWN_NULLIFIER], pvk.ic)
        assert verify(pvk, known_parsed["proof"], vk_x)

    def test_wrong_nullifier_rejected(self, known_parsed):
        pvk = known_parsed["pvk"]
        vk_x = prepare_public_inputs([KNOWN_ROOT, KNOWN_NULLIFIER + 1], pvk.ic)
        assert not verify(pvk, known_parsed["proof"], vk_x)
