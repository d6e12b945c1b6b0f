from zkmixer.errors import PublicInputsMismatch
from zkmixer.groth16.field import (
    GT_ONE, ec_neg, final_exponentiate, miller_loop,
)
from zkmixer.groth16.preparation import prepare_public_inputs, prepare_verification_key


# e(A, B) == e(α, β) · e(vk_x, γ) · e(C, δ)
# <=> FE(ML(-A, B) · ML(vk_x, γ) · ML(C, δ)) · e(α, β) == 1
def verify(pvk, proof, prepared_inputs):
    product = miller_loop(proof.b, ec_neg(proof.a))
    product = product * miller_loop(pvk.gamma, prepared_inputs)
    product = product * miller_loop(pvk.delta, proof.c)
    return final_exponentiate(product) * pvk.alpha_beta == GT_ONE


def verify_proof(vk, proof, inputs):
    if len(inputs) + 1 != len(vk.ic):
        raise PublicInputsMismatch(
            "public inputs {} != IC {} - 1".format(len(inputs), len(vk.ic))
        )
    pvk = prepare_verification_key(vk)
    return verify(pvk, proof, prepare_public_inputs(inputs, pvk.ic))

