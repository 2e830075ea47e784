from __future__ import annotations

import logging
from dataclasses import dataclass  # pairing-input container

from curve import G1_GENERATOR, G1Point  # affine G1
from errors import DivisionByZero, ShpleminiFailed  # typed failures
from field import Fr  # BN254 scalar field
from honk_types import CONST_PROOF_SIZE_LOG_N, NUMBER_UNSHIFTED  # protocol sizes
from polynomials import compute_squares  # r^(2^i)

log = logging.getLogger(__name__)

@dataclass(frozen=True)
class PairingInputs:  # G1 sides of e(p0, [1]_2) * e(p1, [x]_2) == 1.
    p0: G1Point
    p1: G1Point

def _inverse(x):  # Field inverse, reported as an opening failure.
    try:
        return x.inv()
    except DivisionByZero as exc:
        raise ShpleminiFailed("zero denominator in opening batching") from exc

def entity_commitments(proof, vk) -> list[G1Point]:  # 35 unshifted then 5 shifted commitments, in entity order.
    witness = [
        proof.w1, proof.w2, proof.w3, proof.w4, proof.z_perm,
        proof.lookup_inverses, proof.lookup_read_counts, proof.lookup_read_tags,
    ]
    shifted = [proof.w1, proof.w2, proof.w3, proof.w4, proof.z_perm]
    return vk.selector_commitments() + [c.to_affine() for c in witness] + [c.to_affine() for c in shifted]

def compute_fold_pos_evaluation(r_squares, gemini_evals, us, batched_evaluation):  # Reconstruct A_0(r) from the folds.
    acc = batched_evaluation
    for i in range(CONST_PROOF_SIZE_LOG_N, 0, -1):
        challenge_power = r_squares[i - 1]
        u = us[i - 1]
        one_minus_u = Fr.one() - u
        numerator = challenge_power * acc * 2 - gemini_evals[i - 1] * (challenge_power * one_minus_u - u)
        acc = numerator * _inverse(challenge_power * one_minus_u + u)
    return acc

def batch_opening_claims(proof, vk, tp):  # (commitments, scalars): shplonk_q, 40 entities, 27 folds, [1]_1, [W] with scalar z.
    r_squares = compute_squares(tp.gemini_r, CONST_PROOF_SIZE_LOG_N)
    z = tp.shplonk_z
    nu = tp.shplonk_nu

    inverse_vanishing = [_inverse(z - r_squares[0])]  # 1 / (z - r)
    for i in range(CONST_PROOF_SIZE_LOG_N):
        inverse_vanishing.append(_inverse(z + r_squares[i]))  # 1 / (z + r^(2^i))

    pos_inverted_denominator, neg_inverted_denominator = inverse_vanishing[0], inverse_vanishing[1]
    unshifted_scalar = pos_inverted_denominator + nu * neg_inverted_denominator
    shifted_scalar = _inverse(tp.gemini_r) * (pos_inverted_denominator - nu * neg_inverted_denominator)

    commitments = [proof.shplonk_q.to_affine()]
    scalars = [Fr.one()]

    # Entity claims batched with rho.
    batching_challenge = Fr.one()
    batched_evaluation = Fr.zero()
    for k, (c, e) in enumerate(zip(entity_commitments(proof, vk), proof.sumcheck_evaluations)):
        scale = unshifted_scalar if k < NUMBER_UNSHIFTED else shifted_scalar
        commitments.append(c)
        scalars.append(-scale * batching_challenge)
        batched_evaluation += e * batching_challenge
        batching_challenge *= tp.rho

    # Gemini fold claims at -r^(2^i), batched with nu.
    constant_term_accumulator = Fr.zero()
    batching_challenge = nu.sqr()
    for i in range(CONST_PROOF_SIZE_LOG_N - 1):
        scaling_factor = batching_challenge * inverse_vanishing[i + 2]
        commitments.append(proof.gemini_fold_comms[i].to_affine())
        scalars.append(-scaling_factor)
        constant_term_accumulator += scaling_factor * proof.gemini_a_evaluations[i + 1]
        batching_challenge *= nu

    a_0_pos = compute_fold_pos_evaluation(
        r_squares, proof.gemini_a_evaluations, tp.sumcheck_u_challenges, batched_evaluation
    )
    constant_term_accumulator += a_0_pos * pos_inverted_denominator
    constant_term_accumulator += proof.gemini_a_evaluations[0] * nu * neg_inverted_denominator

    commitments.append(G1_GENERATOR)
    scalars.append(constant_term_accumulator)
    commitments.append(proof.kzg_quotient.to_affine())
    scalars.append(z)
    return commitments, scalars

def compute_pairing_inputs(proof, vk, tp, backend) -> PairingInputs:  # Reduce all openings to (P0, P1).
    commitments, scalars = batch_opening_claims(proof, vk, tp)
    p0 = backend.batch_mul(commitments, scalars)
    p1 = -proof.kzg_quotient.to_affine()
    log.debug("shplemini: batched %d commitments", len(commitments))
    return PairingInputs(p0, p1)
