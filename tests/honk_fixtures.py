"""Synthetic verification keys and proofs for tests.

`build_fixture` produces a (vk, proof, public inputs, config) tuple that the verifier accepts:

- round univariates are chosen so every sumcheck round closes, replaying the transcript
  after each round to learn its challenge;
- the purported evaluations are random except `Q_AUX = 0` (keeps the batched relation affine
  in `Q_C`) and `Q_C`, which is solved so the final relation check holds;
- the SRS trapdoor `tau` is known (`[tau]_2` is injected through `VerifierConfig`), so the
  KZG quotient can be set to `P0' / (tau - z)`. The quotient is not absorbed by the
  transcript, so this does not disturb any challenge.
"""

from __future__ import annotations

import functools  # fixture cache
import random  # deterministic synthetic data
from dataclasses import dataclass, replace

from py_ecc import optimized_bn128 as bn128  # test SRS in G2

from curve import CURVE_ORDER, G1_GENERATOR, INFINITY, from_py_ecc_g2, g1_mul
from field import Fr
from honk_proof import ZERO_POINT, G1ProofPoint, Proof
from honk_types import (
    BATCHED_RELATION_PARTIAL_LENGTH,
    CONST_PROOF_SIZE_LOG_N,
    NUMBER_OF_ENTITIES,
    VK_POINT_NAMES,
    VerificationKey,
    VerifierConfig,
    Wire,
)
from polynomials import PowPolynomial, RoundUnivariate
from relations import accumulate_relation_evaluations
from shplemini import batch_opening_claims
from transcript import generate_transcript

TEST_TAU = 0x2A5F3C9E17B04D6E8812F0C3D5A7E9B1C3D5E7F90A2B4C6D8E0F1A3B5C7D9E1  # known SRS trapdoor
LOG_N = 5
NUM_PUBLIC_INPUTS = 4


@dataclass(frozen=True)
class HonkFixture:
    vk: VerificationKey
    proof: Proof
    public_inputs: list  # 32-byte words
    config: VerifierConfig
    tau: int


def srs_config(tau=TEST_TAU) -> VerifierConfig:  # Default configuration with [tau]_2 swapped in.
    return VerifierConfig(g2_x=from_py_ecc_g2(bn128.multiply(bn128.G2, int(tau))))


def random_point(rng):
    return g1_mul(G1_GENERATOR, rng.randrange(1, CURVE_ORDER))


def random_fr(rng):
    return Fr(rng.randrange(Fr.MODULUS))


def make_vk(rng=None, *, log_n=LOG_N, num_public_inputs=NUM_PUBLIC_INPUTS) -> VerificationKey:  # Random points; infinity when rng is None.
    points = {name: (random_point(rng) if rng is not None else INFINITY) for name in VK_POINT_NAMES}
    return VerificationKey(1 << log_n, log_n, num_public_inputs, **points)


def zero_proof() -> Proof:  # All-zero proof (every commitment at infinity).
    zero = Fr.zero()
    return Proof(
        *([ZERO_POINT] * 8),
        sumcheck_univariates=tuple(
            tuple(zero for _ in range(BATCHED_RELATION_PARTIAL_LENGTH)) for _ in range(CONST_PROOF_SIZE_LOG_N)
        ),
        sumcheck_evaluations=tuple(zero for _ in range(NUMBER_OF_ENTITIES)),
        gemini_fold_comms=tuple(ZERO_POINT for _ in range(CONST_PROOF_SIZE_LOG_N - 1)),
        gemini_a_evaluations=tuple(zero for _ in range(CONST_PROOF_SIZE_LOG_N)),
        shplonk_q=ZERO_POINT,
        kzg_quotient=ZERO_POINT,
    )


def transcript_for(vk, proof, public_inputs, config):
    return generate_transcript(
        proof,
        [Fr.from_bytes_be(x) for x in public_inputs],
        vk.circuit_size,
        vk.public_inputs_size,
        offset=config.public_inputs_offset,
        hasher=config.hasher,
    )


def _close_sumcheck_rounds(rng, vk, proof, public_inputs, config):  # Rows with u(0) + u(1) == running target.
    rows = [list(r) for r in proof.sumcheck_univariates]
    target = Fr.zero()
    for i in range(CONST_PROOF_SIZE_LOG_N):
        a = random_fr(rng)
        rows[i] = [a, target - a] + [random_fr(rng) for _ in range(BATCHED_RELATION_PARTIAL_LENGTH - 2)]
        proof = replace(proof, sumcheck_univariates=tuple(tuple(r) for r in rows))
        tp = transcript_for(vk, proof, public_inputs, config)
        target = RoundUnivariate(rows[i]).evaluate(tp.sumcheck_u_challenges[i])
    return proof, target, tp


def _solve_evaluations(rng, tp, target):  # Random entity values with Q_C solved for the final check.
    evals = [random_fr(rng) for _ in range(NUMBER_OF_ENTITIES)]
    evals[Wire.Q_AUX] = Fr.zero()
    pow_eval = PowPolynomial(tp.gate_challenges).evaluate(tp.sumcheck_u_challenges)
    rp = tp.relation_parameters

    evals[Wire.Q_C] = Fr.zero()
    base = accumulate_relation_evaluations(evals, rp, tp.alphas, pow_eval)
    evals[Wire.Q_C] = Fr.one()
    slope = accumulate_relation_evaluations(evals, rp, tp.alphas, pow_eval) - base
    evals[Wire.Q_C] = (target - base) / slope
    return tuple(evals)


@functools.lru_cache(maxsize=None)
def build_fixture(seed=0) -> HonkFixture:
    rng = random.Random(seed)
    config = srs_config()
    vk = make_vk(rng)
    public_inputs = [random_fr(rng).to_bytes_be() for _ in range(NUM_PUBLIC_INPUTS)]

    proof = replace(
        zero_proof(),
        **{
            name: G1ProofPoint.from_affine(random_point(rng))
            for name in ("w1", "w2", "w3", "w4", "z_perm", "lookup_read_counts", "lookup_read_tags", "lookup_inverses")
        },
        gemini_fold_comms=tuple(
            G1ProofPoint.from_affine(random_point(rng)) for _ in range(CONST_PROOF_SIZE_LOG_N - 1)
        ),
        gemini_a_evaluations=tuple(random_fr(rng) for _ in range(CONST_PROOF_SIZE_LOG_N)),
        shplonk_q=G1ProofPoint.from_affine(random_point(rng)),
    )
    proof, target, tp = _close_sumcheck_rounds(rng, vk, proof, public_inputs, config)
    proof = replace(proof, sumcheck_evaluations=_solve_evaluations(rng, tp, target))

    # KZG quotient: with [W] = infinity the MSM is P0'; pick W = P0' / (tau - z).
    tp = transcript_for(vk, proof, public_inputs, config)
    commitments, scalars = batch_opening_claims(proof, vk, tp)
    p0_partial = config.backend.batch_mul(commitments, scalars)
    w = g1_mul(p0_partial, pow((TEST_TAU - int(tp.shplonk_z)) % CURVE_ORDER, -1, CURVE_ORDER))
    proof = replace(proof, kzg_quotient=G1ProofPoint.from_affine(w))
    return HonkFixture(vk, proof, public_inputs, config, TEST_TAU)


def with_evaluation(proof, wire, delta):  # Copy of proof with one purported evaluation shifted by delta.
    evals = list(proof.sumcheck_evaluations)
    evals[wire] = evals[wire] + delta
    return replace(proof, sumcheck_evaluations=tuple(evals))


def with_univariate(proof, round_idx, k, delta):  # Copy of proof with one round evaluation shifted by delta.
    rows = [list(r) for r in proof.sumcheck_univariates]
    rows[round_idx][k] = rows[round_idx][k] + delta
    return replace(proof, sumcheck_univariates=tuple(tuple(r) for r in rows))
