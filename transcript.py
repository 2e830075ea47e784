from __future__ import annotations

import logging
from dataclasses import dataclass  # derived-challenge container

from errors import DivisionByZero, PrecompileCallFailed  # typed failures
from field import FIELD_SIZE, Fr  # BN254 scalar field
from honk_types import (  # protocol sizes + shared types
    CONST_PROOF_SIZE_LOG_N,
    DEFAULT_PUBLIC_INPUTS_OFFSET,
    NUMBER_OF_ALPHAS,
    RelationParameters,
    sha256,
)

log = logging.getLogger(__name__)

LO_MASK = (1 << 128) - 1

def split_challenge(c):  # (lo, hi) 128-bit halves as scalars.
    c = int(c)
    return Fr(c & LO_MASK), Fr(c >> 128)

class Sha256Transcript:  # Stateful hash chain over an injected 32-byte hash.
    def __init__(self, hasher=None):
        self.hasher = hasher or sha256
        self.state = None  # previous challenge digest (None before the first draw)
        self.pending = bytearray()
        self.n_rounds = 0

    def copy(self):  # Return a cheap clone for tests/debugging.
        t = object.__new__(type(self))
        t.hasher = self.hasher
        t.state = self.state
        t.pending = bytearray(self.pending)
        t.n_rounds = self.n_rounds
        return t

    def append_u256(self, x):  # Absorb an integer as a 32-byte word.
        self.pending += int(x).to_bytes(FIELD_SIZE, "big")

    def append_scalar(self, fr):  # Absorb a scalar.
        self.pending += (fr if isinstance(fr, Fr) else Fr(fr)).to_bytes_be()

    def append_scalars(self, frs):
        for fr in frs:
            self.append_scalar(fr)

    def append_point(self, p):  # Absorb a commitment as its four limbs.
        for limb in p.limbs():
            self.append_u256(limb)

    def append_points(self, ps):
        for p in ps:
            self.append_point(p)

    def challenge(self):  # Next raw 256-bit challenge: H(prev_challenge || pending).
        payload = (self.state or b"") + bytes(self.pending)
        try:
            digest = bytes(self.hasher(payload))
        except Exception as exc:
            raise PrecompileCallFailed("sha256", str(exc)) from exc
        if len(digest) != FIELD_SIZE:
            raise PrecompileCallFailed("sha256", f"digest has {len(digest)} bytes")
        self.state = digest
        self.pending = bytearray()
        self.n_rounds += 1
        return int.from_bytes(digest, "big")

    def challenge_split(self):  # Draw one challenge and return both halves.
        return split_challenge(self.challenge())

    def challenge_lo(self):  # Draw one challenge and keep the low half.
        return self.challenge_split()[0]

@dataclass(frozen=True)
class Transcript:  # All challenges of one verification.
    relation_parameters: RelationParameters
    alphas: tuple  # 25
    gate_challenges: tuple  # 28
    sumcheck_u_challenges: tuple  # 28
    rho: Fr
    gemini_r: Fr
    shplonk_nu: Fr
    shplonk_z: Fr

def compute_public_inputs_delta(public_inputs, beta, gamma, circuit_size, offset=DEFAULT_PUBLIC_INPUTS_OFFSET):  # Permutation boundary value.
    n = Fr(int(circuit_size))
    off = Fr(int(offset))
    numerator = Fr.one()
    denominator = Fr.one()
    numerator_acc = gamma + beta * (n + off)
    denominator_acc = gamma - beta * (off + 1)
    for x in public_inputs:
        x = x if isinstance(x, Fr) else Fr(x)
        numerator *= numerator_acc + x
        denominator *= denominator_acc + x
        numerator_acc += beta
        denominator_acc -= beta
    if denominator.is_zero():
        raise DivisionByZero("public input delta denominator is zero")
    return numerator / denominator

def _relation_challenges(t, proof, public_inputs, circuit_size, public_inputs_size, offset):  # eta, eta_two, eta_three, beta, gamma.
    t.append_u256(circuit_size)
    t.append_u256(public_inputs_size)
    t.append_u256(offset)
    t.append_scalars(public_inputs)
    t.append_points([proof.w1, proof.w2, proof.w3])
    eta, eta_two = t.challenge_split()
    eta_three = t.challenge_lo()

    t.append_points([proof.lookup_read_counts, proof.lookup_read_tags, proof.w4])
    beta, gamma = t.challenge_split()
    return eta, eta_two, eta_three, beta, gamma

def _alpha_challenges(t, proof):  # 25 batching challenges, two per draw.
    t.append_points([proof.lookup_inverses, proof.z_perm])
    alphas = list(t.challenge_split())
    while len(alphas) < NUMBER_OF_ALPHAS:
        lo, hi = t.challenge_split()
        alphas.append(lo)
        if len(alphas) < NUMBER_OF_ALPHAS:
            alphas.append(hi)
    return tuple(alphas)

def _gate_challenges(t):  # One low half per round; no proof data.
    return tuple(t.challenge_lo() for _ in range(CONST_PROOF_SIZE_LOG_N))

def _sumcheck_challenges(t, proof):  # One challenge per round univariate.
    out = []
    for row in proof.sumcheck_univariates:
        t.append_scalars(row)
        out.append(t.challenge_lo())
    return tuple(out)

def generate_transcript(proof, public_inputs, circuit_size, public_inputs_size, *, offset=DEFAULT_PUBLIC_INPUTS_OFFSET, hasher=None) -> Transcript:  # Replay the full challenge sequence.
    t = Sha256Transcript(hasher)
    public_inputs = [x if isinstance(x, Fr) else Fr(x) for x in public_inputs]
    eta, eta_two, eta_three, beta, gamma = _relation_challenges(
        t, proof, public_inputs, circuit_size, public_inputs_size, offset
    )
    alphas = _alpha_challenges(t, proof)
    gate_challenges = _gate_challenges(t)
    sumcheck_u_challenges = _sumcheck_challenges(t, proof)

    t.append_scalars(proof.sumcheck_evaluations)
    rho = t.challenge_lo()
    t.append_points(proof.gemini_fold_comms)
    gemini_r = t.challenge_lo()
    t.append_scalars(proof.gemini_a_evaluations)
    shplonk_nu = t.challenge_lo()
    t.append_point(proof.shplonk_q)
    shplonk_z = t.challenge_lo()
    log.debug("transcript generated in %d hash rounds", t.n_rounds)

    delta = compute_public_inputs_delta(public_inputs, beta, gamma, circuit_size, offset)
    params = RelationParameters(eta, eta_two, eta_three, beta, gamma, delta)
    return Transcript(params, alphas, gate_challenges, sumcheck_u_challenges, rho, gemini_r, shplonk_nu, shplonk_z)
