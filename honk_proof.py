"""UltraHonk proof container and its flat byte codec.

A proof is 440 big-endian 32-byte words:

```text
w1, w2, w3, w4, z_perm, lookup_read_counts, lookup_read_tags, lookup_inverses
                                          8 commitments x 4 limbs        =  32
sumcheck_univariates                      28 rounds x 8 evaluations      = 224
sumcheck_evaluations                      40 entities                    =  40
gemini_fold_comms                         27 commitments x 4 limbs       = 108
gemini_a_evaluations                      28                             =  28
shplonk_q, kzg_quotient                   2 commitments x 4 limbs        =   8
```

Commitments use the split-limb layout `(x_0, x_1, y_0, y_1)` where each coordinate is
`c_0 | (c_1 << 136)`. Every word must be a canonical scalar, and every commitment must
decode to a point on the curve.
"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass  # immutable proof container

from curve import INFINITY, MODULUS, G1Point  # affine G1
from errors import InvalidProofFormat  # malformed proof bytes
from field import FIELD_SIZE, Fr  # BN254 scalar field
from honk_types import (  # protocol sizes + word reader
    BATCHED_RELATION_PARTIAL_LENGTH,
    CONST_PROOF_SIZE_LOG_N,
    NUMBER_OF_ENTITIES,
    FieldReader,
)

LIMB_SHIFT = 136  # bit split between the low and high coordinate limbs
LIMB_MASK = (1 << LIMB_SHIFT) - 1
NUM_WITNESS_COMMITMENTS = 8
PROOF_NUM_FIELDS = (
    4 * NUM_WITNESS_COMMITMENTS
    + CONST_PROOF_SIZE_LOG_N * BATCHED_RELATION_PARTIAL_LENGTH
    + NUMBER_OF_ENTITIES
    + 4 * (CONST_PROOF_SIZE_LOG_N - 1)
    + CONST_PROOF_SIZE_LOG_N
    + 4 * 2
)  # 440
PROOF_SIZE = PROOF_NUM_FIELDS * FIELD_SIZE

WITNESS_COMMITMENT_NAMES = (  # encoding order
    "w1", "w2", "w3", "w4", "z_perm", "lookup_read_counts", "lookup_read_tags", "lookup_inverses",
)

@dataclass(frozen=True)
class G1ProofPoint:  # Commitment in split-limb form, as absorbed by the transcript.
    x_0: int
    x_1: int
    y_0: int
    y_1: int

    @classmethod
    def from_affine(cls, p: G1Point) -> G1ProofPoint:
        return cls(p.x & LIMB_MASK, p.x >> LIMB_SHIFT, p.y & LIMB_MASK, p.y >> LIMB_SHIFT)

    def limbs(self):
        return (self.x_0, self.x_1, self.y_0, self.y_1)

    def to_affine(self) -> G1Point:  # Recombine limbs; reject malformed or off-curve points.
        if self.x_0 > LIMB_MASK or self.y_0 > LIMB_MASK:
            raise InvalidProofFormat("low limb exceeds 136 bits")
        x = self.x_0 | (self.x_1 << LIMB_SHIFT)
        y = self.y_0 | (self.y_1 << LIMB_SHIFT)
        if x >= MODULUS or y >= MODULUS:
            raise InvalidProofFormat("point coordinate exceeds the base field")
        p = G1Point(x, y)
        if not p.is_on_curve():
            raise InvalidProofFormat("point is not on the curve")
        return p

    def to_bytes(self) -> bytes:
        return b"".join(int(v).to_bytes(FIELD_SIZE, "big") for v in self.limbs())

ZERO_POINT = G1ProofPoint.from_affine(INFINITY)

def _read_point(r: FieldReader) -> G1ProofPoint:  # Read 4 limbs and check the point decodes.
    p = G1ProofPoint(r.word(), r.word(), r.word(), r.word())
    p.to_affine()
    return p

@dataclass(frozen=True)
class Proof:  # Python-native UltraHonk proof consumed by `honk_verifier.py`.
    w1: G1ProofPoint
    w2: G1ProofPoint
    w3: G1ProofPoint
    w4: G1ProofPoint
    z_perm: G1ProofPoint
    lookup_read_counts: G1ProofPoint
    lookup_read_tags: G1ProofPoint
    lookup_inverses: G1ProofPoint
    sumcheck_univariates: tuple  # 28 rows of 8 Fr evaluations
    sumcheck_evaluations: tuple  # 40 Fr, indexed by `Wire`
    gemini_fold_comms: tuple  # 27 G1ProofPoint
    gemini_a_evaluations: tuple  # 28 Fr
    shplonk_q: G1ProofPoint
    kzg_quotient: G1ProofPoint

    def __post_init__(self):  # Shape checks for directly constructed proofs.
        if len(self.sumcheck_univariates) != CONST_PROOF_SIZE_LOG_N or any(
            len(row) != BATCHED_RELATION_PARTIAL_LENGTH for row in self.sumcheck_univariates
        ):
            raise InvalidProofFormat("sumcheck univariates must be 28 x 8")
        if len(self.sumcheck_evaluations) != NUMBER_OF_ENTITIES:
            raise InvalidProofFormat("expected 40 sumcheck evaluations")
        if len(self.gemini_fold_comms) != CONST_PROOF_SIZE_LOG_N - 1:
            raise InvalidProofFormat("expected 27 gemini fold commitments")
        if len(self.gemini_a_evaluations) != CONST_PROOF_SIZE_LOG_N:
            raise InvalidProofFormat("expected 28 gemini evaluations")

    @classmethod
    def from_bytes(cls, data) -> Proof:  # Parse the 440-word encoding.
        data = bytes(data)
        if len(data) != PROOF_SIZE:
            raise InvalidProofFormat(f"expected {PROOF_SIZE} bytes, got {len(data)}")
        r = FieldReader(data, InvalidProofFormat)
        commitments = {name: _read_point(r) for name in WITNESS_COMMITMENT_NAMES}
        univariates = tuple(
            tuple(r.fr() for _ in range(BATCHED_RELATION_PARTIAL_LENGTH))
            for _ in range(CONST_PROOF_SIZE_LOG_N)
        )
        evaluations = tuple(r.fr() for _ in range(NUMBER_OF_ENTITIES))
        fold_comms = tuple(_read_point(r) for _ in range(CONST_PROOF_SIZE_LOG_N - 1))
        gemini_evals = tuple(r.fr() for _ in range(CONST_PROOF_SIZE_LOG_N))
        shplonk_q = _read_point(r)
        kzg_quotient = _read_point(r)
        return cls(
            **commitments,
            sumcheck_univariates=univariates,
            sumcheck_evaluations=evaluations,
            gemini_fold_comms=fold_comms,
            gemini_a_evaluations=gemini_evals,
            shplonk_q=shplonk_q,
            kzg_quotient=kzg_quotient,
        )

    @classmethod
    def from_file(cls, path) -> Proof:
        return cls.from_bytes(pathlib.Path(path).read_bytes())

    def to_bytes(self) -> bytes:  # Inverse of from_bytes.
        out = [getattr(self, name).to_bytes() for name in WITNESS_COMMITMENT_NAMES]
        out += [e.to_bytes_be() for row in self.sumcheck_univariates for e in row]
        out += [e.to_bytes_be() for e in self.sumcheck_evaluations]
        out += [c.to_bytes() for c in self.gemini_fold_comms]
        out += [e.to_bytes_be() for e in self.gemini_a_evaluations]
        out += [self.shplonk_q.to_bytes(), self.kzg_quotient.to_bytes()]
        return b"".join(out)
