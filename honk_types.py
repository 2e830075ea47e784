from __future__ import annotations

import hashlib  # default Fiat-Shamir hash primitive
import pathlib
from dataclasses import dataclass, field as dc_field  # immutable key/config containers
from enum import IntEnum  # entity index enumeration
from typing import Callable

from curve import G2_GENERATOR, SRS_G2_X, G1Point, G2Point, PairingBackend, PyEccBackend  # group types + pairing capability
from errors import InvalidFieldElement, InvalidVerificationKey  # typed parse failures
from field import FIELD_SIZE, Fr  # BN254 scalar field
from polynomials import log2_pow2  # power-of-two helper

CONST_PROOF_SIZE_LOG_N = 28  # sumcheck rounds / Gemini depth (padded maximum)
BATCHED_RELATION_PARTIAL_LENGTH = 8  # evaluations per round univariate
NUMBER_OF_ENTITIES = 40  # purported evaluations in a proof
NUMBER_UNSHIFTED = 35  # entities opened at the challenge point
NUMBER_TO_BE_SHIFTED = 5  # entities opened at the shifted point
NUMBER_OF_SUBRELATIONS = 26  # subrelations across all gate families
NUMBER_OF_ALPHAS = NUMBER_OF_SUBRELATIONS - 1  # batching challenges
VK_NUM_FIELDS = 128  # field words in the key encoding: 3 header words, 27 points as (x, y), reserved tail
DEFAULT_PUBLIC_INPUTS_OFFSET = 1  # first public-input row in the execution trace

class Wire(IntEnum):  # Index of each entity in the 40-entry evaluation vector.
    Q_M = 0
    Q_C = 1
    Q_L = 2
    Q_R = 3
    Q_O = 4
    Q_4 = 5
    Q_LOOKUP = 6
    Q_ARITH = 7
    Q_RANGE = 8
    Q_ELLIPTIC = 9
    Q_AUX = 10
    Q_POSEIDON2_EXTERNAL = 11
    Q_POSEIDON2_INTERNAL = 12
    SIGMA_1 = 13
    SIGMA_2 = 14
    SIGMA_3 = 15
    SIGMA_4 = 16
    ID_1 = 17
    ID_2 = 18
    ID_3 = 19
    ID_4 = 20
    TABLE_1 = 21
    TABLE_2 = 22
    TABLE_3 = 23
    TABLE_4 = 24
    LAGRANGE_FIRST = 25
    LAGRANGE_LAST = 26
    W_L = 27
    W_R = 28
    W_O = 29
    W_4 = 30
    Z_PERM = 31
    LOOKUP_INVERSES = 32
    LOOKUP_READ_COUNTS = 33
    LOOKUP_READ_TAGS = 34
    W_L_SHIFT = 35
    W_R_SHIFT = 36
    W_O_SHIFT = 37
    W_4_SHIFT = 38
    Z_PERM_SHIFT = 39

VK_POINT_NAMES = (  # encoding order of the key's commitments
    "ql", "qr", "qo", "q4", "qm", "qc", "q_arith", "q_delta_range", "q_elliptic", "q_aux",
    "q_lookup", "q_poseidon2_external", "q_poseidon2_internal",
    "s1", "s2", "s3", "s4", "t1", "t2", "t3", "t4", "id1", "id2", "id3", "id4",
    "lagrange_first", "lagrange_last",
)

class FieldReader:  # Sequential reader of 32-byte big-endian words.
    def __init__(self, data: bytes, error=InvalidFieldElement):
        self.data = bytes(data)
        self.i = 0
        self.error = error  # raised on premature end of input

    def remaining(self) -> int:
        return len(self.data) - self.i

    def take(self, n: int) -> bytes:
        n = int(n)
        if n < 0 or self.i + n > len(self.data):
            raise self.error("unexpected end of input")
        out = self.data[self.i : self.i + n]
        self.i += n
        return out

    def fr(self) -> Fr:  # Strict scalar (rejects values >= p).
        return Fr.from_bytes_be(self.take(FIELD_SIZE))

    def word(self) -> int:  # Field-bounded word as a plain integer.
        return self.fr().to_int()

@dataclass(frozen=True)
class VerificationKey:  # Circuit metadata plus the 27 preprocessed commitments.
    circuit_size: int
    log_circuit_size: int
    public_inputs_size: int
    ql: G1Point
    qr: G1Point
    qo: G1Point
    q4: G1Point
    qm: G1Point
    qc: G1Point
    q_arith: G1Point
    q_delta_range: G1Point
    q_elliptic: G1Point
    q_aux: G1Point
    q_lookup: G1Point
    q_poseidon2_external: G1Point
    q_poseidon2_internal: G1Point
    s1: G1Point
    s2: G1Point
    s3: G1Point
    s4: G1Point
    t1: G1Point
    t2: G1Point
    t3: G1Point
    t4: G1Point
    id1: G1Point
    id2: G1Point
    id3: G1Point
    id4: G1Point
    lagrange_first: G1Point
    lagrange_last: G1Point

    @classmethod
    def from_bytes(cls, data) -> VerificationKey:  # Parse and validate the 128-word encoding.
        data = bytes(data)
        if len(data) != VK_NUM_FIELDS * FIELD_SIZE:
            raise InvalidVerificationKey(f"expected {VK_NUM_FIELDS * FIELD_SIZE} bytes, got {len(data)}")
        r = FieldReader(data, InvalidVerificationKey)
        circuit_size, log_circuit_size, public_inputs_size = r.word(), r.word(), r.word()
        points = {name: G1Point(r.word(), r.word()) for name in VK_POINT_NAMES}
        while r.remaining():
            r.word()  # reserved, bounds-checked only
        vk = cls(circuit_size, log_circuit_size, public_inputs_size, **points)
        vk.validate()
        return vk

    @classmethod
    def from_file(cls, path) -> VerificationKey:  # Load a key blob from disk.
        return cls.from_bytes(pathlib.Path(path).read_bytes())

    def validate(self):  # Semantic checks on metadata and points.
        if not 1 <= self.log_circuit_size <= CONST_PROOF_SIZE_LOG_N:
            raise InvalidVerificationKey(f"log_circuit_size {self.log_circuit_size} out of range")
        try:
            log_n = log2_pow2(self.circuit_size)
        except ValueError as exc:
            raise InvalidVerificationKey("circuit_size is not a power of two") from exc
        if log_n != self.log_circuit_size:
            raise InvalidVerificationKey("circuit_size does not match log_circuit_size")
        for name in VK_POINT_NAMES:
            if not getattr(self, name).is_on_curve():
                raise InvalidVerificationKey(f"commitment {name} is not on the curve")

    def points(self) -> list[G1Point]:  # Commitments in encoding order.
        return [getattr(self, name) for name in VK_POINT_NAMES]

    def to_bytes(self) -> bytes:  # Inverse of from_bytes (reserved words zero).
        words = [self.circuit_size, self.log_circuit_size, self.public_inputs_size]
        for p in self.points():
            words += [p.x, p.y]
        words += [0] * (VK_NUM_FIELDS - len(words))
        return b"".join(int(w).to_bytes(FIELD_SIZE, "big") for w in words)

    def selector_commitments(self) -> list[G1Point]:  # Preprocessed commitments in entity order (Q_M .. LAGRANGE_LAST).
        return [
            self.qm, self.qc, self.ql, self.qr, self.qo, self.q4, self.q_lookup, self.q_arith,
            self.q_delta_range, self.q_elliptic, self.q_aux, self.q_poseidon2_external,
            self.q_poseidon2_internal, self.s1, self.s2, self.s3, self.s4,
            self.id1, self.id2, self.id3, self.id4, self.t1, self.t2, self.t3, self.t4,
            self.lagrange_first, self.lagrange_last,
        ]

@dataclass(frozen=True)
class RelationParameters:  # Challenges shared by every relation family.
    eta: Fr
    eta_two: Fr
    eta_three: Fr
    beta: Fr
    gamma: Fr
    public_inputs_delta: Fr

def sha256(data: bytes) -> bytes:  # Default hash capability.
    return hashlib.sha256(data).digest()

@dataclass(frozen=True)
class VerifierConfig:  # Injected, immutable verifier configuration.
    public_inputs_offset: int = DEFAULT_PUBLIC_INPUTS_OFFSET  # first public-input row
    g2_generator: G2Point = G2_GENERATOR  # [1]_2 paired with the batched commitment
    g2_x: G2Point = SRS_G2_X  # [x]_2 paired with the KZG quotient
    hasher: Callable[[bytes], bytes] = sha256  # Fiat-Shamir hash primitive
    backend: PairingBackend = dc_field(default_factory=PyEccBackend)  # MSM + pairing primitive
