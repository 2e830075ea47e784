"""BN254 group helpers and the py_ecc pairing backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass  # affine point containers
from typing import Protocol, Sequence

from py_ecc import optimized_bn128 as bn128  # software BN254 pairing + group law

from errors import PrecompileCallFailed  # failure of an external primitive
from field import Fq, Fr  # BN254 base/scalar fields

log = logging.getLogger(__name__)

MODULUS, CURVE_ORDER = Fq.MODULUS, Fr.MODULUS  # base field modulus, scalar field order
B = 3  # G1: y^2 = x^3 + 3

@dataclass(frozen=True)
class G1Point:  # Affine G1 point; (0, 0) encodes infinity (EVM convention).
    x: int
    y: int

    @property
    def is_infinity(self):
        return self.x == 0 and self.y == 0

    def is_on_curve(self):  # Coordinates reduced and curve equation holds (or infinity).
        if self.is_infinity:
            return True
        if not (0 <= self.x < MODULUS and 0 <= self.y < MODULUS):
            return False
        return (self.y * self.y - self.x * self.x * self.x - B) % MODULUS == 0

    def __neg__(self):  # (x, -y); infinity is its own negation.
        return self if self.is_infinity else G1Point(self.x, (MODULUS - self.y) % MODULUS)

INFINITY = G1Point(0, 0)  # G1 identity
G1_GENERATOR = G1Point(1, 2)  # [1]_1

@dataclass(frozen=True)
class G2Point:  # Affine G2 point in EIP-197 word order (imaginary limb first).
    x_imag: int
    x_real: int
    y_imag: int
    y_real: int

G2_GENERATOR = G2Point(  # [1]_2
    0x198E9393920D483A7260BFB731FB5D25F1AA493335A9E71297E485B7AEF312C2,
    0x1800DEEF121F1E76426A00665E5C4479674322D4F75EDADD46DEBD5CD992F6ED,
    0x090689D0585FF075EC9E99AD690C3395BC4B313370B38EF355ACDADCD122975B,
    0x12C85EA5DB8C6DEB4AAB71808DCB408FE3D1E7690C43D37B4CE6CC0166FA7DAA,
)

SRS_G2_X = G2Point(  # [x]_2 from the Aztec ignition trusted setup
    0x260E01B251F6F1C7E7FF4E580791DEE8EA51D87A358E038B4EFE30FAC09383C1,
    0x0118C4D5B837BCC2BC89B5B398B5974E9F5944073B32078B7E231FEC938883B0,
    0x04FC6369F7110FE3D25156C1BB9A72859CF2A04641F99BA4EE413C80DA6A5FE4,
    0x22FEBDA3C0C0632A56475B4214E5615E11E6DD3F96E6CEA2854A87D4DACC5E55,
)

def to_py_ecc_g1(p: G1Point):  # Affine -> py_ecc projective (infinity has z = 0).
    if p.is_infinity:
        return bn128.Z1
    return (bn128.FQ(p.x), bn128.FQ(p.y), bn128.FQ.one())

def from_py_ecc_g1(pt) -> G1Point:  # py_ecc projective -> affine.
    if pt[2] == bn128.FQ.zero():
        return INFINITY
    x, y = bn128.normalize(pt)
    return G1Point(x.n, y.n)

def to_py_ecc_g2(q: G2Point):  # EIP-197 words -> py_ecc FQ2([real, imag]) projective.
    return (
        bn128.FQ2([q.x_real, q.x_imag]),
        bn128.FQ2([q.y_real, q.y_imag]),
        bn128.FQ2.one(),
    )

def from_py_ecc_g2(pt) -> G2Point:  # py_ecc projective -> EIP-197 words.
    x, y = bn128.normalize(pt)
    return G2Point(int(x.coeffs[1]), int(x.coeffs[0]), int(y.coeffs[1]), int(y.coeffs[0]))

def g1_mul(p: G1Point, scalar) -> G1Point:  # [scalar] p.
    return from_py_ecc_g1(bn128.multiply(to_py_ecc_g1(p), int(scalar) % CURVE_ORDER))

class PairingBackend(Protocol):  # Host capability: group MSM and pairing-product check.
    def batch_mul(self, points: Sequence[G1Point], scalars: Sequence[Fr]) -> G1Point: ...

    def pairing_check(self, pairs: Sequence[tuple[G1Point, G2Point]]) -> bool: ...

class PyEccBackend:  # Software backend over py_ecc.optimized_bn128.
    def batch_mul(self, points, scalars):  # sum_i [s_i] P_i (the ecMul/ecAdd loop).
        if len(points) != len(scalars):
            raise PrecompileCallFailed("ecMul", "points/scalars length mismatch")
        try:
            acc = bn128.Z1
            for p, s in zip(points, scalars):
                s = int(s) % CURVE_ORDER
                if s == 0 or p.is_infinity:
                    continue
                acc = bn128.add(acc, bn128.multiply(to_py_ecc_g1(p), s))
            return from_py_ecc_g1(acc)
        except (ArithmeticError, ValueError, TypeError) as exc:
            raise PrecompileCallFailed("ecMul", str(exc)) from exc

    def pairing_check(self, pairs):  # prod_i e(P_i, Q_i) == 1.
        try:
            acc = bn128.FQ12.one()
            for p, q in pairs:
                acc = acc * bn128.pairing(to_py_ecc_g2(q), to_py_ecc_g1(p), final_exponentiate=False)
            ok = bn128.final_exponentiate(acc) == bn128.FQ12.one()
        except (ArithmeticError, ValueError, TypeError, AssertionError) as exc:
            raise PrecompileCallFailed("ecPairing", str(exc)) from exc
        log.debug("pairing product over %d pairs: %s", len(pairs), ok)
        return ok
