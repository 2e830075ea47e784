from errors import DivisionByZero, InvalidFieldElement, Other  # typed verifier failures

FIELD_SIZE = 32  # bytes per big-endian field element

class MontgomeryField:  # Prime field element in Montgomery representation.
    R = 1 << 256  # Montgomery radix.
    MASK = R - 1  # Low-256-bit mask.

    def __init_subclass__(cls):  # Precompute Montgomery constants for each subclass.
        if "MODULUS" not in cls.__dict__:
            return
        p = cls.MODULUS
        if p % 2 == 0 or p >= cls.R:
            raise ValueError("MODULUS must be odd and < 2^256")
        cls.NP = (-pow(p, -1, cls.R)) & cls.MASK
        cls.R1 = cls.R % p
        cls.R2 = (cls.R1 * cls.R1) % p

    def __init__(self, x=0, mont=False):  # Build element from canonical int or raw Montgomery value.
        p = type(self).MODULUS
        self.v = x % p if mont else type(self)._red((x % p) * type(self).R2)

    @classmethod
    def _red(cls, t):  # Montgomery reduction: t * R^-1 mod MODULUS.
        m = ((t & cls.MASK) * cls.NP) & cls.MASK
        u = (t + m * cls.MODULUS) >> 256
        return u - cls.MODULUS if u >= cls.MODULUS else u

    zero = classmethod(lambda cls: cls(0, mont=True))  # Additive identity in Montgomery form.

    one = classmethod(lambda cls: cls(cls.R1, mont=True))  # Multiplicative identity in Montgomery form.

    from_montgomery = classmethod(lambda cls, x: cls(x, mont=True))  # Wrap raw Montgomery residue.

    @classmethod
    def from_canonical(cls, x):  # Strict constructor: reject anything outside [0, MODULUS).
        x = int(x)
        if x < 0 or x >= cls.MODULUS:
            raise InvalidFieldElement(f"value is not a canonical {cls.__name__} element")
        return cls(x)

    @classmethod
    def from_bytes_be(cls, data):  # Strict 32-byte big-endian decode.
        data = bytes(data)
        if len(data) != FIELD_SIZE:
            raise InvalidFieldElement(f"expected {FIELD_SIZE} bytes, got {len(data)}")
        return cls.from_canonical(int.from_bytes(data, "big"))

    def to_bytes_be(self): return self.to_int().to_bytes(FIELD_SIZE, "big")  # 32-byte big-endian encoding.

    def to_int(self): return type(self)._red(self.v)  # Convert to canonical integer form.

    def is_zero(self): return self.v == 0  # Zero test without leaving Montgomery form.

    def inv(self):  # Multiplicative inverse via Fermat: a^(p-2).
        if self.v == 0: raise DivisionByZero("cannot invert zero")
        return type(self)(pow(self.to_int(), type(self).MODULUS - 2, type(self).MODULUS))

    def sqr(self): return self * self  # Field squaring.

    def _c(self, other):  # Coerce int/same-type operand into field element.
        cls = type(self)
        if isinstance(other, cls):
            return other
        if isinstance(other, int):
            return cls(other)
        raise TypeError(f"expected {cls.__name__} or int")

    def __add__(self, other):  # Field addition modulo MODULUS.
        v = self.v + self._c(other).v
        return type(self)(v - type(self).MODULUS if v >= type(self).MODULUS else v, mont=True)

    __radd__ = __add__

    def __sub__(self, other):  # Field subtraction modulo MODULUS.
        v = self.v - self._c(other).v
        return type(self)(v + type(self).MODULUS if v < 0 else v, mont=True)

    def __rsub__(self, other):  # int - element.
        return self._c(other) - self

    def __mul__(self, other):  # Field multiplication via Montgomery reduction.
        return type(self)(type(self)._red(self.v * self._c(other).v), mont=True)

    __rmul__ = __mul__

    def __pow__(self, e):  # Exponentiation with modular power semantics.
        return (self.inv()) ** (-e) if e < 0 else type(self)(pow(self.to_int(), e, type(self).MODULUS))

    def __truediv__(self, other):  # Division as multiply by inverse.
        return self * self._c(other).inv()

    def __neg__(self):  # Additive inverse modulo MODULUS.
        return self if self.v == 0 else type(self)(type(self).MODULUS - self.v, mont=True)

    def __eq__(self, other):  # Equality with field elements or canonical ints.
        if isinstance(other, type(self)):
            return self.v == other.v
        return self.to_int() == (other % type(self).MODULUS) if isinstance(other, int) else False

    def __hash__(self): return hash((type(self).__name__, self.v))  # Hashable like an int.

    def __int__(self): return self.to_int()  # int(...) exposes canonical integer.

    def __repr__(self): return f"{type(self).__name__}({self.to_int()})"  # Debug-friendly printable form.

class Fq(MontgomeryField):  # BN254 base field.
    MODULUS = 21888242871839275222246405745257275088696311157297823662689037894645226208583  # BN254 Fq modulus

class Fr(MontgomeryField):  # BN254 scalar field.
    MODULUS = 21888242871839275222246405745257275088548364400416034343698204186575808495617  # BN254 Fr modulus

P = Fr.MODULUS  # scalar-field modulus used by the functional API below

# Functional API over canonical integers in [0, P). Inputs outside the range are rejected.

def _canon(a):  # Validate a canonical scalar.
    a = int(a)
    if a < 0 or a >= P:
        raise InvalidFieldElement("value is not a canonical Fr element")
    return a

def add_mod(a, b):  # (a + b) mod P with explicit wraparound.
    s = _canon(a) + _canon(b)
    return s - P if s >= P else s

def sub_mod(a, b):  # (a - b) mod P with explicit wraparound.
    d = _canon(a) - _canon(b)
    return d + P if d < 0 else d

def mul_mod(a, b):  # Single wide multiply followed by Montgomery reduction.
    t = Fr._red(_canon(a) * _canon(b))  # a*b*R^-1
    return Fr._red(t * Fr.R2)  # back out the R^-1 factor

def neg_mod(a):  # -a mod P.
    a = _canon(a)
    return 0 if a == 0 else P - a

def sqr_mod(a):  # a^2 mod P.
    return mul_mod(a, a)

def pow_mod(a, e):  # a^e mod P for e >= 0.
    if int(e) < 0:
        raise Other("exponent must be non-negative")
    return pow(_canon(a), int(e), P)

def inv_mod(a):  # Fermat inverse; zero is a checked error.
    a = _canon(a)
    if a == 0:
        raise DivisionByZero("cannot invert zero")
    return pow(a, P - 2, P)

def try_inv_mod(a):  # Like inv_mod, but returns None for zero.
    return None if _canon(a) == 0 else inv_mod(a)

def div_mod(a, b):  # a / b mod P.
    return mul_mod(a, inv_mod(b))

def try_div_mod(a, b):  # Like div_mod, but returns None when b is zero.
    inv = try_inv_mod(b)
    return None if inv is None else mul_mod(a, inv)

def from_bytes_be(data):  # Strict 32-byte big-endian decode to a canonical int.
    return Fr.from_bytes_be(data).to_int()

def to_bytes_be(a):  # Canonical int to 32-byte big-endian.
    return _canon(a).to_bytes(FIELD_SIZE, "big")
