import math  # factorials for barycentric Lagrange weights

from field import Fr  # BN254 scalar field

def log2_pow2(n):  # Compute log2(n) for n a power of two.
    n = int(n)
    if n <= 0 or (n & (n - 1)) != 0:
        raise ValueError("expected power-of-two n")
    return n.bit_length() - 1

class UniPoly:  # Univariate polynomial with coefficients in Fr (for tests/debug).
    def __init__(self, coeffs):  # Store coefficients in ascending order (c0, c1, ...).
        self.coeffs = [c if isinstance(c, Fr) else Fr(c) for c in coeffs]

    def degree(self):  # Degree of the polynomial.
        return max(0, len(self.coeffs) - 1)

    def evaluate(self, x):  # Evaluate by Horner.
        x = x if isinstance(x, Fr) else Fr(x)
        out = Fr.zero()
        for c in reversed(self.coeffs):
            out = out * x + c
        return out

    def evals_on_domain(self, n):  # [f(0), f(1), ..., f(n-1)].
        return [self.evaluate(i) for i in range(int(n))]

class RoundUnivariate:  # Sumcheck round polynomial given by its evaluations at 0, 1, ..., n-1.
    _WEIGHT_CACHE = {}

    def __init__(self, evals):
        self.evals = [e if isinstance(e, Fr) else Fr(e) for e in evals]

    def __len__(self):
        return len(self.evals)

    def sum_over_hypercube(self):  # f(0) + f(1).
        return self.evals[0] + self.evals[1]

    @classmethod
    def denominators(cls, n):  # d_i = prod_{j != i} (i - j) = (-1)^(n-1-i) i! (n-1-i)!.
        n = int(n)
        if n not in cls._WEIGHT_CACHE:
            out = []
            for i in range(n):
                sign = -1 if ((n - 1 - i) & 1) else 1
                out.append(Fr(sign * math.factorial(i) * math.factorial(n - 1 - i)))
            cls._WEIGHT_CACHE[n] = out
        return cls._WEIGHT_CACHE[n]

    def evaluate(self, x):  # Barycentric evaluation: B(x) * sum_i f(i) / (d_i (x - i)).
        x = x if isinstance(x, Fr) else Fr(x)
        n = len(self.evals)
        dists = [x - i for i in range(n)]
        for i, d in enumerate(dists):
            if d.is_zero():
                return self.evals[i]
        numerator = Fr.one()
        for d in dists:
            numerator *= d
        acc = Fr.zero()
        for e, w, d in zip(self.evals, self.denominators(n), dists):
            acc += e / (w * d)
        return numerator * acc

class PowPolynomial:  # Partial evaluation of pow_beta(X) = prod_i (1 + X_i (beta_i - 1)).
    def __init__(self, gate_challenges):
        self.gate_challenges = [g if isinstance(g, Fr) else Fr(g) for g in gate_challenges]

    def partially_evaluate(self, current, round_idx, u):  # Fold one more bound coordinate.
        return current * (Fr.one() + u * (self.gate_challenges[round_idx] - Fr.one()))

    def evaluate(self, us):  # Full evaluation at the bound point.
        out = Fr.one()
        for i, u in enumerate(us):
            out = self.partially_evaluate(out, i, u)
        return out

def compute_squares(r, n):  # [r, r^2, r^4, ..., r^(2^(n-1))].
    r = r if isinstance(r, Fr) else Fr(r)
    out = [r]
    for _ in range(1, int(n)):
        out.append(out[-1].sqr())
    return out
