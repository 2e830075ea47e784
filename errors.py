"""Typed verifier failures; `code` is the stable name hosts map onto their own enumeration."""


class VerifierError(Exception):  # Base class for all verification failures.
    def __init__(self, message=""):
        super().__init__(message or type(self).__name__)

    @property
    def code(self):  # Stable identifier (class name).
        return type(self).__name__


class InvalidProofFormat(VerifierError):  # Proof bytes have the wrong length or an undecodable point.
    pass


class InvalidPublicInputsLength(VerifierError):  # Public-input count differs from the key's declaration.
    def __init__(self, expected, got):
        self.expected = int(expected)
        self.got = int(got)
        super().__init__(f"expected {self.expected} public inputs, got {self.got}")


class InvalidPublicInputFormat(VerifierError):  # Public input is not exactly 32 bytes.
    def __init__(self, index):
        self.index = int(index)
        super().__init__(f"public input {self.index} is not a 32-byte value")


class InvalidFieldElement(VerifierError):  # Encoded value is not below the field modulus.
    pass


class InvalidVerificationKey(VerifierError):  # Key bytes or metadata are malformed.
    pass


class SumcheckFailed(VerifierError):  # u(0) + u(1) != target in the given round.
    def __init__(self, round):
        self.round = int(round)
        super().__init__(f"sumcheck round {self.round} failed")


class SumcheckEvaluationMismatch(VerifierError):  # Batched relation value != final sumcheck target.
    pass


class ShpleminiFailed(VerifierError):  # Opening-reduction arithmetic is inconsistent.
    pass


class PairingCheckFailed(VerifierError):  # Pairing product evaluated but is not the identity.
    pass


class PrecompileCallFailed(VerifierError):  # External primitive (hash, ecMul, ecPairing) could not run.
    def __init__(self, precompile, detail=""):
        self.precompile = str(precompile)
        msg = f"{self.precompile} call failed"
        super().__init__(f"{msg}: {detail}" if detail else msg)


class DivisionByZero(VerifierError, ZeroDivisionError):  # Inversion of zero in the scalar field.
    pass


class Other(VerifierError):  # Unexpected failure, carried as a message.
    def __init__(self, message):
        self.message = str(message)
        super().__init__(self.message)
