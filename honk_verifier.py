"""Top-level UltraHonk verifier: PARSE_INPUTS -> ... -> PAIRING_CHECK, first failure raises."""

from __future__ import annotations

import logging
from enum import StrEnum  # stage names

from errors import InvalidPublicInputFormat, InvalidPublicInputsLength, Other, PairingCheckFailed, VerifierError  # typed failures
from field import FIELD_SIZE, Fr  # BN254 scalar field
from honk_proof import Proof  # proof container + codec
from honk_types import VerificationKey, VerifierConfig  # key + injected configuration
from shplemini import compute_pairing_inputs  # opening reduction
from sumchecks import SumcheckVerifier  # sumcheck rounds + final relation check
from transcript import generate_transcript  # Fiat-Shamir challenges

log = logging.getLogger(__name__)

class VerifierStage(StrEnum):  # Orchestrator state names.
    IDLE = "idle"
    PARSE_INPUTS = "parse_inputs"
    GENERATE_TRANSCRIPT = "generate_transcript"
    RUN_SUMCHECK = "run_sumcheck"
    EVALUATE_RELATIONS = "evaluate_relations"
    RUN_SHPLEMINI = "run_shplemini"
    PAIRING_CHECK = "pairing_check"
    DONE = "done"

def _enter(stage):  # Log a stage transition.
    log.debug("verifier stage: %s", stage)
    return stage

def parse_public_inputs(public_inputs, expected) -> list[Fr]:  # Count first, then per-element format and bounds.
    public_inputs = list(public_inputs)
    if len(public_inputs) != int(expected):
        raise InvalidPublicInputsLength(expected, len(public_inputs))
    out = []
    for i, x in enumerate(public_inputs):
        if not isinstance(x, (bytes, bytearray, memoryview)) or len(x) != FIELD_SIZE:
            raise InvalidPublicInputFormat(i)
        out.append(Fr.from_bytes_be(x))
    return out

class HonkVerifier:  # Verifier bound to one verification key.
    def __init__(self, vk: VerificationKey, config: VerifierConfig | None = None):
        self.vk = vk
        self.config = config if config is not None else VerifierConfig()

    @classmethod
    def from_bytes(cls, vk_bytes, config: VerifierConfig | None = None) -> HonkVerifier:
        return cls(VerificationKey.from_bytes(vk_bytes), config)

    @classmethod
    def from_file(cls, path, config: VerifierConfig | None = None) -> HonkVerifier:
        return cls(VerificationKey.from_file(path), config)

    def parse_inputs(self, proof, public_inputs):  # Stage PARSE_INPUTS.
        pis = parse_public_inputs(public_inputs, self.vk.public_inputs_size)
        if not isinstance(proof, Proof):
            proof = Proof.from_bytes(proof)
        return proof, pis

    def generate_transcript(self, proof, public_inputs):  # Stage GENERATE_TRANSCRIPT.
        return generate_transcript(
            proof,
            public_inputs,
            self.vk.circuit_size,
            self.vk.public_inputs_size,
            offset=self.config.public_inputs_offset,
            hasher=self.config.hasher,
        )

    def pairing_check(self, pairing_inputs):  # Stage PAIRING_CHECK.
        pairs = [
            (pairing_inputs.p0, self.config.g2_generator),
            (pairing_inputs.p1, self.config.g2_x),
        ]
        if not self.config.backend.pairing_check(pairs):
            raise PairingCheckFailed("pairing product is not the identity")

    def verify(self, proof, public_inputs):  # Accept (True) or raise the first stage's VerifierError.
        stage = VerifierStage.IDLE
        try:
            stage = _enter(VerifierStage.PARSE_INPUTS)
            proof, pis = self.parse_inputs(proof, public_inputs)

            stage = _enter(VerifierStage.GENERATE_TRANSCRIPT)
            tp = self.generate_transcript(proof, pis)

            stage = _enter(VerifierStage.RUN_SUMCHECK)
            sumcheck = SumcheckVerifier(proof, tp)
            target, pow_partial_eval = sumcheck.verify_rounds()

            stage = _enter(VerifierStage.EVALUATE_RELATIONS)
            sumcheck.verify_final_evaluation(target, pow_partial_eval)

            stage = _enter(VerifierStage.RUN_SHPLEMINI)
            pairing_inputs = compute_pairing_inputs(proof, self.vk, tp, self.config.backend)

            stage = _enter(VerifierStage.PAIRING_CHECK)
            self.pairing_check(pairing_inputs)
        except VerifierError as exc:
            log.warning("proof rejected at %s: %s (%s)", stage, exc.code, exc)
            raise
        except Exception as exc:
            log.warning("unexpected failure at %s: %r", stage, exc)
            raise Other(f"{stage}: {exc}") from exc
        _enter(VerifierStage.DONE)
        log.info("proof accepted (%d public inputs)", len(pis))
        return True

def verify(proof, public_inputs, vk, config: VerifierConfig | None = None):  # Convenience wrapper over raw key bytes or a key object.
    if not isinstance(vk, VerificationKey):
        vk = VerificationKey.from_bytes(vk)
    return HonkVerifier(vk, config).verify(proof, public_inputs)
