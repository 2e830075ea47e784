import logging

from errors import DivisionByZero, SumcheckEvaluationMismatch, SumcheckFailed  # typed sumcheck failures
from field import Fr  # BN254 Fr field
from honk_types import BATCHED_RELATION_PARTIAL_LENGTH, CONST_PROOF_SIZE_LOG_N  # protocol sizes
from polynomials import PowPolynomial, RoundUnivariate  # round polynomial + domain separator
from relations import accumulate_relation_evaluations  # batched relation value

log = logging.getLogger(__name__)

class SumcheckVerifier:  # Padded 28-round sumcheck over round univariates given by evaluations at 0..7.
    def __init__(self, proof, transcript, num_rounds=CONST_PROOF_SIZE_LOG_N):
        self.proof = proof
        self.transcript = transcript
        self.num_rounds = int(num_rounds)
        self.pow_poly = PowPolynomial(transcript.gate_challenges)

    def check_round(self, round_idx, univariate, target):  # u(0) + u(1) == target, else round failure.
        if len(univariate) != BATCHED_RELATION_PARTIAL_LENGTH:
            raise SumcheckFailed(round_idx)
        if univariate.sum_over_hypercube() != target:
            raise SumcheckFailed(round_idx)

    def verify_rounds(self):  # Run every round; return (final target, pow_partial_eval).
        target = Fr.zero()
        pow_partial_eval = Fr.one()
        for i in range(self.num_rounds):
            univariate = RoundUnivariate(self.proof.sumcheck_univariates[i])
            self.check_round(i, univariate, target)
            u = self.transcript.sumcheck_u_challenges[i]
            try:
                target = univariate.evaluate(u)
            except DivisionByZero as exc:
                raise SumcheckFailed(i) from exc
            pow_partial_eval = self.pow_poly.partially_evaluate(pow_partial_eval, i, u)
        log.debug("sumcheck: %d rounds passed", self.num_rounds)
        return target, pow_partial_eval

    def verify_final_evaluation(self, target, pow_partial_eval):  # Batched relation at the claimed evaluations.
        tp = self.transcript
        grand_honk_relation_sum = accumulate_relation_evaluations(
            self.proof.sumcheck_evaluations, tp.relation_parameters, tp.alphas, pow_partial_eval
        )
        if grand_honk_relation_sum != target:
            raise SumcheckEvaluationMismatch("batched relation value differs from the final sumcheck target")
        return grand_honk_relation_sum

    def verify(self):  # Rounds followed by the final relation check.
        target, pow_partial_eval = self.verify_rounds()
        self.verify_final_evaluation(target, pow_partial_eval)
        return True

def verify_sumcheck(proof, transcript):  # Convenience wrapper.
    return SumcheckVerifier(proof, transcript).verify()
