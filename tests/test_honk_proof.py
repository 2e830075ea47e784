import pathlib  # locate repo root
import random  # deterministic keys
import sys  # adjust import path for local modules
import tempfile  # on-disk blobs
import unittest  # unit test framework
from dataclasses import replace

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(ROOT / "tests"))

from curve import G1_GENERATOR, INFINITY, MODULUS, g1_mul  # affine G1 helpers
from errors import InvalidFieldElement, InvalidProofFormat, InvalidVerificationKey  # codec failures
from field import P  # scalar modulus
from honk_fixtures import build_fixture, make_vk, zero_proof  # synthetic inputs
from honk_proof import LIMB_SHIFT, PROOF_NUM_FIELDS, PROOF_SIZE, ZERO_POINT, G1ProofPoint, Proof  # proof codec
from honk_types import VK_NUM_FIELDS, VerificationKey  # key codec


def set_word(data, index, value):  # Overwrite one 32-byte word.
    return data[: 32 * index] + int(value).to_bytes(32, "big") + data[32 * (index + 1) :]


class VerificationKeyCodecTests(unittest.TestCase):
    def test_round_trip(self):
        vk = make_vk(random.Random(1))
        blob = vk.to_bytes()
        self.assertEqual(len(blob), VK_NUM_FIELDS * 32)
        self.assertEqual(VerificationKey.from_bytes(blob), vk)
        self.assertEqual(len(vk.points()), 27)
        self.assertEqual(len(vk.selector_commitments()), 27)

    def test_from_file(self):
        vk = make_vk(random.Random(2))
        with tempfile.TemporaryDirectory() as d:
            path = pathlib.Path(d) / "vk.bin"
            path.write_bytes(vk.to_bytes())
            self.assertEqual(VerificationKey.from_file(path), vk)

    def test_wrong_length(self):
        blob = make_vk().to_bytes()
        for bad in (blob[:-1], blob + b"\x00" * 32, b""):
            with self.assertRaises(InvalidVerificationKey):
                VerificationKey.from_bytes(bad)

    def test_metadata_checks(self):
        blob = make_vk().to_bytes()
        for circuit_size, log_n in ((1, 0), (1 << 29, 29), (48, 5), (64, 5)):
            bad = set_word(set_word(blob, 0, circuit_size), 1, log_n)
            with self.assertRaises(InvalidVerificationKey):
                VerificationKey.from_bytes(bad)
        ok = set_word(set_word(blob, 0, 1 << 28), 1, 28)
        self.assertEqual(VerificationKey.from_bytes(ok).log_circuit_size, 28)

    def test_point_off_curve(self):
        blob = make_vk().to_bytes()
        bad = set_word(set_word(blob, 3, 1), 4, 3)  # ql = (1, 3)
        with self.assertRaises(InvalidVerificationKey):
            VerificationKey.from_bytes(bad)

    def test_reserved_words(self):
        blob = make_vk().to_bytes()
        vk = VerificationKey.from_bytes(set_word(blob, VK_NUM_FIELDS - 1, 12345))
        self.assertEqual(vk, make_vk())
        with self.assertRaises(InvalidFieldElement):
            VerificationKey.from_bytes(set_word(blob, VK_NUM_FIELDS - 1, P))

    def test_selector_order_follows_entities(self):
        vk = make_vk(random.Random(3))
        sel = vk.selector_commitments()
        self.assertEqual(sel[0], vk.qm)
        self.assertEqual(sel[1], vk.qc)
        self.assertEqual(sel[17], vk.id1)
        self.assertEqual(sel[21], vk.t1)
        self.assertEqual(sel[26], vk.lagrange_last)


class ProofCodecTests(unittest.TestCase):
    def test_round_trip(self):
        proof = build_fixture().proof
        blob = proof.to_bytes()
        self.assertEqual(len(blob), PROOF_SIZE)
        self.assertEqual(PROOF_NUM_FIELDS, 440)
        self.assertEqual(Proof.from_bytes(blob), proof)
        self.assertEqual(Proof.from_bytes(bytearray(blob)), proof)

    def test_wrong_length(self):
        blob = zero_proof().to_bytes()
        for bad in (blob[:-32], blob + b"\x00", b""):
            with self.assertRaises(InvalidProofFormat):
                Proof.from_bytes(bad)

    def test_word_not_below_modulus(self):
        blob = zero_proof().to_bytes()
        for index in (32, 270, 300, PROOF_NUM_FIELDS - 9):  # univariate, entity eval, fold limb, gemini eval
            with self.assertRaises(InvalidFieldElement):
                Proof.from_bytes(set_word(blob, index, P))

    def test_point_off_curve(self):
        blob = zero_proof().to_bytes()
        bad = set_word(set_word(blob, 0, 1), 2, 3)  # w1 = (1, 3)
        with self.assertRaises(InvalidProofFormat):
            Proof.from_bytes(bad)
        kzg = PROOF_NUM_FIELDS - 4
        with self.assertRaises(InvalidProofFormat):
            Proof.from_bytes(set_word(blob, kzg, 5))

    def test_limb_checks(self):
        with self.assertRaises(InvalidProofFormat):
            G1ProofPoint(1 << LIMB_SHIFT, 0, 2, 0).to_affine()
        hi = MODULUS >> LIMB_SHIFT
        with self.assertRaises(InvalidProofFormat):
            G1ProofPoint(0, hi + 1, 0, 0).to_affine()

    def test_split_limbs(self):
        p = g1_mul(G1_GENERATOR, 0xDEADBEEF)
        q = G1ProofPoint.from_affine(p)
        self.assertLess(q.x_0, 1 << LIMB_SHIFT)
        self.assertEqual(q.x_0 | (q.x_1 << LIMB_SHIFT), p.x)
        self.assertEqual(q.to_affine(), p)
        self.assertEqual(ZERO_POINT.to_affine(), INFINITY)

    def test_shape_checks(self):
        proof = zero_proof()
        with self.assertRaises(InvalidProofFormat):
            replace(proof, gemini_a_evaluations=proof.gemini_a_evaluations[:-1])
        with self.assertRaises(InvalidProofFormat):
            replace(proof, sumcheck_univariates=proof.sumcheck_univariates[:-1])
        with self.assertRaises(InvalidProofFormat):
            replace(proof, gemini_fold_comms=proof.gemini_fold_comms + (ZERO_POINT,))

    def test_from_file(self):
        proof = build_fixture().proof
        with tempfile.TemporaryDirectory() as d:
            path = pathlib.Path(d) / "proof.bin"
            path.write_bytes(proof.to_bytes())
            self.assertEqual(Proof.from_file(path), proof)


if __name__ == "__main__":
    unittest.main()
