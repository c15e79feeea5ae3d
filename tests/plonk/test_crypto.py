"""
암호 모듈 테스트: srs.py, kzg.py, transcript.py, 증명 코덱
"""
import pytest

from fibzk.errors import ProofDecodeError
from fibzk.plonk.field import FR, G1, CURVE_ORDER, ec_mul, ec_add
from fibzk.plonk.polynomial import Polynomial
from fibzk.plonk.srs import SRS, Params, srs_degree_for
from fibzk.plonk.kzg import commit, open_quotient, create_witness, verify_opening
from fibzk.plonk.transcript import Transcript
from fibzk.plonk.prover import Proof, PROOF_SIZE, COMMITMENT_FIELDS, EVALUATION_FIELDS


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def small_srs():
    return SRS.generate(max_degree=8, seed=777)


# =====================================================================
# SRS / Params
# =====================================================================

class TestSRS:
    def test_lengths(self, small_srs):
        assert len(small_srs.g1_powers) == 9
        assert len(small_srs.g2_powers) == 2
        assert small_srs.max_degree == 8

    def test_first_power_is_generator(self, small_srs):
        assert small_srs.g1_powers[0] == G1

    def test_deterministic_seed(self, small_srs):
        again = SRS.generate(max_degree=2, seed=777)
        assert again.g1_powers[1] == small_srs.g1_powers[1]

    def test_different_seed(self, small_srs):
        other = SRS.generate(max_degree=1, seed=778)
        assert other.g1_powers[1] != small_srs.g1_powers[1]


class TestParams:
    def test_domain(self, params):
        assert params.k == 3
        assert params.n == 8
        assert params.srs.max_degree == srs_degree_for(8) == 34
        assert params.seed == 12345

    def test_repr(self, params):
        assert repr(params) == "Params(k=3, n=8, max_degree=34)"

    def test_k_must_be_positive(self, small_srs):
        with pytest.raises(ValueError):
            Params(0, small_srs)


# =====================================================================
# KZG
# =====================================================================

class TestCommit:
    def test_constant(self, small_srs):
        assert commit(Polynomial([FR(5)]), small_srs) == ec_mul(G1, 5)

    def test_zero_is_infinity(self, small_srs):
        assert commit(Polynomial.zero(), small_srs) is None

    def test_linear(self, small_srs):
        p = Polynomial([1, 2, 3])
        q = Polynomial([4, 0, 0, 5])
        assert commit(p + q, small_srs) == ec_add(commit(p, small_srs), commit(q, small_srs))

    def test_degree_too_large(self, small_srs):
        with pytest.raises(ValueError):
            commit(Polynomial([1] * 10), small_srs)


class TestOpening:
    def test_open_quotient(self):
        """q(x)·(x - z) + p(z) = p(x)"""
        p = Polynomial([3, 1, 4, 1, 5])
        z = FR(9)
        q = open_quotient(p, z)
        assert q * Polynomial([FR(0) - z, FR(1)]) + p.evaluate(z) == p

    def test_valid_opening(self, small_srs):
        p = Polynomial([2, 7, 1, 8])
        z = FR(31)
        pi = create_witness(p, z, small_srs)
        assert verify_opening(commit(p, small_srs), pi, z, p.evaluate(z), small_srs)

    def test_wrong_evaluation(self, small_srs):
        p = Polynomial([2, 7, 1, 8])
        z = FR(31)
        pi = create_witness(p, z, small_srs)
        assert not verify_opening(commit(p, small_srs), pi, z, p.evaluate(z) + FR(1), small_srs)


# =====================================================================
# Transcript
# =====================================================================

class TestTranscript:
    def test_deterministic(self):
        t1, t2 = Transcript(), Transcript()
        for t in (t1, t2):
            t.append_point(b"a_comm", G1)
            t.append_scalar(b"x", FR(5))
        assert t1.challenge_scalar(b"beta") == t2.challenge_scalar(b"beta")

    def test_successive_challenges_differ(self):
        t = Transcript()
        t.append_point(b"a_comm", G1)
        assert t.challenge_scalar(b"beta") != t.challenge_scalar(b"beta")

    def test_label_matters(self):
        assert Transcript(b"one").challenge_scalar(b"c") != Transcript(b"two").challenge_scalar(b"c")

    def test_challenge_in_field(self):
        assert 0 <= int(Transcript().challenge_scalar(b"c")) < CURVE_ORDER

    def test_public_inputs_bind(self):
        t1, t2 = Transcript(), Transcript()
        t1.append_public_inputs([FR(3)])
        t2.append_public_inputs([FR(5)])
        assert t1.challenge_scalar(b"beta") != t2.challenge_scalar(b"beta")

    def test_public_input_count_bind(self):
        """[0]과 []은 pi_len이 다르므로 구분된다."""
        t1, t2 = Transcript(), Transcript()
        t1.append_public_inputs([FR(0)])
        t2.append_public_inputs([])
        assert t1.challenge_scalar(b"beta") != t2.challenge_scalar(b"beta")

    def test_commitments_absorbed(self, fib_keys):
        cc = fib_keys["vk"].commitments
        t1, t2 = Transcript(), Transcript()
        t1.append_commitments(cc)
        for label, point in cc.labeled():
            t2.append_point(label, point)
        assert t1.state == t2.state
        assert [label for label, _ in cc.labeled()] == [
            b"q_l", b"q_r", b"q_o", b"q_m", b"q_c", b"s_sigma1", b"s_sigma2", b"s_sigma3",
        ]


# =====================================================================
# 증명 코덱
# =====================================================================

class TestProofCodec:
    def test_size(self, fib_proof):
        assert PROOF_SIZE == 9 * 64 + 7 * 32 == 800
        assert len(fib_proof) == PROOF_SIZE

    def test_field_order(self):
        assert COMMITMENT_FIELDS[0] == "a_comm"
        assert COMMITMENT_FIELDS[-1] == "W_zeta_omega_comm"
        assert EVALUATION_FIELDS[-1] == "r_eval"

    def test_roundtrip(self, fib_proof):
        proof = Proof.from_bytes(fib_proof)
        assert proof.to_bytes() == fib_proof
        assert Proof.from_bytes(bytearray(fib_proof)) == proof

    def test_wrong_length(self, fib_proof):
        with pytest.raises(ProofDecodeError):
            Proof.from_bytes(fib_proof[:-1])

    def test_not_bytes(self):
        with pytest.raises(ProofDecodeError):
            Proof.from_bytes("00" * PROOF_SIZE)

    def test_point_off_curve(self, fib_proof):
        bad = (1).to_bytes(32, "big") * 2 + fib_proof[64:]
        with pytest.raises(ProofDecodeError):
            Proof.from_bytes(bad)

    def test_scalar_out_of_range(self, fib_proof):
        bad = fib_proof[:-32] + b"\xff" * 32
        with pytest.raises(ProofDecodeError):
            Proof.from_bytes(bad)
