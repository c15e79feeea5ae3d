"""
PLONK Prover / Verifier 통합 테스트
====================================

백엔드 파이프라인(게이트 테이블 → preprocess → prove → verify)을 직접 구동한다.

테스트 범위:
  - 공개 입력 회로: 1 + 2 = 3, c ≡ 공개 입력
  - 공개 입력이 PI(x)로 반영되어 다른 값으로는 검증 실패
  - 건전성(soundness): 조작된 증명 요소 검증 실패
  - 입력 검증: 배선 길이, 공개 입력 수, 제약 불만족 witness
"""

import copy
import pytest

from fibzk.plonk.field import FR, G1, ec_mul
from fibzk.plonk.circuit import Circuit, Gate
from fibzk.plonk.preprocessor import preprocess, CircuitCommitments, SELECTOR_NAMES, SIGMA_NAMES
from fibzk.plonk.prover import prove
from fibzk.plonk.verifier import verify


N = 8


def _build_public_sum_circuit():
    """행 0 (public): a = 3 / 행 1 (add): 1 + 2 = 3 / c₁ ≡ a₀"""
    circuit = Circuit()
    circuit.add_public_input_gate()
    row = circuit.add_gate(Gate.addition())
    circuit.add_copy_constraint((2, row), (0, 0))

    pad = [FR(0)] * (N - 2)
    a_vals = [FR(3), FR(1)] + pad
    b_vals = [FR(0), FR(2)] + pad
    c_vals = [FR(0), FR(3)] + pad
    return circuit, a_vals, b_vals, c_vals, [FR(3)]


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def backend_data(params):
    """공개 입력 덧셈 회로의 전처리 데이터와 증명."""
    circuit, a_vals, b_vals, c_vals, public_inputs = _build_public_sum_circuit()
    preprocessed = preprocess(circuit, params.srs, N)

    class Counter:
        value = 0

        def randrange(self, stop):
            self.value += 1
            return (self.value * 7919) % stop

    proof = prove(a_vals, b_vals, c_vals, public_inputs, preprocessed, params.srs, Counter())
    return {
        "circuit": circuit,
        "a_vals": a_vals,
        "b_vals": b_vals,
        "c_vals": c_vals,
        "public_inputs": public_inputs,
        "srs": params.srs,
        "preprocessed": preprocessed,
        "commitments": preprocessed.commitments(),
        "proof": proof,
    }


# =====================================================================
# Preprocess
# =====================================================================

class TestPreprocess:
    def test_domain(self, backend_data):
        pp = backend_data["preprocessed"]
        assert pp.n == N
        assert len(pp.domain) == N
        assert len(pp.sigma) == 3 * N
        assert pp.num_public_inputs == 1

    def test_selector_polynomials_interpolate(self, backend_data):
        pp = backend_data["preprocessed"]
        assert pp.q_l_poly.evaluate(pp.domain[0]) == FR(1)
        assert pp.q_o_poly.evaluate(pp.domain[1]) == FR(-1)
        assert pp.q_l_poly.evaluate(pp.domain[5]) == FR(0)

    def test_commitments(self, backend_data):
        pp = backend_data["preprocessed"]
        cc = backend_data["commitments"]
        assert isinstance(cc, CircuitCommitments)
        assert cc.n == N
        assert cc.num_public_inputs == 1
        for name in SELECTOR_NAMES + SIGMA_NAMES:
            assert getattr(cc, f"{name}_comm") == getattr(pp, f"{name}_comm")

    def test_constant_selector_is_empty(self, backend_data):
        """q_C가 모두 0이면 커밋먼트는 무한원점."""
        assert backend_data["commitments"].q_c_comm is None

    def test_commitments_equality(self, backend_data):
        circuit = backend_data["circuit"]
        again = preprocess(circuit, backend_data["srs"], N).commitments()
        assert again == backend_data["commitments"]

    def test_too_many_gates(self, backend_data):
        circuit = Circuit()
        for _ in range(N + 1):
            circuit.add_gate(Gate.addition())
        with pytest.raises(ValueError):
            preprocess(circuit, backend_data["srs"], N)


# =====================================================================
# Prove / Verify
# =====================================================================

class TestProveVerify:
    def test_proof_fields(self, backend_data):
        proof = backend_data["proof"]
        assert proof.a_comm is not None
        assert proof.z_comm is not None
        assert proof.W_zeta_comm is not None
        assert proof.r_eval is not None

    def test_valid_proof(self, backend_data):
        assert verify(
            backend_data["proof"], backend_data["public_inputs"],
            backend_data["commitments"], backend_data["srs"],
        ) is True

    def test_wrong_public_input(self, backend_data):
        assert verify(
            backend_data["proof"], [FR(5)],
            backend_data["commitments"], backend_data["srs"],
        ) is False

    def test_wrong_public_input_count(self, backend_data):
        assert verify(
            backend_data["proof"], [],
            backend_data["commitments"], backend_data["srs"],
        ) is False

    def test_tampered_commitment(self, backend_data):
        bad = copy.copy(backend_data["proof"])
        bad.a_comm = ec_mul(G1, 12345)
        assert verify(
            bad, backend_data["public_inputs"],
            backend_data["commitments"], backend_data["srs"],
        ) is False


class TestProverInputs:
    def test_wrong_wire_length(self, backend_data):
        d = backend_data
        with pytest.raises(ValueError):
            prove(d["a_vals"][:-1], d["b_vals"], d["c_vals"], d["public_inputs"],
                  d["preprocessed"], d["srs"])

    def test_wrong_public_input_count(self, backend_data):
        d = backend_data
        with pytest.raises(ValueError):
            prove(d["a_vals"], d["b_vals"], d["c_vals"], [],
                  d["preprocessed"], d["srs"])

    def test_unsatisfied_witness(self, backend_data):
        """게이트를 위반하면 몫 다항식이 Z_H로 나누어떨어지지 않는다."""
        d = backend_data
        c_vals = list(d["c_vals"])
        c_vals[1] = FR(4)
        with pytest.raises(ValueError):
            prove(d["a_vals"], d["b_vals"], c_vals, d["public_inputs"],
                  d["preprocessed"], d["srs"])
