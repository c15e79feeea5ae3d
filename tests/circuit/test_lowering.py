"""
Lowering 테스트: Plonkish 테이블 → 백엔드 게이트 테이블

피보나치 회로 (steps = 1, n = 8)의 lowering 결과:

  | 백엔드 행 | 게이트     | a  | b | c |
  |-----------|------------|----|---|---|
  | 0         | 공개 입력  | 3  | 0 | 0 |
  | 1         | 덧셈       | 1  | 1 | 2 |
  | 2         | 덧셈       | 1  | 2 | 3 |
  | 3..7      | 비활성     | 0  | 0 | 0 |
"""
import pytest

from fibzk.errors import ConfigurationError, SynthesisError
from fibzk.plonk.field import FR
from fibzk.plonk.circuit import Gate
from fibzk.circuit.constraint_system import ConstraintSystem
from fibzk.circuit.assignment import Assignment
from fibzk.circuit.layouter import Layouter
from fibzk.circuit.dev import synthesize
from fibzk.circuit.lowering import lower_circuit, lower_witness
from fibzk.fib import FibCircuit


N = 8


@pytest.fixture(scope="module")
def fib_layout():
    cs, _, assignment = synthesize(FibCircuit(1, 1), N)
    layout = lower_circuit(cs, assignment, N)
    return {"cs": cs, "assignment": assignment, "layout": layout}


class TestFibLayout:
    def test_public_rows_first(self, fib_layout):
        layout = fib_layout["layout"]
        assert layout.num_public_inputs == 1
        assert layout.instance_lengths == [1]
        assert layout.instance_offsets == [0]
        assert layout.backend_row(0) == 1

    def test_gates(self, fib_layout):
        circuit = fib_layout["layout"].circuit
        assert circuit.gates == [Gate(1, 0, 0, 0, 0), Gate.addition(), Gate.addition()]
        assert circuit.num_public_inputs == 1

    def test_copy_constraints(self, fib_layout):
        """b₀ ≡ a₁, c₀ ≡ b₁ (백엔드 행 1 → 2), c₁ ≡ 공개 입력 행 0."""
        circuit = fib_layout["layout"].circuit
        assert sorted(circuit.copy_constraints) == sorted([
            ((1, 1), (0, 2)),
            ((2, 1), (1, 2)),
            ((0, 0), (2, 2)),
        ])

    def test_witness(self, fib_layout):
        a, b, c, pub = lower_witness(fib_layout["layout"], fib_layout["assignment"], [[3]])
        assert a[:3] == [FR(3), FR(1), FR(1)]
        assert b[:3] == [FR(0), FR(1), FR(2)]
        assert c[:3] == [FR(0), FR(2), FR(3)]
        assert a[3:] == b[3:] == c[3:] == [FR(0)] * 5
        assert pub == [FR(3)]

    def test_witness_satisfies_backend(self, fib_layout):
        layout = fib_layout["layout"]
        a, b, c, pub = lower_witness(layout, fib_layout["assignment"], [[3]])
        assert layout.circuit.padded(N).check_witness(a, b, c, pub) == []

    def test_wrong_instance_breaks_backend(self, fib_layout):
        layout = fib_layout["layout"]
        a, b, c, pub = lower_witness(layout, fib_layout["assignment"], [[5]])
        assert layout.circuit.padded(N).check_witness(a, b, c, pub) == ["copy (0,0) != (2,2)"]

    def test_instance_shape(self, fib_layout):
        with pytest.raises(SynthesisError):
            lower_witness(fib_layout["layout"], fib_layout["assignment"], [[3, 4]])

    def test_shape_only_matches_concrete(self, fib_layout):
        """witness 없는 회로도 같은 게이트 테이블을 만든다."""
        cs, _, assignment = synthesize(FibCircuit(steps=1), N)
        layout = lower_circuit(cs, assignment, N)
        concrete = fib_layout["layout"].circuit
        assert layout.circuit.gates == concrete.gates
        assert layout.circuit.copy_constraints == concrete.copy_constraints
        assert assignment.shape() == fib_layout["assignment"].shape()

    def test_unknown_witness(self):
        cs, _, assignment = synthesize(FibCircuit(steps=1), N)
        layout = lower_circuit(cs, assignment, N)
        with pytest.raises(SynthesisError):
            lower_witness(layout, assignment, [[3]])


class TestLimits:
    def test_largest_chain(self):
        """공개 입력 1행 + 7행 = 8행: steps = 6까지 들어간다."""
        cs, _, assignment = synthesize(FibCircuit(steps=6), N)
        layout = lower_circuit(cs, assignment, N)
        assert layout.circuit.n == N

    def test_public_rows_overflow(self):
        """테이블 8행 + 공개 입력 1행 > 8."""
        cs, _, assignment = synthesize(FibCircuit(steps=7), N)
        with pytest.raises(SynthesisError):
            lower_circuit(cs, assignment, N)


# ─────────────────────────────────────────────────────────────────────
# 게이트 변환 규칙
# ─────────────────────────────────────────────────────────────────────

def _single_gate_table(build_gate, extra_advice=0, enable=True):
    """advice 3열 + build_gate(vc, s, cols)로 만든 게이트 하나, 행 0에서 셀렉터 활성."""
    cs = ConstraintSystem()
    cols = [cs.advice_column() for _ in range(3 + extra_advice)]
    fixed = cs.fixed_column()
    s = cs.selector()
    cs.create_gate("g", lambda vc: build_gate(vc, s, cols, fixed))
    assignment = Assignment(cs, N)
    with Layouter(assignment).region("r") as region:
        if enable:
            region.enable_selector(s, 0)
        region.assign_fixed("k", fixed, 0, lambda: 7)
        for col in cols[:3]:
            region.assign_advice("x", col, 0, lambda: 1)
    return cs, assignment


class TestGateLowering:
    def test_multiplication_with_fixed_constant(self):
        """s·(a·b - c + k), k = 7 → q_M = 1, q_O = -1, q_C = 7"""
        def build(vc, s, cols, fixed):
            a, b, c = (vc.query_advice(col) for col in cols)
            return [("mul", vc.query_selector(s) * (a * b - c + vc.query_fixed(fixed)))]

        cs, assignment = _single_gate_table(build)
        gates = lower_circuit(cs, assignment, N).circuit.gates
        assert gates == [Gate(0, 0, -1, 1, 7)]

    def test_disabled_selector_is_empty_gate(self):
        def build(vc, s, cols, fixed):
            a, b, c = (vc.query_advice(col) for col in cols)
            return [("add", vc.query_selector(s) * (a + b - c))]

        cs, assignment = _single_gate_table(build, enable=False)
        assert lower_circuit(cs, assignment, N).circuit.gates == [Gate.empty()]

    def test_unsupported_monomial(self):
        """a·c 항은 백엔드 게이트로 표현할 수 없다."""
        def build(vc, s, cols, fixed):
            a, _, c = (vc.query_advice(col) for col in cols)
            return [("ac", vc.query_selector(s) * (a * c))]

        cs, assignment = _single_gate_table(build)
        with pytest.raises(ConfigurationError):
            lower_circuit(cs, assignment, N)

    def test_two_active_constraints(self):
        def build(vc, s, cols, fixed):
            a, b, c = (vc.query_advice(col) for col in cols)
            sel = vc.query_selector(s)
            return [("add", sel * (a + b - c)), ("mul", sel * (a * b - c))]

        cs, assignment = _single_gate_table(build)
        with pytest.raises(ConfigurationError):
            lower_circuit(cs, assignment, N)

    def test_too_many_advice_columns(self):
        def build(vc, s, cols, fixed):
            return [("d", vc.query_selector(s) * vc.query_advice(cols[3]))]

        cs, assignment = _single_gate_table(build, extra_advice=1)
        with pytest.raises(ConfigurationError):
            lower_circuit(cs, assignment, N)
