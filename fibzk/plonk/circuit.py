"""
백엔드 게이트 테이블
====================

증명 백엔드가 직접 다루는 저수준 회로 표현. 상위 계층(fibzk.circuit)의
제약 시스템은 lowering을 거쳐 이 표현으로 내려온다.

**게이트 방정식** (행마다 하나):

    q_L·a + q_R·b + q_O·c + q_M·(a·b) + q_C + PI = 0

  | 유형     | q_L | q_R | q_O | q_M | q_C | 의미        |
  |----------|-----|-----|-----|-----|-----|-------------|
  | 덧셈     |  1  |  1  | -1  |  0  |  0  | a + b = c   |
  | 곱셈     |  0  |  0  | -1  |  1  |  0  | a · b = c   |
  | 공개입력 |  1  |  0  |  0  |  0  |  0  | a = wᵢ (PI) |
  | 비활성   |  0  |  0  |  0  |  0  |  0  | 항상 만족   |

**복사 제약**: ((wire, row), (wire, row)) 쌍. wire는 0=a, 1=b, 2=c.

사용 예시:
    >>> circuit = Circuit()
    >>> circuit.add_public_input_gate()
    >>> row = circuit.add_gate(Gate.addition())
    >>> circuit.add_copy_constraint((2, row), (0, 0))
"""

from fibzk.plonk.field import FR
from fibzk.plonk.permutation import build_sigma


class Gate:
    """산술 게이트 한 행의 셀렉터 값."""

    def __init__(self, q_l, q_r, q_o, q_m, q_c):
        self.q_l = q_l if isinstance(q_l, FR) else FR(q_l)
        self.q_r = q_r if isinstance(q_r, FR) else FR(q_r)
        self.q_o = q_o if isinstance(q_o, FR) else FR(q_o)
        self.q_m = q_m if isinstance(q_m, FR) else FR(q_m)
        self.q_c = q_c if isinstance(q_c, FR) else FR(q_c)

    @classmethod
    def empty(cls):
        return cls(0, 0, 0, 0, 0)

    @classmethod
    def addition(cls):
        return cls(1, 1, -1, 0, 0)

    @classmethod
    def multiplication(cls):
        return cls(0, 0, -1, 1, 0)

    def check(self, a, b, c, pi=FR(0)):
        """q_L·a + q_R·b + q_O·c + q_M·(a·b) + q_C + PI == 0 ?"""
        a, b, c = (v if isinstance(v, FR) else FR(v) for v in (a, b, c))
        result = (
            self.q_l * a
            + self.q_r * b
            + self.q_o * c
            + self.q_m * (a * b)
            + self.q_c
            + pi
        )
        return result == FR(0)

    def selectors(self):
        return (self.q_l, self.q_r, self.q_o, self.q_m, self.q_c)

    def __eq__(self, other):
        return isinstance(other, Gate) and self.selectors() == other.selectors()

    def __repr__(self):
        names = ("q_l", "q_r", "q_o", "q_m", "q_c")
        parts = [f"{name}={int(v)}" for name, v in zip(names, self.selectors()) if v != FR(0)]
        return "Gate(" + ", ".join(parts) + ")"


class Circuit:
    """게이트 테이블 + 복사 제약.

    속성:
        gates: Gate 리스트 (행 순서)
        copy_constraints: ((wire, row), (wire, row)) 리스트
        num_public_inputs: 공개 입력 수. 공개 입력 게이트는 맨 앞 행에 놓인다.
    """

    def __init__(self):
        self.gates = []
        self.copy_constraints = []
        self.num_public_inputs = 0

    @property
    def n(self):
        """게이트 수 (패딩 전)."""
        return len(self.gates)

    def add_gate(self, gate):
        """게이트를 추가하고 행 인덱스를 돌려준다."""
        self.gates.append(gate)
        return len(self.gates) - 1

    def add_public_input_gate(self):
        """공개 입력 게이트 (q_L = 1). 다른 게이트보다 먼저 추가해야 한다.

        Raises:
            ValueError: 일반 게이트 뒤에 추가할 때
        """
        if len(self.gates) != self.num_public_inputs:
            raise ValueError("공개 입력 게이트는 테이블 맨 앞에만 올 수 있습니다")
        self.num_public_inputs += 1
        return self.add_gate(Gate(1, 0, 0, 0, 0))

    def add_copy_constraint(self, left, right):
        """left == right 배선 제약. 각 인자는 (wire, row)."""
        self.copy_constraints.append((tuple(left), tuple(right)))

    def padded(self, n):
        """빈 게이트로 n행까지 채운 사본.

        Raises:
            ValueError: 게이트 수가 n을 초과할 때
        """
        if self.n > n:
            raise ValueError(f"게이트 수 {self.n}가 도메인 크기 {n}를 초과합니다")
        out = Circuit()
        out.gates = list(self.gates) + [Gate.empty() for _ in range(n - self.n)]
        out.copy_constraints = list(self.copy_constraints)
        out.num_public_inputs = self.num_public_inputs
        return out

    def get_selector_polynomials(self):
        """(q_L, q_R, q_O, q_M, q_C) 행별 값 리스트."""
        q_l = [g.q_l for g in self.gates]
        q_r = [g.q_r for g in self.gates]
        q_o = [g.q_o for g in self.gates]
        q_m = [g.q_m for g in self.gates]
        q_c = [g.q_c for g in self.gates]
        return q_l, q_r, q_o, q_m, q_c

    def build_copy_constraints(self):
        """배선 순열 σ (길이 3n)."""
        return build_sigma(self.copy_constraints, self.n)

    def check_witness(self, a_vals, b_vals, c_vals, public_inputs):
        """모든 행의 게이트 방정식과 복사 제약을 직접 확인한다.

        Returns:
            list[str]: 위반 내용 (비어 있으면 만족)
        """
        failures = []
        for row, gate in enumerate(self.gates):
            pi = FR(0) - FR(public_inputs[row]) if row < len(public_inputs) else FR(0)
            if not gate.check(a_vals[row], b_vals[row], c_vals[row], pi):
                failures.append(f"gate row {row}")
        wires = (a_vals, b_vals, c_vals)
        for (w1, r1), (w2, r2) in self.copy_constraints:
            if wires[w1][r1] != wires[w2][r2]:
                failures.append(f"copy ({w1},{r1}) != ({w2},{r2})")
        return failures
