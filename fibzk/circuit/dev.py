"""
MockProver: 암호 연산 없는 제약 검사기
========================================

회로를 구체 witness로 합성한 뒤, 테이블을 직접 읽어 다음을 확인한다.

  1. 게이트: 게이트가 질의하는 셀렉터가 켜진 모든 행에서 각 제약식 == 0
  2. 복사 제약: 두 셀의 값이 같음
  3. instance 바인딩: 셀 값 == instance[column][row]

증명을 만들기 전에 witness 오류를 사람이 읽을 수 있는 형태로 보고한다.
실제 prove()도 암호 연산에 앞서 같은 검사(check_assignment)를 수행한다.

사용 예시:
    >>> prover = MockProver.run(3, FibCircuit(1, 1), [[3]])
    >>> prover.verify()          # []
    >>> prover.assert_satisfied()
"""

from fibzk.errors import ConstraintUnsatisfied, SynthesisError
from fibzk.plonk.field import FR
from fibzk.circuit.constraint_system import ConstraintSystem, ADVICE, FIXED
from fibzk.circuit.assignment import Assignment
from fibzk.circuit.layouter import Layouter
from fibzk.circuit.value import Value


# ─────────────────────────────────────────────────────────────────────
# 실패 레코드
# ─────────────────────────────────────────────────────────────────────

class VerifyFailure:
    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __repr__(self):
        return str(self)


class ConstraintNotSatisfied(VerifyFailure):
    def __init__(self, gate, constraint, row):
        self.gate = gate
        self.constraint = constraint
        self.row = row

    def __str__(self):
        return f"게이트 {self.gate!r}의 제약 {self.constraint!r}가 행 {self.row}에서 만족되지 않음"


class CellNotAssigned(VerifyFailure):
    def __init__(self, gate, constraint, row, column):
        self.gate = gate
        self.constraint = constraint
        self.row = row
        self.column = column

    def __str__(self):
        return (
            f"게이트 {self.gate!r}의 제약 {self.constraint!r}가 행 {self.row}에서 "
            f"할당되지 않은 셀 {self.column.kind}[{self.column.index}]을 질의함"
        )


class Permutation(VerifyFailure):
    def __init__(self, left, right):
        self.left = left
        self.right = right

    def __str__(self):
        return (
            f"복사 제약 위반: {self.left.column.kind}[{self.left.column.index}]@{self.left.row}"
            f" != {self.right.column.kind}[{self.right.column.index}]@{self.right.row}"
        )


class InstanceMismatch(VerifyFailure):
    def __init__(self, cell, column, row):
        self.cell = cell
        self.column = column
        self.row = row

    def __str__(self):
        return (
            f"공개 입력 불일치: {self.cell.column.kind}[{self.cell.column.index}]@{self.cell.row}"
            f" != instance[{self.column.index}][{self.row}]"
        )


# ─────────────────────────────────────────────────────────────────────
# 검사
# ─────────────────────────────────────────────────────────────────────

def check_assignment(cs, assignment, instances):
    """합성 기록을 검사해 실패 레코드 리스트를 돌려준다.

    Args:
        cs: ConstraintSystem
        assignment: Assignment (구체 witness로 합성된 것)
        instances: instance 열별 값 시퀀스의 리스트

    Raises:
        SynthesisError: instance 열 개수가 스키마와 다를 때
    """
    if len(instances) != cs.num_instance_columns:
        raise SynthesisError(
            f"instance 열이 {cs.num_instance_columns}개여야 합니다: {len(instances)}"
        )

    failures = []
    failures.extend(_check_gates(cs, assignment))
    failures.extend(_check_copies(assignment))
    failures.extend(_check_instances(assignment, instances))
    return failures


def _check_gates(cs, assignment):
    failures = []
    for gate in cs.gates:
        selectors = gate.queried_selectors()
        for row in range(assignment.used_rows):
            if selectors and not any(assignment.is_enabled(s, row) for s in selectors):
                continue
            for cname, expr in gate.constraints:
                missing = []

                def resolve(query, row=row, missing=missing):
                    if query.kind == "selector":
                        return Value.known(1 if assignment.is_enabled(query.target.index, row) else 0)
                    value = assignment.value_at(query.target, row)
                    if value is None:
                        missing.append(query.target)
                        return Value.known(0)
                    return value

                result = expr.evaluate(resolve)
                if missing:
                    failures.extend(
                        CellNotAssigned(gate.name, cname, row, column) for column in missing
                    )
                elif not result.is_known():
                    raise SynthesisError(
                        f"게이트 {gate.name!r} 행 {row}: 값이 알려지지 않은 witness가 있습니다"
                    )
                elif result.inner() != FR(0):
                    failures.append(ConstraintNotSatisfied(gate.name, cname, row))
    return failures


def _cell_value(assignment, cell):
    if cell.column.kind in (ADVICE, FIXED):
        return assignment.value_at(cell.column, cell.row)
    return None


def _check_copies(assignment):
    failures = []
    for left, right in assignment.copies:
        lv = _cell_value(assignment, left)
        rv = _cell_value(assignment, right)
        if lv is None or rv is None or lv != rv:
            failures.append(Permutation(left, right))
    return failures


def _check_instances(assignment, instances):
    failures = []
    for cell, column, row in assignment.instance_bindings:
        values = instances[column.index]
        value = _cell_value(assignment, cell)
        if row >= len(values) or value is None or value != Value.known(values[row]):
            failures.append(InstanceMismatch(cell, column, row))
    return failures


def synthesize(circuit, n):
    """configure + synthesize를 한 번 실행하고 (cs, config, assignment)를 돌려준다."""
    cs = ConstraintSystem()
    config = type(circuit).configure(cs)
    assignment = Assignment(cs, n)
    circuit.synthesize(config, Layouter(assignment))
    return cs, config, assignment


class MockProver:
    """구체 witness로 합성한 테이블을 보관하고 제약을 검사한다."""

    def __init__(self, k, cs, assignment, instances):
        self.k = k
        self.cs = cs
        self.assignment = assignment
        self.instances = [list(col) for col in instances]

    @classmethod
    def run(cls, k, circuit, instances):
        """2^k 행 테이블에서 회로를 합성한다.

        Raises:
            ConfigurationError / SynthesisError: 합성 실패
        """
        cs, _, assignment = synthesize(circuit, 1 << k)
        return cls(k, cs, assignment, instances)

    def verify(self):
        """실패 레코드 리스트. 비어 있으면 모든 제약이 만족된다."""
        return check_assignment(self.cs, self.assignment, self.instances)

    def assert_satisfied(self):
        failures = self.verify()
        if failures:
            raise ConstraintUnsatisfied(failures)
