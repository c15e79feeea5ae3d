"""
Lowering: Plonkish 테이블 → 백엔드 게이트 테이블
==================================================

상위 제약 시스템(임의의 열, 셀렉터, 게이트 다항식)을 증명 백엔드의
고정된 게이트 형태로 옮긴다.

    q_L·a + q_R·b + q_O·c + q_M·a·b + q_C + PI = 0

**배치**:
  - advice 열 0, 1, 2 → 배선 a, b, c
  - instance 값 m개 → 백엔드 0..m-1 행 (공개 입력 게이트, q_L = 1)
  - 테이블 행 r → 백엔드 행 m + r

**게이트 변환** (행마다):
  게이트 다항식을 단항식으로 전개하고, 셀렉터와 fixed 인자는 그 행의
  값으로 대입한다 (키 생성 시점에 알려진 값). 남은 advice 부분은

    ()      → q_C
    (a)     → q_L
    (b)     → q_R
    (c)     → q_O
    (a, b)  → q_M

  중 하나여야 한다. 그 밖의 형태나, 한 행에서 두 제약이 활성화되면
  ConfigurationError.

**복사 제약**:
  합성 기록의 복사 쌍과 instance 바인딩(공개 입력 행의 a 배선 ≡ 바인딩된 셀)을
  백엔드 복사 제약으로 옮긴다.

사용 예시:
    >>> layout = lower_circuit(cs, assignment, n=8)
    >>> a, b, c, pub = lower_witness(layout, assignment, [[3]])
"""

from fibzk.errors import ConfigurationError, SynthesisError
from fibzk.plonk.field import FR
from fibzk.plonk.circuit import Circuit, Gate
from fibzk.circuit.constraint_system import ADVICE


WIRE_NAMES = ("a", "b", "c")

# 전개된 advice 단항식 → 셀렉터 이름
_MONOMIAL_SELECTOR = {
    (): "q_c",
    ((ADVICE, 0),): "q_l",
    ((ADVICE, 1),): "q_r",
    ((ADVICE, 2),): "q_o",
    ((ADVICE, 0), (ADVICE, 1)): "q_m",
}


class Layout:
    """lowering 결과.

    속성:
        circuit: 백엔드 Circuit (패딩 전)
        n: 도메인 크기
        instance_lengths: instance 열별 길이
        instance_offsets: instance 열 j의 첫 공개 입력 행
        num_public_inputs: 공개 입력 행 수 m
    """

    def __init__(self, circuit, n, instance_lengths):
        self.circuit = circuit
        self.n = n
        self.instance_lengths = list(instance_lengths)
        self.instance_offsets = []
        offset = 0
        for length in self.instance_lengths:
            self.instance_offsets.append(offset)
            offset += length
        self.num_public_inputs = offset

    def backend_row(self, table_row):
        return self.num_public_inputs + table_row

    def public_row(self, column, row):
        return self.instance_offsets[column.index] + row


def _wire(column):
    if column.kind != ADVICE:
        raise ConfigurationError(f"advice 열만 배선에 대응할 수 있습니다: {column!r}")
    if column.index >= len(WIRE_NAMES):
        raise ConfigurationError(
            f"백엔드는 advice 열을 {len(WIRE_NAMES)}개까지만 지원합니다: {column!r}"
        )
    return column.index


def _row_gate(cs, assignment, row):
    """테이블 행 row의 백엔드 Gate. 활성 제약이 없으면 빈 게이트."""
    active = []
    for gate in cs.gates:
        for cname, expr in gate.constraints:
            selectors = {}
            for mono, coeff in expr.expand().items():
                factor = coeff
                advice_part = []
                for kind, index in mono:
                    if kind == "selector":
                        enabled = assignment.is_enabled(index, row)
                        factor = factor * FR(1 if enabled else 0)
                    elif kind == "fixed":
                        value = assignment.fixed.get((index, row))
                        if value is None:
                            factor = FR(0)
                        elif not value.is_known():
                            raise SynthesisError(f"fixed[{index}] 행 {row}의 값이 없습니다")
                        else:
                            factor = factor * value.inner()
                    else:
                        advice_part.append((kind, index))
                if factor == FR(0):
                    continue
                key = tuple(sorted(advice_part))
                if key not in _MONOMIAL_SELECTOR:
                    raise ConfigurationError(
                        f"게이트 {gate.name!r}의 제약 {cname!r}: 백엔드 게이트로 표현할 수 없는 항 {key}"
                    )
                name = _MONOMIAL_SELECTOR[key]
                selectors[name] = selectors.get(name, FR(0)) + factor
            selectors = {k: v for k, v in selectors.items() if v != FR(0)}
            if selectors:
                active.append((gate.name, cname, selectors))

    if not active:
        return Gate.empty()
    if len(active) > 1:
        names = [f"{g}/{c}" for g, c, _ in active]
        raise ConfigurationError(f"행 {row}에서 둘 이상의 제약이 활성화되었습니다: {names}")

    selectors = active[0][2]
    return Gate(
        selectors.get("q_l", FR(0)),
        selectors.get("q_r", FR(0)),
        selectors.get("q_o", FR(0)),
        selectors.get("q_m", FR(0)),
        selectors.get("q_c", FR(0)),
    )


def lower_circuit(cs, assignment, n):
    """합성 기록을 백엔드 회로로 옮긴다. witness 값은 사용하지 않는다.

    Raises:
        ConfigurationError: 표현 불가능한 게이트, fixed 열 복사, advice 열 초과
        SynthesisError: 공개 입력 행 + 사용 행 > n
    """
    if cs.num_advice_columns > len(WIRE_NAMES):
        raise ConfigurationError(
            f"백엔드는 advice 열을 {len(WIRE_NAMES)}개까지만 지원합니다: {cs.num_advice_columns}"
        )

    m = sum(assignment.instance_lengths())
    if m + assignment.used_rows > n:
        raise SynthesisError(
            f"공개 입력 {m}행 + 회로 {assignment.used_rows}행이 도메인 크기 {n}를 초과합니다"
        )

    circuit = Circuit()
    for _ in range(m):
        circuit.add_public_input_gate()
    for row in range(assignment.used_rows):
        circuit.add_gate(_row_gate(cs, assignment, row))

    layout = Layout(circuit, n, assignment.instance_lengths())

    for left, right in assignment.copies:
        circuit.add_copy_constraint(
            (_wire(left.column), layout.backend_row(left.row)),
            (_wire(right.column), layout.backend_row(right.row)),
        )
    for cell, column, row in assignment.instance_bindings:
        circuit.add_copy_constraint(
            (0, layout.public_row(column, row)),
            (_wire(cell.column), layout.backend_row(cell.row)),
        )
    return layout


def lower_witness(layout, assignment, instances):
    """배선 값 벡터 (a, b, c; 길이 n)와 공개 입력 리스트.

    Raises:
        SynthesisError: 알려지지 않은 witness, instance 모양 불일치
    """
    if [len(col) for col in instances] != layout.instance_lengths:
        raise SynthesisError(
            f"instance 모양이 {layout.instance_lengths}여야 합니다: {[len(c) for c in instances]}"
        )

    n = layout.n
    wires = [[FR(0)] * n for _ in WIRE_NAMES]

    public_inputs = []
    for col in instances:
        for value in col:
            public_inputs.append(value if isinstance(value, FR) else FR(value))
    for i, value in enumerate(public_inputs):
        wires[0][i] = value

    for (index, row), value in assignment.advice.items():
        if not value.is_known():
            raise SynthesisError(
                f"advice[{index}] 행 {row}의 witness 값이 없습니다 (Value.unknown)"
            )
        wires[index][layout.backend_row(row)] = value.inner()

    return wires[0], wires[1], wires[2], public_inputs
