"""
합성 결과 기록 (Assignment)
===========================

Layouter가 합성 중에 만든 모든 것을 절대 행 기준으로 기록한다.

  - advice / fixed 셀 값 (Value)
  - 행별로 켜진 셀렉터
  - 복사 제약 쌍 (Cell, Cell)
  - instance 바인딩 (Cell, instance Column, row)

MockProver는 이 기록을 검사하고, lowering은 이것을 백엔드 게이트
테이블과 witness 벡터로 바꾼다. 스키마 위반은 ConfigurationError,
도메인 초과는 SynthesisError.
"""

from fibzk.errors import ConfigurationError, SynthesisError
from fibzk.circuit.constraint_system import ADVICE, FIXED, INSTANCE, Column


class Assignment:
    """n행 테이블에 대한 합성 기록.

    속성:
        cs: ConstraintSystem
        n: 테이블 행 수 (2^k)
        advice: {(열 인덱스, 행): Value}
        fixed: {(열 인덱스, 행): Value}
        selectors: {행: 켜진 셀렉터 인덱스 집합}
        copies: [(Cell, Cell)]
        instance_bindings: [(Cell, Column, row)]
        used_rows: 지금까지 사용된 행 수 (최대 행 + 1)
    """

    def __init__(self, cs, n):
        self.cs = cs
        self.n = n
        self.advice = {}
        self.fixed = {}
        self.selectors = {}
        self.copies = []
        self.instance_bindings = []
        self.used_rows = 0

    def _check_row(self, row):
        if row < 0 or row >= self.n:
            raise SynthesisError(f"행 {row}가 테이블 범위(0..{self.n - 1})를 벗어납니다")
        self.used_rows = max(self.used_rows, row + 1)

    def _check_column(self, column, kind):
        if not isinstance(column, Column) or column.kind != kind:
            raise ConfigurationError(f"{kind} 열이 아닙니다: {column!r}")
        if not self.cs.is_declared(column):
            raise ConfigurationError(f"선언되지 않은 열입니다: {column!r}")

    def enable_selector(self, selector, row):
        if not 0 <= selector.index < self.cs.num_selectors:
            raise ConfigurationError(f"선언되지 않은 셀렉터입니다: {selector!r}")
        self._check_row(row)
        self.selectors.setdefault(row, set()).add(selector.index)

    def is_enabled(self, selector_index, row):
        return selector_index in self.selectors.get(row, ())

    def assign_advice(self, column, row, value):
        self._check_column(column, ADVICE)
        self._check_row(row)
        self.advice[(column.index, row)] = value

    def assign_fixed(self, column, row, value):
        self._check_column(column, FIXED)
        self._check_row(row)
        self.fixed[(column.index, row)] = value

    def value_at(self, column, row):
        """셀 값. 할당되지 않은 셀은 None."""
        if column.kind == ADVICE:
            return self.advice.get((column.index, row))
        if column.kind == FIXED:
            return self.fixed.get((column.index, row))
        raise ConfigurationError(f"instance 열의 값은 합성 기록에 없습니다: {column!r}")

    def copy(self, left, right):
        """left ≡ right 복사 제약. 두 열 모두 equality가 켜져 있어야 한다."""
        for cell in (left, right):
            if not self.cs.has_equality(cell.column):
                raise ConfigurationError(
                    f"equality가 활성화되지 않은 열에 복사 제약을 걸 수 없습니다: {cell.column!r}"
                )
            self._check_row(cell.row)
        self.copies.append((left, right))

    def bind_instance(self, cell, column, row):
        """cell ≡ instance[column][row]."""
        self._check_column(column, INSTANCE)
        for col in (cell.column, column):
            if not self.cs.has_equality(col):
                raise ConfigurationError(
                    f"equality가 활성화되지 않은 열입니다: {col!r}"
                )
        if row < 0:
            raise SynthesisError(f"instance 행은 음수일 수 없습니다: {row}")
        self.instance_bindings.append((cell, column, row))

    def instance_lengths(self):
        """instance 열별 길이 (바인딩된 최대 행 + 1)."""
        lengths = [0] * self.cs.num_instance_columns
        for _, column, row in self.instance_bindings:
            lengths[column.index] = max(lengths[column.index], row + 1)
        return lengths

    def shape(self):
        """witness 값과 무관한 레이아웃 요약. 키 생성과 증명 사이에서 같아야 한다."""
        return (
            self.n,
            self.used_rows,
            tuple(sorted(self.advice)),
            tuple(sorted((key, repr(v)) for key, v in self.fixed.items())),
            tuple(sorted((row, tuple(sorted(s))) for row, s in self.selectors.items())),
            tuple(self.copies),
            tuple(self.instance_bindings),
        )
