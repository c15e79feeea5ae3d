"""
Layouter / Region: witness 할당 프로토콜
========================================

합성(synthesize)은 region 단위로 진행된다. region 안의 offset은 상대
행이며, floor planner가 region을 테이블 위에 배치해 절대 행을 정한다.
여기서는 region을 위에서부터 차례로 쌓는 단순 floor planner를 쓴다.

  with layouter.region("first row") as region:
      region.enable_selector(s, 0)
      a = region.assign_advice("a", col_a, 0, lambda: value)

  region을 벗어나면 닫히며, 닫힌 region을 쓰면 SynthesisError.

AssignedCell.copy_advice는 "이전 셀을 새 셀로 복사"하는 연산이다.
새 셀에 같은 값을 할당하고 두 셀 사이에 복사 제약을 건다.
"""

from collections import namedtuple
from contextlib import contextmanager

from fibzk.errors import SynthesisError
from fibzk.circuit.value import Value


Cell = namedtuple("Cell", ["column", "row"])


class AssignedCell:
    """할당된 셀과 그 값."""

    def __init__(self, value, cell):
        self.value = value
        self.cell = cell

    def copy_advice(self, name, region, column, offset):
        """이 셀의 값을 region의 (column, offset)에 복사하고 복사 제약을 건다."""
        assigned = region.assign_advice(name, column, offset, lambda: self.value)
        region.constrain_equal(self.cell, assigned.cell)
        return assigned

    def __repr__(self):
        return f"AssignedCell({self.value!r}, {self.cell.column.kind}[{self.cell.column.index}]@{self.cell.row})"


class Region:
    """테이블의 연속된 행 블록. offset은 region 시작 행 기준."""

    def __init__(self, name, assignment, start):
        self.name = name
        self.assignment = assignment
        self.start = start
        self.height = 0
        self.closed = False

    def _row(self, offset):
        if self.closed:
            raise SynthesisError(f"닫힌 region {self.name!r}을 사용할 수 없습니다")
        if offset < 0:
            raise SynthesisError(f"region {self.name!r}: offset은 음수일 수 없습니다: {offset}")
        self.height = max(self.height, offset + 1)
        return self.start + offset

    def enable_selector(self, selector, offset):
        self.assignment.enable_selector(selector, self._row(offset))

    def assign_advice(self, name, column, offset, to):
        """to()가 돌려준 Value를 (column, offset)에 할당한다."""
        row = self._row(offset)
        value = to()
        if not isinstance(value, Value):
            value = Value.known(value)
        self.assignment.assign_advice(column, row, value)
        return AssignedCell(value, Cell(column, row))

    def assign_fixed(self, name, column, offset, to):
        row = self._row(offset)
        value = to()
        if not isinstance(value, Value):
            value = Value.known(value)
        self.assignment.assign_fixed(column, row, value)
        return AssignedCell(value, Cell(column, row))

    def constrain_equal(self, left, right):
        if self.closed:
            raise SynthesisError(f"닫힌 region {self.name!r}을 사용할 수 없습니다")
        self.assignment.copy(left, right)


class Layouter:
    """region을 위에서부터 차례로 배치하는 단순 floor planner.

    속성:
        assignment: 합성 결과가 기록되는 Assignment
        next_row: 다음 region이 시작할 절대 행
        regions: [(이름, 시작 행, 높이)]
    """

    def __init__(self, assignment):
        self.assignment = assignment
        self.next_row = 0
        self.regions = []

    @contextmanager
    def region(self, name):
        region = Region(name, self.assignment, self.next_row)
        try:
            yield region
        finally:
            region.closed = True
            self.next_row += region.height
            self.regions.append((name, region.start, region.height))

    def assign_region(self, name, fn):
        """fn(region)을 새 region 안에서 실행하고 결과를 돌려준다."""
        with self.region(name) as region:
            return fn(region)

    def constrain_instance(self, cell, column, row):
        """cell의 값이 instance 열 column의 row번째 값과 같아야 한다."""
        self.assignment.bind_instance(cell, column, row)
