"""
제약 시스템: 열, 셀렉터, 게이트 선언
====================================

회로 테이블은 세로 열(column)의 모음이다.

  | 종류      | 내용                                  |
  |-----------|---------------------------------------|
  | advice    | prover만 아는 witness 값              |
  | fixed     | 키 생성 시 정해지는 상수              |
  | instance  | prover와 verifier가 공유하는 공개 값  |
  | selector  | 행마다 켜고 끄는 0/1 열 (게이트 활성) |

열과 셀렉터는 configure 단계에서 한 번 선언되고 이후 추가/삭제되지 않는다.
복사 제약에 참여하는 열은 enable_equality로 미리 표시해야 한다.

게이트는 (이름, [(제약 이름, Expression)]) 데이터이며, 각 Expression은
현재 행에서 0이 되어야 한다.

사용 예시:
    >>> meta = ConstraintSystem()
    >>> a, b, c = meta.advice_column(), meta.advice_column(), meta.advice_column()
    >>> s = meta.selector()
    >>> meta.create_gate("add", lambda vc: [
    ...     ("a + b = c", vc.query_selector(s) * (vc.query_advice(a)
    ...                   + vc.query_advice(b) - vc.query_advice(c)))])
"""

from collections import namedtuple

from fibzk.errors import ConfigurationError
from fibzk.circuit.expression import AdviceQuery, FixedQuery, SelectorQuery


ADVICE = "advice"
FIXED = "fixed"
INSTANCE = "instance"

Column = namedtuple("Column", ["kind", "index"])
Selector = namedtuple("Selector", ["index"])


class Gate:
    """이름 붙은 제약 묶음."""

    def __init__(self, name, constraints):
        self.name = name
        self.constraints = list(constraints)

    def constraint_names(self):
        return [name for name, _ in self.constraints]

    def queried_selectors(self):
        """게이트가 질의하는 셀렉터 인덱스 집합."""
        out = set()
        for _, expr in self.constraints:
            out.update(q.target.index for q in expr.leaves() if isinstance(q, SelectorQuery))
        return out

    def __repr__(self):
        return f"Gate({self.name!r}, {self.constraint_names()})"


class VirtualCells:
    """create_gate 콜백에 전달되는 질의 생성기. 선언된 열만 질의할 수 있다."""

    def __init__(self, meta):
        self.meta = meta

    def _check(self, column, kind):
        if not isinstance(column, Column) or column.kind != kind:
            raise ConfigurationError(f"{kind} 열이 아닙니다: {column!r}")
        if not self.meta.is_declared(column):
            raise ConfigurationError(f"선언되지 않은 열입니다: {column!r}")

    def query_advice(self, column):
        self._check(column, ADVICE)
        return AdviceQuery(column)

    def query_fixed(self, column):
        self._check(column, FIXED)
        return FixedQuery(column)

    def query_selector(self, selector):
        if not isinstance(selector, Selector) or not 0 <= selector.index < self.meta.num_selectors:
            raise ConfigurationError(f"선언되지 않은 셀렉터입니다: {selector!r}")
        return SelectorQuery(selector)


class ConstraintSystem:
    """회로 스키마 (열 개수, equality 집합, 게이트).

    속성:
        num_advice_columns, num_fixed_columns, num_instance_columns, num_selectors
        equality: equality가 활성화된 Column 집합
        gates: Gate 리스트
    """

    def __init__(self):
        self.num_advice_columns = 0
        self.num_fixed_columns = 0
        self.num_instance_columns = 0
        self.num_selectors = 0
        self.equality = set()
        self.gates = []

    def advice_column(self):
        column = Column(ADVICE, self.num_advice_columns)
        self.num_advice_columns += 1
        return column

    def fixed_column(self):
        column = Column(FIXED, self.num_fixed_columns)
        self.num_fixed_columns += 1
        return column

    def instance_column(self):
        column = Column(INSTANCE, self.num_instance_columns)
        self.num_instance_columns += 1
        return column

    def selector(self):
        selector = Selector(self.num_selectors)
        self.num_selectors += 1
        return selector

    def is_declared(self, column):
        counts = {
            ADVICE: self.num_advice_columns,
            FIXED: self.num_fixed_columns,
            INSTANCE: self.num_instance_columns,
        }
        return (
            isinstance(column, Column)
            and column.kind in counts
            and 0 <= column.index < counts[column.kind]
        )

    def enable_equality(self, column):
        """column을 복사 제약에 참여할 수 있게 한다.

        Raises:
            ConfigurationError: 선언되지 않은 열일 때
        """
        if not self.is_declared(column):
            raise ConfigurationError(f"선언되지 않은 열에 equality를 설정할 수 없습니다: {column!r}")
        self.equality.add(column)

    def has_equality(self, column):
        return column in self.equality

    def create_gate(self, name, fn):
        """게이트를 등록한다. fn(VirtualCells) → [(제약 이름, Expression)].

        Raises:
            ConfigurationError: 이름 중복, 빈 게이트, 선언되지 않은 열 질의
        """
        if any(g.name == name for g in self.gates):
            raise ConfigurationError(f"이미 등록된 게이트입니다: {name!r}")
        constraints = list(fn(VirtualCells(self)))
        if not constraints:
            raise ConfigurationError(f"게이트 {name!r}에 제약이 없습니다")
        gate = Gate(name, constraints)
        self.gates.append(gate)
        return gate

    def pinned(self):
        """스키마 전체를 비교 가능한 값으로 고정한다.

        키 생성 시의 스키마와 증명 시의 스키마가 같은지 확인하는 데 쓴다.
        """
        gates = []
        for gate in self.gates:
            constraints = []
            for cname, expr in gate.constraints:
                poly = tuple(sorted((m, int(c)) for m, c in expr.expand().items()))
                constraints.append((cname, poly))
            gates.append((gate.name, tuple(constraints)))
        return (
            ("advice", self.num_advice_columns),
            ("fixed", self.num_fixed_columns),
            ("instance", self.num_instance_columns),
            ("selectors", self.num_selectors),
            ("equality", tuple(sorted(self.equality))),
            ("gates", tuple(gates)),
        )
