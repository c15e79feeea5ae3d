"""
게이트 다항식 표현식
====================

게이트 제약은 "현재 행"의 셀 질의(query)로 만든 다항식이다.

    s · (a + b - c)

노드 종류:
  - Constant(c)
  - SelectorQuery(selector), FixedQuery(column), AdviceQuery(column)
  - Sum(l, r), Product(l, r), Negated(e), Scaled(e, c)

파이썬 연산자(+, -, *, 단항 -)로 조합하며, 정수와 FR은 Constant로 승격된다.

  - evaluate(resolve): 질의 노드 → Value 함수로 값을 계산 (MockProver)
  - expand(): {단항식: 계수} 로 전개 (lowering, pinned 스키마 비교)
  - leaves(): 질의 노드 순회 (게이트가 참조하는 열/셀렉터 확인)

단항식(monomial)은 ("selector" | "fixed" | "advice", index) 쌍을 정렬한 튜플이다.
상수항의 단항식은 빈 튜플 ()이다.
"""

from fibzk.plonk.field import FR
from fibzk.circuit.value import Value


class Expression:
    """표현식 노드의 공통 기반. 연산자 오버로딩만 담당한다."""

    def __add__(self, other):
        return Sum(self, _lift(other))

    def __radd__(self, other):
        return Sum(_lift(other), self)

    def __sub__(self, other):
        return Sum(self, Negated(_lift(other)))

    def __rsub__(self, other):
        return Sum(_lift(other), Negated(self))

    def __mul__(self, other):
        if isinstance(other, (int, FR)):
            return Scaled(self, other)
        return Product(self, other)

    def __rmul__(self, other):
        if isinstance(other, (int, FR)):
            return Scaled(self, other)
        return Product(other, self)

    def __neg__(self):
        return Negated(self)

    def leaves(self):
        """질의 노드(SelectorQuery, FixedQuery, AdviceQuery)를 순회한다."""
        for child in self.children():
            yield from child.leaves()

    def children(self):
        return ()

    def degree(self):
        return max((len(m) for m in self.expand()), default=0)


def _lift(value):
    if isinstance(value, Expression):
        return value
    return Constant(value)


class Constant(Expression):
    def __init__(self, value):
        self.value = value if isinstance(value, FR) else FR(value)

    def evaluate(self, resolve):
        return Value.known(self.value)

    def expand(self):
        if self.value == FR(0):
            return {}
        return {(): self.value}

    def __repr__(self):
        return str(int(self.value))


class _Query(Expression):
    kind = None

    def __init__(self, target):
        self.target = target

    @property
    def key(self):
        return (self.kind, self.target.index)

    def leaves(self):
        yield self

    def evaluate(self, resolve):
        return resolve(self)

    def expand(self):
        return {(self.key,): FR(1)}

    def __repr__(self):
        return f"{self.kind}[{self.target.index}]"


class SelectorQuery(_Query):
    kind = "selector"


class FixedQuery(_Query):
    kind = "fixed"


class AdviceQuery(_Query):
    kind = "advice"


class Sum(Expression):
    def __init__(self, left, right):
        self.left = left
        self.right = right

    def children(self):
        return (self.left, self.right)

    def evaluate(self, resolve):
        return self.left.evaluate(resolve) + self.right.evaluate(resolve)

    def expand(self):
        out = dict(self.left.expand())
        for mono, coeff in self.right.expand().items():
            out[mono] = out.get(mono, FR(0)) + coeff
        return {m: c for m, c in out.items() if c != FR(0)}

    def __repr__(self):
        if isinstance(self.right, Negated):
            return f"{self.left!r} - {self.right.inner!r}"
        return f"{self.left!r} + {self.right!r}"


class Product(Expression):
    def __init__(self, left, right):
        self.left = left
        self.right = right

    def children(self):
        return (self.left, self.right)

    def evaluate(self, resolve):
        return self.left.evaluate(resolve) * self.right.evaluate(resolve)

    def expand(self):
        out = {}
        for m1, c1 in self.left.expand().items():
            for m2, c2 in self.right.expand().items():
                mono = tuple(sorted(m1 + m2))
                out[mono] = out.get(mono, FR(0)) + c1 * c2
        return {m: c for m, c in out.items() if c != FR(0)}

    def __repr__(self):
        def wrap(e):
            return f"({e!r})" if isinstance(e, Sum) else repr(e)
        return f"{wrap(self.left)} * {wrap(self.right)}"


class Negated(Expression):
    def __init__(self, inner):
        self.inner = inner

    def children(self):
        return (self.inner,)

    def evaluate(self, resolve):
        return -self.inner.evaluate(resolve)

    def expand(self):
        return {m: FR(0) - c for m, c in self.inner.expand().items()}

    def __repr__(self):
        return f"-{self.inner!r}"


class Scaled(Expression):
    def __init__(self, inner, scalar):
        self.inner = inner
        self.scalar = scalar if isinstance(scalar, FR) else FR(scalar)

    def children(self):
        return (self.inner,)

    def evaluate(self, resolve):
        return self.inner.evaluate(resolve) * Value.known(self.scalar)

    def expand(self):
        out = {m: c * self.scalar for m, c in self.inner.expand().items()}
        return {m: c for m, c in out.items() if c != FR(0)}

    def __repr__(self):
        return f"{self.inner!r} * {int(self.scalar)}"
