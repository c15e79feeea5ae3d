"""
피보나치 회로
=============

t₀ = a, t₁ = b, t_{i+2} = t_i + t_{i+1} 을 행 단위로 산술화한다.

  | 행 | a      | b      | c      | s |
  |----|--------|--------|--------|---|
  | 0  | t₀     | t₁     | t₂     | 1 |   seed
  | 1  | t₁ ←b₀ | t₂ ←c₀ | t₃     | 1 |   chain step
  | 2  | t₂ ←b₁ | t₃ ←c₁ | t₄     | 1 |   chain step
  |... |        |        |        |   |

  게이트 "fib(plus)":  s · (a + b - c) = 0
  복사 제약:           b_{i-1} ≡ a_i,  c_{i-1} ≡ b_i
  공개 입력:           마지막 c ≡ instance[0]

steps번의 chain step 뒤 공개 출력은 t_{steps+2}.

사용 예시:
    >>> MockProver.run(3, FibCircuit(1, 1), [[3]]).assert_satisfied()
    >>> fibonacci_output(1, 1, steps=1)   # FR(3)
"""

from collections import namedtuple

from fibzk.plonk.field import to_fr
from fibzk.circuit.value import Value


FibConfig = namedtuple("FibConfig", ["selector", "a", "b", "c", "target"])

GATE_NAME = "fib(plus)"
CONSTRAINT_NAME = "a + b = c"


class FibChip:
    """피보나치 행을 배치하는 칩."""

    def __init__(self, config):
        self.config = config

    @staticmethod
    def configure(meta):
        """열 a, b, c (advice), target (instance), 셀렉터, 게이트를 선언한다."""
        a = meta.advice_column()
        b = meta.advice_column()
        c = meta.advice_column()
        target = meta.instance_column()

        for column in (a, b, c, target):
            meta.enable_equality(column)

        selector = meta.selector()

        def gate(vc):
            s = vc.query_selector(selector)
            lhs = vc.query_advice(a) + vc.query_advice(b)
            return [(CONSTRAINT_NAME, s * (lhs - vc.query_advice(c)))]

        meta.create_gate(GATE_NAME, gate)
        return FibConfig(selector, a, b, c, target)

    def assign_first_row(self, layouter, a, b):
        """seed 행: (b 셀, c 셀)을 돌려준다."""
        cfg = self.config

        def fn(region):
            region.enable_selector(cfg.selector, 0)
            region.assign_advice("a", cfg.a, 0, lambda: a)
            b_cell = region.assign_advice("b", cfg.b, 0, lambda: b)
            c_cell = region.assign_advice("c", cfg.c, 0, lambda: a + b)
            return b_cell, c_cell

        return layouter.assign_region("first row", fn)

    def assign_next_row(self, layouter, prev_b, prev_c):
        """chain step: 이전 b → a, 이전 c → b 복사, c = a + b."""
        cfg = self.config

        def fn(region):
            region.enable_selector(cfg.selector, 0)
            a_cell = prev_b.copy_advice("a", region, cfg.a, 0)
            b_cell = prev_c.copy_advice("b", region, cfg.b, 0)
            c_cell = region.assign_advice(
                "c", cfg.c, 0, lambda: a_cell.value + b_cell.value
            )
            return b_cell, c_cell

        return layouter.assign_region("next row", fn)

    def expose_public(self, layouter, cell, row):
        layouter.constrain_instance(cell.cell, self.config.target, row)


class FibCircuit:
    """피보나치 회로 서술자.

    속성:
        a, b: 초기 값 (Value; 키 생성용 서술자에서는 unknown)
        steps: chain step 수
    """

    def __init__(self, a=None, b=None, steps=1):
        if steps < 0:
            raise ValueError(f"steps는 0 이상이어야 합니다: {steps}")
        self.a = _as_value(a)
        self.b = _as_value(b)
        self.steps = steps

    def without_witnesses(self):
        return FibCircuit(steps=self.steps)

    @classmethod
    def configure(cls, meta):
        return FibChip.configure(meta)

    def synthesize(self, config, layouter):
        chip = FibChip(config)
        prev_b, prev_c = chip.assign_first_row(layouter, self.a, self.b)
        for _ in range(self.steps):
            prev_b, prev_c = chip.assign_next_row(layouter, prev_b, prev_c)
        chip.expose_public(layouter, prev_c, 0)

    def __repr__(self):
        return f"FibCircuit(a={self.a!r}, b={self.b!r}, steps={self.steps})"


def _as_value(value):
    if value is None:
        return Value.unknown()
    if isinstance(value, Value):
        return value
    return Value.known(value)


def fibonacci_output(a, b, steps=1):
    """steps번의 chain step 뒤 공개 출력 t_{steps+2}."""
    x, y = to_fr(a), to_fr(b)
    x, y = y, x + y
    for _ in range(steps):
        x, y = y, x + y
    return y
