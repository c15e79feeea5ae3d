"""
Value: 알 수도, 모를 수도 있는 witness 값
===========================================

키 생성 단계에서는 witness가 없으므로 회로를 "모양만" 합성한다.
증명 단계에서는 같은 코드가 구체 값으로 실행된다. 두 경우를 하나의
코드 경로로 처리하기 위해 값은 다음 둘 중 하나이다.

  - Value.known(x): FR 값 x
  - Value.unknown(): 값 없음

산술 연산에서 한쪽이라도 unknown이면 결과도 unknown이다.

사용 예시:
    >>> Value.known(1) + Value.known(2)     # Value(3)
    >>> Value.known(1) + Value.unknown()    # Value(unknown)
"""

from fibzk.plonk.field import FR


class Value:
    __slots__ = ("_inner",)

    def __init__(self, inner=None):
        if inner is not None and not isinstance(inner, FR):
            inner = FR(inner)
        self._inner = inner

    @classmethod
    def known(cls, value):
        if value is None:
            raise ValueError("Value.known()에는 값이 필요합니다")
        return cls(value)

    @classmethod
    def unknown(cls):
        return cls(None)

    def is_known(self):
        return self._inner is not None

    def inner(self):
        """FR 값. unknown이면 None."""
        return self._inner

    def map(self, fn):
        if self._inner is None:
            return self
        return Value(fn(self._inner))

    def _zip(self, other, fn):
        if not isinstance(other, Value):
            other = Value.known(other)
        if self._inner is None or other._inner is None:
            return Value.unknown()
        return Value(fn(self._inner, other._inner))

    def __add__(self, other):
        return self._zip(other, lambda x, y: x + y)

    def __sub__(self, other):
        return self._zip(other, lambda x, y: x - y)

    def __mul__(self, other):
        return self._zip(other, lambda x, y: x * y)

    def __neg__(self):
        return self.map(lambda x: FR(0) - x)

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        if self._inner is None or other._inner is None:
            return self._inner is None and other._inner is None
        return self._inner == other._inner

    def __hash__(self):
        return hash(None if self._inner is None else int(self._inner))

    def __repr__(self):
        if self._inner is None:
            return "Value(unknown)"
        return f"Value({int(self._inner)})"
