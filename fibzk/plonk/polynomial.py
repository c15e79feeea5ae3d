"""
백엔드 기반 모듈: 다항식과 FFT
================================

회로 테이블의 각 열(배선 a, b, c / 셀렉터 q_* / 순열 S_σ)은 도메인
H = {1, ω, ..., ω^(n-1)} 위의 평가값이다. IFFT로 계수 표현을 얻어
커밋하고, 제약을 다항식 항등식으로 바꿔 증명한다.

  - Polynomial: 계수 표현 c₀ + c₁x + c₂x² + ...
  - fft / ifft: 재귀 Cooley-Tukey radix-2 (계수 ↔ 평가값)
  - poly_div: 긴 나눗셈 (몫 t(x) = C(x) / Z_H(x), 열기 증명)
  - lagrange_basis: L_i(x) 계수 표현

사용 예시:
    >>> p = Polynomial([FR(1), FR(2), FR(3)])  # 1 + 2x + 3x²
    >>> p.evaluate(FR(2))                      # FR(17)
"""

from fibzk.plonk.field import FR


class Polynomial:
    """FR 위의 다항식. coeffs[i]는 xⁱ의 계수이며 최고차 0 계수는 제거된다."""

    def __init__(self, coeffs=None):
        if coeffs is None:
            self.coeffs = [FR(0)]
        else:
            self.coeffs = [c if isinstance(c, FR) else FR(c) for c in coeffs]
            if not self.coeffs:
                self.coeffs = [FR(0)]
        self._trim()

    def _trim(self):
        while len(self.coeffs) > 1 and self.coeffs[-1] == FR(0):
            self.coeffs.pop()

    @property
    def degree(self):
        """차수. 영 다항식의 차수는 0으로 둔다."""
        return len(self.coeffs) - 1

    def is_zero(self):
        return len(self.coeffs) == 1 and self.coeffs[0] == FR(0)

    def evaluate(self, point):
        """Horner 방법으로 p(point)를 계산한다."""
        if not isinstance(point, FR):
            point = FR(point)
        result = FR(0)
        for coeff in reversed(self.coeffs):
            result = result * point + coeff
        return result

    def shift(self, factor):
        """p(factor · x)의 계수 표현: cᵢ → factorⁱ · cᵢ.

        순열 누적자의 z(ω·x) 항과 코셋 평가에 쓰인다.
        """
        shifted = []
        power = FR(1)
        for coeff in self.coeffs:
            shifted.append(coeff * power)
            power = power * factor
        return Polynomial(shifted)

    def _coerce(self, other):
        if isinstance(other, (int, FR)):
            return Polynomial([other])
        return other

    def __add__(self, other):
        other = self._coerce(other)
        size = max(len(self.coeffs), len(other.coeffs))
        lhs = self.coeffs + [FR(0)] * (size - len(self.coeffs))
        rhs = other.coeffs + [FR(0)] * (size - len(other.coeffs))
        return Polynomial([x + y for x, y in zip(lhs, rhs)])

    __radd__ = __add__

    def __neg__(self):
        return Polynomial([FR(0) - c for c in self.coeffs])

    def __sub__(self, other):
        return self + (-self._coerce(other))

    def __rsub__(self, other):
        return self._coerce(other) - self

    def __mul__(self, other):
        """다항식 곱 (O(n²) 합성곱) 또는 스칼라곱."""
        if isinstance(other, (int, FR)):
            other = other if isinstance(other, FR) else FR(other)
            return Polynomial([c * other for c in self.coeffs])
        result = [FR(0)] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            if a == FR(0):
                continue
            for j, b in enumerate(other.coeffs):
                result[i + j] = result[i + j] + a * b
        return Polynomial(result)

    __rmul__ = __mul__

    def __eq__(self, other):
        if isinstance(other, (int, FR)):
            other = Polynomial([other])
        if not isinstance(other, Polynomial):
            return False
        return self.coeffs == other.coeffs

    def __len__(self):
        return len(self.coeffs)

    def __repr__(self):
        terms = []
        for i, c in enumerate(self.coeffs):
            if c == FR(0):
                continue
            if i == 0:
                terms.append(str(int(c)))
            elif i == 1:
                terms.append(f"{int(c)}*x")
            else:
                terms.append(f"{int(c)}*x^{i}")
        return "Poly(" + " + ".join(terms) + ")" if terms else "Poly(0)"

    @classmethod
    def zero(cls):
        return cls([FR(0)])

    @classmethod
    def x(cls):
        """항등 다항식 id(x) = x."""
        return cls([FR(0), FR(1)])

    @classmethod
    def vanishing(cls, n):
        """Z_H(x) = x^n - 1. 도메인의 모든 행에서 0이 된다."""
        coeffs = [FR(0)] * (n + 1)
        coeffs[0] = FR(-1)
        coeffs[n] = FR(1)
        return cls(coeffs)

    @classmethod
    def from_evaluations(cls, evals, omega):
        """도메인 평가값 [p(1), p(ω), ...]에서 다항식을 보간한다 (IFFT)."""
        return cls(ifft(evals, omega))


# ─────────────────────────────────────────────────────────────────────
# FFT / IFFT
# ─────────────────────────────────────────────────────────────────────

def fft(coeffs, omega):
    """계수 → 평가값 [p(1), p(ω), ..., p(ω^(n-1))]. len(coeffs)는 2의 거듭제곱."""
    n = len(coeffs)
    if n == 1:
        return [coeffs[0] if isinstance(coeffs[0], FR) else FR(coeffs[0])]

    omega_sq = omega * omega
    even_vals = fft(coeffs[0::2], omega_sq)
    odd_vals = fft(coeffs[1::2], omega_sq)

    half = n // 2
    result = [FR(0)] * n
    omega_k = FR(1)
    for k in range(half):
        t = omega_k * odd_vals[k]
        result[k] = even_vals[k] + t
        result[k + half] = even_vals[k] - t
        omega_k = omega_k * omega
    return result


def ifft(evals, omega):
    """평가값 → 계수. ω⁻¹로 FFT 후 n으로 나눈다."""
    n = len(evals)
    coeffs = fft(evals, FR(1) / omega)
    n_inv = FR(1) / FR(n)
    return [c * n_inv for c in coeffs]


# ─────────────────────────────────────────────────────────────────────
# 나눗셈 / Lagrange 기저
# ─────────────────────────────────────────────────────────────────────

def poly_div(a, b):
    """a(x) = b(x)·q(x) + r(x)를 만족하는 (q, r).

    Raises:
        ValueError: b가 영 다항식일 때
    """
    if b.is_zero():
        raise ValueError("0으로 나눌 수 없습니다")

    remainder = list(a.coeffs)
    divisor = b.coeffs
    deg_b = len(divisor) - 1
    deg_a = len(remainder) - 1
    if deg_a < deg_b:
        return Polynomial.zero(), Polynomial(remainder)

    quotient = [FR(0)] * (deg_a - deg_b + 1)
    lead_inv = FR(1) / divisor[-1]
    for i in range(deg_a - deg_b, -1, -1):
        coeff = remainder[i + deg_b] * lead_inv
        quotient[i] = coeff
        if coeff == FR(0):
            continue
        for j in range(deg_b + 1):
            remainder[i + j] = remainder[i + j] - coeff * divisor[j]

    return Polynomial(quotient), Polynomial(remainder[:deg_b] or [FR(0)])


def lagrange_basis(domain, i):
    """L_i(x) = ∏_{j≠i} (x - d_j) / (d_i - d_j). L_i(d_j) = δ_ij."""
    result = Polynomial([FR(1)])
    denominator = FR(1)
    for j, d_j in enumerate(domain):
        if j == i:
            continue
        result = result * Polynomial([FR(0) - d_j, FR(1)])
        denominator = denominator * (domain[i] - d_j)
    return result * (FR(1) / denominator)
