"""
백엔드 공유 유틸리티
====================

  - vanishing_poly_eval: Z_H(ζ) = ζ^n - 1
  - lagrange_basis_eval: L_i(ζ)
  - public_input_polynomial / public_input_poly_eval: PI(x)

**공개 입력 규약**:
  공개 입력 wᵢ는 i번째 행에 놓인다. 해당 행의 게이트는 q_L = 1 이며

    q_L·a + PI(ωⁱ) = 0,   PI(ωⁱ) = -wᵢ

  이므로 a(ωⁱ) = wᵢ 가 강제된다. Prover와 Verifier가 같은 규약을 쓴다.
"""

from fibzk.plonk.field import FR
from fibzk.plonk.polynomial import Polynomial


def vanishing_poly_eval(n, zeta):
    """Z_H(ζ) = ζ^n - 1."""
    return zeta ** n - FR(1)


def lagrange_basis_eval(i, n, omega, zeta):
    """L_i(ζ) = (ω^i / n) · (ζ^n - 1) / (ζ - ω^i).

    ζ가 ω^i와 같으면 1을 돌려준다.
    """
    if not isinstance(zeta, FR):
        zeta = FR(zeta)

    omega_i = omega ** i
    denominator = zeta - omega_i
    if denominator == FR(0):
        return FR(1)

    n_inv = FR(1) / FR(n)
    return n_inv * vanishing_poly_eval(n, zeta) * omega_i / denominator


def public_input_evals(pub_inputs, n):
    """PI(x)의 도메인 평가값: 0..m-1 행에 -wᵢ, 나머지 0."""
    if len(pub_inputs) > n:
        raise ValueError(f"공개 입력 수 {len(pub_inputs)}가 도메인 크기 {n}를 초과합니다")
    evals = [FR(0)] * n
    for i, val in enumerate(pub_inputs):
        if not isinstance(val, FR):
            val = FR(val)
        evals[i] = FR(0) - val
    return evals


def public_input_polynomial(pub_inputs, n, omega):
    """PI(x) = -Σᵢ wᵢ · Lᵢ(x)."""
    if not pub_inputs:
        return Polynomial.zero()
    return Polynomial.from_evaluations(public_input_evals(pub_inputs, n), omega)


def public_input_poly_eval(pub_inputs, n, omega, zeta):
    """PI(ζ)를 다항식 구성 없이 Lagrange 기저 평가로 계산한다."""
    result = FR(0)
    for i, val in enumerate(pub_inputs):
        if not isinstance(val, FR):
            val = FR(val)
        result = result - val * lagrange_basis_eval(i, n, omega, zeta)
    return result


def next_power_of_2(n):
    """n 이상의 가장 작은 2의 거듭제곱.

    예시:
        >>> next_power_of_2(5)  # 8
    """
    if n <= 1:
        return 1
    p = 1
    while p < n:
        p <<= 1
    return p
