"""
KZG 다항식 커밋먼트
====================

  커밋:      C = p(τ)·G1 = Σ cᵢ·[τⁱ]₁
  열기 증명: π = q(τ)·G1,  q(x) = (p(x) - p(z)) / (x - z)
  검증:      e(C - y·G1, G2) == e(π, [τ]₂ - z·G2)

Prover는 Round 1~3에서 배선/누적자/몫 다항식을 커밋하고, Round 5에서
open_quotient로 ζ, ζ·ω에서의 열기 증명 다항식을 만든다.

사용 예시:
    >>> C = commit(poly, srs)
    >>> pi = create_witness(poly, FR(7), srs)
    >>> verify_opening(C, pi, FR(7), poly.evaluate(FR(7)), srs)  # True
"""

from fibzk.plonk.field import FR, G1, ec_mul, ec_add, ec_neg, ec_pairing
from fibzk.plonk.polynomial import Polynomial, poly_div


def commit(poly, srs):
    """[p(τ)]₁을 계산한다. 영 다항식의 커밋먼트는 무한원점(None)이다.

    Raises:
        ValueError: 다항식 차수가 SRS 최대 차수를 초과할 때
    """
    if poly.degree > srs.max_degree:
        raise ValueError(
            f"다항식 차수 {poly.degree}가 SRS 최대 차수 {srs.max_degree}를 초과합니다"
        )

    result = None
    for i, coeff in enumerate(poly.coeffs):
        if coeff == FR(0):
            continue
        result = ec_add(result, ec_mul(srs.g1_powers[i], coeff))
    return result


def open_quotient(poly, point):
    """(p(x) - p(z)) / (x - z)를 계산한다.

    Raises:
        ValueError: 나머지가 0이 아닐 때 (계산 오류)
    """
    if not isinstance(point, FR):
        point = FR(point)
    y = poly.evaluate(point)
    quotient, remainder = poly_div(poly - y, Polynomial([FR(0) - point, FR(1)]))
    if not remainder.is_zero():
        raise ValueError("열기 증명 생성 실패: 나머지가 0이 아닙니다")
    return quotient


def create_witness(poly, point, srs):
    """p(z)에 대한 열기 증명 π = [q(τ)]₁."""
    return commit(open_quotient(poly, point), srs)


def verify_opening(commitment, proof, point, evaluation, srs):
    """e(C - y·G1, G2) == e(π, [τ - z]₂)."""
    if not isinstance(point, FR):
        point = FR(point)
    if not isinstance(evaluation, FR):
        evaluation = FR(evaluation)

    tau_minus_z = ec_add(srs.g2_powers[1], ec_neg(ec_mul(srs.g2_powers[0], point)))
    c_minus_y = ec_add(commitment, ec_neg(ec_mul(G1, evaluation)))

    lhs = ec_pairing(srs.g2_powers[0], c_minus_y)
    rhs = ec_pairing(tau_minus_z, proof)
    return lhs == rhs
