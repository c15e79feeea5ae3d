"""
Round 1: 배선(witness) 다항식 커밋먼트
======================================

  ┌─────────────────────────────────────────────────┐
  │  Prover → Verifier: [a]₁, [b]₁, [c]₁            │
  └─────────────────────────────────────────────────┘

  1. 공개 입력 다항식 PI(x) 구성 (0..m-1 행에 -wᵢ)
  2. witness 벡터를 IFFT로 보간
  3. 블라인딩: a'(x) = a(x) + (r₁ + r₂·x)·Z_H(x)
     Z_H(ωⁱ) = 0 이므로 도메인 위의 값은 변하지 않는다.
  4. KZG 커밋, 트랜스크립트 흡수
"""

from fibzk.plonk.polynomial import Polynomial
from fibzk.plonk.kzg import commit
from fibzk.plonk.utils import public_input_polynomial


def execute(state):
    """a_poly, b_poly, c_poly, pi_poly와 커밋먼트를 기록한다."""
    n = state.n
    omega = state.omega

    state.pi_poly = public_input_polynomial(state.public_inputs, n, omega)

    zh = Polynomial.vanishing(n)
    state.a_poly = add_blinding(state, Polynomial.from_evaluations(state.a_vals, omega), zh, 2)
    state.b_poly = add_blinding(state, Polynomial.from_evaluations(state.b_vals, omega), zh, 2)
    state.c_poly = add_blinding(state, Polynomial.from_evaluations(state.c_vals, omega), zh, 2)

    state.proof.a_comm = commit(state.a_poly, state.srs)
    state.proof.b_comm = commit(state.b_poly, state.srs)
    state.proof.c_comm = commit(state.c_poly, state.srs)

    state.transcript.append_point(b"a_comm", state.proof.a_comm)
    state.transcript.append_point(b"b_comm", state.proof.b_comm)
    state.transcript.append_point(b"c_comm", state.proof.c_comm)


def add_blinding(state, poly, zh, num_blinds):
    """poly + (r₀ + r₁·x + ...)·Z_H(x). rᵢ는 state.rng에서 뽑는다."""
    blind_poly = Polynomial([state.random_scalar() for _ in range(num_blinds)])
    return poly + blind_poly * zh
