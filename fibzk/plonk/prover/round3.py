"""
Round 3: 몫 다항식 t(x) 커밋먼트
=================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: α  (Fiat-Shamir)            │
  │  Prover → Verifier: [t_lo]₁, [t_mid]₁, [t_hi]₁  │
  └─────────────────────────────────────────────────┘

**제약 다항식**:

  Term 1 (게이트):
    q_L·a + q_R·b + q_O·c + q_M·a·b + q_C + PI

  Term 2 (순열, × α):
    (a + β·x + γ)(b + β·K1·x + γ)(c + β·K2·x + γ) · z(x)
    - (a + β·S_σ1 + γ)(b + β·S_σ2 + γ)(c + β·S_σ3 + γ) · z(ω·x)

  Term 3 (경계, × α²):
    (z(x) - 1) · L₁(x)

  t(x) = (Term1 + Term2 + Term3) / Z_H(x)

모든 행에서 제약이 만족될 때만 Z_H로 나누어떨어진다.

**3-분할**: t(x) = t_lo(x) + x^n·t_mid(x) + x^{2n}·t_hi(x)
"""

from fibzk.plonk.field import FR
from fibzk.plonk.polynomial import Polynomial, poly_div, lagrange_basis
from fibzk.plonk.kzg import commit
from fibzk.plonk.permutation import K1, K2


def execute(state):
    """α를 뽑고 t_lo/t_mid/t_hi 다항식과 커밋먼트를 기록한다.

    Raises:
        ValueError: 제약 다항식이 Z_H(x)로 나누어떨어지지 않을 때
    """
    state.alpha = state.transcript.challenge_scalar(b"alpha")

    n = state.n
    alpha = state.alpha
    beta = state.beta
    gamma = state.gamma
    pp = state.preprocessed

    a = state.a_poly
    b = state.b_poly
    c = state.c_poly
    z = state.z_poly

    # ── 게이트 제약 ──
    term1 = (
        pp.q_l_poly * a
        + pp.q_r_poly * b
        + pp.q_o_poly * c
        + pp.q_m_poly * (a * b)
        + pp.q_c_poly
        + state.pi_poly
    )

    # ── 순열 제약 ──
    x_poly = Polynomial.x()
    perm_num = (
        (a + x_poly * beta + gamma)
        * (b + x_poly * (beta * K1) + gamma)
        * (c + x_poly * (beta * K2) + gamma)
        * z
    )
    perm_den = (
        (a + pp.s_sigma1_poly * beta + gamma)
        * (b + pp.s_sigma2_poly * beta + gamma)
        * (c + pp.s_sigma3_poly * beta + gamma)
        * z.shift(state.omega)
    )
    term2 = (perm_num - perm_den) * alpha

    # ── 경계 제약 ──
    l1 = lagrange_basis(state.domain, 0)
    term3 = (z - FR(1)) * l1 * (alpha * alpha)

    t_poly, remainder = poly_div(term1 + term2 + term3, Polynomial.vanishing(n))
    if not remainder.is_zero():
        raise ValueError(
            "제약 다항식이 Z_H(x)로 나누어떨어지지 않습니다. "
            "witness가 회로 제약을 만족하지 않습니다."
        )

    # ── 3-분할 ──
    t_coeffs = list(t_poly.coeffs)
    t_coeffs += [FR(0)] * max(0, 3 * n - len(t_coeffs))

    state.t_lo_poly = Polynomial(t_coeffs[:n])
    state.t_mid_poly = Polynomial(t_coeffs[n:2 * n])
    state.t_hi_poly = Polynomial(t_coeffs[2 * n:])

    state.proof.t_lo_comm = commit(state.t_lo_poly, state.srs)
    state.proof.t_mid_comm = commit(state.t_mid_poly, state.srs)
    state.proof.t_hi_comm = commit(state.t_hi_poly, state.srs)

    state.transcript.append_point(b"t_lo_comm", state.proof.t_lo_comm)
    state.transcript.append_point(b"t_mid_comm", state.proof.t_mid_comm)
    state.transcript.append_point(b"t_hi_comm", state.proof.t_hi_comm)
