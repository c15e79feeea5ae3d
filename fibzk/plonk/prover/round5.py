"""
Round 5: 선형화 + KZG 열기 증명
================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: v  (Fiat-Shamir)            │
  │  Prover → Verifier: r̄, [W_ζ]₁, [W_ζω]₁           │
  └─────────────────────────────────────────────────┘

**선형화 다항식 r(x)**: Round 4 평가값을 스칼라로 대입하고
q_*(x), z(x), S_σ3(x)만 다항식으로 남긴다. r(ζ) = t(ζ)·Z_H(ζ).

  게이트: ā·b̄·q_M(x) + ā·q_L(x) + b̄·q_R(x) + c̄·q_O(x) + q_C(x) + PI(ζ)
  순열:   α·(ā+βζ+γ)(b̄+βK1ζ+γ)(c̄+βK2ζ+γ)·z(x)
        - α·(ā+βs̄1+γ)(b̄+βs̄2+γ)·β·z̄ω·S_σ3(x)
        - α·(ā+βs̄1+γ)(b̄+βs̄2+γ)·(c̄+γ)·z̄ω
  경계:   α²·L₁(ζ)·(z(x) - 1)

**일괄 열기**:
  W_ζ(x)  = [ (t_comb - t̄) + v·(r - r̄) + v²·(a - ā) + ... + v⁶·(S_σ2 - s̄_σ2) ] / (x - ζ)
  W_ζω(x) = (z(x) - z̄_ω) / (x - ζω)

두 열기 증명은 트랜스크립트에 흡수되고, Verifier는 그 뒤에 u를 뽑는다.
"""

from fibzk.plonk.field import FR
from fibzk.plonk.polynomial import Polynomial
from fibzk.plonk.kzg import commit, open_quotient
from fibzk.plonk.permutation import K1, K2
from fibzk.plonk.utils import lagrange_basis_eval


def execute(state):
    state.v = state.transcript.challenge_scalar(b"v")
    v = state.v

    n = state.n
    zeta = state.zeta
    omega = state.omega
    alpha = state.alpha
    beta = state.beta
    gamma = state.gamma
    pp = state.preprocessed
    proof = state.proof

    a_eval = proof.a_eval
    b_eval = proof.b_eval
    c_eval = proof.c_eval
    s_sigma1_eval = proof.s_sigma1_eval
    s_sigma2_eval = proof.s_sigma2_eval
    z_omega_eval = proof.z_omega_eval

    pi_zeta = state.pi_poly.evaluate(zeta)
    l1_zeta = lagrange_basis_eval(0, n, omega, zeta)

    # ── 선형화 다항식 r(x) ──
    r_poly = (
        pp.q_m_poly * (a_eval * b_eval)
        + pp.q_l_poly * a_eval
        + pp.q_r_poly * b_eval
        + pp.q_o_poly * c_eval
        + pp.q_c_poly
        + pi_zeta
    )

    perm_z_scalar = (
        alpha
        * (a_eval + beta * zeta + gamma)
        * (b_eval + beta * K1 * zeta + gamma)
        * (c_eval + beta * K2 * zeta + gamma)
    )
    ab_factor = (
        (a_eval + beta * s_sigma1_eval + gamma)
        * (b_eval + beta * s_sigma2_eval + gamma)
    )
    perm_s3_scalar = alpha * ab_factor * beta * z_omega_eval
    perm_const = FR(0) - alpha * ab_factor * z_omega_eval * (c_eval + gamma)

    r_poly = r_poly + state.z_poly * perm_z_scalar
    r_poly = r_poly - pp.s_sigma3_poly * perm_s3_scalar
    r_poly = r_poly + perm_const

    r_poly = r_poly + state.z_poly * (alpha * alpha * l1_zeta)
    r_poly = r_poly - alpha * alpha * l1_zeta

    proof.r_eval = r_poly.evaluate(zeta)

    # ── W_ζ ──
    zeta_n = zeta ** n
    zeta_2n = zeta_n * zeta_n
    t_combined = (
        state.t_lo_poly
        + state.t_mid_poly * zeta_n
        + state.t_hi_poly * zeta_2n
    )

    batched = t_combined + r_poly * v
    v_power = v
    for poly in (state.a_poly, state.b_poly, state.c_poly,
                 pp.s_sigma1_poly, pp.s_sigma2_poly):
        v_power = v_power * v
        batched = batched + poly * v_power
    W_zeta_poly = open_quotient(batched, zeta)

    # ── W_ζω ──
    W_zeta_omega_poly = open_quotient(state.z_poly, zeta * omega)

    proof.W_zeta_comm = commit(W_zeta_poly, state.srs)
    proof.W_zeta_omega_comm = commit(W_zeta_omega_poly, state.srs)

    state.transcript.append_point(b"W_zeta_comm", proof.W_zeta_comm)
    state.transcript.append_point(b"W_zeta_omega_comm", proof.W_zeta_omega_comm)
