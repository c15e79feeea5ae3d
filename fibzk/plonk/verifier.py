"""
Verifier
========

  1. 트랜스크립트 재생 → β, γ, α, ζ, v, u
     (프리앰블: 회로 커밋먼트 + 공개 입력)
  2. Z_H(ζ), L₁(ζ), PI(ζ) 계산
  3. 선형화 커밋먼트 [D]₁ 와 상수 r₀
  4. 결합 커밋먼트 [F]₁ 와 스칼라 E
  5. 페어링: e([W_ζ]₁ + u·[W_ζω]₁, [τ]₂) == e(ζ·[W_ζ]₁ + u·ζω·[W_ζω]₁ + [F]₁ - [E]₁, G₂)

  t̄ = r̄ / Z_H(ζ)  (r(ζ) = t(ζ)·Z_H(ζ))

공개 입력은 PI(ζ) = -Σ wᵢ·Lᵢ(ζ)로 반영되므로 다른 공개 입력으로는
검증이 실패한다. 공개 입력 수가 회로와 다르면 곧바로 False.

사용 예시:
    >>> verify(proof, [3], commitments, srs)  # True / False
"""

from fibzk.plonk.field import FR, G1, ec_mul, ec_add, ec_neg, ec_pairing, get_root_of_unity
from fibzk.plonk.transcript import Transcript
from fibzk.plonk.permutation import K1, K2
from fibzk.plonk.utils import vanishing_poly_eval, lagrange_basis_eval, public_input_poly_eval


def verify(proof, public_inputs, commitments, srs):
    """증명을 검증한다.

    Args:
        proof: Proof
        public_inputs: 공개 입력 값 리스트
        commitments: CircuitCommitments (검증 키의 회로 부분)
        srs: SRS

    Returns:
        bool: 검증 성공 여부
    """
    cc = commitments
    n = cc.n
    omega = get_root_of_unity(n)

    if len(public_inputs) != cc.num_public_inputs:
        return False
    public_inputs = [v if isinstance(v, FR) else FR(v) for v in public_inputs]

    # ── Step 1: 트랜스크립트 재생 ──
    transcript = Transcript()
    transcript.append_commitments(cc)
    transcript.append_public_inputs(public_inputs)

    transcript.append_point(b"a_comm", proof.a_comm)
    transcript.append_point(b"b_comm", proof.b_comm)
    transcript.append_point(b"c_comm", proof.c_comm)
    beta = transcript.challenge_scalar(b"beta")
    gamma = transcript.challenge_scalar(b"gamma")

    transcript.append_point(b"z_comm", proof.z_comm)
    alpha = transcript.challenge_scalar(b"alpha")

    transcript.append_point(b"t_lo_comm", proof.t_lo_comm)
    transcript.append_point(b"t_mid_comm", proof.t_mid_comm)
    transcript.append_point(b"t_hi_comm", proof.t_hi_comm)
    zeta = transcript.challenge_scalar(b"zeta")

    transcript.append_scalar(b"a_eval", proof.a_eval)
    transcript.append_scalar(b"b_eval", proof.b_eval)
    transcript.append_scalar(b"c_eval", proof.c_eval)
    transcript.append_scalar(b"s_sigma1_eval", proof.s_sigma1_eval)
    transcript.append_scalar(b"s_sigma2_eval", proof.s_sigma2_eval)
    transcript.append_scalar(b"z_omega_eval", proof.z_omega_eval)
    v = transcript.challenge_scalar(b"v")

    transcript.append_point(b"W_zeta_comm", proof.W_zeta_comm)
    transcript.append_point(b"W_zeta_omega_comm", proof.W_zeta_omega_comm)
    u = transcript.challenge_scalar(b"u")

    # ── Step 2: 공개 값 ──
    a_eval = proof.a_eval
    b_eval = proof.b_eval
    c_eval = proof.c_eval
    s_sigma1_eval = proof.s_sigma1_eval
    s_sigma2_eval = proof.s_sigma2_eval
    z_omega_eval = proof.z_omega_eval

    zh_zeta = vanishing_poly_eval(n, zeta)
    if zh_zeta == FR(0):
        return False
    l1_zeta = lagrange_basis_eval(0, n, omega, zeta)
    pi_zeta = public_input_poly_eval(public_inputs, n, omega, zeta)

    # ── Step 3: [D]₁ ──
    D = ec_mul(cc.q_m_comm, a_eval * b_eval)
    D = ec_add(D, ec_mul(cc.q_l_comm, a_eval))
    D = ec_add(D, ec_mul(cc.q_r_comm, b_eval))
    D = ec_add(D, ec_mul(cc.q_o_comm, c_eval))
    D = ec_add(D, cc.q_c_comm)

    perm_z_scalar = (
        alpha
        * (a_eval + beta * zeta + gamma)
        * (b_eval + beta * K1 * zeta + gamma)
        * (c_eval + beta * K2 * zeta + gamma)
    )
    D = ec_add(D, ec_mul(proof.z_comm, perm_z_scalar + alpha * alpha * l1_zeta))

    ab_factor = (
        (a_eval + beta * s_sigma1_eval + gamma)
        * (b_eval + beta * s_sigma2_eval + gamma)
    )
    perm_s3_scalar = alpha * ab_factor * beta * z_omega_eval
    D = ec_add(D, ec_neg(ec_mul(cc.s_sigma3_comm, perm_s3_scalar)))

    r_0 = (
        pi_zeta
        - alpha * ab_factor * z_omega_eval * (c_eval + gamma)
        - alpha * alpha * l1_zeta
    )

    # ── Step 4: [F]₁, E ──
    zeta_n = zeta ** n
    zeta_2n = zeta_n * zeta_n
    F = ec_add(
        proof.t_lo_comm,
        ec_add(ec_mul(proof.t_mid_comm, zeta_n), ec_mul(proof.t_hi_comm, zeta_2n)),
    )
    F = ec_add(F, ec_mul(D, v))
    F = ec_add(F, ec_mul(G1, v * r_0))

    r_eval = proof.r_eval
    t_eval = r_eval / zh_zeta
    e_scalar = t_eval + v * r_eval

    v_pow = v
    for comm, evaluation in (
        (proof.a_comm, a_eval),
        (proof.b_comm, b_eval),
        (proof.c_comm, c_eval),
        (cc.s_sigma1_comm, s_sigma1_eval),
        (cc.s_sigma2_comm, s_sigma2_eval),
    ):
        v_pow = v_pow * v
        F = ec_add(F, ec_mul(comm, v_pow))
        e_scalar = e_scalar + v_pow * evaluation

    F = ec_add(F, ec_mul(proof.z_comm, u))
    e_scalar = e_scalar + u * z_omega_eval
    E = ec_mul(G1, e_scalar)

    # ── Step 5: 페어링 ──
    A = ec_add(proof.W_zeta_comm, ec_mul(proof.W_zeta_omega_comm, u))

    B = ec_mul(proof.W_zeta_comm, zeta)
    B = ec_add(B, ec_mul(proof.W_zeta_omega_comm, u * zeta * omega))
    B = ec_add(B, F)
    B = ec_add(B, ec_neg(E))

    lhs = ec_pairing(srs.g2_powers[1], A)
    rhs = ec_pairing(srs.g2_powers[0], B)
    return lhs == rhs
