"""
Round 2: 순열 누적자 z(x) 커밋먼트
===================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: β, γ  (Fiat-Shamir)         │
  │  Prover → Verifier: [z]₁                        │
  └─────────────────────────────────────────────────┘

  z(ω⁰) = 1
  z(ω^{i+1}) = z(ωⁱ) · ∏ (wᵢ + β·id + γ) / (wᵢ + β·σ + γ)

z는 ζ와 ζ·ω 두 점에서 열리므로 블라인딩 계수를 3개 쓴다.
"""

from fibzk.plonk.polynomial import Polynomial
from fibzk.plonk.kzg import commit
from fibzk.plonk.permutation import compute_accumulator
from fibzk.plonk.prover.round1 import add_blinding


def execute(state):
    """β, γ를 뽑고 z_poly와 [z]₁을 기록한다."""
    state.beta = state.transcript.challenge_scalar(b"beta")
    state.gamma = state.transcript.challenge_scalar(b"gamma")

    n = state.n
    z_evals = compute_accumulator(
        state.a_vals, state.b_vals, state.c_vals,
        state.preprocessed.sigma, n, state.domain,
        state.beta, state.gamma,
    )

    z_poly = Polynomial.from_evaluations(z_evals, state.omega)
    state.z_poly = add_blinding(state, z_poly, Polynomial.vanishing(n), 3)

    state.proof.z_comm = commit(state.z_poly, state.srs)
    state.transcript.append_point(b"z_comm", state.proof.z_comm)
