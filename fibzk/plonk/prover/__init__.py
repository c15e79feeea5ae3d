"""
5-라운드 Prover 오케스트레이터
===============================

  ┌─────────────────────────────────────────────────────┐
  │  프리앰블: 회로 커밋먼트 + 공개 입력 흡수            │
  ├─────────────────────────────────────────────────────┤
  │  Round 1: 배선 다항식 커밋 [a]₁, [b]₁, [c]₁          │
  ├─────────────────────────────────────────────────────┤
  │  Round 2: β, γ → 순열 누적자 [z]₁                   │
  ├─────────────────────────────────────────────────────┤
  │  Round 3: α → 몫 다항식 [t_lo]₁, [t_mid]₁, [t_hi]₁  │
  ├─────────────────────────────────────────────────────┤
  │  Round 4: ζ → ā, b̄, c̄, s̄_σ1, s̄_σ2, z̄_ω              │
  ├─────────────────────────────────────────────────────┤
  │  Round 5: v → 선형화 r̄, 열기 증명 [W_ζ]₁, [W_ζω]₁    │
  └─────────────────────────────────────────────────────┘

**증명 바이트 형식** (Proof.to_bytes):
  G1 점 9개 (각 64바이트)
    a, b, c, z, t_lo, t_mid, t_hi, W_ζ, W_ζω
  스칼라 7개 (각 32바이트)
    ā, b̄, c̄, s̄_σ1, s̄_σ2, z̄_ω, r̄
  총 9·64 + 7·32 = 800바이트.

사용 예시:
    >>> proof = prove(a, b, c, public_inputs, preprocessed, srs)
    >>> data = proof.to_bytes()
    >>> Proof.from_bytes(data).a_eval == proof.a_eval  # True
"""

import secrets

from fibzk.errors import ProofDecodeError
from fibzk.plonk.field import (
    FR, CURVE_ORDER, SCALAR_BYTES, G1_BYTES,
    fr_to_bytes, fr_from_bytes, g1_to_bytes, g1_from_bytes,
)
from fibzk.plonk.transcript import Transcript
from fibzk.plonk.prover import round1, round2, round3, round4, round5


COMMITMENT_FIELDS = (
    "a_comm", "b_comm", "c_comm", "z_comm",
    "t_lo_comm", "t_mid_comm", "t_hi_comm",
    "W_zeta_comm", "W_zeta_omega_comm",
)
EVALUATION_FIELDS = (
    "a_eval", "b_eval", "c_eval",
    "s_sigma1_eval", "s_sigma2_eval", "z_omega_eval", "r_eval",
)
PROOF_SIZE = len(COMMITMENT_FIELDS) * G1_BYTES + len(EVALUATION_FIELDS) * SCALAR_BYTES


class Proof:
    """PLONK 증명.

    Round 1: a_comm, b_comm, c_comm
    Round 2: z_comm
    Round 3: t_lo_comm, t_mid_comm, t_hi_comm
    Round 4: a_eval, b_eval, c_eval, s_sigma1_eval, s_sigma2_eval, z_omega_eval
    Round 5: r_eval, W_zeta_comm, W_zeta_omega_comm
    """

    def __init__(self):
        for name in COMMITMENT_FIELDS + EVALUATION_FIELDS:
            setattr(self, name, None)

    def to_bytes(self):
        out = bytearray()
        for name in COMMITMENT_FIELDS:
            out.extend(g1_to_bytes(getattr(self, name)))
        for name in EVALUATION_FIELDS:
            out.extend(fr_to_bytes(getattr(self, name)))
        return bytes(out)

    @classmethod
    def from_bytes(cls, data):
        """바이트열에서 증명을 복원한다.

        Raises:
            ProofDecodeError: 길이가 맞지 않거나, 점이 곡선 위에 없거나,
                스칼라가 필드 범위를 벗어날 때
        """
        if not isinstance(data, (bytes, bytearray)):
            raise ProofDecodeError(f"증명은 bytes여야 합니다: {type(data).__name__}")
        if len(data) != PROOF_SIZE:
            raise ProofDecodeError(
                f"증명 길이가 {PROOF_SIZE}바이트가 아닙니다: {len(data)}"
            )

        proof = cls()
        offset = 0
        try:
            for name in COMMITMENT_FIELDS:
                setattr(proof, name, g1_from_bytes(bytes(data[offset:offset + G1_BYTES])))
                offset += G1_BYTES
            for name in EVALUATION_FIELDS:
                setattr(proof, name, fr_from_bytes(bytes(data[offset:offset + SCALAR_BYTES])))
                offset += SCALAR_BYTES
        except ValueError as e:
            raise ProofDecodeError(f"{name}: {e}") from e
        return proof

    def __eq__(self, other):
        if not isinstance(other, Proof):
            return False
        return self.to_bytes() == other.to_bytes()


class ProverState:
    """라운드 간 공유되는 Prover 상태.

    속성 (입력):
        a_vals, b_vals, c_vals, public_inputs, preprocessed, srs, rng
    속성 (라운드 결과):
        pi_poly, a_poly, b_poly, c_poly, z_poly, t_lo_poly, t_mid_poly, t_hi_poly
        beta, gamma, alpha, zeta, v
    속성 (출력):
        proof
    """

    def __init__(self, a_vals, b_vals, c_vals, public_inputs, preprocessed, srs, rng):
        self.a_vals = [v if isinstance(v, FR) else FR(v) for v in a_vals]
        self.b_vals = [v if isinstance(v, FR) else FR(v) for v in b_vals]
        self.c_vals = [v if isinstance(v, FR) else FR(v) for v in c_vals]
        self.public_inputs = [v if isinstance(v, FR) else FR(v) for v in public_inputs]
        self.preprocessed = preprocessed
        self.srs = srs
        self.rng = rng

        self.transcript = Transcript()
        self.transcript.append_commitments(preprocessed.commitments())
        self.transcript.append_public_inputs(self.public_inputs)

        self.n = preprocessed.n
        self.omega = preprocessed.omega
        self.domain = preprocessed.domain

        self.pi_poly = None
        self.a_poly = None
        self.b_poly = None
        self.c_poly = None
        self.z_poly = None
        self.t_lo_poly = None
        self.t_mid_poly = None
        self.t_hi_poly = None

        self.beta = None
        self.gamma = None
        self.alpha = None
        self.zeta = None
        self.v = None

        self.proof = Proof()

    def random_scalar(self):
        """블라인딩 계수용 난수 FR."""
        return FR(self.rng.randrange(CURVE_ORDER))

    def build_proof(self):
        return self.proof


def prove(a_vals, b_vals, c_vals, public_inputs, preprocessed, srs, rng=None):
    """5-라운드 프로토콜로 증명을 생성한다.

    Args:
        a_vals, b_vals, c_vals: 배선 값 (길이 n)
        public_inputs: 공개 입력 (0..m-1 행의 a 배선 값)
        preprocessed: PreprocessedData
        srs: SRS
        rng: randrange(stop)를 제공하는 난수원 (기본값: secrets.SystemRandom())

    Raises:
        ValueError: 배선 길이나 공개 입력 수가 전처리 데이터와 다르거나,
            witness가 제약을 만족하지 않아 몫 다항식이 나누어떨어지지 않을 때
    """
    n = preprocessed.n
    if not (len(a_vals) == len(b_vals) == len(c_vals) == n):
        raise ValueError(f"배선 값 길이가 도메인 크기 {n}와 다릅니다")
    if len(public_inputs) != preprocessed.num_public_inputs:
        raise ValueError(
            f"공개 입력 수가 {preprocessed.num_public_inputs}개여야 합니다: "
            f"{len(public_inputs)}"
        )

    if rng is None:
        rng = secrets.SystemRandom()
    state = ProverState(a_vals, b_vals, c_vals, public_inputs, preprocessed, srs, rng)

    round1.execute(state)
    round2.execute(state)
    round3.execute(state)
    round4.execute(state)
    round5.execute(state)

    return state.build_proof()
