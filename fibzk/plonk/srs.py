"""
공개 파라미터: SRS와 도메인 크기
=================================

**SRS (Structured Reference String)**:
  비밀 값 τ로 만든 KZG 공개 파라미터.

    g1_powers = [G1, τ·G1, τ²·G1, ..., τ^d·G1]
    g2_powers = [G2, τ·G2]

  회로 모양과 무관하다(universal). 같은 파라미터로 키 생성, 증명,
  검증을 모두 수행한다. 여기서는 seed를 SHA-256으로 해싱해 τ를 결정론적으로
  만든다 (교육용; 실제 시스템은 MPC 세레모니를 사용한다).

**Params**:
  k (보안/크기 파라미터)로 도메인 n = 2^k 행을 정하고, 그에 맞는 차수의
  SRS를 보관한다. 회로 테이블의 행 수는 n을 넘을 수 없다.

사용 예시:
    >>> params = Params.new(3)        # n = 8 행
    >>> params.srs.max_degree         # 3·8 + 10 = 34
"""

import hashlib
import secrets

from fibzk.plonk.field import FR, G1, G2, ec_mul, CURVE_ORDER


DEFAULT_SRS_SEED = 12345


def srs_degree_for(n):
    """도메인 크기 n에 필요한 SRS 차수.

    블라인딩된 배선 다항식(차수 n+1)과 몫 다항식 분할(t_hi 차수 ≤ n+5)을
    덮고도 남는 3n + 10.
    """
    return 3 * n + 10


class SRS:
    """KZG 커밋먼트용 공개 파라미터.

    속성:
        g1_powers: [G1, τ·G1, ..., τ^d·G1]
        g2_powers: [G2, τ·G2]
        max_degree: 커밋 가능한 최대 다항식 차수 d
    """

    def __init__(self, g1_powers, g2_powers, max_degree):
        self.g1_powers = g1_powers
        self.g2_powers = g2_powers
        self.max_degree = max_degree

    @classmethod
    def generate(cls, max_degree, seed=None):
        """SRS를 생성한다. seed가 None이면 τ를 무작위로 뽑는다."""
        if seed is not None:
            h = hashlib.sha256(str(seed).encode()).digest()
            tau_int = int.from_bytes(h, "big") % CURVE_ORDER
        else:
            tau_int = secrets.randbelow(CURVE_ORDER - 1) + 1
        tau = FR(tau_int)

        g1_powers = []
        tau_power = FR(1)
        for _ in range(max_degree + 1):
            g1_powers.append(ec_mul(G1, tau_power))
            tau_power = tau_power * tau

        return cls(g1_powers, [G2, ec_mul(G2, tau)], max_degree)


class Params:
    """증명 파이프라인의 공개 파라미터 (k, n = 2^k, SRS).

    속성:
        k: 도메인 크기의 log₂
        n: 회로 테이블 행 수
        seed: SRS 생성 seed (재현용 기록)
        srs: SRS
    """

    def __init__(self, k, srs, seed=None):
        if k < 1:
            raise ValueError(f"k는 1 이상이어야 합니다: {k}")
        self.k = k
        self.n = 1 << k
        self.srs = srs
        self.seed = seed

    @classmethod
    def new(cls, k, seed=DEFAULT_SRS_SEED):
        """k에 맞는 SRS를 생성한다. 같은 (k, seed)면 항상 같은 파라미터."""
        n = 1 << k
        srs = SRS.generate(max_degree=srs_degree_for(n), seed=seed)
        return cls(k, srs, seed)

    def __repr__(self):
        return f"Params(k={self.k}, n={self.n}, max_degree={self.srs.max_degree})"
