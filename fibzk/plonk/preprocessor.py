"""
전처리기 (Preprocessor)
========================

회로 구조(셀렉터와 순열)를 한 번 다항식화하고 커밋한다.

  - Prover: 다항식 원본이 필요하다 (PreprocessedData)
  - Verifier: 커밋먼트만 필요하다 (CircuitCommitments)

CircuitCommitments는 검증 키의 핵심이며, 트랜스크립트 프리앰블에
흡수되어 증명을 특정 회로에 묶는다.

사용 예시:
    >>> pp = preprocess(circuit, params.srs, params.n)
    >>> pp.commitments().q_l_comm
"""

from fibzk.plonk.field import get_root_of_unity, get_roots_of_unity
from fibzk.plonk.polynomial import Polynomial
from fibzk.plonk.kzg import commit
from fibzk.plonk.permutation import build_permutation_polynomials


SELECTOR_NAMES = ("q_l", "q_r", "q_o", "q_m", "q_c")
SIGMA_NAMES = ("s_sigma1", "s_sigma2", "s_sigma3")


class CircuitCommitments:
    """셀렉터 5개와 순열 3개의 KZG 커밋먼트 (+ 도메인 크기, 공개 입력 수)."""

    def __init__(self, n, num_public_inputs, **comms):
        self.n = n
        self.num_public_inputs = num_public_inputs
        for name in SELECTOR_NAMES + SIGMA_NAMES:
            setattr(self, f"{name}_comm", comms[f"{name}_comm"])

    def labeled(self):
        """트랜스크립트 흡수 순서: (레이블, 점) 리스트."""
        return [
            (name.encode(), getattr(self, f"{name}_comm"))
            for name in SELECTOR_NAMES + SIGMA_NAMES
        ]

    def __eq__(self, other):
        if not isinstance(other, CircuitCommitments):
            return False
        return (
            self.n == other.n
            and self.num_public_inputs == other.num_public_inputs
            and self.labeled() == other.labeled()
        )


class PreprocessedData:
    """전처리된 회로 데이터.

    속성 (도메인): n, omega, domain
    속성 (셀렉터): q_l_poly .. q_c_poly, q_l_comm .. q_c_comm
    속성 (순열): s_sigma{1,2,3}_poly, s_sigma{1,2,3}_comm, sigma
    속성 (회로): num_public_inputs
    """

    def commitments(self):
        comms = {
            f"{name}_comm": getattr(self, f"{name}_comm")
            for name in SELECTOR_NAMES + SIGMA_NAMES
        }
        return CircuitCommitments(self.n, self.num_public_inputs, **comms)


def preprocess(circuit, srs, n):
    """회로를 n행 도메인에 맞춰 전처리한다.

    단계:
    1. 빈 게이트로 n행까지 패딩, 단위근 ω 설정
    2. 셀렉터 평가값 → IFFT → KZG 커밋
    3. 복사 제약 → σ → S_σ 평가값 → IFFT → KZG 커밋

    Raises:
        ValueError: 게이트 수가 n을 초과하거나 다항식 차수가 SRS를 초과할 때
    """
    circuit = circuit.padded(n)
    result = PreprocessedData()

    result.n = n
    result.omega = get_root_of_unity(n)
    result.domain = get_roots_of_unity(n)

    for name, evals in zip(SELECTOR_NAMES, circuit.get_selector_polynomials()):
        poly = Polynomial.from_evaluations(evals, result.omega)
        setattr(result, f"{name}_poly", poly)
        setattr(result, f"{name}_comm", commit(poly, srs))

    result.sigma = circuit.build_copy_constraints()
    sigma_evals = build_permutation_polynomials(result.sigma, n, result.domain)
    for name, evals in zip(SIGMA_NAMES, sigma_evals):
        poly = Polynomial.from_evaluations(evals, result.omega)
        setattr(result, f"{name}_poly", poly)
        setattr(result, f"{name}_comm", commit(poly, srs))

    result.num_public_inputs = circuit.num_public_inputs
    return result
