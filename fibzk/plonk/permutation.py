"""
순열 인자 (Permutation Argument)
=================================

복사 제약(copy constraint)을 배선 위치의 순열 σ로 인코딩하고
grand product 누적자 z(x)로 증명한다.

**배선 위치**:
  3n개의 위치를 wire·n + row로 번호 매긴다.
    a 배선: 0 .. n-1      → 도메인 H
    b 배선: n .. 2n-1     → 코셋 K1·H
    c 배선: 2n .. 3n-1    → 코셋 K2·H

**σ 구성**:
  복사 제약 쌍들을 union-find로 동치류로 묶고, 각 동치류를 하나의
  순환(cycle)으로 만든다. 같은 순환에 속한 위치는 같은 값을 가져야 한다.
  동치류 하나에 세 개 이상의 위치가 묶여도 (예: 피보나치 체인의 한 값이
  c[i], b[i+1], a[i+2]로 세 번 쓰이는 경우) 올바른 순환이 만들어진다.

**누적자**:
  z(ω⁰) = 1
  z(ωⁱ⁺¹) = z(ωⁱ) · ∏ₖ (wₖ(ωⁱ) + β·kₖ·ωⁱ + γ) / (wₖ(ωⁱ) + β·σₖ(ωⁱ) + γ)

사용 예시:
    >>> sigma = build_sigma([((2, 0), (1, 1))], n=8)
    >>> s1, s2, s3 = build_permutation_polynomials(sigma, 8, domain)
"""

from fibzk.plonk.field import FR


# H, K1·H, K2·H가 서로 겹치지 않는 코셋이 되도록 하는 상수
K1 = FR(2)
K2 = FR(3)

NUM_WIRES = 3


def wire_position(wire, row, n):
    """(배선, 행) → 순열 위치. wire는 0=a, 1=b, 2=c."""
    if not 0 <= wire < NUM_WIRES:
        raise ValueError(f"배선 인덱스는 0~2여야 합니다: {wire}")
    if not 0 <= row < n:
        raise ValueError(f"행 인덱스가 도메인을 벗어납니다: {row} (n={n})")
    return wire * n + row


def build_sigma(copy_constraints, n):
    """복사 제약 쌍으로부터 순열 σ (길이 3n)를 만든다.

    Args:
        copy_constraints: ((wire, row), (wire, row)) 쌍의 리스트
        n: 도메인 크기

    Returns:
        list[int]: sigma[pos] = 같은 순환에서 pos 다음 위치
    """
    size = NUM_WIRES * n
    parent = list(range(size))

    def find(x):
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    for (w1, r1), (w2, r2) in copy_constraints:
        p1 = find(wire_position(w1, r1, n))
        p2 = find(wire_position(w2, r2, n))
        if p1 != p2:
            parent[max(p1, p2)] = min(p1, p2)

    classes = {}
    for pos in range(size):
        classes.setdefault(find(pos), []).append(pos)

    sigma = list(range(size))
    for members in classes.values():
        for i, pos in enumerate(members):
            sigma[pos] = members[(i + 1) % len(members)]
    return sigma


def build_permutation_polynomials(sigma, n, domain):
    """σ를 S_σ1, S_σ2, S_σ3의 도메인 평가값으로 인코딩한다."""

    def position_to_value(pos):
        if pos < n:
            return domain[pos]
        elif pos < 2 * n:
            return K1 * domain[pos - n]
        return K2 * domain[pos - 2 * n]

    s_sigma1_evals = [position_to_value(sigma[i]) for i in range(n)]
    s_sigma2_evals = [position_to_value(sigma[n + i]) for i in range(n)]
    s_sigma3_evals = [position_to_value(sigma[2 * n + i]) for i in range(n)]
    return s_sigma1_evals, s_sigma2_evals, s_sigma3_evals


def compute_accumulator(a_vals, b_vals, c_vals, sigma, n, domain, beta, gamma):
    """순열 누적자 z의 도메인 평가값 [z(ω⁰)=1, ..., z(ω^{n-1})].

    σ가 witness와 일치하면 분자·분모가 텔레스코핑되어 z(ω^n) = 1.
    """
    s1, s2, s3 = build_permutation_polynomials(sigma, n, domain)

    z_evals = [FR(1)]
    for i in range(n - 1):
        num = (
            (a_vals[i] + beta * domain[i] + gamma)
            * (b_vals[i] + beta * K1 * domain[i] + gamma)
            * (c_vals[i] + beta * K2 * domain[i] + gamma)
        )
        den = (
            (a_vals[i] + beta * s1[i] + gamma)
            * (b_vals[i] + beta * s2[i] + gamma)
            * (c_vals[i] + beta * s3[i] + gamma)
        )
        z_evals.append(z_evals[-1] * num / den)
    return z_evals
