"""
백엔드 기반 모듈: bn128 스칼라 필드와 곡선 연산
================================================

증명 백엔드 전체가 공유하는 대수적 도구.

**FR**: bn128 곡선의 스칼라 필드 원소. 회로의 모든 셀 값, 셀렉터 계수,
다항식 계수가 이 필드 위에 있다. p - 1 = 2^28 × m 이므로 최대 2^28 행의
도메인을 지원한다 (k ≤ 28).

**G1 / G2**: KZG 커밋먼트와 페어링 검증에 쓰이는 군.

**직렬화**: 증명 코덱과 트랜스크립트가 같은 인코딩을 쓴다.
  - 스칼라: 32바이트 빅엔디안
  - G1 점: x‖y 각 32바이트, 무한원점은 64바이트의 0

사용 예시:
    >>> from fibzk.plonk.field import FR, to_fr
    >>> to_fr(3) + FR(5)     # FR(8)
    >>> FR(-1) == FR(CURVE_ORDER - 1)  # True
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128


class FR(FQ):
    """bn128 스칼라 필드 원소 (위수 r = bn128.curve_order)."""
    field_modulus = bn128.curve_order


CURVE_ORDER = bn128.curve_order
FIELD_MODULUS = bn128.field_modulus

G1 = bn128.G1
G2 = bn128.G2

SCALAR_BYTES = 32
G1_BYTES = 64


def to_fr(value):
    """정수 또는 FR을 FR로 변환한다."""
    if isinstance(value, FR):
        return value
    return FR(int(value))


# ─────────────────────────────────────────────────────────────────────
# 곡선 연산
# ─────────────────────────────────────────────────────────────────────

def ec_mul(point, scalar):
    """scalar · point. scalar는 정수 또는 FR. 무한원점(None)은 그대로 돌려준다."""
    if point is None:
        return None
    if isinstance(scalar, FR):
        scalar = int(scalar)
    return bn128.multiply(point, scalar % CURVE_ORDER)


def ec_add(p1, p2):
    """p1 + p2 (같은 군)."""
    return bn128.add(p1, p2)


def ec_neg(point):
    """-point."""
    return bn128.neg(point)


def ec_pairing(g2_point, g1_point):
    """e(G1, G2) → GT.

    주의: py_ecc.bn128.pairing의 인자 순서는 (G2, G1)이다.
    """
    return bn128.pairing(g2_point, g1_point)


# ─────────────────────────────────────────────────────────────────────
# 바이트 인코딩
# ─────────────────────────────────────────────────────────────────────

def fr_to_bytes(scalar):
    return (int(scalar) % CURVE_ORDER).to_bytes(SCALAR_BYTES, "big")


def fr_from_bytes(data):
    """32바이트 → FR. 값이 r 이상이면 ValueError."""
    value = int.from_bytes(data, "big")
    if value >= CURVE_ORDER:
        raise ValueError(f"스칼라가 필드 위수를 초과합니다: {value}")
    return FR(value)


def g1_to_bytes(point):
    if point is None:
        return b"\x00" * G1_BYTES
    x, y = point
    return int(x).to_bytes(32, "big") + int(y).to_bytes(32, "big")


def g1_from_bytes(data):
    """64바이트 → G1 점.

    좌표가 기반 필드를 벗어나거나 점이 곡선 위에 있지 않으면 ValueError.
    """
    if data == b"\x00" * G1_BYTES:
        return None
    x = int.from_bytes(data[:32], "big")
    y = int.from_bytes(data[32:], "big")
    if x >= FIELD_MODULUS or y >= FIELD_MODULUS:
        raise ValueError("G1 좌표가 기반 필드를 벗어납니다")
    point = (bn128.FQ(x), bn128.FQ(y))
    if not bn128.is_on_curve(point, bn128.b):
        raise ValueError("G1 점이 곡선 위에 있지 않습니다")
    return point


# ─────────────────────────────────────────────────────────────────────
# 단위근 (Roots of Unity)
# ─────────────────────────────────────────────────────────────────────

def get_root_of_unity(n):
    """n차 원시 단위근 ω.

    g = 5에서 ω = g^((r-1)/n). 회로 도메인 H = {1, ω, ..., ω^(n-1)}의
    생성자로, n = 2^k 행 테이블의 각 행이 H의 한 원소에 대응한다.

    Raises:
        ValueError: n이 2의 거듭제곱이 아니거나 2^28을 초과할 때
    """
    if n < 1 or (n & (n - 1)) != 0:
        raise ValueError(f"n은 2의 거듭제곱이어야 합니다: {n}")
    if n > (1 << 28):
        raise ValueError(f"n은 2^28 이하여야 합니다: {n}")
    if n == 1:
        return FR(1)
    return FR(5) ** ((CURVE_ORDER - 1) // n)


def get_roots_of_unity(n):
    """[1, ω, ω², ..., ω^(n-1)]."""
    omega = get_root_of_unity(n)
    roots = []
    current = FR(1)
    for _ in range(n):
        roots.append(current)
        current = current * omega
    return roots
