"""
Fiat-Shamir 트랜스크립트
=========================

대화식 프로토콜의 Verifier 챌린지를 해시로 대체한다. Prover와 Verifier가
같은 순서로 같은 데이터를 흡수하면 같은 챌린지가 나온다.

  프리앰블 → 회로 커밋먼트(검증 키) + 공개 입력
  Round 1 → β, γ
  Round 2 → α
  Round 3 → ζ
  Round 4 → v
  Round 5 → u  (W_ζ, W_ζω 흡수 후)

프리앰블에 검증 키와 공개 입력을 먼저 흡수하므로, 다른 회로나 다른
공개 입력에 대해 만든 증명은 다른 챌린지를 얻어 검증에 실패한다.

사용 예시:
    >>> t = Transcript()
    >>> t.append_point(b"a_comm", commitment)
    >>> beta = t.challenge_scalar(b"beta")
"""

import hashlib

from fibzk.plonk.field import FR, CURVE_ORDER, fr_to_bytes, g1_to_bytes


class Transcript:
    """SHA-256 기반 Fiat-Shamir 트랜스크립트.

    속성:
        state: 지금까지 누적된 해시 입력 바이트열
    """

    def __init__(self, label=b"fibzk-plonk"):
        self.state = bytearray()
        self.state.extend(label)

    def append_scalar(self, label, scalar):
        """FR 스칼라를 32바이트 빅엔디안으로 흡수한다."""
        if not isinstance(scalar, FR):
            scalar = FR(scalar)
        self.state.extend(label)
        self.state.extend(fr_to_bytes(scalar))

    def append_point(self, label, point):
        """G1 점을 x‖y로 흡수한다. 무한원점(None)은 64바이트의 0."""
        self.state.extend(label)
        self.state.extend(g1_to_bytes(point))

    def append_commitments(self, commitments):
        """회로 커밋먼트(검증 키의 고정 부분)를 정해진 순서로 흡수한다."""
        for label, point in commitments.labeled():
            self.append_point(label, point)

    def append_public_inputs(self, public_inputs):
        """공개 입력 개수와 값을 흡수한다."""
        self.append_scalar(b"pi_len", FR(len(public_inputs)))
        for value in public_inputs:
            self.append_scalar(b"pi", value)

    def challenge_scalar(self, label):
        """현재 상태를 해싱해 챌린지를 만들고, 해시를 상태에 다시 흡수한다."""
        self.state.extend(label)
        h = hashlib.sha256(bytes(self.state)).digest()
        challenge = FR(int.from_bytes(h, "big") % CURVE_ORDER)
        self.state.extend(h)
        return challenge
