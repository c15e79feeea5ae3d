"""
키 생성
=======

witness 없는 회로 서술자(모양만)로 키를 만든다.

  keygen_vk(params, circuit)
    1. configure + synthesize (Value.unknown)
    2. lowering → 백엔드 게이트 테이블
    3. 전처리: 셀렉터/순열 다항식 커밋
    → VerifyingKey (회로 커밋먼트, instance 모양)

  keygen_pk(params, vk, circuit)
    → ProvingKey (vk + 전처리 다항식 + 레이아웃 + 스키마 지문)

키는 파라미터(params)와 회로 모양에만 의존한다. 같은 모양의 회로라면
witness가 달라도 같은 키로 증명한다.
"""

from fibzk.errors import ConfigurationError
from fibzk.plonk.preprocessor import preprocess
from fibzk.circuit.dev import synthesize
from fibzk.circuit.lowering import lower_circuit


class VerifyingKey:
    """검증 키.

    속성:
        commitments: CircuitCommitments
        instance_lengths: instance 열별 길이
        k: 도메인 크기의 log₂
    """

    def __init__(self, commitments, instance_lengths, k):
        self.commitments = commitments
        self.instance_lengths = list(instance_lengths)
        self.k = k

    def __eq__(self, other):
        return (
            isinstance(other, VerifyingKey)
            and self.k == other.k
            and self.instance_lengths == other.instance_lengths
            and self.commitments == other.commitments
        )


class ProvingKey:
    """증명 키.

    속성:
        vk: VerifyingKey
        preprocessed: PreprocessedData
        layout: lowering.Layout
        shape: 키 생성 시 합성 기록의 모양 (Assignment.shape)
        pinned: 제약 시스템 지문 (ConstraintSystem.pinned)
    """

    def __init__(self, vk, preprocessed, layout, shape, pinned):
        self.vk = vk
        self.preprocessed = preprocessed
        self.layout = layout
        self.shape = shape
        self.pinned = pinned


def _build(params, circuit):
    cs, _, assignment = synthesize(circuit.without_witnesses(), params.n)
    layout = lower_circuit(cs, assignment, params.n)
    preprocessed = preprocess(layout.circuit, params.srs, params.n)
    return cs, assignment, layout, preprocessed


def keygen_vk(params, circuit):
    """검증 키를 만든다.

    Raises:
        ConfigurationError: 스키마 오류, 백엔드로 표현할 수 없는 게이트
        SynthesisError: 행 수가 도메인을 초과할 때
    """
    _, _, layout, preprocessed = _build(params, circuit)
    return VerifyingKey(preprocessed.commitments(), layout.instance_lengths, params.k)


def keygen_pk(params, vk, circuit):
    """증명 키를 만든다.

    Raises:
        ConfigurationError: vk가 이 회로/파라미터로 만든 것이 아닐 때
    """
    cs, assignment, layout, preprocessed = _build(params, circuit)
    expected = VerifyingKey(preprocessed.commitments(), layout.instance_lengths, params.k)
    if expected != vk:
        raise ConfigurationError("검증 키가 회로 또는 파라미터와 일치하지 않습니다")
    return ProvingKey(vk, preprocessed, layout, assignment.shape(), cs.pinned())
