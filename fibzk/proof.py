"""
증명 생성 / 검증
================

create_proof(params, pk, circuit, instances, rng)
  1. 구체 witness로 configure + synthesize
  2. 스키마/레이아웃이 증명 키와 같은지 확인   → SynthesisError
  3. check_assignment로 제약 검사              → ConstraintUnsatisfied
  4. lowering으로 배선 값과 공개 입력 생성
  5. 백엔드 5-라운드 prover → 800바이트

verify_proof(params, vk, instances, proof_bytes)
  instance 모양 확인 → 디코딩 → 백엔드 verifier. 항상 bool을 돌려준다.
"""

from fibzk.errors import ConstraintUnsatisfied, ProofDecodeError, SynthesisError
from fibzk.plonk.prover import Proof, prove
from fibzk.plonk.verifier import verify
from fibzk.circuit.dev import check_assignment, synthesize
from fibzk.circuit.lowering import lower_witness


def create_proof(params, pk, circuit, instances, rng=None):
    """증명 바이트열을 만든다.

    Raises:
        SynthesisError: 합성 실패, witness 누락, 키와 다른 회로 모양, instance 모양 불일치
        ConstraintUnsatisfied: witness가 게이트/복사/공개 입력 제약을 위반할 때
    """
    cs, _, assignment = synthesize(circuit, params.n)
    if cs.pinned() != pk.pinned or assignment.shape() != pk.shape:
        raise SynthesisError("회로 모양이 증명 키와 다릅니다")
    if [len(col) for col in instances] != pk.vk.instance_lengths:
        raise SynthesisError(
            f"instance 모양이 {pk.vk.instance_lengths}여야 합니다: {[len(c) for c in instances]}"
        )

    failures = check_assignment(cs, assignment, instances)
    if failures:
        raise ConstraintUnsatisfied(failures)

    a_vals, b_vals, c_vals, public_inputs = lower_witness(pk.layout, assignment, instances)
    proof = prove(a_vals, b_vals, c_vals, public_inputs, pk.preprocessed, params.srs, rng)
    return proof.to_bytes()


def verify_proof(params, vk, instances, proof_bytes):
    """증명을 검증한다. 형식 오류나 모양 불일치도 False."""
    if vk.k != params.k:
        return False
    if [len(col) for col in instances] != vk.instance_lengths:
        return False
    try:
        proof = Proof.from_bytes(proof_bytes)
    except ProofDecodeError:
        return False

    public_inputs = [value for col in instances for value in col]
    return verify(proof, public_inputs, vk.commitments, params.srs)
