"""
증명 파이프라인 통합 테스트
============================

setup → derive_keys → prove → verify 를 피보나치 회로로 구동한다.

테스트 범위:
  - seed (1, 1), steps = 1: instance [3] 수락, [5] 거부
  - 같은 키로 다른 witness 증명
  - 잘못된 witness는 암호 연산 전에 ConstraintUnsatisfied
  - 회로 모양/instance 모양 불일치
  - 다른 키, 조작된 바이트열 거부
  - 행 수 초과는 SynthesisError (잘림 없음)
"""
import pytest

from fibzk.errors import ConfigurationError, ConstraintUnsatisfied, SynthesisError
from fibzk.fib import FibCircuit
from fibzk.keygen import keygen_vk, keygen_pk, VerifyingKey, ProvingKey
from fibzk.pipeline import DEFAULT_K, setup, derive_keys, prove, verify, run


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def two_step_keys(params):
    pk, vk = derive_keys(params, FibCircuit(steps=2))
    return {"pk": pk, "vk": vk}


# =====================================================================
# Setup / 키 생성
# =====================================================================

class TestSetup:
    def test_default_k(self):
        assert DEFAULT_K == 3

    def test_deterministic(self, params):
        again = setup(3)
        assert again.srs.g1_powers[1] == params.srs.g1_powers[1]
        assert again.srs.g2_powers[1] == params.srs.g2_powers[1]

    def test_seed_changes_srs(self, params):
        other = setup(3, seed=1)
        assert other.srs.g1_powers[1] != params.srs.g1_powers[1]
        assert other.seed == 1


class TestDeriveKeys:
    def test_key_types(self, fib_keys):
        assert isinstance(fib_keys["pk"], ProvingKey)
        assert isinstance(fib_keys["vk"], VerifyingKey)
        assert fib_keys["pk"].vk is fib_keys["vk"]

    def test_vk_contents(self, fib_keys):
        vk = fib_keys["vk"]
        assert vk.k == 3
        assert vk.instance_lengths == [1]
        assert vk.commitments.n == 8
        assert vk.commitments.num_public_inputs == 1

    def test_vk_deterministic(self, params, fib_keys):
        assert keygen_vk(params, FibCircuit(steps=1)) == fib_keys["vk"]

    def test_witness_ignored(self, params, fib_keys):
        """값이 있는 회로를 넘겨도 같은 키가 나온다."""
        assert keygen_vk(params, FibCircuit(7, 9, steps=1)) == fib_keys["vk"]

    def test_different_shape_different_vk(self, fib_keys, two_step_keys):
        assert fib_keys["vk"] != two_step_keys["vk"]

    def test_keygen_pk_rejects_foreign_vk(self, params, two_step_keys):
        with pytest.raises(ConfigurationError):
            keygen_pk(params, two_step_keys["vk"], FibCircuit(steps=1))

    @pytest.mark.parametrize("steps", [7, 8])
    def test_too_many_steps(self, params, steps):
        with pytest.raises(SynthesisError):
            derive_keys(params, FibCircuit(steps=steps))


# =====================================================================
# 증명 / 검증
# =====================================================================

class TestProveVerify:
    def test_accepts_correct_instance(self, params, fib_keys, fib_proof):
        assert verify(params, fib_keys["vk"], [[3]], fib_proof) is True

    def test_rejects_wrong_instance(self, params, fib_keys, fib_proof):
        assert verify(params, fib_keys["vk"], [[5]], fib_proof) is False

    def test_idempotent(self, params, fib_keys, fib_proof):
        vk = fib_keys["vk"]
        assert verify(params, vk, [[3]], fib_proof) == verify(params, vk, [[3]], fib_proof)

    def test_same_keys_other_witness(self, params, fib_keys):
        """(2, 3) → 5 → 8"""
        proof = prove(params, fib_keys["pk"], FibCircuit(2, 3), [[8]])
        assert verify(params, fib_keys["vk"], [[8]], proof) is True

    def test_deterministic_with_rng(self, params, fib_keys, fib_proof, fixed_rng):
        proof = prove(params, fib_keys["pk"], FibCircuit(1, 1), [[3]], rng=fixed_rng)
        assert proof == fib_proof

    def test_blinding_randomizes(self, params, fib_keys, fib_proof):
        proof = prove(params, fib_keys["pk"], FibCircuit(1, 1), [[3]])
        assert len(proof) == len(fib_proof)
        assert proof != fib_proof

    def test_rejects_other_vk(self, params, fib_proof, two_step_keys):
        assert verify(params, two_step_keys["vk"], [[3]], fib_proof) is False

    def test_rejects_tampered_bytes(self, params, fib_keys, fib_proof):
        tampered = bytearray(fib_proof)
        tampered[-1] ^= 1
        assert verify(params, fib_keys["vk"], [[3]], bytes(tampered)) is False


class TestVerifyShape:
    """페어링 전에 걸러지는 경우."""

    def test_instance_shape(self, params, fib_keys, fib_proof):
        assert verify(params, fib_keys["vk"], [[3, 4]], fib_proof) is False
        assert verify(params, fib_keys["vk"], [], fib_proof) is False

    def test_truncated_bytes(self, params, fib_keys, fib_proof):
        assert verify(params, fib_keys["vk"], [[3]], fib_proof[:100]) is False

    def test_not_bytes(self, params, fib_keys, fib_proof):
        assert verify(params, fib_keys["vk"], [[3]], fib_proof.hex()) is False

    def test_params_mismatch(self, fib_keys, fib_proof):
        assert verify(setup(2), fib_keys["vk"], [[3]], fib_proof) is False


class TestProveFailures:
    def test_wrong_instance(self, params, fib_keys):
        with pytest.raises(ConstraintUnsatisfied) as exc:
            prove(params, fib_keys["pk"], FibCircuit(1, 1), [[5]])
        assert len(exc.value.failures) == 1

    def test_missing_witness(self, params, fib_keys):
        with pytest.raises(SynthesisError):
            prove(params, fib_keys["pk"], FibCircuit(steps=1), [[3]])

    def test_shape_differs_from_key(self, params, fib_keys):
        with pytest.raises(SynthesisError):
            prove(params, fib_keys["pk"], FibCircuit(1, 1, steps=2), [[5]])

    def test_instance_shape(self, params, fib_keys):
        with pytest.raises(SynthesisError):
            prove(params, fib_keys["pk"], FibCircuit(1, 1), [[3, 4]])


class TestRun:
    def test_run_default(self):
        result = run()
        assert result["verified"] is True
        assert result["instances"] == [[3]]
        assert len(result["proof"]) == 800

    def test_run_wrong_instance(self):
        with pytest.raises(ConstraintUnsatisfied):
            run(instance=5)
