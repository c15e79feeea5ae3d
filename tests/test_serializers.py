"""
직렬화 헬퍼 테스트: fib_serializers.py
"""
import json
import pytest

from fibzk.errors import ProofDecodeError
from fibzk.plonk.field import FR, G1, G2, ec_mul
from fibzk.circuit.dev import MockProver
from fibzk.fib import FibCircuit

from fib_serializers import (
    serialize_fr, deserialize_fr,
    serialize_g1, deserialize_g1,
    serialize_g2, deserialize_g2,
    serialize_params, deserialize_params,
    serialize_vk, deserialize_vk,
    serialize_proof_bytes, deserialize_proof_bytes,
    serialize_failures, proof_summary,
    g1_short, fr_short,
)


class TestPrimitives:
    def test_fr(self):
        assert serialize_fr(FR(42)) == "42"
        assert deserialize_fr("42") == FR(42)

    def test_g1(self):
        point = ec_mul(G1, 5)
        data = serialize_g1(point)
        assert all(isinstance(v, str) for v in data)
        assert deserialize_g1(data) == point

    def test_g1_infinity(self):
        assert serialize_g1(None) is None
        assert deserialize_g1(None) is None

    def test_g2(self):
        point = ec_mul(G2, 3)
        assert deserialize_g2(serialize_g2(point)) == point


class TestParams:
    def test_roundtrip(self, params):
        data = serialize_params(params)
        json.dumps(data)
        restored = deserialize_params(data)
        assert restored.k == params.k
        assert restored.n == params.n
        assert restored.seed == params.seed
        assert restored.srs.max_degree == params.srs.max_degree
        assert restored.srs.g1_powers == params.srs.g1_powers
        assert restored.srs.g2_powers == params.srs.g2_powers


class TestVerifyingKey:
    def test_roundtrip(self, fib_keys):
        vk = fib_keys["vk"]
        data = serialize_vk(vk)
        json.dumps(data)
        assert deserialize_vk(data) == vk

    def test_q_c_infinity(self, fib_keys):
        """피보나치 회로는 상수 셀렉터가 없으므로 q_C 커밋먼트는 무한원점."""
        data = serialize_vk(fib_keys["vk"])
        assert data["commitments"]["q_c_comm"] is None


class TestProofBytes:
    def test_hex_roundtrip(self, fib_proof):
        hex_str = serialize_proof_bytes(fib_proof)
        assert len(hex_str) == 2 * len(fib_proof)
        assert deserialize_proof_bytes(hex_str) == fib_proof

    @pytest.mark.parametrize("value", ["zz", "abc", 123, None])
    def test_invalid(self, value):
        with pytest.raises(ProofDecodeError):
            deserialize_proof_bytes(value)

    def test_summary(self, fib_proof):
        summary = proof_summary(fib_proof)
        assert len(summary) == 16
        assert summary["a_comm"].startswith("(")
        assert "..." in summary["r_eval"]


class TestDisplay:
    def test_g1_short(self):
        assert g1_short(None) == "∞"
        assert g1_short(G1) == "(1, 2)"

    def test_fr_short(self):
        assert fr_short(None) == "None"
        assert fr_short(FR(12345)) == "12345"
        assert fr_short(FR(12345678901)) == "1234...8901"

    def test_failures(self):
        failures = MockProver.run(3, FibCircuit(1, 1), [[5]]).verify()
        assert serialize_failures(failures) == [str(failures[0])]
