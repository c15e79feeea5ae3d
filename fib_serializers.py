"""
피보나치 증명 데이터 직렬화/역직렬화 헬퍼
==========================================

TinyDB에 저장 가능한 형태로 파이프라인 객체를 변환한다.
FR, G1, G2, SRS, Params, CircuitCommitments, VerifyingKey, 증명 바이트열.
"""

from py_ecc import bn128
from py_ecc.fields import bn128_FQ as FQ

from fibzk.errors import ProofDecodeError
from fibzk.plonk.field import FR
from fibzk.plonk.srs import SRS, Params
from fibzk.plonk.preprocessor import CircuitCommitments, SELECTOR_NAMES, SIGMA_NAMES
from fibzk.plonk.prover import Proof, COMMITMENT_FIELDS, EVALUATION_FIELDS
from fibzk.keygen import VerifyingKey


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR"""
    return FR(int(s))


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    if point is None:
        return None
    return [str(int(point[0])), str(int(point[1]))]


def deserialize_g1(data):
    """[str, str] or None → G1 point"""
    if data is None:
        return None
    return (FQ(int(data[0])), FQ(int(data[1])))


# ─── G2 point ───

def serialize_g2(point):
    """G2 point → [[str,str],[str,str]] or None"""
    if point is None:
        return None
    return [
        [str(int(point[0].coeffs[0])), str(int(point[0].coeffs[1]))],
        [str(int(point[1].coeffs[0])), str(int(point[1].coeffs[1]))],
    ]


def deserialize_g2(data):
    """[[str,str],[str,str]] or None → G2 point"""
    if data is None:
        return None
    return (
        bn128.FQ2([int(data[0][0]), int(data[0][1])]),
        bn128.FQ2([int(data[1][0]), int(data[1][1])]),
    )


# ─── SRS / Params ───

def serialize_srs(srs):
    return {
        "g1_powers": [serialize_g1(p) for p in srs.g1_powers],
        "g2_powers": [serialize_g2(p) for p in srs.g2_powers],
        "max_degree": srs.max_degree,
    }


def deserialize_srs(data):
    g1_powers = [deserialize_g1(p) for p in data["g1_powers"]]
    g2_powers = [deserialize_g2(p) for p in data["g2_powers"]]
    return SRS(g1_powers, g2_powers, data["max_degree"])


def serialize_params(params):
    """Params → dict (k, seed, SRS)"""
    return {
        "k": params.k,
        "seed": params.seed,
        "srs": serialize_srs(params.srs),
    }


def deserialize_params(data):
    return Params(data["k"], deserialize_srs(data["srs"]), data.get("seed"))


# ─── 검증 키 ───

def serialize_commitments(cc):
    out = {"n": cc.n, "num_public_inputs": cc.num_public_inputs}
    for name in SELECTOR_NAMES + SIGMA_NAMES:
        out[f"{name}_comm"] = serialize_g1(getattr(cc, f"{name}_comm"))
    return out


def deserialize_commitments(data):
    comms = {
        f"{name}_comm": deserialize_g1(data[f"{name}_comm"])
        for name in SELECTOR_NAMES + SIGMA_NAMES
    }
    return CircuitCommitments(data["n"], data["num_public_inputs"], **comms)


def serialize_vk(vk):
    return {
        "k": vk.k,
        "instance_lengths": list(vk.instance_lengths),
        "commitments": serialize_commitments(vk.commitments),
    }


def deserialize_vk(data):
    return VerifyingKey(
        deserialize_commitments(data["commitments"]),
        data["instance_lengths"],
        data["k"],
    )


# ─── 증명 ───

def serialize_proof_bytes(proof_bytes):
    """증명 바이트열 → hex 문자열"""
    return bytes(proof_bytes).hex()


def deserialize_proof_bytes(hex_str):
    """hex 문자열 → 증명 바이트열.

    Raises:
        ProofDecodeError: hex 문자열이 아닐 때
    """
    if not isinstance(hex_str, str):
        raise ProofDecodeError("증명은 hex 문자열이어야 합니다")
    try:
        return bytes.fromhex(hex_str)
    except ValueError as e:
        raise ProofDecodeError(f"hex 디코딩 실패: {e}") from e


def proof_summary(proof_bytes):
    """증명의 각 필드를 축약 문자열로 (UI 표시용)."""
    proof = Proof.from_bytes(proof_bytes)
    summary = {name: g1_short(getattr(proof, name)) for name in COMMITMENT_FIELDS}
    summary.update({name: fr_short(getattr(proof, name)) for name in EVALUATION_FIELDS})
    return summary


def serialize_failures(failures):
    """MockProver 실패 레코드 → 문자열 리스트"""
    return [str(f) for f in failures]


# ─── 표시용 헬퍼 ───

def _shorten(s, width=8):
    if len(s) <= width:
        return s
    return s[:4] + "..." + s[-4:]


def g1_short(point):
    """G1 point → 축약 문자열 (UI 표시용)"""
    if point is None:
        return "∞"
    return f"({_shorten(str(int(point[0])))}, {_shorten(str(int(point[1])))})"


def fr_short(val):
    """FR → 축약 문자열 (UI 표시용)"""
    if val is None:
        return "None"
    return _shorten(str(int(val)), width=10)
