"""
피보나치 증명 Flask Blueprint
==============================

JSON 엔드포인트 (prefix /fib):

  POST /setup   {k, seed}                  파라미터 생성
  POST /keygen  {steps}                    키 생성 (witness 없는 회로)
  POST /mock    {a, b, steps, instance}    MockProver 검사
  POST /prove   {a, b, instance}           증명 생성
  POST /verify  {instance, proof}          증명 검증
  GET  /state                              저장된 단계 요약
  POST /clear                              전체 삭제

상태 코드: 선행 단계 누락 409, 회로 오류 400, witness 제약 위반 422.

증명 키는 저장하지 않는다. 저장된 파라미터와 steps로 다시 만들고,
저장된 검증 키와 일치하는지 keygen_pk가 확인한다.
"""

from flask import Blueprint, current_app, jsonify, request
from tinydb import Query

from fibzk.errors import ZKError, ConstraintUnsatisfied
from fibzk.fib import FibCircuit
from fibzk.circuit.dev import MockProver
from fibzk.keygen import keygen_pk
from fibzk.pipeline import DEFAULT_K, setup, derive_keys, prove, verify
from fibzk.plonk.srs import DEFAULT_SRS_SEED

from fib_serializers import (
    serialize_params, deserialize_params,
    serialize_vk, deserialize_vk,
    serialize_proof_bytes, deserialize_proof_bytes,
    serialize_commitments, serialize_failures,
    proof_summary,
)

fib_bp = Blueprint("fib", __name__, url_prefix="/fib")

DATA = Query()

# DB는 app.py에서 주입
DB = None


def init_fib_bp(db):
    """app.py에서 DB를 주입받는다."""
    global DB
    DB = db


# ─── DB 헬퍼 ───

def db_get(key):
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def db_remove_prefix(prefix):
    DB.remove(DATA.type.test(lambda t: t.startswith(prefix)))


# ─── 요청 헬퍼 ───

class RequestError(Exception):
    def __init__(self, message, status=400):
        super().__init__(message)
        self.status = status


def error(message, status, **extra):
    current_app.logger.warning("fib: %s (%d)", message, status)
    body = {"error": message}
    body.update(extra)
    return jsonify(body), status


def body_int(body, name, default=None, minimum=None):
    value = body.get(name, default)
    if value is None:
        raise RequestError(f"'{name}' 값이 필요합니다")
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise RequestError(f"'{name}'은 정수여야 합니다")
    try:
        value = int(value)
    except ValueError:
        raise RequestError(f"'{name}'은 정수여야 합니다")
    if minimum is not None and value < minimum:
        raise RequestError(f"'{name}'은 {minimum} 이상이어야 합니다")
    return value


def body_instance(body, default=None):
    """instance: 정수 하나, [정수], [[정수]] 모두 [[정수]]로 정규화."""
    value = body.get("instance", default)
    if value is None:
        raise RequestError("'instance' 값이 필요합니다")
    if not isinstance(value, list):
        value = [value]
    if value and not isinstance(value[0], list):
        value = [value]
    try:
        return [[int(v) for v in col] for col in value]
    except (TypeError, ValueError):
        raise RequestError("'instance'는 정수 리스트여야 합니다")


def load_params():
    data = db_get("fib.params")
    if data is None:
        raise RequestError("먼저 /fib/setup을 실행하세요", 409)
    return deserialize_params(data)


def load_keys():
    data = db_get("fib.keys")
    if data is None:
        raise RequestError("먼저 /fib/keygen을 실행하세요", 409)
    return deserialize_vk(data["vk"]), data["steps"]


@fib_bp.errorhandler(RequestError)
def handle_request_error(e):
    return error(str(e), e.status)


# ──────────────────────────────────────────────────────────────
# 파이프라인
# ──────────────────────────────────────────────────────────────

@fib_bp.route("/setup", methods=["POST"])
def setup_params():
    body = request.get_json(silent=True) or {}
    k = body_int(body, "k", DEFAULT_K, minimum=1)
    seed = body_int(body, "seed", DEFAULT_SRS_SEED)
    if k > 10:
        raise RequestError("k는 10 이하여야 합니다")

    params = setup(k, seed)
    db_remove_prefix("fib.")
    db_set("fib.params", serialize_params(params))
    current_app.logger.info("fib: setup k=%d n=%d seed=%d", k, params.n, seed)
    return jsonify({
        "k": params.k,
        "n": params.n,
        "seed": params.seed,
        "max_degree": params.srs.max_degree,
    })


@fib_bp.route("/keygen", methods=["POST"])
def keygen():
    body = request.get_json(silent=True) or {}
    params = load_params()
    steps = body_int(body, "steps", 1, minimum=0)

    try:
        pk, vk = derive_keys(params, FibCircuit(steps=steps))
    except ZKError as e:
        return error(str(e), 400)

    db_set("fib.keys", {"steps": steps, "vk": serialize_vk(vk)})
    db_set("fib.proof", None)
    current_app.logger.info("fib: keygen steps=%d rows=%d", steps, pk.layout.circuit.n)
    return jsonify({
        "steps": steps,
        "instance_lengths": vk.instance_lengths,
        "rows": pk.layout.circuit.n,
        "copy_constraints": len(pk.layout.circuit.copy_constraints),
        "commitments": serialize_commitments(vk.commitments),
    })


@fib_bp.route("/mock", methods=["POST"])
def mock():
    body = request.get_json(silent=True) or {}
    params_data = db_get("fib.params")
    k = params_data["k"] if params_data else DEFAULT_K
    a = body_int(body, "a")
    b = body_int(body, "b")
    steps = body_int(body, "steps", 1, minimum=0)
    instance = body_instance(body)

    try:
        failures = MockProver.run(k, FibCircuit(a, b, steps), instance).verify()
    except ZKError as e:
        return error(str(e), 400)

    return jsonify({
        "satisfied": not failures,
        "failures": serialize_failures(failures),
    })


@fib_bp.route("/prove", methods=["POST"])
def prove_route():
    body = request.get_json(silent=True) or {}
    params = load_params()
    vk, steps = load_keys()
    a = body_int(body, "a")
    b = body_int(body, "b")
    instance = body_instance(body)

    circuit = FibCircuit(a, b, steps)
    try:
        pk = keygen_pk(params, vk, circuit)
        proof = prove(params, pk, circuit, instance)
    except ConstraintUnsatisfied as e:
        return error("witness가 회로 제약을 만족하지 않습니다", 422,
                     failures=serialize_failures(e.failures))
    except ZKError as e:
        return error(str(e), 400)

    proof_hex = serialize_proof_bytes(proof)
    db_set("fib.proof", {"instance": instance, "proof": proof_hex})
    current_app.logger.info("fib: proof created (%d bytes)", len(proof))
    return jsonify({
        "instance": instance,
        "proof": proof_hex,
        "size": len(proof),
        "summary": proof_summary(proof),
    })


@fib_bp.route("/verify", methods=["POST"])
def verify_route():
    body = request.get_json(silent=True) or {}
    params = load_params()
    vk, _ = load_keys()
    stored = db_get("fib.proof") or {}

    instance = body_instance(body, stored.get("instance"))
    proof_hex = body.get("proof", stored.get("proof"))
    if proof_hex is None:
        raise RequestError("먼저 /fib/prove를 실행하세요", 409)

    try:
        proof = deserialize_proof_bytes(proof_hex)
    except ZKError as e:
        return error(str(e), 400)

    verified = verify(params, vk, instance, proof)
    current_app.logger.info("fib: verify instance=%s → %s", instance, verified)
    return jsonify({"instance": instance, "verified": verified})


# ──────────────────────────────────────────────────────────────
# 상태
# ──────────────────────────────────────────────────────────────

@fib_bp.route("/state")
def state():
    params = db_get("fib.params")
    keys = db_get("fib.keys")
    proof = db_get("fib.proof")
    return jsonify({
        "params": {"k": params["k"], "seed": params["seed"]} if params else None,
        "keys": {"steps": keys["steps"],
                 "instance_lengths": keys["vk"]["instance_lengths"]} if keys else None,
        "proof": {"instance": proof["instance"]} if proof else None,
    })


@fib_bp.route("/clear", methods=["POST"])
def clear():
    db_remove_prefix("fib.")
    current_app.logger.info("fib: cleared")
    return jsonify({"cleared": True})
