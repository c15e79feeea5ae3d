"""
증명 파이프라인
===============

  setup(k)                          → Params      (회로와 무관)
  derive_keys(params, shape)        → (pk, vk)    (witness 없는 회로)
  prove(params, pk, circuit, inst)  → bytes       (구체 witness)
  verify(params, vk, inst, proof)   → bool

사용 예시:
    >>> params = setup(DEFAULT_K)
    >>> pk, vk = derive_keys(params, FibCircuit(steps=1))
    >>> proof = prove(params, pk, FibCircuit(1, 1), [[3]])
    >>> verify(params, vk, [[3]], proof)   # True
    >>> verify(params, vk, [[5]], proof)   # False
"""

from fibzk.plonk.srs import Params, DEFAULT_SRS_SEED
from fibzk.keygen import keygen_vk, keygen_pk
from fibzk.proof import create_proof, verify_proof
from fibzk.fib import FibCircuit, fibonacci_output


DEFAULT_K = 3


def setup(k=DEFAULT_K, seed=DEFAULT_SRS_SEED):
    """2^k 행 도메인용 공개 파라미터. 같은 (k, seed)면 결정론적."""
    return Params.new(k, seed)


def derive_keys(params, circuit):
    """(ProvingKey, VerifyingKey). circuit의 witness는 사용하지 않는다."""
    vk = keygen_vk(params, circuit)
    pk = keygen_pk(params, vk, circuit)
    return pk, vk


def prove(params, pk, circuit, instances, rng=None):
    return create_proof(params, pk, circuit, instances, rng)


def verify(params, vk, instances, proof):
    return verify_proof(params, vk, instances, proof)


def run(a=1, b=1, steps=1, k=DEFAULT_K, instance=None):
    """피보나치 회로 하나를 setup부터 verify까지 실행한다.

    instance를 생략하면 올바른 출력 fibonacci_output(a, b, steps)를 쓴다.

    Returns:
        dict: params, pk, vk, instances, proof, verified
    """
    if instance is None:
        instance = int(fibonacci_output(a, b, steps))
    instances = [[instance]]

    params = setup(k)
    pk, vk = derive_keys(params, FibCircuit(steps=steps))
    proof = prove(params, pk, FibCircuit(a, b, steps), instances)
    return {
        "params": params,
        "pk": pk,
        "vk": vk,
        "instances": instances,
        "proof": proof,
        "verified": verify(params, vk, instances, proof),
    }
