"""
피보나치 회로 E2E 데모: (1, 1) → 3
===================================

실행:
    python -m fibzk.example

흐름:
    1. MockProver로 witness 확인
    2. 파라미터 생성 (k = 3, 8행)
    3. 키 생성 (witness 없는 회로)
    4. 증명 생성
    5. 검증 (올바른 공개 입력 / 틀린 공개 입력)
"""

from fibzk.errors import ConstraintUnsatisfied
from fibzk.fib import FibCircuit, fibonacci_output
from fibzk.circuit.dev import MockProver
from fibzk.pipeline import DEFAULT_K, setup, derive_keys, prove, verify


def main(a=1, b=1, steps=1):
    expected = int(fibonacci_output(a, b, steps))
    circuit = FibCircuit(a, b, steps)

    print("=" * 60)
    print("  Plonkish Fibonacci Demo")
    print(f"  seed: ({a}, {b}), steps: {steps}, 공개 출력: {expected}")
    print("=" * 60)

    # ── 1. MockProver ──
    print("\n[1] MockProver 검사...")
    failures = MockProver.run(DEFAULT_K, circuit, [[expected]]).verify()
    print(f"    instance [{expected}]: {'만족 ✓' if not failures else failures}")
    wrong = expected + 2
    failures = MockProver.run(DEFAULT_K, circuit, [[wrong]]).verify()
    print(f"    instance [{wrong}]: 실패 {len(failures)}건")
    for failure in failures:
        print(f"      - {failure}")

    # ── 2. 파라미터 ──
    print(f"\n[2] 파라미터 생성 (k = {DEFAULT_K})...")
    params = setup(DEFAULT_K)
    print(f"    {params}")

    # ── 3. 키 생성 ──
    print("\n[3] 키 생성 (witness 없는 회로)...")
    pk, vk = derive_keys(params, circuit.without_witnesses())
    print(f"    공개 입력 행: {pk.layout.num_public_inputs}")
    print(f"    백엔드 게이트 수: {pk.layout.circuit.n}")
    print(f"    복사 제약 수: {len(pk.layout.circuit.copy_constraints)}")

    # ── 4. 증명 ──
    print("\n[4] 증명 생성 (5-라운드)...")
    proof = prove(params, pk, circuit, [[expected]])
    print(f"    증명 크기: {len(proof)} 바이트")

    try:
        prove(params, pk, circuit, [[wrong]])
    except ConstraintUnsatisfied as e:
        print(f"    instance [{wrong}]로 증명 시도 → 거부 ({len(e.failures)}건)")

    # ── 5. 검증 ──
    print("\n[5] 증명 검증...")
    ok = verify(params, vk, [[expected]], proof)
    print(f"    instance [{expected}]: {'성공 ✓' if ok else '실패 ✗'}")
    bad = verify(params, vk, [[wrong]], proof)
    print(f"    instance [{wrong}]: {'성공 ✓' if bad else '거부 ✓'}")

    tampered = bytearray(proof)
    tampered[-1] ^= 1
    print(f"    조작된 증명: {'성공 ✓' if verify(params, vk, [[expected]], bytes(tampered)) else '거부 ✓'}")

    print("\n" + "=" * 60)
    return ok and not bad


if __name__ == "__main__":
    main()
