import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from fibzk.fib import FibCircuit
from fibzk.pipeline import setup, derive_keys, prove


# ── 테스트 상수 ──
TEST_K = 3
SEED_A = 1
SEED_B = 1
EXPECTED_OUTPUT = 3
WRONG_OUTPUT = 5


class FixedRandom:
    """블라인딩 계수를 결정론적으로 만드는 난수원 (randrange만 제공)."""

    def __init__(self, start=1000):
        self.counter = start

    def randrange(self, stop):
        self.counter += 7
        return self.counter % stop


@pytest.fixture(scope="session")
def params():
    """k = 3 (8행) 파라미터."""
    return setup(TEST_K)


@pytest.fixture(scope="session")
def fib_keys(params):
    """steps = 1 피보나치 회로의 (pk, vk)."""
    pk, vk = derive_keys(params, FibCircuit(steps=1))
    return {"pk": pk, "vk": vk}


@pytest.fixture(scope="session")
def fib_proof(params, fib_keys):
    """seed (1, 1), instance [[3]]에 대한 증명 바이트열."""
    return prove(
        params, fib_keys["pk"], FibCircuit(SEED_A, SEED_B),
        [[EXPECTED_OUTPUT]], rng=FixedRandom(),
    )


@pytest.fixture
def fixed_rng():
    return FixedRandom()
