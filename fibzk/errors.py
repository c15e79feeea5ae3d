"""
fibzk 예외 계층
================

회로 구성부터 증명 검증까지 발생하는 실패를 종류별로 구분한다.

  ZKError
  ├── ConfigurationError    스키마 오류 (선언 전 사용, equality 미설정, 게이트 중복)
  ├── SynthesisError        합성 오류 (도메인 초과, 닫힌 region, witness 누락)
  ├── ConstraintUnsatisfied witness가 게이트/복사/공개 입력 제약을 만족하지 않음
  └── ProofDecodeError      증명 바이트열 형식 오류

검증 실패(reject)는 예외가 아니라 verify()의 반환값 False로 표현된다.
"""


class ZKError(Exception):
    """fibzk 예외의 기반 클래스."""


class ConfigurationError(ZKError):
    """제약 시스템 스키마와 사용 코드가 일치하지 않는다."""


class SynthesisError(ZKError):
    """합성(synthesis) 중 레이아웃 또는 witness 오류."""


class ConstraintUnsatisfied(ZKError):
    """구체 witness가 선언된 제약을 만족하지 않는다.

    속성:
        failures: dev.MockProver가 보고하는 실패 레코드 리스트
    """

    def __init__(self, failures):
        self.failures = list(failures)
        lines = [str(f) for f in self.failures[:5]]
        if len(self.failures) > 5:
            lines.append(f"... 외 {len(self.failures) - 5}건")
        super().__init__(
            f"제약 {len(self.failures)}건 불만족:\n  " + "\n  ".join(lines)
        )


class ProofDecodeError(ZKError):
    """증명 바이트열을 해석할 수 없다."""
