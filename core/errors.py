"""
전표 엔진 예외 정의

모든 예외는 EngineError를 상속.
오류는 단일 작업 범위에서 발생하며 이전 작업의 롤백이 필요 없음
(전기는 단일 원자적 append).
"""

from collections.abc import Iterable


class EngineError(Exception):
    """전표 엔진 기본 예외"""

    pass


class ValidationError(EngineError):
    """전표 검증 실패

    사용자에게 표시할 구체적인 사유 목록을 포함.
    항상 복구 가능하며 전표는 전기되지 않음.
    """

    def __init__(self, reasons: str | Iterable[str]):
        if isinstance(reasons, str):
            reasons = [reasons]
        self.reasons: list[str] = list(reasons)
        super().__init__("; ".join(self.reasons) or "validation failed")


class TaxRateRangeError(ValidationError):
    """세율 범위 오류 (0~100 밖)

    산술 연산 전에 거부됨.
    """

    def __init__(self, rate: object):
        self.rate = rate
        super().__init__(f"Tax rate must be between 0 and 100, got {rate}")


class IdCollisionError(EngineError):
    """전표 번호 충돌

    최신 스냅샷으로 번호를 다시 생성해 한 번 재시도 가능.
    재발하면 저장 계층 문제로 간주.
    """

    def __init__(self, voucher_id: str):
        self.voucher_id = voucher_id
        super().__init__(f"Voucher id already exists: {voucher_id}")


class ImmutabilityViolation(EngineError):
    """전기된 전표의 고정 필드 변경 시도

    사용자 복구 대상이 아닌 프로그래밍/사용 오류.
    """

    def __init__(self, voucher_id: str, fields: Iterable[str]):
        self.voucher_id = voucher_id
        self.fields: tuple[str, ...] = tuple(sorted(fields))
        super().__init__(
            f"Posted voucher {voucher_id} is immutable; "
            f"cannot change {', '.join(self.fields)}"
        )


class FiscalYearLockedError(EngineError):
    """잠긴 회계연도에 전기 시도"""

    def __init__(self, fiscal_year: str):
        self.fiscal_year = fiscal_year
        super().__init__(f"Fiscal year {fiscal_year} is locked for posting")


class VoucherNotFoundError(EngineError, LookupError):
    """존재하지 않는 전표 ID"""

    def __init__(self, voucher_id: str):
        self.voucher_id = voucher_id
        super().__init__(f"Voucher not found: {voucher_id}")


class LedgerNotFoundError(EngineError, LookupError):
    """존재하지 않는 계정 ID"""

    def __init__(self, ledger_id: str):
        self.ledger_id = ledger_id
        super().__init__(f"Ledger not found: {ledger_id}")


class DuplicateLedgerError(EngineError):
    """이미 등록된 계정 ID/이름"""

    pass
