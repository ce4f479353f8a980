"""
core/tax/resolver.py 테스트

관할별 세율 분할, 세액 계산, 세율 범위 검증
"""

from decimal import Decimal

import pytest

from core.errors import TaxRateRangeError, ValidationError
from core.tax.resolver import ZERO_SPLIT, TaxSplit, check_rate, split_tax, tax_amount
from core.types import Jurisdiction


class TestSplitTax:
    """split_tax 테스트"""

    def test_local_splits_half_and_half(self) -> None:
        """Local: CGST = SGST = 세율/2"""
        split = split_tax(18, Jurisdiction.LOCAL)

        assert split == TaxSplit(cgst=Decimal("9"), sgst=Decimal("9"), igst=Decimal("0"))

    def test_central_goes_to_igst(self) -> None:
        """Central: 전액 IGST"""
        split = split_tax(18, Jurisdiction.CENTRAL)

        assert split == TaxSplit(cgst=Decimal("0"), sgst=Decimal("0"), igst=Decimal("18"))

    def test_zero_rate_is_exempt(self) -> None:
        """0% 세율은 유효하며 분할 결과도 0"""
        assert split_tax(0, Jurisdiction.LOCAL) == ZERO_SPLIT
        assert split_tax("0", Jurisdiction.CENTRAL) == ZERO_SPLIT

    def test_odd_rate_keeps_precision(self) -> None:
        """반올림 없이 정확히 절반"""
        split = split_tax("5", "Local")

        assert split.cgst == Decimal("2.5")
        assert split.sgst == Decimal("2.5")
        assert split.total == Decimal("5")

    def test_string_jurisdiction(self) -> None:
        """문자열 관할 허용"""
        assert split_tax(12, "Central").igst == Decimal("12")

    def test_unknown_jurisdiction_rejected(self) -> None:
        """알 수 없는 관할 거부"""
        with pytest.raises(ValueError):
            split_tax(18, "Overseas")

    @pytest.mark.parametrize("rate", [-1, "100.01", 150])
    def test_out_of_range_rejected(self, rate: object) -> None:
        """범위 밖 세율은 산술 전에 거부"""
        with pytest.raises(TaxRateRangeError):
            split_tax(rate, Jurisdiction.LOCAL)


class TestCheckRate:
    """check_rate 테스트"""

    def test_boundaries_are_valid(self) -> None:
        """0과 100은 허용"""
        assert check_rate(0) == Decimal("0")
        assert check_rate(100) == Decimal("100")

    def test_float_converted_via_str(self) -> None:
        """float은 str을 거쳐 변환"""
        assert check_rate(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("rate", ["abc", None, "nan", float("inf"), True])
    def test_non_numeric_rejected(self, rate: object) -> None:
        """숫자가 아닌 세율 거부"""
        with pytest.raises(TaxRateRangeError):
            check_rate(rate)

    def test_range_error_is_validation_error(self) -> None:
        """TaxRateRangeError는 ValidationError 계열"""
        with pytest.raises(ValidationError) as exc_info:
            check_rate(101)

        assert exc_info.value.rate == 101
        assert "between 0 and 100" in exc_info.value.reasons[0]


class TestTaxAmount:
    """tax_amount 테스트"""

    def test_basic(self) -> None:
        """세액 계산"""
        assert tax_amount(1000, 18) == Decimal("180")

    def test_not_rounded(self) -> None:
        """내부 계산은 반올림하지 않음"""
        assert tax_amount("333.33", 18) == Decimal("59.9994")

    def test_invalid_rate(self) -> None:
        """잘못된 세율은 계산 전 거부"""
        with pytest.raises(TaxRateRangeError):
            tax_amount(1000, 101)
