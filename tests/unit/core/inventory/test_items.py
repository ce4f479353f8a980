"""
core/inventory/items.py 테스트
"""

from decimal import Decimal

import pytest

from core.errors import EngineError, TaxRateRangeError
from core.inventory.items import ItemCatalog, StockItem


class TestStockItem:
    """StockItem 테스트"""

    def test_create(self) -> None:
        """품목 생성 시 Decimal 변환"""
        item = StockItem.create("i3", "Copper Wire", "Kg", "450.50", "7408", 18)

        assert item.sale_price == Decimal("450.50")
        assert item.gst_rate == Decimal("18")

    def test_invalid_rate(self) -> None:
        """세율 범위 밖이면 거부"""
        with pytest.raises(TaxRateRangeError):
            StockItem.create("i3", "Copper Wire", "Kg", 450, "7408", 101)

    def test_from_dict_defaults(self) -> None:
        """누락 필드 기본값"""
        item = StockItem.from_dict({"id": "i9", "name": "Service"})

        assert item.unit == "Nos"
        assert item.gst_rate == Decimal("0")
        assert item.tax_group_id is None


class TestItemCatalog:
    """ItemCatalog 테스트"""

    def test_lookup(self, catalog: ItemCatalog) -> None:
        """ID 조회"""
        assert len(catalog) == 2
        assert "i1" in catalog
        assert catalog.get("i2").hsn_code == "5208"

    def test_duplicate(self, catalog: ItemCatalog) -> None:
        """중복 품목 거부"""
        with pytest.raises(EngineError):
            catalog.add(StockItem.create("i1", "Dup", "Nos", 1, "", 0))

    def test_missing(self, catalog: ItemCatalog) -> None:
        """없는 품목 조회 에러"""
        with pytest.raises(EngineError, match="not found"):
            catalog.get("i99")
