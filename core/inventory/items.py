"""
재고 품목 마스터

품목 라인 생성 시 이름/HSN/단위/기본 단가/세율의 출처
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from core.errors import EngineError
from core.tax.resolver import check_rate
from core.utils.money import ZERO, to_decimal


@dataclass(frozen=True)
class StockItem:
    """재고 품목"""

    id: str
    name: str
    unit: str
    sale_price: Decimal
    hsn_code: str
    gst_rate: Decimal
    category: str = ""
    tax_group_id: str | None = None

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        unit: str,
        sale_price: Any,
        hsn_code: str,
        gst_rate: Any,
        category: str = "",
        tax_group_id: str | None = None,
    ) -> StockItem:
        return cls(
            id=id,
            name=name,
            unit=unit,
            sale_price=to_decimal(sale_price, default=ZERO),
            hsn_code=hsn_code,
            gst_rate=check_rate(gst_rate),
            category=category,
            tax_group_id=tax_group_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "unit": self.unit,
            "sale_price": str(self.sale_price),
            "hsn_code": self.hsn_code,
            "gst_rate": str(self.gst_rate),
            "category": self.category,
            "tax_group_id": self.tax_group_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StockItem:
        return cls.create(
            id=data["id"],
            name=data["name"],
            unit=data.get("unit", "Nos"),
            sale_price=data.get("sale_price", "0"),
            hsn_code=data.get("hsn_code", ""),
            gst_rate=data.get("gst_rate", "0"),
            category=data.get("category", ""),
            tax_group_id=data.get("tax_group_id"),
        )


class ItemCatalog:
    """품목 마스터 조회"""

    def __init__(self, items: Iterable[StockItem] = ()):
        self._items: dict[str, StockItem] = {}
        for item in items:
            self.add(item)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    @property
    def items(self) -> tuple[StockItem, ...]:
        return tuple(self._items.values())

    def add(self, item: StockItem) -> None:
        if item.id in self._items:
            raise EngineError(f"Stock item already exists: {item.id}")
        self._items[item.id] = item

    def get(self, item_id: str) -> StockItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise EngineError(f"Stock item not found: {item_id}") from None
