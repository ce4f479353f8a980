"""
재고 품목 패키지
"""

from core.inventory.items import ItemCatalog, StockItem
from core.inventory.stock import StockPosition, StockSummary, stock_direction, stock_summary

__all__ = [
    "ItemCatalog",
    "StockItem",
    "StockPosition",
    "StockSummary",
    "stock_direction",
    "stock_summary",
]
