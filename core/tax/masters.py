"""
세금 마스터

TaxMaster(개별 세금 구성 요소)와 TaxGroup(집계 단위) 관리.
TaxGroup 자체는 산술 역할 없이 묶음만 제공.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from core.errors import EngineError
from core.tax.resolver import check_rate
from core.types import GstClassification, Jurisdiction, TaxComponent
from core.utils.money import ZERO

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxGroup:
    """세금 그룹"""

    id: str
    name: str
    description: str | None = None
    is_system: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "is_system": self.is_system,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaxGroup:
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description"),
            is_system=bool(data.get("is_system", False)),
        )


@dataclass(frozen=True)
class TaxMaster:
    """세금 마스터

    예: Output CGST @ 9% (CGST, Output, Local, group=tg1)
    """

    id: str
    name: str
    rate: Decimal
    component_type: TaxComponent
    classification: GstClassification
    jurisdiction: Jurisdiction
    group_id: str | None = None

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        rate: Any,
        component_type: TaxComponent | str,
        classification: GstClassification | str,
        jurisdiction: Jurisdiction | str,
        group_id: str | None = None,
    ) -> TaxMaster:
        """TaxMaster 생성 (세율 범위 검증)

        Raises:
            TaxRateRangeError: 세율이 0~100 밖인 경우
        """
        return cls(
            id=id,
            name=name,
            rate=check_rate(rate),
            component_type=TaxComponent(component_type),
            classification=GstClassification(classification),
            jurisdiction=Jurisdiction(jurisdiction),
            group_id=group_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "rate": str(self.rate),
            "component_type": self.component_type.value,
            "classification": self.classification.value,
            "jurisdiction": self.jurisdiction.value,
            "group_id": self.group_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaxMaster:
        return cls.create(
            id=data["id"],
            name=data["name"],
            rate=data["rate"],
            component_type=data["component_type"],
            classification=data["classification"],
            jurisdiction=data["jurisdiction"],
            group_id=data.get("group_id"),
        )


class TaxMasterBook:
    """세금 마스터 저장소

    Args:
        taxes: 초기 TaxMaster 목록
        groups: 초기 TaxGroup 목록
    """

    def __init__(
        self,
        taxes: Iterable[TaxMaster] = (),
        groups: Iterable[TaxGroup] = (),
    ):
        self._taxes: dict[str, TaxMaster] = {}
        self._groups: dict[str, TaxGroup] = {}
        for group in groups:
            self.add_group(group)
        for tax in taxes:
            self.add(tax)

    @property
    def taxes(self) -> tuple[TaxMaster, ...]:
        return tuple(self._taxes.values())

    @property
    def groups(self) -> tuple[TaxGroup, ...]:
        return tuple(self._groups.values())

    def add_group(self, group: TaxGroup) -> None:
        if group.id in self._groups:
            raise EngineError(f"Tax group already exists: {group.id}")
        self._groups[group.id] = group

    def add(self, tax: TaxMaster) -> None:
        """TaxMaster 등록

        Raises:
            EngineError: ID 중복 또는 존재하지 않는 그룹 참조
        """
        if tax.id in self._taxes:
            raise EngineError(f"Tax master already exists: {tax.id}")
        if tax.group_id is not None and tax.group_id not in self._groups:
            raise EngineError(f"Unknown tax group '{tax.group_id}' for tax {tax.id}")
        self._taxes[tax.id] = tax

    def get(self, tax_id: str) -> TaxMaster:
        try:
            return self._taxes[tax_id]
        except KeyError:
            raise EngineError(f"Tax master not found: {tax_id}") from None

    def in_group(self, group_id: str) -> list[TaxMaster]:
        """그룹에 속한 TaxMaster 목록"""
        return [t for t in self._taxes.values() if t.group_id == group_id]

    def effective_rate(
        self,
        group_id: str,
        classification: GstClassification | str,
        jurisdiction: Jurisdiction | str,
    ) -> Decimal:
        """그룹의 유효 세율 (조건에 맞는 구성 요소 세율 합계)

        예: Output CGST 9% + Output SGST 9% (Local) → 18

        Returns:
            합계 세율. 조건에 맞는 구성 요소가 없으면 0.
        """
        classification = GstClassification(classification)
        jurisdiction = Jurisdiction(jurisdiction)

        matched = [
            t for t in self.in_group(group_id)
            if t.classification == classification and t.jurisdiction == jurisdiction
        ]
        if not matched:
            logger.debug(
                f"No tax components in group {group_id} for "
                f"{classification.value}/{jurisdiction.value}"
            )
            return ZERO

        return sum((t.rate for t in matched), ZERO)
