# cipdesign/api/v1/endpoints/catalog.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter

from cipdesign.schemas import CatalogItemOut, PriceLineIn, PriceLineOut
from cipdesign.services.catalog import find_catalog_item, get_catalog, price_line

router = APIRouter()


@router.get("", response_model=List[CatalogItemOut])
def list_catalog():
    return [CatalogItemOut(**entry.to_dict()) for entry in get_catalog()]


@router.post("/price", response_model=PriceLineOut)
def price_single_line(payload: PriceLineIn):
    """
    [단일 라인 가격 조회]
    - 매칭 점수가 낮으면 unitCost/extendedCost 모두 null (에러 아님)
    """
    entry = find_catalog_item(payload.item, payload.specification)
    unit_cost, extended_cost = price_line(
        payload.item, payload.specification, payload.qty
    )
    return PriceLineOut(
        catalog_key=entry.key if entry else None,
        unit_cost=unit_cost,
        extended_cost=extended_cost,
    )
