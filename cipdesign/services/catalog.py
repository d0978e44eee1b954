# cipdesign/services/catalog.py
# 간이 인메모리 장비 카탈로그 + BOM 라인 가격 매칭
# - 점수 1.5 미만이면 "가격 미상"(None, None) 으로 처리. 예외 없음.

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence, Tuple

from cipdesign.schemas import BomLine

# ==============================================================================
# 1. Catalog Data
# ==============================================================================


@dataclass(frozen=True)
class CatalogItem:
    key: str
    item: str
    spec: str
    unit_cost: float
    basis: str = "each"  # each | gallon | kW | linear_ft
    vendor: Optional[str] = None
    lead_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


CATALOG: Tuple[CatalogItem, ...] = (
    # Pumps
    CatalogItem(
        key="pump-goulds-esh",
        item="Pump",
        spec="Goulds e-SH",
        unit_cost=8500.0,
        vendor="Goulds Pumps",
        lead_time="4-6 weeks",
    ),
    # Tanks (per gallon)
    CatalogItem(
        key="tank-316ss-cone",
        item="CIP Tank",
        spec="316SS cone-bottom",
        unit_cost=45.0,
        basis="gallon",
        vendor="Various",
        lead_time="6-8 weeks",
    ),
    # Heaters (per kW)
    CatalogItem(
        key="heater-electric-immersion",
        item="Heater",
        spec="Electric immersion",
        unit_cost=250.0,
        basis="kW",
        vendor="Various",
        lead_time="2-4 weeks",
    ),
    CatalogItem(
        key="filter-housing-30round",
        item="Cartridge Filter Housing",
        spec="30-round",
        unit_cost=1200.0,
        vendor="Various",
        lead_time="2-3 weeks",
    ),
    CatalogItem(
        key="filter-cartridge-30inch",
        item="Filter Cartridges",
        spec='30" 5 µm absolute',
        unit_cost=45.0,
        vendor="Various",
        lead_time="1-2 weeks",
    ),
    CatalogItem(
        key="flowmeter-mag",
        item="Mag Flowmeter",
        spec="0–300 gpm",
        unit_cost=1800.0,
        vendor="Various",
        lead_time="2-3 weeks",
    ),
    CatalogItem(
        key="pressure-gauge",
        item="Pressure Gauges/Transmitters",
        spec="Feed & return headers",
        unit_cost=150.0,
        vendor="Various",
        lead_time="1-2 weeks",
    ),
    # Valves & Piping (per linear foot)
    CatalogItem(
        key="valves-piping-316l",
        item="Valves & Piping",
        spec="316L SS headers",
        unit_cost=85.0,
        basis="linear_ft",
        vendor="Various",
        lead_time="3-4 weeks",
    ),
    CatalogItem(
        key="controls-plc-hmi",
        item="Controls (PLC + HMI)",
        spec="Recipe selector, permissives, logging",
        unit_cost=8500.0,
        vendor="Various",
        lead_time="6-8 weeks",
    ),
)

KEYWORDS = (
    "pump",
    "tank",
    "heater",
    "filter",
    "flowmeter",
    "pressure",
    "valve",
    "control",
)

MATCH_THRESHOLD = 1.5
TANK_QTY_DISCOUNT = 0.90  # qty > 1
FILTER_QTY_DISCOUNT = 0.85  # qty > 10
FILTER_BULK_QTY = 10


# ==============================================================================
# 2. Matching
# ==============================================================================
def _norm(x: Any) -> str:
    return str(x if x is not None else "").strip().lower()


def _shares_keyword(a: str, b: str) -> bool:
    return any(k in a and k in b for k in KEYWORDS)


def fuzzy_match(item: str, spec: str, entry: CatalogItem) -> float:
    item_l, spec_l = _norm(item), _norm(spec)

    score = 0.0
    if _norm(entry.item) in item_l:
        score += 1.0
    if _norm(entry.spec) in spec_l:
        score += 1.0

    # BOM spec 과 카탈로그 텍스트(item+spec) 공통 키워드. item 이름만 맞으면 1.0 에 그침
    entry_text = f"{_norm(entry.item)} {_norm(entry.spec)}"
    if _shares_keyword(spec_l, entry_text):
        score += 0.5
    return score


def find_catalog_item(item: str, spec: str) -> Optional[CatalogItem]:
    """최고 점수 항목 (동점이면 앞선 항목). 임계값 미만이면 None."""
    best: Optional[CatalogItem] = None
    best_score = 0.0
    for entry in CATALOG:
        score = fuzzy_match(item, spec, entry)
        if score > best_score:
            best, best_score = entry, score

    return best if best_score >= MATCH_THRESHOLD else None


# ==============================================================================
# 3. Pricing
# ==============================================================================
def price_line(
    item: str, spec: str, qty: int
) -> Tuple[Optional[float], Optional[float]]:
    """(unit_cost, extended_cost). 매칭 실패 시 (None, None)."""
    entry = find_catalog_item(item, spec)
    if entry is None:
        return None, None

    unit_cost = entry.unit_cost
    name = _norm(item)

    # 수량 할인
    if "tank" in name and qty > 1:
        unit_cost *= TANK_QTY_DISCOUNT
    if "filter" in name and qty > FILTER_BULK_QTY:
        unit_cost *= FILTER_QTY_DISCOUNT

    return unit_cost, unit_cost * qty


def price_bom_line(line: BomLine) -> BomLine:
    unit_cost, extended_cost = price_line(line.item, line.specification, line.qty)
    return line.model_copy(update={"unit_cost": unit_cost, "extended_cost": extended_cost})


def price_bom(bom: Sequence[BomLine]) -> List[BomLine]:
    return [price_bom_line(line) for line in bom]


def get_catalog() -> List[CatalogItem]:
    return list(CATALOG)
