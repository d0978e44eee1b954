# cipdesign/schemas/cip.py
# =============================================================================
# CIP (Clean-in-Place) Design Schemas (Pydantic v2)
#
# - Python 쪽은 snake_case, 직렬화(API/CLI/DB)는 camelCase alias 그대로 사용.
# - 입력은 strict 모드: "6" → 6, 1 → True 같은 암묵 변환 금지.
# =============================================================================

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import ConfigDict, Field

from .common import AppBaseModel


# =============================================================================
# Input
# =============================================================================
# 입력 범위: 벗어나면 계산 전에 검증 오류 (422)
MAX_VESSELS_PER_STAGE = 1000
MAX_MEMBRANES_PER_VESSEL = 20
MAX_FLOW_GPM_PER_VESSEL = 1000.0
MIN_GPM_PER_CARTRIDGE = 0.1
MAX_GPM_PER_CARTRIDGE = 1000.0
TEMP_C_RANGE = (0.0, 100.0)
MAX_HEAD_FT = 2000.0


class CIPInput(AppBaseModel):
    """2-stage RO 트레인용 CIP 스키드 설계 입력."""

    model_config = ConfigDict(strict=True, frozen=True)

    stages: Literal[2] = Field(..., description="MVP는 2-stage만 지원")
    vessels_stage1: int = Field(
        ..., ge=1, le=MAX_VESSELS_PER_STAGE, alias="vesselsStage1"
    )
    vessels_stage2: int = Field(
        ..., ge=0, le=MAX_VESSELS_PER_STAGE, alias="vesselsStage2"
    )
    membranes_per_vessel: int = Field(
        ...,
        ge=1,
        le=MAX_MEMBRANES_PER_VESSEL,
        alias="membranesPerVessel",
        description="현재 계산식에는 쓰이지 않음 (멤브레인 면적 기반 사이징 예약)",
    )
    per_vessel_flow_gpm: float = Field(
        40.0,
        gt=0,
        le=MAX_FLOW_GPM_PER_VESSEL,
        allow_inf_nan=False,
        alias="perVesselFlowGPM",
    )
    heater: bool
    mains_hz: Literal[50, 60] = Field(..., alias="mainsHz")
    start_temp_c: float = Field(
        20.0, ge=TEMP_C_RANGE[0], le=TEMP_C_RANGE[1], allow_inf_nan=False, alias="startTempC"
    )
    target_temp_c: float = Field(
        35.0, ge=TEMP_C_RANGE[0], le=TEMP_C_RANGE[1], allow_inf_nan=False, alias="targetTempC"
    )
    head_assumption_ft: float = Field(
        110.0,
        gt=0,
        le=MAX_HEAD_FT,
        allow_inf_nan=False,
        alias="headAssumptionFt",
        description="펌프 설명 문자열에만 사용",
    )
    gpm_per_cartridge: float = Field(
        10.0,
        ge=MIN_GPM_PER_CARTRIDGE,
        le=MAX_GPM_PER_CARTRIDGE,
        allow_inf_nan=False,
        alias="gpmPerCartridge",
    )


# =============================================================================
# Output
# =============================================================================
class BomLine(AppBaseModel):
    item: str
    qty: int = Field(..., ge=1)
    specification: str
    comments: str = ""
    unit_cost: Optional[float] = Field(None, ge=0, alias="unitCost")
    extended_cost: Optional[float] = Field(None, ge=0, alias="extendedCost")


class DesignSummary(AppBaseModel):
    f1: float = Field(..., ge=0, alias="F1", description="Stage 1 CIP flow (gpm)")
    f2: float = Field(..., ge=0, alias="F2", description="Stage 2 CIP flow (gpm)")
    fmax: float = Field(..., ge=0, alias="Fmax")
    tank_gal: int = Field(..., ge=400, alias="tankGal")
    heater_kw: Optional[int] = Field(None, ge=36, le=45, alias="heaterKW")
    pump: str


class CIPDesignResult(AppBaseModel):
    summary: DesignSummary
    bom: List[BomLine] = Field(default_factory=list)

    def total_cost(self) -> float:
        """매칭된 라인의 extendedCost 합계 (가격 미상 라인은 제외)."""
        return float(
            sum(line.extended_cost for line in self.bom if line.extended_cost is not None)
        )


# =============================================================================
# Persisted design runs
# =============================================================================
class DesignRunOut(AppBaseModel):
    id: str
    system_type: str = Field(..., alias="systemType")
    input_json: Dict[str, Any] = Field(default_factory=dict, alias="inputJson")
    output_json: Dict[str, Any] = Field(default_factory=dict, alias="outputJson")
    created_at: datetime = Field(..., alias="createdAt")


class DeleteOut(AppBaseModel):
    success: bool = True
    deleted_count: Optional[int] = Field(None, alias="deletedCount")


# =============================================================================
# Catalog
# =============================================================================
class CatalogItemOut(AppBaseModel):
    key: str
    item: str
    spec: str
    unit_cost: float = Field(..., alias="unitCost")
    basis: str
    vendor: Optional[str] = None
    lead_time: Optional[str] = Field(None, alias="leadTime")


class PriceLineIn(AppBaseModel):
    item: str = Field(..., min_length=1)
    specification: str = ""
    qty: int = Field(1, ge=1)


class PriceLineOut(AppBaseModel):
    catalog_key: Optional[str] = Field(None, alias="catalogKey")
    unit_cost: Optional[float] = Field(None, alias="unitCost")
    extended_cost: Optional[float] = Field(None, alias="extendedCost")
