# cipdesign/services/design.py
# CIP 설계 오케스트레이터
#   계산 → 카탈로그 가격 → (옵션) LLM 문구 보강 → 이력 저장 → 반환
# - LLM / 저장 실패는 로그만 남기고 계산 결과는 그대로 반환

from __future__ import annotations

from typing import Any, Callable, Optional

from loguru import logger
from sqlalchemy.orm import Session

from cipdesign.core.config import settings
from cipdesign.schemas import CIPDesignResult, CIPInput, SystemType
from cipdesign.services.catalog import price_bom
from cipdesign.services.cip import calculate
from cipdesign.services.design_runs import create_run
from cipdesign.services.llm import enhance_cip_design

Enhancer = Callable[[CIPInput, CIPDesignResult], CIPDesignResult]


def compute_priced_design(inp: CIPInput) -> CIPDesignResult:
    """계산 + 가격만 (I/O 없음). CLI/export 에서도 사용."""
    result = calculate(inp)
    return result.model_copy(update={"bom": price_bom(result.bom)})


def _apply_enhancement(
    inp: CIPInput, result: CIPDesignResult, enhancer: Enhancer
) -> CIPDesignResult:
    try:
        return enhancer(inp, result)
    except Exception:
        logger.exception("⚠️ AI enhancement failed, continuing with computed result")
        return result


def _persist(db: Session, inp: CIPInput, result: CIPDesignResult) -> Optional[str]:
    try:
        row = create_run(
            db,
            system_type=SystemType.CIP_RO.value,
            input_json=inp.model_dump(by_alias=True, mode="json"),
            output_json=result.model_dump(by_alias=True, mode="json"),
        )
    except Exception:
        logger.exception("⚠️ Failed to persist design run")
        try:
            db.rollback()
        except Exception:
            logger.exception("rollback after persist failure also failed")
        return None
    return str(row.id)


def run_cip_design(
    db: Session,
    inp: CIPInput,
    *,
    use_llm: bool = False,
    enhancer: Optional[Enhancer] = None,
) -> CIPDesignResult:
    logger.info(
        "🚀 [CIP Design] stage1={} stage2={} heater={} mains={}Hz llm={}",
        inp.vessels_stage1, inp.vessels_stage2, inp.heater, inp.mains_hz, use_llm,
    )

    result = compute_priced_design(inp)

    if use_llm and settings.LLM_ENHANCE_ENABLED:
        result = _apply_enhancement(inp, result, enhancer or enhance_cip_design)

    run_id = _persist(db, inp, result)
    if run_id:
        logger.info("✅ [CIP Design] persisted run {}", run_id)

    return result
