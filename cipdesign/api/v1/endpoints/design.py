# cipdesign/api/v1/endpoints/design.py
from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from loguru import logger
from sqlalchemy.orm import Session

from cipdesign.core.config import settings
from cipdesign.core.fs import export_filename
from cipdesign.db.session import get_db
from cipdesign.schemas import CIPDesignResult, CIPInput, DeleteOut, DesignRunOut
from cipdesign.services import design_runs
from cipdesign.services.design import run_cip_design
from cipdesign.services.exporter import export_bytes

router = APIRouter()


# -----------------------------------------------------------------------------
# Calculate
# -----------------------------------------------------------------------------
@router.post("/cip", response_model=CIPDesignResult)
def design_cip(
    payload: CIPInput,
    use_llm: bool = Query(False, alias="useLLM", description="BOM 문구 LLM 보강"),
    db: Session = Depends(get_db),
):
    try:
        return run_cip_design(db, payload, use_llm=use_llm)
    except Exception:
        logger.exception("🔥 CIP calculation error")
        raise HTTPException(status_code=500, detail="Internal server error")


# -----------------------------------------------------------------------------
# History
# -----------------------------------------------------------------------------
@router.get("", response_model=List[DesignRunOut])
def list_designs(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
):
    rows = design_runs.list_recent(db, limit or settings.DESIGN_HISTORY_LIMIT)
    return [design_runs.to_out(r) for r in rows]


@router.get("/{run_id}", response_model=DesignRunOut)
def get_design(run_id: str, db: Session = Depends(get_db)):
    row = design_runs.get_run(db, run_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Not found")
    return design_runs.to_out(row)


@router.delete("/{run_id}", response_model=DeleteOut, response_model_exclude_none=True)
def delete_design(run_id: str, db: Session = Depends(get_db)):
    if not design_runs.delete_run(db, run_id):
        raise HTTPException(status_code=404, detail="Design not found")
    return DeleteOut(success=True)


@router.delete("", response_model=DeleteOut)
def clear_designs(db: Session = Depends(get_db)):
    try:
        count = design_runs.delete_all(db)
    except Exception:
        logger.exception("🔥 Error clearing design history")
        raise HTTPException(status_code=500, detail="Failed to clear design history")
    logger.info("🧹 Design history cleared ({} rows)", count)
    return DeleteOut(success=True, deleted_count=count)


# -----------------------------------------------------------------------------
# Export
# -----------------------------------------------------------------------------
@router.get("/{run_id}/export")
def export_design(
    run_id: str,
    fmt: Literal["csv", "xlsx", "pdf"] = Query("csv", alias="format"),
    db: Session = Depends(get_db),
):
    row = design_runs.get_run(db, run_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Not found")

    result = CIPDesignResult.model_validate(row.output_json or {})
    content, media_type = export_bytes(result, fmt, run_id=str(row.id))
    filename = export_filename(str(row.id), fmt)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
