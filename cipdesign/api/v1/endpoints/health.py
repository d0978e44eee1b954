# cipdesign/api/v1/endpoints/health.py
from __future__ import annotations
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.orm import Session

from cipdesign.core.config import settings
from cipdesign.db.session import get_db

router = APIRouter(prefix="/health")


class HealthOut(BaseModel):
    status: str
    env: str
    db_ok: bool | None = None
    llm_configured: bool | None = None


@router.get("", response_model=dict)
def health_simple():
    return {"status": "ok", "env": settings.APP_ENV}


@router.get("/extended", response_model=HealthOut)
def health_extended(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except Exception:
        db_ok = False
    return HealthOut(
        status="ok" if db_ok else "degraded",
        env=settings.APP_ENV,
        db_ok=db_ok,
        llm_configured=settings.llm_available,
    )
