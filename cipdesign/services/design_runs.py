# cipdesign/services/design_runs.py
# 설계 이력 저장소 (DesignRun 테이블)
# - 저장된 레코드는 수정하지 않음: create / list / get / delete 만 제공

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from cipdesign.db.models import DesignRun
from cipdesign.schemas import DesignRunOut


def _try_parse_uuid(v: Any) -> Optional[uuid.UUID]:
    if v is None:
        return None
    if isinstance(v, uuid.UUID):
        return v
    try:
        return uuid.UUID(str(v).strip())
    except (ValueError, AttributeError):
        return None


def to_out(row: DesignRun) -> DesignRunOut:
    return DesignRunOut(
        id=str(row.id),
        system_type=row.system_type,
        input_json=row.input_json or {},
        output_json=row.output_json or {},
        created_at=row.created_at,
    )


def create_run(
    db: Session,
    *,
    system_type: str,
    input_json: Dict[str, Any],
    output_json: Dict[str, Any],
) -> DesignRun:
    row = DesignRun(
        system_type=system_type,
        input_json=input_json,
        output_json=output_json,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def list_recent(db: Session, limit: int = 25) -> List[DesignRun]:
    stmt = (
        select(DesignRun)
        .order_by(DesignRun.created_at.desc(), DesignRun.id.desc())
        .limit(limit)
    )
    return list(db.scalars(stmt))


def get_run(db: Session, run_id: Any) -> Optional[DesignRun]:
    """잘못된 id 형식도 not-found 로 취급."""
    rid = _try_parse_uuid(run_id)
    if rid is None:
        return None
    return db.get(DesignRun, rid)


def delete_run(db: Session, run_id: Any) -> bool:
    row = get_run(db, run_id)
    if row is None:
        return False
    db.delete(row)
    db.commit()
    return True


def delete_all(db: Session) -> int:
    result = db.execute(delete(DesignRun))
    db.commit()
    return int(result.rowcount or 0)
