# cipdesign/db/models/design_run.py
from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from .base import Base, UUIDMixin, TimestampMixin


class DesignRun(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "design_run"

    # NOTE:
    # - 계산 1회당 1행, 저장 후 수정하지 않음 (삭제는 행 단위)
    # - input_json / output_json 은 camelCase(alias) 직렬화 그대로 보관
    system_type: Mapped[str] = mapped_column(String(40), index=True, default="cip-ro")
    input_json: Mapped[dict] = mapped_column(JSON, default=dict)
    output_json: Mapped[dict] = mapped_column(JSON, default=dict)
