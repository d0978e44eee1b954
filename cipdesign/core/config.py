# cipdesign/core/config.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 환경 설정."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    # =========================================================
    # 1. 프로젝트 기본 정보
    # =========================================================
    PROJECT_NAME: str = Field(
        default="CIP Designer API", description="Swagger UI 등에 표시될 프로젝트 이름"
    )
    API_V1_STR: str = Field(default="/api/v1", description="API 버전 Prefix")

    APP_ENV: Literal["local", "dev", "test", "prod"] = Field(
        default="local",
        description="애플리케이션 실행 환경 (local/dev/test/prod)",
    )

    # =========================================================
    # 2. 보안 / CORS / Rate limit
    # =========================================================
    BACKEND_CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000"],
        description="CORS 허용 도메인 목록 (예: http://localhost:3000)",
    )

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        """문자열로 들어온 CORS 설정을 리스트로 변환"""
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    RATE_LIMIT_ENABLED: bool = Field(
        default=True, description="클라이언트 주소 기준 요청 제한 사용 여부"
    )
    RATE_LIMIT: str = Field(default="60/minute", description="slowapi limit 문자열")

    # =========================================================
    # 3. 데이터베이스
    # =========================================================
    DB_URL: str = Field(
        default="sqlite:///./.data/cipdesign.db",
        description="SQLAlchemy DB URL",
    )

    DESIGN_HISTORY_LIMIT: int = Field(
        default=25, ge=1, le=100, description="설계 이력 목록 기본 개수"
    )

    # =========================================================
    # 4. LLM (BOM 문구 보강 / 어시스턴트)
    # =========================================================
    OPENAI_API_KEY: Optional[str] = Field(
        default=None, description="없으면 LLM 기능은 조용히 비활성화"
    )
    OPENAI_BASE_URL: Optional[str] = Field(
        default=None, description="OpenAI 호환 엔드포인트 (선택)"
    )
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")

    LLM_ENHANCE_ENABLED: bool = Field(
        default=True, description="BOM 문구 보강 feature flag"
    )
    LLM_TIMEOUT_S: float = Field(default=30.0, gt=0)

    # =========================================================
    # 5. 리포트 렌더링
    # =========================================================
    BRAND_PRIMARY: str = Field(
        default="#0a7cff",
        description="리포트 기본 포인트 컬러 (hex)",
    )

    FONT_PATH: str = Field(
        default="./assets/fonts/NotoSans-Regular.ttf",
        description="리포트 렌더링에 사용할 TTF 폰트 경로",
    )

    @property
    def font_path(self) -> Path:
        """폰트 파일 절대 경로 (Path 객체)."""
        return Path(self.FONT_PATH).resolve()

    @property
    def llm_available(self) -> bool:
        """키가 있고 테스트 환경이 아닐 때만 외부 LLM 호출."""
        return bool(self.OPENAI_API_KEY) and self.APP_ENV != "test"


@lru_cache
def get_settings() -> Settings:
    """FastAPI Depends용 싱글톤 Settings 인스턴스."""
    return Settings()


# 전역 설정 객체
settings = get_settings()
