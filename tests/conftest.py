# tests/conftest.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, List

# cipdesign import 전에 테스트 환경 고정 (in-memory DB, LLM/rate limit off)
os.environ["APP_ENV"] = "test"
os.environ["DB_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("OPENAI_API_KEY", None)

import pytest

try:
    import httpx
except Exception:  # pragma: no cover
    httpx = None  # type: ignore


DEFAULT_E2E_BASE_URL = os.getenv("CIPDESIGN_E2E_BASE_URL", "http://127.0.0.1:8000")
DEFAULT_E2E_TIMEOUT = float(os.getenv("CIPDESIGN_E2E_TIMEOUT", "30"))


@dataclass(frozen=True)
class E2EConfig:
    enabled: bool
    base_url: str
    timeout_s: float
    strict: bool


def pytest_addoption(parser: pytest.Parser) -> None:
    g = parser.getgroup("cipdesign-e2e")

    g.addoption(
        "--e2e",
        action="store_true",
        default=False,
        help="Run E2E tests (marked with @pytest.mark.e2e).",
    )
    g.addoption(
        "--e2e-base-url",
        action="store",
        default=DEFAULT_E2E_BASE_URL,
        help=f"Base URL for the running API server (default: {DEFAULT_E2E_BASE_URL}).",
    )
    g.addoption(
        "--e2e-timeout",
        action="store",
        type=float,
        default=DEFAULT_E2E_TIMEOUT,
        help=f"HTTP timeout seconds for E2E calls (default: {DEFAULT_E2E_TIMEOUT}).",
    )
    g.addoption(
        "--e2e-strict",
        action="store_true",
        default=False,
        help="Strict E2E mode: fail (instead of skip) if server connectivity check fails.",
    )


def _get_e2e_config(config: pytest.Config) -> E2EConfig:
    return E2EConfig(
        enabled=bool(config.getoption("--e2e")),
        base_url=str(config.getoption("--e2e-base-url")).rstrip("/"),
        timeout_s=float(config.getoption("--e2e-timeout")),
        strict=bool(config.getoption("--e2e-strict")),
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: List[pytest.Item]
) -> None:
    """Default: skip all @pytest.mark.e2e unless --e2e is passed."""
    if _get_e2e_config(config).enabled:
        return
    skip_e2e = pytest.mark.skip(reason="E2E tests are disabled. Re-run with --e2e")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


@pytest.fixture(scope="session")
def e2e_cfg(pytestconfig: pytest.Config) -> E2EConfig:
    return _get_e2e_config(pytestconfig)


@pytest.fixture(scope="session")
def e2e_client(e2e_cfg: E2EConfig):
    """HTTP client for calling a running CIP Designer API server."""
    if httpx is None:
        msg = "httpx is not installed. Install it: pip install httpx"
        if e2e_cfg.strict:
            raise RuntimeError(msg)
        pytest.skip(msg)

    client = httpx.Client(
        base_url=e2e_cfg.base_url,
        timeout=httpx.Timeout(e2e_cfg.timeout_s),
        follow_redirects=True,
    )
    try:
        client.get("/health")
    except Exception as exc:
        client.close()
        if e2e_cfg.strict:
            raise
        pytest.skip(f"E2E server not reachable: {exc}")

    yield client
    client.close()


# -----------------------------------------------------------------------------
# In-process fixtures
# -----------------------------------------------------------------------------
@pytest.fixture()
def db_session():
    """테스트마다 테이블 재생성 (in-memory sqlite, StaticPool)."""
    from cipdesign.db.models import Base
    from cipdesign.db.session import SessionLocal, engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db_session):
    from fastapi.testclient import TestClient
    from cipdesign.main import app

    return TestClient(app)


@pytest.fixture()
def baseline_payload() -> Dict[str, Any]:
    return {
        "stages": 2,
        "vesselsStage1": 6,
        "vesselsStage2": 4,
        "membranesPerVessel": 6,
        "perVesselFlowGPM": 40,
        "heater": True,
        "mainsHz": 50,
        "startTempC": 20,
        "targetTempC": 35,
        "headAssumptionFt": 110,
        "gpmPerCartridge": 10,
    }
