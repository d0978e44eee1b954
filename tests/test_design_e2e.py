# tests/test_design_e2e.py
from __future__ import annotations

import pytest


@pytest.mark.e2e
def test_running_server_design_flow(e2e_client, baseline_payload) -> None:
    """실행 중인 서버 대상: 계산 → 이력 → CSV 내보내기 → 삭제"""
    res = e2e_client.post("/api/v1/design/cip", json=baseline_payload)
    assert res.status_code == 200, res.text
    assert res.json()["summary"]["tankGal"] == 400

    runs = e2e_client.get("/api/v1/design", params={"limit": 1}).json()
    assert runs, "design history is empty after a successful calculation"
    run_id = runs[0]["id"]

    csv_res = e2e_client.get(f"/api/v1/design/{run_id}/export", params={"format": "csv"})
    assert csv_res.status_code == 200
    assert csv_res.text.startswith("Item,Qty,Specification")

    assert e2e_client.delete(f"/api/v1/design/{run_id}").status_code == 200
