# ./tests/test_design_service.py

from cipdesign.schemas import CIPInput
from cipdesign.services import design_runs
from cipdesign.services.design import compute_priced_design, run_cip_design


def test_run_persists_history(db_session, baseline_payload):
    inp = CIPInput.model_validate(baseline_payload)
    result = run_cip_design(db_session, inp)

    rows = design_runs.list_recent(db_session)
    assert len(rows) == 1
    assert rows[0].system_type == "cip-ro"
    assert rows[0].input_json["vesselsStage1"] == 6
    assert rows[0].output_json["summary"]["tankGal"] == result.summary.tank_gal


def test_persist_failure_still_returns_result(db_session, baseline_payload, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr("cipdesign.services.design.create_run", broken)
    inp = CIPInput.model_validate(baseline_payload)

    result = run_cip_design(db_session, inp)

    assert result.model_dump() == compute_priced_design(inp).model_dump()
    assert design_runs.list_recent(db_session) == []


def test_enhancer_only_runs_when_requested(db_session, baseline_payload):
    calls = []

    def enhancer(inp, result):
        calls.append(inp)
        bom = [line.model_copy(update={"comments": "enhanced"}) for line in result.bom]
        return result.model_copy(update={"bom": bom})

    inp = CIPInput.model_validate(baseline_payload)
    plain = run_cip_design(db_session, inp, enhancer=enhancer)
    assert calls == []
    assert all(line.comments != "enhanced" for line in plain.bom)

    enhanced = run_cip_design(db_session, inp, use_llm=True, enhancer=enhancer)
    assert len(calls) == 1
    assert all(line.comments == "enhanced" for line in enhanced.bom)


def test_enhancer_exception_is_swallowed(db_session, baseline_payload):
    def enhancer(inp, result):
        raise ValueError("bad output")

    inp = CIPInput.model_validate(baseline_payload)
    result = run_cip_design(db_session, inp, use_llm=True, enhancer=enhancer)
    assert result.model_dump() == compute_priced_design(inp).model_dump()


def test_history_get_and_delete(db_session, baseline_payload):
    inp = CIPInput.model_validate(baseline_payload)
    for _ in range(3):
        run_cip_design(db_session, inp)

    rows = design_runs.list_recent(db_session, limit=2)
    assert len(rows) == 2

    rid = str(rows[0].id)
    assert design_runs.get_run(db_session, rid) is not None
    assert design_runs.get_run(db_session, "not-a-uuid") is None

    assert design_runs.delete_run(db_session, rid) is True
    assert design_runs.delete_run(db_session, rid) is False
    assert design_runs.delete_all(db_session) == 2
    assert design_runs.list_recent(db_session) == []
