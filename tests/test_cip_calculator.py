# ./tests/test_cip_calculator.py

import pytest
from pydantic import ValidationError

from cipdesign.schemas import CIPInput
from cipdesign.services.cip import calculate
from cipdesign.services.cip.calculator import fmt_num, round_up_to, size_heater_kw


def make_input(baseline_payload, **overrides):
    return CIPInput.model_validate({**baseline_payload, **overrides})


def test_baseline_summary(baseline_payload):
    out = calculate(make_input(baseline_payload))
    s = out.summary
    assert s.f1 == 240
    assert s.f2 == 160
    assert s.fmax == 240
    assert s.tank_gal == 400
    assert s.heater_kw == 37
    assert "50 Hz" in s.pump
    assert "~110 ft" in s.pump


def test_baseline_bom_order_and_quantities(baseline_payload):
    out = calculate(make_input(baseline_payload))
    items = [line.item for line in out.bom]
    assert items == [
        "Pump",
        "CIP Tank",
        "Heater",
        "Cartridge Filter Housing",
        "Filter Cartridges",
        "Mag Flowmeter",
        "Pressure Gauges/Transmitters",
        "Valves & Piping",
        "Controls (PLC + HMI)",
    ]
    by_item = {line.item: line for line in out.bom}
    assert by_item["Filter Cartridges"].qty == 24
    assert by_item["Pressure Gauges/Transmitters"].qty == 2
    assert by_item["Heater"].specification == "Electric immersion 37 kW, RTD + over-temp"
    assert by_item["Heater"].comments == "Heat 400 gal from 20→35 °C"
    assert by_item["CIP Tank"].specification.startswith("400 gal 316SS cone-bottom")
    assert by_item["Cartridge Filter Housing"].specification.endswith("≥240 gpm")
    assert by_item["Filter Cartridges"].comments == "Design ~10 gpm per cartridge"


def test_calculate_leaves_bom_unpriced(baseline_payload):
    out = calculate(make_input(baseline_payload))
    assert all(line.unit_cost is None and line.extended_cost is None for line in out.bom)


def test_no_heater_drops_heater_line(baseline_payload):
    out = calculate(make_input(baseline_payload, heater=False))
    assert out.summary.heater_kw is None
    assert len(out.bom) == 8
    assert "Heater" not in [line.item for line in out.bom]


@pytest.mark.parametrize(
    "vessels_stage1, tank",
    [(6, 400), (7, 450), (11, 700), (20, 1200)],
)
def test_tank_rounding(baseline_payload, vessels_stage1, tank):
    out = calculate(make_input(baseline_payload, vesselsStage1=vessels_stage1))
    assert out.summary.tank_gal == tank
    assert out.summary.tank_gal % 50 == 0


def test_heater_clamped_to_band(baseline_payload):
    big = calculate(make_input(baseline_payload, vesselsStage1=20))
    assert big.summary.heater_kw == 45

    cooling = calculate(make_input(baseline_payload, startTempC=40, targetTempC=30))
    assert cooling.summary.heater_kw == 36


def test_cartridge_count_rounds_up(baseline_payload):
    out = calculate(
        make_input(
            baseline_payload,
            vesselsStage1=5,
            vesselsStage2=2,
            perVesselFlowGPM=50,
            gpmPerCartridge=12,
        )
    )
    assert out.summary.fmax == 250
    cartridges = next(line for line in out.bom if line.item == "Filter Cartridges")
    assert cartridges.qty == 21


def test_stage2_larger_drives_fmax(baseline_payload):
    out = calculate(make_input(baseline_payload, vesselsStage1=2, vesselsStage2=5))
    assert out.summary.fmax == out.summary.f2 == 200


def test_zero_stage2_vessels(baseline_payload):
    out = calculate(make_input(baseline_payload, vesselsStage2=0))
    assert out.summary.f2 == 0
    assert out.summary.fmax == out.summary.f1


def test_head_assumption_only_in_50hz_text(baseline_payload):
    hz50 = calculate(make_input(baseline_payload, headAssumptionFt=150))
    assert "~150 ft" in hz50.summary.pump

    hz60 = calculate(make_input(baseline_payload, mainsHz=60, headAssumptionFt=150))
    assert hz60.summary.pump == "Goulds e-SH 65-160/…, ≈240 gpm @ ~110 ft, 10–15 HP, 60 Hz"


def test_calculate_is_deterministic(baseline_payload):
    inp = make_input(baseline_payload)
    assert calculate(inp).model_dump() == calculate(inp).model_dump()


@pytest.mark.parametrize(
    "overrides",
    [
        {"vesselsStage1": 0},
        {"vesselsStage2": -1},
        {"stages": 3},
        {"mainsHz": 55},
        {"perVesselFlowGPM": 0},
        {"gpmPerCartridge": -5},
        {"vesselsStage1": "6"},
        {"heater": "yes"},
    ],
)
def test_invalid_inputs_rejected(baseline_payload, overrides):
    with pytest.raises(ValidationError):
        make_input(baseline_payload, **overrides)


def test_missing_required_field_rejected(baseline_payload):
    payload = dict(baseline_payload)
    payload.pop("mainsHz")
    with pytest.raises(ValidationError):
        CIPInput.model_validate(payload)


def test_helpers():
    assert round_up_to(50, 360) == 400
    assert round_up_to(50, 400) == 400
    assert fmt_num(240.0) == "240"
    assert fmt_num(12.5) == "12.5"
    assert size_heater_kw(400, 20, 20) == 36


@pytest.mark.parametrize(
    "overrides",
    [
        {"perVesselFlowGPM": 1e308},
        {"gpmPerCartridge": 1e-320},
        {"gpmPerCartridge": 0.05},
        {"vesselsStage1": 10**400},
        {"vesselsStage2": 1001},
        {"membranesPerVessel": 21},
        {"targetTempC": 1e300},
        {"startTempC": -5},
        {"headAssumptionFt": 1e308},
    ],
)
def test_out_of_range_inputs_rejected(baseline_payload, overrides):
    with pytest.raises(ValidationError):
        make_input(baseline_payload, **overrides)


def test_largest_accepted_inputs_still_calculate(baseline_payload):
    out = calculate(
        make_input(
            baseline_payload,
            vesselsStage1=1000,
            vesselsStage2=1000,
            perVesselFlowGPM=1000,
            gpmPerCartridge=0.1,
            startTempC=0,
            targetTempC=100,
            headAssumptionFt=2000,
        )
    )
    assert out.summary.fmax == 1_000_000
    assert out.summary.tank_gal == 60_000
    assert out.summary.heater_kw == 45
    cartridges = next(line for line in out.bom if line.item == "Filter Cartridges")
    assert 9_999_999 <= cartridges.qty <= 10_000_001
