# ./tests/test_catalog.py

import pytest

from cipdesign.schemas import BomLine
from cipdesign.services.catalog import (
    CATALOG,
    price_line,
    find_catalog_item,
    fuzzy_match,
    get_catalog,
    price_bom,
)
from cipdesign.services.design import compute_priced_design
from cipdesign.schemas import CIPInput


def test_catalog_has_unique_keys():
    keys = [e.key for e in get_catalog()]
    assert len(keys) == len(set(keys)) == len(CATALOG)


def test_exact_item_and_spec_match():
    entry = find_catalog_item("Mag Flowmeter", '0–300 gpm, 2–4"')
    assert entry is not None
    assert entry.key == "flowmeter-mag"


def test_item_plus_keyword_reaches_threshold():
    entry = CATALOG[0]
    assert fuzzy_match("Pump", "centrifugal pump 15 kW", entry) == 1.5
    unit, ext = price_line("Pump", "centrifugal pump 15 kW", 1)
    assert unit == 8500
    assert ext == 8500


def test_unmatched_line_is_unpriced():
    assert price_line("Antiscalant Dosing Skid", "Dual-head diaphragm", 1) == (None, None)


def test_tank_quantity_discount():
    single, _ = price_line("CIP Tank", "316SS cone-bottom", 1)
    double, ext = price_line("CIP Tank", "316SS cone-bottom", 2)
    assert single == 45
    assert double == pytest.approx(40.5)
    assert ext == pytest.approx(81.0)


def test_filter_bulk_discount_only_above_ten():
    spec = '30" 5 µm absolute'
    ten, _ = price_line("Filter Cartridges", spec, 10)
    eleven, ext = price_line("Filter Cartridges", spec, 11)
    assert ten == 45
    assert eleven / ten == pytest.approx(0.85)
    assert ext == pytest.approx(eleven * 11)


def test_housing_line_prefers_housing_entry():
    entry = find_catalog_item("Cartridge Filter Housing", '30-round, 30", 5 µm absolute, ≥240 gpm')
    assert entry.key == "filter-housing-30round"


def test_price_bom_keeps_order_and_text():
    bom = [
        BomLine(item="Pump", qty=1, specification="Goulds e-SH 2.5×3-8"),
        BomLine(item="Mystery Widget", qty=3, specification="n/a", comments="keep"),
    ]
    priced = price_bom(bom)
    assert [line.item for line in priced] == ["Pump", "Mystery Widget"]
    assert priced[0].unit_cost == 8500
    assert priced[1].unit_cost is None and priced[1].extended_cost is None
    assert priced[1].comments == "keep"


def test_baseline_design_fully_priced(baseline_payload):
    result = compute_priced_design(CIPInput.model_validate(baseline_payload))
    assert all(line.unit_cost is not None for line in result.bom)
    for line in result.bom:
        assert line.extended_cost == pytest.approx(line.unit_cost * line.qty)

    cartridges = next(line for line in result.bom if line.item == "Filter Cartridges")
    assert cartridges.unit_cost == pytest.approx(38.25)
    assert cartridges.extended_cost == pytest.approx(918.0)
    assert result.total_cost() == pytest.approx(21598.0)


def test_item_name_alone_is_not_enough():
    # item 일치(1.0)만으로는 임계값 미달
    assert fuzzy_match("Pump", "xyz", CATALOG[0]) == 1.0
    assert price_line("Pump", "xyz", 1) == (None, None)
    assert find_catalog_item("CIP Tank", "fiberglass vessel") is None


def test_spec_keyword_against_entry_item_counts():
    # "heater" 는 카탈로그 item 에만 있고 spec("Electric immersion")에는 없음
    unit, _ = price_line("Heater", "inline heater 40 kW", 1)
    assert unit == 250
