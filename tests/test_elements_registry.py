from __future__ import annotations

import json

import pytest

from helicoid.elements import (
    ELEMENT_TABLE,
    _make_base_elements,
    base_elements,
    elements_by_period,
    get_element,
    get_elements,
)


def test_registry_size_and_unique_keys() -> None:
    assert len(base_elements) == 80
    assert len(ELEMENT_TABLE) == 80
    assert len({rec.Z for rec in base_elements}) == 80


def test_axis_elements_sit_in_group_14() -> None:
    axis = [rec for rec in base_elements if rec.axis]
    assert {rec.symbol for rec in axis} >= {"C", "Si", "Ge"}
    assert all(rec.group == 14 for rec in axis)


def test_carbon_record() -> None:
    c = get_element("C")
    assert c.Z == 6
    assert c.period == 2
    assert c.block == "p"
    assert c.A == pytest.approx(11.260)
    assert c.color == 0xFFD700


def test_f_block_sentinels_present() -> None:
    for sym, group in [("Ce", 101), ("Gd", 101), ("Th", 102), ("U", 102)]:
        rec = get_element(sym)
        assert rec.group == group
        assert rec.is_f_row
        assert rec.block == "f"


def test_noble_block_labels() -> None:
    for sym in ["He", "Ne", "Ar", "Kr", "Xe", "Rn"]:
        assert get_element(sym).is_noble


def test_unknown_symbol_raises() -> None:
    with pytest.raises(ValueError):
        get_element("Xx")
    with pytest.raises(ValueError):
        get_elements(["C", "Xx"])


def test_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        ELEMENT_TABLE["Xx"] = get_element("C")  # type: ignore[index]


def test_elements_by_period_covers_rows() -> None:
    rows = elements_by_period()
    assert set(rows) == set(range(1, 8))
    assert [rec.symbol for rec in rows[1]] == ["H", "He"]


def test_missing_db_raises_runtime_error(tmp_path) -> None:
    with pytest.raises(RuntimeError):
        _make_base_elements(tmp_path / "nope.json")


def test_broken_axis_invariant_raises_runtime_error(tmp_path) -> None:
    p = tmp_path / "elements.json"
    row = {"symbol": "Xx", "Z": 200, "period": 2, "group": 13, "block": "p", "name": "Bad", "A": 1.0, "axis": True}
    p.write_text(json.dumps([row]), encoding="utf-8")
    with pytest.raises(RuntimeError) as excinfo:
        _make_base_elements(p)
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_duplicate_symbols_rejected(tmp_path) -> None:
    p = tmp_path / "elements.json"
    row = {"symbol": "Xx", "Z": 200, "period": 2, "group": 13, "block": "p", "name": "Dup", "A": 1.0}
    p.write_text(json.dumps([row, dict(row, Z=201)]), encoding="utf-8")
    with pytest.raises(RuntimeError):
        _make_base_elements(p)
