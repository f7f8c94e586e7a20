from __future__ import annotations

import pytest

from helicoid.elements import get_element, get_elements
from helicoid.explorer import ExplorerState, SelectionSet, stability_band
from helicoid.model_config import HelicoidConfig


def test_toggle_adds_and_removes() -> None:
    sel = SelectionSet()
    c = get_element("C")
    assert sel.toggle(c) is True
    assert c in sel
    assert sel.toggle(c) is False
    assert len(sel) == 0


def test_capacity_is_enforced() -> None:
    sel = SelectionSet(capacity=4)
    for rec in get_elements(["C", "Si", "Ge", "Sn"]):
        assert sel.toggle(rec)
    assert sel.toggle(get_element("Pb")) is False
    assert sel.symbols == ["C", "Si", "Ge", "Sn"]
    # removal still works at capacity
    assert sel.toggle(get_element("Si")) is False
    assert sel.symbols == ["C", "Ge", "Sn"]


def test_snapshot_is_a_copy() -> None:
    sel = SelectionSet()
    sel.toggle(get_element("Fe"))
    snap = sel.snapshot()
    sel.clear()
    assert [r.symbol for r in snap] == ["Fe"]
    assert len(sel) == 0


def test_invalid_capacity() -> None:
    with pytest.raises(ValueError):
        SelectionSet(capacity=0)


@pytest.mark.parametrize(
    "stability,band,color",
    [(1.0, "green", "#00FF00"), (0.81, "green", "#00FF00"), (0.8, "yellow", "#FFFF00"), (0.6, "yellow", "#FFFF00"), (0.5, "red", "#FF4444")],
)
def test_stability_band(stability: float, band: str, color: str) -> None:
    assert stability_band(stability) == (band, color)


def test_state_evaluates_selection() -> None:
    state = ExplorerState(enabled=True)
    assert state.evaluate() is None
    assert state.bond_lines() == []
    state.click(get_element("C"))
    assert state.evaluate().formula == "C"
    assert state.bond_lines() == []


def test_bond_lines_cover_all_pairs() -> None:
    state = ExplorerState(enabled=True)
    for rec in get_elements(["Ti", "C", "N"]):
        state.click(rec)
    lines = state.bond_lines()
    assert [(l.i, l.j) for l in lines] == [(0, 1), (0, 2), (1, 2)]
    assert len({l.color for l in lines}) == 1


def test_resonant_pair_is_green() -> None:
    state = ExplorerState(enabled=True)
    for rec in get_elements(["Si", "N"]):
        state.click(rec)
    assert state.bond_lines()[0].band == "green"


def test_disable_clears_selection() -> None:
    state = ExplorerState(config=HelicoidConfig(max_selections=2), enabled=True)
    assert state.selection.capacity == 2
    state.click(get_element("C"))
    assert state.toggle_enabled() is False
    assert len(state.selection) == 0
    assert state.click(get_element("Si")) is False
    assert state.toggle_enabled() is True
    assert state.click(get_element("Si")) is True


def test_explorer_starts_disabled() -> None:
    state = ExplorerState()
    assert state.enabled is False
    assert state.click(get_element("C")) is False
    assert len(state.selection) == 0
    assert state.toggle_enabled() is True
    assert state.click(get_element("C")) is True
