from __future__ import annotations

import math

import pytest

from helicoid.elements import base_elements, get_element
from helicoid.energy_model import (
    PatchedEnergyModel,
    VortexEnergyModel,
    describe_element,
    get_energy_model,
    harmonic_index,
    noble_gas_law,
    phase_slip_category,
    predict_A,
)
from helicoid.model_config import HelicoidConfig, override_helicoid_config
from helicoid.spinor import PEAK
from helicoid.tables import E0

V4 = PatchedEnergyModel()
V5 = VortexEnergyModel()


def test_noble_gas_law() -> None:
    assert noble_gas_law(2) == pytest.approx(11 * E0 / 2 ** (2 / 3))
    assert noble_gas_law(3) < noble_gas_law(2)


def test_v4_period_one_constants() -> None:
    assert V4.base_A(1, 1, "s", 1) == pytest.approx(13.598)
    assert V4.base_A(1, 18, "noble", 2) == pytest.approx(24.587)


def test_v4_noble_gases_follow_law() -> None:
    for P in range(2, 7):
        assert V4.base_A(P, 18, "noble", 0) == pytest.approx(noble_gas_law(P))


def test_v4_d_block_branch() -> None:
    assert V4.base_A(4, 8, "d", 26) == pytest.approx(E0 * (1.953 + 0.079 * 5))
    # d10 closure bonus on group 12
    assert V4.base_A(4, 12, "d", 30) == pytest.approx(E0 * (1.953 + 0.079 * 9 + 0.279))


def test_v4_f_block_branch() -> None:
    assert V4.base_A(6, 101, "f", 58) == pytest.approx(5.44)
    assert V4.base_A(7, 102, "f", 92) == pytest.approx(5.99 + 0.044 * 2)


def test_v4_axis_carbon() -> None:
    assert V4.base_A(2, 14, "p", 6) == pytest.approx(10.26)
    assert V4.base_A(3, 14, "p", 14) == pytest.approx(11.26 - 0.65 - 1.2)


def test_v5_period_one_and_noble() -> None:
    assert V5.base_A(1, 1, "s", 1) == pytest.approx(13.60)
    assert V5.base_A(1, 18, "noble", 2) == pytest.approx(8 * E0)
    assert V5.base_A(3, 18, "noble", 18) == pytest.approx(noble_gas_law(3) * 1.08)


def test_v5_axis_carries_breathing() -> None:
    expected = 11.26 * (1.0 + 0.15 * math.sin(2 * math.pi * 6 / 18))
    assert V5.base_A(2, 14, "p", 6) == pytest.approx(expected)


def test_v5_symmetry_tables() -> None:
    assert V5.symmetry_params(3) == (0.0, 1.3)
    assert V5.symmetry_params(1) == (0.15, 0.6)
    assert V5.symmetry_params(5) == (0.30, 0.4)
    assert V5.symmetry_decay(1) == 0.80
    assert V5.symmetry_decay(5) == 0.15
    assert V5.symmetry_decay(7) == 0.05
    assert V5.fatigue(9) == 1.5


@pytest.mark.parametrize("model", [V4, V5])
def test_all_registry_predictions_finite(model) -> None:
    for rec in base_elements:
        A = model.predict_A(rec.period, rec.group, rec.block, rec.Z)
        assert math.isfinite(A)
        assert A > 0.0


def test_module_predict_uses_config() -> None:
    base = V4.base_A(2, 14, "p", 6)
    assert predict_A(2, 14, "p", 6) == pytest.approx(base + 0.2418, abs=1e-3)
    with override_helicoid_config(HelicoidConfig(apply_spinor_correction=False)):
        assert predict_A(2, 14, "p", 6) == pytest.approx(base)
    with override_helicoid_config(HelicoidConfig(energy_model="v5_2_vortex", apply_spinor_correction=False)):
        assert predict_A(2, 14, "p", 6) == pytest.approx(V5.base_A(2, 14, "p", 6))


def test_describe_carbon() -> None:
    res = describe_element(get_element("C"))
    assert res.symbol == "C"
    assert res.A_predicted == pytest.approx(10.26 + res.correction)
    assert res.phase_slip == pytest.approx(11.26 - res.A_predicted)
    assert res.phase_slip_category == "Drift"
    assert res.spinor_position == PEAK
    assert res.harmonic_k == 3
    assert res.symmetry_order == 3
    assert res.fatigue == 1.0


def test_phase_slip_categories() -> None:
    assert phase_slip_category(4.9)[0] == "Locked"
    assert phase_slip_category(5.0)[0] == "Drift"
    assert phase_slip_category(15.0)[0] == "Slip"
    assert phase_slip_category(25.0)[0] == "Veil Leak"


def test_harmonic_index() -> None:
    assert harmonic_index(E0 * 11 / 2) == 2
    assert harmonic_index(E0 * 11 / 8) == 8
    assert harmonic_index(1.0) is None


def test_unknown_energy_model() -> None:
    assert get_energy_model() is get_energy_model("v4_patched")
    with pytest.raises(ValueError):
        get_energy_model("v3_ancient")


def test_vortex_prediction_carries_no_additive_spinor() -> None:
    c = get_element("C")
    cfg = HelicoidConfig(energy_model="v5_2_vortex")
    res = describe_element(c, cfg)
    assert res.correction == 0.0
    assert res.A_predicted == pytest.approx(V5.base_A(2, 14, "p", 6))
    assert res.A_predicted == pytest.approx(12.7227, abs=1e-3)
    with override_helicoid_config(cfg):
        assert predict_A(2, 14, "p", 6) == pytest.approx(V5.base_A(2, 14, "p", 6))


def test_explicit_spinor_flag_overrides_model_default() -> None:
    c = get_element("C")
    forced = describe_element(c, HelicoidConfig(energy_model="v5_2_vortex", apply_spinor_correction=True))
    assert forced.A_predicted == pytest.approx(V5.base_A(2, 14, "p", 6) + 0.2418, abs=1e-3)
    assert V4.spinor_enabled() is True
    assert V5.spinor_enabled() is False
    assert V5.spinor_enabled(True) is True
    assert V4.spinor_enabled(False) is False
