from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING
import logging
import math

from helicoid.model_config import HelicoidConfig, get_current_helicoid_config
from helicoid.spinor import spinor_correction, spinor_phase
from helicoid.tables import (
    A_C,
    AXIS_GROUP,
    E0,
    F_BLOCK_GROUPS,
    GAMMA,
    K_A,
    MAIN_GROUP_ANGLE_DEG,
    NOBLE_GROUP,
    SPINOR_PERIOD,
    fatigue_for_period,
    symmetry_order,
)

if TYPE_CHECKING:
    from helicoid.elements import ElementRecord

logger = logging.getLogger(__name__)

PHASE_SLIP_CATEGORIES = (
    (5.0, "Locked", "Phase-locked to geometry"),
    (10.0, "Drift", "Metric drift"),
    (20.0, "Slip", "Topological tension"),
)
VEIL_LEAK = ("Veil Leak", "Manifold boundary stress")


def noble_gas_law(period: int) -> float:
    """A = 11 * E0 / P^gamma."""
    return 11.0 * E0 / math.pow(float(period), GAMMA)


def phase_slip_category(abs_pct: float) -> tuple[str, str]:
    for limit, label, desc in PHASE_SLIP_CATEGORIES:
        if abs_pct < limit:
            return label, desc
    return VEIL_LEAK


def harmonic_index(A: float, tol: float = 0.1) -> Optional[int]:
    """First k in 2..8 with A/E0 close to 11/k, else None."""
    ratio = A / E0
    for k in range(2, 9):
        if abs(ratio - 11.0 / k) < tol:
            return k
    return None


@dataclass(frozen=True)
class PredictionResult:
    symbol: str
    A_actual: float
    A_base: float
    correction: float
    A_predicted: float
    phase_slip: float
    phase_slip_pct: float
    phase_slip_category: str
    spinor_position: str
    fatigue: float
    symmetry_order: int
    harmonic_k: Optional[int]


class EnergyModel:
    """Common interface of the ionisation-energy revisions."""

    name = "base"
    applies_spinor_correction = True

    def base_A(self, period: int, group: int, block: str, Z: int) -> float:
        raise NotImplementedError

    def spinor_enabled(self, flag: bool | None = None) -> bool:
        """An explicit flag wins; otherwise the revision decides."""
        if flag is None:
            return self.applies_spinor_correction
        return bool(flag)

    def predict_A(
        self,
        period: int,
        group: int,
        block: str,
        Z: int,
        *,
        apply_spinor: bool | None = None,
    ) -> float:
        A = self.base_A(period, group, block, Z)
        if self.spinor_enabled(apply_spinor):
            A += spinor_correction(Z)
        return A

    def describe(self, rec: "ElementRecord", config: HelicoidConfig | None = None) -> PredictionResult:
        if config is None:
            config = get_current_helicoid_config()
        A_base = self.base_A(rec.period, rec.group, rec.block, rec.Z)
        phase = spinor_phase(rec.Z, basis=config.spinor_basis)
        correction = phase.correction if self.spinor_enabled(config.apply_spinor_correction) else 0.0
        A_pred = A_base + correction
        slip = rec.A - A_pred
        slip_pct = slip / rec.A * 100.0
        label, _ = phase_slip_category(abs(slip_pct))
        return PredictionResult(
            symbol=rec.symbol,
            A_actual=rec.A,
            A_base=A_base,
            correction=correction,
            A_predicted=A_pred,
            phase_slip=slip,
            phase_slip_pct=slip_pct,
            phase_slip_category=label,
            spinor_position=phase.position,
            fatigue=fatigue_for_period(rec.period),
            symmetry_order=symmetry_order(rec.block),
            harmonic_k=harmonic_index(rec.A),
        )


class PatchedEnergyModel(EnergyModel):
    """
    v4 model: piecewise by period / group with per-group additive patches
    on top of the angular main-group law.
    """

    name = "v4_patched"

    H_A = 13.598
    HE_A = 24.587

    D_BASE = 1.953
    D_K_BASE = 0.079
    D_K_PERIOD = 0.028
    D10_BONUS = 0.279

    MAIN_DECAY = 0.65

    def base_A(self, period: int, group: int, block: str, Z: int) -> float:
        P = int(period)
        g = int(group)

        if P == 1:
            return self.H_A if g == 1 else self.HE_A

        if g == NOBLE_GROUP:
            return noble_gas_law(P)

        if g in F_BLOCK_GROUPS:
            return self._f_block(P, Z)

        if 3 <= g <= 12:
            k_eff = self.D_K_BASE + self.D_K_PERIOD * (P - 4)
            A = E0 * (self.D_BASE + k_eff * (g - 3))
            if g == 12:
                A += self.D10_BONUS * E0
            return A

        return self._main_group(P, g)

    @staticmethod
    def _f_block(period: int, Z: int) -> float:
        if period == 6:
            return 5.44 + 0.068 * (Z - 58)
        return 5.99 + 0.044 * (Z - 90)

    def _main_group(self, P: int, g: int) -> float:
        theta = math.radians(MAIN_GROUP_ANGLE_DEG.get(g, 0.0))
        t = max(0, P - 2)

        if g <= 2:
            w = 7.07 * 0.95**t
        elif g == 13:
            w = 5.0 * 0.95**t
        elif g == AXIS_GROUP:
            w = 0.0
        else:
            w = 5.46 if P == 2 else 1.1**t

        A = A_C + w * math.sin(theta) * K_A - self.MAIN_DECAY * t
        return A + self._group_patch(P, g, t)

    @staticmethod
    def _group_patch(P: int, g: int, t: int) -> float:
        if g == 1:
            return -(1.7 + 0.05 * t)
        if g == 2:
            return -0.3
        if g == 13:
            if P == 2:
                return -1.0
            if P == 3:
                return -2.0
            return -(2.0 + 0.5 * (P - 4))
        if g == 14:
            return -(1.0 + 0.2 * t)
        if g == 15:
            return 0.5 if P == 2 else -0.3
        if g == 16:
            return -0.4
        if g == 17:
            return 2.5 if P == 2 else 0.3
        return 0.0


class VortexEnergyModel(EnergyModel):
    """
    v5.2 model ("vortex inversion"): no group patches, all curvature comes
    from the block symmetry order n via A_axis = A_C / (1 + |n-3| k),
    modulated by period fatigue and spinor breathing.
    """

    name = "v5_2_vortex"
    # breathing already carries the spinor term
    applies_spinor_correction = False

    H_A = 13.60
    HE_CLOSURE = 8.0  # A_He = 8 * E0
    FATIGUE_FALLBACK = 1.5
    BREATHING = 0.15

    def fatigue(self, period: int) -> float:
        return fatigue_for_period(period, default=self.FATIGUE_FALLBACK)

    @staticmethod
    def symmetry_params(n: int) -> tuple[float, float]:
        """(k_symmetry, width_factor) for symmetry order n."""
        if n < 3:
            return 0.15, 0.6
        if n > 3:
            return 0.30, 0.4
        return 0.0, 1.3

    @staticmethod
    def symmetry_decay(n: int) -> float:
        if n <= 1:
            return 0.80
        if n == 3:
            return 0.65
        if n == 5:
            return 0.15
        return 0.05

    @staticmethod
    def angle(group: int) -> float:
        g = int(group)
        if 3 <= g <= 12:
            frac = (g - 3) / 9.0
            return math.radians(-45.0 + 27.0 * frac)
        return math.radians(MAIN_GROUP_ANGLE_DEG.get(g, 0.0))

    def base_A(self, period: int, group: int, block: str, Z: int) -> float:
        P = int(period)
        g = int(group)

        if P == 1:
            return self.H_A if g == 1 else self.HE_CLOSURE * E0

        if block == "noble" or g == NOBLE_GROUP:
            return noble_gas_law(P) * self.fatigue(P)

        n = symmetry_order(block)
        t = max(0, P - 2)

        k_symmetry, width_factor = self.symmetry_params(n)
        A_axis = A_C / (1.0 + abs(n - 3) * k_symmetry)

        if g <= AXIS_GROUP:
            w = 5.46 * 0.95**t
        else:
            w = 1.1**t

        A_intrinsic = A_axis + w * width_factor * math.sin(self.angle(g)) * K_A - self.symmetry_decay(n) * t

        # coherence weight W_c = 1 - 0.3 * t/5
        fatigue_effect = 1.0 + (self.fatigue(P) - 1.0) * (0.3 * t / 5.0)
        breathing = self.BREATHING * math.sin(2.0 * math.pi * Z / SPINOR_PERIOD)
        return A_intrinsic * fatigue_effect * (1.0 + breathing)


_ENERGY_MODELS: Dict[str, EnergyModel] = {
    PatchedEnergyModel.name: PatchedEnergyModel(),
    VortexEnergyModel.name: VortexEnergyModel(),
}


def get_energy_model(name: str | None = None) -> EnergyModel:
    if name is None:
        name = get_current_helicoid_config().energy_model
    try:
        model = _ENERGY_MODELS[name]
    except KeyError:
        raise ValueError(f"Unknown energy model: {name}") from None
    logger.debug("Using energy model %s", model.name)
    return model


def predict_A(period: int, group: int, block: str, Z: int) -> float:
    """Predicted A (eV) with the configured model and spinor setting."""
    cfg = get_current_helicoid_config()
    model = get_energy_model(cfg.energy_model)
    return model.predict_A(period, group, block, Z, apply_spinor=cfg.apply_spinor_correction)


def describe_element(rec: "ElementRecord", config: HelicoidConfig | None = None) -> PredictionResult:
    cfg = config if config is not None else get_current_helicoid_config()
    return get_energy_model(cfg.energy_model).describe(rec, cfg)
