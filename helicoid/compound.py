from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence
import logging
import math

import numpy as np

from helicoid.elements import ElementRecord, get_elements
from helicoid.model_config import HelicoidConfig, get_current_helicoid_config
from helicoid.tables import (
    A_REFERENCE,
    AXIS_GROUP,
    E0,
    FERROMAGNETIC_SYMBOLS,
    GAMMA,
    PARAMAGNETIC_SYMBOLS,
    compound_angle_deg,
    fatigue_for_period,
)

logger = logging.getLogger(__name__)

# Stability / bond labels
GEOMETRIC_RESONANCE = "Geometric Resonance"
BULK_TENSION = "Bulk Tension"
METRIC_RELAXATION = "Metric Relaxation"

COVALENT_NETWORK = "Covalent Network"
MIXED = "Mixed Covalent-Metallic"
METALLIC = "Metallic"

CONDUCTOR = "Conductor"
SEMICONDUCTOR = "Semiconductor"
INSULATOR = "Insulator"

FERROMAGNETIC = "Ferromagnetic"
PARAMAGNETIC = "Paramagnetic"
DIAMAGNETIC = "Diamagnetic"

# Hardness v10
BINARY_STRETCH_PENALTY = 0.85
TORQUE_SIGN_THRESHOLD = 0.1
AXIS_BONUS_WEIGHT = 1.2
LATTICE_SLIP_WEIGHT = 0.29  # (2/3)^2 * (2/3) for axis elements below period 2
NITROGEN_BONUS_WEIGHT = 0.8
HYBRID_PERIOD_EXPONENT = 1.5
PURE_PERIOD_EXPONENT = 2.0
REBOUND_FATIGUE_MIN = 1.2
PURE_METAL_COVALENT_MAX = 0.2
VICKERS_SCALE = 8.9

# Material caps / bands
THERMAL_CAP = 2500.0
ELECTRICAL_CAP = 100.0
MELTING_CAP = 4500.0
RESISTIVITY_COVALENT_BAND = (95.0, 100.0)
FERROMAGNETIC_BAND = (80.0, 100.0)
PARAMAGNETIC_BAND = (20.0, 40.0)
DIAMAGNETIC_SCORE = 5.0
SEMICONDUCTOR_GAP_CLAMP = (0.5, 1.5)
SEMICONDUCTOR_SYMBOLS = frozenset({"Si", "Ge"})


@dataclass(frozen=True)
class ElementContribution:
    symbol: str
    torque: float
    electronegativity: float
    covalent_character: float
    fatigue: float


@dataclass(frozen=True)
class CompoundPrediction:
    formula: str
    symbols: tuple[str, ...]
    n: int
    tau_net: float
    omega_avg: float
    A_avg: float
    covalent_avg: float
    P_max: int
    max_fatigue: float
    stability: float
    stability_class: str
    bond_type: str
    hardness: float
    binary_stretch: float
    axis_contribution: float
    axis_bonus: float
    nitrogen_bonus: float
    period_effective: float
    period_exponent: float
    relativistic_rebound: float
    details: tuple[ElementContribution, ...]

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["symbols"] = list(self.symbols)
        out["details"] = [asdict(d) for d in self.details]
        return out


@dataclass(frozen=True)
class MaterialPrediction(CompoundPrediction):
    bandgap: float
    electrical_conductivity: float
    conductor_class: str
    thermal_conductivity: float
    melting_point: float
    resistivity: float
    ductility: float
    corrosion_resistance: float
    density: float
    magnetism: float
    magnetic_class: str


class JitterSource:
    """
    Bounded jitter for the few banded material values.

    midpoint: the centre of the band (deterministic).
    random: uniform inside the band from numpy's default_rng(seed).
    """

    def __init__(self, mode: str = "midpoint", seed: int | None = None) -> None:
        if mode not in ("midpoint", "random"):
            raise ValueError(f"Unknown jitter mode: {mode}")
        self.mode = mode
        self._rng = np.random.default_rng(seed) if mode == "random" else None

    @classmethod
    def from_config(cls, cfg: HelicoidConfig) -> "JitterSource":
        return cls(cfg.jitter_mode, cfg.jitter_seed)

    def band(self, lo: float, hi: float) -> float:
        if self._rng is None:
            return 0.5 * (lo + hi)
        return float(self._rng.uniform(lo, hi))


# ============================================================
# PER-ELEMENT QUANTITIES
# ============================================================


def metric_torque(rec: ElementRecord) -> float:
    """tau = A_actual - A_predicted; elements without a reference value give 0."""
    return rec.A - A_REFERENCE.get(rec.symbol, rec.A)


def derived_electronegativity(rec: ElementRecord, tau: float) -> float:
    theta_norm = (compound_angle_deg(rec.group) + 90.0) / 180.0
    omega = (
        1.625
        + 2.916 * theta_norm
        - 0.753 * math.log(rec.Z) / math.pow(rec.period, GAMMA)
        + 0.160 * tau
    )
    return max(0.5, omega)


def covalent_character(group: int, period: int) -> float:
    g = int(group)
    if g == AXIS_GROUP:
        return 1.0
    if 15 <= g <= 17:
        return 0.9
    if g == 13:
        return 0.8 if int(period) == 2 else 0.15
    if 3 <= g <= 12:
        return 0.15
    return 0.05


def element_contribution(rec: ElementRecord) -> ElementContribution:
    tau = metric_torque(rec)
    return ElementContribution(
        symbol=rec.symbol,
        torque=tau,
        electronegativity=derived_electronegativity(rec, tau),
        covalent_character=covalent_character(rec.group, rec.period),
        fatigue=fatigue_for_period(rec.period),
    )


def stability_from_torque(tau_net: float) -> float:
    return math.exp(-abs(tau_net) / E0)


def stability_class(tau_net: float) -> str:
    if abs(tau_net) < 0.3:
        return GEOMETRIC_RESONANCE
    if tau_net > 0:
        return BULK_TENSION
    return METRIC_RELAXATION


def bond_type(covalent_avg: float) -> str:
    if covalent_avg > 0.7:
        return COVALENT_NETWORK
    if covalent_avg > 0.3:
        return MIXED
    return METALLIC


def conductor_class(electrical_conductivity: float) -> str:
    if electrical_conductivity > 50.0:
        return CONDUCTOR
    if electrical_conductivity > 5.0:
        return SEMICONDUCTOR
    return INSULATOR


def magnetic_class(score: float) -> str:
    if score > 60.0:
        return FERROMAGNETIC
    if score > 15.0:
        return PARAMAGNETIC
    return DIAMAGNETIC


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


# ============================================================
# MODELS
# ============================================================


class CompoundModel:
    """
    Hardness v10: binary stretch + lattice slip + relativistic rebound.

    Aggregates the per-element torques into tau_net and builds the headline
    outputs (hardness, stability, bond type).
    """

    name = "hardness_v10"

    def predict(
        self,
        elements: Sequence[ElementRecord],
        *,
        config: HelicoidConfig | None = None,
        jitter: JitterSource | None = None,
    ) -> Optional[CompoundPrediction]:
        cfg = config if config is not None else get_current_helicoid_config()
        elements = list(elements)
        if not elements:
            logger.debug("Empty selection, nothing to predict")
            return None
        _check_selection(elements, cfg.max_selections)
        return CompoundPrediction(**self._core(elements))

    def _core(self, elements: List[ElementRecord]) -> Dict[str, Any]:
        details = tuple(element_contribution(rec) for rec in elements)
        n = len(elements)

        taus = [d.torque for d in details]
        periods = [rec.period for rec in elements]
        tau_net = sum(taus)
        omega_avg = sum(d.electronegativity for d in details) / n
        A_avg = sum(rec.A for rec in elements) / n
        cov_avg = sum(d.covalent_character for d in details) / n
        P_max = max(periods)
        max_fatigue = max(d.fatigue for d in details)

        stability = stability_from_torque(tau_net)

        # 1. Binary stretch: opposing torques strain the interface
        binary_stretch = 1.0
        if n >= 2:
            has_positive = any(t > TORQUE_SIGN_THRESHOLD for t in taus)
            has_negative = any(t < -TORQUE_SIGN_THRESHOLD for t in taus)
            if has_positive and has_negative:
                binary_stretch = BINARY_STRETCH_PENALTY

        # 2. Axis bonus with lattice slip
        axis_p2 = sum(1 for rec in elements if rec.group == AXIS_GROUP and rec.period == 2)
        axis_p3plus = sum(1 for rec in elements if rec.group == AXIS_GROUP and rec.period != 2)
        axis_contribution = axis_p2 + axis_p3plus * LATTICE_SLIP_WEIGHT
        axis_bonus = 1.0 + AXIS_BONUS_WEIGHT * (axis_contribution / n)

        # 3. Nitrogen bonus
        nitrogen_count = sum(1 for rec in elements if rec.symbol == "N")
        nitrogen_bonus = 1.0 + NITROGEN_BONUS_WEIGHT * (nitrogen_count / n)

        # 4. Period penalty
        has_dblock = any(rec.is_d_block for rec in elements)
        has_pblock_covalent = any(
            13 <= rec.group <= 17 and d.covalent_character > 0.5
            for rec, d in zip(elements, details)
        )
        if has_dblock and has_pblock_covalent and n >= 2:
            P_eff = math.prod(periods) ** (1.0 / n)
            period_exp = HYBRID_PERIOD_EXPONENT
        else:
            P_eff = float(P_max)
            period_exp = PURE_PERIOD_EXPONENT

        H_raw = A_avg * axis_bonus * nitrogen_bonus * cov_avg * binary_stretch / math.pow(P_eff, period_exp)

        # 5. Relativistic rebound for a single heavy pure metal
        rebound = 1.0
        if n == 1 and cov_avg < PURE_METAL_COVALENT_MAX and max_fatigue > REBOUND_FATIGUE_MIN:
            rebound = math.pow(max_fatigue, 1.5)

        return dict(
            formula="".join(rec.symbol for rec in elements),
            symbols=tuple(rec.symbol for rec in elements),
            n=n,
            tau_net=tau_net,
            omega_avg=omega_avg,
            A_avg=A_avg,
            covalent_avg=cov_avg,
            P_max=P_max,
            max_fatigue=max_fatigue,
            stability=stability,
            stability_class=stability_class(tau_net),
            bond_type=bond_type(cov_avg),
            hardness=H_raw * rebound * VICKERS_SCALE,
            binary_stretch=binary_stretch,
            axis_contribution=axis_contribution,
            axis_bonus=axis_bonus,
            nitrogen_bonus=nitrogen_bonus,
            period_effective=P_eff,
            period_exponent=period_exp,
            relativistic_rebound=rebound,
            details=details,
        )


class MaterialCompoundModel(CompoundModel):
    """
    Hardness v10 plus ten derived material properties.

    Everything is a closed-form function of the selection except the banded
    values (covalent resistivity ceiling, ferro/paramagnetic scores), which
    come from the JitterSource.
    """

    name = "materials_v11"

    def predict(
        self,
        elements: Sequence[ElementRecord],
        *,
        config: HelicoidConfig | None = None,
        jitter: JitterSource | None = None,
    ) -> Optional[MaterialPrediction]:
        cfg = config if config is not None else get_current_helicoid_config()
        elements = list(elements)
        if not elements:
            logger.debug("Empty selection, nothing to predict")
            return None
        _check_selection(elements, cfg.max_selections)
        if jitter is None:
            jitter = JitterSource.from_config(cfg)

        core = self._core(elements)
        core.update(self._materials(elements, core, jitter))
        return MaterialPrediction(**core)

    def _materials(
        self,
        elements: List[ElementRecord],
        core: Dict[str, Any],
        jitter: JitterSource,
    ) -> Dict[str, Any]:
        n = core["n"]
        cov = core["covalent_avg"]
        stability = core["stability"]
        A_avg = core["A_avg"]
        P_max = core["P_max"]
        bond = core["bond_type"]
        formula = core["formula"]

        # Bandgap: zero for metals, resonance-driven otherwise
        if bond == METALLIC:
            gap = 0.0
        else:
            gap = 1.5 * (A_avg / E0) * cov * (0.5 + 0.5 * stability) / max(P_max - 1, 1)
            if bond == MIXED:
                gap *= cov
            if any(rec.symbol in SEMICONDUCTOR_SYMBOLS for rec in elements):
                lo, hi = SEMICONDUCTOR_GAP_CLAMP
                clamped = _clamp(gap, lo, hi)
                if clamped != gap:
                    logger.debug("%s: bandgap clamped %.3f -> %.3f", formula, gap, clamped)
                gap = clamped

        # Electrical conductivity (0..100)
        sigma = 120.0 * (1.0 - cov) ** 2 * stability * math.sqrt(2.0 / P_max)
        sigma += 30.0 * cov * max(P_max - 2, 0) / P_max
        if gap > 3.0:
            sigma *= 0.01
        elif gap > 0.0:
            sigma *= 0.6
        if sigma > ELECTRICAL_CAP:
            logger.debug("%s: electrical conductivity capped at %.0f", formula, ELECTRICAL_CAP)
        sigma = _clamp(sigma, 0.0, ELECTRICAL_CAP)

        # Thermal conductivity: phonon (axis network) + electron part
        phonon = 3000.0 * cov * (core["axis_contribution"] / n) * stability / (core["period_effective"] / 2.0) ** 2
        electron = 450.0 * (1.0 - cov) * stability / math.sqrt(P_max)
        thermal = phonon + electron
        if thermal > THERMAL_CAP:
            logger.debug("%s: thermal conductivity capped at %.0f", formula, THERMAL_CAP)
        thermal = min(thermal, THERMAL_CAP)

        melting = 1000.0 * (A_avg / E0) * (0.5 + cov) * stability * core["axis_bonus"] * core["relativistic_rebound"]
        melting = min(melting, MELTING_CAP)

        if cov > 0.7:
            resistivity = jitter.band(*RESISTIVITY_COVALENT_BAND)
        else:
            resistivity = _clamp(100.0 - sigma, 0.0, 100.0)

        ductility = 50.0 * (1.0 - math.tanh(core["tau_net"])) * (1.0 - 0.8 * cov)
        if bond == METALLIC:
            ductility = ductility * 1.4 + 10.0
        ductility = _clamp(ductility, 0.0, 100.0)

        noble_avg = sum(
            (1.0 + math.sin(math.radians(compound_angle_deg(rec.group)))) / 2.0 for rec in elements
        ) / n
        corrosion = _clamp(100.0 * (0.6 * stability + 0.4 * noble_avg), 0.0, 100.0)

        volume = sum((0.8 + 0.1 * rec.period) ** 3 for rec in elements)
        density = 0.5 * sum(rec.Z for rec in elements) / volume

        scores = [self._magnetic_score(rec, jitter) for rec in elements]
        magnetism = sum(scores) / n

        return dict(
            bandgap=gap,
            electrical_conductivity=sigma,
            conductor_class=conductor_class(sigma),
            thermal_conductivity=thermal,
            melting_point=melting,
            resistivity=resistivity,
            ductility=ductility,
            corrosion_resistance=corrosion,
            density=density,
            magnetism=magnetism,
            magnetic_class=magnetic_class(magnetism),
        )

    @staticmethod
    def _magnetic_score(rec: ElementRecord, jitter: JitterSource) -> float:
        if rec.symbol in FERROMAGNETIC_SYMBOLS:
            return jitter.band(*FERROMAGNETIC_BAND)
        if rec.symbol in PARAMAGNETIC_SYMBOLS:
            return jitter.band(*PARAMAGNETIC_BAND)
        return DIAMAGNETIC_SCORE


def _check_selection(elements: List[ElementRecord], max_selections: int) -> None:
    if len(elements) > max_selections:
        raise ValueError(f"At most {max_selections} elements can be combined, got {len(elements)}")
    symbols = [rec.symbol for rec in elements]
    if len(set(symbols)) != len(symbols):
        raise ValueError(f"Duplicate elements in selection: {symbols}")


_COMPOUND_MODELS: Dict[str, CompoundModel] = {
    CompoundModel.name: CompoundModel(),
    MaterialCompoundModel.name: MaterialCompoundModel(),
}


def get_compound_model(name: str | None = None) -> CompoundModel:
    if name is None:
        name = get_current_helicoid_config().compound_model
    try:
        return _COMPOUND_MODELS[name]
    except KeyError:
        raise ValueError(f"Unknown compound model: {name}") from None


def predict(
    selection: Sequence[ElementRecord],
    *,
    config: HelicoidConfig | None = None,
    jitter: JitterSource | None = None,
) -> Optional[CompoundPrediction]:
    """Compound prediction for 1..4 elements; None for an empty selection."""
    cfg = config if config is not None else get_current_helicoid_config()
    model = get_compound_model(cfg.compound_model)
    return model.predict(selection, config=cfg, jitter=jitter)


def predict_symbols(symbols: Iterable[str], **kwargs: Any) -> Optional[CompoundPrediction]:
    return predict(get_elements(symbols), **kwargs)
