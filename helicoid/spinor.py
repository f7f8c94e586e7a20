from __future__ import annotations

from dataclasses import dataclass
import math

from helicoid.tables import SPINOR_AMPLITUDE, SPINOR_PERIOD

NODE = "NODE"
PEAK = "PEAK"
TROUGH = "TROUGH"
RISING = "rising"
FALLING = "falling"

# (node, extremum) thresholds; correction basis is in eV, sine basis is unitless
_THRESHOLDS = {
    "correction": (0.05, 0.2),
    "sine": (0.1, 0.5),
}


@dataclass(frozen=True)
class PhaseInfo:
    phase_degrees: float
    correction: float
    position: str
    sin_value: float


def spinor_angle(Z: int) -> float:
    return 2.0 * math.pi * Z / SPINOR_PERIOD


def spinor_correction(Z: int) -> float:
    """(E0/11) * sin(2*pi*Z/18): zero at Z = 18, 36, 54, ..."""
    return SPINOR_AMPLITUDE * math.sin(spinor_angle(Z))


def classify_spinor(value: float, basis: str = "correction") -> str:
    try:
        node, extremum = _THRESHOLDS[basis]
    except KeyError:
        raise ValueError(f"Unknown spinor basis: {basis}") from None
    if abs(value) < node:
        return NODE
    if value > extremum:
        return PEAK
    if value < -extremum:
        return TROUGH
    return RISING if value > 0 else FALLING


def spinor_phase(Z: int, basis: str = "correction") -> PhaseInfo:
    """
    Phase of element Z on the 18-periodic spinor.

    basis="correction" classifies on the eV correction (|c| < 0.05 node,
    |c| > 0.2 peak/trough); basis="sine" uses the raw sine with 0.1 / 0.5.
    """
    angle = spinor_angle(Z)
    sin_value = math.sin(angle)
    correction = SPINOR_AMPLITUDE * sin_value
    phase_degrees = math.degrees(angle % (2.0 * math.pi))
    value = correction if basis == "correction" else sin_value
    return PhaseInfo(
        phase_degrees=phase_degrees,
        correction=correction,
        position=classify_spinor(value, basis),
        sin_value=sin_value,
    )
