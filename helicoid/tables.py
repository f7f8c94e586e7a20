from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping

# ============================================================
# FUNDAMENTAL CONSTANTS
# ============================================================

E0 = 3.0709  # eV, energy scale from the carbon 11-channel lock
GAMMA = 2.0 / 3.0  # boundary/bulk coupling
A_C = 11.260  # eV, axis reference (carbon)
K_A = 0.544  # angular coupling

SPINOR_PERIOD = 18
SPINOR_AMPLITUDE = E0 / 11.0
N_CHANNELS = SPINOR_PERIOD * GAMMA - 1.0  # = 11
BREATHING_SCALE = 0.15

TWIST_PER_PERIOD = math.pi / 6.0

LANTHANIDE_GROUP = 101
ACTINIDE_GROUP = 102
F_BLOCK_GROUPS = frozenset({LANTHANIDE_GROUP, ACTINIDE_GROUP})
AXIS_GROUP = 14
NOBLE_GROUP = 18

# ============================================================
# LOOKUP TABLES
# ============================================================

FATIGUE_BY_PERIOD: Mapping[int, float] = MappingProxyType(
    {
        1: 0.82,  # primordial arc
        2: 1.00,  # carbon axis, reference
        3: 1.08,
        4: 1.24,  # d-block emergence
        5: 1.35,
        6: 1.52,  # lanthanide contraction
        7: 2.10,
    }
)

MAIN_GROUP_ANGLE_DEG: Mapping[int, float] = MappingProxyType(
    {1: -90.0, 2: -54.0, 13: -18.0, 14: 0.0, 15: 27.0, 16: 54.0, 17: 90.0}
)

# Position along a period ribbon: -1 = alkali edge, 0 = axis, +1 = noble edge.
RIBBON_COORD_BY_GROUP: Mapping[int, float] = MappingProxyType(
    {
        1: -1.0,
        2: -0.85,
        13: -0.15,
        14: 0.0,
        15: 0.25,
        16: 0.50,
        17: 0.75,
        18: 1.0,
    }
)
D_BLOCK_COORD_START = -0.7
D_BLOCK_COORD_STEP = 0.05
RIBBON_COORD_FALLBACK = 0.5

# Precomputed model A values used as torque reference by the compound engine.
A_REFERENCE: Mapping[str, float] = MappingProxyType(
    {
        "H": 13.598,
        "He": 24.587,
        "Li": 5.716,
        "Be": 7.848,
        "B": 9.420,
        "C": 11.260,
        "N": 13.108,
        "O": 13.263,
        "F": 16.728,
        "Ne": 21.303,
        "Na": 5.061,
        "Mg": 7.198,
        "Al": 6.770,
        "Si": 9.610,
        "P": 10.158,
        "S": 10.313,
        "Cl": 12.678,
        "Ar": 16.257,
        "K": 4.411,
        "Ca": 6.548,
        "Ti": 6.510,
        "V": 6.752,
        "Cr": 6.995,
        "Fe": 7.480,
        "Co": 7.723,
        "Ni": 7.966,
        "Cu": 8.208,
        "Zn": 9.309,
        "W": 7.551,
        "Os": 8.036,
    }
)

SYMMETRY_ORDER_BY_BLOCK: Mapping[str, int] = MappingProxyType(
    {"noble": 0, "s": 1, "p": 3, "d": 5, "f": 7}
)

SYMMETRY_NAMES: Mapping[int, str] = MappingProxyType(
    {0: "Sealed", 1: "Primordial", 3: "Tetrahedral", 5: "Penta", 7: "Septa"}
)

FERROMAGNETIC_SYMBOLS = frozenset({"Fe", "Co", "Ni", "Gd"})
PARAMAGNETIC_SYMBOLS = frozenset(
    {
        "Li", "Na", "K", "Rb", "Cs", "Mg", "Ca", "Sr", "Ba", "Al", "O",
        "Sc", "Ti", "V", "Cr", "Mn", "Y", "Zr", "Nb", "Mo", "Tc", "Ru",
        "Rh", "Pd", "La", "Ce", "Hf", "Ta", "W", "Re", "Os", "Ir", "Pt",
        "Th", "U",
    }
)


def fatigue_for_period(period: int, default: float = 1.0) -> float:
    return float(FATIGUE_BY_PERIOD.get(int(period), default))


def compound_angle_deg(group: int) -> float:
    """
    Angular position used by the compound engine.

    Unlike MAIN_GROUP_ANGLE_DEG this interpolates the d-block in 9° steps
    from -45° and puts group 18 on the +90° edge.
    """
    g = int(group)
    if g <= 2:
        return -90.0 if g == 1 else -54.0
    if g <= 12:
        return -45.0 + (g - 3) * 9.0
    if g == NOBLE_GROUP:
        return 90.0
    return float(MAIN_GROUP_ANGLE_DEG.get(g, 0.0))


def symmetry_order(block: str) -> int:
    return int(SYMMETRY_ORDER_BY_BLOCK.get(str(block), 1))


def symmetry_name(n: int) -> str:
    return SYMMETRY_NAMES.get(int(n), "Unknown")


def fine_structure_inverse() -> float:
    """1/alpha = T^2 - N(T-1) + N/(T(T-1)) with T = 18, N = 11."""
    T = float(SPINOR_PERIOD)
    N = N_CHANNELS
    return T * T - N * (T - 1.0) + N / (T * (T - 1.0))
