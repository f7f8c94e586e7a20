from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, TYPE_CHECKING
import math

import numpy as np

from helicoid.model_config import get_current_helicoid_config
from helicoid.tables import (
    AXIS_GROUP,
    BREATHING_SCALE,
    D_BLOCK_COORD_START,
    D_BLOCK_COORD_STEP,
    RIBBON_COORD_BY_GROUP,
    RIBBON_COORD_FALLBACK,
    SPINOR_PERIOD,
    TWIST_PER_PERIOD,
)

if TYPE_CHECKING:
    from helicoid.elements import ElementRecord


@dataclass(frozen=True)
class Position3D:
    x: float
    y: float
    z: float
    local_coord: float  # t in [-1, 1] along the ribbon
    twist: float  # radians
    breathing: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)


def breathing_factor(Z: int | None, scale: float = BREATHING_SCALE) -> float:
    """Radial spinor breathing: scale * sin(2*pi*Z/18); 0 when Z is unknown."""
    if not Z:
        return 0.0
    return scale * math.sin(2.0 * math.pi * Z / SPINOR_PERIOD)


def ribbon_coordinate(group: int, block: str) -> float:
    g = int(group)
    if g in RIBBON_COORD_BY_GROUP:
        return RIBBON_COORD_BY_GROUP[g]
    if g < AXIS_GROUP:
        if block == "d":
            return D_BLOCK_COORD_START + (g - 3) * D_BLOCK_COORD_STEP
        return -RIBBON_COORD_FALLBACK
    return RIBBON_COORD_FALLBACK


@dataclass(frozen=True)
class EmbeddingModel:
    """
    Helicoid layout: period 1 on a 240° arc, periods 2..7 on flat ribbons
    through the group-14 axis, each rotated by a fixed twist per period.
    """

    name: str = "helicoid_v1"
    arc_radius: float = 0.8
    arc_angle: float = 2.0 * math.pi / 3.0  # H at -120°, He at +120°
    base_semi_axis: float = 1.2
    semi_axis_step: float = 0.25
    twist_per_period: float = TWIST_PER_PERIOD
    layer_spacing: float = 0.8
    center_period: int = 4
    breathing_scale: float = BREATHING_SCALE

    def layer_z(self, period: int) -> float:
        return (int(period) - self.center_period) * self.layer_spacing

    def semi_axis(self, period: int) -> float:
        return self.base_semi_axis + self.semi_axis_step * (int(period) - 2)

    def twist(self, period: int) -> float:
        if int(period) <= 1:
            return 0.0
        return (int(period) - 2) * self.twist_per_period

    def embed(self, period: int, group: int, block: str, Z: int | None = None) -> Position3D:
        breathing = breathing_factor(Z, self.breathing_scale)
        z = self.layer_z(period)

        if int(period) == 1:
            radius = self.arc_radius * (1.0 + breathing)
            if int(group) == 1:
                angle, t = -self.arc_angle, -1.0
            else:
                angle, t = self.arc_angle, 1.0
            return Position3D(
                x=radius * math.cos(angle),
                y=radius * math.sin(angle),
                z=z,
                local_coord=t,
                twist=0.0,
                breathing=breathing,
            )

        a = self.semi_axis(period)
        twist = self.twist(period)
        t = ribbon_coordinate(group, block)

        x_local = t * a * (1.0 + breathing)
        y_local = 0.0
        x = x_local * math.cos(twist) - y_local * math.sin(twist)
        y = x_local * math.sin(twist) + y_local * math.cos(twist)
        return Position3D(x=x, y=y, z=z, local_coord=t, twist=twist, breathing=breathing)

    def ribbon_centerline(self, period: int, segments: int = 100) -> np.ndarray:
        """Centre line of a period ribbon, t from -1 to +1, shape (segments+1, 3)."""
        if int(period) < 2:
            raise ValueError("period 1 has no ribbon; use primordial_arc()")
        t = np.linspace(-1.0, 1.0, max(int(segments), 1) + 1)
        twist = self.twist(period)
        x_local = t * self.semi_axis(period)
        pts = np.zeros((t.size, 3), dtype=float)
        pts[:, 0] = x_local * np.cos(twist)
        pts[:, 1] = x_local * np.sin(twist)
        pts[:, 2] = self.layer_z(period)
        return pts

    def primordial_arc(self, segments: int = 50) -> np.ndarray:
        """Period-1 arc from -120° through 0° to +120°, at fixed radius off the axis."""
        angles = np.linspace(-self.arc_angle, self.arc_angle, max(int(segments), 1) + 1)
        pts = np.zeros((angles.size, 3), dtype=float)
        pts[:, 0] = self.arc_radius * np.cos(angles)
        pts[:, 1] = self.arc_radius * np.sin(angles)
        pts[:, 2] = self.layer_z(1)
        return pts


HELICOID_V1 = EmbeddingModel()

_EMBEDDING_MODELS: Dict[str, EmbeddingModel] = {HELICOID_V1.name: HELICOID_V1}


def get_embedding_model(name: str | None = None) -> EmbeddingModel:
    if name is None:
        name = get_current_helicoid_config().embedding_model
    try:
        return _EMBEDDING_MODELS[name]
    except KeyError:
        raise ValueError(f"Unknown embedding model: {name}") from None


def embed(period: int, group: int, block: str, Z: int | None = None) -> Position3D:
    return get_embedding_model().embed(period, group, block, Z)


def embed_element(rec: "ElementRecord", model: EmbeddingModel | None = None) -> Position3D:
    m = model if model is not None else get_embedding_model()
    return m.embed(rec.period, rec.group, rec.block, rec.Z)
