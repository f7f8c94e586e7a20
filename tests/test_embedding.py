from __future__ import annotations

import math

import numpy as np
import pytest

from helicoid.elements import get_element
from helicoid.embedding import (
    HELICOID_V1,
    breathing_factor,
    embed,
    embed_element,
    get_embedding_model,
    ribbon_coordinate,
)


def test_period_one_sits_on_primordial_arc() -> None:
    h = embed(1, 1, "s", Z=1)
    he = embed(1, 18, "noble", Z=2)
    assert h.local_coord == -1.0
    assert he.local_coord == 1.0
    assert h.twist == 0.0
    assert h.z == pytest.approx(-2.4)

    r_h = math.hypot(h.x, h.y)
    assert r_h == pytest.approx(0.8 * (1.0 + breathing_factor(1)))
    assert math.degrees(math.atan2(h.y, h.x)) == pytest.approx(-120.0)
    assert math.degrees(math.atan2(he.y, he.x)) == pytest.approx(120.0)


def test_axis_elements_on_the_axis() -> None:
    for sym in ["C", "Si", "Ge", "Sn", "Pb"]:
        pos = embed_element(get_element(sym))
        assert pos.local_coord == 0.0
        assert pos.x == pytest.approx(0.0)
        assert pos.y == pytest.approx(0.0)


def test_layers_and_twist() -> None:
    c = embed(2, 14, "p", Z=6)
    na = embed(3, 1, "s", Z=11)
    assert c.z == pytest.approx(-1.6)
    assert na.z == pytest.approx(-0.8)
    assert c.twist == 0.0
    assert na.twist == pytest.approx(math.pi / 6.0)
    # alkali at t = -1 along the rotated ribbon
    a = HELICOID_V1.semi_axis(3) * (1.0 + breathing_factor(11))
    assert na.x == pytest.approx(-a * math.cos(math.pi / 6.0))
    assert na.y == pytest.approx(-a * math.sin(math.pi / 6.0))


def test_without_Z_there_is_no_breathing() -> None:
    pos = embed(2, 1, "s")
    assert pos.breathing == 0.0
    assert pos.x == pytest.approx(-HELICOID_V1.semi_axis(2))


@pytest.mark.parametrize(
    "group,block,expected",
    [
        (1, "s", -1.0),
        (2, "s", -0.85),
        (3, "d", -0.7),
        (12, "d", -0.25),
        (13, "p", -0.15),
        (17, "p", 0.75),
        (18, "noble", 1.0),
        (101, "f", 0.5),
    ],
)
def test_ribbon_coordinate(group: int, block: str, expected: float) -> None:
    assert ribbon_coordinate(group, block) == pytest.approx(expected)


def test_unknown_group_below_axis_falls_back() -> None:
    assert ribbon_coordinate(5, "f") == pytest.approx(-0.5)


def test_ribbon_centerline_shape() -> None:
    pts = HELICOID_V1.ribbon_centerline(4, segments=10)
    assert pts.shape == (11, 3)
    assert np.allclose(pts[:, 2], 0.0)
    assert np.allclose(pts[5], 0.0)
    with pytest.raises(ValueError):
        HELICOID_V1.ribbon_centerline(1)


def test_primordial_arc_spans_240_degrees() -> None:
    pts = HELICOID_V1.primordial_arc(segments=50)
    angles = np.degrees(np.arctan2(pts[:, 1], pts[:, 0]))
    assert angles[0] == pytest.approx(-120.0)
    assert angles[-1] == pytest.approx(120.0)
    assert np.all(np.abs(angles) <= 120.0 + 1e-9)
    radii = np.hypot(pts[:, 0], pts[:, 1])
    assert np.allclose(radii, HELICOID_V1.arc_radius)
    assert np.allclose(pts[:, 2], HELICOID_V1.layer_z(1))


def test_position_as_array() -> None:
    pos = embed_element(get_element("Fe"))
    arr = pos.as_array()
    assert arr.shape == (3,)
    assert arr[2] == pytest.approx(0.0)


def test_unknown_embedding_model() -> None:
    assert get_embedding_model() is HELICOID_V1
    with pytest.raises(ValueError):
        get_embedding_model("flat_table")
