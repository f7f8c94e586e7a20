from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from helicoid.compound import CompoundPrediction, predict
from helicoid.elements import ElementRecord
from helicoid.model_config import HelicoidConfig, get_current_helicoid_config

# (lower bound, band, line colour)
STABILITY_BANDS = (
    (0.8, "green", "#00FF00"),
    (0.5, "yellow", "#FFFF00"),
)
UNSTABLE_BAND = ("red", "#FF4444")


def stability_band(stability: float) -> Tuple[str, str]:
    """(band name, hex colour) for a stability value in (0, 1]."""
    for lower, band, color in STABILITY_BANDS:
        if stability > lower:
            return band, color
    return UNSTABLE_BAND


class SelectionSet:
    """Ordered, duplicate-free selection of at most `capacity` elements."""

    def __init__(self, capacity: int = 4) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = int(capacity)
        self._items: List[ElementRecord] = []

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, rec: object) -> bool:
        return rec in self._items

    def __iter__(self):
        return iter(tuple(self._items))

    @property
    def symbols(self) -> List[str]:
        return [rec.symbol for rec in self._items]

    def toggle(self, rec: ElementRecord) -> bool:
        """Add or remove rec; returns whether it is selected afterwards."""
        if rec in self._items:
            self._items.remove(rec)
            return False
        if len(self._items) >= self.capacity:
            return False
        self._items.append(rec)
        return True

    def clear(self) -> None:
        self._items.clear()

    def snapshot(self) -> Tuple[ElementRecord, ...]:
        return tuple(self._items)


@dataclass(frozen=True)
class BondLine:
    i: int
    j: int
    band: str
    color: str


@dataclass
class ExplorerState:
    """
    Interactive combination state, owned by the caller and passed to handlers.

    Disabling the explorer clears the selection. Predictions are recomputed
    from a snapshot on every call; nothing is cached.
    """

    config: HelicoidConfig = field(default_factory=get_current_helicoid_config)
    enabled: bool = False
    selection: SelectionSet = field(init=False)

    def __post_init__(self) -> None:
        self.selection = SelectionSet(self.config.max_selections)

    def toggle_enabled(self) -> bool:
        self.enabled = not self.enabled
        if not self.enabled:
            self.selection.clear()
        return self.enabled

    def click(self, rec: ElementRecord) -> bool:
        if not self.enabled:
            return False
        return self.selection.toggle(rec)

    def evaluate(self) -> Optional[CompoundPrediction]:
        return predict(self.selection.snapshot(), config=self.config)

    def bond_lines(self) -> List[BondLine]:
        """One line per unordered pair of selected elements, coloured by stability."""
        elements = self.selection.snapshot()
        if len(elements) < 2:
            return []
        pred = predict(elements, config=self.config)
        band, color = stability_band(pred.stability)
        return [
            BondLine(i, j, band, color)
            for i in range(len(elements))
            for j in range(i + 1, len(elements))
        ]
