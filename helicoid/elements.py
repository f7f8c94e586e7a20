from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping
import json
import logging

from helicoid.tables import AXIS_GROUP, F_BLOCK_GROUPS, NOBLE_GROUP

logger = logging.getLogger(__name__)

ELEMENTS_DB_PATH = Path(__file__).resolve().parent / "data" / "elements_v1.json"

BLOCKS = ("s", "p", "d", "f", "noble")


@dataclass(frozen=True)
class ElementRecord:
    """
    One element of the helicoid table.

    A is the observed first ionisation energy in eV; the models predict it.
    axis marks group-14 elements (the helicoid axis), sc marks elements shown
    with superconducting-class behaviour.
    """

    symbol: str
    Z: int
    period: int
    group: int  # 1..18, or 101/102 for the lanthanide/actinide rows
    block: str  # s | p | d | f | noble
    name: str
    A: float
    color: int = 0xFFFFFF
    axis: bool = False
    sc: bool = False

    @property
    def is_noble(self) -> bool:
        return self.block == "noble" or self.group == NOBLE_GROUP

    @property
    def is_f_row(self) -> bool:
        return self.group in F_BLOCK_GROUPS

    @property
    def is_d_block(self) -> bool:
        return 3 <= self.group <= 12


def _record_from_row(row: Mapping[str, Any]) -> ElementRecord:
    color = row.get("color", "FFFFFF")
    rec = ElementRecord(
        symbol=str(row["symbol"]),
        Z=int(row["Z"]),
        period=int(row["period"]),
        group=int(row["group"]),
        block=str(row["block"]),
        name=str(row["name"]),
        A=float(row["A"]),
        color=int(color, 16) if isinstance(color, str) else int(color),
        axis=bool(row.get("axis", False)),
        sc=bool(row.get("sc", False)),
    )
    if rec.axis and rec.group != AXIS_GROUP:
        raise ValueError(f"{rec.symbol}: axis element must sit in group {AXIS_GROUP}, got {rec.group}")
    if rec.block not in BLOCKS:
        raise ValueError(f"{rec.symbol}: unknown block {rec.block!r}")
    if not 1 <= rec.period <= 7:
        raise ValueError(f"{rec.symbol}: period out of range: {rec.period}")
    return rec


def _load_elements_from_json(path: Path) -> List[ElementRecord]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    records = [_record_from_row(row) for row in raw]

    seen_symbols: set[str] = set()
    seen_Z: set[int] = set()
    for rec in records:
        if rec.symbol in seen_symbols or rec.Z in seen_Z:
            raise ValueError(f"Duplicate element entry: {rec.symbol} (Z={rec.Z})")
        seen_symbols.add(rec.symbol)
        seen_Z.add(rec.Z)
    return records


def _make_base_elements(path: Path = ELEMENTS_DB_PATH) -> List[ElementRecord]:
    """
    The bundled elements_v1.json is the single source of truth for the table.
    A missing or broken file is a packaging error, not something to recover from.
    """
    if not path.exists():
        raise RuntimeError(f"elements_v1.json not found at {path}. Reinstall the package data.")

    try:
        records = _load_elements_from_json(path)
    except Exception as exc:
        raise RuntimeError(f"Failed to load elements DB from {path}: {exc}") from exc

    logger.debug("Loaded %d element records from %s", len(records), path)
    return records


base_elements: List[ElementRecord] = _make_base_elements()

ELEMENT_TABLE: Mapping[str, ElementRecord] = MappingProxyType(
    {rec.symbol: rec for rec in base_elements}
)


def get_element(symbol: str) -> ElementRecord:
    try:
        return ELEMENT_TABLE[symbol]
    except KeyError:
        raise ValueError(f"Unknown element symbol: {symbol}") from None


def get_elements(symbols: Iterable[str]) -> List[ElementRecord]:
    return [get_element(s) for s in symbols]


def elements_by_period() -> Dict[int, List[ElementRecord]]:
    out: Dict[int, List[ElementRecord]] = {}
    for rec in base_elements:
        out.setdefault(rec.period, []).append(rec)
    return out
