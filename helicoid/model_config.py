from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import copy
import json
import logging

import yaml

logger = logging.getLogger(__name__)

EMBEDDING_MODELS = ("helicoid_v1",)
ENERGY_MODELS = ("v4_patched", "v5_2_vortex")
COMPOUND_MODELS = ("hardness_v10", "materials_v11")
SPINOR_BASES = ("correction", "sine")
JITTER_MODES = ("midpoint", "random")
MAX_SELECTIONS = 4


@dataclass(frozen=True)
class HelicoidConfig:
    """
    Model selection for the helicoid core.

    The energy and compound revisions carry mutually inconsistent constants,
    so each is picked by name here instead of being blended.
    """

    embedding_model: str = "helicoid_v1"
    energy_model: str = "v4_patched"  # v4_patched | v5_2_vortex
    compound_model: str = "materials_v11"  # hardness_v10 | materials_v11

    # None: each energy model decides (v4 on, v5.2 off)
    apply_spinor_correction: Optional[bool] = None
    spinor_basis: str = "correction"  # correction | sine

    # Bounded jitter in resistivity / magnetism bands
    jitter_mode: str = "midpoint"  # midpoint | random
    jitter_seed: Optional[int] = None

    max_selections: int = MAX_SELECTIONS

    experiment_name: str = "default_helicoid"

    def __post_init__(self) -> None:
        _check_choice("embedding_model", self.embedding_model, EMBEDDING_MODELS)
        _check_choice("energy_model", self.energy_model, ENERGY_MODELS)
        _check_choice("compound_model", self.compound_model, COMPOUND_MODELS)
        _check_choice("spinor_basis", self.spinor_basis, SPINOR_BASES)
        _check_choice("jitter_mode", self.jitter_mode, JITTER_MODES)
        if not 1 <= int(self.max_selections) <= MAX_SELECTIONS:
            raise ValueError(f"max_selections must be in 1..{MAX_SELECTIONS}, got {self.max_selections}")


def _check_choice(name: str, value: str, allowed: tuple[str, ...]) -> None:
    if value not in allowed:
        raise ValueError(f"Unknown {name} {value!r}; expected one of {list(allowed)}")


_CURRENT_HELICOID_CONFIG = HelicoidConfig()


def get_current_helicoid_config() -> HelicoidConfig:
    return _CURRENT_HELICOID_CONFIG


def set_current_helicoid_config(cfg: HelicoidConfig) -> None:
    global _CURRENT_HELICOID_CONFIG
    _CURRENT_HELICOID_CONFIG = cfg


def _load_dict(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Helicoid config {path} must contain a mapping at top level")
    return data


def _strict_from_mapping(d: Mapping[str, Any]) -> HelicoidConfig:
    allowed = {f.name for f in fields(HelicoidConfig)}
    unknown = [k for k in d.keys() if k not in allowed]
    if unknown:
        raise ValueError(f"Unknown helicoid config keys: {unknown}")

    base = HelicoidConfig()
    seed = d.get("jitter_seed", base.jitter_seed)
    spinor = d.get("apply_spinor_correction", base.apply_spinor_correction)
    return HelicoidConfig(
        embedding_model=str(d.get("embedding_model", base.embedding_model)),
        energy_model=str(d.get("energy_model", base.energy_model)),
        compound_model=str(d.get("compound_model", base.compound_model)),
        apply_spinor_correction=bool(spinor) if spinor is not None else None,
        spinor_basis=str(d.get("spinor_basis", base.spinor_basis)),
        jitter_mode=str(d.get("jitter_mode", base.jitter_mode)),
        jitter_seed=int(seed) if seed is not None else None,
        max_selections=int(d.get("max_selections", base.max_selections)),
        experiment_name=str(d.get("experiment_name", base.experiment_name)),
    )


def load_helicoid_config(path_str: str) -> HelicoidConfig:
    """
    Two layouts are accepted:
    1) a standalone file: {energy_model: ..., compound_model: ...}
    2) an experiment YAML with a helicoid section: {helicoid: {...}, ...}
    """
    path = Path(path_str)
    data = _load_dict(path)

    section = data.get("helicoid", None)
    if isinstance(section, dict):
        raw: Dict[str, Any] = section
    else:
        raw = dict(data)

    cfg = _strict_from_mapping(raw)
    logger.info(
        "Loaded helicoid config %s (energy=%s, compound=%s)",
        path,
        cfg.energy_model,
        cfg.compound_model,
    )
    return cfg


@contextmanager
def override_helicoid_config(tmp_cfg: HelicoidConfig):
    old_cfg = copy.deepcopy(get_current_helicoid_config())
    try:
        set_current_helicoid_config(tmp_cfg)
        yield
    finally:
        set_current_helicoid_config(old_cfg)
