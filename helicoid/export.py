from __future__ import annotations

from pathlib import Path
import logging

import pandas as pd

from helicoid.elements import base_elements
from helicoid.embedding import embed_element, get_embedding_model
from helicoid.energy_model import describe_element
from helicoid.model_config import HelicoidConfig, get_current_helicoid_config
from helicoid.spinor import spinor_phase

logger = logging.getLogger(__name__)


def element_table_frame(config: HelicoidConfig | None = None) -> pd.DataFrame:
    """One row per registry element: identity, 3D position, prediction, spinor."""
    cfg = config if config is not None else get_current_helicoid_config()
    model = get_embedding_model(cfg.embedding_model)

    rows = []
    for rec in base_elements:
        pos = embed_element(rec, model)
        res = describe_element(rec, cfg)
        phase = spinor_phase(rec.Z, basis=cfg.spinor_basis)
        rows.append(
            {
                "Z": rec.Z,
                "symbol": rec.symbol,
                "name": rec.name,
                "period": rec.period,
                "group": rec.group,
                "block": rec.block,
                "axis": rec.axis,
                "sc": rec.sc,
                "x": pos.x,
                "y": pos.y,
                "z": pos.z,
                "ribbon_t": pos.local_coord,
                "twist": pos.twist,
                "A": rec.A,
                "A_base": res.A_base,
                "A_pred": res.A_predicted,
                "phase_slip": res.phase_slip,
                "phase_slip_pct": res.phase_slip_pct,
                "phase_slip_category": res.phase_slip_category,
                "fatigue": res.fatigue,
                "symmetry_order": res.symmetry_order,
                "harmonic_k": res.harmonic_k,
                "spinor_phase_deg": phase.phase_degrees,
                "spinor_correction": phase.correction,
                "spinor_position": phase.position,
            }
        )

    df = pd.DataFrame(rows).sort_values("Z").reset_index(drop=True)
    df["energy_model"] = cfg.energy_model
    return df


def export_element_table(path: str | Path, config: HelicoidConfig | None = None) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df = element_table_frame(config)
    df.to_csv(out, index=False)
    logger.info("Wrote %d element rows to %s", len(df), out)
    return out
