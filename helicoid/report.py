from __future__ import annotations

from typing import Iterable, List, Optional

from helicoid.compound import CompoundPrediction, MaterialPrediction
from helicoid.elements import ElementRecord, base_elements
from helicoid.energy_model import describe_element, get_energy_model
from helicoid.explorer import stability_band
from helicoid.model_config import HelicoidConfig, get_current_helicoid_config
from helicoid.spinor import NODE
from helicoid.tables import AXIS_GROUP, E0, SPINOR_PERIOD, symmetry_name


def _signed(value: float, digits: int = 3) -> str:
    return f"{value:+.{digits}f}"


def format_element_tooltip(rec: ElementRecord, config: HelicoidConfig | None = None) -> str:
    """Hover text for one element: identity, block symmetry, observed vs predicted A, fatigue, spinor phase."""
    cfg = config if config is not None else get_current_helicoid_config()
    model = get_energy_model(cfg.energy_model)
    res = model.describe(rec, cfg)

    ratio = f"{rec.A / E0:.3f}"
    if res.harmonic_k is not None:
        ratio += f" ~ 11/{res.harmonic_k}"

    lines = [
        rec.symbol,
        rec.name,
        f"Z = {rec.Z}, Period {rec.period}, Group {rec.group}",
        f"Block: {rec.block} | n = {res.symmetry_order} ({symmetry_name(res.symmetry_order)})",
        f"A (actual) = {rec.A:.3f} eV",
        f"A (predicted, {cfg.energy_model}) = {res.A_predicted:.3f} eV",
        f"Error = {_signed(res.phase_slip)} eV ({res.phase_slip_pct:.1f}%) [{res.phase_slip_category}]",
        f"Fatigue f(P) = {res.fatigue:.2f}",
        f"A/E_0 = {ratio}",
    ]
    if model.spinor_enabled(cfg.apply_spinor_correction):
        lines.append(f"Spinor: {res.spinor_position} ({_signed(res.correction)} eV)")
    else:
        lines.append(f"Spinor: {res.spinor_position} (in breathing term)")
    if rec.axis or rec.group == AXIS_GROUP:
        lines.append(f"* Carbon Axis (Group {AXIS_GROUP})")
    if rec.sc:
        lines.append("* Superconductor")
    if res.spinor_position == NODE:
        lines.append(f"* Spinor Node (Z mod {SPINOR_PERIOD} = {rec.Z % SPINOR_PERIOD})")
    return "\n".join(lines)


def format_compound_panel(pred: Optional[CompoundPrediction]) -> str:
    if pred is None:
        return "No elements selected"

    band, _ = stability_band(pred.stability)
    bond = pred.bond_type
    if pred.binary_stretch < 1.0:
        bond += " (interface strain)"

    lines = [
        pred.formula,
        "",
        f"Net Torque (tau): {_signed(pred.tau_net)} eV",
        f"Stability: {pred.stability * 100:.1f}% ({pred.stability_class}, {band})",
        f"Bond Type: {bond}",
        f"Avg Electronegativity: {pred.omega_avg:.2f}",
        f"Predicted Hardness: {pred.hardness:.1f} GPa (Vickers, Diamond=100)",
    ]

    if isinstance(pred, MaterialPrediction):
        lines.extend(
            [
                "",
                "Material properties",
                f"- Bandgap: {pred.bandgap:.2f} eV",
                f"- Electrical conductivity: {pred.electrical_conductivity:.1f} ({pred.conductor_class})",
                f"- Resistivity: {pred.resistivity:.1f}",
                f"- Thermal conductivity: {pred.thermal_conductivity:.0f} W/mK",
                f"- Melting point: {pred.melting_point:.0f} K",
                f"- Ductility: {pred.ductility:.1f}",
                f"- Corrosion resistance: {pred.corrosion_resistance:.1f}",
                f"- Density: {pred.density:.2f} g/cm3",
                f"- Magnetism: {pred.magnetism:.1f} ({pred.magnetic_class})",
            ]
        )

    lines.append("")
    for d in pred.details:
        lines.append(f"{d.symbol}: tau={_signed(d.torque, 2)}, f={d.fatigue:.2f}")
    return "\n".join(lines)


def render_table_markdown(
    records: Iterable[ElementRecord] | None = None,
    config: HelicoidConfig | None = None,
) -> str:
    """Markdown table of observed vs predicted A for the given (default: all) records."""
    cfg = config if config is not None else get_current_helicoid_config()
    recs = list(records) if records is not None else list(base_elements)

    lines: List[str] = [
        f"Helicoid table ({cfg.energy_model}, {cfg.embedding_model})",
        "",
        "| Z | symbol | period | group | block | A | A_pred | slip % | category | spinor |",
        "| --- | --- | --- | --- | --- | --- | --- | --- | --- | --- |",
    ]
    for rec in sorted(recs, key=lambda r: r.Z):
        res = describe_element(rec, cfg)
        lines.append(
            f"| {rec.Z} | {rec.symbol} | {rec.period} | {rec.group} | {rec.block} | "
            f"{rec.A:.3f} | {res.A_predicted:.3f} | {res.phase_slip_pct:.1f} | "
            f"{res.phase_slip_category} | {res.spinor_position} |"
        )
    return "\n".join(lines) + "\n"
