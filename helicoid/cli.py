from __future__ import annotations

from dataclasses import asdict, replace
from pathlib import Path
import argparse
import json
import logging
import sys

from helicoid.compound import predict
from helicoid.elements import get_elements
from helicoid.embedding import embed_element, get_embedding_model
from helicoid.energy_model import describe_element
from helicoid.export import element_table_frame, export_element_table
from helicoid.model_config import (
    COMPOUND_MODELS,
    ENERGY_MODELS,
    HelicoidConfig,
    get_current_helicoid_config,
    load_helicoid_config,
)
from helicoid.report import format_compound_panel, format_element_tooltip, render_table_markdown


def _add_common_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--config", default="", help="YAML/JSON helicoid config (flat or with a helicoid: section).")
    ap.add_argument("--energy_model", choices=list(ENERGY_MODELS), default=None, help="Override energy model.")
    ap.add_argument("--compound_model", choices=list(COMPOUND_MODELS), default=None, help="Override compound model.")
    ap.add_argument("--no_spinor", action="store_true", help="Disable the spinor correction on A.")
    ap.add_argument("--log_level", default="WARNING", help="Logging level (default: WARNING).")


def _parse_element_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Helicoid element lookup: symbol -> position, predicted A, spinor phase.")
    ap.add_argument("symbols", nargs="+", help="Element symbols, e.g. C Si Fe.")
    ap.add_argument("--json", action="store_true", help="Print JSON instead of tooltip text.")
    _add_common_args(ap)
    return ap.parse_args(argv)


def _parse_combine_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Helicoid compound explorer: 1-4 symbols -> hardness and material properties.")
    ap.add_argument("symbols", nargs="+", help="Element symbols to combine (max 4).")
    ap.add_argument("--json", action="store_true", help="Print JSON instead of the results panel.")
    ap.add_argument("--jitter_mode", choices=["midpoint", "random"], default=None, help="Override jitter mode.")
    ap.add_argument("--seed", type=int, default=None, help="Jitter seed (random mode).")
    _add_common_args(ap)
    return ap.parse_args(argv)


def _parse_table_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Helicoid table export: all elements -> CSV or markdown.")
    ap.add_argument("--format", choices=["csv", "markdown"], default="csv", help="Output format.")
    ap.add_argument("--out", default="", help="Output path (default: stdout).")
    _add_common_args(ap)
    return ap.parse_args(argv)


def _setup(args: argparse.Namespace) -> HelicoidConfig:
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cfg = load_helicoid_config(args.config) if args.config else get_current_helicoid_config()
    overrides = {}
    if args.energy_model is not None:
        overrides["energy_model"] = str(args.energy_model)
    if args.compound_model is not None:
        overrides["compound_model"] = str(args.compound_model)
    if args.no_spinor:
        overrides["apply_spinor_correction"] = False
    if getattr(args, "jitter_mode", None) is not None:
        overrides["jitter_mode"] = str(args.jitter_mode)
    if getattr(args, "seed", None) is not None:
        overrides["jitter_seed"] = int(args.seed)
    return replace(cfg, **overrides) if overrides else cfg


def main_element(argv: list[str] | None = None) -> int:
    args = _parse_element_args(argv)
    try:
        cfg = _setup(args)
        records = get_elements(args.symbols)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    if args.json:
        model = get_embedding_model(cfg.embedding_model)
        out = []
        for rec in records:
            item = asdict(describe_element(rec, cfg))
            item["position"] = asdict(embed_element(rec, model))
            out.append(item)
        sys.stdout.write(json.dumps(out, ensure_ascii=False, sort_keys=True, indent=2) + "\n")
    else:
        sys.stdout.write("\n\n".join(format_element_tooltip(rec, cfg) for rec in records) + "\n")
    return 0


def main_combine(argv: list[str] | None = None) -> int:
    args = _parse_combine_args(argv)
    try:
        cfg = _setup(args)
        pred = predict(get_elements(args.symbols), config=cfg)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    if args.json:
        payload = pred.to_dict() if pred is not None else None
        payload = {"compound_model": cfg.compound_model, "prediction": payload}
        sys.stdout.write(json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n")
    else:
        sys.stdout.write(format_compound_panel(pred) + "\n")
    return 0


def main_table(argv: list[str] | None = None) -> int:
    args = _parse_table_args(argv)
    try:
        cfg = _setup(args)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    if args.format == "markdown":
        text = render_table_markdown(config=cfg)
        if args.out:
            out = Path(args.out)
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(text, encoding="utf-8")
            sys.stdout.write(f"Table: {out}\n")
        else:
            sys.stdout.write(text)
        return 0

    if args.out:
        out = export_element_table(args.out, cfg)
        sys.stdout.write(f"Table: {out}\n")
    else:
        sys.stdout.write(element_table_frame(cfg).to_csv(index=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main_combine())
