from importlib import metadata

from .compound import CompoundPrediction, MaterialPrediction, predict, predict_symbols
from .elements import ELEMENT_TABLE, ElementRecord, get_element
from .embedding import Position3D, embed
from .energy_model import PredictionResult, predict_A
from .explorer import ExplorerState, SelectionSet, stability_band
from .model_config import HelicoidConfig, load_helicoid_config, override_helicoid_config
from .spinor import PhaseInfo, spinor_phase

try:
    __version__ = metadata.version("geometric-helicoid")
except Exception:
    __version__ = "0.1.0"

__all__ = [
    "CompoundPrediction",
    "ELEMENT_TABLE",
    "ElementRecord",
    "ExplorerState",
    "HelicoidConfig",
    "MaterialPrediction",
    "PhaseInfo",
    "Position3D",
    "PredictionResult",
    "SelectionSet",
    "embed",
    "get_element",
    "load_helicoid_config",
    "override_helicoid_config",
    "predict",
    "predict_A",
    "predict_symbols",
    "spinor_phase",
    "stability_band",
]
