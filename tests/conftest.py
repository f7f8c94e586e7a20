from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_syspath() -> None:
    root = Path(__file__).resolve().parents[1]
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_syspath()


@pytest.fixture(autouse=True)
def _default_helicoid_config():
    from helicoid.model_config import HelicoidConfig, override_helicoid_config

    with override_helicoid_config(HelicoidConfig()):
        yield
