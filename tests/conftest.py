from __future__ import annotations

import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if _SRC.exists():
    sys.path.insert(0, str(_SRC))


@pytest.fixture
def settings():
    from option_handoff.config import HandoffSettings

    return HandoffSettings(workflow_path="/workflow/kepu")


@pytest.fixture
def client(settings):
    from fastapi.testclient import TestClient

    from option_handoff.api.main import create_app

    return TestClient(create_app(settings))
