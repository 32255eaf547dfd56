"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

CONFIG_ENV_VARS = (
    "INFERENCE_MODEL_FORMAT",
    "INFERENCE_MODEL",
    "REAL_INFERENCE",
    "GUEST_KIND",
    "WASMEDGE_BIN",
    "GUEST_ARTIFACT_DIR",
    "GUEST_TIMEOUT_S",
    "WASMEDGE_PLUGIN_PATH",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Every test starts from default configuration."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def model_file(tmp_path):
    path = tmp_path / "model.onnx"
    path.write_bytes(b"not-really-a-model")
    return path
