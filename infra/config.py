"""
Inference configuration system.

Environment-based backend selection with sensible defaults.
Values come from the process environment, optionally seeded from a
`.env` file in the project root.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv

from inference import (
    ArtifactLauncher,
    DisabledGuestExecutor,
    GuestExecutor,
    InferenceDispatcher,
    MockTransform,
    ModelFormat,
    PythonModuleLauncher,
    SubprocessGuestExecutor,
    get_format,
)
from inference.formats import ModelFormatName
from inference.guest import DEFAULT_ARTIFACT_DIR, PLUGIN_PATH_ENV

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


GuestKind = Literal["wasmedge", "python"]


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


class ConfigError(ValueError):
    """An environment value could not be interpreted."""


def _env_timeout(name: str) -> Optional[float]:
    """Seconds from the environment; unset, zero or negative means no timeout."""
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got '{raw}'") from None
    return value if value > 0 else None


@dataclass
class InferenceConfig:
    """Inference configuration from environment."""

    model_format: ModelFormatName
    model_path: Optional[str]
    plugin_dir: Optional[str]

    # Real backend
    real_inference: bool          # capability gate, decided once at startup
    guest_kind: GuestKind
    wasmedge_bin: str
    guest_artifact_dir: str
    guest_timeout_s: Optional[float]

    log_level: str

    @classmethod
    def from_env(cls) -> "InferenceConfig":
        """
        Load configuration from environment variables.

        Defaults:
        - format: onnx
        - real backend: enabled, via the WasmEdge CLI
        - no timeout on the guest process

        Raises ConfigError for values that cannot be parsed.
        """
        return cls(
            model_format=os.getenv("INFERENCE_MODEL_FORMAT", "onnx").lower(),  # type: ignore
            model_path=os.getenv("INFERENCE_MODEL") or None,
            plugin_dir=os.getenv(PLUGIN_PATH_ENV) or None,

            real_inference=_env_bool("REAL_INFERENCE", "true"),
            guest_kind=os.getenv("GUEST_KIND", "wasmedge").lower(),  # type: ignore
            wasmedge_bin=os.getenv("WASMEDGE_BIN", "wasmedge"),
            guest_artifact_dir=os.getenv("GUEST_ARTIFACT_DIR", DEFAULT_ARTIFACT_DIR),
            guest_timeout_s=_env_timeout("GUEST_TIMEOUT_S"),

            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def format(self) -> ModelFormat:
        return get_format(self.model_format)

    def create_mock(self) -> MockTransform:
        """Mock transform tuned for the configured model format."""
        return MockTransform(scale=self.format.mock_scale)

    def create_executor(self) -> GuestExecutor:
        """Create the real-backend executor based on configuration."""
        if not self.real_inference:
            return DisabledGuestExecutor()

        if self.guest_kind == "python":
            launcher = PythonModuleLauncher(model_format=self.format)
        else:
            # Default to the WasmEdge CLI
            launcher = ArtifactLauncher(
                model_format=self.format,
                runtime=self.wasmedge_bin,
                artifact_dir=self.guest_artifact_dir,
            )

        return SubprocessGuestExecutor(
            launcher=launcher,
            model_format=self.format,
            timeout_s=self.guest_timeout_s,
        )

    def create_dispatcher(self) -> InferenceDispatcher:
        return InferenceDispatcher(
            executor=self.create_executor(),
            mock=self.create_mock(),
        )


def get_config() -> InferenceConfig:
    """Get inference configuration from the current environment."""
    return InferenceConfig.from_env()
