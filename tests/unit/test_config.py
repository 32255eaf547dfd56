"""
Test suite for inference configuration.

Verifies:
- defaults (ONNX, real backend enabled via WasmEdge, no timeout)
- capability gate selects the disabled executor
- guest kind selects the launcher
- model format drives the mock scale
- unparseable timeouts raise ConfigError; non-positive ones mean no timeout
"""

import pytest

from infra import ConfigError, InferenceConfig, get_config
from inference import (
    ONNX,
    TFLITE,
    ArtifactLauncher,
    DisabledGuestExecutor,
    InferenceDispatcher,
    MockTransform,
    PythonModuleLauncher,
    SubprocessGuestExecutor,
)


class TestInferenceConfig:
    """Test inference configuration."""

    def test_config_from_env_defaults(self):
        config = InferenceConfig.from_env()

        assert config.model_format == "onnx"
        assert config.model_path is None
        assert config.plugin_dir is None
        assert config.real_inference is True
        assert config.guest_kind == "wasmedge"
        assert config.wasmedge_bin == "wasmedge"
        assert config.guest_artifact_dir == "guest/target/wasm32-wasi"
        assert config.guest_timeout_s is None
        assert config.log_level == "INFO"

    def test_config_reads_env(self, monkeypatch):
        monkeypatch.setenv("INFERENCE_MODEL_FORMAT", "TFLite")
        monkeypatch.setenv("INFERENCE_MODEL", "models/m.tflite")
        monkeypatch.setenv("WASMEDGE_PLUGIN_PATH", "/opt/plugins")
        monkeypatch.setenv("GUEST_TIMEOUT_S", "2.5")
        monkeypatch.setenv("WASMEDGE_BIN", "/usr/local/bin/wasmedge")

        config = get_config()

        assert config.model_format == "tflite"
        assert config.format is TFLITE
        assert config.model_path == "models/m.tflite"
        assert config.plugin_dir == "/opt/plugins"
        assert config.guest_timeout_s == 2.5
        assert config.wasmedge_bin == "/usr/local/bin/wasmedge"

    def test_unknown_format_defaults_to_onnx(self, monkeypatch):
        monkeypatch.setenv("INFERENCE_MODEL_FORMAT", "pickle")
        assert InferenceConfig.from_env().format is ONNX

    def test_creates_disabled_executor(self, monkeypatch):
        monkeypatch.setenv("REAL_INFERENCE", "false")
        executor = InferenceConfig.from_env().create_executor()
        assert isinstance(executor, DisabledGuestExecutor)

    def test_creates_wasmedge_executor(self, monkeypatch):
        monkeypatch.setenv("WASMEDGE_BIN", "my-wasmedge")
        monkeypatch.setenv("GUEST_TIMEOUT_S", "4")

        executor = InferenceConfig.from_env().create_executor()

        assert isinstance(executor, SubprocessGuestExecutor)
        assert isinstance(executor.launcher, ArtifactLauncher)
        assert executor.launcher.runtime == "my-wasmedge"
        assert executor.timeout_s == 4.0

    def test_creates_python_executor(self, monkeypatch):
        monkeypatch.setenv("GUEST_KIND", "python")
        executor = InferenceConfig.from_env().create_executor()
        assert isinstance(executor.launcher, PythonModuleLauncher)

    def test_unknown_guest_kind_defaults_to_wasmedge(self, monkeypatch):
        monkeypatch.setenv("GUEST_KIND", "docker")
        executor = InferenceConfig.from_env().create_executor()
        assert isinstance(executor.launcher, ArtifactLauncher)

    def test_mock_scale_follows_format(self):
        config = InferenceConfig.from_env()
        assert config.create_mock().scale == 1.5

        config.model_format = "tflite"  # type: ignore
        mock = config.create_mock()
        assert isinstance(mock, MockTransform)
        assert mock.scale == 2.0

    def test_creates_dispatcher(self):
        dispatcher = InferenceConfig.from_env().create_dispatcher()
        assert isinstance(dispatcher, InferenceDispatcher)
        assert isinstance(dispatcher.executor, SubprocessGuestExecutor)

    def test_invalid_timeout_is_config_error(self, monkeypatch):
        monkeypatch.setenv("GUEST_TIMEOUT_S", "soon")

        with pytest.raises(ConfigError) as excinfo:
            InferenceConfig.from_env()

        assert "GUEST_TIMEOUT_S" in str(excinfo.value)
        assert isinstance(excinfo.value, ValueError)

    @pytest.mark.parametrize("raw", ["0", "0.0", "-5"])
    def test_non_positive_timeout_means_none(self, monkeypatch, raw):
        monkeypatch.setenv("GUEST_TIMEOUT_S", raw)
        assert InferenceConfig.from_env().guest_timeout_s is None
