"""
Test suite for the ONNX Runtime execution context.

The session is a MagicMock, so these run without onnxruntime installed.

Verifies:
- set_input reshapes raw f32 bytes and feeds them under the model's input name
- unsupported dtypes and out-of-range input indices are rejected
- get_output before compute is an error
- outputs come back as full little-endian f32 bytes
- build_graph only accepts the onnx encoding
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import numpy as np
import pytest

import sandbox.onnx_context as onnx_context
from sandbox.onnx_context import OnnxExecutionContext, OnnxGraph, OnnxGraphBackend


def make_session(*input_names, outputs=None):
    session = MagicMock()
    session.get_inputs.return_value = [SimpleNamespace(name=n) for n in input_names]
    session.run.return_value = outputs or []
    return session


def f32_bytes(*values):
    return np.array(values, dtype="<f4").tobytes()


# ─────────────────────────────────────────────────────
# Execution context
# ─────────────────────────────────────────────────────


class TestOnnxExecutionContext:
    def test_set_input_feeds_reshaped_array(self):
        session = make_session("x", outputs=[np.zeros((1, 3), dtype=np.float32)])
        ctx = OnnxExecutionContext(session)

        ctx.set_input(0, "f32", (1, 3), f32_bytes(0.5, -1.0, 2.0))
        ctx.compute()

        output_names, feeds = session.run.call_args.args
        assert output_names is None
        assert list(feeds) == ["x"]
        assert feeds["x"].shape == (1, 3)
        assert feeds["x"].dtype == np.float32
        assert feeds["x"].ravel().tolist() == [0.5, -1.0, 2.0]

    def test_second_input_index_uses_second_name(self):
        session = make_session("a", "b")
        ctx = OnnxExecutionContext(session)

        ctx.set_input(1, "f32", (1,), f32_bytes(4.0))
        ctx.compute()

        _, feeds = session.run.call_args.args
        assert list(feeds) == ["b"]

    def test_unsupported_dtype(self):
        ctx = OnnxExecutionContext(make_session("x"))
        with pytest.raises(ValueError, match="unsupported tensor type: i64"):
            ctx.set_input(0, "i64", (1,), f32_bytes(1.0))

    def test_input_index_out_of_range(self):
        ctx = OnnxExecutionContext(make_session("x"))
        with pytest.raises(IndexError, match="model has 1 inputs"):
            ctx.set_input(1, "f32", (1,), f32_bytes(1.0))

    def test_shape_must_match_data(self):
        ctx = OnnxExecutionContext(make_session("x"))
        with pytest.raises(ValueError):
            ctx.set_input(0, "f32", (2, 2), f32_bytes(1.0, 2.0))

    def test_get_output_before_compute(self):
        ctx = OnnxExecutionContext(make_session("x"))
        with pytest.raises(RuntimeError, match="compute\\(\\) has not run"):
            ctx.get_output(0)

    def test_get_output_returns_full_f32_bytes(self):
        produced = np.arange(2000, dtype=np.float64).reshape(2, 1000)
        ctx = OnnxExecutionContext(make_session("x", outputs=[produced]))
        ctx.set_input(0, "f32", (1,), f32_bytes(1.0))
        ctx.compute()

        raw = ctx.get_output(0)

        assert len(raw) == 2000 * 4
        assert np.frombuffer(raw, dtype="<f4")[-1] == 1999.0


# ─────────────────────────────────────────────────────
# Graph and backend
# ─────────────────────────────────────────────────────


class TestOnnxGraphBackend:
    def test_graph_creates_context_on_session(self):
        session = make_session("x")
        ctx = OnnxGraph(session).init_execution_context()
        assert isinstance(ctx, OnnxExecutionContext)
        assert ctx.session is session

    def test_build_graph_creates_session(self, monkeypatch):
        fake_ort = MagicMock()
        monkeypatch.setattr(onnx_context, "ORT_AVAILABLE", True)
        monkeypatch.setattr(onnx_context, "ort", fake_ort, raising=False)

        graph = OnnxGraphBackend().build_graph(b"model-bytes", "onnx")

        fake_ort.InferenceSession.assert_called_once_with(
            b"model-bytes", providers=["CPUExecutionProvider"]
        )
        assert graph.session is fake_ort.InferenceSession.return_value

    def test_build_graph_rejects_other_encodings(self, monkeypatch):
        monkeypatch.setattr(onnx_context, "ORT_AVAILABLE", True)
        with pytest.raises(ValueError, match="tflite"):
            OnnxGraphBackend().build_graph(b"", "tflite")
