"""
In-sandbox execution protocol.

  load bytes → build graph → init context → set input → compute → get output

Each stage failure is re-raised as its own StageError subtype naming the
stage. Nothing is ever substituted for a failed stage's data.
"""

import logging
from pathlib import Path
from typing import Callable, TypeVar

import numpy as np

from inference.errors import (
    BackendNotCompiledError,
    ComputeError,
    ContextInitError,
    ExecutionError,
    GraphBuildError,
    ModelReadError,
    OutputRetrievalError,
    TensorBindError,
)
from inference.formats import ModelFormat
from inference.types import Tensor

from .context import F32, GraphBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")

INPUT_INDEX = 0
OUTPUT_INDEX = 0
_F32_SIZE = 4


def _stage(error_cls: type, action: Callable[..., T], *args) -> T:
    try:
        return action(*args)
    except ExecutionError:
        raise
    except Exception as e:
        raise error_cls(str(e) or type(e).__name__) from e


def create_backend(model_format: ModelFormat) -> GraphBackend:
    """Pick the engine for a model format, or raise BackendNotCompiledError."""
    if model_format.graph_encoding == "onnx":
        from .onnx_context import OnnxGraphBackend
        return OnnxGraphBackend()
    raise BackendNotCompiledError(
        f"no {model_format.name} engine in this build of the guest"
    )


def output_to_tensor(raw: bytes) -> Tensor:
    """Reinterpret raw output bytes as little-endian float32 values."""
    if len(raw) % _F32_SIZE != 0:
        raise OutputRetrievalError(f"output bytes not aligned to f32: {len(raw)} bytes")
    values = np.frombuffer(raw, dtype="<f4")
    if values.size == 0:
        raise OutputRetrievalError("output tensor is empty")
    return Tensor.from_array(values)


def run_inference(
    model_path: str,
    tensor: Tensor,
    backend: GraphBackend,
    model_format: ModelFormat,
) -> Tensor:
    """Run one inference inside the isolated context."""
    try:
        model_bytes = Path(model_path).read_bytes()
    except OSError as e:
        raise ModelReadError(f"failed to read model bytes: {model_path}: {e}") from e
    logger.info(f"model bytes loaded: {len(model_bytes)} B")

    graph = _stage(GraphBuildError, backend.build_graph, model_bytes, model_format.graph_encoding)
    ctx = _stage(ContextInitError, graph.init_execution_context)

    shape = model_format.input_shape(len(tensor))
    input_bytes = tensor.to_array().astype("<f4").tobytes()
    _stage(TensorBindError, ctx.set_input, INPUT_INDEX, F32, shape, input_bytes)

    _stage(ComputeError, ctx.compute)

    raw = _stage(OutputRetrievalError, ctx.get_output, OUTPUT_INDEX)
    return output_to_tensor(raw)
