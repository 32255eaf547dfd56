"""
ONNX Runtime execution context.

Requires: pip install onnxruntime   (the `onnx` extra)
Without it, constructing the backend raises BackendNotCompiledError so the
host treats the guest as "real backend not available in this build".
"""

from typing import Dict, List, Optional, Sequence

import numpy as np

from inference.errors import BackendNotCompiledError

from .context import F32, ExecutionContext, Graph, GraphBackend

try:
    import onnxruntime as ort
    ORT_AVAILABLE = True
except ImportError:
    ORT_AVAILABLE = False

_DTYPES = {F32: np.dtype("<f4")}


class OnnxExecutionContext(ExecutionContext):
    def __init__(self, session: "ort.InferenceSession"):
        self.session = session
        self._input_names = [i.name for i in session.get_inputs()]
        self._feeds: Dict[str, np.ndarray] = {}
        self._results: Optional[List[np.ndarray]] = None

    def set_input(self, index: int, dtype: str, shape: Sequence[int], data: bytes) -> None:
        if dtype not in _DTYPES:
            raise ValueError(f"unsupported tensor type: {dtype}")
        if index >= len(self._input_names):
            raise IndexError(
                f"input index {index} out of range; model has {len(self._input_names)} inputs"
            )
        array = np.frombuffer(data, dtype=_DTYPES[dtype]).reshape(tuple(shape))
        self._feeds[self._input_names[index]] = array

    def compute(self) -> None:
        self._results = self.session.run(None, self._feeds)

    def get_output(self, index: int) -> bytes:
        if self._results is None:
            raise RuntimeError("compute() has not run")
        output = np.ascontiguousarray(self._results[index], dtype=_DTYPES[F32])
        return output.tobytes()


class OnnxGraph(Graph):
    def __init__(self, session: "ort.InferenceSession"):
        self.session = session

    def init_execution_context(self) -> ExecutionContext:
        return OnnxExecutionContext(self.session)


class OnnxGraphBackend(GraphBackend):
    """CPU ONNX Runtime engine."""

    def __init__(self, providers: Sequence[str] = ("CPUExecutionProvider",)):
        if not ORT_AVAILABLE:
            raise BackendNotCompiledError(
                "onnxruntime not installed. Install with: pip install onnxruntime"
            )
        self.providers = list(providers)

    def build_graph(self, model_bytes: bytes, encoding: str) -> Graph:
        if encoding != "onnx":
            raise ValueError(f"unsupported graph encoding for ONNX Runtime: {encoding}")
        session = ort.InferenceSession(model_bytes, providers=self.providers)
        return OnnxGraph(session)
