"""
Isolated execution context API.

The guest depends ONLY on these interfaces. An engine (ONNX Runtime today)
provides graph construction from raw model bytes, execution contexts bound to
a graph, indexed tensor binding with explicit element type and shape, a
synchronous compute call, and output retrieval. Every call is fallible.
"""

from abc import ABC, abstractmethod
from typing import Sequence

F32 = "f32"


class ExecutionContext(ABC):
    """Per-run state bound to one graph."""

    @abstractmethod
    def set_input(self, index: int, dtype: str, shape: Sequence[int], data: bytes) -> None:
        raise NotImplementedError

    @abstractmethod
    def compute(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_output(self, index: int) -> bytes:
        """
        Raw little-endian bytes of output `index`.

        Sized to the produced tensor; implementations must not truncate.
        """
        raise NotImplementedError


class Graph(ABC):
    @abstractmethod
    def init_execution_context(self) -> ExecutionContext:
        raise NotImplementedError


class GraphBackend(ABC):
    """Engine entry point: turns model bytes into a Graph."""

    @abstractmethod
    def build_graph(self, model_bytes: bytes, encoding: str) -> Graph:
        raise NotImplementedError
