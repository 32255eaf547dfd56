from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple

import numpy as np

from .errors import EmptyTensorError


class BackendKind(str, Enum):
    """Which execution path produced an outcome."""

    MOCK = "Mock"
    REAL = "Real"
    REAL_FALLBACK_TO_MOCK = "RealFallbackToMock"


@dataclass(frozen=True)
class Tensor:
    """
    Ordered, non-empty sequence of 32-bit floats.

    Values are rounded to float32 on construction, so two tensors built
    from the same float32 data always compare equal.
    """

    values: Tuple[float, ...]

    def __post_init__(self):
        values = tuple(float(v) for v in np.asarray(self.values, dtype=np.float32).ravel())
        if not values:
            raise EmptyTensorError()
        object.__setattr__(self, "values", values)

    @classmethod
    def of(cls, values: Iterable[float]) -> "Tensor":
        return cls(tuple(values))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Tensor":
        return cls(tuple(np.asarray(array, dtype=np.float32).ravel().tolist()))

    def to_array(self) -> np.ndarray:
        return np.asarray(self.values, dtype=np.float32)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    def __getitem__(self, index: int) -> float:
        return self.values[index]


@dataclass(frozen=True)
class InferenceRequest:
    tensor: Tensor
    model_path: Optional[str] = None
    plugin_dir: Optional[str] = None   # search path for isolated runtime plugins
    force_mock: bool = False


@dataclass(frozen=True)
class InferenceOutcome:
    backend: BackendKind
    output: Tensor
    elapsed_s: float
    # fallback diagnostics, excluded from equality
    fallback_reason: Optional[str] = field(default=None, compare=False)
    error_kind: Optional[str] = field(default=None, compare=False)   # ExecutionError.kind

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_s * 1000.0
