import numpy as np

from .types import Tensor

DEFAULT_MOCK_SCALE = 1.5


def mock_transform(tensor: Tensor, scale: float = DEFAULT_MOCK_SCALE) -> Tensor:
    """
    Deterministic stand-in for real inference: tanh(scale * x) per element.

    Pure, length- and order-preserving, and 0 maps to 0.
    """
    array = tensor.to_array()
    return Tensor.from_array(np.tanh(np.float32(scale) * array))


class MockTransform:
    """
    Deterministic fake model for testing, CI, and fallback.

    Fast, pure, and never fails, which is what lets the dispatcher
    always return an outcome.
    """

    def __init__(self, scale: float = DEFAULT_MOCK_SCALE):
        self.scale = scale

    def __call__(self, tensor: Tensor) -> Tensor:
        return mock_transform(tensor, self.scale)

    def __repr__(self) -> str:
        return f"MockTransform(scale={self.scale})"
