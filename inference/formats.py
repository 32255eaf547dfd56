"""
Model format profiles.

Everything that differs between the ONNX and TFLite flows lives here, so
the dispatcher and executors stay format-agnostic.
"""

from dataclasses import dataclass
from typing import Literal, Tuple

ModelFormatName = Literal["onnx", "tflite"]


@dataclass(frozen=True)
class ModelFormat:
    name: str
    extension: str              # advisory only; mismatch is a warning
    graph_encoding: str         # encoding tag handed to the isolated runtime
    guest_artifact: str         # prebuilt guest file name
    guest_crate_dir: str        # where the guest is built from (for hints)
    mock_scale: float
    batch_dim: bool             # True → input shape [1, n], else [n]

    def input_shape(self, length: int) -> Tuple[int, ...]:
        return (1, length) if self.batch_dim else (length,)

    def matches_extension(self, path: str) -> bool:
        return path.lower().endswith(self.extension)


ONNX = ModelFormat(
    name="onnx",
    extension=".onnx",
    graph_encoding="onnx",
    guest_artifact="onnx-guest.wasm",
    guest_crate_dir="examples/wasmedge-onnx/guest",
    mock_scale=1.5,
    batch_dim=False,
)

TFLITE = ModelFormat(
    name="tflite",
    extension=".tflite",
    graph_encoding="tflite",
    guest_artifact="tflite-guest.wasm",
    guest_crate_dir="examples/wasmedge-tflite/guest",
    mock_scale=2.0,
    batch_dim=True,
)

FORMATS = {ONNX.name: ONNX, TFLITE.name: TFLITE}


def get_format(name: str) -> ModelFormat:
    """Look up a format by name. Unknown names default to ONNX."""
    return FORMATS.get((name or "").lower(), ONNX)
