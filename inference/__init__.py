"""
Inference dispatch layer.

Decides, per request, whether real inference runs in an isolated guest
process or a local deterministic mock stands in, and reports which path ran.

Backends:
- MockTransform: deterministic tanh transform (default, and the fallback)
- SubprocessGuestExecutor: real inference in a sandboxed guest process
- DisabledGuestExecutor: real backend not available in this build

Example usage:
    from inference import InferenceDispatcher, InferenceRequest, DisabledGuestExecutor, decode

    dispatcher = InferenceDispatcher(DisabledGuestExecutor())
    outcome = dispatcher.dispatch(InferenceRequest(tensor=decode("0.1,0.2,0.3")))
"""

from .types import BackendKind, InferenceOutcome, InferenceRequest, Tensor
from .errors import (
    BackendNotCompiledError,
    DecodeError,
    EmptyTensorError,
    ExecutionError,
    InputError,
    MalformedValueError,
)
from .codec import decode, encode, format_tensor
from .formats import FORMATS, ONNX, TFLITE, ModelFormat, get_format
from .stub import MockTransform, mock_transform
from .base import GuestExecutor
from .guest import (
    ArtifactLauncher,
    DisabledGuestExecutor,
    PythonModuleLauncher,
    SubprocessGuestExecutor,
)
from .dispatcher import InferenceDispatcher
from .report import OutcomeReport, render_outcome

__all__ = [
    "BackendKind",
    "InferenceOutcome",
    "InferenceRequest",
    "Tensor",
    "BackendNotCompiledError",
    "DecodeError",
    "EmptyTensorError",
    "ExecutionError",
    "InputError",
    "MalformedValueError",
    "decode",
    "encode",
    "format_tensor",
    "FORMATS",
    "ONNX",
    "TFLITE",
    "ModelFormat",
    "get_format",
    "MockTransform",
    "mock_transform",
    "GuestExecutor",
    "ArtifactLauncher",
    "DisabledGuestExecutor",
    "PythonModuleLauncher",
    "SubprocessGuestExecutor",
    "InferenceDispatcher",
    "OutcomeReport",
    "render_outcome",
]
