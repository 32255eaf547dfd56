"""
Error taxonomy for the inference boundary.

Two families, with different propagation rules:

- InputError: the caller handed us text that is not a valid Tensor.
  Fatal. Raised before any dispatch decision, never absorbed.
- ExecutionError: the real backend could not produce a result.
  Never fatal to a request. The dispatcher catches every subtype and
  falls back to the mock transform.

There is no DispatchError: once a valid Tensor exists the
dispatcher always produces an outcome.
"""

from typing import Optional


class InferenceError(Exception):
    """Root of all errors raised by the inference package."""


# ─────────────────────────────────────────────────────
# Input errors (fatal, pre-dispatch)
# ─────────────────────────────────────────────────────


class InputError(InferenceError, ValueError):
    """Caller input could not be turned into a Tensor."""


class DecodeError(InputError):
    """Tensor text could not be decoded."""


class EmptyTensorError(DecodeError):
    """Decoding produced zero elements."""

    def __init__(self, message: str = "no inputs provided"):
        super().__init__(message)


class MalformedValueError(DecodeError):
    """A token did not parse as a 32-bit float."""

    def __init__(self, index: int, token: str):
        self.index = index
        self.token = token
        super().__init__(f"invalid float at position {index}: '{token}'")


# ─────────────────────────────────────────────────────
# Execution errors (absorbed by fallback)
# ─────────────────────────────────────────────────────


class ExecutionError(InferenceError):
    """
    Real backend failure.

    `kind` is a stable snake_case identifier used in logs and reports.
    """

    kind = "execution_error"


class ModelNotFoundError(ExecutionError):
    kind = "model_not_found"

    def __init__(self, model_path: str):
        self.model_path = model_path
        super().__init__(f"model not found: {model_path}")


class GuestArtifactMissingError(ExecutionError):
    kind = "guest_artifact_missing"


class GuestLaunchError(ExecutionError):
    """The guest runtime could not be started at all."""

    kind = "guest_launch_failed"


class GuestFailedError(ExecutionError):
    """Guest process exited with a non-zero status."""

    kind = "guest_failed"

    def __init__(
        self,
        status: Optional[int],
        stdout: str = "",
        stderr: str = "",
        message: Optional[str] = None,
    ):
        self.status = status
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            message
            or (
                f"guest execution failed (status={status}):\n"
                f"stdout:\n{stdout}\nstderr:\n{stderr}"
            )
        )


class GuestTimeoutError(GuestFailedError):
    kind = "guest_timeout"

    def __init__(self, timeout_s: float, stdout: str = "", stderr: str = ""):
        self.timeout_s = timeout_s
        super().__init__(
            status=None,
            stdout=stdout,
            stderr=stderr,
            message=f"guest did not finish within {timeout_s}s",
        )


class EmptyOutputError(ExecutionError):
    kind = "empty_output"

    def __init__(self, message: str = "guest did not print any output"):
        super().__init__(message)


class MalformedGuestOutputError(ExecutionError):
    """Guest stdout was not a decodable Tensor. Chained from the DecodeError."""

    kind = "malformed_guest_output"


class BackendNotCompiledError(ExecutionError):
    """The real backend is not available in this build/configuration."""

    kind = "backend_not_compiled"


class StageError(ExecutionError):
    """Failure inside the isolated execution context, tagged with its stage."""

    kind = "stage_failed"
    stage = "unknown"

    def __init__(self, message: str):
        super().__init__(f"{self.stage}: {message}")


class ModelReadError(StageError):
    kind = "model_read_failed"
    stage = "load"


class GraphBuildError(StageError):
    kind = "graph_build_failed"
    stage = "graph_build"


class ContextInitError(StageError):
    kind = "context_init_failed"
    stage = "context_init"


class TensorBindError(StageError):
    kind = "tensor_bind_failed"
    stage = "set_input"


class ComputeError(StageError):
    kind = "compute_failed"
    stage = "compute"


class OutputRetrievalError(StageError):
    kind = "output_retrieval_failed"
    stage = "get_output"
