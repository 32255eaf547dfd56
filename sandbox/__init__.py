"""
Guest side of the inference boundary.

Runs inside the isolated process launched by the host's
SubprocessGuestExecutor. The host never imports this at dispatch time.
"""

from .context import ExecutionContext, Graph, GraphBackend
from .runner import create_backend, output_to_tensor, run_inference

__all__ = [
    "ExecutionContext",
    "Graph",
    "GraphBackend",
    "create_backend",
    "output_to_tensor",
    "run_inference",
]
