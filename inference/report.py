"""
Outcome reporting.

Two renderings of the same InferenceOutcome:
- render_outcome(): the plain `path=<backend> result=[...]` line
- OutcomeReport: structured JSON for machine consumers (--json)
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .codec import format_tensor
from .types import InferenceOutcome


def render_outcome(outcome: InferenceOutcome) -> str:
    return f"path={outcome.backend.value} result={format_tensor(outcome.output)}"


class OutcomeReport(BaseModel):
    """Serialized outcome of a single inference request."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Mock | Real | RealFallbackToMock")
    result: List[float] = Field(..., description="Output tensor values")
    elapsed_ms: float = Field(..., description="Dispatch latency in milliseconds")
    fallback_reason: Optional[str] = Field(
        None,
        description="Why the real backend was abandoned, when it was."
    )
    error_kind: Optional[str] = Field(None, description="ExecutionError kind")

    @classmethod
    def from_outcome(cls, outcome: InferenceOutcome) -> "OutcomeReport":
        return cls(
            path=outcome.backend.value,
            result=list(outcome.output.values),
            elapsed_ms=round(outcome.elapsed_ms, 3),
            fallback_reason=outcome.fallback_reason,
            error_kind=outcome.error_kind,
        )
