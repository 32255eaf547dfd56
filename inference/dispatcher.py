"""
Inference dispatcher.

Picks exactly one execution path per request and always produces an
outcome:

  force_mock            → Mock
  no model              → Mock
  model, guest ok       → Real
  model, guest raises   → RealFallbackToMock   (error logged + recorded)

Latency covers the whole decision-and-execution sequence, whichever branch
ran. No retries, no concurrency.
"""

import logging
import time
from typing import Callable, Optional

from .base import GuestExecutor
from .errors import ExecutionError
from .stub import MockTransform
from .types import BackendKind, InferenceOutcome, InferenceRequest, Tensor

logger = logging.getLogger(__name__)


class InferenceDispatcher:
    def __init__(
        self,
        executor: GuestExecutor,
        mock: Optional[Callable[[Tensor], Tensor]] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.executor = executor
        self.mock = mock or MockTransform()
        self.clock = clock

    def dispatch(self, request: InferenceRequest) -> InferenceOutcome:
        """
        Run the request on one backend.

        Never raises for backend failure: any ExecutionError from the
        executor is absorbed into a RealFallbackToMock outcome.
        """
        start = self.clock()
        fallback_reason = None
        error_kind = None

        if request.force_mock:
            logger.info("running mock inference (forced)")
            backend, output = BackendKind.MOCK, self.mock(request.tensor)

        elif not request.model_path:
            logger.info("running mock inference (no model provided)")
            backend, output = BackendKind.MOCK, self.mock(request.tensor)

        else:
            try:
                output = self.executor.execute(
                    request.model_path,
                    request.tensor,
                    request.plugin_dir,
                )
                backend = BackendKind.REAL
            except ExecutionError as e:
                fallback_reason = str(e)
                error_kind = e.kind
                logger.warning(f"real inference unavailable [{e.kind}]: {e}")
                logger.info("falling back to mock inference")
                backend, output = BackendKind.REAL_FALLBACK_TO_MOCK, self.mock(request.tensor)

        elapsed = self.clock() - start
        logger.info(f"inference path: {backend.value} | latency: {elapsed * 1000:.3f}ms")

        return InferenceOutcome(
            backend=backend,
            output=output,
            elapsed_s=elapsed,
            fallback_reason=fallback_reason,
            error_kind=error_kind,
        )
