from abc import ABC, abstractmethod
from typing import Optional

from .types import Tensor


class GuestExecutor(ABC):
    """
    Abstract real-inference boundary.
    The dispatcher must depend ONLY on this interface.
    """

    @abstractmethod
    def execute(
        self,
        model_path: str,
        tensor: Tensor,
        plugin_dir: Optional[str] = None,
    ) -> Tensor:
        """
        Run real inference and return the output Tensor.

        Raises:
            ExecutionError: any subtype, for any failure. Nothing else.
        """
        raise NotImplementedError
