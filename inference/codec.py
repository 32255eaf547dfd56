"""
Tensor codec: CSV text <-> Tensor.

This is the only wire format used across the host/guest process boundary.
Guests print exactly one line of it on stdout; the host hands it to guests
as an argv value.
"""

from typing import List

import numpy as np

from .errors import EmptyTensorError, MalformedValueError
from .types import Tensor

SEPARATOR = ","


def _format_value(value: float) -> str:
    # numpy prints the shortest decimal that round-trips the float32 value
    return str(np.float32(value))


def encode(tensor: Tensor) -> str:
    return SEPARATOR.join(_format_value(v) for v in tensor)


def decode(text: str) -> Tensor:
    """
    Parse comma-separated floats into a Tensor.

    Tokens are stripped of surrounding whitespace and parsed in order. The
    first token that fails raises MalformedValueError carrying its index.
    Empty or whitespace-only text raises EmptyTensorError.
    """
    if not text or not text.strip():
        raise EmptyTensorError()

    values: List[np.float32] = []
    for index, token in enumerate(text.split(SEPARATOR)):
        stripped = token.strip()
        if "_" in stripped:
            raise MalformedValueError(index, token)
        try:
            values.append(np.float32(float(stripped)))
        except ValueError:
            raise MalformedValueError(index, token) from None

    return Tensor(tuple(values))


def format_tensor(tensor: Tensor) -> str:
    """Human-readable rendering used in the report line: `[0.1, 0.2]`."""
    return "[" + ", ".join(_format_value(v) for v in tensor) + "]"
