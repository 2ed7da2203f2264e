"""
Small array helpers shared by the voting and clustering stages.
"""

import numpy as np
from typing import Tuple


def cat(first: np.ndarray, second: np.ndarray) -> np.ndarray:
    """
    Concatenate two equal-length sequences column-wise.

    Args:
        first: Values for column 0
        second: Values for column 1

    Returns:
        Array of shape (L, 2)
    """
    first = np.asarray(first, dtype=np.float64).ravel()
    second = np.asarray(second, dtype=np.float64).ravel()
    if first.shape != second.shape:
        raise ValueError(f"Cannot concatenate columns of length {first.size} and {second.size}")
    return np.column_stack((first, second))


def amax(values: np.ndarray) -> Tuple[float, int]:
    """
    Maximum of a buffer together with the flat index of its first occurrence.

    Returns (0.0, 0) for an empty buffer.
    """
    flat = np.asarray(values).ravel()
    if flat.size == 0:
        return 0.0, 0
    index = int(np.argmax(flat))
    return float(flat[index]), index
