"""
Exceptions raised by the Hough line detector.
"""


class HoughError(Exception):
    """Base class for all detector errors."""


class InvalidParameter(HoughError, ValueError):
    """A detection parameter or the input matrix is out of range."""


class AllocationFailure(HoughError, MemoryError):
    """An intermediate buffer (accumulator, peaks, labels) could not be allocated."""
