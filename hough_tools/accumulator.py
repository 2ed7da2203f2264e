"""
Hough accumulator construction.

Every edge pixel proposes one candidate line per slope in a fixed table of
181 slopes. The candidate is described by the foot of the perpendicular from
the origin, quantized to an integer radius and an integer angle in [0, 180).
Each pixel casts a single vote into every distinct (angle, radius) cell it
reaches, and the finished grid is cut at a fraction of its maximum.
"""

import logging
import math

import numpy as np
from typing import Optional

from .arrays import amax
from .config import (
    N_ANGLES,
    N_SLOPES,
    BOUNDARY_ANGLE_OFFSET,
    EDGE_EPSILON,
    VOTE_CHUNK_SIZE,
)
from .errors import InvalidParameter

logger = logging.getLogger(__name__)


def hough_radius(rows: int, columns: int) -> int:
    """Number of radius buckets: the floor of the image diagonal."""
    return int(math.floor(math.sqrt(rows * rows + columns * columns)))


def slope_table() -> np.ndarray:
    """
    Slopes for the integer angles -90..90 degrees.

    The two boundary angles have no finite tangent, so they are replaced by
    -90 - 1e5 and 90 + 1e5 degrees before conversion.
    """
    angles = np.arange(-90, 91, dtype=np.float64)
    angles[0] = -90.0 - BOUNDARY_ANGLE_OFFSET
    angles[-1] = 90.0 + BOUNDARY_ANGLE_OFFSET
    return np.tan(np.deg2rad(angles))


def validate_threshold_fraction(p: float) -> float:
    """
    Check the relative threshold p and clamp it into (0, 1].

    Raises:
        InvalidParameter: If p is not a positive finite number
    """
    try:
        p = float(p)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(f"Threshold fraction must be a number, got {p!r}") from exc

    if not math.isfinite(p) or p <= 0.0:
        raise InvalidParameter(f"Threshold fraction must be above 0, got {p}")
    if p > 1.0:
        logger.warning("Threshold fraction %.3f is above 1, clamping to 1", p)
        p = 1.0
    return p


def as_edge_matrix(edge_matrix, rows: Optional[int] = None,
                   columns: Optional[int] = None) -> np.ndarray:
    """
    Coerce the input into a 2-D float64 edge matrix.

    A 2-D array is used as is. A flat buffer needs rows and columns and is
    reshaped in row-major order.

    Raises:
        InvalidParameter: On bad dimensions or negative entries
    """
    if rows is not None and int(rows) <= 0:
        raise InvalidParameter(f"rows must be positive, got {rows}")
    if columns is not None and int(columns) <= 0:
        raise InvalidParameter(f"columns must be positive, got {columns}")

    X = np.asarray(edge_matrix, dtype=np.float64)

    if rows is not None or columns is not None:
        if rows is None or columns is None:
            raise InvalidParameter("rows and columns must be given together")
        if X.size != int(rows) * int(columns):
            raise InvalidParameter(
                f"Edge buffer holds {X.size} values, expected {rows}x{columns}"
            )
        X = X.reshape(int(rows), int(columns))

    if X.ndim != 2:
        raise InvalidParameter(f"Edge matrix must be 2-D, got shape {X.shape}")
    if X.size and np.any(X < 0.0):
        raise InvalidParameter("Edge matrix entries must be non-negative")

    return X


def _round_half_up(values: np.ndarray) -> np.ndarray:
    # Inputs are non-negative, so this rounds halves away from zero
    return np.floor(values + 0.5).astype(np.int64)


def _candidate_cells(pixel_rows: np.ndarray, pixel_cols: np.ndarray,
                     slopes: np.ndarray, r_max: int) -> np.ndarray:
    """
    Flat accumulator indexes proposed by each pixel, one column per slope.

    Candidates that do not fit the accumulator are marked -1.
    """
    i = pixel_rows[:, None] + 1.0
    j = pixel_cols[:, None] + 1.0
    K = slopes[None, :]

    # Straight line through (i, j) and the foot of its perpendicular
    M = j - K * i
    x = -K * M / (1.0 + K * K)
    y = K * x + M

    r = _round_half_up(np.sqrt(x * x + y * y))

    # A foot exactly at the origin has no direction of its own, it takes
    # the direction of the line normal instead
    at_origin = (x == 0.0) & (y == 0.0)
    angle = np.where(at_origin, np.arctan2(1.0, -K), np.arctan2(y, x))
    angle = np.where(angle < 0.0, angle + np.pi, angle)

    angle_int = _round_half_up(np.rad2deg(angle))

    cells = angle_int * r_max + r
    return np.where((r < r_max) & (angle_int < N_ANGLES), cells, -1)


def score_votes(edge_matrix: np.ndarray, chunk_size: int = VOTE_CHUNK_SIZE) -> np.ndarray:
    """
    Raw Hough votes for an edge matrix, before thresholding.

    Args:
        edge_matrix: 2-D array, entries above EDGE_EPSILON are edge pixels
        chunk_size: Number of edge pixels voted per batch

    Returns:
        Float array of shape (180, r_max) with one vote per pixel and cell
    """
    X = as_edge_matrix(edge_matrix)
    if int(chunk_size) <= 0:
        raise InvalidParameter(f"chunk_size must be positive, got {chunk_size}")
    chunk_size = int(chunk_size)

    rows, columns = X.shape
    r_max = hough_radius(rows, columns)
    votes = np.zeros(N_ANGLES * r_max, dtype=np.float64)
    if votes.size == 0:
        return votes.reshape(N_ANGLES, r_max)

    pixel_rows, pixel_cols = np.nonzero(X > EDGE_EPSILON)
    slopes = slope_table()

    for start in range(0, pixel_rows.size, chunk_size):
        stop = start + chunk_size
        cells = _candidate_cells(pixel_rows[start:stop], pixel_cols[start:stop],
                                 slopes, r_max)

        # One vote per distinct cell and pixel
        cells.sort(axis=1)
        first = np.ones(cells.shape, dtype=bool)
        first[:, 1:] = cells[:, 1:] != cells[:, :-1]
        hits = cells[first & (cells >= 0)]

        votes += np.bincount(hits, minlength=votes.size)

    logger.debug("Voted %d edge pixels x %d slopes into %dx%d cells",
                 pixel_rows.size, N_SLOPES, N_ANGLES, r_max)

    return votes.reshape(N_ANGLES, r_max)


def build_accumulator(edge_matrix: np.ndarray, p: float,
                      chunk_size: int = VOTE_CHUNK_SIZE) -> np.ndarray:
    """
    Build the thresholded Hough accumulator.

    Args:
        edge_matrix: 2-D edge image (rows x columns), non-negative
        p: Relative threshold in (0, 1]; values above 1 are clamped
        chunk_size: Number of edge pixels voted per batch

    Returns:
        Float array of shape (180, r_max); cells holding fewer than
        max * p votes are zero
    """
    p = validate_threshold_fraction(p)
    P = score_votes(edge_matrix, chunk_size=chunk_size)

    max_votes, _ = amax(P)
    threshold = max_votes * p
    P[P < threshold] = 0.0

    logger.debug("Accumulator max %.0f votes, threshold %.2f, %d cells kept",
                 max_votes, threshold, int(np.count_nonzero(P)))
    return P
