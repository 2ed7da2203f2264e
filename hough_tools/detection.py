"""
Hough line detection pipeline.

detect_lines() runs the three stages in order:

    1. build_accumulator  - vote every edge pixel into Hough space
    2. extract_clusters   - collect peaks and group them with DBSCAN
    3. extract_lines      - one (slope, intercept, distance, angle) per cluster

detect_lines_with_peaks() runs the same pipeline and also hands back the
peaks and their cluster labels for plotting.
"""

import logging
import math

import numpy as np
from typing import Optional, Tuple

from .accumulator import as_edge_matrix, build_accumulator, validate_threshold_fraction
from .clustering import Clusterer
from .config import (
    DEFAULT_THRESHOLD_FRACTION,
    DEFAULT_EPSILON,
    DEFAULT_MIN_PTS,
    VOTE_CHUNK_SIZE,
)
from .errors import AllocationFailure, InvalidParameter
from .line_detection import LineSet, extract_lines
from .peaks import PeakList, extract_clusters

logger = logging.getLogger(__name__)


def _validate_clustering(epsilon: float, min_pts: int):
    try:
        epsilon = float(epsilon)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(f"epsilon must be a number, got {epsilon!r}") from exc
    if not math.isfinite(epsilon) or epsilon <= 0.0:
        raise InvalidParameter(f"epsilon must be above 0, got {epsilon}")

    try:
        valid = not isinstance(min_pts, bool) and int(min_pts) == min_pts and min_pts > 0
    except (TypeError, ValueError, OverflowError):
        valid = False
    if not valid:
        raise InvalidParameter(f"min_pts must be a positive integer, got {min_pts!r}")

    return epsilon, int(min_pts)


def _no_peaks() -> PeakList:
    return PeakList(*(np.zeros(0, dtype=np.float64) for _ in range(3)))


def detect_lines_with_peaks(edge_matrix,
                            p: float = DEFAULT_THRESHOLD_FRACTION,
                            epsilon: float = DEFAULT_EPSILON,
                            min_pts: int = DEFAULT_MIN_PTS,
                            rows: Optional[int] = None,
                            columns: Optional[int] = None,
                            clusterer: Optional[Clusterer] = None,
                            chunk_size: int = VOTE_CHUNK_SIZE) -> Tuple[LineSet, PeakList, np.ndarray]:
    """
    Run the detection pipeline once and keep its intermediate peaks.

    Takes the same arguments as detect_lines().

    Returns:
        Tuple of (lines, peaks, labels)
    """
    p = validate_threshold_fraction(p)
    epsilon, min_pts = _validate_clustering(epsilon, min_pts)
    X = as_edge_matrix(edge_matrix, rows=rows, columns=columns)

    if X.size == 0:
        logger.info("Empty edge matrix %s, no lines", X.shape)
        return LineSet.empty(), _no_peaks(), np.zeros(0, dtype=np.int64)

    try:
        accumulator = build_accumulator(X, p, chunk_size=chunk_size)
        peaks, labels, n_clusters = extract_clusters(accumulator, epsilon, min_pts,
                                                     clusterer=clusterer)
        if n_clusters == 0:
            logger.info("No line clusters found (%d peaks)", len(peaks))
            return LineSet.empty(), peaks, labels
        lines = extract_lines(peaks, labels, n_clusters)
    except MemoryError as exc:
        raise AllocationFailure(
            f"Could not allocate Hough buffers for a {X.shape[0]}x{X.shape[1]} image"
        ) from exc

    logger.info("Detected %d lines from %d peaks", lines.count, len(peaks))
    return lines, peaks, labels


def detect_lines(edge_matrix,
                 p: float = DEFAULT_THRESHOLD_FRACTION,
                 epsilon: float = DEFAULT_EPSILON,
                 min_pts: int = DEFAULT_MIN_PTS,
                 rows: Optional[int] = None,
                 columns: Optional[int] = None,
                 clusterer: Optional[Clusterer] = None,
                 chunk_size: int = VOTE_CHUNK_SIZE) -> LineSet:
    """
    Detect the dominant straight lines of an edge image.

    Args:
        edge_matrix: 2-D edge map, or a flat row-major buffer with rows and
            columns given
        p: Line strength threshold as a fraction of the strongest cell;
            values above 1 are clamped to 1
        epsilon: Clustering radius in (angle, radius) bucket units
        min_pts: Minimum peaks around a core point
        rows: Row count for a flat buffer
        columns: Column count for a flat buffer
        clusterer: Clustering callable, DBSCAN when None
        chunk_size: Edge pixels voted per batch

    Returns:
        LineSet with one entry per cluster; empty when nothing is found

    Raises:
        InvalidParameter: On out-of-range parameters, before any voting
        AllocationFailure: When an intermediate buffer cannot be allocated
    """
    lines, _, _ = detect_lines_with_peaks(edge_matrix, p=p, epsilon=epsilon, min_pts=min_pts,
                                          rows=rows, columns=columns, clusterer=clusterer,
                                          chunk_size=chunk_size)
    return lines
