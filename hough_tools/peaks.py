"""
Peak extraction from a thresholded Hough accumulator.
"""

import logging
from dataclasses import dataclass

import numpy as np
from typing import Optional, Tuple

from .arrays import cat
from .clustering import Clusterer, dbscan_cluster, count_clusters
from .config import PEAK_FLOOR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeakList:
    """
    Surviving accumulator cells in angle-major, radius-minor order.

    angles and radii carry a +1 offset over the accumulator indexes;
    extract_lines() removes it again.
    """
    angles: np.ndarray
    radii: np.ndarray
    votes: np.ndarray

    def __len__(self) -> int:
        return int(self.angles.size)

    def coordinates(self) -> np.ndarray:
        """(angle, radius) pairs as an (L, 2) table."""
        return cat(self.angles, self.radii)


def find_peaks(accumulator: np.ndarray) -> PeakList:
    """
    Collect every cell holding more than one vote.

    Args:
        accumulator: Array of shape (180, r_max)

    Returns:
        PeakList with 1-based angles and radii
    """
    P = np.asarray(accumulator, dtype=np.float64)

    # np.nonzero walks a C-ordered array row by row, i.e. angle-major
    angle_idx, radius_idx = np.nonzero(P > PEAK_FLOOR)

    return PeakList(
        angles=(angle_idx + 1).astype(np.float64),
        radii=(radius_idx + 1).astype(np.float64),
        votes=P[angle_idx, radius_idx].copy(),
    )


def extract_clusters(accumulator: np.ndarray,
                     epsilon: float,
                     min_pts: int,
                     clusterer: Optional[Clusterer] = None) -> Tuple[PeakList, np.ndarray, int]:
    """
    Turn the accumulator into peaks and group them into line clusters.

    Args:
        accumulator: Thresholded accumulator from build_accumulator()
        epsilon: Clustering neighbourhood radius
        min_pts: Clustering minimum points
        clusterer: Clustering callable, DBSCAN when None

    Returns:
        Tuple of (peaks, labels, number_of_clusters)
    """
    if clusterer is None:
        clusterer = dbscan_cluster

    peaks = find_peaks(accumulator)
    if len(peaks) == 0:
        logger.debug("No accumulator cell above %.1f votes", PEAK_FLOOR)
        return peaks, np.zeros(0, dtype=np.int64), 0

    labels = np.asarray(clusterer(peaks.coordinates(), epsilon, min_pts), dtype=np.int64)
    if labels.shape != (len(peaks),):
        raise ValueError(
            f"Clusterer returned {labels.size} labels for {len(peaks)} peaks"
        )

    n_clusters = count_clusters(labels)
    logger.debug("%d peaks grouped into %d clusters", len(peaks), n_clusters)
    return peaks, labels, n_clusters
