"""
Density clustering of Hough peaks.

A clusterer is any callable

    clusterer(points, epsilon, min_pts) -> labels

taking an (L, 2) array of (angle, radius) coordinates and returning one
integer label per row: 0 for noise and 1..K for the K clusters found, with
no gaps. dbscan_cluster() is the default implementation.
"""

import logging

import numpy as np
from typing import Callable
from sklearn.cluster import DBSCAN

logger = logging.getLogger(__name__)

Clusterer = Callable[[np.ndarray, float, int], np.ndarray]


def dbscan_cluster(points: np.ndarray, epsilon: float, min_pts: int) -> np.ndarray:
    """
    Label peaks with scikit-learn's DBSCAN.

    Args:
        points: Array of shape (L, 2)
        epsilon: Neighbourhood radius
        min_pts: Minimum neighbourhood size (the point itself included)
            for a core point

    Returns:
        Integer array of length L; 0 = noise, 1..K = cluster id
    """
    points = np.asarray(points, dtype=np.float64)
    if points.shape[0] == 0:
        return np.zeros(0, dtype=np.int64)

    clustering = DBSCAN(eps=epsilon, min_samples=int(min_pts)).fit(points)

    # DBSCAN marks noise as -1 and numbers clusters from 0
    labels = clustering.labels_.astype(np.int64) + 1

    logger.debug("DBSCAN found %d clusters and %d noise points among %d peaks",
                 int(labels.max()), int(np.sum(labels == 0)), points.shape[0])
    return labels


def count_clusters(labels: np.ndarray) -> int:
    """Number of clusters in a dense 0..N labelling (0 when empty)."""
    labels = np.asarray(labels)
    if labels.size == 0:
        return 0
    return int(labels.max())
