import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest


@pytest.fixture
def diagonal_edges():
    """50x50 edge matrix with the main diagonal set."""
    return np.eye(50, dtype=np.float64)


@pytest.fixture
def vertical_edges():
    """30x30 edge matrix with column index 9 set (x = 10 in 1-based coordinates)."""
    X = np.zeros((30, 30), dtype=np.float64)
    X[:, 9] = 1.0
    return X


class RecordingClusterer:
    """Clusterer double returning fixed labels and remembering its calls."""

    def __init__(self, labels=None):
        self.labels = labels
        self.calls = []

    def __call__(self, points, epsilon, min_pts):
        self.calls.append((np.array(points), epsilon, min_pts))
        if self.labels is None:
            # every peak its own cluster
            return np.arange(1, len(points) + 1)
        return np.asarray(self.labels)


@pytest.fixture
def recording_clusterer():
    return RecordingClusterer
