"""
Line parameter extraction from clustered Hough peaks.
Turns each cluster's strongest peak into slope/intercept form and extracts
drawable properties of the resulting lines.

Lines are expressed in image coordinates with x the 1-based column index and
y the 1-based row index:

    x * sin(angle) + y * cos(angle) = distance
    y = slope * x + intercept
"""

from dataclasses import dataclass

import numpy as np
from typing import Dict, Iterator, List, Optional, Tuple

from .config import VERTICAL_TOLERANCE
from .peaks import PeakList


@dataclass(frozen=True)
class Line:
    """A single detected line."""
    slope: float
    intercept: float
    distance: float
    angle: float  # radians

    @property
    def angle_degrees(self) -> float:
        return float(np.rad2deg(self.angle))

    def residual(self, x: float, y: float) -> float:
        """Signed distance of the point (x, y) from the line."""
        return x * np.sin(self.angle) + y * np.cos(self.angle) - self.distance


@dataclass(frozen=True)
class LineSet:
    """
    Detected lines as four parallel arrays of equal length.
    """
    slopes: np.ndarray
    intercepts: np.ndarray
    distances: np.ndarray
    angles: np.ndarray

    def __post_init__(self):
        lengths = {len(self.slopes), len(self.intercepts), len(self.distances), len(self.angles)}
        if len(lengths) != 1:
            raise ValueError(f"LineSet sequences differ in length: {sorted(lengths)}")

    @classmethod
    def empty(cls) -> "LineSet":
        return cls(*(np.zeros(0, dtype=np.float64) for _ in range(4)))

    @property
    def count(self) -> int:
        return len(self.slopes)

    def __len__(self) -> int:
        return self.count

    def __getitem__(self, index: int) -> Line:
        return Line(
            slope=float(self.slopes[index]),
            intercept=float(self.intercepts[index]),
            distance=float(self.distances[index]),
            angle=float(self.angles[index]),
        )

    def __iter__(self) -> Iterator[Line]:
        for index in range(self.count):
            yield self[index]


def extract_lines(peaks: PeakList, labels: np.ndarray, n_clusters: int) -> LineSet:
    """
    Compute one line per cluster from its strongest peak.

    Args:
        peaks: Peaks with 1-based angles and radii
        labels: Cluster label per peak, 0 for noise
        n_clusters: Number of clusters N; labels 1..N are used

    Returns:
        LineSet with exactly n_clusters lines
    """
    labels = np.asarray(labels)
    slopes = np.zeros(n_clusters, dtype=np.float64)
    intercepts = np.zeros(n_clusters, dtype=np.float64)
    distances = np.zeros(n_clusters, dtype=np.float64)
    angles = np.zeros(n_clusters, dtype=np.float64)

    for cluster_id in range(1, n_clusters + 1):
        members = np.flatnonzero(labels == cluster_id)
        if members.size == 0:
            raise ValueError(f"Cluster {cluster_id} has no peaks; labels must be dense")

        # argmax keeps the first of equal maxima, i.e. the lowest angle then radius
        best = members[np.argmax(peaks.votes[members])]

        # Undo the +1 offset of the peak list
        angle = peaks.angles[best] - 1.0
        r = peaks.radii[best] - 1.0

        # Avoid cos(angle) == 0 for exactly vertical lines
        if abs(90.0 - angle) < VERTICAL_TOLERANCE:
            angle = angle + VERTICAL_TOLERANCE

        angle = np.deg2rad(angle)
        slopes[cluster_id - 1] = np.sin(angle) / -np.cos(angle)
        intercepts[cluster_id - 1] = -r / -np.cos(angle)
        distances[cluster_id - 1] = r
        angles[cluster_id - 1] = angle

    return LineSet(slopes, intercepts, distances, angles)


def line_endpoints(line: Line, shape: Tuple[int, int]) -> Optional[Tuple[float, float, float, float]]:
    """
    Clip an infinite line to the image rectangle.

    Args:
        line: Detected line
        shape: Image (rows, columns)

    Returns:
        (x1, y1, x2, y2) in 0-based pixel coordinates, or None when the line
        misses the image
    """
    rows, columns = shape[:2]
    sin_a = np.sin(line.angle)
    cos_a = np.cos(line.angle)
    tol = 1e-9

    candidates = []
    if abs(cos_a) > tol:
        for x in (1.0, float(columns)):
            y = (line.distance - x * sin_a) / cos_a
            if 1.0 - tol <= y <= rows + tol:
                candidates.append((x, y))
    if abs(sin_a) > tol:
        for y in (1.0, float(rows)):
            x = (line.distance - y * cos_a) / sin_a
            if 1.0 - tol <= x <= columns + tol:
                candidates.append((x, y))

    if not candidates:
        return None

    # Farthest pair; corners may appear twice
    best = (candidates[0], candidates[0])
    best_len = -1.0
    for a in range(len(candidates)):
        for b in range(a, len(candidates)):
            length = np.hypot(candidates[a][0] - candidates[b][0],
                              candidates[a][1] - candidates[b][1])
            if length > best_len:
                best_len = length
                best = (candidates[a], candidates[b])

    (x1, y1), (x2, y2) = best
    return (x1 - 1.0, y1 - 1.0, x2 - 1.0, y2 - 1.0)


def calculate_line_length(coords: Tuple[float, float, float, float]) -> float:
    """
    Calculate Euclidean length of a line segment.

    Args:
        coords: Segment coordinates [x1, y1, x2, y2]

    Returns:
        Length in pixels
    """
    x1, y1, x2, y2 = coords
    return float(np.sqrt((x2 - x1)**2 + (y2 - y1)**2))


def get_line_properties(line: Line, shape: Tuple[int, int]) -> Dict:
    """
    Extract all properties of a detected line within an image.

    Args:
        line: Detected line
        shape: Image (rows, columns)

    Returns:
        Dictionary with line properties; endpoint-based entries are None
        when the line misses the image
    """
    coords = line_endpoints(line, shape)

    props = {
        'slope': line.slope,
        'intercept': line.intercept,
        'distance': line.distance,
        'angle': line.angle,
        'angle_degrees': line.angle_degrees,
        'coordinates': None,
        'endpoints': None,
        'length': 0.0,
        'midpoint': None,
    }
    if coords is not None:
        x1, y1, x2, y2 = coords
        props['coordinates'] = [x1, y1, x2, y2]
        props['endpoints'] = [(x1, y1), (x2, y2)]
        props['length'] = calculate_line_length(coords)
        props['midpoint'] = ((x1 + x2) / 2, (y1 + y2) / 2)
    return props


def describe_lines(lines: LineSet, shape: Tuple[int, int]) -> List[Dict]:
    """
    Properties of every line in a LineSet, each tagged with an id.

    Args:
        lines: Detected lines
        shape: Image (rows, columns)

    Returns:
        List of property dictionaries with ids "line_0", "line_1", ...
    """
    results = []
    for i, line in enumerate(lines):
        props = get_line_properties(line, shape)
        props['id'] = f"line_{i}"
        results.append(props)
    return results
