"""
Hough Tools: Hough transform line detection with density clustering

Finds the dominant straight lines of a binary edge image. Every edge pixel
votes into a 180 x r_max (angle, radius) accumulator, the strongest cells are
grouped with DBSCAN and each group yields one line.

Main Functions:
    - detect_lines: Full pipeline on an edge matrix, returns a LineSet
    - build_accumulator: Thresholded Hough vote grid
    - extract_clusters: Peaks and their cluster labels
    - extract_lines: Slope, intercept, distance and angle per cluster
    - detect_lines_in_image: Dictionary interface for image files

Example Usage:
    ```python
    from hough_tools import detect_lines, create_synthetic_edges

    edges = create_synthetic_edges((50, 50))
    lines = detect_lines(edges, p=0.5, epsilon=3.0, min_pts=1)

    for line in lines:
        print(f"y = {line.slope:.2f}x + {line.intercept:.2f}")
    ```
"""

__version__ = '0.1.0'

# Core pipeline
from .accumulator import (
    build_accumulator,
    score_votes,
    hough_radius,
    slope_table
)
from .clustering import dbscan_cluster
from .peaks import PeakList, find_peaks, extract_clusters
from .line_detection import (
    Line,
    LineSet,
    extract_lines,
    line_endpoints,
    get_line_properties,
    describe_lines
)
from .detection import detect_lines, detect_lines_with_peaks
from .errors import HoughError, InvalidParameter, AllocationFailure

# Image handling and high level API
from .preprocessing import load_image, to_edge_matrix, get_image_info
from .measurements import detect_lines_in_image

# Utilities
from .utils import (
    setup_logging,
    draw_lines_on_image,
    plot_hough_clusters,
    save_visualization,
    create_synthetic_edges,
    print_detection_summary
)

# Define public API
__all__ = [
    # Pipeline
    'detect_lines',
    'detect_lines_with_peaks',
    'build_accumulator',
    'score_votes',
    'hough_radius',
    'slope_table',
    'dbscan_cluster',
    'PeakList',
    'find_peaks',
    'extract_clusters',
    'Line',
    'LineSet',
    'extract_lines',
    'line_endpoints',
    'get_line_properties',
    'describe_lines',

    # Errors
    'HoughError',
    'InvalidParameter',
    'AllocationFailure',

    # Images
    'load_image',
    'to_edge_matrix',
    'get_image_info',
    'detect_lines_in_image',

    # Utilities
    'setup_logging',
    'draw_lines_on_image',
    'plot_hough_clusters',
    'save_visualization',
    'create_synthetic_edges',
    'print_detection_summary',
]
