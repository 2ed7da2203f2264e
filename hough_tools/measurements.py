"""
High-level detection API.
Wraps the Hough pipeline for callers that want a plain dictionary back
instead of exceptions.
"""

import logging

import numpy as np
from typing import Dict, Optional, Union

from .config import get_active_params
from .detection import detect_lines
from .errors import HoughError
from .line_detection import describe_lines
from .preprocessing import load_image, to_edge_matrix

logger = logging.getLogger(__name__)


def detect_lines_in_image(image: Union[str, np.ndarray],
                          p: Optional[float] = None,
                          epsilon: Optional[float] = None,
                          min_pts: Optional[int] = None,
                          level: Optional[float] = None) -> Dict:
    """
    Detect lines in an edge image and describe them.

    Args:
        image: Image path (str) or numpy array holding an edge image
        p: Line strength threshold fraction (config default when None)
        epsilon: Clustering radius (config default when None)
        min_pts: Clustering minimum points (config default when None)
        level: Grayscale level above which a pixel is an edge

    Returns:
        Dictionary with:
            - success: bool
            - count: int, number of lines
            - lines: list of line property dicts ("line_0", ...)
            - shape: (rows, columns) of the edge matrix
            - params: the parameters used
            - error: str if failed
    """
    params = get_active_params(threshold_fraction=p, epsilon=epsilon,
                               min_pts=min_pts, edge_binarize_level=level)

    try:
        # Load image if path provided
        if isinstance(image, str):
            image = load_image(image)
        edges = to_edge_matrix(np.asarray(image), params["EDGE_BINARIZE_LEVEL"])

        lines = detect_lines(
            edges,
            p=params["THRESHOLD_FRACTION"],
            epsilon=params["EPSILON"],
            min_pts=params["MIN_PTS"],
            chunk_size=params["VOTE_CHUNK_SIZE"],
        )
    except (HoughError, ValueError) as exc:
        logger.warning("Line detection failed: %s", exc)
        return {
            'success': False,
            'error': str(exc),
            'params': params,
        }

    return {
        'success': True,
        'count': lines.count,
        'lines': describe_lines(lines, edges.shape),
        'shape': edges.shape,
        'params': params,
    }
