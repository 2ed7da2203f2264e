"""
Image loading and edge-matrix preparation.
The detector expects an edge image produced elsewhere; these helpers only
read it from disk and turn it into a binary float matrix.
"""

import cv2
import numpy as np

from .accumulator import hough_radius
from .config import EDGE_BINARIZE_LEVEL, EDGE_EPSILON


def load_image(image_path: str) -> np.ndarray:
    """
    Load an image from file path.

    Args:
        image_path: Path to the image file

    Returns:
        Loaded image in BGR format (OpenCV default)

    Raises:
        ValueError: If image cannot be loaded
    """
    image = cv2.imread(image_path)

    if image is None:
        raise ValueError(f"Failed to load image from {image_path}")

    return image


def to_edge_matrix(image: np.ndarray, level: float = EDGE_BINARIZE_LEVEL) -> np.ndarray:
    """
    Convert an edge image into a binary edge matrix.

    A float matrix whose values all lie in [0, 1] is taken to be an edge
    matrix already; every entry above EDGE_EPSILON is an edge and level is
    ignored.

    Args:
        image: Edge image (BGR, grayscale or a 0..1 float edge matrix)
        level: Pixels strictly above this grayscale level become edges

    Returns:
        Float64 matrix of the image's height x width holding 0.0 and 1.0
    """
    if image.ndim == 3:
        gray = cv2.cvtColor(image.astype(np.float32), cv2.COLOR_BGR2GRAY)
    else:
        gray = image
    gray = np.asarray(gray, dtype=np.float64)

    if image.dtype.kind == 'f' and gray.size and gray.min() >= 0.0 and gray.max() <= 1.0:
        return (gray > EDGE_EPSILON).astype(np.float64)

    return (gray > level).astype(np.float64)


def get_image_info(image: np.ndarray, level: float = EDGE_BINARIZE_LEVEL) -> dict:
    """
    Get basic information about an edge image.

    Args:
        image: Input image
        level: Edge level passed to to_edge_matrix()

    Returns:
        Dictionary with image size, number of edge pixels and the number of
        radius buckets its Hough accumulator will have
    """
    height, width = image.shape[:2]
    channels = image.shape[2] if image.ndim == 3 else 1
    edges = to_edge_matrix(image, level)

    return {
        'height': height,
        'width': width,
        'channels': channels,
        'dtype': str(image.dtype),
        'edge_pixels': int(np.count_nonzero(edges)),
        'hough_radius': hough_radius(height, width),
    }
