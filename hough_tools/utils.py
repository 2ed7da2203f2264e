"""
Utility functions for hough_tools visualization, logging and testing.
"""

import logging

import cv2
import matplotlib.pyplot as plt
import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple

from .line_detection import LineSet, line_endpoints
from .peaks import PeakList


def setup_logging(log_file: Optional[str] = None, verbose: bool = False) -> logging.Logger:
    """Setup logging to console and optionally to a file."""
    logger = logging.getLogger("hough_tools")
    logger.setLevel(logging.DEBUG)
    logger.handlers = []

    # Console handler (INFO level unless verbose)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    # File handler (DEBUG level)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
        logger.addHandler(file_handler)

    return logger


def draw_lines_on_image(image: np.ndarray, lines: LineSet,
                        color: Tuple[int, int, int] = (0, 0, 255),
                        thickness: int = 1) -> np.ndarray:
    """
    Draw detected lines across an image.

    Args:
        image: Input image (grayscale, BGR or an edge matrix)
        lines: Detected lines
        color: BGR color tuple (default: red)
        thickness: Line thickness

    Returns:
        BGR uint8 image with lines drawn
    """
    if image.dtype != np.uint8:
        scale = 255.0 if image.size and image.max() <= 1.0 else 1.0
        result = np.clip(image * scale, 0, 255).astype(np.uint8)
    else:
        result = image.copy()
    if result.ndim == 2:
        result = cv2.cvtColor(result, cv2.COLOR_GRAY2BGR)

    for line in lines:
        coords = line_endpoints(line, result.shape[:2])
        if coords is None:
            continue
        x1, y1, x2, y2 = (int(round(c)) for c in coords)
        cv2.line(result, (x1, y1), (x2, y2), color, thickness)
    return result


def save_visualization(image: np.ndarray, filename: str, dpi: int = 150) -> None:
    """
    Save an image or edge matrix through matplotlib.

    Args:
        image: BGR image, grayscale image or edge matrix
        filename: Output filename
        dpi: Resolution for saving
    """
    fig = plt.figure(figsize=(10, 8))
    if image.ndim == 3:
        plt.imshow(cv2.cvtColor(image, cv2.COLOR_BGR2RGB))
    else:
        plt.imshow(image, cmap='gray')
    plt.axis('off')
    fig.savefig(filename, dpi=dpi, bbox_inches='tight')
    plt.close(fig)


def plot_hough_clusters(peaks: PeakList, labels: np.ndarray,
                        filename: Optional[str] = None, dpi: int = 150):
    """
    Scatter the Hough peaks in (angle, radius, votes) space, one color per cluster.

    Args:
        peaks: Peaks from extract_clusters()
        labels: Cluster labels, 0 is drawn as noise
        filename: Save the figure here and close it when given

    Returns:
        The matplotlib figure, or None when it was saved
    """
    labels = np.asarray(labels)
    fig = plt.figure(figsize=(10, 8))
    ax = fig.add_subplot(projection='3d')

    for cluster_id in np.unique(labels):
        mask = labels == cluster_id
        label = "noise" if cluster_id == 0 else f"cluster {cluster_id}"
        marker = 'x' if cluster_id == 0 else 'o'
        ax.scatter(peaks.angles[mask] - 1, peaks.radii[mask] - 1, peaks.votes[mask],
                   marker=marker, label=label)

    ax.set_xlabel('angle (deg)')
    ax.set_ylabel('radius (px)')
    ax.set_zlabel('votes')
    if labels.size:
        ax.legend()

    if filename:
        fig.savefig(filename, dpi=dpi, bbox_inches='tight')
        plt.close(fig)
        return None
    return fig


def create_synthetic_edges(shape: Tuple[int, int] = (50, 50),
                           segments: Optional[Sequence[Dict]] = None) -> np.ndarray:
    """
    Create a synthetic edge matrix for testing.

    Args:
        shape: (rows, columns) of the matrix
        segments: List of segment configurations with 'start' and 'end'
            (x, y) pixel coordinates and an optional 'thickness'

    Returns:
        Float64 matrix with 1.0 on the drawn segments and 0.0 elsewhere
    """
    canvas = np.zeros(shape[:2], dtype=np.uint8)

    if segments is None:
        # Default: the main diagonal
        segments = [{'start': (0, 0), 'end': (shape[1] - 1, shape[0] - 1)}]

    for config in segments:
        cv2.line(canvas, tuple(config['start']), tuple(config['end']), 255,
                 config.get('thickness', 1))

    return (canvas > 0).astype(np.float64)


def print_detection_summary(detection_result: Dict) -> None:
    """
    Print a formatted summary of line detection results.

    Args:
        detection_result: Result from detect_lines_in_image()
    """
    if not detection_result.get('success', False):
        print(f"❌ Detection failed: {detection_result.get('error', 'Unknown error')}")
        return

    lines: List[Dict] = detection_result.get('lines', [])
    print(f"✅ Detection successful: Found {len(lines)} lines")
    print("\n📏 Line Details:")
    for line in lines:
        print(f"  {line['id']}: y = {line['slope']:.3f}x + {line['intercept']:.2f}, "
              f"r = {line['distance']:.0f}px, angle: {line['angle_degrees']:.1f}°")
