"""
Command line entry point: detect lines in an edge image.

Usage:
    hough-lines edges.png -p 0.5 -e 3 -m 1 -o annotated.png -j lines.json
"""

import argparse
import json
import logging
import sys

import cv2
from typing import List, Optional

from .config import DEFAULT_THRESHOLD_FRACTION, DEFAULT_EPSILON, DEFAULT_MIN_PTS, EDGE_BINARIZE_LEVEL
from .detection import detect_lines_with_peaks
from .errors import HoughError
from .line_detection import describe_lines
from .preprocessing import load_image, to_edge_matrix
from .utils import setup_logging, draw_lines_on_image, plot_hough_clusters, print_detection_summary

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Hough transform line detection with DBSCAN peak clustering"
    )
    parser.add_argument(
        "image",
        type=str,
        help="Edge image (white edges on black)",
    )
    parser.add_argument(
        "--threshold",
        "-p",
        type=float,
        default=DEFAULT_THRESHOLD_FRACTION,
        help=f"Line strength threshold as a fraction of the strongest line (default: {DEFAULT_THRESHOLD_FRACTION})",
    )
    parser.add_argument(
        "--epsilon",
        "-e",
        type=float,
        default=DEFAULT_EPSILON,
        help=f"Hough cluster radius (default: {DEFAULT_EPSILON})",
    )
    parser.add_argument(
        "--min-pts",
        "-m",
        type=int,
        default=DEFAULT_MIN_PTS,
        help=f"Minimum points for a Hough cluster (default: {DEFAULT_MIN_PTS})",
    )
    parser.add_argument(
        "--level",
        type=float,
        default=EDGE_BINARIZE_LEVEL,
        help=f"Grayscale level above which a pixel is an edge (default: {EDGE_BINARIZE_LEVEL})",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Write the image with detected lines drawn here",
    )
    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Write a Hough space cluster plot here",
    )
    parser.add_argument(
        "--json",
        "-j",
        type=str,
        default=None,
        help="Write the detected lines as JSON here",
    )
    parser.add_argument(
        "--log",
        "-l",
        type=str,
        default=None,
        help="Log file path",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug output on the console",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log, verbose=args.verbose)

    try:
        image = load_image(args.image)
        edges = to_edge_matrix(image, args.level)
        lines, peaks, labels = detect_lines_with_peaks(edges, p=args.threshold, epsilon=args.epsilon,
                                                       min_pts=args.min_pts)
    except (HoughError, ValueError) as exc:
        logger.error("Line detection failed: %s", exc)
        print_detection_summary({'success': False, 'error': str(exc)})
        return 1

    described = describe_lines(lines, edges.shape)
    print_detection_summary({'success': True, 'lines': described})

    if args.output:
        cv2.imwrite(args.output, draw_lines_on_image(image, lines))
        logger.info("Saved annotated image to %s", args.output)

    if args.plot:
        plot_hough_clusters(peaks, labels, filename=args.plot)
        logger.info("Saved Hough cluster plot to %s", args.plot)

    if args.json:
        with open(args.json, "w", encoding="utf-8") as f:
            json.dump({'count': lines.count, 'lines': described}, f, indent=2)
        logger.info("Saved %d lines to %s", lines.count, args.json)

    return 0


if __name__ == "__main__":
    sys.exit(main())
