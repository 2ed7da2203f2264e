#!/usr/bin/env python3
"""
Visualize Hough line detection on synthetic edge images.
Saves debug images showing the edges with detected lines drawn over them,
and the Hough space peaks coloured by cluster.
"""

import os

import cv2
import numpy as np
from hough_tools import (
    detect_lines_with_peaks,
    create_synthetic_edges,
    draw_lines_on_image,
    plot_hough_clusters,
    save_visualization,
    setup_logging
)

SCENES = {
    'diagonal': [{'start': (0, 0), 'end': (49, 49)}],
    'cross': [{'start': (0, 0), 'end': (49, 49)}, {'start': (0, 49), 'end': (49, 0)}],
    'vertical_pair': [{'start': (10, 0), 'end': (10, 49)}, {'start': (35, 0), 'end': (35, 49)}],
}


def visualize_scene(name, segments, output_dir, p=0.5, epsilon=3.0, min_pts=1):
    """
    Run detection on one scene and save its debug images.

    Args:
        name: Scene name used in the file names
        segments: Segment configurations for create_synthetic_edges()
        output_dir: Directory for the images
        p, epsilon, min_pts: Detection parameters
    """
    edges = create_synthetic_edges((50, 50), segments)
    lines, peaks, labels = detect_lines_with_peaks(edges, p=p, epsilon=epsilon, min_pts=min_pts)

    # Scale up so the 1px lines stay visible
    vis = draw_lines_on_image(edges, lines)
    vis = cv2.resize(vis, (400, 400), interpolation=cv2.INTER_NEAREST)
    cv2.putText(vis, f"{name}: {lines.count} lines", (10, 20),
                cv2.FONT_HERSHEY_SIMPLEX, 0.5, (0, 255, 0), 1)
    save_visualization(vis, os.path.join(output_dir, f"{name}_lines.png"))

    plot_hough_clusters(peaks, labels, filename=os.path.join(output_dir, f"{name}_hough.png"))

    print(f"{name}: {lines.count} lines")
    for line in lines:
        print(f"  y = {line.slope:.3f}x + {line.intercept:.2f}  "
              f"(r={line.distance:.0f}, angle={np.rad2deg(line.angle):.1f}°)")


def main():
    setup_logging()
    output_dir = "debug_images"
    os.makedirs(output_dir, exist_ok=True)

    for name, segments in SCENES.items():
        visualize_scene(name, segments, output_dir)

    print(f"\nSaved visualizations to {output_dir}/")


if __name__ == "__main__":
    main()
