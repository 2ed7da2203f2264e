"""
Tests for drawing, plotting, logging and the command line entry point.
"""

import json
import logging

import cv2
import numpy as np
import pytest

from hough_tools.accumulator import build_accumulator
from hough_tools.cli import main
from hough_tools.detection import detect_lines
from hough_tools.peaks import extract_clusters
from hough_tools.utils import (
    create_synthetic_edges,
    draw_lines_on_image,
    plot_hough_clusters,
    print_detection_summary,
    save_visualization,
    setup_logging,
)


def test_synthetic_default_is_diagonal():
    edges = create_synthetic_edges((50, 50))
    np.testing.assert_array_equal(edges, np.eye(50))


def test_synthetic_segments():
    edges = create_synthetic_edges((20, 30), [{'start': (3, 0), 'end': (3, 19)}])
    assert edges.shape == (20, 30)
    assert edges[:, 3].sum() == 20
    assert edges.sum() == 20


def test_draw_lines_on_edge_matrix(diagonal_edges):
    lines = detect_lines(diagonal_edges, p=0.5, epsilon=3.0, min_pts=1)
    drawn = draw_lines_on_image(diagonal_edges, lines, color=(0, 0, 255))

    assert drawn.shape == (50, 50, 3)
    assert drawn.dtype == np.uint8
    assert np.all(drawn[25, 25] == (0, 0, 255))


def test_plot_hough_clusters(tmp_path, diagonal_edges):
    peaks, labels, _ = extract_clusters(build_accumulator(diagonal_edges, 0.5), 3.0, 1)
    path = tmp_path / "hough.png"

    assert plot_hough_clusters(peaks, labels, filename=str(path)) is None
    assert path.exists()


def test_save_visualization_writes_edges_and_annotated_image(tmp_path, diagonal_edges):
    lines = detect_lines(diagonal_edges, p=0.5, epsilon=3.0, min_pts=1)
    edges_path = tmp_path / "edges.png"
    drawn_path = tmp_path / "drawn.png"

    save_visualization(diagonal_edges, str(edges_path), dpi=50)
    save_visualization(draw_lines_on_image(diagonal_edges, lines), str(drawn_path), dpi=50)

    assert cv2.imread(str(edges_path)) is not None
    assert cv2.imread(str(drawn_path)) is not None


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "run.log"
    logger = setup_logging(str(log_file))
    logging.getLogger("hough_tools.detection").debug("debug line")
    for handler in logger.handlers:
        handler.flush()

    assert "debug line" in log_file.read_text(encoding="utf-8")
    logger.handlers = []


def test_print_detection_summary(capsys):
    print_detection_summary({'success': False, 'error': 'boom'})
    assert 'boom' in capsys.readouterr().out

    print_detection_summary({'success': True, 'lines': [{
        'id': 'line_0', 'slope': 1.0, 'intercept': 0.0, 'distance': 0.0, 'angle_degrees': 135.0,
    }]})
    out = capsys.readouterr().out
    assert 'Found 1 lines' in out
    assert 'line_0' in out


@pytest.fixture
def cross_png(tmp_path):
    image = (create_synthetic_edges((50, 50), [
        {'start': (0, 0), 'end': (49, 49)},
        {'start': (0, 49), 'end': (49, 0)},
    ]) * 255).astype(np.uint8)
    path = tmp_path / "cross.png"
    cv2.imwrite(str(path), image)
    return path


def test_cli_writes_outputs(tmp_path, cross_png):
    out_image = tmp_path / "lines.png"
    out_json = tmp_path / "lines.json"
    out_plot = tmp_path / "hough.png"

    code = main([str(cross_png), "-p", "0.5", "-e", "3", "-m", "1",
                 "-o", str(out_image), "-j", str(out_json), "--plot", str(out_plot)])

    assert code == 0
    assert out_image.exists() and out_plot.exists()
    data = json.loads(out_json.read_text(encoding="utf-8"))
    assert data['count'] == 2
    assert len(data['lines']) == 2
    logging.getLogger("hough_tools").handlers = []


def test_cli_reports_failure(tmp_path):
    assert main([str(tmp_path / "missing.png")]) == 1
    assert main([str(tmp_path / "missing.png"), "-p", "0"]) == 1
    logging.getLogger("hough_tools").handlers = []
