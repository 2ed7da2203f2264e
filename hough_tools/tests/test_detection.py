"""
End-to-end tests of detect_lines() on synthetic edge images.
"""

import math

import numpy as np
import pytest

from hough_tools import (
    AllocationFailure,
    InvalidParameter,
    build_accumulator,
    create_synthetic_edges,
    detect_lines,
    detect_lines_with_peaks,
    find_peaks,
)


def edge_pixels(X):
    """1-based (x, y) = (column, row) coordinates of the edge pixels."""
    rows, cols = np.nonzero(X)
    return cols + 1.0, rows + 1.0


@pytest.mark.parametrize("p, epsilon, min_pts", [(0.5, 3.0, 1), (1.0, 1.0, 5), (0.1, 10.0, 2)])
def test_blank_image_has_no_lines(p, epsilon, min_pts):
    lines = detect_lines(np.zeros((40, 40)), p=p, epsilon=epsilon, min_pts=min_pts)

    assert lines.count == 0
    for seq in (lines.slopes, lines.intercepts, lines.distances, lines.angles):
        assert len(seq) == 0


def test_diagonal_line_is_found(diagonal_edges):
    lines = detect_lines(diagonal_edges, p=0.5, epsilon=3.0, min_pts=1)

    assert lines.count >= 1
    assert any(abs(line.slope - 1.0) < 1e-2 and abs(line.intercept) < 1e-2 for line in lines)


def test_crossing_diagonals():
    edges = create_synthetic_edges((50, 50), [
        {'start': (0, 0), 'end': (49, 49)},
        {'start': (0, 49), 'end': (49, 0)},
    ])
    lines = detect_lines(edges, p=0.5, epsilon=3.0, min_pts=1)

    assert lines.count == 2
    by_slope = sorted(lines, key=lambda line: line.slope)
    assert by_slope[0].slope == pytest.approx(-1.0, abs=1e-2)
    assert by_slope[0].intercept == pytest.approx(51.0, abs=1.0)
    assert by_slope[1].slope == pytest.approx(1.0, abs=1e-2)
    assert by_slope[1].intercept == pytest.approx(0.0, abs=1e-2)


def test_edge_pixels_lie_on_detected_line():
    X = np.zeros((50, 50))
    for i in range(45):
        X[i, i + 5] = 1.0
    lines = detect_lines(X, p=0.5, epsilon=3.0, min_pts=1)

    assert lines.count == 1
    x, y = edge_pixels(X)
    line = lines[0]
    residuals = x * np.sin(line.angle) + y * np.cos(line.angle) - line.distance
    assert np.all(np.abs(residuals) <= 1.0)


def test_vertical_line_has_finite_parameters(vertical_edges):
    lines = detect_lines(vertical_edges, p=1.0, epsilon=3.0, min_pts=1)

    assert lines.count == 1
    line = lines[0]
    assert math.cos(line.angle) != 0.0
    assert np.isfinite(line.slope) and np.isfinite(line.intercept)
    assert line.distance == 10

    x, y = edge_pixels(vertical_edges)
    residuals = x * np.sin(line.angle) + y * np.cos(line.angle) - line.distance
    assert np.all(np.abs(residuals) <= 1.0)


def test_single_pixel_is_noise():
    X = np.zeros((20, 20))
    X[7, 3] = 1.0
    assert detect_lines(X, p=0.5, epsilon=3.0, min_pts=2).count == 0


def test_higher_threshold_never_adds_lines(recording_clusterer):
    edges = create_synthetic_edges((60, 60), [
        {'start': (0, 0), 'end': (59, 59)},
        {'start': (5, 50), 'end': (40, 10)},
        {'start': (30, 0), 'end': (30, 59)},
    ])

    peak_counts = []
    line_counts = []
    for p in (0.2, 0.4, 0.6, 0.8, 1.0):
        peak_counts.append(len(find_peaks(build_accumulator(edges, p))))
        # one cluster per peak, so N follows the surviving cells
        line_counts.append(detect_lines(edges, p=p, epsilon=3.0, min_pts=1,
                                        clusterer=recording_clusterer()).count)

    assert peak_counts == sorted(peak_counts, reverse=True)
    assert line_counts == sorted(line_counts, reverse=True)
    assert line_counts == peak_counts


def test_flat_buffer_matches_matrix(diagonal_edges):
    from_matrix = detect_lines(diagonal_edges, p=0.5, epsilon=3.0, min_pts=1)
    from_buffer = detect_lines(diagonal_edges.ravel(), p=0.5, epsilon=3.0, min_pts=1,
                               rows=50, columns=50)

    np.testing.assert_array_equal(from_matrix.slopes, from_buffer.slopes)
    np.testing.assert_array_equal(from_matrix.distances, from_buffer.distances)


def test_zero_sized_image_returns_empty():
    assert detect_lines(np.zeros((0, 12))).count == 0


def test_threshold_above_one_is_clamped(diagonal_edges):
    clamped = detect_lines(diagonal_edges, p=3.0, epsilon=3.0, min_pts=1)
    full = detect_lines(diagonal_edges, p=1.0, epsilon=3.0, min_pts=1)
    np.testing.assert_array_equal(clamped.angles, full.angles)


@pytest.mark.parametrize("kwargs", [
    {'p': 0.0},
    {'p': -1.0},
    {'epsilon': 0.0},
    {'min_pts': 0},
    {'min_pts': 1.5},
    {'min_pts': float('inf')},
    {'rows': 0, 'columns': 50},
    {'rows': 50, 'columns': -2},
])
def test_invalid_parameters_rejected_before_clustering(diagonal_edges, recording_clusterer, kwargs):
    clusterer = recording_clusterer()
    params = {'p': 0.5, 'epsilon': 3.0, 'min_pts': 1}
    params.update(kwargs)

    with pytest.raises(InvalidParameter):
        detect_lines(diagonal_edges.ravel() if 'rows' in kwargs else diagonal_edges,
                     clusterer=clusterer, **params)
    assert clusterer.calls == []


def test_invalid_parameter_is_a_value_error():
    with pytest.raises(ValueError):
        detect_lines(np.zeros((5, 5)), p=0.0)


def test_allocation_failure_is_reported(diagonal_edges):
    def exhausted(points, epsilon, min_pts):
        raise MemoryError

    with pytest.raises(AllocationFailure):
        detect_lines(diagonal_edges, p=0.5, epsilon=3.0, min_pts=1, clusterer=exhausted)


def test_all_noise_labels_give_no_lines(diagonal_edges, recording_clusterer):
    clusterer = recording_clusterer(labels=[0, 0, 0])
    lines = detect_lines(diagonal_edges, p=0.5, epsilon=3.0, min_pts=1, clusterer=clusterer)

    assert lines.count == 0
    assert len(clusterer.calls) == 1


def test_peaks_returned_with_lines_match_a_plain_run(diagonal_edges):
    lines, peaks, labels = detect_lines_with_peaks(diagonal_edges, p=0.5, epsilon=3.0, min_pts=1)
    plain = detect_lines(diagonal_edges, p=0.5, epsilon=3.0, min_pts=1)

    np.testing.assert_array_equal(lines.angles, plain.angles)
    np.testing.assert_array_equal(lines.distances, plain.distances)
    assert len(peaks) == labels.size > 0
    assert labels.max() == lines.count


def test_peaks_returned_for_empty_input_are_empty():
    lines, peaks, labels = detect_lines_with_peaks(np.zeros((0, 10)))

    assert lines.count == 0
    assert len(peaks) == 0
    assert labels.size == 0
