"""
Configuration for the Hough line detector.

Numeric constants used by the voting and line-extraction stages, together
with the default detection parameters. Callers that want the defaults merged
with their own values should use get_active_params().
"""

import numpy as np


# ---------------------------------------------------------------
# HOUGH SPACE LAYOUT
# ---------------------------------------------------------------

N_ANGLES = 180                     # angle buckets 0..179 degrees
N_SLOPES = 181                     # candidate slopes for -90..90 degrees
BOUNDARY_ANGLE_OFFSET = 1e5        # replaces the infinite slopes at +-90


# ---------------------------------------------------------------
# NUMERIC TOLERANCES
# ---------------------------------------------------------------

EDGE_EPSILON = float(np.finfo(np.float64).eps)
VERTICAL_TOLERANCE = 1e-5          # degrees
PEAK_FLOOR = 1.0                   # cells must hold strictly more votes


# ---------------------------------------------------------------
# MEMORY
# ---------------------------------------------------------------

# Edge pixels voted per batch (each pixel expands to N_SLOPES candidates)
VOTE_CHUNK_SIZE = 4096


# ---------------------------------------------------------------
# DEFAULT DETECTION PARAMETERS
# ---------------------------------------------------------------

DEFAULT_THRESHOLD_FRACTION = 0.5   # p
DEFAULT_EPSILON = 3.0              # DBSCAN neighbourhood radius
DEFAULT_MIN_PTS = 1                # DBSCAN core point size

# Grayscale level above which an image pixel counts as an edge
EDGE_BINARIZE_LEVEL = 127


# ---------------------------------------------------------------
# PARAMETER ACCESS LOGIC
# ---------------------------------------------------------------

def get_active_params(**overrides):
    """
    Returns the detection parameters as a dictionary:
    - defaults from this module
    - updated with any keyword overrides

    Unknown keys raise KeyError so typos do not pass silently.
    """
    base = {
        "THRESHOLD_FRACTION": DEFAULT_THRESHOLD_FRACTION,
        "EPSILON": DEFAULT_EPSILON,
        "MIN_PTS": DEFAULT_MIN_PTS,
        "EDGE_BINARIZE_LEVEL": EDGE_BINARIZE_LEVEL,
        "VOTE_CHUNK_SIZE": VOTE_CHUNK_SIZE,
    }

    for key, value in overrides.items():
        name = key.upper()
        if name not in base:
            raise KeyError(f"Unknown detection parameter: {key}")
        if value is not None:
            base[name] = value

    return base
