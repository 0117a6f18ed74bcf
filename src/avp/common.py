"""Central module containing types, enums and constants for path processing and geometry."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Tuple

###############################################################################
# Types
###############################################################################


AvPathCmds = Literal[  # Type-Definition for commands used by the segments of an AvPath
    # MoveTo (2) - start a new subpath and move the current point to (x,y)
    "M",
    # LineTo (2) - draw a straight line from the current point to (x,y)
    "L",
    # Quadratic Bezier To (4) - draw a quadratic Bezier curve with one control point and an endpoint (x,y)
    "Q",
    # Cubic Bezier To (6) - draw a cubic Bezier curve with two control points and an endpoint (x,y)
    "C",
    # Elliptical Arc To (7) - draw an elliptical arc from the current point to (x,y)
    "A",
]

AvPoint = Tuple[float, float]
"""A 2D point (x, y)."""


###############################################################################
# Enums and Consts
###############################################################################


class LineJoin(Enum):
    """Enum to define how two stroked segments are connected at a vertex."""

    ROUND = "round"
    MITER = "miter"
    BEVEL = "bevel"


class LineCap(Enum):
    """Enum to define how the ends of an open stroked subpath are finished."""

    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"


# Maximum distance between a curve and its flattened polyline (in path units)
FLATTEN_TOLERANCE: float = 0.05

# Subdivision limit for adaptive Bezier flattening (2**16 lines per curve at most)
BEZIER_MAX_DEPTH: int = 16

# Ratio miter_length / stroke_width above which a miter join falls back to bevel
DEFAULT_MITER_LIMIT: float = 4.0

# Distance below which two points are treated as the same point
POINT_EPSILON: float = 1.0e-9
