"""Vector path handling: an ordered, mutable sequence of drawing segments with cached geometry."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import ClassVar, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from avp.arc import ArcParameterizer
from avp.common import FLATTEN_TOLERANCE, AvPoint
from avp.flatten import PathFlattener
from avp.geom import AvBox
from avp.segment import (
    SEGMENT_TYPES,
    AvCubicBezierSegment,
    AvEllipticalArcSegment,
    AvLineSegment,
    AvMoveSegment,
    AvQuadraticBezierSegment,
    AvSegment,
)

logger = logging.getLogger(__name__)


def _as_point(point: Sequence[Union[int, float]]) -> AvPoint:
    """Normalize any 2-element sequence into an (x, y) tuple of floats."""
    return (float(point[0]), float(point[1]))


###############################################################################
# AvPath
###############################################################################


@dataclass(eq=False)
class AvPath:
    """Vector path represented by an ordered sequence of drawing segments.

    A path contains 0..n subpaths; each subpath starts with a Move segment and is
    followed by an arbitrary mix of Line, QuadraticBezier, CubicBezier and
    EllipticalArc segments. The path exclusively owns its segment list.

    The flattened polylines ("split lines") and the bounding box are derived
    lazily. Both are computed together in a single pass and both are dropped by
    every mutating method.

    Attributes:
        _segments: List of segment records
        _split_lines: Cached flattened polylines, None if invalid
        _bounding_box: Cached bounding box, None if invalid
    """

    _segments: List[AvSegment]
    _split_lines: Optional[List[NDArray[np.float64]]] = None  # caching variable
    _bounding_box: Optional[AvBox] = None  # caching variable

    # Tolerance used when flattening curves and arcs
    FLATTEN_TOLERANCE: ClassVar[float] = FLATTEN_TOLERANCE  # pylint: disable=invalid-name

    def __init__(self, segments: Optional[Iterable[AvSegment]] = None):
        """
        Initialize an AvPath, empty or from existing segment records.

        Args:
            segments: Segment records to start with; they are copied into the new path.
        """
        self._segments = []
        self._split_lines = None
        self._bounding_box = None
        if segments is not None:
            for segment in segments:
                if not isinstance(segment, SEGMENT_TYPES):
                    raise TypeError(f"AvPath expects segment records, got {type(segment).__name__}")
                self._segments.append(segment)

    ###########################################################################
    # Cache handling
    ###########################################################################

    def _invalidate(self) -> None:
        """Drop split lines and bounding box together."""
        self._split_lines = None
        self._bounding_box = None

    def _append(self, segment: AvSegment) -> None:
        self._segments.append(segment)
        self._invalidate()

    def _segmentize(self) -> None:
        """Flatten the path and fill both caches."""
        logger.debug("Flattening path with %d segments", len(self._segments))
        self._split_lines, self._bounding_box = PathFlattener.segmentize(self._segments, self.FLATTEN_TOLERANCE)

    @property
    def has_cached_geometry(self) -> bool:
        """True if split lines and bounding box are available without recomputation."""
        assert (self._split_lines is None) == (self._bounding_box is None), "inconsistent geometry cache"
        return self._split_lines is not None

    ###########################################################################
    # Queries
    ###########################################################################

    def segments(self) -> Tuple[AvSegment, ...]:
        """Read-only snapshot of the segments of this path in drawing order."""
        return tuple(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[AvSegment]:
        return iter(tuple(self._segments))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AvPath):
            return NotImplemented
        return self._segments == other._segments

    def __str__(self) -> str:
        # pylint: disable=import-outside-toplevel
        from avp.svgpath import AvSvgPath

        return AvSvgPath.to_string(self)

    def __repr__(self) -> str:
        return f"AvPath('{self}')"

    @property
    def is_empty(self) -> bool:
        """True if the path has no segments."""
        return not self._segments

    @property
    def last_point(self) -> Optional[AvPoint]:
        """The current pen position, None for an empty path."""
        if not self._segments:
            return None
        return self._segments[-1].point

    def subpaths(self) -> List[Tuple[AvSegment, ...]]:
        """Split the segments at every Move into subpaths."""
        result: List[Tuple[AvSegment, ...]] = []
        current: List[AvSegment] = []
        for segment in self._segments:
            if isinstance(segment, AvMoveSegment) and current:
                result.append(tuple(current))
                current = []
            current.append(segment)
        if current:
            result.append(tuple(current))
        return result

    def split_lines(self) -> List[NDArray[np.float64]]:
        """
        Flattened polylines of this path, one per subpath.

        Each polyline is a read-only array of shape (n, 2) with n >= 2. The result
        is cached until the path is modified.
        """
        if self._split_lines is None:
            self._segmentize()
            assert self._split_lines is not None
        return self._split_lines

    def split_line_segments(self) -> Iterator[Tuple[AvPoint, AvPoint]]:
        """Yield every single line ((x0, y0), (x1, y1)) of the split lines in order."""
        for polyline in self.split_lines():
            for start, end in zip(polyline[:-1], polyline[1:]):
                yield (float(start[0]), float(start[1])), (float(end[0]), float(end[1]))

    def bounding_box(self) -> AvBox:
        """
        Returns bounding box (tightest box around the flattened path).

        An empty path has a zero-size box at the origin.
        """
        if self._bounding_box is None:
            self._segmentize()
            assert self._bounding_box is not None
        return self._bounding_box

    def approx_equal(self, other: AvPath, rtol: float = 1e-9, atol: float = 1e-9) -> bool:
        """Check if two paths have the same segment kinds and approximately equal values.

        Args:
            other: Another AvPath to compare with
            rtol: Relative tolerance for floating point comparison
            atol: Absolute tolerance for floating point comparison

        Returns:
            True if paths are approximately equal, False otherwise
        """
        if not isinstance(other, AvPath) or len(self) != len(other):
            return False

        for own, foreign in zip(self._segments, other._segments):
            if type(own) is not type(foreign):
                return False
            if isinstance(own, AvEllipticalArcSegment) and (
                own.large_arc != foreign.large_arc or own.sweep != foreign.sweep
            ):
                return False
            if not np.allclose(self._segment_values(own), self._segment_values(foreign), rtol=rtol, atol=atol):
                return False
        return True

    @staticmethod
    def _segment_values(segment: AvSegment) -> List[float]:
        """All numeric values of a segment, used for approximate comparison."""
        values = list(segment.point)
        if isinstance(segment, AvQuadraticBezierSegment):
            values.extend(segment.through)
        elif isinstance(segment, AvCubicBezierSegment):
            values.extend(segment.through_0)
            values.extend(segment.through_1)
        elif isinstance(segment, AvEllipticalArcSegment):
            values.extend(segment.center)
            values.extend(segment.radii)
            values.extend([segment.x_axis_rotation, segment.theta_1, segment.theta_delta])
        return values

    ###########################################################################
    # Drawing commands
    ###########################################################################

    def move_to(self, point: Sequence[float]) -> None:
        """Start a new subpath at _point_."""
        self._append(AvMoveSegment(_as_point(point)))

    def line_to(self, point: Sequence[float]) -> None:
        """Draw a straight line from the pen position to _point_."""
        self._append(AvLineSegment(_as_point(point)))

    def horizontal_line_to(self, x: float) -> None:
        """Draw a horizontal line to _x_ (keeping y of the pen position, 0 for an empty path)."""
        previous_y = 0.0
        if self._segments:
            previous_y = self._segments[-1].point[1]
        self.line_to((x, previous_y))

    def vertical_line_to(self, y: float) -> None:
        """Draw a vertical line to _y_ (keeping x of the pen position, 0 for an empty path)."""
        previous_x = 0.0
        if self._segments:
            previous_x = self._segments[-1].point[0]
        self.line_to((previous_x, y))

    def quadratic_bezier_curve_to(self, through: Sequence[float], point: Sequence[float]) -> None:
        """Draw a quadratic Bezier curve with control point _through_ to _point_."""
        self._append(AvQuadraticBezierSegment(_as_point(point), _as_point(through)))

    def cubic_bezier_curve_to(self, c1: Sequence[float], c2: Sequence[float], point: Sequence[float]) -> None:
        """Draw a cubic Bezier curve with control points _c1_ and _c2_ to _point_."""
        self._append(AvCubicBezierSegment(_as_point(point), _as_point(c1), _as_point(c2)))

    def elliptical_arc_to(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        point: Sequence[float],
        radii: Sequence[float],
        x_axis_rotation: float,
        large_arc: bool,
        sweep: bool,
    ) -> None:
        """
        Draw an elliptical arc from the pen position to _point_ (SVG endpoint parameterization).

        A zero radius or an arc ending at its start point is drawn as a straight line.

        Args:
            point: end point of the arc
            radii: requested radii (rx, ry); enlarged if they cannot span the chord
            x_axis_rotation: rotation of the ellipse's x-axis in radians
            large_arc: choose the arc sweeping more than 180 degrees
            sweep: choose the arc running in positive-angle direction
        """
        end = _as_point(point)
        start = self.last_point or (0.0, 0.0)
        params = ArcParameterizer.endpoint_to_center(start, end, radii, x_axis_rotation, large_arc, sweep)
        if params is None:
            logger.debug("Degenerate arc from %s to %s with radii %s drawn as line", start, end, tuple(radii))
            self.line_to(end)
            return
        self.elliptical_arc_to_center(
            end,
            params.center,
            params.radii,
            params.x_axis_rotation,
            params.theta_1,
            params.theta_delta,
            large_arc,
            sweep,
        )

    def elliptical_arc_to_center(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        point: Sequence[float],
        center: Sequence[float],
        radii: Sequence[float],
        x_axis_rotation: float,
        theta_1: float,
        theta_delta: float,
        large_arc: bool,
        sweep: bool,
    ) -> None:
        """Append an arc that is already given in center parameterization.

        Note: no sanity checks are done; _point_ has to lie on the described ellipse.
        """
        self._append(
            AvEllipticalArcSegment(
                _as_point(point),
                _as_point(center),
                (float(radii[0]), float(radii[1])),
                float(x_axis_rotation),
                float(theta_1),
                float(theta_delta),
                bool(large_arc),
                bool(sweep),
            )
        )

    def arc_to(self, point: Sequence[float], radius: float, large_arc: bool, sweep: bool) -> None:
        """Draw a circular arc with _radius_ from the pen position to _point_."""
        self.elliptical_arc_to(point, (radius, radius), 0.0, large_arc, sweep)

    def close(self) -> None:
        """Close the current subpath by a line back to its Move point (no-op if already there)."""
        if len(self._segments) <= 1:
            return
        last_point = self._segments[-1].point
        for segment in reversed(self._segments):
            if isinstance(segment, AvMoveSegment):
                if segment.point == last_point:
                    return
                self._append(AvLineSegment(segment.point))
                return

    def close_all_subpaths(self) -> None:
        """Close every subpath independently; the closing line ends the respective subpath."""
        if len(self._segments) <= 1:
            return
        closed: List[AvSegment] = []
        for subpath in self.subpaths():
            closed.extend(subpath)
            start = subpath[0]
            if len(subpath) > 1 and isinstance(start, AvMoveSegment) and subpath[-1].point != start.point:
                closed.append(AvLineSegment(start.point))
        if len(closed) != len(self._segments):
            self._segments = closed
            self._invalidate()

    def clear(self) -> None:
        """Remove all segments."""
        self._segments.clear()
        self._invalidate()

    ###########################################################################
    # Whole-path operations
    ###########################################################################

    def append_path(self, path: AvPath) -> None:
        """Append all segments of _path_ to this path (no transformation)."""
        if not isinstance(path, AvPath):
            raise TypeError(f"append_path expects an AvPath, got {type(path).__name__}")
        self._segments.extend(tuple(path._segments))
        self._invalidate()

    def add_path(self, path: AvPath) -> None:
        """Add all segments of _path_ to this path; same as append_path()."""
        self.append_path(path)

    def copy(self) -> AvPath:
        """Independent copy of this path without cached geometry."""
        return AvPath(self._segments)

    def copy_transformed(self, affine_trafo: Sequence[Union[int, float]]) -> AvPath:
        """
        Return a new path with every point mapped by _affine_trafo_ [a00, a01, a10, a11, b0, b1].

        This path is not modified.
        """
        # pylint: disable=import-outside-toplevel
        from avp.transform import PathTransformer

        return PathTransformer.copy_transformed(self, affine_trafo)

    def stroke_to_fill(self, thickness: float, style=None) -> AvPath:
        """
        Return a new path whose filled area equals the area painted by stroking this path.

        Args:
            thickness: stroke width, >= 0
            style: AvStrokeStyle with join/cap settings, defaults to round joins and butt caps
        """
        # pylint: disable=import-outside-toplevel
        from avp.stroke import PathStroker

        return PathStroker.stroke_to_fill(self, thickness, style)

    ###########################################################################
    # Factories
    ###########################################################################

    @classmethod
    def from_polyline(cls, points: Sequence[Sequence[float]], closed: bool = False) -> AvPath:
        """Create a single-subpath path from a sequence of points."""
        path = cls()
        for index, point in enumerate(points):
            if index == 0:
                path.move_to(point)
            else:
                path.line_to(point)
        if closed:
            path.close()
        return path

    @classmethod
    def circle(cls, center: Sequence[float], radius: float) -> AvPath:
        """Create a closed circle made of two half-circle arcs, starting at angle 0."""
        cx, cy = _as_point(center)
        path = cls()
        path.move_to((cx + radius, cy))
        path.elliptical_arc_to_center((cx - radius, cy), (cx, cy), (radius, radius), 0.0, 0.0, math.pi, False, True)
        path.elliptical_arc_to_center(
            (cx + radius, cy), (cx, cy), (radius, radius), 0.0, math.pi, math.pi, False, True
        )
        return path
