"""
Stroke-to-fill conversion: turns a stroked path into a filled outline.

Produces Move/Line/EllipticalArc geometry operating on the flattened path.

Components:
1. Line offset on both sides of every flattened segment
2. Line joins (round/miter/bevel), inner joins trimmed to the offset intersection
3. Line caps (butt/round/square)
4. Outline assembly: one closed contour per subpath
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from avp.arc import ArcParameterizer
from avp.common import DEFAULT_MITER_LIMIT, FLATTEN_TOLERANCE, AvPoint, LineCap, LineJoin
from avp.geom import GeomMath
from avp.path import AvPath

logger = logging.getLogger(__name__)

# Cross products below this value are treated as collinear directions
_COLLINEAR_EPSILON = 1.0e-12


###############################################################################
# AvStrokeStyle
###############################################################################


@dataclass(frozen=True)
class AvStrokeStyle:
    """Settings defining the shape of a stroke.

    Attributes:
        line_join: Connection of two segments at an outer vertex.
        line_cap: Finish of both ends of an open subpath.
        miter_limit: Maximum ratio miter_length / stroke_width before a miter join falls back to bevel.
    """

    line_join: Union[LineJoin, str] = LineJoin.ROUND
    line_cap: Union[LineCap, str] = LineCap.BUTT
    miter_limit: float = DEFAULT_MITER_LIMIT

    def __post_init__(self):
        # accept plain names like "miter" or "square"
        object.__setattr__(self, "line_join", LineJoin(self.line_join))
        object.__setattr__(self, "line_cap", LineCap(self.line_cap))
        if self.miter_limit < 1.0:
            raise ValueError(f"miter_limit must be >= 1, got {self.miter_limit}")

    def to_dict(self) -> dict:
        """Convert the stroke style to a dictionary for serialization."""
        return {
            "line_join": self.line_join.value,
            "line_cap": self.line_cap.value,
            "miter_limit": self.miter_limit,
        }

    @classmethod
    def from_dict(cls, data: dict) -> AvStrokeStyle:
        """Create an AvStrokeStyle from a dictionary."""
        return cls(
            line_join=data.get("line_join", LineJoin.ROUND.value),
            line_cap=data.get("line_cap", LineCap.BUTT.value),
            miter_limit=data.get("miter_limit", DEFAULT_MITER_LIMIT),
        )


DEFAULT_STROKE_STYLE = AvStrokeStyle()


###############################################################################
# PathStroker
###############################################################################


def _add(point: Sequence[float], vector: Sequence[float], factor: float = 1.0) -> AvPoint:
    return (point[0] + vector[0] * factor, point[1] + vector[1] * factor)


class PathStroker:
    """Converts a path and a stroke thickness into an outline whose fill paints the stroke.

    Every contour is traced starting with the offset on the left of the direction
    of travel, so all outlines wind the same way for non-degenerate input.
    """

    @classmethod
    def stroke_to_fill(
        cls,
        path: AvPath,
        thickness: float,
        style: Optional[AvStrokeStyle] = None,
        tolerance: float = FLATTEN_TOLERANCE,
    ) -> AvPath:
        """
        Create the fillable outline of _path_ stroked with the given _thickness_.

        Args:
            path: source path, flattened by its split lines
            thickness: stroke width; 0 results in an empty path
            style: join/cap settings, defaults to round joins and butt caps
            tolerance: chord tolerance used to skip invisible round joins

        Returns:
            AvPath: new path with one closed contour per stroked subpath

        Raises:
            ValueError: If thickness is negative or not finite.
        """
        if not math.isfinite(thickness) or thickness < 0.0:
            raise ValueError(f"Stroke thickness must be a finite value >= 0, got {thickness}")
        if style is None:
            style = DEFAULT_STROKE_STYLE

        outline = AvPath()
        if thickness == 0.0:
            logger.debug("Stroke with zero thickness has no area")
            return outline

        half_width = thickness / 2.0
        stroker = cls(outline, half_width, style, tolerance)
        for polyline in path.split_lines():
            points = cls._remove_duplicates(polyline)
            if len(points) < 2:
                logger.debug("Skipped zero-length subpath at %s", points[0] if points else None)
                continue
            if len(points) > 3 and GeomMath.is_same_point(points[0], points[-1]):
                stroker.stroke_closed(points[:-1])
            else:
                stroker.stroke_open(points)
        return outline

    @staticmethod
    def _remove_duplicates(polyline: Sequence[Sequence[float]]) -> List[AvPoint]:
        """Drop consecutive points that coincide."""
        points: List[AvPoint] = []
        for x, y in polyline:
            point = (float(x), float(y))
            if points and GeomMath.is_same_point(points[-1], point):
                continue
            points.append(point)
        return points

    def __init__(self, outline: AvPath, half_width: float, style: AvStrokeStyle, tolerance: float):
        self._outline = outline
        self._half_width = half_width
        self._style = style
        self._round_join_min_angle = ArcParameterizer.angle_step(half_width, tolerance)

    ###########################################################################
    # Outline primitives
    ###########################################################################

    def _line(self, point: AvPoint) -> None:
        last = self._outline.last_point
        if last is not None and GeomMath.is_same_point(last, point):
            return
        self._outline.line_to(point)

    def _circular_arc(self, center: AvPoint, start_angle: float, sweep_angle: float, end: AvPoint) -> None:
        """Circular arc of radius half_width from the current point to _end_."""
        self._outline.elliptical_arc_to_center(
            end,
            center,
            (self._half_width, self._half_width),
            0.0,
            start_angle,
            sweep_angle,
            abs(sweep_angle) > math.pi,
            sweep_angle > 0.0,
        )

    def _offset(self, point: AvPoint, direction: AvPoint, factor: float = 1.0) -> AvPoint:
        """_point_ moved by half_width to the left of _direction_ (to the right for factor -1)."""
        return _add(point, GeomMath.left_normal(direction), self._half_width * factor)

    ###########################################################################
    # Joins and caps
    ###########################################################################

    def _inner_join_point(
        self,
        vertex: AvPoint,
        d_in: AvPoint,
        d_out: AvPoint,
        segment_start: AvPoint,
        next_end: AvPoint,
    ) -> Optional[AvPoint]:
        """Intersection of both left offset lines at an inner vertex, None if it is off the segments."""
        n_sum = _add(GeomMath.left_normal(d_in), GeomMath.left_normal(d_out))
        denominator = 1.0 + GeomMath.dot(d_in, d_out)
        if denominator < _COLLINEAR_EPSILON:
            return None
        point = _add(vertex, n_sum, self._half_width / denominator)
        before_start = GeomMath.dot((point[0] - segment_start[0], point[1] - segment_start[1]), d_in) < 0.0
        after_end = GeomMath.dot((next_end[0] - point[0], next_end[1] - point[1]), d_out) < 0.0
        if before_start or after_end:
            return None
        return point

    def _outer_join(self, vertex: AvPoint, d_in: AvPoint, d_out: AvPoint) -> None:
        """Connect the left offsets of two segments around the outside of a right turn or U-turn."""
        target = self._offset(vertex, d_out)
        cross = GeomMath.cross(d_in, d_out)
        dot = GeomMath.dot(d_in, d_out)
        join = self._style.line_join

        if join is LineJoin.ROUND:
            # outside of a right turn: always clockwise, a U-turn sweeps -pi
            sweep_angle = -abs(math.atan2(cross, dot))
            if abs(sweep_angle) <= self._round_join_min_angle:
                self._line(target)
                return
            n_in = GeomMath.left_normal(d_in)
            self._circular_arc(vertex, math.atan2(n_in[1], n_in[0]), sweep_angle, target)
            return

        if join is LineJoin.MITER:
            # miter_length / stroke_width = 1 / sin(phi / 2) = 1 / cos(turn / 2)
            cos_half = math.sqrt(max(0.0, (1.0 + dot) / 2.0))
            if cos_half > 1.0 / self._style.miter_limit:
                n_sum = _add(GeomMath.left_normal(d_in), GeomMath.left_normal(d_out))
                self._line(_add(vertex, n_sum, self._half_width / (1.0 + dot)))

        self._line(target)

    def _cap(self, point: AvPoint, direction: AvPoint) -> None:
        """Finish a subpath end: from the left offset of _point_ to its right offset."""
        target = self._offset(point, direction, -1.0)
        cap = self._style.line_cap

        if cap is LineCap.ROUND:
            normal = GeomMath.left_normal(direction)
            self._circular_arc(point, math.atan2(normal[1], normal[0]), -math.pi, target)
            return
        if cap is LineCap.SQUARE:
            extension = (direction[0] * self._half_width, direction[1] * self._half_width)
            self._line(_add(self._offset(point, direction), extension))
            self._line(_add(target, extension))
        self._line(target)

    ###########################################################################
    # Sides and contours
    ###########################################################################

    def _side(self, points: List[AvPoint], closed: bool) -> None:
        """
        Trace the left offset of _points_ in direction of travel with joins at all vertices.

        The outline has to be positioned at the start of the left offset already
        (or at the trimmed start point for closed rings). For closed rings the
        trace ends where it started.
        """
        count = len(points)
        segment_count = count if closed else count - 1
        directions = [GeomMath.unit_direction(points[i], points[(i + 1) % count]) for i in range(segment_count)]

        segment_start = self._outline.last_point
        for i in range(segment_count):
            d_in = directions[i]
            vertex = points[(i + 1) % count]
            segment_end = self._offset(vertex, d_in)

            if not closed and i == segment_count - 1:
                self._line(segment_end)
                break

            d_out = directions[(i + 1) % segment_count]
            cross = GeomMath.cross(d_in, d_out)
            if abs(cross) <= _COLLINEAR_EPSILON and GeomMath.dot(d_in, d_out) > 0.0:
                self._line(segment_end)
            elif cross > _COLLINEAR_EPSILON:
                # left turn: the left side is the inner side of the turn
                next_end = self._offset(points[(i + 2) % count], d_out)
                trimmed = self._inner_join_point(vertex, d_in, d_out, segment_start, next_end)
                if trimmed is not None:
                    self._line(trimmed)
                else:
                    self._line(segment_end)
                    self._line(vertex)
                    self._line(self._offset(vertex, d_out))
            else:
                self._line(segment_end)
                self._outer_join(vertex, d_in, d_out)
            segment_start = self._outline.last_point

    def _ring_start(self, points: List[AvPoint]) -> AvPoint:
        """Start point of a closed ring's left offset, trimmed if the first vertex is an inner join."""
        d_in = GeomMath.unit_direction(points[-1], points[0])
        d_out = GeomMath.unit_direction(points[0], points[1])
        start = self._offset(points[0], d_out)
        if GeomMath.cross(d_in, d_out) > _COLLINEAR_EPSILON:
            trimmed = self._inner_join_point(
                points[0], d_in, d_out, self._offset(points[-1], d_in), self._offset(points[1], d_out)
            )
            if trimmed is not None:
                return trimmed
        return start

    def stroke_open(self, points: List[AvPoint]) -> None:
        """Outline of an open polyline: left side, end cap, right side backwards, start cap."""
        first_direction = GeomMath.unit_direction(points[0], points[1])
        last_direction = GeomMath.unit_direction(points[-2], points[-1])

        self._outline.move_to(self._offset(points[0], first_direction))
        self._side(points, closed=False)
        self._cap(points[-1], last_direction)
        self._side(points[::-1], closed=False)
        self._cap(points[0], (-first_direction[0], -first_direction[1]))
        self._outline.close()

    def stroke_closed(self, points: List[AvPoint]) -> None:
        """
        Outline of a closed polyline ring without caps.

        Both offset rings are traced in opposite directions and connected by a
        bridge line that is passed in both directions, which forms a single
        contour covering the ring between them. Both rings start at the first
        vertex, so the bridge crosses the stroke there.
        """
        first_start = self._ring_start(points)
        self._outline.move_to(first_start)
        self._side(points, closed=True)

        reversed_points = points[:1] + points[:0:-1]
        second_start = self._ring_start(reversed_points)
        self._line(second_start)
        self._side(reversed_points, closed=True)
        self._line(first_start)
        self._outline.close()
