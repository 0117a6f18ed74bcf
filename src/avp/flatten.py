"""Flattening of path segments into polylines ("split lines") including the bounding box."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from avp.arc import ArcParameterizer
from avp.bezier import BezierCurve
from avp.common import FLATTEN_TOLERANCE, AvPoint
from avp.geom import AvBox
from avp.segment import (
    AvCubicBezierSegment,
    AvEllipticalArcSegment,
    AvLineSegment,
    AvMoveSegment,
    AvQuadraticBezierSegment,
    AvSegment,
)

logger = logging.getLogger(__name__)


class _Extrema:
    """Running min/max of all points seen so far."""

    def __init__(self):
        self.x_min: Optional[float] = None
        self.y_min: Optional[float] = None
        self.x_max: Optional[float] = None
        self.y_max: Optional[float] = None

    def add(self, points: Iterable[AvPoint]) -> None:
        for x, y in points:
            if self.x_min is None:
                self.x_min = self.x_max = x
                self.y_min = self.y_max = y
                continue
            if x < self.x_min:
                self.x_min = x
            elif x > self.x_max:
                self.x_max = x
            if y < self.y_min:
                self.y_min = y
            elif y > self.y_max:
                self.y_max = y

    def box(self) -> AvBox:
        if self.x_min is None:
            return AvBox(0.0, 0.0, 0.0, 0.0)
        return AvBox(self.x_min, self.y_min, self.x_max, self.y_max)


class PathFlattener:
    """Converts path segments into split lines and their bounding box in one traversal."""

    @staticmethod
    def _as_polyline(points: List[AvPoint]) -> NDArray[np.float64]:
        """Read-only (n, 2) array of the given points."""
        polyline = np.array(points, dtype=np.float64)
        polyline.flags.writeable = False
        return polyline

    @staticmethod
    def flatten_segment(
        start: Sequence[float], segment: AvSegment, tolerance: float = FLATTEN_TOLERANCE
    ) -> List[AvPoint]:
        """
        Approximate a single drawing segment starting at _start_ by line end points.

        Args:
            start: pen position before the segment
            segment: a Line, QuadraticBezier, CubicBezier or EllipticalArc segment
            tolerance: maximum distance between the segment and its approximation

        Returns:
            List[AvPoint]: points excluding _start_, the last one being the segment's anchor point
        """
        if isinstance(segment, AvLineSegment):
            return [segment.point]
        if isinstance(segment, AvQuadraticBezierSegment):
            return BezierCurve.flatten_quadratic_curve((start, segment.through, segment.point), tolerance)
        if isinstance(segment, AvCubicBezierSegment):
            return BezierCurve.flatten_cubic_curve(
                (start, segment.through_0, segment.through_1, segment.point), tolerance
            )
        if isinstance(segment, AvEllipticalArcSegment):
            # a single zero radius (image of a projection) still spans a line section
            if max(segment.radii) <= 0.0:
                logger.debug("Arc with zero radii %s flattened to a line", segment.radii)
                return [segment.point]
            return ArcParameterizer.sample(segment.parameters, tolerance, end_point=segment.point)
        raise TypeError(f"Cannot flatten segment of type {type(segment).__name__}")

    @classmethod
    def segmentize(
        cls, segments: Iterable[AvSegment], tolerance: float = FLATTEN_TOLERANCE
    ) -> Tuple[List[NDArray[np.float64]], AvBox]:
        """
        Flatten all segments into polylines and compute the bounding box on the way.

        A Move never produces a line; it finishes the current polyline and starts
        a new one. Polylines consisting of a single point are not emitted, but
        their point is still part of the bounding box.

        Args:
            segments: the segments of a path
            tolerance: maximum distance between curves/arcs and their polylines

        Returns:
            Tuple[List[NDArray[np.float64]], AvBox]: polylines of shape (n, 2) with
                n >= 2, and the box spanned by every generated point
        """
        polylines: List[NDArray[np.float64]] = []
        extrema = _Extrema()
        current: List[AvPoint] = []
        cursor: AvPoint = (0.0, 0.0)

        for segment in segments:
            if isinstance(segment, AvMoveSegment):
                if len(current) > 1:
                    polylines.append(cls._as_polyline(current))
                current = [segment.point]
                extrema.add(current)
            else:
                if not current:
                    # path does not start with a Move: draw from the pen position
                    current = [cursor]
                    extrema.add(current)
                new_points = cls.flatten_segment(cursor, segment, tolerance)
                extrema.add(new_points)
                current.extend(new_points)
            cursor = segment.point

        if len(current) > 1:
            polylines.append(cls._as_polyline(current))

        return polylines, extrema.box()
