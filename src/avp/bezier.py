"""Bezier curve handling utilities for path flattening and geometry operations."""

from __future__ import annotations

from typing import List, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from avp.common import BEZIER_MAX_DEPTH, FLATTEN_TOLERANCE, AvPoint

CurvePoints = Union[Sequence[Sequence[float]], NDArray[np.float64]]


class BezierCurve:
    """Class to handle quadratic and cubic Bezier curve operations.

    Provides de Casteljau subdivision and adaptive flattening of curves into
    polylines with a bounded deviation from the true curve. Control points may
    be given as sequences or as NumPy arrays of shape (n, 2).
    """

    @staticmethod
    def _lerp(p0: Sequence[float], p1: Sequence[float], t: float) -> AvPoint:
        return (p0[0] + (p1[0] - p0[0]) * t, p0[1] + (p1[1] - p0[1]) * t)

    @classmethod
    def split_quadratic_curve(
        cls, points: CurvePoints, t: float = 0.5
    ) -> Tuple[Tuple[AvPoint, AvPoint, AvPoint], Tuple[AvPoint, AvPoint, AvPoint]]:
        """Split a quadratic curve at _t_ using de Casteljau's algorithm."""
        p0, p1, p2 = points
        p01 = cls._lerp(p0, p1, t)
        p12 = cls._lerp(p1, p2, t)
        mid = cls._lerp(p01, p12, t)
        start = (float(p0[0]), float(p0[1]))
        end = (float(p2[0]), float(p2[1]))
        return (start, p01, mid), (mid, p12, end)

    @classmethod
    def split_cubic_curve(
        cls, points: CurvePoints, t: float = 0.5
    ) -> Tuple[Tuple[AvPoint, AvPoint, AvPoint, AvPoint], Tuple[AvPoint, AvPoint, AvPoint, AvPoint]]:
        """Split a cubic curve at _t_ using de Casteljau's algorithm."""
        p0, p1, p2, p3 = points
        p01 = cls._lerp(p0, p1, t)
        p12 = cls._lerp(p1, p2, t)
        p23 = cls._lerp(p2, p3, t)
        p012 = cls._lerp(p01, p12, t)
        p123 = cls._lerp(p12, p23, t)
        mid = cls._lerp(p012, p123, t)
        start = (float(p0[0]), float(p0[1]))
        end = (float(p3[0]), float(p3[1]))
        return (start, p01, p012, mid), (mid, p123, p23, end)

    @classmethod
    def is_flat_quadratic_curve(cls, points: CurvePoints, tolerance: float = FLATTEN_TOLERANCE) -> bool:
        """
        True if the chord start->end deviates at most _tolerance_ from the quadratic curve.

        The distance between curve and chord is bounded by |P0 - 2*P1 + P2| / 4.
        """
        p0, p1, p2 = points
        ddx = p0[0] - 2.0 * p1[0] + p2[0]
        ddy = p0[1] - 2.0 * p1[1] + p2[1]
        return ddx * ddx + ddy * ddy <= 16.0 * tolerance * tolerance

    @classmethod
    def is_flat_cubic_curve(cls, points: CurvePoints, tolerance: float = FLATTEN_TOLERANCE) -> bool:
        """
        True if the chord start->end deviates at most _tolerance_ from the cubic curve.

        Uses the flatness criterion by Roger Willcocks:
            u = 3*P1 - 2*P0 - P3
            v = 3*P2 - P0 - 2*P3
            max(ux^2, vx^2) + max(uy^2, vy^2) <= 16 * tolerance^2
        """
        p0, p1, p2, p3 = points
        ux = 3.0 * p1[0] - 2.0 * p0[0] - p3[0]
        uy = 3.0 * p1[1] - 2.0 * p0[1] - p3[1]
        vx = 3.0 * p2[0] - p0[0] - 2.0 * p3[0]
        vy = 3.0 * p2[1] - p0[1] - 2.0 * p3[1]
        return max(ux * ux, vx * vx) + max(uy * uy, vy * vy) <= 16.0 * tolerance * tolerance

    @classmethod
    def flatten_quadratic_curve(
        cls,
        points: CurvePoints,
        tolerance: float = FLATTEN_TOLERANCE,
        max_depth: int = BEZIER_MAX_DEPTH,
    ) -> List[AvPoint]:
        """
        Approximate a quadratic Bezier curve by a polyline using adaptive subdivision.

        Args:
            points: control points (start, control, end)
            tolerance: maximum distance between the curve and the polyline
            max_depth: maximum number of subdivisions

        Returns:
            List[AvPoint]: polyline points excluding the start point, ending exactly at the end point
        """
        result: List[AvPoint] = []
        stack = [(tuple(points), 0)]
        while stack:
            curve, depth = stack.pop()
            if depth >= max_depth or cls.is_flat_quadratic_curve(curve, tolerance):
                result.append((float(curve[2][0]), float(curve[2][1])))
                continue
            first, second = cls.split_quadratic_curve(curve)
            # LIFO: first half has to be processed first
            stack.append((second, depth + 1))
            stack.append((first, depth + 1))
        return result

    @classmethod
    def flatten_cubic_curve(
        cls,
        points: CurvePoints,
        tolerance: float = FLATTEN_TOLERANCE,
        max_depth: int = BEZIER_MAX_DEPTH,
    ) -> List[AvPoint]:
        """
        Approximate a cubic Bezier curve by a polyline using adaptive subdivision.

        Args:
            points: control points (start, control1, control2, end)
            tolerance: maximum distance between the curve and the polyline
            max_depth: maximum number of subdivisions

        Returns:
            List[AvPoint]: polyline points excluding the start point, ending exactly at the end point
        """
        result: List[AvPoint] = []
        stack = [(tuple(points), 0)]
        while stack:
            curve, depth = stack.pop()
            if depth >= max_depth or cls.is_flat_cubic_curve(curve, tolerance):
                result.append((float(curve[3][0]), float(curve[3][1])))
                continue
            first, second = cls.split_cubic_curve(curve)
            stack.append((second, depth + 1))
            stack.append((first, depth + 1))
        return result
