"""Handling geometries"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from avp.common import POINT_EPSILON


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def check_affine(affine_trafo: Sequence[Union[int, float]]) -> None:
        """
        Raise a ValueError if _affine_trafo_ is not a sequence of 6 finite numbers.

        Args:
            affine_trafo (Tuple/List[float]): Affine transformation - [a00, a01, a10, a11, b0, b1]
        """
        if isinstance(affine_trafo, (str, bytes)) or len(affine_trafo) != 6:
            raise ValueError(f"affine transformation needs 6 coefficients, got {affine_trafo!r}")
        for value in affine_trafo:
            if not math.isfinite(float(value)):
                raise ValueError(f"affine transformation contains non-finite value {value!r}")

    @staticmethod
    def transform_point(
        affine_trafo: Sequence[Union[int, float]], point: Sequence[Union[int, float]]
    ) -> Tuple[float, float]:
        """
        Perform an affine transformation on the given 2D point.

        The given _affine_trafo_ is a list of 6 floats, performing an affine transformation.
        The transformation is defined as:
            | x' | = | a00 a01 b0 |   | x |
            | y' | = | a10 a11 b1 | * | y |
            | 1  | = |  0   0  1  |   | 1 |
        with
            affine_trafo = [a00, a01, a10, a11, b0, b1]
        See also shapely - Affine Transformations

        Args:
            affine_trafo (Tuple/List[float]): Affine transformation - [a00, a01, a10, a11, b0, b1]
            point (Tuple/List[float]): 2D point - (x, y)

        Returns:
            Tuple[float, float]: the transformed point
        """
        x_new = float(affine_trafo[0] * point[0] + affine_trafo[1] * point[1] + affine_trafo[4])
        y_new = float(affine_trafo[2] * point[0] + affine_trafo[3] * point[1] + affine_trafo[5])
        return (x_new, y_new)

    @staticmethod
    def is_same_point(p0: Sequence[float], p1: Sequence[float], epsilon: float = POINT_EPSILON) -> bool:
        """True if both points are closer than _epsilon_."""
        return abs(p1[0] - p0[0]) <= epsilon and abs(p1[1] - p0[1]) <= epsilon

    @staticmethod
    def unit_direction(p0: Sequence[float], p1: Sequence[float]) -> Tuple[float, float]:
        """Unit vector pointing from _p0_ to _p1_, (0, 0) for coincident points."""
        dx = p1[0] - p0[0]
        dy = p1[1] - p0[1]
        length = math.hypot(dx, dy)
        if length < POINT_EPSILON:
            return (0.0, 0.0)
        return (dx / length, dy / length)

    @staticmethod
    def cross(v0: Sequence[float], v1: Sequence[float]) -> float:
        """z-component of the cross product of two 2D vectors."""
        return v0[0] * v1[1] - v0[1] * v1[0]

    @staticmethod
    def dot(v0: Sequence[float], v1: Sequence[float]) -> float:
        """Dot product of two 2D vectors."""
        return v0[0] * v1[0] + v0[1] * v1[1]

    @staticmethod
    def left_normal(direction: Sequence[float]) -> Tuple[float, float]:
        """The given direction rotated by +90 degrees."""
        return (-direction[1], direction[0])


###############################################################################
# AvBox
###############################################################################
@dataclass(frozen=True)
class AvBox:
    """
    Axis-aligned box spanned by path geometry.

    The corners are normalized on creation, so xmin <= xmax and ymin <= ymax
    hold for every instance. A box without extent is a single point.
    """

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    def __post_init__(self):
        xmin, xmax = sorted((float(self.xmin), float(self.xmax)))
        ymin, ymax = sorted((float(self.ymin), float(self.ymax)))
        object.__setattr__(self, "xmin", xmin)
        object.__setattr__(self, "ymin", ymin)
        object.__setattr__(self, "xmax", xmax)
        object.__setattr__(self, "ymax", ymax)

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """(xmin, ymin, xmax, ymax)"""
        return self.xmin, self.ymin, self.xmax, self.ymax

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains_point(self, point: Sequence[float], tolerance: float = 0.0) -> bool:
        """True if _point_ lies inside the box or on its border (widened by _tolerance_)."""
        return (
            self.xmin - tolerance <= point[0] <= self.xmax + tolerance
            and self.ymin - tolerance <= point[1] <= self.ymax + tolerance
        )
