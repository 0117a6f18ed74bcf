"""Affine transformation of paths."""

from __future__ import annotations

from typing import Sequence, Union

from avp.arc import ArcParameterizer
from avp.geom import GeomMath
from avp.path import AvPath
from avp.segment import (
    AvCubicBezierSegment,
    AvEllipticalArcSegment,
    AvLineSegment,
    AvMoveSegment,
    AvQuadraticBezierSegment,
    AvSegment,
)


class PathTransformer:
    """Collection of static methods to map paths and segments through affine transformations.

    The given _affine_trafo_ is a list of 6 floats, performing an affine transformation.
    The transformation is defined as:
        | x' | = | a00 a01 b0 |   | x |
        | y' | = | a10 a11 b1 | * | y |
        | 1  | = |  0   0  1  |   | 1 |
    with
        affine_trafo = [a00, a01, a10, a11, b0, b1]
    """

    @staticmethod
    def transform_segment(segment: AvSegment, affine_trafo: Sequence[Union[int, float]]) -> AvSegment:
        """Return a new segment of the same kind with all points mapped by _affine_trafo_."""
        point = GeomMath.transform_point(affine_trafo, segment.point)

        if isinstance(segment, AvMoveSegment):
            return AvMoveSegment(point)
        if isinstance(segment, AvLineSegment):
            return AvLineSegment(point)
        if isinstance(segment, AvQuadraticBezierSegment):
            return AvQuadraticBezierSegment(point, GeomMath.transform_point(affine_trafo, segment.through))
        if isinstance(segment, AvCubicBezierSegment):
            return AvCubicBezierSegment(
                point,
                GeomMath.transform_point(affine_trafo, segment.through_0),
                GeomMath.transform_point(affine_trafo, segment.through_1),
            )
        if isinstance(segment, AvEllipticalArcSegment):
            params, reversed_orientation = ArcParameterizer.transform(segment.parameters, affine_trafo)
            return AvEllipticalArcSegment(
                point,
                params.center,
                params.radii,
                params.x_axis_rotation,
                params.theta_1,
                params.theta_delta,
                segment.large_arc,
                segment.sweep != reversed_orientation,
            )
        raise TypeError(f"Cannot transform segment of type {type(segment).__name__}")

    @classmethod
    def copy_transformed(cls, path: AvPath, affine_trafo: Sequence[Union[int, float]]) -> AvPath:
        """
        Create a new path with the same segment kinds and all points mapped by _affine_trafo_.

        The source path is not modified and no cached geometry is carried over.

        Args:
            path (AvPath): source path
            affine_trafo (List[float]): Affine transformation [a00, a01, a10, a11, b0, b1]

        Returns:
            AvPath: the transformed path
        """
        GeomMath.check_affine(affine_trafo)
        return AvPath(cls.transform_segment(segment, affine_trafo) for segment in path.segments())
