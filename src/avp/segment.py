"""Segment records describing the drawing commands of an AvPath.

Every segment carries its terminal anchor point, i.e. the pen position after
the segment has been drawn. The start point of a segment is implicit: it is the
anchor point of the previous segment (or the origin for the first segment).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple, Union

from avp.arc import AvArcParameters
from avp.common import AvPathCmds, AvPoint


@dataclass(frozen=True)
class AvMoveSegment:
    """Start a new subpath at _point_."""

    command: ClassVar[AvPathCmds] = "M"

    point: AvPoint


@dataclass(frozen=True)
class AvLineSegment:
    """Straight line from the current pen position to _point_."""

    command: ClassVar[AvPathCmds] = "L"

    point: AvPoint


@dataclass(frozen=True)
class AvQuadraticBezierSegment:
    """Quadratic Bezier curve to _point_ using the control point _through_."""

    command: ClassVar[AvPathCmds] = "Q"

    point: AvPoint
    through: AvPoint


@dataclass(frozen=True)
class AvCubicBezierSegment:
    """Cubic Bezier curve to _point_ using the control points _through_0_ and _through_1_."""

    command: ClassVar[AvPathCmds] = "C"

    point: AvPoint
    through_0: AvPoint
    through_1: AvPoint


@dataclass(frozen=True)
class AvEllipticalArcSegment:
    """Elliptical arc to _point_ in center parameterization.

    Attributes:
        point: End point of the arc.
        center: Center of the ellipse.
        radii: Radii (rx, ry) of the ellipse, already corrected to span the chord.
        x_axis_rotation: Rotation of the ellipse's x-axis in radians.
        theta_1: Parameter angle of the start point in radians.
        theta_delta: Signed parameter sweep in radians (positive if _sweep_ is True).
        large_arc: SVG large-arc-flag the arc was created with.
        sweep: SVG sweep-flag the arc was created with.
    """

    command: ClassVar[AvPathCmds] = "A"

    point: AvPoint
    center: AvPoint
    radii: Tuple[float, float]
    x_axis_rotation: float
    theta_1: float
    theta_delta: float
    large_arc: bool
    sweep: bool

    @property
    def parameters(self) -> AvArcParameters:
        """The center parameterization of this arc."""
        return AvArcParameters(self.center, self.radii, self.x_axis_rotation, self.theta_1, self.theta_delta)


AvSegment = Union[
    AvMoveSegment,
    AvLineSegment,
    AvQuadraticBezierSegment,
    AvCubicBezierSegment,
    AvEllipticalArcSegment,
]
"""Tagged union over the five drawing commands of an AvPath."""

SEGMENT_TYPES = (
    AvMoveSegment,
    AvLineSegment,
    AvQuadraticBezierSegment,
    AvCubicBezierSegment,
    AvEllipticalArcSegment,
)
