"""Elliptical arc parameterization: conversion from endpoint to center form, sampling and mapping."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from avp.common import FLATTEN_TOLERANCE, AvPoint
from avp.geom import GeomMath


@dataclass(frozen=True)
class AvArcParameters:
    """Center parameterization of an elliptical arc.

    The arc is defined as
        arc(theta) = center + R(x_axis_rotation) @ [rx * cos(theta), ry * sin(theta)]
    for theta running from theta_1 to theta_1 + theta_delta.

    Attributes:
        center: Center of the ellipse.
        radii: Radii (rx, ry), both >= 0.
        x_axis_rotation: Rotation of the ellipse's x-axis in radians.
        theta_1: Start angle in radians.
        theta_delta: Signed sweep angle in radians.
    """

    center: AvPoint
    radii: Tuple[float, float]
    x_axis_rotation: float
    theta_1: float
    theta_delta: float

    @property
    def theta_2(self) -> float:
        """End angle in radians."""
        return self.theta_1 + self.theta_delta


class ArcParameterizer:
    """Collection of static methods to convert, sample and transform elliptical arcs.

    The conversion follows the arc implementation notes of the SVG specification
    (F.6.5 "Conversion from endpoint to center parameterization").
    """

    @staticmethod
    def endpoint_to_center(
        # pylint: disable=too-many-arguments,too-many-positional-arguments,too-many-locals
        start: Sequence[float],
        end: Sequence[float],
        radii: Sequence[float],
        x_axis_rotation: float,
        large_arc: bool,
        sweep: bool,
    ) -> Optional[AvArcParameters]:
        """
        Convert an arc given by its end points into center parameterization.

        Args:
            start: current pen position, i.e. start point of the arc
            end: end point of the arc
            radii: requested radii (rx, ry); negative values are treated as positive
            x_axis_rotation: rotation of the ellipse's x-axis in radians
            large_arc: True to choose the arc sweeping more than 180 degrees
            sweep: True to choose the arc running in positive-angle direction

        Returns:
            Optional[AvArcParameters]: the center parameterization, or None if the
                arc degenerates to a straight line (zero radius or start == end)
        """
        rx = abs(float(radii[0]))
        ry = abs(float(radii[1]))
        if rx == 0.0 or ry == 0.0:
            return None
        if start[0] == end[0] and start[1] == end[1]:
            return None

        cos_phi = math.cos(x_axis_rotation)
        sin_phi = math.sin(x_axis_rotation)

        # Step 1: compute (x1', y1'), the half chord in the rotated frame
        x_half = (start[0] - end[0]) / 2.0
        y_half = (start[1] - end[1]) / 2.0
        x1p = cos_phi * x_half + sin_phi * y_half
        y1p = -sin_phi * x_half + cos_phi * y_half

        x1p_sq = x1p * x1p
        y1p_sq = y1p * y1p
        rx_sq = rx * rx
        ry_sq = ry * ry

        # Out-of-range radii correction: scale up radii until the chord fits
        lambda_ = x1p_sq / rx_sq + y1p_sq / ry_sq
        if lambda_ > 1.0:
            lambda_sqrt = math.sqrt(lambda_)
            rx *= lambda_sqrt
            ry *= lambda_sqrt
            multiplier = 0.0
        else:
            # Step 2: compute (cx', cy')
            numerator = rx_sq * ry_sq - rx_sq * y1p_sq - ry_sq * x1p_sq
            denominator = rx_sq * y1p_sq + ry_sq * x1p_sq
            multiplier = math.sqrt(max(0.0, numerator / denominator))
        if large_arc == sweep:
            multiplier = -multiplier
        cxp = multiplier * rx * y1p / ry
        cyp = -multiplier * ry * x1p / rx

        # Step 3: compute (cx, cy) from (cx', cy')
        x_mid = (start[0] + end[0]) / 2.0
        y_mid = (start[1] + end[1]) / 2.0
        cx = cos_phi * cxp - sin_phi * cyp + x_mid
        cy = sin_phi * cxp + cos_phi * cyp + y_mid

        # Step 4: compute theta_1 and theta_delta
        theta_1 = math.atan2((y1p - cyp) / ry, (x1p - cxp) / rx)
        theta_2 = math.atan2((-y1p - cyp) / ry, (-x1p - cxp) / rx)
        theta_delta = theta_2 - theta_1
        if not sweep and theta_delta > 0.0:
            theta_delta -= 2.0 * math.pi
        elif sweep and theta_delta < 0.0:
            theta_delta += 2.0 * math.pi

        return AvArcParameters((cx, cy), (rx, ry), float(x_axis_rotation), theta_1, theta_delta)

    @staticmethod
    def point_at(params: AvArcParameters, theta: float) -> AvPoint:
        """Point on the ellipse of _params_ at parameter angle _theta_."""
        rx, ry = params.radii
        cos_phi = math.cos(params.x_axis_rotation)
        sin_phi = math.sin(params.x_axis_rotation)
        ex = rx * math.cos(theta)
        ey = ry * math.sin(theta)
        return (
            params.center[0] + cos_phi * ex - sin_phi * ey,
            params.center[1] + sin_phi * ex + cos_phi * ey,
        )

    @staticmethod
    def angle_step(radius: float, tolerance: float = FLATTEN_TOLERANCE) -> float:
        """
        Largest angle step whose chord deviates at most _tolerance_ from a circle of _radius_.

        The sagitta of a chord spanning the angle a is r * (1 - cos(a / 2)).
        """
        if radius <= tolerance:
            return math.pi
        return 2.0 * math.acos(1.0 - tolerance / radius)

    @classmethod
    def sample(
        cls,
        params: AvArcParameters,
        tolerance: float = FLATTEN_TOLERANCE,
        end_point: Optional[Sequence[float]] = None,
    ) -> List[AvPoint]:
        """
        Sample the arc by stepping the parameter angle.

        Args:
            params: center parameterization of the arc
            tolerance: maximum chord deviation
            end_point: exact end point to finish with; computed from params if None

        Returns:
            List[AvPoint]: points excluding the start point, including the end point
        """
        if end_point is None:
            last = cls.point_at(params, params.theta_2)
        else:
            last = (float(end_point[0]), float(end_point[1]))

        step = cls.angle_step(max(params.radii), tolerance)
        steps = max(1, math.ceil(abs(params.theta_delta) / step))

        points = [cls.point_at(params, params.theta_1 + params.theta_delta * i / steps) for i in range(1, steps)]
        points.append(last)
        return points

    @staticmethod
    def transform(params: AvArcParameters, affine_trafo: Sequence[Union[int, float]]) -> Tuple[AvArcParameters, bool]:
        """
        Map an arc through an affine transformation.

        The image of an ellipse under an affine map is an ellipse again. Its axes
        are found by a singular value decomposition of the combined linear map
            J = A @ R(x_axis_rotation) @ diag(rx, ry) = U @ diag(s0, s1) @ Vt
        where U (made a proper rotation) gives the new x-axis rotation, s0/s1 the
        new radii and Vt maps old parameter angles onto new ones.

        Args:
            params: center parameterization of the arc
            affine_trafo: [a00, a01, a10, a11, b0, b1]

        Returns:
            Tuple[AvArcParameters, bool]: the transformed arc and True if the
                transformation reversed the orientation (sweep flag has to flip)
        """
        rx, ry = params.radii
        a00, a01, a10, a11 = (float(value) for value in affine_trafo[:4])
        new_center = GeomMath.transform_point(affine_trafo, params.center)

        # Similarity transformations keep the angles, handled exactly
        if math.isclose(a00, a11, abs_tol=1e-12) and math.isclose(a01, -a10, abs_tol=1e-12):
            scale = math.hypot(a00, a10)
            angle = math.atan2(a10, a00)
            new_params = AvArcParameters(
                new_center,
                (rx * scale, ry * scale),
                params.x_axis_rotation + angle,
                params.theta_1,
                params.theta_delta,
            )
            return new_params, False
        if math.isclose(a00, -a11, abs_tol=1e-12) and math.isclose(a01, a10, abs_tol=1e-12):
            # scale * reflection at the axis with angle alpha / 2
            scale = math.hypot(a00, a10)
            alpha = math.atan2(a10, a00)
            new_params = AvArcParameters(
                new_center,
                (rx * scale, ry * scale),
                alpha - params.x_axis_rotation,
                -params.theta_1,
                -params.theta_delta,
            )
            return new_params, True

        cos_phi = math.cos(params.x_axis_rotation)
        sin_phi = math.sin(params.x_axis_rotation)
        linear = np.array([[affine_trafo[0], affine_trafo[1]], [affine_trafo[2], affine_trafo[3]]], dtype=np.float64)
        rotation = np.array([[cos_phi, -sin_phi], [sin_phi, cos_phi]], dtype=np.float64)
        jacobian = linear @ rotation @ np.diag([rx, ry])

        u, s, vt = np.linalg.svd(jacobian)
        if np.linalg.det(u) < 0:
            # keep U a rotation; U @ S @ Vt is unchanged by flipping both
            u[:, 1] *= -1.0
            vt[1, :] *= -1.0
        reversed_orientation = bool(np.linalg.det(vt) < 0)

        new_rotation = math.atan2(u[1, 0], u[0, 0])
        mapped_start = vt @ np.array([math.cos(params.theta_1), math.sin(params.theta_1)])
        new_theta_1 = math.atan2(mapped_start[1], mapped_start[0])
        new_theta_delta = -params.theta_delta if reversed_orientation else params.theta_delta

        new_params = AvArcParameters(
            new_center,
            (float(s[0]), float(s[1])),
            new_rotation,
            new_theta_1,
            new_theta_delta,
        )
        return new_params, reversed_orientation
