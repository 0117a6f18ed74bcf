"""Tests for avp.flatten: conversion of segments into split lines and bounding box."""

import math

import numpy as np
import pytest

from avp.common import FLATTEN_TOLERANCE
from avp.flatten import PathFlattener
from avp.path import AvPath
from avp.segment import AvEllipticalArcSegment, AvLineSegment, AvMoveSegment


class TestFlattenSegment:
    """Single segment flattening."""

    def test_line_is_its_end_point(self):
        """A line contributes only its end point."""
        assert PathFlattener.flatten_segment((0, 0), AvLineSegment((3.0, 4.0))) == [(3.0, 4.0)]

    def test_zero_radii_arc_is_a_line(self):
        """An arc without any radius is flattened like a line."""
        segment = AvEllipticalArcSegment((5.0, 5.0), (0.0, 0.0), (0.0, 0.0), 0.0, 0.0, 1.0, False, True)

        assert PathFlattener.flatten_segment((0, 0), segment) == [(5.0, 5.0)]

    def test_single_zero_radius_arc_is_sampled(self):
        """A flat ellipse is sampled along its remaining axis."""
        segment = AvEllipticalArcSegment((2.0, 0.0), (0.0, 0.0), (2.0, 0.0), 0.0, math.pi, math.pi, False, True)

        points = PathFlattener.flatten_segment((-2.0, 0.0), segment)

        assert len(points) > 2
        assert points[-1] == (2.0, 0.0)
        assert all(abs(y) < 1e-12 and -2.0 <= x <= 2.0 for x, y in points)

    def test_move_is_rejected(self):
        """A move cannot be flattened on its own."""
        with pytest.raises(TypeError):
            PathFlattener.flatten_segment((0, 0), AvMoveSegment((1.0, 1.0)))


class TestSegmentize:
    """Flattening of whole segment sequences."""

    def test_each_move_starts_new_polyline(self):
        """Two subpaths result in two polylines."""
        segments = [
            AvMoveSegment((0.0, 0.0)),
            AvLineSegment((1.0, 0.0)),
            AvMoveSegment((5.0, 5.0)),
            AvLineSegment((6.0, 5.0)),
            AvLineSegment((6.0, 6.0)),
        ]

        polylines, bbox = PathFlattener.segmentize(segments)

        assert len(polylines) == 2
        np.testing.assert_array_equal(polylines[0], [[0.0, 0.0], [1.0, 0.0]])
        np.testing.assert_array_equal(polylines[1], [[5.0, 5.0], [6.0, 5.0], [6.0, 6.0]])
        assert bbox.extent == (0.0, 0.0, 6.0, 6.0)

    def test_lone_move_contributes_to_bbox_only(self):
        """A subpath without drawing segments has no polyline but its point is in the box."""
        segments = [AvMoveSegment((0.0, 0.0)), AvLineSegment((1.0, 1.0)), AvMoveSegment((-4.0, 9.0))]

        polylines, bbox = PathFlattener.segmentize(segments)

        assert len(polylines) == 1
        assert bbox.extent == (-4.0, 0.0, 1.0, 9.0)

    def test_missing_move_starts_at_origin(self):
        """Drawing without a leading move starts at the origin."""
        polylines, bbox = PathFlattener.segmentize([AvLineSegment((2.0, 3.0))])

        np.testing.assert_array_equal(polylines[0], [[0.0, 0.0], [2.0, 3.0]])
        assert bbox.extent == (0.0, 0.0, 2.0, 3.0)

    def test_empty_segments(self):
        """No segments, no lines and a zero box at the origin."""
        polylines, bbox = PathFlattener.segmentize([])

        assert polylines == []
        assert bbox.extent == (0.0, 0.0, 0.0, 0.0)

    def test_polylines_are_read_only(self):
        """Generated arrays cannot be modified."""
        polylines, _ = PathFlattener.segmentize([AvMoveSegment((0.0, 0.0)), AvLineSegment((1.0, 0.0))])

        assert not polylines[0].flags.writeable


class TestCircleFlattening:
    """Circles built from arcs stay within the flattening tolerance."""

    @pytest.mark.parametrize("radius", [0.5, 10.0, 250.0])
    def test_circle_points_on_circle(self, radius):
        """All points lie on the circle and all chords stay within tolerance."""
        path = AvPath.circle((3.0, -2.0), radius)

        (polyline,) = path.split_lines()
        distances = np.hypot(polyline[:, 0] - 3.0, polyline[:, 1] + 2.0)

        np.testing.assert_allclose(distances, radius, rtol=1e-12)
        midpoints = (polyline[:-1] + polyline[1:]) / 2.0
        midpoint_distances = np.hypot(midpoints[:, 0] - 3.0, midpoints[:, 1] + 2.0)
        assert np.all(radius - midpoint_distances <= FLATTEN_TOLERANCE + 1e-9)

    def test_circle_bbox(self):
        """The bounding box of a flattened circle is (nearly) the circle's box."""
        path = AvPath.circle((0.0, 0.0), 10.0)

        bbox = path.bounding_box()

        assert bbox.xmin == pytest.approx(-10.0, abs=FLATTEN_TOLERANCE)
        assert bbox.xmax == pytest.approx(10.0)
        assert bbox.ymin == pytest.approx(-10.0, abs=FLATTEN_TOLERANCE)
        assert bbox.ymax == pytest.approx(10.0, abs=FLATTEN_TOLERANCE)
        assert bbox.width <= 20.0 + 1e-9

    def test_circle_is_closed(self):
        """The polyline ends exactly where it started."""
        (polyline,) = AvPath.circle((1.0, 1.0), 2.0).split_lines()

        assert tuple(polyline[0]) == tuple(polyline[-1])
        assert math.isclose(float(polyline[0][0]), 3.0)
