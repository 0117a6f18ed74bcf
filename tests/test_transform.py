"""Tests for avp.transform and AvPath.copy_transformed."""

import math

import numpy as np
import pytest

from avp.arc import ArcParameterizer
from avp.path import AvPath
from avp.segment import AvCubicBezierSegment, AvEllipticalArcSegment, AvLineSegment, AvMoveSegment
from avp.transform import PathTransformer


def _sample_path() -> AvPath:
    path = AvPath()
    path.move_to((0.0, 0.0))
    path.line_to((10.0, 0.0))
    path.elliptical_arc_to((10.0, 10.0), (8.0, 5.0), math.radians(20.0), False, True)
    path.quadratic_bezier_curve_to((5.0, 15.0), (0.0, 10.0))
    path.cubic_bezier_curve_to((-3.0, 8.0), (-3.0, 2.0), (0.0, 0.0))
    return path


class TestCopyTransformed:
    """Mapping whole paths."""

    def test_identity_reproduces_path(self):
        """The identity keeps every value."""
        path = _sample_path()

        result = path.copy_transformed([1, 0, 0, 1, 0, 0])

        assert result.approx_equal(path)

    def test_translation(self):
        """A translation moves every point including arc centers."""
        path = _sample_path()

        result = path.copy_transformed([1, 0, 0, 1, 5.0, -2.0])

        for own, moved in zip(path.segments(), result.segments()):
            assert moved.point == pytest.approx((own.point[0] + 5.0, own.point[1] - 2.0))
        arc = result.segments()[2]
        assert isinstance(arc, AvEllipticalArcSegment)
        assert arc.center == pytest.approx((path.segments()[2].center[0] + 5.0, path.segments()[2].center[1] - 2.0))
        assert arc.radii == pytest.approx(path.segments()[2].radii)

    def test_segment_kinds_kept(self):
        """Every segment keeps its kind."""
        path = _sample_path()

        result = path.copy_transformed([2, 1, -1, 3, 0, 0])

        assert [segment.command for segment in result] == [segment.command for segment in path]

    def test_source_untouched_and_result_uncached(self):
        """The source is not modified and the copy has no derived geometry."""
        path = _sample_path()
        path.split_lines()
        before = path.segments()

        result = path.copy_transformed([0, -1, 1, 0, 3, 3])

        assert path.segments() == before
        assert path.has_cached_geometry
        assert not result.has_cached_geometry

    def test_cubic_control_points_mapped(self):
        """Control points are mapped like anchor points."""
        path = AvPath()
        path.move_to((0.0, 0.0))
        path.cubic_bezier_curve_to((1.0, 2.0), (3.0, 4.0), (5.0, 6.0))

        result = path.copy_transformed([2, 0, 0, 2, 1, 1])

        assert result.segments()[1] == AvCubicBezierSegment((11.0, 13.0), (3.0, 5.0), (7.0, 9.0))

    def test_reflection_flips_sweep(self):
        """A mirror reverses the arc direction and flips the sweep flag."""
        path = AvPath()
        path.move_to((0.0, 0.0))
        path.elliptical_arc_to((10.0, 0.0), (5.0, 5.0), 0.0, False, True)

        result = path.copy_transformed([1, 0, 0, -1, 0, 0])

        arc = result.segments()[1]
        assert not arc.sweep
        assert not arc.large_arc
        assert arc.theta_delta < 0.0

    @pytest.mark.parametrize(
        "affine_trafo",
        [
            [0, -2, 2, 0, 1, 1],
            [-1, 0, 0, 1, 0, 0],
            [3, 0, 0, 0.5, 2, 0],
            [1, 0.7, 0, 1, 0, 0],
            [-2, 1, 0.5, 1.5, 4, 4],
        ],
    )
    def test_flattened_arc_follows_transformation(self, affine_trafo):
        """Split lines of the transformed path run along the transformed arc."""
        path = AvPath()
        path.move_to((0.0, 0.0))
        path.elliptical_arc_to((10.0, 0.0), (8.0, 5.0), math.radians(30.0), True, False)

        result = path.copy_transformed(affine_trafo)

        arc = path.segments()[1]
        mapped_arc = result.segments()[1]
        (polyline,) = result.split_lines()
        np.testing.assert_allclose(polyline[0], (affine_trafo[4], affine_trafo[5]), atol=1e-9)
        end = (10.0 * affine_trafo[0] + affine_trafo[4], 10.0 * affine_trafo[2] + affine_trafo[5])
        np.testing.assert_allclose(polyline[-1], end, atol=1e-9)
        params = mapped_arc.parameters
        assert ArcParameterizer.point_at(params, params.theta_1) == pytest.approx(tuple(polyline[0]), abs=1e-9)
        assert ArcParameterizer.point_at(params, params.theta_2) == pytest.approx(end, abs=1e-9)
        assert mapped_arc.large_arc == arc.large_arc
        assert mapped_arc.sweep == (arc.sweep != (np.linalg.det(np.reshape(affine_trafo[:4], (2, 2))) < 0))

    def test_projection_keeps_arc_extent(self):
        """A projection flattens the arc onto a line section that still covers its image."""
        path = AvPath()
        path.move_to((0.0, -1.0))
        path.arc_to((-1.0, 0.0), 1.0, True, True)  # three quarters through (1, 0)

        result = path.copy_transformed([1, 0, 0, 0, 0, 0])

        arc = result.segments()[1]
        assert min(arc.radii) == pytest.approx(0.0, abs=1e-12)
        assert max(arc.radii) == pytest.approx(1.0)
        bbox = result.bounding_box()
        assert bbox.xmin == pytest.approx(-1.0)
        assert 1.0 - 0.05 <= bbox.xmax <= 1.0 + 1e-9
        assert bbox.ymin == pytest.approx(0.0, abs=1e-9)
        assert bbox.ymax == pytest.approx(0.0, abs=1e-9)

    @pytest.mark.parametrize("affine_trafo", [[1, 0, 0, 1, 0], "abcdef", [1, 0, 0, 1, 0, math.nan]])
    def test_malformed_affine_raises(self, affine_trafo):
        """Malformed transformations are rejected."""
        with pytest.raises(ValueError):
            _sample_path().copy_transformed(affine_trafo)

    def test_empty_path(self):
        """Transforming an empty path results in an empty path."""
        assert PathTransformer.copy_transformed(AvPath(), [2, 0, 0, 2, 1, 1]).is_empty


class TestTransformSegment:
    """Mapping single segments."""

    def test_move_and_line(self):
        """Moves and lines map their point."""
        affine_trafo = [1, 0, 0, 1, 1, 2]

        assert PathTransformer.transform_segment(AvMoveSegment((0.0, 0.0)), affine_trafo) == AvMoveSegment((1.0, 2.0))
        assert PathTransformer.transform_segment(AvLineSegment((1.0, 1.0)), affine_trafo) == AvLineSegment((2.0, 3.0))
