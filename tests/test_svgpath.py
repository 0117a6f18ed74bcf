"""Test module for the avp.svgpath module.

The tests are grouped into test cases, each of which is a function prefixed with "test_".
The tests are run using pytest.
"""

import logging
import math

import pytest

from avp.path import AvPath
from avp.segment import AvCubicBezierSegment, AvLineSegment, AvMoveSegment, AvQuadraticBezierSegment
from avp.svgpath import AvSvgPath


def test_to_string_lines():
    """Lines are written with absolute coordinates and compact numbers."""
    path = AvPath.from_polyline([(0, 0), (10.5, 0), (10.5, -3)], closed=True)

    assert AvSvgPath.to_string(path) == "M 0,0 L 10.5,0 L 10.5,-3 L 0,0"


def test_to_string_curves():
    """Control points come before the end point."""
    path = AvPath()
    path.move_to((0, 0))
    path.quadratic_bezier_curve_to((1, 2), (3, 4))
    path.cubic_bezier_curve_to((5, 6), (7, 8), (9, 10))

    assert AvSvgPath.to_string(path) == "M 0,0 Q 1,2 3,4 C 5,6 7,8 9,10"


def test_to_string_arc_in_degrees():
    """Arcs are written in endpoint form with the rotation in degrees."""
    path = AvPath()
    path.move_to((0, 0))
    path.elliptical_arc_to((10, 0), (5, 5), math.radians(90.0), True, False)

    assert AvSvgPath.to_string(path).endswith("A 5,5 90 1,0 10,0")


def test_to_string_empty_path():
    """An empty path results in an empty string."""
    assert AvSvgPath.to_string(AvPath()) == ""


def test_round_trip_keeps_segments():
    """Writing and reading a path reproduces all segments."""
    path = AvPath()
    path.move_to((0.1, 0.2))
    path.line_to((10.0 / 3.0, 0.0))
    path.quadratic_bezier_curve_to((15.0, 5.0), (10.0, 10.0))
    path.cubic_bezier_curve_to((8.0, 14.0), (2.0, 14.0), (0.0, 10.0))
    path.elliptical_arc_to((0.1, 0.2), (6.0, 5.0), math.radians(12.5), True, False)
    path.move_to((20.0, 20.0))
    path.arc_to((30.0, 20.0), 1.0, False, True)

    result = AvSvgPath.parse(AvSvgPath.to_string(path))

    assert result.approx_equal(path)
    assert [segment.command for segment in result] == ["M", "L", "Q", "C", "A", "M", "A"]


def test_parse_relative_commands():
    """Relative coordinates are added to the current point."""
    path = AvSvgPath.parse("m 10 10 l 5 0 h 5 v -5 q 1 1 2 0 c 1 1 2 1 3 0")

    assert path.segments() == (
        AvMoveSegment((10.0, 10.0)),
        AvLineSegment((15.0, 10.0)),
        AvLineSegment((20.0, 10.0)),
        AvLineSegment((20.0, 5.0)),
        AvQuadraticBezierSegment((22.0, 5.0), (21.0, 6.0)),
        AvCubicBezierSegment((25.0, 5.0), (23.0, 6.0), (24.0, 6.0)),
    )


def test_parse_implicit_line_after_move():
    """Additional coordinate pairs after a move are lines."""
    path = AvSvgPath.parse("M0,0 10,0 10,10")

    assert [segment.command for segment in path] == ["M", "L", "L"]
    assert path.last_point == (10.0, 10.0)


def test_parse_close_returns_to_start():
    """Z closes the subpath and a following relative move starts at the subpath start."""
    path = AvSvgPath.parse("M 1 1 L 5 1 L 5 5 Z m 10 0 l 1 0")

    assert path.segments()[3] == AvLineSegment((1.0, 1.0))
    assert path.segments()[4] == AvMoveSegment((11.0, 1.0))
    assert path.last_point == (12.0, 1.0)


def test_parse_smooth_curves():
    """S and T reflect the previous control point."""
    path = AvSvgPath.parse("M 0 0 C 0 10 10 10 10 0 S 20 -10 20 0 M 0 0 Q 5 5 10 0 T 20 0")

    segments = path.segments()
    assert segments[2] == AvCubicBezierSegment((20.0, 0.0), (10.0, -10.0), (20.0, -10.0))
    assert segments[5] == AvQuadraticBezierSegment((20.0, 0.0), (15.0, -5.0))


def test_parse_smooth_without_previous_curve():
    """Without a previous curve the current point is the first control point."""
    path = AvSvgPath.parse("M 0 0 L 5 0 S 10 5 15 0")

    assert path.segments()[2] == AvCubicBezierSegment((15.0, 0.0), (5.0, 0.0), (10.0, 5.0))


def test_parse_compact_numbers_and_arc_flags():
    """Numbers without separators and arc flags written together are accepted."""
    path = AvSvgPath.parse("M0-5.5L.5.5L1e1,2a5 5 0 0110 0")

    assert path.segments()[0] == AvMoveSegment((0.0, -5.5))
    assert path.segments()[1] == AvLineSegment((0.5, 0.5))
    assert path.segments()[2] == AvLineSegment((10.0, 2.0))
    arc = path.segments()[3]
    assert arc.point == (20.0, 2.0)
    assert not arc.large_arc and arc.sweep


def test_parse_degenerate_arc_is_line():
    """An arc with zero radius becomes a line."""
    path = AvSvgPath.parse("M 0 0 A 0 5 0 0 1 10 0")

    assert path.segments()[1] == AvLineSegment((10.0, 0.0))


@pytest.mark.parametrize("path_string", ["M 0", "M 0 0 L 1 2 3", "M 0 0 Z 5", "M 0 0 L 1 x 2", "M 0 0 L"])
def test_parse_malformed_raises(path_string):
    """Wrong argument counts and foreign characters are rejected."""
    with pytest.raises(ValueError):
        AvSvgPath.parse(path_string)


def test_parse_leading_content_is_skipped(caplog):
    """Content before the first command is skipped with a warning."""
    with caplog.at_level(logging.WARNING, logger="avp.svgpath"):
        path = AvSvgPath.parse("junk M 0 0 L 1 1")

    assert len(path) == 2
    assert "Skipped" in caplog.text


def test_parse_empty_string():
    """Empty path data results in an empty path."""
    assert AvSvgPath.parse("").is_empty
