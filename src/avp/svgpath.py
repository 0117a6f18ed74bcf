"""Handling of SVG path data: writing AvPaths as path strings and reading them back"""

from __future__ import annotations

import logging
import math
import re
from typing import ClassVar, List, Optional

from avp.common import AvPoint
from avp.path import AvPath
from avp.segment import (
    AvCubicBezierSegment,
    AvEllipticalArcSegment,
    AvLineSegment,
    AvMoveSegment,
    AvQuadraticBezierSegment,
)

logger = logging.getLogger(__name__)


class AvSvgPath:
    """
    This class provides a collection of static methods to convert between AvPaths and SVG path data.
    A SVG-path is characterized by a string describing a sequence of points.
    The points' connection types are according to their commands.
    Commands (command : number of values : command-character):
        MoveTo:           2: Mm
        LineTo:           2: Ll   1: Hh(x)   1:Vv(y)
        CubicBezier:      6: Cc   4: Ss
        QuadraticBezier:  4: Qq   2: Tt
        ArcCurve:         7: Aa
        ClosePath:        0: Zz
    """

    # Command letters:
    SVG_CMDS: ClassVar[str] = "MmLlHhVvCcSsQqTtAaZz"
    # Definition of a number:
    SVG_ARGS: ClassVar[str] = r"[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?"
    # Separators between numbers:
    SVG_SEPARATORS: ClassVar[str] = r"[\s,]*"
    # Number of values per command:
    BATCH_SIZES: ClassVar[dict] = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}

    @staticmethod
    def _format(value: float) -> str:
        return f"{value:.15g}"

    @classmethod
    def _format_point(cls, point: AvPoint) -> str:
        return f"{cls._format(point[0])},{cls._format(point[1])}"

    @classmethod
    def to_string(cls, path: AvPath) -> str:
        """
        Write the segments of _path_ as SVG path data using absolute coordinates.

        One command per segment: "M x,y", "L x,y", "Q cx,cy x,y", "C c1x,c1y c2x,c2y x,y"
        and "A rx,ry rotation large,sweep x,y" with the rotation given in degrees.

        Args:
            path (AvPath): the path to write

        Returns:
            str: the SVG path string, empty for an empty path
        """
        commands: List[str] = []
        for segment in path.segments():
            if isinstance(segment, AvMoveSegment):
                commands.append(f"M {cls._format_point(segment.point)}")
            elif isinstance(segment, AvLineSegment):
                commands.append(f"L {cls._format_point(segment.point)}")
            elif isinstance(segment, AvQuadraticBezierSegment):
                commands.append(f"Q {cls._format_point(segment.through)} {cls._format_point(segment.point)}")
            elif isinstance(segment, AvCubicBezierSegment):
                commands.append(
                    f"C {cls._format_point(segment.through_0)} {cls._format_point(segment.through_1)} "
                    f"{cls._format_point(segment.point)}"
                )
            elif isinstance(segment, AvEllipticalArcSegment):
                commands.append(
                    f"A {cls._format_point(segment.radii)} {cls._format(math.degrees(segment.x_axis_rotation))} "
                    f"{int(segment.large_arc)},{int(segment.sweep)} {cls._format_point(segment.point)}"
                )
        return " ".join(commands)

    @classmethod
    def _parse_args(cls, command_letter: str, args_string: str) -> List[float]:
        """
        Read all numbers following a command letter.

        Arc flags may be written without separators ("a5 5 0 01 10 10"), so arc
        arguments are read one by one with the flags limited to a single digit.

        Raises:
            ValueError: If _args_string_ contains anything but numbers and separators.
        """
        number = re.compile(cls.SVG_SEPARATORS + f"({cls.SVG_ARGS})")
        flag = re.compile(cls.SVG_SEPARATORS + "([01])")
        args: List[float] = []
        position = 0
        while True:
            pattern = number
            if command_letter in "Aa" and len(args) % 7 in (3, 4):
                pattern = flag
            match = pattern.match(args_string, position)
            if not match:
                break
            args.append(float(match.group(1)))
            position = match.end()
        if args_string[position:].strip(" \t\r\n,"):
            raise ValueError(f"Malformed arguments for command '{command_letter}': '{args_string.strip()}'")
        return args

    @classmethod
    def parse(cls, path_string: str) -> AvPath:
        """
        Create an AvPath from SVG path data.

        Absolute and relative commands "MLHVQTCSAZ" are supported. Horizontal and
        vertical lines become Line segments, smooth curves (S/T) get their
        reflected control point, "Z" closes the current subpath. Arc rotations
        are given in degrees. Content in front of the first command is skipped.

        Args:
            path_string (str): SVG path data

        Returns:
            AvPath: the new path

        Raises:
            ValueError: If a command has a wrong number of arguments or invalid content.
        """
        # pylint: disable=too-many-locals,too-many-branches,too-many-statements
        first_command = re.search(f"[{cls.SVG_CMDS}]", path_string)
        if first_command is None:
            if path_string.strip():
                logger.warning("Skipped SVG path data without any command: '%s'", path_string.strip())
            return AvPath()
        if path_string[: first_command.start()].strip():
            logger.warning("Skipped leading SVG path content '%s'", path_string[: first_command.start()].strip())

        path = AvPath()
        current: AvPoint = (0.0, 0.0)
        subpath_start: AvPoint = (0.0, 0.0)
        # control point of the previous curve for smooth commands, with its command kind
        last_control: Optional[AvPoint] = None
        last_kind: str = ""

        org_commands = re.findall(f"[{cls.SVG_CMDS}][^{cls.SVG_CMDS}]*", path_string[first_command.start() :])
        for command in org_commands:
            command_letter = command[0]
            absolute_letter = command_letter.upper()
            relative = command_letter.islower()
            args = cls._parse_args(command_letter, command[1:])
            batch_size = cls.BATCH_SIZES[absolute_letter]

            if batch_size == 0:
                if args:
                    raise ValueError(f"Command '{command_letter}' takes no arguments, got {len(args)}")
                path.close()
                current = subpath_start
                last_control, last_kind = None, ""
                continue
            if not args or len(args) % batch_size:
                raise ValueError(
                    f"Command '{command_letter}' needs a multiple of {batch_size} arguments, got {len(args)}"
                )

            for i in range(0, len(args), batch_size):
                values = args[i : i + batch_size]

                control: Optional[AvPoint] = None
                kind = ""
                if absolute_letter == "M" and i == 0:
                    current = cls._point(values, 0, current, relative)
                    subpath_start = current
                    path.move_to(current)
                elif absolute_letter in "ML":
                    current = cls._point(values, 0, current, relative)
                    path.line_to(current)
                elif absolute_letter == "H":
                    current = (current[0] + values[0] if relative else values[0], current[1])
                    path.line_to(current)
                elif absolute_letter == "V":
                    current = (current[0], current[1] + values[0] if relative else values[0])
                    path.line_to(current)
                elif absolute_letter in "QT":
                    if absolute_letter == "Q":
                        control = cls._point(values, 0, current, relative)
                        end = cls._point(values, 2, current, relative)
                    else:
                        control = cls._reflect(current, last_control if last_kind == "Q" else None)
                        end = cls._point(values, 0, current, relative)
                    path.quadratic_bezier_curve_to(control, end)
                    current, kind = end, "Q"
                elif absolute_letter in "CS":
                    if absolute_letter == "C":
                        first = cls._point(values, 0, current, relative)
                        control = cls._point(values, 2, current, relative)
                        end = cls._point(values, 4, current, relative)
                    else:
                        first = cls._reflect(current, last_control if last_kind == "C" else None)
                        control = cls._point(values, 0, current, relative)
                        end = cls._point(values, 2, current, relative)
                    path.cubic_bezier_curve_to(first, control, end)
                    current, kind = end, "C"
                elif absolute_letter == "A":
                    end = cls._point(values, 5, current, relative)
                    path.elliptical_arc_to(
                        end, (values[0], values[1]), math.radians(values[2]), values[3] != 0.0, values[4] != 0.0
                    )
                    current = end
                last_control, last_kind = control, kind

        return path

    @staticmethod
    def _point(values: List[float], index: int, current: AvPoint, relative: bool) -> AvPoint:
        """Point from values[index], values[index + 1], relative to _current_ if requested."""
        if relative:
            return (current[0] + values[index], current[1] + values[index + 1])
        return (values[index], values[index + 1])

    @staticmethod
    def _reflect(current: AvPoint, control: Optional[AvPoint]) -> AvPoint:
        """Reflection of _control_ at _current_; the current point itself if there is no control."""
        if control is None:
            return current
        return (2.0 * current[0] - control[0], 2.0 * current[1] - control[1])
