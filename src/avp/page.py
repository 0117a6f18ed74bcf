"""SVG debug page to inspect paths, their split lines and bounding boxes."""

from __future__ import annotations

import gzip
import io
from dataclasses import dataclass
from typing import Optional

import svgwrite
import svgwrite.container
from svgwrite.extensions import Inkscape

from avp.geom import AvBox
from avp.path import AvPath
from avp.svgpath import AvSvgPath


@dataclass
class AvDebugPage:
    """A page described by SVG showing paths in their own coordinate system.

    The page's coordinate system is left-to-right and bottom-to-top like the paths.
    Contains groups/layers:
        - root            -- (group) just contains the y-flip and translation
            - fill        -- the paths filled (nonzero rule)
            - split_lines -- the flattened polylines of the paths
            - bbox        -- the bounding boxes of the paths
    """

    _inkscape: Inkscape  # extension to support layers

    drawing: svgwrite.Drawing
    root_group: svgwrite.container.Group
    fill_layer: svgwrite.container.Group
    split_lines_layer: svgwrite.container.Group
    bbox_layer: svgwrite.container.Group

    def __init__(self, viewbox: AvBox, margin: float = 1.0, stroke_width: Optional[float] = None):
        """
        Initialize the SVG page showing the region _viewbox_ plus _margin_ on each side.

        Args:
            viewbox (AvBox): region of the path coordinate system to show
            margin (float, optional): additional space around the viewbox. Defaults to 1.0.
            stroke_width (Optional[float], optional): line width for split lines and boxes.
                Defaults to 1/500 of the larger page dimension.
        """
        width = viewbox.width + 2 * margin
        height = viewbox.height + 2 * margin
        if stroke_width is None:
            stroke_width = max(width, height) / 500.0
        self.stroke_width = stroke_width

        # profile="full" to support numbers with more than 4 decimal digits
        self.drawing = svgwrite.Drawing(
            size=(f"{width}mm", f"{height}mm"),
            viewBox=f"{viewbox.xmin - margin} {-(viewbox.ymax + margin)} {width} {height}",
            profile="full",
        )

        # Flip the y-axis so that path coordinates are bottom-to-top
        self.root_group = self.drawing.g(id="root", transform="scale(1,-1)")

        # Initialize Inkscape extension for layer support
        self._inkscape = Inkscape(self.drawing)

        self.fill_layer = self._inkscape.layer(label="fill", locked=False)
        self.split_lines_layer = self._inkscape.layer(label="split_lines", locked=False)
        self.bbox_layer = self._inkscape.layer(label="bbox", locked=False)

        self.drawing.add(self.root_group)
        self.root_group.add(self.fill_layer)
        self.root_group.add(self.split_lines_layer)
        self.root_group.add(self.bbox_layer)

    @classmethod
    def for_path(cls, path: AvPath, margin: float = 1.0) -> AvDebugPage:
        """Create a page fitting the bounding box of _path_ and show the path on it."""
        page = cls(path.bounding_box(), margin)
        page.add_path(path)
        return page

    def add_path(self, path: AvPath, fill: str = "lightgray", line_color: str = "blue", box_color: str = "red"):
        """Show _path_ on all layers: filled, as split lines and by its bounding box."""
        path_string = AvSvgPath.to_string(path)
        if path_string:
            self.fill_layer.add(self.drawing.path(d=path_string, fill=fill, fill_rule="nonzero", stroke="none"))

        for polyline in path.split_lines():
            self.split_lines_layer.add(
                self.drawing.polyline(
                    points=[(float(x), float(y)) for x, y in polyline],
                    stroke=line_color,
                    stroke_width=self.stroke_width,
                    fill="none",
                )
            )

        bbox = path.bounding_box()
        self.bbox_layer.add(
            self.drawing.rect(
                insert=(bbox.xmin, bbox.ymin),
                size=(bbox.width, bbox.height),
                stroke=box_color,
                stroke_width=self.stroke_width,
                fill="none",
            )
        )

    def to_string(self, pretty: bool = False, indent: int = 2) -> str:
        """SVG document of the page as string."""
        svg_buffer = io.StringIO()
        self.drawing.write(svg_buffer, pretty=pretty, indent=indent)
        return svg_buffer.getvalue()

    def save_as(self, filename: str, pretty: bool = False, indent: int = 2, compressed: bool = False):
        """Save as SVG file

        Args:
            filename (str): path and filename
            pretty (bool, optional): True for easy readable output. Defaults to False.
            indent (int, optional): Indention if pretty is enabled. Defaults to 2 spaces.
            compressed (bool, optional): Save as compressed svgz-file. Defaults to False.
        """
        output_data = self.to_string(pretty, indent).encode("utf-8")
        if compressed:
            output_data = gzip.compress(output_data)

        with open(filename, "wb") as svg_file:
            svg_file.write(output_data)
