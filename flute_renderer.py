#!/usr/bin/env python3
"""
FLUTE_RENDERER.PY - SVG side elevation of a flute

Contains:
- FluteProfileRenderer: Section drawing of body, bore, holes, embouchure and cork

The drawing is a half-section laid on its side: elevation runs left to right,
the hole side of the body is at the top.
"""

from typing import List, Tuple

import svgwrite

from flute_geometry import AssemblyOptions
from flute_models import ConicStack, FluteSpec


class FluteProfileRenderer:
    """Renders a FluteSpec profile to SVG using svgwrite."""

    COLORS = {
        "background": "#FFFFFF",
        "body_fill": "#E8D4A8",      # Light wood
        "body_stroke": "#8B6B4A",    # Dark brown
        "bore_fill": "#FFFFFF",
        "bore_stroke": "#4A6B8B",    # Dark blue
        "hole_fill": "#334455",      # Dark blue-gray
        "emb_fill": "#AA3333",       # Red
        "cork_fill": "#C4A060",      # Cork
        "axis": "#999999",
        "label": "#333333",
    }

    LABEL_SPACE = 30  # px above the body for hole numbers

    def __init__(self, spec: FluteSpec, scale: float = 2.0, padding: float = 20,
                 options: AssemblyOptions = None):
        self.spec = spec
        self.scale = scale
        self.padding = padding
        self.options = options or AssemblyOptions()

        self._calculate_bounds()

    def _calculate_bounds(self):
        """Calculate SVG bounds from flute geometry."""
        length = max(self.spec.outer_body.total_height(), self.spec.inner_bore.total_height())
        widest = self.spec.body_diameter()

        self.width = int(length * self.scale + 2 * self.padding)
        self.height = int(widest * self.scale + 2 * self.padding + self.LABEL_SPACE)
        self.axis_y = self.padding + self.LABEL_SPACE + widest * self.scale / 2

    def _tx(self, elev_mm: float) -> float:
        """Transform an elevation to SVG X."""
        return self.padding + elev_mm * self.scale

    def _ty(self, radius_mm: float) -> float:
        """Transform a signed radius to SVG Y (hole side up)."""
        return self.axis_y - radius_mm * self.scale

    def _profile_points(self, stack: ConicStack) -> List[Tuple[float, float]]:
        """Closed outline of a stack: upper edge left to right, lower edge back."""
        upper = []
        for elev, s in zip(stack.elevations(), stack):
            upper.append((elev, s.lower_diam / 2))
            upper.append((elev + s.height, s.upper_diam / 2))
        lower = [(e, -r) for e, r in reversed(upper)]
        return [(self._tx(e), self._ty(r)) for e, r in upper + lower]

    def drawing(self, output_path: str = "flute.svg") -> svgwrite.Drawing:
        """Build the SVG drawing without writing it."""
        dwg = svgwrite.Drawing(output_path, size=(self.width, self.height))
        dwg.add(dwg.rect(insert=(0, 0), size=(self.width, self.height),
                         fill=self.COLORS["background"]))

        self._draw_stacks(dwg)
        self._draw_axis(dwg)
        self._draw_holes(dwg)
        self._draw_embouchure(dwg)
        self._draw_cork(dwg)
        self._draw_title(dwg)
        return dwg

    def render(self, output_path: str):
        """Render the flute profile to an SVG file."""
        self.drawing(output_path).save()

    def _draw_stacks(self, dwg):
        dwg.add(dwg.polygon(self._profile_points(self.spec.outer_body),
                            fill=self.COLORS["body_fill"],
                            stroke=self.COLORS["body_stroke"], stroke_width=1))
        dwg.add(dwg.polygon(self._profile_points(self.spec.inner_bore),
                            fill=self.COLORS["bore_fill"],
                            stroke=self.COLORS["bore_stroke"], stroke_width=1))

    def _draw_axis(self, dwg):
        length = max(self.spec.outer_body.total_height(), self.spec.inner_bore.total_height())
        dwg.add(dwg.line(start=(self._tx(0) - 5, self._ty(0)),
                         end=(self._tx(length) + 5, self._ty(0)),
                         stroke=self.COLORS["axis"], stroke_width=0.5,
                         stroke_dasharray="6,3"))

    def _wall_cut(self, dwg, elev: float, width: float, fill: str):
        """Rectangle through the upper wall centred on an elevation."""
        inner, outer = self.spec.diameters_at(elev)
        top = self._ty(outer / 2)
        bottom = self._ty(inner / 2)
        dwg.add(dwg.rect(insert=(self._tx(elev - width / 2), top),
                         size=(width * self.scale, max(bottom - top, 0)),
                         fill=fill))

    def _draw_holes(self, dwg):
        for number, hole in self.spec.numbered_holes():
            self._wall_cut(dwg, hole.elevation, hole.diameter, self.COLORS["hole_fill"])
            dwg.add(dwg.text(str(number),
                             insert=(self._tx(hole.elevation), self.padding + self.LABEL_SPACE / 2),
                             text_anchor="middle", font_size=10,
                             font_family="Arial, sans-serif",
                             fill=self.COLORS["label"]))

    def _draw_embouchure(self, dwg):
        emb = self.spec.emb
        self._wall_cut(dwg, emb.elevation, emb.diameter * emb.eccentricity,
                       self.COLORS["emb_fill"])

    def _draw_cork(self, dwg):
        emb = self.spec.emb
        thickness = self.options.cork_offset * emb.diameter
        radius = self.spec.inner_bore.last_section().upper_diam / 2
        start = emb.elevation + thickness
        dwg.add(dwg.rect(insert=(self._tx(start), self._ty(radius)),
                         size=(thickness * self.scale, 2 * radius * self.scale),
                         fill=self.COLORS["cork_fill"], opacity=0.8))

    def _draw_title(self, dwg):
        dwg.add(dwg.text(self.spec.name, insert=(self.padding, self.padding),
                         font_size=12, font_family="Arial, sans-serif",
                         fill=self.COLORS["label"]))
