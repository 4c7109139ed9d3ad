#!/usr/bin/env python3
"""
FLUTE_GEOMETRY.PY - Builds the CSG tree for a flute

Contains:
- ASSEMBLY_DEFAULTS / AssemblyOptions: fixed construction dimensions
- FluteAssembly: body, hole rings, holes, lip plate, cork
- generate_scad: spec in, OpenSCAD text out

Coordinate frame (matches the scene OpenSCAD receives):
- Z is the bore axis, the foot of the flute at z=0
- finger holes and the embouchure open towards -X

    body + rings  - bore - finger holes - embouchure hole
         U lip plate
         U cork
"""

import sys
from dataclasses import dataclass, fields
from typing import Optional

from flute_errors import SpecValueError
from flute_models import ConicStack, FingerHole, FluteSpec
from scad_nodes import (
    Cylinder, Difference, GeometryNode, NodeBuilder, Union,
    difference, intersection, labelled, render, rotate, scale, translate, union,
)


# Turns a +Z cylinder so it points out through the wall towards -X.
# A translate of (elevation, 0, r) inside it lands at height elevation, radius r.
HOLE_ROTATION = (0, -90, 0)

# Faces the lip plate half towards the finger holes
PLATE_ROTATION = (0, 0, -90)

# Stands the oval footprint cylinder perpendicular to the bore
OVAL_ROTATION = (90, 0, 0)


# =============================================================================
# ASSEMBLY DIMENSIONS
# =============================================================================

ASSEMBLY_DEFAULTS = {
    'ring_width': 3.0,          # mm - annulus added around each finger hole
    'ring_protrusion': 2.0,     # mm - ring stands proud of the body wall
    'plate_thickness': 2.0,     # mm - lip plate above the body surface
    'plate_stretch': 1.6,       # oval footprint stretch along the bore axis
    'plate_shell_factor': 8.0,  # shell length in embouchure diameters
    'cork_offset': 1.75,        # cork sits this many emb diameters above the emb
    'cork_clearance': 1.0,      # mm - added to the last bore radius
}


@dataclass(frozen=True)
class AssemblyOptions:
    """Dimensions the flute spec does not carry itself."""
    ring_width: float = ASSEMBLY_DEFAULTS['ring_width']
    ring_protrusion: float = ASSEMBLY_DEFAULTS['ring_protrusion']
    plate_thickness: float = ASSEMBLY_DEFAULTS['plate_thickness']
    plate_stretch: float = ASSEMBLY_DEFAULTS['plate_stretch']
    plate_shell_factor: float = ASSEMBLY_DEFAULTS['plate_shell_factor']
    cork_offset: float = ASSEMBLY_DEFAULTS['cork_offset']
    cork_clearance: float = ASSEMBLY_DEFAULTS['cork_clearance']

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0:
                raise SpecValueError(f"Assembly option {f.name} must not be negative, got {value}")
        for name in ('plate_stretch', 'plate_shell_factor', 'cork_offset'):
            if getattr(self, name) == 0:
                raise SpecValueError(f"Assembly option {name} must be positive")

    @classmethod
    def with_overrides(cls, **overrides) -> 'AssemblyOptions':
        """Defaults, with any non-None keyword replacing its default."""
        return cls(**{k: v for k, v in overrides.items() if v is not None})


# =============================================================================
# FLUTE ASSEMBLY
# =============================================================================

class FluteAssembly:
    """Turns a FluteSpec into one CSG tree.

    Build order is fixed: body, lip plate, cork, then the union of the three.
    """

    def __init__(self, spec: FluteSpec, options: Optional[AssemblyOptions] = None,
                 verbose: bool = False):
        if not isinstance(spec, FluteSpec):
            raise TypeError(f"Expected a FluteSpec, got {type(spec).__name__}")
        self.spec = spec
        self.options = options or AssemblyOptions()
        self.verbose = verbose

    def _log(self, message: str):
        if self.verbose:
            print(f"  {message}", file=sys.stderr)

    def build_stack(self, label: str, facets: int, stack: ConicStack) -> GeometryNode:
        """One cylinder per section, each lifted to its start elevation."""
        result = NodeBuilder(Union)
        for elev, cone in zip(stack.elevations(), stack):
            result.add(translate(
                (0, 0, elev),
                Cylinder(cone.height, cone.lower_diam / 2, cone.upper_diam / 2, facets)))
        return labelled(f"{label} stack", result.build())

    def build_ring(self, hole: FingerHole, number: int = None) -> GeometryNode:
        """Annulus around a finger hole, from the bore wall out past the body.

        Gives the finger pad a raised seat and keeps the hole wall full depth
        where the body is thin.
        """
        inner, outer = self.spec.diameters_at(hole.elevation)
        self._log(f"hole at {hole.elevation}mm: bore {inner}mm, body {outer}mm")
        ring_height = (outer - inner) / 2 + self.options.ring_protrusion
        ring_radius = hole.radius() + self.options.ring_width
        ring = difference(
            Cylinder(ring_height, ring_radius, ring_radius),
            Cylinder(ring_height, hole.radius(), hole.radius()),
        )
        label = "hole ring" if number is None else f"hole ring {number}"
        return labelled(label, rotate(HOLE_ROTATION,
                                      translate((hole.elevation, 0, inner / 2), ring)))

    def build_hole(self, hole: FingerHole, number: int = None) -> GeometryNode:
        """Cutter from the axis outwards, long enough to clear any ring."""
        length = self.spec.body_diameter()
        label = "finger hole" if number is None else f"finger hole {number}"
        return labelled(label, rotate(HOLE_ROTATION, translate(
            (hole.elevation, 0, 0),
            Cylinder(length, hole.radius(), hole.radius()))))

    def build_embouchure_cut(self) -> GeometryNode:
        """Oval cutter through the body wall; eccentricity stretches it along Z."""
        emb = self.spec.emb
        cutter = scale((emb.eccentricity, 1, 1),
                       Cylinder(self.spec.body_diameter(), emb.radius(), emb.radius()))
        return labelled("embouchure hole",
                        translate((0, 0, emb.elevation), rotate(HOLE_ROTATION, cutter)))

    def build_body(self) -> GeometryNode:
        spec = self.spec
        facets = spec.outer_facets

        outer = self.build_stack("outer body", facets, spec.outer_body)
        if facets > 0:
            # Put a flat face, not an edge, under the finger holes
            outer = rotate((0, 0, 360 / facets / 2), outer)

        rings = [self.build_ring(h, n) for n, h in spec.numbered_holes()]
        solid = labelled("body + hole rings", union(outer, *rings))

        body = NodeBuilder(Difference)
        body.add(solid)
        body.add(self.build_stack("inner bore", 0, spec.inner_bore))
        body.extend(self.build_hole(h, n) for n, h in spec.numbered_holes())
        body.add(self.build_embouchure_cut())
        return labelled("body", body.build())

    def build_embouchure_plate(self) -> GeometryNode:
        """Oval lip plate draped over the body around the embouchure.

        OpenSCAD cannot bend a flat patch onto a cylinder, so:
        1. A shell one plate thickness proud of the body, hollowed to the bore.
        2. An oval cylinder at a right angle to the bore, starting on the axis
           and running out one side only.
        3. Their intersection is the curved plate on that one side.
        4. Turn it to face the finger holes and cut the embouchure through it.

        Built around z=0 and lifted to the embouchure elevation at the end.
        """
        opts = self.options
        emb = self.spec.emb
        inner, outer = self.spec.diameters_at(emb.elevation)
        self._log(f"embouchure at {emb.elevation}mm: bore {inner}mm, body {outer}mm")

        shell_length = emb.diameter * opts.plate_shell_factor
        shell_radius = outer / 2 + opts.plate_thickness
        shell = translate((0, 0, -shell_length / 2), difference(
            Cylinder(shell_length, shell_radius, shell_radius),
            Cylinder(shell_length, inner / 2, inner / 2),
        ))

        reach = outer * 3
        oval = rotate(OVAL_ROTATION, scale(
            (1, opts.plate_stretch, 1),
            Cylinder(reach, emb.diameter, emb.diameter)))

        blank = labelled("lip plate blank", rotate(PLATE_ROTATION, intersection(shell, oval)))
        opening = labelled("embouchure opening", rotate(HOLE_ROTATION, scale(
            (emb.eccentricity, 1, 1),
            Cylinder(reach, emb.radius(), emb.radius()))))

        return labelled("lip plate",
                        translate((0, 0, emb.elevation), difference(blank, opening)))

    def build_cork(self) -> GeometryNode:
        """Stopper filling the bore just above the embouchure."""
        emb = self.spec.emb
        thickness = self.options.cork_offset * emb.diameter
        position = emb.elevation + thickness
        radius = self.spec.inner_bore.last_section().upper_diam / 2 + self.options.cork_clearance
        return labelled("cork", translate((0, 0, position),
                                          Cylinder(thickness, radius, radius)))

    def build_flute(self) -> GeometryNode:
        self._log(f"building {self.spec.name}")
        return union(self.build_body(), self.build_embouchure_plate(), self.build_cork())

    def header(self) -> str:
        lines = [f"// {self.spec.name}", ""]
        if self.spec.description:
            lines.extend(f"// {line}" for line in self.spec.description)
            lines.append("")
        return "\n".join(lines) + "\n"

    def to_scad(self) -> str:
        return self.header() + render(self.build_flute())


def generate_scad(spec: FluteSpec, options: Optional[AssemblyOptions] = None) -> str:
    """OpenSCAD text for a flute spec."""
    return FluteAssembly(spec, options).to_scad()
