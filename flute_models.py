#!/usr/bin/env python3
"""
FLUTE_MODELS.PY - Data classes for a conical-bore flute

Contains all the data structures describing a flute body:
- ConicSection, ConicStack
- FingerHole, EmbouchureSpec
- FluteSpec

Everything here is frozen. Invariants are checked on construction so a bad
spec fails before any geometry is built.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from flute_errors import SpecShapeError, SpecValueError


# Smallest facet count OpenSCAD can turn into a closed polygon
MIN_FACETS = 3


def _check_finite(owner: str, **values):
    # NaN slips through every ordered comparison, so test it first
    for name, value in values.items():
        if not math.isfinite(value):
            raise SpecValueError(f"{owner} {name} must be a finite number, got {value}")


# =============================================================================
# CONIC STACK
# =============================================================================

@dataclass(frozen=True)
class ConicSection:
    """A frustum of the body or bore. Equal diameters make a cylinder."""
    height: float
    lower_diam: float
    upper_diam: float

    def __post_init__(self):
        _check_finite("Section", height=self.height,
                      lower_diam=self.lower_diam, upper_diam=self.upper_diam)
        if self.height <= 0:
            raise SpecValueError(f"Section height must be positive, got {self.height}")
        if self.lower_diam < 0 or self.upper_diam < 0:
            raise SpecValueError(
                f"Section diameters must not be negative, got "
                f"{self.lower_diam}/{self.upper_diam}")

    def mean_diameter(self) -> float:
        return (self.lower_diam + self.upper_diam) / 2

    def is_cylinder(self) -> bool:
        return self.lower_diam == self.upper_diam


@dataclass(frozen=True)
class ConicStack:
    """Frustums stacked end to end, the first one starting at elevation 0."""
    sections: Tuple[ConicSection, ...]

    def __post_init__(self):
        object.__setattr__(self, 'sections', tuple(self.sections))
        if not self.sections:
            raise SpecShapeError("A conic stack needs at least one section")

    def __iter__(self):
        return iter(self.sections)

    def __len__(self) -> int:
        return len(self.sections)

    def total_height(self) -> float:
        return sum(s.height for s in self.sections)

    def elevations(self) -> List[float]:
        """Start elevation of every section."""
        result = []
        elev = 0.0
        for section in self.sections:
            result.append(elev)
            elev += section.height
        return result

    def section_at(self, elevation: float) -> Optional[ConicSection]:
        """First section whose [start, start + height) interval holds elevation."""
        current = 0.0
        for section in self.sections:
            if current <= elevation < current + section.height:
                return section
            current += section.height
        return None

    def diameter_at(self, elevation: float) -> float:
        """Diameter of the stack at an elevation.

        Returns the mean diameter of the covering section rather than a true
        interpolation inside it. Holes are narrow compared to the sections, and
        existing instruments were cut with this value, so it stays.

        Returns 0 when no section covers the elevation (below the stack, or at
        or above its top). Callers treat that as "no material here".
        """
        section = self.section_at(elevation)
        if section is None:
            return 0
        return section.mean_diameter()

    def max_diameter(self) -> float:
        """Widest diameter at either end of any section."""
        return max(max(s.lower_diam, s.upper_diam) for s in self.sections)

    def last_section(self) -> ConicSection:
        return self.sections[-1]


# =============================================================================
# HOLES
# =============================================================================

@dataclass(frozen=True)
class FingerHole:
    """A tone hole cut through the wall at an elevation along the axis."""
    elevation: float
    diameter: float

    def __post_init__(self):
        _check_finite("Finger hole", elevation=self.elevation, diameter=self.diameter)
        if self.diameter <= 0:
            raise SpecValueError(f"Finger hole diameter must be positive, got {self.diameter}")

    def radius(self) -> float:
        return self.diameter / 2


@dataclass(frozen=True)
class EmbouchureSpec:
    """The blowing hole. Eccentricity stretches it along the axis (1.0 = round)."""
    elevation: float
    diameter: float
    eccentricity: float = 1.0

    def __post_init__(self):
        _check_finite("Embouchure", elevation=self.elevation,
                      diameter=self.diameter, eccentricity=self.eccentricity)
        if self.diameter <= 0:
            raise SpecValueError(f"Embouchure diameter must be positive, got {self.diameter}")
        if self.eccentricity <= 0:
            raise SpecValueError(f"Embouchure eccentricity must be positive, got {self.eccentricity}")

    def radius(self) -> float:
        return self.diameter / 2


# =============================================================================
# FLUTE
# =============================================================================

@dataclass(frozen=True)
class FluteSpec:
    """The complete flute description."""
    name: str
    description: Tuple[str, ...]
    outer_body: ConicStack
    outer_facets: int
    inner_bore: ConicStack
    holes: Tuple[FingerHole, ...]
    emb: EmbouchureSpec

    def __post_init__(self):
        object.__setattr__(self, 'description', tuple(self.description))
        object.__setattr__(self, 'holes', tuple(self.holes))

        if self.outer_facets < 0:
            raise SpecValueError(f"outer_facets must not be negative, got {self.outer_facets}")
        if 0 < self.outer_facets < MIN_FACETS:
            raise SpecValueError(
                f"outer_facets must be 0 (smooth) or at least {MIN_FACETS}, got {self.outer_facets}")

        body_length = self.outer_body.total_height()
        for i, hole in enumerate(self.holes):
            if not 0 <= hole.elevation <= body_length:
                raise SpecValueError(
                    f"Hole {i + 1} at {hole.elevation}mm lies outside the body (0-{body_length}mm)")
        if not 0 <= self.emb.elevation <= body_length:
            raise SpecValueError(
                f"Embouchure at {self.emb.elevation}mm lies outside the body (0-{body_length}mm)")

    def body_diameter(self) -> float:
        """Widest point of the body; through-cuts use it as their length."""
        return self.outer_body.max_diameter()

    def diameters_at(self, elevation: float) -> Tuple[float, float]:
        """(inner, outer) diameters at an elevation."""
        return (self.inner_bore.diameter_at(elevation),
                self.outer_body.diameter_at(elevation))

    def numbered_holes(self) -> List[Tuple[int, FingerHole]]:
        """(number, hole) pairs. Numbers start at 1 and follow the order of
        `holes`; every output labels holes with these numbers."""
        return list(enumerate(self.holes, start=1))


def make_stack(sections: Sequence[Tuple[float, float, float]]) -> ConicStack:
    """Build a stack from (height, lower_diam, upper_diam) triples."""
    return ConicStack(tuple(ConicSection(h, lower, upper) for h, lower, upper in sections))
