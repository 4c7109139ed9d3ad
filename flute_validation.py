#!/usr/bin/env python3
"""
FLUTE_VALIDATION.PY - Design checks for flute specs

Contains:
- DesignViolation: Data class for a failed check
- validate_design: Run all checks against a spec
- print_validation_report: Print formatted validation report

These checks are advisory. A spec that reaches this module already passed the
hard checks in flute_models; here we look for geometry that will render but is
unlikely to make a playable instrument.
"""

import sys
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional

from flute_geometry import AssemblyOptions
from flute_models import FluteSpec


MAX_PER_CHECK = 5  # report lines per check


@dataclass
class DesignViolation:
    """A design check that did not pass."""
    check: str
    message: str
    severity: str = "error"  # "error" or "warning"
    hole_number: Optional[int] = None
    actual_value: Optional[float] = None
    expected_value: Optional[float] = None


def validate_design(spec: FluteSpec, options: Optional[AssemblyOptions] = None,
                    min_wall_mm: float = 1.0) -> List[DesignViolation]:
    """
    Check a flute spec for geometry problems:
    1. Bore must be narrower than the body everywhere
    2. Walls at finger holes must keep a minimum thickness
    3. Finger holes should not be wider than the bore
    4. Neighbouring hole rings should not overlap
    5. Holes and embouchure should not sit where the diameter lookup misses
    6. The cork must fit inside the bore

    Returns list of violations (empty if all checks pass).
    """
    options = options or AssemblyOptions()
    violations = []
    numbered = spec.numbered_holes()

    # ---------------------------------------------------------------------
    # 1. BORE INSIDE BODY
    # Checked at the start of every bore section
    # ---------------------------------------------------------------------
    for elev, section in zip(spec.inner_bore.elevations(), spec.inner_bore):
        outer = spec.outer_body.diameter_at(elev)
        if outer and section.mean_diameter() >= outer:
            violations.append(DesignViolation(
                check="bore_exceeds_body",
                message=f"Bore {section.mean_diameter():.2f}mm at {elev:.1f}mm "
                        f"is not inside body {outer:.2f}mm",
                actual_value=section.mean_diameter(),
                expected_value=outer,
            ))

    if spec.inner_bore.total_height() > spec.outer_body.total_height():
        violations.append(DesignViolation(
            check="bore_longer_than_body",
            message=f"Bore length {spec.inner_bore.total_height():.1f}mm exceeds "
                    f"body length {spec.outer_body.total_height():.1f}mm",
            severity="warning",
            actual_value=spec.inner_bore.total_height(),
            expected_value=spec.outer_body.total_height(),
        ))

    # ---------------------------------------------------------------------
    # 2-3. WALL AND HOLE SIZE AT EACH FINGER HOLE
    # ---------------------------------------------------------------------
    for number, hole in numbered:
        inner, outer = spec.diameters_at(hole.elevation)
        if inner == 0 or outer == 0:
            violations.append(DesignViolation(
                check="diameter_miss",
                message=f"Hole {number} at {hole.elevation:.1f}mm is outside "
                        f"the {'bore' if inner == 0 else 'body'} stack",
                severity="warning",
                hole_number=number,
            ))
            continue

        wall = (outer - inner) / 2
        if wall <= 0:
            violations.append(DesignViolation(
                check="bore_exceeds_body",
                message=f"Hole {number}: bore {inner:.2f}mm is not inside body {outer:.2f}mm",
                hole_number=number,
                actual_value=inner,
                expected_value=outer,
            ))
        elif wall < min_wall_mm:
            violations.append(DesignViolation(
                check="thin_wall",
                message=f"Hole {number}: wall {wall:.2f}mm (minimum {min_wall_mm}mm)",
                severity="warning",
                hole_number=number,
                actual_value=wall,
                expected_value=min_wall_mm,
            ))

        if hole.diameter > inner:
            violations.append(DesignViolation(
                check="hole_wider_than_bore",
                message=f"Hole {number}: {hole.diameter:.2f}mm is wider than the bore {inner:.2f}mm",
                severity="warning",
                hole_number=number,
                actual_value=hole.diameter,
                expected_value=inner,
            ))

    # ---------------------------------------------------------------------
    # 4. RING OVERLAP
    # Rings are hole diameter + 2 * ring width across, along the axis
    # ---------------------------------------------------------------------
    ordered = sorted(numbered, key=lambda nh: nh[1].elevation)
    for (n1, h1), (n2, h2) in zip(ordered, ordered[1:]):
        gap = h2.elevation - h1.elevation
        needed = h1.radius() + h2.radius() + 2 * options.ring_width
        if gap < needed:
            violations.append(DesignViolation(
                check="ring_overlap",
                message=f"Rings of holes {n1} and {n2} overlap: "
                        f"{gap:.2f}mm apart, {needed:.2f}mm needed",
                severity="warning",
                hole_number=n1,
                actual_value=gap,
                expected_value=needed,
            ))

    # ---------------------------------------------------------------------
    # 5. EMBOUCHURE
    # ---------------------------------------------------------------------
    emb_inner, emb_outer = spec.diameters_at(spec.emb.elevation)
    if emb_inner == 0 or emb_outer == 0:
        violations.append(DesignViolation(
            check="diameter_miss",
            message=f"Embouchure at {spec.emb.elevation:.1f}mm is outside "
                    f"the {'bore' if emb_inner == 0 else 'body'} stack; "
                    f"the lip plate will be degenerate",
            severity="warning",
        ))

    # ---------------------------------------------------------------------
    # 6. CORK
    # ---------------------------------------------------------------------
    cork_top = spec.emb.elevation + 2 * options.cork_offset * spec.emb.diameter
    bore_top = spec.inner_bore.total_height()
    if cork_top > bore_top:
        violations.append(DesignViolation(
            check="cork_past_body",
            message=f"Cork top at {cork_top:.1f}mm is above the bore end at {bore_top:.1f}mm",
            actual_value=cork_top,
            expected_value=bore_top,
        ))

    return violations


def print_validation_report(violations: List[DesignViolation], spec: FluteSpec,
                            out=None):
    """Print the design check results (stderr unless out is given).

    Errors come before warnings. Each line names its check; at most
    MAX_PER_CHECK lines are shown for any one check.
    """
    out = out or sys.stderr
    rule = "-" * 60

    facets = f"{spec.outer_facets} facets" if spec.outer_facets else "smooth"
    print(f"\nDesign check: {spec.name}", file=out)
    print(f"  body {spec.outer_body.total_height():.1f}mm ({facets}), "
          f"bore {spec.inner_bore.total_height():.1f}mm, "
          f"{len(spec.holes)} finger holes", file=out)
    print(rule, file=out)

    if not violations:
        print("  ✓ All checks PASSED", file=out)
        print(rule, file=out)
        return

    counts = {}
    for severity, marker in (("error", "✗"), ("warning", "⚠")):
        group = [v for v in violations if v.severity == severity]
        counts[severity] = len(group)
        if not group:
            continue

        print(f"{severity.upper()}S", file=out)
        shown = Counter()
        for v in group:
            shown[v.check] += 1
            if shown[v.check] <= MAX_PER_CHECK:
                print(f"  {marker} {v.check}: {v.message}", file=out)
        hidden = sum(n - MAX_PER_CHECK for n in shown.values() if n > MAX_PER_CHECK)
        if hidden:
            print(f"  ... {hidden} more not shown", file=out)

    print(rule, file=out)
    print(f"✗ Found {counts['error']} errors, {counts['warning']} warnings", file=out)


def has_errors(violations: List[DesignViolation]) -> bool:
    return any(v.severity == "error" for v in violations)
