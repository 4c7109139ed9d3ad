#!/usr/bin/env python3
"""
FLUTE_SCHEDULE.PY - Manufacturing schedule for a flute body

Contains:
- generate_schedule: Section, hole, embouchure and cork tables from a spec
- print_schedule: Print formatted schedule to console
"""

import sys
from collections import Counter
from typing import Dict, Optional

from flute_geometry import AssemblyOptions
from flute_models import ConicStack, FluteSpec


def _section_table(stack: ConicStack):
    return [
        {
            "elevation_mm": elev,
            "height_mm": s.height,
            "lower_diam_mm": s.lower_diam,
            "upper_diam_mm": s.upper_diam,
            "tapered": not s.is_cylinder(),
        }
        for elev, s in zip(stack.elevations(), stack)
    ]


def generate_schedule(spec: FluteSpec, options: Optional[AssemblyOptions] = None) -> Dict:
    """Generate a manufacturing schedule from a flute spec."""
    options = options or AssemblyOptions()
    emb = spec.emb

    schedule = {
        "sections": {
            "body": _section_table(spec.outer_body),
            "bore": _section_table(spec.inner_bore),
        },
        "holes": [],
        "embouchure": {
            "elevation_mm": emb.elevation,
            "diameter_mm": emb.diameter,
            "eccentricity": emb.eccentricity,
            "opening_length_mm": emb.diameter * emb.eccentricity,
        },
        "cork": {},
        "summary": {},
    }

    # Rows run from the foot up; numbers match the scene labels
    for number, hole in sorted(spec.numbered_holes(), key=lambda nh: nh[1].elevation):
        inner, outer = spec.diameters_at(hole.elevation)
        schedule["holes"].append({
            "number": number,
            "elevation_mm": hole.elevation,
            "diameter_mm": hole.diameter,
            "bore_diam_mm": inner,
            "body_diam_mm": outer,
            "wall_mm": (outer - inner) / 2,
            "below_embouchure_mm": emb.elevation - hole.elevation,
        })

    cork_thickness = options.cork_offset * emb.diameter
    schedule["cork"] = {
        "elevation_mm": emb.elevation + cork_thickness,
        "thickness_mm": cork_thickness,
        "radius_mm": spec.inner_bore.last_section().upper_diam / 2 + options.cork_clearance,
    }

    walls = [h["wall_mm"] for h in schedule["holes"]]
    schedule["summary"] = {
        "body_length_mm": spec.outer_body.total_height(),
        "bore_length_mm": spec.inner_bore.total_height(),
        "hole_count": len(spec.holes),
        "min_wall_mm": min(walls) if walls else None,
        "outer_facets": spec.outer_facets,
        "hole_sizes": Counter(f"{h.diameter:.1f}mm" for h in spec.holes),
    }

    return schedule


def print_schedule(schedule: Dict, name: str = "", out=None):
    """Print formatted schedule (stdout unless out is given)."""
    out = out or sys.stdout

    print("\n" + "=" * 60, file=out)
    print(f"MANUFACTURING SCHEDULE - {name.upper()}" if name else "MANUFACTURING SCHEDULE", file=out)
    print("=" * 60, file=out)

    for label, table in schedule["sections"].items():
        print(f"\n--- {label.upper()} SECTIONS ---", file=out)
        print(f"{'Elev':>8} {'Height':>8} {'Lower':>8} {'Upper':>8}", file=out)
        print("-" * 40, file=out)
        for s in table:
            taper = "  taper" if s["tapered"] else ""
            print(f"{s['elevation_mm']:>8.1f} {s['height_mm']:>8.1f} "
                  f"{s['lower_diam_mm']:>8.2f} {s['upper_diam_mm']:>8.2f}{taper}", file=out)

    print("\n--- FINGER HOLES ---", file=out)
    print(f"{'#':>3} {'Elev':>8} {'Diam':>6} {'Bore':>6} {'Body':>6} {'Wall':>6} {'To emb':>8}", file=out)
    print("-" * 50, file=out)
    for h in schedule["holes"]:
        print(f"{h['number']:>3} {h['elevation_mm']:>8.1f} {h['diameter_mm']:>6.2f} "
              f"{h['bore_diam_mm']:>6.2f} {h['body_diam_mm']:>6.2f} {h['wall_mm']:>6.2f} "
              f"{h['below_embouchure_mm']:>8.1f}", file=out)

    emb = schedule["embouchure"]
    print("\n--- EMBOUCHURE ---", file=out)
    print(f"  Elevation: {emb['elevation_mm']:.1f}mm", file=out)
    print(f"  Opening: {emb['diameter_mm']:.2f} x {emb['opening_length_mm']:.2f}mm "
          f"(eccentricity {emb['eccentricity']})", file=out)

    cork = schedule["cork"]
    print("\n--- CORK ---", file=out)
    print(f"  Elevation: {cork['elevation_mm']:.1f}mm, thickness {cork['thickness_mm']:.1f}mm, "
          f"radius {cork['radius_mm']:.2f}mm", file=out)

    print("\n--- SUMMARY ---", file=out)
    for key, value in schedule["summary"].items():
        if key == "hole_sizes":
            sizes = ", ".join(f"{size} x{count}" for size, count in sorted(value.items()))
            print(f"  Hole Sizes: {sizes or 'none'}", file=out)
        else:
            print(f"  {key.replace('_', ' ').title()}: {value}", file=out)

    print("=" * 60 + "\n", file=out)
