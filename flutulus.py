#!/usr/bin/env python3
"""
FLUTULUS.PY - Conical-bore flute generator with OpenSCAD output

Reads a flute spec (JSON), builds the CSG tree for body, bore, finger holes,
lip plate and cork, and writes an OpenSCAD scene. Optional extras are a
design check, a manufacturing schedule and an SVG profile drawing.

Usage:
    python3 flutulus.py flutes/alto_g.json > alto_g.scad
    python3 flutulus.py flutes/alto_g.json -o alto_g.scad --svg alto_g.svg
    python3 flutulus.py flutes/alto_g.json --schedule-only
    python3 flutulus.py flutes/alto_g.json --strict        # abort on design errors

The scene goes to stdout (or -o); everything else goes to stderr, so the
output can be piped straight into openscad.
"""

import argparse
import sys
from pathlib import Path

from flute_errors import FluteSpecError
from flute_geometry import ASSEMBLY_DEFAULTS, AssemblyOptions, FluteAssembly
from flute_loader import load_flute_spec
from flute_renderer import FluteProfileRenderer
from flute_schedule import generate_schedule, print_schedule
from flute_validation import has_errors, print_validation_report, validate_design
from scad_nodes import count_nodes, render


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Generate an OpenSCAD flute from a JSON spec')
    parser.add_argument('spec', help='Path to flute JSON spec')
    parser.add_argument('--output', '-o', default=None,
                        help='Write the OpenSCAD scene here instead of stdout')
    parser.add_argument('--svg', default=None,
                        help='Also write an SVG profile drawing to this path')
    parser.add_argument('--svg-scale', type=float, default=2.0,
                        help='SVG pixels per mm (default: 2.0)')
    parser.add_argument('--schedule', action='store_true',
                        help='Print the manufacturing schedule to stderr')
    parser.add_argument('--schedule-only', action='store_true',
                        help='Only print the schedule (stdout), do not generate OpenSCAD')
    parser.add_argument('--skip-validation', action='store_true',
                        help='Skip design checks')
    parser.add_argument('--strict', action='store_true',
                        help='Exit with status 2 if a design check reports an error')
    parser.add_argument('--min-wall', type=float, default=1.0,
                        help='Minimum wall at finger holes in mm (default: 1.0)')
    parser.add_argument('--ring-width', type=float, default=None,
                        help=f"Hole ring width in mm (default: {ASSEMBLY_DEFAULTS['ring_width']})")
    parser.add_argument('--plate-thickness', type=float, default=None,
                        help=f"Lip plate thickness in mm (default: {ASSEMBLY_DEFAULTS['plate_thickness']})")
    parser.add_argument('--cork-offset', type=float, default=None,
                        help=f"Cork position in embouchure diameters above the embouchure "
                             f"(default: {ASSEMBLY_DEFAULTS['cork_offset']})")
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print diameter lookups and tree size to stderr')
    return parser


def _err(message: str):
    print(message, file=sys.stderr)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        options = AssemblyOptions.with_overrides(
            ring_width=args.ring_width,
            plate_thickness=args.plate_thickness,
            cork_offset=args.cork_offset,
        )
        spec = load_flute_spec(args.spec)
    except FileNotFoundError:
        _err(f"error: spec file not found: {args.spec}")
        return 1
    except OSError as e:
        _err(f"error: cannot read {args.spec}: {e}")
        return 1
    except FluteSpecError as e:
        _err(f"error: {args.spec}: {e}")
        return 1

    if args.verbose:
        _err(f"Loaded {spec.name}: {len(spec.outer_body)} body sections, "
             f"{len(spec.inner_bore)} bore sections, {len(spec.holes)} holes")

    if args.schedule_only:
        print_schedule(generate_schedule(spec, options), spec.name)
        return 0

    # Validate design
    if not args.skip_validation:
        violations = validate_design(spec, options, min_wall_mm=args.min_wall)
        if violations or args.verbose:
            print_validation_report(violations, spec)
        if has_errors(violations):
            if args.strict:
                _err("error: design checks failed, nothing written (--strict)")
                return 2
            _err("WARNING: Design has check errors!")
    elif args.verbose:
        _err("(Design validation skipped)")

    if args.schedule:
        print_schedule(generate_schedule(spec, options), spec.name, out=sys.stderr)

    # Build the whole scene before writing anything
    assembly = FluteAssembly(spec, options, verbose=args.verbose)
    tree = assembly.build_flute()
    scad = assembly.header() + render(tree)
    if args.verbose:
        _err(f"Geometry tree: {count_nodes(tree)} nodes")

    drawing = None
    if args.svg:
        drawing = FluteProfileRenderer(spec, scale=args.svg_scale, options=options).drawing(args.svg)

    written = args.output or "stdout"
    try:
        if args.output:
            Path(args.output).write_text(scad, encoding='utf-8')
            _err(f"Wrote {args.output}")
        else:
            sys.stdout.write(scad)

        if drawing is not None:
            written = args.svg
            drawing.save()
            _err(f"Wrote {args.svg}")
    except OSError as e:
        _err(f"error: cannot write {written}: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
