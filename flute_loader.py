#!/usr/bin/env python3
"""
FLUTE_LOADER.PY - Reads flute specs from JSON

Contains:
- flute_spec_from_dict: Check field shapes and build a FluteSpec
- load_flute_spec: Read a UTF-8 JSON file into a FluteSpec
- flute_spec_to_dict: The JSON shape of a FluteSpec

Expected JSON layout (all lengths in mm):
    {
        "name": "G alto flute",
        "description": ["line", "line"],
        "outer_body": [{"height": 116.6, "lower_diam": 24.6, "upper_diam": 24.6}],
        "outer_facets": 8,
        "inner_bore": [{"height": 101.9, "lower_diam": 13.8, "upper_diam": 13.8}],
        "holes": [{"elev": 78.4, "diam": 6.7}],
        "emb": {"elev": 252.2, "diam": 10.0, "eccentricity": 1.2}
    }
"""

import json
import math
from pathlib import Path
from typing import Dict, List

from flute_errors import SpecShapeError
from flute_models import (
    ConicSection, ConicStack, EmbouchureSpec, FingerHole, FluteSpec,
)


# =============================================================================
# FIELD HELPERS
# =============================================================================

def _field(data: Dict, key: str, path: str):
    if not isinstance(data, dict):
        raise SpecShapeError(f"{path or 'spec'}: expected an object")
    if key not in data:
        raise SpecShapeError(f"{_join(path, key)}: missing required field")
    return data[key]


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _number(data: Dict, key: str, path: str) -> float:
    value = _field(data, key, path)
    # bool is an int subclass; JSON true/false is never a dimension
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SpecShapeError(f"{_join(path, key)}: expected a number, got {value!r}")
    # json.loads accepts NaN and Infinity
    if not math.isfinite(value):
        raise SpecShapeError(f"{_join(path, key)}: expected a finite number, got {value!r}")
    return float(value)


def _list(data: Dict, key: str, path: str) -> List:
    value = _field(data, key, path)
    if not isinstance(value, list):
        raise SpecShapeError(f"{_join(path, key)}: expected a list")
    return value


def _stack(data: Dict, key: str) -> ConicStack:
    entries = _list(data, key, "")
    if not entries:
        raise SpecShapeError(f"{key}: needs at least one section")
    sections = []
    for i, entry in enumerate(entries):
        path = f"{key}[{i}]"
        sections.append(ConicSection(
            height=_number(entry, 'height', path),
            lower_diam=_number(entry, 'lower_diam', path),
            upper_diam=_number(entry, 'upper_diam', path),
        ))
    return ConicStack(tuple(sections))


# =============================================================================
# LOADING
# =============================================================================

def flute_spec_from_dict(data: Dict) -> FluteSpec:
    """Build a FluteSpec from parsed JSON.

    Shape problems raise SpecShapeError naming the field path. Range problems
    surface as SpecValueError from the model classes.
    """
    if not isinstance(data, dict):
        raise SpecShapeError("spec: expected a JSON object at the top level")

    name = _field(data, 'name', "")
    if not isinstance(name, str):
        raise SpecShapeError(f"name: expected a string, got {name!r}")

    description = data.get('description', [])
    if not isinstance(description, list) or not all(isinstance(s, str) for s in description):
        raise SpecShapeError("description: expected a list of strings")

    facets = data.get('outer_facets', 0)
    if isinstance(facets, bool) or not isinstance(facets, (int, float)) \
            or (isinstance(facets, float) and not facets.is_integer()):
        raise SpecShapeError(f"outer_facets: expected an integer, got {facets!r}")

    outer_body = _stack(data, 'outer_body')
    inner_bore = _stack(data, 'inner_bore')

    holes_data = data.get('holes', [])
    if not isinstance(holes_data, list):
        raise SpecShapeError("holes: expected a list")
    holes = []
    for i, entry in enumerate(holes_data):
        path = f"holes[{i}]"
        holes.append(FingerHole(
            elevation=_number(entry, 'elev', path),
            diameter=_number(entry, 'diam', path),
        ))

    emb_data = _field(data, 'emb', "")
    emb = EmbouchureSpec(
        elevation=_number(emb_data, 'elev', 'emb'),
        diameter=_number(emb_data, 'diam', 'emb'),
        eccentricity=_number(emb_data, 'eccentricity', 'emb'),
    )

    return FluteSpec(
        name=name,
        description=tuple(description),
        outer_body=outer_body,
        outer_facets=int(facets),
        inner_bore=inner_bore,
        holes=tuple(holes),
        emb=emb,
    )


def load_flute_spec(json_path) -> FluteSpec:
    """Load a flute spec from a JSON file."""
    try:
        text = Path(json_path).read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise SpecShapeError(f"{json_path}: not UTF-8 text ({e})") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SpecShapeError(f"{json_path}: not valid JSON ({e})") from e
    return flute_spec_from_dict(data)


def flute_spec_to_dict(spec: FluteSpec) -> Dict:
    """JSON layout of a spec, field names as load_flute_spec reads them."""
    def stack(s: ConicStack) -> List[Dict]:
        return [{'height': c.height, 'lower_diam': c.lower_diam, 'upper_diam': c.upper_diam}
                for c in s]

    return {
        'name': spec.name,
        'description': list(spec.description),
        'outer_body': stack(spec.outer_body),
        'outer_facets': spec.outer_facets,
        'inner_bore': stack(spec.inner_bore),
        'holes': [{'elev': h.elevation, 'diam': h.diameter} for h in spec.holes],
        'emb': {
            'elev': spec.emb.elevation,
            'diam': spec.emb.diameter,
            'eccentricity': spec.emb.eccentricity,
        },
    }
