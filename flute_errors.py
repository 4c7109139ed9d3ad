#!/usr/bin/env python3
"""
FLUTE_ERRORS.PY - Exceptions raised while reading or building a flute spec

Contains:
- FluteSpecError: Base class for every spec problem
- SpecShapeError: A required field is missing, malformed or empty
- SpecValueError: A field is present but its value is out of range
"""


class FluteSpecError(Exception):
    """A flute spec cannot be turned into geometry."""


class SpecShapeError(FluteSpecError):
    """Missing or malformed field in a flute spec."""


class SpecValueError(FluteSpecError):
    """Field value outside the range the geometry can use."""
