"""Shared fixtures for the flute tests."""

from pathlib import Path

import pytest

from flute_models import EmbouchureSpec, FingerHole, FluteSpec, make_stack


FLUTES_DIR = Path(__file__).resolve().parent.parent / "flutes"


def build_spec(outer=((100.0, 14.0, 14.0),), inner=((100.0, 8.0, 8.0),), holes=(),
               emb=(70.0, 6.0, 1.0), facets=0, name="Test flute", description=("test",)):
    return FluteSpec(
        name=name,
        description=description,
        outer_body=make_stack(outer),
        outer_facets=facets,
        inner_bore=make_stack(inner),
        holes=tuple(FingerHole(e, d) for e, d in holes),
        emb=EmbouchureSpec(*emb),
    )


@pytest.fixture
def spec_factory():
    return build_spec


@pytest.fixture
def flutes_dir():
    return FLUTES_DIR


@pytest.fixture
def soprano_spec():
    """Narrow conical bore, octagonal body, one finger hole."""
    return build_spec(
        outer=((262.8, 13.0, 13.0),),
        inner=((4.9, 6.9, 6.9), (257.9, 6.9, 8.05)),
        holes=((87.1, 4.2),),
        emb=(228.0, 6.0, 1.25),
        facets=8,
        name="Soprano",
        description=("first line", "second line"),
    )
