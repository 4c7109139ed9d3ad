"""Conic stack lookups and spec invariants."""

import dataclasses

import pytest

from flute_errors import SpecShapeError, SpecValueError
from flute_models import ConicSection, ConicStack, EmbouchureSpec, FingerHole, make_stack


SCENARIO = ((4.9, 6.9, 6.9), (257.9, 6.9, 8.05))


def test_diameter_at_inside_second_section():
    stack = make_stack(SCENARIO)
    assert stack.diameter_at(100) == pytest.approx(7.475)


def test_diameter_at_foot_uses_first_section():
    stack = make_stack(SCENARIO)
    assert stack.diameter_at(0) == pytest.approx(6.9)


def test_diameter_at_past_end_is_zero():
    stack = make_stack(SCENARIO)
    assert stack.diameter_at(300) == 0


def test_diameter_at_below_foot_is_zero():
    stack = make_stack(SCENARIO)
    assert stack.diameter_at(-0.1) == 0


def test_diameter_at_top_is_zero():
    stack = make_stack(((10, 4, 4), (20, 4, 6)))
    assert stack.diameter_at(30) == 0


def test_diameter_at_boundary_belongs_to_upper_section():
    stack = make_stack(((10, 4, 4), (20, 4, 6)))
    assert stack.diameter_at(10) == 5


def test_diameter_at_matches_covering_section():
    stack = make_stack(((12.5, 10, 12), (30, 12, 12), (7.25, 12, 9), (40, 9, 20)))
    starts = stack.elevations()
    elev = 0.0
    while elev < stack.total_height():
        hits = [s for start, s in zip(starts, stack) if start <= elev < start + s.height]
        assert len(hits) == 1
        assert stack.diameter_at(elev) == hits[0].mean_diameter()
        assert stack.section_at(elev) is hits[0]
        elev += 0.75


def test_total_height_is_sum_of_heights():
    stack = make_stack(((12.5, 10, 12), (30, 12, 12), (7.25, 12, 9)))
    assert stack.total_height() == pytest.approx(49.75)
    assert stack.elevations() == [0.0, 12.5, 42.5]


def test_max_diameter_and_last_section():
    stack = make_stack(((10, 20, 24.6), (10, 24.6, 29.0), (5, 29.0, 27.0)))
    assert stack.max_diameter() == 29.0
    assert stack.last_section().upper_diam == 27.0
    assert len(stack) == 3


def test_cylinder_section():
    assert ConicSection(10, 5, 5).is_cylinder()
    assert not ConicSection(10, 5, 6).is_cylinder()


def test_empty_stack_is_shape_error():
    with pytest.raises(SpecShapeError):
        ConicStack(())


@pytest.mark.parametrize("height", [0, -1.5])
def test_non_positive_height_is_value_error(height):
    with pytest.raises(SpecValueError):
        ConicSection(height, 5, 5)


def test_negative_diameter_is_value_error():
    with pytest.raises(SpecValueError):
        ConicSection(10, -1, 5)


def test_hole_and_embouchure_need_positive_sizes():
    with pytest.raises(SpecValueError):
        FingerHole(10, 0)
    with pytest.raises(SpecValueError):
        EmbouchureSpec(10, 8, 0)


@pytest.mark.parametrize("facets", [1, 2, -1])
def test_bad_facet_counts(spec_factory, facets):
    with pytest.raises(SpecValueError):
        spec_factory(facets=facets)


@pytest.mark.parametrize("facets", [0, 3, 8])
def test_good_facet_counts(spec_factory, facets):
    assert spec_factory(facets=facets).outer_facets == facets


def test_hole_outside_body_is_value_error(spec_factory):
    with pytest.raises(SpecValueError, match="Hole 2"):
        spec_factory(holes=((20, 5), (120, 5)))


def test_embouchure_outside_body_is_value_error(spec_factory):
    with pytest.raises(SpecValueError, match="Embouchure"):
        spec_factory(emb=(-5, 6, 1.0))


def test_spec_is_immutable(spec_factory):
    spec = spec_factory(holes=[(20, 5)])
    assert isinstance(spec.holes, tuple)
    with pytest.raises(dataclasses.FrozenInstanceError):
        spec.name = "other"


def test_diameters_at_returns_inner_then_outer(soprano_spec):
    inner, outer = soprano_spec.diameters_at(87.1)
    assert inner == pytest.approx(7.475)
    assert outer == 13.0
    assert soprano_spec.body_diameter() == 13.0


def test_holes_numbered_in_listed_order(spec_factory):
    spec = spec_factory(holes=((60, 5), (20, 4), (40, 3)))
    assert [(n, h.elevation) for n, h in spec.numbered_holes()] == [(1, 60), (2, 20), (3, 40)]


def test_max_diameter_counts_lower_ends():
    stack = make_stack(((100, 30, 10), (20, 10, 12)))
    assert stack.max_diameter() == 30


@pytest.mark.parametrize("dims", [
    (float("nan"), 8, 8),
    (10, float("nan"), 8),
    (10, 8, float("inf")),
])
def test_section_rejects_non_finite(dims):
    with pytest.raises(SpecValueError, match="finite"):
        ConicSection(*dims)


def test_holes_and_embouchure_reject_non_finite():
    with pytest.raises(SpecValueError, match="finite"):
        FingerHole(float("nan"), 4)
    with pytest.raises(SpecValueError, match="finite"):
        FingerHole(20, float("inf"))
    with pytest.raises(SpecValueError, match="eccentricity"):
        EmbouchureSpec(70, 6, float("inf"))
