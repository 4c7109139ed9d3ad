"""Node tree construction and OpenSCAD rendering."""

import dataclasses

import pytest

from scad_nodes import (
    Cylinder, Difference, Intersection, Labelled, NodeBuilder, Rotate, Translate, Union,
    count_nodes, difference, format_number, intersection, labelled, render, rotate,
    scale, translate, union, walk,
)


def test_cylinder_statement():
    assert render(Cylinder(10, 5, 4.5)) == "cylinder(h=10, r1=5, r2=4.5, $fn=0);\n"


def test_cylinder_facets_rendered():
    assert "$fn=8);" in render(Cylinder(10, 5, 5, 8))


@pytest.mark.parametrize("value, text", [
    (0, "0"),
    (-0.0, "0"),
    (90.0, "90"),
    (-90, "-90"),
    (22.5, "22.5"),
    (0.1, "0.1"),
    (3.45, "3.45"),
])
def test_format_number(value, text):
    assert format_number(value) == text


def test_difference_nesting_and_order():
    tree = difference(
        Cylinder(10, 5, 5, 8),
        translate((0, 0, 1), Cylinder(9, 4, 4)),
        labelled("vent", rotate((0, -90, 0), Cylinder(20, 1, 1))),
    )
    assert render(tree) == (
        "difference() {\n"
        "   cylinder(h=10, r1=5, r2=5, $fn=8);\n"
        "   translate([0, 0, 1]) {\n"
        "      cylinder(h=9, r1=4, r2=4, $fn=0);\n"
        "   }\n"
        "   // vent\n"
        "   rotate([0, -90, 0]) {\n"
        "      cylinder(h=20, r1=1, r2=1, $fn=0);\n"
        "   }\n"
        "}\n"
    )


def test_children_render_in_insertion_order():
    a, b, c = Cylinder(1, 1, 1), Cylinder(2, 2, 2), Cylinder(3, 3, 3)
    text = render(difference(a, b, c))
    assert text.count("difference()") == 1
    assert text.index("h=1,") < text.index("h=2,") < text.index("h=3,")


def test_labelled_comment_at_same_indent():
    tree = union(labelled("inner", Cylinder(1, 1, 1)))
    assert render(tree, 1) == (
        "   union() {\n"
        "      // inner\n"
        "      cylinder(h=1, r1=1, r2=1, $fn=0);\n"
        "   }\n"
    )


def test_multiline_label():
    text = render(Labelled("one\ntwo", Cylinder(1, 1, 1)))
    assert text.startswith("// one\n// two\ncylinder(")


def test_transform_params():
    text = render(scale((1.2, 1, 1), Cylinder(1, 1, 1)))
    assert text.startswith("scale([1.2, 1, 1]) {\n")
    assert render(intersection(Cylinder(1, 1, 1))).startswith("intersection() {\n")


def test_render_is_deterministic():
    tree = union(rotate((0, 0, 22.5), Cylinder(10, 3.45, 4.025, 8)),
                 difference(Cylinder(5, 2, 2), Cylinder(5, 1, 1)))
    assert render(tree) == render(tree)


def test_render_rejects_unknown_nodes():
    with pytest.raises(TypeError):
        render("cylinder")
    with pytest.raises(TypeError):
        render(union(object()))


def test_nodes_are_immutable():
    node = union(Cylinder(1, 1, 1))
    assert isinstance(node.children, tuple)
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.children = ()


def test_vector_must_have_three_parts():
    with pytest.raises(ValueError):
        Translate((1, 2), ())


def test_builder_collects_children():
    builder = NodeBuilder(Difference)
    builder.add(Cylinder(1, 1, 1)).extend([Cylinder(2, 2, 2), Cylinder(3, 3, 3)])
    assert len(builder) == 3
    node = builder.build()
    assert isinstance(node, Difference)
    assert [c.height for c in node.children] == [1, 2, 3]


def test_builder_transform_carries_param():
    node = NodeBuilder(Rotate, (0, 0, 45)).add(Cylinder(1, 1, 1)).build()
    assert node == Rotate((0, 0, 45), (Cylinder(1, 1, 1),))


def test_builder_is_single_use():
    builder = NodeBuilder(Union)
    builder.build()
    with pytest.raises(RuntimeError):
        builder.add(Cylinder(1, 1, 1))
    with pytest.raises(RuntimeError):
        builder.build()


def test_builder_rejects_bad_kinds():
    with pytest.raises(TypeError):
        NodeBuilder(Cylinder)
    with pytest.raises(ValueError):
        NodeBuilder(Translate)
    with pytest.raises(ValueError):
        NodeBuilder(Intersection, (1, 1, 1))


def test_walk_and_count():
    tree = union(labelled("x", translate((0, 0, 1), Cylinder(1, 1, 1))), Cylinder(2, 2, 2))
    kinds = [type(n).__name__ for n in walk(tree)]
    assert kinds == ["Union", "Labelled", "Translate", "Cylinder", "Cylinder"]
    assert count_nodes(tree) == 5
