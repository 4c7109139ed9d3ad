#!/usr/bin/env python3
"""
SCAD_NODES.PY - CSG operation tree and OpenSCAD text rendering

Contains:
- Cylinder: the only primitive (frustum with optional facet count)
- Translate, Rotate, Scale: transforms over an ordered child list
- Union, Difference, Intersection: boolean operations over an ordered child list
- Labelled: comment wrapper around a single node
- NodeBuilder: accumulates children, then hands out an immutable node
- render: turns a tree into indented OpenSCAD text

Usage:
    from scad_nodes import Cylinder, difference, render

    tube = difference(Cylinder(10, 5, 5), Cylinder(10, 4, 4))
    print(render(tube))

Child order is kept exactly as given. For Difference the first child is the
solid and every following child is subtracted from it in turn.
"""

import typing
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

Vector3 = Tuple[float, float, float]

INDENT = "   "


# =============================================================================
# NODE TYPES
# =============================================================================

@dataclass(frozen=True)
class Cylinder:
    """Frustum along +Z from z=0. facets=0 leaves tessellation to OpenSCAD."""
    height: float
    lower_radius: float
    upper_radius: float
    facets: int = 0


def _vector(value) -> Vector3:
    vec = tuple(value)
    if len(vec) != 3:
        raise ValueError(f"Expected a 3-vector, got {value!r}")
    return vec


@dataclass(frozen=True)
class Translate:
    offset: Vector3
    children: Tuple['GeometryNode', ...]

    def __post_init__(self):
        object.__setattr__(self, 'offset', _vector(self.offset))
        object.__setattr__(self, 'children', tuple(self.children))


@dataclass(frozen=True)
class Rotate:
    """Euler angles in degrees, applied X then Y then Z."""
    angles: Vector3
    children: Tuple['GeometryNode', ...]

    def __post_init__(self):
        object.__setattr__(self, 'angles', _vector(self.angles))
        object.__setattr__(self, 'children', tuple(self.children))


@dataclass(frozen=True)
class Scale:
    factors: Vector3
    children: Tuple['GeometryNode', ...]

    def __post_init__(self):
        object.__setattr__(self, 'factors', _vector(self.factors))
        object.__setattr__(self, 'children', tuple(self.children))


@dataclass(frozen=True)
class Union:
    children: Tuple['GeometryNode', ...]

    def __post_init__(self):
        object.__setattr__(self, 'children', tuple(self.children))


@dataclass(frozen=True)
class Difference:
    children: Tuple['GeometryNode', ...]

    def __post_init__(self):
        object.__setattr__(self, 'children', tuple(self.children))


@dataclass(frozen=True)
class Intersection:
    children: Tuple['GeometryNode', ...]

    def __post_init__(self):
        object.__setattr__(self, 'children', tuple(self.children))


@dataclass(frozen=True)
class Labelled:
    comment: str
    child: 'GeometryNode'


GeometryNode = typing.Union[
    Cylinder, Translate, Rotate, Scale, Union, Difference, Intersection, Labelled
]

TRANSFORM_TYPES = (Translate, Rotate, Scale)
BOOLEAN_TYPES = (Union, Difference, Intersection)
COMPOSITE_TYPES = TRANSFORM_TYPES + BOOLEAN_TYPES


# =============================================================================
# CONSTRUCTION HELPERS
# =============================================================================

def union(*nodes: GeometryNode) -> Union:
    return Union(nodes)


def difference(base: GeometryNode, *cuts: GeometryNode) -> Difference:
    """base minus every cut, in the order given."""
    return Difference((base,) + cuts)


def intersection(*nodes: GeometryNode) -> Intersection:
    return Intersection(nodes)


def translate(offset: Vector3, *nodes: GeometryNode) -> Translate:
    return Translate(offset, nodes)


def rotate(angles: Vector3, *nodes: GeometryNode) -> Rotate:
    return Rotate(angles, nodes)


def scale(factors: Vector3, *nodes: GeometryNode) -> Scale:
    return Scale(factors, nodes)


def labelled(comment: str, node: GeometryNode) -> Labelled:
    return Labelled(comment, node)


class NodeBuilder:
    """Collects children for one composite node.

    Example:
        body = NodeBuilder(Difference)
        body.add(solid)
        body.extend(holes)
        tree = body.build()

    Transforms take their vector as the second argument:
        NodeBuilder(Translate, (0, 0, 12.5))
    """

    def __init__(self, kind, param: Vector3 = None):
        if kind not in COMPOSITE_TYPES:
            raise TypeError(f"{kind!r} is not a composite node type")
        if (kind in TRANSFORM_TYPES) != (param is not None):
            raise ValueError(f"{kind.__name__} parameter mismatch: {param!r}")
        self.kind = kind
        self.param = param
        self._children = []
        self._built = False

    def add(self, node: GeometryNode) -> 'NodeBuilder':
        if self._built:
            raise RuntimeError("Cannot add children after build()")
        self._children.append(node)
        return self

    def extend(self, nodes: Iterable[GeometryNode]) -> 'NodeBuilder':
        for node in nodes:
            self.add(node)
        return self

    def __len__(self) -> int:
        return len(self._children)

    def build(self) -> GeometryNode:
        if self._built:
            raise RuntimeError("NodeBuilder.build() called twice")
        self._built = True
        children = tuple(self._children)
        if self.kind in TRANSFORM_TYPES:
            return self.kind(self.param, children)
        return self.kind(children)


# =============================================================================
# RENDERING
# =============================================================================

def format_number(value: float) -> str:
    """Shortest text that reads back as the same number. 90.0 -> '90'."""
    if value == 0:
        return "0"
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_vector(vec: Vector3) -> str:
    return "[" + ", ".join(format_number(v) for v in vec) + "]"


def _operation(node) -> Tuple[str, str]:
    """OpenSCAD keyword and parameter text for a composite node."""
    if isinstance(node, Translate):
        return "translate", format_vector(node.offset)
    if isinstance(node, Rotate):
        return "rotate", format_vector(node.angles)
    if isinstance(node, Scale):
        return "scale", format_vector(node.factors)
    if isinstance(node, Union):
        return "union", ""
    if isinstance(node, Difference):
        return "difference", ""
    if isinstance(node, Intersection):
        return "intersection", ""
    raise TypeError(f"Not a composite node: {type(node).__name__}")


def render(node: GeometryNode, indent: int = 0) -> str:
    """Render a node and everything below it as OpenSCAD statements."""
    pad = INDENT * indent

    if isinstance(node, Cylinder):
        return (f"{pad}cylinder(h={format_number(node.height)}, "
                f"r1={format_number(node.lower_radius)}, "
                f"r2={format_number(node.upper_radius)}, "
                f"$fn={format_number(node.facets)});\n")

    if isinstance(node, Labelled):
        comment = "".join(f"{pad}// {line}\n" for line in node.comment.splitlines() or [""])
        return comment + render(node.child, indent)

    if isinstance(node, COMPOSITE_TYPES):
        keyword, params = _operation(node)
        parts = [f"{pad}{keyword}({params}) {{\n"]
        parts.extend(render(child, indent + 1) for child in node.children)
        parts.append(f"{pad}}}\n")
        return "".join(parts)

    raise TypeError(f"Unknown geometry node: {type(node).__name__}")


def walk(node: GeometryNode) -> Iterator[GeometryNode]:
    """Depth-first, parents before children, in child order."""
    yield node
    if isinstance(node, Labelled):
        yield from walk(node.child)
    elif isinstance(node, COMPOSITE_TYPES):
        for child in node.children:
            yield from walk(child)


def count_nodes(node: GeometryNode) -> int:
    return sum(1 for _ in walk(node))
