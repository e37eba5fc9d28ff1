from __future__ import annotations

from typing import Any, List, Optional, Tuple

from shapely import affinity
from shapely.geometry import GeometryCollection, LineString, Point, box
from shapely.geometry import Polygon as ShapelyPolygon

from .affine import Affine2D
from .fractals import Generated
from .geometry import (
    Circle,
    Compound,
    Diamond,
    Line,
    Polygon,
    Rectangle,
    Rotated,
    Scaled,
    Shape,
    Spacer,
    footprints,
)


def primitive_to_shapely(shape: Shape) -> Optional[Any]:
    """Geometry of a primitive in its own frame, or None if it draws nothing."""
    if isinstance(shape, Circle):
        r = shape.radius
        return Point(r, r).buffer(r, quad_segs=16)
    if isinstance(shape, (Polygon, Diamond)):
        return ShapelyPolygon(shape.vertices)
    if isinstance(shape, Rectangle):
        return box(0.0, 0.0, shape.width, shape.height)
    if isinstance(shape, Line):
        return LineString([(0.0, 0.0), (shape.width, shape.height)])
    if isinstance(shape, Spacer):
        return None
    raise ValueError(f"Unknown primitive {type(shape).__name__}")


def outline(shape: Shape, transform: Optional[Affine2D] = None) -> List[Any]:
    """
    Shapely geometries of every primitive in the tree, mapped into the
    coordinates of the root's frame (or through ``transform`` when given).
    Placement follows the same rules as the PostScript emitter.
    """
    sizes = footprints(shape)
    out: List[Any] = []
    stack: List[Tuple[Shape, Affine2D]] = [(shape, Affine2D.identity() if transform is None else transform)]
    while stack:
        node, T = stack.pop()
        if isinstance(node, (Circle, Polygon, Rectangle, Diamond, Line, Spacer)):
            geom = primitive_to_shapely(node)
            if geom is not None:
                out.append(affinity.affine_transform(geom, T.shapely_params()))
        elif isinstance(node, Rotated):
            tx, ty = node.anchor(sizes[id(node.shape)])
            local = Affine2D.rotate(int(node.angle)).then(Affine2D.translate(tx, ty))
            stack.append((node.shape, local.then(T)))
        elif isinstance(node, Scaled):
            stack.append((node.shape, Affine2D.scale(node.fx, node.fy).then(T)))
        elif isinstance(node, Compound):
            offsets = node.offsets([sizes[id(c)] for c in node.children])
            placed = [(child, Affine2D.translate(dx, dy).then(T)) for child, (dx, dy) in zip(node.children, offsets)]
            stack.extend(reversed(placed))
        elif isinstance(node, Generated):
            placed = [(child, Affine2D.translate(child.xpos, child.ypos).then(T)) for child in node.shapes]
            stack.extend(reversed(placed))
        else:
            raise TypeError(f"cannot outline {type(node).__name__}")
    return out


def outline_bounds(shape: Shape) -> Optional[Tuple[float, float, float, float]]:
    """(minx, miny, maxx, maxy) of everything the shape draws, or None."""
    geoms = [g for g in outline(shape) if not g.is_empty]
    if not geoms:
        return None
    minx, miny, maxx, maxy = GeometryCollection(geoms).bounds
    return float(minx), float(miny), float(maxx), float(maxy)
