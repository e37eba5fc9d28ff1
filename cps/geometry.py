from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Dict, Iterable, Iterator, Sequence, Tuple
import math
import numpy as np

from . import operators as ops
from .config import DEFAULT_CONFIG, PostScriptConfig
from .errors import (
    CyclicComposition,
    EmptyComposition,
    InvalidAngle,
    InvalidGeometry,
    InvalidScaleFactor,
)


def _as_finite(value, name: str, error: type) -> float:
    if isinstance(value, bool):
        raise error(f"{name} must be a number, got {value!r}")
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise error(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(v):
        raise error(f"{name} must be finite, got {value!r}")
    return v


def _require_positive(value, name: str, error: type = InvalidGeometry) -> float:
    v = _as_finite(value, name, error)
    if v <= 0.0:
        raise error(f"{name} must be positive, got {value!r}")
    return v


def _require_shape(shape) -> "Shape":
    if not isinstance(shape, Shape):
        raise TypeError(f"expected a Shape, got {type(shape).__name__}")
    return shape


class Shape:
    """
    A node of the shape tree. Every shape draws inside its footprint
    rectangle [0, width] x [0, height], origin at the lower-left corner.
    """
    # True when the footprint follows the children instead of being fixed
    _derived = False

    def __init__(self, width: float, height: float):
        self._width = float(width)
        self._height = float(height)
        # Only honoured by the node that generated this shape
        self.xpos = 0.0
        self.ypos = 0.0

    @property
    def width(self) -> float:
        return self.footprint()[0]

    @property
    def height(self) -> float:
        return self.footprint()[1]

    def footprint(self) -> Tuple[float, float]:
        if not self._derived:
            return self._width, self._height
        return footprints(self, complete=False)[id(self)]

    def _measure(self, child_sizes: Sequence[Tuple[float, float]]) -> Tuple[float, float]:
        return self._width, self._height

    @property
    def children(self) -> Tuple["Shape", ...]:
        return ()

    def set_position(self, x: float, y: float) -> None:
        self.xpos = float(x)
        self.ypos = float(y)

    # ---- Emission ----
    def to_text(self, config: PostScriptConfig = DEFAULT_CONFIG) -> str:
        from .postscript import to_postscript
        return to_postscript(self, config)

    def to_postscript(self, config: PostScriptConfig = DEFAULT_CONFIG) -> str:
        return self.to_text(config)

    def generate_postscript_file(self, file_name: str, config: PostScriptConfig = DEFAULT_CONFIG) -> None:
        from .postscript import to_document, write_file
        write_file(file_name, to_document(self, config))

    # ---- Composition DSL ----
    def rotated(self, angle: int) -> "Rotated":
        return Rotated(self, angle)

    def scaled(self, fx: float, fy: float | None = None) -> "Scaled":
        return Scaled(self, fx, fx if fy is None else fy)

    def beside(self, other: "Shape") -> "Horizontal":
        return Horizontal(*_flatten(Horizontal, self, other))

    def stacked(self, other: "Shape") -> "Vertical":
        """Return a Vertical with ``other`` on top of this shape."""
        return Vertical(*_flatten(Vertical, self, other))

    def layered(self, other: "Shape") -> "Layered":
        """Return a Layered with ``other`` painted over this shape."""
        return Layered(*_flatten(Layered, self, other))


def walk(shape: Shape) -> Iterator[Shape]:
    """
    Depth-first, pre-order iteration over a shape and all its descendants.
    Shared children are visited once per occurrence.
    """
    stack: list[Shape] = [shape]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def footprints(shape: Shape, complete: bool = True) -> Dict[int, Tuple[float, float]]:
    """
    (width, height) of every node under ``shape``, keyed by ``id(node)``.

    Sizes are computed bottom-up with an explicit stack, so nesting depth is
    not limited by the interpreter's recursion limit. Each node is measured
    once even when it is shared. With ``complete=False`` the insides of
    fixed-size nodes (primitives, generated fractals) are not visited.
    """
    sizes: Dict[int, Tuple[float, float]] = {}
    stack: list[Tuple[Shape, bool]] = [(shape, False)]
    while stack:
        node, children_done = stack.pop()
        key = id(node)
        if key in sizes:
            continue
        child_sizes: list[Tuple[float, float]] = []
        if node._derived or complete:
            if not children_done:
                stack.append((node, True))
                stack.extend((c, False) for c in node.children)
                continue
            child_sizes = [sizes[id(c)] for c in node.children]
        sizes[key] = node._measure(child_sizes)
    return sizes


# ---- Primitives ----

class Circle(Shape):
    def __init__(self, radius: float):
        r = _require_positive(radius, "radius")
        super().__init__(2.0 * r, 2.0 * r)
        self.radius = r


def regular_polygon_vertices(num_sides: int, side_length: float) -> np.ndarray:
    """
    Vertices (N, 2) of a regular polygon whose bottom edge is horizontal,
    shifted so its bounding box starts at the origin.
    """
    n = int(num_sides)
    circumradius = side_length / (2.0 * math.sin(math.pi / n))
    angles = -math.pi / 2.0 - math.pi / n + 2.0 * math.pi * np.arange(n) / n
    verts = np.stack([circumradius * np.cos(angles), circumradius * np.sin(angles)], axis=1)
    verts = verts - verts.min(axis=0)
    verts[np.abs(verts) < 1e-12] = 0.0
    return verts


class Polygon(Shape):
    def __init__(self, num_sides: int, side_length: float):
        if isinstance(num_sides, bool) or not isinstance(num_sides, (int, np.integer)):
            raise InvalidGeometry(f"num_sides must be an integer, got {num_sides!r}")
        if num_sides < 3:
            raise InvalidGeometry(f"a polygon needs at least 3 sides, got {num_sides}")
        s = _require_positive(side_length, "side_length")
        verts = regular_polygon_vertices(int(num_sides), s)
        verts.setflags(write=False)
        extent = verts.max(axis=0)
        super().__init__(float(extent[0]), float(extent[1]))
        self.num_sides = int(num_sides)
        self.side_length = s
        self.vertices = verts


class Square(Polygon):
    def __init__(self, side_length: float):
        super().__init__(4, side_length)


class Triangle(Polygon):
    def __init__(self, side_length: float):
        super().__init__(3, side_length)


class Rectangle(Shape):
    def __init__(self, width: float, height: float):
        super().__init__(_require_positive(width, "width"), _require_positive(height, "height"))

    @property
    def vertices(self) -> np.ndarray:
        w, h = self.width, self.height
        return np.array([[0.0, 0.0], [w, 0.0], [w, h], [0.0, h]], dtype=float)


class Spacer(Shape):
    """Takes up room in a layout and draws nothing."""
    def __init__(self, width: float, height: float):
        super().__init__(_require_positive(width, "width"), _require_positive(height, "height"))


class Diamond(Shape):
    """A square of the given side turned by 45 degrees."""
    def __init__(self, side_length: float):
        s = _require_positive(side_length, "side_length")
        diagonal = s * math.sqrt(2.0)
        super().__init__(diagonal, diagonal)
        self.side_length = s

    @property
    def vertices(self) -> np.ndarray:
        w, h = self.width, self.height
        return np.array([[w / 2.0, 0.0], [w, h / 2.0], [w / 2.0, h], [0.0, h / 2.0]], dtype=float)


class Line(Shape):
    """A single stroked segment from the frame origin to (dx, dy)."""
    def __init__(self, dx: float, dy: float):
        x = _as_finite(dx, "dx", InvalidGeometry)
        y = _as_finite(dy, "dy", InvalidGeometry)
        if x < 0.0 or y < 0.0:
            raise InvalidGeometry("line extents must be non-negative")
        if x == 0.0 and y == 0.0:
            raise InvalidGeometry("line must have non-zero length")
        super().__init__(x, y)


# ---- Adapters ----

class RotationAngle(IntEnum):
    QUARTER = 90
    HALF = 180
    THREE_QUARTER = 270


class Rotated(Shape):
    _derived = True

    def __init__(self, shape: Shape, rotation_angle: int):
        if isinstance(rotation_angle, bool):
            raise InvalidAngle(f"rotation angle must be 90, 180 or 270, got {rotation_angle!r}")
        try:
            angle = RotationAngle(rotation_angle)
        except (ValueError, TypeError):
            raise InvalidAngle(f"rotation angle must be 90, 180 or 270, got {rotation_angle!r}") from None
        super().__init__(0.0, 0.0)
        self.shape = _require_shape(shape)
        self.angle = angle

    @property
    def children(self) -> Tuple[Shape, ...]:
        return (self.shape,)

    def _measure(self, child_sizes: Sequence[Tuple[float, float]]) -> Tuple[float, float]:
        w, h = child_sizes[0]
        if self.angle == RotationAngle.HALF:
            return w, h
        return h, w

    def anchor(self, child_size: Tuple[float, float] | None = None) -> Tuple[float, float]:
        """
        Translation applied before the rotation so the rotated child lands
        back in [0, width] x [0, height].
        """
        w, h = self.shape.footprint() if child_size is None else child_size
        if self.angle == RotationAngle.QUARTER:
            return h, 0.0
        if self.angle == RotationAngle.HALF:
            return w, h
        return 0.0, w


class Scaled(Shape):
    _derived = True

    def __init__(self, shape: Shape, fx: float, fy: float):
        super().__init__(0.0, 0.0)
        self.shape = _require_shape(shape)
        self.fx = _require_positive(fx, "fx", InvalidScaleFactor)
        self.fy = _require_positive(fy, "fy", InvalidScaleFactor)

    @property
    def children(self) -> Tuple[Shape, ...]:
        return (self.shape,)

    def _measure(self, child_sizes: Sequence[Tuple[float, float]]) -> Tuple[float, float]:
        w, h = child_sizes[0]
        return w * self.fx, h * self.fy


# ---- Combinators ----

def _flatten(kind: type, *shapes: Shape) -> list[Shape]:
    flat: list[Shape] = []
    for s in shapes:
        if type(s) is kind:
            flat.extend(s.shapes)
        else:
            flat.append(s)
    return flat


class Compound(Shape, ABC):
    """
    An ordered list of children laid out along one axis. Offsets and the
    footprint are derived from the current children on every read.
    """
    _derived = True

    def __init__(self, shapes: Iterable[Shape]):
        super().__init__(0.0, 0.0)
        self.shapes = shapes

    @property
    def shapes(self) -> list[Shape]:
        return list(self._shapes)

    @shapes.setter
    def shapes(self, shapes: Iterable[Shape]) -> None:
        items = [_require_shape(s) for s in shapes]
        if not items:
            raise EmptyComposition(f"{type(self).__name__} requires at least one shape")
        for s in items:
            if any(node is self for node in walk(s)):
                raise CyclicComposition(f"{type(self).__name__} cannot contain itself")
        self._shapes = tuple(items)

    @property
    def children(self) -> Tuple[Shape, ...]:
        return self._shapes

    @abstractmethod
    def _measure(self, child_sizes: Sequence[Tuple[float, float]]) -> Tuple[float, float]:
        ...

    @abstractmethod
    def _advance(self, size: Tuple[float, float]) -> float:
        """Distance the next child is pushed along by a child of this size."""

    @abstractmethod
    def _offset_for(self, point: float) -> Tuple[float, float]:
        ...

    def _instruction(self, dx: float, dy: float, config: PostScriptConfig) -> str:
        return ops.translate(dx, dy, config)

    def generate_translate_points(
        self, child_sizes: Sequence[Tuple[float, float]] | None = None
    ) -> list[float]:
        """Cumulative offset of each child along the stacking axis."""
        if child_sizes is None:
            child_sizes = [s.footprint() for s in self._shapes]
        points: list[float] = []
        total = 0.0
        for size in child_sizes:
            points.append(total)
            total += self._advance(size)
        return points

    def offsets(
        self, child_sizes: Sequence[Tuple[float, float]] | None = None
    ) -> list[Tuple[float, float]]:
        return [self._offset_for(p) for p in self.generate_translate_points(child_sizes)]

    def translate(self, index: int, config: PostScriptConfig = DEFAULT_CONFIG) -> str:
        """Instruction that moves the origin to child ``index``."""
        dx, dy = self.offsets()[index]
        return self._instruction(dx, dy, config)


class Layered(Compound):
    def __init__(self, *shapes: Shape):
        super().__init__(shapes)

    def _measure(self, child_sizes: Sequence[Tuple[float, float]]) -> Tuple[float, float]:
        return max(w for w, _ in child_sizes), max(h for _, h in child_sizes)

    def _advance(self, size: Tuple[float, float]) -> float:
        return 0.0

    def _offset_for(self, point: float) -> Tuple[float, float]:
        return 0.0, 0.0

    def _instruction(self, dx: float, dy: float, config: PostScriptConfig) -> str:
        return ""


class Vertical(Compound):
    """Children stacked bottom to top in insertion order."""
    def __init__(self, *shapes: Shape):
        super().__init__(shapes)

    def _measure(self, child_sizes: Sequence[Tuple[float, float]]) -> Tuple[float, float]:
        return max(w for w, _ in child_sizes), sum(h for _, h in child_sizes)

    def _advance(self, size: Tuple[float, float]) -> float:
        return size[1]

    def _offset_for(self, point: float) -> Tuple[float, float]:
        return 0.0, point


class Horizontal(Compound):
    """Children placed left to right in insertion order."""
    def __init__(self, *shapes: Shape):
        super().__init__(shapes)

    def _measure(self, child_sizes: Sequence[Tuple[float, float]]) -> Tuple[float, float]:
        return sum(w for w, _ in child_sizes), max(h for _, h in child_sizes)

    def _advance(self, size: Tuple[float, float]) -> float:
        return size[0]

    def _offset_for(self, point: float) -> Tuple[float, float]:
        return point, 0.0


class CompoundLayered(Layered):
    def __init__(self, shapes: Iterable[Shape]):
        super().__init__(*shapes)


class CompoundVertical(Vertical):
    def __init__(self, shapes: Iterable[Shape]):
        super().__init__(*shapes)


class CompoundHorizontal(Horizontal):
    def __init__(self, shapes: Iterable[Shape]):
        super().__init__(*shapes)
