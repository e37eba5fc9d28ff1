from __future__ import annotations

from typing import Sequence, Tuple
import logging
import math

from .errors import InvalidDepth
from .geometry import (
    Line,
    Rotated,
    RotationAngle,
    Shape,
    Triangle,
    _require_positive,
)

logger = logging.getLogger(__name__)

# 3**8 triangles / 4**8 U-curves is already far more than a page can show
MAX_DEPTH = 8


def _require_depth(depth) -> int:
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise InvalidDepth(f"depth must be an integer, got {depth!r}")
    if depth < 0:
        raise InvalidDepth(f"depth must be >= 0, got {depth}")
    if depth > MAX_DEPTH:
        raise InvalidDepth(f"depth must be <= {MAX_DEPTH}, got {depth}")
    return depth


def _placed(shape: Shape, x: float, y: float) -> Shape:
    shape.set_position(x, y)
    return shape


class Generated(Shape):
    """
    A shape made of sub-shapes built once, at construction. Each sub-shape
    is drawn at its own (xpos, ypos) inside this shape's frame.
    """
    def __init__(self, width: float, height: float, shapes: Sequence[Shape]):
        super().__init__(width, height)
        self._shapes = tuple(shapes)

    @property
    def shapes(self) -> Tuple[Shape, ...]:
        return self._shapes

    @property
    def children(self) -> Tuple[Shape, ...]:
        return self._shapes


class UCurve(Generated):
    """
    Upside-down U through the four cell centres of a 2x2 grid: up the left
    column, across the top, down the right column. Open ends sit in the
    bottom-left and bottom-right cells.
    """
    def __init__(self, side: float):
        s = _require_positive(side, "side")
        q = s / 4.0
        super().__init__(s, s, [
            _placed(Line(0.0, s / 2.0), q, q),
            _placed(Line(s / 2.0, 0.0), q, 3.0 * q),
            _placed(Line(0.0, s / 2.0), 3.0 * q, q),
        ])
        self.side = s


U_Curve = UCurve


class STriangle(Generated):
    """
    Sierpinski triangle: depth 0 is a plain triangle, each further level
    replaces it with three half-size copies at the two base corners and
    the apex.
    """
    def __init__(self, side: float, depth: int):
        s = _require_positive(side, "side")
        d = _require_depth(depth)
        height = s * math.sqrt(3.0) / 2.0
        if d == 0:
            shapes: list[Shape] = [Triangle(s)]
        else:
            half = s / 2.0
            shapes = [
                _placed(STriangle(half, d - 1), 0.0, 0.0),
                _placed(STriangle(half, d - 1), half, 0.0),
                _placed(STriangle(half, d - 1), s / 4.0, height / 2.0),
            ]
        super().__init__(s, height, shapes)
        self.side = s
        self.depth = d
        logger.debug("STriangle(side=%g, depth=%d) expanded into %d sub-shapes", s, d, len(shapes))


class LPB(Generated):
    """
    Line-plane bijection (Hilbert curve) of order depth + 1 filling a
    side x side square.

    Depth 0 is a single U-curve. Every further level visits the four
    quadrants with half-size curves, lower-left (turned 270), upper-left,
    upper-right, lower-right (turned 90), and joins consecutive quadrants
    with a connector one grid cell long. Both open ends stay in the bottom
    corner cells at every depth, which is what lets the quadrants join up.
    """
    def __init__(self, side: float, depth: int):
        s = _require_positive(side, "side")
        d = _require_depth(depth)
        if d == 0:
            shapes: list[Shape] = [UCurve(s)]
        else:
            half = s / 2.0
            cell = s / 2 ** (d + 1)
            shapes = [
                _placed(Rotated(LPB(half, d - 1), RotationAngle.THREE_QUARTER), 0.0, 0.0),
                _placed(Line(0.0, cell), cell / 2.0, half - cell / 2.0),
                _placed(LPB(half, d - 1), 0.0, half),
                _placed(Line(cell, 0.0), half - cell / 2.0, half + cell / 2.0),
                _placed(LPB(half, d - 1), half, half),
                _placed(Line(0.0, cell), s - cell / 2.0, half - cell / 2.0),
                _placed(Rotated(LPB(half, d - 1), RotationAngle.QUARTER), half, 0.0),
            ]
        super().__init__(s, s, shapes)
        self.side = s
        self.depth = d
        logger.debug("LPB(side=%g, depth=%d) expanded into %d sub-shapes", s, d, len(shapes))
