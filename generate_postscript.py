from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from cps import (
    LPB,
    Circle,
    Diamond,
    Horizontal,
    Layered,
    PostScriptConfig,
    Polygon,
    Rectangle,
    RotationAngle,
    Rotated,
    Scaled,
    Shape,
    Spacer,
    Square,
    STriangle,
    Triangle,
    Vertical,
    to_document,
    write_file,
)


def build_gallery(side: float) -> Shape:
    """One of every primitive, a few adapters, and the two fractals at low depth."""
    gap = Spacer(side / 4.0, side)
    primitives = Horizontal(
        Circle(side / 2.0), gap,
        Square(side), gap,
        Triangle(side), gap,
        Polygon(7, side / 2.0), gap,
        Rectangle(side * 1.5, side / 2.0), gap,
        Diamond(side / 1.5),
    )
    adapters = Horizontal(
        Rotated(Rectangle(side * 1.5, side / 2.0), RotationAngle.QUARTER), gap,
        Rotated(Triangle(side), RotationAngle.HALF), gap,
        Scaled(Circle(side / 2.0), 2.0, 0.5), gap,
        Layered(Square(side), Circle(side / 2.0), Diamond(side / 1.5)),
    )
    fractals = Horizontal(STriangle(side * 2.0, 3), gap, LPB(side * 2.0, 2))
    return Vertical(fractals, Spacer(side, side / 4.0), adapters, Spacer(side, side / 4.0), primitives)


def build_shape(kind: str, side: float, depth: int) -> Shape:
    if kind == "sierpinski":
        return STriangle(side, depth)
    if kind == "hilbert":
        return LPB(side, depth)
    if kind == "gallery":
        return build_gallery(side)
    raise ValueError(f"unknown shape kind: {kind}")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a PostScript document from a composed shape.")
    p.add_argument("kind", choices=["sierpinski", "hilbert", "gallery"], help="which shape to generate")
    p.add_argument("out", help="output .ps path (overwritten if it exists)")
    p.add_argument("--side", type=float, default=256.0, help="side length in points (default: 256)")
    p.add_argument("--depth", type=int, default=4, help="recursion depth for fractals (default: 4)")
    p.add_argument("--precision", type=int, default=4, help="decimal places in coordinates (default: 4)")
    p.add_argument("--margin", type=float, default=36.0, help="page margin in points (default: 36)")
    p.add_argument("--line-width", type=float, default=1.0, help="stroke width in points (default: 1)")
    p.add_argument("--title", type=str, default=None, help="document title")
    p.add_argument("--verbose", action="store_true", help="enable debug logging")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    try:
        cfg = PostScriptConfig(
            precision=args.precision,
            line_width=args.line_width,
            margin=args.margin,
            title=args.title,
        )
        shape = build_shape(args.kind, args.side, args.depth)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    text = to_document(shape, cfg)
    try:
        write_file(args.out, text)
    except OSError as e:
        print(f"error: could not write {args.out}: {e}", file=sys.stderr)
        return 2
    print(f"Wrote: {args.out} ({shape.width:g} x {shape.height:g})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
