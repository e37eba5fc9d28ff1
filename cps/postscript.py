from __future__ import annotations

from typing import Dict, List, Tuple, Union
import logging
import math
import os

from . import operators as ops
from .config import DEFAULT_CONFIG, PostScriptConfig
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
from .outline import outline_bounds

logger = logging.getLogger(__name__)


def _label(shape: Shape, config: PostScriptConfig) -> str:
    p = config.precision
    return ops.comment(f"{type(shape).__name__} {ops.fmt(shape.width, p)} {ops.fmt(shape.height, p)}")


def _primitive_body(shape: Shape, config: PostScriptConfig) -> List[str]:
    body = [_label(shape, config)]
    if isinstance(shape, Circle):
        r = shape.radius
        body += ["newpath", ops.arc(r, r, r, config), "stroke"]
    elif isinstance(shape, (Polygon, Rectangle, Diamond)):
        body += ops.path(shape.vertices, config)
    elif isinstance(shape, Line):
        body += ops.path([(0.0, 0.0), (shape.width, shape.height)], config, closed=False)
    return body


def _placed(child: Shape, instruction: str) -> List[Union[str, Shape]]:
    items: List[Union[str, Shape]] = [ops.gsave()]
    if instruction:
        items.append(instruction)
    items += [child, ops.grestore()]
    return items


def _expand(shape: Shape, sizes: Dict[int, Tuple[float, float]], config: PostScriptConfig) -> List[Union[str, Shape]]:
    """
    One node's program as output lines interleaved with the child shapes
    still to be expanded in their place.
    """
    body: List[Union[str, Shape]]
    if isinstance(shape, (Circle, Polygon, Rectangle, Diamond, Line, Spacer)):
        body = list(_primitive_body(shape, config))
    elif isinstance(shape, Rotated):
        tx, ty = shape.anchor(sizes[id(shape.shape)])
        body = [
            ops.translate(tx, ty, config),
            ops.rotate(int(shape.angle), config),
            shape.shape,
            ops.rotate(-int(shape.angle), config),
        ]
    elif isinstance(shape, Scaled):
        body = [
            ops.scale(shape.fx, shape.fy, config),
            shape.shape,
            ops.scale(1.0 / shape.fx, 1.0 / shape.fy, config),
        ]
    elif isinstance(shape, Compound):
        body = []
        offsets = shape.offsets([sizes[id(c)] for c in shape.children])
        for child, (dx, dy) in zip(shape.children, offsets):
            body += _placed(child, shape._instruction(dx, dy, config))
    elif isinstance(shape, Generated):
        body = []
        for child in shape.shapes:
            body += _placed(child, ops.translate(child.xpos, child.ypos, config))
    else:
        raise TypeError(f"cannot emit PostScript for {type(shape).__name__}")
    return [ops.gsave(), *body, ops.grestore()]


def _emit(shape: Shape, config: PostScriptConfig) -> List[str]:
    sizes = footprints(shape)
    lines: List[str] = []
    stack: List[Union[str, Shape]] = [shape]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            lines.append(item)
        else:
            stack.extend(reversed(_expand(item, sizes, config)))
    return lines


def to_postscript(shape: Shape, config: PostScriptConfig = DEFAULT_CONFIG) -> str:
    """
    PostScript program for a shape tree. Every node is bracketed by its own
    gsave/grestore pair, so the program leaves the graphics state as it
    found it.
    """
    return "\n".join(_emit(shape, config)) + "\n"


def to_document(shape: Shape, config: PostScriptConfig = DEFAULT_CONFIG) -> str:
    """
    Single-page document following the Adobe Document Structuring
    Conventions. The bounding box covers the stroked outline of the shape,
    shifted by the page margin.
    """
    bounds = outline_bounds(shape)
    if bounds is None:
        bounds = (0.0, 0.0, shape.width, shape.height)
    pad = config.line_width / 2.0
    minx, miny, maxx, maxy = bounds
    llx = math.floor(minx - pad + config.margin)
    lly = math.floor(miny - pad + config.margin)
    urx = math.ceil(maxx + pad + config.margin)
    ury = math.ceil(maxy + pad + config.margin)
    header = ["%!PS-Adobe-3.0", f"%%Creator: {config.creator}"]
    if config.title:
        header.append(f"%%Title: {config.title}")
    header += [
        f"%%BoundingBox: {llx} {lly} {urx} {ury}",
        "%%Pages: 1",
        "%%EndComments",
        "%%Page: 1 1",
        f"{ops.fmt(config.line_width, config.precision)} setlinewidth",
        ops.gsave(),
        ops.translate(config.margin, config.margin, config),
    ]
    footer = [ops.grestore(), "showpage", "%%EOF"]
    return "\n".join(header) + "\n" + to_postscript(shape, config) + "\n".join(footer) + "\n"


def write_file(name: str, text: str) -> None:
    """Write text to name in one go, replacing any existing content."""
    directory = os.path.dirname(name)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(name, "w", encoding="utf-8") as f:
        f.write(text)
    logger.info("Wrote %d characters to %s", len(text), name)
