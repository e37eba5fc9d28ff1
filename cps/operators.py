"""
Formatting of the handful of PostScript operators the emitter uses.
"""
from __future__ import annotations

from typing import Iterable, Sequence

from .config import PostScriptConfig


def fmt(value: float, precision: int) -> str:
    text = f"{float(value):.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def gsave() -> str:
    return "gsave"


def grestore() -> str:
    return "grestore"


def comment(text: str) -> str:
    return f"% {text}"


def translate(dx: float, dy: float, config: PostScriptConfig) -> str:
    p = config.precision
    return f"{fmt(dx, p)} {fmt(dy, p)} translate"


def rotate(degrees: float, config: PostScriptConfig) -> str:
    return f"{fmt(degrees, config.precision)} rotate"


def scale(fx: float, fy: float, config: PostScriptConfig) -> str:
    p = config.precision
    return f"{fmt(fx, p)} {fmt(fy, p)} scale"


def arc(x: float, y: float, radius: float, config: PostScriptConfig) -> str:
    p = config.precision
    return f"{fmt(x, p)} {fmt(y, p)} {fmt(radius, p)} 0 360 arc"


def path(points: Iterable[Sequence[float]], config: PostScriptConfig, closed: bool = True) -> list[str]:
    """
    newpath/moveto/lineto sequence through the given points, ending in
    closepath (when closed) and stroke.
    """
    p = config.precision
    lines = ["newpath"]
    for i, (x, y) in enumerate(points):
        op = "moveto" if i == 0 else "lineto"
        lines.append(f"{fmt(x, p)} {fmt(y, p)} {op}")
    if closed:
        lines.append("closepath")
    lines.append("stroke")
    return lines
