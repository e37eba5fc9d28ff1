from __future__ import annotations


class ShapeError(ValueError):
    """Base class for invalid shape construction."""


class InvalidGeometry(ShapeError):
    pass


class InvalidAngle(ShapeError):
    pass


class InvalidScaleFactor(ShapeError):
    pass


class InvalidDepth(ShapeError):
    pass


class EmptyComposition(ShapeError):
    pass


class CyclicComposition(ShapeError):
    pass
