from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
import math
import numpy as np


@dataclass(frozen=True)
class Affine2D:
    """
    Homogeneous 3x3 transform acting on column vectors (x, y, 1).

    Built from the same primitives a PostScript program uses (translate,
    rotate, scale), so a chain of operators maps onto a chain of ``then``.
    """
    matrix: np.ndarray  # shape (3, 3), last row (0, 0, 1)

    def __post_init__(self):
        if self.matrix.shape != (3, 3):
            raise ValueError("matrix must be 3x3")

    @classmethod
    def identity(cls) -> "Affine2D":
        return cls(np.eye(3))

    @classmethod
    def translate(cls, dx: float, dy: float) -> "Affine2D":
        m = np.eye(3)
        m[0, 2] = dx
        m[1, 2] = dy
        return cls(m)

    @classmethod
    def scale(cls, fx: float, fy: float) -> "Affine2D":
        return cls(np.diag(np.array([fx, fy, 1.0], dtype=float)))

    @classmethod
    def rotate(cls, degrees: float) -> "Affine2D":
        theta = math.radians(degrees)
        # Snap quarter turns so 90/180/270 stay exact
        c = round(math.cos(theta), 12)
        s = round(math.sin(theta), 12)
        return cls(np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]], dtype=float))

    def then(self, after: "Affine2D") -> "Affine2D":
        """Transform that applies self first and ``after`` second."""
        return Affine2D(after.matrix @ self.matrix)

    def map_point(self, x: float, y: float) -> Tuple[float, float]:
        u = self.matrix @ np.array([x, y, 1.0])
        return float(u[0]), float(u[1])

    def shapely_params(self) -> list[float]:
        # [a, b, d, e, xoff, yoff] as expected by shapely.affinity.affine_transform
        m = self.matrix
        return [
            float(m[0, 0]), float(m[0, 1]),
            float(m[1, 0]), float(m[1, 1]),
            float(m[0, 2]), float(m[1, 2]),
        ]
