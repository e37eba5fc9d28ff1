# Re-export core shape API for convenience
from .errors import (
    ShapeError,
    InvalidGeometry,
    InvalidAngle,
    InvalidScaleFactor,
    InvalidDepth,
    EmptyComposition,
    CyclicComposition,
)
from .config import PostScriptConfig, DEFAULT_CONFIG
from .affine import Affine2D
from .geometry import (
    Shape,
    Circle,
    Polygon,
    Square,
    Triangle,
    Rectangle,
    Spacer,
    Diamond,
    Line,
    RotationAngle,
    Rotated,
    Scaled,
    Compound,
    Layered,
    Vertical,
    Horizontal,
    CompoundLayered,
    CompoundVertical,
    CompoundHorizontal,
    walk,
    footprints,
)
from .fractals import MAX_DEPTH, Generated, UCurve, U_Curve, STriangle, LPB
from .outline import outline, outline_bounds
from .postscript import to_postscript, to_document, write_file
