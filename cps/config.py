from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PostScriptConfig:
    precision: int = 4
    line_width: float = 1.0
    margin: float = 10.0
    creator: str = "cps"
    title: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.precision, bool) or not isinstance(self.precision, int):
            raise ValueError("precision must be an integer")
        if not 0 <= self.precision <= 10:
            raise ValueError("precision must be between 0 and 10")
        if self.line_width <= 0.0:
            raise ValueError("line_width must be positive")
        if self.margin < 0.0:
            raise ValueError("margin must be non-negative")
        for name in ("creator", "title"):
            value = getattr(self, name)
            if value is not None and ("\n" in value or "\r" in value):
                raise ValueError(f"{name} must be a single line")


DEFAULT_CONFIG = PostScriptConfig()
