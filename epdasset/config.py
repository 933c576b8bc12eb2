"""Display-specific compiler policy.

The defaults target a 1-bpp e-paper panel: fonts are rasterized at 72 dpi so
that one point equals one pixel, and images are thresholded at a darkness of
128.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# FreeType reports metrics in 26.6 fixed point.
UNITS_PER_PIXEL = 1 << 6


@dataclass(frozen=True)
class CompilerConfig:
    dpi: int = 72
    threshold: int = 128
    units_per_pixel: int = UNITS_PER_PIXEL

    def __post_init__(self) -> None:
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive, got {self.dpi}")
        if not 0 <= self.threshold <= 256:
            raise ValueError(f"threshold must be within 0..256, got {self.threshold}")
        if self.units_per_pixel <= 0:
            raise ValueError(f"units_per_pixel must be positive, got {self.units_per_pixel}")

    def norm_ceil(self, val: int) -> int:
        return int(math.ceil(val / self.units_per_pixel))


DEFAULT_CONFIG = CompilerConfig()
