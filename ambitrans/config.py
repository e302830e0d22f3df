"""Configuration model for ambitrans."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from jaxtyping import DTypeLike

KD_THRESHOLD = 1e-6
"""Non-dimensional wavenumber below which translation is the identity."""

SPEED_OF_SOUND = 343.0
"""Default speed of sound in air, in m/s."""


@dataclass(frozen=True)
class TranslationConfig:
    """Numerical overrides for the z-axis translation operator.

    Attributes
    ----------
    kd_threshold:
        Wavenumbers equal to zero or strictly below this value are treated as
        the zero-translation case and mapped to the identity matrix.
    working_dtype:
        Real floating dtype used by the recurrence. ``None`` selects JAX's
        default float: ``float32`` unless ``jax_enable_x64`` is set, in which
        case ``float64``. Requesting ``float64`` without x64 also yields
        ``float32``. The returned operator uses the paired complex dtype.
    """

    kd_threshold: float = KD_THRESHOLD
    working_dtype: Optional[DTypeLike] = None

    def __post_init__(self) -> None:
        threshold = float(self.kd_threshold)
        if not math.isfinite(threshold) or threshold < 0.0:
            raise ValueError("kd_threshold must be a finite value >= 0")


__all__ = ["KD_THRESHOLD", "SPEED_OF_SOUND", "TranslationConfig"]
