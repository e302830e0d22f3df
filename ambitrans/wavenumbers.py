"""Conversion from physical frequency and distance to ``kd``."""

from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np
from jaxtyping import ArrayLike

from .config import SPEED_OF_SOUND


def nondimensional_wavenumber(
    frequencies: Union[ArrayLike, Sequence[float]],
    distance: float,
    *,
    speed_of_sound: float = SPEED_OF_SOUND,
) -> np.ndarray:
    """Return ``kd = 2 pi f d / c`` for each frequency ``f`` in Hz.

    ``distance`` is the translation distance in metres and
    ``speed_of_sound`` is in m/s.
    """

    d = float(distance)
    c = float(speed_of_sound)
    if not math.isfinite(d) or d < 0.0:
        raise ValueError("distance must be a finite value >= 0")
    if not math.isfinite(c) or c <= 0.0:
        raise ValueError("speed_of_sound must be a finite value > 0")

    freqs = np.atleast_1d(np.asarray(frequencies, dtype=np.float64))
    if freqs.ndim != 1:
        raise ValueError("frequencies must be a scalar or a 1D sequence")
    if np.any(freqs < 0.0):
        raise ValueError("frequencies must be >= 0")
    return 2.0 * np.pi * freqs * d / c


__all__ = ["nondimensional_wavenumber"]
