"""Scalar special functions feeding the z-translation recurrence.

The recursion coefficients follow Gumerov and Duraiswami (2005), Eqs.
(2.2.8)-(2.2.9):

    a_n^m = sqrt((n+1+|m|)(n+1-|m|) / ((2n+1)(2n+3)))          n >= |m|

    b_n^m =  sqrt((n-m-1)(n-m) / ((2n-1)(2n+1)))               0 <= m <= n
    b_n^m = -sqrt((n-m-1)(n-m) / ((2n-1)(2n+1)))              -n <= m < 0

and both vanish outside their domain. The recurrence relies on that zero to
drop terms that refer to non-existent lower-order entries.
"""

from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np
from jaxtyping import ArrayLike
from scipy import special as sp_special

from ..config import KD_THRESHOLD


def kd_threshold() -> float:
    """Wavenumber magnitude below which translation is the identity."""

    return KD_THRESHOLD


def spherical_bessel_j(
    order: int,
    x: Union[ArrayLike, Sequence[float]],
) -> np.ndarray:
    """Spherical Bessel function of the first kind ``j_order(x)``.

    Evaluated elementwise on the host; ``x`` may be a scalar or an array.
    """

    n = int(order)
    if n < 0:
        raise ValueError("order must be >= 0")
    return np.asarray(sp_special.spherical_jn(n, np.asarray(x, dtype=np.float64)))


def coefficient_a(n: int, m: int) -> float:
    """Recursion coefficient ``a_n^m``; zero when ``n < |m|``."""

    m_abs = abs(int(m))
    n = int(n)
    if n < m_abs:
        return 0.0
    return math.sqrt(
        (n + 1 + m_abs) * (n + 1 - m_abs) / ((2 * n + 1) * (2 * n + 3))
    )


def coefficient_b(n: int, m: int) -> float:
    """Recursion coefficient ``b_n^m``; zero when ``|m| > n``."""

    n = int(n)
    m = int(m)
    if abs(m) > n:
        return 0.0
    value = math.sqrt(abs((n - m - 1) * (n - m) / ((2 * n - 1) * (2 * n + 1))))
    if m < 0:
        return -value
    return value


__all__ = [
    "coefficient_a",
    "coefficient_b",
    "kd_threshold",
    "spherical_bessel_j",
]
