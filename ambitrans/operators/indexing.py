"""ACN indexing for packed spherical-harmonic coefficients.

Coefficients up to order ``L`` are stored in the Ambisonic Channel Number
(ACN) layout: degree ``n`` occupies the contiguous block ``n^2 .. (n+1)^2-1``
and order ``m`` runs from ``-n`` to ``n`` inside that block, so that

    acn_index(n, m) = n^2 + n + m.
"""

from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np
from beartype import beartype
from jaxtyping import ArrayLike, jaxtyped


def sh_size(order: int) -> int:
    """Number of SH coefficients up to degree ``order``.

    Using the standard packed layout: sum_{l=0..p} (2l+1) = (p+1)^2.
    """

    p = int(order)
    if p < 0:
        raise ValueError("order must be >= 0")
    return (p + 1) * (p + 1)


def acn_index(n: int, m: int) -> int:
    """ACN index of the harmonic pair (n, m) for m in [-n..n]."""

    nn = int(n)
    mm = int(m)
    if nn < 0:
        raise ValueError("n must be >= 0")
    if mm < -nn or mm > nn:
        raise ValueError("m must satisfy -n <= m <= n")
    return nn * nn + nn + mm


def acn_degree(index: int) -> int:
    """Degree ``n`` of the harmonic stored at ACN ``index``."""

    idx = int(index)
    if idx < 0:
        raise ValueError("index must be >= 0")
    return math.isqrt(idx)


@jaxtyped(typechecker=beartype)
def acn_degree_order(
    indices: Union[ArrayLike, Sequence[int]],
) -> tuple[np.ndarray, np.ndarray]:
    """Vectorized inverse of :func:`acn_index`.

    Returns
    -------
    tuple of numpy.ndarray
        ``(n, m)`` integer arrays with the shape of ``indices``.
    """

    idx = np.asarray(indices)
    if idx.size and not np.issubdtype(idx.dtype, np.integer):
        raise ValueError("indices must be integers")
    idx = idx.astype(np.int64)
    if np.any(idx < 0):
        raise ValueError("indices must be >= 0")
    n = np.floor(np.sqrt(idx)).astype(np.int64)
    # Guard the float sqrt against off-by-one at perfect squares.
    n = np.where((n + 1) * (n + 1) <= idx, n + 1, n)
    n = np.where(n * n > idx, n - 1, n)
    m = idx - n * n - n
    return n, m


@jaxtyped(typechecker=beartype)
def acn_indices(
    n: Union[ArrayLike, Sequence[int]],
    m: Union[ArrayLike, Sequence[int]],
) -> np.ndarray:
    """Vectorized :func:`acn_index`; ``n`` and ``m`` broadcast together."""

    nn = np.asarray(n)
    mm = np.asarray(m)
    for name, arr in (("n", nn), ("m", mm)):
        if arr.size and not np.issubdtype(arr.dtype, np.integer):
            raise ValueError(f"{name} must be integers")
    nn = nn.astype(np.int64)
    mm = mm.astype(np.int64)
    if np.any(nn < 0):
        raise ValueError("n must be >= 0")
    if np.any(np.abs(mm) > nn):
        raise ValueError("m must satisfy -n <= m <= n")
    return nn * nn + nn + mm


__all__ = [
    "acn_degree",
    "acn_degree_order",
    "acn_index",
    "acn_indices",
    "sh_size",
]
