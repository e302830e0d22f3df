"""Axial (z-axis) translation operator for ambisonic coefficients.

The operator maps ACN/N3D coefficients of a sound field expanded about one
origin to the coefficients about an origin displaced along +z by ``d``. It
depends on the displacement only through the non-dimensional wavenumber
``kd``, so a batch of wavenumbers yields a batch of square matrices.

The recurrence (Gumerov and Duraiswami 2005, Sec. 3.2; Zotter 2009, Sec. 3)
is carried out in the complex spherical-harmonic basis on a working matrix
whose columns extend to order ``2L``. Once the square ``(L+1)^2`` block is
complete it is converted to the real N3D basis by
:func:`complex_to_real_basis`.

Axis layout
-----------
Internally regular samples are stacked along a leading batch axis so the
single-sample recurrence can be ``jax.vmap``-ed. The public functions return
the wavenumber axis last: ``((L+1)^2, (L+1)^2, K)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional, Sequence, Union

import jax
import jax.numpy as jnp
import numpy as np
from beartype import beartype
from jaxtyping import Array, ArrayLike, jaxtyped

from ..config import TranslationConfig
from .dtypes import complex_dtype_for_real, real_dtype_for
from .indexing import acn_degree_order, acn_index, acn_indices, sh_size
from .special import (
    coefficient_a,
    coefficient_b,
    kd_threshold,
    spherical_bessel_j,
)

logger = logging.getLogger(__name__)

# (-i)^k for k mod 4.
_MINUS_I_POWERS = (1.0 + 0.0j, -1.0j, -1.0 + 0.0j, 1.0j)


@dataclass(frozen=True)
class WavenumberPartition:
    """Disjoint split of sample indices into near-zero and regular wavenumbers.

    Both fields are sorted ``int64`` index arrays into the wavenumber axis;
    together they cover every sample exactly once.
    """

    near_zero: np.ndarray
    regular: np.ndarray

    @property
    def size(self: "WavenumberPartition") -> int:
        return int(self.near_zero.size + self.regular.size)


def _validate_order(max_order: int) -> int:
    if isinstance(max_order, (bool, np.bool_)) or not isinstance(
        max_order, (int, np.integer)
    ):
        raise TypeError("max_order must be an integer")
    p = int(max_order)
    if p < 0:
        raise ValueError("max_order must be >= 0")
    return p


def _as_wavenumbers(wavenumbers: Union[ArrayLike, Sequence[float]]) -> np.ndarray:
    """Coerce wavenumbers into a validated 1-D float64 host array."""

    kd = np.asarray(wavenumbers)
    if np.iscomplexobj(kd):
        raise ValueError("wavenumbers must be real")
    if kd.ndim == 0:
        kd = kd.reshape(1)
    if kd.ndim != 1:
        raise ValueError("wavenumbers must be a scalar or a 1D sequence")
    if kd.size == 0:
        raise ValueError("wavenumbers must not be empty")
    kd = kd.astype(np.float64)
    if not np.all(np.isfinite(kd)):
        raise ValueError("wavenumbers must be finite")
    if np.any(kd < 0.0):
        raise ValueError("wavenumbers must be >= 0")
    return kd


def partition_wavenumbers(
    wavenumbers: Union[ArrayLike, Sequence[float]],
    *,
    threshold: float,
) -> WavenumberPartition:
    """Split wavenumbers into near-zero (identity) and regular samples.

    A sample is near-zero when it is exactly zero or strictly below
    ``threshold``.
    """

    kd = _as_wavenumbers(wavenumbers)
    near_zero = (kd == 0.0) | (kd < float(threshold))
    return WavenumberPartition(
        near_zero=np.flatnonzero(near_zero).astype(np.int64),
        regular=np.flatnonzero(~near_zero).astype(np.int64),
    )


def _bessel_seeds(kd: np.ndarray, max_order: int) -> np.ndarray:
    """Return ``j_l(kd)`` for ``l = 0..2L`` as a ``(K, 2L+1)`` host array."""

    return np.stack(
        [spherical_bessel_j(ell, kd) for ell in range(2 * max_order + 1)],
        axis=-1,
    )


def _coefficient_vector(
    coefficient: Callable[[int, int], float],
    degrees: np.ndarray,
    m: int,
    dtype: jnp.dtype,
) -> Array:
    """Evaluate a recursion coefficient over ``degrees`` at fixed order ``m``."""

    values = np.array([coefficient(int(n), m) for n in degrees], dtype=np.float64)
    return jnp.asarray(values, dtype=dtype)


def _index_triples(rows: list[tuple[int, int, int]]) -> tuple[np.ndarray, ...]:
    """Split ``(n, l, m)`` triples into three ``int64`` columns."""

    table = np.asarray(rows, dtype=np.int64).reshape(-1, 3)
    return table[:, 0], table[:, 1], table[:, 2]


def _z_translation_single(seed: Array, max_order: int) -> Array:
    """Complex-basis z-translation matrix for one regular wavenumber.

    ``seed[l]`` holds ``j_l(kd)`` for ``l = 0..2L``. Each stage reads only
    entries written by earlier stages (or by lower orders of the same stage),
    so the passes must run in this order. Within a pass every update covers
    a whole range of column degrees at once; indices and coefficients are
    built on the host while tracing.
    """

    p = max_order
    dtype = seed.dtype
    tz = jnp.zeros((sh_size(p), sh_size(2 * p)), dtype=dtype)

    # Stage 1: row (0,0), columns (l,0) for l = 0..2L.
    ells = np.arange(2 * p + 1)
    weights = ((-1.0) ** ells) * np.sqrt(2.0 * ells + 1.0)
    tz = tz.at[0, acn_indices(ells, 0)].set(jnp.asarray(weights, dtype=dtype) * seed)

    # Stage 2: row (n,n) from row (n-1,n-1), columns (l,n) for l = n..2L-n.
    for n in range(1, p + 1):
        m = n
        row_prev = acn_index(m - 1, m - 1)
        ells = np.arange(n, 2 * p - n + 1)
        lower = tz[row_prev, acn_indices(ells - 1, m - 1)]
        upper = tz[row_prev, acn_indices(ells + 1, m - 1)]
        term1 = _coefficient_vector(coefficient_b, ells, -m, dtype) * lower
        term2 = _coefficient_vector(coefficient_b, ells + 1, m - 1, dtype) * upper
        tz = tz.at[acn_index(n, m), acn_indices(ells, n)].set(
            (term1 - term2) / coefficient_b(m, -m)
        )

    # Stage 3: row (n+1,m) from rows (n,m) and (n-1,m),
    # columns (l,m) for l = n+1..2L-n-1.
    for m in range(p):
        for n in range(m, p):
            row = acn_index(n, m)
            ells = np.arange(n + 1, 2 * p - n)
            cols = acn_indices(ells, m)
            upper = tz[row, acn_indices(ells + 1, m)]
            lower = tz[row, acn_indices(ells - 1, m)]
            term1 = _coefficient_vector(coefficient_a, ells, m, dtype) * upper
            term2 = _coefficient_vector(coefficient_a, ells - 1, m, dtype) * lower
            guard = coefficient_a(n - 1, m)
            if guard != 0.0:
                term3 = guard * tz[acn_index(n - 1, m), cols]
            else:
                term3 = jnp.zeros_like(term1)
            tz = tz.at[acn_index(n + 1, m), cols].set(
                -(term1 - term2 - term3) / coefficient_a(n, m)
            )

    # Stage 4: negative orders mirror positive ones, degrees l = n..L.
    n4, l4, m4 = _index_triples(
        [
            (n, ell, m)
            for n in range(1, p + 1)
            for ell in range(n, p + 1)
            for m in range(-1, -n - 1, -1)
        ]
    )
    if n4.size:
        tz = tz.at[acn_indices(n4, m4), acn_indices(l4, m4)].set(
            tz[acn_indices(n4, -m4), acn_indices(l4, -m4)]
        )

    # Stage 5: lower triangle (l > n) from the upper one.
    n5, l5, m5 = _index_triples(
        [
            (n, ell, m)
            for n in range(p + 1)
            for ell in range(n + 1, p + 1)
            for m in range(-n, n + 1)
        ]
    )
    if n5.size:
        signs = jnp.asarray((-1.0) ** (n5 + l5), dtype=dtype)
        rows = acn_indices(n5, m5)
        cols = acn_indices(l5, m5)
        tz = tz.at[cols, rows].set(signs * tz[rows, cols])

    # Columns beyond order L were recursion scratch space.
    return tz[:, : sh_size(p)]


@partial(jax.jit, static_argnames=("max_order",))
def _z_translation_batch(seeds: Array, *, max_order: int) -> Array:
    """Map the single-sample recurrence over a ``(K, 2L+1)`` seed batch."""

    return jax.vmap(lambda seed: _z_translation_single(seed, max_order))(seeds)


def _basis_phase_matrix(max_order: int) -> np.ndarray:
    """``(-i)^(deg(j) - deg(i))`` for every row ``i`` and column ``j``."""

    degrees, _ = acn_degree_order(np.arange(sh_size(max_order)))
    powers = np.mod(degrees[None, :] - degrees[:, None], 4)
    return np.asarray(_MINUS_I_POWERS, dtype=np.complex128)[powers]


@jaxtyped(typechecker=beartype)
def complex_to_real_basis(block: Array, *, max_order: int) -> Array:
    """Convert regular-sample operators to the real N3D basis.

    Parameters
    ----------
    block:
        ``(K, (L+1)^2, (L+1)^2)`` operators in the complex SH basis of the
        recurrence, batch axis first.
    max_order:
        Maximum order ``L``.

    Returns
    -------
    Array
        Complex array of the same shape. Entry ``(i, j)`` is multiplied by
        ``(-i)^(deg(j) - deg(i))`` wherever it is nonzero in at least one
        sample; entries that vanish in every sample are left as they are.
    """

    block = jnp.asarray(block)
    size = sh_size(max_order)
    if block.ndim != 3 or block.shape[1:] != (size, size):
        raise ValueError(
            f"block must have shape (K, {size}, {size}) for max_order={max_order}"
        )

    if jnp.issubdtype(block.dtype, jnp.complexfloating):
        cdtype = block.dtype
    else:
        cdtype = complex_dtype_for_real(block.dtype)
    block = block.astype(cdtype)
    phase = jnp.asarray(_basis_phase_matrix(max_order), dtype=cdtype)

    nonzero = jnp.any(block != 0, axis=0)
    return jnp.where(nonzero[None, :, :], phase[None, :, :] * block, block)


def _regular_blocks(
    kd: np.ndarray,
    partition: WavenumberPartition,
    max_order: int,
    real_dtype: jnp.dtype,
) -> Array:
    size = sh_size(max_order)
    if partition.regular.size == 0:
        return jnp.zeros((0, size, size), dtype=real_dtype)
    seeds = jnp.asarray(
        _bessel_seeds(kd[partition.regular], max_order), dtype=real_dtype
    )
    return _z_translation_batch(seeds, max_order=max_order)


def _assemble(
    partition: WavenumberPartition,
    regular_block: Array,
    max_order: int,
    dtype: jnp.dtype,
) -> Array:
    """Place identity and regular samples into the ``(N, N, K)`` output."""

    size = sh_size(max_order)
    eye = jnp.eye(size, dtype=dtype)
    out = jnp.broadcast_to(eye[:, :, None], (size, size, partition.size))
    if partition.regular.size:
        out = out.at[:, :, partition.regular].set(
            jnp.moveaxis(regular_block.astype(dtype), 0, -1)
        )
    return out


def _prepare(
    wavenumbers: Union[ArrayLike, Sequence[float]],
    max_order: int,
    config: Optional[TranslationConfig],
) -> tuple[np.ndarray, WavenumberPartition, int, TranslationConfig]:
    p = _validate_order(max_order)
    if config is None:
        config = TranslationConfig(kd_threshold=kd_threshold())
    cfg = config
    kd = _as_wavenumbers(wavenumbers)
    partition = partition_wavenumbers(kd, threshold=cfg.kd_threshold)
    logger.debug(
        "z-translation order=%d: %d regular, %d near-zero wavenumbers, "
        "working matrix %dx%d",
        p,
        partition.regular.size,
        partition.near_zero.size,
        sh_size(p),
        sh_size(2 * p),
    )
    return kd, partition, p, cfg


def z_translation_complex_basis(
    wavenumbers: Union[ArrayLike, Sequence[float]],
    max_order: int,
    *,
    config: Optional[TranslationConfig] = None,
) -> Array:
    """Z-translation operator in the complex SH basis of the recurrence.

    Same layout as :func:`z_translation` but without the real-basis phase
    correction; the result is real-valued. Near-zero samples are identity.
    """

    kd, partition, p, cfg = _prepare(wavenumbers, max_order, config)
    rdtype = real_dtype_for(cfg.working_dtype)
    block = _regular_blocks(kd, partition, p, rdtype)
    return _assemble(partition, block, p, rdtype)


def z_translation(
    wavenumbers: Union[ArrayLike, Sequence[float]],
    max_order: int,
    *,
    config: Optional[TranslationConfig] = None,
) -> Array:
    """Ambisonic translation matrices for a displacement along +z.

    Parameters
    ----------
    wavenumbers:
        Non-dimensional wavenumbers ``kd`` (angular wavenumber times
        translation distance). A scalar or a non-empty 1D sequence of real,
        finite, non-negative values.
    max_order:
        Maximum ambisonics order ``L >= 0``.
    config:
        Optional :class:`~ambitrans.config.TranslationConfig` overriding the
        near-zero threshold and the working dtype.

    Returns
    -------
    Array
        Complex array of shape ``((L+1)^2, (L+1)^2, K)`` in the ACN/N3D
        convention. Samples with ``kd`` equal to zero or below the threshold
        are exactly the identity.

    Notes
    -----
    Precision follows JAX's x64 flag. With the default ``working_dtype=None``
    and x64 disabled (JAX's out-of-the-box setting) the recurrence runs in
    ``float32`` and the result is ``complex64``, accurate to roughly 1e-7
    relative. Call ``jax.config.update("jax_enable_x64", True)`` before
    building operators to get ``float64``/``complex128``.

    Not traceable under ``jax.jit``: the near-zero partition is computed on
    the host. The per-sample recurrence itself is compiled and vectorized
    over the regular samples.
    """

    kd, partition, p, cfg = _prepare(wavenumbers, max_order, config)
    rdtype = real_dtype_for(cfg.working_dtype)
    cdtype = complex_dtype_for_real(rdtype)
    block = _regular_blocks(kd, partition, p, rdtype)
    if partition.regular.size:
        block = complex_to_real_basis(block, max_order=p)
    return _assemble(partition, block, p, cdtype)


@jaxtyped(typechecker=beartype)
def apply_z_translation(operator: Array, coefficients: Array) -> Array:
    """Translate ACN coefficient vectors with a precomputed operator.

    Parameters
    ----------
    operator:
        ``(N, N, K)`` output of :func:`z_translation`.
    coefficients:
        ``(N, K)`` coefficients about the original origin, one column per
        wavenumber, or ``(N,)`` to apply every operator to the same vector.

    Returns
    -------
    Array
        ``(N, K)`` coefficients about the translated origin.
    """

    operator = jnp.asarray(operator)
    coefficients = jnp.asarray(coefficients)
    if operator.ndim != 3 or operator.shape[0] != operator.shape[1]:
        raise ValueError("operator must have shape (N, N, K)")
    size, _, count = operator.shape
    if coefficients.ndim == 1:
        coefficients = jnp.broadcast_to(coefficients[:, None], (size, count))
    if coefficients.shape != (size, count):
        raise ValueError(f"coefficients must have shape ({size}, {count})")
    return jnp.einsum("ijk,jk->ik", operator, coefficients)


__all__ = [
    "WavenumberPartition",
    "apply_z_translation",
    "complex_to_real_basis",
    "partition_wavenumbers",
    "z_translation",
    "z_translation_complex_basis",
]
