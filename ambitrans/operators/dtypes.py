"""Operator dtype helpers.

Keep a single source of truth for the real/complex dtype pairing used by the
translation recurrence and its basis correction.
"""

from __future__ import annotations

from typing import Optional

import jax.numpy as jnp
from jaxtyping import DTypeLike


def real_dtype_for(working_dtype: Optional[DTypeLike]) -> jnp.dtype:
    """Resolve the real floating dtype used by the recurrence."""

    if working_dtype is None:
        return jnp.asarray(0.0).dtype
    dtype = jnp.dtype(working_dtype)
    if not jnp.issubdtype(dtype, jnp.floating):
        raise ValueError("working_dtype must be a real floating dtype")
    # Respects the x64 flag: float64 silently becomes float32 without it.
    return jnp.asarray(0.0, dtype=dtype).dtype


def complex_dtype_for_real(real_dtype: DTypeLike) -> jnp.dtype:
    """Return complex dtype paired with a real floating dtype.

    Always a ``numpy.dtype`` instance, never a scalar type such as
    ``jnp.complex128``.
    """

    dtype = jnp.asarray(0, dtype=real_dtype).dtype
    if dtype == jnp.float64:
        return jnp.dtype(jnp.complex128)
    return jnp.dtype(jnp.complex64)


__all__ = ["complex_dtype_for_real", "real_dtype_for"]
