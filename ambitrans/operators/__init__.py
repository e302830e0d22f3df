"""Operator namespace for ACN indexing and translation kernels."""

from . import dtypes, indexing, special, z_translation

__all__ = [
    "dtypes",
    "indexing",
    "special",
    "z_translation",
]
