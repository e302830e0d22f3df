"""ambitrans: axial translation operators for ambisonic sound fields."""

from ._typecheck import enable_runtime_typecheck

enable_runtime_typecheck()

from .config import KD_THRESHOLD, SPEED_OF_SOUND, TranslationConfig
from .operators.indexing import acn_degree, acn_degree_order, acn_index, sh_size
from .operators.z_translation import (
    WavenumberPartition,
    apply_z_translation,
    complex_to_real_basis,
    partition_wavenumbers,
    z_translation,
    z_translation_complex_basis,
)
from .wavenumbers import nondimensional_wavenumber

__all__ = [
    "KD_THRESHOLD",
    "SPEED_OF_SOUND",
    "TranslationConfig",
    "WavenumberPartition",
    "acn_degree",
    "acn_degree_order",
    "acn_index",
    "apply_z_translation",
    "complex_to_real_basis",
    "nondimensional_wavenumber",
    "partition_wavenumbers",
    "sh_size",
    "z_translation",
    "z_translation_complex_basis",
]
