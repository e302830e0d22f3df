"""Opt-in runtime type checking for ambitrans.

Setting ``AMBITRANS_RUNTIME_TYPECHECK=1`` before the first import of the
package checks every annotated callable in ``ambitrans`` with beartype,
using jaxtyping's array semantics.
"""

from __future__ import annotations

import os
from typing import Any

TYPECHECK_ENV_VAR = "AMBITRANS_RUNTIME_TYPECHECK"
_FALSY = frozenset({"", "0", "false", "no", "off"})

_TYPECHECK_HOOK: Any = None


def _runtime_typecheck_enabled() -> bool:
    return os.getenv(TYPECHECK_ENV_VAR, "0").strip().lower() not in _FALSY


def enable_runtime_typecheck() -> bool:
    """Install the jaxtyping import hook once; return whether it is active."""
    global _TYPECHECK_HOOK

    if _TYPECHECK_HOOK is None and _runtime_typecheck_enabled():
        from jaxtyping import install_import_hook

        # Modules already imported stay unchecked.
        _TYPECHECK_HOOK = install_import_hook(
            "ambitrans", typechecker="beartype.beartype"
        )
    return _TYPECHECK_HOOK is not None


__all__ = ["TYPECHECK_ENV_VAR", "enable_runtime_typecheck"]
