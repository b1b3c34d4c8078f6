"""
Analysis module for AliasLint

Provides the consistent-import-alias rule:
- alias policy lookup
- per-module context built by two LibCST visitor passes
- resolution of violations into diagnostics with optional fixes
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

__all__ = [
    "AliasPolicy",
    "ModuleContext",
    "AliasResolver",
    "Diagnostic",
    "ErrorCategory",
    "check_source",
]

_LAZY_EXPORTS: Dict[str, str] = {
    "AliasPolicy": "aliaslint.analysis.policy",
    "ModuleContext": "aliaslint.analysis.context",
    "AliasResolver": "aliaslint.analysis.resolver",
    "Diagnostic": "aliaslint.analysis.models",
    "ErrorCategory": "aliaslint.analysis.models",
    "check_source": "aliaslint.analysis.alias_rule",
}

if TYPE_CHECKING:
    from aliaslint.analysis.policy import AliasPolicy as AliasPolicy
    from aliaslint.analysis.context import ModuleContext as ModuleContext
    from aliaslint.analysis.resolver import AliasResolver as AliasResolver
    from aliaslint.analysis.models import Diagnostic as Diagnostic
    from aliaslint.analysis.models import ErrorCategory as ErrorCategory
    from aliaslint.analysis.alias_rule import check_source as check_source


def __getattr__(name: str) -> Any:
    """
    Lazy attribute loading (PEP 562).
    Allows `from aliaslint.analysis import AliasPolicy` without eager imports.
    """
    mod_path = _LAZY_EXPORTS.get(name)
    if not mod_path:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    import importlib

    mod = importlib.import_module(mod_path)
    try:
        return getattr(mod, name)
    except AttributeError as e:
        raise AttributeError(
            f"module {mod_path!r} does not define {name!r} (lazy export from {__name__!r})"
        ) from e


def __dir__() -> List[str]:
    return sorted(set(globals().keys()) | set(_LAZY_EXPORTS.keys()))
