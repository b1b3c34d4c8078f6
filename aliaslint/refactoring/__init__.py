"""
Refactoring module for AliasLint

Applies the text edits attached to diagnostics:
- single atomic fixes
- all fixes of a module, skipping overlapping ones
"""

__all__ = [
    "apply_fix",
    "apply_fixes",
    "FixOutcome",
    "FixError",
    "FixConflictError",
]


def __getattr__(name: str):
    if name in {"apply_fix", "apply_fixes", "FixOutcome", "FixError", "FixConflictError"}:
        from . import fix_applier

        return getattr(fix_applier, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
