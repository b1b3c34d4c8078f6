"""
AliasLint - Consistent Import Aliases for Python

Reports imports whose alias is missing or differs from the project's
preferred aliases, and rewrites the import together with every reference
to it when that can be done without colliding with another import.
"""

__version__ = "0.1.0"
__author__ = "AliasLint Team"

# Only expose version by default - everything else is lazy loaded
__all__ = ["__version__", "__author__"]


def __getattr__(name):
    """Lazy loading of main API classes to prevent heavy imports at module level."""
    if name in {"AliasLint", "AnalysisResult", "RefactoringResult", "FileReport"}:
        from .api import AliasLint, AnalysisResult, RefactoringResult, FileReport
        return {
            "AliasLint": AliasLint,
            "AnalysisResult": AnalysisResult,
            "RefactoringResult": RefactoringResult,
            "FileReport": FileReport,
        }[name]

    if name in {"AliasLintConfig", "ConfigurationError"}:
        from .config import AliasLintConfig, ConfigurationError
        return {
            "AliasLintConfig": AliasLintConfig,
            "ConfigurationError": ConfigurationError,
        }[name]

    if name in {"AliasPolicy", "Diagnostic", "ErrorCategory", "check_source"}:
        from . import analysis
        return getattr(analysis, name)

    raise AttributeError(f"module 'aliaslint' has no attribute '{name}'")

__all__ = [
    # Main API
    "AliasLint",
    "AnalysisResult",
    "RefactoringResult",
    "FileReport",
    "AliasLintConfig",
    "ConfigurationError",
    # Rule components (for advanced usage)
    "AliasPolicy",
    "Diagnostic",
    "ErrorCategory",
    "check_source",
]
