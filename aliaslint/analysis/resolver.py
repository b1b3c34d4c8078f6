"""
Alias resolution: turns the violations gathered in a ModuleContext into
diagnostics.

Resolution only runs once the whole module has been visited, because a later
import may already use the alias an earlier violation would want.

For every violation the preferred aliases are filtered down to those not
claimed by another module of the same file. The first remaining candidate is
the target. A fix is offered only when renaming cannot merge two modules
under one qualifier or touch references of another module:

- the current alias is not shared with another import,
- every reference to the import reaches only `import` bindings,
- an unaliased `import a.b` is not the only binding of an `a` used elsewhere,
- the target is not bound locally anywhere in the module, and
- the target is not already promised to another module by an earlier fix
  in the same run.
"""

import logging
from typing import Dict, List, Optional, Sequence

from .context import ModuleContext
from .models import (
    AliasViolation,
    Diagnostic,
    ErrorCategory,
    InsertEdit,
    MissingAliasViolation,
    ModuleName,
    ReplaceEdit,
    TextEdit,
    UsageSite,
    format_module_name,
)

logger = logging.getLogger(__name__)

_UPDATE_ADVICE = (
    "You should update the alias to be consistent with the rest of the project. "
    "Remember to change all references to the alias in this module too."
)
_MANUAL_ADVICE = (
    "Check manually whether to override the alias used by the other import(s) "
    "or to reconfigure the preferred aliases for this module."
)


def _quote_all(names: Sequence[str]) -> str:
    return ", ".join(f"`{n}`" for n in names)


def _quote_modules(modules: Sequence[ModuleName]) -> str:
    return _quote_all([format_module_name(m) for m in modules])


class AliasResolver:
    """Resolves the violations of one finished ModuleContext."""

    def __init__(self, context: ModuleContext) -> None:
        self.context = context
        # aliases handed out by fixes during this run -> receiving module
        self._reserved: Dict[str, ModuleName] = {}

    def available_aliases(
        self, expected: Sequence[str], module_name: ModuleName, current: Optional[str] = None
    ) -> List[str]:
        """Expected aliases, in order, that nothing else in the module uses."""
        available = []
        for candidate in expected:
            if self.context.claimed_by_others(candidate, module_name):
                continue
            if candidate != current and candidate in self.context.local_names:
                continue
            reserved_for = self._reserved.get(candidate)
            if reserved_for is not None and reserved_for != module_name:
                continue
            available.append(candidate)
        return available

    def _blockers(self, expected: Sequence[str], module_name: ModuleName) -> List[ModuleName]:
        blockers: List[ModuleName] = []
        for candidate in expected:
            for other in self.context.claimed_by_others(candidate, module_name):
                if other not in blockers:
                    blockers.append(other)
            reserved_for = self._reserved.get(candidate)
            if reserved_for is not None and reserved_for != module_name and reserved_for not in blockers:
                blockers.append(reserved_for)
        return blockers

    def _no_alternative(
        self, expected: Sequence[str], module_name: ModuleName, current: Optional[str] = None
    ) -> str:
        users = []
        modules = self._blockers(expected, module_name)
        if modules:
            users.append(_quote_modules(modules))
        local = [c for c in expected if c != current and c in self.context.local_names]
        if local:
            users.append(f"local bindings of {_quote_all(local)}")
        return (
            f"There is no safe alternative: the preferred aliases {_quote_all(expected)} "
            f"are already used by {' and '.join(users)}."
        )

    def _unsafe_details(self, module_name: ModuleName) -> List[str]:
        module = format_module_name(module_name)
        details = []
        for name in self.context.shadowed_names(module_name):
            details.append(
                f"The name `{name}` is also bound by other statements in this module, "
                "so its references cannot be rewritten automatically."
            )
        for head in self.context.parent_uses(module_name):
            details.append(
                f"`import {module}` also binds `{head}`, which this module uses directly; "
                f"aliasing the import would leave `{head}` undefined."
            )
        return details

    def _usage_edits(self, module_name: ModuleName, alias: str) -> List[TextEdit]:
        sites: List[UsageSite] = self.context.usages_for(module_name)
        return [ReplaceEdit(range=site.range, replacement=site.rewritten(alias)) for site in sites]

    def resolve(self) -> List[Diagnostic]:
        """Resolve every violation, returning diagnostics in source order."""
        pending = [(v.alias_range.start, v) for v in self.context.alias_violations]
        pending += [(v.module_name_range.start, v) for v in self.context.missing_alias_violations]
        pending.sort(key=lambda item: item[0])

        diagnostics: List[Diagnostic] = []
        for _, violation in pending:
            if isinstance(violation, AliasViolation):
                diagnostic = self.resolve_alias_violation(violation)
            else:
                diagnostic = self.resolve_missing_alias_violation(violation)
            if diagnostic is not None:
                diagnostics.append(diagnostic)

        logger.debug(
            f"Resolved {len(pending)} violation(s) into {len(diagnostics)} diagnostic(s)"
            f" for {self.context.file_path or '<source>'}"
        )
        return diagnostics

    def resolve_alias_violation(self, violation: AliasViolation) -> Optional[Diagnostic]:
        module_name = violation.module_name
        module = format_module_name(module_name)
        actual = violation.actual_alias
        expected = violation.expected_aliases
        message = f"Incorrect alias `{actual}` for module `{module}`."

        available = self.available_aliases(expected, module_name, current=actual)
        if not available:
            target = expected[-1]
            return Diagnostic(
                category=ErrorCategory.INCORRECT_ALIAS_COLLISION,
                message=message,
                details=[
                    f"This import does not use your preferred alias `{target}` for `{module}`.",
                    self._no_alternative(expected, module_name, current=actual),
                    _MANUAL_ADVICE,
                ],
                range=violation.alias_range,
                module_name=module_name,
                target_alias=target,
                file_path=self.context.file_path,
            )

        best = available[0]
        if best == actual:
            return None

        reasons = []
        self_clashes = self.context.claimed_by_others(actual, module_name)
        if self_clashes:
            reasons.append(
                f"The alias `{actual}` is also used by {_quote_modules(self_clashes)}, "
                "so its references cannot be rewritten automatically."
            )
        reasons.extend(self._unsafe_details(module_name))
        if reasons:
            return Diagnostic(
                category=ErrorCategory.INCORRECT_ALIAS_COLLISION,
                message=message,
                details=[
                    f"This import does not use your preferred alias `{best}` for `{module}`.",
                    *reasons,
                    _MANUAL_ADVICE,
                ],
                range=violation.alias_range,
                module_name=module_name,
                target_alias=best,
                file_path=self.context.file_path,
            )

        self._reserved[best] = module_name
        fix: List[TextEdit] = [ReplaceEdit(range=violation.alias_range, replacement=best)]
        fix.extend(self._usage_edits(module_name, best))
        return Diagnostic(
            category=ErrorCategory.INCORRECT_ALIAS,
            message=message,
            details=[
                f"This import does not use your preferred alias `{best}` for `{module}`.",
                _UPDATE_ADVICE,
            ],
            range=violation.alias_range,
            module_name=module_name,
            target_alias=best,
            fix=fix,
            file_path=self.context.file_path,
        )

    def resolve_missing_alias_violation(
        self, violation: MissingAliasViolation
    ) -> Optional[Diagnostic]:
        module_name = violation.module_name
        if not self.context.usages_for(module_name):
            return None

        module = format_module_name(module_name)
        expected = violation.expected_aliases
        available = self.available_aliases(expected, module_name)

        if not available:
            target = expected[0]
            return Diagnostic(
                category=ErrorCategory.MISSING_ALIAS_COLLISION,
                message=f"Expected alias `{target}` missing for module `{module}`.",
                details=[
                    f"This import does not use your preferred alias `{target}` for `{module}`.",
                    self._no_alternative(expected, module_name),
                    _MANUAL_ADVICE,
                ],
                range=violation.module_name_range,
                module_name=module_name,
                target_alias=target,
                file_path=self.context.file_path,
            )

        best = available[0]
        message = f"Expected alias `{best}` missing for module `{module}`."
        reasons = self._unsafe_details(module_name)
        if reasons:
            return Diagnostic(
                category=ErrorCategory.MISSING_ALIAS_COLLISION,
                message=message,
                details=[
                    f"This import does not use your preferred alias `{best}` for `{module}`.",
                    *reasons,
                    _MANUAL_ADVICE,
                ],
                range=violation.module_name_range,
                module_name=module_name,
                target_alias=best,
                file_path=self.context.file_path,
            )

        self._reserved[best] = module_name
        fix: List[TextEdit] = [
            InsertEdit(position=violation.module_name_range.end, text=f" as {best}")
        ]
        fix.extend(self._usage_edits(module_name, best))
        return Diagnostic(
            category=ErrorCategory.MISSING_ALIAS,
            message=message,
            details=[
                f"This import does not use your preferred alias `{best}` for `{module}`.",
                _UPDATE_ADVICE,
            ],
            range=violation.module_name_range,
            module_name=module_name,
            target_alias=best,
            fix=fix,
            file_path=self.context.file_path,
        )


def resolve(context: ModuleContext) -> List[Diagnostic]:
    """Resolve a finished context into diagnostics."""
    return AliasResolver(context).resolve()
