"""
Per-module analysis context.

A ModuleContext accumulates everything the visitors learn about one module
(imports, aliases, violations, references). It is created fresh for each
module and read once by the resolver after traversal has finished.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Set

from .models import AliasViolation, MissingAliasViolation, ModuleName, UsageSite


class ModuleContext:
    """Mutable accumulator for a single module's alias analysis."""

    def __init__(self, file_path: Optional[str] = None) -> None:
        self.file_path = file_path
        # alias text -> modules using it as their qualifier, in import order
        self.alias_table: Dict[str, List[ModuleName]] = {}
        self.alias_violations: List[AliasViolation] = []
        self.missing_alias_violations: List[MissingAliasViolation] = []
        # names bound by anything other than `import` (assignments, params, defs, from-imports)
        self.local_names: Set[str] = set()
        self._usages: Dict[ModuleName, List[UsageSite]] = defaultdict(list)
        # head package -> unaliased dotted imports binding it (`import os.path` binds `os`)
        self._implicit_parents: Dict[str, List[ModuleName]] = {}
        self._shadowed: Dict[ModuleName, Set[str]] = defaultdict(set)
        self._parent_uses: Dict[ModuleName, Set[str]] = defaultdict(set)

    # Imports

    def register_alias(self, alias: str, module_name: ModuleName) -> None:
        claimants = self.alias_table.setdefault(alias, [])
        if module_name in claimants:
            # re-import of the same module under the same alias: latest binding wins
            claimants.remove(module_name)
        claimants.append(module_name)

    def register_implicit_parent(self, head: str, module_name: ModuleName) -> None:
        modules = self._implicit_parents.setdefault(head, [])
        if module_name not in modules:
            modules.append(module_name)

    def implicit_parent_modules(self, head: str) -> List[ModuleName]:
        return list(self._implicit_parents.get(head, []))

    def modules_claiming(self, alias: str) -> List[ModuleName]:
        return list(self.alias_table.get(alias, []))

    def claimed_by_others(self, alias: str, module_name: ModuleName) -> List[ModuleName]:
        """Modules other than `module_name` that use `alias`."""
        return [m for m in self.alias_table.get(alias, []) if m != module_name]

    def lookup_alias(self, alias: str) -> Optional[ModuleName]:
        """Resolve a qualifier to the module it refers to, or None."""
        claimants = self.alias_table.get(alias)
        if not claimants:
            return None
        return claimants[-1]

    def is_alias(self, name: str) -> bool:
        return name in self.alias_table

    # Violations

    def add_alias_violation(self, violation: AliasViolation) -> None:
        self.alias_violations.append(violation)

    def add_missing_alias_violation(self, violation: MissingAliasViolation) -> None:
        self.missing_alias_violations.append(violation)

    # References

    def add_usage(self, site: UsageSite) -> None:
        self._usages[site.module_name].append(site)

    def usages_for(self, module_name: ModuleName) -> List[UsageSite]:
        return list(self._usages.get(module_name, []))

    @property
    def usage_count(self) -> int:
        return sum(len(sites) for sites in self._usages.values())

    def mark_shadowed(self, module_name: ModuleName, name: str) -> None:
        """`name` reaches this module's import on some paths and another binding on others."""
        self._shadowed[module_name].add(name)

    def mark_parent_used(self, module_name: ModuleName, head: str) -> None:
        """The module reads `head`, which only this unaliased dotted import binds."""
        self._parent_uses[module_name].add(head)

    def shadowed_names(self, module_name: ModuleName) -> List[str]:
        return sorted(self._shadowed.get(module_name, ()))

    def parent_uses(self, module_name: ModuleName) -> List[str]:
        return sorted(self._parent_uses.get(module_name, ()))

    def summary(self) -> Dict[str, int]:
        return {
            "aliases": len(self.alias_table),
            "alias_violations": len(self.alias_violations),
            "missing_alias_violations": len(self.missing_alias_violations),
            "usages": self.usage_count,
            "unsafe_modules": len(set(self._shadowed) | set(self._parent_uses)),
        }
