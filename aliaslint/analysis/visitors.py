"""
LibCST visitors feeding the per-module context.

Two passes are made over the same metadata-wrapped module:

1. ImportVisitor registers every ``import a.b [as c]`` in the alias table and
   classifies it against the policy.
2. ReferenceVisitor records every use of an imported module (``c.func``,
   ``a.b.func``, a bare ``c`` or a bare ``a.b``) as a usage site keyed by the
   module's canonical name.

Whether a name is a use of an import at all is decided by libcst's scope
analysis (ScopeBindings): parameters, assignment targets, keyword names and
locals that shadow an alias are never treated as references.

References can appear before the import that binds them (function bodies,
conditional imports), so the second pass only starts once the alias table is
complete.
"""

from __future__ import annotations

import enum
import logging
from typing import Dict, Iterable, List, Optional, Set

import libcst as cst
from libcst.metadata import Access, Assignment, BaseAssignment, PositionProvider, Scope

from .context import ModuleContext
from .models import (
    AliasViolation,
    MissingAliasViolation,
    ModuleName,
    SourceRange,
    UsageSite,
    format_module_name,
)
from .policy import AliasPolicy

logger = logging.getLogger(__name__)


def dotted_segments(node: cst.BaseExpression) -> Optional[List[str]]:
    """
    Flatten a Name/Attribute chain into its segments.

    Returns None when the chain contains anything other than plain names
    (calls, subscripts, literals...).
    """
    if isinstance(node, cst.Name):
        return [node.value]
    if isinstance(node, cst.Attribute):
        head = dotted_segments(node.value)
        if head is None:
            return None
        return head + [node.attr.value]
    return None


def _is_import_binding(assignment: BaseAssignment) -> bool:
    return isinstance(assignment, Assignment) and isinstance(assignment.node, cst.Import)


class BindingKind(enum.Enum):
    """What a loaded name refers to."""

    IMPORT = "import"  # only `import` statements (or nothing visible yet)
    MIXED = "mixed"  # an import on some paths, another binding on others
    OTHER = "other"  # not a load, or a load of a non-import binding


class ScopeBindings:
    """Name-binding facts for one module, taken from libcst's ScopeProvider."""

    def __init__(self, scopes: Iterable[Optional[Scope]]) -> None:
        self._accesses: Dict[int, Access] = {}
        self.local_names: Set[str] = set()

        unique = {id(scope): scope for scope in scopes if scope is not None}
        for scope in unique.values():
            for access in scope.accesses:
                self._accesses[id(access.node)] = access
            for assignment in scope.assignments:
                if not _is_import_binding(assignment):
                    self.local_names.add(assignment.name)

    def _access_for(self, node: cst.BaseExpression) -> Optional[Access]:
        # dotted imports attach the access to the longest imported prefix of a chain
        current = node
        while True:
            access = self._accesses.get(id(current))
            if access is not None:
                return access
            if not isinstance(current, cst.Attribute):
                return None
            current = current.value

    def kind_of(self, node: cst.BaseExpression) -> BindingKind:
        access = self._access_for(node)
        if access is None:
            return BindingKind.OTHER
        referents = list(access.referents)
        imports = [r for r in referents if _is_import_binding(r)]
        if len(imports) == len(referents):
            return BindingKind.IMPORT
        if imports:
            return BindingKind.MIXED
        return BindingKind.OTHER


class ImportVisitor(cst.CSTVisitor):
    """Registers imports and classifies them against the alias policy."""

    METADATA_DEPENDENCIES = (PositionProvider,)

    def __init__(self, context: ModuleContext, policy: AliasPolicy) -> None:
        super().__init__()
        self.context = context
        self.policy = policy

    def _range(self, node: cst.CSTNode) -> SourceRange:
        return SourceRange.from_code_range(self.get_metadata(PositionProvider, node))

    def visit_Import(self, node: cst.Import) -> Optional[bool]:
        for import_alias in node.names:
            self._visit_import_alias(import_alias)
        return False

    def visit_ImportFrom(self, node: cst.ImportFrom) -> Optional[bool]:
        # binds members, never a module alias
        return False

    def _visit_import_alias(self, import_alias: cst.ImportAlias) -> None:
        segments = dotted_segments(import_alias.name)
        if not segments:
            return
        module_name: ModuleName = tuple(segments)

        alias_node: Optional[cst.Name] = None
        if import_alias.asname is not None and isinstance(import_alias.asname.name, cst.Name):
            alias_node = import_alias.asname.name

        actual_alias = alias_node.value if alias_node is not None else format_module_name(module_name)
        self.context.register_alias(actual_alias, module_name)
        if alias_node is None and len(module_name) > 1:
            self.context.register_implicit_parent(module_name[0], module_name)

        expected = self.policy.expected_aliases(module_name)
        if expected is None:
            return

        if alias_node is not None:
            self.context.add_alias_violation(
                AliasViolation(
                    actual_alias=actual_alias,
                    module_name=module_name,
                    expected_aliases=tuple(expected),
                    alias_range=self._range(alias_node),
                )
            )
        elif not self.policy.can_miss_aliases:
            self.context.add_missing_alias_violation(
                MissingAliasViolation(
                    module_name=module_name,
                    expected_aliases=tuple(expected),
                    module_name_range=self._range(import_alias.name),
                )
            )


class ReferenceVisitor(cst.CSTVisitor):
    """Attaches every reference to an imported module to the context."""

    METADATA_DEPENDENCIES = (PositionProvider,)

    def __init__(self, context: ModuleContext, bindings: ScopeBindings) -> None:
        super().__init__()
        self.context = context
        self.bindings = bindings

    def _range(self, node: cst.CSTNode) -> SourceRange:
        return SourceRange.from_code_range(self.get_metadata(PositionProvider, node))

    def _record(
        self,
        module_name: ModuleName,
        qualifier: str,
        member: Optional[str],
        node: cst.CSTNode,
        kind: BindingKind,
    ) -> None:
        self.context.add_usage(
            UsageSite(
                module_name=module_name,
                qualifier=qualifier,
                member=member,
                range=self._range(node),
            )
        )
        if kind is BindingKind.MIXED:
            self.context.mark_shadowed(module_name, qualifier.split(".")[0])

    def _record_parent_use(self, head: str) -> None:
        for module_name in self.context.implicit_parent_modules(head):
            self.context.mark_parent_used(module_name, head)

    def visit_Import(self, node: cst.Import) -> Optional[bool]:
        return False

    def visit_ImportFrom(self, node: cst.ImportFrom) -> Optional[bool]:
        return False

    def visit_Attribute(self, node: cst.Attribute) -> Optional[bool]:
        segments = dotted_segments(node)
        if segments is None:
            return True

        kind = self.bindings.kind_of(node)
        if kind is BindingKind.OTHER:
            return False

        # longest qualifier first: with both `import os` and `import os.path`,
        # `os.path.join` belongs to os.path
        for size in range(len(segments), 0, -1):
            qualifier = ".".join(segments[:size])
            module_name = self.context.lookup_alias(qualifier)
            if module_name is None:
                continue

            if size == len(segments):
                # the module object itself, e.g. `f(json.decoder)`
                self._record(module_name, qualifier, None, node, kind)
                return False

            target = node
            while len(dotted_segments(target.value) or ()) > size:
                target = target.value
            self._record(module_name, qualifier, target.attr.value, target, kind)
            return False

        self._record_parent_use(segments[0])
        return False

    def visit_Name(self, node: cst.Name) -> Optional[bool]:
        kind = self.bindings.kind_of(node)
        if kind is BindingKind.OTHER:
            return False
        module_name = self.context.lookup_alias(node.value)
        if module_name is not None:
            self._record(module_name, node.value, None, node, kind)
        else:
            self._record_parent_use(node.value)
        return False
