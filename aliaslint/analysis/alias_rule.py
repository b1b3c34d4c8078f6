"""
The consistent-import-alias rule: parse, visit twice, resolve.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import libcst as cst
from libcst.metadata import MetadataWrapper, ScopeProvider

from .context import ModuleContext
from .models import Diagnostic
from .policy import AliasPolicy
from .resolver import resolve
from .visitors import ImportVisitor, ReferenceVisitor, ScopeBindings

logger = logging.getLogger(__name__)

RULE_NAME = "consistent-import-alias"


def build_context(
    module: cst.Module, policy: AliasPolicy, file_path: Optional[str] = None
) -> ModuleContext:
    """Run both visitor passes over `module` and return the finished context."""
    wrapper = MetadataWrapper(module)
    bindings = ScopeBindings(wrapper.resolve(ScopeProvider).values())
    context = ModuleContext(file_path=file_path)
    context.local_names.update(bindings.local_names)
    wrapper.visit(ImportVisitor(context, policy))
    wrapper.visit(ReferenceVisitor(context, bindings))
    return context


def check_module(
    module: cst.Module, policy: AliasPolicy, file_path: Optional[str] = None
) -> List[Diagnostic]:
    context = build_context(module, policy, file_path)
    logger.debug(f"Context for {file_path or '<source>'}: {context.summary()}")
    return resolve(context)


def check_source(
    source: str, policy: AliasPolicy, file_path: Optional[str] = None
) -> List[Diagnostic]:
    """
    Check one module's source text against the alias policy.

    Raises:
        libcst.ParserSyntaxError: If source is not valid Python syntax.
    """
    return check_module(cst.parse_module(source), policy, file_path)
