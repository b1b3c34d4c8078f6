"""
Alias policy: which aliases are acceptable for which modules.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from .models import ModuleName, parse_module_name

AliasSpec = Union[str, Sequence[str]]


class PolicyError(ValueError):
    """Raised when a policy entry is malformed."""

    pass


def _normalize_aliases(module: str, aliases: AliasSpec) -> Tuple[str, ...]:
    if isinstance(aliases, str):
        aliases = [aliases]
    if not isinstance(aliases, (list, tuple)):
        raise PolicyError(f"aliases for {module!r} must be a name or a list of names")
    normalized = tuple(a.strip() for a in aliases if isinstance(a, str) and a.strip())
    if not normalized or len(normalized) != len(list(aliases)):
        raise PolicyError(f"aliases for {module!r} must be a non-empty list of names")
    for alias in normalized:
        if not alias.isidentifier():
            raise PolicyError(f"alias {alias!r} for {module!r} is not a valid identifier")
    return normalized


@dataclass(frozen=True)
class AliasPolicy:
    """
    Read-only lookup from canonical module name to its preferred aliases.

    Aliases are ordered by preference, most preferred first. A module without
    an entry is not governed by the rule.
    """

    entries: Mapping[ModuleName, Tuple[str, ...]] = field(default_factory=dict)
    can_miss_aliases: bool = False

    @classmethod
    def from_mapping(
        cls, aliases: Mapping[str, AliasSpec], can_miss_aliases: bool = False
    ) -> "AliasPolicy":
        """Build a policy from ``{"numpy": ["np"], "json.decoder": "decoder"}``."""
        entries: Dict[ModuleName, Tuple[str, ...]] = {}
        for module, spec in aliases.items():
            module_name = parse_module_name(str(module))
            if not module_name:
                raise PolicyError(f"invalid module name: {module!r}")
            entries[module_name] = _normalize_aliases(str(module), spec)
        return cls(entries=entries, can_miss_aliases=can_miss_aliases)

    def expected_aliases(self, module_name: ModuleName) -> Optional[Tuple[str, ...]]:
        return self.entries.get(tuple(module_name))

    def governs(self, module_name: ModuleName) -> bool:
        return tuple(module_name) in self.entries

    def modules(self) -> Iterable[ModuleName]:
        return self.entries.keys()
