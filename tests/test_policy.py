"""
Tests for AliasPolicy and ModuleContext.
"""

import pytest

from aliaslint.analysis.context import ModuleContext
from aliaslint.analysis.models import Position, SourceRange, UsageSite, parse_module_name
from aliaslint.analysis.policy import AliasPolicy, PolicyError


class TestAliasPolicy:
    def test_from_mapping_normalizes_entries(self):
        policy = AliasPolicy.from_mapping({"numpy": "np", " json.decoder ": ["decoder", " dec "]})

        assert policy.expected_aliases(("numpy",)) == ("np",)
        assert policy.expected_aliases(("json", "decoder")) == ("decoder", "dec")
        assert policy.governs(["json", "decoder"])
        assert not policy.governs(("json",))
        assert policy.expected_aliases(("pandas",)) is None

    @pytest.mark.parametrize(
        "aliases",
        [
            {"numpy": []},
            {"numpy": ["np", ""]},
            {"numpy": ["np", 3]},
            {"numpy": {"np": 1}},
            {"numpy": ["n p"]},
            {"": ["np"]},
        ],
    )
    def test_malformed_entries(self, aliases):
        with pytest.raises(PolicyError):
            AliasPolicy.from_mapping(aliases)

    def test_empty_policy_governs_nothing(self):
        policy = AliasPolicy()
        assert list(policy.modules()) == []
        assert not policy.can_miss_aliases


class TestModuleContext:
    def test_alias_table_keeps_import_order(self):
        context = ModuleContext()
        context.register_alias("n", ("numpy",))
        context.register_alias("n", ("numbers",))

        assert context.modules_claiming("n") == [("numpy",), ("numbers",)]
        assert context.lookup_alias("n") == ("numbers",)
        assert context.claimed_by_others("n", ("numpy",)) == [("numbers",)]

    def test_reimport_moves_module_last(self):
        context = ModuleContext()
        context.register_alias("n", ("numpy",))
        context.register_alias("n", ("numbers",))
        context.register_alias("n", ("numpy",))

        assert context.modules_claiming("n") == [("numbers",), ("numpy",)]
        assert context.lookup_alias("n") == ("numpy",)

    def test_unknown_alias(self):
        context = ModuleContext()
        assert context.lookup_alias("np") is None
        assert not context.is_alias("np")
        assert context.claimed_by_others("np", ("numpy",)) == []

    def test_usages_and_summary(self):
        context = ModuleContext(file_path="m.py")
        context.register_alias("np", ("numpy",))
        site = UsageSite(
            module_name=parse_module_name("numpy"),
            qualifier="np",
            member="array",
            range=SourceRange(Position(2, 0), Position(2, 8)),
        )
        context.add_usage(site)

        assert context.usages_for(("numpy",)) == [site]
        assert context.usages_for(("pandas",)) == []
        assert context.summary() == {
            "aliases": 1,
            "alias_violations": 0,
            "missing_alias_violations": 0,
            "usages": 1,
            "unsafe_modules": 0,
        }
