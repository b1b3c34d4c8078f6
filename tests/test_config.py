"""
Tests for configuration loading, merging and validation.
"""

import json

import pytest
import yaml

from aliaslint.config import (
    AliasLintConfig,
    ConfigurationError,
    ConfigurationManager,
    load_config,
)

ENV_VARS = (
    "ALIASLINT_CAN_MISS_ALIASES",
    "ALIASLINT_EXCLUDED_PATTERNS",
    "ALIASLINT_MAX_FILE_SIZE",
    "ALIASLINT_JOBS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run every test without ALIASLINT_* variables and away from real config files."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        ConfigurationManager,
        "DEFAULT_CONFIG_PATHS",
        ["aliaslint.json", "aliaslint.yaml", "aliaslint.yml"],
    )


class TestConfigurationManager:
    def test_find_config_file(self, tmp_path):
        assert ConfigurationManager.find_config_file() is None
        (tmp_path / "aliaslint.yaml").write_text("aliases: {}\n")
        assert ConfigurationManager.find_config_file() == "aliaslint.yaml"

    def test_load_yaml_and_json(self, tmp_path):
        yaml_path = tmp_path / "a.yaml"
        yaml_path.write_text("aliases:\n  numpy: np\n")
        json_path = tmp_path / "a.json"
        json_path.write_text(json.dumps({"aliases": {"numpy": ["np"]}}))

        assert ConfigurationManager.load_config_file(str(yaml_path)) == {"aliases": {"numpy": "np"}}
        assert ConfigurationManager.load_config_file(str(json_path)) == {"aliases": {"numpy": ["np"]}}

    def test_empty_yaml_is_empty_config(self, tmp_path):
        path = tmp_path / "a.yml"
        path.write_text("")
        assert ConfigurationManager.load_config_file(str(path)) == {}

    @pytest.mark.parametrize(
        "name,content",
        [("bad.json", "{not json"), ("bad.yaml", "a: [1, 2"), ("list.yaml", "- numpy\n")],
    )
    def test_load_rejects_bad_files(self, tmp_path, name, content):
        path = tmp_path / name
        path.write_text(content)
        with pytest.raises(ConfigurationError):
            ConfigurationManager.load_config_file(str(path))

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigurationManager.load_config_file(str(tmp_path / "nope.yaml"))

    def test_env_config(self, monkeypatch):
        monkeypatch.setenv("ALIASLINT_CAN_MISS_ALIASES", "True")
        monkeypatch.setenv("ALIASLINT_JOBS", "4")
        monkeypatch.setenv("ALIASLINT_MAX_FILE_SIZE", "lots")
        monkeypatch.setenv("ALIASLINT_EXCLUDED_PATTERNS", "gen/*,vendor/*")

        assert ConfigurationManager.load_env_config() == {
            "rule": {"can_miss_aliases": True},
            "analysis": {"jobs": 4, "exclude_patterns": ["gen/*", "vendor/*"]},
        }

    def test_merge_is_deep(self):
        merged = ConfigurationManager.merge_configs(
            {"analysis": {"jobs": 1, "max_file_size": 10}, "aliases": {"numpy": ["np"]}},
            {},
            {"analysis": {"jobs": 8}, "aliases": {"pandas": ["pd"]}},
        )
        assert merged == {
            "analysis": {"jobs": 8, "max_file_size": 10},
            "aliases": {"numpy": ["np"], "pandas": ["pd"]},
        }

    @pytest.mark.parametrize(
        "data",
        [
            {"aliases": ["numpy"]},
            {"aliases": {"numpy": []}},
            {"rule": {"can_miss_aliases": "yes"}},
            {"analysis": {"jobs": 0}},
            {"analysis": {"max_file_size": "big"}},
            {"analysis": {"exclude_patterns": "build/*"}},
        ],
    )
    def test_validate_rejects(self, data):
        with pytest.raises(ConfigurationError):
            ConfigurationManager.validate_config(data)


class TestAliasLintConfig:
    def test_defaults(self):
        config = AliasLintConfig.load()

        assert config.aliases == {}
        assert config.rule_settings.can_miss_aliases is False
        assert config.analysis_settings.jobs == 1
        assert config.analysis_settings.include_patterns == ["*.py"]
        assert list(config.build_policy().modules()) == []

    def test_file_then_env_precedence(self, tmp_path, monkeypatch):
        path = tmp_path / "aliaslint.yaml"
        path.write_text(
            "aliases:\n  numpy: np\n  json.decoder: [decoder, dec]\n"
            "rule:\n  can_miss_aliases: false\n"
            "analysis:\n  jobs: 2\n"
        )
        monkeypatch.setenv("ALIASLINT_CAN_MISS_ALIASES", "true")

        config = load_config()

        assert config.aliases == {"numpy": ["np"], "json.decoder": ["decoder", "dec"]}
        assert config.rule_settings.can_miss_aliases is True
        assert config.analysis_settings.jobs == 2

        policy = config.build_policy()
        assert policy.expected_aliases(("json", "decoder")) == ("decoder", "dec")
        assert policy.can_miss_aliases

    def test_from_file_ignores_env(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"analysis": {"jobs": 3}}))
        monkeypatch.setenv("ALIASLINT_JOBS", "9")

        assert AliasLintConfig.from_file(str(path)).analysis_settings.jobs == 3

    def test_explicit_missing_path(self, tmp_path):
        with pytest.raises(ConfigurationError):
            AliasLintConfig.load(config_path=str(tmp_path / "missing.yaml"))

    def test_invalid_file_fails_load(self, tmp_path):
        path = tmp_path / "aliaslint.json"
        path.write_text(json.dumps({"aliases": {"numpy": ["not valid"]}}))
        with pytest.raises(ConfigurationError):
            AliasLintConfig.load()

    @pytest.mark.parametrize("fmt,suffix", [("json", ".json"), ("yaml", ".yaml")])
    def test_to_file_roundtrip(self, tmp_path, fmt, suffix):
        config = AliasLintConfig.from_dict({"aliases": {"pandas": "pd"}, "analysis": {"jobs": 2}})
        path = tmp_path / f"out{suffix}"
        config.to_file(str(path), format=fmt)

        loaded = AliasLintConfig.from_file(str(path))
        assert loaded.to_dict() == config.to_dict()
        if fmt == "yaml":
            assert yaml.safe_load(path.read_text())["aliases"] == {"pandas": ["pd"]}

    def test_build_policy_reports_bad_aliases(self):
        config = AliasLintConfig(aliases={"numpy": ["1np"]})
        with pytest.raises(ConfigurationError):
            config.build_policy()
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_summary_lists_aliases(self):
        config = AliasLintConfig(aliases={"numpy": ["np", "n"]})
        summary = config.get_config_summary()

        assert "numpy: np, n" in summary
        assert "Jobs: 1" in summary
