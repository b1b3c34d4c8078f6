"""
Configuration system for AliasLint

Provides configuration management with support for files and environment variables.
Includes validation, default value handling, and configuration merging.
"""

import os
import json
import yaml
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any
import logging

from .analysis.policy import AliasPolicy, PolicyError

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


class ConfigurationManager:
    """Manages configuration loading, validation, and merging."""

    DEFAULT_CONFIG_PATHS = [
        "aliaslint.json",
        "aliaslint.yaml",
        "aliaslint.yml",
        ".aliaslint.json",
        ".aliaslint.yaml",
        ".aliaslint.yml",
        os.path.expanduser("~/.aliaslint.json"),
        os.path.expanduser("~/.aliaslint.yaml"),
    ]

    @staticmethod
    def find_config_file(search_paths: Optional[List[str]] = None) -> Optional[str]:
        """Find the first existing configuration file."""
        paths = search_paths or ConfigurationManager.DEFAULT_CONFIG_PATHS

        for path in paths:
            if os.path.exists(path):
                return path
        return None

    @staticmethod
    def load_config_file(config_path: str) -> Dict[str, Any]:
        """Load configuration from file (JSON or YAML)."""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if config_path.endswith((".yaml", ".yml")):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid configuration file format: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")
        return data

    @staticmethod
    def load_env_config() -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}

        rule = {}
        if os.getenv("ALIASLINT_CAN_MISS_ALIASES"):
            rule["can_miss_aliases"] = os.getenv("ALIASLINT_CAN_MISS_ALIASES").lower() == "true"

        if rule:
            config["rule"] = rule

        analysis = {}
        if os.getenv("ALIASLINT_MAX_FILE_SIZE"):
            try:
                analysis["max_file_size"] = int(os.getenv("ALIASLINT_MAX_FILE_SIZE"))
            except ValueError:
                logger.warning("Invalid ALIASLINT_MAX_FILE_SIZE value, using default")

        if os.getenv("ALIASLINT_JOBS"):
            try:
                analysis["jobs"] = int(os.getenv("ALIASLINT_JOBS"))
            except ValueError:
                logger.warning("Invalid ALIASLINT_JOBS value, using default")

        if os.getenv("ALIASLINT_EXCLUDED_PATTERNS"):
            analysis["exclude_patterns"] = os.getenv("ALIASLINT_EXCLUDED_PATTERNS").split(",")

        if analysis:
            config["analysis"] = analysis

        return config

    @staticmethod
    def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
        """Merge multiple configuration dictionaries, with later ones taking precedence."""
        result = {}

        for config in configs:
            if not config:
                continue

            for key, value in config.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = ConfigurationManager.merge_configs(result[key], value)
                else:
                    result[key] = value

        return result

    @staticmethod
    def validate_config(config_data: Dict[str, Any]) -> None:
        """Validate configuration data."""
        if "aliases" in config_data:
            aliases = config_data["aliases"]
            if not isinstance(aliases, dict):
                raise ConfigurationError("aliases must be a mapping of module -> alias list")
            try:
                AliasPolicy.from_mapping(aliases)
            except PolicyError as e:
                raise ConfigurationError(f"aliases: {e}")

        if "rule" in config_data:
            rule = config_data["rule"]
            if not isinstance(rule, dict):
                raise ConfigurationError("rule must be a mapping")
            if "can_miss_aliases" in rule and not isinstance(rule["can_miss_aliases"], bool):
                raise ConfigurationError("can_miss_aliases must be a boolean")

        if "analysis" in config_data:
            analysis = config_data["analysis"]
            if not isinstance(analysis, dict):
                raise ConfigurationError("analysis must be a mapping")

            if "max_file_size" in analysis and (
                not isinstance(analysis["max_file_size"], int) or analysis["max_file_size"] <= 0
            ):
                raise ConfigurationError("max_file_size must be positive")

            if "jobs" in analysis and (not isinstance(analysis["jobs"], int) or analysis["jobs"] <= 0):
                raise ConfigurationError("jobs must be positive")

            for key in ("include_patterns", "exclude_patterns"):
                if key in analysis and not isinstance(analysis[key], list):
                    raise ConfigurationError(f"{key} must be a list of glob patterns")


@dataclass
class RuleConfig:
    """Configuration for the alias rule."""

    can_miss_aliases: bool = False


@dataclass
class AnalysisConfig:
    """Configuration for project scanning."""

    max_file_size: int = 1024 * 1024  # 1MB
    include_patterns: List[str] = field(default_factory=lambda: ["*.py"])
    exclude_patterns: List[str] = field(
        default_factory=lambda: [
            "build/*",
            "dist/*",
        ]
    )
    jobs: int = 1


@dataclass
class AliasLintConfig:
    """Main configuration class for AliasLint."""

    aliases: Dict[str, List[str]] = field(default_factory=dict)
    rule_settings: RuleConfig = field(default_factory=RuleConfig)
    analysis_settings: AnalysisConfig = field(default_factory=AnalysisConfig)

    @classmethod
    def default(cls) -> "AliasLintConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        use_env: bool = True,
        validate: bool = True,
    ) -> "AliasLintConfig":
        """
        Load configuration from multiple sources with precedence:
        1. Default values
        2. Configuration file
        3. Environment variables (if use_env=True)

        Args:
            config_path: Path to configuration file. If None, searches for default files.
            use_env: Whether to load environment variables
            validate: Whether to validate the configuration
        """
        configs_to_merge = []

        file_config = {}
        if config_path:
            if not os.path.exists(config_path):
                raise ConfigurationError(f"Configuration file not found: {config_path}")
            file_config = ConfigurationManager.load_config_file(config_path)
        else:
            found_config = ConfigurationManager.find_config_file()
            if found_config:
                file_config = ConfigurationManager.load_config_file(found_config)
                logger.info(f"Loaded configuration from: {found_config}")

        configs_to_merge.append(file_config)

        if use_env:
            env_config = ConfigurationManager.load_env_config()
            configs_to_merge.append(env_config)

        merged_config = ConfigurationManager.merge_configs(*configs_to_merge)

        if validate:
            ConfigurationManager.validate_config(merged_config)

        return cls.from_dict(merged_config)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AliasLintConfig":
        """Build a configuration from an already merged dictionary."""
        aliases: Dict[str, List[str]] = {}
        for module, spec in (data.get("aliases") or {}).items():
            aliases[str(module)] = [spec] if isinstance(spec, str) else list(spec)

        rule_config = RuleConfig()
        for key, value in (data.get("rule") or {}).items():
            if hasattr(rule_config, key):
                setattr(rule_config, key, value)

        analysis_config = AnalysisConfig()
        for key, value in (data.get("analysis") or {}).items():
            if hasattr(analysis_config, key):
                setattr(analysis_config, key, value)

        return cls(
            aliases=aliases,
            rule_settings=rule_config,
            analysis_settings=analysis_config,
        )

    @classmethod
    def from_file(cls, config_path: str) -> "AliasLintConfig":
        """Load configuration from a JSON or YAML file."""
        return cls.load(config_path=config_path, use_env=False)

    @classmethod
    def from_env(cls) -> "AliasLintConfig":
        """Load configuration from environment variables."""
        return cls.load(config_path=None, use_env=True)

    def build_policy(self) -> AliasPolicy:
        """Build the alias policy described by this configuration."""
        try:
            return AliasPolicy.from_mapping(
                self.aliases, can_miss_aliases=self.rule_settings.can_miss_aliases
            )
        except PolicyError as e:
            raise ConfigurationError(f"aliases: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "aliases": {module: list(aliases) for module, aliases in self.aliases.items()},
            "rule": asdict(self.rule_settings),
            "analysis": asdict(self.analysis_settings),
        }

    def to_file(self, config_path: str, format: str = "json") -> None:
        """
        Save configuration to file.

        Args:
            config_path: Path to save configuration
            format: File format ('json' or 'yaml')
        """
        config_data = self.to_dict()

        try:
            with open(config_path, "w", encoding="utf-8") as f:
                if format.lower() in ("yaml", "yml"):
                    yaml.dump(config_data, f, default_flow_style=False, indent=2)
                else:
                    json.dump(config_data, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration file: {e}")

    def validate(self) -> None:
        """Validate the current configuration."""
        ConfigurationManager.validate_config(self.to_dict())

    def get_config_summary(self) -> str:
        """Get a human-readable summary of the configuration."""
        alias_lines = "\n".join(
            f"  - {module}: {', '.join(aliases)}" for module, aliases in sorted(self.aliases.items())
        ) or "  (none)"
        return f"""AliasLint Configuration Summary:
Aliases:
{alias_lines}

Rule:
  - Can miss aliases: {self.rule_settings.can_miss_aliases}

Analysis:
  - Max file size: {self.analysis_settings.max_file_size} bytes
  - Include patterns: {self.analysis_settings.include_patterns}
  - Exclude patterns: {len(self.analysis_settings.exclude_patterns)} patterns
  - Jobs: {self.analysis_settings.jobs}
"""


# Convenience function mirroring AliasLintConfig.load
def load_config(config_path: Optional[str] = None, use_env: bool = True) -> AliasLintConfig:
    """
    Load configuration from file and/or environment variables.

    Args:
        config_path: Path to configuration file
        use_env: Whether to load environment variables

    Returns:
        AliasLintConfig: Loaded configuration
    """
    return AliasLintConfig.load(config_path=config_path, use_env=use_env)
