"""
Configuration — Layered settings for analysis and providers

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.typoscope/config.yaml)
  3. User config (~/.typoscope/config.yaml)
  4. Defaults

API keys are NEVER stored in config files.
They must be provided via environment variables.
"""

import logging
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .core.errors import ConfigurationError
from .core.findings import Severity, SourceTag

logger = logging.getLogger(__name__)


# Supported semantic providers and their defaults
PROVIDERS = {
    "claude": {
        "env_key": "ANTHROPIC_API_KEY",
        "default_model": "claude-3-5-haiku-20241022",
        "models": [
            "claude-sonnet-4-20250514",
            "claude-3-7-sonnet-20250219",
            "claude-3-5-haiku-20241022",
        ]
    },
    "openai": {
        "env_key": "OPENAI_API_KEY",
        "default_model": "gpt-5-mini",
        "models": [
            "gpt-5.2",
            "gpt-5-mini",
            "gpt-5-nano",
        ]
    },
}

DEFAULT_PROVIDER = "claude"

DEFAULT_PRIORITY = ("structural", "semantic", "hybrid", "lexical")


@dataclass
class SemanticConfig:
    """Semantic provider configuration."""
    provider: str = DEFAULT_PROVIDER
    model: Optional[str] = None  # None = use provider default

    @property
    def effective_model(self) -> str:
        """Get model, falling back to provider default."""
        if self.model:
            return self.model
        return PROVIDERS.get(self.provider, {}).get("default_model", "")

    @property
    def api_key_env(self) -> str:
        return PROVIDERS.get(self.provider, {}).get("env_key", "")

    @property
    def api_key(self) -> Optional[str]:
        """Get API key from environment. Never stored."""
        env = self.api_key_env
        return os.environ.get(env) if env else None

    @property
    def is_available(self) -> bool:
        return bool(self.api_key)

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.provider not in PROVIDERS:
            valid = ", ".join(PROVIDERS.keys())
            return f"Unknown provider '{self.provider}'. Valid: {valid}"
        return None


@dataclass(frozen=True)
class NamingOptions:
    """Which declarations the structural analyzer checks, and against which casing."""
    check_variable_naming: bool = True
    check_function_naming: bool = True
    check_class_naming: bool = True
    enforce_camel_case: bool = True
    enforce_pascal_case: bool = True
    enforce_snake_case: bool = False
    allow_constant_case: bool = True   # UPPER_SNAKE variables are left alone

    @property
    def member_convention(self) -> Optional[str]:
        """Casing required for variables and functions, or None."""
        if self.enforce_snake_case:
            return "snake"
        if self.enforce_camel_case:
            return "camel"
        return None

    @property
    def type_convention(self) -> Optional[str]:
        """Casing required for classes and other type declarations, or None."""
        return "pascal" if self.enforce_pascal_case else None

    def to_dict(self) -> Dict[str, bool]:
        return {
            "check_variable_naming": self.check_variable_naming,
            "check_function_naming": self.check_function_naming,
            "check_class_naming": self.check_class_naming,
            "enforce_camel_case": self.enforce_camel_case,
            "enforce_pascal_case": self.enforce_pascal_case,
            "enforce_snake_case": self.enforce_snake_case,
            "allow_constant_case": self.allow_constant_case,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'NamingOptions':
        defaults = cls()
        return cls(**{
            key: bool(data.get(key, getattr(defaults, key)))
            for key in defaults.to_dict()
        })


@dataclass(frozen=True)
class AnalyzerOptions:
    """
    Per-call analysis configuration.

    Passed by value; the orchestrator swaps the whole object on
    reconfiguration and never mutates it.
    """
    language: str = "typescript"
    detectors: Mapping[str, bool] = field(default_factory=dict)  # absent = enabled
    enable_semantic: bool = False
    semantic_context_scan: bool = False
    ignore_patterns: Tuple[str, ...] = ()
    auto_fix_threshold: str = "info"
    detector_priority: Tuple[str, ...] = DEFAULT_PRIORITY
    augment_cap: int = 5
    augment_severity: str = "error"
    naming: NamingOptions = field(default_factory=NamingOptions)

    def __post_init__(self):
        object.__setattr__(self, 'detectors', dict(self.detectors))
        object.__setattr__(self, 'ignore_patterns', tuple(self.ignore_patterns))
        object.__setattr__(self, 'detector_priority', tuple(self.detector_priority))

    def is_enabled(self, detector_id: str) -> bool:
        return self.detectors.get(detector_id, True)

    def priority_rank(self, tag: SourceTag) -> int:
        """Position of a source tag in the priority order (lower wins)."""
        value = SourceTag(tag).value
        try:
            return self.detector_priority.index(value)
        except ValueError:
            return len(self.detector_priority)

    def ignore_regexes(self):
        return [re.compile(p) for p in self.ignore_patterns]

    def with_changes(self, **changes: Any) -> 'AnalyzerOptions':
        return replace(self, **changes)

    def validate(self) -> None:
        """Raise ConfigurationError if the options are structurally invalid."""
        if not self.language or not isinstance(self.language, str):
            raise ConfigurationError("language must be a non-empty string")

        for name, value in (("auto_fix_threshold", self.auto_fix_threshold),
                            ("augment_severity", self.augment_severity)):
            try:
                Severity(value)
            except ValueError:
                valid = ", ".join(s.value for s in Severity)
                raise ConfigurationError(f"Unknown severity '{value}' for {name}. Valid: {valid}")

        for pattern in self.ignore_patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ConfigurationError(f"Invalid ignore pattern {pattern!r}: {e}")

        for tag in self.detector_priority:
            try:
                SourceTag(tag)
            except ValueError:
                valid = ", ".join(t.value for t in SourceTag)
                raise ConfigurationError(f"Unknown source tag '{tag}' in detector_priority. Valid: {valid}")

        if self.augment_cap < 0:
            raise ConfigurationError("augment_cap must be >= 0")

        if self.naming.enforce_camel_case and self.naming.enforce_snake_case:
            raise ConfigurationError("enforce_camel_case and enforce_snake_case are mutually exclusive")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "language": self.language,
            "detectors": dict(self.detectors),
            "enable_semantic": self.enable_semantic,
            "semantic_context_scan": self.semantic_context_scan,
            "ignore_patterns": list(self.ignore_patterns),
            "auto_fix_threshold": self.auto_fix_threshold,
            "detector_priority": list(self.detector_priority),
            "augment_cap": self.augment_cap,
            "augment_severity": self.augment_severity,
            "naming": self.naming.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'AnalyzerOptions':
        defaults = cls()
        return cls(
            language=data.get("language", defaults.language),
            detectors={str(k): bool(v) for k, v in (data.get("detectors") or {}).items()},
            enable_semantic=bool(data.get("enable_semantic", False)),
            semantic_context_scan=bool(data.get("semantic_context_scan", False)),
            ignore_patterns=tuple(data.get("ignore_patterns") or ()),
            auto_fix_threshold=data.get("auto_fix_threshold", defaults.auto_fix_threshold),
            detector_priority=tuple(data.get("detector_priority") or DEFAULT_PRIORITY),
            augment_cap=int(data.get("augment_cap", defaults.augment_cap)),
            augment_severity=data.get("augment_severity", defaults.augment_severity),
            naming=NamingOptions.from_dict(data.get("naming") or {}),
        )


@dataclass
class Config:
    """Application configuration."""
    semantic: SemanticConfig = field(default_factory=SemanticConfig)
    analysis: AnalyzerOptions = field(default_factory=AnalyzerOptions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "semantic": {
                "provider": self.semantic.provider,
                "model": self.semantic.model
            },
            "analysis": self.analysis.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        semantic_data = data.get("semantic") or {}
        return cls(
            semantic=SemanticConfig(
                provider=semantic_data.get("provider", DEFAULT_PROVIDER),
                model=semantic_data.get("model")
            ),
            analysis=AnalyzerOptions.from_dict(data.get("analysis") or {}),
        )


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment (TYPOSCOPE_LANGUAGE, TYPOSCOPE_SEMANTIC_PROVIDER, TYPOSCOPE_SEMANTIC_MODEL)
      2. Project config (.typoscope/config.yaml)
      3. User config (~/.typoscope/config.yaml)
      4. Defaults
    """

    CONFIG_DIR = ".typoscope"
    CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None, user_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.user_dir = Path(user_dir) if user_dir else Path.home() / self.CONFIG_DIR
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.CONFIG_DIR / self.CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.user_dir / self.CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("TYPOSCOPE_LANGUAGE"):
            config_data.setdefault("analysis", {})["language"] = os.environ["TYPOSCOPE_LANGUAGE"]
        if os.environ.get("TYPOSCOPE_SEMANTIC_PROVIDER"):
            config_data.setdefault("semantic", {})["provider"] = os.environ["TYPOSCOPE_SEMANTIC_PROVIDER"]
        if os.environ.get("TYPOSCOPE_SEMANTIC_MODEL"):
            config_data.setdefault("semantic", {})["model"] = os.environ["TYPOSCOPE_SEMANTIC_MODEL"]

        try:
            self._config = Config.from_dict(config_data)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Ignoring malformed configuration values: %s", e)
            self._config = Config()
        return self._config

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring malformed config file %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config file %s: top level must be a mapping", path)
            return {}
        return data

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self._write(self.project_config_path, config)

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self._write(self.user_config_path, config)

    def _write(self, path: Path, config: Config):
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)
        self._config = config

    def set(self, key: str, value: Any, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "semantic.provider", "analysis.language")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        parts = key.split(".")
        if len(parts) < 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'semantic.provider')"

        section = parts[0]
        if section not in ("semantic", "analysis"):
            return f"Unknown section: {section}. Valid: semantic, analysis"

        data = self.load().to_dict()
        target = data
        for part in parts[:-1]:
            if not isinstance(target.get(part), dict):
                return f"Unknown setting: {key}"
            target = target[part]
        if parts[-1] not in target:
            return f"Unknown setting: {key}"
        if isinstance(target[parts[-1]], bool) and isinstance(value, str):
            value = value.lower() in ('true', '1', 'yes')
        target[parts[-1]] = value

        try:
            config = Config.from_dict(data)
            config.analysis.validate()
        except ConfigurationError as e:
            return str(e)
        except (TypeError, ValueError) as e:
            return f"Invalid value for {key}: {e}"

        error = config.semantic.validate()
        if error:
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)
        return None

    def get(self, key: str) -> Optional[Any]:
        """Get a configuration value."""
        config = self.load()
        if key == "semantic.model":
            return config.semantic.effective_model

        value: Any = config.to_dict()
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return None
            value = value[part]
        return value

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
