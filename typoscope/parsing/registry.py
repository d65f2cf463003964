"""
Language Registry — Routes language tags and file extensions to configs.

Usage:
    registry = LanguageRegistry()
    registry.register(TYPESCRIPT_CONFIG)

    registry.get("ts")                     # TYPESCRIPT_CONFIG
    registry.get_for_path(Path("app.ts"))  # TYPESCRIPT_CONFIG
"""

from pathlib import Path
from typing import Dict, List, Optional

from ..core.errors import ConfigurationError
from .config import LanguageConfig


class LanguageRegistry:
    """Registry of language configurations keyed by tag and extension."""

    def __init__(self):
        self._configs: Dict[str, LanguageConfig] = {}   # name -> config
        self._tags: Dict[str, str] = {}                 # tag -> config name
        self._extension_map: Dict[str, str] = {}        # ext -> config name

    def register(self, config: LanguageConfig) -> None:
        """
        Register a language configuration.

        Raises:
            ConfigurationError: If a tag or extension already belongs to another config
        """
        tags = {config.tree_sitter_name.lower()} | {a.lower() for a in config.aliases}
        for tag in tags:
            existing = self._tags.get(tag)
            if existing and existing != config.name:
                raise ConfigurationError(
                    f"Language tag {tag} already registered to {existing}, "
                    f"cannot register to {config.name}"
                )
        for ext in config.extensions:
            existing = self._extension_map.get(ext.lower())
            if existing and existing != config.name:
                raise ConfigurationError(
                    f"Extension {ext} already registered to {existing}, "
                    f"cannot register to {config.name}"
                )

        self._configs[config.name] = config
        for tag in tags:
            self._tags[tag] = config.name
        for ext in config.extensions:
            self._extension_map[ext.lower()] = config.name

    def unregister(self, name: str) -> bool:
        """Unregister a configuration by name. Returns False if not found."""
        if name not in self._configs:
            return False
        self._tags = {t: n for t, n in self._tags.items() if n != name}
        self._extension_map = {e: n for e, n in self._extension_map.items() if n != name}
        del self._configs[name]
        return True

    def get(self, language: str) -> Optional[LanguageConfig]:
        """Config for a language tag (e.g., "typescript", "ts"), or None."""
        if not language:
            return None
        name = self._tags.get(language.lower())
        return self._configs.get(name) if name else None

    def get_for_path(self, file_path: Path) -> Optional[LanguageConfig]:
        name = self._extension_map.get(Path(file_path).suffix.lower())
        return self._configs.get(name) if name else None

    def language_for_path(self, file_path: Path) -> Optional[str]:
        """Language tag to analyze a file with, based on its extension."""
        config = self.get_for_path(file_path)
        return config.tree_sitter_name if config else None

    def supported_languages(self) -> List[str]:
        return sorted(self._tags)

    def __len__(self) -> int:
        return len(self._configs)

    def __contains__(self, language: str) -> bool:
        return self.get(language) is not None


def default_registry() -> LanguageRegistry:
    """Registry with every bundled language configuration."""
    from .languages import ALL_CONFIGS

    registry = LanguageRegistry()
    for config in ALL_CONFIGS:
        registry.register(config)
    return registry
