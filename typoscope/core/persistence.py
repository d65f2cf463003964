"""
Dictionary persistence — Load/save boundary for named dictionaries

The engine only needs two operations from its host:
- load(name) -> [DictionaryEntry]
- save(name, entries)

JsonDictionaryRepository is the bundled implementation: one JSON file per
dictionary, `<directory>/<name>.json`, holding a list of entry objects.
Plain strings are accepted in place of entry objects when reading.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List

import orjson

from .dictionary import DictionaryEntry
from .errors import DictionaryError

_SAFE_NAME = re.compile(r'^[A-Za-z0-9_.-]+$')


class DictionaryRepository(ABC):
    """Storage medium for named dictionaries."""

    @abstractmethod
    def load(self, name: str) -> List[DictionaryEntry]:
        """Read one dictionary. Raises DictionaryError on failure."""
        pass

    @abstractmethod
    def save(self, name: str, entries: Iterable[DictionaryEntry]) -> None:
        """Write one dictionary. Raises DictionaryError on failure."""
        pass

    @abstractmethod
    def list_names(self) -> List[str]:
        """Names of all stored dictionaries."""
        pass


class JsonDictionaryRepository(DictionaryRepository):
    """One JSON file per dictionary under a directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, name: str) -> Path:
        if not name or not _SAFE_NAME.match(name) or name.startswith('.'):
            raise DictionaryError(f"invalid dictionary name: {name!r}", dictionary=name)
        return self.directory / f"{name}.json"

    def load(self, name: str) -> List[DictionaryEntry]:
        path = self._path(name)
        try:
            raw = orjson.loads(path.read_bytes())
        except FileNotFoundError:
            raise DictionaryError(f"dictionary '{name}' not found at {path}", dictionary=name)
        except (OSError, orjson.JSONDecodeError) as e:
            raise DictionaryError(f"cannot read dictionary '{name}': {e}", dictionary=name)

        if isinstance(raw, dict):
            raw = raw.get("entries", [])
        if not isinstance(raw, list):
            raise DictionaryError(
                f"dictionary '{name}' must contain a list of entries", dictionary=name
            )

        entries = []
        for index, item in enumerate(raw):
            if isinstance(item, str):
                entries.append(DictionaryEntry(word=item))
            elif isinstance(item, dict):
                entries.append(DictionaryEntry.from_dict(item))
            else:
                raise DictionaryError(
                    f"dictionary '{name}': malformed entry at index {index}",
                    dictionary=name,
                )
        return entries

    def save(self, name: str, entries: Iterable[DictionaryEntry]) -> None:
        path = self._path(name)
        payload = {"name": name, "entries": [e.to_dict() for e in entries]}
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
        except OSError as e:
            raise DictionaryError(f"cannot write dictionary '{name}': {e}", dictionary=name)

    def list_names(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))
