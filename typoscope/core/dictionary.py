"""
DictionaryStore — Named sets of known-good words with fuzzy suggestion

Holds any number of named dictionaries and exposes one merged lookup view.

Concurrency model:
- Mutations (load/add/remove/unload) serialize on a single lock and
  publish a freshly built, immutable snapshot.
- Lookups (contains/suggest/auto_correction) read whichever snapshot is
  current and never take the lock, so they never block on a writer.

Suggestion search is a full scan of the merged view using rapidfuzz's
Levenshtein distance with a cutoff, so each comparison stops early once
the bound is exceeded.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union, TYPE_CHECKING

from rapidfuzz.distance import Levenshtein

from .errors import DictionaryError

if TYPE_CHECKING:
    from .persistence import DictionaryRepository

logger = logging.getLogger(__name__)

DEFAULT_USER_DICTIONARY = "user"


def levenshtein(a: str, b: str) -> int:
    """Edit distance with unit cost for insertion, deletion and substitution."""
    return Levenshtein.distance(a, b)


def max_suggestion_distance(word: str) -> int:
    """Largest edit distance a suggestion may have from `word`."""
    return max(1, len(word) // 3)


@dataclass(frozen=True)
class DictionaryEntry:
    """
    One dictionary word plus optional metadata.

    Attributes:
        word: The word itself
        language: Restricts the entry to one language (None = any)
        domain: Restricts the entry to one domain (None = any)
        case_sensitive: Require the exact casing to match
        auto_correct_to: Marks `word` as a known misspelling with a preferred fix
    """
    word: str
    language: Optional[str] = None
    domain: Optional[str] = None
    case_sensitive: bool = False
    auto_correct_to: Optional[str] = None

    @property
    def lookup_key(self) -> str:
        return self.word if self.case_sensitive else self.word.casefold()

    def validate(self) -> Optional[str]:
        """Return an error message, or None if the entry is well formed."""
        if not isinstance(self.word, str) or not self.word.strip():
            return "entry has an empty word"
        if any(ch.isspace() for ch in self.word):
            return f"entry '{self.word}' contains whitespace"
        if self.auto_correct_to is not None and not str(self.auto_correct_to).strip():
            return f"entry '{self.word}' has an empty auto-correction"
        return None

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {"word": self.word}
        if self.language:
            data["language"] = self.language
        if self.domain:
            data["domain"] = self.domain
        if self.case_sensitive:
            data["case_sensitive"] = True
        if self.auto_correct_to:
            data["auto_correct_to"] = self.auto_correct_to
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> 'DictionaryEntry':
        return cls(
            word=data.get("word", ""),
            language=data.get("language"),
            domain=data.get("domain"),
            case_sensitive=bool(data.get("case_sensitive", False)),
            auto_correct_to=data.get("auto_correct_to"),
        )


EntryLike = Union[DictionaryEntry, str]


@dataclass(frozen=True)
class _Snapshot:
    """Immutable merged view of every loaded dictionary."""
    folded: frozenset = frozenset()
    exact: frozenset = frozenset()
    entries: Mapping[str, Tuple[DictionaryEntry, ...]] = field(default_factory=dict)
    corrections: Mapping[str, str] = field(default_factory=dict)
    # (display form, casefolded form), sorted by display form
    candidates: Tuple[Tuple[str, str], ...] = ()


class DictionaryStore:
    """
    Named dictionaries merged into one case-folded lookup view.

    Usage:
        store = DictionaryStore()
        store.load("programming", PROGRAMMING_WORDS)
        store.contains("Console")      # True
        store.suggest("consle", 3)     # ['console']
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._dictionaries: Dict[str, Dict[str, DictionaryEntry]] = {}
        self._snapshot = _Snapshot()

    # =========================================================================
    # Mutation (exclusive)
    # =========================================================================

    def load(self, name: str, entries: Iterable[EntryLike]) -> int:
        """
        Create or replace a named dictionary.

        Args:
            name: Dictionary name
            entries: DictionaryEntry objects or plain words

        Returns:
            Number of distinct entries loaded

        Raises:
            DictionaryError: If the name is empty or any entry is malformed.
                Nothing is changed in that case.
        """
        if not name or not str(name).strip():
            raise DictionaryError("dictionary name must not be empty")

        table: Dict[str, DictionaryEntry] = {}
        for index, raw in enumerate(entries):
            entry = self._coerce(raw, name, index)
            table[entry.lookup_key] = entry

        with self._lock:
            self._dictionaries[name] = table
            self._rebuild()

        logger.info("Loaded dictionary '%s' with %d entries", name, len(table))
        return len(table)

    def add(self, word: EntryLike, dictionary_name: str = DEFAULT_USER_DICTIONARY) -> None:
        """Add one word to a named dictionary, creating it if needed."""
        entry = self._coerce(word, dictionary_name)
        with self._lock:
            self._dictionaries.setdefault(dictionary_name, {})[entry.lookup_key] = entry
            self._rebuild()

    def remove(self, word: str, dictionary_name: str = DEFAULT_USER_DICTIONARY) -> bool:
        """
        Remove one word from a named dictionary.

        Returns False (without raising) when the word or dictionary is absent.
        """
        with self._lock:
            table = self._dictionaries.get(dictionary_name)
            if not table:
                return False
            key = word if word in table else word.casefold()
            if key not in table:
                return False
            del table[key]
            self._rebuild()
        return True

    def unload(self, name: str) -> bool:
        """Drop a whole named dictionary. Returns False if it was not loaded."""
        with self._lock:
            if name not in self._dictionaries:
                return False
            del self._dictionaries[name]
            self._rebuild()
        return True

    # =========================================================================
    # Lookup (lock-free, snapshot based)
    # =========================================================================

    def contains(
        self,
        word: str,
        language: Optional[str] = None,
        domain: Optional[str] = None,
    ) -> bool:
        """
        Case-folded membership test against the merged view.

        With language/domain given, only entries that are unrestricted or
        restricted to that language/domain count.
        """
        if not word:
            return False
        snap = self._snapshot
        folded = word.casefold()

        if language is None and domain is None:
            return folded in snap.folded or word in snap.exact

        for entry in snap.entries.get(folded, ()):
            if entry.case_sensitive and entry.word != word:
                continue
            if language is not None and entry.language not in (None, language):
                continue
            if domain is not None and entry.domain not in (None, domain):
                continue
            return True
        return False

    def suggest(self, word: str, limit: int = 5) -> List[str]:
        """
        Fuzzy suggestions ranked by (edit distance, word).

        Keeps candidates within max(1, len(word) // 3) edits of the
        case-folded query.
        """
        if not word or limit <= 0:
            return []
        snap = self._snapshot
        query = word.casefold()
        bound = max_suggestion_distance(query)

        scored: List[Tuple[int, str]] = []
        for display, folded in snap.candidates:
            distance = Levenshtein.distance(query, folded, score_cutoff=bound)
            if distance <= bound:
                scored.append((distance, display))

        scored.sort()
        return [display for _, display in scored[:limit]]

    def auto_correction(self, word: str) -> Optional[str]:
        """Preferred correction for a known misspelling, if one is registered."""
        if not word:
            return None
        snap = self._snapshot
        return snap.corrections.get(word) or snap.corrections.get(word.casefold())

    # =========================================================================
    # Introspection and persistence
    # =========================================================================

    def names(self) -> List[str]:
        """Names of all loaded dictionaries."""
        with self._lock:
            return sorted(self._dictionaries)

    def entries(self, name: str) -> List[DictionaryEntry]:
        """Entries of one dictionary, sorted by word."""
        with self._lock:
            table = self._dictionaries.get(name)
            if table is None:
                raise DictionaryError(f"dictionary '{name}' is not loaded", dictionary=name)
            return sorted(table.values(), key=lambda e: e.word)

    def __len__(self) -> int:
        snap = self._snapshot
        return len(snap.folded) + len(snap.exact)

    def load_from(self, repository: 'DictionaryRepository', name: str) -> int:
        """Load a dictionary through a persistence collaborator."""
        return self.load(name, repository.load(name))

    def save_to(self, repository: 'DictionaryRepository', name: str) -> None:
        """Persist one dictionary through a persistence collaborator."""
        repository.save(name, self.entries(name))

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _coerce(raw: EntryLike, name: str, index: Optional[int] = None) -> DictionaryEntry:
        if isinstance(raw, str):
            entry = DictionaryEntry(word=raw)
        elif isinstance(raw, DictionaryEntry):
            entry = raw
        else:
            where = f" at index {index}" if index is not None else ""
            raise DictionaryError(
                f"dictionary '{name}': unsupported entry type {type(raw).__name__}{where}",
                dictionary=name,
            )

        problem = entry.validate()
        if problem:
            where = f" (index {index})" if index is not None else ""
            raise DictionaryError(f"dictionary '{name}': {problem}{where}", dictionary=name)
        return entry

    def _rebuild(self) -> None:
        """Rebuild the merged snapshot. Caller holds the lock."""
        folded = set()
        exact = set()
        by_word: Dict[str, List[DictionaryEntry]] = {}
        corrections: Dict[str, str] = {}

        for name in sorted(self._dictionaries):
            for entry in self._dictionaries[name].values():
                if entry.auto_correct_to:
                    corrections[entry.lookup_key] = entry.auto_correct_to
                    continue
                if entry.case_sensitive:
                    exact.add(entry.word)
                else:
                    folded.add(entry.lookup_key)
                by_word.setdefault(entry.word.casefold(), []).append(entry)

        display = set(folded) | exact
        candidates = tuple(sorted((word, word.casefold()) for word in display))

        self._snapshot = _Snapshot(
            folded=frozenset(folded),
            exact=frozenset(exact),
            entries={key: tuple(value) for key, value in by_word.items()},
            corrections=corrections,
            candidates=candidates,
        )
