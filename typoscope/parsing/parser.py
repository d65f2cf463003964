"""
Parser collaborator — parse(source, language) -> syntax tree | ParseError

SyntaxParser is the only thing the structural analyzer depends on. The
bundled TreeSitterParser uses tree-sitter-language-pack grammars. Tests
substitute a fake that returns hand-built nodes with the same shape:

    node.type, node.start_byte, node.end_byte, node.children,
    node.child_by_field_name(name)

Offsets in the tree are UTF-8 byte offsets; ByteOffsets maps them back to
character offsets into the original string.
"""

import logging
import threading
from bisect import bisect_left
from itertools import accumulate
from typing import Any, Dict, Optional, Protocol, TYPE_CHECKING

from ..core.errors import ParseError
from .registry import LanguageRegistry, default_registry

if TYPE_CHECKING:
    from tree_sitter import Parser, Tree

logger = logging.getLogger(__name__)


class SyntaxParser(Protocol):
    """Anything that can turn source text into a tree-sitter shaped tree."""

    def parse(self, source: str, language: str) -> Any:
        """Return an object with a `root_node`, or raise ParseError."""
        ...


class ByteOffsets:
    """Maps UTF-8 byte offsets to character offsets for one source string."""

    def __init__(self, source: str):
        self._ascii = source.isascii()
        self._starts = None
        if not self._ascii:
            # _starts[i] is the byte offset where character i begins
            self._starts = list(accumulate((len(ch.encode('utf-8')) for ch in source), initial=0))

    def to_char(self, byte_offset: int) -> int:
        if self._ascii:
            return byte_offset
        return bisect_left(self._starts, byte_offset)


class TreeSitterParser:
    """
    Parses source with tree-sitter grammars from tree-sitter-language-pack.

    Parsers are created lazily per grammar and reused. tree-sitter parsers
    are not safe to share between threads, so parse calls are serialized.
    """

    def __init__(self, registry: Optional[LanguageRegistry] = None):
        self.registry = registry if registry is not None else default_registry()
        self._parsers: Dict[str, 'Parser'] = {}
        self._lock = threading.Lock()

    def supports(self, language: str) -> bool:
        return self.registry.get(language) is not None

    def _get_parser(self, tree_sitter_name: str) -> 'Parser':
        """Get parser for a grammar (lazy-loaded). Caller holds the lock."""
        if tree_sitter_name in self._parsers:
            return self._parsers[tree_sitter_name]

        try:
            from tree_sitter_language_pack import get_parser
        except ImportError:
            raise ParseError("tree-sitter-language-pack is not installed", language=tree_sitter_name)

        try:
            parser = get_parser(tree_sitter_name)
        except Exception as e:
            raise ParseError(f"no grammar for {tree_sitter_name}: {e}", language=tree_sitter_name)

        self._parsers[tree_sitter_name] = parser
        return parser

    def parse(self, source: str, language: str) -> 'Tree':
        config = self.registry.get(language)
        if config is None:
            raise ParseError(f"unsupported language: {language}", language=language)
        if len(source) > config.max_source_size:
            raise ParseError(
                f"source too large for structural analysis ({len(source)} chars)",
                language=language,
            )

        with self._lock:
            parser = self._get_parser(config.tree_sitter_name)
            try:
                tree = parser.parse(source.encode('utf-8'))
            except Exception as e:
                raise ParseError(f"{config.name} parse failed: {e}", language=language)

        if tree.root_node.has_error:
            logger.debug("%s source has syntax errors; analyzing recovered tree", config.name)
        return tree
