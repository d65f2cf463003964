"""
Parsing configuration data structures.

Defines LanguageConfig and DeclarationQuery — the per-language rules the
structural analyzer uses to find named declarations in a syntax tree.

New languages are added via config, not code changes.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Set

# Tree-sitter node types that hold a plain declaration name
DEFAULT_NAME_NODE_TYPES = frozenset({"identifier", "type_identifier", "property_identifier"})


@dataclass
class DeclarationQuery:
    """
    Maps one tree-sitter node type to a declaration kind.

    Attributes:
        node_type: Tree-sitter AST node type (e.g., "function_declaration")
        kind: "variable", "function" or "class"
        name_field: AST field holding the declared name
    """
    node_type: str
    kind: str
    name_field: str = "name"


@dataclass
class LanguageConfig:
    """
    Configuration for analyzing declarations in one language.

    Attributes:
        name: Human-readable name (e.g., "TypeScript")
        tree_sitter_name: Grammar name for tree-sitter (e.g., "typescript")
        aliases: Language tags accepted in AnalyzerOptions.language
        extensions: File extensions this config handles
        declaration_queries: What to check
        name_node_types: Node types accepted as the name (anything else,
            e.g. a destructuring pattern, is skipped)
        name_extractor: Optional hook returning the name node for a declaration
        max_source_size: Skip sources larger than this (characters)
    """
    name: str
    tree_sitter_name: str
    aliases: Set[str] = field(default_factory=set)
    extensions: Set[str] = field(default_factory=set)
    declaration_queries: List[DeclarationQuery] = field(default_factory=list)
    name_node_types: frozenset = DEFAULT_NAME_NODE_TYPES
    name_extractor: Optional[Callable[[Any, DeclarationQuery], Optional[Any]]] = None
    max_source_size: int = 300_000

    def query_for(self, node_type: str) -> Optional[DeclarationQuery]:
        for query in self.declaration_queries:
            if query.node_type == node_type:
                return query
        return None
