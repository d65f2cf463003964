"""
TypeScript language configuration for naming checks.

Extends the JavaScript declarations with type-level declarations, all of
which are checked as classes (PascalCase):
- interface Foo {}
- type Foo = ...
- enum Foo {}
- abstract class Foo {}

TSX uses a separate grammar but the same declarations.
"""

from ..config import LanguageConfig, DeclarationQuery
from .javascript import JAVASCRIPT_QUERIES


TYPESCRIPT_SPECIFIC_QUERIES = [
    DeclarationQuery(node_type="interface_declaration", kind="class"),
    DeclarationQuery(node_type="type_alias_declaration", kind="class"),
    DeclarationQuery(node_type="enum_declaration", kind="class"),
    DeclarationQuery(node_type="abstract_class_declaration", kind="class"),
]

TYPESCRIPT_QUERIES = JAVASCRIPT_QUERIES + TYPESCRIPT_SPECIFIC_QUERIES


TYPESCRIPT_CONFIG = LanguageConfig(
    name="TypeScript",
    tree_sitter_name="typescript",
    aliases={"ts"},
    extensions={".ts", ".mts", ".cts"},
    declaration_queries=TYPESCRIPT_QUERIES,
)

TSX_CONFIG = LanguageConfig(
    name="TSX",
    tree_sitter_name="tsx",
    aliases={"typescriptreact"},
    extensions={".tsx"},
    declaration_queries=TYPESCRIPT_QUERIES,
)
