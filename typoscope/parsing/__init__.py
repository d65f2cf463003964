"""
Parsing module — Declaration discovery via tree-sitter.

Provides:
- LanguageConfig: Per-language declaration rules
- DeclarationQuery: AST node to declaration-kind mapping
- LanguageRegistry: Language-tag and extension routing
- SyntaxParser / TreeSitterParser: The parser collaborator

Usage:
    from typoscope.parsing import TreeSitterParser

    parser = TreeSitterParser()
    tree = parser.parse("const my_var = 1;", "typescript")
"""

from .config import LanguageConfig, DeclarationQuery, DEFAULT_NAME_NODE_TYPES
from .registry import LanguageRegistry, default_registry
from .parser import SyntaxParser, TreeSitterParser, ByteOffsets
from .languages import (
    JAVASCRIPT_CONFIG, TYPESCRIPT_CONFIG, TSX_CONFIG, PYTHON_CONFIG, ALL_CONFIGS
)

__all__ = [
    'LanguageConfig',
    'DeclarationQuery',
    'DEFAULT_NAME_NODE_TYPES',
    'LanguageRegistry',
    'default_registry',
    'SyntaxParser',
    'TreeSitterParser',
    'ByteOffsets',
    'JAVASCRIPT_CONFIG',
    'TYPESCRIPT_CONFIG',
    'TSX_CONFIG',
    'PYTHON_CONFIG',
    'ALL_CONFIGS',
]
