"""
JavaScript language configuration for naming checks.

Declarations checked:
- variable: const/let/var declarators with a plain identifier name
- function: function, generator and method declarations
- class: class declarations
"""

from ..config import LanguageConfig, DeclarationQuery


JAVASCRIPT_QUERIES = [
    # const fooBar = 1;  (destructuring patterns are skipped by name type)
    DeclarationQuery(node_type="variable_declarator", kind="variable"),
    # function fooBar() {}
    DeclarationQuery(node_type="function_declaration", kind="function"),
    # function* fooBar() {}
    DeclarationQuery(node_type="generator_function_declaration", kind="function"),
    # class X { fooBar() {} }
    DeclarationQuery(node_type="method_definition", kind="function"),
    # class FooBar {}
    DeclarationQuery(node_type="class_declaration", kind="class"),
]


JAVASCRIPT_CONFIG = LanguageConfig(
    name="JavaScript",
    tree_sitter_name="javascript",
    aliases={"js", "jsx", "javascriptreact"},
    extensions={".js", ".jsx", ".mjs", ".cjs"},
    declaration_queries=JAVASCRIPT_QUERIES,
)
