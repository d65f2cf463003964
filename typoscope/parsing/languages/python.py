"""
Python language configuration for naming checks.

Declarations checked:
- variable: simple assignments whose target is a bare name (`x = 1`);
  attribute and tuple targets are skipped
- function: def / async def
- class: class definitions

Python code usually wants enforce_snake_case with PascalCase classes.
"""

from ..config import LanguageConfig, DeclarationQuery


PYTHON_QUERIES = [
    DeclarationQuery(node_type="assignment", kind="variable", name_field="left"),
    DeclarationQuery(node_type="function_definition", kind="function"),
    DeclarationQuery(node_type="class_definition", kind="class"),
]


PYTHON_CONFIG = LanguageConfig(
    name="Python",
    tree_sitter_name="python",
    aliases={"py"},
    extensions={".py", ".pyi"},
    declaration_queries=PYTHON_QUERIES,
    name_node_types=frozenset({"identifier"}),
)
