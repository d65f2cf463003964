"""
StructuralAnalyzer — Naming-convention checks over a syntax tree

Walks the declarations a LanguageConfig names and checks each declared
name against the casing NamingOptions requires:
- variables and functions: snake_case if enforced, else camelCase if enforced
- classes, interfaces, type aliases, enums: PascalCase if enforced

Each finding spans exactly the declared name, not the whole statement.

Never raises past its own boundary: unsupported languages and parse
failures produce no findings.
"""

import logging
from typing import List, Optional

from ..config import AnalyzerOptions, NamingOptions
from ..core.errors import ParseError
from ..core.findings import Finding, Severity, SourceTag
from ..parsing.config import DeclarationQuery, LanguageConfig
from ..parsing.parser import ByteOffsets, SyntaxParser
from ..parsing.registry import LanguageRegistry, default_registry
from .base import Detector, context_snippet
from .naming import check_name

logger = logging.getLogger(__name__)


def rule_id_for(convention: str) -> str:
    return f"naming-convention-{convention}"


class StructuralAnalyzer(Detector):
    """Flags declarations whose names break the configured casing rules."""

    id = "structural"
    name = "Naming conventions"
    source_tag = SourceTag.STRUCTURAL

    def __init__(
        self,
        parser: SyntaxParser,
        registry: Optional[LanguageRegistry] = None,
        naming: Optional[NamingOptions] = None,
    ):
        self.parser = parser
        if registry is None:
            registry = getattr(parser, "registry", None)
        self.registry = registry if registry is not None else default_registry()
        self._naming = naming or NamingOptions()

    @property
    def naming(self) -> NamingOptions:
        return self._naming

    def configure(self, options: AnalyzerOptions) -> None:
        self._naming = options.naming

    def analyze(self, source: str, options: AnalyzerOptions = None) -> List[Finding]:
        naming = options.naming if options is not None else self._naming
        language = options.language if options is not None else "typescript"

        config = self.registry.get(language)
        if config is None:
            logger.debug("No structural rules for language %s", language)
            return []

        try:
            tree = self.parser.parse(source, language)
        except ParseError as e:
            logger.warning("Structural analysis skipped: %s", e)
            return []

        offsets = ByteOffsets(source)
        findings = []

        # Iterative pre-order walk; deep trees must not hit the recursion limit
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            query = config.query_for(node.type)
            if query is not None:
                finding = self._check_declaration(node, query, config, naming, source, offsets)
                if finding is not None:
                    findings.append(finding)
            stack.extend(reversed(node.children))

        logger.debug("Structural analysis found %d naming issues", len(findings))
        return findings

    def _check_declaration(
        self,
        node,
        query: DeclarationQuery,
        config: LanguageConfig,
        naming: NamingOptions,
        source: str,
        offsets: ByteOffsets,
    ) -> Optional[Finding]:
        convention = self._convention_for(query.kind, naming)
        if convention is None:
            return None

        if config.name_extractor is not None:
            name_node = config.name_extractor(node, query)
        else:
            name_node = node.child_by_field_name(query.name_field)
        if name_node is None or name_node.type not in config.name_node_types:
            return None

        start = offsets.to_char(name_node.start_byte)
        end = offsets.to_char(name_node.end_byte)
        name = source[start:end]
        if not name:
            return None

        suggestion = check_name(
            name,
            convention,
            allow_constant=naming.allow_constant_case and query.kind == "variable",
        )
        if suggestion is None:
            return None

        return Finding(
            original=name,
            start=start,
            end=end,
            severity=Severity.WARNING,
            source_tag=SourceTag.STRUCTURAL,
            suggestion=suggestion,
            context=context_snippet(source, start, end),
            rule_id=rule_id_for(convention),
        )

    @staticmethod
    def _convention_for(kind: str, naming: NamingOptions) -> Optional[str]:
        if kind == "variable":
            return naming.member_convention if naming.check_variable_naming else None
        if kind == "function":
            return naming.member_convention if naming.check_function_naming else None
        if kind == "class":
            return naming.type_convention if naming.check_class_naming else None
        return None
