"""
Tests for parsing and the StructuralAnalyzer

These tests validate:
- LanguageRegistry routes tags, aliases and extensions to configs
- ByteOffsets maps tree-sitter byte offsets back to character offsets
- StructuralAnalyzer flags exactly the declared name, with a rename
- Parse failures and unsupported languages produce no findings

Most tests use hand-built trees; tests marked requires_tree_sitter parse
real source with tree-sitter-language-pack.
"""

from pathlib import Path

import pytest

from typoscope.config import AnalyzerOptions, NamingOptions
from typoscope.core.errors import ConfigurationError, ParseError
from typoscope.core.findings import Severity, SourceTag
from typoscope.detectors.structural import StructuralAnalyzer
from typoscope.parsing.config import LanguageConfig
from typoscope.parsing.parser import ByteOffsets, TreeSitterParser
from typoscope.parsing.registry import LanguageRegistry, default_registry
from tests.factories import FakeNode, FakeParser, declaration, program

# Check if tree-sitter-language-pack is available
try:
    import tree_sitter_language_pack  # noqa: F401
    TREE_SITTER_AVAILABLE = True
except ImportError:
    TREE_SITTER_AVAILABLE = False

# Skip marker for tree-sitter dependent tests
requires_tree_sitter = pytest.mark.skipif(
    not TREE_SITTER_AVAILABLE,
    reason="tree-sitter-language-pack not installed"
)


# =============================================================================
# LanguageRegistry
# =============================================================================

class TestLanguageRegistry:
    """Tag and extension routing."""

    def test_default_languages(self):
        registry = default_registry()

        assert registry.get("typescript").name == "TypeScript"
        assert registry.get("ts").name == "TypeScript"
        assert registry.get("JS").name == "JavaScript"
        assert registry.get("tsx").name == "TSX"
        assert registry.get("py").name == "Python"
        assert len(registry) == 4

    def test_unknown_language(self):
        registry = default_registry()

        assert registry.get("cobol") is None
        assert registry.get("") is None
        assert "cobol" not in registry
        assert "javascript" in registry

    def test_get_for_path(self):
        registry = default_registry()

        assert registry.get_for_path(Path("src/app.tsx")).name == "TSX"
        assert registry.language_for_path(Path("main.PY")) == "python"
        assert registry.get_for_path(Path("README.md")) is None

    def test_tag_conflict(self):
        registry = LanguageRegistry()
        registry.register(LanguageConfig(name="A", tree_sitter_name="a", aliases={"x"}))

        with pytest.raises(ConfigurationError):
            registry.register(LanguageConfig(name="B", tree_sitter_name="b", aliases={"x"}))

    def test_extension_conflict(self):
        registry = LanguageRegistry()
        registry.register(LanguageConfig(name="A", tree_sitter_name="a", extensions={".a"}))

        with pytest.raises(ConfigurationError):
            registry.register(LanguageConfig(name="B", tree_sitter_name="b", extensions={".A"}))

    def test_unregister(self):
        registry = default_registry()

        assert registry.unregister("Python")
        assert registry.get("py") is None
        assert registry.get_for_path(Path("x.py")) is None
        assert not registry.unregister("Python")

    def test_supported_languages(self):
        languages = default_registry().supported_languages()

        assert "typescript" in languages
        assert "js" in languages
        assert languages == sorted(languages)


# =============================================================================
# ByteOffsets
# =============================================================================

class TestByteOffsets:
    """UTF-8 byte offset to character offset mapping."""

    def test_ascii_identity(self):
        offsets = ByteOffsets("const x = 1;")

        assert offsets.to_char(6) == 6

    def test_multibyte(self):
        source = "// é\nconst x"
        offsets = ByteOffsets(source)

        # "é" is two bytes, so everything after it shifts by one
        assert offsets.to_char(3) == 3
        assert offsets.to_char(5) == 4
        assert offsets.to_char(12) == 11
        assert source[offsets.to_char(12)] == "x"

    def test_end_of_source(self):
        source = "ü"
        assert ByteOffsets(source).to_char(2) == 1


# =============================================================================
# TreeSitterParser
# =============================================================================

class TestTreeSitterParser:
    """Failure modes that need no grammar."""

    def test_unsupported_language(self):
        with pytest.raises(ParseError) as exc_info:
            TreeSitterParser().parse("x", "cobol")

        assert exc_info.value.language == "cobol"

    def test_source_too_large(self):
        registry = LanguageRegistry()
        registry.register(LanguageConfig(name="Tiny", tree_sitter_name="javascript", max_source_size=10))

        with pytest.raises(ParseError):
            TreeSitterParser(registry).parse("x" * 11, "javascript")

    def test_supports(self):
        parser = TreeSitterParser()

        assert parser.supports("ts")
        assert not parser.supports("cobol")


# =============================================================================
# StructuralAnalyzer (hand-built trees)
# =============================================================================

class TestStructuralAnalyzer:
    """Naming checks over fake syntax trees."""

    def analyze(self, source, *declarations, options=None):
        parser = FakeParser(program(source, *declarations))
        return StructuralAnalyzer(parser).analyze(source, options or AnalyzerOptions())

    def test_snake_case_variable(self):
        """my_var becomes myVar; the finding spans exactly the name."""
        source = "const my_var = 1;"

        findings = self.analyze(source, declaration("variable_declarator", source, "my_var"))

        assert len(findings) == 1
        finding = findings[0]
        assert finding.original == "my_var"
        assert (finding.start, finding.end) == (6, 12)
        assert finding.suggestion == "myVar"
        assert finding.source_tag == SourceTag.STRUCTURAL
        assert finding.severity == Severity.WARNING
        assert finding.rule_id == "naming-convention-camel"

    def test_conforming_names(self):
        source = "const myVar = 1; class MyClass {}"

        findings = self.analyze(
            source,
            declaration("variable_declarator", source, "myVar"),
            declaration("class_declaration", source, "MyClass", "type_identifier"),
        )

        assert findings == []

    def test_class_must_be_pascal(self):
        source = "class my_class {}"

        findings = self.analyze(
            source, declaration("class_declaration", source, "my_class", "type_identifier")
        )

        assert [(f.original, f.suggestion, f.rule_id) for f in findings] == [
            ("my_class", "MyClass", "naming-convention-pascal"),
        ]

    def test_interface_checked_as_class(self):
        source = "interface user_props {}"

        findings = self.analyze(
            source, declaration("interface_declaration", source, "user_props", "type_identifier")
        )

        assert findings[0].suggestion == "UserProps"

    def test_function(self):
        source = "function Do_thing() {}"

        findings = self.analyze(source, declaration("function_declaration", source, "Do_thing"))

        assert findings[0].suggestion == "doThing"

    def test_constant_variable_allowed(self):
        source = "const MAX_SIZE = 10;"

        findings = self.analyze(source, declaration("variable_declarator", source, "MAX_SIZE"))

        assert findings == []

    def test_constant_case_function_flagged(self):
        """The constant exemption only covers variables."""
        source = "function MAX_SIZE() {}"

        findings = self.analyze(source, declaration("function_declaration", source, "MAX_SIZE"))

        assert findings[0].suggestion == "maxSize"

    def test_snake_enforcement(self):
        source = "const myVar = 1;"
        options = AnalyzerOptions(naming=NamingOptions(enforce_camel_case=False, enforce_snake_case=True))

        findings = self.analyze(
            source, declaration("variable_declarator", source, "myVar"), options=options
        )

        assert [(f.suggestion, f.rule_id) for f in findings] == [("my_var", "naming-convention-snake")]

    def test_disabled_checks(self):
        source = "const my_var = 1; class my_class {}"
        options = AnalyzerOptions(naming=NamingOptions(check_variable_naming=False, enforce_pascal_case=False))

        findings = self.analyze(
            source,
            declaration("variable_declarator", source, "my_var"),
            declaration("class_declaration", source, "my_class", "type_identifier"),
            options=options,
        )

        assert findings == []

    def test_destructuring_pattern_skipped(self):
        """Only plain identifiers count as declared names."""
        source = "const { my_var } = obj;"

        findings = self.analyze(
            source, declaration("variable_declarator", source, "{ my_var }", "object_pattern")
        )

        assert findings == []

    def test_multibyte_source_offsets(self):
        """Byte offsets from the tree are mapped back to character offsets."""
        source = "// é\nconst my_var = 1;"

        findings = self.analyze(source, declaration("variable_declarator", source, "my_var"))

        assert len(findings) == 1
        assert (findings[0].start, findings[0].end) == (11, 17)
        assert source[findings[0].start:findings[0].end] == "my_var"

    def test_nested_declarations(self):
        source = "class Foo { bad_method() {} }"
        method = declaration("method_definition", source, "bad_method", "property_identifier")
        body = FakeNode("class_body", 10, len(source), children=[method])
        cls = declaration("class_declaration", source, "Foo", "type_identifier")
        cls.children.append(body)

        findings = self.analyze(source, cls)

        assert [(f.original, f.suggestion) for f in findings] == [("bad_method", "badMethod")]

    def test_findings_in_document_order(self):
        source = "const first_one = 1; const second_one = 2;"

        findings = self.analyze(
            source,
            declaration("variable_declarator", source, "first_one"),
            declaration("variable_declarator", source, "second_one"),
        )

        assert [f.original for f in findings] == ["first_one", "second_one"]

    def test_parse_error_yields_nothing(self):
        analyzer = StructuralAnalyzer(FakeParser(error="grammar missing"))

        assert analyzer.analyze("const my_var = 1;", AnalyzerOptions()) == []

    def test_unsupported_language_not_parsed(self):
        parser = FakeParser(error="should not be called")
        analyzer = StructuralAnalyzer(parser)

        assert analyzer.analyze("x", AnalyzerOptions(language="cobol")) == []
        assert parser.calls == []

    def test_configure_sets_default_naming(self):
        analyzer = StructuralAnalyzer(FakeParser())
        naming = NamingOptions(enforce_camel_case=False, enforce_snake_case=True)

        analyzer.configure(AnalyzerOptions(naming=naming))

        assert analyzer.naming is naming


# =============================================================================
# StructuralAnalyzer (tree-sitter)
# =============================================================================

@requires_tree_sitter
class TestStructuralAnalyzerTreeSitter:
    """Real grammars from tree-sitter-language-pack."""

    def test_typescript(self):
        source = (
            "const my_var = 1;\n"
            "function Do_thing() {}\n"
            "class my_class {}\n"
            "interface user_props {}\n"
            "const MAX_SIZE = 10;\n"
        )

        findings = StructuralAnalyzer(TreeSitterParser()).analyze(source, AnalyzerOptions(language="typescript"))

        assert [(f.original, f.suggestion) for f in findings] == [
            ("my_var", "myVar"),
            ("Do_thing", "doThing"),
            ("my_class", "MyClass"),
            ("user_props", "UserProps"),
        ]
        for finding in findings:
            assert source[finding.start:finding.end] == finding.original

    def test_python_snake_case(self):
        source = "def doThing():\n    myValue = 1\n\nclass my_class:\n    pass\n"
        options = AnalyzerOptions(
            language="python",
            naming=NamingOptions(enforce_camel_case=False, enforce_snake_case=True),
        )

        findings = StructuralAnalyzer(TreeSitterParser()).analyze(source, options)

        assert [(f.original, f.suggestion) for f in findings] == [
            ("doThing", "do_thing"),
            ("myValue", "my_value"),
            ("my_class", "MyClass"),
        ]

    def test_unicode_offsets(self):
        source = "// naïve café\nconst my_var = 'ü';\n"

        findings = StructuralAnalyzer(TreeSitterParser()).analyze(source, AnalyzerOptions(language="javascript"))

        assert len(findings) == 1
        assert source[findings[0].start:findings[0].end] == "my_var"

    def test_syntax_errors_still_analyzed(self):
        source = "const my_var = ;\n"

        findings = StructuralAnalyzer(TreeSitterParser()).analyze(source, AnalyzerOptions(language="javascript"))

        assert all(source[f.start:f.end] == f.original for f in findings)
