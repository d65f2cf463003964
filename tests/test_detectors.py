"""
Tests for the lexical, spelling and naming detectors

These tests validate:
- LexicalScanner matches whole words from its corpus, case-insensitively
- SpellingDetector splits identifiers and suggests close dictionary words
- Naming predicates and converters agree with each other
- Every finding's range points at its `original` text
"""

import pytest

from typoscope.config import AnalyzerOptions
from typoscope.core.dictionary import DictionaryEntry, DictionaryStore, levenshtein, max_suggestion_distance
from typoscope.core.findings import Severity, SourceTag
from typoscope.detectors.lexical import LexicalScanner, compile_corpus
from typoscope.detectors.naming import (
    check_name, is_camel_case, is_constant_case, is_pascal_case, is_snake_case,
    split_affixes, split_words, to_camel_case, to_pascal_case, to_snake_case,
)
from typoscope.detectors.spelling import SpellingDetector, match_case


# =============================================================================
# LexicalScanner
# =============================================================================

class TestLexicalScanner:
    """Known-bad token matching."""

    def test_single_typo(self, lexical):
        """One misspelling, one lexical finding with exact offsets."""
        findings = lexical.analyze("funtion myFunc() {}")

        assert len(findings) == 1
        finding = findings[0]
        assert (finding.start, finding.end) == (0, 7)
        assert finding.original == "funtion"
        assert finding.source_tag == SourceTag.LEXICAL
        assert finding.severity == Severity.WARNING
        assert finding.suggestion is None
        assert finding.rule_id == "common-typo"

    def test_multiple_typos(self, lexical):
        source = "funtion foo() { consle.log() }"

        findings = lexical.analyze(source)

        assert [(f.original, f.start, f.end) for f in findings] == [
            ("funtion", 0, 7),
            ("consle", 16, 22),
        ]

    def test_whole_words_only(self, lexical):
        """Corpus tokens embedded in longer words are not matched."""
        assert lexical.analyze("const athnes = thneed;") == []

    def test_punctuation_boundaries(self, lexical):
        findings = lexical.analyze("x.thne(y)")

        assert [f.original for f in findings] == ["thne"]

    def test_case_insensitive(self, lexical):
        findings = lexical.analyze("Funtion CONSLE")

        assert [f.original for f in findings] == ["Funtion", "CONSLE"]

    def test_case_sensitive_corpus(self):
        scanner = LexicalScanner(corpus=["teh"], case_sensitive=True)

        findings = scanner.analyze("Teh teh")

        assert [(f.original, f.start) for f in findings] == [("teh", 4)]

    def test_empty_source(self, lexical):
        assert lexical.analyze("") == []

    def test_empty_corpus(self):
        assert compile_corpus([]) is None
        assert LexicalScanner(corpus=[]).analyze("funtion") == []

    def test_context_is_display_only(self, lexical):
        source = "let a = 1;\nfuntion foo() {}"
        finding = lexical.analyze(source)[0]

        assert "funtion" in finding.context
        assert source[finding.start:finding.end] == "funtion"

    def test_ranges_point_at_original(self, lexical):
        source = "lenght of the resposne thne retrun eror; docment.getElement()"

        for finding in lexical.analyze(source):
            assert source[finding.start:finding.end] == finding.original

    def test_deterministic(self, lexical):
        source = "funtion foo() { consle.log(lenght) }"

        assert lexical.analyze(source) == lexical.analyze(source)


# =============================================================================
# SpellingDetector
# =============================================================================

class TestSpellingDetector:
    """Dictionary-backed unknown-word detection."""

    def test_suggests_dictionary_word(self, spelling):
        findings = spelling.analyze("funtion foo() { consle.log() }")

        assert [(f.original, f.start, f.end, f.suggestion) for f in findings] == [
            ("funtion", 0, 7, "function"),
            ("consle", 16, 22, "console"),
        ]
        assert all(f.rule_id == "unknown-word" for f in findings)

    def test_splits_camel_case(self, spelling):
        """Sub-words of an identifier are checked on their own."""
        findings = spelling.analyze("const getLenght = 1;")

        assert len(findings) == 1
        finding = findings[0]
        assert finding.original == "Lenght"
        assert (finding.start, finding.end) == (9, 15)
        assert finding.suggestion == "Length"

    def test_known_words_not_flagged(self, spelling):
        assert spelling.analyze("console.log(value); return result;") == []

    def test_short_words_skipped(self, spelling):
        assert spelling.analyze("x = fo + ba") == []

    def test_unknown_word_without_suggestion_not_flagged(self, spelling):
        """Likely a name, not a typo."""
        assert spelling.analyze("const zyxwvuts = 1;") == []

    def test_auto_correction_preferred(self):
        store = DictionaryStore()
        store.load("base", ["weird", "wired"])
        store.load("fixes", [DictionaryEntry("wierd", auto_correct_to="weird")])

        findings = SpellingDetector(store).analyze("Wierd wierd")

        assert [(f.original, f.suggestion, f.rule_id) for f in findings] == [
            ("Wierd", "Weird", "auto-correct"),
            ("wierd", "weird", "auto-correct"),
        ]

    def test_language_scoped_words(self):
        store = DictionaryStore()
        store.load("base", ["args"])
        store.load("python", [DictionaryEntry("kwargs", language="python")])
        detector = SpellingDetector(store)

        assert detector.analyze("kwargs", AnalyzerOptions(language="python")) == []

    def test_suggestions_within_distance_bound(self, spelling):
        source = "funtion lenght recieve paramater dependancy utilty arguement"

        findings = spelling.analyze(source)

        assert findings
        for finding in findings:
            bound = max_suggestion_distance(finding.original)
            assert levenshtein(finding.original, finding.suggestion) <= bound
            assert source[finding.start:finding.end] == finding.original


class TestMatchCase:
    """Casing transfer from the original token."""

    def test_lower(self):
        assert match_case("consle", "console") == "console"

    def test_capitalized(self):
        assert match_case("Consle", "console") == "Console"

    def test_upper(self):
        assert match_case("CONSLE", "console") == "CONSOLE"

    def test_single_upper_letter_is_capitalized(self):
        assert match_case("X", "why") == "Why"


# =============================================================================
# Naming
# =============================================================================

class TestNamingPredicates:
    """Casing predicates."""

    @pytest.mark.parametrize("name", ["myVar", "x", "parseHTML2"])
    def test_camel(self, name):
        assert is_camel_case(name)

    @pytest.mark.parametrize("name", ["MyVar", "my_var", "my-var"])
    def test_not_camel(self, name):
        assert not is_camel_case(name)

    def test_pascal(self):
        assert is_pascal_case("MyClass")
        assert not is_pascal_case("myClass")

    def test_snake(self):
        assert is_snake_case("my_var")
        assert not is_snake_case("myVar")
        assert not is_snake_case("my__var")

    def test_constant(self):
        assert is_constant_case("MAX_SIZE")
        assert not is_constant_case("Max_Size")


class TestNamingConverters:
    """Word splitting and conversion."""

    def test_split_words(self):
        assert split_words("myHTTPServer") == ["my", "HTTP", "Server"]
        assert split_words("my_var-name") == ["my", "var", "name"]

    def test_to_camel(self):
        assert to_camel_case("my_var") == "myVar"
        assert to_camel_case("MyClass") == "myClass"

    def test_to_pascal(self):
        assert to_pascal_case("my_class") == "MyClass"

    def test_to_snake(self):
        assert to_snake_case("myHTTPServer") == "my_http_server"

    def test_affixes(self):
        assert split_affixes("__init__") == ("__", "init", "__")
        assert split_affixes("$scope") == ("$", "scope", "")


class TestCheckName:
    """Suggested renames."""

    def test_snake_to_camel(self):
        assert check_name("my_var", "camel") == "myVar"

    def test_conforming_name(self):
        assert check_name("myVar", "camel") is None

    def test_affixes_preserved(self):
        assert check_name("_private_var", "camel") == "_privateVar"
        assert check_name("__init__", "snake") is None

    def test_constant_exemption(self):
        assert check_name("MAX_SIZE", "camel", allow_constant=True) is None
        assert check_name("MAX_SIZE", "camel") == "maxSize"

    def test_pascal(self):
        assert check_name("my_class", "pascal") == "MyClass"

    def test_snake(self):
        assert check_name("myVar", "snake") == "my_var"

    def test_lossy_conversion_skipped(self):
        """Names with characters outside ASCII words are left alone."""
        assert check_name("grüße_welt", "camel") is None

    def test_unknown_convention(self):
        with pytest.raises(KeyError):
            check_name("x", "kebab")
