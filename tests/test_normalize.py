"""
Include argument normalization tests

Tests the prefix strip itself, the wrapping handler and its installation
on a single registry.
"""

import pytest

from fixincludes.lib.parser import ASTNode
from fixincludes.lib.directives import DirectiveRegistry
from fixincludes.lib.includes import include_handler
from fixincludes.lib.normalize import argument_normalize, IncludeNormalizer, normalizer_install


def include_node(argument: str) -> ASTNode:
    return ASTNode(directive="include", modifiers={}, content=argument, children=[], line_number=1)


class TestArgumentNormalize:
    """Test the prefix strip"""

    def test_prefix_stripped(self):
        assert argument_normalize("cached header.html") == "header.html"

    def test_parameters_untouched(self):
        argument = 'cached nav.html title="Home  Page"  active=page.section'
        assert argument_normalize(argument) == 'nav.html title="Home  Page"  active=page.section'

    def test_surrounding_whitespace_kept(self):
        """Only the keyword and its space go; the rest is byte for byte"""
        assert argument_normalize("  cached header.html \n") == "  header.html \n"

    def test_only_keyword_and_space(self):
        assert argument_normalize("cached ") == ""

    def test_keyword_without_space(self):
        assert argument_normalize("cachedfoo") == "cachedfoo"
        assert argument_normalize("cached") == "cached"

    def test_keyword_followed_by_tab(self):
        """The keyword must be followed by a space character"""
        assert argument_normalize("cached\theader.html") == "cached\theader.html"

    def test_keyword_not_at_start(self):
        assert argument_normalize("foo cached bar") == "foo cached bar"
        assert argument_normalize("dir/cached header.html") == "dir/cached header.html"

    def test_only_first_occurrence(self):
        assert argument_normalize("cached cached x") == "cached x"

    def test_only_ascii_whitespace_trimmed(self):
        """A non-breaking space is content, so the keyword is not at the start"""
        assert argument_normalize("\xa0cached x") == "\xa0cached x"
        assert argument_normalize("\t\x00cached x") == "\t\x00x"

    def test_whitespace_only(self):
        assert argument_normalize("   ") == "   "
        assert argument_normalize("") == ""

    def test_plain_argument_identity(self):
        argument = " header.html  title='x' "
        assert argument_normalize(argument) is argument

    def test_custom_keyword(self):
        assert argument_normalize("lazy footer.html", keyword="lazy") == "footer.html"
        assert argument_normalize("cached footer.html", keyword="lazy") == "cached footer.html"

    def test_keyword_from_settings(self, monkeypatch):
        from fixincludes.config import appsettings

        monkeypatch.setattr(appsettings, "include_modifier", "lazy")
        assert argument_normalize("lazy footer.html") == "footer.html"
        assert argument_normalize("cached footer.html") == "cached footer.html"


class TestIncludeNormalizer:
    """Test the wrapping handler"""

    def test_delegates_normalized_argument(self):
        received = []

        def default_handler(node, compiler):
            received.append(node.content)
            return "rendered"

        normalizer = IncludeNormalizer(default_handler)
        node = include_node("cached header.html")

        assert normalizer(node, None) == "rendered"
        assert received == ["header.html"]
        assert node.content == "header.html"

    def test_passes_unmodified_argument_through(self):
        received = []
        normalizer = IncludeNormalizer(lambda node, compiler: received.append(node.content) or "")

        normalizer(include_node("foo cached bar"), None)
        assert received == ["foo cached bar"]

    def test_result_returned_unchanged(self):
        sentinel = object()
        normalizer = IncludeNormalizer(lambda node, compiler: sentinel)

        assert normalizer(include_node("cached x"), None) is sentinel

    def test_errors_propagate(self):
        def failing_handler(node, compiler):
            raise FileNotFoundError(node.content)

        normalizer = IncludeNormalizer(failing_handler)

        with pytest.raises(FileNotFoundError, match="^missing.html$"):
            normalizer(include_node("cached missing.html"), None)

    def test_compiler_passed_through(self):
        seen = []
        normalizer = IncludeNormalizer(lambda node, compiler: seen.append(compiler) or "")
        marker = object()

        normalizer(include_node("x"), marker)
        assert seen == [marker]


class TestNormalizerInstall:
    """Test explicit installation on one registry"""

    def test_wraps_standard_include(self):
        registry = DirectiveRegistry()
        normalizer = normalizer_install(registry)

        assert registry.get("include") is normalizer
        assert normalizer.default_handler is include_handler
        assert registry.default_get("include") is include_handler

    def test_other_registries_unaffected(self):
        patched = DirectiveRegistry()
        normalizer_install(patched)

        untouched = DirectiveRegistry()
        assert untouched.get("include") is include_handler

    def test_idempotent(self):
        registry = DirectiveRegistry()
        first = normalizer_install(registry)
        second = normalizer_install(registry)

        assert first is second
        assert first.default_handler is include_handler

    def test_keyword_option(self):
        registry = DirectiveRegistry()
        normalizer = normalizer_install(registry, keyword="lazy")

        assert normalizer.keyword == "lazy"

    def test_unknown_directive(self):
        with pytest.raises(KeyError):
            normalizer_install(DirectiveRegistry(), directive="nonexistent")

    def test_other_directive(self):
        """Any directive with an argument string can be normalized"""
        registry = DirectiveRegistry()
        normalizer_install(registry, directive="tt")

        node = ASTNode(directive="tt", modifiers={}, content="cached x", children=[], line_number=1)
        assert registry.get("tt")(node, None) == "<tt>x</tt>"
