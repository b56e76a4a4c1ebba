"""
End-to-end rendering tests

Tests the full pipeline: fragment source → Parser → Compiler → text,
with the include normalizer installed by the Renderer.
"""

import importlib

import pytest
from loguru import logger

from fixincludes.config import AppSettings
from fixincludes.lib.compiler import Compiler
from fixincludes.lib.directives import DirectiveRegistry
from fixincludes.lib.includes import IncludeNotFoundError, IncludeSyntaxError
from fixincludes.lib import log
from fixincludes.lib.lexer import FragmentLexer
from fixincludes.lib.log import log_enable
from fixincludes.lib.normalize import IncludeNormalizer
from fixincludes.lib.parser import ASTNode
from fixincludes.lib.renderer import Renderer
from pygments.token import Keyword


@pytest.fixture
def site(tmp_path):
    includes = tmp_path / "_includes"
    includes.mkdir()
    (includes / "header.html").write_text(
        '<header class="site">\n  <h1>.var{include.title}</h1>\n</header>\n', encoding="utf-8"
    )
    (includes / "footer.html").write_text("<footer>.bf{fin}</footer>", encoding="utf-8")
    (includes / "page-nav.html").write_text(".include{cached footer.html}", encoding="utf-8")
    return tmp_path


class TestCachedIncludes:
    """Test that the reserved keyword is neutralized"""

    def test_cached_matches_plain_include(self, site):
        renderer = Renderer(includes_dir=str(site / "_includes"))

        cached = renderer.render('.include{cached header.html title="Home"}')
        plain = renderer.render('.include{header.html title="Home"}')

        assert cached == plain
        assert cached == '<header class="site">\n  <h1>Home</h1>\n</header>\n'

    def test_cached_matches_unmodified_directive(self, site):
        """Output equals the standard directive on a registry without the normalizer"""
        normalized = Renderer(includes_dir=str(site / "_includes"))
        standard = Renderer(includes_dir=str(site / "_includes"), normalize_includes=False)

        assert normalized.render(".include{cached footer.html}") == standard.render(".include{footer.html}")

    def test_cached_inside_included_fragment(self, site):
        renderer = Renderer(includes_dir=str(site / "_includes"))
        assert renderer.render(".include{cached page-nav.html}") == "<footer><strong>fin</strong></footer>"

    def test_document_with_text(self, site):
        renderer = Renderer(includes_dir=str(site / "_includes"))
        source = '<html>\n.include{cached header.html title="Docs"}<main>.em{body}</main>\n.include{footer.html}\n</html>\n'

        assert renderer.render(source) == (
            '<html>\n<header class="site">\n  <h1>Docs</h1>\n</header>\n'
            '<main><em>body</em></main>\n<footer><strong>fin</strong></footer>\n</html>\n'
        )

    def test_missing_include_error_unchanged(self, site):
        renderer = Renderer(includes_dir=str(site / "_includes"))

        with pytest.raises(IncludeNotFoundError, match="'missing.html'"):
            renderer.render(".include{cached missing.html}")

    def test_double_keyword_only_strips_once(self, site):
        renderer = Renderer(includes_dir=str(site / "_includes"))

        with pytest.raises(IncludeSyntaxError):
            renderer.render(".include{cached cached footer.html}")

    def test_renderers_are_independent(self, site):
        normalized = Renderer(includes_dir=str(site / "_includes"))
        standard = Renderer(includes_dir=str(site / "_includes"), normalize_includes=False)

        assert isinstance(normalized.registry.get("include"), IncludeNormalizer)
        assert not isinstance(standard.registry.get("include"), IncludeNormalizer)
        assert normalized.render(".include{cached footer.html}")
        with pytest.raises(IncludeSyntaxError):
            standard.render(".include{cached footer.html}")

    def test_custom_keyword(self, site):
        renderer = Renderer(includes_dir=str(site / "_includes"), keyword="lazy")

        assert renderer.render(".include{lazy footer.html}") == "<footer><strong>fin</strong></footer>"
        with pytest.raises(IncludeSyntaxError):
            renderer.render(".include{cached footer.html}")

    def test_file_render(self, site):
        page = site / "index.html"
        page.write_text(".include{cached footer.html}\n", encoding="utf-8")
        renderer = Renderer(includes_dir=str(site / "_includes"))

        assert renderer.file_render(page) == "<footer><strong>fin</strong></footer>\n"

    def test_rewrite_logged_at_trace_verbosity(self, site):
        messages = []
        sink_id = log_enable(messages.append, format="{message}")
        try:
            Renderer(includes_dir=str(site / "_includes"), verbosity=3).render(".include{cached footer.html}")
        finally:
            logger.remove(sink_id)
            logger.disable("fixincludes")

        assert any("Stripped 'cached'" in message for message in messages)


class TestStandardDirectives:
    """Test the rest of the built-in directive set"""

    def test_formatting_with_modifiers(self):
        result = Renderer().render(".h1{.class{title} .style{color: red} Hello}")
        assert result == '<h1 class="title" style="color: red">Hello</h1>'

    def test_comment_removed(self):
        assert Renderer().render("a.comment{hidden}b") == "ab"

    def test_meta_and_var(self):
        source = ".meta{\n  title: Home\n  tags: [a, b]\n}\n<h1>.var{page.title}</h1>.var{page.tags.1}"
        assert Renderer().render(source) == "\n<h1>Home</h1>b"

    def test_invalid_meta_yaml_ignored(self):
        assert Renderer().render(".meta{\n  title: [unclosed\n}ok") == "ok"

    def test_variables_argument(self):
        assert Renderer().render(".var{site.name}", {"site": {"name": "Docs"}}) == "Docs"

    def test_inline_code(self):
        assert Renderer().render(".code{x = 1}") == "<code>x = 1</code>"

    def test_highlighted_code_block(self):
        result = Renderer().render(".code{.syntax{language=python}\nprint('hi')\n}")

        assert 'class="highlight"' in result
        assert "print" in result

    def test_code_block_shows_include_unrendered(self):
        """Directives inside highlighted code are shown, not resolved"""
        result = Renderer().render(".code{.syntax{language=fragment}\n.include{cached header.html}\n}")

        assert "cached" in result
        assert "<header" not in result


class TestRegistry:
    """Test the directive registry's interception point"""

    def test_handler_wrap_scoped_to_registry(self):
        registry = DirectiveRegistry()
        registry.handler_wrap("bf", lambda handler: lambda node, compiler: handler(node, compiler).upper())

        node = ASTNode(directive="bf", modifiers={}, content="x", children=[], line_number=1)
        assert registry.get("bf")(node, None) == "<STRONG>X</STRONG>"
        assert DirectiveRegistry().get("bf")(node, None) == "<strong>x</strong>"

    def test_default_get_survives_wrap(self):
        registry = DirectiveRegistry()
        original = registry.get("em")
        registry.handler_wrap("em", lambda handler: lambda node, compiler: "")

        assert registry.default_get("em") is original
        assert registry.get("em") is not original

    def test_handler_wrap_unknown(self):
        with pytest.raises(KeyError):
            DirectiveRegistry().handler_wrap("nope", lambda handler: handler)

    def test_handler_wrap_follows_aliases(self):
        registry = DirectiveRegistry()
        registry.handler_wrap("underline", lambda handler: lambda node, compiler: "wrapped")

        assert registry.get("u") is registry.get("underline")
        assert Renderer(registry=registry).render(".u{x}") == "wrapped"


class TestCompiler:
    """Test compiler behaviour outside the parser"""

    def test_unknown_directive_fallback(self):
        node = ASTNode(directive="nope", modifiers={}, content="x", children=[], line_number=4)
        assert Compiler([node], strict_mode=False).render() == '<div class="directive-nope">x</div>'

    def test_unknown_directive_strict(self):
        node = ASTNode(directive="nope", modifiers={}, content="x", children=[], line_number=4)
        with pytest.raises(SyntaxError, match="line 4"):
            Compiler([node], strict_mode=True).render()

    def test_node_content_restored(self):
        node = ASTNode(directive="bf", modifiers={}, content="x", children=[], line_number=1)
        Compiler([node]).render()
        assert node.content == "x"

    def test_variable_lookup_missing(self):
        compiler = Compiler([], variables={"page": {"title": "Home"}})

        assert compiler.variable_lookup("page.title") == "Home"
        assert compiler.variable_lookup("page.title.x") is None
        assert compiler.variable_lookup("nothing") is None


class TestSettingsAndLexer:
    """Test configuration and highlighting support"""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("FIXINCLUDES_INCLUDE_MODIFIER", "lazy")
        monkeypatch.setenv("FIXINCLUDES_INCLUDE_MAX_DEPTH", "3")

        settings = AppSettings()
        assert settings.include_modifier == "lazy"
        assert settings.include_max_depth == 3

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FIXINCLUDES_INCLUDE_MODIFIER", raising=False)
        settings = AppSettings(_env_file=None)

        assert settings.include_modifier == "cached"
        assert settings.includes_dir == "_includes"

    def test_lexer_marks_modifier_keyword(self):
        tokens = list(FragmentLexer().get_tokens(".include{cached header.html}"))
        assert (Keyword.Pseudo, "cached") in tokens


class TestLogging:
    """Test how the package shares loguru with the application"""

    def test_import_keeps_application_sinks(self):
        messages = []
        sink_id = logger.add(messages.append, format="{message}")
        try:
            importlib.reload(log)
            logger.info("after import")
        finally:
            logger.remove(sink_id)

        assert [message.strip() for message in messages] == ["after import"]

    def test_silent_until_enabled(self, site):
        messages = []
        sink_id = logger.add(messages.append, format="{message}")
        try:
            Renderer(includes_dir=str(site / "_includes"), verbosity=3).render(".include{cached footer.html}")
        finally:
            logger.remove(sink_id)

        assert messages == []

    def test_renderer_does_not_stay_connected(self, site):
        renderer = Renderer(includes_dir=str(site / "_includes"), verbosity=3)
        assert log._program_state.get() is not renderer

        page = site / "index.html"
        page.write_text("x", encoding="utf-8")
        renderer.file_render(page)
        assert log._program_state.get() is not renderer

    def test_compiler_disconnects_after_error(self, site):
        renderer = Renderer(includes_dir=str(site / "_includes"))

        with pytest.raises(IncludeNotFoundError):
            renderer.render(".include{missing.html}")
        assert log._program_state.get() is None
