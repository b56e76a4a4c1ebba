"""
Built-in directives and the registry that holds them

Every handler has the signature ``handler(node, compiler) -> str``: it gets
the ASTNode (children already rendered into node.content) and the Compiler
doing the render.
"""

import textwrap
from dataclasses import replace
from typing import Any, Callable, Dict, Optional

import yaml
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from ..models.directives import DirectiveSpec, RESERVED_DIRECTIVES
from .includes import include_handler
from .lexer import FragmentLexer
from .log import LOG
from .parser import FRAGMENT_DIRECTIVE


Handler = Callable[[Any, Any], str]

# directive -> (HTML tag, aliases)
HTML_WRAPPERS: Dict[str, tuple] = {
    'bf': ('strong', []),
    'em': ('em', []),
    'tt': ('tt', ['mono']),
    'underline': ('u', ['u']),
    **{f'h{level}': (f'h{level}', []) for level in range(1, 7)},
}


def lexer_get(language: str) -> Lexer:
    """Pygments lexer for a language name, plain text when unknown"""
    if language.lower() in FragmentLexer.aliases:
        return FragmentLexer()
    try:
        return get_lexer_by_name(language)
    except ClassNotFound:
        return TextLexer()


def code_highlight(code: str, language: str, style: str) -> str:
    """Highlight code as HTML with inline styles"""
    return highlight(code, lexer_get(language), HtmlFormatter(style=style, noclasses=True))


def language_of(syntax: str) -> str:
    """'language=python' or 'python' -> 'python'"""
    return syntax.split('=', 1)[-1].strip()


def fragment_handler(node: Any, compiler: Any) -> str:
    return node.content


def nothing_handler(node: Any, compiler: Any) -> str:
    return ""


def html_wrapper(tag: str) -> Handler:
    """Handler wrapping content in <tag>, with class/style from modifiers"""
    def handler(node: Any, compiler: Any) -> str:
        attrs = ''.join(
            f' {attr}="{node.modifiers[attr]}"'
            for attr in ('class', 'style') if node.modifiers.get(attr)
        )
        return f'<{tag}{attrs}>{node.content}</{tag}>'
    return handler


def var_handler(node: Any, compiler: Any) -> str:
    """.var{page.title} - a render variable, "" when undefined"""
    name = node.content.strip()
    value = compiler.variable_lookup(name)
    if value is None:
        LOG(f"Variable '{name}' is not defined (line {node.line_number})", level=2)
        return ""
    return str(value)


def code_handler(node: Any, compiler: Any) -> str:
    """.code{} - <code> inline, highlighted block with a .syntax{} modifier"""
    if 'syntax' in node.modifiers:
        language = language_of(node.modifiers['syntax'])
        return code_highlight(node.content, language, compiler.pygments_style)

    style = node.modifiers.get('style')
    style_attr = f' style="{style}"' if style else ''
    return f'<code{style_attr}>{node.content}</code>'


def meta_handler(node: Any, compiler: Any) -> str:
    """
    .meta{} - YAML mapping merged into the 'page' variables

    Renders nothing. Later directives of the same render see the values
    as .var{page.<key>}. Invalid YAML is logged and ignored.
    """
    text = textwrap.dedent(node.content).strip()
    if not text:
        return ""

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        LOG(f"Ignoring .meta{{}} at line {node.line_number}: {e}", level=1)
        return ""

    if data is None:
        return ""
    if not isinstance(data, dict):
        LOG(f"Ignoring .meta{{}} at line {node.line_number}: not a mapping", level=1)
        return ""

    compiler.variables.setdefault('page', {}).update(data)
    return ""


class DirectiveRegistry:
    """
    Directive names and their handlers, for one renderer

    The handler each directive was registered with is remembered as its
    default. handler_wrap() replaces the active handler of a directive on
    this registry only; default_get() still returns the original.
    """

    def __init__(self) -> None:
        self.specs: Dict[str, DirectiveSpec] = {}
        self.defaults: Dict[str, Handler] = {}
        self.builtins_register()

    def register(self, spec: DirectiveSpec) -> None:
        for name in spec.names:
            self.specs[name] = spec
            self.defaults.setdefault(name, spec.handler)

    def spec_get(self, name: str) -> Optional[DirectiveSpec]:
        return self.specs.get(name)

    def get(self, name: str) -> Optional[Handler]:
        """Active handler of a directive, None when the name is unknown"""
        spec = self.spec_get(name)
        return spec.handler if spec else None

    def default_get(self, name: str) -> Optional[Handler]:
        """Handler the directive was registered with, ignoring handler_wrap()"""
        return self.defaults.get(name)

    def handler_wrap(self, name: str, factory: Callable[[Handler], Handler]) -> Handler:
        """
        Intercept invocations of a directive on this registry

        ``factory`` receives the active handler and returns its
        replacement, which then serves the directive and all its aliases.

        Args:
            name: Directive name or alias
            factory: Callable taking the current handler, returning the new one

        Returns:
            The installed handler

        Raises:
            KeyError: If no directive of that name is registered

        Example:
            >>> registry = DirectiveRegistry()
            >>> shout = registry.handler_wrap('bf', lambda h: lambda node, c: h(node, c).upper())
        """
        spec = self.spec_get(name)
        if spec is None:
            raise KeyError(f"Cannot wrap unknown directive '.{name}{{}}'")

        wrapped = factory(spec.handler)
        wrapped_spec = replace(spec, handler=wrapped)
        for alias in spec.names:
            self.specs[alias] = wrapped_spec

        LOG(f"Wrapped handler of .{spec.name}{{}}", level=3)
        return wrapped

    def builtins_register(self) -> None:
        """Register the directives every renderer starts with"""
        self.register(DirectiveSpec(
            name=FRAGMENT_DIRECTIVE,
            description='Root of a parsed document or included file',
            handler=fragment_handler,
        ))
        self.register(DirectiveSpec(
            name='comment',
            description='Removed from the output',
            handler=nothing_handler,
            examples=['.comment{draft note}'],
        ))

        for name, (tag, aliases) in HTML_WRAPPERS.items():
            self.register(DirectiveSpec(
                name=name,
                description=f'Content wrapped in <{tag}>',
                handler=html_wrapper(tag),
                examples=[f'.{name}{{.class{{note}} text}}'],
                aliases=aliases,
            ))

        self.register(DirectiveSpec(
            name='include',
            description='Rendered file from the includes directory',
            handler=include_handler,
            examples=['.include{header.html}', '.include{nav.html title="Home" section=page.section}'],
        ))
        self.register(DirectiveSpec(
            name='var',
            description='Value of a render variable',
            handler=var_handler,
            examples=['.var{page.title}', '.var{include.title}'],
        ))
        self.register(DirectiveSpec(
            name='code',
            description='Inline code, or a highlighted block with .syntax{}',
            handler=code_handler,
            examples=['.code{x = 1}', '.code{.syntax{language=fragment} .include{cached header.html}}'],
        ))
        self.register(DirectiveSpec(
            name='meta',
            description='YAML page variables',
            handler=meta_handler,
            examples=['.meta{\n  title: Home\n}'],
        ))

        # Only rendered when not at the start of a directive's content
        for name in sorted(RESERVED_DIRECTIVES):
            self.register(DirectiveSpec(
                name=name,
                description=f'.{name}{{}} modifier',
                handler=nothing_handler,
            ))
