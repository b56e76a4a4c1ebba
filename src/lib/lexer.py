"""
Custom Pygments lexer for fragment markup

Provides syntax highlighting for .directive{} markup when showing fragment
source inside a rendered page (.code{.syntax{language=fragment} ...}).

Token types:
- Keyword.Declaration: Include and variable directives (.include, .var, .meta)
- Name.Decorator: Modifiers (.style, .class, .syntax)
- Name.Function: Formatting directives (.bf, .h1, .code, ...)
- Keyword.Pseudo: The reserved include modifier (cached)
- Name.Attribute / Literal.String: key=value include parameters
"""

from pygments.lexer import RegexLexer, bygroups, include
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Literal,
    Comment,
)


class FragmentLexer(RegexLexer):
    """
    Lexer for fragment markup

    Example:
        .include{cached header.html title="Home"}

    Tokens:
        .include → Keyword.Declaration
        { → Punctuation
        cached → Keyword.Pseudo
        title → Name.Attribute
        "Home" → Literal.String
        } → Punctuation
    """

    name = 'Fragment'
    aliases = ['fragment', 'fixincludes']
    filenames = ['*.fragment']

    tokens = {
        'directives': [
            (r'<!--.*?-->', Comment),

            (r'(\.)(comment)(\{)', bygroups(Punctuation, Name.Tag, Punctuation), 'comment'),

            (r'(\.)(include)(\{)(\s*)(cached)(\s)',
             bygroups(Punctuation, Keyword.Declaration, Punctuation, Text, Keyword.Pseudo, Text),
             'content'),

            (r'(\.)(include|var|meta)(\{)',
             bygroups(Punctuation, Keyword.Declaration, Punctuation), 'content'),

            (r'(\.)(style|class|syntax)(\{)',
             bygroups(Punctuation, Name.Decorator, Punctuation), 'content'),

            (r'(\.)(bf|em|tt|code|underline|h[1-6])(\{)',
             bygroups(Punctuation, Name.Function, Punctuation), 'content'),

            (r'(\.)([a-zA-Z_][\w-]*)(\{)', bygroups(Punctuation, Name.Tag, Punctuation), 'content'),
        ],

        'root': [
            include('directives'),

            (r'<[^>]+>', Name.Builtin),

            (r'\{', Punctuation, 'content'),
            (r'\}', Punctuation),

            (r'[^.<{}]+', Text),
            (r'.', Text),
        ],

        'comment': [
            (r'\}', Punctuation, '#pop'),
            (r'[^}]+', Comment),
            (r'.', Comment),
        ],

        'content': [
            include('directives'),

            (r'\{', Punctuation, 'content'),
            (r'\}', Punctuation, '#pop'),

            (r'<[^>]+>', Name.Builtin),

            # Include parameters and modifier values (title="Home", language=python)
            (r'([a-zA-Z_][\w-]*)(=)("[^"]*"|\'[^\']*\'|[^\s}]+)',
             bygroups(Name.Attribute, Punctuation, Literal.String)),

            (r'[^.<{}=]+', String),
            (r'.', String),
        ],
    }
