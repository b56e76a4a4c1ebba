"""
Parser for .directive{} fragment markup

A fragment is ordinary text (usually HTML) with directives embedded in it:

    <body>.include{cached header.html title="Home"} <p>.bf{Hi}</p></body>

fragment_parse() turns the whole document into one root node. Every
registered directive becomes a child node and is replaced in its parent's
content by a child placeholder; all other text is kept as it is.

Rules:
- only names known to the DirectiveRegistry start a directive, so
  ``a.b{c}`` in HTML or JavaScript stays text
- ``.style{}``, ``.class{}`` and ``.syntax{}`` at the start of a
  directive's content are modifiers, not content
- a backslash before ``.``, ``{``, ``}`` or ``\\`` makes that character
  literal
- ``.code{.syntax{...} ...}`` content is kept raw, so directives shown in a
  highlighted block are not rendered

Example:
    >>> root = Parser("<p>.bf{Hello .include{name.html}}</p>").fragment_parse()
    >>> root.content
    '<p>\\x00CHILD_0\\x00</p>'
    >>> root.children[0].children[0].content
    'name.html'
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..models.directives import RESERVED_DIRECTIVES
from ..models.parser import ExtractedModifiers


FRAGMENT_DIRECTIVE = 'fragment'

DIRECTIVE_OPEN = re.compile(r'\.([A-Za-z_][\w-]*)\{')

MODIFIER_OPEN = re.compile(r'\.(' + '|'.join(sorted(RESERVED_DIRECTIVES)) + r')\{')

ESCAPABLE = '.{}\\'


@dataclass
class ASTNode:
    """
    One directive of a parsed fragment

    Attributes:
        directive: Directive name without the dot ("include", "bf", ...)
        modifiers: Values of leading .style{}/.class{}/.syntax{} modifiers
        content: Text between the braces, nested directives replaced by
                 placeholders (CHILD_0 is children[0], and so on)
        children: Nested directive nodes
        line_number: Line of the source where the directive starts

    For .include{} the content is the raw argument string, leading and
    trailing whitespace included, e.g. ' cached header.html title="Home"'.
    """
    directive: str
    modifiers: Dict[str, str]
    content: str
    children: List['ASTNode']
    line_number: int


class Parser:
    """Turns fragment source into an ASTNode tree"""

    def __init__(self, source: str, registry=None):
        """
        Args:
            source: Fragment source text
            registry: DirectiveRegistry deciding which names are directives
                      (a new default registry when omitted)
        """
        self.source = source

        if registry is None:
            from .directives import DirectiveRegistry
            registry = DirectiveRegistry()
        self.registry = registry

    def fragment_parse(self) -> ASTNode:
        """
        Parse the whole source as one fragment

        Returns:
            ASTNode with directive 'fragment' whose content is the source
            (nothing trimmed) and whose children are its top-level directives

        Raises:
            SyntaxError: On a directive or modifier without a closing brace
        """
        content, children = self.span_parse(0, len(self.source))
        return ASTNode(
            directive=FRAGMENT_DIRECTIVE,
            modifiers={},
            content=content,
            children=children,
            line_number=1
        )

    def span_parse(self, start: int, end: int) -> Tuple[str, List[ASTNode]]:
        """
        Parse source[start:end] into placeholder content and child nodes

        Escaped characters are emitted without their backslash.
        """
        from ..config import appsettings

        pieces: List[str] = []
        children: List[ASTNode] = []
        pos = start

        while pos < end:
            char = self.source[pos]

            if self.escaped_at(pos, end):
                pieces.append(self.source[pos + 1])
                pos += 2
                continue

            match = DIRECTIVE_OPEN.match(self.source, pos, end)
            if match and self.registry.get(match.group(1)) is not None:
                close = self.brace_close(match.end() - 1, end)
                children.append(self.node_make(match.group(1), match.end(), close, pos))
                pieces.append(appsettings.placeHolder_make(len(children) - 1))
                pos = close + 1
                continue

            pieces.append(char)
            pos += 1

        return ''.join(pieces), children

    def node_make(self, name: str, start: int, end: int, directive_pos: int) -> ASTNode:
        """Build the node of a directive whose content is source[start:end]"""
        extracted = self.modifiers_extract(start, end)

        if name == 'code' and 'syntax' in extracted.modifiers:
            content = self.source[extracted.offset:end]
            children: List[ASTNode] = []
        else:
            content, children = self.span_parse(extracted.offset, end)

        return ASTNode(
            directive=name,
            modifiers=extracted.modifiers,
            content=content,
            children=children,
            line_number=self.line_at(directive_pos)
        )

    def modifiers_extract(self, start: int, end: int) -> ExtractedModifiers:
        """
        Read modifiers at the start of source[start:end]

        Whitespace after the last modifier is skipped. Without modifiers
        the offset stays at start, so include arguments keep their
        leading whitespace.
        """
        modifiers: Dict[str, str] = {}
        pos = start

        while True:
            while pos < end and self.source[pos].isspace():
                pos += 1

            match = MODIFIER_OPEN.match(self.source, pos, end)
            if not match:
                break

            close = self.brace_close(match.end() - 1, end)
            modifiers[match.group(1)] = self.source[match.end():close].strip()
            pos = close + 1

        if not modifiers:
            return ExtractedModifiers(modifiers=modifiers, offset=start)
        return ExtractedModifiers(modifiers=modifiers, offset=pos)

    def brace_close(self, open_pos: int, end: int) -> int:
        """
        Position of the '}' closing the '{' at open_pos

        Escaped braces do not count.

        Raises:
            SyntaxError: If the brace is not closed before end
        """
        depth = 0
        pos = open_pos

        while pos < end:
            if self.escaped_at(pos, end):
                pos += 2
                continue

            char = self.source[pos]
            if char == '{':
                depth += 1
            elif char == '}':
                depth -= 1
                if depth == 0:
                    return pos
            pos += 1

        self.error("Unmatched brace", open_pos)

    def escaped_at(self, pos: int, end: int) -> bool:
        return (
            self.source[pos] == '\\'
            and pos + 1 < end
            and self.source[pos + 1] in ESCAPABLE
        )

    def line_at(self, pos: int) -> int:
        return self.source.count('\n', 0, pos) + 1

    def error(self, message: str, pos: int) -> None:
        """
        Raise a SyntaxError pointing at source position pos

        Raises:
            SyntaxError: Always, with line, column and the offending line
        """
        line_start = self.source.rfind('\n', 0, pos) + 1
        line_end = self.source.find('\n', pos)
        if line_end == -1:
            line_end = len(self.source)

        raise SyntaxError(
            f"{message} at line {self.line_at(pos)}, column {pos - line_start + 1}\n"
            f"  {self.source[line_start:line_end]}\n"
            f"  {' ' * (pos - line_start)}^"
        )
