"""
Standard resolution of the .include{} directive

The argument of an .include{} directive is a file name followed by optional
key=value parameters:

    .include{header.html}
    .include{nav.html title="Home" active='docs' section=page.section}

The file is looked up in the includes directory, rendered as a fragment
with the same directive registry, and its parameters are visible inside it
as .var{include.<key>}. Quoted values are literal; bare values are looked
up as render variables.
"""

import re
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ..models.includes import IncludeInvocation
from .log import LOG
from .parser import Parser


class IncludeError(Exception):
    """Raised when an .include{} directive cannot be resolved"""
    pass


class IncludeSyntaxError(IncludeError):
    """Malformed include argument or invalid file name"""
    pass


class IncludeNotFoundError(IncludeError):
    """Included file does not exist in the includes directory"""
    pass


class IncludeDepthError(IncludeError):
    """Includes nested deeper than the configured maximum"""
    pass


VALID_FILENAME = re.compile(r'^[\w/.\-()+~#@]+$')

PARAM_PATTERN = re.compile(
    r"""\s*(?P<key>[\w-]+)\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<var>[\w.-]+))(?=\s|$)"""
)

SYNTAX_HINT = (
    "Valid syntax: .include{file.html param='value' param2=variable}"
)


def include_parse(
    raw: str, lookup: Optional[Callable[[str], Any]] = None
) -> IncludeInvocation:
    """
    Parse the argument string of an .include{} directive

    Args:
        raw: Argument string as written between the braces
        lookup: Resolves bare parameter values (dotted variable names);
                unresolved names become ""

    Returns:
        IncludeInvocation with file name and parameters

    Raises:
        IncludeSyntaxError: If there is no file name or the trailing text
                            is not a sequence of key=value parameters

    Example:
        >>> include_parse('nav.html title="Home"').params
        {'title': 'Home'}

        'cached nav.html' raises IncludeSyntaxError: "nav.html" is not a
        key=value parameter.
    """
    stripped = raw.strip()
    if not stripped:
        raise IncludeSyntaxError(f"Invalid syntax for include directive: no file name given\n{SYNTAX_HINT}")

    parts = stripped.split(None, 1)
    file = parts[0]
    rest = parts[1] if len(parts) > 1 else ""

    params: Dict[str, Any] = {}
    pos = 0
    while pos < len(rest):
        match = PARAM_PATTERN.match(rest, pos)
        if not match:
            raise IncludeSyntaxError(
                f"Invalid syntax for include directive: {stripped!r}\n{SYNTAX_HINT}"
            )

        key = match.group('key')
        if match.group('dq') is not None:
            params[key] = match.group('dq')
        elif match.group('sq') is not None:
            params[key] = match.group('sq')
        else:
            value = lookup(match.group('var')) if lookup else None
            params[key] = "" if value is None else value

        pos = match.end()
        while pos < len(rest) and rest[pos].isspace():
            pos += 1

    return IncludeInvocation(file=file, params=params, raw=raw)


def filename_validate(name: str) -> None:
    """
    Reject include names that could escape the includes directory

    Raises:
        IncludeSyntaxError: On characters outside [\\w/.-()+~#@], an
                            absolute path, or a '..' segment
    """
    if not VALID_FILENAME.match(name):
        raise IncludeSyntaxError(
            f"Include file '{name}' contains invalid characters or sequences"
        )

    if name.startswith('/') or '..' in Path(name).parts:
        raise IncludeSyntaxError(
            f"Include file '{name}' must be a relative path inside the includes directory"
        )


def include_resolve(includes_dir: Path, name: str) -> Path:
    """
    Locate an include file

    Args:
        includes_dir: Directory include names are relative to
        name: Validated include file name

    Returns:
        Path to the file

    Raises:
        IncludeNotFoundError: If the file is missing, not a regular file,
                              a symlink, or reached through a symlinked
                              directory leading outside includes_dir
    """
    path = Path(includes_dir) / name
    if path.is_symlink() or not path.is_file():
        raise IncludeNotFoundError(
            f"Could not locate the included file '{name}' in '{includes_dir}'. "
            f"Ensure it exists there and is not a symlink."
        )

    if not path.resolve().is_relative_to(Path(includes_dir).resolve()):
        raise IncludeNotFoundError(
            f"Included file '{name}' resolves outside '{includes_dir}' through a symlink."
        )
    return path


def include_handler(node: Any, compiler: Any) -> str:
    """
    Handle .include{} - render a fragment from the includes directory

    Args:
        node: ASTNode whose content is the include argument string
        compiler: Compiler performing the current render

    Returns:
        Rendered text of the included fragment

    Raises:
        IncludeSyntaxError: Malformed argument or invalid file name
        IncludeNotFoundError: File not found in the includes directory
        IncludeDepthError: Nesting deeper than compiler.include_max_depth
        SyntaxError: Malformed markup inside the included file
    """
    invocation = include_parse(node.content, compiler.variable_lookup)
    filename_validate(invocation.file)

    if compiler.include_depth >= compiler.include_max_depth:
        raise IncludeDepthError(
            f"Include of '{invocation.file}' at line {node.line_number} exceeds "
            f"the maximum depth of {compiler.include_max_depth}"
        )

    path = include_resolve(compiler.includes_dir, invocation.file)
    LOG(f"Including {path} (depth {compiler.include_depth + 1})", level=2)

    source = path.read_text(encoding='utf-8')
    parser = Parser(source, registry=compiler.directives)
    root = parser.fragment_parse()

    child = compiler.child_make([root], include=invocation.params)
    return child.render()
