"""
Include argument normalization

Templates written for hosts with a caching include variant use
``.include{cached header.html}``. The standard .include{} directive does not
know the ``cached`` keyword and rejects the argument. The normalizer strips
the keyword before the standard resolution runs, so both spellings render
the same fragment.

The normalizer is installed explicitly on one DirectiveRegistry:

    registry = DirectiveRegistry()
    normalizer_install(registry)

Renderers built with ``Renderer(normalize_includes=True)`` (the default) do
this for their own registry. Other registries keep the standard directive.

No caching is implemented; the keyword is only removed.
"""

from typing import Any, Callable, Optional

from .log import LOG


# Trimmed before the keyword test; other Unicode spaces (NBSP) are content
ASCII_WHITESPACE = " \t\n\v\f\r\0"


def argument_normalize(params: str, keyword: Optional[str] = None) -> str:
    """
    Strip a leading modifier keyword from a directive argument string

    The test is made on the trimmed argument: it must start with the
    keyword followed by one space. When it does, the first occurrence of
    keyword + space is removed from the untrimmed string; everything else,
    including surrounding whitespace, is left as it was. Otherwise the
    argument is returned unchanged.

    Args:
        params: Raw argument string of the directive
        keyword: Modifier keyword (defaults to appsettings.include_modifier)

    Returns:
        The argument string without the leading keyword

    Example:
        >>> argument_normalize("cached header.html")
        'header.html'
        >>> argument_normalize("cached cached x")
        'cached x'
        >>> argument_normalize("cachedfoo")
        'cachedfoo'
        >>> argument_normalize("foo cached bar")
        'foo cached bar'
    """
    if keyword is None:
        from ..config import appsettings
        keyword = appsettings.include_modifier

    prefix = f"{keyword} "
    if params.strip(ASCII_WHITESPACE).startswith(prefix):
        return params.replace(prefix, "", 1)
    return params


class IncludeNormalizer:
    """
    Directive handler that normalizes the argument, then delegates

    Wraps the handler a directive had before installation. The node's
    content is rewritten in place and the wrapped handler's result is
    returned as is; its errors propagate untouched.

    Attributes:
        default_handler: Handler called with the normalized node
        keyword: Modifier keyword stripped from the argument
    """

    def __init__(self, default_handler: Callable[[Any, Any], str], keyword: Optional[str] = None) -> None:
        if keyword is None:
            from ..config import appsettings
            keyword = appsettings.include_modifier
        self.default_handler = default_handler
        self.keyword = keyword

    def __call__(self, node: Any, compiler: Any) -> str:
        params = argument_normalize(node.content, self.keyword)
        if params != node.content:
            LOG(
                f"Stripped '{self.keyword}' from .{node.directive}{{}} argument "
                f"at line {node.line_number}",
                level=3,
            )
            node.content = params
        return self.default_handler(node, compiler)


def normalizer_install(
    registry: Any, directive: str = "include", keyword: Optional[str] = None
) -> IncludeNormalizer:
    """
    Install an IncludeNormalizer on one directive registry

    Idempotent: when the directive's active handler already is a
    normalizer, that normalizer is returned and nothing changes.

    Args:
        registry: DirectiveRegistry to install on
        directive: Name of the include-style directive
        keyword: Modifier keyword (defaults to appsettings.include_modifier)

    Returns:
        The normalizer now handling the directive

    Raises:
        KeyError: If the registry has no such directive
    """
    current = registry.get(directive)
    if isinstance(current, IncludeNormalizer):
        return current

    normalizer = registry.handler_wrap(
        directive, lambda handler: IncludeNormalizer(handler, keyword)
    )
    LOG(f"Installed include normalizer on .{directive}{{}}", level=2)
    return normalizer
