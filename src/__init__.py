"""
fixincludes - include argument normalization for directive markup

Lets templates written as .include{cached file.html} render on a host whose
include directive only understands .include{file.html}.
"""

__version__ = "1.0.0"

from .lib import (
    Parser,
    Compiler,
    DirectiveRegistry,
    IncludeError,
    IncludeSyntaxError,
    IncludeNotFoundError,
    IncludeDepthError,
    argument_normalize,
    IncludeNormalizer,
    normalizer_install,
    Renderer,
    LOG,
    log_enable,
    state_connectToLogger,
)

__all__ = [
    "Parser",
    "Compiler",
    "DirectiveRegistry",
    "IncludeError",
    "IncludeSyntaxError",
    "IncludeNotFoundError",
    "IncludeDepthError",
    "argument_normalize",
    "IncludeNormalizer",
    "normalizer_install",
    "Renderer",
    "LOG",
    "log_enable",
    "state_connectToLogger",
    "__version__",
]
