"""
fixincludes - include argument normalization for directive markup

Renders .directive{} fragments and strips the reserved "cached" keyword from
.include{} arguments before the standard include resolution runs.
"""

__version__ = "1.0.0"

from .parser import Parser
from .compiler import Compiler
from .directives import DirectiveRegistry
from .includes import IncludeError, IncludeSyntaxError, IncludeNotFoundError, IncludeDepthError
from .normalize import argument_normalize, IncludeNormalizer, normalizer_install
from .renderer import Renderer
from .log import LOG, log_enable, state_connectToLogger

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
