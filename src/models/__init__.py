"""
Models package for fixincludes

Data structures shared by the parser, the registry and include resolution.
"""

from .directives import DirectiveSpec, RESERVED_DIRECTIVES
from .parser import ExtractedModifiers
from .includes import IncludeInvocation

__all__ = [
    "DirectiveSpec",
    "RESERVED_DIRECTIVES",
    "ExtractedModifiers",
    "IncludeInvocation",
]
