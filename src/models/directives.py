"""
Directive registry entries

A DirectiveSpec describes one .name{} directive: the handler that renders
it and the names it answers to.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Set


@dataclass
class DirectiveSpec:
    """
    Registry entry for a directive

    Attributes:
        name: Directive name without the leading dot
        description: One-line summary
        handler: Rendering callable, (node, compiler) -> str
        examples: Sample uses, as written in a fragment
        aliases: Other names resolving to this entry
    """
    name: str
    description: str
    handler: Callable
    examples: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [self.name, *self.aliases]


# Parsed into ASTNode.modifiers when they open a directive's content
RESERVED_DIRECTIVES: Set[str] = {'style', 'class', 'syntax'}
