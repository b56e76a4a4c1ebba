"""
Compiler: renders a parsed fragment to text

Rendering is inside-out. A node's children are rendered first and put in
place of their placeholders, then the node's handler runs on the result.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from .directives import DirectiveRegistry
from .log import LOG, state_connectToLogger, state_disconnectFromLogger
from .parser import ASTNode


class Compiler:
    """
    One render of a list of ASTNodes

    Also the ``compiler`` argument of every directive handler: handlers
    read the render variables, the includes directory and the include
    depth from it, and .include{} renders its file with child_make().
    """

    def __init__(
        self,
        ast: List[ASTNode],
        registry: Optional[DirectiveRegistry] = None,
        verbosity: Optional[int] = None,
        includes_dir: Optional[str] = None,
        variables: Optional[Dict[str, Any]] = None,
        include_depth: int = 0,
        strict_mode: Optional[bool] = None,
    ) -> None:
        """
        Args:
            ast: Nodes to render
            registry: Registry resolving directive handlers (a new one if omitted)
            verbosity: Logging verbosity while rendering
            includes_dir: Directory .include{} names are resolved against
            variables: Render variables; 'page' and 'include' always exist
            include_depth: Number of .include{} levels above this render
            strict_mode: Raise on directives without a handler

        Options left as None come from appsettings.
        """
        from ..config import appsettings

        self.ast = ast
        self.directives = registry if registry is not None else DirectiveRegistry()
        self.verbosity = appsettings.verbosity if verbosity is None else verbosity
        self.includes_dir = Path(appsettings.includes_dir if includes_dir is None else includes_dir)
        self.include_depth = include_depth
        self.include_max_depth = appsettings.include_max_depth
        self.strict_mode = appsettings.strict_mode if strict_mode is None else strict_mode
        self.pygments_style = appsettings.pygments_style

        self.variables: Dict[str, Any] = {'page': {}, 'include': {}}
        self.variables.update(variables or {})

    def render(self) -> str:
        """
        Render all nodes, joined by newlines

        LOG() follows this compiler's verbosity until the render returns.
        """
        token = state_connectToLogger(self)
        try:
            LOG(f"Rendering {len(self.ast)} node(s) at include depth {self.include_depth}", level=3)
            return '\n'.join(self.node_render(node) for node in self.ast)
        finally:
            state_disconnectFromLogger(token)

    def child_make(self, ast: List[ASTNode], **variables: Any) -> "Compiler":
        """
        Compiler for an included file, one include level deeper

        Shares the registry and settings. 'page' is copied, so .meta{}
        inside the file does not change the including page.

        Args:
            ast: Parsed nodes of the file
            **variables: Variables replaced in the child (e.g. include=params)
        """
        child_variables = {**self.variables, 'page': dict(self.variables.get('page', {}))}
        child_variables.update(variables)

        child = Compiler(
            ast=ast,
            registry=self.directives,
            verbosity=self.verbosity,
            includes_dir=str(self.includes_dir),
            variables=child_variables,
            include_depth=self.include_depth + 1,
            strict_mode=self.strict_mode,
        )
        child.include_max_depth = self.include_max_depth
        child.pygments_style = self.pygments_style
        return child

    def variable_lookup(self, name: str) -> Any:
        """
        Value of a dotted variable name, None if any part is missing

        Numeric parts index into lists.

        Example:
            >>> Compiler([], variables={'page': {'tags': ['a', 'b']}}).variable_lookup('page.tags.1')
            'b'
        """
        value: Any = self.variables
        for part in name.split('.'):
            if isinstance(value, dict) and part in value:
                value = value[part]
            elif isinstance(value, (list, tuple)) and part.isdigit() and int(part) < len(value):
                value = value[int(part)]
            else:
                return None
        return value

    def node_render(self, node: ASTNode) -> str:
        """
        Render one node and its children

        While the handler runs, node.content holds the text with children
        rendered in; the parsed content is put back afterwards, so a
        wrapping handler may rewrite node.content for its delegate.

        Raises:
            SyntaxError: Directive without a handler in strict mode
        """
        from ..config import appsettings

        content = node.content
        for index, child in enumerate(node.children):
            content = content.replace(appsettings.placeHolder_make(index), self.node_render(child))

        handler = self.directives.get(node.directive)
        if handler is None:
            if self.strict_mode:
                raise SyntaxError(
                    f"Unknown directive '.{node.directive}' at line {node.line_number}"
                )
            LOG(f"Warning: Unknown directive '{node.directive}'", level=2)
            return f'<div class="directive-{node.directive}">{content}</div>'

        parsed = node.content
        node.content = content
        try:
            return handler(node, self)
        finally:
            node.content = parsed
