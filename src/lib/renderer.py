"""
Renderer: one rendering-engine instance

Bundles a directive registry with the include settings and exposes the two
pipeline stages (parse, compile) as a single render() call.

    renderer = Renderer(includes_dir="site/_includes")
    html = renderer.render(".include{cached header.html} <main>...</main>")
"""

from pathlib import Path
from typing import Any, Dict, Optional

from .compiler import Compiler
from .directives import DirectiveRegistry
from .log import LOG, state_connectToLogger, state_disconnectFromLogger
from .normalize import IncludeNormalizer, normalizer_install
from .parser import ASTNode, Parser


class Renderer:
    """
    Renders fragment source with its own directive registry

    The include normalizer is installed on the renderer's registry unless
    normalize_includes is False; it never affects other renderers.
    """

    def __init__(
        self,
        includes_dir: Optional[str] = None,
        registry: Optional[DirectiveRegistry] = None,
        verbosity: Optional[int] = None,
        normalize_includes: bool = True,
        keyword: Optional[str] = None,
        strict_mode: Optional[bool] = None,
    ) -> None:
        """
        Args:
            includes_dir: Directory for .include{} files (appsettings.includes_dir)
            registry: Registry to render with; a new one when omitted
            verbosity: Logging verbosity (appsettings.verbosity)
            normalize_includes: Install the include normalizer on the registry
            keyword: Modifier keyword for the normalizer (appsettings.include_modifier)
            strict_mode: Raise on unknown directives (appsettings.strict_mode)
        """
        from ..config import appsettings

        self.includes_dir = Path(appsettings.includes_dir if includes_dir is None else includes_dir)
        self.verbosity = appsettings.verbosity if verbosity is None else verbosity
        self.strict_mode = strict_mode
        self.registry = registry if registry is not None else DirectiveRegistry()
        self.normalizer: Optional[IncludeNormalizer] = None

        if normalize_includes:
            token = state_connectToLogger(self)
            try:
                self.normalizer = normalizer_install(self.registry, keyword=keyword)
            finally:
                state_disconnectFromLogger(token)

    def source_parse(self, source: str) -> ASTNode:
        """
        Parse source into a root fragment node, using this renderer's registry

        Raises:
            SyntaxError: On malformed markup
        """
        return Parser(source, registry=self.registry).fragment_parse()

    def render(self, source: str, variables: Optional[Dict[str, Any]] = None) -> str:
        """
        Render fragment source to text

        Args:
            source: Fragment markup
            variables: Initial render variables (e.g. {'page': {'title': 'Home'}})

        Returns:
            Rendered text

        Raises:
            SyntaxError: Malformed markup
            IncludeError: An .include{} could not be resolved
        """
        root = self.source_parse(source)

        compiler = Compiler(
            ast=[root],
            registry=self.registry,
            verbosity=self.verbosity,
            includes_dir=str(self.includes_dir),
            variables=variables,
            strict_mode=self.strict_mode,
        )
        return compiler.render()

    def file_render(self, path: str | Path, variables: Optional[Dict[str, Any]] = None) -> str:
        """
        Read a UTF-8 file and render it

        Raises:
            OSError: If the file cannot be read
        """
        token = state_connectToLogger(self)
        try:
            source = Path(path).read_text(encoding="utf-8")
            LOG(f"Read {len(source)} characters from {path}", level=2)
        finally:
            state_disconnectFromLogger(token)
        return self.render(source, variables)
