"""
Include directive models

Parsed form of an .include{} argument string.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class IncludeInvocation:
    """
    Result of parsing the argument string of an .include{} directive

    Attributes:
        file: Name of the fragment to include, relative to the includes directory
        params: Parameters passed to the fragment, in source order
                (available there as .var{include.<key>})
        raw: Argument string this invocation was parsed from

    Example:
        Input: 'header.html title="Home" active=page.section'
        Result: IncludeInvocation(
            file="header.html",
            params={"title": "Home", "active": "<value of page.section>"},
            raw='header.html title="Home" active=page.section'
        )
    """
    file: str
    params: Dict[str, Any] = field(default_factory=dict)
    raw: str = ""
