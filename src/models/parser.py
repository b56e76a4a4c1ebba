"""
Parser-specific data models
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class ExtractedModifiers:
    """
    Leading modifiers of a directive's content

    Returned by Parser.modifiers_extract().

    Attributes:
        modifiers: Modifier name to value, e.g. {"class": "title"}
        offset: Source position where the content proper starts

    Example:
        For ".h1{.class{big} Welcome}" the modifiers are {"class": "big"}
        and offset points at "Welcome".
    """
    modifiers: Dict[str, str]
    offset: int
