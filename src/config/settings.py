"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use FIXINCLUDES_ prefix (e.g., FIXINCLUDES_INCLUDES_DIR=partials).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use FIXINCLUDES_ prefix.

    Examples:
        FIXINCLUDES_INCLUDES_DIR=_partials
        FIXINCLUDES_INCLUDE_MODIFIER=cached
        FIXINCLUDES_STRICT_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="FIXINCLUDES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Parser configuration
    placeholder_prefix: str = Field(
        default="\x00CHILD_",
        description="Prefix for directive placeholders in content (uses null byte to avoid collisions)",
    )

    placeholder_suffix: str = Field(
        default="\x00",
        description="Suffix for directive placeholders in content (uses null byte to avoid collisions)",
    )

    # Include configuration
    includes_dir: str = Field(
        default="_includes",
        description="Directory that .include{} file names are resolved against",
    )

    include_modifier: str = Field(
        default="cached",
        description="Reserved leading keyword stripped from .include{} arguments by the normalizer",
    )

    include_max_depth: int = Field(
        default=10,
        description="Maximum nesting of .include{} inside included fragments",
    )

    # Rendering configuration
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: unknown directives raise instead of warning",
    )

    pygments_style: str = Field(
        default="monokai",
        description="Pygments style used for .code{.syntax{...}} blocks",
    )

    verbosity: int = Field(
        default=1,
        description="Default logging verbosity for renderers (1-3)",
    )

    def placeHolder_make(self, index: int) -> str:
        """
        Generate a placeholder string for a child directive at given index.

        Args:
            index: Zero-based index of child directive

        Returns:
            Placeholder string (e.g., "\\x00CHILD_0\\x00")

        Example:
            >>> settings = AppSettings()
            >>> settings.placeHolder_make(0)
            '\\x00CHILD_0\\x00'
        """
        return f"{self.placeholder_prefix}{index}{self.placeholder_suffix}"


# Singleton instance - import this in your code
appsettings = AppSettings()
