"""Configuration module for auto-index.

Loads configuration from environment variables with sensible defaults.
Command-line flags override the environment.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

TRUE_VALUES = ("1", "true", "yes")


@dataclass
class Config:
    """Application configuration."""

    prefix: Path | None = None
    verbose: bool = False
    debug: str = ""
    scanner_files: list[Path] = field(default_factory=list)

    @classmethod
    def from_env(
        cls,
        prefix_override: str | None = None,
        verbose_override: bool | None = None,
        debug_override: str | None = None,
    ) -> "Config":
        """Load configuration from environment variables.

        Args:
            prefix_override: If provided, overrides AUTO_INDEX_PREFIX.
            verbose_override: If provided, overrides AUTO_INDEX_VERBOSE.
            debug_override: If provided, overrides AUTO_INDEX_DEBUG.
        """
        prefix_str = prefix_override if prefix_override is not None else os.getenv("AUTO_INDEX_PREFIX", "")
        prefix = Path(prefix_str).expanduser() if prefix_str else None
        if prefix is not None and prefix.exists() and not prefix.is_dir():
            raise ValueError(f"Invalid AUTO_INDEX_PREFIX value '{prefix_str}': not a directory")

        if verbose_override is not None:
            verbose = verbose_override
        else:
            verbose = os.getenv("AUTO_INDEX_VERBOSE", "").lower() in TRUE_VALUES

        debug = debug_override if debug_override is not None else os.getenv("AUTO_INDEX_DEBUG", "")

        scanners_str = os.getenv("AUTO_INDEX_SCANNERS", "")
        scanner_files = [
            Path(part).expanduser() for part in scanners_str.split(os.pathsep) if part.strip()
        ]

        return cls(
            prefix=prefix,
            verbose=verbose,
            debug=debug,
            scanner_files=scanner_files,
        )


# Global config instance (lazy loaded)
_config: Config | None = None
_overrides: dict = {}


def set_overrides(
    prefix: str | None = None,
    verbose: bool | None = None,
    debug: str | None = None,
) -> None:
    """Set CLI overrides applied the next time the global config is loaded."""
    global _config
    _overrides.update(
        prefix_override=prefix,
        verbose_override=verbose,
        debug_override=debug,
    )
    _config = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env(**_overrides)
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
    _overrides.clear()
