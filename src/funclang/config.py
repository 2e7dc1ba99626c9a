"""
Funclang Front End Configuration
================================

Settings shared by the parser and the command-line tool. Configuration
can come from:
- Default values (defined here)
- Environment variables (``FrontendConfig.from_env``)
- Command-line options (applied by ``funcc`` on top of the above)
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class FrontendConfig:
    """
    Configuration for a parsing session.

    Attributes:
        filename: Name reported in lexical error locations
        log_level: Level for the ``funclang`` logger hierarchy
        diagnostics: Emit a diagnostic log line when a parse error is raised
        max_depth: Deepest allowed nesting of statements and calls
    """

    filename: str = "<input>"
    log_level: str = "WARNING"
    diagnostics: bool = True
    # Each nesting level costs a few Python frames
    max_depth: int = 200

    @classmethod
    def from_env(cls) -> "FrontendConfig":
        """
        Create FrontendConfig from environment variables.

        Environment variables (all optional):
            FUNCLANG_LOG_LEVEL: One of DEBUG, INFO, WARNING, ERROR, CRITICAL
            FUNCLANG_DIAGNOSTICS: "0", "false", "no" or "off" disables diagnostics
            FUNCLANG_MAX_DEPTH: Maximum nesting depth (positive integer)

        Returns:
            FrontendConfig with values from environment variables
        """
        config = cls()

        if level := os.environ.get("FUNCLANG_LOG_LEVEL"):
            if level.upper() in LOG_LEVELS:
                config.log_level = level.upper()

        if diagnostics := os.environ.get("FUNCLANG_DIAGNOSTICS"):
            config.diagnostics = diagnostics.strip().lower() not in ("0", "false", "no", "off")

        if max_depth := os.environ.get("FUNCLANG_MAX_DEPTH"):
            try:
                value = int(max_depth)
            except ValueError:
                value = 0
            if value > 0:
                config.max_depth = value

        return config

    def setup_logging(self, verbose: bool = False) -> None:
        """Configure logging for command-line use."""
        level = logging.DEBUG if verbose else getattr(logging, self.log_level)
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if verbose else "%(message)s",
        )
        logging.getLogger("funclang").setLevel(level)


_default_config: Optional[FrontendConfig] = None


def get_default_config() -> FrontendConfig:
    """
    Get the process-wide default configuration.

    Created from environment variables on first access.
    """
    global _default_config
    if _default_config is None:
        _default_config = FrontendConfig.from_env()
    return _default_config


def set_default_config(config: Optional[FrontendConfig]) -> None:
    """Replace the process-wide default configuration (None resets it)."""
    global _default_config
    _default_config = config
