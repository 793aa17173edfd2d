from typing import Optional

from pydantic import Field, field_validator

from chainsql.constants import Dialect
from .base import ChainSQLBaseSettings


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ChainSQLSettings(ChainSQLBaseSettings):
    """Runtime configuration for chainsql.

    All values can be supplied through ``CHAINSQL_``-prefixed environment
    variables or a ``.env`` file in the working directory.
    """

    default_dialect: Dialect = Field(
        default=Dialect.MYSQL,
        description="Dialect used by ChainBuilder() when none is passed explicitly. "
                    "Declared dialects without a compiler are rejected when a builder is created."
    )

    log_level: str = Field(
        default="INFO",
        description="Log level passed to setup_logging() by applications that let chainsql configure logging"
    )

    log_compiled_sql: bool = Field(
        default=False,
        description="Include the compiled SQL text in the debug record emitted for every top-level compile. "
                    "Bind values are never logged."
    )

    update_expression_heuristic: bool = Field(
        default=False,
        description="Treat UPDATE string values containing ' + ' or ' - ' as raw SQL expressions. "
                    "Prefer RawExpression, which cannot misfire on literal strings."
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name.

        Args:
            v: Log level name in any case

        Returns:
            Upper-cased log level name
        """
        level = v.strip().upper()
        if level not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{v}'. Expected one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
            )
        return level


# Singleton instance
_settings: Optional[ChainSQLSettings] = None


def get_settings(force_reload: bool = False) -> ChainSQLSettings:
    """Get the singleton settings instance.

    The settings are loaded from the environment on first access and
    reused afterwards, so every builder created without an explicit
    dialect sees the same default.

    Args:
        force_reload: If True, creates a new settings instance even if
                     one already exists. Useful for testing or when
                     environment variables have changed.

    Returns:
        ChainSQLSettings: The singleton settings instance

    Example:
        ```python
        settings = get_settings()
        assert settings is get_settings()

        new_settings = get_settings(force_reload=True)
        assert new_settings is not settings
        ```
    """
    global _settings

    if _settings is None or force_reload:
        _settings = ChainSQLSettings()

    return _settings


def _reload_settings() -> ChainSQLSettings:
    """Force reload of settings.

    This is primarily for testing purposes where you need to reset
    the singleton instance.

    Returns:
        A fresh ChainSQLSettings instance
    """
    global _settings
    _settings = None
    return get_settings(force_reload=True)
