"""Settings for chainsql built on Pydantic Settings.

Configuration Sources (precedence order):
    1. Environment Variables (highest priority)
    2. ``.env`` file in the working directory
    3. Default Values in code (lowest priority)

Environment Variable Naming:
    - Format: CHAINSQL_SETTING_NAME
    - Case: UPPER_SNAKE_CASE

Quick Start:
    >>> from chainsql.settings import get_settings
    >>>
    >>> settings = get_settings()
    >>> settings.default_dialect
    <Dialect.MYSQL: 'mysql'>

Available settings:
    - CHAINSQL_DEFAULT_DIALECT: mysql (default) or sqlite
    - CHAINSQL_LOG_LEVEL: level used by setup_logging()
    - CHAINSQL_LOG_COMPILED_SQL: include SQL text in compile debug logs
    - CHAINSQL_UPDATE_EXPRESSION_HEURISTIC: legacy raw-expression detection
"""

from .main import ChainSQLSettings, get_settings, _reload_settings
from .base import ChainSQLBaseSettings

__all__ = [
    "get_settings",
    "ChainSQLSettings",
]
