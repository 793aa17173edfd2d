from pydantic_settings import BaseSettings, SettingsConfigDict


class ChainSQLBaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="CHAINSQL_",
    )

    @classmethod
    def get_env_prefix(cls) -> str:
        """Return the environment variable prefix for this settings class."""
        return cls.model_config.get("env_prefix", "")
