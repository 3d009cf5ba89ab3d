import logging
from functools import lru_cache

from pydantic import Field, PostgresDsn, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Values are read from the process environment and an optional `.env` file,
    falling back to the defaults declared here.

    Attributes:
        database_url (PostgresDsn): Database connection URL assembled from the DB_* settings.
        sql_echo (bool): Whether SQLAlchemy should echo emitted SQL to the log.
        secret_key (str): Secret key for signing session JWTs.
            Must be kept secure and changed in production.
        algorithm (str): Algorithm used for JWT encoding.
        access_token_expire_minutes (int): Lifetime of a session token in minutes.
        cors_origins (list[str]): Browser origins allowed to call the API with credentials.

    """

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    # Database settings
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="resume_builder", validation_alias="DB_NAME")
    db_user: str = Field(default="postgres", validation_alias="DB_USER")
    db_password: str = Field(default="", validation_alias="DB_PASSWORD")
    sql_echo: bool = Field(default=False, validation_alias="SQL_ECHO")

    @computed_field
    @property
    def database_url(self) -> PostgresDsn:
        """
        Assembled database URL from components.

        Returns:
            PostgresDsn: The PostgreSQL connection URL.

        Notes:
            1. Uses the "postgresql" scheme with the configured user, password, host, port and database name.
            2. An empty password is omitted from the URL.

        """
        return PostgresDsn.build(
            scheme="postgresql",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            path=self.db_name,
        )

    # Security settings
    secret_key: str = Field(
        default="your-secret-key-change-in-production",
        validation_alias="SECRET_KEY",
    )
    algorithm: str = Field(default="HS256", validation_alias="ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=120,
        validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Browser origins allowed to call the API with credentials, JSON list in the environment
    cors_origins: list[str] = Field(
        default=["http://localhost:5173"],
        validation_alias="CORS_ORIGINS",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get the global settings instance.

    Returns:
        Settings: The cached settings instance.

    Raises:
        ValidationError: If an environment variable holds an invalid value.

    Notes:
        1. Reads configuration from environment variables and the .env file.
        2. The instance is cached so the .env file is parsed once per process.

    """
    return Settings()
