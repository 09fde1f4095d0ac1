"""Database configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict
from sqlalchemy import URL

ENV_FILE = Path.cwd() / '.env'
DEFAULT_DRIVER = 'mysql+pymysql'


class DatabaseSettings(BaseSettings):
    """Connection settings loaded from environment variables (``OMEGA_DB_*``)."""

    model_config = SettingsConfigDict(
        env_prefix='OMEGA_DB_',
        env_file=str(ENV_FILE),
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    database_url: str | None = None
    driver: str = DEFAULT_DRIVER
    host: str = 'localhost'
    port: int | None = None
    database_name: str = ''
    user: str = ''
    password: str = ''
    echo: bool = False
    log_level: str = 'INFO'

    def url(self) -> str | URL:
        """
        Build the SQLAlchemy URL.

        ``database_url`` wins when set; otherwise the URL is assembled from
        the discrete host/user/password fields.

        Returns:
            URL string or SQLAlchemy URL object
        """
        if self.database_url:
            return self.database_url

        return URL.create(
            drivername=self.driver,
            username=self.user or None,
            password=self.password or None,
            host=self.host or None,
            port=self.port,
            database=self.database_name or None,
        )
