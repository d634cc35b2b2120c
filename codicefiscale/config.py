"""Package configuration via pydantic-settings.

Values are read from environment variables (.env file). The decoder itself
takes no configuration; these settings drive where the reference tables are
read from and where the table builder downloads them.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_DATA_DIR = Path(__file__).resolve().parent / "data"


class TablesSettings(BaseSettings):
    """Reference tables location and upstream sources."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    tables_data_dir: Path = Field(
        default=_PACKAGE_DATA_DIR,
        description="Directory holding comuni.json and nazioni.json",
    )
    comuni_url: str = Field(
        default="https://github.com/matteocontrini/comuni-json/blob/master/comuni.json?raw=true",
        description="Municipalities JSON document (UTF-8)",
    )
    nazioni_url: str = Field(
        default="https://www.istat.it/it/files//2011/01/Elenco-codici-e-denominazioni-unita-territoriali-estere.zip",
        description="ISTAT foreign states catalogue (ZIP with a ;-separated ISO-8859-1 CSV)",
    )
    download_timeout: float = Field(default=60.0, description="HTTP timeout in seconds for table downloads")

    @property
    def comuni_path(self) -> Path:
        return self.tables_data_dir / "comuni.json"

    @property
    def nazioni_path(self) -> Path:
        return self.tables_data_dir / "nazioni.json"


class Settings(BaseSettings):
    """Root settings.

    Usage:
        settings = Settings()
        settings.tables.comuni_path
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    tables: TablesSettings = Field(default_factory=TablesSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper


# Module-level singleton; import this wherever settings are needed.
settings = Settings()
