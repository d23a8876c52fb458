from __future__ import annotations
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

class Settings(BaseSettings):
    """
    Movie Explorer settings, read from MOVIE_EXPLORER_* variables and movieexplorer.env.
    Environment variables win over the file.
    """
    app_name: str = "Movie Explorer"
    log_level: str = "INFO"

    # External catalog (OMDb)
    catalog_api_base: str = "https://www.omdbapi.com/"
    omdb_api_key: Optional[str] = None    # no built-in fallback: unset means the client refuses to start

    # Boundary knobs; both off unless the deployment opts in
    request_timeout_s: Optional[float] = None
    retry_attempts: int = 1

    model_config = SettingsConfigDict(
        env_prefix="MOVIE_EXPLORER_",   # reads MOVIE_EXPLORER_OMDB_API_KEY, etc.
        env_file="movieexplorer.env",
    )

    def require_api_key(self) -> str:
        """
        Return the configured catalog key or fail closed.
        """
        key: str = (self.omdb_api_key or "").strip()
        if not key:
            raise ConfigurationError("OMDb API key not configured (MOVIE_EXPLORER_OMDB_API_KEY)")
        return key

settings: Settings = Settings()
