from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Locale

LocaleFilter = Callable[[Locale], bool]


class Settings(BaseSettings):
    # Contentful (Delivery API + bearer token)
    CONTENTFUL_SPACE_ID: Optional[str] = None
    CONTENTFUL_ACCESS_TOKEN: Optional[str] = None
    CONTENTFUL_HOST: str = "cdn.contentful.com"
    CONTENTFUL_ENVIRONMENT: str = "master"
    CONTENTFUL_LOCALES: List[str] = []  # Empty = keep every locale
    CONTENTFUL_PAGE_LIMIT: int = Field(default=1000, gt=0)  # Content type page size
    CONTENTFUL_WORKERS: int = Field(default=1, ge=1)  # >1 fetches entries and assets concurrently
    CONTENTFUL_TIMEOUT: float = 30.0  # Transport timeout (seconds)

    # Observability
    LOG_FORMAT: str = "auto"  # json|plain|auto
    NO_COLOR: bool = False

    # Testing environment flag
    CS_TESTING: bool = Field(
        default=False,
        description="Enable testing mode",
    )
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @classmethod
    def load_config(cls, config_file: Optional[str] = None) -> "Settings":
        """Load settings with config file -> env -> CLI precedence."""
        config_data: Dict[str, Any] = {}

        if config_file:
            config_path: Optional[Path] = Path(config_file)
        else:
            # Auto-discover .contentful-snapshot.{yaml,yml,toml}
            for ext in ["yaml", "yml", "toml"]:
                config_path = Path(f".contentful-snapshot.{ext}")
                if config_path.exists():
                    break
            else:
                config_path = None

        if config_path and config_path.exists():
            if config_path.suffix in [".yaml", ".yml"]:
                import yaml  # type: ignore[import-untyped]

                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            elif config_path.suffix == ".toml":
                import tomllib

                with open(config_path, "rb") as f:
                    config_data = tomllib.load(f)

        # Environment variables override file values, even when equal to a default
        env_settings = cls()
        explicit = env_settings.model_dump(exclude_unset=True)
        return cls(**{**config_data, **explicit})


def _keep_all(locale: Locale) -> bool:
    return True


def locale_filter_for(codes: List[str]) -> LocaleFilter:
    """Build a locale predicate from an allow-list of codes (empty keeps all)."""
    if not codes:
        return _keep_all
    allowed = set(codes)

    def _filter(locale: Locale) -> bool:
        return locale.code in allowed

    return _filter


class PluginConfig:
    """Read-only view over the options a fetch run was started with.

    Keys follow the camelCase option names users write in their config
    (``spaceId``, ``accessToken``, ``host``, ``environment``,
    ``localeFilter``). Unset keys fall back to ``DEFAULT_OPTIONS``.
    """

    DEFAULT_OPTIONS: Dict[str, Any] = {
        "host": "cdn.contentful.com",
        "environment": "master",
        "localeFilter": _keep_all,
        "pageLimit": 1000,
    }

    def __init__(self, options: Dict[str, Any]):
        self._original = dict(options)
        self._options = {**self.DEFAULT_OPTIONS, **{k: v for k, v in options.items() if v is not None}}

    def get(self, key: str) -> Any:
        return self._options.get(key)

    def get_original_plugin_options(self) -> Dict[str, Any]:
        return dict(self._original)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PluginConfig":
        options: Dict[str, Any] = {
            "spaceId": settings.CONTENTFUL_SPACE_ID,
            "accessToken": settings.CONTENTFUL_ACCESS_TOKEN,
            "host": settings.CONTENTFUL_HOST,
            "environment": settings.CONTENTFUL_ENVIRONMENT,
            "pageLimit": settings.CONTENTFUL_PAGE_LIMIT,
        }
        if settings.CONTENTFUL_LOCALES:
            options["localeFilter"] = locale_filter_for(settings.CONTENTFUL_LOCALES)
        return cls(options)


# Default settings - replaced by load_config() during CLI startup
SETTINGS = Settings()
