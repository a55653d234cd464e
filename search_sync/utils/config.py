"""Configuration management for environment variables and site settings."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from search_sync.utils.exceptions import ConfigurationError

DEFAULT_CONFIG_FILE = "_config.yml"


class ProfileSettings(BaseModel):
    """Per-index overrides declared under ``search_sync.profiles``."""

    required_path_fragment: str | None = Field(
        default=None, description="Only index items whose path contains this fragment"
    )
    permalink_policy: str = Field(default="locale-prefix", description="Permalink policy name")
    permalink_prefix: str = Field(default="/blog", description="Prefix for locale segments")
    locales: list[str] = Field(default_factory=lambda: ["ru", "en"])


class IndexSettings(BaseModel):
    """The ``search_sync`` section of the site configuration."""

    index_name: str | None = None
    service_url: str | None = None
    author: str | None = None
    profiles: dict[str, ProfileSettings] = Field(default_factory=dict)


class SiteSettings(BaseModel):
    """Subset of the site ``_config.yml`` used for indexing.

    Unknown keys are ignored so a full site generator config can be read as is.
    """

    url: str = "http://example.com"
    root: str = "/"
    permalink: str = ":year/:month/:day/:title/"
    source_dir: str = "source"
    category_dir: str = "categories"
    tag_dir: str = "tags"
    author: str | None = None
    search_sync: IndexSettings = Field(default_factory=IndexSettings)


def load_site_settings(config_path: Path) -> SiteSettings:
    """Load and validate site settings from a YAML file.

    Args:
        config_path: Path to the site ``_config.yml``

    Returns:
        Validated SiteSettings

    Raises:
        ConfigurationError: If the file is missing, is not valid YAML or fails validation
    """
    if not config_path.exists():
        raise ConfigurationError(f"Site config not found: {config_path}")

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid {config_path.name}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid {config_path.name}: expected a mapping")

    # An empty `search_sync:` key parses as None
    if data.get("search_sync") is None:
        data.pop("search_sync", None)

    try:
        return SiteSettings(**data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid {config_path.name}: {e}") from e


class Config:
    """Application configuration loaded from environment variables and site settings."""

    INDEXING_KEY_ENV = "SEARCH_SYNC_INDEXING_KEY"
    SERVICE_URL_ENV = "SEARCH_SYNC_SERVICE_URL"
    INDEX_NAME_ENV = "SEARCH_SYNC_INDEX_NAME"

    def __init__(
        self,
        site_dir: str | Path = ".",
        config_file: str = DEFAULT_CONFIG_FILE,
    ) -> None:
        """Load configuration from .env file, environment and site config.

        Args:
            site_dir: Root directory of the site
            config_file: Site config file name, relative to site_dir

        Raises:
            ConfigurationError: If the indexing key, index name or service URL is missing
        """
        env_path = Path(".env")
        if env_path.exists():
            load_dotenv(env_path)

        # Checked before anything is read from the site
        self.indexing_key = self._get_required(self.INDEXING_KEY_ENV)

        self.site_dir = Path(site_dir)
        self.site = load_site_settings(self.site_dir / config_file)

        self.index_name = os.getenv(self.INDEX_NAME_ENV) or self.site.search_sync.index_name
        if not self.index_name:
            raise ConfigurationError(
                f"Index name is not set: provide search_sync.index_name in {config_file} "
                f"or the {self.INDEX_NAME_ENV} environment variable"
            )

        self.service_url = os.getenv(self.SERVICE_URL_ENV) or self.site.search_sync.service_url
        if not self.service_url:
            raise ConfigurationError(
                f"Service URL is not set: provide search_sync.service_url in {config_file} "
                f"or the {self.SERVICE_URL_ENV} environment variable"
            )

        self.default_author = self.site.search_sync.author or self.site.author

        # Optional configuration with defaults
        self.log_level = self.get_optional("LOG_LEVEL", "INFO")

    def _get_required(self, key: str) -> str:
        """Get required environment variable or raise error.

        Args:
            key: Environment variable name

        Returns:
            Environment variable value

        Raises:
            ConfigurationError: If variable is not set
        """
        value = os.getenv(key, "").strip()
        if not value:
            raise ConfigurationError(f"{key} environment variable is not set")
        return value

    @staticmethod
    def get_optional(key: str, default: str | None = None) -> str | None:
        """Get optional environment variable with default value.

        Args:
            key: Environment variable name
            default: Default value if not set

        Returns:
            Environment variable value or default
        """
        return os.getenv(key, default)
