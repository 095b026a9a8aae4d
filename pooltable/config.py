"""Build configuration for the pools table."""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_IMAGE = "https://armada-alliance.com/assets/ship-420.png"


class Settings(BaseSettings):
    """Settings loaded from environment variables (and ``.env``).

    The instance is passed explicitly to :class:`~pooltable.table.PoolsTable`
    and the HTTP client factories; nothing below reads the environment itself.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    # Credentials
    metadata_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("BLOCKFROST_PROJECT_ID", "metadata_api_key"),
    )
    geo_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("IPSTACK_API_KEY", "geo_api_key"),
    )

    # Upstream services
    blockfrost_base_url: str = "https://cardano-mainnet.blockfrost.io/api/v0"
    adapools_base_url: str = "https://js.adapools.org"
    ipstack_base_url: str = "http://api.ipstack.com/"
    http_timeout: float = 15.0  # seconds, per request

    # Fan-out limits
    pool_concurrency: int = Field(default=8, ge=1, le=64)
    geo_max_in_progress: int = Field(default=1, ge=1, le=16)

    # Build behaviour
    skip_failed_pools: bool = False
    placeholder_image: str = PLACEHOLDER_IMAGE
    pages_dir: str = "content"
    cache_path: Optional[str] = None
