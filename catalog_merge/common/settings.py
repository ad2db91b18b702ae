"""
Runtime Settings

Shop credentials and run options for the Shopify-facing collaborators.
Values come from environment variables (optionally via a .env file);
CLI flags override them. The reconciliation engine itself takes no settings.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_API_VERSION = "2025-01"
DEFAULT_CACHE_PATH = "cache/products_cache.json"
DEFAULT_CACHE_TTL = 3600
DEFAULT_MAX_WORKERS = 4


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class ShopifySettings:
    """Connection and run settings for one merge run."""
    shop: str
    access_token: str
    vendor: str
    api_version: str = DEFAULT_API_VERSION
    cache_path: str = DEFAULT_CACHE_PATH
    cache_ttl: int = DEFAULT_CACHE_TTL
    max_workers: int = DEFAULT_MAX_WORKERS
    location_id: Optional[str] = None

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.shop:
            raise ValueError("Shopify shop is required (SHOPIFY_SHOP or --shop)")
        if not self.access_token:
            raise ValueError("Shopify access token is required (SHOPIFY_ACCESS_TOKEN or --token)")
        if not self.vendor:
            raise ValueError("Vendor is required (CATALOG_VENDOR or --vendor)")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        shop: Optional[str] = None,
        access_token: Optional[str] = None,
        vendor: Optional[str] = None,
        max_workers: Optional[int] = None,
        location_id: Optional[str] = None,
    ) -> "ShopifySettings":
        """
        Build settings from environment variables.

        Explicit arguments take precedence over the environment.

        Args:
            env: Mapping to read from (default: os.environ after load_dotenv)
            shop: Shop name override
            access_token: Access token override
            vendor: Vendor override
            max_workers: Worker count override
            location_id: Inventory location override

        Returns:
            Validated ShopifySettings
        """
        if env is None:
            load_dotenv()
            env = os.environ

        return cls(
            shop=shop or env.get("SHOPIFY_SHOP", ""),
            access_token=access_token or env.get("SHOPIFY_ACCESS_TOKEN", ""),
            vendor=vendor or env.get("CATALOG_VENDOR", ""),
            api_version=env.get("SHOPIFY_API_VERSION") or DEFAULT_API_VERSION,
            cache_path=env.get("CATALOG_CACHE_PATH") or DEFAULT_CACHE_PATH,
            cache_ttl=_int_setting(env, "CATALOG_CACHE_TTL", DEFAULT_CACHE_TTL),
            max_workers=max_workers or _int_setting(env, "CATALOG_MAX_WORKERS", DEFAULT_MAX_WORKERS),
            location_id=location_id or env.get("CATALOG_LOCATION_ID") or None,
        )
