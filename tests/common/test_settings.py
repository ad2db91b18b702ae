"""Tests for catalog_merge/common/settings.py"""

import pytest

from catalog_merge.common.settings import (
    DEFAULT_API_VERSION,
    DEFAULT_CACHE_TTL,
    DEFAULT_MAX_WORKERS,
    ShopifySettings,
)

ENV = {
    "SHOPIFY_SHOP": "test-store",
    "SHOPIFY_ACCESS_TOKEN": "shpat_test",
    "CATALOG_VENDOR": "Lifestyle",
}


class TestFromEnv:
    def test_reads_required_values(self):
        settings = ShopifySettings.from_env(env=ENV)
        assert settings.shop == "test-store"
        assert settings.access_token == "shpat_test"
        assert settings.vendor == "Lifestyle"

    def test_defaults(self):
        settings = ShopifySettings.from_env(env=ENV)
        assert settings.api_version == DEFAULT_API_VERSION
        assert settings.cache_ttl == DEFAULT_CACHE_TTL
        assert settings.max_workers == DEFAULT_MAX_WORKERS

    def test_optional_values(self):
        env = dict(ENV, SHOPIFY_API_VERSION="2024-10", CATALOG_CACHE_TTL="60",
                   CATALOG_MAX_WORKERS="8", CATALOG_CACHE_PATH="/tmp/c.json")
        settings = ShopifySettings.from_env(env=env)
        assert settings.api_version == "2024-10"
        assert settings.cache_ttl == 60
        assert settings.max_workers == 8
        assert settings.cache_path == "/tmp/c.json"

    def test_arguments_override_env(self):
        settings = ShopifySettings.from_env(env=ENV, shop="other", vendor="Outdoor", max_workers=2)
        assert settings.shop == "other"
        assert settings.vendor == "Outdoor"
        assert settings.max_workers == 2

    def test_missing_token_raises(self):
        env = {k: v for k, v in ENV.items() if k != "SHOPIFY_ACCESS_TOKEN"}
        with pytest.raises(ValueError, match="access token is required"):
            ShopifySettings.from_env(env=env)

    def test_missing_vendor_raises(self):
        env = {k: v for k, v in ENV.items() if k != "CATALOG_VENDOR"}
        with pytest.raises(ValueError, match="Vendor is required"):
            ShopifySettings.from_env(env=env)

    def test_bad_integer_raises(self):
        with pytest.raises(ValueError, match="CATALOG_CACHE_TTL must be an integer"):
            ShopifySettings.from_env(env=dict(ENV, CATALOG_CACHE_TTL="soon"))


class TestValidation:
    def test_zero_workers_rejected(self):
        with pytest.raises(ValueError, match="max_workers"):
            ShopifySettings(shop="s", access_token="t", vendor="v", max_workers=0)


class TestLocation:
    def test_unset_by_default(self):
        assert ShopifySettings.from_env(env=ENV).location_id is None

    def test_read_from_env(self):
        settings = ShopifySettings.from_env(env=dict(ENV, CATALOG_LOCATION_ID="gid://shopify/Location/1"))
        assert settings.location_id == "gid://shopify/Location/1"

    def test_argument_overrides_env(self):
        env = dict(ENV, CATALOG_LOCATION_ID="gid://shopify/Location/1")
        settings = ShopifySettings.from_env(env=env, location_id="gid://shopify/Location/2")
        assert settings.location_id == "gid://shopify/Location/2"
