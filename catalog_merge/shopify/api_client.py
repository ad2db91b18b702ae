"""
Shopify API Client

GraphQL client for the Shopify Admin API.
Handles authentication, rate limiting, retries and error reporting.
"""

import logging
import threading
import time
from typing import Dict, List, Optional

import requests

from ..common.settings import DEFAULT_API_VERSION

logger = logging.getLogger(__name__)


class ShopifyAPIError(Exception):
    """Transport, HTTP or top-level GraphQL failure of one request."""

    def __init__(self, message: str, status_code: Optional[int] = None, errors: Optional[List] = None):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []


class ShopifyAPIClient:
    """
    Shared client for the Shopify Admin GraphQL API.

    Handles:
    - Authentication
    - Rate limiting (2 requests/second, shared across worker threads)
    - Retries on 429 and 5xx gateway errors
    - Raising ShopifyAPIError on failures

    Usage:
        client = ShopifyAPIClient(shop="my-store", access_token="shpat_xxx")
        data = client.graphql_request(query, variables)
    """

    MAX_RETRIES = 5
    RETRYABLE_STATUS_CODES = {429, 502, 503, 504}

    def __init__(self, shop: str, access_token: str, api_version: str = DEFAULT_API_VERSION):
        """
        Initialize the API client.

        Args:
            shop: Shop name (without .myshopify.com) or full domain
            access_token: Shopify Admin API access token
            api_version: Admin API version (e.g. "2025-01")
        """
        # Normalize shop name
        if ".myshopify.com" in shop:
            self.shop = shop.replace("https://", "").replace("http://", "").split(".myshopify.com")[0]
        else:
            self.shop = shop

        self.access_token = access_token
        self.api_version = api_version
        self.graphql_url = f"https://{self.shop}.myshopify.com/admin/api/{api_version}/graphql.json"

        self.session = requests.Session()
        self.session.headers.update({
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        })

        # Rate limiting
        self.requests_made = 0
        self.last_request_time = 0.0
        self.min_request_interval = 0.5  # 2 req/sec
        self._rate_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "ShopifyAPIClient":
        """Create a client from ShopifySettings."""
        return cls(settings.shop, settings.access_token, api_version=settings.api_version)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _rate_limit(self):
        """Implement rate limiting (2 requests/second max)."""
        with self._rate_lock:
            now = time.time()
            elapsed = now - self.last_request_time

            if elapsed < self.min_request_interval:
                time.sleep(self.min_request_interval - elapsed)

            self.last_request_time = time.time()
            self.requests_made += 1

    def graphql_request(
        self,
        query: str,
        variables: Optional[Dict] = None,
        timeout: int = 30
    ) -> Dict:
        """
        Make GraphQL API request with rate limiting and retries.

        Args:
            query: GraphQL query or mutation
            variables: Query variables
            timeout: Request timeout in seconds

        Returns:
            Response data (without 'data' wrapper)

        Raises:
            ShopifyAPIError: On timeouts, connection errors, HTTP errors,
                exhausted retries or a top-level GraphQL 'errors' array.
                Mutation userErrors are part of the data and not raised.
        """
        payload = {"query": query}
        if variables:
            payload["variables"] = variables

        for attempt in range(self.MAX_RETRIES):
            self._rate_limit()

            try:
                response = self.session.post(
                    self.graphql_url,
                    json=payload,
                    timeout=timeout
                )
            except requests.exceptions.Timeout:
                logger.error("GraphQL request timeout")
                raise ShopifyAPIError("GraphQL request timed out") from None
            except requests.exceptions.RequestException as e:
                logger.error("Request failed: %s", e)
                raise ShopifyAPIError(f"Request failed: {e}") from e

            # Retry on rate limiting or server errors
            if response.status_code in self.RETRYABLE_STATUS_CODES:
                retry_after = int(float(response.headers.get("Retry-After", 2 ** attempt)))
                logger.warning("HTTP %d on GraphQL, retry %d/%d in %ds...",
                               response.status_code, attempt + 1,
                               self.MAX_RETRIES, retry_after)
                time.sleep(retry_after)
                continue

            # Check for HTTP errors
            if response.status_code >= 400:
                logger.error("API Error %d: %s", response.status_code, response.text[:200])
                raise ShopifyAPIError(
                    f"API Error {response.status_code}: {response.text[:200]}",
                    status_code=response.status_code,
                )

            try:
                result = response.json()
            except ValueError:
                raise ShopifyAPIError(
                    "Response is not valid JSON", status_code=response.status_code
                ) from None

            # Check for GraphQL errors
            if result.get("errors"):
                logger.error("GraphQL Errors: %s", result["errors"])
                raise ShopifyAPIError(
                    f"GraphQL errors: {result['errors']}",
                    status_code=response.status_code,
                    errors=result["errors"],
                )

            return result.get("data") or {}

        logger.error("Max retries (%d) exceeded for GraphQL request", self.MAX_RETRIES)
        raise ShopifyAPIError(f"Max retries ({self.MAX_RETRIES}) exceeded for GraphQL request")

    def test_connection(self) -> bool:
        """
        Test API connection by fetching shop info.

        Returns:
            True if connection successful
        """
        try:
            result = self.graphql_request("{ shop { name } }")
        except ShopifyAPIError:
            return False
        if result and "shop" in result:
            shop_name = result["shop"].get("name", "Unknown")
            logger.info("Connected to: %s", shop_name)
            return True
        return False
