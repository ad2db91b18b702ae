"""
Shopify integration modules.

Modules:
    api_client      - GraphQL client for the Shopify Admin API
    queries         - GraphQL queries and mutations
    product_fetcher - Paginated vendor product fetch and node parsing
    cache           - JSON file cache of fetched products
    merger          - Product/variant creation with placeholder cleanup
"""

from .api_client import ShopifyAPIClient, ShopifyAPIError
from .cache import ProductCache
from .merger import MergeResult, MergeRunResult, ProductMergeError, ProductMerger
from .product_fetcher import fetch_product_nodes, parse_product_node, parse_product_nodes

__all__ = [
    # API Client
    'ShopifyAPIClient',
    'ShopifyAPIError',
    # Fetching
    'fetch_product_nodes',
    'parse_product_node',
    'parse_product_nodes',
    'ProductCache',
    # Merging
    'ProductMerger',
    'ProductMergeError',
    'MergeResult',
    'MergeRunResult',
]
