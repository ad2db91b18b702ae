"""
Product Fetcher

Fetches every product of one vendor with cursor pagination and converts the
GraphQL nodes into RawProduct records. Pages are fetched one after another:
each request needs the previous page's end cursor.
"""

import logging
from typing import Any, Dict, List, Optional

from ..models import (
    MediaImage,
    Metafield,
    MetaobjectField,
    MetaobjectReference,
    RawProduct,
    RawVariant,
)
from ..models.product import DEFAULT_WEIGHT_UNIT
from .api_client import ShopifyAPIClient, ShopifyAPIError
from .queries import PRODUCTS_PAGE_SIZE, VENDOR_PRODUCTS_QUERY, vendor_search_query

logger = logging.getLogger(__name__)


def flatten_product_node(node: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten connection wrappers of a product node.

    metafields.nodes becomes a plain list and only the first variant edge
    is kept, with its own metafields flattened the same way.
    """
    flat = dict(node)
    flat["metafields"] = (node.get("metafields") or {}).get("nodes", [])

    edges = (node.get("variants") or {}).get("edges") or []
    variant = dict(edges[0].get("node") or {}) if edges else {}
    variant["metafields"] = (variant.get("metafields") or {}).get("nodes", [])
    flat["variant"] = variant
    flat.pop("variants", None)

    flat["media"] = [
        edge.get("node") or {}
        for edge in (node.get("media") or {}).get("edges", [])
    ]
    return flat


def fetch_product_nodes(client: ShopifyAPIClient, vendor: str) -> List[Dict[str, Any]]:
    """
    Fetch all product nodes for a vendor via paginated GraphQL queries.

    Args:
        client: Shopify API client
        vendor: Vendor name to filter by

    Returns:
        List of flattened product node dicts

    Raises:
        ShopifyAPIError: If a page request fails or the response is malformed
    """
    nodes = []
    cursor = None
    page = 0

    while True:
        page += 1
        variables = {
            "first": PRODUCTS_PAGE_SIZE,
            "query": vendor_search_query(vendor),
            "cursor": cursor,
        }
        logger.debug("Fetching products page %d (cursor=%s)", page, cursor)
        data = client.graphql_request(VENDOR_PRODUCTS_QUERY, variables)

        if "products" not in data:
            raise ShopifyAPIError(f"Malformed products response at page {page}")

        for edge in data["products"]["edges"]:
            nodes.append(flatten_product_node(edge["node"]))

        page_info = data["products"]["pageInfo"]
        if page_info["hasNextPage"]:
            cursor = page_info["endCursor"]
            if page % 10 == 0:
                logger.info("Fetched %d products (%d pages)...", len(nodes), page)
        else:
            break

    logger.info("Fetched %d products for vendor '%s'", len(nodes), vendor)
    return nodes


def _parse_metafield(data: Dict[str, Any]) -> Metafield:
    reference = None
    ref = data.get("reference")
    if ref and ref.get("id"):
        reference = MetaobjectReference(
            id=ref["id"],
            type=ref.get("type") or "",
            fields=[
                MetaobjectField(key=f.get("key", ""), value=f.get("value"), type=f.get("type") or "")
                for f in ref.get("fields") or []
            ],
        )
    return Metafield(
        namespace=data.get("namespace") or "",
        key=data.get("key") or "",
        value=data.get("value") or "",
        type=data.get("type") or "",
        reference=reference,
    )


def _parse_media(data: Dict[str, Any]) -> Optional[MediaImage]:
    image = data.get("image") or {}
    if not data.get("id") or not image.get("url"):
        # Non-image media (video, 3D) has no image payload
        return None
    return MediaImage(
        id=data["id"],
        url=image["url"],
        alt=data.get("alt") or "",
        width=image.get("width") or 0,
        height=image.get("height") or 0,
        media_content_type=data.get("mediaContentType") or "IMAGE",
    )


def _parse_featured(data: Optional[Dict[str, Any]]) -> Optional[MediaImage]:
    if not data or not data.get("id"):
        return None
    image = (data.get("preview") or {}).get("image") or {}
    if not image.get("url"):
        return None
    return MediaImage(
        id=data["id"],
        url=image["url"],
        alt=data.get("alt") or image.get("altText") or "",
    )


def _parse_variant(data: Dict[str, Any]) -> RawVariant:
    item = data.get("inventoryItem") or {}
    weight = ((item.get("measurement") or {}).get("weight")) or {}
    taxable = data.get("taxable")
    requires_shipping = item.get("requiresShipping")
    return RawVariant(
        id=data.get("id") or "",
        sku=data.get("sku") or "",
        price=data.get("price") or "0.00",
        compare_at_price=data.get("compareAtPrice"),
        barcode=data.get("barcode"),
        inventory_quantity=data.get("inventoryQuantity") or 0,
        taxable=True if taxable is None else taxable,
        requires_shipping=False if requires_shipping is None else requires_shipping,
        weight=weight.get("value") or 0,
        weight_unit=weight.get("unit") or DEFAULT_WEIGHT_UNIT,
        country_of_origin=item.get("countryCodeOfOrigin"),
        harmonized_system_code=item.get("harmonizedSystemCode"),
        metafields=[_parse_metafield(m) for m in data.get("metafields") or []],
    )


def parse_product_node(node: Dict[str, Any]) -> RawProduct:
    """
    Convert a flattened product node into a RawProduct.

    Args:
        node: Node as returned by flatten_product_node (or read from cache)

    Returns:
        RawProduct

    Raises:
        ValueError: If the node has no id
    """
    seo = node.get("seo") or {}
    media = [m for m in (_parse_media(d) for d in node.get("media") or []) if m is not None]
    return RawProduct(
        id=node.get("id") or "",
        title=node.get("title") or "",
        vendor=node.get("vendor") or "",
        handle=node.get("handle") or "",
        product_type=node.get("productType") or "",
        status=node.get("status") or "",
        description=node.get("description") or "",
        description_html=node.get("descriptionHtml") or "",
        tags=list(node.get("tags") or []),
        seo_title=seo.get("title") or "",
        seo_description=seo.get("description") or "",
        created_at=node.get("createdAt") or "",
        updated_at=node.get("updatedAt") or "",
        published_at=node.get("publishedAt"),
        metafields=[_parse_metafield(m) for m in node.get("metafields") or []],
        media=media,
        featured_image=_parse_featured(node.get("featuredMedia")),
        variant=_parse_variant(node.get("variant") or {}),
    )


def parse_product_nodes(nodes: List[Dict[str, Any]]) -> List[RawProduct]:
    """Parse nodes, skipping (and logging) any without an id."""
    products = []
    for node in nodes:
        try:
            products.append(parse_product_node(node))
        except ValueError as e:
            logger.warning("Skipping product node '%s': %s", node.get("title", ""), e)
    return products
