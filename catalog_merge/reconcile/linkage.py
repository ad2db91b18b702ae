"""
Linkage Resolver

Reads the "linked products" metafield that stores attach to products and
collects, per referenced metaobject, the set of product ids declared to be
variants of one item. These groups are merged regardless of title.
"""

import json
import logging
from typing import Dict, List, Optional

from ..models import LinkageGroup, Metafield, RawProduct

logger = logging.getLogger(__name__)

LINKED_PRODUCTS_KEY = "linked_products"
LINKED_PRODUCTS_TYPE = "metaobject_reference"
LINKED_GROUP_FIELD = "linked_product_group"


def find_linkage_metafield(product: RawProduct) -> Optional[Metafield]:
    """Return the linked products metafield of a product, if present."""
    for metafield in product.metafields:
        if metafield.key == LINKED_PRODUCTS_KEY and metafield.type == LINKED_PRODUCTS_TYPE:
            return metafield
    return None


def parse_linked_ids(raw_value: str) -> List[str]:
    """
    Parse the JSON array of product ids stored in the group field.

    Args:
        raw_value: JSON text, e.g. '["gid://shopify/Product/1", ...]'

    Returns:
        List of product ids

    Raises:
        ValueError: If the value is not JSON or not a list of strings
            (json.JSONDecodeError is a ValueError subclass)
    """
    ids = json.loads(raw_value)
    if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
        raise ValueError(f"Expected a JSON list of product ids, got: {raw_value[:100]}")
    return ids


def resolve_linkage(products: List[RawProduct]) -> List[LinkageGroup]:
    """
    Build linkage groups from the products' linked products metafields.

    Ids are unioned per metaobject across every product that references it.
    Groups are returned in order of first-seen metaobject id. A product with
    a malformed group field is logged and skipped.

    Args:
        products: Fetched catalog records

    Returns:
        List of LinkageGroup
    """
    groups: Dict[str, Dict[str, None]] = {}

    for product in products:
        metafield = find_linkage_metafield(product)
        if metafield is None or metafield.reference is None:
            continue

        metaobject_id = metafield.reference.id
        group_field = metafield.reference.get_field(LINKED_GROUP_FIELD)
        if not metaobject_id or group_field is None or not group_field.value:
            continue

        try:
            linked_ids = parse_linked_ids(group_field.value)
        except ValueError as e:
            logger.warning("Skipping linked products of %s (%s): %s",
                           product.id, product.title, e)
            continue

        # dict keys keep first-seen order and collapse duplicates
        members = groups.setdefault(metaobject_id, {})
        for product_id in linked_ids:
            members[product_id] = None

    logger.debug("Resolved %d linkage groups", len(groups))
    return [
        LinkageGroup(metaobject_id=metaobject_id, product_ids=list(members))
        for metaobject_id, members in groups.items()
    ]
