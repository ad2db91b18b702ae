"""
Grouping Engine

Partitions fetched products into merge groups. Strategies run in priority
order and each one only sees products no earlier strategy placed:

1. linkage - explicit linked products metaobjects
2. exact   - equal cleaned titles (case-insensitive)
3. fuzzy   - one cleaned title is a substring of the other

Fuzzy grouping is greedy and first-fit: a product joins the first existing
bucket (in creation order) whose key is compatible, so the result depends on
input order. Only buckets of two or more products become groups; the rest
are reported as unmatched.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..models import ExtractedAttributes, LinkageGroup, MergeGroup, RawProduct, Variant
from .attributes import AttributeExtractor, get_default_extractor
from .linkage import resolve_linkage

logger = logging.getLogger(__name__)

STRATEGY_LINKAGE = "linkage"
STRATEGY_EXACT = "exact"
STRATEGY_FUZZY = "fuzzy"

# Extracted attributes per product id
AttributeMap = Dict[str, ExtractedAttributes]


@dataclass
class GroupingResult:
    """Output of the grouping engine."""
    merged: List[MergeGroup] = field(default_factory=list)
    unmatched: List[RawProduct] = field(default_factory=list)


def build_variant(product: RawProduct, attrs: ExtractedAttributes) -> Variant:
    """Create a merge variant from a source product and its parsed attributes."""
    source = product.variant
    return Variant(
        product_id=product.id,
        product_title=product.title,
        size=attrs.size,
        color=attrs.color,
        price=source.price,
        compare_at_price=source.compare_at_price,
        sku=source.sku,
        barcode=source.barcode,
        metafields=list(source.metafields),
        weight=source.weight,
        weight_unit=source.weight_unit,
        requires_shipping=source.requires_shipping,
        taxable=source.taxable,
        inventory_quantity=source.inventory_quantity,
        featured_image=product.representative_image,
        country_of_origin=source.country_of_origin,
        harmonized_system_code=source.harmonized_system_code,
    )


def _make_group(products: List[RawProduct], attributes: AttributeMap, strategy: str) -> MergeGroup:
    primary = products[0]
    return MergeGroup(
        base_title=attributes[primary.id].cleaned_title or primary.title.strip(),
        primary=primary,
        products=list(products),
        variants=[build_variant(p, attributes[p.id]) for p in products],
        strategy=strategy,
    )


def _title_key(attributes: AttributeMap, product: RawProduct) -> str:
    return attributes[product.id].cleaned_title.lower()


def group_by_linkage(
    products: List[RawProduct],
    linkage_groups: List[LinkageGroup],
    attributes: AttributeMap,
) -> Tuple[List[MergeGroup], List[RawProduct]]:
    """
    Group products declared together by linked products metaobjects.

    A product already claimed by an earlier linkage group is not available
    to later ones. Groups resolving to one product are discarded and that
    product stays available for title matching.

    Returns:
        (groups, remaining products in input order)
    """
    placed = set()
    groups = []

    for linkage in linkage_groups:
        wanted = set(linkage.product_ids)
        members = [p for p in products if p.id in wanted and p.id not in placed]
        if len(members) < 2:
            logger.debug("Linkage group %s resolves to %d product(s), skipped",
                         linkage.metaobject_id, len(members))
            continue
        placed.update(p.id for p in members)
        groups.append(_make_group(members, attributes, STRATEGY_LINKAGE))

    remaining = [p for p in products if p.id not in placed]
    return groups, remaining


def group_by_exact_title(
    products: List[RawProduct],
    attributes: AttributeMap,
) -> Tuple[List[MergeGroup], List[RawProduct]]:
    """
    Group products whose cleaned titles are equal (case-insensitive).

    Products with an empty cleaned title are never grouped here.

    Returns:
        (groups, remaining products in input order)
    """
    buckets: Dict[str, List[RawProduct]] = {}
    for product in products:
        key = _title_key(attributes, product)
        if key:
            buckets.setdefault(key, []).append(product)

    groups = []
    placed = set()
    for members in buckets.values():
        if len(members) < 2:
            continue
        placed.update(p.id for p in members)
        groups.append(_make_group(members, attributes, STRATEGY_EXACT))

    remaining = [p for p in products if p.id not in placed]
    return groups, remaining


def _is_fuzzy_match(key: str, bucket_key: str) -> bool:
    return key in bucket_key or bucket_key in key


def group_by_fuzzy_title(
    products: List[RawProduct],
    attributes: AttributeMap,
) -> Tuple[List[MergeGroup], List[RawProduct]]:
    """
    Group products whose cleaned titles contain one another.

    First-fit: each product joins the first compatible bucket, compared
    against the key of the product that opened it, else opens a new one.
    Products with an empty cleaned title never match.

    Returns:
        (groups, remaining products in input order)
    """
    buckets: List[Tuple[str, List[RawProduct]]] = []
    for product in products:
        key = _title_key(attributes, product)
        if not key:
            continue
        for bucket_key, members in buckets:
            if _is_fuzzy_match(key, bucket_key):
                members.append(product)
                break
        else:
            buckets.append((key, [product]))

    groups = []
    placed = set()
    for _, members in buckets:
        if len(members) < 2:
            continue
        placed.update(p.id for p in members)
        groups.append(_make_group(members, attributes, STRATEGY_FUZZY))

    remaining = [p for p in products if p.id not in placed]
    return groups, remaining


def extract_attributes(
    products: List[RawProduct],
    extractor: Optional[AttributeExtractor] = None,
) -> AttributeMap:
    """Run the attribute extractor over every product (title + SKU)."""
    extractor = extractor or get_default_extractor()
    return {
        p.id: extractor.extract(p.title, p.variant.sku)
        for p in products
    }


def group_products(
    products: List[RawProduct],
    linkage_groups: Optional[List[LinkageGroup]] = None,
    extractor: Optional[AttributeExtractor] = None,
) -> GroupingResult:
    """
    Partition products into merge groups and unmatched leftovers.

    Args:
        products: Fetched catalog records (ids must be unique)
        linkage_groups: Pre-resolved linkage groups (resolved here if None)
        extractor: Attribute extractor (config-driven default if None)

    Returns:
        GroupingResult with merged groups in strategy order and unmatched
        products in input order
    """
    if linkage_groups is None:
        linkage_groups = resolve_linkage(products)

    attributes = extract_attributes(products, extractor)

    linked, remaining = group_by_linkage(products, linkage_groups, attributes)
    exact, remaining = group_by_exact_title(remaining, attributes)
    fuzzy, remaining = group_by_fuzzy_title(remaining, attributes)

    logger.info("Grouped %d products: %d linked, %d exact, %d fuzzy groups, %d unmatched",
                len(products), len(linked), len(exact), len(fuzzy), len(remaining))

    return GroupingResult(merged=linked + exact + fuzzy, unmatched=remaining)
