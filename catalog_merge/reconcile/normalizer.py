"""
Conflict Resolver / Normalizer

Refines a merge group in place so its variants fit a clean option matrix:
1. Fill missing sizes from a same-colour sibling, else drop the variant
2. Fill missing colours with the least frequent colour in the group
3. Drop variants whose (size, color) pair was already seen
4. Pick one canonical image per colour and apply it to that colour's variants

A group left with fewer than two variants is invalid (see MergeGroup.is_valid).
"""

import logging
from collections import Counter
from typing import Dict, List, Optional

from ..models import MediaImage, MergeGroup, Variant

logger = logging.getLogger(__name__)


def _drop(group: MergeGroup, variant: Variant, reason: str) -> None:
    logger.debug("Dropping %s from '%s': %s", variant.product_title, group.base_title, reason)
    group.dropped_variants.append(variant)


def fill_missing_sizes(group: MergeGroup) -> None:
    """
    Borrow a size from a sibling sharing the variant's colour.

    Only applies when some variant in the group has a size. Variants
    with no such sibling cannot be placed in the option matrix and are
    moved to group.dropped_variants.
    """
    if not any(v.size for v in group.variants):
        return

    kept = []
    for variant in group.variants:
        if not variant.size:
            donor = next(
                (v for v in group.variants
                 if v is not variant and v.size and v.color == variant.color),
                None,
            )
            if donor is None:
                _drop(group, variant, "no size and no sibling of the same colour")
                continue
            variant.size = donor.size
        kept.append(variant)
    group.variants = kept


def least_frequent_color(variants: List[Variant]) -> str:
    """
    Return the colour that occurs least often among the variants.

    Variants without a colour are ignored. Ties go to the colour seen first.
    """
    counts = Counter(v.color for v in variants if v.color)
    if not counts:
        return ""
    # Counter keeps insertion order and min() keeps the first minimum
    return min(counts, key=counts.get)


def fill_missing_colors(group: MergeGroup) -> None:
    """
    Assign the least frequent group colour to variants without one.

    The frequency is recomputed for each filled variant. When the donor
    colour has an image and the variant has none, the image is copied too.
    """
    if not any(v.color for v in group.variants):
        return

    for variant in group.variants:
        if variant.color:
            continue
        color = least_frequent_color(group.variants)
        donor = next(
            (v for v in group.variants if v.color == color and v.featured_image is not None),
            None,
        )
        variant.color = color
        if variant.featured_image is None and donor is not None:
            variant.featured_image = donor.featured_image


def deduplicate_variants(group: MergeGroup) -> None:
    """Keep only the first variant for each (size, color) pair."""
    seen = set()
    kept = []
    for variant in group.variants:
        if variant.option_key in seen:
            _drop(group, variant, f"duplicate of {variant.option_key}")
            continue
        seen.add(variant.option_key)
        kept.append(variant)
    group.variants = kept


def select_color_images(group: MergeGroup) -> Dict[str, MediaImage]:
    """
    Choose one image per colour (the first variant of that colour with one)
    and apply it to every variant of that colour.

    Returns:
        Mapping of colour to its canonical image
    """
    images: Dict[str, MediaImage] = {}
    for variant in group.variants:
        if variant.color and variant.featured_image is not None:
            images.setdefault(variant.color, variant.featured_image)

    for variant in group.variants:
        canonical: Optional[MediaImage] = images.get(variant.color)
        if canonical is not None:
            variant.featured_image = canonical

    group.color_images = images
    return images


def normalize_group(group: MergeGroup) -> MergeGroup:
    """
    Run every normalization step on a group, in place.

    Args:
        group: Group from the grouping engine

    Returns:
        The same group; check group.is_valid before assembling it
    """
    fill_missing_sizes(group)
    fill_missing_colors(group)
    deduplicate_variants(group)
    select_color_images(group)

    if not group.is_valid:
        logger.info("Group '%s' has %d variant(s) after normalization, not merging",
                    group.base_title, len(group.variants))
    return group
