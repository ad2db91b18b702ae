"""
Merge-Payload Assembler

Turns a normalized merge group into a CombinedProduct and builds the
GraphQL variables for re-creating it:

- to_create_payload():    productCreate variables (product + media)
- build_variants_input(): productVariantsBulkCreate variants, wired to the
                          option ids returned by productCreate

productCreate always creates one variant from the first value of each
option. That value must not collide with a real variant, so a throwaway
"Default Title" value is prepended to the first option; the variant it
produces is deleted once the real variants exist.
"""

import logging
from typing import Dict, List, Optional

from ..common.config_loader import load_size_order
from ..common.text_utils import make_handle
from ..models import CombinedProduct, MediaImage, MergeGroup, Metafield, ProductOption, Variant
from .linkage import LINKED_PRODUCTS_KEY

logger = logging.getLogger(__name__)

SIZE_OPTION = "Size"
COLOR_OPTION = "Color"
PLACEHOLDER_OPTION_VALUE = "Default Title"

# Set on the inventory item, never sent as a variant metafield
HARMONIZED_CODE_KEY = "harmonized_system_code"

DEFAULT_WEIGHT_UNIT = "POUNDS"


def sort_variants_by_size(variants: List[Variant], size_order: List[str]) -> List[Variant]:
    """
    Stable-sort variants by the canonical size order.

    Sizes missing from size_order keep their relative order after the
    known ones.
    """
    rank = {size.lower(): i for i, size in enumerate(size_order)}
    unknown = len(size_order)
    return sorted(variants, key=lambda v: rank.get(v.size.lower(), unknown))


def derive_options(variants: List[Variant]) -> List[ProductOption]:
    """
    Build the option list from the variants' sizes and colours.

    One option per non-empty dimension (Size first, then Color), each with
    its distinct values in first-seen order.

    Example:
        Sizes ['Small', 'Large'] and no colours -> [ProductOption('Size', ['Small', 'Large'])]
    """
    options = []
    for name, attr in ((SIZE_OPTION, "size"), (COLOR_OPTION, "color")):
        values = []
        for variant in variants:
            value = getattr(variant, attr)
            if value and value not in values:
                values.append(value)
        if values:
            options.append(ProductOption(name=name, values=values))
    return options


def _merge_media(group: MergeGroup, variants: List[Variant]) -> List[MediaImage]:
    # Primary media, then colour images, then any other variant image
    media = list(group.primary.media)
    seen_urls = {m.url for m in media}
    extra = list(group.color_images.values())
    extra.extend(v.featured_image for v in variants if v.featured_image is not None)
    for image in extra:
        if image.url not in seen_urls:
            media.append(image)
            seen_urls.add(image.url)
    return media


def assemble(group: MergeGroup, size_order: Optional[List[str]] = None) -> CombinedProduct:
    """
    Build the merged product from a normalized group.

    Shared fields come from the group's primary product.

    Args:
        group: Normalized, valid merge group
        size_order: Display order for sizes. If None, loads from config.

    Returns:
        CombinedProduct
    """
    if size_order is None:
        size_order = load_size_order()

    primary = group.primary
    variants = sort_variants_by_size(group.variants, size_order)
    kept_ids = {v.product_id for v in variants}

    return CombinedProduct(
        base_title=group.base_title,
        handle=make_handle(group.base_title),
        vendor=primary.vendor,
        product_type=primary.product_type,
        description_html=primary.description_html or primary.description,
        tags=list(primary.tags),
        metafields=[m for m in primary.metafields if m.key != LINKED_PRODUCTS_KEY],
        seo_title=primary.seo_title,
        seo_description=primary.seo_description,
        media=_merge_media(group, variants),
        options=derive_options(variants),
        variants=variants,
        source_product_ids=[p.id for p in group.products if p.id in kept_ids],
        strategy=group.strategy,
    )


def _metafield_input(metafield: Metafield) -> Dict:
    return {
        "namespace": metafield.namespace,
        "key": metafield.key,
        "value": metafield.value,
        "type": metafield.type,
    }


def to_create_payload(combined: CombinedProduct) -> Dict:
    """
    Build productCreate variables for a merged product.

    Args:
        combined: Assembled product

    Returns:
        {"product": ProductCreateInput, "media": [CreateMediaInput]}
    """
    product_options = []
    for i, option in enumerate(combined.options):
        values = list(option.values)
        if i == 0:
            values.insert(0, PLACEHOLDER_OPTION_VALUE)
        product_options.append({
            "name": option.name,
            "values": [{"name": value} for value in values],
        })

    product = {
        "title": combined.base_title,
        "descriptionHtml": combined.description_html,
        "handle": combined.handle,
        "productType": combined.product_type,
        "status": combined.status,
        "vendor": combined.vendor,
        "productOptions": product_options,
        "seo": {
            "title": combined.seo_title,
            "description": combined.seo_description,
        },
    }
    if combined.tags:
        product["tags"] = combined.tags
    if combined.metafields:
        product["metafields"] = [_metafield_input(m) for m in combined.metafields]

    media = [
        {
            "alt": image.alt,
            "mediaContentType": "IMAGE",
            "originalSource": image.url,
        }
        for image in combined.media
    ]

    return {"product": product, "media": media}


def _harmonized_code(variant: Variant) -> Optional[str]:
    if variant.harmonized_system_code:
        return variant.harmonized_system_code
    for metafield in variant.metafields:
        if metafield.key == HARMONIZED_CODE_KEY and metafield.value:
            return metafield.value
    return None


def build_variant_input(
    variant: Variant,
    option_values: List[Dict],
    media_id: Optional[str] = None,
    location_id: Optional[str] = None,
) -> Dict:
    """
    Build one ProductVariantsBulkInput entry.

    inventoryQuantities is only sent when a location id is given.
    """
    entry = {
        "price": variant.price,
        "compareAtPrice": variant.compare_at_price,
        "barcode": variant.barcode,
        "taxable": variant.taxable,
        "inventoryItem": {
            "sku": variant.sku,
            "requiresShipping": variant.requires_shipping,
            "countryCodeOfOrigin": variant.country_of_origin,
            "harmonizedSystemCode": _harmonized_code(variant),
            "measurement": {
                "weight": {
                    "unit": variant.weight_unit or DEFAULT_WEIGHT_UNIT,
                    "value": variant.weight or 0,
                },
            },
        },
        "mediaId": media_id,
        "optionValues": option_values,
    }

    if location_id:
        entry["inventoryQuantities"] = [{
            "availableQuantity": variant.inventory_quantity,
            "locationId": location_id,
        }]

    metafields = [m for m in variant.metafields if m.key != HARMONIZED_CODE_KEY]
    if metafields:
        entry["metafields"] = [_metafield_input(m) for m in metafields]

    return entry


def build_variants_input(
    combined: CombinedProduct,
    option_ids: Dict[str, str],
    media_ids: Optional[Dict[str, str]] = None,
    location_id: Optional[str] = None,
) -> List[Dict]:
    """
    Build productVariantsBulkCreate variants for a created product.

    Args:
        combined: Assembled product
        option_ids: Option name -> option id, from the productCreate response
        media_ids: Image URL -> new media id, from the productCreate response
        location_id: Location receiving each variant's inventory quantity

    Returns:
        List of ProductVariantsBulkInput dicts

    Raises:
        ValueError: If an option of the product has no id
    """
    media_ids = media_ids or {}
    missing = [name for name in combined.option_names() if name not in option_ids]
    if missing:
        raise ValueError(f"No option id returned for: {', '.join(missing)}")

    entries = []
    for variant in combined.variants:
        option_values = []
        for name, value in ((SIZE_OPTION, variant.size), (COLOR_OPTION, variant.color)):
            if name in combined.option_names() and value:
                option_values.append({"name": value, "optionId": option_ids[name]})

        # Every option of the product needs a value
        if len(option_values) != len(combined.options):
            logger.warning("Skipping variant %s of '%s': incomplete options %s",
                           variant.sku, combined.base_title, variant.option_key)
            continue

        image = variant.featured_image
        media_id = media_ids.get(image.url) if image is not None else None
        entries.append(build_variant_input(variant, option_values, media_id, location_id))

    return entries
