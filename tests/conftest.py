"""Shared test fixtures."""

import json

import pytest

from catalog_merge.models import (
    MediaImage,
    Metafield,
    MetaobjectField,
    MetaobjectReference,
    RawProduct,
    RawVariant,
)
from catalog_merge.reconcile.attributes import AttributeExtractor

SIZE_ORDER = ["Extra Small", "Small", "Medium", "Large", "Extra Large", "2XL", "3XL", "One Size"]


def make_product(product_id, title, sku="", image_url=None, metafields=None, **kwargs):
    """Build a RawProduct with a single variant; ids are short numbers."""
    image = None
    if image_url:
        image = MediaImage(id=f"gid://shopify/MediaImage/{product_id}", url=image_url, alt=title)
    return RawProduct(
        id=f"gid://shopify/Product/{product_id}",
        title=title,
        vendor=kwargs.pop("vendor", "Lifestyle"),
        product_type=kwargs.pop("product_type", "Apparel"),
        featured_image=image,
        media=[image] if image else [],
        metafields=metafields or [],
        variant=RawVariant(
            id=f"gid://shopify/ProductVariant/{product_id}",
            sku=sku,
            price=kwargs.pop("price", "20.00"),
        ),
        **kwargs,
    )


def linkage_metafield(metaobject_id, product_ids):
    """Linked products metafield pointing at a group metaobject."""
    return Metafield(
        namespace="custom",
        key="linked_products",
        type="metaobject_reference",
        value=metaobject_id,
        reference=MetaobjectReference(
            id=metaobject_id,
            type="linked_products",
            fields=[
                MetaobjectField(
                    key="linked_product_group",
                    value=json.dumps([f"gid://shopify/Product/{i}" for i in product_ids]),
                    type="list.product_reference",
                ),
            ],
        ),
    )


@pytest.fixture
def extractor():
    """Small inline extractor so tests don't depend on the YAML tables."""
    return AttributeExtractor(
        size_patterns=[
            ("2XL", ["2XL", "XXL"]),
            ("Extra Large", ["Extra Large", "XL"]),
            ("Small", ["Small"]),
            ("Medium", ["Medium"]),
            ("Large", ["Large"]),
            ("Small", ["S"]),
            ("Medium", ["M"]),
            ("Large", ["L"]),
        ],
        color_patterns=[
            ("Navy", ["Navy Blue", "Navy"]),
            ("Black", ["Black"]),
            ("White", ["White"]),
            ("Blue", ["Blue"]),
            ("Grey", ["Grey", "Gray"]),
        ],
        sku_color_codes=[
            ("Black", ["BLK", "BK"]),
            ("White", ["WHT"]),
        ],
    )


@pytest.fixture
def size_order():
    return list(SIZE_ORDER)


@pytest.fixture
def widget_products():
    """Three size variants of one item, fetched out of size order."""
    return [
        make_product(1, "Widget Small", sku="W-S", image_url="https://cdn.example.com/w1.jpg"),
        make_product(2, "Widget Large", sku="W-L", image_url="https://cdn.example.com/w2.jpg"),
        make_product(3, "Widget Medium", sku="W-M", image_url="https://cdn.example.com/w3.jpg"),
    ]


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def linkage_factory():
    return linkage_metafield
