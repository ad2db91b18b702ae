"""Tests for catalog_merge/models/product.py"""

import pytest

from catalog_merge.models import (
    CombinedProduct,
    MediaImage,
    MergeGroup,
    MetaobjectField,
    MetaobjectReference,
    ProductOption,
    RawProduct,
    RawVariant,
    Variant,
)


class TestRawProduct:
    def test_minimal(self):
        product = RawProduct(id="gid://shopify/Product/1", title="Tee")
        assert product.variant == RawVariant()
        assert product.metafields == []
        assert product.media == []

    def test_id_required(self):
        with pytest.raises(ValueError, match="Product id is required"):
            RawProduct(id="", title="Tee")

    def test_representative_image_prefers_featured(self):
        featured = MediaImage(id="f", url="https://cdn.example.com/f.jpg")
        other = MediaImage(id="m", url="https://cdn.example.com/m.jpg")
        product = RawProduct(id="1", title="Tee", featured_image=featured, media=[other])
        assert product.representative_image is featured

    def test_representative_image_falls_back_to_media(self):
        other = MediaImage(id="m", url="https://cdn.example.com/m.jpg")
        assert RawProduct(id="1", title="Tee", media=[other]).representative_image is other

    def test_representative_image_none(self):
        assert RawProduct(id="1", title="Tee").representative_image is None


class TestRawVariant:
    def test_defaults(self):
        variant = RawVariant()
        assert variant.price == "0.00"
        assert variant.taxable is True
        assert variant.requires_shipping is False
        assert variant.weight == 0
        assert variant.weight_unit == "POUNDS"


class TestMetaobjectReference:
    def test_get_field(self):
        ref = MetaobjectReference(id="m", fields=[MetaobjectField(key="a", value="1")])
        assert ref.get_field("a").value == "1"
        assert ref.get_field("b") is None


class TestVariant:
    def test_option_key(self):
        variant = Variant(product_id="1", product_title="Tee", size="Small", color="Black")
        assert variant.option_key == ("Small", "Black")


class TestMergeGroup:
    def _group(self, n):
        primary = RawProduct(id="1", title="Tee")
        variants = [Variant(product_id=str(i), product_title="Tee") for i in range(n)]
        return MergeGroup(base_title="Tee", primary=primary, products=[primary], variants=variants, strategy="exact")

    def test_valid_with_two_variants(self):
        assert self._group(2).is_valid

    def test_invalid_with_one_variant(self):
        assert not self._group(1).is_valid


class TestCombinedProduct:
    def test_defaults_to_draft(self):
        assert CombinedProduct(base_title="Tee", handle="Tee").status == "DRAFT"

    def test_option_names(self):
        combined = CombinedProduct(
            base_title="Tee",
            handle="Tee",
            options=[ProductOption("Size", ["Small"]), ProductOption("Color", ["Black"])],
        )
        assert combined.option_names() == ["Size", "Color"]
