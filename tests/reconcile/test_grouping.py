"""Tests for catalog_merge/reconcile/grouping.py"""

from catalog_merge.models import ExtractedAttributes, LinkageGroup
from catalog_merge.reconcile.grouping import (
    STRATEGY_EXACT,
    STRATEGY_FUZZY,
    STRATEGY_LINKAGE,
    build_variant,
    group_by_exact_title,
    group_by_fuzzy_title,
    group_products,
)


def _ids(products):
    return [p.id.rsplit("/", 1)[-1] for p in products]


def _attrs(products, extractor):
    return {p.id: extractor.extract(p.title, p.variant.sku) for p in products}


class TestBuildVariant:
    def test_copies_source_fields(self, product_factory):
        product = product_factory(1, "Tee Small Black", sku="T-S", image_url="https://cdn.example.com/1.jpg")
        variant = build_variant(product, ExtractedAttributes("Tee", size="Small", color="Black"))

        assert variant.product_id == product.id
        assert variant.size == "Small"
        assert variant.color == "Black"
        assert variant.sku == "T-S"
        assert variant.price == "20.00"
        assert variant.featured_image.url == "https://cdn.example.com/1.jpg"

    def test_defaults_when_source_is_sparse(self, product_factory):
        variant = build_variant(product_factory(1, "Tee"), ExtractedAttributes("Tee"))
        assert variant.weight_unit == "POUNDS"
        assert variant.requires_shipping is False
        assert variant.taxable is True
        assert variant.featured_image is None


class TestExactGrouping:
    def test_groups_equal_cleaned_titles(self, product_factory, extractor):
        products = [
            product_factory(1, "Classic Tee Small Black"),
            product_factory(2, "Canvas Tote"),
            product_factory(3, "classic tee Large Black"),
        ]
        groups, remaining = group_by_exact_title(products, _attrs(products, extractor))

        assert len(groups) == 1
        assert groups[0].strategy == STRATEGY_EXACT
        assert _ids(groups[0].products) == ["1", "3"]
        assert groups[0].base_title == "Classic Tee"
        assert _ids(remaining) == ["2"]

    def test_empty_cleaned_titles_never_group(self, product_factory, extractor):
        products = [product_factory(1, "Small"), product_factory(2, "Large")]
        groups, remaining = group_by_exact_title(products, _attrs(products, extractor))
        assert groups == []
        assert _ids(remaining) == ["1", "2"]


class TestFuzzyGrouping:
    def test_first_fit_depends_on_input_order(self, product_factory, extractor):
        pro = product_factory(1, "Widget Pro")
        plain = product_factory(2, "Widget")
        plus = product_factory(3, "Widget Plus")

        groups, remaining = group_by_fuzzy_title([pro, plain, plus], _attrs([pro, plain, plus], extractor))
        assert [_ids(g.products) for g in groups] == [["1", "2"]]
        assert _ids(remaining) == ["3"]

        groups, remaining = group_by_fuzzy_title([plain, pro, plus], _attrs([plain, pro, plus], extractor))
        assert [_ids(g.products) for g in groups] == [["2", "1", "3"]]
        assert remaining == []

    def test_strategy_and_base_title(self, product_factory, extractor):
        products = [product_factory(1, "Trail Jacket Black"), product_factory(2, "Trail Jacket Pro White")]
        groups, _ = group_by_fuzzy_title(products, _attrs(products, extractor))
        assert groups[0].strategy == STRATEGY_FUZZY
        assert groups[0].base_title == "Trail Jacket"


class TestGroupProducts:
    def test_linkage_takes_priority(self, product_factory, linkage_factory, extractor):
        group_id = "gid://shopify/Metaobject/7"
        products = [
            product_factory(1, "Alpha Tee Small", metafields=[linkage_factory(group_id, [1, 2])]),
            product_factory(2, "Beta Hoodie Large"),
            product_factory(3, "Beta Hoodie Medium"),
        ]

        result = group_products(products, extractor=extractor)

        assert [g.strategy for g in result.merged] == [STRATEGY_LINKAGE]
        assert _ids(result.merged[0].products) == ["1", "2"]
        assert result.merged[0].base_title == "Alpha Tee"
        # Product 3's only title match was claimed by the linkage group
        assert _ids(result.unmatched) == ["3"]

    def test_each_product_in_at_most_one_group(self, product_factory, extractor):
        products = [
            product_factory(1, "Classic Tee Small"),
            product_factory(2, "Classic Tee Large"),
            product_factory(3, "Classic Tee Heavy Small"),
            product_factory(4, "Classic Tee Heavy Large"),
            product_factory(5, "Canvas Tote"),
        ]

        result = group_products(products, linkage_groups=[], extractor=extractor)

        placed = [p.id for g in result.merged for p in g.products]
        assert len(placed) == len(set(placed))
        assert sorted(placed + [p.id for p in result.unmatched]) == sorted(p.id for p in products)
        assert [g.strategy for g in result.merged] == [STRATEGY_EXACT, STRATEGY_EXACT]

    def test_linkage_group_of_one_falls_through(self, product_factory, extractor):
        products = [product_factory(1, "Widget Small"), product_factory(2, "Widget Large")]
        linkage = [LinkageGroup("gid://shopify/Metaobject/1", ["gid://shopify/Product/1", "gid://shopify/Product/99"])]

        result = group_products(products, linkage_groups=linkage, extractor=extractor)

        assert [g.strategy for g in result.merged] == [STRATEGY_EXACT]
        assert result.unmatched == []

    def test_exact_before_fuzzy(self, product_factory, extractor):
        products = [
            product_factory(1, "Widget Small"),
            product_factory(2, "Widget Pro Small"),
            product_factory(3, "Widget Large"),
            product_factory(4, "Widget Pro Large"),
        ]
        result = group_products(products, linkage_groups=[], extractor=extractor)
        assert [(g.strategy, _ids(g.products)) for g in result.merged] == [
            (STRATEGY_EXACT, ["1", "3"]),
            (STRATEGY_EXACT, ["2", "4"]),
        ]
