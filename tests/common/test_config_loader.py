"""Tests for catalog_merge/common/config_loader.py"""

import pytest

from catalog_merge.common.config_loader import (
    load_color_patterns,
    load_config,
    load_size_order,
    load_size_patterns,
    load_sku_color_codes,
    parse_pattern_table,
)


class TestParsePatternTable:
    def test_keeps_file_order(self):
        table = parse_pattern_table([
            {"label": "2XL", "aliases": ["2XL", "XXL"]},
            {"label": "Small", "aliases": ["S"]},
        ])
        assert table == [("2XL", ["2XL", "XXL"]), ("Small", ["S"])]

    def test_label_is_default_alias(self):
        assert parse_pattern_table([{"label": "Black"}]) == [("Black", ["Black"])]

    def test_skips_entries_without_label(self):
        assert parse_pattern_table([{"aliases": ["X"]}, {"label": ""}]) == []

    def test_none(self):
        assert parse_pattern_table(None) == []


class TestLoadConfig:
    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("does_not_exist.yaml")

    def test_loads_attribute_patterns(self):
        config = load_config("attribute_patterns.yaml")
        assert {"size_patterns", "size_order", "color_patterns", "sku_color_codes"} <= set(config)


class TestLoaders:
    def test_size_patterns_specific_first(self):
        labels = [label for label, _ in load_size_patterns()]
        # Single-letter codes come last so "XL" is never read as "L"
        assert labels.index("Extra Large") < labels.index("Large")
        assert labels[-3:] == ["Small", "Medium", "Large"]

    def test_size_order(self):
        order = load_size_order()
        assert order.index("Small") < order.index("Medium") < order.index("Large")

    def test_color_patterns_multiword_first(self):
        labels = [label for label, _ in load_color_patterns()]
        assert labels.index("Navy") < labels.index("Blue")
        assert labels.index("Heather Grey") < labels.index("Grey")

    def test_sku_color_codes(self):
        codes = dict(load_sku_color_codes())
        assert "BLK" in codes["Black"]
