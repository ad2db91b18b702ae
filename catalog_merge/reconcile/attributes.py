"""
Attribute Extractor

Parses a product title (and, as a fallback, its SKU) into a cleaned title
plus size and colour:
1. Size table: the first matching entry gives the size, then every size
   alias is removed from the title (so "M/L" leaves nothing behind)
2. Colour table on the size-stripped title, same first-match and removal
3. SKU colour codes (BLK, WHT, ...) when the title names no colour
4. Remaining text stripped of punctuation -> cleaned title (grouping key)

The tables are ordered (label, aliases) lists loaded from
config/attribute_patterns.yaml. The first matching entry names the
attribute; removal runs through the whole table.
"""

import re
from typing import List, Optional, Pattern, Tuple

from ..common.config_loader import (
    PatternTable,
    load_color_patterns,
    load_size_patterns,
    load_sku_color_codes,
)
from ..common.text_utils import strip_non_alphanumeric
from ..models import ExtractedAttributes

# Apostrophes count as word characters so "Women's" never yields a size "S"
_BOUNDARY_BEFORE = r"(?<![\w'’])"
_BOUNDARY_AFTER = r"(?![\w'’])"

CompiledTable = List[Tuple[str, Pattern]]


def compile_table(table: PatternTable) -> CompiledTable:
    """
    Compile (label, aliases) pairs into (label, regex) matchers.

    Aliases within one entry are tried longest first; whitespace inside an
    alias matches any run of whitespace or dashes.

    Args:
        table: Ordered (label, aliases) pairs

    Returns:
        Ordered (label, compiled pattern) pairs
    """
    compiled = []
    for label, aliases in table:
        alternatives = []
        for alias in sorted(aliases, key=len, reverse=True):
            words = [re.escape(word) for word in alias.split()]
            alternatives.append(r'[\s\-]+'.join(words))
        pattern = re.compile(
            f"{_BOUNDARY_BEFORE}(?:{'|'.join(alternatives)}){_BOUNDARY_AFTER}",
            re.IGNORECASE,
        )
        compiled.append((label, pattern))
    return compiled


def _first_match(text: str, table: CompiledTable) -> Tuple[str, Optional[re.Match]]:
    for label, pattern in table:
        match = pattern.search(text)
        if match:
            return label, match
    return "", None


def _strip_all(text: str, table: CompiledTable) -> str:
    # Every alias of every entry, most specific entries first
    for _, pattern in table:
        text = pattern.sub(" ", text)
    return text


class AttributeExtractor:
    """
    Extracts size and colour attributes from product titles.

    Usage:
        extractor = AttributeExtractor()
        attrs = extractor.extract("Classic Tee Large Black", sku="")
        # ExtractedAttributes(cleaned_title='Classic Tee', size='Large', color='Black')
    """

    def __init__(
        self,
        size_patterns: Optional[PatternTable] = None,
        color_patterns: Optional[PatternTable] = None,
        sku_color_codes: Optional[PatternTable] = None,
    ):
        """
        Initialize the extractor.

        Args:
            size_patterns: Ordered size table. If None, loads from config.
            color_patterns: Ordered title colour table. If None, loads from config.
            sku_color_codes: Ordered SKU code table. If None, loads from config.
        """
        if size_patterns is None:
            size_patterns = load_size_patterns()
        if color_patterns is None:
            color_patterns = load_color_patterns()
        if sku_color_codes is None:
            sku_color_codes = load_sku_color_codes()

        self.size_table = compile_table(size_patterns)
        self.color_table = compile_table(color_patterns)
        self.sku_color_table = compile_table(sku_color_codes)

    def find_size(self, title: str) -> str:
        """Return the size label found in a title, or an empty string."""
        label, _ = _first_match(title or "", self.size_table)
        return label

    def find_color(self, title: str, sku: str = "") -> str:
        """Return the colour found in a title (or SKU), or an empty string."""
        label, _ = _first_match(title or "", self.color_table)
        if not label:
            label = self.find_sku_color(sku)
        return label

    def find_sku_color(self, sku: str) -> str:
        """Return the colour encoded in a SKU (e.g. TEE-BLK-L), or an empty string."""
        if not sku:
            return ""
        # Underscores separate SKU segments too
        label, _ = _first_match(sku.replace("_", " "), self.sku_color_table)
        return label

    def extract(self, title: str, sku: str = "") -> ExtractedAttributes:
        """
        Parse a title into cleaned title, size and colour.

        Args:
            title: Product title
            sku: Variant SKU, consulted only for colour codes

        Returns:
            ExtractedAttributes; size/color are empty strings when absent

        Example:
            >>> extractor.extract("Classic Tee Large Black")
            ExtractedAttributes(cleaned_title='Classic Tee', size='Large', color='Black')
        """
        working = title or ""

        size, _ = _first_match(working, self.size_table)
        working = _strip_all(working, self.size_table)

        color, _ = _first_match(working, self.color_table)
        working = _strip_all(working, self.color_table)
        if not color:
            color = self.find_sku_color(sku)

        return ExtractedAttributes(
            cleaned_title=strip_non_alphanumeric(working),
            size=size,
            color=color,
        )


_default_extractor: Optional[AttributeExtractor] = None


def get_default_extractor() -> AttributeExtractor:
    """Return a shared extractor built from the config tables."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = AttributeExtractor()
    return _default_extractor


def extract(title: str, sku: str = "") -> ExtractedAttributes:
    """Extract attributes with the default config-driven extractor."""
    return get_default_extractor().extract(title, sku)
