"""
Data models for catalog reconciliation.

This module contains pure data classes with no business logic.
"""

from .product import (
    CombinedProduct,
    ExtractedAttributes,
    LinkageGroup,
    MediaImage,
    MergeGroup,
    Metafield,
    MetaobjectField,
    MetaobjectReference,
    ProductOption,
    RawProduct,
    RawVariant,
    Variant,
)

__all__ = [
    'MetaobjectField',
    'MetaobjectReference',
    'Metafield',
    'MediaImage',
    'RawVariant',
    'RawProduct',
    'LinkageGroup',
    'ExtractedAttributes',
    'Variant',
    'MergeGroup',
    'ProductOption',
    'CombinedProduct',
]
