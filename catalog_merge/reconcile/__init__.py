"""
Reconciliation engine.

Pure functions over fetched catalog records; no network I/O.

Modules:
    attributes - title/SKU parsing into cleaned title, size and colour
    linkage    - linked products metaobject groups
    grouping   - linkage, exact-title and fuzzy-title grouping
    normalizer - missing attribute inference, de-duplication, colour images
    assembler  - CombinedProduct and GraphQL mutation payloads
    pipeline   - end-to-end reconcile()
"""

from .assembler import (
    PLACEHOLDER_OPTION_VALUE,
    assemble,
    build_variants_input,
    derive_options,
    to_create_payload,
)
from .attributes import AttributeExtractor, extract
from .grouping import GroupingResult, group_products
from .linkage import resolve_linkage
from .normalizer import normalize_group
from .pipeline import ReconciliationResult, reconcile

__all__ = [
    'AttributeExtractor',
    'extract',
    'resolve_linkage',
    'GroupingResult',
    'group_products',
    'normalize_group',
    'assemble',
    'derive_options',
    'to_create_payload',
    'build_variants_input',
    'PLACEHOLDER_OPTION_VALUE',
    'ReconciliationResult',
    'reconcile',
]
