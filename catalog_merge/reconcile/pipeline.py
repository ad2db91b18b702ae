"""
Reconciliation Pipeline

Runs the engine end to end without network I/O:
linkage -> grouping -> normalization -> assembly.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from ..common.config_loader import load_size_order
from ..models import CombinedProduct, MergeGroup, RawProduct
from .assembler import assemble
from .attributes import AttributeExtractor
from .grouping import group_products
from .linkage import resolve_linkage
from .normalizer import normalize_group

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationResult:
    """Query-side output of one reconciliation run."""
    original_products: List[RawProduct] = field(default_factory=list)
    combined_products: List[CombinedProduct] = field(default_factory=list)
    unmatched_products: List[RawProduct] = field(default_factory=list)

    def to_dict(self) -> Dict:
        """Serialize for the display side (JSON-compatible)."""
        return {
            "originalProducts": [asdict(p) for p in self.original_products],
            "combinedProducts": [asdict(p) for p in self.combined_products],
            "unmatchedProducts": [asdict(p) for p in self.unmatched_products],
        }


def _unmatched_from(products: List[RawProduct], unmatched_ids: set) -> List[RawProduct]:
    # Input order, one entry per product
    return [p for p in products if p.id in unmatched_ids]


def reconcile(
    products: List[RawProduct],
    extractor: Optional[AttributeExtractor] = None,
    size_order: Optional[List[str]] = None,
) -> ReconciliationResult:
    """
    Group, normalize and assemble merged products.

    Groups that fall below two variants after normalization, and variants
    dropped during normalization, are reported as unmatched.

    Args:
        products: Fetched catalog records
        extractor: Attribute extractor (config-driven default if None)
        size_order: Size display order (config default if None)

    Returns:
        ReconciliationResult
    """
    if size_order is None:
        size_order = load_size_order()

    linkage_groups = resolve_linkage(products)
    grouping = group_products(products, linkage_groups=linkage_groups, extractor=extractor)

    unmatched_ids = {p.id for p in grouping.unmatched}
    combined = []
    valid_groups: List[MergeGroup] = []

    for group in grouping.merged:
        normalize_group(group)
        unmatched_ids.update(v.product_id for v in group.dropped_variants)
        if not group.is_valid:
            unmatched_ids.update(v.product_id for v in group.variants)
            continue
        valid_groups.append(group)
        combined.append(assemble(group, size_order=size_order))

    # Products with a variant in a merged product are never unmatched
    merged_ids = {v.product_id for g in valid_groups for v in g.variants}
    unmatched_ids -= merged_ids

    result = ReconciliationResult(
        original_products=list(products),
        combined_products=combined,
        unmatched_products=_unmatched_from(products, unmatched_ids),
    )
    logger.info("Reconciled %d products into %d merged products (%d unmatched)",
                len(products), len(result.combined_products), len(result.unmatched_products))
    return result
