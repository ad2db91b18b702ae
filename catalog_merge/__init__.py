"""
Catalog Variant Merger

Modules:
    models      - Data models (RawProduct, Variant, MergeGroup, CombinedProduct)
    common      - Shared utilities (config loader, settings, logging, text helpers)
    reconcile   - Reconciliation engine (attribute parsing, grouping, normalization, payloads)
    shopify     - Shopify Admin API integration (fetching, caching, merging)
"""
