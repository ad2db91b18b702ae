"""
Product Merger

Re-creates merged products in Shopify. Each product goes through three
dependent steps:

1. productCreate              -> product id, option ids, placeholder variant
2. productVariantsBulkCreate  -> real variants, wired to the option ids
3. productVariantsBulkDelete  -> removes the "Default Title" placeholder

Step 3 is attempted whenever step 1 succeeded, even if step 2 failed.
Products are independent of each other and are merged concurrently on a
thread pool; one product's failure never stops the others.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..models import CombinedProduct
from ..reconcile.assembler import PLACEHOLDER_OPTION_VALUE, build_variants_input, to_create_payload
from .api_client import ShopifyAPIClient, ShopifyAPIError
from .queries import (
    FILE_UPDATE_MUTATION,
    PRODUCT_CREATE_MUTATION,
    VARIANTS_BULK_CREATE_MUTATION,
    VARIANTS_BULK_DELETE_MUTATION,
)

logger = logging.getLogger(__name__)


class ProductMergeError(Exception):
    """productCreate returned user errors or no product."""

    def __init__(self, message: str, user_errors: Optional[List[Dict]] = None):
        super().__init__(message)
        self.user_errors = user_errors or []


@dataclass
class MergeResult:
    """Outcome of merging one product."""
    title: str
    handle: str
    source_product_ids: List[str] = field(default_factory=list)
    product_id: Optional[str] = None
    variant_ids: List[str] = field(default_factory=list)
    placeholder_deleted: bool = False
    user_errors: List[Dict] = field(default_factory=list)
    error: str = ""
    status_code: Optional[int] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.product_id is not None and not self.error and not self.user_errors


@dataclass
class MergeRunResult:
    """Per-run outcome, split into successes and failures."""
    successful_updates: List[MergeResult] = field(default_factory=list)
    failed_updates: List[MergeResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.successful_updates) + len(self.failed_updates)


class ProductMerger:
    """
    Creates merged products with their variants via the Admin API.

    Usage:
        merger = ProductMerger(client, max_workers=4)
        run = merger.merge_all(result.combined_products)
        print(len(run.successful_updates), len(run.failed_updates))
    """

    def __init__(
        self,
        client: ShopifyAPIClient,
        tag_image_alts: bool = True,
        max_workers: int = 4,
        location_id: Optional[str] = None,
    ):
        """
        Initialize the merger.

        Args:
            client: Shopify API client (shared by all worker threads)
            tag_image_alts: Prefix each colour's image alt text with the colour
            max_workers: Number of products merged concurrently
            location_id: Location that receives each variant's stock (None: no stock set)
        """
        self.client = client
        self.tag_image_alts = tag_image_alts
        self.max_workers = max_workers
        self.location_id = location_id

    # ------------------------------------------------------------------
    # Individual API operations
    # ------------------------------------------------------------------

    def create_product(self, combined: CombinedProduct) -> Dict:
        """
        Create the product with its options and media.

        Returns:
            The created product node (id, options, media, variants)

        Raises:
            ProductMergeError: On user errors
            ShopifyAPIError: On transport errors
        """
        payload = to_create_payload(combined)
        logger.info("Creating product '%s' (%d variants)", combined.base_title, len(combined.variants))
        data = self.client.graphql_request(PRODUCT_CREATE_MUTATION, payload)

        created = data.get("productCreate") or {}
        user_errors = created.get("userErrors") or []
        if user_errors:
            logger.error("Product creation errors for '%s': %s", combined.base_title, user_errors)
            raise ProductMergeError(f"Product creation failed: {combined.base_title}", user_errors)

        product = created.get("product")
        if not product or not product.get("id"):
            raise ProductMergeError(f"Product creation returned no product: {combined.base_title}")
        return product

    def create_variants(self, product_id: str, variants: List[Dict]) -> Dict:
        """
        Bulk-create variants on a product.

        Returns:
            productVariantsBulkCreate payload (productVariants, userErrors)
        """
        data = self.client.graphql_request(
            VARIANTS_BULK_CREATE_MUTATION,
            {"productId": product_id, "variants": variants},
        )
        return data.get("productVariantsBulkCreate") or {}

    def delete_variants(self, product_id: str, variant_ids: List[str]) -> List[Dict]:
        """
        Bulk-delete variants of a product.

        Returns:
            User errors (empty on success)
        """
        data = self.client.graphql_request(
            VARIANTS_BULK_DELETE_MUTATION,
            {"productId": product_id, "variantsIds": variant_ids},
        )
        return (data.get("productVariantsBulkDelete") or {}).get("userErrors") or []

    def update_image_alt(self, media_id: str, color: str, alt: str = "") -> List[Dict]:
        """
        Prefix an image's alt text with a colour name.

        Returns:
            User errors (empty on success)
        """
        new_alt = f"{color} - {alt}" if alt else color
        data = self.client.graphql_request(
            FILE_UPDATE_MUTATION,
            {"files": [{"id": media_id, "alt": new_alt}]},
        )
        return (data.get("fileUpdate") or {}).get("userErrors") or []

    # ------------------------------------------------------------------
    # One product
    # ------------------------------------------------------------------

    @staticmethod
    def placeholder_variant_ids(product: Dict) -> List[str]:
        """Ids of variants created from the placeholder option value."""
        nodes = (product.get("variants") or {}).get("nodes") or []
        return [v["id"] for v in nodes if PLACEHOLDER_OPTION_VALUE in (v.get("title") or "")]

    @staticmethod
    def media_id_map(combined: CombinedProduct, product: Dict) -> Dict[str, str]:
        """
        Map source image URLs to the new product's media ids.

        Media is returned in the order it was submitted; new media may still
        be processing and carry no URL yet, so the mapping is positional.
        """
        nodes = (product.get("media") or {}).get("nodes") or []
        return {
            image.url: node["id"]
            for image, node in zip(combined.media, nodes)
            if node.get("id")
        }

    @contextmanager
    def placeholder_cleanup(self, product: Dict, result: MergeResult):
        """
        Delete the placeholder variant when the block exits, however it exits.

        Errors from the deletion are recorded on the result, never raised.
        """
        placeholder_ids = self.placeholder_variant_ids(product)
        try:
            yield
        finally:
            if placeholder_ids:
                try:
                    errors = self.delete_variants(product["id"], placeholder_ids)
                except ShopifyAPIError as e:
                    logger.error("Placeholder cleanup failed for %s: %s", product["id"], e)
                    result.warnings.append(f"Placeholder cleanup failed: {e}")
                else:
                    if errors:
                        logger.error("Placeholder cleanup errors for %s: %s", product["id"], errors)
                        result.user_errors.extend(errors)
                    else:
                        result.placeholder_deleted = True

    def _tag_color_images(self, combined: CombinedProduct, media_ids: Dict[str, str], result: MergeResult) -> None:
        tagged = set()
        for variant in combined.variants:
            image = variant.featured_image
            if not variant.color or image is None or variant.color in tagged:
                continue
            media_id = media_ids.get(image.url)
            if not media_id:
                continue
            tagged.add(variant.color)
            try:
                errors = self.update_image_alt(media_id, variant.color, image.alt)
            except ShopifyAPIError as e:
                result.warnings.append(f"Alt text update failed for {variant.color}: {e}")
                continue
            for error in errors:
                result.warnings.append(f"Alt text update for {variant.color}: {error.get('message', error)}")

    def merge(self, combined: CombinedProduct) -> MergeResult:
        """
        Create one merged product, its variants, and remove the placeholder.

        Transport and user errors are recorded on the returned result.

        Args:
            combined: Assembled product

        Returns:
            MergeResult
        """
        result = MergeResult(
            title=combined.base_title,
            handle=combined.handle,
            source_product_ids=list(combined.source_product_ids),
        )

        try:
            product = self.create_product(combined)
        except ProductMergeError as e:
            result.error = str(e)
            result.user_errors.extend(e.user_errors)
            return result
        except ShopifyAPIError as e:
            logger.error("Product creation failed for '%s': %s", combined.base_title, e)
            result.error = str(e)
            result.status_code = e.status_code
            return result

        result.product_id = product["id"]
        option_ids = {option["name"]: option["id"] for option in product.get("options") or []}
        media_ids = self.media_id_map(combined, product)

        with self.placeholder_cleanup(product, result):
            try:
                variants_input = build_variants_input(combined, option_ids, media_ids, self.location_id)
                created = self.create_variants(result.product_id, variants_input)
            except (ShopifyAPIError, ValueError) as e:
                logger.error("Variant creation failed for '%s': %s", combined.base_title, e)
                result.error = str(e)
                result.status_code = getattr(e, "status_code", None)
            else:
                user_errors = created.get("userErrors") or []
                if user_errors:
                    logger.error("Variant creation errors for '%s': %s", combined.base_title, user_errors)
                    result.user_errors.extend(user_errors)
                result.variant_ids = [v["id"] for v in created.get("productVariants") or []]

        if self.tag_image_alts and result.succeeded:
            self._tag_color_images(combined, media_ids, result)

        if result.succeeded:
            logger.info("Merged '%s' -> %s (%d variants)",
                        combined.base_title, result.product_id, len(result.variant_ids))
        return result

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def merge_all(self, products: List[CombinedProduct]) -> MergeRunResult:
        """
        Merge many products concurrently.

        Each product is isolated: an exception while merging one is logged
        and recorded as that product's failure.

        Args:
            products: Assembled products

        Returns:
            MergeRunResult, each list in input order
        """
        results: Dict[int, MergeResult] = {}

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self.merge, combined): i
                for i, combined in enumerate(products)
            }

            for future in as_completed(futures):
                i = futures[future]
                try:
                    results[i] = future.result()
                except Exception as e:
                    logger.exception("Unexpected error merging '%s'", products[i].base_title)
                    results[i] = MergeResult(
                        title=products[i].base_title,
                        handle=products[i].handle,
                        source_product_ids=list(products[i].source_product_ids),
                        error=f"Unexpected error: {e}",
                    )

        run = MergeRunResult()
        for i in range(len(products)):
            if results[i].succeeded:
                run.successful_updates.append(results[i])
            else:
                run.failed_updates.append(results[i])

        logger.info("Merged %d/%d products (%d failed)",
                    len(run.successful_updates), run.total, len(run.failed_updates))
        return run
