"""
Product data models.

Pure data classes for catalog records as fetched from Shopify and for the
merged products built from them. No business logic - only data structure
definitions and small derived properties.
"""

from dataclasses import dataclass, field
from typing import List, Optional

# Literal defaults used when the source record omits a field
DEFAULT_WEIGHT_UNIT = "POUNDS"
DEFAULT_STATUS = "DRAFT"


@dataclass
class MetaobjectField:
    """One field of a referenced metaobject."""
    key: str
    value: Optional[str] = None
    type: str = ""


@dataclass
class MetaobjectReference:
    """Metaobject a metafield points to (e.g. a linked products group)."""
    id: str
    type: str = ""
    fields: List[MetaobjectField] = field(default_factory=list)

    def get_field(self, key: str) -> Optional[MetaobjectField]:
        """Return the first field with the given key, if any."""
        for f in self.fields:
            if f.key == key:
                return f
        return None


@dataclass
class Metafield:
    """Product or variant metafield."""
    namespace: str
    key: str
    value: str = ""
    type: str = ""
    reference: Optional[MetaobjectReference] = None


@dataclass
class MediaImage:
    """Product image with metadata."""
    id: str
    url: str
    alt: str = ""
    width: int = 0
    height: int = 0
    media_content_type: str = "IMAGE"


@dataclass
class RawVariant:
    """The single representative variant of a fetched product."""
    id: str = ""
    sku: str = ""
    price: str = "0.00"
    compare_at_price: Optional[str] = None
    barcode: Optional[str] = None
    inventory_quantity: int = 0
    taxable: bool = True
    requires_shipping: bool = False
    weight: float = 0
    weight_unit: str = DEFAULT_WEIGHT_UNIT
    country_of_origin: Optional[str] = None
    harmonized_system_code: Optional[str] = None
    metafields: List[Metafield] = field(default_factory=list)


@dataclass
class RawProduct:
    """
    One catalog entry as fetched, before reconciliation.

    Field Groups:
    - Core fields: identifier, title, vendor, type, status, tags
    - Content: plain and HTML description, SEO title/description
    - Timestamps: ISO strings as returned by the API
    - Metadata: metafields (may reference a linked products metaobject)
    - Media: image list and featured image
    - Variant: exactly one representative variant
    """

    id: str
    title: str
    vendor: str = ""
    handle: str = ""
    product_type: str = ""
    status: str = ""
    description: str = ""
    description_html: str = ""
    tags: List[str] = field(default_factory=list)
    seo_title: str = ""
    seo_description: str = ""
    created_at: str = ""
    updated_at: str = ""
    published_at: Optional[str] = None
    metafields: List[Metafield] = field(default_factory=list)
    media: List[MediaImage] = field(default_factory=list)
    featured_image: Optional[MediaImage] = None
    variant: RawVariant = field(default_factory=RawVariant)

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.id:
            raise ValueError("Product id is required")

    @property
    def representative_image(self) -> Optional[MediaImage]:
        """Featured image, falling back to the first media item."""
        if self.featured_image is not None:
            return self.featured_image
        return self.media[0] if self.media else None


@dataclass
class LinkageGroup:
    """Store-declared set of product ids that are variants of one item."""
    metaobject_id: str
    product_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ExtractedAttributes:
    """Title parse result: grouping key plus inferred size and colour."""
    cleaned_title: str
    size: str = ""
    color: str = ""


@dataclass
class Variant:
    """One variant of a merged product, carried over from a source product."""
    product_id: str
    product_title: str
    size: str = ""
    color: str = ""
    price: str = "0.00"
    compare_at_price: Optional[str] = None
    sku: str = ""
    barcode: Optional[str] = None
    metafields: List[Metafield] = field(default_factory=list)
    weight: float = 0
    weight_unit: str = DEFAULT_WEIGHT_UNIT
    requires_shipping: bool = False
    taxable: bool = True
    inventory_quantity: int = 0
    featured_image: Optional[MediaImage] = None
    country_of_origin: Optional[str] = None
    harmonized_system_code: Optional[str] = None

    @property
    def option_key(self) -> tuple:
        """(size, color) pair identifying the variant inside its product."""
        return (self.size, self.color)


@dataclass
class MergeGroup:
    """Source products judged to be variants of one logical product."""
    base_title: str
    primary: RawProduct
    products: List[RawProduct]
    variants: List[Variant]
    strategy: str
    dropped_variants: List[Variant] = field(default_factory=list)
    color_images: dict = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """A group needs at least two variants to be worth merging."""
        return len(self.variants) >= 2


@dataclass
class ProductOption:
    """Product option (Size or Color) with ordered values."""
    name: str
    values: List[str] = field(default_factory=list)


@dataclass
class CombinedProduct:
    """Merged product, ready to be created with its variants."""
    base_title: str
    handle: str
    vendor: str = ""
    product_type: str = ""
    status: str = DEFAULT_STATUS
    description_html: str = ""
    tags: List[str] = field(default_factory=list)
    metafields: List[Metafield] = field(default_factory=list)
    seo_title: str = ""
    seo_description: str = ""
    media: List[MediaImage] = field(default_factory=list)
    options: List[ProductOption] = field(default_factory=list)
    variants: List[Variant] = field(default_factory=list)
    source_product_ids: List[str] = field(default_factory=list)
    strategy: str = ""

    def option_names(self) -> List[str]:
        return [option.name for option in self.options]
