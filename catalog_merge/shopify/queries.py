"""
GraphQL documents used against the Shopify Admin API.
"""

PRODUCTS_PAGE_SIZE = 250

# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

VENDOR_PRODUCTS_QUERY = """
query VendorProducts($first: Int!, $cursor: String, $query: String!) {
  products(first: $first, query: $query, after: $cursor) {
    edges {
      node {
        id
        title
        vendor
        handle
        createdAt
        updatedAt
        publishedAt
        productType
        status
        description
        descriptionHtml
        tags
        seo {
          title
          description
        }
        featuredMedia {
          id
          alt
          preview {
            image {
              url
              altText
            }
          }
        }
        media(first: 60) {
          edges {
            node {
              ... on MediaImage {
                id
                mediaContentType
                alt
                image {
                  id
                  url
                  width
                  height
                }
              }
            }
          }
        }
        metafields(first: 65) {
          nodes {
            namespace
            key
            value
            type
            reference {
              ... on Metaobject {
                id
                type
                fields {
                  key
                  value
                  type
                }
              }
            }
          }
        }
        variants(first: 1) {
          edges {
            node {
              id
              sku
              price
              compareAtPrice
              inventoryQuantity
              barcode
              taxable
              inventoryItem {
                requiresShipping
                countryCodeOfOrigin
                harmonizedSystemCode
                measurement {
                  weight {
                    value
                    unit
                  }
                }
              }
              metafields(first: 30) {
                nodes {
                  namespace
                  key
                  value
                  type
                }
              }
            }
          }
        }
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

PRODUCT_CREATE_MUTATION = """
mutation productCreate($product: ProductCreateInput!, $media: [CreateMediaInput!]) {
  productCreate(product: $product, media: $media) {
    product {
      id
      handle
      options {
        id
        name
        position
        optionValues {
          id
          name
        }
      }
      media(first: 60) {
        nodes {
          id
          alt
          ... on MediaImage {
            image {
              url
            }
          }
        }
      }
      variants(first: 10) {
        nodes {
          id
          title
        }
      }
    }
    userErrors {
      field
      message
    }
  }
}
"""

VARIANTS_BULK_CREATE_MUTATION = """
mutation productVariantsBulkCreate($productId: ID!, $variants: [ProductVariantsBulkInput!]!) {
  productVariantsBulkCreate(productId: $productId, variants: $variants) {
    productVariants {
      id
      title
      sku
      price
      selectedOptions {
        name
        value
      }
    }
    userErrors {
      field
      message
      code
    }
  }
}
"""

VARIANTS_BULK_DELETE_MUTATION = """
mutation productVariantsBulkDelete($productId: ID!, $variantsIds: [ID!]!) {
  productVariantsBulkDelete(productId: $productId, variantsIds: $variantsIds) {
    product {
      id
      title
    }
    userErrors {
      field
      message
      code
    }
  }
}
"""

FILE_UPDATE_MUTATION = """
mutation fileUpdate($files: [FileUpdateInput!]!) {
  fileUpdate(files: $files) {
    files {
      id
      alt
    }
    userErrors {
      code
      field
      message
    }
  }
}
"""


def vendor_search_query(vendor: str) -> str:
    """Build the product search string for one vendor."""
    escaped = vendor.replace('"', '\\"')
    return f'vendor:"{escaped}"'
