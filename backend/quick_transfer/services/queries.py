"""Admin GraphQL documents used by the gateway and the transfer orchestrator."""

GET_LOCATIONS_QUERY = """
query GetLocations($first: Int!) {
  locations(first: $first) {
    edges {
      node {
        id
        name
        isActive
      }
    }
  }
}
"""

GET_INVENTORY_LEVELS_QUERY = """
query GetInventoryLevels($inventoryItemId: ID!, $first: Int!) {
  inventoryItem(id: $inventoryItemId) {
    id
    inventoryLevels(first: $first) {
      edges {
        node {
          id
          location {
            id
            name
          }
          quantities(names: ["available", "on_hand"]) {
            name
            quantity
          }
        }
      }
    }
  }
}
"""

SEARCH_PRODUCTS_QUERY = """
query SearchProducts($query: String!, $first: Int!, $variantsFirst: Int!, $sortKey: ProductSortKeys, $reverse: Boolean) {
  products(first: $first, query: $query, sortKey: $sortKey, reverse: $reverse) {
    edges {
      node {
        id
        title
        featuredImage {
          url
        }
        variants(first: $variantsFirst) {
          edges {
            node {
              id
              title
              sku
              barcode
              price
              inventoryItem {
                id
              }
            }
          }
        }
      }
    }
  }
}
"""

SEARCH_BY_BARCODE_QUERY = """
query SearchByBarcode($barcode: String!) {
  productVariants(first: 1, query: $barcode) {
    edges {
      node {
        id
        title
        sku
        barcode
        price
        product {
          id
          title
          featuredImage {
            url
          }
        }
        inventoryItem {
          id
        }
      }
    }
  }
}
"""

ACTIVATE_INVENTORY_MUTATION = """
mutation InventoryActivate($inventoryItemId: ID!, $locationId: ID!) {
  inventoryActivate(inventoryItemId: $inventoryItemId, locationId: $locationId) {
    inventoryLevel {
      id
      quantities(names: ["available", "on_hand"]) {
        name
        quantity
      }
    }
    userErrors {
      field
      message
    }
  }
}
"""

ADJUST_INVENTORY_MUTATION = """
mutation AdjustInventory($input: InventoryAdjustQuantitiesInput!) {
  inventoryAdjustQuantities(input: $input) {
    inventoryAdjustmentGroup {
      id
      createdAt
      reason
    }
    userErrors {
      field
      message
    }
  }
}
"""
