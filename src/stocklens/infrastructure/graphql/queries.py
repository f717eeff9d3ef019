"""GraphQL documents for the paginated per-product queries."""

_META_FIELDS = """
      meta {
        current_page
        per_page
        last_page
        total
      }
"""

_SALE_FIELDS = """
        id
        customer_name
        tax
        discount
        total_amount
        sale_date
        user { name }
        items {
          id
          quantity
          price
        }
"""

PAGINATED_SALE_ITEMS_BY_PRODUCT = (
    """
query PaginatedSaleItemsByProduct($product_id: Int!, $page: Int, $perPage: Int) {
  paginatedSaleItemsByProduct(product_id: $product_id, page: $page, perPage: $perPage) {
    data {
      id
      quantity
      price
      created_at
      product { id }
      sale {"""
    + _SALE_FIELDS
    + """      }
    }"""
    + _META_FIELDS
    + """  }
}
"""
)

PAGINATED_PURCHASE_ITEMS_BY_PRODUCT = (
    """
query PaginatedPurchaseItemsByProduct($product_id: Int!, $page: Int, $perPage: Int) {
  paginatedPurchaseItemsByProduct(product_id: $product_id, page: $page, perPage: $perPage) {
    data {
      id
      quantity
      price
      created_at
      product { id }
      purchase {
        id
        total_amount
        purchase_date
        tax
        discount
        supplier { name }
      }
    }"""
    + _META_FIELDS
    + """  }
}
"""
)

PAGINATED_STOCK_MOVEMENTS_BY_PRODUCT = (
    """
query PaginatedStockMovementsByProduct($product_id: Int!, $page: Int, $perPage: Int) {
  paginatedStockMovementsByProduct(product_id: $product_id, page: $page, perPage: $perPage) {
    data {
      id
      type
      quantity
      movement_date
      reason
      user_name
      created_at
      product { id }
    }"""
    + _META_FIELDS
    + """  }
}
"""
)

PRODUCT_BY_ID = """
query ProductById($id: Int!) {
  productById(id: $id) {
    id
    name
    stock
    days_in_stock
    category { name }
  }
}
"""
