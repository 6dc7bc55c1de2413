class CartError(Exception):
    """
    Base class for every failure a cart operation can report.

    user_message is the human-readable text routed to the notification sink.
    """
    user_message = "Cart operation failed"


class OutOfStockError(CartError):
    """Raised when the requested quantity exceeds the available stock"""
    user_message = "Requested quantity exceeds stock"

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Requested {requested} of product {product_id}, only {available} in stock"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class NotInCartError(CartError):
    """Raised when removing a product that is not in the cart"""
    user_message = "Product removal failed"

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found in cart")
        self.product_id = product_id


class ProductLookupError(CartError, LookupError):
    """Raised by catalog/inventory adapters for unknown products or remote failures"""
    user_message = "Product lookup failed"


class AddFailedError(CartError):
    """Lookup failure while adding a product. The cause is a ProductLookupError."""
    user_message = "Product addition failed"


class UpdateFailedError(CartError):
    """Lookup failure while setting a quantity. The cause is a ProductLookupError."""
    user_message = "Quantity update failed"


class PersistenceError(CartError):
    """Raised when the cart snapshot cannot be loaded or saved"""
    user_message = "Cart could not be saved"
