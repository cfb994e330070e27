# cartshop/core/errors.py
# Иерархия доменных ошибок. Сервисы бросают их, main.py превращает в JSON-ответы.


class ShopError(Exception):
    """Базовая ошибка магазина."""

    status_code = 400
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ShopValidationError(ShopError):
    status_code = 400
    kind = "validation"


class NotFoundError(ShopError):
    status_code = 404
    kind = "not_found"


class NotAuthorizedError(ShopError):
    status_code = 403
    kind = "unauthorized"


class EmptyCartError(ShopError):
    status_code = 409
    kind = "empty_cart"

    def __init__(self, message: str = "Cannot checkout with empty cart"):
        super().__init__(message)


class InsufficientStockError(ShopError):
    """Остатка товара не хватает на количество из корзины (предпроверка)."""

    status_code = 409
    kind = "insufficient_stock"

    def __init__(self, product_id: int, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for product: {product_name}. "
            f"Available: {available}, Requested: {requested}"
        )
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested


class CheckoutConflictError(ShopError):
    """Остаток изменился между предпроверкой и списанием."""

    status_code = 409
    kind = "checkout_conflict"

    def __init__(self, product_id: int, product_name: str):
        super().__init__(
            f"Failed to update stock for product: {product_name}. "
            "Possible concurrent order conflict."
        )
        self.product_id = product_id
        self.product_name = product_name
