"""
Service-level errors.

Every error carries a machine-readable `error_code` and the HTTP status the
API layer renders it with. Nothing here is retried automatically.
"""


class MarketplaceError(Exception):
    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message, error_code=None, status_code=None):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"error": self.message, "error_code": self.error_code}


class ValidationError(MarketplaceError):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class AuthenticationFailed(MarketplaceError):
    status_code = 401
    error_code = "AUTHENTICATION_FAILED"


class Forbidden(MarketplaceError):
    status_code = 403
    error_code = "FORBIDDEN"


class NotFound(MarketplaceError):
    status_code = 404
    error_code = "NOT_FOUND"


class OrderNotFound(NotFound):
    status_code = 400
    error_code = "ORDER_NOT_FOUND"


class LineNotFound(NotFound):
    status_code = 400
    error_code = "LINE_NOT_FOUND"


class Conflict(MarketplaceError):
    status_code = 409
    error_code = "CONFLICT"


class DeliveryAlreadyCompleted(Conflict):
    error_code = "DELIVERY_ALREADY_COMPLETED"


class CheckoutFailed(MarketplaceError):
    """Checkout aborted; nothing from the attempt was committed."""

    status_code = 409
    error_code = "CHECKOUT_FAILED"

    def __init__(self, message, product_id=None, error_code=None, status_code=None):
        super().__init__(message, error_code=error_code, status_code=status_code)
        self.product_id = product_id

    def to_dict(self):
        data = super().to_dict()
        if self.product_id is not None:
            data["product_id"] = str(self.product_id)
        return data


class StoreError(MarketplaceError):
    status_code = 500
    error_code = "STORE_ERROR"
