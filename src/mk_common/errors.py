"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Identity
  2xxx: Catalog (products, stores, stock)
  3xxx: Pricing
  4xxx: Order
  5xxx: Delivery
  6xxx: Invoice
  9xxx: System
"""

from decimal import Decimal


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/Identity ---

class AuthenticationRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Authentication required", 401)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Invalid or expired token", 401)


class UnauthorizedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1003, f"Unauthorized: {detail}", 403)


# --- 2xxx: Catalog ---

class ProductNotFoundError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(2001, f"Product not found: {product_id}", 404)


class StoreNotFoundError(AppError):
    def __init__(self, store_id: str) -> None:
        super().__init__(2002, f"Store not found: {store_id}", 404)


class OutOfStockError(AppError):
    def __init__(self, product_id: str, requested: int, available: int | None = None) -> None:
        detail = f"requested {requested}"
        if available is not None:
            detail += f", available {available}"
        super().__init__(2003, f"Product {product_id} is out of stock: {detail}", 409)


class CodNotAvailableError(AppError):
    def __init__(self, store_id: str) -> None:
        super().__init__(2004, f"Cash on delivery is not available for store {store_id}", 422)


# --- 3xxx: Pricing ---

class InvalidQuantityError(AppError):
    def __init__(self, quantity: object) -> None:
        super().__init__(3001, f"Quantity must be a positive integer, got {quantity}", 422)


class InvalidPriceError(AppError):
    def __init__(self, price: Decimal) -> None:
        super().__init__(3002, f"Unit price must not be negative, got {price}", 422)


# --- 4xxx: Order ---

class OrderNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4001, f"Order not found: {order_id}", 404)


class InvalidTransitionError(AppError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            4002, f"Invalid status transition: {current} -> {target}", 422
        )


class FieldNotAllowedError(AppError):
    def __init__(self, status: str, fields: list[str]) -> None:
        super().__init__(
            4003,
            f"Fields not allowed for status {status}: {', '.join(sorted(fields))}",
            422,
        )


# --- 5xxx: Delivery ---

class InvalidPincodeError(AppError):
    def __init__(self, pincode: str) -> None:
        super().__init__(5001, f"Pincode must be exactly 6 digits, got {pincode!r}", 422)


# --- 6xxx: Invoice ---

class InvoiceNotFoundError(AppError):
    def __init__(self, invoice_id: str) -> None:
        super().__init__(6001, f"Invoice not found: {invoice_id}", 404)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class ServiceUnavailableError(AppError):
    def __init__(self, detail: str = "Service temporarily unavailable, try again later") -> None:
        super().__init__(9003, detail, 503)
