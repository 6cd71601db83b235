"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class OrderStatus(str, Enum):
    PLACED = "placed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    COD = "COD"
    ONLINE = "ONLINE"


class PaymentStatus(str, Enum):
    PAID = "Paid"
    PENDING = "Pending"


class EstimateOutcome(str, Enum):
    """Delivery estimate tag: which branch of the estimate union was produced"""
    SERVICEABLE = "SERVICEABLE"
    NOT_SERVICEABLE = "NOT_SERVICEABLE"
    UNAVAILABLE = "UNAVAILABLE"


class EstimateSource(str, Enum):
    ORACLE = "ORACLE"
    FALLBACK = "FALLBACK"
