from enum import Enum


class ProductCategory(str, Enum):
    CAMP = "CAMP"
    BIRTHDAY = "BIRTHDAY"
    SUBSCRIPTION = "SUBSCRIPTION"


class EventType(str, Enum):
    CAMP = "CAMP"
    BIRTHDAY = "BIRTHDAY"
    SUBSCRIPTION = "SUBSCRIPTION"
    RECURRING_SESSION = "RECURRING_SESSION"


class EventStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
