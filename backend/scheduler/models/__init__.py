from scheduler.models.location import Location
from scheduler.models.product import Product
from scheduler.models.student import Student
from scheduler.models.order import Order, OrderItem
from scheduler.models.recurring_template import RecurringTemplate
from scheduler.models.event import Event
from scheduler.models.booking import Booking
from scheduler.models.order_materialization import OrderMaterialization
from scheduler.models.enums import (
    BookingStatus,
    EventStatus,
    EventType,
    OrderStatus,
    ProductCategory,
)

__all__ = [
    "Location",
    "Product",
    "Student",
    "Order",
    "OrderItem",
    "RecurringTemplate",
    "Event",
    "Booking",
    "OrderMaterialization",
    "BookingStatus",
    "EventStatus",
    "EventType",
    "OrderStatus",
    "ProductCategory",
]
