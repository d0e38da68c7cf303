from .booking_linker import BookingLinker
from .capacity import CapacityChecker
from .event_factory import CreateEventParams, EventFactory
from .materializer import OrderMaterializer
from .service import EventCreationService
from .template_expander import CreateRecurringTemplateParams, TemplateExpander

__all__ = [
    "BookingLinker",
    "CapacityChecker",
    "CreateEventParams",
    "CreateRecurringTemplateParams",
    "EventCreationService",
    "EventFactory",
    "OrderMaterializer",
    "TemplateExpander",
]
