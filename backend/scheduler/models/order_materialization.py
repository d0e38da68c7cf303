from sqlalchemy import Column, String, JSON, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from datetime import datetime
import uuid
from scheduler.core.database import Base

class OrderMaterialization(Base):
    """Record of an order that has already been turned into events.

    Written in the same transaction as the events, so a redelivered payment
    webhook finds it and returns the recorded events instead of booking twice.
    """

    __tablename__ = "order_materializations"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id"), unique=True, nullable=False)
    idempotency_key = Column(String, unique=True, nullable=False)
    event_ids = Column(JSON, nullable=False, default=list)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    
    def __repr__(self):
        return f"<OrderMaterialization(order={self.order_id}, events={len(self.event_ids or [])})>"
