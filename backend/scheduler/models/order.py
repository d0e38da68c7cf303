from sqlalchemy import Column, String, DateTime, Numeric, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from scheduler.core.database import Base

class Order(Base):
    __tablename__ = "orders"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    
    # Customer Info
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    
    # Status
    status = Column(String, default="pending")  # pending, paid, cancelled
    paid_at = Column(DateTime, nullable=True)
    
    # Venue the purchase is for; falls back to DEFAULT_LOCATION_ID when empty
    location_id = Column(UUID(as_uuid=True), ForeignKey("locations.id"), nullable=True)
    
    total_amount = Column(Numeric(10, 2), nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.created_at",
    )
    location = relationship("Location")
    
    def __repr__(self):
        return f"<Order(id={self.id}, customer={self.customer_name}, status={self.status})>"


class OrderItem(Base):
    __tablename__ = "order_items"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id"), nullable=False)
    
    # Naive UTC. Date-only products store local midnight of the chosen day.
    booking_date = Column(DateTime, nullable=False)
    price = Column(Numeric(10, 2), nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    
    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product")
    student = relationship("Student")
    
    def __repr__(self):
        return f"<OrderItem(id={self.id}, order={self.order_id}, product={self.product_id})>"
