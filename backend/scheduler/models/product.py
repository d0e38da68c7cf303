from sqlalchemy import Column, String, Integer, DateTime, Numeric, Text
from sqlalchemy.dialects.postgresql import UUID
from datetime import datetime
import uuid
from scheduler.core.database import Base

class Product(Base):
    __tablename__ = "products"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False)  # CAMP, BIRTHDAY, SUBSCRIPTION
    
    # Minutes for camps and birthdays, number of months for subscriptions
    duration = Column(Integer, nullable=True)
    
    age_min = Column(Integer, nullable=True)
    age_max = Column(Integer, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name}, category={self.category})>"
