from sqlalchemy import Column, String, Integer, JSON, Date, DateTime, Boolean, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from scheduler.core.database import Base

class RecurringTemplate(Base):
    __tablename__ = "recurring_templates"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    event_type = Column(String, nullable=False, default="RECURRING_SESSION")
    
    # Wall-clock times ("HH:MM") in the location's timezone
    start_time = Column(String, nullable=False)
    end_time = Column(String, nullable=False)
    duration = Column(Integer, nullable=False, default=60)  # minutes
    
    # 0 = Sunday ... 6 = Saturday
    days_of_week = Column(JSON, nullable=False, default=list)
    
    # Validity window; expansion stops before end_date
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    
    max_capacity = Column(Integer, nullable=False, default=10)
    location_id = Column(UUID(as_uuid=True), ForeignKey("locations.id"), nullable=False)
    age_min = Column(Integer, nullable=True)
    age_max = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    location = relationship("Location")
    events = relationship("Event", back_populates="recurring_template")
    
    def __repr__(self):
        return f"<RecurringTemplate(id={self.id}, name={self.name}, days={self.days_of_week})>"
