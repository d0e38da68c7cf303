from sqlalchemy import Column, String, Integer, DateTime, Boolean, ForeignKey, Text, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from scheduler.core.database import Base

class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        Index("idx_events_location_window", "location_id", "start_datetime", "end_datetime"),
        CheckConstraint("start_datetime < end_datetime", name="ck_events_window"),
        CheckConstraint("current_count <= max_capacity", name="ck_events_occupancy"),
    )
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    event_type = Column(String, nullable=False)  # CAMP, BIRTHDAY, SUBSCRIPTION, RECURRING_SESSION
    status = Column(String, nullable=False, default="SCHEDULED")
    
    # Naive UTC instants
    start_datetime = Column(DateTime, nullable=False)
    end_datetime = Column(DateTime, nullable=False)
    
    location_id = Column(UUID(as_uuid=True), ForeignKey("locations.id"), nullable=False)
    
    # Occupancy
    max_capacity = Column(Integer, nullable=False, default=10)
    current_count = Column(Integer, nullable=False, default=0)
    
    age_min = Column(Integer, nullable=True)
    age_max = Column(Integer, nullable=True)
    
    # Recurrence
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_template_id = Column(
        UUID(as_uuid=True), ForeignKey("recurring_templates.id"), nullable=True
    )
    
    instructor_notes = Column(Text, nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    location = relationship("Location")
    recurring_template = relationship("RecurringTemplate", back_populates="events")
    
    def __repr__(self):
        return f"<Event(id={self.id}, title={self.title}, start={self.start_datetime})>"
