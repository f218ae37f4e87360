"""
Appointment Model - Stores appointment information and scheduling.

Each appointment takes one hourly slot; a slot can only be booked once.
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Numeric, Table, UniqueConstraint, func
from sqlalchemy.orm import relationship
from ..database import Base

# Services booked in each appointment
appointment_services = Table(
    "appointment_services",
    Base.metadata,
    Column("appointment_id", Integer, ForeignKey("appointments.id", ondelete="CASCADE"), primary_key=True),
    Column("service_id", Integer, ForeignKey("services.id", ondelete="CASCADE"), primary_key=True),
)

class Appointment(Base):
    """
    Appointment Model - Stores appointment information
    
    Fields:
    - id: Primary key for appointment
    - user_id: Foreign key to the account that booked it
    - date: Day of the appointment
    - time: Start of the hourly slot, e.g. "10:00"
    - total_amount: Sum of the prices of the booked services
    - created_at: When the appointment was created
    - updated_at: When the appointment was last updated
    """
    __tablename__ = "appointments"
    __table_args__ = (
        UniqueConstraint("date", "time", name="uq_appointments_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(5), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="appointments")
    services = relationship("Service", secondary=appointment_services, lazy="selectin")

    def __repr__(self):
        """String representation of the Appointment model"""
        return f"<Appointment(id={self.id}, user_id={self.user_id}, date='{self.date}', time='{self.time}')>"
