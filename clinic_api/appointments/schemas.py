"""
Appointment Schemas - Pydantic models for booking requests and responses.
"""
import datetime
from typing import List
from pydantic import BaseModel, Field

from ..services.schemas import ServiceResponse

class AppointmentRequest(BaseModel):
    """
    Appointment Request Schema - Used to book or reschedule an appointment
    
    Fields:
    - services: IDs of the selected services
    - date: Day of the appointment (YYYY-MM-DD)
    - time: Hourly slot, e.g. "10:00"
    """
    services: List[int] = Field(default_factory=list)
    date: datetime.date
    time: str

class AppointmentSlot(BaseModel):
    """Booked slot, without any detail about who booked it."""
    id: int
    date: datetime.date
    time: str

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True

class SlotAvailability(BaseModel):
    """Whether an hourly slot can still be booked."""
    time: str
    available: bool

class AppointmentResponse(BaseModel):
    """
    Appointment Response Schema
    
    Fields:
    - id: Appointment ID
    - user_id: Account that booked the appointment
    - date: Day of the appointment
    - time: Hourly slot
    - total_amount: Sum of the service prices
    - services: Booked services
    """
    id: int
    user_id: int
    date: datetime.date
    time: str
    total_amount: float
    services: List[ServiceResponse]

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
