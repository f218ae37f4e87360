"""
Appointment Router - API endpoints for booking and managing appointments.
"""
import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.mail import Mailer, get_mailer
from ..auth.dependencies import get_current_user
from ..auth.models import User
from ..auth.schemas import MessageResponse
from .schemas import AppointmentRequest, AppointmentResponse, AppointmentSlot, SlotAvailability
from .service import (
    create_appointment,
    get_appointments_by_date,
    get_availability,
    get_appointment,
    update_appointment,
    delete_appointment,
    get_user_appointments
)

router = APIRouter(prefix="/appointments", tags=["Appointments"])
users_router = APIRouter(prefix="/users", tags=["Appointments"])

@router.post("", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
async def create_appointment_route(
    data: AppointmentRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    current_user: User = Depends(get_current_user)
):
    """
    Book an appointment for the current user
    """
    return await create_appointment(db, mailer, current_user, data)

@router.get("", response_model=List[AppointmentSlot])
def list_appointments_by_date_route(
    date: datetime.date = Query(..., description="Day to list (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get the booked slots of a day
    
    Only the slot is returned, not who booked it.
    """
    return get_appointments_by_date(db, date)

@router.get("/availability", response_model=List[SlotAvailability])
def availability_route(
    date: datetime.date = Query(..., description="Day to inspect (YYYY-MM-DD)"),
    exclude: Optional[int] = Query(None, description="Appointment being rescheduled"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get which hourly slots of a day can still be booked
    """
    return get_availability(db, date, exclude)

@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment_route(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get one of the current user's appointments
    """
    return get_appointment(db, appointment_id, current_user)

@router.put("/{appointment_id}", response_model=MessageResponse)
def update_appointment_route(
    appointment_id: int,
    data: AppointmentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Reschedule an appointment or change its services
    """
    return update_appointment(db, appointment_id, current_user, data)

@router.delete("/{appointment_id}", response_model=MessageResponse)
def delete_appointment_route(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Cancel an appointment
    """
    return delete_appointment(db, appointment_id, current_user)

@users_router.get("/{user_id}/appointments", response_model=List[AppointmentResponse])
def list_user_appointments_route(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get the upcoming appointments of a user
    
    Users can only see their own appointments; admins can see everyone's.
    """
    return get_user_appointments(db, user_id, current_user)
