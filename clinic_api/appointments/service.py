"""
Appointment Service - Business logic for booking appointments.

Booking rules:
- slots are whole hours between the opening and closing hour
- an appointment holds between one and ``max_services_per_appointment`` services
- appointments cannot be booked in the past
- a slot taken by another appointment cannot be booked
- the total is always computed from the service prices
"""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ..config import settings
from ..core.mail import Mailer, render_email
from ..auth.models import User
from ..services.models import Service
from ..services.service import get_services_by_ids
from .models import Appointment
from .schemas import AppointmentRequest
from .exceptions import (
    AppointmentException,
    AppointmentNotFoundException,
    AppointmentForbiddenException,
    SlotUnavailableException
)

# Set up logging
logger = logging.getLogger(__name__)

def business_hours() -> List[str]:
    """
    Bookable slots of a day.

    Returns:
        List of slot labels such as "10:00", "11:00", ...
    """
    return [f"{hour}:00" for hour in range(settings.opening_hour, settings.closing_hour + 1)]

def _is_slot_taken(db: Session, day: date, time: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Appointment).filter(Appointment.date == day, Appointment.time == time)
    if exclude_id is not None:
        query = query.filter(Appointment.id != exclude_id)
    return db.query(query.exists()).scalar()

def _validate_booking(
    db: Session,
    data: AppointmentRequest,
    exclude_id: Optional[int] = None
) -> List[Service]:
    """
    Check a booking request against the booking rules.

    Returns:
        List of the selected services

    Raises:
        AppointmentException: If the request breaks a booking rule
        SlotUnavailableException: If the slot is already booked
    """
    service_ids = list(dict.fromkeys(data.services))
    if not service_ids:
        raise AppointmentException("Select at least one service")
    if len(service_ids) > settings.max_services_per_appointment:
        raise AppointmentException(
            f"Maximum {settings.max_services_per_appointment} service(s) per appointment"
        )

    services = get_services_by_ids(db, service_ids)
    if len(services) != len(service_ids):
        raise AppointmentException("One or more services do not exist")

    if data.time not in business_hours():
        raise AppointmentException("Select a valid time")
    if data.date < datetime.now().date():
        raise AppointmentException("Appointments cannot be booked in the past")

    if _is_slot_taken(db, data.date, data.time, exclude_id):
        raise SlotUnavailableException()

    return services

def _total_amount(services: Sequence[Service]) -> Decimal:
    return sum((Decimal(service.price) for service in services), Decimal("0"))

def _check_access(appointment: Appointment, user: User, allow_admin: bool = True) -> None:
    if appointment.user_id == user.id:
        return
    if allow_admin and user.admin:
        return
    raise AppointmentForbiddenException()

def render_appointment_confirmation(user: User, appointment: Appointment) -> str:
    services = ", ".join(service.name for service in appointment.services)
    return render_email(
        "Appointment confirmed",
        [
            f"Hello {user.name}, your appointment is confirmed.",
            f"Date: {appointment.date.isoformat()} at {appointment.time}",
            f"Services: {services}",
            f"Total: {appointment.total_amount}",
        ]
    )

def _book_appointment(db: Session, user: User, data: AppointmentRequest) -> Tuple[int, str, str]:
    """
    Store a new appointment.

    Returns:
        Tuple of appointment ID, recipient and confirmation email body
    """
    services = _validate_booking(db, data)

    appointment = Appointment(
        user_id=user.id,
        date=data.date,
        time=data.time,
        total_amount=_total_amount(services),
        services=services
    )
    db.add(appointment)
    try:
        db.commit()
    except IntegrityError:
        # The slot was booked between the availability check and the insert
        db.rollback()
        raise SlotUnavailableException()
    db.refresh(appointment)
    logger.info(f"Appointment {appointment.id} booked by user {user.id} on {appointment.date} {appointment.time}")

    return appointment.id, user.email, render_appointment_confirmation(user, appointment)

async def create_appointment(
    db: Session,
    mailer: Mailer,
    user: User,
    data: AppointmentRequest
) -> Dict[str, str]:
    """
    Book a new appointment for the authenticated account.

    Args:
        db: Database session
        mailer: Application mailer
        user: Account booking the appointment
        data: Selected services, date and time

    Returns:
        Dict with booking success message

    Raises:
        AppointmentException: If the request breaks a booking rule
        SlotUnavailableException: If the slot is already booked
    """
    appointment_id, recipient, html = await run_in_threadpool(_book_appointment, db, user, data)

    if not await mailer.send(recipient, "Appointment confirmed", html):
        logger.error(f"Confirmation email for appointment {appointment_id} could not be delivered")

    return {"msg": "Your appointment was booked successfully"}

def _slot_key(appointment: Appointment):
    # "9:00" style labels do not sort lexically, sort by hour instead
    return (appointment.date, int(appointment.time.split(":")[0]))

def get_appointments_by_date(db: Session, day: date) -> List[Appointment]:
    appointments = db.query(Appointment).filter(Appointment.date == day).all()
    return sorted(appointments, key=_slot_key)

def get_availability(db: Session, day: date, exclude_id: Optional[int] = None) -> List[Dict[str, object]]:
    """
    Availability of every slot of a day.

    Args:
        db: Database session
        day: Day to inspect
        exclude_id: Appointment being rescheduled, its own slot counts as free

    Returns:
        List of dicts with ``time`` and ``available``
    """
    taken = {
        appointment.time
        for appointment in get_appointments_by_date(db, day)
        if appointment.id != exclude_id
    }
    return [{"time": hour, "available": hour not in taken} for hour in business_hours()]

def get_appointment(db: Session, appointment_id: int, user: User) -> Appointment:
    """
    Get an appointment owned by ``user`` (or any appointment for admins).

    Raises:
        AppointmentNotFoundException: If the appointment does not exist
        AppointmentForbiddenException: If the account cannot access it
    """
    appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    if not appointment:
        raise AppointmentNotFoundException()
    _check_access(appointment, user)
    return appointment

def update_appointment(
    db: Session,
    appointment_id: int,
    user: User,
    data: AppointmentRequest
) -> Dict[str, str]:
    """
    Reschedule an appointment or change its services. Only the owner can do this.

    Raises:
        AppointmentNotFoundException: If the appointment does not exist
        AppointmentForbiddenException: If the account does not own it
        AppointmentException: If the request breaks a booking rule
        SlotUnavailableException: If the new slot is already booked
    """
    appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    if not appointment:
        raise AppointmentNotFoundException()
    _check_access(appointment, user, allow_admin=False)

    services = _validate_booking(db, data, exclude_id=appointment.id)

    appointment.date = data.date
    appointment.time = data.time
    appointment.services = services
    appointment.total_amount = _total_amount(services)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise SlotUnavailableException()

    logger.info(f"Appointment {appointment.id} updated by user {user.id}")
    return {"msg": "Appointment updated successfully"}

def delete_appointment(db: Session, appointment_id: int, user: User) -> Dict[str, str]:
    """
    Cancel an appointment.

    Raises:
        AppointmentNotFoundException: If the appointment does not exist
        AppointmentForbiddenException: If the account cannot access it
    """
    appointment = get_appointment(db, appointment_id, user)
    db.delete(appointment)
    db.commit()
    logger.info(f"Appointment {appointment_id} cancelled by user {user.id}")
    return {"msg": "Appointment cancelled"}

def get_user_appointments(db: Session, user_id: int, current_user: User) -> List[Appointment]:
    """
    Upcoming appointments of an account, from today on.

    Raises:
        AppointmentForbiddenException: If a non-admin asks for another account
    """
    if user_id != current_user.id and not current_user.admin:
        raise AppointmentForbiddenException("You cannot see these appointments")

    appointments = (
        db.query(Appointment)
        .filter(Appointment.user_id == user_id, Appointment.date >= datetime.now().date())
        .all()
    )
    return sorted(appointments, key=_slot_key)
