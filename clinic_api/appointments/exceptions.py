"""
Appointment-specific exceptions.
"""
from fastapi import status

from ..exceptions import AppException

class AppointmentException(AppException):
    """Base class for appointment exceptions."""
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid appointment"

class AppointmentNotFoundException(AppointmentException):
    """Exception raised when an appointment does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Appointment not found"

class AppointmentForbiddenException(AppointmentException):
    """Exception raised when an account accesses someone else's appointment."""
    status_code = status.HTTP_403_FORBIDDEN
    detail = "You do not have access to this appointment"

class SlotUnavailableException(AppointmentException):
    """Exception raised when the requested slot is already booked."""
    detail = "That time is no longer available"
