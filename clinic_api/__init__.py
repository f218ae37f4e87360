"""
Clinic Booking API

A FastAPI backend for a small clinic: account registration with email
verification, login, password reset, a services catalogue and appointment
booking.
"""

__version__ = "1.0.0"
