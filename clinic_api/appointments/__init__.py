"""
Appointment booking - creating, rescheduling and cancelling appointments.
"""
