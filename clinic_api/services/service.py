"""
Service catalogue queries.
"""
from typing import List, Sequence
from fastapi import status
from sqlalchemy.orm import Session

from ..exceptions import AppException
from .models import Service

# Catalogue created on first startup when the table is empty
DEFAULT_SERVICES = [
    ("General consultation", 40),
    ("Pediatric consultation", 45),
    ("Dental cleaning", 60),
    ("Physiotherapy session", 50),
    ("Nutrition consultation", 35),
    ("Blood test", 25),
    ("Vaccination", 20),
    ("Dermatology consultation", 55),
]

class ServiceNotFoundException(AppException):
    """Exception raised when a service does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Service not found"

def list_services(db: Session) -> List[Service]:
    return db.query(Service).order_by(Service.id).all()

def get_service(db: Session, service_id: int) -> Service:
    """
    Get a service by ID.
    
    Raises:
        ServiceNotFoundException: If the service does not exist
    """
    service = db.query(Service).filter(Service.id == service_id).first()
    if not service:
        raise ServiceNotFoundException()
    return service

def get_services_by_ids(db: Session, service_ids: Sequence[int]) -> List[Service]:
    """Services matching ``service_ids``; unknown IDs are left out."""
    if not service_ids:
        return []
    return db.query(Service).filter(Service.id.in_(list(service_ids))).all()

def seed_services(db: Session) -> int:
    """
    Insert the default catalogue when no service exists yet.
    
    Returns:
        int: Number of services created
    """
    if db.query(Service).count() > 0:
        return 0
    for name, price in DEFAULT_SERVICES:
        db.add(Service(name=name, price=price))
    db.commit()
    return len(DEFAULT_SERVICES)
