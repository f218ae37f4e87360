"""
Service Router - Public endpoints for the services catalogue.
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from .schemas import ServiceResponse
from .service import list_services, get_service

router = APIRouter(prefix="/services", tags=["Services"])

@router.get("", response_model=List[ServiceResponse])
def list_services_route(db: Session = Depends(get_db)):
    """
    Get every bookable service
    """
    return list_services(db)

@router.get("/{service_id}", response_model=ServiceResponse)
def get_service_route(service_id: int, db: Session = Depends(get_db)):
    """
    Get a single service
    """
    return get_service(db, service_id)
