"""
Service Schemas - Serialization of the services catalogue.
"""
from pydantic import BaseModel

class ServiceResponse(BaseModel):
    """
    Service Response Schema
    
    Fields:
    - id: Service ID
    - name: Service name
    - price: Service price
    """
    id: int
    name: str
    price: float

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
