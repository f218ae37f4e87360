"""
Service Model - A bookable clinic service and its price.
"""
from sqlalchemy import Column, Integer, String, Numeric
from ..database import Base

class Service(Base):
    """
    Service Model - Stores the services catalogue
    
    Fields:
    - id: Primary key for service
    - name: Unique display name
    - price: Price charged for the service
    """
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    def __repr__(self):
        return f"<Service(id={self.id}, name='{self.name}', price={self.price})>"
