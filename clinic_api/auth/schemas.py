"""
Auth Schemas - Pydantic models for request validation and response serialization.

Request fields are optional at the schema level; missing values are reported by
the service layer with the same message the rest of the API uses.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr

class RegisterRequest(BaseModel):
    """
    Registration Schema - Used when registering a new account
    
    Fields:
    - email: Account email address
    - password: Plain text password (hashed before storage)
    - name: Display name
    """
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    name: Optional[str] = None

class LoginRequest(BaseModel):
    """
    Login Schema - Used for authentication
    
    Fields:
    - email: Account email address
    - password: Plain text password
    """
    email: Optional[EmailStr] = None
    password: Optional[str] = None

class EmailRequest(BaseModel):
    """Body of forgot-password and resend-verification requests."""
    email: Optional[EmailStr] = None

class NewPasswordRequest(BaseModel):
    """Body of the request that completes a password reset."""
    password: Optional[str] = None

class MessageResponse(BaseModel):
    """Acknowledgement returned by operations without a payload."""
    msg: str

class LoginResponse(BaseModel):
    """
    Login Response Schema - Returned after successful authentication
    
    Fields:
    - token: Signed session token
    """
    token: str

class UserResponse(BaseModel):
    """
    User Response Schema - Public projection of an account
    
    Fields:
    - id: User ID
    - name: Display name
    - email: Email address
    - admin: Whether the account has administrator rights
    """
    id: int
    name: str
    email: str
    admin: bool

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
