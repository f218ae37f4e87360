"""
Password handling utilities for secure password storage and verification.
Uses bcrypt for hashing and verification via passlib.
"""
from passlib.context import CryptContext

from ..config import settings

# Create a password context using bcrypt as the default scheme
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds
)

MIN_PASSWORD_LENGTH = 8

def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.
    
    Args:
        password: Plain text password
        
    Returns:
        str: Securely hashed password
    """
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.
    
    Args:
        plain: Plain text password to verify
        hashed: Hashed password to verify against
        
    Returns:
        bool: True if the password matches, False otherwise
    """
    return pwd_context.verify(plain, hashed)

def is_password_strong_enough(password: str) -> bool:
    """Surrounding whitespace does not count towards the minimum length."""
    return len(password.strip()) >= MIN_PASSWORD_LENGTH
