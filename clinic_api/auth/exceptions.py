"""
Authentication-specific exceptions.
"""
from fastapi import status

from ..exceptions import AppException

class AuthException(AppException):
    """Base class for authentication exceptions."""
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Authentication error"

class ValidationException(AuthException):
    """Exception raised when required input is missing or malformed."""
    detail = "All fields are required"

class DuplicateAccountException(AuthException):
    """Exception raised when email already exists."""
    detail = "User already registered"

class WeakPasswordException(AuthException):
    """Exception raised when password is too short."""
    detail = "Password must contain at least 8 characters"

class AccountNotFoundException(AuthException):
    """Exception raised when no account matches the given email."""
    status_code = status.HTTP_404_NOT_FOUND
    detail = "User does not exist"

class AccountNotVerifiedException(AuthException):
    """Exception raised when an unverified account tries to log in."""
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Your account has not been confirmed yet"

class AlreadyVerifiedException(AuthException):
    """Exception raised when verification is requested for a verified account."""
    detail = "Account already confirmed"

class InvalidCredentialsException(AuthException):
    """Exception raised when credentials are invalid."""
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Incorrect password"

class InvalidTokenException(AuthException):
    """Exception raised when a one-shot token does not exist or is no longer usable."""
    detail = "Invalid token"

class TokenExpiredException(AuthException):
    """Exception raised when a one-shot token has expired."""
    detail = "Token has expired"

class MissingCredentialException(AuthException):
    """Exception raised when a protected route is called without a bearer token."""
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Unauthorized access"

class InvalidOrExpiredTokenException(AuthException):
    """Exception raised when a session token fails signature or expiry checks."""
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Invalid or expired token"

class NotificationFailureException(AuthException):
    """Exception raised when an email the caller depends on could not be sent."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "The email could not be sent"
