"""
Authentication service layer for business logic.

Covers the whole account lifecycle: registration, email verification, login
and password reset.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ..config import settings
from ..core.mail import Mailer
from ..core.security import hash_password, verify_password, is_password_strong_enough
from . import store
from .models import User
from .tokens import (
    generate_one_shot_token,
    create_session_token,
    get_token_expiry_time,
    is_token_expired
)
from .utils import send_verification_email, send_password_reset_email
from .exceptions import (
    ValidationException,
    DuplicateAccountException,
    WeakPasswordException,
    AccountNotFoundException,
    AccountNotVerifiedException,
    AlreadyVerifiedException,
    InvalidCredentialsException,
    InvalidTokenException,
    TokenExpiredException,
    NotificationFailureException
)

# Set up logging
logger = logging.getLogger(__name__)

def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()

def _create_account(db: Session, email: str, password: str, name: str) -> Tuple[str, str, str]:
    """
    Store a new unverified account.

    Returns:
        Tuple of email, name and verification token for the email
    """
    if store.get_user_by_email(db, email):
        logger.warning(f"Registration failed: Email {email} already registered")
        raise DuplicateAccountException()

    if not is_password_strong_enough(password):
        raise WeakPasswordException()

    token = generate_one_shot_token()
    try:
        user = store.create_user(
            db,
            email=email,
            name=name.strip(),
            password_hash=hash_password(password),
            token=token
        )
    except IntegrityError:
        # Another request registered the same email after our lookup
        db.rollback()
        logger.warning(f"Registration failed: Email {email} registered concurrently")
        raise DuplicateAccountException()

    logger.info(f"User registered: {user.email} (ID: {user.id})")
    return user.email, user.name, token

async def register_user(
    db: Session,
    mailer: Mailer,
    email: Optional[str],
    password: Optional[str],
    name: Optional[str]
) -> Dict[str, str]:
    """
    Register a new account and send its verification email.

    Database work and password hashing run in the threadpool, only the email
    delivery is awaited on the event loop.

    Args:
        db: Database session
        mailer: Application mailer
        email: Account email address
        password: Plain text password
        name: Display name

    Returns:
        Dict with registration success message

    Raises:
        ValidationException: If a field is missing
        DuplicateAccountException: If the email is already registered
        WeakPasswordException: If the password is too short
    """
    if _is_blank(email) or _is_blank(password) or _is_blank(name):
        raise ValidationException("All fields are required")

    email, name, token = await run_in_threadpool(_create_account, db, email, password, name)

    sent = await send_verification_email(mailer, email, name, token)
    if not sent:
        logger.error(f"Verification email could not be delivered to {email}")

    return {
        "msg": "The user was created successfully, check your email to confirm your account."
    }

def verify_account(db: Session, token: str) -> Dict[str, str]:
    """
    Redeem an email verification token.

    Args:
        db: Database session
        token: Token received by email

    Returns:
        Dict with verification success message

    Raises:
        InvalidTokenException: If no account holds this token
    """
    if _is_blank(token) or not store.confirm_user_token(db, token):
        logger.warning("Account verification failed: Unknown token")
        raise InvalidTokenException("There was an error, invalid token")

    logger.info("Account verified")
    return {"msg": "User confirmed successfully"}

def _renew_verification_token(db: Session, email: str) -> Tuple[str, str, str]:
    user = store.get_user_by_email(db, email)
    if not user:
        raise AccountNotFoundException()
    if user.verified:
        raise AlreadyVerifiedException()

    token = generate_one_shot_token()
    store.replace_user_token(db, user, token)
    return user.email, user.name, token

async def resend_verification(db: Session, mailer: Mailer, email: Optional[str]) -> Dict[str, str]:
    """
    Issue a fresh verification token for an unverified account.

    Args:
        db: Database session
        mailer: Application mailer
        email: Account email address

    Returns:
        Dict with resend message

    Raises:
        ValidationException: If email is missing
        AccountNotFoundException: If email not found
        AlreadyVerifiedException: If the account is already verified
    """
    if _is_blank(email):
        raise ValidationException("Email is required")

    email, name, token = await run_in_threadpool(_renew_verification_token, db, email)

    sent = await send_verification_email(mailer, email, name, token)
    if not sent:
        logger.error(f"Verification email could not be delivered to {email}")

    return {"msg": "We sent you a new confirmation email"}

def login_user(db: Session, email: Optional[str], password: Optional[str]) -> Dict[str, str]:
    """
    Authenticate an account and issue a session token.

    The verification flag is checked before the password so an unverified
    account gets the same answer whatever password is sent.

    Args:
        db: Database session
        email: Account email address
        password: Plain text password

    Returns:
        Dict with the session token

    Raises:
        ValidationException: If a field is missing
        AccountNotFoundException: If email not found
        AccountNotVerifiedException: If the account is not verified
        InvalidCredentialsException: If the password does not match
    """
    if _is_blank(email) or _is_blank(password):
        raise ValidationException("Email and password are required")

    user = store.get_user_by_email(db, email)
    if not user:
        logger.warning(f"Login failed: Email {email} not found")
        raise AccountNotFoundException()

    if not user.verified:
        logger.warning(f"Login failed: Account {email} not verified")
        raise AccountNotVerifiedException()

    if not verify_password(password, user.password_hash):
        logger.warning(f"Login failed: Wrong password for {email}")
        raise InvalidCredentialsException()

    logger.info(f"User logged in: {email} (ID: {user.id})")
    return {"token": create_session_token(user.id)}

def _issue_reset_token(db: Session, email: str) -> Tuple[str, str, str]:
    user = store.get_user_by_email(db, email)
    if not user:
        logger.warning(f"Password reset failed: Email {email} not found")
        raise AccountNotFoundException()

    recipient, name = user.email, user.name
    token = generate_one_shot_token()
    store.create_reset_token(
        db,
        user_id=user.id,
        token=token,
        expires_at=get_token_expiry_time(settings.password_reset_token_expire_minutes)
    )
    return recipient, name, token

async def forgot_password(db: Session, mailer: Mailer, email: Optional[str]) -> Dict[str, str]:
    """
    Start the password reset process.

    Args:
        db: Database session
        mailer: Application mailer
        email: Account email address

    Returns:
        Dict with password reset instructions

    Raises:
        ValidationException: If email is missing
        AccountNotFoundException: If email not found
        NotificationFailureException: If the reset email could not be sent
    """
    if _is_blank(email):
        raise ValidationException("Email is required")

    recipient, name, token = await run_in_threadpool(_issue_reset_token, db, email)

    if not await send_password_reset_email(mailer, recipient, name, token):
        raise NotificationFailureException("The password reset email could not be sent")

    logger.info(f"Password reset requested for {email}")
    return {"msg": "We sent you an email with the instructions"}

def _get_usable_reset_token(db: Session, token: str):
    reset_token = store.get_reset_token(db, token) if not _is_blank(token) else None
    if not reset_token or reset_token.consumed:
        raise InvalidTokenException("Invalid token")
    if is_token_expired(reset_token.expires_at):
        raise TokenExpiredException("Token has expired")
    return reset_token

def validate_reset_token(db: Session, token: str) -> Dict[str, str]:
    """
    Check that a reset token can still be used, without consuming it.

    Args:
        db: Database session
        token: Token received by email

    Returns:
        Dict with validation message

    Raises:
        InvalidTokenException: If the token is unknown, consumed or expired
    """
    try:
        _get_usable_reset_token(db, token)
    except TokenExpiredException:
        raise InvalidTokenException("Invalid token")
    return {"msg": "Valid token, set your new password"}

def reset_password(db: Session, token: str, new_password: Optional[str]) -> Dict[str, str]:
    """
    Set a new password using a reset token.

    The token is checked first so a dead link is reported as such whatever
    password comes with it.

    Args:
        db: Database session
        token: Token received by email
        new_password: New plain text password

    Returns:
        Dict with password reset success message

    Raises:
        InvalidTokenException: If the token is unknown or already used
        TokenExpiredException: If the token has expired
        ValidationException: If the password is missing
        WeakPasswordException: If the password is too short
    """
    reset_token = _get_usable_reset_token(db, token)
    user_id = reset_token.user_id

    if _is_blank(new_password):
        raise ValidationException("Password is required")
    if not is_password_strong_enough(new_password):
        raise WeakPasswordException()

    if not store.consume_reset_token(db, reset_token.id):
        db.rollback()
        logger.warning(f"Password reset failed: Token for user {user_id} already used")
        raise InvalidTokenException("Invalid token")

    store.update_user_password(db, user_id, hash_password(new_password))
    logger.info(f"Password reset successful for user {user_id}")

    return {"msg": "Password changed successfully"}


def get_user_profile(db: Session, user_id: int) -> User:
    """
    Load the account behind an authenticated request.

    Raises:
        AccountNotFoundException: If the account no longer exists
    """
    user = store.get_user_by_id(db, user_id)
    if not user:
        raise AccountNotFoundException("User not found")
    return user

def purge_stale_reset_tokens(db: Session) -> int:
    """Remove consumed and expired reset tokens."""
    deleted = store.purge_expired_reset_tokens(db, datetime.now(timezone.utc).replace(tzinfo=None))
    if deleted:
        logger.info(f"Removed {deleted} stale password reset tokens")
    return deleted
