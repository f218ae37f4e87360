"""
Credential store - Queries against the users and password reset token tables.

Token redemption uses conditional UPDATE statements so that two concurrent
redemptions of the same token cannot both succeed.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .models import User, PasswordResetToken

def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()

def create_user(db: Session, email: str, name: str, password_hash: str, token: str) -> User:
    """
    Insert a new unverified account.

    Raises:
        IntegrityError: If the email was registered concurrently
    """
    user = User(
        email=email,
        name=name,
        password_hash=password_hash,
        verified=False,
        admin=False,
        token=token
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def confirm_user_token(db: Session, token: str) -> bool:
    """
    Mark the account holding ``token`` as verified and clear the token.
    
    Returns:
        bool: True if exactly one account was updated
    """
    updated = (
        db.query(User)
        .filter(User.token == token)
        .update({User.verified: True, User.token: None}, synchronize_session=False)
    )
    db.commit()
    return updated == 1

def replace_user_token(db: Session, user: User, token: str) -> User:
    user.token = token
    db.commit()
    db.refresh(user)
    return user

def update_user_password(db: Session, user_id: int, password_hash: str) -> None:
    db.query(User).filter(User.id == user_id).update(
        {User.password_hash: password_hash}, synchronize_session=False
    )
    db.commit()

def get_reset_token(db: Session, token: str) -> Optional[PasswordResetToken]:
    return db.query(PasswordResetToken).filter(PasswordResetToken.token == token).first()

def create_reset_token(db: Session, user_id: int, token: str, expires_at: datetime) -> PasswordResetToken:
    """
    Store a new reset token, retiring every outstanding one of the account.
    """
    db.query(PasswordResetToken).filter(
        PasswordResetToken.user_id == user_id,
        PasswordResetToken.consumed.is_(False)
    ).update({PasswordResetToken.consumed: True}, synchronize_session=False)

    reset_token = PasswordResetToken(user_id=user_id, token=token, expires_at=expires_at, consumed=False)
    db.add(reset_token)
    db.commit()
    db.refresh(reset_token)
    return reset_token

def consume_reset_token(db: Session, token_id: int) -> bool:
    """
    Flip ``consumed`` on an outstanding reset token. The change is not
    committed so the caller can store the new password in the same
    transaction.
    
    Returns:
        bool: True if this call consumed the token
    """
    updated = (
        db.query(PasswordResetToken)
        .filter(PasswordResetToken.id == token_id, PasswordResetToken.consumed.is_(False))
        .update({PasswordResetToken.consumed: True}, synchronize_session=False)
    )
    return updated == 1

def purge_expired_reset_tokens(db: Session, now: datetime) -> int:
    """Delete reset tokens that are consumed or past their expiry."""
    deleted = (
        db.query(PasswordResetToken)
        .filter((PasswordResetToken.expires_at <= now) | PasswordResetToken.consumed.is_(True))
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
