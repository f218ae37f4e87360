"""
Account models - Stores user accounts and outstanding password reset tokens.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base

class User(Base):
    """
    User Model - Stores all account information in the system
    
    Fields:
    - id: Primary key for user identification
    - email: Unique email address for login and communication (case-sensitive as stored)
    - name: Display name
    - password_hash: Securely hashed password (never store raw passwords)
    - verified: Whether email ownership has been confirmed
    - admin: Whether the account has administrator rights
    - token: Outstanding email verification token, NULL once redeemed
    - created_at: Timestamp when user was created
    - updated_at: Timestamp when user was last updated
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    verified = Column(Boolean, default=False, nullable=False)
    admin = Column(Boolean, default=False, nullable=False)
    token = Column(String, unique=True, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    reset_tokens = relationship(
        "PasswordResetToken",
        back_populates="user",
        cascade="all, delete-orphan"
    )
    appointments = relationship(
        "Appointment",
        back_populates="user",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', verified={self.verified})>"


class PasswordResetToken(Base):
    """
    Password reset token - One row per forgot-password request.

    A token is usable while ``consumed`` is false and ``expires_at`` (naive
    UTC) is in the future.
    """
    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(64), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    consumed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="reset_tokens")

    def __repr__(self):
        return f"<PasswordResetToken(id={self.id}, user_id={self.user_id}, consumed={self.consumed})>"
