"""
Bootstrap utilities run once at startup.

Creates the first admin account from environment variables, seeds the
services catalogue and removes stale password reset tokens.
"""
import logging
from sqlalchemy.orm import Session

from ..config import settings
from ..auth.models import User
from ..auth.service import purge_stale_reset_tokens
from ..core.security import hash_password
from ..services.service import seed_services

logger = logging.getLogger(__name__)

def admin_exists(db: Session) -> bool:
    """
    Check if any admin user exists in the database.
    
    Args:
        db: Database session
        
    Returns:
        bool: True if at least one admin exists, False otherwise
    """
    return db.query(User).filter(User.admin.is_(True)).count() > 0

def create_bootstrap_admin(db: Session) -> bool:
    """
    Create the first admin user from environment variables.
    
    Args:
        db: Database session
        
    Returns:
        bool: True if admin was created successfully, False otherwise
    """
    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        logger.info("Bootstrap admin credentials not provided, skipping admin creation")
        return False
    
    if db.query(User).filter(User.email == settings.bootstrap_admin_email).first():
        logger.warning(f"Bootstrap failed: Email {settings.bootstrap_admin_email} already exists")
        return False
    
    # Bootstrap admin is pre-verified
    admin = User(
        email=settings.bootstrap_admin_email,
        name=settings.bootstrap_admin_name,
        password_hash=hash_password(settings.bootstrap_admin_password),
        verified=True,
        admin=True,
        token=None
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    
    logger.info(f"Bootstrap admin created: {admin.email} (ID: {admin.id})")
    return True

def bootstrap_admin_if_needed(db: Session) -> None:
    """
    Create the bootstrap admin when no admin exists yet.
    
    Args:
        db: Database session
    """
    if admin_exists(db):
        logger.info("Admin users found, bootstrap not needed")
        return
    create_bootstrap_admin(db)

def run_bootstrap(db: Session) -> None:
    """
    Run every startup task.
    
    Args:
        db: Database session
    """
    bootstrap_admin_if_needed(db)
    
    if settings.seed_services:
        created = seed_services(db)
        if created:
            logger.info(f"Seeded {created} services")
    
    purge_stale_reset_tokens(db)
