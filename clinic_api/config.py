"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.
    
    Attributes:
        database_url: SQLAlchemy connection string
        secret_key: Secret key for session token signing
        algorithm: Algorithm used for JWT encoding (typically HS256)
        access_token_expire_minutes: Session token lifetime in minutes
        password_reset_token_expire_minutes: Reset link lifetime in minutes
        bcrypt_rounds: Work factor for password hashing
        
        # Email settings
        mail_username: SMTP server username
        mail_password: SMTP server password
        mail_from: Sender email address
        mail_from_name: Display name of the sender
        mail_port: SMTP server port
        mail_server: SMTP server hostname
        mail_starttls: Whether to use STARTTLS
        mail_ssl_tls: Whether to use SSL/TLS
        use_credentials: Whether to use credentials for SMTP
        validate_certs: Whether to validate certificates
        suppress_send: Build messages without delivering them
        
        # Frontend settings
        frontend_url: Base URL used to build links sent by email
        cors_origins: Origins allowed to call the API
        
        # Booking rules
        opening_hour: First bookable hour of the day
        closing_hour: Last bookable hour of the day
        max_services_per_appointment: Upper bound of services in one booking
        
        # Bootstrap settings (optional)
        bootstrap_admin_email: Optional admin email for first admin creation
        bootstrap_admin_password: Optional admin password for first admin creation
        seed_services: Whether to seed the services catalogue on startup
    """
    # Database settings
    database_url: str
    
    # JWT settings
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    password_reset_token_expire_minutes: int = 30
    bcrypt_rounds: int = 10
    
    # Email settings
    mail_username: str = ""
    mail_password: str = ""
    mail_from: str = "no-reply@clinic.com"
    mail_from_name: str = "Clinic"
    mail_port: int = 587
    mail_server: str = "localhost"
    mail_starttls: bool = True
    mail_ssl_tls: bool = False
    use_credentials: bool = True
    validate_certs: bool = True
    suppress_send: bool = False
    
    # Frontend settings
    frontend_url: str = "http://localhost:5173"
    cors_origins: List[str] = ["http://localhost:5173"]
    
    # API settings
    api_prefix: str = "/api"
    log_level: str = "INFO"
    
    # Booking rules
    opening_hour: int = 10
    closing_hour: int = 19
    max_services_per_appointment: int = 1
    
    # Bootstrap settings (optional - only used on first startup)
    bootstrap_admin_email: Optional[str] = None
    bootstrap_admin_password: Optional[str] = None
    bootstrap_admin_name: str = "Administrator"
    seed_services: bool = True

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

# Create settings instance
settings = Settings()
