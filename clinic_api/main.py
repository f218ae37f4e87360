"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .database import Base, engine, SessionLocal
# Import all models so their tables are registered on Base
from .auth.models import User, PasswordResetToken  # noqa: F401
from .services.models import Service  # noqa: F401
from .appointments.models import Appointment  # noqa: F401
from .auth.router import router as auth_router
from .services.router import router as services_router
from .appointments.router import router as appointments_router, users_router
from .exceptions import register_exception_handlers
from .core.bootstrap import run_bootstrap
from .core.mail import Mailer
from .core.middleware import setup_middlewares

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create tables, run bootstrap tasks and build the shared mailer.
    """
    logger.info("Starting Clinic Booking API...")
    Base.metadata.create_all(bind=engine)
    
    db = SessionLocal()
    try:
        run_bootstrap(db)
    except Exception as e:
        logger.error(f"Bootstrap process failed: {str(e)}")
    finally:
        db.close()
    
    app.state.mailer = Mailer.from_settings(settings)
    yield
    logger.info("Clinic Booking API stopped")

# Create FastAPI application
app = FastAPI(
    title="Clinic Booking API",
    description="API for the clinic appointment booking system",
    version=__version__,
    lifespan=lifespan
)

# Register exception handlers
register_exception_handlers(app)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

# Setup custom middleware
setup_middlewares(app)

# Include routers
app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(services_router, prefix=settings.api_prefix)
app.include_router(appointments_router, prefix=settings.api_prefix)
app.include_router(users_router, prefix=settings.api_prefix)

# Root endpoint
@app.get("/")
def root():
    """
    Root endpoint for API health check.
    
    Returns:
        dict: Simple welcome message
    """
    return {"message": "Welcome to Clinic Booking API", "version": __version__}

# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.
    
    Returns:
        dict: Health status information
    """
    return {"status": "healthy"}
