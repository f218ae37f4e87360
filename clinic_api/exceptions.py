"""
Global exception handlers and the base application exception.

Every error leaves the API as ``{"msg": "<human readable message>"}`` so the
frontend can show it directly.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi import HTTPException
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError
import logging

# Set up logging
logger = logging.getLogger(__name__)

class AppException(HTTPException):
    """
    Base exception class for application-specific exceptions.

    Subclasses set a default status code and message; both can be
    overridden per raise.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Request could not be processed"

    def __init__(self, detail: str = None, status_code: int = None, headers: dict = None):
        super().__init__(
            status_code=status_code or self.status_code,
            detail=detail or self.detail,
            headers=headers
        )


class StoreUnavailableException(AppException):
    """Exception raised when the database cannot complete an operation."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "The service is temporarily unavailable"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTP and application-specific exceptions.
    
    Args:
        request: The request that caused the exception
        exc: The exception instance
        
    Returns:
        JSONResponse: Standardized error response
    """
    if exc.status_code >= 500:
        logger.error(f"Server error on {request.url.path}: {exc.detail}")
    else:
        logger.info(f"Request to {request.url.path} rejected ({exc.status_code}): {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"msg": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Malformed bodies are reported as 400 like every other input error.
    
    Args:
        request: The request that caused the exception
        exc: The validation exception instance
        
    Returns:
        JSONResponse: Standardized error response with validation details
    """
    logger.info(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({
            "msg": "Validation error",
            "errors": exc.errors()
        })
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """
    Handler for database errors that escaped the service layer.

    The full error is logged, the client only gets a generic message.
    """
    logger.error(f"Database error on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=StoreUnavailableException.status_code,
        content={"msg": StoreUnavailableException.detail}
    )


# Register exception handlers with FastAPI app
def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.
    
    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
