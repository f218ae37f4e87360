"""
Custom middleware for the FastAPI application.
"""
import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import uuid

# Set up logging
logger = logging.getLogger(__name__)

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging request and response information.
    """
    def __init__(self, app: ASGIApp):
        super().__init__(app)
    
    async def dispatch(self, request: Request, call_next):
        """
        Process the request and log information.
        
        Args:
            request: The incoming request
            call_next: The next middleware or endpoint handler
            
        Returns:
            Response: The response from the next handler
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        
        client_host = request.client.host if request.client else "unknown"
        # Paths can carry one-shot tokens, only the route prefix is logged
        path = _redact_path(request.url.path)
        logger.info(f"Request {request_id} started: {request.method} {path} from {client_host}")
        
        start_time = time.time()
        
        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request {request_id} failed: {request.method} {path} "
                f"- Error: {str(e)} - Duration: {process_time:.4f}s"
            )
            raise
        
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-ID"] = request_id
        
        logger.info(
            f"Request {request_id} completed: {request.method} {path} "
            f"- Status: {response.status_code} - Duration: {process_time:.4f}s"
        )
        return response


TOKEN_ROUTES = ("/auth/verify/", "/auth/forgot-password/")

def _redact_path(path: str) -> str:
    for route in TOKEN_ROUTES:
        index = path.find(route)
        if index != -1:
            return path[: index + len(route)] + "***"
    return path


def setup_middlewares(app):
    """
    Setup all custom middlewares for the application.
    
    Args:
        app: FastAPI application instance
    """
    app.add_middleware(RequestLoggingMiddleware)
