"""
Centralized Error Handling and Logging System
Maps service errors to structured JSON responses and logs them with a trace id.
"""

import json
import logging
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union
from contextvars import ContextVar

from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from utils.errors import ServiceError, NotFoundError, ForbiddenError, StoreError

request_id_var: ContextVar[str] = ContextVar('request_id', default='')

logger = logging.getLogger(__name__)


class ErrorHandlingConfig:
    """Behaviour switches for error logging and responses"""

    SENSITIVE_FIELD_PATTERNS = [
        'password', 'token', 'key', 'secret', 'authorization', 'bearer', 'credential'
    ]
    MAX_VALUE_LOG_SIZE = 2000
    INCLUDE_TRACE_ID = True
    INCLUDE_TIMESTAMP = True

    @classmethod
    def is_sensitive_field(cls, field_name: str) -> bool:
        field_lower = field_name.lower()
        return any(pattern in field_lower for pattern in cls.SENSITIVE_FIELD_PATTERNS)

    @classmethod
    def sanitize_data(cls, data: Union[Dict, list, str, Any]) -> Any:
        """Recursively redact sensitive values before they reach the logs"""
        if isinstance(data, dict):
            return {
                key: "***REDACTED***" if cls.is_sensitive_field(str(key)) else cls.sanitize_data(value)
                for key, value in data.items()
            }
        if isinstance(data, list):
            return [cls.sanitize_data(item) for item in data]
        if isinstance(data, str) and len(data) > cls.MAX_VALUE_LOG_SIZE:
            return data[:cls.MAX_VALUE_LOG_SIZE] + "...[TRUNCATED]"
        return data


# Status code and public error label per service error type
SERVICE_ERROR_STATUS = {
    NotFoundError: (404, "Not Found"),
    ForbiddenError: (403, "Forbidden"),
    StoreError: (503, "Service Unavailable"),
}


def current_trace_id() -> str:
    return request_id_var.get('') or str(uuid.uuid4())[:8]


def log_error(
    error_type: str,
    message: str,
    request: Optional[Request] = None,
    exception: Optional[Exception] = None,
    extra_context: Optional[Dict] = None,
    include_traceback: bool = False,
    level: int = logging.ERROR
) -> str:
    """Log one structured JSON error record and return its trace id"""
    trace_id = current_trace_id()

    log_entry: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "trace_id": trace_id,
        "error_type": error_type,
        "message": message,
    }

    if request is not None:
        log_entry["request"] = {
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "headers": ErrorHandlingConfig.sanitize_data(dict(request.headers)),
            "client_ip": request.client.host if request.client else None,
        }

    if exception is not None:
        log_entry["exception"] = {
            "type": type(exception).__name__,
            "details": str(exception),
        }
        if include_traceback:
            log_entry["exception"]["traceback"] = "".join(
                traceback.format_exception(type(exception), exception, exception.__traceback__)
            )

    if extra_context:
        log_entry["context"] = ErrorHandlingConfig.sanitize_data(extra_context)

    logger.log(level, json.dumps(log_entry, indent=2, default=str))
    return trace_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns a trace id to every request and echoes it in X-Trace-ID"""

    async def dispatch(self, request: Request, call_next):
        trace_id = str(uuid.uuid4())[:8]
        request_id_var.set(trace_id)
        request.state.trace_id = trace_id

        try:
            response = await call_next(request)
        except Exception as e:
            # Handled here so the 500 keeps this request's trace id
            response = await general_exception_handler(request, e)
        response.headers["X-Trace-ID"] = trace_id
        return response


def _error_response(status_code: int, error: str, message: str, trace_id: Optional[str], **extra) -> JSONResponse:
    content: Dict[str, Any] = {"error": error, "message": message, **extra}
    if ErrorHandlingConfig.INCLUDE_TRACE_ID and trace_id:
        content["trace_id"] = trace_id
    if ErrorHandlingConfig.INCLUDE_TIMESTAMP:
        content["timestamp"] = datetime.now(timezone.utc).isoformat()
    return JSONResponse(status_code=status_code, content=content)


async def service_exception_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle NotFound / Forbidden / Store errors raised by the services"""
    status_code, label = SERVICE_ERROR_STATUS.get(type(exc), (500, "Internal Server Error"))

    if status_code >= 500:
        trace_id = log_error(exc.error_type, exc.message, request=request, exception=exc, include_traceback=True)
        # Store details stay in the logs
        message = "The data store is currently unavailable"
    else:
        trace_id = log_error(exc.error_type, exc.message, request=request, level=logging.INFO)
        message = exc.message

    return _error_response(status_code, label, message, trace_id)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with logging"""
    trace_id = log_error(
        f"http_{exc.status_code}",
        f"HTTP {exc.status_code}: {exc.detail}",
        request=request,
        level=logging.ERROR if exc.status_code >= 500 else logging.INFO
    )
    response = _error_response(exc.status_code, f"HTTP {exc.status_code}", exc.detail, trace_id)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle FastAPI validation errors (HTTP 422)"""
    validation_details = [
        {
            "field": " -> ".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", "unknown"),
        }
        for error in exc.errors()
    ]

    trace_id = log_error(
        "validation_error_422",
        f"Request validation failed: {len(validation_details)} validation errors",
        request=request,
        extra_context={"validation_errors": validation_details},
        level=logging.INFO
    )

    return _error_response(
        422,
        "Validation Error",
        "Request validation failed",
        trace_id,
        detail=validation_details,
        error_count=len(validation_details)
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other exceptions without exposing internals"""
    trace_id = log_error(
        "internal_server_error",
        f"Unhandled exception: {str(exc)}",
        request=request,
        exception=exc,
        include_traceback=True
    )
    return _error_response(500, "Internal Server Error", "An unexpected error occurred", trace_id)


def setup_error_handling(app):
    """Install the request context middleware and the exception handlers"""
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(ServiceError, service_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling initialized")
