"""
Standardized exception hierarchy for livremente
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import json
import logging

logger = logging.getLogger(__name__)


class LivreMenteError(Exception):
    """
    Base exception for all livremente errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise LivreMenteError(
            message="Failed to save profile",
            user_id="1712345678901",
            operation="save_profile",
            context={"key": "user_1712345678901_profile"}
        )
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "Something went wrong. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # 'message' is reserved by logging
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for display or structured logs"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(LivreMenteError):
    """
    Raised when input fails validation

    Examples:
    - Negative XP award
    - SUDS rating outside 0-100
    - Empty exposure behavior

    Example:
        raise ValidationError(
            message="XP amount must be non-negative",
            field="amount",
            value=-5
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(LivreMenteError):
    """Local storage could not be read or written"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        **kwargs
    ):
        self.key = key
        kwargs.setdefault("user_message", "We couldn't save your progress on this device. It is kept for this session.")
        kwargs.setdefault("context", {"key": key})
        super().__init__(message=message, **kwargs)


class CorruptRecordError(StorageError):
    """Stored record exists but cannot be decoded"""

    def __init__(self, message: str, key: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            key=key,
            user_message="Some saved data was unreadable and has been reset.",
            **kwargs
        )


class RecordNotFoundError(LivreMenteError):
    """Requested record does not exist"""

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message=f"{record_type or 'Record'} not found.",
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


# ==========================================
# External API Errors
# ==========================================

class ExternalAPIError(LivreMenteError):
    """
    Base class for external API failures
    """

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs
    ):
        self.service = service
        self.status_code = status_code
        kwargs.setdefault(
            "user_message",
            f"We're having trouble connecting to {service or 'an external service'}. Please try again later."
        )
        super().__init__(
            message=message,
            context={"service": service, "status_code": status_code},
            **kwargs
        )


class ChatAPIError(ExternalAPIError):
    """Hosted language model call failed"""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            service="Gemini",
            user_message="The assistant is unavailable right now. Your progress is safe.",
            **kwargs
        )


# ==========================================
# Authentication
# ==========================================

class AuthenticationError(LivreMenteError):
    """Login or signup rejected"""

    def __init__(
        self,
        message: str = "Authentication failed",
        **kwargs
    ):
        kwargs.setdefault("user_message", "Invalid credentials.")
        super().__init__(message=message, **kwargs)


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(LivreMenteError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The app is not properly configured.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> LivreMenteError:
    """
    Wrap external exceptions (httpx, OSError, json) into our exception hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        user_id: User ID if applicable
        context: Additional context

    Returns:
        Appropriate LivreMenteError subclass

    Example:
        try:
            response = await client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise wrap_external_exception(e, operation="chat")
    """
    import httpx

    # HTTP errors
    if isinstance(error, httpx.TimeoutException):
        return ChatAPIError(
            message=f"API request timed out: {str(error)}",
            user_id=user_id,
            operation=operation,
            cause=error
        )
    elif isinstance(error, httpx.HTTPStatusError):
        return ChatAPIError(
            message=f"API returned error: {error.response.status_code}",
            status_code=error.response.status_code,
            user_id=user_id,
            operation=operation,
            cause=error
        )
    elif isinstance(error, httpx.HTTPError):
        return ChatAPIError(
            message=f"API request failed: {str(error)}",
            user_id=user_id,
            operation=operation,
            cause=error
        )

    # Storage errors
    elif isinstance(error, json.JSONDecodeError):
        return CorruptRecordError(
            message=f"Stored data is not valid JSON: {str(error)}",
            key=(context or {}).get("key"),
            user_id=user_id,
            operation=operation,
            cause=error
        )
    elif isinstance(error, OSError):
        return StorageError(
            message=f"Local storage unavailable: {str(error)}",
            key=(context or {}).get("key"),
            user_id=user_id,
            operation=operation,
            cause=error
        )

    # Generic fallback
    else:
        return LivreMenteError(
            message=f"{operation} failed: {str(error)}",
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )
