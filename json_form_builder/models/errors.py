"""Error models for the JSON Form Builder."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error_type: str = Field(..., description="Category of error (validation, request, network, session, template, processing)")
    error_code: str = Field(..., description="Specific error code for programmatic handling")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error details")
    suggestions: Optional[List[str]] = Field(default=None, description="Suggested actions to resolve the error")

    @field_validator('error_type')
    @classmethod
    def validate_error_type(cls, v):
        """Ensure error type is one of the allowed categories."""
        allowed_types = ["validation", "request", "network", "session", "template", "processing", "configuration"]
        if v not in allowed_types:
            raise ValueError(f"Error type must be one of: {', '.join(allowed_types)}")
        return v

    @field_validator('error_code')
    @classmethod
    def validate_error_code(cls, v):
        """Ensure error code is not empty."""
        if not v or not v.strip():
            raise ValueError("Error code cannot be empty")
        return v.strip().upper()

    @field_validator('message')
    @classmethod
    def validate_message(cls, v):
        """Ensure message is not empty."""
        if not v or not v.strip():
            raise ValueError("Error message cannot be empty")
        return v.strip()


class ValidationError(ErrorResponse):
    """Specific error model for document parse failures."""

    error_type: str = Field(default="validation", description="Error type is always validation")
    field_errors: Optional[Dict[str, List[str]]] = Field(
        default=None,
        description="Field-specific validation errors"
    )


class RequestError(ErrorResponse):
    """Specific error model for requests that cannot be built."""

    error_type: str = Field(default="request", description="Error type is always request")
    method: Optional[str] = Field(default=None, description="HTTP method of the rejected request")


class NetworkError(ErrorResponse):
    """Specific error model for transport failures."""

    error_type: str = Field(default="network", description="Error type is always network")
    url: Optional[str] = Field(default=None, description="URL that failed")


class SessionError(ErrorResponse):
    """Specific error model for session-related failures."""

    error_type: str = Field(default="session", description="Error type is always session")
    session_id: Optional[str] = Field(default=None, description="Session ID that caused the error")


class ProcessingError(ErrorResponse):
    """Specific error model for unexpected processing failures."""

    error_type: str = Field(default="processing", description="Error type is always processing")
    processing_stage: Optional[str] = Field(default=None, description="Stage where processing failed")


# Exception classes for raising errors
class JSONFormException(Exception):
    """Base exception for the JSON Form Builder."""

    error_type = "processing"

    def __init__(self, error_code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ParseException(JSONFormException):
    """Malformed JSON where a valid document is required."""

    error_type = "validation"


class InvalidRequestException(JSONFormException):
    """Request cannot be built: blank URL, bad method or missing body."""

    error_type = "request"


class TransportException(JSONFormException):
    """Transport or response-decode failure."""

    error_type = "network"


class SessionException(JSONFormException):
    """Exception for session-related failures."""

    error_type = "session"


class SessionNotFoundException(SessionException):
    """Session ID is unknown or expired."""


class CallInProgressException(SessionException):
    """A call is already in flight for the session."""


class TemplateNotFoundException(JSONFormException):
    """Template ID is not in the catalog."""

    error_type = "template"
