"""Data models for the JSON Form Builder."""

from .core import (
    ValidityState,
    CallState,
    HttpMethod,
    TokenCategory,
    ValidationResult,
    HighlightToken,
    DocumentStats,
    RequestSpec,
    ResponseRecord,
    Template,
    TemplateGroup,
    ApiExample,
)

from .session import (
    SessionState,
    SessionSnapshot,
)

from .errors import (
    ErrorResponse,
    ValidationError,
    RequestError,
    NetworkError,
    SessionError,
    ProcessingError,
    JSONFormException,
    ParseException,
    InvalidRequestException,
    TransportException,
    SessionException,
    SessionNotFoundException,
    CallInProgressException,
    TemplateNotFoundException,
)

__all__ = [
    # Core models
    "ValidityState",
    "CallState",
    "HttpMethod",
    "TokenCategory",
    "ValidationResult",
    "HighlightToken",
    "DocumentStats",
    "RequestSpec",
    "ResponseRecord",
    "Template",
    "TemplateGroup",
    "ApiExample",

    # Session models
    "SessionState",
    "SessionSnapshot",

    # Error models
    "ErrorResponse",
    "ValidationError",
    "RequestError",
    "NetworkError",
    "SessionError",
    "ProcessingError",

    # Exception classes
    "JSONFormException",
    "ParseException",
    "InvalidRequestException",
    "TransportException",
    "SessionException",
    "SessionNotFoundException",
    "CallInProgressException",
    "TemplateNotFoundException",
]
