"""Error categorisation for the JSON Form Builder."""

import asyncio
import json
import logging
import time
from typing import Dict, Type

from pydantic import ValidationError as PydanticValidationError

from ..models.errors import (
    ErrorResponse, ValidationError, RequestError, NetworkError, SessionError, ProcessingError,
    JSONFormException, ParseException, InvalidRequestException, TransportException,
    SessionException, SessionNotFoundException, CallInProgressException, TemplateNotFoundException
)

logger = logging.getLogger(__name__)

# Most specific classes first
HTTP_STATUS_BY_EXCEPTION: Dict[Type[JSONFormException], int] = {
    SessionNotFoundException: 404,
    TemplateNotFoundException: 404,
    CallInProgressException: 409,
    ParseException: 400,
    InvalidRequestException: 400,
    TransportException: 502,
    SessionException: 400,
}


class ErrorHandler:
    """Maps exceptions to ErrorResponse models and HTTP status codes."""

    def categorize_error(self, error: Exception) -> ErrorResponse:
        """Categorize an exception into appropriate error response."""

        if isinstance(error, JSONFormException):
            return self._handle_json_form_exception(error)

        if isinstance(error, PydanticValidationError):
            return self._handle_pydantic_validation_error(error)

        if isinstance(error, json.JSONDecodeError):
            return self._handle_json_parsing_error(error)

        if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
            return self._handle_timeout_error(error)

        return self._handle_generic_error(error)

    def status_code_for(self, error: Exception) -> int:
        """HTTP status code for an exception raised by a session operation."""
        for exception_type, status_code in HTTP_STATUS_BY_EXCEPTION.items():
            if isinstance(error, exception_type):
                return status_code
        if isinstance(error, PydanticValidationError):
            return 422
        return 500

    def _handle_json_form_exception(self, error: JSONFormException) -> ErrorResponse:
        """Handle known JSON Form Builder exceptions."""

        if isinstance(error, ParseException):
            return ValidationError(
                error_code=error.error_code,
                message=error.message,
                details=error.details,
                suggestions=[
                    "Check for missing quotes, brackets, or commas",
                    "Fix the reported parse error before formatting or sending"
                ]
            )

        if isinstance(error, InvalidRequestException):
            return RequestError(
                error_code=error.error_code,
                message=error.message,
                details=error.details,
                method=error.details.get('method')
            )

        if isinstance(error, TransportException):
            return NetworkError(
                error_code=error.error_code,
                message=error.message,
                details=error.details,
                url=error.details.get('url')
            )

        if isinstance(error, SessionException):
            return SessionError(
                error_code=error.error_code,
                message=error.message,
                details=error.details,
                session_id=error.details.get('session_id')
            )

        return ErrorResponse(
            error_type=error.error_type,
            error_code=error.error_code,
            message=error.message,
            details=error.details
        )

    def _handle_pydantic_validation_error(self, error: PydanticValidationError) -> ValidationError:
        """Handle Pydantic validation errors."""

        field_errors: Dict[str, list] = {}
        for err in error.errors():
            field_path = ".".join(str(loc) for loc in err['loc'])
            field_errors.setdefault(field_path, []).append(err['msg'])

        return ValidationError(
            error_code="VALIDATION_FAILED",
            message="Request validation failed",
            details={"error_count": error.error_count()},
            field_errors=field_errors,
            suggestions=[
                "Check the request format and ensure all required fields are provided",
                "Verify that field types match the expected schema"
            ]
        )

    def _handle_json_parsing_error(self, error: json.JSONDecodeError) -> ValidationError:
        """Handle JSON parsing errors."""

        return ValidationError(
            error_code="INVALID_JSON",
            message=f"Invalid JSON document: {str(error)}",
            details={"line": error.lineno, "column": error.colno, "position": error.pos},
            suggestions=[
                "Ensure the document is valid JSON format",
                "Check for missing quotes, brackets, or commas"
            ]
        )

    def _handle_timeout_error(self, error: Exception) -> NetworkError:
        """Handle timeout errors."""

        return NetworkError(
            error_code="TIMEOUT",
            message=f"Operation timed out: {str(error) or 'no response'}",
            suggestions=[
                "Retry the operation",
                "Check that the endpoint is reachable"
            ]
        )

    def _handle_generic_error(self, error: Exception) -> ProcessingError:
        """Handle unhandled exceptions."""

        error_id = f"generic_{int(time.time())}"
        logger.error(f"Unhandled error [{error_id}]: {type(error).__name__}: {str(error)}",
                     exc_info=error)

        return ProcessingError(
            error_code="INTERNAL_ERROR",
            message="An unexpected error occurred",
            details={
                "error_id": error_id,
                "error_type": type(error).__name__,
                "original_error": str(error)
            },
            suggestions=[
                "Retry the operation",
                f"Reference error ID: {error_id}"
            ]
        )


# Global error handler instance
default_error_handler = ErrorHandler()


def handle_error(error: Exception) -> ErrorResponse:
    """Convenience function to handle errors using default handler."""
    return default_error_handler.categorize_error(error)
