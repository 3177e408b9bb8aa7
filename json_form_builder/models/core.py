"""Core data models for the JSON Form Builder."""

from datetime import datetime, UTC
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator


class ValidityState(str, Enum):
    """Validity of the document being edited."""

    EMPTY = "empty"
    VALID = "valid"
    INVALID = "invalid"


class CallState(str, Enum):
    """Sub-state of the most recent API call."""

    READY = "ready"
    CALLING = "calling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class HttpMethod(str, Enum):
    """HTTP methods a document can be dispatched with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"


class TokenCategory(str, Enum):
    """Display categories produced by the highlighter."""

    KEY = "key"
    STRING_VALUE = "string-value"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    STRUCTURAL = "structural"
    SEPARATOR = "separator"


class ValidationResult(BaseModel):
    """Outcome of validating a document.

    ``value`` is only meaningful when ``state`` is valid: a document of
    ``null`` parses to ``None`` and is still a present value.
    """

    state: ValidityState = Field(..., description="Validity of the document")
    value: Any = Field(default=None, description="Parsed JSON value when valid")
    diagnostic: Optional[str] = Field(default=None, description="Parser message when invalid")

    @property
    def has_value(self) -> bool:
        return self.state == ValidityState.VALID

    @property
    def is_valid(self) -> bool:
        return self.state == ValidityState.VALID


class HighlightToken(BaseModel):
    """A tagged span of the highlighted text."""

    start: int = Field(..., ge=0, description="Start offset, inclusive")
    end: int = Field(..., ge=0, description="End offset, exclusive")
    category: TokenCategory = Field(..., description="Display category")
    text: str = Field(..., description="Matched text")


class DocumentStats(BaseModel):
    """Structural metrics of a valid document."""

    line_count: int = Field(..., ge=1, description="Newline-delimited segments of the document")
    char_count: int = Field(..., ge=0, description="Length of the compact serialization")
    key_count: int = Field(..., ge=0, description="Object keys at every nesting depth")


class RequestSpec(BaseModel):
    """Fully resolved request ready for dispatch."""

    method: HttpMethod = Field(..., description="HTTP method")
    base_url: str = Field(..., description="URL as entered by the user")
    url: str = Field(..., description="URL the request is sent to, query string included")
    headers: Dict[str, str] = Field(default_factory=dict, description="Request headers")
    body: Optional[str] = Field(default=None, description="Serialized JSON body for POST/PUT")

    @field_validator('base_url', 'url')
    @classmethod
    def validate_url(cls, v):
        """Ensure URL is not empty."""
        if not v or not v.strip():
            raise ValueError("URL cannot be empty")
        return v.strip()


class ResponseRecord(BaseModel):
    """Result of the most recent completed call."""

    status_code: int = Field(..., description="HTTP status code")
    payload: Any = Field(default=None, description="Decoded JSON response body")
    received_at: datetime = Field(default_factory=lambda: datetime.now(UTC), description="When the response arrived")

    @property
    def is_error_status(self) -> bool:
        return self.status_code >= 400


class Template(BaseModel):
    """A pre-built document with the request it is meant for."""

    id: str = Field(..., description="Template identifier")
    name: str = Field(..., description="Display name")
    group: str = Field(..., description="Group label used to section the catalog")
    method: HttpMethod = Field(..., description="HTTP method the template is sent with")
    url: str = Field(..., description="Endpoint the template is sent to")
    data: Any = Field(..., description="Template JSON value")

    @field_validator('id', 'name', 'group', 'url')
    @classmethod
    def validate_not_empty(cls, v):
        """Ensure text fields are not empty."""
        if not v or not v.strip():
            raise ValueError("Template fields cannot be empty")
        return v.strip()


class ApiExample(BaseModel):
    """Example endpoint for an HTTP method."""

    method: HttpMethod
    url: str
    description: str


class TemplateGroup(BaseModel):
    """Templates sharing a group label, in catalog order."""

    group: str
    templates: List[Template]
