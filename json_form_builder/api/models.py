"""
Pydantic models for the JSON Form Builder REST API.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from ..models.core import (
    ApiExample, DocumentStats, HighlightToken, HttpMethod, TemplateGroup, ValidityState
)
from ..models.session import SessionSnapshot


class DocumentRequest(BaseModel):
    """Request model for replacing a session's document."""
    document: str = Field(..., description="Raw document text")


class TextRequest(BaseModel):
    """Request model for stateless validation and highlighting."""
    text: str = Field(..., description="Raw JSON text")


class TemplateRequest(BaseModel):
    """Request model for loading a template into a session."""
    template_id: str = Field(..., description="Template identifier")


class RequestSettings(BaseModel):
    """Request model for changing a session's method and URL."""
    method: Optional[HttpMethod] = Field(None, description="HTTP method for the next call")
    url: Optional[str] = Field(None, description="Endpoint for the next call")


class ValidateResponse(BaseModel):
    """Response model for stateless validation."""
    validity: ValidityState = Field(..., description="Validity of the text")
    diagnostic: Optional[str] = Field(None, description="Parser message when invalid")
    parsed: Any = Field(None, description="Parsed value when valid")
    formatted: Optional[str] = Field(None, description="Pretty-printed form when valid")
    stats: Optional[DocumentStats] = Field(None, description="Document metrics when valid")


class HighlightResponse(BaseModel):
    """Response model for stateless highlighting."""
    tokens: List[HighlightToken] = Field(..., description="Tagged spans ordered by offset")


class TemplateListResponse(BaseModel):
    """Response model for the template catalog."""
    total: int = Field(..., description="Number of templates")
    groups: List[TemplateGroup] = Field(..., description="Templates grouped by label")


class CallResponse(BaseModel):
    """Response model for an API call."""
    dispatched: bool = Field(..., description="Whether a request was sent")
    session: SessionSnapshot = Field(..., description="Session after the call")


class CopyResponse(BaseModel):
    """Response model for the copy action."""
    copied: bool = Field(..., description="Whether anything was copied")
    text: Optional[str] = Field(None, description="Copied document text")


class SessionListResponse(BaseModel):
    """Response model for listing sessions."""
    active_sessions: int = Field(..., description="Number of active sessions")
    sessions: Dict[str, Dict[str, Any]] = Field(..., description="Per-session summary")


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str = Field(..., description="Server health status")
    version: str = Field(..., description="Server version")
    uptime: float = Field(..., description="Server uptime in seconds")
    active_sessions: int = Field(..., description="Number of active sessions")
    components: Dict[str, Any] = Field(..., description="Component health status")


class ServerInfoResponse(BaseModel):
    """Response model for server information."""
    name: str = Field(..., description="Server name")
    version: str = Field(..., description="Server version")
    description: str = Field(..., description="Server description")
    config: Dict[str, Any] = Field(..., description="Server configuration")
    examples: List[ApiExample] = Field(..., description="Example endpoint per method")
