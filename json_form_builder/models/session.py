"""Session models for the editing state machine."""

from datetime import datetime, UTC
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .core import (
    CallState,
    DocumentStats,
    HighlightToken,
    HttpMethod,
    ResponseRecord,
    ValidationResult,
    ValidityState,
)


class SessionState(BaseModel):
    """Live fields of one editing session.

    Instances are treated as immutable: the controller validates a whole new
    state per transition so no partial or inconsistent state is observable.
    """

    model_config = ConfigDict(frozen=True)

    document: str = Field(default="", description="Raw text being edited")
    validation: ValidationResult = Field(
        default_factory=lambda: ValidationResult(state=ValidityState.EMPTY),
        description="Validation result derived from the document"
    )
    method: HttpMethod = Field(default=HttpMethod.POST, description="HTTP method for the next call")
    url: str = Field(default="", description="Endpoint for the next call")
    template_id: Optional[str] = Field(default=None, description="Template the document was loaded from")
    template_locked: bool = Field(default=False, description="Method/URL editing disabled by a template load")
    call_state: CallState = Field(default=CallState.READY, description="Sub-state of the most recent call")
    response: Optional[ResponseRecord] = Field(default=None, description="Result of the most recent call")
    call_error: Optional[str] = Field(default=None, description="Failure of the most recent call")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC), description="Last transition time")

    @model_validator(mode='after')
    def validate_call_outcome(self):
        """Response and call error are mutually exclusive."""
        if self.response is not None and self.call_error is not None:
            raise ValueError("A session cannot hold both a response and a call error")
        return self


class SessionSnapshot(BaseModel):
    """Read model of a session, with everything derived for display."""

    session_id: Optional[str] = Field(default=None, description="Session identifier when managed")
    document: str
    validity: ValidityState
    diagnostic: Optional[str] = None
    parsed: Any = None
    preview: Optional[str] = Field(default=None, description="Formatted form of the parsed value")
    document_tokens: List[HighlightToken] = Field(default_factory=list)
    preview_tokens: List[HighlightToken] = Field(default_factory=list)
    stats: Optional[DocumentStats] = None
    method: HttpMethod
    url: str
    template_id: Optional[str] = None
    template_locked: bool = False
    call_state: CallState
    can_call: bool
    can_format: bool
    response: Optional[ResponseRecord] = None
    response_tokens: List[HighlightToken] = Field(default_factory=list)
    call_error: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: datetime
