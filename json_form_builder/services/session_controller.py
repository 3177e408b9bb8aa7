"""Session controller: the editing and calling state machine."""

import asyncio
import time
from datetime import datetime, UTC
from typing import Any, Dict, Optional, Union

from ..models.core import CallState, HttpMethod, ValidationResult, ValidityState
from ..models.errors import (
    CallInProgressException,
    InvalidRequestException,
    JSONFormException,
    ParseException,
)
from ..models.session import SessionSnapshot, SessionState
from ..utils.logging_config import DebugInfoLogger, get_logger, log_error_with_context, log_performance_metrics
from .clipboard import ClipboardInterface
from .highlighter import Highlighter
from .request_builder import ABSENT, build_request, coerce_method
from .stats import compute_stats
from .templates import TemplateCatalog
from .transport import TransportInterface
from .validator import pretty_json, validate


class SessionController:
    """Owns one session's state and applies user actions to it.

    Validity (empty/valid/invalid) follows the document; the call sub-state
    (ready/calling/succeeded/failed) follows ``call_api``. Every action
    replaces the state in a single assignment.
    """

    def __init__(
        self,
        catalog: TemplateCatalog,
        transport: TransportInterface,
        default_method: Union[str, HttpMethod] = HttpMethod.POST,
        highlighter: Optional[Highlighter] = None,
        session_id: Optional[str] = None,
    ):
        """
        Initialize the controller with an empty document.

        Args:
            catalog: Template source for load_template and load_api_example
            transport: HTTP transport used by call_api
            default_method: Method of the fresh session
            highlighter: Highlighter for snapshots
            session_id: Identifier used in logs and snapshots
        """
        self.catalog = catalog
        self.transport = transport
        self.highlighter = highlighter or Highlighter()
        self.session_id = session_id
        self.created_at = datetime.now(UTC)
        self.logger = get_logger(__name__)
        self.debug_logger = DebugInfoLogger()

        self._state = SessionState(method=coerce_method(default_method))
        # Bumped on reset so a call that outlives it cannot write back
        self._generation = 0
        # Held from dispatch until the transport returns, across resets
        self._in_flight = False

    @property
    def state(self) -> SessionState:
        return self._state

    def _transition(self, **changes: Any) -> SessionState:
        changes["updated_at"] = datetime.now(UTC)
        self._state = SessionState.model_validate({**dict(self._state), **changes})
        return self._state

    def _ensure_unlocked(self, action: str) -> None:
        if self._state.template_locked:
            raise InvalidRequestException(
                "TEMPLATE_LOCKED",
                f"Cannot {action} while a template is loaded; reset the session first",
                {"template_id": self._state.template_id}
            )

    # Document actions

    def edit(self, text: str) -> ValidationResult:
        """Replace the document and re-validate it."""
        text = text or ""
        result = validate(text)
        self._transition(document=text, validation=result)
        return result

    def load_template(self, template_id: str) -> SessionState:
        """
        Load a template's document and request, then lock method and URL.

        Raises:
            TemplateNotFoundException: If the template id is unknown
        """
        template = self.catalog.get(template_id)
        document = pretty_json(template.data)
        state = self._transition(
            document=document,
            validation=validate(document),
            method=template.method,
            url=template.url,
            template_id=template.id,
            template_locked=True,
        )
        self.debug_logger.log_session_operation(
            "load_template", self.session_id, True, {"template_id": template.id}
        )
        return state

    def format(self) -> str:
        """
        Pretty-print the document with 2-space indentation.

        Returns:
            The formatted document

        Raises:
            ParseException: If the document is not valid JSON
        """
        validation = self._state.validation
        if not validation.is_valid:
            raise ParseException(
                "DOCUMENT_NOT_VALID",
                "Only a valid JSON document can be formatted",
                {"diagnostic": validation.diagnostic}
            )

        formatted = pretty_json(validation.value)
        self._transition(document=formatted, validation=validate(formatted))
        return formatted

    def reset(self) -> SessionState:
        """
        Clear document, validity, URL, call outcome and template lock.

        A call still in flight keeps the session in the calling state until
        its transport returns; its outcome is then discarded.
        """
        self._generation += 1
        self._state = SessionState(
            method=self._state.method,
            call_state=CallState.CALLING if self._in_flight else CallState.READY,
        )
        self.debug_logger.log_session_operation("reset", self.session_id, True)
        return self._state

    def copy_to_clipboard(self, clipboard: ClipboardInterface) -> bool:
        """Write the document to the clipboard; nothing is written when empty."""
        if not self._state.document:
            return False
        return clipboard.write(self._state.document)

    # Request settings

    def set_method(self, method: Union[str, HttpMethod]) -> SessionState:
        self._ensure_unlocked("change the HTTP method")
        return self._transition(method=coerce_method(method))

    def set_url(self, url: str) -> SessionState:
        self._ensure_unlocked("change the URL")
        return self._transition(url=url or "")

    def load_api_example(self) -> SessionState:
        """Set the URL to the example endpoint of the current method."""
        self._ensure_unlocked("load an example URL")
        example = self.catalog.example_for(self._state.method)
        return self._transition(url=example.url)

    # Calling

    def check_call(self) -> None:
        """
        Raise if a call cannot start now.

        Raises:
            CallInProgressException: If a call is already in flight
            InvalidRequestException: If the URL is blank or a POST/PUT
                document is not valid
        """
        state = self._state
        if self._in_flight or state.call_state == CallState.CALLING:
            raise CallInProgressException(
                "CALL_IN_PROGRESS",
                "A call is already in progress for this session",
                {"session_id": self.session_id}
            )
        if not state.url.strip():
            raise InvalidRequestException("MISSING_URL", "API URL is required")
        if state.method != HttpMethod.GET and not state.validation.is_valid:
            raise InvalidRequestException(
                "MISSING_BODY",
                f"A valid JSON document is required for {state.method.value} requests",
                {"method": state.method.value}
            )

    def can_call(self) -> bool:
        try:
            self.check_call()
        except JSONFormException:
            return False
        return True

    async def call_api(self) -> bool:
        """
        Build the request from the current state and dispatch it.

        Ignored while another call is in flight or when the request is not
        allowed. Every failure is recorded as the session's call error.

        Returns:
            True if a request was dispatched
        """
        if not self.can_call():
            self.logger.debug(f"Call ignored for session {self.session_id} in state {self._state.call_state.value}")
            return False

        generation = self._generation
        self._in_flight = True
        state = self._transition(call_state=CallState.CALLING, response=None, call_error=None)
        start_time = time.time()

        try:
            value = state.validation.value if state.validation.is_valid else ABSENT
            spec = build_request(state.method, state.url, value)
            self.debug_logger.log_request_details(spec.method.value, spec.url, spec.body, self.session_id)
            record = await self.transport.send_request(spec)
        except asyncio.CancelledError:
            self._complete_call(generation, {"call_state": CallState.FAILED, "call_error": "Request cancelled"})
            raise
        except JSONFormException as e:
            self.logger.warning(f"Call failed for session {self.session_id}: {e.message}")
            outcome = {"call_state": CallState.FAILED, "call_error": e.message}
        except Exception as e:
            log_error_with_context(self.logger, e, {"session_id": self.session_id, "url": state.url}, "call_api")
            outcome = {"call_state": CallState.FAILED, "call_error": str(e) or type(e).__name__}
        else:
            outcome = {"call_state": CallState.SUCCEEDED, "response": record}

        if not self._complete_call(generation, outcome):
            return True

        log_performance_metrics(
            self.logger, "call_api", time.time() - start_time,
            session_id=self.session_id,
            method=state.method.value,
            call_state=outcome["call_state"].value,
        )
        return True

    def _complete_call(self, generation: int, outcome: Dict[str, Any]) -> bool:
        """Release the in-flight call and apply its outcome unless a reset superseded it."""
        self._in_flight = False
        if generation != self._generation:
            self.logger.info(f"Discarding call outcome for session {self.session_id}: session was reset")
            self._transition(call_state=CallState.READY)
            return False

        self._transition(**outcome)
        return True

    # Read model

    def snapshot(self) -> SessionSnapshot:
        """Everything a display needs, derived from the current state."""
        state = self._state
        validation = state.validation

        preview = pretty_json(validation.value) if validation.is_valid else None
        response_tokens = (
            self.highlighter.highlight(pretty_json(state.response.payload))
            if state.response is not None else []
        )

        return SessionSnapshot(
            session_id=self.session_id,
            document=state.document,
            validity=validation.state,
            diagnostic=validation.diagnostic,
            parsed=validation.value if validation.is_valid else None,
            preview=preview,
            document_tokens=self.highlighter.highlight(state.document),
            preview_tokens=self.highlighter.highlight(preview) if preview is not None else [],
            stats=compute_stats(state.document, validation),
            method=state.method,
            url=state.url,
            template_id=state.template_id,
            template_locked=state.template_locked,
            call_state=state.call_state,
            can_call=self.can_call(),
            can_format=validation.state == ValidityState.VALID,
            response=state.response,
            response_tokens=response_tokens,
            call_error=state.call_error,
            created_at=self.created_at,
            updated_at=state.updated_at,
        )
