"""
JSONFormServer class wiring the form builder services behind the REST API.
"""

import logging
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from fastapi import HTTPException

from .. import __version__
from ..config.loader import ConfigLoader
from ..config.models import ServerConfig
from ..models.core import HttpMethod
from ..models.errors import JSONFormException
from ..models.session import SessionSnapshot
from ..services.clipboard import MemoryClipboard
from ..services.highlighter import Highlighter
from ..services.request_builder import coerce_method
from ..services.session_controller import SessionController
from ..services.session_manager import SessionManager
from ..services.stats import compute_stats
from ..services.templates import TemplateCatalog
from ..services.transport import AiohttpTransport, TransportInterface
from ..services.validator import pretty_json, validate
from ..utils.error_handler import default_error_handler


class JSONFormServer:
    """REST API server wrapping the JSON Form Builder session machinery."""

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        config_path: Optional[str] = None,
        transport: Optional[TransportInterface] = None,
        start_cleanup: bool = True,
    ):
        """
        Initialize the server.

        Args:
            config: Ready configuration; loaded from config_path when omitted
            config_path: YAML configuration file
            transport: Outbound transport; an AiohttpTransport when omitted
            start_cleanup: Start the expired-session sweeper thread
        """
        self.logger = logging.getLogger(__name__)
        self.start_time = time.time()
        self._stop_cleanup = threading.Event()

        self.config = config if config is not None else self._load_config(config_path)
        self._initialize_components(transport)

        if start_cleanup:
            self._start_cleanup_task()

    def _load_config(self, config_path: Optional[str] = None) -> ServerConfig:
        """Load configuration, looking for config.yaml in the project root by default."""
        if config_path is None:
            project_root = Path(__file__).parent.parent.parent
            config_file = project_root / "config.yaml"
            env_file = project_root / ".env"

            if not config_file.exists():
                config_file = Path("config.yaml")
            if not env_file.exists():
                env_file = Path(".env")
        else:
            config_file = Path(config_path)
            env_file = config_file.parent / ".env"

        config_loader = ConfigLoader(config_file=str(config_file), env_file=str(env_file))
        config = config_loader.load_config()
        if config_file.exists():
            self.logger.info(f"Configuration loaded from {config_file}")
        else:
            self.logger.warning(f"Configuration file {config_file} not found, using defaults")
        return config

    def _initialize_components(self, transport: Optional[TransportInterface] = None):
        """Initialize catalog, transport and session manager."""
        try:
            self.catalog = TemplateCatalog.from_config(self.config.templates_config)
            self.transport = transport or AiohttpTransport(self.config.transport_config)
            self.highlighter = Highlighter()
            self.default_method = coerce_method(self.config.default_method)

            self.session_manager = SessionManager(
                controller_factory=self._create_controller,
                session_ttl=self.config.session_ttl,
                cleanup_interval=self.config.cleanup_interval
            )

            self.logger.info("JSON Form Builder components initialized successfully")
            self.logger.info(f"Loaded {len(self.catalog)} templates")

        except Exception as e:
            self.logger.error(f"Failed to initialize components: {e}")
            raise

    def _create_controller(self, session_id: str) -> SessionController:
        return SessionController(
            catalog=self.catalog,
            transport=self.transport,
            default_method=self.default_method,
            highlighter=self.highlighter,
            session_id=session_id
        )

    def _start_cleanup_task(self):
        """Start background thread for session cleanup."""
        def cleanup_sessions():
            while not self._stop_cleanup.wait(self.config.cleanup_interval):
                try:
                    self.session_manager.cleanup_expired_sessions()
                except Exception as e:
                    self.logger.error(f"Error in session cleanup: {e}")

        cleanup_thread = threading.Thread(target=cleanup_sessions, daemon=True)
        cleanup_thread.start()

    def stop(self):
        """Stop the cleanup thread."""
        self._stop_cleanup.set()

    def _raise_http(self, error: Exception) -> None:
        """Translate a service exception into an HTTPException."""
        status_code = default_error_handler.status_code_for(error)
        error_response = default_error_handler.categorize_error(error)
        if status_code >= 500:
            self.logger.error(f"Request failed: {error}")
        else:
            self.logger.warning(f"Request rejected: {error}")
        raise HTTPException(
            status_code=status_code,
            detail=error_response.model_dump(mode="json", exclude_none=True)
        ) from error

    def _check_document_size(self, text: str) -> None:
        size = len(text.encode("utf-8"))
        if size > self.config.max_document_size:
            raise HTTPException(
                status_code=413,
                detail=f"Document size ({size} bytes) exceeds maximum allowed size "
                       f"({self.config.max_document_size} bytes)"
            )

    def _session(self, session_id: str) -> SessionController:
        try:
            return self.session_manager.get_session(session_id)
        except JSONFormException as e:
            self._raise_http(e)

    # Health and info

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check."""
        try:
            session_health = self.session_manager.health_check()
            return {
                "status": "healthy" if session_health.get("status") == "healthy" else "unhealthy",
                "version": __version__,
                "uptime": time.time() - self.start_time,
                "active_sessions": session_health["active_sessions"],
                "components": {
                    "session_manager": session_health,
                    "template_catalog": {"status": "healthy", "templates": len(self.catalog)},
                    "transport": {"status": "healthy", "type": type(self.transport).__name__}
                }
            }

        except Exception as e:
            self.logger.error(f"Health check failed: {e}")
            return {
                "status": "unhealthy",
                "version": __version__,
                "uptime": time.time() - self.start_time,
                "active_sessions": 0,
                "components": {"error": str(e)}
            }

    def get_server_info(self) -> Dict[str, Any]:
        """Get server information."""
        return {
            "name": "json-form-builder",
            "version": __version__,
            "description": "Validate, highlight and send JSON documents to HTTP APIs",
            "config": {
                "default_method": self.config.default_method,
                "max_document_size": self.config.max_document_size,
                "session_ttl": self.config.session_ttl,
                "transport_timeout": self.config.transport_config.timeout,
                "retry_attempts": self.config.transport_config.retry_attempts,
                "templates": len(self.catalog),
                "log_level": self.config.log_level
            },
            "examples": [self.catalog.example_for(method) for method in HttpMethod]
        }

    # Catalog

    def get_template(self, template_id: str):
        try:
            return self.catalog.get(template_id)
        except JSONFormException as e:
            self._raise_http(e)

    def get_example(self, method: str):
        try:
            return self.catalog.example_for(coerce_method(method))
        except JSONFormException as e:
            self._raise_http(e)

    # Stateless helpers

    def validate_text(self, text: str) -> Dict[str, Any]:
        """Validate text without touching any session."""
        self._check_document_size(text)
        result = validate(text)
        return {
            "validity": result.state,
            "diagnostic": result.diagnostic,
            "parsed": result.value if result.is_valid else None,
            "formatted": pretty_json(result.value) if result.is_valid else None,
            "stats": compute_stats(text, result) if result.is_valid else None
        }

    def highlight_text(self, text: str) -> Dict[str, Any]:
        self._check_document_size(text)
        return {"tokens": self.highlighter.highlight(text)}

    # Sessions

    def create_session(self) -> SessionSnapshot:
        controller = self.session_manager.create_session()
        return controller.snapshot()

    def list_sessions(self) -> Dict[str, Any]:
        """Summaries of all active sessions."""
        sessions_info = {}
        for session_id in self.session_manager.list_active_sessions():
            controller = self.session_manager.peek(session_id)
            if controller is None:
                continue
            state = controller.state
            sessions_info[session_id] = {
                "created_at": controller.created_at.isoformat(),
                "validity": state.validation.state.value,
                "method": state.method.value,
                "url": state.url,
                "call_state": state.call_state.value,
                "ttl": self.session_manager.get_ttl(session_id)
            }

        return {
            "active_sessions": len(sessions_info),
            "sessions": sessions_info
        }

    def get_snapshot(self, session_id: str) -> SessionSnapshot:
        return self._session(session_id).snapshot()

    def delete_session(self, session_id: str) -> Dict[str, Any]:
        if not self.session_manager.delete_session(session_id):
            raise HTTPException(status_code=404, detail="Session not found")
        return {"message": f"Session {session_id} deleted successfully"}

    def edit_document(self, session_id: str, document: str) -> SessionSnapshot:
        self._check_document_size(document)
        controller = self._session(session_id)
        controller.edit(document)
        return controller.snapshot()

    def format_document(self, session_id: str) -> SessionSnapshot:
        controller = self._session(session_id)
        try:
            controller.format()
        except JSONFormException as e:
            self._raise_http(e)
        return controller.snapshot()

    def load_template(self, session_id: str, template_id: str) -> SessionSnapshot:
        controller = self._session(session_id)
        try:
            controller.load_template(template_id)
        except JSONFormException as e:
            self._raise_http(e)
        return controller.snapshot()

    def update_request(
        self,
        session_id: str,
        method: Optional[Union[str, HttpMethod]] = None,
        url: Optional[str] = None,
    ) -> SessionSnapshot:
        """Change method and/or URL; rejected while a template is loaded."""
        controller = self._session(session_id)
        try:
            if method is not None:
                controller.set_method(method)
            if url is not None:
                controller.set_url(url)
        except JSONFormException as e:
            self._raise_http(e)
        return controller.snapshot()

    def load_example(self, session_id: str) -> SessionSnapshot:
        controller = self._session(session_id)
        try:
            controller.load_api_example()
        except JSONFormException as e:
            self._raise_http(e)
        return controller.snapshot()

    def reset_session(self, session_id: str) -> SessionSnapshot:
        controller = self._session(session_id)
        controller.reset()
        return controller.snapshot()

    async def call_api(self, session_id: str) -> Dict[str, Any]:
        """Dispatch the session's request and wait for the outcome."""
        controller = self._session(session_id)
        try:
            controller.check_call()
        except JSONFormException as e:
            self._raise_http(e)

        dispatched = await controller.call_api()
        return {
            "dispatched": dispatched,
            "session": controller.snapshot()
        }

    def copy_document(self, session_id: str) -> Dict[str, Any]:
        controller = self._session(session_id)
        clipboard = MemoryClipboard()
        copied = controller.copy_to_clipboard(clipboard)
        return {"copied": copied, "text": clipboard.content}


# Global server instance
_json_form_server: Optional[JSONFormServer] = None


def set_server(server: Optional[JSONFormServer]) -> None:
    """Install the server instance used by the route handlers."""
    global _json_form_server
    _json_form_server = server


async def get_server() -> JSONFormServer:
    """Get or create the server instance."""
    global _json_form_server
    if _json_form_server is None:
        _json_form_server = JSONFormServer()
    return _json_form_server
