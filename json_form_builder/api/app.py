"""
FastAPI application factory and configuration.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..models.core import Template, ApiExample
from ..models.session import SessionSnapshot
from .models import (
    ValidateResponse, HighlightResponse, TemplateListResponse, CallResponse,
    CopyResponse, SessionListResponse, HealthResponse, ServerInfoResponse
)
from .server import JSONFormServer, set_server
from . import routes


def create_app(server: Optional[JSONFormServer] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        server: Server instance to serve; created lazily on startup when omitted
    """
    if server is not None:
        set_server(server)
        cors_origins = server.config.api_config.cors_origins
    else:
        cors_origins = ["*"]

    app = FastAPI(
        title="JSON Form Builder API",
        description="Validate, highlight and send JSON documents to HTTP APIs",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=routes.lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_api_route("/", routes.root, methods=["GET"])
    app.add_api_route("/health", routes.health_check, methods=["GET"], response_model=HealthResponse)
    app.add_api_route("/info", routes.server_info, methods=["GET"], response_model=ServerInfoResponse)

    app.add_api_route("/templates", routes.list_templates, methods=["GET"], response_model=TemplateListResponse)
    app.add_api_route("/templates/{template_id}", routes.get_template, methods=["GET"], response_model=Template)
    app.add_api_route("/examples/{method}", routes.get_example, methods=["GET"], response_model=ApiExample)

    app.add_api_route("/validate", routes.validate_document, methods=["POST"], response_model=ValidateResponse)
    app.add_api_route("/highlight", routes.highlight_document, methods=["POST"], response_model=HighlightResponse)

    app.add_api_route("/sessions", routes.create_session, methods=["POST"],
                      response_model=SessionSnapshot, status_code=201)
    app.add_api_route("/sessions", routes.list_sessions, methods=["GET"], response_model=SessionListResponse)
    app.add_api_route("/sessions/{session_id}", routes.get_session, methods=["GET"], response_model=SessionSnapshot)
    app.add_api_route("/sessions/{session_id}", routes.delete_session, methods=["DELETE"])
    app.add_api_route("/sessions/{session_id}/document", routes.edit_document, methods=["PUT"],
                      response_model=SessionSnapshot)
    app.add_api_route("/sessions/{session_id}/format", routes.format_document, methods=["POST"],
                      response_model=SessionSnapshot)
    app.add_api_route("/sessions/{session_id}/template", routes.load_template, methods=["POST"],
                      response_model=SessionSnapshot)
    app.add_api_route("/sessions/{session_id}/request", routes.update_request, methods=["PUT"],
                      response_model=SessionSnapshot)
    app.add_api_route("/sessions/{session_id}/example", routes.load_example, methods=["POST"],
                      response_model=SessionSnapshot)
    app.add_api_route("/sessions/{session_id}/reset", routes.reset_session, methods=["POST"],
                      response_model=SessionSnapshot)
    app.add_api_route("/sessions/{session_id}/call", routes.call_api, methods=["POST"], response_model=CallResponse)
    app.add_api_route("/sessions/{session_id}/copy", routes.copy_document, methods=["POST"],
                      response_model=CopyResponse)

    return app
