"""
FastAPI route handlers for the JSON Form Builder REST API.
"""

import logging
from contextlib import asynccontextmanager

from .. import __version__
from ..models.core import Template, ApiExample
from ..models.session import SessionSnapshot
from .models import (
    DocumentRequest, TextRequest, TemplateRequest, RequestSettings,
    ValidateResponse, HighlightResponse, TemplateListResponse, CallResponse,
    CopyResponse, SessionListResponse, HealthResponse, ServerInfoResponse
)
from .server import get_server


async def health_check():
    """Health check endpoint."""
    server = await get_server()
    health_data = await server.health_check()
    return HealthResponse(**health_data)


async def server_info():
    """Get server information."""
    server = await get_server()
    return ServerInfoResponse(**server.get_server_info())


async def list_templates():
    """List the template catalog grouped by label."""
    server = await get_server()
    return TemplateListResponse(total=len(server.catalog), groups=server.catalog.grouped())


async def get_template(template_id: str) -> Template:
    server = await get_server()
    return server.get_template(template_id)


async def get_example(method: str) -> ApiExample:
    server = await get_server()
    return server.get_example(method)


async def validate_document(request: TextRequest):
    """Validate a JSON text without creating a session."""
    server = await get_server()
    return ValidateResponse(**server.validate_text(request.text))


async def highlight_document(request: TextRequest):
    """Tag the spans of a JSON text without creating a session."""
    server = await get_server()
    return HighlightResponse(**server.highlight_text(request.text))


async def create_session() -> SessionSnapshot:
    server = await get_server()
    return server.create_session()


async def list_sessions():
    """List active sessions with metadata."""
    server = await get_server()
    return SessionListResponse(**server.list_sessions())


async def get_session(session_id: str) -> SessionSnapshot:
    server = await get_server()
    return server.get_snapshot(session_id)


async def delete_session(session_id: str):
    """Delete a specific session."""
    server = await get_server()
    return server.delete_session(session_id)


async def edit_document(session_id: str, request: DocumentRequest) -> SessionSnapshot:
    server = await get_server()
    return server.edit_document(session_id, request.document)


async def format_document(session_id: str) -> SessionSnapshot:
    server = await get_server()
    return server.format_document(session_id)


async def load_template(session_id: str, request: TemplateRequest) -> SessionSnapshot:
    server = await get_server()
    return server.load_template(session_id, request.template_id)


async def update_request(session_id: str, request: RequestSettings) -> SessionSnapshot:
    server = await get_server()
    return server.update_request(session_id, method=request.method, url=request.url)


async def load_example(session_id: str) -> SessionSnapshot:
    server = await get_server()
    return server.load_example(session_id)


async def reset_session(session_id: str) -> SessionSnapshot:
    server = await get_server()
    return server.reset_session(session_id)


async def call_api(session_id: str):
    """Send the session's request to its endpoint."""
    server = await get_server()
    result = await server.call_api(session_id)
    return CallResponse(**result)


async def copy_document(session_id: str):
    server = await get_server()
    return CopyResponse(**server.copy_document(session_id))


async def root():
    """Root endpoint with API information."""
    return {
        "name": "JSON Form Builder API",
        "version": __version__,
        "description": "Validate, highlight and send JSON documents to HTTP APIs",
        "features": [
            "Live JSON validation with parser diagnostics",
            "Syntax highlighting spans for documents and responses",
            "GET query flattening and POST/PUT JSON bodies",
            "Built-in request templates",
            "Session-based workflow with automatic cleanup"
        ],
        "endpoints": {
            "GET /templates": "Grouped template catalog",
            "GET /examples/{method}": "Example endpoint for a method",
            "POST /validate": "Validate a JSON text",
            "POST /highlight": "Highlight a JSON text",
            "POST /sessions": "Create a session",
            "GET /sessions/{id}": "Session snapshot",
            "PUT /sessions/{id}/document": "Replace the document",
            "POST /sessions/{id}/format": "Pretty-print the document",
            "POST /sessions/{id}/template": "Load a template",
            "PUT /sessions/{id}/request": "Change method and URL",
            "POST /sessions/{id}/example": "Load the example URL",
            "POST /sessions/{id}/reset": "Reset the session",
            "POST /sessions/{id}/call": "Send the request",
            "POST /sessions/{id}/copy": "Copy the document",
            "GET /health": "Health check with component status",
            "GET /info": "Server information and configuration"
        },
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc"
        }
    }


async def startup_event():
    """Initialize server on startup."""
    try:
        await get_server()
        logging.info("JSON Form Builder REST API server started successfully")
    except Exception as e:
        logging.error(f"Failed to start server: {e}")
        raise


@asynccontextmanager
async def lifespan(app):
    """Create the server on startup and stop its cleanup thread on shutdown."""
    await startup_event()
    yield
    server = await get_server()
    server.stop()
