"""REST API for the JSON Form Builder."""

from .app import create_app
from .server import JSONFormServer, get_server, set_server

__all__ = ["create_app", "JSONFormServer", "get_server", "set_server"]
