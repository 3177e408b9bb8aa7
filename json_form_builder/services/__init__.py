"""Services for validating, highlighting and dispatching JSON documents."""

from .validator import validate, canonical_json, pretty_json
from .highlighter import Highlighter, Matcher, highlight
from .stats import compute_stats, count_keys
from .request_builder import (
    ABSENT, build_request, flatten_query_params, stringify_value, append_query, coerce_method
)
from .transport import TransportInterface, AiohttpTransport
from .templates import TemplateCatalog, BUILTIN_TEMPLATES, API_EXAMPLES, load_templates_file
from .clipboard import ClipboardInterface, MemoryClipboard
from .session_controller import SessionController
from .session_manager import SessionManager

__all__ = [
    "validate",
    "canonical_json",
    "pretty_json",
    "Highlighter",
    "Matcher",
    "highlight",
    "compute_stats",
    "count_keys",
    "ABSENT",
    "build_request",
    "flatten_query_params",
    "stringify_value",
    "append_query",
    "coerce_method",
    "TransportInterface",
    "AiohttpTransport",
    "TemplateCatalog",
    "BUILTIN_TEMPLATES",
    "API_EXAMPLES",
    "load_templates_file",
    "ClipboardInterface",
    "MemoryClipboard",
    "SessionController",
    "SessionManager",
]
