"""Derives an outbound request from a parsed document and a method."""

import math
import re
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import urlencode

from ..models.core import HttpMethod, RequestSpec
from ..models.errors import InvalidRequestException
from .validator import canonical_json


class _Absent:
    """Marker for a document that did not parse; distinct from JSON null."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()

JSON_CONTENT_TYPE = "application/json"

_BODY_METHODS = {HttpMethod.POST, HttpMethod.PUT}


def coerce_method(method: Union[str, HttpMethod]) -> HttpMethod:
    """Normalise a method name, rejecting anything but GET, POST and PUT."""
    if isinstance(method, HttpMethod):
        return method
    try:
        return HttpMethod(str(method).strip().upper())
    except ValueError:
        raise InvalidRequestException(
            "UNSUPPORTED_METHOD",
            f"Unsupported HTTP method: {method}. Supported methods: GET, POST, PUT",
            {"method": str(method)}
        )


def _format_number(value: float) -> str:
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    # 1e-07 -> 1e-7
    return re.sub(r'e([+-])0*(\d)', r'e\1\2', text)


def stringify_value(value: Any) -> str:
    """
    String form of a JSON value as a query parameter.

    Follows JavaScript ``String()`` coercion: arrays become their elements
    joined by commas (nested arrays flattened, null elements empty) and
    objects inside arrays become ``[object Object]``.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ",".join("" if item is None else stringify_value(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def flatten_query_params(value: Any) -> List[Tuple[str, str]]:
    """
    Project a JSON value into dotted query parameters.

    Mappings are walked in insertion order; nested mappings recurse with
    ``parent.child`` paths and every other value becomes one parameter.
    A top-level array is expanded by index; a top-level scalar yields no
    parameters.

    Args:
        value: Parsed JSON value

    Returns:
        Ordered (name, value) pairs
    """
    params: List[Tuple[str, str]] = []

    def _walk(node: Dict[str, Any], prefix: str) -> None:
        for key, child in node.items():
            path = f"{prefix}.{key}" if prefix else key
            if isinstance(child, dict):
                _walk(child, path)
            else:
                params.append((path, stringify_value(child)))

    if isinstance(value, dict):
        _walk(value, "")
    elif isinstance(value, list):
        _walk({str(index): item for index, item in enumerate(value)}, "")

    return params


def append_query(base_url: str, params: List[Tuple[str, str]]) -> str:
    """Append form-encoded parameters, joining with & when a query exists."""
    if not params:
        return base_url
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode(params)}"


def build_request(
    method: Union[str, HttpMethod],
    base_url: Optional[str],
    value: Any = ABSENT,
    extra_headers: Optional[Dict[str, str]] = None,
) -> RequestSpec:
    """
    Build the concrete request for a document.

    Args:
        method: GET, POST or PUT
        base_url: Endpoint as entered by the user
        value: Parsed document, or ABSENT when the document did not parse
        extra_headers: Headers added before the JSON headers

    Returns:
        RequestSpec ready for the transport

    Raises:
        InvalidRequestException: If the URL is blank, the method is not
            supported, or a POST/PUT has no parsed document
    """
    http_method = coerce_method(method)

    if base_url is None or not base_url.strip():
        raise InvalidRequestException(
            "MISSING_URL",
            "API URL is required",
            {"method": http_method.value}
        )
    url = base_url.strip()

    headers: Dict[str, str] = dict(extra_headers or {})
    headers["Accept"] = JSON_CONTENT_TYPE

    if http_method in _BODY_METHODS:
        if value is ABSENT:
            raise InvalidRequestException(
                "MISSING_BODY",
                f"A valid JSON document is required for {http_method.value} requests",
                {"method": http_method.value}
            )
        headers["Content-Type"] = JSON_CONTENT_TYPE
        return RequestSpec(
            method=http_method,
            base_url=url,
            url=url,
            headers=headers,
            body=canonical_json(value),
        )

    params = flatten_query_params(value) if value is not ABSENT else []
    return RequestSpec(
        method=http_method,
        base_url=url,
        url=append_query(url, params),
        headers=headers,
        body=None,
    )
