"""Template catalog: example documents with the requests they belong to."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml
from pydantic import ValidationError

from ..config.models import TemplatesConfig
from ..models.core import ApiExample, HttpMethod, Template, TemplateGroup
from ..models.errors import TemplateNotFoundException
from ..config.loader import ConfigurationError

BUILTIN_TEMPLATES: List[Dict[str, Any]] = [
    {
        "id": "user-basic",
        "name": "Basic User Profile",
        "group": "User Data",
        "method": "POST",
        "url": "https://jsonplaceholder.typicode.com/users",
        "data": {
            "id": 1,
            "name": "John Doe",
            "email": "john.doe@example.com",
            "age": 30,
            "isActive": True,
        },
    },
    {
        "id": "user-detailed",
        "name": "Detailed User Profile",
        "group": "User Data",
        "method": "PUT",
        "url": "https://jsonplaceholder.typicode.com/users/1",
        "data": {
            "id": 1,
            "name": "John Doe",
            "email": "john.doe@example.com",
            "age": 30,
            "isActive": True,
            "preferences": {
                "theme": "dark",
                "notifications": True,
            },
            "tags": ["developer", "javascript", "react"],
        },
    },
    {
        "id": "product-simple",
        "name": "Simple Product",
        "group": "E-commerce",
        "method": "POST",
        "url": "https://jsonplaceholder.typicode.com/posts",
        "data": {
            "id": "prod-123",
            "title": "Wireless Headphones",
            "price": 199.99,
            "inStock": True,
        },
    },
    {
        "id": "product-detailed",
        "name": "Product Catalog",
        "group": "E-commerce",
        "method": "PUT",
        "url": "https://jsonplaceholder.typicode.com/posts/1",
        "data": {
            "id": "prod-123",
            "title": "Wireless Headphones",
            "description": "High-quality wireless headphones with noise cancellation",
            "price": 199.99,
            "inStock": True,
            "categories": ["electronics", "audio"],
            "specifications": {
                "battery": "30 hours",
                "connectivity": "Bluetooth 5.0",
                "weight": "250g",
            },
        },
    },
    {
        "id": "api-success",
        "name": "Success Response",
        "group": "API Responses",
        "method": "GET",
        "url": "https://jsonplaceholder.typicode.com/posts",
        "data": {
            "status": "success",
            "data": {
                "users": [
                    {"id": 1, "username": "alice", "role": "admin"},
                    {"id": 2, "username": "bob", "role": "user"},
                ],
                "pagination": {"page": 1, "limit": 10, "total": 25},
            },
            "timestamp": "2024-01-15T10:30:00Z",
        },
    },
    {
        "id": "api-error",
        "name": "Error Response",
        "group": "API Responses",
        "method": "GET",
        "url": "https://jsonplaceholder.typicode.com/posts/999",
        "data": {
            "status": "error",
            "error": {
                "code": 404,
                "message": "Resource not found",
                "details": "The requested post does not exist",
            },
            "timestamp": "2024-01-15T10:30:00Z",
        },
    },
]

API_EXAMPLES: Dict[HttpMethod, ApiExample] = {
    HttpMethod.GET: ApiExample(
        method=HttpMethod.GET,
        url="https://jsonplaceholder.typicode.com/posts/1",
        description="Fetch a single post (JSON will be sent as query params)",
    ),
    HttpMethod.POST: ApiExample(
        method=HttpMethod.POST,
        url="https://jsonplaceholder.typicode.com/posts",
        description="Create a new post (JSON will be sent in request body)",
    ),
    HttpMethod.PUT: ApiExample(
        method=HttpMethod.PUT,
        url="https://jsonplaceholder.typicode.com/posts/1",
        description="Update an existing post (JSON will be sent in request body)",
    ),
}


class TemplateCatalog:
    """Ordered, id-addressable collection of templates."""

    def __init__(self, templates: Optional[Iterable[Template]] = None):
        self.logger = logging.getLogger(__name__)
        self._templates: Dict[str, Template] = {}
        for template in templates or []:
            self.add(template)

    @classmethod
    def from_config(cls, config: Optional[TemplatesConfig] = None) -> "TemplateCatalog":
        """Build the catalog from the built-in set and an optional YAML file.

        Raises:
            ConfigurationError: If the templates file is unreadable or invalid
        """
        config = config or TemplatesConfig()
        catalog = cls()

        if config.include_builtin:
            for entry in BUILTIN_TEMPLATES:
                catalog.add(Template(**entry))

        if config.templates_file:
            for template in load_templates_file(config.templates_file):
                catalog.add(template)

        catalog.logger.info(f"Template catalog loaded with {len(catalog)} templates")
        return catalog

    def add(self, template: Template) -> None:
        if template.id in self._templates:
            raise ConfigurationError(f"Duplicate template id: {template.id}")
        self._templates[template.id] = template

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._templates

    def list_templates(self) -> List[Template]:
        return list(self._templates.values())

    def get(self, template_id: str) -> Template:
        """Look up a template by id.

        Raises:
            TemplateNotFoundException: If no template has this id
        """
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundException(
                "TEMPLATE_NOT_FOUND",
                f"Template not found: {template_id}",
                {"template_id": template_id}
            )
        return template

    def grouped(self) -> List[TemplateGroup]:
        """Templates grouped by label, groups in first-appearance order."""
        groups: Dict[str, List[Template]] = {}
        for template in self._templates.values():
            groups.setdefault(template.group, []).append(template)
        return [TemplateGroup(group=group, templates=items) for group, items in groups.items()]

    def example_for(self, method: HttpMethod) -> ApiExample:
        return API_EXAMPLES[method]


def load_templates_file(path: str) -> List[Template]:
    """Read templates from a YAML file holding a ``templates`` list.

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    templates_path = Path(path)
    if not templates_path.exists():
        raise ConfigurationError(f"Templates file not found: {path}")

    try:
        with open(templates_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {str(e)}")

    entries = data.get("templates", []) if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ConfigurationError(f"{path} must contain a 'templates' list")

    templates = []
    for index, entry in enumerate(entries):
        try:
            templates.append(Template(**entry))
        except (ValidationError, TypeError) as e:
            raise ConfigurationError(f"Invalid template #{index} in {path}: {e}")
    return templates
