"""Tests for the template catalog."""

import pytest

from json_form_builder.config.loader import ConfigurationError
from json_form_builder.config.models import TemplatesConfig
from json_form_builder.models.core import HttpMethod, Template
from json_form_builder.models.errors import TemplateNotFoundException
from json_form_builder.services.templates import BUILTIN_TEMPLATES, TemplateCatalog, load_templates_file

EXTRA_TEMPLATES = """
templates:
  - id: order-create
    name: New Order
    group: Orders
    method: POST
    url: https://shop.example.test/orders
    data:
      sku: ABC-1
      quantity: 2
"""


def test_builtin_catalog(catalog):
    assert len(catalog) == len(BUILTIN_TEMPLATES) == 6
    assert [template.id for template in catalog.list_templates()] == [
        "user-basic", "user-detailed", "product-simple", "product-detailed", "api-success", "api-error"
    ]


def test_groups_keep_first_appearance_order(catalog):
    groups = catalog.grouped()
    assert [group.group for group in groups] == ["User Data", "E-commerce", "API Responses"]
    assert [template.id for template in groups[0].templates] == ["user-basic", "user-detailed"]


def test_get_returns_template(catalog):
    template = catalog.get("user-detailed")
    assert template.method == HttpMethod.PUT
    assert template.url == "https://jsonplaceholder.typicode.com/users/1"
    assert template.data["tags"] == ["developer", "javascript", "react"]


def test_unknown_template_raises(catalog):
    with pytest.raises(TemplateNotFoundException) as exc_info:
        catalog.get("nope")
    assert exc_info.value.error_code == "TEMPLATE_NOT_FOUND"
    assert "nope" not in catalog


@pytest.mark.parametrize("method, url", [
    (HttpMethod.GET, "https://jsonplaceholder.typicode.com/posts/1"),
    (HttpMethod.POST, "https://jsonplaceholder.typicode.com/posts"),
    (HttpMethod.PUT, "https://jsonplaceholder.typicode.com/posts/1"),
])
def test_example_per_method(catalog, method, url):
    example = catalog.example_for(method)
    assert example.method == method
    assert example.url == url


def test_duplicate_ids_are_rejected():
    catalog = TemplateCatalog.from_config()
    with pytest.raises(ConfigurationError):
        catalog.add(Template(**BUILTIN_TEMPLATES[0]))


def test_extra_templates_from_yaml(tmp_path):
    templates_file = tmp_path / "templates.yaml"
    templates_file.write_text(EXTRA_TEMPLATES)

    catalog = TemplateCatalog.from_config(TemplatesConfig(templates_file=str(templates_file)))

    assert len(catalog) == 7
    order = catalog.get("order-create")
    assert order.data == {"sku": "ABC-1", "quantity": 2}
    assert catalog.grouped()[-1].group == "Orders"


def test_builtins_can_be_excluded(tmp_path):
    templates_file = tmp_path / "templates.yaml"
    templates_file.write_text(EXTRA_TEMPLATES)

    catalog = TemplateCatalog.from_config(
        TemplatesConfig(include_builtin=False, templates_file=str(templates_file))
    )

    assert [template.id for template in catalog.list_templates()] == ["order-create"]


def test_missing_templates_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_templates_file(str(tmp_path / "absent.yaml"))


@pytest.mark.parametrize("content", [
    "templates: {}",
    "templates:\n  - id: x\n",
    "templates: [\n",
])
def test_malformed_templates_file(tmp_path, content):
    templates_file = tmp_path / "templates.yaml"
    templates_file.write_text(content)
    with pytest.raises(ConfigurationError):
        load_templates_file(str(templates_file))
