#!/usr/bin/env python3
"""
Demonstration script for a JSON Form Builder session.

This script shows how to:
1. Validate and highlight a document as it is typed
2. Load a template and see the method/URL lock
3. Preview the request a GET or POST would send
4. Optionally dispatch the request (pass --send)
"""

import asyncio
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from json_form_builder.models.errors import InvalidRequestException
from json_form_builder.services import (
    AiohttpTransport,
    Highlighter,
    SessionController,
    TemplateCatalog,
    build_request,
)


def demo_live_validation(controller: SessionController):
    """Show validity and stats while the document is being typed."""
    print("=== Live Validation ===")

    for text in ['{"name": "Ann"', '{"name": "Ann", "tags": ["a", "b"]}', ""]:
        controller.edit(text)
        snapshot = controller.snapshot()
        print(f"  {text!r:45} -> {snapshot.validity.value}")
        if snapshot.diagnostic:
            print(f"    diagnostic: {snapshot.diagnostic}")
        if snapshot.stats:
            print(f"    lines={snapshot.stats.line_count} chars={snapshot.stats.char_count} "
                  f"keys={snapshot.stats.key_count}")


def demo_highlighting():
    """Print the tagged runs of a small document."""
    print("\n=== Highlighting ===")

    for chunk, category in Highlighter().segments('{"id": 7, "ok": true, "note": null}'):
        label = category.value if category else "-"
        print(f"  {label:13} {chunk!r}")


def demo_templates(controller: SessionController, catalog: TemplateCatalog):
    """Load a template and show that method and URL are locked."""
    print("\n=== Templates ===")

    for group in catalog.grouped():
        print(f"  {group.group}: {', '.join(template.id for template in group.templates)}")

    controller.load_template("user-basic")
    state = controller.state
    print(f"  Loaded user-basic: {state.method.value} {state.url}")

    try:
        controller.set_url("https://example.test")
    except InvalidRequestException as e:
        print(f"  ✓ URL change rejected: {e.message}")

    controller.reset()
    print(f"  After reset: method={controller.state.method.value} url={controller.state.url!r}")


def demo_request_preview():
    """Show the requests built for the same document."""
    print("\n=== Request Preview ===")

    document = {"user": {"id": 1, "roles": ["admin", "dev"]}, "active": True}
    for method in ("GET", "POST"):
        spec = build_request(method, "https://jsonplaceholder.typicode.com/posts", document)
        print(f"  {spec.method.value} {spec.url}")
        if spec.body:
            print(f"    body: {spec.body}")


async def demo_send(controller: SessionController):
    """Dispatch the example GET request."""
    print("\n=== Send ===")

    controller.set_method("GET")
    controller.load_api_example()
    await controller.call_api()

    snapshot = controller.snapshot()
    if snapshot.response:
        print(f"  HTTP {snapshot.response.status_code}: {snapshot.response.payload}")
    else:
        print(f"  ✗ Call failed: {snapshot.call_error}")


async def main():
    catalog = TemplateCatalog.from_config()
    controller = SessionController(catalog, AiohttpTransport(), session_id="demo")

    demo_live_validation(controller)
    demo_highlighting()
    demo_templates(controller, catalog)
    demo_request_preview()

    if "--send" in sys.argv:
        await demo_send(controller)


if __name__ == "__main__":
    asyncio.run(main())
