"""
JSON Form Builder REST API Server
Minimal entry point for the JSON Form Builder REST API.
"""

import asyncio

from json_form_builder.main import main


if __name__ == "__main__":
    asyncio.run(main())
