#!/usr/bin/env python3
"""
Demonstration script for the JSON Form Builder configuration system.

This script shows how to:
1. Load configuration from YAML files and environment variables
2. Handle configuration validation errors
3. Create example configurations
"""

import os
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from json_form_builder.config import (
    load_config,
    create_example_config,
    ConfigurationError,
    ServerConfig
)
from json_form_builder.services import TemplateCatalog


def demo_basic_config_loading():
    """Demonstrate basic configuration loading."""
    print("=== Basic Configuration Loading ===")

    try:
        config = load_config()
        print("✓ Configuration loaded successfully!")
        print(f"  Default Method: {config.default_method}")
        print(f"  Transport Timeout: {config.transport_config.timeout}s")
        print(f"  Log Level: {config.log_level}")
        print(f"  Max Document Size: {config.max_document_size} bytes")

    except ConfigurationError as e:
        print(f"✗ Configuration error: {e}")


def demo_environment_config():
    """Demonstrate configuration from environment variables."""
    print("\n=== Environment Variable Configuration ===")

    env_vars = {
        'TRANSPORT_TIMEOUT': '10',
        'LOG_LEVEL': 'DEBUG',
        'JSON_FORM_DEFAULT_METHOD': 'GET',
        'JSON_FORM_API_CONFIG_CORS_ORIGINS': 'http://localhost:3000,http://localhost:5173'
    }

    original_values = {}
    for key in env_vars:
        original_values[key] = os.environ.get(key)
        os.environ[key] = env_vars[key]

    try:
        config = load_config()
        print("✓ Configuration loaded from environment variables:")
        print(f"  Transport Timeout: {config.transport_config.timeout}s")
        print(f"  Log Level: {config.log_level}")
        print(f"  Default Method: {config.default_method}")
        print(f"  CORS Origins: {config.api_config.cors_origins}")

    except ConfigurationError as e:
        print(f"✗ Configuration error: {e}")

    finally:
        for key, value in original_values.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value


def demo_yaml_config():
    """Demonstrate configuration from YAML file with extra templates."""
    print("\n=== YAML Configuration ===")

    example_config_path = project_root / "config.yaml.example"
    if not example_config_path.exists():
        print("✗ Example config file not found")
        return

    os.environ.setdefault('TEMPLATES_FILE', str(project_root / "templates.yaml.example"))
    try:
        config = load_config(str(example_config_path))
        catalog = TemplateCatalog.from_config(config.templates_config)
        print("✓ Configuration loaded from YAML file:")
        print(f"  Retry Attempts: {config.transport_config.retry_attempts}")
        print(f"  Templates File: {config.templates_config.templates_file}")
        print(f"  Templates Available: {len(catalog)}")

    except ConfigurationError as e:
        print(f"✗ Configuration error: {e}")


def demo_validation_errors():
    """Demonstrate configuration validation errors."""
    print("\n=== Configuration Validation Errors ===")

    os.environ['JSON_FORM_DEFAULT_METHOD'] = 'DELETE'

    try:
        load_config()
        print("✗ This should have failed!")

    except ConfigurationError as e:
        print("✓ Validation error caught as expected:")
        print(f"  {e}")

    finally:
        os.environ.pop('JSON_FORM_DEFAULT_METHOD', None)


def demo_example_config():
    """Demonstrate creating example configuration."""
    print("\n=== Example Configuration Creation ===")

    example = create_example_config()
    print("✓ Example configuration created:")
    print(f"  User Agent: {example['transport_config']['user_agent']}")
    print(f"  API Port: {example['api_config']['port']}")
    print(f"  Session TTL: {example['session_ttl']}s")

    try:
        ServerConfig(**example)
        print("✓ Example configuration is valid")
    except Exception as e:
        print(f"✗ Example configuration is invalid: {e}")


def main():
    """Run all configuration demonstrations."""
    print("JSON Form Builder - Configuration System Demo")
    print("=" * 50)

    demo_basic_config_loading()
    demo_environment_config()
    demo_yaml_config()
    demo_validation_errors()
    demo_example_config()

    print("\n" + "=" * 50)
    print("Demo completed!")
    print("\nTo use the configuration system in your application:")
    print("1. Create a config.yaml file (see config.yaml.example)")
    print("2. Set environment variables as needed")
    print("3. Use load_config() to load and validate configuration")


if __name__ == "__main__":
    main()
