"""Configuration management for the JSON Form Builder."""

from .models import (
    TransportConfig,
    TemplatesConfig,
    APIConfig,
    ServerConfig
)
from .loader import (
    ConfigLoader,
    ConfigurationError,
    load_config,
    create_example_config
)

__all__ = [
    'TransportConfig',
    'TemplatesConfig',
    'APIConfig',
    'ServerConfig',
    'ConfigLoader',
    'ConfigurationError',
    'load_config',
    'create_example_config'
]
