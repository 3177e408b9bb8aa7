"""Configuration loader for the JSON Form Builder."""

import os
import re
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from pydantic import ValidationError
from dotenv import load_dotenv

from .models import ServerConfig

ENV_PREFIX = "JSON_FORM_"


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""
    pass


class ConfigLoader:
    """Loads and validates configuration from multiple sources."""

    def __init__(self, config_file: Optional[str] = None, env_file: Optional[str] = None):
        """Initialize the configuration loader.

        Args:
            config_file: Optional path to YAML configuration file
            env_file: Optional path to .env file (defaults to .env in current directory)
        """
        self.config_file = config_file or "config.yaml"
        self.env_file = env_file or ".env"

        # Load .env file if it exists
        self._load_env_file()

    def _load_env_file(self) -> None:
        """Load environment variables from .env file if it exists."""
        env_path = Path(self.env_file)
        if env_path.exists():
            load_dotenv(env_path)
        else:
            # Fall back to the config file's directory
            config_dir_env = Path(self.config_file).parent / ".env"
            if config_dir_env.exists():
                load_dotenv(config_dir_env)

    def load_config(self) -> ServerConfig:
        """Load configuration from the YAML file and environment variables.

        Returns:
            ServerConfig: Validated server configuration

        Raises:
            ConfigurationError: If configuration loading or validation fails
        """
        try:
            config_data: Dict[str, Any] = {}

            yaml_config = self._load_yaml_config()
            if yaml_config:
                config_data.update(yaml_config)

            # Flat variables first, prefixed structured variables win
            config_data = self._merge_configs(config_data, self._load_env_config())
            config_data = self._merge_configs(config_data, self._load_env_config_structured())

            return ServerConfig(**config_data)

        except ValidationError as e:
            error_details = self._format_validation_errors(e)
            raise ConfigurationError(f"Configuration validation failed:\n{error_details}")
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {str(e)}")

    def _load_yaml_config(self) -> Optional[Dict[str, Any]]:
        """Load configuration from YAML file.

        Returns:
            Dict containing YAML configuration or None if file doesn't exist
        """
        config_path = Path(self.config_file)
        if not config_path.exists():
            return None

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = self._substitute_env_vars(f.read())
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_file}: {str(e)}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read {self.config_file}: {str(e)}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Top level of {self.config_file} must be a mapping")
        return data

    def _load_env_config(self) -> Dict[str, Any]:
        """Load configuration from well-known flat environment variables.

        Returns:
            Dict containing environment-based configuration
        """
        config: Dict[str, Any] = {}

        # Transport Configuration
        transport_config: Dict[str, Any] = {}
        if os.getenv('TRANSPORT_TIMEOUT'):
            transport_config['timeout'] = int(os.getenv('TRANSPORT_TIMEOUT'))
        if os.getenv('TRANSPORT_VERIFY_SSL'):
            transport_config['verify_ssl'] = os.getenv('TRANSPORT_VERIFY_SSL').lower() == 'true'
        if os.getenv('TRANSPORT_FOLLOW_REDIRECTS'):
            transport_config['follow_redirects'] = os.getenv('TRANSPORT_FOLLOW_REDIRECTS').lower() == 'true'
        if os.getenv('TRANSPORT_RETRY_ATTEMPTS'):
            transport_config['retry_attempts'] = int(os.getenv('TRANSPORT_RETRY_ATTEMPTS'))

        if transport_config:
            config['transport_config'] = transport_config

        # Templates Configuration
        if os.getenv('TEMPLATES_FILE'):
            config['templates_config'] = {'templates_file': os.getenv('TEMPLATES_FILE')}

        # API Configuration
        api_config: Dict[str, Any] = {}
        if os.getenv('API_HOST'):
            api_config['host'] = os.getenv('API_HOST')
        if os.getenv('API_PORT'):
            api_config['port'] = int(os.getenv('API_PORT'))

        if api_config:
            config['api_config'] = api_config

        # Server Configuration
        if os.getenv('MAX_DOCUMENT_SIZE'):
            config['max_document_size'] = int(os.getenv('MAX_DOCUMENT_SIZE'))
        if os.getenv('LOG_LEVEL'):
            config['log_level'] = os.getenv('LOG_LEVEL')
        if os.getenv('SESSION_TTL'):
            config['session_ttl'] = int(os.getenv('SESSION_TTL'))

        return config

    def _merge_configs(self, base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
        """Merge two configurations with the override taking precedence.

        Args:
            base_config: Lower-precedence configuration
            override_config: Higher-precedence configuration

        Returns:
            Merged configuration dictionary
        """
        merged = base_config.copy()

        for key, value in override_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                # Merge nested dictionaries
                merged[key] = {**merged[key], **value}
            else:
                merged[key] = value

        return merged

    def _format_validation_errors(self, error: ValidationError) -> str:
        """Format Pydantic validation errors into readable messages.

        Args:
            error: Pydantic ValidationError

        Returns:
            Formatted error message string
        """
        error_messages = []
        for err in error.errors():
            field_path = " -> ".join(str(loc) for loc in err['loc'])
            message = err['msg']
            error_messages.append(f"  {field_path}: {message}")

        return "\n".join(error_messages)

    def load_from_file(self, config_file: str) -> ServerConfig:
        """Load configuration from a specific YAML file.

        Args:
            config_file: Path to YAML configuration file

        Returns:
            ServerConfig: Validated server configuration

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigurationError: If configuration loading or validation fails
        """
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")

        original_file = self.config_file
        try:
            self.config_file = config_file
            config_data = self._load_yaml_config() or {}
            return ServerConfig(**config_data)
        except ValidationError as e:
            error_details = self._format_validation_errors(e)
            raise ConfigurationError(f"Configuration validation failed:\n{error_details}")
        finally:
            self.config_file = original_file

    def load_from_env(self) -> ServerConfig:
        """Load configuration from environment variables only.

        Returns:
            ServerConfig: Validated server configuration

        Raises:
            ConfigurationError: If configuration loading or validation fails
        """
        try:
            env_config = self._merge_configs(self._load_env_config(), self._load_env_config_structured())
            return ServerConfig(**env_config)

        except ValidationError as e:
            error_details = self._format_validation_errors(e)
            raise ConfigurationError(f"Configuration validation failed:\n{error_details}")
        except ValueError as e:
            raise ConfigurationError(f"Failed to load configuration from environment: {str(e)}")

    def _substitute_env_vars(self, content: str) -> str:
        """Substitute environment variables in YAML content.

        Args:
            content: YAML content with potential environment variable references

        Returns:
            Content with environment variables substituted
        """
        # ${VAR_NAME} or ${VAR_NAME:-default_value}
        pattern = r'\$\{([^}]+)\}'

        def replace_var(match):
            var_expr = match.group(1)
            if ':-' in var_expr:
                var_name, default_value = var_expr.split(':-', 1)
                return os.getenv(var_name.strip(), default_value.strip())
            else:
                var_name = var_expr.strip()
                value = os.getenv(var_name)
                return value if value is not None else match.group(0)

        return re.sub(pattern, replace_var, content)

    def _load_env_config_structured(self) -> Dict[str, Any]:
        """Load configuration from JSON_FORM_ prefixed environment variables.

        Returns:
            Dict containing environment-based configuration
        """
        config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                self._set_nested_value(config, key[len(ENV_PREFIX):], value)

        return config

    def _set_nested_value(self, config: Dict[str, Any], key_path: str, value: str) -> None:
        """Set a configuration value from a flat environment variable key.

        ``TRANSPORT_CONFIG_TIMEOUT`` becomes ``transport_config.timeout``;
        ``LOG_LEVEL`` becomes ``log_level``.

        Args:
            config: Configuration dictionary to update
            key_path: Underscore-separated key path
            value: String value to set
        """
        parts = key_path.lower().split('_')

        if len(parts) >= 3 and parts[1] == 'config':
            section_name = f"{parts[0]}_config"
            section = config.setdefault(section_name, {})
            final_key = '_'.join(parts[2:])
            section[final_key] = self._convert_env_value(value, final_key)
        else:
            final_key = '_'.join(parts)
            config[final_key] = self._convert_env_value(value, final_key)

    def _convert_env_value(self, value: str, key: str = "") -> Any:
        """Convert environment variable string value to appropriate type.

        Args:
            value: String value from environment variable
            key: Target configuration key

        Returns:
            Converted value (list, int, float, bool, or string)
        """
        if key == "cors_origins":
            return [item.strip() for item in value.split(',') if item.strip()]

        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def validate_config_file(self, config_file: str) -> bool:
        """Validate a configuration file.

        Args:
            config_file: Path to configuration file

        Returns:
            True if configuration is valid

        Raises:
            ConfigurationError: If configuration is invalid
        """
        original_file = self.config_file
        try:
            self.config_file = config_file
            self.load_config()
            return True
        finally:
            self.config_file = original_file


def load_config(config_file: Optional[str] = None, env_file: Optional[str] = None) -> ServerConfig:
    """Convenience function to load configuration.

    Args:
        config_file: Optional path to YAML configuration file
        env_file: Optional path to .env file

    Returns:
        ServerConfig: Validated server configuration

    Raises:
        ConfigurationError: If configuration loading or validation fails
    """
    loader = ConfigLoader(config_file, env_file)
    return loader.load_config()


def create_example_config() -> Dict[str, Any]:
    """Create an example configuration dictionary.

    Returns:
        Dictionary containing example configuration
    """
    return {
        "transport_config": {
            "timeout": 30,
            "verify_ssl": True,
            "follow_redirects": True,
            "retry_attempts": 2,
            "retry_delay": 0.5,
            "user_agent": "JSON-Form-Builder/1.0",
            "default_headers": None
        },
        "templates_config": {
            "include_builtin": True,
            "templates_file": None
        },
        "api_config": {
            "host": "0.0.0.0",
            "port": 8000,
            "cors_origins": ["*"]
        },
        "default_method": "POST",
        "max_document_size": 1048576,
        "log_level": "INFO",
        "json_logging": False,
        "log_file": None,
        "session_ttl": 3600,
        "cleanup_interval": 300
    }
