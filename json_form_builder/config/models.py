"""Configuration models for the JSON Form Builder."""

from typing import List, Optional, Dict
from pydantic import BaseModel, Field, field_validator


class TransportConfig(BaseModel):
    """Configuration for the outbound HTTP transport."""

    timeout: int = Field(30, description="Total request timeout in seconds", ge=1, le=300)
    verify_ssl: bool = Field(True, description="Verify TLS certificates")
    follow_redirects: bool = Field(True, description="Follow HTTP redirects")
    retry_attempts: int = Field(2, description="Retries of connection-level failures", ge=0, le=10)
    retry_delay: float = Field(0.5, description="Initial retry delay in seconds", ge=0.1, le=60.0)
    user_agent: str = Field("JSON-Form-Builder/1.0", description="User-Agent header sent with every call")
    default_headers: Optional[Dict[str, str]] = Field(None, description="Extra headers sent with every call")

    @field_validator('user_agent')
    @classmethod
    def validate_user_agent(cls, v):
        """Ensure user agent is not empty."""
        if not v or not v.strip():
            raise ValueError("User agent cannot be empty")
        return v.strip()


class TemplatesConfig(BaseModel):
    """Configuration for the template catalog."""

    include_builtin: bool = Field(True, description="Include the built-in example templates")
    templates_file: Optional[str] = Field(None, description="YAML file with additional templates")

    @field_validator('templates_file')
    @classmethod
    def validate_templates_file(cls, v):
        """Normalise an empty path to None."""
        if v is None or not v.strip():
            return None
        return v.strip()


class APIConfig(BaseModel):
    """Configuration for the REST service."""

    host: str = Field("0.0.0.0", description="Interface to bind")
    port: int = Field(8000, description="Port to bind", ge=1, le=65535)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")


class ServerConfig(BaseModel):
    """Main configuration container for the JSON Form Builder server."""

    transport_config: TransportConfig = Field(
        default_factory=TransportConfig,
        description="Outbound HTTP transport configuration"
    )
    templates_config: TemplatesConfig = Field(
        default_factory=TemplatesConfig,
        description="Template catalog configuration"
    )
    api_config: APIConfig = Field(
        default_factory=APIConfig,
        description="REST service configuration"
    )
    default_method: str = Field(
        "POST",
        description="HTTP method of a new session"
    )
    max_document_size: int = Field(
        1048576,  # 1MB
        description="Maximum document size in bytes",
        ge=1024,  # 1KB minimum
        le=104857600  # 100MB maximum
    )
    log_level: str = Field(
        "INFO",
        description="Logging level"
    )
    json_logging: bool = Field(
        False,
        description="Emit structured JSON log lines"
    )
    log_file: Optional[str] = Field(
        None,
        description="Optional rotating log file"
    )
    session_ttl: int = Field(
        3600,  # 1 hour
        description="Session TTL in seconds",
        ge=60,  # 1 minute minimum
        le=86400  # 24 hours maximum
    )
    cleanup_interval: int = Field(
        300,
        description="Seconds between expired-session sweeps",
        ge=10,
        le=3600
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate that log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(sorted(valid_levels))}")
        return v.upper()

    @field_validator('default_method')
    @classmethod
    def validate_default_method(cls, v):
        """Validate that the default method is supported."""
        allowed_methods = {"GET", "POST", "PUT"}
        if v.upper() not in allowed_methods:
            raise ValueError(f"Default method must be one of: {', '.join(sorted(allowed_methods))}")
        return v.upper()

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",  # Forbid extra fields
    }
