"""Configuration settings using Pydantic for validation."""

from typing import Any, Optional
from pydantic import BaseModel, Field, root_validator, validator
from pydantic_settings import BaseSettings
import os
import re

# Sentinel selecting the ambient AWS credential chain instead of static keys
CPF = "cpf"

SUPPORTED_DATA_TYPES = ("string", "thrift")


class AWSConfig(BaseModel):
    """AWS credentials and client configuration."""
    access_key: str = Field(default=CPF, description="AWS access key ID, or 'cpf'")
    secret_key: str = Field(default=CPF, description="AWS secret access key, or 'cpf'")
    region: str = Field(default="us-east-1", description="AWS region")

    # LocalStack override for local development
    endpoint_url: Optional[str] = Field(default=None, description="Kinesis endpoint URL")

    @root_validator(skip_on_failure=True)
    def validate_credential_pair(cls, values):
        access_key = values.get('access_key')
        secret_key = values.get('secret_key')
        if (access_key == CPF) != (secret_key == CPF):
            raise ValueError("access-key and secret-key must both be set to 'cpf', or neither of them")
        if access_key != CPF and not (access_key and secret_key):
            raise ValueError("access-key and secret-key must both be set when not using 'cpf'")
        return values

    @property
    def use_default_credentials(self) -> bool:
        return self.access_key == CPF and self.secret_key == CPF


class StreamConfig(BaseModel):
    """Target stream configuration."""
    name: str = Field(default="example-stream", min_length=1, description="Kinesis stream name")
    size: int = Field(default=1, gt=0, description="Shard count used when creating the stream")
    data_type: str = Field(default="string", description="Payload format: string or thrift")

    @validator('data_type')
    def validate_data_type(cls, v):
        v = v.lower()
        if v not in SUPPORTED_DATA_TYPES:
            raise ValueError("data-type configuration must be 'string' or 'thrift'")
        return v


class EventsConfig(BaseModel):
    """Event production configuration."""
    ordered: bool = Field(default=False, description="Ordered sequence numbers (unsupported)")
    limit: int = Field(default=0, ge=0, description="Number of events to produce, 0 for unbounded")

    @property
    def max_events(self) -> Optional[int]:
        return self.limit or None


class ActivePollingConfig(BaseModel):
    """How long and how often to poll a new stream for ACTIVE status."""
    duration: int = Field(default=60, gt=0, description="Maximum wait in seconds")
    interval: int = Field(default=1, gt=0, description="Polling interval in seconds")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    enabled: bool = Field(default=True, description="Emit per-record log lines")
    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")
    output: str = Field(default="stdout", description="Log output destination")


class ProducerSettings(BaseSettings):
    """Main producer settings."""

    service_name: str = Field(default="kinesis-example-producer", description="Service name")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    aws: AWSConfig = Field(default_factory=AWSConfig)
    stream: StreamConfig = Field(default_factory=StreamConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)
    active_polling: ActivePollingConfig = Field(default_factory=ActivePollingConfig)

    @validator('logging', pre=True)
    def expand_logging_flag(cls, v):
        # `logging: true|false` is shorthand for the enabled flag
        if isinstance(v, bool):
            return {'enabled': v}
        return v

    class Config:
        env_prefix = "PRODUCER_"
        env_nested_delimiter = "__"
        case_sensitive = False


def substitute_env_vars(obj: Any) -> Any:
    """
    Recursively substitute environment variables in configuration objects.

    Supports syntax:
    - ${VAR_NAME} - Required variable (raises error if not found)
    - ${VAR_NAME:-default} - Optional variable with default value

    Raises:
        ValueError: If required environment variable is not found
    """
    if isinstance(obj, dict):
        return {key: substitute_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [substitute_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        def replace_env_var(match):
            var_expr = match.group(1)

            if ':-' in var_expr:
                var_name, default_value = var_expr.split(':-', 1)
                return os.getenv(var_name.strip(), default_value)

            var_name = var_expr.strip()
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable '{var_name}' is not set")
            return value

        return re.sub(r'\$\{([^}]+)\}', replace_env_var, obj)
    else:
        return obj


def normalize_keys(obj: Any) -> Any:
    """Map hyphenated config keys (``access-key``) onto field names (``access_key``)."""
    if isinstance(obj, dict):
        return {str(key).replace('-', '_'): normalize_keys(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [normalize_keys(item) for item in obj]
    return obj


def load_settings(config_file: Optional[str] = None) -> ProducerSettings:
    """
    Load settings from a YAML config file and environment variables.

    The file may nest everything under a top-level ``producer`` key. Values
    support ${VAR_NAME} substitution; PRODUCER_* environment variables fill
    in anything the file leaves unset.

    Args:
        config_file: Path to YAML configuration file

    Returns:
        ProducerSettings: Validated configuration object

    Raises:
        ValueError: If required environment variables are missing or validation fails
        FileNotFoundError: If config file doesn't exist
    """
    if config_file and os.path.exists(config_file):
        import yaml

        with open(config_file, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        if 'producer' in raw_config:
            raw_config = raw_config['producer'] or {}

        config_data = normalize_keys(substitute_env_vars(raw_config))
        return ProducerSettings(**config_data)

    elif config_file:
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    # Load from environment variables only
    return ProducerSettings()
