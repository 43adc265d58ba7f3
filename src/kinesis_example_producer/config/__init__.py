from .settings import (
    CPF,
    ActivePollingConfig,
    AWSConfig,
    EventsConfig,
    LoggingConfig,
    ProducerSettings,
    StreamConfig,
    load_settings,
)
from .aws_config import AWSClientManager

__all__ = [
    "CPF",
    "ActivePollingConfig",
    "AWSConfig",
    "AWSClientManager",
    "EventsConfig",
    "LoggingConfig",
    "ProducerSettings",
    "StreamConfig",
    "load_settings",
]
