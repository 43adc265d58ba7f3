"""AWS-specific configuration and client setup."""

import boto3
from botocore.config import Config
import logging

from .settings import AWSConfig

logger = logging.getLogger(__name__)


class AWSClientManager:
    """Manages the Kinesis client instance with proper configuration."""

    def __init__(self, aws_config: AWSConfig):
        self.config = aws_config
        self._kinesis_client = None

        # Failed puts surface to the caller instead of being retried
        self._boto_config = Config(
            region_name=aws_config.region,
            retries={
                'total_max_attempts': 1,
                'mode': 'standard'
            },
            connect_timeout=10,
            read_timeout=30
        )

    def _credential_kwargs(self) -> dict:
        if self.config.use_default_credentials:
            # Environment, shared credentials file or instance profile
            return {}
        return {
            'aws_access_key_id': self.config.access_key,
            'aws_secret_access_key': self.config.secret_key,
        }

    @property
    def kinesis_client(self):
        """Get or create Kinesis client."""
        if self._kinesis_client is None:
            kwargs = self._credential_kwargs()
            if self.config.endpoint_url:
                kwargs['endpoint_url'] = self.config.endpoint_url

            self._kinesis_client = boto3.client(
                'kinesis',
                config=self._boto_config,
                **kwargs
            )

            source = "default credential chain" if self.config.use_default_credentials else "static keys"
            if self.config.endpoint_url:
                logger.info(f"Created Kinesis client for {self.config.endpoint_url} using {source}")
            else:
                logger.info(f"Created AWS Kinesis client in region {self.config.region} using {source}")

        return self._kinesis_client
