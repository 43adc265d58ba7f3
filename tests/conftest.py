"""Pytest configuration and shared fixtures."""

import itertools
from typing import Any, Dict
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from kinesis_example_producer.config.settings import (
    ActivePollingConfig,
    AWSConfig,
    EventsConfig,
    LoggingConfig,
    ProducerSettings,
    StreamConfig,
)


class FakeClock:
    """Monotonic clock that only moves when sleep() is called."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def test_settings() -> ProducerSettings:
    """Create test configuration."""
    return ProducerSettings(
        service_name="test-producer",
        logging=LoggingConfig(enabled=True, level="DEBUG", format="text"),
        aws=AWSConfig(region="us-east-1"),
        stream=StreamConfig(name="test-stream", size=2, data_type="string"),
        events=EventsConfig(ordered=False, limit=3),
        active_polling=ActivePollingConfig(duration=5, interval=1)
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_kinesis_client():
    """Mock Kinesis client whose put_record hands out increasing sequence numbers."""
    client = Mock()
    sequence = itertools.count(1)

    def put_record(**kwargs):
        return {
            'ShardId': 'shardId-000000000000',
            'SequenceNumber': f"{next(sequence):056d}"
        }

    client.put_record = Mock(side_effect=put_record)
    client.list_streams = Mock(return_value={'StreamNames': [], 'HasMoreStreams': False})
    client.create_stream = Mock(return_value={})
    return client


@pytest.fixture
def stream_summary():
    """Factory for DescribeStreamSummary responses."""
    def _create(status: str, name: str = "test-stream") -> Dict[str, Any]:
        return {
            'StreamDescriptionSummary': {
                'StreamName': name,
                'StreamStatus': status,
                'OpenShardCount': 1
            }
        }
    return _create


@pytest.fixture
def client_error():
    """Factory for botocore ClientError instances."""
    def _create(code: str, operation_name: str = 'DescribeStreamSummary') -> ClientError:
        return ClientError(
            error_response={'Error': {'Code': code, 'Message': code}},
            operation_name=operation_name
        )
    return _create


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mocked AWS credentials for moto."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')
