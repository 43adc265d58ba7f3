"""Creates the target stream and waits for it to become ACTIVE."""

import logging
import time
from enum import Enum
from typing import Callable, Optional

from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

STATUS_ACTIVE = 'ACTIVE'


class ProvisionOutcome(Enum):
    """Result of ensure_active."""
    ALREADY_EXISTS = "already_exists"
    BECAME_ACTIVE = "became_active"
    TIMED_OUT = "timed_out"

    @property
    def ready(self) -> bool:
        return self is not ProvisionOutcome.TIMED_OUT


def _error_code(error: ClientError) -> str:
    return error.response.get('Error', {}).get('Code', '')


class StreamProvisioner:
    """
    Ensures a Kinesis stream exists and is ACTIVE.

    A timeout is reported as ``ProvisionOutcome.TIMED_OUT`` rather than raised;
    the caller decides whether to carry on. Service errors other than a
    missing stream while polling propagate unchanged.
    """

    def __init__(
        self,
        kinesis_client,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic
    ):
        self.kinesis_client = kinesis_client
        self._sleep = sleep
        self._clock = clock

    def stream_exists(self, name: str) -> bool:
        """Check ListStreams, following pagination, for the given name."""
        kwargs = {}
        while True:
            response = self.kinesis_client.list_streams(**kwargs)
            stream_names = response.get('StreamNames', [])
            if name in stream_names:
                return True
            if not response.get('HasMoreStreams') or not stream_names:
                return False
            kwargs = {'ExclusiveStartStreamName': stream_names[-1]}

    def ensure_active(
        self,
        name: str,
        shard_count: int,
        max_wait_seconds: float,
        poll_interval_seconds: float
    ) -> ProvisionOutcome:
        """
        Create the stream if needed and poll until it is ACTIVE.

        Args:
            name: Stream name
            shard_count: Number of shards for a newly created stream
            max_wait_seconds: How long to keep polling for ACTIVE status
            poll_interval_seconds: Delay between status checks

        Returns:
            ALREADY_EXISTS without a create call when the stream is listed,
            BECAME_ACTIVE once a new stream reports ACTIVE, TIMED_OUT otherwise.
        """
        logger.info(f"Checking streams for {name}")
        if self.stream_exists(name):
            logger.info(f"Stream {name} already exists")
            return ProvisionOutcome.ALREADY_EXISTS

        logger.info(f"Stream {name} doesn't exist, creating it with {shard_count} shard(s)")
        try:
            self.kinesis_client.create_stream(StreamName=name, ShardCount=shard_count)
        except ClientError as e:
            if _error_code(e) != 'ResourceInUseException':
                raise
            logger.info(f"Stream {name} is already being created")

        deadline = self._clock() + max_wait_seconds
        while True:
            status = self._stream_status(name)
            if status == STATUS_ACTIVE:
                logger.info(f"Stream {name} is active")
                return ProvisionOutcome.BECAME_ACTIVE

            remaining = deadline - self._clock()
            if remaining <= 0:
                logger.warning(f"Timed out after {max_wait_seconds}s waiting for {name} to become active")
                return ProvisionOutcome.TIMED_OUT

            logger.debug(f"Stream {name} status is {status or 'not found'}, waiting")
            self._sleep(min(poll_interval_seconds, remaining))

    def _stream_status(self, name: str) -> Optional[str]:
        """Current StreamStatus, or None while the stream is not yet visible."""
        try:
            response = self.kinesis_client.describe_stream_summary(StreamName=name)
        except ClientError as e:
            if _error_code(e) == 'ResourceNotFoundException':
                return None
            raise
        return response['StreamDescriptionSummary']['StreamStatus']
