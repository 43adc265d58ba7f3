"""Writes example records to a Kinesis stream."""

import logging
from typing import Callable, Iterator, Optional, Union

from .records import (
    PutResult,
    RecordFormat,
    build_example_record,
    current_millis,
)

logger = logging.getLogger(__name__)


def _record_format(data_type: Union[str, RecordFormat]) -> RecordFormat:
    try:
        return RecordFormat(data_type)
    except ValueError:
        raise ValueError("data-type configuration must be 'string' or 'thrift'") from None


class RecordWriter:
    """
    Single-record producer for example events.

    Each write derives its payload and partition key from the write timestamp
    alone and issues one PutRecord call. Failures are not retried.
    """

    def __init__(
        self,
        kinesis_client,
        data_type: Union[str, RecordFormat] = RecordFormat.STRING,
        clock: Callable[[], int] = current_millis
    ):
        self.kinesis_client = kinesis_client
        self.data_type = _record_format(data_type)
        self._clock = clock

        self.stats = {
            'records_written': 0,
            'bytes_written': 0
        }

    def write_one(
        self,
        stream_name: str,
        timestamp: int,
        data_type: Optional[Union[str, RecordFormat]] = None
    ) -> PutResult:
        """
        Write one example record.

        Args:
            stream_name: Target stream
            timestamp: Milliseconds since epoch identifying the record
            data_type: Payload format, defaults to the writer's format

        Returns:
            PutResult with the ShardId and SequenceNumber assigned
        """
        fmt = self.data_type if data_type is None else _record_format(data_type)
        record = build_example_record(timestamp, fmt)

        logger.debug(f"Writing {fmt.value} record")
        for name, value in record.fields.items():
            logger.debug(f"  + {name}: {value}")
        logger.debug(f"  + key: {record.partition_key}")

        response = self.kinesis_client.put_record(
            StreamName=stream_name,
            Data=record.data,
            PartitionKey=record.partition_key
        )
        result = PutResult.from_response(response)

        self.stats['records_written'] += 1
        self.stats['bytes_written'] += len(record.data)

        logger.info(
            f"Wrote {fmt.value} record to {stream_name}: "
            f"ShardId={result.shard_id} SequenceNumber={result.sequence_number}"
        )
        return result

    def produce(
        self,
        stream_name: str,
        limit: Optional[int] = None,
        ordered: bool = False
    ) -> Iterator[PutResult]:
        """
        Lazily write records, yielding one PutResult per write.

        Args:
            stream_name: Target stream
            limit: Number of records to write, None to run until interrupted
            ordered: Ordered sequence numbers; not supported

        Raises:
            NotImplementedError: If ordered production is requested
        """
        if ordered:
            raise NotImplementedError("Ordered stream support not yet implemented")
        if limit is not None and limit < 0:
            raise ValueError("limit must be non-negative")
        return self._produce(stream_name, limit)

    def _produce(self, stream_name: str, limit: Optional[int]) -> Iterator[PutResult]:
        written = 0
        while limit is None or written < limit:
            yield self.write_one(stream_name, self._clock())
            written += 1
