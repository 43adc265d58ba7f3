"""Example records written to the stream."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from thrift.TSerialization import serialize
from thrift.protocol.TBinaryProtocol import TBinaryProtocolFactory

from .gen.stream_data.ttypes import StreamData

EXAMPLE_RECORD_NAME = "example-record"
PARTITION_KEY_MODULUS = 100000


class RecordFormat(str, Enum):
    """Payload encodings the producer can emit."""
    STRING = "string"
    THRIFT = "thrift"


@dataclass(frozen=True)
class PutResult:
    """Shard and sequence number assigned to a written record."""
    shard_id: str
    sequence_number: str

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "PutResult":
        return cls(
            shard_id=response['ShardId'],
            sequence_number=response['SequenceNumber']
        )


@dataclass(frozen=True)
class ExampleRecord:
    """Encoded payload plus the partition key it is written under."""
    data: bytes
    partition_key: str
    fields: Dict[str, Any] = field(default_factory=dict)


def current_millis() -> int:
    return int(time.time() * 1000)


def partition_key_for(timestamp: int) -> str:
    return f"partition-key-{timestamp % PARTITION_KEY_MODULUS}"


def build_string_record(timestamp: int) -> ExampleRecord:
    data = f"{EXAMPLE_RECORD_NAME}-{timestamp}"
    return ExampleRecord(
        data=data.encode('utf-8'),
        partition_key=partition_key_for(timestamp),
        fields={'data': data}
    )


def build_thrift_record(timestamp: int) -> ExampleRecord:
    """
    Encode a StreamData struct with the Thrift binary protocol.

    serialize() writes through a fresh memory transport on every call, so
    concurrent callers never share encoder state.
    """
    data_timestamp = timestamp % PARTITION_KEY_MODULUS
    stream_data = StreamData(name=EXAMPLE_RECORD_NAME, timestamp=data_timestamp)
    return ExampleRecord(
        data=serialize(stream_data, protocol_factory=TBinaryProtocolFactory()),
        partition_key=partition_key_for(timestamp),
        fields={'data.name': EXAMPLE_RECORD_NAME, 'data.timestamp': data_timestamp}
    )


_BUILDERS = {
    RecordFormat.STRING: build_string_record,
    RecordFormat.THRIFT: build_thrift_record,
}


def build_example_record(timestamp: int, data_type: RecordFormat) -> ExampleRecord:
    return _BUILDERS[RecordFormat(data_type)](timestamp)
