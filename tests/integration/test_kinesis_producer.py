"""End-to-end producer tests against an in-process Kinesis (moto)."""

import pytest
from moto import mock_aws
from thrift.TSerialization import deserialize
from thrift.protocol.TBinaryProtocol import TBinaryProtocolFactory

from kinesis_example_producer.config.aws_config import AWSClientManager
from kinesis_example_producer.config.settings import ProducerSettings
from kinesis_example_producer.gen.stream_data.ttypes import StreamData
from kinesis_example_producer.main import ProducerService
from kinesis_example_producer.provisioner import ProvisionOutcome, StreamProvisioner
from kinesis_example_producer.writer import RecordWriter


@pytest.fixture
def kinesis(aws_credentials):
    with mock_aws():
        yield AWSClientManager(ProducerSettings().aws).kinesis_client


def read_all(client, stream_name):
    """Read every record from every shard of a stream."""
    records = []
    shards = client.describe_stream(StreamName=stream_name)['StreamDescription']['Shards']
    for shard in shards:
        iterator = client.get_shard_iterator(
            StreamName=stream_name,
            ShardId=shard['ShardId'],
            ShardIteratorType='TRIM_HORIZON'
        )['ShardIterator']
        records.extend(client.get_records(ShardIterator=iterator, Limit=1000)['Records'])
    return records


@pytest.mark.integration
class TestKinesisProducer:

    def test_create_then_detect_existing(self, kinesis):
        provisioner = StreamProvisioner(kinesis)

        assert provisioner.ensure_active('example-stream', 2, 10, 1) is ProvisionOutcome.BECAME_ACTIVE
        assert provisioner.ensure_active('example-stream', 2, 10, 1) is ProvisionOutcome.ALREADY_EXISTS

        shards = kinesis.describe_stream(StreamName='example-stream')['StreamDescription']['Shards']
        assert len(shards) == 2

    def test_produce_string_records(self, kinesis):
        kinesis.create_stream(StreamName='example-stream', ShardCount=1)
        writer = RecordWriter(kinesis, 'string')

        results = list(writer.produce('example-stream', limit=5))

        assert len(results) == 5
        assert all(r.shard_id == 'shardId-000000000000' for r in results)
        sequence_numbers = [int(r.sequence_number) for r in results]
        assert sequence_numbers == sorted(sequence_numbers)

        records = read_all(kinesis, 'example-stream')
        assert len(records) == 5
        for record in records:
            data = record['Data'].decode('utf-8')
            timestamp = int(data[len('example-record-'):])
            assert record['PartitionKey'] == f"partition-key-{timestamp % 100000}"

    def test_produce_thrift_records(self, kinesis):
        kinesis.create_stream(StreamName='example-stream', ShardCount=1)
        writer = RecordWriter(kinesis, 'thrift')

        list(writer.produce('example-stream', limit=3))

        for record in read_all(kinesis, 'example-stream'):
            decoded = deserialize(StreamData(), record['Data'], protocol_factory=TBinaryProtocolFactory())
            assert decoded.name == 'example-record'
            assert record['PartitionKey'] == f"partition-key-{decoded.timestamp}"

    def test_put_to_missing_stream_propagates(self, kinesis):
        writer = RecordWriter(kinesis)

        with pytest.raises(kinesis.exceptions.ResourceNotFoundException):
            writer.write_one('missing-stream', 1)

    def test_service_run(self, kinesis):
        settings = ProducerSettings(
            logging=False,
            stream={'name': 'service-stream', 'size': 1, 'data_type': 'thrift'},
            events={'limit': 4}
        )
        service = ProducerService(settings, kinesis_client=kinesis)

        assert service.run() == 0
        assert len(read_all(kinesis, 'service-stream')) == 4


@pytest.mark.integration
def test_default_credential_chain_client(aws_credentials):
    with mock_aws():
        client = AWSClientManager(ProducerSettings().aws).kinesis_client

        assert client.list_streams()['StreamNames'] == []
