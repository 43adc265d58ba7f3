"""Kinesis Example Producer - writes example records to a Kinesis stream."""

import argparse
import logging
import os
import signal
import sys
import threading
from typing import List, Optional

from pydantic import ValidationError

from .config.aws_config import AWSClientManager
from .config.settings import ProducerSettings, load_settings
from .provisioner import StreamProvisioner
from .utils.logging import setup_logging
from .writer import RecordWriter

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config/producer.yaml"


class ProducerService:
    """Wires configuration, the Kinesis client, provisioner and writer together."""

    def __init__(self, settings: ProducerSettings, kinesis_client=None):
        self.settings = settings

        if kinesis_client is None:
            kinesis_client = AWSClientManager(settings.aws).kinesis_client
        self.kinesis_client = kinesis_client

        self.provisioner = StreamProvisioner(kinesis_client)
        self.writer = RecordWriter(kinesis_client, settings.stream.data_type)

    def create_stream(self) -> bool:
        """Ensure the configured stream exists and is active."""
        stream = self.settings.stream
        polling = self.settings.active_polling
        outcome = self.provisioner.ensure_active(
            stream.name,
            stream.size,
            polling.duration,
            polling.interval
        )
        return outcome.ready

    def produce_stream(self) -> int:
        """
        Write records to the configured stream.

        Returns:
            Number of records written
        """
        events = self.settings.events
        written = 0
        for _ in self.writer.produce(self.settings.stream.name, events.max_events, events.ordered):
            written += 1
        return written

    def run(self, create: bool = True) -> int:
        """Run the producer and return a process exit code."""
        stream_name = self.settings.stream.name
        events = self.settings.events

        # Unsupported modes fail here, before any stream is created
        records = self.writer.produce(stream_name, events.max_events, events.ordered)

        if create and not self.create_stream():
            logger.error(f"Stream {stream_name} did not become active in time")
            return 1

        logger.info(f"Producing records to {stream_name}")
        previous_handler = self._setup_signal_handlers()
        try:
            for _ in records:
                pass
        except KeyboardInterrupt:
            logger.info("Received interrupt, stopping producer")
        finally:
            self._restore_signal_handlers(previous_handler)

        logger.info(
            f"Producer stopped: {self.writer.stats['records_written']} records, "
            f"{self.writer.stats['bytes_written']} bytes written"
        )
        return 0

    def _setup_signal_handlers(self):
        """Treat SIGTERM like Ctrl-C so an unbounded run stops cleanly."""
        if threading.current_thread() is not threading.main_thread():
            return None
        return signal.signal(signal.SIGTERM, signal.default_int_handler)

    def _restore_signal_handlers(self, previous_handler):
        if previous_handler is not None:
            signal.signal(signal.SIGTERM, previous_handler)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Writes example records to an AWS Kinesis stream.')
    parser.add_argument(
        '--config',
        default=os.getenv('CONFIG_FILE'),
        help=f'Path to the YAML configuration file (default: {DEFAULT_CONFIG_FILE} if present)'
    )
    parser.add_argument(
        '--no-create',
        dest='create',
        action='store_false',
        help='Skip creating the stream and waiting for it to become active'
    )
    parser.add_argument(
        '--limit',
        type=int,
        default=None,
        help='Number of records to write, overriding events.limit (0 for unbounded)'
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    config_file = args.config
    if config_file is None and os.path.exists(DEFAULT_CONFIG_FILE):
        config_file = DEFAULT_CONFIG_FILE

    try:
        settings = load_settings(config_file)
    except (ValidationError, ValueError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.limit is not None:
        if args.limit < 0:
            print("Configuration error: --limit must be non-negative", file=sys.stderr)
            return 1
        settings.events.limit = args.limit

    setup_logging(settings.logging, settings.service_name)
    logger.info(f"Loaded configuration from: {config_file or 'environment'}")

    try:
        service = ProducerService(settings)
        return service.run(create=args.create)
    except NotImplementedError as e:
        logger.error(f"Unsupported configuration: {e}")
        return 1
    except Exception as e:
        logger.error(f"Producer failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
