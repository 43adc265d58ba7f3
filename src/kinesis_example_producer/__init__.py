"""
Kinesis Example Producer - writes example records to an Amazon Kinesis stream.

This package optionally creates a Kinesis stream, waits for it to become
active, and writes synthetic example records to it as plain strings or
Thrift-serialized structures.
"""

__version__ = "0.1.0"
