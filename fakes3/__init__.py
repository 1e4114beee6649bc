"""Building blocks for a fake S3 service: routing, XML messages, prefix matching, byte ranges and in-memory multipart uploads."""

__version__ = "0.1.0"