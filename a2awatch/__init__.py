"""a2awatch — A2A protocol client with remote task lifecycle monitoring."""

__version__ = "0.1.0"
