"""WebSocket frames, messages and connection state over already upgraded byte streams."""

__version__ = "0.1.0"