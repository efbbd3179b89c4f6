"""Small networking tools: a socket relay, an HTTP fetcher and a TCP client/server."""

__version__ = "0.1.0"
__all__ = ["stream_copy", "webget", "tcp_native"]