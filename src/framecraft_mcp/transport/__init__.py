"""Transport layer: TCP connections exchanging hex-encoded frames."""

from .tcp_connection import ConnectionManager, SendResult, TCPConnection
