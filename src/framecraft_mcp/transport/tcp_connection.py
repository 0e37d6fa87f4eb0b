"""TCP connections for sending assembled frames.

The transport only moves bytes. Payloads and responses cross the
:class:`ConnectionManager` boundary as canonical hex strings, and a failed
exchange is reported in a :class:`SendResult` instead of being retried.
"""

from __future__ import annotations

import logging
import re
import socket
import time
from dataclasses import dataclass

from ..protocol.hexdump import hex_to_bytes

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 5.0
RECEIVE_BUFFER_SIZE = 4096
SEND_MODES = ("text", "hex")


@dataclass
class ConnectionInfo:
    """Where a connection points and how it is configured."""

    host: str
    port: int
    timeout: float = DEFAULT_TIMEOUT_S

    def to_dict(self) -> dict:
        return {"host": self.host, "port": self.port, "timeout": self.timeout}


@dataclass
class SendResult:
    """Outcome of one request/response exchange."""

    success: bool
    response_hex: str = ""
    elapsed_ms: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "response_hex": self.response_hex,
            "elapsed_ms": self.elapsed_ms,
            "error": self.error,
        }


class TCPConnection:
    """A single TCP client connection.

    Usage::

        conn = TCPConnection("127.0.0.1", 502)
        conn.open()
        conn.write(frame_bytes)
        response = conn.read()
        conn.close()
    """

    def __init__(self, host: str, port: int, timeout: float = DEFAULT_TIMEOUT_S) -> None:
        self._info = ConnectionInfo(host=host, port=port, timeout=timeout)
        self._sock: socket.socket | None = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def info(self) -> ConnectionInfo:
        return self._info

    def open(self) -> ConnectionInfo:
        """Connect to the configured host and port.

        Raises:
            ConnectionError: If the connection cannot be established.
        """
        if self._sock is not None:
            return self._info
        try:
            sock = socket.create_connection(
                (self._info.host, self._info.port), timeout=self._info.timeout
            )
        except OSError as e:
            raise ConnectionError(
                f"Failed to connect to {self._info.host}:{self._info.port}: {e}"
            ) from e
        self._sock = sock
        logger.info("Connected to %s:%d", self._info.host, self._info.port)
        return self._info

    def close(self) -> None:
        """Close the connection."""
        if self._sock is None:
            return
        try:
            self._sock.close()
        except OSError as e:
            logger.warning("Error closing socket: %s", e)
        finally:
            self._sock = None
            logger.info("Disconnected from %s:%d", self._info.host, self._info.port)

    def write(self, data: bytes) -> int:
        """Send all of ``data``.

        Raises:
            ConnectionError: If not connected.
            OSError: If the send fails or times out.
        """
        if self._sock is None:
            raise ConnectionError("Not connected. Call open() first")
        self._sock.sendall(data)
        logger.debug("Sent %d bytes to %s:%d", len(data), self._info.host, self._info.port)
        return len(data)

    def read(self, buffer_size: int = RECEIVE_BUFFER_SIZE) -> bytes:
        """Read one chunk of up to ``buffer_size`` bytes.

        A timeout leaves the connection open. End of stream or any other
        socket error closes it.

        Raises:
            ConnectionError: If not connected or the peer closed the connection.
            OSError: If the read fails or times out.
        """
        if self._sock is None:
            raise ConnectionError("Not connected. Call open() first")
        try:
            data = self._sock.recv(buffer_size)
        except socket.timeout:
            raise
        except OSError:
            self.close()
            raise
        if not data:
            self.close()
            raise ConnectionError("Connection closed by peer")
        logger.debug("Received %d bytes", len(data))
        return data

    def send_and_receive(self, data: bytes, buffer_size: int = RECEIVE_BUFFER_SIZE) -> bytes:
        """Send a request and read one response chunk."""
        self.write(data)
        return self.read(buffer_size)


def payload_to_bytes(payload: str, mode: str) -> bytes:
    """Convert a send payload to bytes.

    ``mode="hex"`` parses hex (whitespace allowed); ``mode="text"`` encodes
    UTF-8.

    Raises:
        ValueError: For an unknown mode, invalid hex, or an odd digit count.
    """
    if mode == "hex":
        digits = len(re.sub(r"\s", "", payload))
        if digits % 2:
            raise ValueError(f"Hex payload must have an even number of digits, got {digits}")
        return hex_to_bytes(payload)
    if mode == "text":
        return payload.encode("utf-8")
    raise ValueError(f"Invalid mode '{mode}'. Valid: {list(SEND_MODES)}")


class ConnectionManager:
    """Named TCP connections with hex-in/hex-out exchanges."""

    def __init__(self) -> None:
        self._connections: dict[str, TCPConnection] = {}

    def connect(
        self,
        connection_id: str,
        host: str,
        port: int,
        timeout: float = DEFAULT_TIMEOUT_S,
    ) -> ConnectionInfo:
        """Open a connection under ``connection_id``, replacing any previous one."""
        self.disconnect(connection_id)
        conn = TCPConnection(host, port, timeout)
        info = conn.open()
        self._connections[connection_id] = conn
        return info

    def disconnect(self, connection_id: str) -> bool:
        """Close and forget a connection. Returns whether one existed."""
        conn = self._connections.pop(connection_id, None)
        if conn is None:
            return False
        conn.close()
        return True

    def disconnect_all(self) -> None:
        for connection_id in list(self._connections):
            self.disconnect(connection_id)

    def is_connected(self, connection_id: str) -> bool:
        conn = self._connections.get(connection_id)
        return conn is not None and conn.connected

    def list_connections(self) -> dict[str, ConnectionInfo]:
        return {cid: conn.info for cid, conn in self._connections.items() if conn.connected}

    def _get(self, connection_id: str) -> TCPConnection:
        conn = self._connections.get(connection_id)
        if conn is None or not conn.connected:
            raise ConnectionError(f"Connection '{connection_id}' is not open")
        return conn

    def send(self, connection_id: str, payload: str, mode: str = "hex") -> SendResult:
        """Send one payload and wait for one response.

        Any failure, from a bad payload to a socket timeout, comes back as
        ``SendResult(success=False, error=...)``.
        """
        start = time.monotonic()
        try:
            data = payload_to_bytes(payload, mode)
            response = self._get(connection_id).send_and_receive(data)
        except (OSError, ValueError) as e:
            logger.warning("Send on '%s' failed: %s", connection_id, e)
            return SendResult(success=False, elapsed_ms=_elapsed_ms(start), error=str(e))
        elapsed = _elapsed_ms(start)
        logger.debug("Exchange on '%s' took %d ms", connection_id, elapsed)
        return SendResult(success=True, response_hex=response.hex().upper(), elapsed_ms=elapsed)

    def send_only(self, connection_id: str, payload: str, mode: str = "hex") -> SendResult:
        """Send one payload without waiting for a response."""
        start = time.monotonic()
        try:
            self._get(connection_id).write(payload_to_bytes(payload, mode))
        except (OSError, ValueError) as e:
            logger.warning("Send on '%s' failed: %s", connection_id, e)
            return SendResult(success=False, elapsed_ms=_elapsed_ms(start), error=str(e))
        return SendResult(success=True, elapsed_ms=_elapsed_ms(start))

    def receive_only(self, connection_id: str) -> SendResult:
        """Read one response chunk."""
        start = time.monotonic()
        try:
            response = self._get(connection_id).read()
        except OSError as e:
            logger.warning("Receive on '%s' failed: %s", connection_id, e)
            return SendResult(success=False, elapsed_ms=_elapsed_ms(start), error=str(e))
        return SendResult(
            success=True, response_hex=response.hex().upper(), elapsed_ms=_elapsed_ms(start)
        )


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
