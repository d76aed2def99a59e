import select
import socket
import logging
from typing import Optional

from .errors import DataConnectionError

logger = logging.getLogger(__name__)

BUFFER_SIZE = 1024


class DataConnectionManager:
    def __init__(self, ip: str, port: int, timeout: Optional[float] = None):
        """
        One passive-mode data connection, used for a single transfer.
        """
        self.ip = ip
        self.port = port
        self.timeout = timeout
        self.data_socket: Optional[socket.socket] = None

    def connect(self):
        """
        Open the TCP connection to the endpoint announced by PASV.
        """
        try:
            self.data_socket = socket.create_connection((self.ip, self.port), timeout=self.timeout)
        except OSError as e:
            self.data_socket = None
            logger.error(f"[DATA] Failed to connect to {self.ip}:{self.port} - {e}")
            raise DataConnectionError(f"Failed to open data connection to {self.ip}:{self.port} - {e}") from e
        logger.info(f"[DATA] Connected to {self.ip}:{self.port}")

    def close(self):
        """
        Close the data connection. Safe to call more than once.
        """
        if self.data_socket:
            self.data_socket.close()
            self.data_socket = None
            logger.info(f"[DATA] Disconnected from {self.ip}:{self.port}")

    def has_more_data(self, wait: float) -> bool:
        """
        Report whether a read would return without blocking, waiting at most
        `wait` seconds. An orderly close by the peer also counts as readable;
        the following read() then returns b''.
        """
        if self.data_socket is None:
            return False
        readable, _, _ = select.select([self.data_socket], [], [], wait)
        return bool(readable)

    def read(self, size: int = BUFFER_SIZE) -> bytes:
        return self.data_socket.recv(size)

    def write(self, chunk: bytes):
        self.data_socket.sendall(chunk)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
