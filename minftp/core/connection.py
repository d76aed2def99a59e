import socket
import logging
from collections import deque
from typing import Optional

from .errors import NotConnectedError
from .parser import decode_reply, split_replies

logger = logging.getLogger(__name__)

BUFFER_SIZE = 1024


class ControlConnectionManager:
    """
    Owns the control connection: sends command lines and reads replies.

    Each read_response() performs at most one recv() and treats what arrived
    as one reply. When a single recv() carries several complete replies they
    are queued and handed out one per call.
    """

    def __init__(self, host: str, port: int = 21, timeout: Optional[float] = None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.socket: Optional[socket.socket] = None
        self._pending = deque()

    @property
    def is_connected(self) -> bool:
        return self.socket is not None

    def connect(self):
        if self.socket is not None:
            raise RuntimeError("Connection already established.")
        try:
            logger.info(f"Connecting to {self.host}:{self.port} (timeout={self.timeout})")
            self.socket = socket.create_connection((self.host, self.port), timeout=self.timeout)
            logger.info(f"Connected to {self.host}:{self.port}")
        except (socket.timeout, ConnectionRefusedError, OSError) as e:
            logger.error(f"Failed to connect to {self.host}:{self.port} - {e}")
            self.socket = None
            raise ConnectionError(f"Failed to connect to {self.host}:{self.port} - {e}") from e

    def disconnect(self):
        if self.socket:
            try:
                logger.info(f"Closing connection to {self.host}:{self.port}")
                self.socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            self.socket.close()
            logger.info(f"Disconnected from {self.host}:{self.port}")
        self.socket = None
        self._pending.clear()

    def send_command(self, command: str):
        if self.socket is None:
            raise NotConnectedError("No connection established.")
        line = command + '\r\n'
        if command.upper().startswith('PASS '):
            logger.debug("→ SEND: PASS ****")
        else:
            logger.debug(f"→ SEND: {command}")
        self.socket.sendall(line.encode('utf-8'))

    def read_response(self) -> Optional[str]:
        if self.socket is None:
            raise NotConnectedError("No connection established.")
        if self._pending:
            response = self._pending.popleft()
            logger.debug(f"← RECV (buffered): {response.rstrip()}")
            return response

        data = self.socket.recv(BUFFER_SIZE)
        text = decode_reply(data)
        if text is None:
            return None

        replies = split_replies(text)
        self._pending.extend(replies[1:])
        response = replies[0] if replies else text
        logger.debug(f"← RECV: {response.rstrip()}")
        return response
