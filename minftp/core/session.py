import logging
from enum import Enum
from typing import Callable, Optional

from .connection import ControlConnectionManager
from .errors import FTPClientError, NotConnectedError
from .local_files import LocalFileStore
from .parser import Parser
from .sanitizer import sanitize_input
from .transfer import LIST_POLL_WAIT, TransferEngine

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    AUTHENTICATED = "authenticated"


class Session:
    """
    One FTP client session: connection lifecycle, login and the operations
    offered to a front end.

    Failures of an operation are reported through `output` and logged; the
    operation then returns None (or False for login) and the session stays
    usable. Calling an operation while disconnected raises NotConnectedError.
    """

    def __init__(self, host: str, port: int = 21, timeout: Optional[float] = None,
                 files: LocalFileStore = None, output: Callable[[str], None] = print,
                 list_poll_wait: float = LIST_POLL_WAIT):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.files = files or LocalFileStore()
        self.output = output
        self.list_poll_wait = list_poll_wait
        self.parser = Parser()
        self.state = ConnectionState.DISCONNECTED
        self._conn: Optional[ControlConnectionManager] = None
        self._engine: Optional[TransferEngine] = None

    @property
    def is_connected(self) -> bool:
        return self.state is not ConnectionState.DISCONNECTED

    def _require_connection(self) -> ControlConnectionManager:
        if self.state is ConnectionState.DISCONNECTED:
            raise NotConnectedError(f"Not connected to {self.host}:{self.port}")
        return self._conn

    def _report_response(self, response: Optional[str]) -> Optional[str]:
        if response is not None:
            self.output(response.rstrip())
        return response

    def _fail(self, message: str):
        logger.error(message)
        self.output(message)

    # Lifecycle

    def connect(self) -> Optional[str]:
        """Open the control channel, show the greeting and switch to binary mode."""
        if self.is_connected:
            raise RuntimeError("Connection already established.")
        conn = ControlConnectionManager(self.host, self.port, self.timeout)
        try:
            conn.connect()
        except ConnectionError as e:
            self._fail(str(e))
            return None

        self._conn = conn
        self._engine = TransferEngine(conn, self.files, self.parser, self.output, self.list_poll_wait)
        self.state = ConnectionState.CONNECTED

        try:
            greeting = self._report_response(conn.read_response())
            self.send_command("TYPE I")
            self._report_response(conn.read_response())
        except OSError as e:
            self._fail(f"Connection to {self.host}:{self.port} lost: {e}")
            self.close()
            return None
        return greeting

    def login(self, username: str, password: str) -> bool:
        """
        Send sanitized USER and PASS, showing each reply.

        Returns True only when the PASS reply is a 2xx success; the caller
        decides what to do with a failed login.
        """
        self.send_command(f"USER {sanitize_input(username)}")
        self._report_response(self.read_response())
        self.send_command(f"PASS {sanitize_input(password)}")
        response = self._report_response(self.read_response())

        if response is not None and self.parser.parse_data(response).type == 'success':
            self.state = ConnectionState.AUTHENTICATED
            logger.info(f"Logged in to {self.host}:{self.port}")
            return True
        logger.warning(f"Login to {self.host}:{self.port} was not accepted")
        return False

    def quit(self) -> Optional[str]:
        self.send_command("QUIT")
        response = self._report_response(self.read_response())
        self.close()
        return response

    def close(self):
        if self._conn is not None:
            self._conn.disconnect()
        self._conn = None
        self._engine = None
        self.state = ConnectionState.DISCONNECTED

    # Control channel passthrough

    def send_command(self, command: str):
        self._require_connection().send_command(command)

    def read_response(self) -> Optional[str]:
        conn = self._require_connection()
        try:
            return conn.read_response()
        except OSError as e:
            self._fail(f"Failed to read reply: {e}")
            return None

    # Directory and transfer operations

    def _run(self, operation: str, fn):
        self._require_connection()
        try:
            return fn()
        except FTPClientError as e:
            self._fail(str(e))
        except OSError as e:
            self._fail(f"{operation} failed: {e}")
        return None

    def list_directory(self) -> Optional[str]:
        return self._run("LIST", lambda: self._engine.list_directory())

    def retrieve_file(self, name: str) -> Optional[str]:
        return self._run("RETR", lambda: self._engine.retrieve_file(name))

    def upload_file(self, name: str) -> Optional[str]:
        return self._run("STOR", lambda: self._engine.upload_file(name))

    def change_directory(self, path: str) -> Optional[str]:
        return self._run("CWD", lambda: self._engine.change_directory(path))

    def print_working_directory(self) -> Optional[str]:
        return self._run("PWD", lambda: self._engine.print_working_directory())
