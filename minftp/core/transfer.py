import codecs
import logging
from typing import Callable, Optional

from .connection import ControlConnectionManager
from .data_connection import BUFFER_SIZE
from .errors import TransferError
from .local_files import LocalFileStore
from .negotiator import PassiveModeNegotiator
from .parser import Parser
from .sanitizer import sanitize_input

logger = logging.getLogger(__name__)

# Seconds LIST waits for the next listing chunk before giving up on the data channel.
LIST_POLL_WAIT = 5.0


class TransferEngine:
    """
    LIST, RETR and STOR on top of the control channel and PASV.

    Every transfer runs the same phases in program order: open the data
    connection, send the command and read its preliminary reply, move the
    payload, close the data connection, read the completion reply.
    """

    def __init__(self, conn: ControlConnectionManager, files: LocalFileStore,
                 parser: Parser = None, report: Callable[[str], None] = print,
                 list_poll_wait: float = LIST_POLL_WAIT):
        self.conn = conn
        self.files = files
        self.parser = parser or Parser()
        self.report = report
        self.list_poll_wait = list_poll_wait
        self.negotiator = PassiveModeNegotiator(conn, self.parser, report)

    def _execute(self, command: str) -> Optional[str]:
        self.conn.send_command(command)
        return self._read_and_report()

    def _read_and_report(self) -> Optional[str]:
        response = self.conn.read_response()
        if response is not None:
            self.report(response.rstrip())
        return response

    def _start_transfer(self, command: str) -> bool:
        """
        Send a transfer command and vet its preliminary reply.

        Returns True when the server already sent its completion reply
        (a 2xx instead of the usual 1xx), so none must be awaited.
        """
        response = self._execute(command)
        if response is None:
            raise TransferError(f"No reply to {command.split()[0]}")
        parsed = self.parser.parse_data(response)
        if parsed.is_error():
            raise TransferError(f"{command.split()[0]} refused: {parsed.code} {parsed.message}")
        return parsed.type == 'success'

    def list_directory(self) -> str:
        data_conn = self.negotiator.open_data_connection()
        decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
        chunks = []
        with data_conn:
            completed = self._start_transfer("LIST")
            while data_conn.has_more_data(self.list_poll_wait):
                chunk = data_conn.read(BUFFER_SIZE)
                if not chunk:
                    break
                text = decoder.decode(chunk)
                if text:
                    self.report(text)
                    chunks.append(text)
            tail = decoder.decode(b'', final=True)
            if tail:
                self.report(tail)
                chunks.append(tail)
        if not completed:
            self._read_and_report()
        return ''.join(chunks)

    def retrieve_file(self, name: str) -> str:
        safe_name = sanitize_input(name)
        if not safe_name:
            raise TransferError("A remote file name is required")

        data_conn = self.negotiator.open_data_connection()
        with data_conn:
            completed = self._start_transfer(f"RETR {safe_name}")
            received = 0
            try:
                with self.files.open_sink(safe_name) as sink:
                    while True:
                        chunk = data_conn.read(BUFFER_SIZE)
                        if not chunk:
                            break
                        sink.write(chunk)
                        received += len(chunk)
            except OSError:
                # Keep the control channel in step before giving up.
                data_conn.close()
                if not completed:
                    self._read_and_report()
                raise
        logger.info(f"RETR {safe_name}: {received} bytes received")

        if not completed:
            self._read_and_report()
        return safe_name

    def upload_file(self, name: str) -> str:
        # Only the remote name goes through the sanitizer; the local file is
        # opened under the name the operator typed.
        safe_name = sanitize_input(name)
        if not safe_name:
            raise TransferError("A file name is required")

        data_conn = self.negotiator.open_data_connection()
        with data_conn:
            completed = self._start_transfer(f"STOR {safe_name}")
            sent = 0
            try:
                with self.files.open_source(name) as source:
                    while True:
                        chunk = source.read(BUFFER_SIZE)
                        if not chunk:
                            break
                        data_conn.write(chunk)
                        sent += len(chunk)
            except OSError:
                data_conn.close()
                if not completed:
                    self._read_and_report()
                raise
        logger.info(f"STOR {safe_name}: {sent} bytes sent")

        if not completed:
            self._read_and_report()
        return safe_name

    def change_directory(self, path: str) -> Optional[str]:
        return self._execute(f"CWD {sanitize_input(path)}")

    def print_working_directory(self) -> Optional[str]:
        return self._execute("PWD")
