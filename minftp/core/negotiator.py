import logging
from typing import Callable, Optional

from .connection import ControlConnectionManager
from .data_connection import DataConnectionManager
from .errors import PassiveModeError
from .parser import DataEndpoint, Parser

logger = logging.getLogger(__name__)


class PassiveModeNegotiator:
    """Issues PASV on the control channel and opens the announced data connection."""

    def __init__(self, conn: ControlConnectionManager, parser: Parser,
                 report: Callable[[str], None] = print):
        self.conn = conn
        self.parser = parser
        self.report = report

    def enter_passive_mode(self) -> Optional[DataEndpoint]:
        self.conn.send_command("PASV")
        response = self.conn.read_response()
        if response is None:
            logger.warning("No reply to PASV")
            return None
        self.report(response.rstrip())
        return self.parser.parse_pasv_response(response)

    def open_data_connection(self) -> DataConnectionManager:
        """
        Negotiate PASV and connect to the endpoint it announces.

        Raises PassiveModeError when no endpoint could be derived; in that case
        no connection attempt is made. DataConnectionError propagates from
        the connect itself.
        """
        endpoint = self.enter_passive_mode()
        if endpoint is None:
            raise PassiveModeError("Failed to enter passive mode")
        ip, port = endpoint
        data_conn = DataConnectionManager(ip, port, timeout=self.conn.timeout)
        data_conn.connect()
        return data_conn
