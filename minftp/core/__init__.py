"""
Core FTP client logic.
Includes the control and data connection managers, the reply parser,
the transfer engine and the session that ties them together.
"""

from .connection import ControlConnectionManager
from .data_connection import DataConnectionManager
from .negotiator import PassiveModeNegotiator
from .transfer import TransferEngine
from .session import Session, ConnectionState
from .commands import ClientCommandHandler
from .local_files import LocalFileStore
from .parser import Parser, Reply, DataEndpoint
from .sanitizer import sanitize_input
from .errors import (
    FTPClientError,
    NotConnectedError,
    PassiveModeError,
    DataConnectionError,
    TransferError,
)

__all__ = [
    "ControlConnectionManager",
    "DataConnectionManager",
    "PassiveModeNegotiator",
    "TransferEngine",
    "Session",
    "ConnectionState",
    "ClientCommandHandler",
    "LocalFileStore",
    "Parser",
    "Reply",
    "DataEndpoint",
    "sanitize_input",
    "FTPClientError",
    "NotConnectedError",
    "PassiveModeError",
    "DataConnectionError",
    "TransferError",
]
