class FTPClientError(Exception):
    """Base class for client-side FTP failures."""


class NotConnectedError(FTPClientError, RuntimeError):
    """Raised when a command is issued without an open control connection."""


class PassiveModeError(FTPClientError):
    """Raised when the PASV reply is missing or cannot be parsed."""


class DataConnectionError(FTPClientError, ConnectionError):
    """Raised when the data connection announced by PASV cannot be opened."""


class TransferError(FTPClientError):
    """Raised when the server rejects LIST, RETR or STOR."""
