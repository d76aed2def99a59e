import os
import logging
from typing import BinaryIO

logger = logging.getLogger(__name__)


class LocalFileStore:
    """Local byte sink/source for transfers, rooted at one directory."""

    def __init__(self, root: str = None):
        self.root = root or os.getcwd()

    def path_for(self, name: str) -> str:
        """
        Resolve `name` inside the store root.

        Absolute names are taken relative to the root, as if the root were
        "/". Names that still resolve outside it ("../x", symlinks) raise
        PermissionError.
        """
        root = os.path.realpath(self.root)
        path = os.path.realpath(os.path.join(root, name.lstrip('/')))
        if os.path.commonpath([root, path]) != root:
            raise PermissionError(f"Local path for {name!r} is outside {root}")
        return path

    def open_sink(self, name: str) -> BinaryIO:
        """Create or truncate `name` for writing downloaded bytes."""
        path = self.path_for(name)
        logger.debug(f"Opening local sink {path}")
        return open(path, 'wb')

    def open_source(self, name: str) -> BinaryIO:
        """Open `name` for reading bytes to upload."""
        path = self.path_for(name)
        logger.debug(f"Opening local source {path}")
        return open(path, 'rb')
