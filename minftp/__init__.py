"""minftp: a minimal passive-mode FTP client."""

__version__ = "0.1.0"
