"""Developer launcher for Slidev presentations kept under presentations/."""

__version__ = "0.1.0"
