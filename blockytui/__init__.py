"""Terminal dashboard for monitoring and controlling a Blocky DNS server."""

__version__ = "0.1.0"