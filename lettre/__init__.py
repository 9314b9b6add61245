"""lettre - a Maildir mail reader whose only state is the Maildir itself."""

__version__ = "0.1.0"
