"""Command line interface for lettre."""
