"""Artist Hub: release management API for independent artists and labels."""

__version__ = "0.1.0"
