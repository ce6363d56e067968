"""
Application package initializer.

The service is split into ``core`` (configuration, logging, error
handlers), ``schemas`` (wire models), ``services`` (the in-memory book
store) and ``api`` (versioned routers).
"""

from .main import app  # noqa: F401
