"""
Top-level package for the Reading List API.

All functionality lives in submodules under ``app``; the service is
started with ``run.py`` or any ASGI server pointed at
``reading_list_api.app.main:app``.
"""

__all__ = []
