"""
Endpoint modules for API v1.  Each defines an ``APIRouter`` that is
aggregated in ``router.py``.
"""
