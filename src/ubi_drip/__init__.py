"""UBI Drip: weekly contributor distribution dashboard.

This package provides the server-side components for UBI Drip: the
configuration model and its stores, a FastAPI JSON API, and the
server-rendered admin dashboard.
"""

__version__ = "0.1.0"
__all__: list[str] = []
