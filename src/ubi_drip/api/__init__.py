"""HTTP API subpackage for UBI Drip.

Exposes the FastAPI endpoints used by the dashboard to read and update the
distribution rates and the recipient list, plus the dashboard page itself.
"""

__all__: list[str] = []
