"""Dashboard subpackage for UBI Drip.

Holds the server-side renderer, its Jinja2 templates, and the static
client-side controller script.
"""

from ubi_drip.dashboard.renderer import DashboardRenderer, format_amount, short_address

__all__: list[str] = [
    "DashboardRenderer",
    "format_amount",
    "short_address",
]
