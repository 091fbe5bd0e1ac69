"""Server-side rendering of the UBI Drip admin dashboard.

The page is a Jinja2 template (``templates/dashboard.html``) rendered with
autoescaping enabled for every interpolated value, so recipient labels and
addresses can never inject markup.  The browser-side controller lives in
``static/dashboard.js`` and reads the admin address from an escaped
``data-`` attribute on ``<body>``.
"""

from __future__ import annotations

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from ubi_drip.config import AppConfig
from ubi_drip.model.configuration import Configuration, parse_amount

#: Placeholder shown for totals that cannot be computed from the rates.
NOT_AVAILABLE: str = "n/a"


def short_address(address: str, head: int = 6, tail: int = 4) -> str:
    """Abbreviate an address as ``0x8f69...9ebf``."""
    if len(address) <= head + tail:
        return address
    return f"{address[:head]}...{address[-tail:] if tail else ''}"


def format_amount(value: object) -> str:
    """Format a numeric amount with thousands separators.

    Integers render without decimals (``1,000``); decimals keep their
    fractional digits (``1,234.5``).  Values that are not numbers are
    returned unchanged as strings, as are numbers too large or too small to
    write out in full.  ``None`` renders as ``n/a``.
    """
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, int):
        return f"{value:,}"
    number = parse_amount(value)
    if number is None:
        return str(value)
    if number == number.to_integral_value():
        return f"{int(number):,}"
    return f"{number.normalize():,f}"


def build_environment() -> Environment:
    """Create the Jinja2 environment used for the dashboard templates."""
    env = Environment(
        loader=PackageLoader("ubi_drip.dashboard", "templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["short_address"] = short_address
    env.filters["amount"] = format_amount
    return env


class DashboardRenderer:
    """Renders the admin dashboard for one configuration snapshot.

    Args:
        settings: Application settings supplying the contract, admin and
            explorer values shown on the page.
        environment: Jinja2 environment to load templates from.  Defaults to
            :func:`build_environment`.
    """

    template_name = "dashboard.html"

    def __init__(self, settings: AppConfig, environment: Environment | None = None) -> None:
        self._settings = settings
        self._env = environment if environment is not None else build_environment()

    def render(self, config: Configuration, static_url: str = "/static") -> str:
        """Return the full HTML document for *config*.

        Args:
            config: Configuration snapshot to display.
            static_url: URL prefix the controller script is served from.
        """
        cost = config.distribution_cost()
        template = self._env.get_template(self.template_name)
        return template.render(
            config=config,
            recipients=config.recipients,
            eth_total=NOT_AVAILABLE if cost.eth_total is None else f"{cost.eth_total:.4f}",
            token_total=format_amount(cost.token_total),
            admin_wallet=self._settings.admin_wallet,
            contract_address=self._settings.ubi_contract,
            contract_url=f"{self._settings.explorer_url.rstrip('/')}/address/{self._settings.ubi_contract}",
            token_address=self._settings.token_address,
            static_url=static_url.rstrip("/"),
        )
