"""Configuration model for UBI Drip: rates and the recipient list.

This module implements the Pydantic models :class:`Recipient` and
:class:`Configuration`, the in-memory :class:`ConfigurationModel` that owns
one mutable configuration, and the recipient validation errors.

Design notes
-------------
- Addresses must match ``^0x[a-fA-F0-9]{40}$`` and are stored lowercase.
  Uniqueness is checked case-insensitively.
- Rates are opaque decimal strings.  No numeric bounds are enforced.
- :meth:`ConfigurationModel.set_rates` ignores ``None``, ``""``, ``"0"``,
  numeric zero and booleans for either field.  Setting a rate to zero is therefore impossible through
  this method; the behaviour is kept for compatibility with existing clients.
- JSON field names are camelCase (``ethPerRecipient``); Python attribute
  names are snake_case.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Regex pattern that recipient addresses must match.
ADDRESS_PATTERN: re.Pattern[str] = re.compile(r"^0x[a-fA-F0-9]{40}$")

DEFAULT_ETH_PER_RECIPIENT: str = "0.01"
DEFAULT_TOKENS_PER_RECIPIENT: str = "1000"

#: Recipients present before any configuration has been saved.
DEFAULT_RECIPIENTS: tuple[tuple[str, str], ...] = (
    ("0x8f69c8eb92ed068aa577ce1847d568b39b0d9ebf", "@Mutheu_developer"),
)

#: Rate values that leave the current rate untouched.
_IGNORED_RATES: frozenset[str] = frozenset({"", "0"})

#: Amounts whose decimal exponent exceeds this (in either direction) are not
#: treated as numbers when computing or formatting totals.
MAX_AMOUNT_EXPONENT: int = 36

#: Working precision for cost arithmetic; wide enough for any amount within
#: MAX_AMOUNT_EXPONENT times a recipient count.
_COST_PRECISION: int = 2 * MAX_AMOUNT_EXPONENT + 16


# ---------------------------------------------------------------------------
# Custom exceptions
# ---------------------------------------------------------------------------


class RecipientError(ValueError):
    """Base class for recipient list validation failures."""

    #: Message returned to HTTP clients.
    public_message: str = "Invalid recipient"


class InvalidAddressError(RecipientError):
    """Raised when an address does not match ``^0x[a-fA-F0-9]{40}$``."""

    public_message = "Invalid address"


class DuplicateRecipientError(RecipientError):
    """Raised when the address is already in the list (case-insensitive)."""

    public_message = "Recipient already exists"


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class Recipient(BaseModel):
    """A wallet address eligible to receive a distribution.

    Attributes
    ----------
    address:
        Lowercase ``0x`` + 40 hex character wallet address.
    label:
        Free-text display name (e.g. a social handle).  Empty when absent.
    """

    address: str
    label: str = ""

    @field_validator("address")
    @classmethod
    def _normalise_address(cls, v: str) -> str:
        """Validate the address pattern and lowercase it.

        Raises
        ------
        ValueError
            If *v* does not match ``^0x[a-fA-F0-9]{40}$``.
        """
        if not ADDRESS_PATTERN.fullmatch(v):
            raise ValueError(f"address must match ^0x[a-fA-F0-9]{{40}}$, got {v!r}")
        return v.lower()

    @field_validator("label", mode="before")
    @classmethod
    def _none_label(cls, v: Any) -> Any:
        return "" if v is None else v


class Configuration(BaseModel):
    """Distribution rates and the ordered list of recipients.

    Attributes
    ----------
    eth_per_recipient:
        ETH sent to each recipient per distribution cycle (JSON
        ``ethPerRecipient``).
    tokens_per_recipient:
        Tokens sent to each recipient per cycle (JSON ``tokensPerRecipient``).
    recipients:
        Recipients in insertion order.
    """

    model_config = ConfigDict(populate_by_name=True)

    eth_per_recipient: str = Field(default=DEFAULT_ETH_PER_RECIPIENT, alias="ethPerRecipient")
    tokens_per_recipient: str = Field(
        default=DEFAULT_TOKENS_PER_RECIPIENT, alias="tokensPerRecipient"
    )
    recipients: list[Recipient] = Field(default_factory=list)

    @field_validator("recipients")
    @classmethod
    def _unique_addresses(cls, v: list[Recipient]) -> list[Recipient]:
        """Reject lists holding the same address twice.

        Raises
        ------
        ValueError
            If two recipients share an address.
        """
        seen: set[str] = set()
        for recipient in v:
            if recipient.address in seen:
                raise ValueError(f"duplicate recipient address {recipient.address!r}")
            seen.add(recipient.address)
        return v

    @classmethod
    def default(cls) -> Configuration:
        """Return the configuration a fresh deployment starts with."""
        return cls(
            recipients=[Recipient(address=a, label=label) for a, label in DEFAULT_RECIPIENTS]
        )

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Configuration:
        """Build a configuration from a stored document.

        Keys missing from *document* take their values from
        :meth:`default`; keys present replace them wholesale.

        Raises
        ------
        TypeError
            If *document* is not a JSON object.
        pydantic.ValidationError
            If the merged document is not a valid configuration.
        """
        if not isinstance(document, dict):
            raise TypeError(
                f"stored configuration must be a JSON object, got {type(document).__name__}"
            )
        merged = cls.default().to_document()
        merged.update(document)
        return cls.model_validate(merged)

    def to_document(self) -> dict[str, Any]:
        """Serialise to the camelCase JSON document used on the wire and in stores."""
        return self.model_dump(by_alias=True, mode="json")

    def distribution_cost(self) -> DistributionCost:
        """Compute what one distribution cycle costs with the current rates."""
        return DistributionCost.for_configuration(self)


class DistributionCost(BaseModel):
    """Total ETH and token amounts for one distribution cycle.

    Either total is ``None`` when its rate is not a number.
    """

    eth_total: Decimal | None
    token_total: int | None

    @classmethod
    def for_configuration(cls, config: Configuration) -> DistributionCost:
        count = len(config.recipients)
        eth = parse_amount(config.eth_per_recipient)
        tokens = parse_amount(config.tokens_per_recipient)
        eth_total: Decimal | None = None
        if eth is not None:
            with localcontext() as ctx:
                ctx.prec = _COST_PRECISION
                eth_total = (eth * count).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
        return cls(
            eth_total=eth_total,
            token_total=None if tokens is None else int(tokens) * count,
        )


def parse_amount(value: object) -> Decimal | None:
    """Parse *value* as a decimal amount.

    Returns ``None`` for anything that is not a finite number, and for numbers
    whose exponent is beyond :data:`MAX_AMOUNT_EXPONENT`.
    """
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not parsed.is_finite() or abs(parsed.adjusted()) > MAX_AMOUNT_EXPONENT:
        return None
    return parsed


# ---------------------------------------------------------------------------
# ConfigurationModel
# ---------------------------------------------------------------------------


class ConfigurationModel:
    """Mutable owner of one :class:`Configuration`.

    The model performs no locking and no persistence; see
    :class:`~ubi_drip.model.service.ConfigurationService` for both.

    Parameters
    ----------
    config:
        Initial configuration.  Defaults to :meth:`Configuration.default`.
    """

    def __init__(self, config: Configuration | None = None) -> None:
        self._config: Configuration = (
            config.model_copy(deep=True) if config is not None else Configuration.default()
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_config(self) -> Configuration:
        """Return a deep copy of the current configuration."""
        return self._config.model_copy(deep=True)

    def get_recipients(self) -> list[Recipient]:
        """Return a copy of the recipient list in insertion order."""
        return [r.model_copy() for r in self._config.recipients]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def replace(self, config: Configuration) -> None:
        """Install *config* (e.g. one loaded from a store) as the current state."""
        self._config = config.model_copy(deep=True)

    def set_rates(
        self,
        eth: str | int | float | None = None,
        tokens: str | int | float | None = None,
    ) -> None:
        """Update the per-recipient rates.

        Only the values provided are applied.  ``None``, ``""``, ``"0"`` and
        numeric zero leave the corresponding rate unchanged.  Numbers are
        stored as their string form.

        Parameters
        ----------
        eth:
            New ETH amount per recipient.
        tokens:
            New token amount per recipient.
        """
        eth_value = _rate_update(eth)
        if eth_value is not None:
            self._config.eth_per_recipient = eth_value
        tokens_value = _rate_update(tokens)
        if tokens_value is not None:
            self._config.tokens_per_recipient = tokens_value

    def add_recipient(self, address: str | None, label: str | None = None) -> Recipient:
        """Append a recipient to the end of the list.

        Parameters
        ----------
        address:
            Wallet address in any letter case.
        label:
            Optional display name; stored as ``""`` when omitted.

        Returns
        -------
        Recipient
            The stored recipient, with its address lowercased.

        Raises
        ------
        InvalidAddressError
            If *address* is missing or does not match the address pattern.
        DuplicateRecipientError
            If the address is already present, ignoring case.
        """
        if address is None or not ADDRESS_PATTERN.fullmatch(address):
            raise InvalidAddressError(f"invalid address: {address!r}")
        normalised = address.lower()
        if any(r.address == normalised for r in self._config.recipients):
            raise DuplicateRecipientError(f"recipient already exists: {normalised}")

        recipient = Recipient(address=normalised, label=label or "")
        self._config.recipients.append(recipient)
        return recipient

    def remove_recipient(self, address: str) -> int:
        """Remove every recipient whose address matches *address*, ignoring case.

        Removing an address that is not present is not an error.

        Returns
        -------
        int
            Number of entries removed (``0`` when nothing matched).
        """
        target = address.lower()
        before = len(self._config.recipients)
        self._config.recipients = [
            r for r in self._config.recipients if r.address.lower() != target
        ]
        return before - len(self._config.recipients)


def _rate_update(value: str | int | float | None) -> str | None:
    """Return the string to store for a rate, or ``None`` to keep the current one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if value == 0 else str(value)
    return None if value in _IGNORED_RATES else value
