"""Configuration model subpackage for UBI Drip.

Public API
----------
Configuration
    Rates and ordered recipient list (Pydantic model, camelCase JSON).
Recipient
    Address/label pair; addresses are validated and lowercased.
ConfigurationModel
    Mutable in-memory owner of one configuration.
InvalidAddressError, DuplicateRecipientError
    Raised by :meth:`ConfigurationModel.add_recipient`.
"""

from ubi_drip.model.configuration import (
    Configuration,
    ConfigurationModel,
    DistributionCost,
    DuplicateRecipientError,
    InvalidAddressError,
    Recipient,
    RecipientError,
)

__all__: list[str] = [
    "Configuration",
    "ConfigurationModel",
    "DistributionCost",
    "DuplicateRecipientError",
    "InvalidAddressError",
    "Recipient",
    "RecipientError",
]
