"""Pydantic models for the UBI Drip JSON API.

Request and response bodies are Pydantic v2 ``BaseModel`` subclasses.  JSON
field names are camelCase; the configuration and recipient shapes reuse
:class:`~ubi_drip.model.Configuration` and :class:`~ubi_drip.model.Recipient`.

Models
------
- :class:`RatesUpdate`        — ``POST /api/config`` request body
- :class:`ConfigUpdateResponse` — ``POST /api/config`` response body
- :class:`RecipientCreate`    — ``POST /api/recipients`` request body
- :class:`RecipientsResponse` — ``POST``/``DELETE /api/recipients`` response body
- :class:`ErrorResponse`      — HTTP 400 body
- :class:`HealthResponse`     — ``GET /health`` response body
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ubi_drip.model.configuration import Configuration, Recipient

#: A rate as sent by clients; numbers are stored as strings, booleans are ignored.
RateValue = str | bool | int | float | None


class RatesUpdate(BaseModel):
    """Request body for ``POST /api/config``.

    Either field may be omitted.  Omitted, empty, ``"0"`` and zero values
    leave the stored rate unchanged.
    """

    model_config = ConfigDict(populate_by_name=True)

    eth_per_recipient: RateValue = Field(default=None, alias="ethPerRecipient")
    tokens_per_recipient: RateValue = Field(default=None, alias="tokensPerRecipient")


class ConfigUpdateResponse(BaseModel):
    """Response body for ``POST /api/config``."""

    success: bool = True
    config: Configuration


class RecipientCreate(BaseModel):
    """Request body for ``POST /api/recipients``.

    ``address`` is optional at the schema level so that a missing or
    non-string address is reported as ``Invalid address`` (HTTP 400) rather
    than a schema error.
    """

    address: str | None = None
    label: str | None = None

    @field_validator("address", mode="before")
    @classmethod
    def _non_string_address(cls, v: Any) -> Any:
        return v if isinstance(v, str) else None


class RecipientsResponse(BaseModel):
    """Response body for recipient mutations."""

    success: bool = True
    recipients: list[Recipient]


class ErrorResponse(BaseModel):
    """Body of an HTTP 400 response."""

    error: str


class HealthResponse(BaseModel):
    """Response body for ``GET /health``."""

    status: str = "ok"
