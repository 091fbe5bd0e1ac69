"""Application configuration for UBI Drip.

Reads runtime settings from environment variables with sensible defaults.
All configuration is centralised here; no other module reads os.environ directly.
"""

import re
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

_ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")


class AppConfig(BaseSettings):
    """Application-wide configuration loaded from environment variables.

    Attributes:
        ubi_contract: Address of the distribution contract (deploy pending).
        admin_wallet: Wallet allowed to press the distribute button in the UI.
        token_address: Address of the $owockibot token contract on Base.
        explorer_url: Block explorer base URL used for contract links.
        host: Interface the HTTP server binds to.
        port: Port the HTTP server listens on.
        supabase_url: Supabase project URL; enables the remote store with ``supabase_key``.
        supabase_key: Supabase service key.
        supabase_table: Table holding the configuration document.
        config_db_path: Optional SQLite file used as a local configuration store.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    ubi_contract: str = "0x0000000000000000000000000000000000000000"
    admin_wallet: str = "0x4C3a28d81C52F5cA03cD7E1c8B3C02b396937ADC"
    token_address: str = "0x9e2fa44587156f0e3369ebc6e05d85e03afbca3f"
    explorer_url: str = "https://basescan.org"
    host: str = "0.0.0.0"
    port: int = 3000
    supabase_url: str | None = None
    supabase_key: str | None = None
    supabase_table: str = "ubi_config"
    config_db_path: Path | None = None
    log_level: str = "INFO"

    model_config = {"env_prefix": "", "case_sensitive": False}

    @field_validator("ubi_contract", "admin_wallet", "token_address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Reject contract and wallet addresses that are not 20-byte hex strings.

        Args:
            v: The raw address from the environment.

        Returns:
            The address unchanged.

        Raises:
            ValueError: If the value does not match ``^0x[a-fA-F0-9]{40}$``.
        """
        if not _ADDRESS_PATTERN.fullmatch(v):
            raise ValueError(f"expected a 0x-prefixed 40 hex character address; got {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is one of the accepted Python logging levels.

        Args:
            v: The raw log level string from the environment.

        Returns:
            The uppercased log level string if valid.

        Raises:
            ValueError: If the value is not a recognised logging level.
        """
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {valid}; got {v!r}")
        return upper


def get_config() -> AppConfig:
    """Return the application configuration, resolved from environment variables.

    Environment variables read (case-insensitive):
        UBI_CONTRACT: Distribution contract address (default: zero address).
        ADMIN_WALLET: Admin wallet for the dashboard's distribute button.
        TOKEN_ADDRESS: $owockibot token contract address.
        EXPLORER_URL: Block explorer base URL (default: ``https://basescan.org``).
        HOST / PORT: Bind address for the HTTP server (default: ``0.0.0.0:3000``).
        SUPABASE_URL / SUPABASE_KEY: Credentials for the remote store.
        SUPABASE_TABLE: Remote table name (default: ``ubi_config``).
        CONFIG_DB_PATH: Local SQLite store path (default: unset, no local store).
        LOG_LEVEL: Logging verbosity level (default: ``INFO``).

    Returns:
        An :class:`AppConfig` instance populated from the environment.
    """
    return AppConfig(
        _env_file=".env",
        _env_file_encoding="utf-8",
    )
