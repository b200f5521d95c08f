"""azurestorage configuration — loads from environment and an optional .env file."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Adapter settings — populated from AZURESTORAGE_* env vars or .env file."""

    # Provisioning
    location: str = "eastus"
    account_type: str = "Standard_LRS"
    account_kind: str = "StorageV2"

    # Naming
    resource_group_prefix: str = "cloud-foundry-"
    storage_account_prefix: str = "cf"
    container_prefix: str = "cloud-foundry-"
    container_access_type: str = "blob"

    # Paths
    catalog_path: Optional[Path] = None
    credentials_path: Path = Path.home() / ".azure" / "credentials.json"
    log_dir: Optional[Path] = None

    verbose: bool = False

    model_config = {"env_prefix": "AZURESTORAGE_", "env_file": ".env", "extra": "ignore"}

    @field_validator("container_access_type")
    @classmethod
    def normalize_access_type(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def effective_catalog_path(self) -> Path:
        if self.catalog_path is not None:
            return self.catalog_path
        return Path(__file__).resolve().parent / "catalog.json"


def get_settings() -> Settings:
    """Build settings fresh from the current environment."""
    return Settings()
