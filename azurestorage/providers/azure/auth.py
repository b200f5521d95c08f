"""Azure authentication — cloud environments, credential loading, SDK client factory."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from azure.identity import AzureAuthorityHosts, ClientSecretCredential
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.storage import StorageManagementClient
from azure.storage.blob import BlobServiceClient

from ...errors import ConfigurationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Cloud environments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CloudEnvironment:
    name: str
    authority_host: str
    resource_manager_url: str
    storage_endpoint_suffix: str

    @property
    def credential_scope(self) -> str:
        return self.resource_manager_url.rstrip("/") + "/.default"

    def blob_account_url(self, storage_account_name: str) -> str:
        return f"https://{storage_account_name}.blob.{self.storage_endpoint_suffix}"


AZURE_PUBLIC_CLOUD = CloudEnvironment(
    name="AzureCloud",
    authority_host=AzureAuthorityHosts.AZURE_PUBLIC_CLOUD,
    resource_manager_url="https://management.azure.com/",
    storage_endpoint_suffix="core.windows.net",
)
AZURE_CHINA_CLOUD = CloudEnvironment(
    name="AzureChinaCloud",
    authority_host=AzureAuthorityHosts.AZURE_CHINA,
    resource_manager_url="https://management.chinacloudapi.cn/",
    storage_endpoint_suffix="core.chinacloudapi.cn",
)
AZURE_US_GOVERNMENT = CloudEnvironment(
    name="AzureUSGovernment",
    authority_host=AzureAuthorityHosts.AZURE_GOVERNMENT,
    resource_manager_url="https://management.usgovcloudapi.net/",
    storage_endpoint_suffix="core.usgovcloudapi.net",
)

_ENVIRONMENTS: dict[str, CloudEnvironment] = {
    "azurecloud": AZURE_PUBLIC_CLOUD,
    "azurepubliccloud": AZURE_PUBLIC_CLOUD,
    "azurechinacloud": AZURE_CHINA_CLOUD,
    "azureusgovernment": AZURE_US_GOVERNMENT,
    "azureusgovernmentcloud": AZURE_US_GOVERNMENT,
}


def resolve_environment(name: str) -> CloudEnvironment:
    """Map an environment name (case-insensitive) to its endpoints."""
    env = _ENVIRONMENTS.get(name.strip().lower())
    if env is None:
        raise ConfigurationError(
            f"Unknown Azure environment '{name}'. "
            f"Supported: {', '.join(sorted({e.name for e in _ENVIRONMENTS.values()}))}"
        )
    return env


# ---------------------------------------------------------------------------
# Credential loading
# ---------------------------------------------------------------------------

# credentials-file key → env var
_KEY_MAP: dict[str, str] = {
    "subscriptionID": "AZURE_SUBSCRIPTION_ID",
    "tenantID": "AZURE_TENANT_ID",
    "clientID": "AZURE_CLIENT_ID",
    "clientSecret": "AZURE_CLIENT_SECRET",
}


def load_azure_credentials(credentials_path: Optional[Path] = None) -> dict[str, str]:
    """Return service principal credentials keyed by the credentials-file names.

    The AZURE_* environment variables win when all four are set; otherwise the
    JSON file at *credentials_path* is read.
    """
    from_env = {key: os.environ.get(env_var, "") for key, env_var in _KEY_MAP.items()}
    if all(from_env.values()):
        logger.debug("Using Azure credentials from environment")
        return from_env

    if credentials_path is None:
        raise ConfigurationError(
            "Azure credentials not found: set "
            + ", ".join(_KEY_MAP.values())
            + " or provide a credentials file"
        )

    path = Path(credentials_path).expanduser()
    if not path.is_file():
        raise ConfigurationError(f"Azure credentials file not found: {path}")
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read Azure credentials file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Azure credentials file {path} must contain a JSON object")

    missing = [key for key in _KEY_MAP if not data.get(key)]
    if missing:
        raise ConfigurationError(
            f"Azure credentials file {path} is missing: {', '.join(missing)}"
        )
    logger.debug("Using Azure credentials from %s", path)
    return {key: str(data[key]) for key in _KEY_MAP}


# ---------------------------------------------------------------------------
# SDK client factory
# ---------------------------------------------------------------------------


class AzureClients:
    """Lazily-initialised container for the Azure SDK clients the adapter uses."""

    def __init__(self, credentials: dict[str, str], environment: CloudEnvironment = AZURE_PUBLIC_CLOUD):
        self.environment = environment
        self.subscription_id = credentials["subscriptionID"]
        self._credentials = credentials
        self._credential: Optional[ClientSecretCredential] = None
        self._resource: Optional[ResourceManagementClient] = None
        self._storage: Optional[StorageManagementClient] = None

    @property
    def credential(self) -> ClientSecretCredential:
        if self._credential is None:
            try:
                self._credential = ClientSecretCredential(
                    tenant_id=self._credentials["tenantID"],
                    client_id=self._credentials["clientID"],
                    client_secret=self._credentials["clientSecret"],
                    authority=self.environment.authority_host,
                )
            except ValueError as e:
                raise ConfigurationError(f"Invalid Azure service principal: {e}") from e
        return self._credential

    @property
    def resource(self) -> ResourceManagementClient:
        if self._resource is None:
            self._resource = ResourceManagementClient(
                self.credential,
                self.subscription_id,
                base_url=self.environment.resource_manager_url,
                credential_scopes=[self.environment.credential_scope],
            )
        return self._resource

    @property
    def storage(self) -> StorageManagementClient:
        if self._storage is None:
            self._storage = StorageManagementClient(
                self.credential,
                self.subscription_id,
                base_url=self.environment.resource_manager_url,
                credential_scopes=[self.environment.credential_scope],
            )
        return self._storage

    def blob_service(self, storage_account_name: str, account_key: str) -> BlobServiceClient:
        """Data-plane client for one storage account, authorised by shared key."""
        return BlobServiceClient(
            account_url=self.environment.blob_account_url(storage_account_name),
            credential={"account_name": storage_account_name, "account_key": account_key},
        )
