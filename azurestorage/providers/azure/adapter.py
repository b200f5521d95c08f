"""Azure provider adapter — resource group, storage account and blob container lifecycle.

Docs: https://learn.microsoft.com/en-us/python/api/overview/azure/storage
SDK:  pip install azure-identity azure-mgmt-resource azure-mgmt-storage azure-storage-blob

Long-running ARM operations are started without polling: ``create_instance``
returns once Azure has accepted the requests, and completion is observed
through ``get_instance_state``.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Optional

from azure.core.exceptions import AzureError, HttpResponseError, ResourceExistsError

from ...config import Settings
from ...errors import NameUnavailableError, ProviderError
from ...models import LastOperationResponse
from ...naming import is_valid_storage_account_name
from ..base import StorageBrokerAdapter
from .auth import AzureClients, load_azure_credentials, resolve_environment

logger = logging.getLogger(__name__)

STORAGE_ACCOUNT_RESOURCE_TYPE = "Microsoft.Storage/storageAccounts"
ACCESS_KEY_NAMES = ("key1", "key2")

STATE_IN_PROGRESS = "in progress"
STATE_SUCCEEDED = "succeeded"
STATE_FAILED = "failed"
STATE_GONE = "Gone"
GONE_DESCRIPTION = "The service instance is gone"

_IN_PROGRESS_STATES = {"creating", "resolvingdns"}

# container access type → ``public_access`` argument of create_container
_PUBLIC_ACCESS = {"blob": "blob", "container": "container"}


class AzureStorageAdapter(StorageBrokerAdapter):
    """Serves broker operations from Azure Storage accounts."""

    def __init__(
        self,
        clients: AzureClients,
        account_kind: str = "StorageV2",
        allow_blob_public_access: bool = True,
    ) -> None:
        self._clients = clients
        self.account_kind = account_kind
        self.allow_blob_public_access = allow_blob_public_access

    @classmethod
    def from_settings(cls, environment: str, settings: Settings) -> "AzureStorageAdapter":
        """Authenticate against the named Azure cloud using configured credentials."""
        cloud = resolve_environment(environment)
        clients = AzureClients(load_azure_credentials(settings.credentials_path), cloud)
        # Malformed service principal values surface here, before any provider call
        clients.credential
        return cls(
            clients,
            account_kind=settings.account_kind,
            allow_blob_public_access=_public_access(settings.container_access_type) is not None,
        )

    @property
    def provider_type(self) -> str:
        return "azure"

    @property
    def clients(self) -> AzureClients:
        return self._clients

    # ── Provision ─────────────────────────────────────────────────────────

    def create_instance(
        self,
        resource_group_name: str,
        storage_account_name: str,
        location: str,
        account_type: str,
    ) -> None:
        self._create_resource_group(resource_group_name, location)
        self._create_storage_account(resource_group_name, storage_account_name, location, account_type)

    def _create_resource_group(self, resource_group_name: str, location: str) -> None:
        try:
            self.clients.resource.resource_groups.create_or_update(
                resource_group_name, {"location": location}
            )
        except HttpResponseError as e:
            if e.status_code not in (HTTPStatus.ACCEPTED, HTTPStatus.CREATED):
                raise ProviderError("Creating resource group", resource_group_name, e) from e
        except AzureError as e:
            raise ProviderError("Creating resource group", resource_group_name, e) from e
        logger.info("Creation initiated %s", resource_group_name)

    def _create_storage_account(
        self,
        resource_group_name: str,
        storage_account_name: str,
        location: str,
        account_type: str,
    ) -> None:
        resource = f"{resource_group_name}.{storage_account_name}"
        if not is_valid_storage_account_name(storage_account_name):
            logger.warning("%s does not look like a valid storage account name", storage_account_name)

        try:
            availability = self.clients.storage.storage_accounts.check_name_availability(
                {"name": storage_account_name, "type": STORAGE_ACCOUNT_RESOURCE_TYPE}
            )
        except AzureError as e:
            raise ProviderError("Checking name of storage account", storage_account_name, e) from e
        if not availability.name_available:
            raise NameUnavailableError(storage_account_name, availability.message or "")
        logger.info("Storage account name %s is available", storage_account_name)

        parameters: dict[str, Any] = {
            "location": location,
            "sku": {"name": account_type},
            "kind": self.account_kind,
            "allow_blob_public_access": self.allow_blob_public_access,
        }
        try:
            self.clients.storage.storage_accounts.begin_create(
                resource_group_name, storage_account_name, parameters, polling=False
            )
        except HttpResponseError as e:
            if e.status_code != HTTPStatus.ACCEPTED:
                raise ProviderError("Creating storage account", resource, e) from e
        except AzureError as e:
            raise ProviderError("Creating storage account", resource, e) from e
        logger.info("Creation initiated %s", resource)

    # ── Poll ──────────────────────────────────────────────────────────────

    def get_instance_state(
        self, resource_group_name: str, storage_account_name: str
    ) -> LastOperationResponse:
        try:
            account = self.clients.storage.storage_accounts.get_properties(
                resource_group_name, storage_account_name
            )
        except HttpResponseError as e:
            if e.status_code == HTTPStatus.NOT_FOUND:
                return LastOperationResponse(state=STATE_GONE, description=GONE_DESCRIPTION)
            raise ProviderError(
                "Getting instance state of", f"{resource_group_name}.{storage_account_name}", e
            ) from e
        except AzureError as e:
            raise ProviderError(
                "Getting instance state of", f"{resource_group_name}.{storage_account_name}", e
            ) from e

        return _map_provisioning_state(_state_value(account.provisioning_state))

    # ── Bind ──────────────────────────────────────────────────────────────

    def get_access_keys(
        self,
        resource_group_name: str,
        storage_account_name: str,
        container_name: str,
        container_access_type: str,
    ) -> tuple[str, str]:
        resource = f"{resource_group_name}.{storage_account_name}"
        try:
            result = self.clients.storage.storage_accounts.list_keys(
                resource_group_name, storage_account_name
            )
        except AzureError as e:
            raise ProviderError("Getting access keys of", resource, e) from e

        key1, key2 = _pick_keys(result.keys or [])
        if not key1 or not key2:
            raise ProviderError("Getting access keys of", resource, "account returned no keys")

        self._create_container(storage_account_name, key1, container_name, container_access_type)
        return key1, key2

    def _create_container(
        self,
        storage_account_name: str,
        account_key: str,
        container_name: str,
        container_access_type: str,
    ) -> None:
        resource = f"{storage_account_name}.{container_name}"
        try:
            with self.clients.blob_service(storage_account_name, account_key) as blob_service:
                blob_service.create_container(
                    container_name, public_access=_public_access(container_access_type)
                )
        except ResourceExistsError:
            logger.info("Storage container %s already exists", resource)
            return
        except (AzureError, ValueError) as e:
            raise ProviderError("Creating storage container", resource, e) from e
        logger.info("Created storage container %s", resource)

    # ── Deprovision ───────────────────────────────────────────────────────

    def delete_instance(self, resource_group_name: str, storage_account_name: str) -> None:
        resource = f"{resource_group_name}.{storage_account_name}"
        try:
            self.clients.storage.storage_accounts.delete(resource_group_name, storage_account_name)
        except HttpResponseError as e:
            raise ProviderError("Deleting", resource, f"status {e.status_code} {e.reason}: {e.message}") from e
        except AzureError as e:
            raise ProviderError("Deleting", resource, e) from e
        logger.info("Deleting of %s succeeded", resource)

    # ── Unbind ────────────────────────────────────────────────────────────

    def regenerate_access_keys(self, resource_group_name: str, storage_account_name: str) -> None:
        resource = f"{resource_group_name}.{storage_account_name}"
        for key_name in ACCESS_KEY_NAMES:
            try:
                self.clients.storage.storage_accounts.regenerate_key(
                    resource_group_name, storage_account_name, {"key_name": key_name}
                )
            except AzureError as e:
                raise ProviderError(f"Regenerating access key {key_name} of", resource, e) from e
            logger.info("Regenerated access key %s of %s", key_name, resource)


def _public_access(container_access_type: str) -> Optional[str]:
    return _PUBLIC_ACCESS.get(container_access_type.strip().lower())


def _state_value(state: Optional[Any]) -> str:
    """Raw provisioning state string (SDK enums carry it in ``.value``)."""
    if state is None:
        return ""
    return str(getattr(state, "value", state))


def _map_provisioning_state(raw: str) -> LastOperationResponse:
    """Map an Azure provisioning state to a broker last-operation record."""
    normalized = raw.lower()
    if normalized in _IN_PROGRESS_STATES:
        return LastOperationResponse(
            state=STATE_IN_PROGRESS,
            description=f"Creating the service instance, state: {raw}",
        )
    if normalized == "succeeded":
        return LastOperationResponse(
            state=STATE_SUCCEEDED,
            description=f"Successfully created the service instance, state: {raw}",
        )
    return LastOperationResponse(
        state=STATE_FAILED,
        description=f"Failed to create the service instance, state: {raw}",
    )


def _pick_keys(keys: list[Any]) -> tuple[str, str]:
    """Return (key1, key2), by key name when present, otherwise by position."""
    by_name = {(k.key_name or "").lower(): k.value or "" for k in keys}
    values = [k.value or "" for k in keys] + ["", ""]
    key1 = by_name.get("key1") or values[0]
    key2 = by_name.get("key2") or values[1]
    return key1, key2
