"""Abstract base class for storage broker adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import LastOperationResponse


class StorageBrokerAdapter(ABC):
    """Interface a cloud storage backend must implement to serve the broker.

    Every method performs a short, synchronous sequence of provider calls.
    Failures raise :class:`~azurestorage.errors.AzureStorageError` subclasses;
    nothing is retried and nothing is rolled back.
    """

    @property
    @abstractmethod
    def provider_type(self) -> str:
        """Return the provider type identifier (e.g. 'azure')."""
        ...

    @abstractmethod
    def create_instance(
        self,
        resource_group_name: str,
        storage_account_name: str,
        location: str,
        account_type: str,
    ) -> None:
        """Start creating the resource group and storage account.

        Returns once the requests are accepted; completion is observed with
        :meth:`get_instance_state`.
        """
        ...

    @abstractmethod
    def get_instance_state(
        self, resource_group_name: str, storage_account_name: str
    ) -> LastOperationResponse:
        """Derive the last-operation state from the live storage account."""
        ...

    @abstractmethod
    def get_access_keys(
        self,
        resource_group_name: str,
        storage_account_name: str,
        container_name: str,
        container_access_type: str,
    ) -> tuple[str, str]:
        """Return both access keys, creating the container if it is missing."""
        ...

    @abstractmethod
    def delete_instance(self, resource_group_name: str, storage_account_name: str) -> None:
        """Delete the storage account. The resource group is left in place."""
        ...

    @abstractmethod
    def regenerate_access_keys(self, resource_group_name: str, storage_account_name: str) -> None:
        """Rotate key1, then key2."""
        ...
