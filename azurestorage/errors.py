"""Exception taxonomy for broker operations."""

from __future__ import annotations


class AzureStorageError(Exception):
    """Base class for every error the CLI reports to the caller."""
    pass


class ConfigurationError(AzureStorageError):
    """Credentials, cloud environment or catalog could not be resolved."""
    pass


class DecodeError(AzureStorageError):
    """The parameters argument is not a usable service instance."""
    pass


class ProviderError(AzureStorageError):
    """An Azure API call failed (transport error or non-success status)."""

    def __init__(self, action: str, resource: str, detail: str | Exception = ""):
        self.action = action
        self.resource = resource
        self.detail = str(detail)
        message = f"{action} {resource} failed"
        if self.detail:
            message += f": {self.detail}"
        super().__init__(message)


class NameUnavailableError(ProviderError):
    """The storage account name is already taken."""

    def __init__(self, account_name: str, reason: str = ""):
        self.account_name = account_name
        super().__init__(
            "Checking name of storage account",
            account_name,
            f"{account_name} is unavailable" + (f" ({reason})" if reason else ""),
        )
