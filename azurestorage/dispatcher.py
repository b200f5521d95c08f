"""Dispatcher — maps one broker request to one adapter call and its output line."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from .config import Settings, get_settings
from .errors import ConfigurationError, DecodeError
from .models import Credentials, ServiceInstance
from .naming import ResourceNames, derive_names
from .providers.base import StorageBrokerAdapter

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    CATALOG = "Catalog"
    PROVISION = "Provision"
    POLL = "Poll"
    BIND = "Bind"
    UNBIND = "Unbind"
    DEPROVISION = "Deprovision"


@dataclass(frozen=True)
class BrokerRequest:
    """Everything one CLI invocation asks for."""

    environment: str
    operation: str
    parameters: str = ""


AdapterFactory = Callable[[str, Settings], StorageBrokerAdapter]


def _azure_adapter(environment: str, settings: Settings) -> StorageBrokerAdapter:
    # Imported here so Catalog never loads the Azure SDK
    from .providers.azure.adapter import AzureStorageAdapter

    return AzureStorageAdapter.from_settings(environment, settings)


def read_catalog(path: Path) -> str:
    """Return the catalog document exactly as stored."""
    try:
        return path.read_text()
    except OSError as e:
        raise ConfigurationError(f"Error reading catalog {path}: {e}") from e


def decode_instance(parameters: str) -> ServiceInstance:
    """Decode the parameters JSON. An unparsable blob or an empty id is rejected."""
    try:
        instance = ServiceInstance.model_validate_json(parameters or "")
    except ValidationError as e:
        raise DecodeError(f"Invalid service instance parameters: {e}") from e
    if not instance.id:
        raise DecodeError("Invalid service instance parameters: 'id' is required")
    return instance


def dispatch(
    request: BrokerRequest,
    settings: Optional[Settings] = None,
    adapter_factory: Optional[AdapterFactory] = None,
) -> Optional[str]:
    """Run *request* and return the line to print, or None when there is nothing to print.

    Provision returning means Azure accepted the requests, not that the
    account is ready; callers poll for completion. Failures propagate as
    :class:`~azurestorage.errors.AzureStorageError` and nothing already
    created is rolled back.
    """
    settings = settings or get_settings()

    try:
        operation = Operation(request.operation)
    except ValueError:
        logger.debug("Ignoring unknown operation %r", request.operation)
        return None

    if operation is Operation.CATALOG:
        return read_catalog(settings.effective_catalog_path)

    instance = decode_instance(request.parameters)
    names = derive_names(
        instance.id,
        resource_group_prefix=settings.resource_group_prefix,
        storage_account_prefix=settings.storage_account_prefix,
        container_prefix=settings.container_prefix,
    )
    adapter = (adapter_factory or _azure_adapter)(request.environment, settings)
    logger.info("%s %s (%s)", operation.value, instance.id, adapter.provider_type)
    return _run(operation, adapter, names, settings)


def _run(
    operation: Operation,
    adapter: StorageBrokerAdapter,
    names: ResourceNames,
    settings: Settings,
) -> Optional[str]:
    if operation is Operation.PROVISION:
        adapter.create_instance(
            names.resource_group, names.storage_account, settings.location, settings.account_type
        )
        return None

    if operation is Operation.DEPROVISION:
        adapter.delete_instance(names.resource_group, names.storage_account)
        return None

    if operation is Operation.POLL:
        response = adapter.get_instance_state(names.resource_group, names.storage_account)
        return response.model_dump_json()

    if operation is Operation.BIND:
        key1, key2 = adapter.get_access_keys(
            names.resource_group,
            names.storage_account,
            names.container,
            settings.container_access_type,
        )
        return Credentials(
            storage_account_name=names.storage_account,
            container_name=names.container,
            primary_access_key=key1,
            secondary_access_key=key2,
        ).model_dump_json()

    if operation is Operation.UNBIND:
        adapter.regenerate_access_keys(names.resource_group, names.storage_account)
    return None
