"""Naming service — deterministic Azure resource names derived from an instance id."""

from __future__ import annotations

import re
from dataclasses import dataclass

RESOURCE_GROUP_NAME_PREFIX = "cloud-foundry-"
STORAGE_ACCOUNT_NAME_PREFIX = "cf"
CONTAINER_NAME_PREFIX = "cloud-foundry-"

# Characters of the instance id kept after the storage account prefix.
STORAGE_ACCOUNT_ID_LENGTH = 22

_STORAGE_ACCOUNT_NAME_RE = re.compile(r"^[a-z0-9]{3,24}$")


@dataclass(frozen=True)
class ResourceNames:
    resource_group: str
    storage_account: str
    container: str


def resource_group_name(instance_id: str, prefix: str = RESOURCE_GROUP_NAME_PREFIX) -> str:
    return prefix + instance_id


def storage_account_name(instance_id: str, prefix: str = STORAGE_ACCOUNT_NAME_PREFIX) -> str:
    """Return ``prefix`` + the id without hyphens, cut to 22 characters.

    Ids shorter than 22 characters after stripping are used whole.
    """
    stripped = instance_id.replace("-", "")
    if len(stripped) > STORAGE_ACCOUNT_ID_LENGTH:
        stripped = stripped[:STORAGE_ACCOUNT_ID_LENGTH]
    return prefix + stripped


def container_name(instance_id: str, prefix: str = CONTAINER_NAME_PREFIX) -> str:
    return prefix + instance_id


def derive_names(
    instance_id: str,
    resource_group_prefix: str = RESOURCE_GROUP_NAME_PREFIX,
    storage_account_prefix: str = STORAGE_ACCOUNT_NAME_PREFIX,
    container_prefix: str = CONTAINER_NAME_PREFIX,
) -> ResourceNames:
    """Derive every resource name used for one service instance."""
    return ResourceNames(
        resource_group=resource_group_name(instance_id, resource_group_prefix),
        storage_account=storage_account_name(instance_id, storage_account_prefix),
        container=container_name(instance_id, container_prefix),
    )


def is_valid_storage_account_name(name: str) -> bool:
    """Return True if *name* meets Azure's rules: 3-24 lowercase letters or digits."""
    return bool(_STORAGE_ACCOUNT_NAME_RE.match(name))
