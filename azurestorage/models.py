"""Pydantic models for the broker's inputs and outputs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceInstance(BaseModel):
    """Service instance decoded from the parameters argument. Only ``id`` is used."""

    id: str = ""
    organization_guid: str = ""
    plan_id: str = ""
    service_id: str = ""
    space_guid: str = ""
    parameters: Any = None

    model_config = {"frozen": True, "extra": "ignore"}


class Credentials(BaseModel):
    storage_account_name: str
    container_name: str
    primary_access_key: str
    secondary_access_key: str


class LastOperationResponse(BaseModel):
    state: str = Field(..., description="'in progress', 'succeeded', 'failed' or 'Gone'")
    description: str = ""
