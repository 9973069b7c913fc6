"""Shared pytest fixtures for workshop.infra tests."""

from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import Any

import pulumi
import pytest

CUSTOMER_ID = "00000000-0000-0000-0000-00000000c0de"
TENANT_ID = "11111111-1111-1111-1111-111111111111"
CLOUD_APP_ADMIN_TEMPLATE = "158c047a-c907-4556-b7ef-446551a6b5f7"

# Input that carries the Azure-side name for each resource type.
_NAME_INPUTS = {
    "azure-native:resources:ResourceGroup": "resourceGroupName",
    "azure-native:operationalinsights:Workspace": "workspaceName",
    "azure-native:app:ManagedEnvironment": "environmentName",
    "azure-native:keyvault:Vault": "vaultName",
    "azure-native:app:ContainerApp": "containerAppName",
    "azure-native:authorization:RoleAssignment": "roleAssignmentName",
}


class WorkshopMocks(pulumi.runtime.Mocks):
    """Echo inputs back as state and fill in the provider-computed fields.

    Tests can blank out ``shared_key`` or ``role_templates`` to simulate a
    workspace without keys or a tenant whose catalog lacks the role.
    """

    def __init__(self) -> None:
        self.shared_key = "primary-key"
        self.role_templates: list[dict[str, str]] = [
            {
                "description": "Can create and manage all aspects of app registrations.",
                "displayName": "Cloud Application Administrator",
                "objectId": CLOUD_APP_ADMIN_TEMPLATE,
            },
        ]

    def new_resource(self, args: pulumi.runtime.MockResourceArgs) -> tuple[str, dict[str, Any]]:
        outputs = dict(args.inputs)
        name_input = _NAME_INPUTS.get(args.typ)
        if name_input:
            outputs["name"] = args.inputs.get(name_input) or args.name
        if args.typ == "azure-native:operationalinsights:Workspace":
            outputs["customerId"] = CUSTOMER_ID
        elif args.typ == "random:index/randomUuid:RandomUuid":
            outputs["result"] = str(uuid.uuid5(uuid.NAMESPACE_URL, args.name))
        elif args.typ == "azuread:index/invitation:Invitation":
            outputs["userId"] = f"user-{args.name}"
        return f"/mock/{args.name}", outputs

    def call(self, args: pulumi.runtime.MockCallArgs) -> dict[str, Any]:
        if args.token == "azure-native:operationalinsights:getSharedKeys":
            return {"primarySharedKey": self.shared_key, "secondarySharedKey": "secondary-key"}
        if args.token == "azure-native:authorization:getClientConfig":
            return {
                "clientId": "client",
                "objectId": "object",
                "subscriptionId": "subscription",
                "tenantId": TENANT_ID,
            }
        if args.token == "azuread:index/getDirectoryRoleTemplates:getDirectoryRoleTemplates":
            return {
                "id": "templates",
                "objectIds": [t["objectId"] for t in self.role_templates],
                "roleTemplates": self.role_templates,
            }
        return {}


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in list(os.environ):
        if key.startswith("WORKSHOP_"):
            monkeypatch.delenv(key)
    dotenv = tmp_path / ".env"
    monkeypatch.setenv("DOTENV_PATH", str(dotenv))
    return dotenv


@pytest.fixture(autouse=True)
def _reset_singletons(_isolate_env: Path):
    from workshop.infra.util.singletons import reset_all_singletons

    reset_all_singletons()
    yield
    reset_all_singletons()


@pytest.fixture(autouse=True)
def pulumi_mocks() -> WorkshopMocks:
    mocks = WorkshopMocks()
    pulumi.runtime.set_mocks(mocks, preview=False)
    return mocks


@pytest.fixture()
def dotenv(_isolate_env: Path) -> Path:
    return _isolate_env
