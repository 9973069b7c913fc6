"""Build context shared by every declaration step.

One :class:`BuildContext` is created per program run and passed to the
topology and access builders.  It owns the registry of declared resource
handles, so no step relies on module-level state.  Handles are Pulumi
resources whose properties are ``Output`` futures; a step that needs a
provider-side value maps over the ``Output`` and the engine schedules it
once the value resolves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pulumi
from pulumi_azure_native import app, keyvault, operationalinsights, resources

from .config.audience import AudienceMember
from .config.settings import Settings
from .errors import WorkshopError


@dataclass
class BuildContext:
    settings: Settings
    audience: tuple[AudienceMember, ...]

    resource_group: resources.ResourceGroup | None = None
    workspace: operationalinsights.Workspace | None = None
    environment: app.ManagedEnvironment | None = None
    shared_vault: keyvault.Vault | None = None
    tenant_id: pulumi.Output[str] | None = None

    def require(self, attr: str) -> Any:
        """Return the handle stored under *attr*, failing if not declared yet."""
        handle = getattr(self, attr)
        if handle is None:
            raise WorkshopError(
                f"{attr} has not been declared; declare shared resources first"
            )
        return handle
