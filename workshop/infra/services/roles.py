"""Azure RBAC and Entra directory role identifiers used for participant access."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import pulumi
import pulumi_azuread as azuread

from ..config.settings import AppRole, DirectoryRoleStrategy
from ..errors import RoleNotFoundError

logger = logging.getLogger(__name__)

# Built-in Azure role definition GUIDs.
READER_ROLE_ID = "acdd72a7-3385-48ef-bd42-f606fba81ae7"
KEY_VAULT_ADMINISTRATOR_ROLE_ID = "00482a5a-887f-4fb3-b363-3b7fe8e74483"
OWNER_ROLE_ID = "8e3af657-a8ff-443c-a75c-2fe8c4bcb635"
CONTRIBUTOR_ROLE_ID = "b24988ac-6180-42a0-ab88-20f7382dd24c"

_APP_ROLE_IDS: dict[AppRole, str] = {
    AppRole.owner: OWNER_ROLE_ID,
    AppRole.contributor: CONTRIBUTOR_ROLE_ID,
}

# Entra built-in directory role template ids, keyed by lowercase display name.
CLOUD_APPLICATION_ADMINISTRATOR = "Cloud Application Administrator"
WELL_KNOWN_DIRECTORY_ROLES: dict[str, str] = {
    "cloud application administrator": "158c047a-c907-4556-b7ef-446551a6b5f7",
    "application administrator": "9b895d92-2cd3-44c7-9d02-a6ac2d5ea5c3",
    "global reader": "f2ef992c-3afb-46b9-b7cf-a126ee74c451",
}


def role_definition_id(role_guid: str) -> str:
    return f"/providers/Microsoft.Authorization/roleDefinitions/{role_guid}"


def app_role_definition_id(role: AppRole) -> str:
    return role_definition_id(_APP_ROLE_IDS[role])


def match_directory_role(templates: Iterable[Any], name: str) -> str:
    """Return the object id of the template whose display name is *name*.

    The comparison is exact apart from case.  Raises
    :class:`RoleNotFoundError` when nothing matches, so a typo in the role
    name stops the deployment instead of granting nothing.
    """
    wanted = name.strip().lower()
    for template in templates:
        if (template.display_name or "").lower() == wanted:
            return template.object_id
    raise RoleNotFoundError(
        f"Directory role {name!r} was not found in the tenant's role catalog"
    )


def directory_role_id(
    strategy: DirectoryRoleStrategy, name: str,
) -> pulumi.Input[str]:
    """Resolve the directory role to grant, by fixed id or catalog lookup."""
    if strategy is DirectoryRoleStrategy.fixed:
        role_id = WELL_KNOWN_DIRECTORY_ROLES.get(name.strip().lower())
        if role_id is None:
            raise RoleNotFoundError(
                f"No well-known template id for directory role {name!r}; "
                "set WORKSHOP_DIRECTORY_ROLE_STRATEGY=lookup to resolve it by name"
            )
        logger.info("[roles] Using fixed template id %s for %s", role_id, name)
        return role_id

    logger.info("[roles] Resolving directory role %r from the tenant catalog", name)
    templates = azuread.get_directory_role_templates_output()
    return templates.role_templates.apply(lambda found: match_directory_role(found, name))
