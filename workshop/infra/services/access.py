"""Guest invitations and role assignments for workshop participants.

Each participant is invited as an Entra guest and then granted:

- a directory role (Cloud Application Administrator by default),
- Reader on the workshop resource group,
- Key Vault Administrator on the shared vault,
- Owner or Contributor on their own Container App,
- Contributor on the shared Container Apps environment.

Every RBAC assignment gets its own random GUID as the assignment name,
separate from the role definition it binds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pulumi
import pulumi_azuread as azuread
import pulumi_random
from pulumi_azure_native import authorization

from ..config.audience import AudienceMember
from ..config.settings import Settings
from ..context import BuildContext
from ..naming import resource_key
from .roles import (
    CONTRIBUTOR_ROLE_ID,
    KEY_VAULT_ADMINISTRATOR_ROLE_ID,
    READER_ROLE_ID,
    app_role_definition_id,
    directory_role_id,
    role_definition_id,
)
from .topology import TopologyOutputs

logger = logging.getLogger(__name__)


@dataclass
class MemberGrants:
    email: str
    display_name: str
    invitation: azuread.Invitation
    directory_role: azuread.DirectoryRoleAssignment
    group_reader: authorization.RoleAssignment
    vault_admin: authorization.RoleAssignment
    environment_contributor: authorization.RoleAssignment
    app_access: authorization.RoleAssignment | None = None

    @property
    def invited_user_id(self) -> pulumi.Output[str]:
        return self.invitation.user_id


def invite(member: AudienceMember, settings: Settings) -> azuread.Invitation:
    return azuread.Invitation(
        f"invite-{resource_key(member.email)}",
        user_email_address=member.email,
        user_display_name=member.display_name,
        redirect_url=settings.invite_redirect_url,
    )


def assign_role(
    label: str,
    member: AudienceMember,
    principal_id: pulumi.Input[str],
    role_definition: str,
    scope: pulumi.Input[str],
) -> authorization.RoleAssignment:
    """Bind *role_definition* to the member's guest identity at *scope*."""
    name = f"{label}-{resource_key(member.email)}"
    assignment_name = pulumi_random.RandomUuid(name).result
    return authorization.RoleAssignment(
        name,
        role_assignment_name=assignment_name,
        principal_id=principal_id,
        principal_type=authorization.PrincipalType.USER,
        role_definition_id=role_definition,
        scope=scope,
    )


def grant_member(
    ctx: BuildContext,
    topology: TopologyOutputs,
    member: AudienceMember,
    dir_role_id: pulumi.Input[str],
) -> MemberGrants:
    s = ctx.settings
    key = resource_key(member.email)
    invitation = invite(member, s)
    user_id = invitation.user_id

    directory_role = azuread.DirectoryRoleAssignment(
        f"dirrole-{key}",
        role_id=dir_role_id,
        principal_object_id=user_id,
    )
    grants = MemberGrants(
        email=member.email,
        display_name=member.display_name,
        invitation=invitation,
        directory_role=directory_role,
        group_reader=assign_role(
            "rg-reader", member, user_id,
            role_definition_id(READER_ROLE_ID), topology.resource_group_id,
        ),
        vault_admin=assign_role(
            "kv-ra", member, user_id,
            role_definition_id(KEY_VAULT_ADMINISTRATOR_ROLE_ID), topology.shared_key_vault_id,
        ),
        environment_contributor=assign_role(
            "env-contrib", member, user_id,
            role_definition_id(CONTRIBUTOR_ROLE_ID), topology.container_env_id,
        ),
    )

    app_scope = topology.container_app_ids_by_email.get(member.email)
    if app_scope is None:
        logger.warning("[access] No container app for %s -- skipping app role", member.email)
    else:
        grants.app_access = assign_role(
            "app-ra", member, user_id, app_role_definition_id(s.app_role), app_scope,
        )
    return grants


def grant_access(ctx: BuildContext, topology: TopologyOutputs) -> list[MemberGrants]:
    """Invite every participant and bind their roles, in audience order."""
    s = ctx.settings
    dir_role_id = directory_role_id(s.directory_role_strategy, s.directory_role_name)
    logger.info(
        "[access] Granting %s, Reader, Key Vault Administrator, %s (own app) and "
        "Contributor (environment) to %d participants",
        s.directory_role_name, s.app_role.value, len(ctx.audience),
    )
    return [grant_member(ctx, topology, member, dir_role_id) for member in ctx.audience]
