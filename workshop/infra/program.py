"""Workshop stack program.

A single linear declaration pass: settings and audience, then the shared
topology, then one branch of resources and grants per participant, then
the stack outputs operators read after ``pulumi up``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import pulumi

from .config.audience import AudienceMember, check_unique_emails, load_audience
from .config.settings import Settings, get_settings
from .context import BuildContext
from .services.access import MemberGrants, grant_access
from .services.topology import TopologyOutputs, build_topology

logger = logging.getLogger(__name__)


def build(
    settings: Settings | None = None,
    audience: Sequence[AudienceMember] | None = None,
) -> tuple[BuildContext, TopologyOutputs, list[MemberGrants]]:
    """Declare every resource and return the handles for export/inspection."""
    if settings is None:
        settings = get_settings()
    if audience is None:
        members = load_audience(settings.audience_file)
    else:
        members = tuple(audience)
        check_unique_emails(members)

    ctx = BuildContext(settings=settings, audience=members)
    topology = build_topology(ctx)
    grants = grant_access(ctx, topology)
    return ctx, topology, grants


def stack_outputs(
    ctx: BuildContext,
    topology: TopologyOutputs,
    grants: list[MemberGrants],
) -> dict[str, Any]:
    rg = ctx.require("resource_group")
    return {
        "shared": {
            "resourceGroupName": rg.name,
            "containerEnvName": ctx.require("environment").name,
            "keyVaultName": ctx.require("shared_vault").name,
            "location": rg.location,
        },
        "audienceResources": [
            {
                "email": m.email,
                "displayName": m.display_name,
                "containerAppName": m.container_app_name,
                "keyVaultName": m.key_vault_name,
            }
            for m in topology.members
        ],
        "invited": [
            {
                "email": g.email,
                "displayName": g.display_name,
                "invitedUserId": g.invited_user_id,
            }
            for g in grants
        ],
    }


def main() -> None:
    """Entry point used by the root ``__main__.py`` Pulumi runs."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(name)s  %(levelname)s  %(message)s",
    )
    ctx, topology, grants = build()
    for name, value in stack_outputs(ctx, topology, grants).items():
        pulumi.export(name, value)
    logger.info("Declared workshop stack for %d participants", len(ctx.audience))
