"""Shared workshop topology and one Container App per participant."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pulumi
from pulumi_azure_native import app, authorization, keyvault, operationalinsights, resources

from ..config.audience import AudienceMember
from ..config.settings import Settings
from ..context import BuildContext
from ..errors import MissingSharedKeyError
from ..naming import MEMBER_SLUG_MAX, to_azure_slug, to_container_app_name, to_key_vault_name

logger = logging.getLogger(__name__)

LOG_SKU = "PerGB2018"
LOG_RETENTION_DAYS = 30

CONTAINER_NAME = "web"
APP_CPU = 0.25
APP_MEMORY = "0.5Gi"
MIN_REPLICAS = 0
MAX_REPLICAS = 1


@dataclass
class MemberResources:
    email: str
    display_name: str
    container_app: app.ContainerApp
    key_vault: keyvault.Vault

    @property
    def container_app_name(self) -> pulumi.Output[str]:
        return self.container_app.name

    @property
    def key_vault_name(self) -> pulumi.Output[str]:
        return self.key_vault.name

    @property
    def app_id(self) -> pulumi.Output[str]:
        return self.container_app.id


@dataclass
class TopologyOutputs:
    """Everything the access grants need from the topology."""

    resource_group_id: pulumi.Output[str]
    container_env_id: pulumi.Output[str]
    shared_key_vault_id: pulumi.Output[str]
    members: list[MemberResources] = field(default_factory=list)
    container_app_ids_by_email: dict[str, pulumi.Output[str]] = field(default_factory=dict)


def require_shared_key(key: str | None) -> str:
    """Pass the workspace key through, or abort the build if it is missing.

    There is no fallback: an empty key would leave the environment unable
    to ship logs without any error at deploy time.
    """
    if not key:
        raise MissingSharedKeyError(
            "Log Analytics primarySharedKey is undefined. Check workspace keys/permissions."
        )
    return key


def _declare_vault(resource_name: str, ctx: BuildContext, vault_name: str) -> keyvault.Vault:
    rg: resources.ResourceGroup = ctx.require("resource_group")
    return keyvault.Vault(
        resource_name,
        resource_group_name=rg.name,
        vault_name=vault_name,
        location=rg.location,
        properties=keyvault.VaultPropertiesArgs(
            tenant_id=ctx.require("tenant_id"),
            sku=keyvault.SkuArgs(family="A", name=keyvault.SkuName.STANDARD),
            enable_rbac_authorization=True,
            public_network_access="Enabled",
        ),
    )


def declare_shared(ctx: BuildContext) -> None:
    """Declare the resource group, workspace, environment and shared vault."""
    s = ctx.settings
    logger.info("[topology] Declaring shared resources in %s (%s)",
                s.resource_group_name, s.location)

    rg = resources.ResourceGroup(
        "rg",
        resource_group_name=s.resource_group_name,
        location=s.location,
        opts=pulumi.ResourceOptions(protect=True),
    )
    ctx.resource_group = rg

    workspace = operationalinsights.Workspace(
        "log",
        resource_group_name=rg.name,
        location=rg.location,
        sku=operationalinsights.WorkspaceSkuArgs(name=LOG_SKU),
        retention_in_days=LOG_RETENTION_DAYS,
    )
    ctx.workspace = workspace

    keys = operationalinsights.get_shared_keys_output(
        resource_group_name=rg.name,
        workspace_name=workspace.name,
    )
    shared_key = keys.primary_shared_key.apply(require_shared_key)

    ctx.environment = app.ManagedEnvironment(
        "env",
        resource_group_name=rg.name,
        location=rg.location,
        environment_name=s.container_env_name,
        app_logs_configuration=app.AppLogsConfigurationArgs(
            destination="log-analytics",
            log_analytics_configuration=app.LogAnalyticsConfigurationArgs(
                customer_id=workspace.customer_id,
                shared_key=shared_key,
            ),
        ),
    )

    ctx.tenant_id = authorization.get_client_config_output().tenant_id
    ctx.shared_vault = _declare_vault("kv-shared", ctx, s.shared_key_vault_name)


def container_app_configuration(settings: Settings) -> app.ConfigurationArgs:
    return app.ConfigurationArgs(
        ingress=app.IngressArgs(
            external=True,
            target_port=settings.app_port,
            transport="auto",
        ),
    )


def container_app_template(settings: Settings) -> app.TemplateArgs:
    return app.TemplateArgs(
        containers=[
            app.ContainerArgs(
                name=CONTAINER_NAME,
                image=settings.app_image,
                resources=app.ContainerResourcesArgs(cpu=APP_CPU, memory=APP_MEMORY),
            ),
        ],
        scale=app.ScaleArgs(min_replicas=MIN_REPLICAS, max_replicas=MAX_REPLICAS),
    )


def member_tags(member: AudienceMember, settings: Settings) -> dict[str, str]:
    return {
        "audienceEmail": member.email,
        "audienceName": member.display_name,
        "workshop": settings.workshop_tag,
    }


def declare_member(ctx: BuildContext, member: AudienceMember) -> MemberResources:
    """Declare the Container App (and optional own vault) for one participant."""
    s = ctx.settings
    rg: resources.ResourceGroup = ctx.require("resource_group")
    env: app.ManagedEnvironment = ctx.require("environment")

    slug = to_azure_slug(member.display_name, MEMBER_SLUG_MAX)
    app_name = to_container_app_name(member.display_name, prefix=s.app_name_prefix)
    logger.info("[topology] Declaring container app %s for %s", app_name, member.email)

    container_app = app.ContainerApp(
        f"app-{slug}",
        resource_group_name=rg.name,
        container_app_name=app_name,
        location=rg.location,
        managed_environment_id=env.id,
        configuration=container_app_configuration(s),
        template=container_app_template(s),
        tags=member_tags(member, s),
    )

    if s.per_member_vaults:
        vault_name = to_key_vault_name(member.display_name, prefix=s.key_vault_prefix)
        logger.info("[topology] Declaring key vault %s for %s", vault_name, member.email)
        vault = _declare_vault(f"kv-{slug}", ctx, vault_name)
    else:
        vault = ctx.require("shared_vault")

    return MemberResources(
        email=member.email,
        display_name=member.display_name,
        container_app=container_app,
        key_vault=vault,
    )


def build_topology(ctx: BuildContext) -> TopologyOutputs:
    """Declare the shared resources, then one member branch per participant."""
    declare_shared(ctx)
    outputs = TopologyOutputs(
        resource_group_id=ctx.require("resource_group").id,
        container_env_id=ctx.require("environment").id,
        shared_key_vault_id=ctx.require("shared_vault").id,
    )
    for member in ctx.audience:
        member_resources = declare_member(ctx, member)
        outputs.members.append(member_resources)
        outputs.container_app_ids_by_email[member.email] = member_resources.app_id
    logger.info("[topology] %d participant apps declared", len(outputs.members))
    return outputs
