"""Stack settings -- read from the environment and an optional ``.env`` file."""

from __future__ import annotations

import enum
import logging
import os
from pathlib import Path
from typing import TypeVar

from ..errors import ConfigError
from ..util.env_file import EnvFile
from ..util.singletons import register_singleton

logger = logging.getLogger(__name__)

ENV_PREFIX = "WORKSHOP_"

E = TypeVar("E", bound=enum.Enum)


class AppRole(enum.Enum):
    """Azure role each participant receives on their own Container App."""

    owner = "Owner"
    contributor = "Contributor"


class DirectoryRoleStrategy(enum.Enum):
    """How the directory role assigned to guests is identified."""

    fixed = "fixed"
    lookup = "lookup"


class Settings:
    """Naming, location and access constants for one workshop stack.

    Every value can be overridden with a ``WORKSHOP_*`` variable, either
    in the process environment or in the ``.env`` file named by
    ``DOTENV_PATH`` (default ``./.env``).  The process environment wins.
    """

    def __init__(self) -> None:
        self.env = EnvFile(os.getenv("DOTENV_PATH") or ".env")
        self.reload()

    def reload(self) -> None:
        e = self._read

        self.location: str = e("LOCATION") or "southeastasia"
        self.resource_group_name: str = e("RESOURCE_GROUP") or "rg-northern-tech-workshop"
        self.container_env_name: str = e("CONTAINER_ENV") or "env-ntotr-shared"
        self.shared_key_vault_name: str = e("SHARED_KEY_VAULT") or "kv-ntotr-shared"
        self.name_code: str = e("NAME_CODE") or "ntotr"
        self.workshop_tag: str = e("TAG") or "northern-tech"

        self.app_image: str = (
            e("APP_IMAGE") or "mcr.microsoft.com/azuredocs/containerapps-helloworld:latest"
        )
        raw_port = e("APP_PORT") or "80"
        try:
            self.app_port: int = int(raw_port)
        except ValueError:
            raise ConfigError(f"{ENV_PREFIX}APP_PORT must be an integer, got {raw_port!r}") from None

        self.app_role: AppRole = self._choice("APP_ROLE", AppRole, AppRole.owner)
        self.directory_role_strategy: DirectoryRoleStrategy = self._choice(
            "DIRECTORY_ROLE_STRATEGY", DirectoryRoleStrategy, DirectoryRoleStrategy.fixed,
        )
        self.directory_role_name: str = (
            e("DIRECTORY_ROLE_NAME") or "Cloud Application Administrator"
        )
        self.per_member_vaults: bool = e("PER_MEMBER_VAULTS").lower() in ("1", "true", "yes")
        self.invite_redirect_url: str = (
            e("INVITE_REDIRECT_URL") or "https://myapps.microsoft.com"
        )

        raw_audience = e("AUDIENCE_FILE")
        self.audience_file: Path | None = Path(raw_audience) if raw_audience else None

        logger.debug(
            "[config] %s in %s (app role %s, directory role via %s)",
            self.resource_group_name, self.location,
            self.app_role.value, self.directory_role_strategy.value,
        )

    @property
    def app_name_prefix(self) -> str:
        return f"app-{self.name_code}-"

    @property
    def key_vault_prefix(self) -> str:
        return f"kv-{self.name_code}-"

    def _read(self, key: str) -> str:
        full = ENV_PREFIX + key
        return os.getenv(full) or self.env.read(full)

    def _choice(self, key: str, kind: type[E], default: E) -> E:
        raw = self._read(key).strip()
        if not raw:
            return default
        for member in kind:
            if raw.lower() in (member.name.lower(), str(member.value).lower()):
                return member
        allowed = ", ".join(str(m.value) for m in kind)
        raise ConfigError(f"{ENV_PREFIX}{key}={raw!r} is not one of: {allowed}")


_cfg: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, reading them on first use.

    Invalid values surface as :class:`ConfigError` from this call rather
    than at import time.
    """
    global _cfg
    if _cfg is None:
        _cfg = Settings()
    return _cfg


def _reset_cfg() -> None:
    global _cfg
    _cfg = None


register_singleton(_reset_cfg)
