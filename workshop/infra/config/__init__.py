"""Stack configuration: settings and the audience list."""

from __future__ import annotations

from .audience import DEFAULT_AUDIENCE, AudienceMember, load_audience
from .settings import AppRole, DirectoryRoleStrategy, Settings, get_settings

__all__ = [
    "DEFAULT_AUDIENCE",
    "AppRole",
    "AudienceMember",
    "DirectoryRoleStrategy",
    "Settings",
    "get_settings",
    "load_audience",
]
