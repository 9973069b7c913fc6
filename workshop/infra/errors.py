"""Exceptions that abort a workshop build."""

from __future__ import annotations


class WorkshopError(Exception):
    """Base class for every error raised while declaring the stack."""


class ConfigError(WorkshopError):
    """A setting has a value outside its allowed set."""


class AudienceError(WorkshopError):
    """The audience list could not be loaded or failed validation."""


class MissingSharedKeyError(WorkshopError):
    """The Log Analytics workspace returned no primary shared key."""


class RoleNotFoundError(WorkshopError):
    """A directory role name has no exact match in the tenant catalog."""
