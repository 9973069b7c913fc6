"""Workshop participants -- the static audience list and its loader."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import AudienceError

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AudienceMember(BaseModel):
    """One participant; every per-person resource is derived from this."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    email: str = Field(description="Address the guest invitation is sent to.")
    display_name: str = Field(
        alias="displayName",
        description="Free-form name used to derive resource names.",
    )

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = value.strip()
        if not _EMAIL_RE.match(value):
            raise ValueError(f"not a valid email address: {value!r}")
        return value


DEFAULT_AUDIENCE: tuple[AudienceMember, ...] = (
    AudienceMember(email="alice@example.com", display_name="Alice"),
    AudienceMember(email="bob@example.com", display_name="Bob W."),
)


def check_unique_emails(members: Iterable[AudienceMember]) -> None:
    """Raise :class:`AudienceError` if two members share an email.

    Emails key the per-member maps handed from the topology to the access
    grants, so a duplicate would silently drop a participant.  Display
    names are *not* checked here; colliding names are a known limitation.
    """
    seen: set[str] = set()
    for member in members:
        key = member.email.lower()
        if key in seen:
            raise AudienceError(f"Duplicate audience email: {member.email}")
        seen.add(key)


def parse_audience(raw: Any) -> tuple[AudienceMember, ...]:
    """Validate a decoded YAML document into audience members.

    Accepts either a bare list of ``{email, display_name}`` mappings or a
    mapping with an ``audience`` key holding that list.
    """
    if isinstance(raw, dict):
        raw = raw.get("audience")
    if not isinstance(raw, list):
        raise AudienceError("Audience file must contain a list of members")
    members: list[AudienceMember] = []
    for index, entry in enumerate(raw):
        try:
            members.append(AudienceMember.model_validate(entry))
        except ValidationError as exc:
            raise AudienceError(f"Invalid audience entry #{index + 1}: {exc}") from exc
    check_unique_emails(members)
    return tuple(members)


def load_audience(path: Path | None = None) -> tuple[AudienceMember, ...]:
    """Return the audience from *path*, or the built-in list when ``None``."""
    if path is None:
        return DEFAULT_AUDIENCE
    if not path.is_file():
        raise AudienceError(f"Audience file not found: {path}")
    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise AudienceError(f"Audience file {path} is not valid YAML: {exc}") from exc
    members = parse_audience(raw)
    logger.info("[config] loaded %d audience members from %s", len(members), path)
    return members
