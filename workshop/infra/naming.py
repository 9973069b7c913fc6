"""Azure resource naming helpers.

Turns free-form participant display names into identifiers that satisfy
per-resource-type rules.  All helpers are pure: the same input always
yields the same name.  Two display names that normalise to the same value
produce the same resource name; nothing here de-duplicates them.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Iterable

FALLBACK_TOKEN = "user"

CONTAINER_APP_MAX = 32
# Pulumi logical-name slug for per-member resources.
MEMBER_SLUG_MAX = 24
KEY_VAULT_MIN = 3
KEY_VAULT_MAX = 24  # letters and digits only in this scheme

DEFAULT_CONTAINER_APP_PREFIX = "app-ntotr-"
DEFAULT_KEY_VAULT_PREFIX = "kv-ntotr-"

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")
_VAULT_INVALID = re.compile(r"[^a-z0-9-]")
_DASH_RUN = re.compile(r"-+")
_KEY_INVALID = re.compile(r"[^a-zA-Z0-9]")


def to_azure_slug(value: str, max_len: int) -> str:
    """Lowercase *value* and join its alphanumeric runs with ``-``.

    Empty or all-symbol input falls back to ``"user"``.  The result is cut
    to *max_len* and never ends on a separator.
    """
    slug = _SLUG_INVALID.sub("-", value.lower()).strip("-")
    return (slug or FALLBACK_TOKEN)[:max_len].rstrip("-")


def to_key_vault_name(display_name: str, prefix: str = DEFAULT_KEY_VAULT_PREFIX) -> str:
    """Key Vault name: 3-24 characters, letters and digits, leading letter."""
    base = f"{prefix}{display_name}".lower()
    cleaned = _DASH_RUN.sub("-", _VAULT_INVALID.sub("-", base))
    name = cleaned.replace("-", "")[:KEY_VAULT_MAX]
    if not name[:1].isalpha():
        name = f"k{name}"[:KEY_VAULT_MAX]
    if len(name) < KEY_VAULT_MIN:
        name = f"{name}xxx"[:KEY_VAULT_MIN]
    return name


def to_container_app_name(display_name: str, prefix: str = DEFAULT_CONTAINER_APP_PREFIX) -> str:
    return to_azure_slug(f"{prefix}{display_name}", CONTAINER_APP_MAX)


def resource_key(email: str) -> str:
    """Pulumi logical-name fragment for *email* (``a.b@x.io`` -> ``a-b-x-io``)."""
    return _KEY_INVALID.sub("-", email)


def find_name_collisions(names: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
    """Group ``(derived_name, display_name)`` pairs that share a derived name.

    Only names claimed by more than one display name are returned.  Used by
    operator tooling to report collisions; the stack itself never calls it.
    """
    owners: dict[str, list[str]] = defaultdict(list)
    for derived, display_name in names:
        owners[derived].append(display_name)
    return {name: who for name, who in owners.items() if len(who) > 1}
