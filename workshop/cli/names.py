"""Preview the resource names derived for each workshop participant.

Runs offline (no Pulumi engine, no Azure login) and reports display names
that collapse to the same resource name, which would otherwise only
surface as a duplicate-resource error during ``pulumi up``.

Usage::

    workshop-names
    workshop-names --audience-file audience.yaml
    workshop-names --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, dataclass
from pathlib import Path

from rich.console import Console
from rich.table import Table

from workshop.infra.config.audience import AudienceMember, load_audience
from workshop.infra.config.settings import Settings, get_settings
from workshop.infra.errors import WorkshopError
from workshop.infra.naming import (
    MEMBER_SLUG_MAX,
    find_name_collisions,
    to_azure_slug,
    to_container_app_name,
    to_key_vault_name,
)

logger = logging.getLogger(__name__)
console = Console()


@dataclass
class NamePreview:
    email: str
    display_name: str
    slug: str
    container_app_name: str
    key_vault_name: str


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workshop-names",
        description="Show the Azure resource names derived for each participant.",
    )
    parser.add_argument(
        "--audience-file",
        type=str,
        default=None,
        help="YAML audience list (default: WORKSHOP_AUDIENCE_FILE or the built-in list).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print machine-readable JSON instead of a table.",
    )
    return parser


def preview(members: tuple[AudienceMember, ...], settings: Settings) -> list[NamePreview]:
    return [
        NamePreview(
            email=m.email,
            display_name=m.display_name,
            slug=to_azure_slug(m.display_name, MEMBER_SLUG_MAX),
            container_app_name=to_container_app_name(m.display_name, prefix=settings.app_name_prefix),
            key_vault_name=to_key_vault_name(m.display_name, prefix=settings.key_vault_prefix),
        )
        for m in members
    ]


def collisions(rows: list[NamePreview], settings: Settings) -> dict[str, list[str]]:
    """Derived names claimed by more than one participant."""
    found = find_name_collisions((r.container_app_name, r.display_name) for r in rows)
    found.update(find_name_collisions((f"app-{r.slug}", r.display_name) for r in rows))
    if settings.per_member_vaults:
        found.update(find_name_collisions((r.key_vault_name, r.display_name) for r in rows))
    return found


def _render_table(rows: list[NamePreview]) -> None:
    table = Table(title="Workshop resource names")
    table.add_column("Email")
    table.add_column("Display name")
    table.add_column("Container App")
    table.add_column("Key Vault")
    for r in rows:
        table.add_row(r.email, r.display_name, r.container_app_name, r.key_vault_name)
    console.print(table)


def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    path = Path(args.audience_file) if args.audience_file else settings.audience_file
    try:
        members = load_audience(path)
    except WorkshopError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 2

    rows = preview(members, settings)
    clashes = collisions(rows, settings)

    if args.json:
        payload = {
            "members": [asdict(r) for r in rows],
            "collisions": clashes,
        }
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
    else:
        _render_table(rows)
        for name, owners in sorted(clashes.items()):
            console.print(
                f"[yellow]Name collision:[/yellow] {name} <- {', '.join(owners)}"
            )
    if clashes:
        logger.warning("[cli] %d colliding resource names", len(clashes))
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``workshop-names``."""
    args = _build_parser().parse_args(argv)
    try:
        code = run(args)
    except WorkshopError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        code = 2
    sys.exit(code)


if __name__ == "__main__":
    main()
