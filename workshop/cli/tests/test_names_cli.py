"""Tests for the name preview CLI (workshop.cli.names)."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from workshop.cli.names import _build_parser, collisions, main, preview
from workshop.infra.config.audience import DEFAULT_AUDIENCE, AudienceMember
from workshop.infra.config.settings import Settings


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


class TestBuildParser:
    def test_defaults(self):
        args = _build_parser().parse_args([])
        assert args.audience_file is None
        assert args.json is False

    def test_flags(self):
        args = _build_parser().parse_args(["--audience-file", "a.yaml", "--json"])
        assert args.audience_file == "a.yaml"
        assert args.json is True


class TestPreview:
    def test_default_audience(self):
        rows = preview(DEFAULT_AUDIENCE, Settings())
        assert [r.container_app_name for r in rows] == ["app-ntotr-alice", "app-ntotr-bob-w"]
        assert [r.key_vault_name for r in rows] == ["kvntotralice", "kvntotrbobw"]
        assert [r.slug for r in rows] == ["alice", "bob-w"]

    def test_vault_collisions_only_with_member_vaults(self):
        members = (
            AudienceMember(email="a@example.com", display_name="Ann"),
            AudienceMember(email="b@example.com", display_name="A-nn"),
        )
        settings = Settings()
        rows = preview(members, settings)
        assert collisions(rows, settings) == {}
        settings.per_member_vaults = True
        assert collisions(rows, settings) == {"kvntotrann": ["Ann", "A-nn"]}


class TestMain:
    def test_json_output(self, capsys):
        assert _run(["--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert [m["email"] for m in payload["members"]] == ["alice@example.com", "bob@example.com"]
        assert payload["collisions"] == {}

    def test_table_output(self, capsys):
        assert _run([]) == 0
        assert "Workshop resource names" in capsys.readouterr().out

    def test_collision_exit_code(self, audience_file: Path, capsys):
        audience_file.write_text(
            "audience:\n"
            "  - {email: bob@example.com, display_name: Bob W.}\n"
            "  - {email: bobby@example.com, display_name: bob-w}\n"
        )
        assert _run(["--audience-file", str(audience_file), "--json"]) == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["collisions"]["app-ntotr-bob-w"] == ["Bob W.", "bob-w"]
        assert payload["collisions"]["app-bob-w"] == ["Bob W.", "bob-w"]

    def test_collision_reported_in_table(self, audience_file: Path, capsys):
        audience_file.write_text(
            "- {email: bob@example.com, display_name: Bob W.}\n"
            "- {email: bobby@example.com, display_name: bob-w}\n"
        )
        assert _run(["--audience-file", str(audience_file)]) == 1
        assert "collision" in capsys.readouterr().out.lower()

    def test_audience_file_from_env(self, audience_file: Path, monkeypatch, capsys):
        audience_file.write_text("- {email: carol@example.com, display_name: Carol}\n")
        monkeypatch.setenv("WORKSHOP_AUDIENCE_FILE", str(audience_file))
        assert _run(["--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["members"][0]["container_app_name"] == "app-ntotr-carol"

    def test_missing_audience_file(self, tmp_path: Path):
        assert _run(["--audience-file", str(tmp_path / "nope.yaml")]) == 2

    def test_invalid_setting(self, monkeypatch):
        monkeypatch.setenv("WORKSHOP_APP_ROLE", "Reader")
        assert _run([]) == 2


class TestFreshProcess:
    """Run the CLI in a new interpreter so nothing is imported beforehand."""

    def _run_module(self, **env: str) -> subprocess.CompletedProcess[str]:
        root = Path(__file__).resolve().parents[3]
        child_env = {**os.environ, **env}
        child_env["PYTHONPATH"] = os.pathsep.join(
            p for p in (str(root), child_env.get("PYTHONPATH", "")) if p
        )
        return subprocess.run(
            [sys.executable, "-m", "workshop.cli.names", "--json"],
            cwd=root,
            env=child_env,
            capture_output=True,
            text=True,
            timeout=120,
        )

    def test_invalid_app_role_exits_2(self):
        result = self._run_module(WORKSHOP_APP_ROLE="Reader")
        assert result.returncode == 2
        assert "Traceback" not in result.stderr
        assert "WORKSHOP_APP_ROLE" in result.stdout

    def test_invalid_port_exits_2(self):
        result = self._run_module(WORKSHOP_APP_PORT="eighty")
        assert result.returncode == 2

    def test_valid_settings_exit_0(self):
        result = self._run_module()
        assert result.returncode == 0
        assert json.loads(result.stdout)["collisions"] == {}
