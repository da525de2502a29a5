"""Tests for the operator CLI."""

from datetime import time
from pathlib import Path

import pytest

from employee_mgmt.cli import EmsCli
from employee_mgmt.config import Settings


@pytest.fixture
def cli_settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}",
        jwt_secret="cli-signing-secret-0123456789abcdef",
        token_ttl_hours=24,
        upload_dir=tmp_path / "uploads",
        max_upload_bytes=10 * 1024 * 1024,
        late_cutoff=time(9, 0),
        host="127.0.0.1",
        port=5000,
        debug=False,
        log_level="INFO",
    )


class TestEmsCli:
    def test_no_command_prints_help(self, cli_settings, capsys):
        assert EmsCli(cli_settings).run([]) == 1
        assert "init-db" in capsys.readouterr().out

    def test_init_db(self, cli_settings, tmp_path):
        assert EmsCli(cli_settings).run(["init-db"]) == 0
        assert (tmp_path / "cli.db").exists()

    def test_create_admin_twice(self, cli_settings, capsys):
        cli = EmsCli(cli_settings)
        args = ["create-admin", "--email", "root@example.com", "--password", "pw"]

        assert cli.run(args) == 0
        assert "Admin account created: root@example.com" in capsys.readouterr().out

        assert cli.run(args) == 1
        assert "User already exists" in capsys.readouterr().err
