"""Tests for the migration operator CLI."""

from pathlib import Path

import pytest

from src.config_service import cli
from src.config_service.core.db import MigrationRunner

pytestmark = pytest.mark.unit

ENV_PY = '''
from alembic import context

context.configure(connection=context.config.attributes["connection"], target_metadata=None)
with context.begin_transaction():
    context.run_migrations()
'''

REVISION_PY = '''
import sqlalchemy as sa
from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table("widgets", sa.Column("id", sa.Integer, primary_key=True))


def downgrade():
    op.drop_table("widgets")
'''


@pytest.fixture
def sqlite_runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    scripts = tmp_path / "migrations"
    (scripts / "versions").mkdir(parents=True)
    (scripts / "env.py").write_text(ENV_PY)
    (scripts / "versions" / "001_widgets.py").write_text(REVISION_PY)
    url = f"sqlite:///{tmp_path / 'cli.db'}"

    monkeypatch.setattr(
        cli.MigrationRunner,
        "from_settings",
        classmethod(lambda cls, settings, logger=None: MigrationRunner(url, str(scripts), logger)),
    )
    monkeypatch.setattr(cli, "setup_logging", lambda *args: None)


def last_line(capsys) -> str:
    """Operator output is the final stdout line; progress logs may precede it."""
    return capsys.readouterr().out.strip().splitlines()[-1]


def test_parse_down_steps():
    args = cli.parse_args(["down", "-n", "3"])
    assert (args.command, args.steps) == ("down", 3)


def test_parse_requires_command():
    with pytest.raises(SystemExit):
        cli.parse_args([])


def test_version_on_empty_database(sqlite_runner, capsys):
    assert cli.main(["version"]) == 0
    assert last_line(capsys) == "version=0 dirty=false"


def test_up_then_down(sqlite_runner, capsys):
    assert cli.main(["up"]) == 0
    assert last_line(capsys) == "version=1 dirty=false"

    assert cli.main(["down"]) == 0
    assert last_line(capsys) == "version=0 dirty=false"


def test_force(sqlite_runner, capsys):
    assert cli.main(["force", "1"]) == 0
    assert last_line(capsys) == "version=1 dirty=false"


def test_errors_exit_non_zero(sqlite_runner, capsys):
    assert cli.main(["down", "--steps", "0"]) == 1
    assert cli.main(["force", "7"]) == 1
    assert "version=" not in capsys.readouterr().out
