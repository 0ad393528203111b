from __future__ import annotations

from pathlib import Path

import pytest
from sqlmodel import select
from typer.testing import CliRunner

import cli
from locus_app.auth.database import init_db, session_scope
from locus_app.auth.models import User
from locus_app.config import Settings
from locus_app.locations.models import Location

runner = CliRunner()


@pytest.fixture()
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    settings = Settings(database_url=f"sqlite:///{tmp_path / 'cli.db'}")
    init_db(settings)
    with session_scope(settings) as session:
        session.add(User(email="ada@example.com", hashed_password="x"))
        session.commit()
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    return settings


def test_slugify_prints_base_slug() -> None:
    result = runner.invoke(cli.app, ["slugify", "Café Déjà Vu"])

    assert result.exit_code == 0
    assert result.output.strip().splitlines()[-1] == "cafe-deja-vu"


def test_create_then_resolve(settings: Settings) -> None:
    created = runner.invoke(
        cli.app,
        ["create-location", "Coffee Shop", "--email", "ada@example.com", "--lat", "47.37", "--long", "8.54"],
    )
    assert created.exit_code == 0, created.output
    assert "coffee-shop" in created.output

    resolved = runner.invoke(cli.app, ["resolve", "Coffee Shop"])
    assert resolved.exit_code == 0, resolved.output
    assert resolved.output.strip().splitlines()[-1].startswith("coffee-shop-")


def test_create_location_for_unknown_user_fails(settings: Settings) -> None:
    result = runner.invoke(
        cli.app,
        ["create-location", "Coffee Shop", "--email", "nobody@example.com", "--lat", "0", "--long", "0"],
    )

    assert result.exit_code == 1


def test_resolve_exits_with_code_2_when_attempts_run_out(
    settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    narrow = settings.model_copy(update={"slug_suffix_length": 1, "slug_suffix_alphabet": "a"})
    monkeypatch.setattr(cli, "get_settings", lambda: narrow)
    for name in ("Coffee Shop", "Coffee Shop A"):
        created = runner.invoke(
            cli.app,
            ["create-location", name, "--email", "ada@example.com", "--lat", "47.37", "--long", "8.54"],
        )
        assert created.exit_code == 0, created.output

    resolved = runner.invoke(cli.app, ["resolve", "Coffee Shop", "--max-attempts", "1"])

    assert resolved.exit_code == 2
    with session_scope(settings) as session:
        assert len(session.exec(select(Location)).all()) == 2
