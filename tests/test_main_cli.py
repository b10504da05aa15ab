"""Tests for main.py -- the command-line launcher.

Covers:
- create-user registers through CredentialStore against DATABASE_URL
- create-user reports validation and duplicate errors with exit code 1
- no subcommand prints help
"""

import pytest

import main
from auth.store import UserStore
from core.config import get_settings


@pytest.fixture
def db_url(monkeypatch, tmp_path):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


def test_create_user(db_url, capsys):
    code = main.main(["create-user", "--name", "Ada", "--email", "Ada@Example.com", "--password", "secret"])
    assert code == 0
    assert "Created user ada@example.com" in capsys.readouterr().out

    store = UserStore(db_url)
    user = store.get_by_email("ada@example.com", with_password=True)
    store.close()
    assert user is not None
    assert user.hashed_password != "secret"


def test_create_user_validation_error(db_url, capsys):
    code = main.main(["create-user", "--name", "Ada", "--email", "nope", "--password", "123"])
    assert code == 1
    out = capsys.readouterr().out
    assert "email: Please provide a valid email address" in out
    assert "password: Password must be at least 6 characters" in out


def test_create_user_duplicate(db_url, capsys):
    args = ["create-user", "--name", "Ada", "--email", "ada@example.com", "--password", "secret"]
    assert main.main(args) == 0
    assert main.main(args) == 1
    assert "already exists" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert main.main([]) == 0
    assert "usage:" in capsys.readouterr().out
