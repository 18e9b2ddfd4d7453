import pytest

import cli
from config import VERSION

ENV_VARS = (
    "OAUTH_CLIENT_ID", "GITHUB_CLIENT_ID", "OAUTH_GITHUB_CLIENT_ID",
    "OAUTH_CLIENT_SECRET", "GITHUB_CLIENT_SECRET", "OAUTH_GITHUB_CLIENT_SECRET",
    "REDIRECT_URL", "ORIGINS", "SCOPES", "HOST", "PORT",
)


@pytest.fixture()
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        # set first so values loaded from .env are rolled back too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_check_reports_missing_configuration(clean_env, capsys):
    clean_env.setenv("ORIGINS", "site.example")

    assert cli.main(["check"]) == 1

    out = capsys.readouterr().out
    assert "- site.example" in out
    assert "Missing env. Required: OAUTH_CLIENT_ID, OAUTH_CLIENT_SECRET, REDIRECT_URL" in out


def test_check_passes_with_complete_configuration(clean_env, capsys):
    clean_env.setenv("OAUTH_CLIENT_ID", "id")
    clean_env.setenv("OAUTH_CLIENT_SECRET", "hunter2")
    clean_env.setenv("REDIRECT_URL", "https://oauth.example.net/callback")
    clean_env.setenv("ORIGINS", "site.example,*.example.org")

    assert cli.main(["check"]) == 0

    out = capsys.readouterr().out
    assert "hunter2" not in out
    assert "[OK] Configuration complete" in out


def test_check_reads_dotenv(clean_env, tmp_path, capsys):
    (tmp_path / ".env").write_text(
        "OAUTH_CLIENT_ID=id\n"
        "OAUTH_CLIENT_SECRET=secret\n"
        "REDIRECT_URL=https://oauth.example.net/callback\n"
        "ORIGINS=site.example\n"
    )

    assert cli.main(["check"]) == 0
    assert "Client ID:     id" in capsys.readouterr().out


def test_serve_runs_uvicorn(clean_env, monkeypatch):
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: calls.append((args, kwargs)))

    assert cli.main(["serve", "--port", "4000"]) == 0

    assert calls == [(("main:app",), {"host": "0.0.0.0", "port": 4000, "reload": False})]


def test_version(capsys):
    assert cli.main(["version"]) == 0
    assert capsys.readouterr().out.strip() == f"oauth-relay {VERSION}"
