"""Tests for the environment drift detection script."""

from __future__ import annotations

from pathlib import Path

import pytest

from scripts import check_env

REQUIRED_ENV_KEYS = [
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REDIRECT_URI",
]


def _write_env(env_path: Path, **values: str) -> None:
    contents = "\n".join(f"{key}={value}" for key, value in values.items())
    env_path.write_text(contents + "\n", encoding="utf-8")


def _clear_required_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in REQUIRED_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _isolate_env(monkeypatch: pytest.MonkeyPatch, *keys: str) -> None:
    """Unset ``keys`` so values loaded from the env file are undone afterwards."""
    for key in keys:
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)


@pytest.mark.parametrize("command", ["record", "verify", "check"])
def test_main_requires_existing_env_file(tmp_path: Path, command: str) -> None:
    env_file = tmp_path / ".missing-env"
    hash_file = tmp_path / ".env.sha256"

    argv = [command, "--env-file", str(env_file)]
    if command != "check":
        argv.extend(["--hash-file", str(hash_file)])

    exit_code = check_env.main(argv)
    assert exit_code == check_env.EXIT_RUNTIME_ERROR


def test_record_and_verify_detects_mismatched_checksum(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"

    _clear_required_env(monkeypatch)
    _write_env(
        env_file,
        GOOGLE_CLIENT_ID="abc",
        GOOGLE_CLIENT_SECRET="secret",
        GOOGLE_REDIRECT_URI="https://example.com/oauth2callback",
    )

    exit_code = check_env.main(
        [
            "record",
            "--env-file",
            str(env_file),
            "--hash-file",
            str(hash_file),
        ]
    )
    assert exit_code == check_env.EXIT_OK
    baseline = hash_file.read_text(encoding="utf-8").strip()
    assert baseline

    _clear_required_env(monkeypatch)
    exit_code = check_env.main(
        [
            "verify",
            "--env-file",
            str(env_file),
            "--hash-file",
            str(hash_file),
        ]
    )
    assert exit_code == check_env.EXIT_OK

    _write_env(
        env_file,
        GOOGLE_CLIENT_ID="abc",
        GOOGLE_CLIENT_SECRET="different",
        GOOGLE_REDIRECT_URI="https://example.com/oauth2callback",
    )

    _clear_required_env(monkeypatch)
    exit_code = check_env.main(
        [
            "verify",
            "--env-file",
            str(env_file),
            "--hash-file",
            str(hash_file),
        ]
    )
    assert exit_code == check_env.EXIT_CHECKSUM_ERROR


def test_validation_failure_for_missing_required_values(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"

    _clear_required_env(monkeypatch)
    _write_env(
        env_file,
        GOOGLE_CLIENT_ID="abc",
        GOOGLE_REDIRECT_URI="https://example.com/oauth2callback",
    )

    exit_code = check_env.main(
        [
            "record",
            "--env-file",
            str(env_file),
            "--hash-file",
            str(hash_file),
        ]
    )
    assert exit_code == check_env.EXIT_VALIDATION_ERROR


def test_check_rejects_malformed_port(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"

    _clear_required_env(monkeypatch)
    _isolate_env(monkeypatch, "PORT")
    _write_env(
        env_file,
        GOOGLE_CLIENT_ID="abc",
        GOOGLE_CLIENT_SECRET="secret",
        GOOGLE_REDIRECT_URI="https://example.com/oauth2callback",
        PORT="not-a-number",
    )

    exit_code = check_env.main(["check", "--env-file", str(env_file)])
    assert exit_code == check_env.EXIT_VALIDATION_ERROR


def test_check_reports_store_and_refresh_token(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"

    _clear_required_env(monkeypatch)
    _isolate_env(monkeypatch, "MONGO_URI", "DATABASE_URL", "GOOGLE_REFRESH_TOKEN", "REFRESH_TOKEN")
    _write_env(
        env_file,
        GOOGLE_CLIENT_ID="abc",
        GOOGLE_CLIENT_SECRET="secret",
        GOOGLE_REDIRECT_URI="https://example.com/oauth2callback",
        MONGO_URI="mongodb://localhost:27017/youtube_studio",
        GOOGLE_REFRESH_TOKEN="1//refresh",
    )

    exit_code = check_env.main(["check", "--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_OK
    output = capsys.readouterr().out
    assert "Document store: MongoDB" in output
    assert "Refresh token: configured" in output


def test_check_warns_when_redirect_uri_misses_callback(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"

    _clear_required_env(monkeypatch)
    _write_env(
        env_file,
        GOOGLE_CLIENT_ID="abc",
        GOOGLE_CLIENT_SECRET="secret",
        GOOGLE_REDIRECT_URI="https://example.com/auth/callback",
    )

    exit_code = check_env.main(["check", "--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_OK
    assert "/oauth2callback" in capsys.readouterr().err
