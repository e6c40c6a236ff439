"""Check the proxy's environment configuration before starting it.

``check`` builds ``AppSettings`` from a ``.env`` file so missing Google OAuth
credentials or malformed values (a bad ``GOOGLE_REDIRECT_URI`` or ``PORT``)
show up before the API starts answering with 500s. ``record`` and ``verify``
keep a SHA256 baseline of the file to catch unexpected edits on a deployed
host.

Example::

    python -m scripts.check_env check --env-file .env
    python -m scripts.check_env verify --env-file /srv/youtube-studio/.env \
        --hash-file /srv/youtube-studio/.env.sha256
"""

from __future__ import annotations

import argparse
import hashlib
import sys
from pathlib import Path
from urllib.parse import urlparse

from pydantic import ValidationError

from app.core.config import AppSettings, _load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_RUNTIME_ERROR = 5

CALLBACK_PATH = "/oauth2callback"


def _env_digest(env_file: Path) -> str:
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def _load_settings(env_file: Path) -> AppSettings:
    """Build the settings the API would start with from ``env_file``."""
    if not env_file.is_file():
        raise FileNotFoundError(f"Environment file {env_file} not found.")
    _load_env_file(str(env_file))
    return AppSettings(_env_file=env_file)  # type: ignore[call-arg]


def _describe(settings: AppSettings) -> None:
    database = settings.database
    store = "MongoDB" if database.mongo_uri else f"SQLite ({database.local_db_path})"
    print(f"Document store: {store}")
    if settings.google.refresh_token:
        print("Refresh token: configured")
    else:
        print("Refresh token: not configured (use /login)")

    redirect_path = urlparse(str(settings.google.redirect_uri)).path
    if redirect_path.rstrip("/") != CALLBACK_PATH:
        print(
            f"Warning: GOOGLE_REDIRECT_URI path is {redirect_path or '/'!r}; "
            f"Google will not call back {CALLBACK_PATH}.",
            file=sys.stderr,
        )


def _check(args: argparse.Namespace) -> int:
    return EXIT_OK


def _record(args: argparse.Namespace) -> int:
    digest = _env_digest(args.env_file)
    args.hash_file.write_text(digest + "\n", encoding="utf-8")
    print(f"Recorded {digest} in {args.hash_file}")
    return EXIT_OK


def _verify(args: argparse.Namespace) -> int:
    if not args.hash_file.is_file():
        print(
            f"No checksum baseline at {args.hash_file}; run 'record' first.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    expected = args.hash_file.read_text(encoding="utf-8").strip()
    actual = _env_digest(args.env_file)
    if expected != actual:
        print(
            f"Environment file changed since the baseline was recorded "
            f"(expected {expected}, found {actual}).",
            file=sys.stderr,
        )
        return EXIT_CHECKSUM_ERROR
    print("Environment checksum OK.")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    env_options = argparse.ArgumentParser(add_help=False)
    env_options.add_argument(
        "--env-file",
        type=Path,
        default=Path(".env"),
        help="Environment file to validate (default: ./.env).",
    )
    baseline_options = argparse.ArgumentParser(add_help=False)
    baseline_options.add_argument(
        "--hash-file",
        type=Path,
        required=True,
        help="File holding the SHA256 baseline of the environment file.",
    )

    parser = argparse.ArgumentParser(
        description="Validate the proxy's settings and detect .env drift."
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser(
        "check", parents=[env_options], help="Validate settings only."
    ).set_defaults(handler=_check)
    commands.add_parser(
        "record",
        parents=[env_options, baseline_options],
        help="Validate settings and write the checksum baseline.",
    ).set_defaults(handler=_record)
    commands.add_parser(
        "verify",
        parents=[env_options, baseline_options],
        help="Validate settings and compare against the checksum baseline.",
    ).set_defaults(handler=_verify)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        settings = _load_settings(args.env_file)
    except FileNotFoundError as exc:
        print(exc, file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValidationError as exc:
        print(f"Invalid settings in {args.env_file}:\n{exc}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    _describe(settings)
    return args.handler(args)


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
